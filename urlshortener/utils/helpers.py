"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    isoformat_utc() -> str
        Render a datetime as ISO-8601 UTC text with millisecond precision
    location_from_ip() -> str
        Resolve a coarse client location from an IP address (stub)
    request_header() -> str | None
        Read a request header from API Gateway event (case-insensitive)
    source_ip() -> str | None
        Read the client IP from API Gateway event
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler exceptions into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from urlshortener.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
import ipaddress
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from urlshortener.types import LambdaEvent, LambdaContext
from urlshortener.exceptions import MissingEnvironmentVariableError
from urlshortener.utils.runtime import running_locally
from urlshortener.utils.constants import DEFAULT_LOCATION, LOCAL_LOCATION, UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Works with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        return f'https://{domain}'
    elif domain:
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(shortcode: str, event: dict[str, Any]) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: short url string representation
    """
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def isoformat_utc(dt: datetime) -> str:
    """Render a datetime as ISO-8601 text in UTC

    Example:
        >>> isoformat_utc(datetime(2025, 10, 15, 12, 30, tzinfo=UTC))
        '2025-10-15T12:30:00.000Z'
    """
    # fmt: off
    return dt.astimezone(UTC) \
             .isoformat(timespec='milliseconds') \
             .replace('+00:00', 'Z')
    # fmt: on


def location_from_ip(ip: str | None) -> str:
    """Resolve a client location from its source IP

    Geolocation is not performed: loopback addresses resolve to 'Local' and
    every other (or unparsable) address to 'Unknown'.

    Example:
        >>> location_from_ip('127.0.0.1')
        'Local'
        >>> location_from_ip('::ffff:127.0.0.1')
        'Local'
        >>> location_from_ip('203.0.113.7')
        'Unknown'
    """
    if not ip:
        return DEFAULT_LOCATION
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return DEFAULT_LOCATION

    mapped = getattr(address, 'ipv4_mapped', None)
    if address.is_loopback or (mapped is not None and mapped.is_loopback):
        return LOCAL_LOCATION
    return DEFAULT_LOCATION


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with 500 when a Lambda handler raises unexpectedly

    When running locally the exception is re-raised instead, so the stack trace
    reaches the developer.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in Lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper


def request_header(event: dict[str, Any], name: str) -> str | None:
    """Return a request header from an API Gateway event (case-insensitive)

    Example:
        >>> request_header({'headers': {'User-Agent': 'curl/8.0'}}, 'user-agent')
        'curl/8.0'
    """
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def source_ip(event: dict[str, Any]) -> str | None:
    """Return the client IP from an API Gateway event (REST or HTTP API payloads)"""
    request_context = event.get('requestContext') or {}
    identity = request_context.get('identity') or {}
    http = request_context.get('http') or {}
    return identity.get('sourceIp') or http.get('sourceIp')
