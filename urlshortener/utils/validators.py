"""Input validation for short URL creation

Functions:
    validate_url(url) -> str
        Ensure an original URL is an absolute http(s) URL.
    validate_validity(minutes) -> int
        Ensure a validity window (in minutes) is an integer within bounds.
    validate_shortcode(shortcode) -> str
        Ensure a custom shortcode is alphanumeric and correctly sized.

Each validator returns its (unchanged) input on success and raises the
matching ValidationError subclass otherwise.

Example:
    >>> validate_url('https://example.com/a')
    'https://example.com/a'
    >>> validate_url('ftp://example.com')
    Traceback (most recent call last):
        ...
    urlshortener.dao.exceptions.InvalidURLError: Invalid url: scheme must be http or https (given: 'ftp')
"""

import re
import ipaddress
from urllib.parse import urlsplit

from urlshortener.dao.exceptions import InvalidURLError, InvalidShortcodeError, InvalidValidityError
from urlshortener.utils.constants import (
    MIN_VALIDITY_MINUTES,
    MAX_VALIDITY_MINUTES,
    MIN_CUSTOM_SHORTCODE_LENGTH,
    MAX_CUSTOM_SHORTCODE_LENGTH,
)


ALLOWED_SCHEMES = frozenset({'http', 'https'})

SHORTCODE_PATTERN = re.compile(r'[A-Za-z0-9]+')
DOMAIN_LABEL_PATTERN = re.compile(r'(?!-)[A-Za-z0-9-]{1,63}(?<!-)')
TLD_PATTERN = re.compile(r'([A-Za-z]{2,63}|xn--[A-Za-z0-9-]{1,59})')


def _is_valid_host(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        pass
    else:
        return True

    # Internationalized names are checked in their ASCII (punycode) form
    try:
        hostname = hostname.encode('idna').decode('ascii')
    except UnicodeError:
        return False

    labels = hostname.rstrip('.').split('.')
    if len(labels) < 2:
        return False
    if not TLD_PATTERN.fullmatch(labels[-1]):
        return False
    return all(DOMAIN_LABEL_PATTERN.fullmatch(label) for label in labels)


def validate_url(url: object) -> str:
    """Validate an original (long) URL

    The URL must be a non-empty string with an explicit `http` or `https`
    scheme and a host that is either an IP address or a dotted domain name.

    Args:
        url (object): candidate URL, as received from the caller.

    Returns:
        str: the URL, unchanged.

    Raises:
        InvalidURLError: if the URL is missing or malformed.
    """
    if url is None or url == '':
        raise InvalidURLError('URL is required', url)
    if not isinstance(url, str):
        raise InvalidURLError(f'URL must be a string (given type: {type(url).__name__})', url)
    if any(ch.isspace() for ch in url):
        raise InvalidURLError('URL must not contain whitespace', url)

    try:
        components = urlsplit(url)
        # Accessing .port validates it (raises ValueError when out of range)
        components.port
    except ValueError as e:
        raise InvalidURLError(f'URL could not be parsed ({e})', url) from e

    if components.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURLError(f'scheme must be http or https (given: {components.scheme!r})', url)
    if not components.hostname or not _is_valid_host(components.hostname):
        raise InvalidURLError('URL must include a valid host', url)

    return url


def validate_validity(minutes: object) -> int:
    """Validate a validity window expressed in whole minutes

    Raises:
        InvalidValidityError: if minutes is not an integer in [1, 10080].
    """
    # bool is a subclass of int, but True/False are never a meaningful duration
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidValidityError(f'validity must be an integer number of minutes (given: {minutes!r})', minutes)
    if not MIN_VALIDITY_MINUTES <= minutes <= MAX_VALIDITY_MINUTES:
        raise InvalidValidityError(
            f'validity must be between {MIN_VALIDITY_MINUTES} and {MAX_VALIDITY_MINUTES} minutes (given: {minutes})',
            minutes,
        )
    return minutes


def validate_shortcode(shortcode: object) -> str:
    """Validate a caller-chosen shortcode

    Raises:
        InvalidShortcodeError: if the shortcode is not an alphanumeric string
            of 3 to 20 characters.
    """
    if not isinstance(shortcode, str) or not shortcode:
        raise InvalidShortcodeError('shortcode must be a non-empty string', shortcode)
    if not MIN_CUSTOM_SHORTCODE_LENGTH <= len(shortcode) <= MAX_CUSTOM_SHORTCODE_LENGTH:
        raise InvalidShortcodeError(
            f'shortcode must be between {MIN_CUSTOM_SHORTCODE_LENGTH} and {MAX_CUSTOM_SHORTCODE_LENGTH} characters '
            f'(given length: {len(shortcode)})',
            shortcode,
        )
    if not SHORTCODE_PATTERN.fullmatch(shortcode):
        raise InvalidShortcodeError('shortcode must contain only alphanumeric characters', shortcode)
    return shortcode
