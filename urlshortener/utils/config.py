"""Utility functions for application configuration management.

Registry settings are stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. The configuration is a JSON
document under a configuration profile (typically `backend-config`):

    {
        "build": 7,
        "registry": {
            "default_validity_minutes": 30,
            "shortcode_length": 6,
            "max_generation_attempts": 5000,
            "sweep_interval_seconds": 300
        }
    }

All Lambda functions share the `registry` section, since they share one
in-memory registry per process.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting
        to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    _sam_load_local_appconfig(func) -> Callable[[], dict]:
        Load AppConfig from a local AppConfig agent when running under SAM.
        Decorates `load_config()`.

    load_config() -> dict
        Load the `registry` section from AWS AppConfig.

Classes:
    RegistrySettings:
        Typed, validated view over the `registry` section.

Example:
    >>> from urlshortener.utils.config import load_config, RegistrySettings
    >>> settings = RegistrySettings.from_config(load_config())
    >>> settings.shortcode_length
    6
"""

import os
import json
import functools
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass, fields
from datetime import timedelta
from collections.abc import Callable
from typing import Any

import boto3

from urlshortener.exceptions import BadConfigurationError
from urlshortener.utils.helpers import require_environment
from urlshortener.utils.runtime import running_locally
from urlshortener.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    APPCONFIG_AGENT_URL_ENV,
    APPCONFIG_PROFILE_NAME_ENV,
    DEFAULT_VALIDITY_MINUTES,
    MIN_VALIDITY_MINUTES,
    MAX_VALIDITY_MINUTES,
    DEFAULT_SHORTCODE_LENGTH,
    MAX_GENERATION_ATTEMPTS,
)


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(APP_NAME_ENV)


@dataclass(frozen=True)
class RegistrySettings:
    """Settings for the in-memory short URL registry

    Attributes:
        default_validity_minutes (int):
            Validity window used when the caller does not specify one.
        shortcode_length (int):
            Length of generated shortcodes.
        max_generation_attempts (int):
            Draws before shortcode generation gives up.
        sweep_interval_seconds (int | None):
            Minimum time between opportunistic sweeps on insert. None disables them.
    """

    default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES
    shortcode_length: int = DEFAULT_SHORTCODE_LENGTH
    max_generation_attempts: int = MAX_GENERATION_ATTEMPTS
    sweep_interval_seconds: int | None = None

    def __post_init__(self):
        for name in ('default_validity_minutes', 'shortcode_length', 'max_generation_attempts'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise BadConfigurationError(f"'{name}' must be a positive integer (given value: {value!r}).")

        if not MIN_VALIDITY_MINUTES <= self.default_validity_minutes <= MAX_VALIDITY_MINUTES:
            raise BadConfigurationError(
                f"'default_validity_minutes' must be between {MIN_VALIDITY_MINUTES} and {MAX_VALIDITY_MINUTES} "
                f'(given value: {self.default_validity_minutes}).'
            )

        interval = self.sweep_interval_seconds
        if interval is not None and (isinstance(interval, bool) or not isinstance(interval, int) or interval < 1):
            raise BadConfigurationError(f"'sweep_interval_seconds' must be a positive integer or null (given value: {interval!r}).")

    @property
    def sweep_interval(self) -> timedelta | None:
        return None if self.sweep_interval_seconds is None else timedelta(seconds=self.sweep_interval_seconds)

    @classmethod
    def from_config(cls, config: dict[str, Any] | None) -> 'RegistrySettings':
        """Build settings from a `registry` configuration section

        Unknown keys are ignored (logged at WARNING), missing keys take defaults.

        Raises:
            BadConfigurationError: if the section is not a mapping or holds invalid values.
        """
        if config is None:
            return cls()
        if not isinstance(config, dict):
            raise BadConfigurationError(f'Registry configuration must be a JSON object (given type: {type(config).__name__}).')

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            logger.warning('Ignoring unknown registry configuration keys.', extra={'keys': unknown})

        return cls(**{key: value for key, value in config.items() if key in known})


def _sam_load_local_appconfig(func: Callable[[], dict]) -> Callable[[], dict]:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the configuration JSON from the local agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> dict:
        agent_url = __validate_appconfig_url(os.getenv(APPCONFIG_AGENT_URL_ENV))
        if not running_locally() or not agent_url:
            return func(*args, **kwargs)

        profile_name = os.getenv(APPCONFIG_PROFILE_NAME_ENV, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            config = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'build': config.get('build')})
        return config.get('registry') or {}

    return wrapper


@_sam_load_local_appconfig
@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config() -> dict:
    """Load the registry configuration section from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Returns:
        dict: The `registry` section (empty dict when the document has none).

    Raises:
        MissingEnvironmentVariableError: if a required variable is not set.
        botocore.exceptions.ClientError: if AppConfig rejects the request.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.')

    appconfig = boto3.client('appconfigdata')

    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'build': config.get('build')})
    return config.get('registry') or {}
