"""Process-wide shortcode registry handle

Every Lambda handler in a process must see the same records, so the registry
is built once (from AppConfig settings) and handed out from here. Tests and
alternative bootstraps inject their own instance with `set_registry()`.

Functions:
    get_registry() -> ShortURLBaseDAO
        Return the process registry, building it on first use.
    set_registry(dao) -> ShortURLBaseDAO
        Install an explicitly constructed registry.
    reset_registry() -> None
        Forget the current registry (next get_registry() builds a new one).

Example:
    >>> from urlshortener.utils.registry import get_registry
    >>> registry = get_registry()
    >>> registry is get_registry()
    True
"""

import logging
import threading

from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.memory import ShortURLMemoryDAO
from urlshortener.exceptions import MissingEnvironmentVariableError
from urlshortener.utils.config import load_config, RegistrySettings
from urlshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

_registry: ShortURLBaseDAO | None = None
_registry_lock = threading.Lock()


def registry_settings() -> RegistrySettings:
    """Load registry settings from AppConfig

    When running locally without AppConfig identifiers, default settings are
    used instead of failing.

    Raises:
        MissingEnvironmentVariableError: if AppConfig is not configured outside local runs.
        BadConfigurationError: if the configuration holds invalid values.
    """
    try:
        config = load_config()
    except MissingEnvironmentVariableError:
        if not running_locally():
            raise
        logger.warning('AppConfig is not configured. Using default registry settings.')
        return RegistrySettings()
    return RegistrySettings.from_config(config)


def get_registry() -> ShortURLBaseDAO:
    """Return the process-wide registry, building it on first use"""
    global _registry
    with _registry_lock:
        if _registry is None:
            settings = registry_settings()
            _registry = ShortURLMemoryDAO(settings=settings)
            logger.info('Initialized in-memory shortcode registry.', extra={'settings': settings})
        return _registry


def set_registry(dao: ShortURLBaseDAO) -> ShortURLBaseDAO:
    """Install an explicitly constructed registry and return it"""
    global _registry
    with _registry_lock:
        _registry = dao
    return dao


def reset_registry() -> None:
    global _registry
    with _registry_lock:
        _registry = None
