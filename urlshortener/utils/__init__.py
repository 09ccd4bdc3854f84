from urlshortener.utils.config import app_env, app_name, load_config, RegistrySettings
from urlshortener.utils.helpers import (
    base_url,
    get_short_url,
    isoformat_utc,
    location_from_ip,
    request_header,
    source_ip,
    require_environment,
    guarantee_500_response,
)
from urlshortener.utils.shortener import generate_shortcode, generate_unique_shortcode
from urlshortener.utils.validators import validate_url, validate_validity, validate_shortcode
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'generate_unique_shortcode',
    'validate_url',
    'validate_validity',
    'validate_shortcode',
    'app_env',
    'app_name',
    'load_config',
    'RegistrySettings',
    'base_url',
    'get_short_url',
    'isoformat_utc',
    'location_from_ip',
    'request_header',
    'source_ip',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
