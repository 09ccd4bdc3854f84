import string


# Validity window bounds (minutes)
DEFAULT_VALIDITY_MINUTES = 30
MIN_VALIDITY_MINUTES = 1
MAX_VALIDITY_MINUTES = 10_080  # 60 * 24 * 7

# Shortcode generation: base62 alphabet (10 digits + 26 uppercase + 26 lowercase)
SHORTCODE_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
DEFAULT_SHORTCODE_LENGTH = 6
MAX_GENERATION_ATTEMPTS = 5_000

# Custom shortcode length bounds
MIN_CUSTOM_SHORTCODE_LENGTH = 3
MAX_CUSTOM_SHORTCODE_LENGTH = 20

# Click metadata sentinels (applied when the caller supplies nothing)
DEFAULT_REFERRER = 'Direct'
DEFAULT_USER_AGENT = 'Unknown'
DEFAULT_LOCATION = 'Unknown'
LOCAL_LOCATION = 'Local'

# Application environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig environment variables
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
