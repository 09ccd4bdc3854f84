# Log events and error codes for the redirect function
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
