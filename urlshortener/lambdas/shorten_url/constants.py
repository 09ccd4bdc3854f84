# Log events and error codes for the shorten URL function
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
SHORT_URL_REJECTED = 'SHORT_URL_REJECTED'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
