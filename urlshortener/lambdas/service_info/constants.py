# Log events and error codes for the service descriptor function
SERVICE_NAME = 'URL Shortener Microservice'
SERVICE_VERSION = '1.0.0'
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
