# Log events and error codes for the URL statistics function
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
STATS_NOT_AVAILABLE = 'STATS_NOT_AVAILABLE'
STATS_SUCCESS = 'STATS_SUCCESS'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
