import logging

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.lambdas.responses import response_json, response_405
from urlshortener.lambdas.service_info.constants import SERVICE_NAME, SERVICE_VERSION, METHOD_NOT_ALLOWED


logger = logging.getLogger(__name__)

ENDPOINTS = {
    'POST /shorturls': 'Create a short URL',
    'GET /shorturls/{shortcode}': 'Get URL statistics',
    'GET /{shortcode}': 'Redirect to original URL',
    'GET /health': 'Health check',
}

SHORTURLS_RESOURCE = '/shorturls'
SHORTURLS_USAGE = 'Use POST /shorturls to create a short URL or GET /shorturls/{shortcode} for stats'


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Describe the service (GET /) and refuse listing short URLs (GET /shorturls)

    HTTP responses:
        200: service descriptor
            message, version, endpoints
        405: GET /shorturls
            message: how to create or inspect short URLs instead
    """
    resource = event.get('resource') or event.get('path') or '/'

    if resource.rstrip('/') == SHORTURLS_RESOURCE:
        logger.info(
            'Rejected short URL listing request.',
            extra={'event': METHOD_NOT_ALLOWED, 'method': event.get('httpMethod')},
        )
        return response_405(SHORTURLS_USAGE, METHOD_NOT_ALLOWED, allow='POST')

    return response_json(
        200,
        {
            'message': SERVICE_NAME,
            'version': SERVICE_VERSION,
            'endpoints': ENDPOINTS,
        },
    )
