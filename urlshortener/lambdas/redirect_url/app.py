import logging

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.exceptions import ConfigurationError
from urlshortener.dao.exceptions import ShortURLNotFoundError, ShortURLExpiredError
from urlshortener.utils.helpers import (
    get_short_url,
    guarantee_500_response,
    location_from_ip,
    request_header,
    source_ip,
)
from urlshortener.utils.registry import get_registry
from urlshortener.lambdas.responses import response_302, response_400, response_500, response_from_error
from urlshortener.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    REDIRECT_SUCCESS,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs (GET /{shortcode})

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Get the live short URL record from the registry
    - Step 3: Record the click with referrer, user agent and location
    - Step 4: Redirect client to original URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: original URL
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: no short URL under this shortcode
        410: Gone
            message: the short URL has expired
        500: Internal server error
            message: server experienced an internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TC'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    try:
        registry = get_registry()
    except ConfigurationError:
        logger.exception('Failed to configure the shortcode registry. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2/3- Resolve the record and record the click
    metadata = {
        'referrer': request_header(event, 'Referer'),
        'user_agent': request_header(event, 'User-Agent'),
        'location': location_from_ip(source_ip(event)),
    }
    try:
        short_url = registry.get(shortcode)
        registry.hit(shortcode, metadata)
    except ShortURLNotFoundError as error:
        logger.info(
            'Short URL record not found. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_from_error(error)
    except ShortURLExpiredError as error:
        # NOTE: the record may also expire between get() and hit(); the client
        #       gets 410 either way and no click is recorded.
        logger.info(
            'Short URL record expired. Responding with 410.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED},
        )
        return response_from_error(error)

    # 4- Redirect client to original URL
    logger.info(
        'Redirecting client to original URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS, 'click_count': short_url.click_count + 1},
    )
    return response_302(location=short_url.original_url)
