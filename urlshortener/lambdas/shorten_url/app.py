import json
import logging

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.exceptions import ConfigurationError
from urlshortener.dao.exceptions import DAOError
from urlshortener.utils.helpers import get_short_url, isoformat_utc, guarantee_500_response
from urlshortener.utils.registry import get_registry
from urlshortener.utils.validators import validate_url, validate_validity, validate_shortcode
from urlshortener.lambdas.responses import response_json, response_400, response_500, response_from_error
from urlshortener.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    SHORT_URL_CREATED,
    SHORT_URL_REJECTED,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs (POST /shorturls)

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Get the process-wide shortcode registry
    - Step 2: Parse the JSON request body
    - Step 3: Validate url, validity and shortcode shapes
    - Step 4: Create the record in the registry
    - Step 5: Respond to user with 201 created

    Request body:
        url (str): original URL (required)
        validity (int): validity window in minutes (optional, default 30)
        shortcode (str): custom shortcode (optional)

    HTTP responses:
        201: Successful URL shortening
            shortLink: newly generated short url
            expiry: expiry timestamp (ISO-8601, UTC)
        400: Bad client request
            message: invalid JSON, missing/invalid url, validity or shortcode
        409: Conflict
            message: custom shortcode already exists
        500: Internal server error
        503: Service unavailable
            message: no free shortcode could be generated

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format.

    Example:
        >>> event = {'body': '{"url": "https://example.com", "validity": 60}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['shortLink']
        'http://localhost:3000/aZ3k9Q'
    """
    # 1- Get the process-wide registry
    try:
        registry = get_registry()
    except ConfigurationError:
        logger.exception('Failed to configure the shortcode registry. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 2- Parse request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Request body is not valid JSON. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        logger.info('Request body is not a JSON object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON_BODY)

    url = request_body.get('url')
    validity = request_body.get('validity')
    # An empty shortcode means "generate one for me"
    shortcode = request_body.get('shortcode') or None

    # 3/4- Validate input shapes, then create the record
    try:
        validate_url(url)
        if validity is not None:
            validate_validity(validity)
        if shortcode is not None:
            validate_shortcode(shortcode)
        record = registry.insert(url, validity_minutes=validity, shortcode=shortcode)
    except DAOError as error:
        logger.info(
            'Short URL creation rejected (%s).',
            error.error_code,
            extra={'event': SHORT_URL_REJECTED, 'error': error.__class__.__name__, 'reason': str(error)},
        )
        return response_from_error(error)

    # 5- Respond with the new short link
    short_link = get_short_url(record.shortcode, event)
    logger.info(
        'Short URL created. Responding with 201.',
        extra={'event': SHORT_URL_CREATED, 'shortcode': record.shortcode, 'short_link': short_link},
    )
    return response_json(
        201,
        {
            'shortLink': short_link,
            'expiry': isoformat_utc(record.expires_at),
        },
    )
