import logging
from typing import Any

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.exceptions import ConfigurationError
from urlshortener.models import URLStatsModel
from urlshortener.dao.exceptions import ShortURLNotFoundError, ShortURLExpiredError
from urlshortener.utils.helpers import isoformat_utc, guarantee_500_response
from urlshortener.utils.registry import get_registry
from urlshortener.lambdas.responses import response_json, response_400, response_500, response_from_error
from urlshortener.lambdas.url_stats.constants import (
    MISSING_SHORTCODE,
    STATS_NOT_AVAILABLE,
    STATS_SUCCESS,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)


def serialize_stats(stats: URLStatsModel) -> dict[str, Any]:
    return {
        'shortcode': stats.shortcode,
        'originalUrl': stats.original_url,
        'createdAt': isoformat_utc(stats.created_at),
        'expiresAt': isoformat_utc(stats.expires_at),
        'clickCount': stats.click_count,
        'clicks': [
            {
                'id': click.id,
                'timestamp': isoformat_utc(click.timestamp),
                'referrer': click.referrer,
                'location': click.location,
                'userAgent': click.user_agent,
            }
            for click in stats.clicks
        ],
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for short URL statistics (GET /shorturls/{shortcode})

    HTTP responses:
        200: Statistics of a live short URL
            shortcode, originalUrl, createdAt, expiresAt, clickCount,
            clicks: [{id, timestamp, referrer, location, userAgent}]
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
        410: Gone (the short URL has expired)
        500: Internal server error

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response.
    """
    try:
        registry = get_registry()
    except ConfigurationError:
        logger.exception('Failed to configure the shortcode registry. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    try:
        stats = registry.stats(shortcode)
    except (ShortURLNotFoundError, ShortURLExpiredError) as error:
        logger.info(
            'Statistics not available for short URL.',
            extra={'shortcode': shortcode, 'event': STATS_NOT_AVAILABLE, 'error': error.__class__.__name__},
        )
        return response_from_error(error)

    logger.info(
        'Short URL statistics retrieved. Responding with 200.',
        extra={'shortcode': shortcode, 'event': STATS_SUCCESS, 'click_count': stats.click_count},
    )
    return response_json(200, serialize_stats(stats))
