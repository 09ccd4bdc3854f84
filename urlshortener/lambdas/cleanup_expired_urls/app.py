import json
import logging

from urlshortener.types import LambdaEvent, LambdaContext
from urlshortener.exceptions import URLShortenerError
from urlshortener.utils.registry import get_registry
from urlshortener.lambdas.cleanup_expired_urls.constants import SUCCESS, ERROR


logger = logging.getLogger(__name__)


def response_success(*, removed: int) -> str:
    return json.dumps(
        {
            'status': SUCCESS,
            'removed': removed,
            'message': f'Removed {removed} expired short URL(s)',
        }
    )


def response_error(*, error: Exception) -> str:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to remove expired short URLs',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: LambdaEvent, context: LambdaContext) -> str:
    """Sweep expired short URLs from the registry

    Meant to be triggered on a schedule (EventBridge). The sweep also keeps
    memory bounded: expired records are otherwise only rejected on access,
    never removed.

    Diagnostic responses:
        success:
            status: success
            removed: <number of removed records>
            message: Removed <n> expired short URL(s)
        error:
            status: error
            message: Failed to remove expired short URLs
            reason: <reason>
            error: <error class name>

    Args:
        event (LambdaEvent):
            EventBridge event payload.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Example:
        >>> json.loads(lambda_handler({}, None))['status']
        'success'
    """
    try:
        removed = get_registry().cleanup()
    except URLShortenerError as error:
        logger.exception(
            'Failed to remove expired short URLs.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        logger.info(
            'Removed %s expired short URL(s).',
            removed,
            extra={'event': SUCCESS, 'removed': removed},
        )
        return response_success(removed=removed)
