import logging
from datetime import datetime, UTC

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.helpers import isoformat_utc, guarantee_500_response
from urlshortener.utils.registry import get_registry
from urlshortener.lambdas.responses import response_json
from urlshortener.lambdas.service_info.constants import SERVICE_NAME


logger = logging.getLogger(__name__)



@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Report service health (GET /health)

    HTTP responses:
        200: registry is consistent
            status: OK, timestamp, service, records
        503: registry indexes disagree
            status: DEGRADED, timestamp, service, records
    """
    registry = get_registry()
    healthy = registry.healthcheck()
    if not healthy:
        logger.error('Registry healthcheck failed.', extra={'event': 'HEALTHCHECK_FAILED'})

    return response_json(
        200 if healthy else 503,
        {
            'status': 'OK' if healthy else 'DEGRADED',
            'timestamp': isoformat_utc(datetime.now(UTC)),
            'service': SERVICE_NAME,
            'records': registry.count(),
        },
    )
