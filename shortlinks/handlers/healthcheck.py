import logging
from datetime import datetime, UTC

from fastapi import Depends, Response

from shortlinks.app import ShortLinks
from shortlinks.utils.config import app_env
from shortlinks.handlers.dependencies import get_shortlinks
from shortlinks.handlers.responses import json_response
from shortlinks.handlers.constants import HEALTHCHECK_FAILED


logger = logging.getLogger(__name__)


def handler(shortlinks: ShortLinks = Depends(get_shortlinks)) -> Response:
    """Handle `GET /health` liveness checks

    HTTP responses:
        200: status 'healthy', environment, uptime, service statistics and cleanup scheduler status
        503: status 'unhealthy' when statistics can't be gathered
    """
    try:
        stats = shortlinks.service.get_service_stats()
        cleanup = shortlinks.scheduler.status()
    except Exception as error:
        logger.exception(
            'Health check failed. Responding with 503.',
            extra={'event': HEALTHCHECK_FAILED, 'error': error.__class__.__name__},
        )
        return json_response(
            503,
            {
                'status': 'unhealthy',
                'timestamp': datetime.now(UTC).isoformat(),
                'error': error.__class__.__name__,
            },
        )

    return json_response(
        200,
        {
            'status': 'healthy',
            'environment': app_env(),
            'timestamp': datetime.now(UTC).isoformat(),
            'uptime_seconds': round(shortlinks.uptime(), 3),
            'stats': stats,
            'cleanup': cleanup,
        },
    )
