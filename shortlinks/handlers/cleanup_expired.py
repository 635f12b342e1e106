import logging

from fastapi import Depends, Response

from shortlinks.app import ShortLinks
from shortlinks.scheduler import ERROR, CleanupResult
from shortlinks.handlers.dependencies import get_shortlinks
from shortlinks.handlers.responses import json_response


logger = logging.getLogger(__name__)


def response_success(*, result: CleanupResult) -> Response:
    message = (
        'Cleanup already in progress, skipped'
        if result.skipped
        else f'Successfully deleted {result.cleaned_count} expired short URLs'
    )
    return json_response(
        200,
        {
            'status': result.status,
            'cleaned_count': result.cleaned_count,
            'duration_ms': round(result.duration_ms, 3),
            'message': message,
        },
    )


def response_error(*, error: Exception) -> Response:
    return json_response(
        500,
        {
            'status': ERROR,
            'message': 'Failed to clean up expired short URLs',
            'reason': str(error),
            'error': error.__class__.__name__,
        },
    )


def handler(shortlinks: ShortLinks = Depends(get_shortlinks)) -> Response:
    """Handle `POST /cleanup` manual cleanup triggers

    Diagnostic responses:
        success (200):
            status: success
            cleaned_count: <number of deleted short URLs>
            duration_ms: <duration>
        skipped (200):
            status: skipped (another cleanup is in progress)
        error (500):
            status: error
            reason: <reason>
            error: <error class name>
    """
    try:
        result = shortlinks.scheduler.run_manual_cleanup()
    except Exception as error:
        logger.exception(
            'Manual cleanup failed.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        return response_success(result=result)
