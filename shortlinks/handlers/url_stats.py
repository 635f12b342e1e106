import logging

from fastapi import Depends, Request, Response

from shortlinks.app import ShortLinks
from shortlinks.exceptions import ShortLinksError
from shortlinks.utils.helpers import get_short_url, guarantee_500_response
from shortlinks.handlers.dependencies import get_shortlinks
from shortlinks.handlers.responses import json_response, response_for_error
from shortlinks.handlers.constants import REQUEST_REJECTED, STATS_RETRIEVED


logger = logging.getLogger(__name__)


@guarantee_500_response
def handler(shortcode: str, request: Request, shortlinks: ShortLinks = Depends(get_shortlinks)) -> Response:
    """Handle `GET /shorturls/{shortcode}` requests for per-link statistics

    HTTP responses:
        200: Snapshot of the short url
            id, shortcode, original_url, short_link, created_at, expires_at,
            total_clicks, time_until_expiry, clicks
        400: Malformed shortcode
        404: Shortcode doesn't exist
        410: Short url has expired
    """
    try:
        stats = shortlinks.service.get_short_url_stats(shortcode)
    except ShortLinksError as error:
        response = response_for_error(error)
        logger.info(
            'Statistics request rejected. Responding with %s.',
            response.status_code,
            extra={'event': REQUEST_REJECTED, 'shortcode': shortcode, 'error': error.__class__.__name__},
        )
        return response

    stats['short_link'] = get_short_url(shortcode, request, shortlinks.settings.base_url)
    logger.debug('Retrieved short URL statistics.', extra={'event': STATS_RETRIEVED, 'shortcode': shortcode})
    return json_response(200, stats)
