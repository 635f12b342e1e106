import logging

from fastapi import Depends, Request, Response

from shortlinks.app import ShortLinks
from shortlinks.exceptions import ShortLinksError
from shortlinks.utils.helpers import guarantee_500_response, request_metadata
from shortlinks.handlers.dependencies import get_shortlinks
from shortlinks.handlers.responses import response_302, response_for_error
from shortlinks.handlers.constants import REDIRECT_SUCCESS, REQUEST_REJECTED


logger = logging.getLogger(__name__)


@guarantee_500_response
def handler(shortcode: str, request: Request, shortlinks: ShortLinks = Depends(get_shortlinks)) -> Response:
    """Handle `GET /{shortcode}` requests to redirect short URLs

    This handler follows this procedure to redirect URLs:
    - Step 1: Record the click (with client metadata) and resolve the target
    - Step 2: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: malformed shortcode
        404: Not found
            message: shortcode doesn't exist
        410: Gone
            message: short url has expired

    Example:
        >>> response = client.get('/aZ3kP9', follow_redirects=False)
        >>> response.status_code
        302
        >>> response.headers['location']
        'https://example.com/my-page'
    """
    # 1- Record the click and resolve the target URL
    try:
        target_url = shortlinks.service.redirect_to_original_url(shortcode, request_metadata(request))
    except ShortLinksError as error:
        response = response_for_error(error)
        logger.info(
            'Redirect rejected. Responding with %s.',
            response.status_code,
            extra={'event': REQUEST_REJECTED, 'shortcode': shortcode, 'error': error.__class__.__name__},
        )
        return response

    # 2- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
