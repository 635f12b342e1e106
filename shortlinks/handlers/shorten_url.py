import logging
from typing import Any

from fastapi import Body, Depends, Request, Response

from shortlinks.app import ShortLinks
from shortlinks.exceptions import ShortLinksError, ValidationError
from shortlinks.utils.helpers import get_short_url, guarantee_500_response
from shortlinks.handlers.dependencies import get_shortlinks
from shortlinks.handlers.responses import error_response, json_response, response_for_error
from shortlinks.handlers.constants import INVALID_JSON_BODY, INVALID_JSON_BODY_ERROR, REQUEST_REJECTED, SHORT_URL_CREATED


logger = logging.getLogger(__name__)


@guarantee_500_response
def handler(
    request: Request,
    payload: Any = Body(None),
    shortlinks: ShortLinks = Depends(get_shortlinks),
) -> Response:
    """Handle `POST /shorturls` requests to shorten URLs

    This handler follows this procedure to shorten URLs:
    - Step 1: Check the JSON request body (FastAPI already parsed it)
    - Step 2: Create the short URL (validation, shortcode generation, expiry)
    - Step 3: Respond with the short link and its expiry

    The body is taken as raw JSON on purpose: `validity` must be a real JSON
    integer, so it's validated by the service instead of being coerced.

    HTTP responses:
        201: Successful URL shortening
            shortLink: newly generated short url
            expiry: ISO-8601 expiry of the short url
        400: Bad client request
            message: invalid JSON, missing/invalid url, invalid validity or shortcode
        409: Conflict
            message: custom shortcode already taken
        500: Internal server error
            message: shortcode generation exhausted or unexpected failure

    Args:
        request (Request):
            Incoming request, used to build the short link.
        payload (Any):
            Parsed JSON body `{url, validity?, shortcode?}`, None when empty.
        shortlinks (ShortLinks):
            Application container providing the service and settings.

    Example:
        >>> response = client.post('/shorturls', json={'url': 'https://example.com', 'validity': 60})
        >>> response.status_code
        201
        >>> response.json()['shortLink']
        'http://testserver/aZ3kP9'
    """
    # 1- Check request body
    request_body = {} if payload is None else payload
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return error_response(400, message='JSON body must be an object', error_code=INVALID_JSON_BODY_ERROR)

    url = request_body.get('url')
    if not url:
        logger.info("Missing 'url' in JSON body. Responding with 400.", extra={'event': REQUEST_REJECTED})
        return error_response(400, message="missing 'url' in JSON body", error_code=ValidationError.error_code)

    # 2- Create short URL
    try:
        short_url = shortlinks.service.create_short_url(
            url,
            validity=request_body.get('validity'),
            shortcode=request_body.get('shortcode'),
        )
    except ShortLinksError as error:
        response = response_for_error(error)
        logger.log(
            logging.ERROR if response.status_code >= 500 else logging.INFO,
            'Short URL creation rejected. Responding with %s.',
            response.status_code,
            extra={'event': REQUEST_REJECTED, 'error': error.__class__.__name__, 'reason': str(error)},
        )
        return response

    # 3- Respond with the short link
    short_link = get_short_url(short_url.shortcode, request, shortlinks.settings.base_url)
    logger.info(
        'Shortened URL. Responding with 201.',
        extra={'event': SHORT_URL_CREATED, 'shortcode': short_url.shortcode, 'short_link': short_link},
    )
    return json_response(
        201,
        {
            'shortLink': short_link,
            'expiry': short_url.expires_at.isoformat() if short_url.expires_at else None,
        },
    )
