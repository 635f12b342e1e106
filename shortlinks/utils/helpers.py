"""Helper utilities for HTTP handlers.

Functions:
    base_url(request, default=None) -> str
        Extract the public base URL of a request
    get_short_url(shortcode, request, default=None) -> str
        Get string representation of short URL for a given shortcode
    request_metadata(request) -> RequestMetadata
        Extract client IP, User-Agent and Referer from a request
    guarantee_500_response(handler) -> Callable
        Decorator: turn unexpected handler exceptions into a 500 response

Example:
    Typical usage inside a handler:

        >>> from shortlinks.utils.helpers import base_url
        >>> request.headers['host'], request.headers['x-forwarded-proto']
        ('sho.rt', 'https')
        >>> base_url(request)
        'https://sho.rt'

        >>> base_url(request, default='https://links.example.com/')
        'https://links.example.com'
"""

import logging
import functools
from typing import Any
from collections.abc import Callable

from fastapi import Request
from fastapi.responses import JSONResponse

from shortlinks.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from shortlinks.models import RequestMetadata


logger = logging.getLogger(__name__)


def base_url(request: Request, default: str | None = None) -> str:
    """Extract public base URL of a request

    Resolution order:
        1. `default` (the configured BASE_URL), when given.
        2. The request's Host header, with X-Forwarded-Proto as the scheme.
        3. The URL the server was reached on.

    Args:
        request (Request): incoming request
        default (Optional[str]): configured public base URL

    Returns:
        str: Base URL without trailing slash, e.g. "https://sho.rt"
    """
    if default:
        return default.rstrip('/')

    host = request.headers.get('host')
    if host:
        scheme = request.headers.get('x-forwarded-proto') or request.url.scheme
        return f'{scheme}://{host}'

    return str(request.base_url).rstrip('/')


def get_short_url(shortcode: str, request: Request, default: str | None = None) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        request (Request): incoming request
        default (Optional[str]): configured public base URL

    Returns:
        str: short url string representation
    """
    return f'{base_url(request, default)}/{shortcode}'


def request_metadata(request: Request) -> RequestMetadata:
    """Extract click metadata from a request

    The client IP is the first X-Forwarded-For hop when present, otherwise the
    peer address of the connection.

    Example:
        >>> request.client.host, request.headers['user-agent']
        ('203.0.113.7', 'curl/8.5')
        >>> request_metadata(request)
        RequestMetadata(ip='203.0.113.7', user_agent='curl/8.5', referer=None)
    """
    forwarded = request.headers.get('x-forwarded-for')
    if forwarded:
        ip = forwarded.split(',')[0].strip() or None
    else:
        ip = request.client.host if request.client else None

    return RequestMetadata(
        ip=ip,
        user_agent=request.headers.get('user-agent'),
        referer=request.headers.get('referer'),
    )


def guarantee_500_response(handler: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator ensuring a handler always answers, even on unexpected errors.

    Any exception escaping the handler is logged with its traceback and
    converted into a JSON 500 response carrying UNKNOWN_INTERNAL_SERVER_ERROR.
    The wrapper keeps the handler's signature, so FastAPI still resolves its
    parameters and dependencies.
    """

    @functools.wraps(handler)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return handler(*args, **kwargs)
        except Exception:
            logger.exception('Unhandled error in handler. Responding with 500.', extra={'handler': handler.__name__})
            return JSONResponse(
                status_code=500,
                content={
                    'message': 'Internal Server Error',
                    'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                },
            )

    return wrapper
