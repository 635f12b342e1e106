"""HTTP response builders shared by all handlers

Every error response has the shape `{'message': ..., 'error_code': ...}`.
Application errors are mapped onto a status code through their `ErrorKind`.
"""

from http import HTTPStatus
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse

from shortlinks.exceptions import ErrorKind, ShortLinksError


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.EXPIRED: 410,
    ErrorKind.EXHAUSTED: 500,
    ErrorKind.INTERNAL: 500,
    ErrorKind.CONFIGURATION: 500,
}


def json_response(status: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status, content=jsonable_encoder(body), headers=headers)


def error_response(status: int, message: str | None = None, error_code: str | None = None, headers: dict[str, str] | None = None) -> JSONResponse:
    base = HTTPStatus(status).phrase
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['error_code'] = error_code
    return json_response(status, body, headers)


def response_for_error(error: ShortLinksError) -> JSONResponse:
    """Translate an application error into its HTTP response.

    Internal failures (exhausted generation, inconsistent store) don't leak
    their message to the client.

    Example:
        >>> response_for_error(ExpiredError("Short URL with code 'abc123' has expired.")).status_code
        410
    """
    status = STATUS_BY_KIND.get(error.kind, 500)
    message = str(error) if status < 500 else None
    return error_response(status, message=message, error_code=error.error_code)


def response_302(*, location: str) -> RedirectResponse:
    return RedirectResponse(url=location, status_code=302)
