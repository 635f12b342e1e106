"""ASGI application serving the HTTP surface

Functions:
    create_app(shortlinks) -> FastAPI
        Build the FastAPI application for a ShortLinks container. The
        container is started and closed by the application lifespan.

    serve(shortlinks, host=None, port=None) -> None
        Serve the application with uvicorn until interrupted.

Error responses all share the `{'message': ..., 'error_code': ...}` shape:
unknown routes answer 404, wrong methods 405 (with an Allow header) and
unparsable JSON bodies 400.

Example:
    >>> from fastapi.testclient import TestClient
    >>> client = TestClient(create_app(ShortLinks()))
    >>> client.get('/health').json()['status']
    'healthy'
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlinks import __version__
from shortlinks.app import ShortLinks
from shortlinks.handlers import build_router
from shortlinks.handlers.responses import error_response
from shortlinks.handlers.constants import (
    HTTP_ERROR,
    INVALID_JSON_BODY,
    INVALID_JSON_BODY_ERROR,
    METHOD_NOT_ALLOWED_ERROR,
    ROUTE_NOT_FOUND_ERROR,
)


logger = logging.getLogger(__name__)

ERROR_CODE_BY_STATUS = {
    404: ROUTE_NOT_FOUND_ERROR,
    405: METHOD_NOT_ALLOWED_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    shortlinks: ShortLinks = app.state.shortlinks
    shortlinks.start()
    try:
        yield
    finally:
        shortlinks.close()


def create_app(shortlinks: ShortLinks) -> FastAPI:
    # Interactive docs are disabled: /docs and /redoc would shadow shortcodes
    app = FastAPI(title='shortlinks', version=__version__, lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.shortlinks = shortlinks
    app.include_router(build_router())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.info(
            'HTTP error. Responding with %s.',
            exc.status_code,
            extra={'method': request.method, 'path': request.url.path},
        )
        return error_response(
            exc.status_code,
            message=f'{request.method} {request.url.path}',
            error_code=ERROR_CODE_BY_STATUS.get(exc.status_code, HTTP_ERROR),
            headers=getattr(exc, 'headers', None),
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY, 'path': request.url.path})
        return error_response(400, message='invalid JSON body', error_code=INVALID_JSON_BODY_ERROR)

    return app


def serve(shortlinks: ShortLinks, host: str | None = None, port: int | None = None) -> None:
    """Serve `shortlinks` with uvicorn until interrupted (Ctrl+C)."""
    settings = shortlinks.settings
    host = host or settings.host
    port = settings.port if port is None else port

    logger.info('Listening for HTTP requests.', extra={'host': host, 'port': port})
    # log_config=None keeps uvicorn's loggers on the JSON root handler
    uvicorn.run(create_app(shortlinks), host=host, port=port, log_config=None)
