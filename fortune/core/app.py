"""FastAPI application factory for the Fortune API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from fortune.api.responses import envelope
from fortune.api.router_fortune import router as fortune_router
from fortune.core.settings import FortuneSettings
from fortune.crypto.bearer_token import BearerTokenAuthority
from fortune.db.engine import create_engine, create_schema, create_session_factory

logger = logging.getLogger(__name__)

_UNHANDLED_STATUSES = {
    status.HTTP_404_NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED,
}


def _unhandled(request: Request, code: int) -> JSONResponse:
    return envelope(
        code,
        {"path": request.url.path},
        f"{HTTPStatus(code).phrase} (Unhandled)",
    )


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code in _UNHANDLED_STATUSES:
        response = _unhandled(request, exc.status_code)
    else:
        response = envelope(exc.status_code, message=exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected malformed request body: %s", exc.errors())
    return envelope(status.HTTP_400_BAD_REQUEST, message="Malformed request body")


async def _unexpected_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    logger.error("Internal error while handling %s", request.url.path, exc_info=exc)
    return _unhandled(request, status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(settings: FortuneSettings | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Raises ConfigurationError when the JWT signing key is unusable.
    """
    settings = settings or FortuneSettings()
    authority = BearerTokenAuthority(settings.jwt_signing_key, settings.public_host)
    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await create_schema(engine)
        yield
        await engine.dispose()

    app = FastAPI(
        title="Fortune API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_authority = authority
    app.state.session_factory = session_factory

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unexpected_exception_handler)

    app.include_router(fortune_router)

    return app
