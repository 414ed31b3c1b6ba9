"""FastAPI application entrypoint. No business logic; only wiring, middleware and error formatting."""

from dotenv import load_dotenv

load_dotenv()

import logging
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_api.api.v1 import router as v1_router
from notes_api.core.cache import NoteCache
from notes_api.core.config import Settings, get_settings
from notes_api.core.database import Database
from notes_api.core.errors import AppError, AuthenticationError
from notes_api.core.log import (
    ERROR_LOGGER,
    REQUEST_LOGGER,
    configure_logging,
    set_request_id,
)
from notes_api.core.rate_limit import configure_limiter, limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)
request_logger = logging.getLogger(REQUEST_LOGGER)
error_logger = logging.getLogger(ERROR_LOGGER)


def _validation_message(exc: RequestValidationError) -> str:
    """First failing field as 'field: reason'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request data"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    msg = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse({"message": exc.message}, status_code=exc.status_code, headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"message": _validation_message(exc)}, status_code=400)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "404 Not Found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse({"message": message}, status_code=exc.status_code, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error_logger.error(
        "%s: %s\t%s\t%s\t%s",
        type(exc).__name__,
        exc,
        request.method,
        request.url.path,
        request.headers.get("origin"),
        exc_info=exc,
    )
    return JSONResponse({"message": "Internal server error"}, status_code=500)


async def request_context_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    Request-scoped context:
    - Accept or mint X-Request-ID and echo it on the response
    - Put it in a contextvar so every log line carries the correlation id
    - Write one request log line
    - Turn unhandled errors into the generic 500 while the id is still set,
      so the error log and the response both carry it
    """
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    set_request_id(request_id)
    try:
        request_logger.info(
            "%s\t%s\t%s", request.method, request.url.path, request.headers.get("origin")
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await unhandled_error_handler(request, exc)
        response.headers.setdefault("x-request-id", request_id)
        return response
    finally:
        set_request_id(None)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables on startup; release the connection pool and cache client on shutdown."""
    app.state.database.create_all()
    logger.info("Database ready (%s)", app.state.settings.APP_ENV)
    try:
        yield
    finally:
        if app.state.cache is not None:
            app.state.cache.close()
        app.state.database.dispose()


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    cache: NoteCache | None = None,
) -> FastAPI:
    """
    Build the application. database and cache default to handles built from
    settings; tests pass their own.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    if database is None:
        database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    if cache is None and settings.REDIS_URL:
        cache = NoteCache.from_url(settings.REDIS_URL, settings.NOTES_CACHE_TTL_SECONDS)

    app = FastAPI(
        title="Notes API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.cache = cache
    configure_limiter(settings)
    app.state.limiter = limiter

    # Registered first so CORS wraps it and also decorates the generic 500.
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Notes API"}

    return app


app = create_app()
