"""Per-IP rate limiting for the login endpoint."""

from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from notes_api.core.config import settings
from notes_api.core.log import audit

if TYPE_CHECKING:
    from notes_api.core.config import Settings

LOGIN_RATE_LIMIT_MESSAGE = (
    "Too many login attempts from this IP, please try again after a 60 second pause"
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Current login limit; replaced by configure_limiter when an app is built.
_login_limit = settings.LOGIN_RATE_LIMIT


def configure_limiter(settings: "Settings") -> None:
    """Apply the app's settings to the shared limiter."""
    global _login_limit
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    _login_limit = settings.LOGIN_RATE_LIMIT


def login_rate_limit() -> str:
    """Evaluated by slowapi on every login request."""
    return _login_limit


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    audit(
        f"Too many requests: {exc.detail}\t{request.method}\t{request.url.path}"
        f"\t{request.headers.get('origin')}"
    )
    return JSONResponse({"message": LOGIN_RATE_LIMIT_MESSAGE}, status_code=429)
