"""Login, refresh and logout routes plus the bearer-token dependency (get_current_user)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from notes_api.core.config import get_settings
from notes_api.core.database import get_db
from notes_api.core.errors import AuthenticationError, AuthorizationError
from notes_api.core.log import audit
from notes_api.core.rate_limit import limiter, login_rate_limit
from notes_api.core.security import verify_access_token, verify_refresh_token
from notes_api.schemas.auth import AccessTokenResponse, CurrentUser, LoginRequest
from notes_api.schemas.base import MessageResponse
from notes_api.services.auth import authenticate, issue_tokens, refresh_access_token

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _cookie_attributes() -> dict:
    # Setting and clearing must use the same attributes or browsers keep the cookie.
    return {"httponly": True, "secure": True, "samesite": "none", "path": "/"}


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Attach the refresh token cookie; Max-Age equals the token lifetime."""
    settings = get_settings()
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        refresh_token,
        max_age=settings.refresh_token_max_age,
        **_cookie_attributes(),
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(get_settings().REFRESH_COOKIE_NAME, **_cookie_attributes())


@router.post("", response_model=AccessTokenResponse)
@limiter.limit(login_rate_limit)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AccessTokenResponse:
    """
    Authenticate with username (or email) and password.

    Returns a short-lived access token in the body; the refresh token is set
    as an HttpOnly cookie. Send the access token as: Authorization: Bearer <token>
    """
    user = authenticate(db, body.username, body.password)
    access_token, refresh_token = issue_tokens(user)
    set_refresh_cookie(response, refresh_token)
    logger.info("User %s logged in", user.id)
    return AccessTokenResponse(access_token=access_token)


@router.get("/refresh", response_model=AccessTokenResponse)
def refresh(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AccessTokenResponse:
    """
    Exchange the refresh token cookie for a new access token.
    The refresh token itself is not rotated.
    """
    token = request.cookies.get(get_settings().REFRESH_COOKIE_NAME)
    if not token:
        raise AuthenticationError()
    verification = verify_refresh_token(token)
    if not verification.is_valid:
        audit(f"Invalid refresh token: {verification.status.value}")
        raise AuthorizationError()
    return AccessTokenResponse(access_token=refresh_access_token(db, verification))


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={204: {"description": "No refresh cookie was present"}},
)
def logout(request: Request, response: Response):
    """Clear the refresh token cookie. Without a cookie this is a no-op returning 204."""
    if not request.cookies.get(get_settings().REFRESH_COOKIE_NAME):
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_refresh_cookie(response)
    return MessageResponse(message="Logged out successfully")


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer access token and return its identity.

    Missing header -> 401; bad signature, expired or malformed token -> 403.
    Uses only the token and the access secret, never the database.
    """
    if credentials is None:
        raise AuthenticationError()
    verification = verify_access_token(credentials.credentials)
    if not verification.is_valid:
        raise AuthorizationError()
    claims = verification.claims or {}
    try:
        current = CurrentUser(
            id=int(claims["sub"]),
            username=str(claims.get("username") or ""),
            roles=list(claims.get("roles") or []),
        )
    except (KeyError, TypeError, ValueError):
        raise AuthorizationError()
    request.state.user = current
    return current
