"""Request/response schemas for auth endpoints."""

from pydantic import Field

from notes_api.schemas.base import ApiModel


class LoginRequest(ApiModel):
    """Credentials for login. username accepts a username or an e-mail address."""

    username: str = Field(..., min_length=1, max_length=320, description="Username or email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class AccessTokenResponse(ApiModel):
    """Access token returned by login and refresh; the refresh token only travels as a cookie."""

    access_token: str = Field(..., description="JWT access token")


class CurrentUser(ApiModel):
    """Authenticated identity decoded from the access token."""

    id: int
    username: str
    roles: list[str]
