"""Password hashing and JWT access/refresh token creation and verification."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import bcrypt
import jwt

from notes_api.core.config import get_settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 5
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 5
PASSWORD_MAX_LEN = 128

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time compare inside bcrypt)."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of verifying a token: VALID carries the decoded claims."""

    status: TokenStatus
    claims: dict[str, Any] | None = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


def create_access_token(sub: str | int, username: str, roles: list[str]) -> str:
    """Create a short-lived access token carrying the user's identity and roles."""
    settings = get_settings()
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "username": username,
        "roles": list(roles),
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(
        payload,
        settings.ACCESS_TOKEN_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def create_refresh_token(sub: str | int) -> str:
    """Create a refresh token carrying only the user id; lives as long as the cookie."""
    settings = get_settings()
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "type": REFRESH_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(seconds=settings.refresh_token_max_age),
    }
    return jwt.encode(
        payload,
        settings.REFRESH_TOKEN_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def _verify_token(token: str, secret: str, expected_type: str) -> TokenVerification:
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        return TokenVerification(TokenStatus.EXPIRED)
    except jwt.PyJWTError:
        return TokenVerification(TokenStatus.INVALID)
    if claims.get("type") != expected_type:
        return TokenVerification(TokenStatus.INVALID)
    return TokenVerification(TokenStatus.VALID, claims)


def verify_access_token(token: str) -> TokenVerification:
    """Check signature, expiry and token type of an access token."""
    secret = get_settings().ACCESS_TOKEN_SECRET.get_secret_value()
    return _verify_token(token, secret, ACCESS_TOKEN_TYPE)


def verify_refresh_token(token: str) -> TokenVerification:
    """Check signature, expiry and token type of a refresh token."""
    secret = get_settings().REFRESH_TOKEN_SECRET.get_secret_value()
    return _verify_token(token, secret, REFRESH_TOKEN_TYPE)
