"""Credential checks and token issuance for login and refresh."""

import logging
from functools import lru_cache

from sqlalchemy import or_
from sqlalchemy.orm import Session

from notes_api.core.errors import AuthenticationError
from notes_api.core.log import audit
from notes_api.core.security import (
    TokenVerification,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from notes_api.models.user import User

logger = logging.getLogger(__name__)

# Internal failure reasons; written to the audit log, never returned to the client.
REASON_UNKNOWN_USER = "unknown_user"
REASON_INACTIVE_USER = "inactive_user"
REASON_INVALID_PASSWORD = "invalid_password"


class LoginFailed(AuthenticationError):
    """401 with the same message whatever the reason, so identities cannot be probed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__()


def find_user_by_identifier(db: Session, identifier: str) -> User | None:
    """Look up a user by username or (case-insensitive) e-mail."""
    identifier = identifier.strip()
    return (
        db.query(User)
        .filter(or_(User.username == identifier, User.email == identifier.lower()))
        .first()
    )


@lru_cache
def _dummy_password_hash() -> str:
    """Hash checked when the user is unknown, so every failure pays one bcrypt verify."""
    return hash_password("no-such-user-placeholder")


def authenticate(db: Session, identifier: str, password: str) -> User:
    """
    Return the active user matching the credentials.
    Raises LoginFailed (401) and writes an audit line on every failure.
    """
    user = find_user_by_identifier(db, identifier)
    if user is None:
        verify_password(password, _dummy_password_hash())
        reason = REASON_UNKNOWN_USER
    elif not verify_password(password, user.password_hash):
        reason = REASON_INVALID_PASSWORD
    elif not user.active:
        reason = REASON_INACTIVE_USER
    else:
        return user
    audit(f"Unauthorized login attempt for username: {identifier} ({reason})")
    raise LoginFailed(reason)


def issue_tokens(user: User) -> tuple[str, str]:
    """Mint (access_token, refresh_token) for a verified user."""
    access_token = create_access_token(user.id, user.username, list(user.roles or []))
    refresh_token = create_refresh_token(user.id)
    return access_token, refresh_token


def refresh_access_token(db: Session, verification: TokenVerification) -> str:
    """
    Mint a new access token from a verified refresh token.

    Roles are re-read from the store so role changes apply without a new login.
    Raises AuthenticationError when the referenced user no longer exists.
    """
    claims = verification.claims or {}
    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        user = None
    else:
        user = db.get(User, user_id)
    if user is None:
        audit(f"Refresh token references missing user: {claims.get('sub')}")
        raise AuthenticationError()
    return create_access_token(user.id, user.username, list(user.roles or []))
