"""User CRUD and the cascading user delete."""

import logging

from sqlalchemy import delete, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from notes_api.core.errors import ConflictError, NotFoundError
from notes_api.core.security import hash_password
from notes_api.models.note import Note
from notes_api.models.user import DEFAULT_ROLES, User
from notes_api.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "Duplicate username or email"


def list_users(db: Session) -> list[User]:
    users = db.query(User).order_by(User.id).all()
    if not users:
        raise NotFoundError("No users found")
    return users


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _find_duplicate(
    db: Session, username: str, email: str, exclude_id: int | None = None
) -> User | None:
    query = db.query(User).filter(or_(User.username == username, User.email == email))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first()


def _commit_unique(db: Session, message: str) -> None:
    """Commit; a unique-constraint violation from the store becomes ConflictError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Unique constraint rejected write: %s", e.orig)
        raise ConflictError(message) from e


def create_user(db: Session, data: UserCreate) -> User:
    if _find_duplicate(db, data.username, data.email) is not None:
        raise ConflictError(DUPLICATE_USER_MESSAGE)
    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        roles=data.roles or list(DEFAULT_ROLES),
        active=True,
    )
    db.add(user)
    _commit_unique(db, DUPLICATE_USER_MESSAGE)
    db.refresh(user)
    return user


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    user = get_user(db, user_id)
    if _find_duplicate(db, data.username, data.email, exclude_id=user_id) is not None:
        raise ConflictError(DUPLICATE_USER_MESSAGE)
    user.username = data.username
    user.email = data.email
    user.roles = list(data.roles)
    user.active = data.active
    if data.password:
        user.password_hash = hash_password(data.password)
    _commit_unique(db, DUPLICATE_USER_MESSAGE)
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> tuple[str, int]:
    """
    Delete a user and every note they own in one transaction.

    Returns (username, notes_deleted). On any failure the transaction is
    rolled back, so either both deletions happen or neither does.
    """
    user = get_user(db, user_id)
    username = user.username
    try:
        result = db.execute(
            delete(Note).where(Note.user_id == user.id).execution_options(synchronize_session=False)
        )
        db.delete(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Cascading delete of user %s rolled back", user_id)
        raise
    notes_deleted = result.rowcount or 0
    logger.info("Deleted user %s and %s note(s)", user_id, notes_deleted)
    return username, notes_deleted
