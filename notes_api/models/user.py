"""ORM model for application users (credentials, roles, login eligibility)."""

from sqlalchemy import JSON, Boolean, Column, Integer, String

from notes_api.models.base import Base, TimestampMixin

DEFAULT_ROLES = ["Employee"]


class User(TimestampMixin, Base):
    """
    User account for JWT authentication.

    roles: flat list of labels, never empty (defaults to Employee).
    active: inactive users cannot log in.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=lambda: list(DEFAULT_ROLES))
    active = Column(Boolean, nullable=False, default=True)
