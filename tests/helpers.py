"""Shared fixtures for API tests: in-memory database, client and seeded users."""

from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from notes_api.core.config import Settings
from notes_api.core.database import Database
from notes_api.core.rate_limit import limiter
from notes_api.core.security import create_access_token, hash_password
from notes_api.main import create_app
from notes_api.models import Note, User


def make_database() -> Database:
    """SQLite in memory, one shared connection so every session sees the same data."""
    database = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.create_all()
    return database


def make_client(database: Database, cache=None, settings: Settings | None = None) -> TestClient:
    limiter.reset()
    app = create_app(settings, database=database, cache=cache)
    # https so the Secure refresh cookie is stored and sent back by the client.
    return TestClient(app, base_url="https://testserver")


def add_user(
    database: Database,
    username: str = "alice",
    password: str = "correct",
    email: str | None = None,
    roles: list[str] | None = None,
    active: bool = True,
) -> int:
    db = database.session()
    try:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(password),
            roles=roles or ["Employee"],
            active=active,
        )
        db.add(user)
        db.commit()
        return user.id
    finally:
        db.close()


def count_rows(database: Database, model: type) -> int:
    db = database.session()
    try:
        return db.query(model).count()
    finally:
        db.close()


def auth_header(user_id: int, username: str = "alice", roles: list[str] | None = None) -> dict[str, str]:
    token = create_access_token(user_id, username, roles or ["Employee"])
    return {"Authorization": f"Bearer {token}"}


__all__ = ["Note", "User", "add_user", "auth_header", "count_rows", "make_client", "make_database"]
