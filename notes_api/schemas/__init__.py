"""Pydantic request/response schemas."""

from notes_api.schemas.auth import AccessTokenResponse, CurrentUser, LoginRequest
from notes_api.schemas.base import ApiModel, MessageResponse
from notes_api.schemas.health import HealthResponse
from notes_api.schemas.note import NoteCreate, NoteCreatedResponse, NoteOut, NoteUpdate
from notes_api.schemas.user import UserCreate, UserOut, UserUpdate

__all__ = [
    "AccessTokenResponse",
    "ApiModel",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "NoteCreate",
    "NoteCreatedResponse",
    "NoteOut",
    "NoteUpdate",
    "UserCreate",
    "UserOut",
    "UserUpdate",
]
