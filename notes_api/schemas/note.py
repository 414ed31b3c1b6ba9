"""Request/response schemas for note endpoints."""

from datetime import UTC, datetime

from pydantic import Field, field_validator

from notes_api.models.note import DESCRIPTION_MAX_LEN, TITLE_MAX_LEN
from notes_api.schemas.base import ApiModel


def _to_utc(v: datetime) -> datetime:
    # Naive input is taken as UTC; SQLite stores the value without its offset.
    if v.tzinfo is None:
        return v.replace(tzinfo=UTC)
    return v.astimezone(UTC)


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class NoteCreate(ApiModel):
    due_date: datetime
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LEN)
    priority: bool = False

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _not_blank(v)


class NoteUpdate(ApiModel):
    """Every field is required; completed can only be set through an update."""

    due_date: datetime
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LEN)
    priority: bool
    completed: bool

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _not_blank(v)


class NoteOut(ApiModel):
    id: int
    ticket: int
    user_id: int
    username: str | None = None
    title: str
    description: str
    due_date: datetime
    priority: bool
    completed: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NoteCreatedResponse(ApiModel):
    message: str
    note: NoteOut
