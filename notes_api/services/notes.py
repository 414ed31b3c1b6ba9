"""Note CRUD scoped to the owning user."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notes_api.core.errors import ConflictError, NotFoundError
from notes_api.models.note import TICKET_START, Note
from notes_api.models.user import User
from notes_api.schemas.note import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)

DUPLICATE_TITLE_MESSAGE = "Duplicate note title!"
NO_CHANGES_MESSAGE = "No changes detected"
TICKET_TAKEN_MESSAGE = "Ticket number already taken, please retry"

# How the ticket constraint shows up in driver errors: PostgreSQL names the
# constraint, SQLite names the column.
TICKET_CONSTRAINT_NAMES = ("uq_notes_ticket", "notes.ticket")

# Fields compared by update_note; user_id and ticket are immutable.
UPDATABLE_FIELDS = ("due_date", "title", "description", "priority", "completed")


def next_ticket_number(db: Session) -> int:
    """Next ticket number; the unique index on notes.ticket rejects concurrent duplicates."""
    current = db.query(func.max(Note.ticket)).scalar()
    return TICKET_START if current is None else current + 1


def list_notes(db: Session, owner_id: int) -> list[Note]:
    notes = (
        db.query(Note)
        .filter(Note.user_id == owner_id)
        .order_by(Note.completed, Note.due_date, Note.id)
        .all()
    )
    if not notes:
        raise NotFoundError("No notes found!")
    return notes


def get_note(db: Session, owner_id: int, note_id: int) -> Note:
    """A note owned by someone else is reported as missing."""
    note = db.query(Note).filter(Note.id == note_id, Note.user_id == owner_id).first()
    if note is None:
        raise NotFoundError("Note not found!")
    return note


def _title_taken(db: Session, owner_id: int, title: str, exclude_id: int | None = None) -> bool:
    query = db.query(Note.id).filter(Note.user_id == owner_id, Note.title == title)
    if exclude_id is not None:
        query = query.filter(Note.id != exclude_id)
    return query.first() is not None


def _same_value(new: Any, old: Any) -> bool:
    # Naive datetimes (SQLite) are taken as UTC.
    if isinstance(new, datetime) and isinstance(old, datetime):
        if new.tzinfo is None:
            new = new.replace(tzinfo=UTC)
        if old.tzinfo is None:
            old = old.replace(tzinfo=UTC)
    return new == old


def _commit_unique(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Unique constraint rejected note write: %s", e.orig)
        if any(name in str(e.orig) for name in TICKET_CONSTRAINT_NAMES):
            raise ConflictError(TICKET_TAKEN_MESSAGE) from e
        raise ConflictError(DUPLICATE_TITLE_MESSAGE) from e


def create_note(db: Session, owner_id: int, data: NoteCreate) -> Note:
    """Create a note for owner_id; the owner must still exist."""
    if db.get(User, owner_id) is None:
        raise NotFoundError("User not found")
    if _title_taken(db, owner_id, data.title):
        raise ConflictError(DUPLICATE_TITLE_MESSAGE)
    note = Note(
        ticket=next_ticket_number(db),
        user_id=owner_id,
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        priority=data.priority,
        completed=False,
    )
    db.add(note)
    _commit_unique(db)
    db.refresh(note)
    return note


def update_note(db: Session, owner_id: int, note_id: int, data: NoteUpdate) -> tuple[Note, bool]:
    """
    Apply changed fields only. Returns (note, changed); changed is False when
    the request matched the stored note and nothing was written.
    """
    note = get_note(db, owner_id, note_id)
    if _title_taken(db, owner_id, data.title, exclude_id=note.id):
        raise ConflictError(DUPLICATE_TITLE_MESSAGE)

    changes = {
        field: getattr(data, field)
        for field in UPDATABLE_FIELDS
        if not _same_value(getattr(data, field), getattr(note, field))
    }
    if not changes:
        return note, False

    for field, value in changes.items():
        setattr(note, field, value)
    _commit_unique(db)
    db.refresh(note)
    return note, True


def delete_note(db: Session, owner_id: int, note_id: int) -> None:
    note = get_note(db, owner_id, note_id)
    db.delete(note)
    db.commit()
