"""Note endpoints. Every route needs a Bearer token and only sees the caller's notes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from notes_api.api.v1.auth import get_current_user
from notes_api.core.cache import NoteCache, get_cache, notes_cache_key
from notes_api.core.database import get_db
from notes_api.schemas.auth import CurrentUser
from notes_api.schemas.base import MessageResponse
from notes_api.schemas.note import NoteCreate, NoteCreatedResponse, NoteOut, NoteUpdate
from notes_api.services import notes as note_service

router = APIRouter()


@router.get("", response_model=list[NoteOut])
def list_notes(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[NoteCache | None, Depends(get_cache)],
) -> list[Any]:
    """
    List the caller's notes, open ones first.

    When Redis is configured the list is served from cache for up to
    NOTES_CACHE_TTL_SECONDS; writes do not invalidate it.
    """
    key = notes_cache_key(user.id)
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached
    notes = [NoteOut.model_validate(n) for n in note_service.list_notes(db, user.id)]
    if cache is not None:
        cache.set(key, [n.model_dump(mode="json", by_alias=True) for n in notes])
    return notes


@router.post("", response_model=NoteCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_note(
    body: NoteCreate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> NoteCreatedResponse:
    note = note_service.create_note(db, user.id, body)
    return NoteCreatedResponse(message="New note created", note=NoteOut.model_validate(note))


@router.get("/{note_id}", response_model=NoteOut)
def get_note(
    note_id: int,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> NoteOut:
    return NoteOut.model_validate(note_service.get_note(db, user.id, note_id))


@router.patch("/{note_id}", response_model=MessageResponse)
def update_note(
    note_id: int,
    body: NoteUpdate,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    note, changed = note_service.update_note(db, user.id, note_id, body)
    if not changed:
        return MessageResponse(message=note_service.NO_CHANGES_MESSAGE)
    return MessageResponse(message=f"{note.title} - updated")


@router.delete("/{note_id}", response_model=MessageResponse)
def delete_note(
    note_id: int,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    note_service.delete_note(db, user.id, note_id)
    return MessageResponse(message=f"Note with ID {note_id} deleted successfully.")
