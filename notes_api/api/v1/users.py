"""User endpoints. Creating a user is public; everything else needs a Bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from notes_api.api.v1.auth import get_current_user
from notes_api.core.database import get_db
from notes_api.schemas.auth import CurrentUser
from notes_api.schemas.base import MessageResponse
from notes_api.schemas.user import UserCreate, UserOut, UserUpdate
from notes_api.services import users as user_service

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Register a user. Username and email must be unique; roles default to Employee."""
    user = user_service.create_user(db, body)
    return MessageResponse(message=f"New user {user.username} created")


@router.get("", response_model=list[UserOut])
def list_users(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in user_service.list_users(db)]


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    return UserOut.model_validate(user_service.get_user(db, user_id))


@router.patch("/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """
    Replace username, email, roles and active flag; password only when provided.
    Role changes reach access tokens on the next refresh.
    """
    user = user_service.update_user(db, user_id, body)
    return MessageResponse(message=f"{user.username} updated")


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete the user and all of their notes in a single transaction."""
    username, notes_deleted = user_service.delete_user(db, user_id)
    return MessageResponse(
        message=f"Username {username} with ID {user_id} deleted ({notes_deleted} note(s) removed)"
    )
