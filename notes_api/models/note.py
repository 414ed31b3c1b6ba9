"""ORM model for notes (tickets) owned by a single user."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from notes_api.models.base import Base, TimestampMixin

TICKET_START = 500
TITLE_MAX_LEN = 40
DESCRIPTION_MAX_LEN = 200


class Note(TimestampMixin, Base):
    """
    A note/ticket. Titles are unique per owner; ticket numbers are unique
    across the system and start at TICKET_START.

    Notes are removed together with their owner by the user-delete
    transaction, so the foreign key carries no ON DELETE action.
    """

    __tablename__ = "notes"
    __table_args__ = (
        UniqueConstraint("ticket", name="uq_notes_ticket"),
        UniqueConstraint("user_id", "title", name="uq_notes_user_id_title"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket = Column(Integer, nullable=False)
    user_id = Column(
        Integer,
        ForeignKey("users.id", name="fk_notes_user_id"),
        nullable=False,
        index=True,
    )
    title = Column(String(TITLE_MAX_LEN), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LEN), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    priority = Column(Boolean, nullable=False, default=False)
    completed = Column(Boolean, nullable=False, default=False)

    owner = relationship("User", lazy="joined")

    @property
    def username(self) -> str | None:
        return self.owner.username if self.owner is not None else None
