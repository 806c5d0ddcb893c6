"""
Note entity model.

Table: notes
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class NoteType(str, Enum):
    """How the note was captured."""

    TEXT = "text"
    VOICE = "voice"
    PHOTO = "photo"
    SMART_TEXT = "smart_text"


class NoteBase(Base):
    """Base fields for a note."""

    contact_id: Optional[str] = Field(default=None, foreign_key="contacts.id", index=True)
    event_id: Optional[str] = Field(default=None, foreign_key="events.id", index=True)
    interaction_id: Optional[str] = Field(default=None, foreign_key="interactions.id")
    content: str = Field(sa_type=Text, description="Note body")
    note_type: NoteType = Field(default=NoteType.TEXT)
    source_url: Optional[str] = Field(
        default=None,
        sa_type=Text,
        description="Attachment location; voice notes store their base64 audio here",
    )


class Note(NoteBase, table=True):
    """Persistent note record."""

    __tablename__ = "notes"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    def __repr__(self) -> str:
        return f"Note(id={self.id}, type={self.note_type}, contact={self.contact_id})"
