"""
Interaction entity model.

An interaction is a dated touch point with a contact (a card capture, a
meeting, an email or a note) and is the main input of relationship memory.

Table: interactions
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now_naive


class InteractionType(str, Enum):
    CAPTURE = "capture"
    MEETING = "meeting"
    EMAIL = "email"
    NOTE = "note"


class InteractionBase(Base):
    """Base fields for an interaction."""

    contact_id: Optional[str] = Field(default=None, foreign_key="contacts.id", index=True)
    event_id: Optional[str] = Field(default=None, foreign_key="events.id", index=True)
    interaction_type: InteractionType = Field(description="Kind of touch point")
    interaction_date: datetime = Field(default_factory=utc_now_naive, index=True)
    summary: Optional[str] = Field(default=None, description="One-line summary")


class Interaction(InteractionBase, table=True):
    """Persistent interaction record."""

    __tablename__ = "interactions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})
