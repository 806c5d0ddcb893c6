"""
Event entity model.

Events are exhibitions, conferences and meetings where contacts are met.

Table: events
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now_naive


class EventType(str, Enum):
    EXHIBITION = "exhibition"
    CONFERENCE = "conference"
    MEETING = "meeting"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class EventBase(Base):
    """Base fields for an event."""

    name: str = Field(description="Event name")
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime = Field(index=True, description="Start of the event")
    end_date: Optional[datetime] = None
    event_type: EventType = Field(default=EventType.MEETING)
    status: EventStatus = Field(default=EventStatus.UPCOMING)


class Event(EventBase, table=True):
    """Persistent event record."""

    __tablename__ = "events"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    def __repr__(self) -> str:
        return f"Event(id={self.id}, name={self.name})"
