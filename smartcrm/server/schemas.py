"""
API Schemas.

This module contains Pydantic models used for API request bodies and response validation.
These schemas define the interface contract between the browser client and the server.
"""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from smartcrm.core.database.entities import (
    CompanyBase,
    ContactBase,
    ContactDocumentBase,
    EventBase,
    EventStatus,
    EventType,
    InteractionBase,
    InteractionType,
    NoteBase,
    NoteType,
)

# =====================================================================
# Action envelope
# =====================================================================


class ActionResult(BaseModel):
    """
    Uniform response of the relationship-memory and smart-note actions.

    Exactly one of ``data`` and ``error`` is set: ``data`` when ``success`` is
    true, ``error`` (a fixed user-facing message) when it is false.
    """

    success: bool = Field(..., description="Whether the action succeeded.")
    data: Optional[Any] = Field(default=None, description="Action payload on success.")
    error: Optional[str] = Field(default=None, description="User-facing error message on failure.")

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)


# =====================================================================
# Relationship memory
# =====================================================================


class MemoryContext(BaseModel):
    """
    AI-generated summary of the relationship with a contact.
    """

    narrative_summary: str = Field(
        ...,
        description="A 2-3 sentence story of the relationship so far.",
        examples=["Met Dana at the Berlin expo; two follow-up calls about the pilot since then."],
    )
    key_facts: List[str] = Field(
        default_factory=list,
        description="3-5 lasting facts about the person (preferences, family, background).",
    )
    last_interaction_context: str = Field(
        ...,
        description="One sentence describing where things were left.",
    )


# =====================================================================
# Smart notes
# =====================================================================


class SmartNoteRequest(BaseModel):
    """Raw note text to be analysed."""

    content: str = Field(..., description="Free-text note as typed or dictated by the user.")

    model_config = ConfigDict(
        json_schema_extra={"example": {"content": "met jon from acme at the expo, wants pricing by friday"}}
    )


class NoteAnalysis(BaseModel):
    """Structured answer requested from the language model for a smart note."""

    formatted_content: str = Field(..., description="The note rewritten with typos and grammar fixed.")
    contact_id: Optional[str] = Field(default=None, description="Id of the matching contact from the context, if any.")
    event_id: Optional[str] = Field(default=None, description="Id of the matching event from the context, if any.")
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Confidence of the linking, 0-1.")


class SuggestedNote(BaseModel):
    """
    A processed smart note awaiting the user's review.

    Returned by the processing action and sent back, possibly edited, to the
    save action.
    """

    original_content: str
    formatted_content: str
    contact_id: Optional[str] = None
    contact_name: Optional[str] = None
    event_id: Optional[str] = None
    event_name: Optional[str] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


# =====================================================================
# Sync channel
# =====================================================================


class SyncEventType(str, Enum):
    """Kinds of change notifications broadcast to open tabs."""

    CONTACT_UPDATED = "CONTACT_UPDATED"
    EVENT_UPDATED = "EVENT_UPDATED"
    STATS_UPDATED = "STATS_UPDATED"


class SyncEvent(BaseModel):
    """A change notification carried on the sync channel."""

    type: SyncEventType = Field(..., description="What kind of data changed.")
    data: Optional[Any] = Field(default=None, description="Optional details, e.g. the changed contact id.")
    source: Optional[str] = Field(default=None, description="Path of the page or endpoint that emitted the event.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"type": "CONTACT_UPDATED", "data": {"contact_id": "c-1"}, "source": "/contacts/c-1"}
        }
    )


class SyncPublishResult(BaseModel):
    delivered: int = Field(..., description="Number of listeners the event was queued for.")


class SyncChannelInfo(BaseModel):
    name: str
    subscribers: int


# =====================================================================
# CRM records
# =====================================================================


class PartialUpdate(BaseModel):
    """
    Base for PATCH bodies: omitted fields stay unchanged.

    Fields listed in ``required_fields`` map to NOT NULL columns, so an explicit
    ``null`` for them is rejected with a validation error.
    """

    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def reject_null_required(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulled = [name for name in cls.required_fields if name in data and data[name] is None]
            if nulled:
                raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return data


class CompanyCreate(CompanyBase):
    """Schema for creating a company."""


class CompanyRead(CompanyBase):
    id: str
    created_at: datetime
    updated_at: datetime


class ContactCreate(ContactBase):
    """Schema for creating a contact."""


class ContactRead(ContactBase):
    id: str
    created_at: datetime
    updated_at: datetime


class ContactUpdate(PartialUpdate):
    """Schema for updating a contact. Only provided fields are changed."""

    required_fields: ClassVar[tuple[str, ...]] = ("first_name",)

    company_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None


class EventCreate(EventBase):
    """Schema for creating an event."""


class EventRead(EventBase):
    id: str
    created_at: datetime
    updated_at: datetime


class EventUpdate(PartialUpdate):
    """Schema for updating an event. Only provided fields are changed."""

    required_fields: ClassVar[tuple[str, ...]] = ("name", "start_date", "event_type", "status")

    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    event_type: Optional[EventType] = None
    status: Optional[EventStatus] = None


class InteractionCreate(BaseModel):
    """Schema for recording an interaction; the contact comes from the URL."""

    event_id: Optional[str] = None
    interaction_type: InteractionType
    interaction_date: Optional[datetime] = None
    summary: Optional[str] = None


class InteractionRead(InteractionBase):
    id: str
    created_at: datetime
    updated_at: datetime


class DocumentCreate(BaseModel):
    """Schema for attaching a document summary to a contact."""

    name: str
    file_type: Optional[str] = None
    storage_path: Optional[str] = None
    summary: Optional[str] = None


class DocumentRead(ContactDocumentBase):
    id: str
    created_at: datetime


class NoteCreate(BaseModel):
    """
    Schema for creating a note.

    Voice notes may carry their recording as base64 in ``audio_data``; it is
    stored in ``source_url``.
    """

    contact_id: Optional[str] = None
    event_id: Optional[str] = None
    interaction_id: Optional[str] = None
    content: str
    note_type: NoteType = NoteType.TEXT
    source_url: Optional[str] = None
    audio_data: Optional[str] = Field(default=None, description="Base64 audio for voice notes.")


class NoteUpdate(PartialUpdate):
    """Schema for updating a note. Only provided fields are changed."""

    required_fields: ClassVar[tuple[str, ...]] = ("content", "note_type")

    contact_id: Optional[str] = None
    event_id: Optional[str] = None
    content: Optional[str] = None
    note_type: Optional[NoteType] = None
    source_url: Optional[str] = None


class NoteRead(NoteBase):
    id: str
    created_at: datetime
    updated_at: datetime


__all__ = [
    "ActionResult",
    "CompanyCreate",
    "CompanyRead",
    "ContactCreate",
    "ContactRead",
    "ContactUpdate",
    "DocumentCreate",
    "DocumentRead",
    "EventCreate",
    "EventRead",
    "EventUpdate",
    "EventStatus",
    "EventType",
    "InteractionCreate",
    "InteractionRead",
    "MemoryContext",
    "NoteAnalysis",
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    "PartialUpdate",
    "SmartNoteRequest",
    "SuggestedNote",
    "SyncChannelInfo",
    "SyncEvent",
    "SyncEventType",
    "SyncPublishResult",
]
