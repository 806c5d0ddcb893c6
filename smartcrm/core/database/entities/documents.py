"""
Contact document entity model.

Documents shared with a contact; only their name and summary feed into
relationship memory.

Table: contact_documents
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now_naive


class ContactDocumentBase(Base):
    """Base fields for a contact document."""

    contact_id: str = Field(foreign_key="contacts.id", index=True)
    name: str = Field(description="File name shown to the user")
    file_type: Optional[str] = None
    storage_path: Optional[str] = None
    summary: Optional[str] = Field(default=None, sa_type=Text)


class ContactDocument(ContactDocumentBase, table=True):
    """Persistent contact document record."""

    __tablename__ = "contact_documents"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now_naive)
