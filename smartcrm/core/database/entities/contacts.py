"""
Contact entity model.

Table: contacts
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now_naive


class ContactBase(Base):
    """Base fields for a contact."""

    company_id: Optional[str] = Field(default=None, foreign_key="companies.id", index=True)
    first_name: str = Field(description="Given name")
    last_name: Optional[str] = Field(default=None, description="Family name")
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = None
    job_title: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = Field(default=None, description="Short free-text remark kept on the contact card")


class Contact(ContactBase, table=True):
    """Persistent contact (a person we have a relationship with)."""

    __tablename__ = "contacts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive, index=True, sa_column_kwargs={"onupdate": utc_now_naive})

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()

    def __repr__(self) -> str:
        return f"Contact(id={self.id}, name={self.full_name})"
