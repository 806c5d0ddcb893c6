"""
Company entity model.

Table: companies
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now_naive


class CompanyBase(Base):
    """Base fields for a company."""

    name: str = Field(index=True, description="Company name")
    domain: Optional[str] = Field(default=None, description="Primary web domain")
    website: Optional[str] = Field(default=None, description="Website URL")
    industry: Optional[str] = Field(default=None, description="Industry")
    description: Optional[str] = Field(default=None, description="Free-text description")
    location: Optional[str] = Field(default=None, description="Headquarters location")


class Company(CompanyBase, table=True):
    """Persistent company record."""

    __tablename__ = "companies"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now_naive)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    def __repr__(self) -> str:
        return f"Company(id={self.id}, name={self.name})"
