"""
Entity models, one module per table.
"""

from .companies import Company, CompanyBase
from .contacts import Contact, ContactBase
from .documents import ContactDocument, ContactDocumentBase
from .events import Event, EventBase, EventStatus, EventType
from .interactions import Interaction, InteractionBase, InteractionType
from .notes import Note, NoteBase, NoteType

__all__ = [
    "Company",
    "CompanyBase",
    "Contact",
    "ContactBase",
    "ContactDocument",
    "ContactDocumentBase",
    "Event",
    "EventBase",
    "EventStatus",
    "EventType",
    "Interaction",
    "InteractionBase",
    "InteractionType",
    "Note",
    "NoteBase",
    "NoteType",
]
