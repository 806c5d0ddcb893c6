"""
Smart note service.

Turns a raw, quickly typed note into a reviewed suggestion: the language model
tidies the wording and links the note to one of the user's recent contacts and
events. Saving persists the reviewed suggestion as a ``smart_text`` note.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from smartcrm.ai import AIServiceError, StructuredExtractor
from smartcrm.core.database.entities import Company, Contact, Event, Note, NoteType
from smartcrm.core.logging_config import get_logger
from smartcrm.server.schemas import NoteAnalysis, SuggestedNote

logger = get_logger(__name__)

CONTACT_CONTEXT_LIMIT = 50
EVENT_CONTEXT_LIMIT = 10
DEFAULT_CONFIDENCE = 0.8

SMART_NOTE_PROMPT = """Analyze this note and link it to the correct contact and event from the provided context.

Note: "{content}"

Context Data:
{context}

Task:
1. Identify the contact mentioned (fuzzy match on name or company).
2. Identify the event mentioned (or an implied "today's meeting" if relevant).
3. If no specific contact or event matches, leave that id empty.
4. Rewrite the note so it reads professionally (fix typos and grammar) as formatted_content.
5. Give your confidence in the linking between 0 and 1."""


class NoteService:
    """Service for processing and saving smart notes."""

    def __init__(self, session: AsyncSession, extractor: StructuredExtractor):
        """Initialize note service with database session and AI extractor."""
        self.session = session
        self.extractor = extractor

    async def build_context(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Collect the contacts and events a note may refer to.

        Returns:
            ``{"contacts": [{id, name, company}], "events": [{id, name, date}]}``
            with up to 50 recently updated contacts and the 10 latest events.
        """
        contact_statement = (
            select(Contact, Company.name)
            .join(Company, Contact.company_id == Company.id, isouter=True)
            .order_by(Contact.updated_at.desc())  # type: ignore[attr-defined]
            .limit(CONTACT_CONTEXT_LIMIT)
        )
        contact_rows = (await self.session.execute(contact_statement)).all()

        event_statement = (
            select(Event)
            .order_by(Event.start_date.desc())  # type: ignore[attr-defined]
            .limit(EVENT_CONTEXT_LIMIT)
        )
        events = (await self.session.execute(event_statement)).scalars().all()

        return {
            "contacts": [
                {"id": contact.id, "name": contact.full_name, "company": company_name}
                for contact, company_name in contact_rows
            ],
            "events": [
                {"id": event.id, "name": event.name, "date": event.start_date.isoformat()} for event in events
            ],
        }

    async def process_smart_note(self, content: str) -> SuggestedNote:
        """
        Process a raw note to extract its contact and event.

        Args:
            content: The note text as entered by the user

        Returns:
            A suggestion for the user to review. When the language model cannot
            be used, the suggestion echoes the note unchanged with no links and
            zero confidence. Database errors propagate.
        """
        context = await self.build_context()
        prompt = SMART_NOTE_PROMPT.format(content=content, context=json.dumps(context))

        try:
            analysis = await self.extractor.extract(prompt, NoteAnalysis)
        except AIServiceError as e:
            logger.warning(f"Smart note processing fell back: {e}")
            return SuggestedNote(original_content=content, formatted_content=content, confidence=0.0)

        contact = _find_by_id(context["contacts"], analysis.contact_id)
        event = _find_by_id(context["events"], analysis.event_id)

        if analysis.contact_id and contact is None:
            logger.debug(f"Discarding unknown contact id suggested by model: {analysis.contact_id}")
        if analysis.event_id and event is None:
            logger.debug(f"Discarding unknown event id suggested by model: {analysis.event_id}")

        suggestion = SuggestedNote(
            original_content=content,
            formatted_content=analysis.formatted_content,
            contact_id=contact["id"] if contact else None,
            contact_name=_display_name(contact) if contact else None,
            event_id=event["id"] if event else None,
            event_name=event["name"] if event else None,
            confidence=analysis.confidence or DEFAULT_CONFIDENCE,
        )
        logger.info(
            f"Processed smart note: contact={suggestion.contact_id}, event={suggestion.event_id}, "
            f"confidence={suggestion.confidence}"
        )
        return suggestion

    async def save_note(self, note: SuggestedNote) -> Note:
        """
        Persist a reviewed smart note.

        Args:
            note: The suggestion as accepted (and possibly edited) by the user

        Returns:
            The stored ``Note``
        """
        saved = Note(
            contact_id=note.contact_id,
            event_id=note.event_id,
            content=note.formatted_content,
            note_type=NoteType.SMART_TEXT,
        )
        self.session.add(saved)
        await self.session.commit()
        await self.session.refresh(saved)
        logger.info(f"Saved smart note {saved.id} for contact {saved.contact_id}")
        return saved


def _find_by_id(items: List[Dict[str, Any]], item_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if not item_id:
        return None
    return next((item for item in items if item["id"] == item_id), None)


def _display_name(contact: Dict[str, Any]) -> str:
    if contact.get("company"):
        return f"{contact['name']} ({contact['company']})"
    return contact["name"]
