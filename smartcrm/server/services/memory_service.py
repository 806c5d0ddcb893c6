"""
Relationship memory service.

Builds a short narrative of the relationship with a contact from the contact's
interactions, notes and shared documents, using the language model to
summarize.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from smartcrm.ai import AIServiceError, StructuredExtractor
from smartcrm.core.database.entities import ContactDocument, Interaction, Note
from smartcrm.core.logging_config import get_logger
from smartcrm.server.schemas import MemoryContext

logger = get_logger(__name__)

MAX_INTERACTIONS = 15
MAX_NOTES = 5

EMPTY_MEMORY = MemoryContext(
    narrative_summary="No relationship history recorded yet.",
    key_facts=[],
    last_interaction_context="N/A",
)

UNAVAILABLE_MEMORY = MemoryContext(
    narrative_summary="Unable to generate summary.",
    key_facts=[],
    last_interaction_context="Error analyzing history.",
)

MEMORY_PROMPT = """Analyze this relationship history and produce a memory summary.

History:
{history}

Task:
1. narrative_summary: a 2-3 sentence story of the relationship so far.
2. key_facts: 3-5 lasting facts about the person (preferences, family, background), only if present.
3. last_interaction_context: one sentence on where things were left."""


def _format_date(value) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def build_history_context(
    interactions: Sequence[Interaction],
    notes: Sequence[Note],
    documents: Sequence[ContactDocument],
) -> str:
    """
    Render the history text given to the model.

    ``interactions`` and ``notes`` are expected newest first; only the most
    recent 15 interactions and 5 notes are included.
    """
    lines = ["Interactions:"]
    for interaction in interactions[:MAX_INTERACTIONS]:
        kind = getattr(interaction.interaction_type, "value", interaction.interaction_type)
        lines.append(f"- {_format_date(interaction.interaction_date)}: {kind} - {interaction.summary or ''}")

    lines.append("")
    lines.append("Notes:")
    for note in notes[:MAX_NOTES]:
        lines.append(f"- {note.content}")

    if documents:
        lines.append("")
        lines.append("Shared Documents:")
        for document in documents:
            lines.append(f"- {document.name}: {document.summary or 'No summary'}")

    return "\n".join(lines) + "\n"


class MemoryService:
    """Service producing relationship memory for contacts."""

    def __init__(self, session: AsyncSession, extractor: StructuredExtractor):
        """Initialize memory service with database session and AI extractor."""
        self.session = session
        self.extractor = extractor

    async def get_relationship_memory(self, contact_id: str) -> MemoryContext:
        """
        Get a relationship memory for a contact.

        Args:
            contact_id: The contact identifier

        Returns:
            The generated memory; the empty memory when there is no history,
            or the degraded memory when the language model cannot be used.
            Database errors propagate.
        """
        interactions = await self._fetch_interactions(contact_id)
        notes = await self._fetch_notes(contact_id)
        documents = await self._fetch_documents(contact_id)

        if not interactions and not notes:
            logger.debug(f"No history for contact {contact_id}, returning empty memory")
            return EMPTY_MEMORY.model_copy(deep=True)

        history = build_history_context(interactions, notes, documents)
        try:
            memory = await self.extractor.extract(MEMORY_PROMPT.format(history=history), MemoryContext)
        except AIServiceError as e:
            logger.warning(f"Memory generation for contact {contact_id} fell back: {e}")
            return UNAVAILABLE_MEMORY.model_copy(deep=True)

        logger.info(
            f"Generated memory for contact {contact_id} from {len(interactions)} interactions, "
            f"{len(notes)} notes and {len(documents)} documents"
        )
        return memory

    async def _fetch_interactions(self, contact_id: str) -> list[Interaction]:
        statement = (
            select(Interaction)
            .where(Interaction.contact_id == contact_id)
            .order_by(Interaction.interaction_date.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def _fetch_notes(self, contact_id: str) -> list[Note]:
        statement = (
            select(Note)
            .where(Note.contact_id == contact_id)
            .order_by(Note.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def _fetch_documents(self, contact_id: str) -> list[ContactDocument]:
        statement = select(ContactDocument).where(ContactDocument.contact_id == contact_id)
        result = await self.session.execute(statement)
        return list(result.scalars().all())
