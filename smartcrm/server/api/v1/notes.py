"""
Notes API Endpoints.

Provides the two smart-note actions (process and save), which answer with an
``ActionResult`` envelope, and plain CRUD endpoints for notes.

Every change to a note linked to a contact or event is announced on the sync
channel so other open tabs can refresh.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from smartcrm.core.database import get_session
from smartcrm.core.database.entities import Note, NoteType
from smartcrm.core.logging_config import get_logger
from smartcrm.core.monitoring import log_action, log_error
from smartcrm.server.schemas import (
    ActionResult,
    NoteCreate,
    NoteRead,
    NoteUpdate,
    SmartNoteRequest,
    SuggestedNote,
    SyncEventType,
)
from smartcrm.server.services.deps import ClientIdHeader, ExtractorDep, SyncChannelDep
from smartcrm.server.services.note_service import NoteService
from smartcrm.server.services.sync_channel import SyncChannel, emit_sync_event

logger = get_logger(__name__)
router = APIRouter()

PROCESS_ERROR = "Failed to process note"
SAVE_ERROR = "Failed to save note"


def notify_note_change(note: Note, source: str, channel: SyncChannel, sender: Optional[str]) -> None:
    """Announce a note change for its contact and event."""
    if note.contact_id:
        emit_sync_event(
            SyncEventType.CONTACT_UPDATED,
            {"contact_id": note.contact_id, "note_id": note.id},
            source,
            sender=sender,
            channel=channel,
        )
    if note.event_id:
        emit_sync_event(
            SyncEventType.EVENT_UPDATED,
            {"event_id": note.event_id, "note_id": note.id},
            source,
            sender=sender,
            channel=channel,
        )


# Smart note actions
@router.post(
    "/smart/process",
    response_model=ActionResult,
    response_model_exclude_none=True,
    summary="Process Smart Note",
    description="Tidy a raw note and link it to a known contact and event.",
    response_description="Action envelope whose data is a SuggestedNote.",
)
async def process_smart_note(
    body: SmartNoteRequest,
    extractor: ExtractorDep,
    session: AsyncSession = Depends(get_session),
) -> ActionResult:
    """
    Process a smart note.

    The suggestion is not saved; the client shows it for review and then calls
    the save action.

    - **content**: The raw note text.
    """
    try:
        suggestion = await NoteService(session, extractor).process_smart_note(body.content)
    except Exception as e:
        logger.error(f"Failed to process smart note: {e}", exc_info=True)
        log_error(error_type=type(e).__name__, error_message=str(e), context={"action": "process_smart_note"})
        log_action("process_smart_note", success=False)
        return ActionResult.fail(PROCESS_ERROR)

    log_action("process_smart_note", success=True, confidence=suggestion.confidence)
    return ActionResult.ok(suggestion.model_dump())


@router.post(
    "/smart",
    response_model=ActionResult,
    response_model_exclude_none=True,
    summary="Save Smart Note",
    description="Persist a reviewed smart note suggestion.",
    response_description="Action envelope whose data is the saved note.",
)
async def save_smart_note(
    note: SuggestedNote,
    request: Request,
    extractor: ExtractorDep,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> ActionResult:
    """
    Save a smart note.

    Stores ``formatted_content`` as a ``smart_text`` note linked to the
    suggested contact and event.
    """
    try:
        saved = await NoteService(session, extractor).save_note(note)
    except Exception as e:
        logger.error(f"Failed to save smart note: {e}", exc_info=True)
        log_error(
            error_type=type(e).__name__,
            error_message=str(e),
            context={"action": "save_smart_note", "contact_id": note.contact_id, "event_id": note.event_id},
        )
        log_action("save_smart_note", success=False)
        return ActionResult.fail(SAVE_ERROR)

    notify_note_change(saved, request.url.path, channel, client_id)
    log_action("save_smart_note", success=True, note_id=saved.id)
    return ActionResult.ok(NoteRead.model_validate(saved).model_dump(mode="json"))


# Note CRUD endpoints
@router.post(
    "",
    response_model=NoteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Note",
    description="Create a text, voice or photo note. Voice recordings sent as audio_data are kept in source_url.",
)
async def create_note(
    note_in: NoteCreate,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> NoteRead:
    """
    Create a note.

    - **content**: Note body.
    - **note_type**: text, voice, photo or smart_text.
    - **audio_data**: Base64 audio for voice notes (optional).
    """
    data = note_in.model_dump(exclude={"audio_data"})
    if note_in.note_type == NoteType.VOICE and note_in.audio_data:
        data["source_url"] = note_in.audio_data

    note = Note.model_validate(data)
    session.add(note)
    await session.commit()
    await session.refresh(note)

    notify_note_change(note, request.url.path, channel, client_id)
    return NoteRead.model_validate(note)


@router.get(
    "",
    response_model=list[NoteRead],
    summary="List Notes",
    description="List notes newest first, optionally filtered by contact or event.",
)
async def list_notes(
    contact_id: Optional[str] = None,
    event_id: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    session: AsyncSession = Depends(get_session),
) -> list[NoteRead]:
    """
    List notes.

    - **contact_id**: Only notes about this contact.
    - **event_id**: Only notes taken at this event.
    """
    statement = select(Note)
    if contact_id:
        statement = statement.where(Note.contact_id == contact_id)
    if event_id:
        statement = statement.where(Note.event_id == event_id)
    statement = statement.order_by(Note.created_at.desc()).offset(offset).limit(limit)  # type: ignore[attr-defined]
    result = await session.execute(statement)
    return [NoteRead.model_validate(n) for n in result.scalars().all()]


@router.patch(
    "/{note_id}",
    response_model=NoteRead,
    summary="Update Note",
    description="Partially update a note. Only provided fields are changed.",
    responses={404: {"description": "Note not found"}},
)
async def update_note(
    note_id: str,
    note_update: NoteUpdate,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> NoteRead:
    """
    Update a note.

    - **note_id**: The note to update.
    """
    note = await session.get(Note, note_id)
    if not note:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Note {note_id} not found",
        )

    for key, value in note_update.model_dump(exclude_unset=True).items():
        setattr(note, key, value)

    session.add(note)
    await session.commit()
    await session.refresh(note)

    notify_note_change(note, request.url.path, channel, client_id)
    return NoteRead.model_validate(note)
