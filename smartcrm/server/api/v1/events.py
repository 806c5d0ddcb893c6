"""
Events API Endpoints.

Events are the exhibitions, conferences and meetings where contacts are met.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from smartcrm.core.database import get_session, utc_now_naive
from smartcrm.core.database.entities import Event, Interaction, Note
from smartcrm.server.schemas import EventCreate, EventRead, EventUpdate, SyncEventType
from smartcrm.server.services.deps import ClientIdHeader, SyncChannelDep
from smartcrm.server.services.sync_channel import emit_sync_event

router = APIRouter()


async def _get_event_or_404(session: AsyncSession, event_id: str) -> Event:
    event = await session.get(Event, event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event


@router.post(
    "",
    response_model=EventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
)
async def create_event(
    event_in: EventCreate,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> EventRead:
    """
    Create an event.

    Announces ``EVENT_UPDATED``.
    """
    event = Event.model_validate(event_in)
    session.add(event)
    await session.commit()
    await session.refresh(event)

    emit_sync_event(
        SyncEventType.EVENT_UPDATED,
        {"event_id": event.id},
        request.url.path,
        sender=client_id,
        channel=channel,
    )
    return EventRead.model_validate(event)


@router.get(
    "",
    response_model=list[EventRead],
    summary="List Events",
    description="List events, latest start date first.",
)
async def list_events(
    limit: int = 100,
    offset: int = 0,
    session: AsyncSession = Depends(get_session),
) -> list[EventRead]:
    """List events."""
    statement = select(Event).order_by(Event.start_date.desc()).offset(offset).limit(limit)  # type: ignore[attr-defined]
    result = await session.execute(statement)
    return [EventRead.model_validate(e) for e in result.scalars().all()]


@router.get(
    "/{event_id}",
    response_model=EventRead,
    summary="Get Event",
    responses={404: {"description": "Event not found"}},
)
async def get_event(event_id: str, session: AsyncSession = Depends(get_session)) -> EventRead:
    """Get an event by its id."""
    return EventRead.model_validate(await _get_event_or_404(session, event_id))


@router.patch(
    "/{event_id}",
    response_model=EventRead,
    summary="Update Event",
    description="Partially update an event. Only provided fields are changed.",
    responses={404: {"description": "Event not found"}},
)
async def update_event(
    event_id: str,
    event_update: EventUpdate,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> EventRead:
    """
    Update an event.

    Announces ``EVENT_UPDATED``.
    """
    event = await _get_event_or_404(session, event_id)

    for key, value in event_update.model_dump(exclude_unset=True).items():
        setattr(event, key, value)
    event.updated_at = utc_now_naive()

    session.add(event)
    await session.commit()
    await session.refresh(event)

    emit_sync_event(
        SyncEventType.EVENT_UPDATED,
        {"event_id": event.id},
        request.url.path,
        sender=client_id,
        channel=channel,
    )
    return EventRead.model_validate(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Event",
    description="Permanently delete an event. Its notes and interactions are kept and unlinked.",
    responses={
        204: {"description": "Event deleted successfully"},
        404: {"description": "Event not found"},
    },
)
async def delete_event(
    event_id: str,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> None:
    """
    Delete an event.

    Announces ``EVENT_UPDATED``.
    """
    event = await _get_event_or_404(session, event_id)

    for model in (Interaction, Note):
        result = await session.execute(select(model).where(model.event_id == event_id))
        for row in result.scalars().all():
            row.event_id = None
            session.add(row)

    await session.delete(event)
    await session.commit()

    emit_sync_event(
        SyncEventType.EVENT_UPDATED,
        {"event_id": event_id},
        request.url.path,
        sender=client_id,
        channel=channel,
    )
