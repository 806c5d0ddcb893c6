"""
Sync Channel API Endpoints.

Lets browser tabs listen to and publish on the cross-tab sync channel:

- ``GET /events`` streams ``SyncEvent`` JSON objects via Server-Sent Events.
- ``POST /events`` publishes an event to every other listening tab.
- ``GET /channel`` reports the channel name and number of listeners.
"""

import asyncio
from typing import AsyncGenerator, Optional

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from smartcrm.core.logging_config import get_logger
from smartcrm.server.core.config import settings
from smartcrm.server.schemas import SyncChannelInfo, SyncEvent, SyncPublishResult
from smartcrm.server.services.deps import SyncChannelDep
from smartcrm.server.services.sync_channel import SyncChannel

logger = get_logger(__name__)
router = APIRouter()


async def sync_event_stream(
    channel: SyncChannel,
    request: Request,
    client_id: Optional[str] = None,
    poll_interval: Optional[float] = None,
) -> AsyncGenerator[str, None]:
    """
    Yield serialized events for one listener until the client disconnects.

    The listener is registered before the first event is awaited and removed
    when the generator is closed.
    """
    interval = poll_interval if poll_interval is not None else settings.sync.poll_interval_seconds
    queue = channel.subscribe(client_id)
    try:
        while True:
            if await request.is_disconnected():
                logger.info(f"Sync listener {client_id} disconnected from channel '{channel.name}'")
                break
            try:
                event = await asyncio.wait_for(queue.get(), timeout=interval)
            except asyncio.TimeoutError:
                continue
            yield event.model_dump_json()
    finally:
        channel.unsubscribe(queue)


@router.get(
    "/events",
    summary="Stream Sync Events",
    description="Subscribe to a Server-Sent Events stream of change notifications.",
    response_description="A stream of SyncEvent objects.",
    responses={
        200: {
            "description": "SSE stream established",
            "content": {"text/event-stream": {"example": 'data: {"type": "CONTACT_UPDATED", "data": null, "source": "/"}\n\n'}},
        }
    },
)
async def stream_sync_events(request: Request, channel: SyncChannelDep, client_id: Optional[str] = None):
    """
    Stream sync events.

    - **client_id**: Identifier of this tab. Events the same tab publishes are not echoed back.
    """
    logger.info(f"Sync listener {client_id} connected to channel '{channel.name}'")
    return EventSourceResponse(sync_event_stream(channel, request, client_id))


@router.post(
    "/events",
    response_model=SyncPublishResult,
    summary="Publish Sync Event",
    description="Broadcast a change notification to all other listening tabs.",
)
async def publish_sync_event(
    event: SyncEvent,
    channel: SyncChannelDep,
    client_id: Optional[str] = None,
) -> SyncPublishResult:
    """
    Publish a sync event.

    - **type**: CONTACT_UPDATED, EVENT_UPDATED or STATS_UPDATED.
    - **data**: Optional details.
    - **source**: Path of the page that made the change.
    - **client_id**: Identifier of the publishing tab (excluded from delivery).
    """
    delivered = channel.publish(event, sender=client_id)
    return SyncPublishResult(delivered=delivered)


@router.get(
    "/channel",
    response_model=SyncChannelInfo,
    summary="Get Sync Channel Info",
)
async def get_channel_info(channel: SyncChannelDep) -> SyncChannelInfo:
    """Return the channel name and current number of listeners."""
    return SyncChannelInfo(name=channel.name, subscribers=channel.subscriber_count)
