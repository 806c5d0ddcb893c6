"""
Cross-tab sync channel.

A named, in-process broadcast channel used to tell every open browser tab that
CRM data changed. Each listening tab holds an ``asyncio.Queue`` (fed to it over
Server-Sent Events); publishing puts the event on every queue except the
sender's own, the way a browser ``BroadcastChannel`` does not echo to the
posting context.

The channel is a notification shim only: events live in memory, are not
acknowledged, and a tab that is not listening when an event is published
simply misses it.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from smartcrm.core.logging_config import get_logger
from smartcrm.server.core.config import settings
from smartcrm.server.schemas import SyncEvent, SyncEventType

logger = get_logger(__name__)


class SyncChannel:
    """Publish/subscribe fan-out of ``SyncEvent`` objects to listener queues."""

    def __init__(self, name: str = "crm_sync") -> None:
        self.name = name
        self._subscribers: Dict[asyncio.Queue, Optional[str]] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, client_id: Optional[str] = None) -> asyncio.Queue:
        """
        Register a listener.

        Args:
            client_id: Identifier of the listening tab. Events published with
                the same ``sender`` are not delivered back to it.

        Returns:
            The queue the listener should read events from.
        """
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers[queue] = client_id
        logger.debug(f"Sync channel '{self.name}': subscribed client={client_id}, total={self.subscriber_count}")
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        """Remove a listener. Unknown queues are ignored."""
        if queue in self._subscribers:
            del self._subscribers[queue]
            logger.debug(f"Sync channel '{self.name}': unsubscribed, total={self.subscriber_count}")

    def publish(self, event: SyncEvent, sender: Optional[str] = None) -> int:
        """
        Broadcast an event to all listeners except the sender.

        Args:
            event: The notification to deliver.
            sender: ``client_id`` of the publishing tab, if any.

        Returns:
            Number of listeners the event was queued for.
        """
        delivered = 0
        for queue, client_id in list(self._subscribers.items()):
            if sender is not None and client_id == sender:
                continue
            queue.put_nowait(event)
            delivered += 1
        logger.debug(f"Sync channel '{self.name}': {event.type.value} from {event.source} delivered to {delivered}")
        return delivered


sync_channel = SyncChannel(settings.sync.channel_name)


def get_sync_channel() -> SyncChannel:
    """Return the process-wide sync channel."""
    return sync_channel


def emit_sync_event(
    type: SyncEventType,
    data: Any = None,
    source: Optional[str] = None,
    *,
    sender: Optional[str] = None,
    channel: Optional[SyncChannel] = None,
) -> int:
    """
    Build a ``SyncEvent`` and publish it.

    Args:
        type: Kind of change.
        data: Optional details, e.g. ``{"contact_id": ...}``.
        source: Path of the page or endpoint that caused the change.
        sender: ``client_id`` to exclude from delivery.
        channel: Channel to publish on; defaults to the process-wide channel.

    Returns:
        Number of listeners the event was queued for.
    """
    target = channel if channel is not None else sync_channel
    return target.publish(SyncEvent(type=type, data=data, source=source), sender=sender)
