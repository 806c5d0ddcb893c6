"""
Business logic for the SmartCRM server.
"""

from .memory_service import MemoryService
from .note_service import NoteService
from .sync_channel import SyncChannel, emit_sync_event, get_sync_channel

__all__ = [
    "MemoryService",
    "NoteService",
    "SyncChannel",
    "emit_sync_event",
    "get_sync_channel",
]
