"""
Service Dependencies.

Annotated dependency aliases for API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header

from smartcrm.ai import StructuredExtractor, get_extractor
from smartcrm.server.services.sync_channel import SyncChannel, get_sync_channel

ExtractorDep = Annotated[StructuredExtractor, Depends(get_extractor)]
SyncChannelDep = Annotated[SyncChannel, Depends(get_sync_channel)]

# Identifier of the browser tab making the request; events it causes are not echoed back to it.
ClientIdHeader = Annotated[Optional[str], Header(alias="X-Client-ID")]
