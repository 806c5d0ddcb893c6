"""
Relationship Memory API Endpoints.

Exposes the relationship-memory action for a contact. Like every action, it
answers with HTTP 200 and an ``ActionResult`` envelope; failures are logged
and reported as ``success: false`` with a fixed message.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smartcrm.core.database import get_session
from smartcrm.core.logging_config import get_logger
from smartcrm.core.monitoring import log_action, log_error
from smartcrm.server.schemas import ActionResult
from smartcrm.server.services.deps import ExtractorDep
from smartcrm.server.services.memory_service import MemoryService

logger = get_logger(__name__)
router = APIRouter()

MEMORY_ERROR = "Failed to generate memory"


@router.get(
    "/{contact_id}/memory",
    response_model=ActionResult,
    response_model_exclude_none=True,
    summary="Get Relationship Memory",
    description="Summarize the relationship with a contact from its interactions, notes and documents.",
    response_description="Action envelope whose data is a MemoryContext.",
)
async def get_relationship_memory(
    contact_id: str,
    extractor: ExtractorDep,
    session: AsyncSession = Depends(get_session),
) -> ActionResult:
    """
    Get relationship memory.

    Returns a narrative summary, key facts and the context of the last
    interaction for the contact.

    - **contact_id**: The contact to summarize.
    """
    try:
        memory = await MemoryService(session, extractor).get_relationship_memory(contact_id)
    except Exception as e:
        logger.error(f"Failed to get relationship memory for contact {contact_id}: {e}", exc_info=True)
        log_error(error_type=type(e).__name__, error_message=str(e), context={"contact_id": contact_id})
        log_action("get_relationship_memory", success=False, contact_id=contact_id)
        return ActionResult.fail(MEMORY_ERROR)

    log_action("get_relationship_memory", success=True, contact_id=contact_id)
    return ActionResult.ok(memory.model_dump())
