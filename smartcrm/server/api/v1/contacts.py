"""
Contacts API Endpoints.

CRUD for contacts plus the per-contact interaction and document records that
feed relationship memory.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from smartcrm.core.database import get_session, utc_now_naive
from smartcrm.core.database.entities import Contact, ContactDocument, Interaction, Note
from smartcrm.server.schemas import (
    ContactCreate,
    ContactRead,
    ContactUpdate,
    DocumentCreate,
    DocumentRead,
    InteractionCreate,
    InteractionRead,
    SyncEventType,
)
from smartcrm.server.services.deps import ClientIdHeader, SyncChannelDep
from smartcrm.server.services.sync_channel import emit_sync_event

router = APIRouter()


async def _get_contact_or_404(session: AsyncSession, contact_id: str) -> Contact:
    contact = await session.get(Contact, contact_id)
    if not contact:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Contact {contact_id} not found",
        )
    return contact


@router.post(
    "",
    response_model=ContactRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Contact",
    description="Create a new contact, optionally linked to a company.",
)
async def create_contact(
    contact_in: ContactCreate,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> ContactRead:
    """
    Create a contact.

    Announces ``STATS_UPDATED`` since dashboard counters change.
    """
    contact = Contact.model_validate(contact_in)
    session.add(contact)
    await session.commit()
    await session.refresh(contact)

    emit_sync_event(
        SyncEventType.STATS_UPDATED,
        {"contact_id": contact.id},
        request.url.path,
        sender=client_id,
        channel=channel,
    )
    return ContactRead.model_validate(contact)


@router.get(
    "",
    response_model=list[ContactRead],
    summary="List Contacts",
    description="List contacts, most recently updated first.",
)
async def list_contacts(
    company_id: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    session: AsyncSession = Depends(get_session),
) -> list[ContactRead]:
    """
    List contacts.

    - **company_id**: Only contacts working for this company.
    """
    statement = select(Contact)
    if company_id:
        statement = statement.where(Contact.company_id == company_id)
    statement = statement.order_by(Contact.updated_at.desc()).offset(offset).limit(limit)  # type: ignore[attr-defined]
    result = await session.execute(statement)
    return [ContactRead.model_validate(c) for c in result.scalars().all()]


@router.get(
    "/{contact_id}",
    response_model=ContactRead,
    summary="Get Contact",
    responses={404: {"description": "Contact not found"}},
)
async def get_contact(contact_id: str, session: AsyncSession = Depends(get_session)) -> ContactRead:
    """Get a contact by its id."""
    return ContactRead.model_validate(await _get_contact_or_404(session, contact_id))


@router.patch(
    "/{contact_id}",
    response_model=ContactRead,
    summary="Update Contact",
    description="Partially update a contact. Only provided fields are changed.",
    responses={404: {"description": "Contact not found"}},
)
async def update_contact(
    contact_id: str,
    contact_update: ContactUpdate,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> ContactRead:
    """
    Update a contact.

    Refreshes ``updated_at`` so the contact moves to the front of the smart
    note context. Announces ``CONTACT_UPDATED``.
    """
    contact = await _get_contact_or_404(session, contact_id)

    for key, value in contact_update.model_dump(exclude_unset=True).items():
        setattr(contact, key, value)
    contact.updated_at = utc_now_naive()

    session.add(contact)
    await session.commit()
    await session.refresh(contact)

    emit_sync_event(
        SyncEventType.CONTACT_UPDATED,
        {"contact_id": contact.id},
        request.url.path,
        sender=client_id,
        channel=channel,
    )
    return ContactRead.model_validate(contact)


@router.delete(
    "/{contact_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Contact",
    description="Permanently delete a contact with its interactions, notes and documents.",
    responses={
        204: {"description": "Contact deleted successfully"},
        404: {"description": "Contact not found"},
    },
)
async def delete_contact(
    contact_id: str,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> None:
    """
    Delete a contact.

    Announces ``STATS_UPDATED`` since dashboard counters change.
    """
    contact = await _get_contact_or_404(session, contact_id)

    for model in (Note, Interaction, ContactDocument):
        result = await session.execute(select(model).where(model.contact_id == contact_id))
        for row in result.scalars().all():
            await session.delete(row)

    await session.delete(contact)
    await session.commit()

    emit_sync_event(
        SyncEventType.STATS_UPDATED,
        {"contact_id": contact_id},
        request.url.path,
        sender=client_id,
        channel=channel,
    )


@router.post(
    "/{contact_id}/interactions",
    response_model=InteractionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record Interaction",
    description="Record a capture, meeting, email or note interaction with a contact.",
    responses={404: {"description": "Contact not found"}},
)
async def create_interaction(
    contact_id: str,
    interaction_in: InteractionCreate,
    request: Request,
    channel: SyncChannelDep,
    client_id: ClientIdHeader = None,
    session: AsyncSession = Depends(get_session),
) -> InteractionRead:
    """
    Record an interaction.

    ``interaction_date`` defaults to now. Announces ``CONTACT_UPDATED``.
    """
    await _get_contact_or_404(session, contact_id)

    data = interaction_in.model_dump(exclude_none=True)
    data["contact_id"] = contact_id
    interaction = Interaction.model_validate(data)
    session.add(interaction)
    await session.commit()
    await session.refresh(interaction)

    emit_sync_event(
        SyncEventType.CONTACT_UPDATED,
        {"contact_id": contact_id, "interaction_id": interaction.id},
        request.url.path,
        sender=client_id,
        channel=channel,
    )
    return InteractionRead.model_validate(interaction)


@router.get(
    "/{contact_id}/interactions",
    response_model=list[InteractionRead],
    summary="List Interactions",
    description="List a contact's interactions, newest first.",
    responses={404: {"description": "Contact not found"}},
)
async def list_interactions(
    contact_id: str,
    limit: int = 100,
    offset: int = 0,
    session: AsyncSession = Depends(get_session),
) -> list[InteractionRead]:
    """List interactions for a contact."""
    await _get_contact_or_404(session, contact_id)
    statement = (
        select(Interaction)
        .where(Interaction.contact_id == contact_id)
        .order_by(Interaction.interaction_date.desc())  # type: ignore[attr-defined]
        .offset(offset)
        .limit(limit)
    )
    result = await session.execute(statement)
    return [InteractionRead.model_validate(i) for i in result.scalars().all()]


@router.post(
    "/{contact_id}/documents",
    response_model=DocumentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Attach Document",
    description="Attach a shared document (name and summary) to a contact.",
    responses={404: {"description": "Contact not found"}},
)
async def create_document(
    contact_id: str,
    document_in: DocumentCreate,
    session: AsyncSession = Depends(get_session),
) -> DocumentRead:
    """Attach a document to a contact."""
    await _get_contact_or_404(session, contact_id)

    data = document_in.model_dump()
    data["contact_id"] = contact_id
    document = ContactDocument.model_validate(data)
    session.add(document)
    await session.commit()
    await session.refresh(document)
    return DocumentRead.model_validate(document)


@router.get(
    "/{contact_id}/documents",
    response_model=list[DocumentRead],
    summary="List Documents",
    responses={404: {"description": "Contact not found"}},
)
async def list_documents(contact_id: str, session: AsyncSession = Depends(get_session)) -> list[DocumentRead]:
    """List documents shared with a contact."""
    await _get_contact_or_404(session, contact_id)
    statement = select(ContactDocument).where(ContactDocument.contact_id == contact_id)
    result = await session.execute(statement)
    return [DocumentRead.model_validate(d) for d in result.scalars().all()]
