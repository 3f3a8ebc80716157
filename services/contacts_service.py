"""Service layer for Contact business logic."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.contact import Contact, ContactCreate, ContactUpdate
from repos import contacts_repo
from services.errors import NotFoundError

# Columns that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"name", "type"}


async def list_contacts(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    types: list[str] | None,
    search: str | None,
    offset: int,
    limit: int,
) -> tuple[list[Contact], int]:
    return await contacts_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        types=types,
        search=search,
        offset=offset,
        limit=limit,
    )


async def get_contact(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    contact_uuid: UUID,
) -> Contact:
    """
    Get a contact by UUID.

    Raises:
        NotFoundError: 404 if contact not found
    """
    contact = await contacts_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, contact_uuid=contact_uuid
    )
    if not contact:
        raise NotFoundError("Contact not found")
    return contact


async def create_contact(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: ContactCreate,
) -> Contact:
    contact = Contact(
        company_id=membership_ctx.company_id,
        name=payload.name,
        type=payload.type,
        email=payload.email,
        phone=payload.phone,
        address=payload.address,
    )
    contact = await contacts_repo.create(session, contact)
    await session.commit()
    return contact


async def update_contact(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    contact_uuid: UUID,
    payload: ContactUpdate,
) -> Contact:
    """
    Partially update a contact. Explicit nulls clear optional fields.

    Raises:
        NotFoundError: 404 if contact not found
    """
    contact = await get_contact(session, membership_ctx=membership_ctx, contact_uuid=contact_uuid)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(contact, field, value)

    await session.commit()
    await session.refresh(contact)
    return contact


async def delete_contact(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    contact_uuid: UUID,
) -> None:
    contact = await get_contact(session, membership_ctx=membership_ctx, contact_uuid=contact_uuid)
    await contacts_repo.delete(session, company_id=membership_ctx.company_id, contact_id=contact.id)
    await session.commit()
