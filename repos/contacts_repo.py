"""Repository for Contact database operations."""

from uuid import UUID

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.contact import Contact
from repos.base import fetch_page, search_clause


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    contact_uuid: UUID,
) -> Contact | None:
    """
    Get a contact by UUID.

    Args:
        session: Database session
        company_id: Company ID to filter by
        contact_uuid: Contact UUID to fetch

    Returns:
        Contact if found, None otherwise
    """
    result = await session.execute(
        select(Contact).where(Contact.uuid == contact_uuid, Contact.company_id == company_id)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    types: list[str] | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Contact], int]:
    """
    List contacts of a company, newest first.

    Returns:
        (rows, total_count)
    """
    query = select(Contact).where(Contact.company_id == company_id)

    if types:
        query = query.where(Contact.type.in_(types))
    clause = search_clause(search, Contact.name, Contact.email)
    if clause is not None:
        query = query.where(clause)

    return await fetch_page(
        session,
        query,
        order_by=(Contact.created_at.desc(), Contact.id.desc()),
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, contact: Contact) -> Contact:
    session.add(contact)
    await session.flush()
    await session.refresh(contact)
    return contact


async def delete(session: AsyncSession, *, company_id: int, contact_id: int) -> int:
    """Delete a contact. Projects and documents pointing at it are detached by the store."""
    result = await session.execute(
        sa_delete(Contact).where(Contact.id == contact_id, Contact.company_id == company_id)
    )
    return result.rowcount
