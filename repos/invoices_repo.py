"""Repository for Invoice database operations."""

from datetime import date
from uuid import UUID

from sqlalchemy import String, cast, delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, joinedload

from models.contact import Contact
from models.invoice import Invoice
from models.project import Project
from repos.base import fetch_page, search_clause

_RELATIONS = (
    joinedload(Invoice.project),
    joinedload(Invoice.sales_order),
    joinedload(Invoice.client),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    invoice_uuid: UUID,
    with_relations: bool = False,
) -> Invoice | None:
    """
    Get an invoice by UUID.

    Args:
        session: Database session
        company_id: Company ID to filter by
        invoice_uuid: Invoice UUID to fetch
        with_relations: If True, load project, sales order and client

    Returns:
        Invoice if found, None otherwise
    """
    query = select(Invoice).where(Invoice.uuid == invoice_uuid, Invoice.company_id == company_id)

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, invoice_id: int) -> Invoice | None:
    result = await session.execute(
        select(Invoice)
        .options(*_RELATIONS)
        .where(Invoice.id == invoice_id, Invoice.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    project_id: int | None = None,
    client_id: int | None = None,
    sales_order_id: int | None = None,
    statuses: list[str] | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Invoice], int]:
    """
    List invoices, most recent invoice date first.

    Search matches the client name, the project name or the line items.

    Returns:
        (rows, total_count)
    """
    query = select(Invoice).where(Invoice.company_id == company_id)

    if project_id is not None:
        query = query.where(Invoice.project_id == project_id)
    if client_id is not None:
        query = query.where(Invoice.client_id == client_id)
    if sales_order_id is not None:
        query = query.where(Invoice.sales_order_id == sales_order_id)
    if statuses:
        query = query.where(Invoice.status.in_(statuses))
    if date_from is not None:
        query = query.where(Invoice.date >= date_from)
    if date_to is not None:
        query = query.where(Invoice.date <= date_to)

    client = aliased(Contact)
    project = aliased(Project)
    clause = search_clause(search, client.name, project.name, cast(Invoice.items, String))
    if clause is not None:
        query = (
            query.outerjoin(client, Invoice.client_id == client.id)
            .outerjoin(project, Invoice.project_id == project.id)
            .where(clause)
        )

    return await fetch_page(
        session,
        query,
        order_by=(Invoice.date.desc(), Invoice.created_at.desc(), Invoice.id.desc()),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, invoice: Invoice) -> Invoice:
    session.add(invoice)
    await session.flush()
    await session.refresh(invoice)
    return invoice


async def delete(session: AsyncSession, *, company_id: int, invoice_id: int) -> int:
    result = await session.execute(
        sa_delete(Invoice).where(Invoice.id == invoice_id, Invoice.company_id == company_id)
    )
    return result.rowcount
