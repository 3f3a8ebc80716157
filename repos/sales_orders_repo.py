"""Repository for SalesOrder database operations."""

from datetime import date
from uuid import UUID

from sqlalchemy import String, cast, delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, joinedload

from models.contact import Contact
from models.project import Project
from models.sales_order import SalesOrder
from repos.base import fetch_page, search_clause

_RELATIONS = (
    joinedload(SalesOrder.project),
    joinedload(SalesOrder.client),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    sales_order_uuid: UUID,
    with_relations: bool = False,
) -> SalesOrder | None:
    """
    Get a sales order by UUID.

    Args:
        session: Database session
        company_id: Company ID to filter by
        sales_order_uuid: Sales order UUID to fetch
        with_relations: If True, load project and client for the response

    Returns:
        SalesOrder if found, None otherwise
    """
    query = select(SalesOrder).where(
        SalesOrder.uuid == sales_order_uuid,
        SalesOrder.company_id == company_id,
    )

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, sales_order_id: int) -> SalesOrder | None:
    result = await session.execute(
        select(SalesOrder)
        .options(*_RELATIONS)
        .where(SalesOrder.id == sales_order_id, SalesOrder.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    project_id: int | None = None,
    client_id: int | None = None,
    statuses: list[str] | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[SalesOrder], int]:
    """
    List sales orders, most recent document date first.

    Search matches the client name, the project name or the line items.

    Returns:
        (rows, total_count)
    """
    query = select(SalesOrder).where(SalesOrder.company_id == company_id)

    if project_id is not None:
        query = query.where(SalesOrder.project_id == project_id)
    if client_id is not None:
        query = query.where(SalesOrder.client_id == client_id)
    if statuses:
        query = query.where(SalesOrder.status.in_(statuses))
    if date_from is not None:
        query = query.where(SalesOrder.date >= date_from)
    if date_to is not None:
        query = query.where(SalesOrder.date <= date_to)

    client = aliased(Contact)
    project = aliased(Project)
    clause = search_clause(search, client.name, project.name, cast(SalesOrder.items, String))
    if clause is not None:
        query = (
            query.outerjoin(client, SalesOrder.client_id == client.id)
            .outerjoin(project, SalesOrder.project_id == project.id)
            .where(clause)
        )

    return await fetch_page(
        session,
        query,
        order_by=(SalesOrder.date.desc(), SalesOrder.created_at.desc(), SalesOrder.id.desc()),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, sales_order: SalesOrder) -> SalesOrder:
    session.add(sales_order)
    await session.flush()
    await session.refresh(sales_order)
    return sales_order


async def delete(session: AsyncSession, *, company_id: int, sales_order_id: int) -> int:
    result = await session.execute(
        sa_delete(SalesOrder).where(
            SalesOrder.id == sales_order_id,
            SalesOrder.company_id == company_id,
        )
    )
    return result.rowcount
