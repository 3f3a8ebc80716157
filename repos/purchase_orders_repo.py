"""Repository for PurchaseOrder database operations."""

from datetime import date
from uuid import UUID

from sqlalchemy import String, cast, delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, joinedload

from models.contact import Contact
from models.project import Project
from models.purchase_order import PurchaseOrder
from repos.base import fetch_page, search_clause

_RELATIONS = (
    joinedload(PurchaseOrder.project),
    joinedload(PurchaseOrder.vendor),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    purchase_order_uuid: UUID,
    with_relations: bool = False,
) -> PurchaseOrder | None:
    query = select(PurchaseOrder).where(
        PurchaseOrder.uuid == purchase_order_uuid,
        PurchaseOrder.company_id == company_id,
    )

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, purchase_order_id: int) -> PurchaseOrder | None:
    result = await session.execute(
        select(PurchaseOrder)
        .options(*_RELATIONS)
        .where(PurchaseOrder.id == purchase_order_id, PurchaseOrder.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    project_id: int | None = None,
    vendor_id: int | None = None,
    statuses: list[str] | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[PurchaseOrder], int]:
    """
    List purchase orders, most recent order date first.

    Returns:
        (rows, total_count)
    """
    query = select(PurchaseOrder).where(PurchaseOrder.company_id == company_id)

    if project_id is not None:
        query = query.where(PurchaseOrder.project_id == project_id)
    if vendor_id is not None:
        query = query.where(PurchaseOrder.vendor_id == vendor_id)
    if statuses:
        query = query.where(PurchaseOrder.status.in_(statuses))
    if date_from is not None:
        query = query.where(PurchaseOrder.date >= date_from)
    if date_to is not None:
        query = query.where(PurchaseOrder.date <= date_to)

    vendor = aliased(Contact)
    project = aliased(Project)
    clause = search_clause(search, vendor.name, project.name, cast(PurchaseOrder.items, String))
    if clause is not None:
        query = (
            query.outerjoin(vendor, PurchaseOrder.vendor_id == vendor.id)
            .outerjoin(project, PurchaseOrder.project_id == project.id)
            .where(clause)
        )

    return await fetch_page(
        session,
        query,
        order_by=(PurchaseOrder.date.desc(), PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc()),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, purchase_order: PurchaseOrder) -> PurchaseOrder:
    session.add(purchase_order)
    await session.flush()
    await session.refresh(purchase_order)
    return purchase_order


async def delete(session: AsyncSession, *, company_id: int, purchase_order_id: int) -> int:
    result = await session.execute(
        sa_delete(PurchaseOrder).where(
            PurchaseOrder.id == purchase_order_id,
            PurchaseOrder.company_id == company_id,
        )
    )
    return result.rowcount
