"""Repository for VendorBill database operations."""

from datetime import date
from uuid import UUID

from sqlalchemy import String, cast, delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, joinedload

from models.contact import Contact
from models.project import Project
from models.vendor_bill import VendorBill
from repos.base import fetch_page, search_clause

_RELATIONS = (
    joinedload(VendorBill.project),
    joinedload(VendorBill.purchase_order),
    joinedload(VendorBill.vendor),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    vendor_bill_uuid: UUID,
    with_relations: bool = False,
) -> VendorBill | None:
    query = select(VendorBill).where(
        VendorBill.uuid == vendor_bill_uuid,
        VendorBill.company_id == company_id,
    )

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, vendor_bill_id: int) -> VendorBill | None:
    result = await session.execute(
        select(VendorBill)
        .options(*_RELATIONS)
        .where(VendorBill.id == vendor_bill_id, VendorBill.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    project_id: int | None = None,
    vendor_id: int | None = None,
    purchase_order_id: int | None = None,
    statuses: list[str] | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[VendorBill], int]:
    """
    List vendor bills, most recent bill date first.

    Returns:
        (rows, total_count)
    """
    query = select(VendorBill).where(VendorBill.company_id == company_id)

    if project_id is not None:
        query = query.where(VendorBill.project_id == project_id)
    if vendor_id is not None:
        query = query.where(VendorBill.vendor_id == vendor_id)
    if purchase_order_id is not None:
        query = query.where(VendorBill.purchase_order_id == purchase_order_id)
    if statuses:
        query = query.where(VendorBill.status.in_(statuses))
    if date_from is not None:
        query = query.where(VendorBill.date >= date_from)
    if date_to is not None:
        query = query.where(VendorBill.date <= date_to)

    vendor = aliased(Contact)
    project = aliased(Project)
    clause = search_clause(search, vendor.name, project.name, cast(VendorBill.items, String))
    if clause is not None:
        query = (
            query.outerjoin(vendor, VendorBill.vendor_id == vendor.id)
            .outerjoin(project, VendorBill.project_id == project.id)
            .where(clause)
        )

    return await fetch_page(
        session,
        query,
        order_by=(VendorBill.date.desc(), VendorBill.created_at.desc(), VendorBill.id.desc()),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, vendor_bill: VendorBill) -> VendorBill:
    session.add(vendor_bill)
    await session.flush()
    await session.refresh(vendor_bill)
    return vendor_bill


async def delete(session: AsyncSession, *, company_id: int, vendor_bill_id: int) -> int:
    result = await session.execute(
        sa_delete(VendorBill).where(
            VendorBill.id == vendor_bill_id,
            VendorBill.company_id == company_id,
        )
    )
    return result.rowcount
