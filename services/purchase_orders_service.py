"""Service layer for PurchaseOrder business logic."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.purchase_order import PurchaseOrder, PurchaseOrderCreate, PurchaseOrderUpdate
from repos import purchase_orders_repo
from services import references
from services.errors import NotFoundError

# Columns that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"date", "status", "items", "total_amount"}


async def list_purchase_orders(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID | None,
    vendor_uuid: UUID | None,
    statuses: list[str] | None,
    date_from: date | None,
    date_to: date | None,
    search: str | None,
    offset: int,
    limit: int,
) -> tuple[list[PurchaseOrder], int]:
    project = await references.resolve_project(session, membership_ctx, project_uuid)
    vendor = await references.resolve_vendor(session, membership_ctx, vendor_uuid, check_type=False)

    return await purchase_orders_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        vendor_id=references.id_of(vendor),
        statuses=statuses,
        date_from=date_from,
        date_to=date_to,
        search=search,
        offset=offset,
        limit=limit,
    )


async def get_purchase_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    purchase_order_uuid: UUID,
) -> PurchaseOrder:
    purchase_order = await purchase_orders_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        purchase_order_uuid=purchase_order_uuid,
        with_relations=True,
    )
    if not purchase_order:
        raise NotFoundError("Purchase order not found")
    return purchase_order


async def create_purchase_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: PurchaseOrderCreate,
) -> PurchaseOrder:
    """Create a purchase order. The vendor must not be a pure client."""
    project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    vendor = await references.resolve_vendor(session, membership_ctx, payload.vendor_uuid)

    purchase_order = PurchaseOrder(
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        vendor_id=references.id_of(vendor),
        date=payload.date,
        status=payload.status,
        items=payload.items,
        total_amount=payload.total_amount,
    )
    purchase_order = await purchase_orders_repo.create(session, purchase_order)
    await session.commit()

    return await purchase_orders_repo.get_by_id(
        session, company_id=membership_ctx.company_id, purchase_order_id=purchase_order.id
    )


async def update_purchase_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    purchase_order_uuid: UUID,
    payload: PurchaseOrderUpdate,
) -> PurchaseOrder:
    """
    Partially update a purchase order.

    Raises:
        NotFoundError: 404 if purchase order not found
    """
    purchase_order = await purchase_orders_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, purchase_order_uuid=purchase_order_uuid
    )
    if not purchase_order:
        raise NotFoundError("Purchase order not found")

    fields = payload.model_fields_set

    if "project_uuid" in fields:
        project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    if "vendor_uuid" in fields:
        vendor = await references.resolve_vendor(session, membership_ctx, payload.vendor_uuid)

    if "project_uuid" in fields:
        purchase_order.project_id = references.id_of(project)
    if "vendor_uuid" in fields:
        purchase_order.vendor_id = references.id_of(vendor)
    for field in ("date", "status", "items", "total_amount"):
        value = getattr(payload, field)
        if field in fields and not (value is None and field in _REQUIRED_FIELDS):
            setattr(purchase_order, field, value)

    await session.commit()

    return await purchase_orders_repo.get_by_id(
        session, company_id=membership_ctx.company_id, purchase_order_id=purchase_order.id
    )


async def delete_purchase_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    purchase_order_uuid: UUID,
) -> None:
    purchase_order = await purchase_orders_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, purchase_order_uuid=purchase_order_uuid
    )
    if not purchase_order:
        raise NotFoundError("Purchase order not found")

    await purchase_orders_repo.delete(
        session, company_id=membership_ctx.company_id, purchase_order_id=purchase_order.id
    )
    await session.commit()
