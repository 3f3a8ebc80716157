"""Service layer for VendorBill business logic."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.vendor_bill import VendorBill, VendorBillCreate, VendorBillUpdate
from repos import vendor_bills_repo
from services import references
from services.errors import NotFoundError
from services.validators import validate_date_range

# Columns that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"date", "status", "items", "total_amount"}


async def list_vendor_bills(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID | None,
    vendor_uuid: UUID | None,
    purchase_order_uuid: UUID | None,
    statuses: list[str] | None,
    date_from: date | None,
    date_to: date | None,
    search: str | None,
    offset: int,
    limit: int,
) -> tuple[list[VendorBill], int]:
    project = await references.resolve_project(session, membership_ctx, project_uuid)
    vendor = await references.resolve_vendor(session, membership_ctx, vendor_uuid, check_type=False)
    purchase_order = await references.resolve_purchase_order(
        session, membership_ctx, purchase_order_uuid
    )

    return await vendor_bills_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        vendor_id=references.id_of(vendor),
        purchase_order_id=references.id_of(purchase_order),
        statuses=statuses,
        date_from=date_from,
        date_to=date_to,
        search=search,
        offset=offset,
        limit=limit,
    )


async def get_vendor_bill(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    vendor_bill_uuid: UUID,
) -> VendorBill:
    vendor_bill = await vendor_bills_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        vendor_bill_uuid=vendor_bill_uuid,
        with_relations=True,
    )
    if not vendor_bill:
        raise NotFoundError("Vendor bill not found")
    return vendor_bill


async def create_vendor_bill(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: VendorBillCreate,
) -> VendorBill:
    """
    Record a vendor bill.

    The vendor must not be a pure client and the due date must not precede
    the bill date.
    """
    validate_date_range(payload.date, payload.due_date, field="due_date")

    project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    purchase_order = await references.resolve_purchase_order(
        session, membership_ctx, payload.purchase_order_uuid
    )
    vendor = await references.resolve_vendor(session, membership_ctx, payload.vendor_uuid)

    vendor_bill = VendorBill(
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        purchase_order_id=references.id_of(purchase_order),
        vendor_id=references.id_of(vendor),
        date=payload.date,
        due_date=payload.due_date,
        status=payload.status,
        items=payload.items,
        total_amount=payload.total_amount,
    )
    vendor_bill = await vendor_bills_repo.create(session, vendor_bill)
    await session.commit()

    return await vendor_bills_repo.get_by_id(
        session, company_id=membership_ctx.company_id, vendor_bill_id=vendor_bill.id
    )


async def update_vendor_bill(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    vendor_bill_uuid: UUID,
    payload: VendorBillUpdate,
) -> VendorBill:
    """
    Partially update a vendor bill.

    Raises:
        NotFoundError: 404 if vendor bill not found
    """
    vendor_bill = await vendor_bills_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, vendor_bill_uuid=vendor_bill_uuid
    )
    if not vendor_bill:
        raise NotFoundError("Vendor bill not found")

    fields = payload.model_fields_set

    bill_date = payload.date if payload.date is not None else vendor_bill.date
    due_date = payload.due_date if "due_date" in fields else vendor_bill.due_date
    validate_date_range(bill_date, due_date, field="due_date")

    if "project_uuid" in fields:
        project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    if "purchase_order_uuid" in fields:
        purchase_order = await references.resolve_purchase_order(
            session, membership_ctx, payload.purchase_order_uuid
        )
    if "vendor_uuid" in fields:
        vendor = await references.resolve_vendor(session, membership_ctx, payload.vendor_uuid)

    if "project_uuid" in fields:
        vendor_bill.project_id = references.id_of(project)
    if "purchase_order_uuid" in fields:
        vendor_bill.purchase_order_id = references.id_of(purchase_order)
    if "vendor_uuid" in fields:
        vendor_bill.vendor_id = references.id_of(vendor)
    vendor_bill.date = bill_date
    vendor_bill.due_date = due_date
    for field in ("status", "items", "total_amount"):
        value = getattr(payload, field)
        if field in fields and not (value is None and field in _REQUIRED_FIELDS):
            setattr(vendor_bill, field, value)

    await session.commit()

    return await vendor_bills_repo.get_by_id(
        session, company_id=membership_ctx.company_id, vendor_bill_id=vendor_bill.id
    )


async def delete_vendor_bill(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    vendor_bill_uuid: UUID,
) -> None:
    vendor_bill = await vendor_bills_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, vendor_bill_uuid=vendor_bill_uuid
    )
    if not vendor_bill:
        raise NotFoundError("Vendor bill not found")

    await vendor_bills_repo.delete(
        session, company_id=membership_ctx.company_id, vendor_bill_id=vendor_bill.id
    )
    await session.commit()
