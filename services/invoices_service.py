"""Service layer for Invoice business logic."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.invoice import Invoice, InvoiceCreate, InvoiceUpdate
from repos import invoices_repo
from services import references
from services.errors import NotFoundError
from services.validators import validate_date_range

# Columns that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"date", "status", "items", "total_amount"}


async def list_invoices(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID | None,
    client_uuid: UUID | None,
    sales_order_uuid: UUID | None,
    statuses: list[str] | None,
    date_from: date | None,
    date_to: date | None,
    search: str | None,
    offset: int,
    limit: int,
) -> tuple[list[Invoice], int]:
    """
    List invoices in the caller's company.

    Returns:
        (rows, total_count)
    """
    project = await references.resolve_project(session, membership_ctx, project_uuid)
    client = await references.resolve_client(session, membership_ctx, client_uuid, check_type=False)
    sales_order = await references.resolve_sales_order(session, membership_ctx, sales_order_uuid)

    return await invoices_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        client_id=references.id_of(client),
        sales_order_id=references.id_of(sales_order),
        statuses=statuses,
        date_from=date_from,
        date_to=date_to,
        search=search,
        offset=offset,
        limit=limit,
    )


async def get_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    invoice_uuid: UUID,
) -> Invoice:
    """
    Get an invoice by UUID.

    Raises:
        NotFoundError: 404 if invoice not found
    """
    invoice = await invoices_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        invoice_uuid=invoice_uuid,
        with_relations=True,
    )
    if not invoice:
        raise NotFoundError("Invoice not found")
    return invoice


async def create_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: InvoiceCreate,
) -> Invoice:
    """
    Create an invoice.

    The client must not be a pure vendor and the due date must not precede
    the invoice date.
    """
    validate_date_range(payload.date, payload.due_date, field="due_date")

    project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    sales_order = await references.resolve_sales_order(session, membership_ctx, payload.sales_order_uuid)
    client = await references.resolve_client(session, membership_ctx, payload.client_uuid)

    invoice = Invoice(
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        sales_order_id=references.id_of(sales_order),
        client_id=references.id_of(client),
        date=payload.date,
        due_date=payload.due_date,
        status=payload.status,
        items=payload.items,
        total_amount=payload.total_amount,
    )
    invoice = await invoices_repo.create(session, invoice)
    await session.commit()

    return await invoices_repo.get_by_id(
        session, company_id=membership_ctx.company_id, invoice_id=invoice.id
    )


async def update_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    invoice_uuid: UUID,
    payload: InvoiceUpdate,
) -> Invoice:
    """
    Partially update an invoice.

    Raises:
        NotFoundError: 404 if invoice not found
    """
    invoice = await invoices_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, invoice_uuid=invoice_uuid
    )
    if not invoice:
        raise NotFoundError("Invoice not found")

    fields = payload.model_fields_set

    invoice_date = payload.date if payload.date is not None else invoice.date
    due_date = payload.due_date if "due_date" in fields else invoice.due_date
    validate_date_range(invoice_date, due_date, field="due_date")

    if "project_uuid" in fields:
        project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    if "sales_order_uuid" in fields:
        sales_order = await references.resolve_sales_order(
            session, membership_ctx, payload.sales_order_uuid
        )
    if "client_uuid" in fields:
        client = await references.resolve_client(session, membership_ctx, payload.client_uuid)

    if "project_uuid" in fields:
        invoice.project_id = references.id_of(project)
    if "sales_order_uuid" in fields:
        invoice.sales_order_id = references.id_of(sales_order)
    if "client_uuid" in fields:
        invoice.client_id = references.id_of(client)
    invoice.date = invoice_date
    invoice.due_date = due_date
    for field in ("status", "items", "total_amount"):
        value = getattr(payload, field)
        if field in fields and not (value is None and field in _REQUIRED_FIELDS):
            setattr(invoice, field, value)

    await session.commit()

    return await invoices_repo.get_by_id(
        session, company_id=membership_ctx.company_id, invoice_id=invoice.id
    )


async def delete_invoice(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    invoice_uuid: UUID,
) -> None:
    invoice = await invoices_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, invoice_uuid=invoice_uuid
    )
    if not invoice:
        raise NotFoundError("Invoice not found")

    await invoices_repo.delete(session, company_id=membership_ctx.company_id, invoice_id=invoice.id)
    await session.commit()
