"""Invoice endpoints with tenant isolation."""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import (
    Pagination,
    get_db,
    get_tenancy_context,
    pagination_params,
    parse_enum_list,
    require_roles,
)
from api.responses import ApiResponse, envelope, paged
from api.tenancy import TenancyContext
from models.enums import DocumentStatus, Role
from models.invoice import InvoiceCreate, InvoiceResponse, InvoiceUpdate
from services import invoices_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

can_write = require_roles(Role.ADMIN, Role.PROJECT_MANAGER, Role.FINANCE)


@router.get("/Invoices", response_model=ApiResponse[list[InvoiceResponse]])
async def list_invoices(
    project_uuid: UUID | None = Query(None),
    client_uuid: UUID | None = Query(None),
    sales_order_uuid: UUID | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        rows, total = await invoices_service.list_invoices(
            db,
            membership_ctx=tenancy,
            project_uuid=project_uuid,
            client_uuid=client_uuid,
            sales_order_uuid=sales_order_uuid,
            statuses=parse_enum_list(status_filter, DocumentStatus, "status"),
            date_from=date_from,
            date_to=date_to,
            search=search,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [InvoiceResponse.model_validate(invoice) for invoice in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Invoices retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list invoices for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch invoices",
        )


@router.get("/Invoices/{invoice_uuid}", response_model=ApiResponse[InvoiceResponse])
async def get_invoice(
    invoice_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        invoice = await invoices_service.get_invoice(
            db, membership_ctx=tenancy, invoice_uuid=invoice_uuid
        )
        return envelope(InvoiceResponse.model_validate(invoice), message="Invoice retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch invoice %s", invoice_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch invoice",
        )


@router.post(
    "/Invoices",
    response_model=ApiResponse[InvoiceResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    payload: InvoiceCreate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """
    Create an invoice.

    Raises:
        422 if due_date precedes date or a reference does not resolve.
    """
    try:
        invoice = await invoices_service.create_invoice(db, membership_ctx=tenancy, payload=payload)
        return envelope(
            InvoiceResponse.model_validate(invoice),
            message="Invoice created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create invoice in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create invoice",
        )


@router.put("/Invoices/{invoice_uuid}", response_model=ApiResponse[InvoiceResponse])
async def update_invoice(
    invoice_uuid: UUID,
    payload: InvoiceUpdate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        invoice = await invoices_service.update_invoice(
            db, membership_ctx=tenancy, invoice_uuid=invoice_uuid, payload=payload
        )
        return envelope(InvoiceResponse.model_validate(invoice), message="Invoice updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update invoice %s", invoice_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update invoice",
        )


@router.delete("/Invoices/{invoice_uuid}", response_model=ApiResponse[None])
async def delete_invoice(
    invoice_uuid: UUID,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        await invoices_service.delete_invoice(db, membership_ctx=tenancy, invoice_uuid=invoice_uuid)
        return envelope(message="Invoice deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete invoice %s", invoice_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete invoice",
        )
