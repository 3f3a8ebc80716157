"""Vendor bill endpoints with tenant isolation."""

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
from models.vendor_bill import VendorBillCreate, VendorBillResponse, VendorBillUpdate
from services import vendor_bills_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

can_write = require_roles(Role.ADMIN, Role.PROJECT_MANAGER, Role.FINANCE)


@router.get("/VendorBills", response_model=ApiResponse[list[VendorBillResponse]])
async def list_vendor_bills(
    project_uuid: UUID | None = Query(None),
    vendor_uuid: UUID | None = Query(None),
    purchase_order_uuid: UUID | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        rows, total = await vendor_bills_service.list_vendor_bills(
            db,
            membership_ctx=tenancy,
            project_uuid=project_uuid,
            vendor_uuid=vendor_uuid,
            purchase_order_uuid=purchase_order_uuid,
            statuses=parse_enum_list(status_filter, DocumentStatus, "status"),
            date_from=date_from,
            date_to=date_to,
            search=search,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [VendorBillResponse.model_validate(bill) for bill in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Vendor bills retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list vendor bills for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch vendor bills",
        )


@router.get("/VendorBills/{vendor_bill_uuid}", response_model=ApiResponse[VendorBillResponse])
async def get_vendor_bill(
    vendor_bill_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        bill = await vendor_bills_service.get_vendor_bill(
            db, membership_ctx=tenancy, vendor_bill_uuid=vendor_bill_uuid
        )
        return envelope(VendorBillResponse.model_validate(bill), message="Vendor bill retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch vendor bill %s", vendor_bill_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch vendor bill",
        )


@router.post(
    "/VendorBills",
    response_model=ApiResponse[VendorBillResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_vendor_bill(
    payload: VendorBillCreate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        bill = await vendor_bills_service.create_vendor_bill(
            db, membership_ctx=tenancy, payload=payload
        )
        return envelope(
            VendorBillResponse.model_validate(bill),
            message="Vendor bill created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create vendor bill in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create vendor bill",
        )


@router.put("/VendorBills/{vendor_bill_uuid}", response_model=ApiResponse[VendorBillResponse])
async def update_vendor_bill(
    vendor_bill_uuid: UUID,
    payload: VendorBillUpdate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        bill = await vendor_bills_service.update_vendor_bill(
            db, membership_ctx=tenancy, vendor_bill_uuid=vendor_bill_uuid, payload=payload
        )
        return envelope(VendorBillResponse.model_validate(bill), message="Vendor bill updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update vendor bill %s", vendor_bill_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update vendor bill",
        )


@router.delete("/VendorBills/{vendor_bill_uuid}", response_model=ApiResponse[None])
async def delete_vendor_bill(
    vendor_bill_uuid: UUID,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        await vendor_bills_service.delete_vendor_bill(
            db, membership_ctx=tenancy, vendor_bill_uuid=vendor_bill_uuid
        )
        return envelope(message="Vendor bill deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete vendor bill %s", vendor_bill_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete vendor bill",
        )
