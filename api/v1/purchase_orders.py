"""Purchase order endpoints with tenant isolation."""

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
from models.purchase_order import PurchaseOrderCreate, PurchaseOrderResponse, PurchaseOrderUpdate
from services import purchase_orders_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

can_write = require_roles(Role.ADMIN, Role.PROJECT_MANAGER, Role.FINANCE)


@router.get("/PurchaseOrders", response_model=ApiResponse[list[PurchaseOrderResponse]])
async def list_purchase_orders(
    project_uuid: UUID | None = Query(None),
    vendor_uuid: UUID | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        rows, total = await purchase_orders_service.list_purchase_orders(
            db,
            membership_ctx=tenancy,
            project_uuid=project_uuid,
            vendor_uuid=vendor_uuid,
            statuses=parse_enum_list(status_filter, DocumentStatus, "status"),
            date_from=date_from,
            date_to=date_to,
            search=search,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [PurchaseOrderResponse.model_validate(order) for order in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Purchase orders retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list purchase orders for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch purchase orders",
        )


@router.get(
    "/PurchaseOrders/{purchase_order_uuid}",
    response_model=ApiResponse[PurchaseOrderResponse],
)
async def get_purchase_order(
    purchase_order_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        order = await purchase_orders_service.get_purchase_order(
            db, membership_ctx=tenancy, purchase_order_uuid=purchase_order_uuid
        )
        return envelope(PurchaseOrderResponse.model_validate(order), message="Purchase order retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch purchase order %s", purchase_order_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch purchase order",
        )


@router.post(
    "/PurchaseOrders",
    response_model=ApiResponse[PurchaseOrderResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_purchase_order(
    payload: PurchaseOrderCreate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        order = await purchase_orders_service.create_purchase_order(
            db, membership_ctx=tenancy, payload=payload
        )
        return envelope(
            PurchaseOrderResponse.model_validate(order),
            message="Purchase order created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create purchase order in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create purchase order",
        )


@router.put(
    "/PurchaseOrders/{purchase_order_uuid}",
    response_model=ApiResponse[PurchaseOrderResponse],
)
async def update_purchase_order(
    purchase_order_uuid: UUID,
    payload: PurchaseOrderUpdate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        order = await purchase_orders_service.update_purchase_order(
            db, membership_ctx=tenancy, purchase_order_uuid=purchase_order_uuid, payload=payload
        )
        return envelope(PurchaseOrderResponse.model_validate(order), message="Purchase order updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update purchase order %s", purchase_order_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update purchase order",
        )


@router.delete("/PurchaseOrders/{purchase_order_uuid}", response_model=ApiResponse[None])
async def delete_purchase_order(
    purchase_order_uuid: UUID,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """Delete a purchase order. Vendor bills against it keep existing, unlinked."""
    try:
        await purchase_orders_service.delete_purchase_order(
            db, membership_ctx=tenancy, purchase_order_uuid=purchase_order_uuid
        )
        return envelope(message="Purchase order deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete purchase order %s", purchase_order_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete purchase order",
        )
