"""Sales order endpoints with tenant isolation."""

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
from models.sales_order import SalesOrderCreate, SalesOrderResponse, SalesOrderUpdate
from services import sales_orders_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

can_write = require_roles(Role.ADMIN, Role.PROJECT_MANAGER, Role.FINANCE)


@router.get("/SalesOrders", response_model=ApiResponse[list[SalesOrderResponse]])
async def list_sales_orders(
    project_uuid: UUID | None = Query(None),
    client_uuid: UUID | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    List sales orders, most recent first.

    search matches the client name, the project name or the line items.
    """
    try:
        rows, total = await sales_orders_service.list_sales_orders(
            db,
            membership_ctx=tenancy,
            project_uuid=project_uuid,
            client_uuid=client_uuid,
            statuses=parse_enum_list(status_filter, DocumentStatus, "status"),
            date_from=date_from,
            date_to=date_to,
            search=search,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [SalesOrderResponse.model_validate(order) for order in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Sales orders retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list sales orders for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch sales orders",
        )


@router.get("/SalesOrders/{sales_order_uuid}", response_model=ApiResponse[SalesOrderResponse])
async def get_sales_order(
    sales_order_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        order = await sales_orders_service.get_sales_order(
            db, membership_ctx=tenancy, sales_order_uuid=sales_order_uuid
        )
        return envelope(SalesOrderResponse.model_validate(order), message="Sales order retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch sales order %s", sales_order_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch sales order",
        )


@router.post(
    "/SalesOrders",
    response_model=ApiResponse[SalesOrderResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_sales_order(
    payload: SalesOrderCreate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        order = await sales_orders_service.create_sales_order(
            db, membership_ctx=tenancy, payload=payload
        )
        return envelope(
            SalesOrderResponse.model_validate(order),
            message="Sales order created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create sales order in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create sales order",
        )


@router.put("/SalesOrders/{sales_order_uuid}", response_model=ApiResponse[SalesOrderResponse])
async def update_sales_order(
    sales_order_uuid: UUID,
    payload: SalesOrderUpdate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        order = await sales_orders_service.update_sales_order(
            db, membership_ctx=tenancy, sales_order_uuid=sales_order_uuid, payload=payload
        )
        return envelope(SalesOrderResponse.model_validate(order), message="Sales order updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update sales order %s", sales_order_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update sales order",
        )


@router.delete("/SalesOrders/{sales_order_uuid}", response_model=ApiResponse[None])
async def delete_sales_order(
    sales_order_uuid: UUID,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """Delete a sales order. Invoices raised from it keep existing, unlinked."""
    try:
        await sales_orders_service.delete_sales_order(
            db, membership_ctx=tenancy, sales_order_uuid=sales_order_uuid
        )
        return envelope(message="Sales order deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete sales order %s", sales_order_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete sales order",
        )
