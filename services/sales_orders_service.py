"""Service layer for SalesOrder business logic."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.sales_order import SalesOrder, SalesOrderCreate, SalesOrderUpdate
from repos import sales_orders_repo
from services import references
from services.errors import NotFoundError

# Columns that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"date", "status", "items", "total_amount"}


async def list_sales_orders(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID | None,
    client_uuid: UUID | None,
    statuses: list[str] | None,
    date_from: date | None,
    date_to: date | None,
    search: str | None,
    offset: int,
    limit: int,
) -> tuple[list[SalesOrder], int]:
    project = await references.resolve_project(session, membership_ctx, project_uuid)
    client = await references.resolve_client(session, membership_ctx, client_uuid, check_type=False)

    return await sales_orders_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        client_id=references.id_of(client),
        statuses=statuses,
        date_from=date_from,
        date_to=date_to,
        search=search,
        offset=offset,
        limit=limit,
    )


async def get_sales_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    sales_order_uuid: UUID,
) -> SalesOrder:
    """
    Get a sales order by UUID.

    Raises:
        NotFoundError: 404 if sales order not found
    """
    sales_order = await sales_orders_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        sales_order_uuid=sales_order_uuid,
        with_relations=True,
    )
    if not sales_order:
        raise NotFoundError("Sales order not found")
    return sales_order


async def create_sales_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: SalesOrderCreate,
) -> SalesOrder:
    project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    client = await references.resolve_client(session, membership_ctx, payload.client_uuid)

    sales_order = SalesOrder(
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        client_id=references.id_of(client),
        date=payload.date,
        status=payload.status,
        items=payload.items,
        total_amount=payload.total_amount,
    )
    sales_order = await sales_orders_repo.create(session, sales_order)
    await session.commit()

    return await sales_orders_repo.get_by_id(
        session, company_id=membership_ctx.company_id, sales_order_id=sales_order.id
    )


async def update_sales_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    sales_order_uuid: UUID,
    payload: SalesOrderUpdate,
) -> SalesOrder:
    """
    Partially update a sales order. Explicit nulls detach project or client.

    Raises:
        NotFoundError: 404 if sales order not found
    """
    sales_order = await sales_orders_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, sales_order_uuid=sales_order_uuid
    )
    if not sales_order:
        raise NotFoundError("Sales order not found")

    fields = payload.model_fields_set

    if "project_uuid" in fields:
        project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    if "client_uuid" in fields:
        client = await references.resolve_client(session, membership_ctx, payload.client_uuid)

    if "project_uuid" in fields:
        sales_order.project_id = references.id_of(project)
    if "client_uuid" in fields:
        sales_order.client_id = references.id_of(client)
    for field in ("date", "status", "items", "total_amount"):
        value = getattr(payload, field)
        if field in fields and not (value is None and field in _REQUIRED_FIELDS):
            setattr(sales_order, field, value)

    await session.commit()

    return await sales_orders_repo.get_by_id(
        session, company_id=membership_ctx.company_id, sales_order_id=sales_order.id
    )


async def delete_sales_order(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    sales_order_uuid: UUID,
) -> None:
    sales_order = await sales_orders_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, sales_order_uuid=sales_order_uuid
    )
    if not sales_order:
        raise NotFoundError("Sales order not found")

    await sales_orders_repo.delete(
        session, company_id=membership_ctx.company_id, sales_order_id=sales_order.id
    )
    await session.commit()
