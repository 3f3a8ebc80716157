"""Expense endpoints with tenant isolation."""

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
from models.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from services import expenses_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

# Anyone can submit an expense; approval and corrections are for managers and finance
can_edit = require_roles(Role.ADMIN, Role.PROJECT_MANAGER, Role.FINANCE)


@router.get("/Expenses", response_model=ApiResponse[list[ExpenseResponse]])
async def list_expenses(
    project_uuid: UUID | None = Query(None),
    user_uuid: UUID | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    billable: bool | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        rows, total = await expenses_service.list_expenses(
            db,
            membership_ctx=tenancy,
            project_uuid=project_uuid,
            user_uuid=user_uuid,
            statuses=parse_enum_list(status_filter, DocumentStatus, "status"),
            billable=billable,
            date_from=date_from,
            date_to=date_to,
            search=search,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [ExpenseResponse.model_validate(expense) for expense in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Expenses retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list expenses for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch expenses",
        )


@router.get("/Expenses/{expense_uuid}", response_model=ApiResponse[ExpenseResponse])
async def get_expense(
    expense_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        expense = await expenses_service.get_expense(
            db, membership_ctx=tenancy, expense_uuid=expense_uuid
        )
        return envelope(ExpenseResponse.model_validate(expense), message="Expense retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch expense %s", expense_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch expense",
        )


@router.post(
    "/Expenses",
    response_model=ApiResponse[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    payload: ExpenseCreate,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        expense = await expenses_service.create_expense(db, membership_ctx=tenancy, payload=payload)
        return envelope(
            ExpenseResponse.model_validate(expense),
            message="Expense created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create expense in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create expense",
        )


@router.put("/Expenses/{expense_uuid}", response_model=ApiResponse[ExpenseResponse])
async def update_expense(
    expense_uuid: UUID,
    payload: ExpenseUpdate,
    tenancy: TenancyContext = Depends(can_edit),
    db: AsyncSession = Depends(get_db),
):
    try:
        expense = await expenses_service.update_expense(
            db, membership_ctx=tenancy, expense_uuid=expense_uuid, payload=payload
        )
        return envelope(ExpenseResponse.model_validate(expense), message="Expense updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update expense %s", expense_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update expense",
        )


@router.delete("/Expenses/{expense_uuid}", response_model=ApiResponse[None])
async def delete_expense(
    expense_uuid: UUID,
    tenancy: TenancyContext = Depends(can_edit),
    db: AsyncSession = Depends(get_db),
):
    try:
        await expenses_service.delete_expense(db, membership_ctx=tenancy, expense_uuid=expense_uuid)
        return envelope(message="Expense deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete expense %s", expense_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete expense",
        )
