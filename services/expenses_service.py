"""Service layer for Expense business logic."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.expense import Expense, ExpenseCreate, ExpenseUpdate
from repos import expenses_repo
from services import references
from services.errors import NotFoundError

# Columns that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"description", "amount", "date", "billable", "status"}


async def list_expenses(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID | None,
    user_uuid: UUID | None,
    statuses: list[str] | None,
    billable: bool | None,
    date_from: date | None,
    date_to: date | None,
    search: str | None,
    offset: int,
    limit: int,
) -> tuple[list[Expense], int]:
    project = await references.resolve_project(session, membership_ctx, project_uuid)
    user = await references.resolve_user(session, membership_ctx, user_uuid)

    return await expenses_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        user_id=references.id_of(user),
        statuses=statuses,
        billable=billable,
        date_from=date_from,
        date_to=date_to,
        search=search,
        offset=offset,
        limit=limit,
    )


async def get_expense(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    expense_uuid: UUID,
) -> Expense:
    """
    Get an expense by UUID.

    Raises:
        NotFoundError: 404 if expense not found
    """
    expense = await expenses_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        expense_uuid=expense_uuid,
        with_relations=True,
    )
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


async def create_expense(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: ExpenseCreate,
) -> Expense:
    project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    user = await references.resolve_user(session, membership_ctx, payload.user_uuid)

    expense = Expense(
        company_id=membership_ctx.company_id,
        project_id=project.id,
        user_id=references.id_of(user),
        description=payload.description,
        amount=payload.amount,
        date=payload.date,
        billable=payload.billable,
        status=payload.status,
        receipt_url=payload.receipt_url,
    )
    expense = await expenses_repo.create(session, expense)
    await session.commit()

    return await expenses_repo.get_by_id(
        session, company_id=membership_ctx.company_id, expense_id=expense.id
    )


async def update_expense(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    expense_uuid: UUID,
    payload: ExpenseUpdate,
) -> Expense:
    """
    Partially update an expense.

    Raises:
        NotFoundError: 404 if expense not found
    """
    expense = await expenses_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, expense_uuid=expense_uuid
    )
    if not expense:
        raise NotFoundError("Expense not found")

    fields = payload.model_fields_set

    project = None
    if payload.project_uuid is not None:
        project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    if "user_uuid" in fields:
        user = await references.resolve_user(session, membership_ctx, payload.user_uuid)

    if project is not None:
        expense.project_id = project.id
    if "user_uuid" in fields:
        expense.user_id = references.id_of(user)
    for field in ("description", "amount", "date", "billable", "status", "receipt_url"):
        value = getattr(payload, field)
        if field in fields and not (value is None and field in _REQUIRED_FIELDS):
            setattr(expense, field, value)

    await session.commit()

    return await expenses_repo.get_by_id(
        session, company_id=membership_ctx.company_id, expense_id=expense.id
    )


async def delete_expense(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    expense_uuid: UUID,
) -> None:
    expense = await expenses_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, expense_uuid=expense_uuid
    )
    if not expense:
        raise NotFoundError("Expense not found")

    await expenses_repo.delete(session, company_id=membership_ctx.company_id, expense_id=expense.id)
    await session.commit()
