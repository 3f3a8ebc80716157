"""Repository for Expense database operations."""

from datetime import date
from uuid import UUID

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from models.expense import Expense
from repos.base import fetch_page, search_clause

_RELATIONS = (
    joinedload(Expense.project),
    joinedload(Expense.user),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    expense_uuid: UUID,
    with_relations: bool = False,
) -> Expense | None:
    query = select(Expense).where(Expense.uuid == expense_uuid, Expense.company_id == company_id)

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, expense_id: int) -> Expense | None:
    result = await session.execute(
        select(Expense)
        .options(*_RELATIONS)
        .where(Expense.id == expense_id, Expense.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    project_id: int | None = None,
    user_id: int | None = None,
    statuses: list[str] | None = None,
    billable: bool | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Expense], int]:
    """
    List expenses, most recent expense date first.

    Returns:
        (rows, total_count)
    """
    query = select(Expense).where(Expense.company_id == company_id)

    if project_id is not None:
        query = query.where(Expense.project_id == project_id)
    if user_id is not None:
        query = query.where(Expense.user_id == user_id)
    if statuses:
        query = query.where(Expense.status.in_(statuses))
    if billable is not None:
        query = query.where(Expense.billable == billable)
    if date_from is not None:
        query = query.where(Expense.date >= date_from)
    if date_to is not None:
        query = query.where(Expense.date <= date_to)
    clause = search_clause(search, Expense.description)
    if clause is not None:
        query = query.where(clause)

    return await fetch_page(
        session,
        query,
        order_by=(Expense.date.desc(), Expense.created_at.desc(), Expense.id.desc()),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, expense: Expense) -> Expense:
    session.add(expense)
    await session.flush()
    await session.refresh(expense)
    return expense


async def delete(session: AsyncSession, *, company_id: int, expense_id: int) -> int:
    result = await session.execute(
        sa_delete(Expense).where(Expense.id == expense_id, Expense.company_id == company_id)
    )
    return result.rowcount
