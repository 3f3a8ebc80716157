"""Repository for Timesheet database operations."""

from datetime import date
from uuid import UUID

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from models.timesheet import Timesheet
from repos.base import fetch_page, search_clause

_RELATIONS = (
    joinedload(Timesheet.project),
    joinedload(Timesheet.task),
    joinedload(Timesheet.user),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    timesheet_uuid: UUID,
    with_relations: bool = False,
) -> Timesheet | None:
    query = select(Timesheet).where(
        Timesheet.uuid == timesheet_uuid,
        Timesheet.company_id == company_id,
    )

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, timesheet_id: int) -> Timesheet | None:
    result = await session.execute(
        select(Timesheet)
        .options(*_RELATIONS)
        .where(Timesheet.id == timesheet_id, Timesheet.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    project_id: int | None = None,
    task_id: int | None = None,
    user_id: int | None = None,
    billable: bool | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Timesheet], int]:
    """
    List timesheet entries, most recent work date first.

    Returns:
        (rows, total_count)
    """
    query = select(Timesheet).where(Timesheet.company_id == company_id)

    if project_id is not None:
        query = query.where(Timesheet.project_id == project_id)
    if task_id is not None:
        query = query.where(Timesheet.task_id == task_id)
    if user_id is not None:
        query = query.where(Timesheet.user_id == user_id)
    if billable is not None:
        query = query.where(Timesheet.billable == billable)
    if date_from is not None:
        query = query.where(Timesheet.date >= date_from)
    if date_to is not None:
        query = query.where(Timesheet.date <= date_to)
    clause = search_clause(search, Timesheet.description)
    if clause is not None:
        query = query.where(clause)

    return await fetch_page(
        session,
        query,
        order_by=(Timesheet.date.desc(), Timesheet.created_at.desc(), Timesheet.id.desc()),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, timesheet: Timesheet) -> Timesheet:
    session.add(timesheet)
    await session.flush()
    await session.refresh(timesheet)
    return timesheet


async def delete(session: AsyncSession, *, company_id: int, timesheet_id: int) -> int:
    result = await session.execute(
        sa_delete(Timesheet).where(Timesheet.id == timesheet_id, Timesheet.company_id == company_id)
    )
    return result.rowcount
