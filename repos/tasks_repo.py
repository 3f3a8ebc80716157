"""Repository for Task and TaskAssignment database operations."""

from uuid import UUID

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from models.task import Task, TaskAssignment
from repos.base import fetch_page, search_clause

# Relations embedded in every task response
_RELATIONS = (
    joinedload(Task.project),
    joinedload(Task.assignee),
    selectinload(Task.assignments).joinedload(TaskAssignment.user),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    task_uuid: UUID,
    with_relations: bool = False,
) -> Task | None:
    """
    Get a task by UUID.

    Args:
        session: Database session
        company_id: Company ID to filter by
        task_uuid: Task UUID to fetch
        with_relations: If True, load project, assignee and assignments

    Returns:
        Task if found, None otherwise
    """
    query = select(Task).where(Task.uuid == task_uuid, Task.company_id == company_id)

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, task_id: int) -> Task | None:
    """Get a task by internal id with its relations refreshed."""
    result = await session.execute(
        select(Task)
        .options(*_RELATIONS)
        .where(Task.id == task_id, Task.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    statuses: list[str] | None = None,
    priorities: list[str] | None = None,
    search: str | None = None,
    project_id: int | None = None,
    assignee_id: int | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Task], int]:
    """
    List tasks of a company, earliest due date first (undated last), then newest.

    Returns:
        (rows, total_count)
    """
    query = select(Task).where(Task.company_id == company_id)

    if statuses:
        query = query.where(Task.status.in_(statuses))
    if priorities:
        query = query.where(Task.priority.in_(priorities))
    if project_id is not None:
        query = query.where(Task.project_id == project_id)
    if assignee_id is not None:
        query = query.where(Task.assignee_id == assignee_id)
    clause = search_clause(search, Task.title, Task.description)
    if clause is not None:
        query = query.where(clause)

    return await fetch_page(
        session,
        query,
        order_by=(
            Task.due_date.is_(None),
            Task.due_date.asc(),
            Task.created_at.desc(),
            Task.id.desc(),
        ),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, task: Task) -> Task:
    """
    Create a new task (flush only; the caller owns the transaction).

    Args:
        session: Database session
        task: Task instance to create

    Returns:
        Created task
    """
    session.add(task)
    await session.flush()
    await session.refresh(task)
    return task


async def replace_assignments(
    session: AsyncSession,
    *,
    task_id: int,
    user_ids: list[int],
) -> None:
    """
    Replace the collaborator set of a task.

    Deletes every existing assignment row and inserts one row per distinct
    user id inside the caller's transaction. Nothing is committed here, so
    the task write and the assignment change succeed or fail together.
    """
    await session.execute(sa_delete(TaskAssignment).where(TaskAssignment.task_id == task_id))

    distinct_ids = list(dict.fromkeys(user_ids))
    if distinct_ids:
        session.add_all([TaskAssignment(task_id=task_id, user_id=user_id) for user_id in distinct_ids])
    await session.flush()


async def delete(session: AsyncSession, *, company_id: int, task_id: int) -> int:
    """Delete a task. Its assignments cascade; timesheets are detached by the store."""
    result = await session.execute(
        sa_delete(Task).where(Task.id == task_id, Task.company_id == company_id)
    )
    return result.rowcount
