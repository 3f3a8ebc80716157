"""Service layer for Task business logic."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.task import Task, TaskCreate, TaskUpdate
from repos import tasks_repo
from services import references
from services.errors import ErrorCode, NotFoundError

logger = logging.getLogger(__name__)


async def list_tasks(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    statuses: list[str] | None,
    priorities: list[str] | None,
    search: str | None,
    project_uuid: UUID | None,
    assignee_uuid: UUID | None,
    offset: int,
    limit: int,
) -> tuple[list[Task], int]:
    """
    List tasks in the caller's company.

    Returns:
        (rows, total_count)
    """
    project = await references.resolve_project(session, membership_ctx, project_uuid)
    assignee = await references.resolve_user(
        session, membership_ctx, assignee_uuid, code=ErrorCode.INVALID_ASSIGNEE
    )

    return await tasks_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        statuses=statuses,
        priorities=priorities,
        search=search,
        project_id=references.id_of(project),
        assignee_id=references.id_of(assignee),
        offset=offset,
        limit=limit,
    )


async def get_task(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    task_uuid: UUID,
) -> Task:
    """
    Get a task by UUID with project, assignee and assignments loaded.

    Raises:
        NotFoundError: 404 if task not found
    """
    task = await tasks_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        task_uuid=task_uuid,
        with_relations=True,
    )
    if not task:
        raise NotFoundError("Task not found")
    return task


async def create_task(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: TaskCreate,
) -> Task:
    """
    Create a task and, when given, its collaborator set in one transaction.

    Every referenced UUID is resolved before anything is written.
    """
    project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    assignee = await references.resolve_user(
        session, membership_ctx, payload.assignee_uuid, code=ErrorCode.INVALID_ASSIGNEE
    )
    assigned_user_ids = None
    if payload.assigned_user_uuids is not None:
        assigned_user_ids = await references.resolve_assignment_users(
            session, membership_ctx, payload.assigned_user_uuids
        )

    task = Task(
        company_id=membership_ctx.company_id,
        project_id=project.id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
        priority=payload.priority,
        assignee_id=references.id_of(assignee),
        due_date=payload.due_date,
    )

    try:
        task = await tasks_repo.create(session, task)
        if assigned_user_ids is not None:
            await tasks_repo.replace_assignments(session, task_id=task.id, user_ids=assigned_user_ids)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    return await tasks_repo.get_by_id(session, company_id=membership_ctx.company_id, task_id=task.id)


async def update_task(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    task_uuid: UUID,
    payload: TaskUpdate,
) -> Task:
    """
    Partially update a task.

    assigned_user_uuids replaces the collaborator set (an empty list or null
    clears it); leaving the field out keeps the current set. The project is
    fixed at creation. Field changes and the assignment change commit or
    roll back together.

    Raises:
        NotFoundError: 404 if task not found
    """
    task = await tasks_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, task_uuid=task_uuid
    )
    if not task:
        raise NotFoundError("Task not found")

    fields = payload.model_fields_set

    # Resolve references before touching the row
    if "assignee_uuid" in fields:
        assignee = await references.resolve_user(
            session, membership_ctx, payload.assignee_uuid, code=ErrorCode.INVALID_ASSIGNEE
        )
    assigned_user_ids = None
    if "assigned_user_uuids" in fields:
        assigned_user_ids = await references.resolve_assignment_users(
            session, membership_ctx, payload.assigned_user_uuids or []
        )

    if "assignee_uuid" in fields:
        task.assignee_id = references.id_of(assignee)
    if payload.title is not None:
        task.title = payload.title
    if "description" in fields:
        task.description = payload.description
    if payload.status is not None:
        task.status = payload.status
    if payload.priority is not None:
        task.priority = payload.priority
    if "due_date" in fields:
        task.due_date = payload.due_date

    try:
        await session.flush()
        if assigned_user_ids is not None:
            await tasks_repo.replace_assignments(session, task_id=task.id, user_ids=assigned_user_ids)
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Task %s update rolled back", task_uuid)
        raise

    return await tasks_repo.get_by_id(session, company_id=membership_ctx.company_id, task_id=task.id)


async def delete_task(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    task_uuid: UUID,
) -> None:
    task = await tasks_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, task_uuid=task_uuid
    )
    if not task:
        raise NotFoundError("Task not found")

    await tasks_repo.delete(session, company_id=membership_ctx.company_id, task_id=task.id)
    await session.commit()
