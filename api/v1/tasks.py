"""Task endpoints with tenant isolation."""

import logging
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
from models.enums import Role, TaskPriority, TaskStatus
from models.task import TaskCreate, TaskResponse, TaskUpdate
from services import tasks_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

can_write = require_roles(Role.ADMIN, Role.PROJECT_MANAGER)


@router.get("/Tasks", response_model=ApiResponse[list[TaskResponse]])
async def list_tasks(
    status_filter: str | None = Query(None, alias="status"),
    priority: str | None = Query(None),
    search: str | None = Query(None),
    project_uuid: UUID | None = Query(None),
    assignee_uuid: UUID | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    List tasks in the current user's company.

    Tasks with a due date come first, soonest first.
    """
    try:
        rows, total = await tasks_service.list_tasks(
            db,
            membership_ctx=tenancy,
            statuses=parse_enum_list(status_filter, TaskStatus, "status"),
            priorities=parse_enum_list(priority, TaskPriority, "priority"),
            search=search,
            project_uuid=project_uuid,
            assignee_uuid=assignee_uuid,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [TaskResponse.model_validate(task) for task in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Tasks retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list tasks for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tasks",
        )


@router.get("/Tasks/{task_uuid}", response_model=ApiResponse[TaskResponse])
async def get_task(
    task_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        task = await tasks_service.get_task(db, membership_ctx=tenancy, task_uuid=task_uuid)
        return envelope(TaskResponse.model_validate(task), message="Task retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch task %s", task_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch task",
        )


@router.post(
    "/Tasks",
    response_model=ApiResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    payload: TaskCreate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a task.

    assigned_user_uuids, when given, becomes the task's collaborator set in
    the same transaction.
    """
    try:
        task = await tasks_service.create_task(db, membership_ctx=tenancy, payload=payload)
        return envelope(
            TaskResponse.model_validate(task),
            message="Task created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create task in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create task",
        )


@router.put("/Tasks/{task_uuid}", response_model=ApiResponse[TaskResponse])
async def update_task(
    task_uuid: UUID,
    payload: TaskUpdate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """
    Partially update a task.

    Sending assigned_user_uuids replaces the collaborator set; [] clears it.
    """
    try:
        task = await tasks_service.update_task(
            db, membership_ctx=tenancy, task_uuid=task_uuid, payload=payload
        )
        return envelope(TaskResponse.model_validate(task), message="Task updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update task %s", task_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update task",
        )


@router.delete("/Tasks/{task_uuid}", response_model=ApiResponse[None])
async def delete_task(
    task_uuid: UUID,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        await tasks_service.delete_task(db, membership_ctx=tenancy, task_uuid=task_uuid)
        return envelope(message="Task deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete task %s", task_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete task",
        )
