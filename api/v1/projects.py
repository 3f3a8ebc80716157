"""Project endpoints with tenant isolation."""

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
from models.enums import ProjectStatus, Role
from models.project import ProjectCreate, ProjectResponse, ProjectUpdate
from services import projects_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

can_write = require_roles(Role.ADMIN, Role.PROJECT_MANAGER)


@router.get("/Projects", response_model=ApiResponse[list[ProjectResponse]])
async def list_projects(
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None),
    client_uuid: UUID | None = Query(None),
    manager_uuid: UUID | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    List projects in the current user's company.

    Returns:
        Page of projects, newest first, with client and manager embedded.
    """
    try:
        rows, total = await projects_service.list_projects(
            db,
            membership_ctx=tenancy,
            statuses=parse_enum_list(status_filter, ProjectStatus, "status"),
            search=search,
            client_uuid=client_uuid,
            manager_uuid=manager_uuid,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [ProjectResponse.model_validate(project) for project in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Projects retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list projects for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch projects",
        )


@router.get("/Projects/{project_uuid}", response_model=ApiResponse[ProjectResponse])
async def get_project(
    project_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific project by UUID.

    Raises:
        404 if project not found in the user's company.
    """
    try:
        project = await projects_service.get_project(
            db, membership_ctx=tenancy, project_uuid=project_uuid
        )
        return envelope(ProjectResponse.model_validate(project), message="Project retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch project %s", project_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch project",
        )


@router.post(
    "/Projects",
    response_model=ApiResponse[ProjectResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    payload: ProjectCreate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new project.

    Note: the company is always taken from the caller's token.
    """
    try:
        project = await projects_service.create_project(db, membership_ctx=tenancy, payload=payload)
        return envelope(
            ProjectResponse.model_validate(project),
            message="Project created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create project in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create project",
        )


@router.put("/Projects/{project_uuid}", response_model=ApiResponse[ProjectResponse])
async def update_project(
    project_uuid: UUID,
    payload: ProjectUpdate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """
    Update an existing project.

    Only provided fields will be updated.
    """
    try:
        project = await projects_service.update_project(
            db, membership_ctx=tenancy, project_uuid=project_uuid, payload=payload
        )
        return envelope(ProjectResponse.model_validate(project), message="Project updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update project %s", project_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update project",
        )


@router.delete("/Projects/{project_uuid}", response_model=ApiResponse[None])
async def delete_project(
    project_uuid: UUID,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a project together with its tasks, timesheets, expenses and sales orders.

    Invoices, purchase orders and vendor bills are kept with the project cleared.
    """
    try:
        await projects_service.delete_project(db, membership_ctx=tenancy, project_uuid=project_uuid)
        return envelope(message="Project deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete project %s", project_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete project",
        )
