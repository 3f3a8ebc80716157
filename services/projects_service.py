"""Service layer for Project business logic."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.enums import Role
from models.project import Project, ProjectCreate, ProjectUpdate
from repos import projects_repo
from services import references
from services.errors import NotFoundError
from services.validators import validate_date_range


async def list_projects(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    statuses: list[str] | None,
    search: str | None,
    client_uuid: UUID | None,
    manager_uuid: UUID | None,
    offset: int,
    limit: int,
) -> tuple[list[Project], int]:
    """
    List projects in the caller's company.

    Filter UUIDs are resolved first; an unknown one is a 422.

    Returns:
        (rows, total_count)
    """
    client = await references.resolve_client(session, membership_ctx, client_uuid, check_type=False)
    manager = await references.resolve_manager(session, membership_ctx, manager_uuid, check_role=False)

    return await projects_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        statuses=statuses,
        search=search,
        client_id=references.id_of(client),
        manager_id=references.id_of(manager),
        offset=offset,
        limit=limit,
    )


async def get_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID,
) -> Project:
    """
    Get a project by UUID with client and manager loaded.

    Raises:
        NotFoundError: 404 if project not found
    """
    project = await projects_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        project_uuid=project_uuid,
        with_relations=True,
    )

    if not project:
        raise NotFoundError("Project not found")

    return project


async def create_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: ProjectCreate,
) -> Project:
    """
    Create a new project.

    When manager_uuid is omitted and the caller is a project manager, the
    caller manages the project.

    Args:
        session: Database session
        membership_ctx: Tenancy context with user_id, company_id, role
        payload: Project creation data

    Returns:
        Created project with relations loaded
    """
    validate_date_range(payload.start_date, payload.end_date)

    client = await references.resolve_client(session, membership_ctx, payload.client_uuid)
    if "manager_uuid" in payload.model_fields_set:
        manager_id = references.id_of(
            await references.resolve_manager(session, membership_ctx, payload.manager_uuid)
        )
    elif membership_ctx.role == Role.PROJECT_MANAGER.value:
        manager_id = membership_ctx.user_id
    else:
        manager_id = None

    project = Project(
        company_id=membership_ctx.company_id,
        name=payload.name,
        description=payload.description,
        client_id=references.id_of(client),
        manager_id=manager_id,
        status=payload.status,
        start_date=payload.start_date,
        end_date=payload.end_date,
        budget=payload.budget,
    )

    created_project = await projects_repo.create(session, project)
    await session.commit()

    return await projects_repo.get_by_id(
        session, company_id=membership_ctx.company_id, project_id=created_project.id
    )


async def update_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID,
    payload: ProjectUpdate,
) -> Project:
    """
    Update an existing project.

    Only provided fields change; explicit nulls clear the optional ones.
    The date range is checked against the merged existing and new values.

    Raises:
        NotFoundError: 404 if project not found
    """
    project = await projects_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, project_uuid=project_uuid
    )

    if not project:
        raise NotFoundError("Project not found")

    fields = payload.model_fields_set

    start_date = payload.start_date if "start_date" in fields else project.start_date
    end_date = payload.end_date if "end_date" in fields else project.end_date
    validate_date_range(start_date, end_date)

    # Resolve references before touching the row
    if "client_uuid" in fields:
        client = await references.resolve_client(session, membership_ctx, payload.client_uuid)
    if "manager_uuid" in fields:
        manager = await references.resolve_manager(session, membership_ctx, payload.manager_uuid)

    # Update only provided fields
    if "client_uuid" in fields:
        project.client_id = references.id_of(client)
    if "manager_uuid" in fields:
        project.manager_id = references.id_of(manager)
    if payload.name is not None:
        project.name = payload.name
    if "description" in fields:
        project.description = payload.description
    if payload.status is not None:
        project.status = payload.status
    if payload.budget is not None:
        project.budget = payload.budget
    project.start_date = start_date
    project.end_date = end_date

    await session.commit()

    return await projects_repo.get_by_id(
        session, company_id=membership_ctx.company_id, project_id=project.id
    )


async def delete_project(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID,
) -> None:
    """
    Delete a project.

    Raises:
        NotFoundError: 404 if project not found
    """
    project = await projects_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, project_uuid=project_uuid
    )
    if not project:
        raise NotFoundError("Project not found")

    await projects_repo.delete(session, company_id=membership_ctx.company_id, project_id=project.id)
    await session.commit()
