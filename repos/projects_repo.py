"""Repository for Project database operations."""

from uuid import UUID

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from models.project import Project
from repos.base import fetch_page, search_clause

# Relations embedded in every project response
_RELATIONS = (
    joinedload(Project.client),
    joinedload(Project.manager),
)


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    project_uuid: UUID,
    with_relations: bool = False,
) -> Project | None:
    """
    Get a project by UUID.

    Args:
        session: Database session
        company_id: Company ID to filter by
        project_uuid: Project UUID to fetch
        with_relations: If True, load client and manager for the response

    Returns:
        Project if found, None otherwise
    """
    query = select(Project).where(
        Project.uuid == project_uuid,
        Project.company_id == company_id,
    )

    if with_relations:
        query = query.options(*_RELATIONS).execution_options(populate_existing=True)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_by_id(session: AsyncSession, *, company_id: int, project_id: int) -> Project | None:
    """Get a project by internal id with its relations refreshed."""
    result = await session.execute(
        select(Project)
        .options(*_RELATIONS)
        .where(Project.id == project_id, Project.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    statuses: list[str] | None = None,
    search: str | None = None,
    client_id: int | None = None,
    manager_id: int | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Project], int]:
    """
    List projects of a company, newest first.

    Returns:
        (rows, total_count)
    """
    query = select(Project).where(Project.company_id == company_id)

    if statuses:
        query = query.where(Project.status.in_(statuses))
    if client_id is not None:
        query = query.where(Project.client_id == client_id)
    if manager_id is not None:
        query = query.where(Project.manager_id == manager_id)
    clause = search_clause(search, Project.name, Project.description)
    if clause is not None:
        query = query.where(clause)

    return await fetch_page(
        session,
        query,
        order_by=(Project.created_at.desc(), Project.id.desc()),
        options=_RELATIONS,
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, project: Project) -> Project:
    """
    Create a new project.

    Args:
        session: Database session
        project: Project instance to create

    Returns:
        Created project
    """
    session.add(project)
    await session.flush()
    await session.refresh(project)
    return project


async def delete(session: AsyncSession, *, company_id: int, project_id: int) -> int:
    """Delete a project. Tasks, timesheets, expenses and sales orders cascade in the store."""
    result = await session.execute(
        sa_delete(Project).where(Project.id == project_id, Project.company_id == company_id)
    )
    return result.rowcount
