"""Service layer for Timesheet business logic."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.timesheet import Timesheet, TimesheetCreate, TimesheetUpdate
from repos import timesheets_repo
from services import references
from services.errors import ErrorCode, InvalidReferenceError, NotFoundError

# Columns that cannot be cleared with an explicit null
_REQUIRED_FIELDS = {"date", "hours", "billable", "cost_rate"}


async def list_timesheets(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    project_uuid: UUID | None,
    task_uuid: UUID | None,
    user_uuid: UUID | None,
    billable: bool | None,
    date_from: date | None,
    date_to: date | None,
    search: str | None,
    offset: int,
    limit: int,
) -> tuple[list[Timesheet], int]:
    project = await references.resolve_project(session, membership_ctx, project_uuid)
    task = await references.resolve_task(session, membership_ctx, task_uuid)
    user = await references.resolve_user(session, membership_ctx, user_uuid)

    return await timesheets_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        project_id=references.id_of(project),
        task_id=references.id_of(task),
        user_id=references.id_of(user),
        billable=billable,
        date_from=date_from,
        date_to=date_to,
        search=search,
        offset=offset,
        limit=limit,
    )


async def get_timesheet(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    timesheet_uuid: UUID,
) -> Timesheet:
    """
    Get a timesheet entry by UUID.

    Raises:
        NotFoundError: 404 if timesheet not found
    """
    timesheet = await timesheets_repo.get_by_uuid(
        session,
        company_id=membership_ctx.company_id,
        timesheet_uuid=timesheet_uuid,
        with_relations=True,
    )
    if not timesheet:
        raise NotFoundError("Timesheet not found")
    return timesheet


async def create_timesheet(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: TimesheetCreate,
) -> Timesheet:
    """
    Log hours against a project (and optionally one of its tasks).

    cost_rate defaults to the user's hourly rate.
    """
    project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
    task = await references.resolve_task(
        session, membership_ctx, payload.task_uuid, project_id=project.id
    )
    user = await references.resolve_user(session, membership_ctx, payload.user_uuid)

    cost_rate = payload.cost_rate if payload.cost_rate is not None else user.hourly_rate

    timesheet = Timesheet(
        company_id=membership_ctx.company_id,
        project_id=project.id,
        task_id=references.id_of(task),
        user_id=user.id,
        date=payload.date,
        hours=payload.hours,
        description=payload.description,
        billable=payload.billable,
        cost_rate=cost_rate,
    )
    timesheet = await timesheets_repo.create(session, timesheet)
    await session.commit()

    return await timesheets_repo.get_by_id(
        session, company_id=membership_ctx.company_id, timesheet_id=timesheet.id
    )


async def update_timesheet(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    timesheet_uuid: UUID,
    payload: TimesheetUpdate,
) -> Timesheet:
    """
    Partially update a timesheet entry.

    A task, new or kept, must belong to the entry's (possibly new) project.

    Raises:
        NotFoundError: 404 if timesheet not found
    """
    timesheet = await timesheets_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, timesheet_uuid=timesheet_uuid
    )
    if not timesheet:
        raise NotFoundError("Timesheet not found")

    fields = payload.model_fields_set

    project_id = timesheet.project_id
    if payload.project_uuid is not None:
        project = await references.resolve_project(session, membership_ctx, payload.project_uuid)
        project_id = project.id

    task_id = timesheet.task_id
    if "task_uuid" in fields:
        task = await references.resolve_task(
            session, membership_ctx, payload.task_uuid, project_id=project_id
        )
        task_id = references.id_of(task)
    elif task_id is not None and project_id != timesheet.project_id:
        # Moving the entry to another project orphans its current task
        raise InvalidReferenceError(ErrorCode.TASK_NOT_IN_PROJECT)

    user_id = timesheet.user_id
    if payload.user_uuid is not None:
        user = await references.resolve_user(session, membership_ctx, payload.user_uuid)
        user_id = user.id

    timesheet.project_id = project_id
    timesheet.task_id = task_id
    timesheet.user_id = user_id
    for field in ("date", "hours", "description", "billable", "cost_rate"):
        if field not in fields:
            continue
        value = getattr(payload, field)
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(timesheet, field, value)

    await session.commit()

    return await timesheets_repo.get_by_id(
        session, company_id=membership_ctx.company_id, timesheet_id=timesheet.id
    )


async def delete_timesheet(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    timesheet_uuid: UUID,
) -> None:
    timesheet = await timesheets_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, timesheet_uuid=timesheet_uuid
    )
    if not timesheet:
        raise NotFoundError("Timesheet not found")

    await timesheets_repo.delete(
        session, company_id=membership_ctx.company_id, timesheet_id=timesheet.id
    )
    await session.commit()
