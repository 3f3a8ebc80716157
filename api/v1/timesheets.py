"""Timesheet endpoints with tenant isolation."""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Pagination, get_db, get_tenancy_context, pagination_params, require_roles
from api.responses import ApiResponse, envelope, paged
from api.tenancy import TenancyContext
from models.enums import Role
from models.timesheet import TimesheetCreate, TimesheetResponse, TimesheetUpdate
from services import timesheets_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

# Anyone can log time; corrections are for managers and finance
can_edit = require_roles(Role.ADMIN, Role.PROJECT_MANAGER, Role.FINANCE)


@router.get("/Timesheets", response_model=ApiResponse[list[TimesheetResponse]])
async def list_timesheets(
    project_uuid: UUID | None = Query(None),
    task_uuid: UUID | None = Query(None),
    user_uuid: UUID | None = Query(None),
    billable: bool | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        rows, total = await timesheets_service.list_timesheets(
            db,
            membership_ctx=tenancy,
            project_uuid=project_uuid,
            task_uuid=task_uuid,
            user_uuid=user_uuid,
            billable=billable,
            date_from=date_from,
            date_to=date_to,
            search=search,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [TimesheetResponse.model_validate(timesheet) for timesheet in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Timesheets retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list timesheets for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch timesheets",
        )


@router.get("/Timesheets/{timesheet_uuid}", response_model=ApiResponse[TimesheetResponse])
async def get_timesheet(
    timesheet_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        timesheet = await timesheets_service.get_timesheet(
            db, membership_ctx=tenancy, timesheet_uuid=timesheet_uuid
        )
        return envelope(TimesheetResponse.model_validate(timesheet), message="Timesheet retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch timesheet %s", timesheet_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch timesheet",
        )


@router.post(
    "/Timesheets",
    response_model=ApiResponse[TimesheetResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_timesheet(
    payload: TimesheetCreate,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Log hours.

    cost_rate defaults to the user's hourly rate; the task, if any, must
    belong to the project.
    """
    try:
        timesheet = await timesheets_service.create_timesheet(
            db, membership_ctx=tenancy, payload=payload
        )
        return envelope(
            TimesheetResponse.model_validate(timesheet),
            message="Timesheet created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create timesheet in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create timesheet",
        )


@router.put("/Timesheets/{timesheet_uuid}", response_model=ApiResponse[TimesheetResponse])
async def update_timesheet(
    timesheet_uuid: UUID,
    payload: TimesheetUpdate,
    tenancy: TenancyContext = Depends(can_edit),
    db: AsyncSession = Depends(get_db),
):
    try:
        timesheet = await timesheets_service.update_timesheet(
            db, membership_ctx=tenancy, timesheet_uuid=timesheet_uuid, payload=payload
        )
        return envelope(TimesheetResponse.model_validate(timesheet), message="Timesheet updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update timesheet %s", timesheet_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update timesheet",
        )


@router.delete("/Timesheets/{timesheet_uuid}", response_model=ApiResponse[None])
async def delete_timesheet(
    timesheet_uuid: UUID,
    tenancy: TenancyContext = Depends(can_edit),
    db: AsyncSession = Depends(get_db),
):
    try:
        await timesheets_service.delete_timesheet(
            db, membership_ctx=tenancy, timesheet_uuid=timesheet_uuid
        )
        return envelope(message="Timesheet deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete timesheet %s", timesheet_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete timesheet",
        )
