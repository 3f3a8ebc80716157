"""Analytics dashboard endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.deps import get_session_factory, get_tenancy_context
from api.responses import ApiResponse, envelope
from api.tenancy import TenancyContext
from models.analytics import DashboardResponse
from services import analytics_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/Analytics/dashboard", response_model=ApiResponse[DashboardResponse])
async def get_dashboard(
    tenancy: TenancyContext = Depends(get_tenancy_context),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """
    Six-month project, task and financial trends for the caller's company.

    Any failing query fails the whole dashboard with a generic 500.
    """
    try:
        dashboard = await analytics_service.get_dashboard(session_factory, membership_ctx=tenancy)
        return envelope(dashboard, message="Analytics data retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to build analytics dashboard for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load analytics data",
        )
