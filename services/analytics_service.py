"""
Dashboard analytics for a company.

Builds a six-month series (oldest first, ending at the current month) of
project, task and financial metrics plus point-in-time KPIs and a resource
utilization snapshot. The aggregate queries are independent, so each runs
on its own session and they are awaited together; any failure aborts the
whole dashboard.
"""

import asyncio
import logging
from datetime import UTC, date, datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.tenancy import TenancyContext
from models.analytics import (
    DashboardKpi,
    DashboardResponse,
    KpiValue,
    ProjectTrendPoint,
    RevenueCostPoint,
    UtilizationSegment,
)
from repos import analytics_repo

logger = logging.getLogger(__name__)

MONTHS_TO_ANALYZE = 6

AVAILABLE_COLOR = "#22C55E"
ALLOCATED_COLOR = "#06B6D4"
OVERALLOCATED_COLOR = "#EF4444"

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def recent_months(today: date, count: int = MONTHS_TO_ANALYZE) -> list[date]:
    """First day of each of the last `count` calendar months, oldest first."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def month_label(month: date) -> str:
    return MONTH_ABBREVIATIONS[month.month - 1]


def combine_series(*series: dict[str, float]) -> dict[str, float]:
    """Sum several {month_key: value} maps into one."""
    combined: dict[str, float] = {}
    for values in series:
        for key, value in values.items():
            combined[key] = combined.get(key, 0) + value
    return combined


def _kpi(values: dict, keys: list[str], ndigits: int | None = None) -> KpiValue:
    current = values.get(keys[-1], 0)
    previous = values.get(keys[-2], 0) if len(keys) > 1 else current
    delta = current - previous
    if ndigits is not None:
        current, delta = round(current, ndigits), round(delta, ndigits)
    return KpiValue(current=current, delta=delta)


async def _run(session_factory: async_sessionmaker[AsyncSession], query, **kwargs):
    async with session_factory() as session:
        return await query(session, **kwargs)


async def get_dashboard(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    membership_ctx: TenancyContext,
    today: date | None = None,
) -> DashboardResponse:
    """
    Assemble the analytics dashboard for the caller's company.

    Args:
        session_factory: Factory used to open one session per query
        membership_ctx: Tenancy context of the caller
        today: Reference day (defaults to the current UTC date)

    Returns:
        DashboardResponse with zero-filled monthly series
    """
    today = today or datetime.now(UTC).date()
    months = recent_months(today)
    keys = [month.strftime("%Y-%m") for month in months]
    scope = {"company_id": membership_ctx.company_id}
    window = {**scope, "start_date": months[0]}

    (
        projects,
        completions,
        hours,
        revenue,
        timesheet_cost,
        vendor_bill_cost,
        expense_cost,
        total_users,
        allocated_users,
        overdue_tasks,
    ) = await asyncio.gather(
        _run(session_factory, analytics_repo.project_trends, **window),
        _run(session_factory, analytics_repo.task_completions, **window),
        _run(session_factory, analytics_repo.timesheet_hours, **window),
        _run(session_factory, analytics_repo.invoice_revenue, **window),
        _run(session_factory, analytics_repo.timesheet_cost, **window),
        _run(session_factory, analytics_repo.vendor_bill_cost, **window),
        _run(session_factory, analytics_repo.expense_cost, **window),
        _run(session_factory, analytics_repo.count_users, **scope),
        _run(session_factory, analytics_repo.count_allocated_users, **scope),
        _run(session_factory, analytics_repo.count_overdue_tasks, **scope, today=today),
    )

    cost = combine_series(timesheet_cost, vendor_bill_cost, expense_cost)
    active_projects = {key: counts[0] for key, counts in projects.items()}

    project_trends = [
        ProjectTrendPoint(
            month=month_label(month),
            active=projects.get(key, (0, 0))[0],
            completed=projects.get(key, (0, 0))[1],
        )
        for month, key in zip(months, keys)
    ]
    revenue_vs_cost = [
        RevenueCostPoint(
            month=month_label(month),
            revenue=round(revenue.get(key, 0), 2),
            cost=round(cost.get(key, 0), 2),
        )
        for month, key in zip(months, keys)
    ]

    resource_utilization = [
        UtilizationSegment(
            name="Available", value=max(total_users - allocated_users, 0), color=AVAILABLE_COLOR
        ),
        UtilizationSegment(name="Allocated", value=allocated_users, color=ALLOCATED_COLOR),
        # Counts overdue assigned tasks, not users with too much work
        UtilizationSegment(name="Overallocated", value=overdue_tasks, color=OVERALLOCATED_COLOR),
    ]

    kpi = DashboardKpi(
        active_projects=_kpi(active_projects, keys),
        tasks_completed=_kpi(completions, keys),
        hours_logged=_kpi(hours, keys, ndigits=1),
        revenue=_kpi(revenue, keys, ndigits=2),
    )

    logger.debug("Built dashboard for company %s over %s..%s", membership_ctx.company_id, keys[0], keys[-1])

    return DashboardResponse(
        project_trends=project_trends,
        revenue_vs_cost=revenue_vs_cost,
        resource_utilization=resource_utilization,
        kpi=kpi,
    )
