"""Unit tests for the dashboard analytics service."""

from datetime import UTC, date, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.expense import Expense
from models.invoice import Invoice
from models.project import Project
from models.task import Task
from models.timesheet import Timesheet
from models.vendor_bill import VendorBill
from services import analytics_service
from services.analytics_service import combine_series, recent_months


def test_recent_months_crosses_year_boundary():
    months = recent_months(date(2024, 2, 17))

    assert months == [
        date(2023, 9, 1),
        date(2023, 10, 1),
        date(2023, 11, 1),
        date(2023, 12, 1),
        date(2024, 1, 1),
        date(2024, 2, 1),
    ]
    assert [analytics_service.month_label(m) for m in months] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]


def test_combine_series_sums_by_month():
    combined = combine_series({"2024-01": 100.0}, {"2024-01": 50.0, "2024-02": 5.0}, {})

    assert combined == {"2024-01": 150.0, "2024-02": 5.0}


@pytest.mark.asyncio
async def test_empty_company_gets_zero_filled_dashboard(session_factory, company_a):
    """Test: A company with no activity still gets six zero buckets."""
    ctx = TenancyContext.from_user(company_a.admin)

    dashboard = await analytics_service.get_dashboard(
        session_factory, membership_ctx=ctx, today=date(2024, 6, 15)
    )

    assert [p.month for p in dashboard.project_trends] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    assert all(p.active == 0 and p.completed == 0 for p in dashboard.project_trends)
    assert all(p.revenue == 0 and p.cost == 0 for p in dashboard.revenue_vs_cost)
    assert [(s.name, s.value) for s in dashboard.resource_utilization] == [
        ("Available", 4),
        ("Allocated", 0),
        ("Overallocated", 0),
    ]
    assert dashboard.kpi.revenue.current == 0
    assert dashboard.kpi.hours_logged.delta == 0


@pytest.mark.asyncio
async def test_current_month_metrics(db_session: AsyncSession, session_factory, company_a, company_b):
    """Test: Cost sums timesheet, vendor bill and expense amounts for the month."""
    today = datetime.utcnow().date()
    company_id = company_a.company.id

    project = Project(company_id=company_id, name="Website", status="active")
    db_session.add(project)
    await db_session.flush()

    db_session.add_all(
        [
            Timesheet(
                company_id=company_id,
                project_id=project.id,
                user_id=company_a.member.id,
                date=today,
                hours=2,
                cost_rate=50,
            ),
            VendorBill(company_id=company_id, project_id=project.id, date=today, status="approved", total_amount=50),
            VendorBill(company_id=company_id, project_id=project.id, date=today, status="draft", total_amount=999),
            Expense(
                company_id=company_id,
                project_id=project.id,
                description="Hosting",
                amount=25,
                date=today,
                status="paid",
            ),
            Invoice(company_id=company_id, project_id=project.id, date=today, status="sent", total_amount=400),
            Invoice(company_id=company_id, project_id=project.id, date=today, status="draft", total_amount=1000),
            Task(
                company_id=company_id,
                project_id=project.id,
                title="Launch",
                status="done",
                assignee_id=company_a.member.id,
            ),
            Task(
                company_id=company_id,
                project_id=project.id,
                title="Migrate",
                status="in_progress",
                assignee_id=company_a.manager.id,
                due_date=today - timedelta(days=3),
            ),
        ]
    )
    await db_session.commit()

    # Activity in another company never leaks into this dashboard
    db_session.add(
        Invoice(company_id=company_b.company.id, date=today, status="paid", total_amount=5000)
    )
    await db_session.commit()

    dashboard = await analytics_service.get_dashboard(
        session_factory, membership_ctx=TenancyContext.from_user(company_a.admin), today=today
    )

    current = dashboard.revenue_vs_cost[-1]
    assert current.cost == 175
    assert current.revenue == 400

    assert dashboard.project_trends[-1].active == 1
    assert dashboard.kpi.active_projects.current == 1
    assert dashboard.kpi.tasks_completed.current == 1
    assert dashboard.kpi.hours_logged.current == 2
    assert dashboard.kpi.revenue.current == 400
    assert dashboard.kpi.revenue.delta == 400

    utilization = {s.name: s.value for s in dashboard.resource_utilization}
    assert utilization == {"Available": 3, "Allocated": 1, "Overallocated": 1}


class _JustAfterUtcMidnight(datetime):
    """Clock pinned to the first minutes of a UTC month."""

    @classmethod
    def now(cls, tz=None):
        return datetime(2024, 7, 1, 0, 30, tzinfo=UTC).astimezone(tz)


@pytest.mark.asyncio
async def test_default_day_follows_utc(session_factory, company_a, monkeypatch):
    """Test: Without an explicit day the window ends at the current UTC month."""
    monkeypatch.setattr(analytics_service, "datetime", _JustAfterUtcMidnight)

    dashboard = await analytics_service.get_dashboard(
        session_factory, membership_ctx=TenancyContext.from_user(company_a.admin)
    )

    assert [p.month for p in dashboard.project_trends] == ["Feb", "Mar", "Apr", "May", "Jun", "Jul"]
