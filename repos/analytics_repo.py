"""
Aggregate queries behind the analytics dashboard.

Every query is scoped to one company and bucketed by a `YYYY-MM` month key
computed in SQL. Each function returns {month_key: value} for the months
that have rows; callers fill the gaps.
"""

from datetime import date, datetime, time

from sqlalchemy import case, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.enums import OPEN_TASK_STATUSES, DocumentStatus, ProjectStatus, TaskStatus
from models.expense import Expense
from models.invoice import Invoice
from models.project import Project
from models.task import Task
from models.timesheet import Timesheet
from models.user import User
from models.vendor_bill import VendorBill

# Invoice statuses that count as revenue
REVENUE_STATUSES = (DocumentStatus.SENT.value, DocumentStatus.APPROVED.value, DocumentStatus.PAID.value)

# Vendor bill and expense statuses that count as cost
COST_STATUSES = (DocumentStatus.APPROVED.value, DocumentStatus.PAID.value)


def month_key(session: AsyncSession, column):
    """SQL expression formatting a date/datetime column as YYYY-MM."""
    if session.bind.dialect.name == "postgresql":
        return func.to_char(column, "YYYY-MM")
    return func.strftime("%Y-%m", column)


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min)


async def _monthly(session: AsyncSession, column, aggregate, *conditions) -> dict[str, float]:
    month = month_key(session, column).label("month")
    result = await session.execute(
        select(month, func.coalesce(aggregate, 0)).where(*conditions).group_by(month)
    )
    return {row[0]: float(row[1]) for row in result.all()}


async def project_trends(
    session: AsyncSession, *, company_id: int, start_date: date
) -> dict[str, tuple[int, int]]:
    """Projects created per month, split into (active, completed) by current status."""
    month = month_key(session, Project.created_at).label("month")
    result = await session.execute(
        select(
            month,
            func.sum(case((Project.status == ProjectStatus.ACTIVE.value, 1), else_=0)),
            func.sum(case((Project.status == ProjectStatus.COMPLETED.value, 1), else_=0)),
        )
        .where(Project.company_id == company_id, Project.created_at >= _start_of(start_date))
        .group_by(month)
    )
    return {row[0]: (int(row[1] or 0), int(row[2] or 0)) for row in result.all()}


async def task_completions(session: AsyncSession, *, company_id: int, start_date: date) -> dict[str, float]:
    """Tasks in `done`, bucketed by the month they were last updated."""
    return await _monthly(
        session,
        Task.updated_at,
        func.count(Task.id),
        Task.company_id == company_id,
        Task.status == TaskStatus.DONE.value,
        Task.updated_at >= _start_of(start_date),
    )


async def timesheet_hours(session: AsyncSession, *, company_id: int, start_date: date) -> dict[str, float]:
    return await _monthly(
        session,
        Timesheet.date,
        func.sum(Timesheet.hours),
        Timesheet.company_id == company_id,
        Timesheet.date >= start_date,
    )


async def invoice_revenue(session: AsyncSession, *, company_id: int, start_date: date) -> dict[str, float]:
    return await _monthly(
        session,
        Invoice.date,
        func.sum(Invoice.total_amount),
        Invoice.company_id == company_id,
        Invoice.status.in_(REVENUE_STATUSES),
        Invoice.date >= start_date,
    )


async def timesheet_cost(session: AsyncSession, *, company_id: int, start_date: date) -> dict[str, float]:
    return await _monthly(
        session,
        Timesheet.date,
        func.sum(Timesheet.hours * Timesheet.cost_rate),
        Timesheet.company_id == company_id,
        Timesheet.date >= start_date,
    )


async def vendor_bill_cost(session: AsyncSession, *, company_id: int, start_date: date) -> dict[str, float]:
    return await _monthly(
        session,
        VendorBill.date,
        func.sum(VendorBill.total_amount),
        VendorBill.company_id == company_id,
        VendorBill.status.in_(COST_STATUSES),
        VendorBill.date >= start_date,
    )


async def expense_cost(session: AsyncSession, *, company_id: int, start_date: date) -> dict[str, float]:
    return await _monthly(
        session,
        Expense.date,
        func.sum(Expense.amount),
        Expense.company_id == company_id,
        Expense.status.in_(COST_STATUSES),
        Expense.date >= start_date,
    )


async def count_users(session: AsyncSession, *, company_id: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(User).where(User.company_id == company_id)
    )
    return result.scalar_one()


async def count_allocated_users(session: AsyncSession, *, company_id: int) -> int:
    """Distinct assignees of open tasks."""
    result = await session.execute(
        select(func.count(distinct(Task.assignee_id))).where(
            Task.company_id == company_id,
            Task.assignee_id.is_not(None),
            Task.status.in_(OPEN_TASK_STATUSES),
        )
    )
    return result.scalar_one()


async def count_overdue_tasks(session: AsyncSession, *, company_id: int, today: date) -> int:
    """Assigned tasks that are past their due date and not done."""
    result = await session.execute(
        select(func.count())
        .select_from(Task)
        .where(
            Task.company_id == company_id,
            Task.assignee_id.is_not(None),
            Task.status != TaskStatus.DONE.value,
            Task.due_date < today,
        )
    )
    return result.scalar_one()
