"""Response schemas for the analytics dashboard."""

from pydantic import BaseModel


class ProjectTrendPoint(BaseModel):
    month: str
    active: int
    completed: int


class RevenueCostPoint(BaseModel):
    month: str
    revenue: float
    cost: float


class UtilizationSegment(BaseModel):
    name: str
    value: int
    color: str


class KpiValue(BaseModel):
    current: int | float
    delta: int | float


class DashboardKpi(BaseModel):
    active_projects: KpiValue
    tasks_completed: KpiValue
    hours_logged: KpiValue
    revenue: KpiValue


class DashboardResponse(BaseModel):
    project_trends: list[ProjectTrendPoint]
    revenue_vs_cost: list[RevenueCostPoint]
    resource_utilization: list[UtilizationSegment]
    kpi: DashboardKpi
