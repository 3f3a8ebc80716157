"""Timesheet model - hours logged by a user against a project."""

import datetime as dt
from uuid import UUID, uuid4

from pydantic import Field, computed_field
from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base
from models.common import (
    ProjectSummary,
    RequestSchema,
    TaskSummary,
    TimestampedResponse,
    UserSummary,
)


class Timesheet(Base):
    """Timesheet ORM model. Cost total is derived, never stored."""

    __tablename__ = "timesheets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True, default=uuid4)
    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    task_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("tasks.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    hours: Mapped[float] = mapped_column(Numeric(5, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    billable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    cost_rate: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=dt.datetime.utcnow,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=dt.datetime.utcnow,
        onupdate=dt.datetime.utcnow,
    )

    project = relationship("Project", lazy="raise")
    task = relationship("Task", lazy="raise")
    user = relationship("User", lazy="raise")


# Pydantic schemas
class TimesheetCreate(RequestSchema):
    project_uuid: UUID
    task_uuid: UUID | None = None
    user_uuid: UUID
    date: dt.date
    hours: float = Field(ge=0.01, le=24)
    description: str | None = None
    billable: bool = True
    cost_rate: float | None = Field(default=None, ge=0)


class TimesheetUpdate(RequestSchema):
    project_uuid: UUID | None = None
    task_uuid: UUID | None = None
    user_uuid: UUID | None = None
    date: dt.date | None = None
    hours: float | None = Field(default=None, ge=0.01, le=24)
    description: str | None = None
    billable: bool | None = None
    cost_rate: float | None = Field(default=None, ge=0)


class TimesheetResponse(TimestampedResponse):
    date: dt.date
    hours: float
    description: str | None = None
    billable: bool
    cost_rate: float
    project: ProjectSummary
    task: TaskSummary | None = None
    user: UserSummary

    @computed_field
    @property
    def cost_total(self) -> float:
        return round(self.hours * self.cost_rate, 2)
