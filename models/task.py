"""Task and TaskAssignment models."""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base
from models.common import (
    ProjectSummary,
    RequestSchema,
    TimestampedResponse,
    UserSummary,
    lower_if_str,
)
from models.enums import TaskPriority, TaskStatus


class Task(Base):
    """Task ORM model. Has one primary assignee and a set of collaborators."""

    __tablename__ = "tasks"

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
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskStatus.TODO.value)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskPriority.MEDIUM.value)
    assignee_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    project = relationship("Project", lazy="raise")
    assignee = relationship("User", lazy="raise")
    assignments = relationship(
        "TaskAssignment",
        lazy="raise",
        order_by="TaskAssignment.id",
        viewonly=True,
    )


class TaskAssignment(Base):
    """Collaborator row linking a user to a task."""

    __tablename__ = "task_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True, default=uuid4)
    task_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    user = relationship("User", lazy="raise")

    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="uq_task_assignments_task_user"),
    )


TaskStatusField = Annotated[TaskStatus, BeforeValidator(lower_if_str)]
TaskPriorityField = Annotated[TaskPriority, BeforeValidator(lower_if_str)]


# Pydantic schemas
class TaskCreate(RequestSchema):
    project_uuid: UUID
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatusField = TaskStatus.TODO
    priority: TaskPriorityField = TaskPriority.MEDIUM
    assignee_uuid: UUID | None = None
    due_date: date | None = None
    assigned_user_uuids: list[UUID] | None = None


class TaskUpdate(RequestSchema):
    """
    Partial update. A task stays in the project it was created in.

    assigned_user_uuids replaces the collaborators ([] or null clears them);
    omitting it leaves them.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatusField | None = None
    priority: TaskPriorityField | None = None
    assignee_uuid: UUID | None = None
    due_date: date | None = None
    assigned_user_uuids: list[UUID] | None = None


class TaskAssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    assigned_at: datetime
    user: UserSummary


class TaskResponse(TimestampedResponse):
    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: date | None = None
    project: ProjectSummary
    assignee: UserSummary | None = None
    assignments: list[TaskAssignmentResponse] = []
