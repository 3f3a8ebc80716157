"""Project model - company-owned engagement with a client and a manager."""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BeforeValidator, Field
from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base
from models.common import (
    ContactSummary,
    RequestSchema,
    TimestampedResponse,
    UserSummary,
    lower_if_str,
)
from models.enums import ProjectStatus


class Project(Base):
    """Project ORM model."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True, default=uuid4)
    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("contacts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    manager_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ProjectStatus.PLANNED.value)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    budget: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)
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

    client = relationship("Contact", lazy="raise")
    manager = relationship("User", lazy="raise")


ProjectStatusField = Annotated[ProjectStatus, BeforeValidator(lower_if_str)]


# Pydantic schemas
class ProjectCreate(RequestSchema):
    """Schema for creating a project.

    Note: company_id is NOT included - it's set from the tenancy context server-side.
    """

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    client_uuid: UUID | None = None
    manager_uuid: UUID | None = None
    status: ProjectStatusField = ProjectStatus.PLANNED
    start_date: date | None = None
    end_date: date | None = None
    budget: float = Field(default=0, ge=0)


class ProjectUpdate(RequestSchema):
    """Schema for updating a project. Explicit nulls clear nullable fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    client_uuid: UUID | None = None
    manager_uuid: UUID | None = None
    status: ProjectStatusField | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget: float | None = Field(default=None, ge=0)


class ProjectResponse(TimestampedResponse):
    name: str
    description: str | None = None
    status: str
    start_date: date | None = None
    end_date: date | None = None
    budget: float
    client: ContactSummary | None = None
    manager: UserSummary | None = None
