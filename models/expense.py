"""Expense model - out-of-pocket spend on a project."""

import datetime as dt
from uuid import UUID, uuid4

from pydantic import Field
from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base
from models.common import (
    DocumentStatusField,
    ProjectSummary,
    RequestSchema,
    TimestampedResponse,
    UserSummary,
)
from models.enums import DocumentStatus


class Expense(Base):
    """Expense ORM model."""

    __tablename__ = "expenses"

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
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    billable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=DocumentStatus.DRAFT.value)
    receipt_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
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
    user = relationship("User", lazy="raise")


# Pydantic schemas
class ExpenseCreate(RequestSchema):
    project_uuid: UUID
    user_uuid: UUID | None = None
    description: str = Field(min_length=1)
    amount: float = Field(ge=0)
    date: dt.date
    billable: bool = False
    status: DocumentStatusField = DocumentStatus.DRAFT
    receipt_url: str | None = Field(default=None, max_length=1024)


class ExpenseUpdate(RequestSchema):
    project_uuid: UUID | None = None
    user_uuid: UUID | None = None
    description: str | None = Field(default=None, min_length=1)
    amount: float | None = Field(default=None, ge=0)
    date: dt.date | None = None
    billable: bool | None = None
    status: DocumentStatusField | None = None
    receipt_url: str | None = Field(default=None, max_length=1024)


class ExpenseResponse(TimestampedResponse):
    description: str
    amount: float
    date: dt.date
    billable: bool
    status: str
    receipt_url: str | None = None
    project: ProjectSummary
    user: UserSummary | None = None
