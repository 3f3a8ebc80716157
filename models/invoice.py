"""Invoice model - customer invoice, optionally raised from a sales order."""

import datetime as dt
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base
from models.common import (
    ContactSummary,
    DocumentStatusField,
    ItemsType,
    LineItems,
    ProjectSummary,
    RequestSchema,
    TimestampedResponse,
)
from models.enums import DocumentStatus


class Invoice(Base):
    """Invoice ORM model."""

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True, default=uuid4)
    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    sales_order_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("sales_orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    client_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("contacts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    due_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=DocumentStatus.DRAFT.value)
    items: Mapped[list] = mapped_column(ItemsType, nullable=False, default=list)
    total_amount: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)
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
    sales_order = relationship("SalesOrder", lazy="raise")
    client = relationship("Contact", lazy="raise")


# Pydantic schemas
class InvoiceCreate(RequestSchema):
    project_uuid: UUID | None = None
    sales_order_uuid: UUID | None = None
    client_uuid: UUID | None = None
    date: dt.date
    due_date: dt.date | None = None
    status: DocumentStatusField = DocumentStatus.DRAFT
    items: LineItems = []
    total_amount: float = Field(default=0, ge=0)


class InvoiceUpdate(RequestSchema):
    project_uuid: UUID | None = None
    sales_order_uuid: UUID | None = None
    client_uuid: UUID | None = None
    date: dt.date | None = None
    due_date: dt.date | None = None
    status: DocumentStatusField | None = None
    items: LineItems | None = None
    total_amount: float | None = Field(default=None, ge=0)


class SalesOrderRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    date: dt.date
    status: str


class InvoiceResponse(TimestampedResponse):
    date: dt.date
    due_date: dt.date | None = None
    status: str
    items: list
    total_amount: float
    project: ProjectSummary | None = None
    sales_order: SalesOrderRef | None = None
    client: ContactSummary | None = None
