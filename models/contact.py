"""Contact model - clients and vendors of a company."""

from datetime import datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BeforeValidator, EmailStr, Field
from sqlalchemy import ForeignKey, Integer, String, Text, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base
from models.common import RequestSchema, TimestampedResponse, lower_if_str
from models.enums import ContactType


class Contact(Base):
    """Contact ORM model."""

    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True, default=uuid4)
    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
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


ContactTypeField = Annotated[ContactType, BeforeValidator(lower_if_str)]


# Pydantic schemas
class ContactCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    type: ContactTypeField
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None


class ContactUpdate(RequestSchema):
    """Partial update: only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: ContactTypeField | None = None
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None


class ContactResponse(TimestampedResponse):
    name: str
    type: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
