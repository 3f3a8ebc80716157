"""Company model - root tenant boundary."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Integer, String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class Company(Base):
    """Company ORM model. Every tenant-owned row carries a company_id."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
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


# Pydantic schemas
class CompanyResponse(BaseModel):
    """Schema for company response."""

    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    name: str
