"""User model and schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field
from sqlalchemy import ForeignKey, Integer, Numeric, String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base
from models.common import CompanySummary, RequestSchema, lower_if_str
from models.enums import Role


class User(Base):
    """User ORM model. Belongs to exactly one company."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid, nullable=False, unique=True, default=uuid4)
    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default=Role.TEAM_MEMBER.value)
    hourly_rate: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False, default=0)
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

    company = relationship("Company", lazy="raise")


def _check_password_bytes(value: str) -> str:
    # bcrypt rejects input longer than 72 bytes
    if len(value.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes")
    return value


Password = Annotated[str, Field(min_length=6), AfterValidator(_check_password_bytes)]
Email = Annotated[EmailStr, AfterValidator(str.lower)]
RoleField = Annotated[Role, BeforeValidator(lower_if_str)]


# Pydantic schemas
class UserCreate(RequestSchema):
    """Schema for an admin creating a user in their company."""

    name: str = Field(min_length=1, max_length=255)
    email: Email
    password: Password
    role: RoleField = Role.TEAM_MEMBER
    hourly_rate: float = Field(default=0, ge=0)


class UserUpdate(RequestSchema):
    """Schema for a partial user update. Only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: Email | None = None
    password: Password | None = None
    role: RoleField | None = None
    hourly_rate: float | None = Field(default=None, ge=0)


class SignupRequest(RequestSchema):
    """Public signup: creates a company and its first admin."""

    company_name: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    email: Email
    password: Password
    hourly_rate: float = Field(default=0, ge=0)


class LoginRequest(RequestSchema):
    email: Email
    password: str = Field(min_length=1)


class PasswordChangeRequest(RequestSchema):
    current_password: str = Field(min_length=1)
    new_password: Password


class UserResponse(BaseModel):
    """Sanitized user: no password hash, no internal ids."""

    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    name: str
    email: str
    role: str
    hourly_rate: float
    created_at: datetime
    updated_at: datetime


class MeResponse(UserResponse):
    """Current user profile including the company."""

    company: CompanySummary


class AuthResponse(BaseModel):
    token: str
    user: UserResponse
