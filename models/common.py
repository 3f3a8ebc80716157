"""Schema building blocks shared across entities."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

from models.enums import DocumentStatus


def lower_if_str(value: Any) -> Any:
    """Normalize enum-like string input to lower case."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


def normalize_items(value: Any) -> Any:
    """Normalize line items: non-object entries become {"description": str(entry)}."""
    if value is None:
        return []
    if not isinstance(value, list):
        return value
    return [item if isinstance(item, dict) else {"description": str(item)} for item in value]


# Line items stored as a JSON array on financial documents
LineItems = Annotated[list[dict[str, Any]], BeforeValidator(normalize_items)]

# Column type for line items; JSONB on PostgreSQL
ItemsType = JSON().with_variant(JSONB(), "postgresql")

DocumentStatusField = Annotated[DocumentStatus, BeforeValidator(lower_if_str)]


class RequestSchema(BaseModel):
    """Base for request payloads: enum members are stored as their values."""

    model_config = ConfigDict(use_enum_values=True, str_strip_whitespace=True)


# Embedded summaries of related entities used in responses
class CompanySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    name: str


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    name: str
    email: str


class ContactSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    name: str
    type: str


class ProjectSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    name: str
    status: str


class TaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    title: str


class TimestampedResponse(BaseModel):
    """Fields every entity response carries."""

    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    created_at: datetime
    updated_at: datetime | None = None
