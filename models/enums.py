"""Enumerations shared by models, schemas and services."""

import enum


class Role(str, enum.Enum):
    """User role within a company."""

    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    TEAM_MEMBER = "team_member"
    FINANCE = "finance"


class ContactType(str, enum.Enum):
    """Contact type enum."""

    CLIENT = "client"
    VENDOR = "vendor"
    BOTH = "both"


class ProjectStatus(str, enum.Enum):
    """Project status enum."""

    PLANNED = "planned"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class TaskStatus(str, enum.Enum):
    """Task status enum."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"


class TaskPriority(str, enum.Enum):
    """Task priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DocumentStatus(str, enum.Enum):
    """Status shared by sales orders, invoices, purchase orders, vendor bills and expenses."""

    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"
    PAID = "paid"
    DECLINED = "declined"


# Task statuses that count as open work
OPEN_TASK_STATUSES = (TaskStatus.TODO.value, TaskStatus.IN_PROGRESS.value, TaskStatus.REVIEW.value)

# Roles allowed to manage a project
MANAGER_ROLES = (Role.ADMIN.value, Role.PROJECT_MANAGER.value)
