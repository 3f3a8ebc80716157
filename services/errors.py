"""Domain error codes and exceptions raised by services."""

import enum
from typing import Any


class ErrorCode(str, enum.Enum):
    """Closed set of error codes returned to API callers."""

    INVALID_PROJECT = "INVALID_PROJECT"
    INVALID_CLIENT = "INVALID_CLIENT"
    INVALID_CLIENT_TYPE = "INVALID_CLIENT_TYPE"
    INVALID_VENDOR = "INVALID_VENDOR"
    INVALID_VENDOR_TYPE = "INVALID_VENDOR_TYPE"
    INVALID_MANAGER = "INVALID_MANAGER"
    INVALID_MANAGER_ROLE = "INVALID_MANAGER_ROLE"
    INVALID_USER = "INVALID_USER"
    INVALID_ASSIGNEE = "INVALID_ASSIGNEE"
    INVALID_TASK = "INVALID_TASK"
    TASK_NOT_IN_PROJECT = "TASK_NOT_IN_PROJECT"
    INVALID_ASSIGNMENT_USERS = "INVALID_ASSIGNMENT_USERS"
    INVALID_SALES_ORDER = "INVALID_SALES_ORDER"
    INVALID_PURCHASE_ORDER = "INVALID_PURCHASE_ORDER"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    CANNOT_DELETE_SELF = "CANNOT_DELETE_SELF"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Request field each reference error is reported against
REFERENCE_FIELDS: dict[ErrorCode, str] = {
    ErrorCode.INVALID_PROJECT: "project_uuid",
    ErrorCode.INVALID_CLIENT: "client_uuid",
    ErrorCode.INVALID_CLIENT_TYPE: "client_uuid",
    ErrorCode.INVALID_VENDOR: "vendor_uuid",
    ErrorCode.INVALID_VENDOR_TYPE: "vendor_uuid",
    ErrorCode.INVALID_MANAGER: "manager_uuid",
    ErrorCode.INVALID_MANAGER_ROLE: "manager_uuid",
    ErrorCode.INVALID_USER: "user_uuid",
    ErrorCode.INVALID_ASSIGNEE: "assignee_uuid",
    ErrorCode.INVALID_TASK: "task_uuid",
    ErrorCode.TASK_NOT_IN_PROJECT: "task_uuid",
    ErrorCode.INVALID_ASSIGNMENT_USERS: "assigned_user_uuids",
    ErrorCode.INVALID_SALES_ORDER: "sales_order_uuid",
    ErrorCode.INVALID_PURCHASE_ORDER: "purchase_order_uuid",
}

REFERENCE_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_PROJECT: "Project not found",
    ErrorCode.INVALID_CLIENT: "Client not found",
    ErrorCode.INVALID_CLIENT_TYPE: "Contact is a vendor and cannot be used as a client",
    ErrorCode.INVALID_VENDOR: "Vendor not found",
    ErrorCode.INVALID_VENDOR_TYPE: "Contact is a client and cannot be used as a vendor",
    ErrorCode.INVALID_MANAGER: "Manager not found",
    ErrorCode.INVALID_MANAGER_ROLE: "Manager must be an admin or project manager",
    ErrorCode.INVALID_USER: "User not found",
    ErrorCode.INVALID_ASSIGNEE: "Assignee not found",
    ErrorCode.INVALID_TASK: "Task not found",
    ErrorCode.TASK_NOT_IN_PROJECT: "Task does not belong to the project",
    ErrorCode.INVALID_ASSIGNMENT_USERS: "One or more assigned users were not found",
    ErrorCode.INVALID_SALES_ORDER: "Sales order not found",
    ErrorCode.INVALID_PURCHASE_ORDER: "Purchase order not found",
}


class DomainError(Exception):
    """Base class for errors that map to a specific HTTP response."""

    status_code = 500
    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        errors: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.errors = errors

    def payload(self) -> dict[str, Any] | None:
        """Body placed in the envelope's data field."""
        if self.errors is None:
            return {"code": self.code.value}
        return {"code": self.code.value, "error": self.errors}


class ValidationFailedError(DomainError):
    status_code = 422
    default_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, field: str, message: str, *, code: ErrorCode | None = None):
        super().__init__(message, code=code, errors={field: message})
        self.field = field


class InvalidReferenceError(DomainError):
    """A supplied UUID does not resolve within the tenant, or resolves to the wrong kind of row."""

    status_code = 422

    def __init__(self, code: ErrorCode, *, field: str | None = None, message: str | None = None):
        field = field or REFERENCE_FIELDS[code]
        message = message or REFERENCE_MESSAGES.get(code, "Invalid reference")
        super().__init__(message, code=code, errors={field: message})
        self.field = field


class NotFoundError(DomainError):
    status_code = 404
    default_code = ErrorCode.NOT_FOUND


class ConflictError(DomainError):
    status_code = 409
    default_code = ErrorCode.EMAIL_EXISTS


class AuthenticationError(DomainError):
    status_code = 401
    default_code = ErrorCode.NOT_AUTHENTICATED


class PermissionDeniedError(DomainError):
    status_code = 403
    default_code = ErrorCode.INSUFFICIENT_PERMISSIONS


class BadRequestError(DomainError):
    status_code = 400
    default_code = ErrorCode.VALIDATION_FAILED
