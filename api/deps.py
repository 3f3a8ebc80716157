"""FastAPI dependencies for authentication, tenancy, pagination and database."""

import enum
from uuid import UUID

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from api.tenancy import TenancyContext
from auth.jwt import decode_token
from db import get_db, get_session_factory
from models.user import User
from repos import users_repo
from services.errors import AuthenticationError, PermissionDeniedError, ValidationFailedError

__all__ = [
    "Pagination",
    "get_current_user",
    "get_db",
    "get_session_factory",
    "get_tenancy_context",
    "pagination_params",
    "parse_enum_list",
    "require_roles",
]

# HTTP Bearer token security scheme (missing tokens are reported as 401 below)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token from Authorization header
        db: Database session

    Returns:
        User: The authenticated user with their company loaded

    Raises:
        AuthenticationError: If token is missing, invalid, expired, or user not found
        PermissionDeniedError: If token claims no longer match the stored user
    """
    if credentials is None:
        raise AuthenticationError("Authentication token is missing")

    try:
        token_payload = decode_token(credentials.credentials)
        user_uuid = UUID(token_payload.sub)
    except (JWTError, ValueError) as e:
        raise AuthenticationError(f"Invalid token: {str(e)}")

    user = await users_repo.get_with_company(db, user_uuid=user_uuid)

    if not user:
        raise AuthenticationError("User not found")

    # Role or company changed since the token was issued
    if user.role != token_payload.role or str(user.company.uuid) != token_payload.company_id:
        raise PermissionDeniedError("Token claims do not match user")

    return user


async def get_tenancy_context(
    current_user: User = Depends(get_current_user),
) -> TenancyContext:
    """
    Dependency to get tenancy context for company-scoped operations.

    Every service call receives this context and scopes its queries by
    company_id.
    """
    return TenancyContext.from_user(current_user)


def require_roles(*roles: str):
    """
    Build a dependency that only lets the given roles through.

    Usage:
        tenancy: TenancyContext = Depends(require_roles("admin", "finance"))
    """
    allowed = tuple(role.value if isinstance(role, enum.Enum) else role for role in roles)

    async def _check_role(
        tenancy: TenancyContext = Depends(get_tenancy_context),
    ) -> TenancyContext:
        if not tenancy.has_role(*allowed):
            raise PermissionDeniedError("Insufficient permissions")
        return tenancy

    return _check_role


class Pagination:
    """Page/limit pair with the derived row offset."""

    def __init__(self, page: int, limit: int):
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination_params(
    page: int = Query(1, ge=1),
    limit: int = Query(config.settings.DEFAULT_PAGE_SIZE, ge=1, le=config.settings.MAX_PAGE_SIZE),
) -> Pagination:
    return Pagination(page=page, limit=limit)


def parse_enum_list(value: str | None, enum_cls: type[enum.Enum], field: str) -> list[str] | None:
    """
    Parse a comma-separated filter such as "todo,in_progress".

    Values are trimmed and lower-cased; any value outside the enum is a 422.
    """
    if value is None:
        return None
    items = [item.strip().lower() for item in value.split(",") if item.strip()]
    if not items:
        return None
    allowed = {member.value for member in enum_cls}
    if any(item not in allowed for item in items):
        raise ValidationFailedError(field, f"Invalid {field}")
    return items
