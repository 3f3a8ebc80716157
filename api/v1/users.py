"""Company user management (admin only)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import Pagination, get_db, pagination_params, parse_enum_list, require_roles
from api.responses import ApiResponse, envelope, paged
from api.tenancy import TenancyContext
from models.enums import Role
from models.user import UserCreate, UserResponse, UserUpdate
from services import users_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

admin_only = require_roles(Role.ADMIN)


@router.get("/Auth/users", response_model=ApiResponse[list[UserResponse]])
async def list_users(
    search: str | None = Query(None),
    role: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    """List users of the admin's company, filterable by role and name/email search."""
    try:
        rows, total = await users_service.list_users(
            db,
            membership_ctx=tenancy,
            search=search,
            roles=parse_enum_list(role, Role, "role"),
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [UserResponse.model_validate(user) for user in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Users retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list users for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch users",
        )


@router.post(
    "/Auth/users",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    payload: UserCreate,
    tenancy: TenancyContext = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a user in the admin's company.

    Raises:
        409 if the email is already registered.
    """
    try:
        user = await users_service.create_user(db, membership_ctx=tenancy, payload=payload)
        return envelope(
            UserResponse.model_validate(user),
            message="User created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create user in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        )


@router.get("/Auth/users/{user_uuid}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_uuid: UUID,
    tenancy: TenancyContext = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await users_service.get_user(db, membership_ctx=tenancy, user_uuid=user_uuid)
        return envelope(UserResponse.model_validate(user), message="User retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch user %s", user_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user",
        )


@router.put("/Auth/users/{user_uuid}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_uuid: UUID,
    payload: UserUpdate,
    tenancy: TenancyContext = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    """
    Partially update a user.

    A new password goes through the hash-on-write guard; an email change
    re-checks uniqueness.
    """
    try:
        user = await users_service.update_user(
            db, membership_ctx=tenancy, user_uuid=user_uuid, payload=payload
        )
        return envelope(UserResponse.model_validate(user), message="User updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update user %s", user_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user",
        )


@router.delete("/Auth/users/{user_uuid}", response_model=ApiResponse[None])
async def delete_user(
    user_uuid: UUID,
    tenancy: TenancyContext = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a user of the admin's company.

    Raises:
        400 when admins try to delete themselves.
        404 if the user is not found.
    """
    try:
        await users_service.delete_user(db, membership_ctx=tenancy, user_uuid=user_uuid)
        return envelope(message="User deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete user %s", user_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user",
        )
