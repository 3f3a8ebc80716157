"""Service layer for admin management of a company's users."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.user import User, UserCreate, UserUpdate
from repos import users_repo
from services.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError


async def list_users(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    search: str | None,
    roles: list[str] | None,
    offset: int,
    limit: int,
) -> tuple[list[User], int]:
    return await users_repo.list_paginated(
        session,
        company_id=membership_ctx.company_id,
        search=search,
        roles=roles,
        offset=offset,
        limit=limit,
    )


async def get_user(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    user_uuid: UUID,
) -> User:
    """
    Get a user of the caller's company.

    Raises:
        NotFoundError: 404 if user not found
    """
    user = await users_repo.get_by_uuid(
        session, company_id=membership_ctx.company_id, user_uuid=user_uuid
    )
    if not user:
        raise NotFoundError("User not found")
    return user


async def _commit_unique_email(session: AsyncSession) -> None:
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Email already registered", code=ErrorCode.EMAIL_EXISTS)


async def create_user(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    payload: UserCreate,
) -> User:
    """
    Create a user in the caller's company.

    Raises:
        ConflictError: 409 if the email is already registered
    """
    if await users_repo.get_by_email(session, email=payload.email):
        raise ConflictError("Email already registered", code=ErrorCode.EMAIL_EXISTS)

    user = User(
        company_id=membership_ctx.company_id,
        name=payload.name,
        email=payload.email,
        password_hash=payload.password,
        role=payload.role,
        hourly_rate=payload.hourly_rate,
    )
    try:
        user = await users_repo.create(session, user)
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Email already registered", code=ErrorCode.EMAIL_EXISTS)
    await _commit_unique_email(session)
    return user


async def update_user(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    user_uuid: UUID,
    payload: UserUpdate,
) -> User:
    """
    Partially update a user. Only provided, non-null fields change.

    Raises:
        NotFoundError: 404 if user not found
        ConflictError: 409 if the new email belongs to someone else
    """
    user = await get_user(session, membership_ctx=membership_ctx, user_uuid=user_uuid)

    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }

    if "email" in changes and changes["email"] != user.email:
        other = await users_repo.get_by_email(session, email=changes["email"])
        if other and other.id != user.id:
            raise ConflictError("Email already registered", code=ErrorCode.EMAIL_EXISTS)

    try:
        user = await users_repo.update(session, user, changes)
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Email already registered", code=ErrorCode.EMAIL_EXISTS)
    await _commit_unique_email(session)
    return user


async def delete_user(
    session: AsyncSession,
    *,
    membership_ctx: TenancyContext,
    user_uuid: UUID,
) -> None:
    """
    Delete a user of the caller's company.

    Raises:
        BadRequestError: 400 when an admin tries to delete their own account
        NotFoundError: 404 if user not found
    """
    if user_uuid == membership_ctx.user_uuid:
        raise BadRequestError("You cannot delete your own account", code=ErrorCode.CANNOT_DELETE_SELF)

    user = await get_user(session, membership_ctx=membership_ctx, user_uuid=user_uuid)
    await users_repo.delete(session, company_id=membership_ctx.company_id, user_id=user.id)
    await session.commit()
