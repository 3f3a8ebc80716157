"""Repository for User database operations."""

from typing import Any
from uuid import UUID

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from auth.passwords import prepare_password_for_write
from models.user import User
from repos.base import fetch_page, search_clause


async def get_by_uuid(
    session: AsyncSession,
    *,
    company_id: int,
    user_uuid: UUID,
) -> User | None:
    """
    Get a user by UUID within a company.

    Args:
        session: Database session
        company_id: Company ID to filter by
        user_uuid: User UUID to fetch

    Returns:
        User if found, None otherwise
    """
    result = await session.execute(
        select(User).where(User.uuid == user_uuid, User.company_id == company_id)
    )
    return result.scalar_one_or_none()


async def get_with_company(session: AsyncSession, *, user_uuid: UUID) -> User | None:
    """Load a user and their company by UUID, across all companies (authentication only)."""
    result = await session.execute(
        select(User)
        .options(joinedload(User.company))
        .where(User.uuid == user_uuid)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_by_email(session: AsyncSession, *, email: str) -> User | None:
    """Emails are unique across all companies."""
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_by_uuids(
    session: AsyncSession,
    *,
    company_id: int,
    user_uuids: list[UUID],
) -> list[User]:
    if not user_uuids:
        return []
    result = await session.execute(
        select(User).where(User.company_id == company_id, User.uuid.in_(user_uuids))
    )
    return [user for user in result.scalars().all()]


async def list_paginated(
    session: AsyncSession,
    *,
    company_id: int,
    search: str | None = None,
    roles: list[str] | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[User], int]:
    """
    List users of a company, newest first.

    Returns:
        (rows, total_count)
    """
    query = select(User).where(User.company_id == company_id)

    if roles:
        query = query.where(User.role.in_(roles))
    clause = search_clause(search, User.name, User.email)
    if clause is not None:
        query = query.where(clause)

    return await fetch_page(
        session,
        query,
        order_by=(User.created_at.desc(), User.id.desc()),
        offset=offset,
        limit=limit,
    )


async def create(session: AsyncSession, user: User) -> User:
    """
    Create a new user. The password goes through the hash-on-write guard.

    Args:
        session: Database session
        user: User instance whose password_hash holds plain text or a hash

    Returns:
        Created user
    """
    user.password_hash = prepare_password_for_write(user.password_hash)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def update(session: AsyncSession, user: User, changes: dict[str, Any]) -> User:
    """
    Apply changes to a user. A new password goes through the hash-on-write guard.

    Args:
        session: Database session
        user: User to update
        changes: Column name to new value; "password" is stored as password_hash

    Returns:
        Updated user
    """
    for field, value in changes.items():
        if field == "password":
            user.password_hash = prepare_password_for_write(value)
        else:
            setattr(user, field, value)
    await session.flush()
    await session.refresh(user)
    return user


async def delete(session: AsyncSession, *, company_id: int, user_id: int) -> int:
    """Delete a user. Returns the number of rows removed."""
    result = await session.execute(
        sa_delete(User).where(User.id == user_id, User.company_id == company_id)
    )
    return result.rowcount
