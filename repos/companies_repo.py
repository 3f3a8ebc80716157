"""Repository for Company database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.company import Company


async def get_by_id(session: AsyncSession, *, company_id: int) -> Company | None:
    result = await session.execute(select(Company).where(Company.id == company_id))
    return result.scalar_one_or_none()


async def get_by_uuid(session: AsyncSession, *, company_uuid: UUID) -> Company | None:
    result = await session.execute(select(Company).where(Company.uuid == company_uuid))
    return result.scalar_one_or_none()


async def create(session: AsyncSession, company: Company) -> Company:
    """
    Create a new company.

    Args:
        session: Database session
        company: Company instance to create

    Returns:
        Created company
    """
    session.add(company)
    await session.flush()
    await session.refresh(company)
    return company
