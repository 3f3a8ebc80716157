"""Query helpers shared by the repositories."""

from collections.abc import Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession


async def count_rows(session: AsyncSession, query: Select) -> int:
    """Count the rows a filtered query would return, ignoring ordering and paging."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    result = await session.execute(count_query)
    return result.scalar_one()


def search_clause(term: str | None, *columns):
    """
    Case-insensitive substring match of a trimmed term against any column.

    Returns None when there is nothing to search for.
    """
    if term is None:
        return None
    term = term.strip()
    if not term:
        return None
    return or_(*(column.icontains(term, autoescape=True) for column in columns))


async def fetch_page(
    session: AsyncSession,
    query: Select,
    *,
    order_by: Sequence,
    options: Sequence = (),
    offset: int,
    limit: int,
) -> tuple[list, int]:
    """
    Run a filtered query and return (rows, total_count).

    The count runs over the bare filtered query; loader options, ordering,
    offset and limit only apply to the page fetch.
    """
    total = await count_rows(session, query)
    result = await session.execute(
        query.options(*options)
        .order_by(*order_by)
        .offset(offset)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    return [row for row in result.scalars().unique().all()], total
