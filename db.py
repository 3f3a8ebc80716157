"""Database configuration and session management."""

from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

import config

# Base class for declarative models
Base = declarative_base()


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    PostgreSQL gets a bounded connection pool; SQLite (local dev and tests)
    gets foreign key enforcement switched on so ON DELETE rules apply.

    Args:
        database_url: Optional URL override (defaults to settings.DATABASE_URL)

    Returns:
        AsyncEngine: Configured engine
    """
    url = database_url or config.settings.DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=False)

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        url,
        echo=False,  # Set to True for SQL query logging
        pool_size=config.settings.DB_POOL_SIZE,
        max_overflow=config.settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(app) -> None:
    """
    Initialize database (create engine, session factory and tables).
    This should be called on application startup.
    """
    engine = create_engine()
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(app) -> None:
    """
    Close database connections.
    This should be called on application shutdown.
    """
    engine: AsyncEngine | None = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()
        app.state.engine = None
        app.state.session_factory = None


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Dependency returning the application's session factory."""
    return request.app.state.session_factory


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency function to get database session.

    Yields:
        AsyncSession: Database session
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
