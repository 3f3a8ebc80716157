"""Pytest configuration and fixtures."""

import os

# Cheap hashing for tests; must be set before config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from dataclasses import dataclass, field

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import config
from db import Base, create_engine, create_session_factory, get_db, get_session_factory
from main import app
from models.company import Company
from models.enums import Role
from models.user import User
from repos import companies_repo, users_repo
from services.auth_service import issue_token

API = f"{config.settings.API_PREFIX}/v1"

TEST_PASSWORD = "secret123"


@dataclass
class SeededCompany:
    """A company with one user per role."""

    company: Company
    users: dict[str, User] = field(default_factory=dict)

    @property
    def admin(self) -> User:
        return self.users[Role.ADMIN.value]

    @property
    def manager(self) -> User:
        return self.users[Role.PROJECT_MANAGER.value]

    @property
    def member(self) -> User:
        return self.users[Role.TEAM_MEMBER.value]

    @property
    def finance(self) -> User:
        return self.users[Role.FINANCE.value]

    def headers(self, role: str = Role.ADMIN.value) -> dict:
        """Authorization headers for the company's user with the given role."""
        user = self.users[role]
        return {"Authorization": f"Bearer {issue_token(user, self.company)}"}


async def seed_company(session, name: str, email_domain: str) -> SeededCompany:
    company = await companies_repo.create(session, Company(name=name))
    seeded = SeededCompany(company=company)
    for role in Role:
        seeded.users[role.value] = await users_repo.create(
            session,
            User(
                company_id=company.id,
                name=f"{name} {role.value}",
                email=f"{role.value}@{email_domain}",
                password_hash=TEST_PASSWORD,
                role=role.value,
                hourly_rate=50,
            ),
        )
    await session.commit()
    return seeded


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Fresh schema per test: a SQLite file unless TEST_DATABASE_URL points elsewhere."""
    url = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    test_engine = create_engine(url)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the app, with each request on its own session."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def company_a(db_session) -> SeededCompany:
    """Create test company A with a user for every role."""
    return await seed_company(db_session, "Company A", "company-a.com")


@pytest_asyncio.fixture
async def company_b(db_session) -> SeededCompany:
    """Create test company B with a user for every role."""
    return await seed_company(db_session, "Company B", "company-b.com")
