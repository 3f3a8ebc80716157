"""Unit tests for the password hash-on-write guard."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from auth.passwords import hash_password, looks_hashed, prepare_password_for_write, verify_password
from models.company import Company
from models.user import User
from repos import companies_repo, users_repo


def test_plain_text_is_hashed():
    stored = prepare_password_for_write("hunter22")

    assert stored != "hunter22"
    assert looks_hashed(stored)
    assert verify_password("hunter22", stored)


def test_existing_hash_is_kept():
    hashed = hash_password("hunter22", rounds=4)

    assert prepare_password_for_write(hashed) == hashed


def test_verify_rejects_wrong_password_and_garbage_hash():
    hashed = hash_password("hunter22", rounds=4)

    assert not verify_password("wrong-password", hashed)
    assert not verify_password("hunter22", "not-a-hash")


def test_looks_hashed_requires_prefix_and_length():
    assert not looks_hashed("$2b$short")
    assert not looks_hashed("x" * 60)


async def _company(db_session: AsyncSession) -> Company:
    company = await companies_repo.create(db_session, Company(name="Guard Co"))
    await db_session.commit()
    return company


@pytest.mark.asyncio
async def test_repo_create_hashes_password(db_session: AsyncSession):
    """Test: Creating a user with a plain password stores a verifying hash."""
    company = await _company(db_session)

    user = await users_repo.create(
        db_session,
        User(company_id=company.id, name="Ann", email="ann@guard.co", password_hash="plaintext1"),
    )
    await db_session.commit()

    assert user.password_hash != "plaintext1"
    assert verify_password("plaintext1", user.password_hash)


@pytest.mark.asyncio
async def test_repo_update_without_password_keeps_hash(db_session: AsyncSession):
    """Test: Changing only the name leaves the stored hash untouched."""
    company = await _company(db_session)
    user = await users_repo.create(
        db_session,
        User(company_id=company.id, name="Ann", email="ann@guard.co", password_hash="plaintext1"),
    )
    await db_session.commit()
    original_hash = user.password_hash

    await users_repo.update(db_session, user, {"name": "Annie"})
    await db_session.commit()

    assert user.name == "Annie"
    assert user.password_hash == original_hash


@pytest.mark.asyncio
async def test_repo_update_with_password_rehashes(db_session: AsyncSession):
    company = await _company(db_session)
    user = await users_repo.create(
        db_session,
        User(company_id=company.id, name="Ann", email="ann@guard.co", password_hash="plaintext1"),
    )
    await db_session.commit()
    original_hash = user.password_hash

    await users_repo.update(db_session, user, {"password": "another-one"})
    await db_session.commit()

    assert user.password_hash != original_hash
    assert verify_password("another-one", user.password_hash)
    assert not verify_password("plaintext1", user.password_hash)
