"""Service layer for signup, login and the current user's account."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import create_access_token
from auth.passwords import verify_password
from models.company import Company
from models.enums import Role
from models.user import PasswordChangeRequest, SignupRequest, LoginRequest, User
from repos import companies_repo, users_repo
from services.errors import AuthenticationError, ConflictError, ErrorCode

logger = logging.getLogger(__name__)


def issue_token(user: User, company: Company) -> str:
    """Create an access token carrying the user's identity, role and company."""
    return create_access_token(
        user_uuid=user.uuid,
        email=user.email,
        role=user.role,
        company_uuid=company.uuid,
    )


async def signup(session: AsyncSession, *, payload: SignupRequest) -> tuple[str, User]:
    """
    Create a new company and its first user, who becomes the company admin.

    Returns:
        (token, user)

    Raises:
        ConflictError: 409 if the email is already registered
    """
    existing = await users_repo.get_by_email(session, email=payload.email)
    if existing:
        raise ConflictError("Email already registered", code=ErrorCode.EMAIL_EXISTS)

    try:
        company = await companies_repo.create(session, Company(name=payload.company_name))
        user = await users_repo.create(
            session,
            User(
                company_id=company.id,
                name=payload.name,
                email=payload.email,
                password_hash=payload.password,
                role=Role.ADMIN.value,
                hourly_rate=payload.hourly_rate,
            ),
        )
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        await session.rollback()
        raise ConflictError("Email already registered", code=ErrorCode.EMAIL_EXISTS)

    logger.info("Company %s created with admin %s", company.uuid, user.uuid)
    return issue_token(user, company), user


async def login(session: AsyncSession, *, payload: LoginRequest) -> tuple[str, User]:
    """
    Authenticate by email and password.

    Raises:
        AuthenticationError: 401 on unknown email or wrong password
    """
    user = await users_repo.get_by_email(session, email=payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Invalid email or password", code=ErrorCode.INVALID_CREDENTIALS)

    company = await companies_repo.get_by_id(session, company_id=user.company_id)
    return issue_token(user, company), user


async def change_password(
    session: AsyncSession,
    *,
    user: User,
    payload: PasswordChangeRequest,
) -> None:
    """
    Change the current user's password after checking the old one.

    Raises:
        AuthenticationError: 401 if current_password does not match
    """
    if not verify_password(payload.current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect", code=ErrorCode.INVALID_CREDENTIALS)

    await users_repo.update(session, user, {"password": payload.new_password})
    await session.commit()
