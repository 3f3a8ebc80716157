"""Authentication endpoints: signup, login and the current user's profile."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db
from api.responses import ApiResponse, envelope
from models.user import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    PasswordChangeRequest,
    SignupRequest,
    User,
    UserResponse,
)
from services import auth_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/Auth/signup",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new company together with its first admin user.

    Returns:
        Token and sanitized user.

    Raises:
        409 if the email is already registered.
    """
    try:
        token, user = await auth_service.signup(db, payload=payload)
        return envelope(
            AuthResponse(token=token, user=UserResponse.model_validate(user)),
            message="Signup successful",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Signup failed")
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sign up",
        )


@router.post("/Auth/login", response_model=ApiResponse[AuthResponse])
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    try:
        token, user = await auth_service.login(db, payload=payload)
        return envelope(
            AuthResponse(token=token, user=UserResponse.model_validate(user)),
            message="Login successful",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Login failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log in",
        )


@router.get("/Auth/me", response_model=ApiResponse[MeResponse])
async def get_me(
    current_user: User = Depends(get_current_user),
):
    """Profile of the authenticated user, including their company."""
    return envelope(MeResponse.model_validate(current_user), message="Profile retrieved")


@router.put("/Auth/me/password", response_model=ApiResponse[None])
async def change_password(
    payload: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Change the authenticated user's password.

    Raises:
        401 if current_password does not match.
    """
    try:
        await auth_service.change_password(db, user=current_user, payload=payload)
        return envelope(message="Password updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Password change failed for user %s", current_user.uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to change password",
        )
