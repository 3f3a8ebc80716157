"""JWT token creation and validation."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import jwt, JWTError

import config
from auth.schemas import TokenPayload


def create_access_token(
    user_uuid: UUID,
    email: str,
    role: str,
    company_uuid: UUID,
    expires_in_hours: int | None = None,
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_uuid: User public UUID
        email: User email
        role: User role in the company
        company_uuid: Company public UUID
        expires_in_hours: Token lifetime (defaults to JWT_EXPIRES_IN_HOURS)

    Returns:
        Encoded JWT token string
    """
    hours = expires_in_hours if expires_in_hours is not None else config.settings.JWT_EXPIRES_IN_HOURS
    exp = datetime.now(UTC) + timedelta(hours=hours)

    payload = {
        "sub": str(user_uuid),
        "email": email,
        "role": role,
        "company_id": str(company_uuid),
        "exp": int(exp.timestamp()),  # JWT expects Unix timestamp
    }

    return jwt.encode(
        payload,
        config.settings.JWT_SECRET,
        algorithm=config.settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is invalid, expired or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            config.settings.JWT_SECRET,
            algorithms=[config.settings.JWT_ALGORITHM],
        )

        return TokenPayload(
            sub=payload["sub"],
            email=payload.get("email", ""),
            role=payload["role"],
            company_id=payload["company_id"],
            exp=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except KeyError as e:
        raise JWTError(f"Missing claim: {e}") from e
    except JWTError as e:
        raise JWTError(f"Invalid token: {str(e)}") from e
