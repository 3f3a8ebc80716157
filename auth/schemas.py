"""JWT token payload schemas."""

from datetime import datetime

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    sub: str  # user uuid (standard JWT claim)
    email: str
    role: str  # Role in the company
    company_id: str  # company uuid
    exp: datetime  # Expiration time (standard JWT claim)
