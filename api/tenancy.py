"""Tenancy context for company-scoped operations."""

from uuid import UUID

from models.user import User


class TenancyContext:
    """Context for tenant-scoped operations."""

    def __init__(self, user_id: int, user_uuid: UUID, company_id: int, role: str):
        """
        Initialize tenancy context.

        Args:
            user_id: Internal id of the authenticated user
            user_uuid: Public UUID of the authenticated user
            company_id: Internal id of the user's company (tenant boundary)
            role: User's role in the company
        """
        self.user_id = user_id
        self.user_uuid = user_uuid
        self.company_id = company_id
        self.role = role

    @classmethod
    def from_user(cls, user: User) -> "TenancyContext":
        """Create TenancyContext from an authenticated user."""
        return cls(
            user_id=user.id,
            user_uuid=user.uuid,
            company_id=user.company_id,
            role=user.role,
        )

    def has_role(self, *roles: str) -> bool:
        return self.role in roles

    def __repr__(self) -> str:
        return f"TenancyContext(user_id={self.user_id}, company_id={self.company_id}, role={self.role!r})"
