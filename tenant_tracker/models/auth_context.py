"""Caller identity passed explicitly into every service operation."""

from dataclasses import dataclass
from tenant_tracker.models.user import User
from tenant_tracker.models.role import UserRole
from tenant_tracker.core.exceptions import ForbiddenException


@dataclass
class AuthContext:
    """
    Authenticated caller for request authorization.

    Built from a validated bearer token and the stored user record. Used
    throughout the service layer for role and ownership checks.

    Attributes:
        user: The authenticated User object
        role: The user's role (always equal to user.role)
        ip_address: Client address, recorded on agreement signatures
    """

    user: User
    role: UserRole
    ip_address: str | None = None

    @property
    def user_id(self) -> int:
        return self.user.id

    def is_landlord(self) -> bool:
        return self.role == UserRole.LANDLORD

    def owns(self, owner_id: int | None) -> bool:
        """Check if the resource's owning relation points at the caller."""
        return owner_id is not None and owner_id == self.user.id

    def ensure_owner(self, owner_id: int | None, message: str = "Access denied") -> None:
        """
        Ownership predicate of the access gate.

        Raises:
            ForbiddenException: If owner_id is not the caller
        """
        if not self.owns(owner_id):
            raise ForbiddenException(message)

    def __repr__(self) -> str:
        return f"<AuthContext(user_id={self.user.id}, role={self.role.value})>"
