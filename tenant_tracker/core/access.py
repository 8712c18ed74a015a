"""Role guard applied to service operations."""

import inspect
import logging
from functools import wraps

from tenant_tracker.core.exceptions import ForbiddenException, UnauthorizedException
from tenant_tracker.models.role import UserRole

logger = logging.getLogger(__name__)


def require_role(*roles: UserRole, message: str | None = None):
    """
    Restrict a service method to callers holding one of ``roles``.

    The decorated method must accept a ``context`` (AuthContext) argument,
    positionally or by keyword. Ownership of individual resources is checked
    inside the method with ``context.ensure_owner(...)`` once the resource
    is loaded.

    Usage:
        @require_role(UserRole.LANDLORD)
        def delete_property(self, property_id: int, context: AuthContext) -> None:
            ...

    Raises:
        UnauthorizedException: If no context is supplied
        ForbiddenException: If the caller's role is not allowed
    """
    allowed = frozenset(roles)
    role_names = " or ".join(f"{r.value}s" for r in roles)
    denial = message or f"Access denied. Only {role_names} can perform this action."

    def decorator(func):
        signature = inspect.signature(func)
        if "context" not in signature.parameters:
            raise TypeError(f"{func.__qualname__} must take a 'context' argument")

        @wraps(func)
        def wrapper(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            context = bound.arguments.get("context")
            if context is None:
                raise UnauthorizedException("Authentication required")
            if context.role not in allowed:
                logger.warning(
                    "Denied %s for user %s with role %s",
                    func.__qualname__,
                    context.user_id,
                    context.role.value,
                )
                raise ForbiddenException(denial)
            return func(*args, **kwargs)

        return wrapper

    return decorator
