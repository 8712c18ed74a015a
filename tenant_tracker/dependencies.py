from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from tenant_tracker.core.security import extract_identity
from tenant_tracker.core.exceptions import UnauthorizedException
from tenant_tracker.database import get_db
from tenant_tracker.repositories.user_repository import UserRepository
from tenant_tracker.models.auth_context import AuthContext

# auto_error=False so a missing header is reported as 401 by our own handler
security = HTTPBearer(auto_error=False)


async def get_auth_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> AuthContext:
    """
    FastAPI dependency to validate JWT and build the caller's AuthContext.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT signature and expiry using SECRET_KEY
    3. Extract user id ('sub') and role claims
    4. Load the User and check the role claim matches the stored role
    5. Return AuthContext (user, role, client address) for the service layer

    Raises:
        UnauthorizedException: If token missing, invalid, expired, or stale
    """
    if credentials is None:
        raise UnauthorizedException("Access token required")

    user_id, role = extract_identity(credentials.credentials)

    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise UnauthorizedException("User no longer exists")

    if user.role.value != role:
        raise UnauthorizedException("Token role does not match user")

    ip_address = request.client.host if request.client else None
    return AuthContext(user=user, role=user.role, ip_address=ip_address)
