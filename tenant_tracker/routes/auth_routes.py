from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tenant_tracker.database import get_db
from tenant_tracker.services.auth_service import AuthService
from tenant_tracker.schemas.user_schemas import (
    RegisterRequest,
    LoginRequest,
    UserResponse,
    TokenResponse,
)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new landlord or tenant.

    - Username and email must both be unused (409 otherwise)
    - Role cannot be changed later
    """
    service = AuthService(db)
    return service.register(data)


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange username/password for a bearer token valid for 24 hours.

    - Returns 401 for unknown username or wrong password
    """
    service = AuthService(db)
    return service.login(data)
