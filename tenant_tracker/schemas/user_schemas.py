from datetime import datetime
from pydantic import BaseModel, Field
from tenant_tracker.models.role import UserRole


class RegisterRequest(BaseModel):
    """Register a new landlord or tenant"""

    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Registered user (never exposes the password hash)"""

    id: int
    username: str
    email: str
    role: UserRole
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    """Contact details embedded in other responses"""

    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    role: UserRole
    user_id: int
    username: str
