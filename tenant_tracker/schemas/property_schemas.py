from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional
from tenant_tracker.models.property import PropertyType
from tenant_tracker.schemas.user_schemas import UserSummary


class PropertyCreate(BaseModel):
    """Schema for listing a new property"""

    address: str = Field(..., min_length=1, max_length=500)
    rent_amount: float = Field(..., gt=0)
    type: PropertyType
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    area_sq_ft: float = Field(..., ge=0)
    description: str = Field(default="", max_length=5000)


class PropertySummary(BaseModel):
    """Short property details embedded in payment and agreement responses"""

    model_config = {"from_attributes": True}

    id: int
    address: str
    rent_amount: float


class PropertyResponse(BaseModel):
    """Schema for property response"""

    model_config = {"from_attributes": True}

    id: int
    address: str
    rent_amount: float
    type: PropertyType
    bedrooms: int
    bathrooms: int
    area_sq_ft: float
    description: str
    landlord_id: int
    tenant_id: Optional[int]
    is_vacant: bool
    created_at: datetime


class OwnedPropertyResponse(PropertyResponse):
    """Landlord's view: includes the occupying tenant"""

    tenant: Optional[UserSummary] = None


class AvailablePropertyResponse(PropertyResponse):
    """Tenant's view: includes landlord contact details"""

    landlord: UserSummary


class PropertyListResponse(BaseModel):
    properties: list[OwnedPropertyResponse]
    total: int


class AvailablePropertyListResponse(BaseModel):
    properties: list[AvailablePropertyResponse]
    total: int


class PropertyFilter(BaseModel):
    """Filters for browsing vacant properties"""

    location: Optional[str] = None
    type: Optional[PropertyType] = None
    min_rent: Optional[float] = Field(None, ge=0)
    max_rent: Optional[float] = Field(None, ge=0)
    min_bedrooms: Optional[int] = Field(None, ge=0)
    min_bathrooms: Optional[int] = Field(None, ge=0)


class ContactRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class ContactPerson(BaseModel):
    model_config = {"from_attributes": True}

    username: str
    email: str


class ContactResponse(BaseModel):
    """Simulated delivery receipt for a tenant -> landlord message"""

    message: str
    landlord: ContactPerson
    tenant: ContactPerson
    property: PropertySummary
    contact_message: str


class MessageResponse(BaseModel):
    message: str
