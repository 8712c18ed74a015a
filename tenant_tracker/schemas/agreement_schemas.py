from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional
from tenant_tracker.models.agreement import AgreementStatus
from tenant_tracker.schemas.user_schemas import UserSummary
from tenant_tracker.schemas.property_schemas import PropertySummary


class AgreementTerms(BaseModel):
    """Lease terms shared by landlord-created and tenant-requested agreements"""

    property_id: int = Field(..., gt=0)
    rent_amount: float = Field(..., gt=0)
    security_deposit: float = Field(..., ge=0)
    lease_duration: int = Field(..., gt=0, le=600, description="Lease length in months")
    start_date: date
    terms: str = Field(..., min_length=1, max_length=20000)


class AgreementCreate(AgreementTerms):
    """Landlord creates an agreement for one of their properties"""

    tenant_id: int = Field(..., gt=0)


class AgreementRequest(AgreementTerms):
    """Tenant requests an agreement; the landlord is taken from the property"""

    pass


class SignatureResponse(BaseModel):
    model_config = {"from_attributes": True}

    signed: bool
    signed_at: Optional[datetime] = None
    ip_address: Optional[str] = None


class AgreementResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    agreement_id: str
    tenant_id: int
    landlord_id: int
    property_id: int
    rent_amount: float
    security_deposit: float
    lease_duration: int
    start_date: date
    end_date: date
    terms: str
    status: AgreementStatus
    tenant_signature: SignatureResponse
    landlord_signature: SignatureResponse
    tenant: UserSummary
    landlord: UserSummary
    property: PropertySummary
    created_at: datetime
    updated_at: datetime


class AgreementListResponse(BaseModel):
    agreements: list[AgreementResponse]
    total: int


class AgreementActionResponse(BaseModel):
    message: str
    agreement: AgreementResponse
