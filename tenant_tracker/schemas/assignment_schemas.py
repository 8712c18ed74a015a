from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional
from tenant_tracker.models.assignment import PaymentStatus
from tenant_tracker.schemas.user_schemas import UserSummary
from tenant_tracker.schemas.property_schemas import (
    AvailablePropertyResponse,
    PropertyResponse,
    PropertySummary,
)


class AssignmentRequest(BaseModel):
    """Bind a tenant to a property (also used for removal)"""

    property_id: int = Field(..., gt=0)
    tenant_id: int = Field(..., gt=0)


class AssignmentResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    tenant_id: int
    property_id: int
    payment_status: PaymentStatus
    last_payment_date: Optional[datetime]
    due_date: date
    created_at: datetime


class AssignTenantResponse(BaseModel):
    """
    Result of an assignment request.

    assignment is None when the pair was already bound (idempotent call).
    """

    message: str
    property: PropertyResponse
    assignment: Optional[AssignmentResponse] = None


class RemoveTenantResponse(BaseModel):
    message: str
    property: PropertyResponse
    cancelled_agreements: int


class DashboardResponse(AssignmentResponse):
    """Tenant's current assignment with the populated property"""

    property: AvailablePropertyResponse


class TenantPaymentResponse(AssignmentResponse):
    """Landlord's view of a tenant's payment cycle"""

    tenant: UserSummary
    property: PropertySummary


class TenantPaymentListResponse(BaseModel):
    payments: list[TenantPaymentResponse]
    total: int
