from datetime import datetime
from pydantic import BaseModel
from typing import Optional
from tenant_tracker.models.payment_record import PaymentRecordStatus
from tenant_tracker.schemas.assignment_schemas import AssignmentResponse
from tenant_tracker.schemas.property_schemas import PropertySummary


class PaymentQRResponse(BaseModel):
    """Scannable UPI payment link"""

    qr_code: str  # data:image/png;base64,...
    upi_link: str
    amount: float


class PaymentRecordResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    tenant_id: int
    property_id: int
    amount: float
    payment_date: datetime
    status: PaymentRecordStatus
    notes: str
    created_at: datetime
    property: Optional[PropertySummary] = None  # None once the property is deleted


class PaymentHistoryResponse(BaseModel):
    payments: list[PaymentRecordResponse]
    total: int


class PaymentStatusResponse(BaseModel):
    """Result of a payment cycle transition"""

    message: str
    assignment: AssignmentResponse
