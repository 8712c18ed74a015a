from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenant_tracker.database import get_db
from tenant_tracker.dependencies import get_auth_context
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.services.payment_service import PaymentService
from tenant_tracker.schemas.assignment_schemas import TenantPaymentListResponse
from tenant_tracker.schemas.payment_schemas import (
    PaymentQRResponse,
    PaymentHistoryResponse,
    PaymentStatusResponse,
)

router = APIRouter()


@router.get("", response_model=TenantPaymentListResponse)
def list_tenant_payments(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Payment status of every tenant on the landlord's properties.

    - Requires landlord role
    """
    service = PaymentService(db)
    assignments = service.list_tenant_payments(context)
    return TenantPaymentListResponse(payments=assignments, total=len(assignments))


@router.get("/history", response_model=PaymentHistoryResponse)
def get_payment_history(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    The tenant's own payment ledger, newest first.

    - Requires tenant role
    """
    service = PaymentService(db)
    records = service.get_payment_history(context)
    return PaymentHistoryResponse(payments=records, total=len(records))


@router.get("/qr/{property_id}", response_model=PaymentQRResponse)
def generate_payment_qr(
    property_id: int,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    UPI payment QR code for the tenant's rented property.

    - Requires tenant role and an assignment to this property
    - qr_code is a PNG data URI
    """
    service = PaymentService(db)
    return service.generate_payment_qr(property_id, context)


@router.post("/mark-paid", response_model=PaymentStatusResponse)
def mark_paid(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Mark the current rent cycle as paid.

    - Requires tenant role
    - Only from pending; appends a 'paid' payment record
    """
    service = PaymentService(db)
    assignment = service.mark_paid(context)
    return PaymentStatusResponse(
        message="Payment marked as paid, pending landlord verification.",
        assignment=assignment,
    )


@router.post("/{assignment_id}/verify", response_model=PaymentStatusResponse)
def verify_payment(
    assignment_id: int,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Verify the tenant's latest reported payment.

    - Requires landlord role and property ownership
    - 409 if no payment is awaiting verification
    """
    service = PaymentService(db)
    assignment = service.verify_payment(assignment_id, context)
    return PaymentStatusResponse(message="Payment verified successfully!", assignment=assignment)


@router.post("/{assignment_id}/next-cycle", response_model=PaymentStatusResponse)
def open_next_cycle(
    assignment_id: int,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Start the next rent cycle after verification.

    - Requires landlord role and property ownership
    - Only from verified; due date moves forward one month
    """
    service = PaymentService(db)
    assignment = service.open_next_cycle(assignment_id, context)
    return PaymentStatusResponse(message="Next payment cycle opened.", assignment=assignment)
