import logging
from datetime import datetime, UTC
from urllib.parse import quote, urlencode

import segno
from sqlalchemy.orm import Session

from tenant_tracker.config import settings
from tenant_tracker.core.access import require_role
from tenant_tracker.core.dates import add_months
from tenant_tracker.core.exceptions import ConflictException, ForbiddenException, NotFoundException
from tenant_tracker.database import atomic
from tenant_tracker.models.assignment import Assignment, PaymentStatus
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.models.payment_record import PaymentRecord, PaymentRecordStatus
from tenant_tracker.models.role import UserRole
from tenant_tracker.repositories.assignment_repository import AssignmentRepository
from tenant_tracker.repositories.payment_record_repository import PaymentRecordRepository
from tenant_tracker.repositories.property_repository import PropertyRepository

logger = logging.getLogger(__name__)

CONCURRENT_UPDATE = "Payment status was changed by another request. Please retry."


def build_upi_link(amount: float) -> str:
    """UPI deep link for a rent payment to the configured payee"""
    params = {
        "pa": settings.UPI_PAYEE_VPA,
        "pn": settings.UPI_PAYEE_NAME,
        "am": f"{float(amount):.2f}",
        "cu": "INR",
        "tn": "Rent Payment",
    }
    return "upi://pay?" + urlencode(params, quote_via=quote, safe="@")


class PaymentService:
    """
    Service layer for the per-assignment payment cycle.

    Cycle: pending -> paid (tenant) -> verified (landlord). Each transition
    to paid appends a ledger row; verification flips the newest paid row.
    A verified cycle is reopened only by an explicit open_next_cycle call.
    """

    def __init__(self, db: Session):
        self.db = db
        self.assignment_repo = AssignmentRepository(db)
        self.record_repo = PaymentRecordRepository(db)
        self.property_repo = PropertyRepository(db)

    def _get_landlord_assignment(self, assignment_id: int, context: AuthContext) -> Assignment:
        assignment = self.assignment_repo.get_by_id(assignment_id)
        if not assignment:
            raise NotFoundException("Tenant information record not found.")
        context.ensure_owner(
            assignment.property.landlord_id,
            "You can only manage payments for your own properties.",
        )
        return assignment

    @require_role(UserRole.TENANT, message="Access denied.")
    def generate_payment_qr(self, property_id: int, context: AuthContext) -> dict:
        """
        Render a UPI payment QR code for the caller's rented property.

        Returns:
            dict with qr_code (PNG data URI), upi_link and amount

        Raises:
            NotFoundException: If property doesn't exist
            ForbiddenException: If the caller is not assigned to it
        """
        property = self.property_repo.get_by_id(property_id)
        if not property:
            raise NotFoundException("Property not found.")

        assignment = self.assignment_repo.get_by_tenant(context.user_id)
        if not assignment or assignment.property_id != property.id:
            raise ForbiddenException("Not authorized to generate QR for this property.")

        upi_link = build_upi_link(property.rent_amount)
        qr = segno.make(upi_link, error="m")
        return {
            "qr_code": qr.png_data_uri(scale=6, border=2),
            "upi_link": upi_link,
            "amount": property.rent_amount,
        }

    @require_role(UserRole.TENANT, message="Access denied. Only tenants can mark payments as paid.")
    def mark_paid(self, context: AuthContext) -> Assignment:
        """
        Tenant reports the current cycle as paid.

        Raises:
            NotFoundException: If the tenant has no assignment
            ConflictException: If the cycle is not pending
        """
        assignment = self.assignment_repo.get_by_tenant(context.user_id)
        if not assignment:
            raise NotFoundException("Tenant information not found for current user.")

        if assignment.payment_status != PaymentStatus.PENDING:
            raise ConflictException(
                f"Payment is already {assignment.payment_status.value} for the current cycle."
            )

        with atomic(self.db, CONCURRENT_UPDATE):
            now = datetime.now(UTC)
            assignment.payment_status = PaymentStatus.PAID
            assignment.last_payment_date = now
            self.record_repo.add(
                PaymentRecord(
                    tenant_id=assignment.tenant_id,
                    property_id=assignment.property_id,
                    amount=assignment.property.rent_amount,
                    payment_date=now,
                    status=PaymentRecordStatus.PAID,
                    notes="Payment marked as paid by tenant through dashboard.",
                )
            )

        self.db.refresh(assignment)
        logger.info(
            "Tenant %s marked rent paid for property %s", assignment.tenant_id, assignment.property_id
        )
        return assignment

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can view tenant payments.")
    def list_tenant_payments(self, context: AuthContext) -> list[Assignment]:
        return self.assignment_repo.get_by_landlord(context.user_id)

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can verify payments.")
    def verify_payment(self, assignment_id: int, context: AuthContext) -> Assignment:
        """
        Landlord confirms receipt of the latest reported payment.

        Raises:
            NotFoundException: If assignment doesn't exist
            ForbiddenException: If caller doesn't own the property
            ConflictException: If the cycle is not paid, or no paid ledger row
                of this assignment awaits verification
        """
        assignment = self._get_landlord_assignment(assignment_id, context)
        if assignment.payment_status != PaymentStatus.PAID:
            raise ConflictException("No paid payment awaiting verification.")

        # Newest first, so this cycle's row wins over a stale one from an earlier tenancy
        record = self.record_repo.get_latest_paid(assignment.tenant_id, assignment.property_id)
        if not record:
            raise ConflictException("No paid payment awaiting verification.")

        with atomic(self.db, CONCURRENT_UPDATE):
            assignment.payment_status = PaymentStatus.VERIFIED
            record.status = PaymentRecordStatus.VERIFIED
            record.notes = "Payment verified by landlord."

        self.db.refresh(assignment)
        logger.info(
            "Landlord %s verified payment %s for tenant %s",
            context.user_id,
            record.id,
            assignment.tenant_id,
        )
        return assignment

    @require_role(UserRole.LANDLORD)
    def open_next_cycle(self, assignment_id: int, context: AuthContext) -> Assignment:
        """
        Start the next rent cycle after a verified payment.

        Moves payment_status back to pending and the due date forward by one
        calendar month. Nothing calls this automatically.

        Raises:
            ConflictException: If the current cycle is not verified
        """
        assignment = self._get_landlord_assignment(assignment_id, context)
        if assignment.payment_status != PaymentStatus.VERIFIED:
            raise ConflictException("Only a verified payment cycle can be rolled over.")

        with atomic(self.db, CONCURRENT_UPDATE):
            assignment.payment_status = PaymentStatus.PENDING
            assignment.due_date = add_months(assignment.due_date, 1)

        self.db.refresh(assignment)
        logger.info(
            "Opened payment cycle due %s for tenant %s",
            assignment.due_date.isoformat(),
            assignment.tenant_id,
        )
        return assignment

    @require_role(UserRole.TENANT, message="Access denied. Only tenants can view their payment history.")
    def get_payment_history(self, context: AuthContext) -> list[PaymentRecord]:
        return self.record_repo.get_by_tenant(context.user_id)
