import logging
import secrets
import string
import time
from datetime import datetime, UTC

from sqlalchemy.orm import Session

from tenant_tracker.core.access import require_role
from tenant_tracker.core.dates import add_months
from tenant_tracker.core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from tenant_tracker.database import atomic
from tenant_tracker.models.agreement import Agreement, AgreementStatus, Signature
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.models.property import Property
from tenant_tracker.models.role import UserRole
from tenant_tracker.repositories.agreement_repository import AgreementRepository
from tenant_tracker.repositories.assignment_repository import AssignmentRepository
from tenant_tracker.repositories.property_repository import PropertyRepository
from tenant_tracker.repositories.user_repository import UserRepository
from tenant_tracker.schemas.agreement_schemas import AgreementCreate, AgreementRequest, AgreementTerms

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_agreement_id() -> str:
    """Human-readable reference: AGR-<epoch millis>-<6 uppercase alphanumerics>"""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"AGR-{int(time.time() * 1000)}-{suffix}"


class AgreementService:
    """
    Service layer for the bilateral signature workflow.

    Agreements are created waiting on the counterpart of whoever created
    them, move to SIGNED once both parties have signed, and are only ever
    cancelled by AssignmentService.remove_tenant.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = AgreementRepository(db)
        self.property_repo = PropertyRepository(db)
        self.assignment_repo = AssignmentRepository(db)
        self.user_repo = UserRepository(db)

    def _new_agreement(
        self,
        data: AgreementTerms,
        property: Property,
        tenant_id: int,
        status: AgreementStatus,
    ) -> Agreement:
        if not data.terms.strip():
            raise ValidationException("Agreement terms cannot be blank.")

        agreement = Agreement(
            agreement_id=generate_agreement_id(),
            tenant_id=tenant_id,
            landlord_id=property.landlord_id,
            property_id=property.id,
            rent_amount=data.rent_amount,
            security_deposit=data.security_deposit,
            lease_duration=data.lease_duration,
            start_date=data.start_date,
            end_date=add_months(data.start_date, data.lease_duration),
            terms=data.terms,
            status=status,
            tenant_signature=Signature(),
            landlord_signature=Signature(),
        )
        with atomic(self.db, "Agreement reference already exists. Please retry."):
            self.repo.add(agreement)

        self.db.refresh(agreement)
        logger.info(
            "Created agreement %s for tenant %s on property %s (%s)",
            agreement.agreement_id,
            tenant_id,
            property.id,
            status.value,
        )
        return agreement

    @require_role(UserRole.LANDLORD, message="Only landlords can create agreements.")
    def create_agreement(self, data: AgreementCreate, context: AuthContext) -> Agreement:
        """
        Landlord drafts an agreement for one of their properties.

        The agreement starts in PENDING_TENANT_SIGNATURE.

        Raises:
            ValidationException: If terms are blank
            NotFoundException: If property or tenant doesn't exist, or the
                user is not a tenant
            ForbiddenException: If caller doesn't own the property
        """
        property = self.property_repo.get_by_id(data.property_id)
        tenant = self.user_repo.get_tenant(data.tenant_id)
        if not property or not tenant:
            raise NotFoundException("Property or Tenant not found, or Tenant is invalid.")

        context.ensure_owner(
            property.landlord_id, "You can only create agreements for your own properties."
        )
        return self._new_agreement(
            data, property, tenant.id, AgreementStatus.PENDING_TENANT_SIGNATURE
        )

    @require_role(UserRole.TENANT, message="Only tenants can request agreements.")
    def request_agreement(self, data: AgreementRequest, context: AuthContext) -> Agreement:
        """
        Tenant proposes an agreement for the property they rent; the landlord
        signs next.

        Raises:
            NotFoundException: If property doesn't exist
            ForbiddenException: If the caller is not assigned to the property
        """
        property = self.property_repo.get_by_id(data.property_id)
        if not property:
            raise NotFoundException("Property not found.")

        # Removal is the only cancel path, so requests are tied to an occupancy
        assignment = self.assignment_repo.get_by_tenant(context.user_id)
        if not assignment or assignment.property_id != property.id:
            raise ForbiddenException("You can only request agreements for the property you rent.")

        return self._new_agreement(
            data, property, context.user_id, AgreementStatus.PENDING_LANDLORD_SIGNATURE
        )

    @require_role(UserRole.LANDLORD, UserRole.TENANT, message="Access denied. Invalid user role.")
    def list_agreements(self, context: AuthContext) -> list[Agreement]:
        """Agreements where the caller is the party matching their role"""
        if context.is_landlord():
            return self.repo.get_by_landlord(context.user_id)
        return self.repo.get_by_tenant(context.user_id)

    @require_role(UserRole.LANDLORD, UserRole.TENANT)
    def get_agreement(self, agreement_id: str, context: AuthContext) -> Agreement:
        """
        Raises:
            NotFoundException: If agreement doesn't exist
            ForbiddenException: If caller is not a party to it
        """
        agreement = self.repo.get_by_agreement_id(agreement_id)
        if not agreement:
            raise NotFoundException("Agreement not found.")
        if not (context.owns(agreement.tenant_id) or context.owns(agreement.landlord_id)):
            raise ForbiddenException("You are not a party to this agreement.")
        return agreement

    @require_role(UserRole.LANDLORD, UserRole.TENANT)
    def sign_agreement(self, agreement_id: str, context: AuthContext) -> Agreement:
        """
        Record the caller's signature and advance the agreement status.

        The caller signs as the party matching their role. Status becomes
        SIGNED once both signatures are present, otherwise it waits on the
        counterpart.

        Raises:
            NotFoundException: If agreement doesn't exist
            ForbiddenException: If caller is neither party, or their role does
                not match their relation to the agreement
            ConflictException: If the agreement is cancelled or the caller
                has already signed
        """
        agreement = self.repo.get_by_agreement_id(agreement_id)
        if not agreement:
            raise NotFoundException("Agreement not found.")

        is_tenant = context.owns(agreement.tenant_id)
        is_landlord = context.owns(agreement.landlord_id)
        if not (is_tenant or is_landlord):
            raise ForbiddenException(
                "Not authorized to sign this agreement. "
                "You are neither the tenant nor the landlord for this agreement."
            )

        if context.role == UserRole.TENANT and is_tenant:
            party, counterpart = UserRole.TENANT, UserRole.LANDLORD
        elif context.role == UserRole.LANDLORD and is_landlord:
            party, counterpart = UserRole.LANDLORD, UserRole.TENANT
        else:
            raise ForbiddenException(
                "Unauthorized to sign. Your role does not match your relation to this agreement."
            )

        if agreement.status == AgreementStatus.CANCELLED:
            raise ConflictException("This agreement has been cancelled and can no longer be signed.")

        if agreement.signature_of(party).signed:
            raise ConflictException(
                f"{party.value.capitalize()} has already signed this agreement."
            )

        with atomic(self.db, "Agreement was modified by another request. Please retry."):
            signature = Signature(
                signed=True, signed_at=datetime.now(UTC), ip_address=context.ip_address
            )
            if party == UserRole.TENANT:
                agreement.tenant_signature = signature
            else:
                agreement.landlord_signature = signature

            if agreement.signature_of(counterpart).signed:
                agreement.status = AgreementStatus.SIGNED
            else:
                agreement.status = AgreementStatus.awaiting(counterpart)

        self.db.refresh(agreement)
        logger.info(
            "Agreement %s signed by %s %s; status %s",
            agreement.agreement_id,
            party.value,
            context.user_id,
            agreement.status.value,
        )
        return agreement
