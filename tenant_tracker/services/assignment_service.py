import logging
from sqlalchemy.orm import Session

from tenant_tracker.core.access import require_role
from tenant_tracker.core.dates import first_day_of_next_month
from tenant_tracker.core.exceptions import ConflictException, NotFoundException
from tenant_tracker.database import atomic
from tenant_tracker.models.agreement import AgreementStatus
from tenant_tracker.models.assignment import Assignment, PaymentStatus
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.models.property import Property
from tenant_tracker.models.role import UserRole
from tenant_tracker.models.user import User
from tenant_tracker.repositories.agreement_repository import AgreementRepository
from tenant_tracker.repositories.assignment_repository import AssignmentRepository
from tenant_tracker.repositories.property_repository import PropertyRepository
from tenant_tracker.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

OCCUPIED = "This property is already occupied by another tenant."
TENANT_TAKEN = (
    "This tenant is already assigned to a property. "
    "A tenant can only be assigned to one property at a time."
)


class AssignmentService:
    """
    Service layer for tenant <-> property bindings.

    Keeps Property.tenant_id and the Assignment row in lockstep: both are
    written in one transaction, the property column through a
    compare-and-set UPDATE, with unique constraints on both sides as the
    last line of defence against concurrent assignment.
    """

    def __init__(self, db: Session):
        self.db = db
        self.property_repo = PropertyRepository(db)
        self.assignment_repo = AssignmentRepository(db)
        self.agreement_repo = AgreementRepository(db)
        self.user_repo = UserRepository(db)

    def _get_owned_property(self, property_id: int, context: AuthContext) -> Property:
        property = self.property_repo.get_by_id(property_id)
        if not property:
            raise NotFoundException("Property not found.")
        context.ensure_owner(
            property.landlord_id, "You can only manage tenants for your own properties."
        )
        return property

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can view all tenants.")
    def list_tenants(self, context: AuthContext) -> list[User]:
        return self.user_repo.get_tenants()

    @require_role(UserRole.LANDLORD)
    def list_unassigned_tenants(self, context: AuthContext) -> list[User]:
        """Tenants free to be assigned (no Assignment row)"""
        return self.user_repo.get_unassigned_tenants()

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can assign tenants.")
    def assign_tenant(
        self, property_id: int, tenant_id: int, context: AuthContext
    ) -> tuple[Property, Assignment | None]:
        """
        Bind a tenant to one of the caller's properties.

        Args:
            property_id: Property to occupy
            tenant_id: Tenant user ID
            context: Calling landlord

        Returns:
            (property, assignment). assignment is None when the pair was
            already bound and nothing changed.

        Raises:
            NotFoundException: If property or tenant doesn't exist
            ForbiddenException: If caller doesn't own the property
            ConflictException: If the property is occupied or the tenant is
                assigned elsewhere
        """
        property = self._get_owned_property(property_id, context)

        if property.tenant_id is not None:
            if property.tenant_id != tenant_id:
                logger.warning(
                    "Assign rejected: property %s occupied by tenant %s",
                    property_id,
                    property.tenant_id,
                )
                raise ConflictException(OCCUPIED)
            return property, None

        tenant = self.user_repo.get_tenant(tenant_id)
        if not tenant:
            raise NotFoundException("Tenant not found.")

        if self.assignment_repo.get_by_tenant(tenant_id):
            logger.warning("Assign rejected: tenant %s already assigned", tenant_id)
            raise ConflictException(TENANT_TAKEN)

        with atomic(self.db, TENANT_TAKEN):
            if not self.property_repo.claim_for_tenant(property.id, tenant.id):
                raise ConflictException(OCCUPIED)
            assignment = self.assignment_repo.add(
                Assignment(
                    tenant_id=tenant.id,
                    property_id=property.id,
                    payment_status=PaymentStatus.PENDING,
                    due_date=first_day_of_next_month(),
                )
            )

        self.db.refresh(property)
        self.db.refresh(assignment)
        logger.info(
            "Assigned tenant %s to property %s (due %s)",
            tenant.id,
            property.id,
            assignment.due_date.isoformat(),
        )
        return property, assignment

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can remove tenants.")
    def remove_tenant(
        self, property_id: int, tenant_id: int, context: AuthContext
    ) -> tuple[Property, int]:
        """
        Vacate a property.

        Clears Property.tenant_id, deletes the Assignment and cancels every
        open or signed agreement for the pair. Payment history is kept.

        Returns:
            (property, number of agreements cancelled)

        Raises:
            NotFoundException: If property doesn't exist
            ForbiddenException: If caller doesn't own the property
            ConflictException: If the tenant is not the current occupant
        """
        property = self._get_owned_property(property_id, context)
        not_assigned = "This tenant is not assigned to the specified property."

        if property.tenant_id is None or property.tenant_id != tenant_id:
            raise ConflictException(not_assigned)

        with atomic(self.db, not_assigned):
            if not self.property_repo.release_tenant(property.id, tenant_id):
                raise ConflictException(not_assigned)

            assignment = self.assignment_repo.get_by_tenant(tenant_id)
            if assignment and assignment.property_id == property.id:
                self.assignment_repo.delete(assignment)
            else:
                logger.warning(
                    "No assignment row for tenant %s on property %s", tenant_id, property.id
                )

            agreements = self.agreement_repo.get_cancellable(tenant_id, property.id)
            for agreement in agreements:
                agreement.status = AgreementStatus.CANCELLED
            self.db.flush()

        self.db.refresh(property)
        logger.info(
            "Removed tenant %s from property %s; cancelled %d agreement(s)",
            tenant_id,
            property.id,
            len(agreements),
        )
        return property, len(agreements)

    @require_role(UserRole.TENANT, message="Access denied. Only tenants can view their dashboard.")
    def get_dashboard(self, context: AuthContext) -> Assignment:
        """
        Raises:
            NotFoundException: If the tenant has no property assigned
        """
        assignment = self.assignment_repo.get_by_tenant(context.user_id)
        if not assignment:
            raise NotFoundException("No property currently assigned to this tenant.")
        return assignment
