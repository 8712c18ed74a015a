import logging
from sqlalchemy.orm import Session

from tenant_tracker.core.access import require_role
from tenant_tracker.core.exceptions import ConflictException, NotFoundException, ValidationException
from tenant_tracker.database import atomic
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.models.property import Property
from tenant_tracker.models.role import UserRole
from tenant_tracker.repositories.agreement_repository import AgreementRepository
from tenant_tracker.repositories.property_repository import PropertyRepository
from tenant_tracker.schemas.property_schemas import PropertyCreate, PropertyFilter

logger = logging.getLogger(__name__)


class PropertyService:
    """Service for property listing business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PropertyRepository(db)
        self.agreement_repo = AgreementRepository(db)

    def get_property(self, property_id: int) -> Property:
        """
        Raises:
            NotFoundException: If property doesn't exist
        """
        property = self.repo.get_by_id(property_id)
        if not property:
            raise NotFoundException("Property not found.")
        return property

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can add properties.")
    def create_property(self, data: PropertyCreate, context: AuthContext) -> Property:
        """Create a vacant property owned by the calling landlord"""
        property = Property(
            address=data.address,
            rent_amount=data.rent_amount,
            type=data.type,
            bedrooms=data.bedrooms,
            bathrooms=data.bathrooms,
            area_sq_ft=data.area_sq_ft,
            description=data.description,
            landlord_id=context.user_id,
        )
        property = self.repo.create(property)
        logger.info("Landlord %s listed property %s", context.user_id, property.id)
        return property

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can view their properties.")
    def list_own_properties(self, context: AuthContext) -> list[Property]:
        return self.repo.get_by_landlord(context.user_id)

    @require_role(UserRole.TENANT, message="Access denied. Only tenants can browse properties.")
    def list_available_properties(self, filters: PropertyFilter, context: AuthContext) -> list[Property]:
        """
        Browse vacant properties.

        Raises:
            ValidationException: If min_rent exceeds max_rent
        """
        if (
            filters.min_rent is not None
            and filters.max_rent is not None
            and filters.min_rent > filters.max_rent
        ):
            raise ValidationException("min_rent cannot be greater than max_rent.")

        return self.repo.get_available(
            location=filters.location.strip() if filters.location else None,
            property_type=filters.type,
            min_rent=filters.min_rent,
            max_rent=filters.max_rent,
            min_bedrooms=filters.min_bedrooms,
            min_bathrooms=filters.min_bathrooms,
        )

    @require_role(UserRole.LANDLORD, message="Access denied. Only landlords can delete properties.")
    def delete_property(self, property_id: int, context: AuthContext) -> None:
        """
        Delete a property once its history is fully resolved.

        Raises:
            NotFoundException: If property doesn't exist
            ForbiddenException: If caller doesn't own the property
            ConflictException: If a tenant is assigned or any agreement references it
        """
        property = self.get_property(property_id)
        context.ensure_owner(property.landlord_id, "You can only delete your own properties.")

        if property.tenant_id is not None:
            raise ConflictException(
                "Cannot delete property with assigned tenant. Please remove the tenant first."
            )
        has_agreements = (
            "Cannot delete property with existing rental agreements. Please handle agreements first."
        )
        if self.agreement_repo.exists_for_property(property.id):
            raise ConflictException(has_agreements)

        # An assignment or agreement written concurrently trips the foreign keys
        with atomic(self.db, has_agreements):
            self.repo.delete(property)
        logger.info("Landlord %s deleted property %s", context.user_id, property_id)

    @require_role(UserRole.TENANT, message="Access denied. Only tenants can send contact requests.")
    def contact_landlord(self, property_id: int, message: str, context: AuthContext) -> dict:
        """
        Build the contact receipt for a tenant's message.

        Nothing is delivered; the landlord's contact details are returned so
        the tenant can follow up directly.
        """
        property = self.get_property(property_id)
        landlord = property.landlord
        tenant = context.user

        logger.info(
            "Contact request from tenant %s to landlord %s about property %s",
            tenant.id,
            landlord.id,
            property.id,
        )
        return {
            "message": "Contact request sent successfully!",
            "landlord": {"username": landlord.username, "email": landlord.email},
            "tenant": {"username": tenant.username, "email": tenant.email},
            "property": {
                "id": property.id,
                "address": property.address,
                "rent_amount": property.rent_amount,
            },
            "contact_message": message,
        }
