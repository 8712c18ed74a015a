from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from tenant_tracker.models.property import Property, PropertyType


class PropertyRepository:
    """Repository for Property model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, property_id: int) -> Property | None:
        return self.db.query(Property).filter(Property.id == property_id).first()

    def get_by_landlord(self, landlord_id: int) -> list[Property]:
        """Get all properties owned by a landlord (occupant loaded)"""
        return (
            self.db.query(Property)
            .options(joinedload(Property.tenant))
            .filter(Property.landlord_id == landlord_id)
            .order_by(Property.created_at.desc(), Property.id.desc())
            .all()
        )

    def get_available(
        self,
        location: Optional[str] = None,
        property_type: Optional[PropertyType] = None,
        min_rent: Optional[float] = None,
        max_rent: Optional[float] = None,
        min_bedrooms: Optional[int] = None,
        min_bathrooms: Optional[int] = None,
    ) -> list[Property]:
        """
        Get vacant properties matching optional filters.

        Args:
            location: Case-insensitive substring of the address
            property_type: Exact property type
            min_rent: Inclusive lower rent bound
            max_rent: Inclusive upper rent bound
            min_bedrooms: Minimum number of bedrooms
            min_bathrooms: Minimum number of bathrooms

        Returns:
            List of vacant properties with landlord loaded
        """
        query = (
            self.db.query(Property)
            .options(joinedload(Property.landlord))
            .filter(Property.tenant_id.is_(None))
        )

        if location:
            query = query.filter(Property.address.icontains(location, autoescape=True))

        if property_type is not None:
            query = query.filter(Property.type == property_type)

        if min_rent is not None:
            query = query.filter(Property.rent_amount >= min_rent)

        if max_rent is not None:
            query = query.filter(Property.rent_amount <= max_rent)

        if min_bedrooms is not None:
            query = query.filter(Property.bedrooms >= min_bedrooms)

        if min_bathrooms is not None:
            query = query.filter(Property.bathrooms >= min_bathrooms)

        return query.order_by(Property.created_at.desc(), Property.id.desc()).all()

    def claim_for_tenant(self, property_id: int, tenant_id: int) -> bool:
        """
        Compare-and-set tenant_id from NULL to tenant_id (no commit).

        Returns:
            False if the property was no longer vacant
        """
        result = self.db.execute(
            update(Property)
            .where(Property.id == property_id, Property.tenant_id.is_(None))
            .values(tenant_id=tenant_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def release_tenant(self, property_id: int, tenant_id: int) -> bool:
        """
        Compare-and-set tenant_id from tenant_id back to NULL (no commit).

        Returns:
            False if the tenant was no longer the occupant
        """
        result = self.db.execute(
            update(Property)
            .where(Property.id == property_id, Property.tenant_id == tenant_id)
            .values(tenant_id=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def create(self, property: Property) -> Property:
        """Create new property"""
        self.db.add(property)
        self.db.commit()
        self.db.refresh(property)
        return property

    def delete(self, property: Property) -> None:
        """Stage property deletion without committing"""
        self.db.delete(property)
        self.db.flush()
