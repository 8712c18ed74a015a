"""Repository for Assignment model operations."""

from sqlalchemy.orm import Session, joinedload
from tenant_tracker.models.assignment import Assignment
from tenant_tracker.models.property import Property


class AssignmentRepository:
    """Repository for Assignment model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, assignment_id: int) -> Assignment | None:
        return (
            self.db.query(Assignment)
            .options(joinedload(Assignment.property))
            .filter(Assignment.id == assignment_id)
            .first()
        )

    def get_by_tenant(self, tenant_id: int) -> Assignment | None:
        """
        Get the tenant's single assignment with its property and landlord.

        Args:
            tenant_id: Tenant user ID

        Returns:
            Assignment object or None if the tenant is unassigned
        """
        return (
            self.db.query(Assignment)
            .options(joinedload(Assignment.property).joinedload(Property.landlord))
            .filter(Assignment.tenant_id == tenant_id)
            .first()
        )

    def get_by_landlord(self, landlord_id: int) -> list[Assignment]:
        """
        Get assignments on every property owned by a landlord.

        Args:
            landlord_id: Landlord user ID

        Returns:
            Assignments with tenant and property loaded
        """
        return (
            self.db.query(Assignment)
            .join(Property, Assignment.property_id == Property.id)
            .options(joinedload(Assignment.tenant), joinedload(Assignment.property))
            .filter(Property.landlord_id == landlord_id)
            .order_by(Assignment.due_date, Assignment.id)
            .all()
        )

    def add(self, assignment: Assignment) -> Assignment:
        """
        Stage a new assignment without committing.

        Caller responsible for commit. Flushes so unique constraints fire
        inside the caller's unit of work.
        """
        self.db.add(assignment)
        self.db.flush()
        return assignment

    def delete(self, assignment: Assignment) -> None:
        """Stage assignment deletion without committing"""
        self.db.delete(assignment)
        self.db.flush()
