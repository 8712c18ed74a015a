from sqlalchemy.orm import Session, joinedload

from tenant_tracker.models.agreement import Agreement, AgreementStatus


class AgreementRepository:
    """Repository for Agreement data access"""

    def __init__(self, db: Session):
        self.db = db

    def _with_parties(self):
        return self.db.query(Agreement).options(
            joinedload(Agreement.tenant),
            joinedload(Agreement.landlord),
            joinedload(Agreement.property),
        )

    def get_by_agreement_id(self, agreement_id: str) -> Agreement | None:
        """Get agreement by its external reference (AGR-...)"""
        return self._with_parties().filter(Agreement.agreement_id == agreement_id).first()

    def get_by_landlord(self, landlord_id: int) -> list[Agreement]:
        return (
            self._with_parties()
            .filter(Agreement.landlord_id == landlord_id)
            .order_by(Agreement.created_at.desc(), Agreement.id.desc())
            .all()
        )

    def get_by_tenant(self, tenant_id: int) -> list[Agreement]:
        return (
            self._with_parties()
            .filter(Agreement.tenant_id == tenant_id)
            .order_by(Agreement.created_at.desc(), Agreement.id.desc())
            .all()
        )

    def get_cancellable(self, tenant_id: int, property_id: int) -> list[Agreement]:
        """Agreements for a tenant/property pair that removal must cancel"""
        return (
            self.db.query(Agreement)
            .filter(
                Agreement.tenant_id == tenant_id,
                Agreement.property_id == property_id,
                Agreement.status.in_(AgreementStatus.cancellable()),
            )
            .all()
        )

    def exists_for_property(self, property_id: int) -> bool:
        """True if any agreement, in any status, references the property"""
        return (
            self.db.query(Agreement.id).filter(Agreement.property_id == property_id).first()
            is not None
        )

    def add(self, agreement: Agreement) -> Agreement:
        """Stage new agreement without committing"""
        self.db.add(agreement)
        self.db.flush()
        return agreement
