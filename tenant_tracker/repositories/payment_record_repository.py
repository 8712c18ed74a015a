from sqlalchemy.orm import Session, joinedload

from tenant_tracker.models.payment_record import PaymentRecord, PaymentRecordStatus


class PaymentRecordRepository:
    """Repository for the append-only payment ledger"""

    def __init__(self, db: Session):
        self.db = db

    def add(self, record: PaymentRecord) -> PaymentRecord:
        """Append a ledger row without committing (for atomic ops)"""
        self.db.add(record)
        self.db.flush()
        return record

    def get_latest_paid(self, tenant_id: int, property_id: int) -> PaymentRecord | None:
        """Most recent record still awaiting verification (created_at, then id)"""
        return (
            self.db.query(PaymentRecord)
            .filter(
                PaymentRecord.tenant_id == tenant_id,
                PaymentRecord.property_id == property_id,
                PaymentRecord.status == PaymentRecordStatus.PAID,
            )
            .order_by(PaymentRecord.created_at.desc(), PaymentRecord.id.desc())
            .first()
        )

    def get_by_tenant(self, tenant_id: int) -> list[PaymentRecord]:
        """Tenant's payment history, newest first"""
        return (
            self.db.query(PaymentRecord)
            .options(joinedload(PaymentRecord.property))
            .filter(PaymentRecord.tenant_id == tenant_id)
            .order_by(PaymentRecord.created_at.desc(), PaymentRecord.id.desc())
            .all()
        )
