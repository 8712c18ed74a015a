from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Integer, Numeric, ForeignKey, Enum, Text, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from tenant_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tenant_tracker.models.property import Property


class PaymentRecordStatus(str, PyEnum):
    PAID = "paid"
    VERIFIED = "verified"


class PaymentRecord(Base, TimestampMixin):
    """
    Payment ledger entry.

    Append-only: rows are never deleted and outlive the Assignment they
    were recorded against. The only update is paid -> verified.
    """

    __tablename__ = "payment_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    # Weak reference: ledger rows outlive deleted properties
    property_id: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=func.now())
    status: Mapped[PaymentRecordStatus] = mapped_column(
        Enum(PaymentRecordStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=PaymentRecordStatus.PAID,
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Relationships
    property: Mapped["Property | None"] = relationship(
        "Property",
        primaryjoin="foreign(PaymentRecord.property_id) == Property.id",
        viewonly=True,
    )

    __table_args__ = (
        Index("ix_payment_records_tenant_property", "tenant_id", "property_id"),
    )
