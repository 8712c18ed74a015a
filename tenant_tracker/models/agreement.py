"""Rental agreement model with bilateral signature tracking."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum, Date, DateTime, Text, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship, composite
from typing import TYPE_CHECKING

from tenant_tracker.models.base import Base, TimestampMixin
from tenant_tracker.models.role import UserRole

if TYPE_CHECKING:
    from tenant_tracker.models.user import User
    from tenant_tracker.models.property import Property


class AgreementStatus(str, PyEnum):
    """
    Agreement lifecycle.

    Transitions:
    - creation -> PENDING_TENANT_SIGNATURE (landlord created)
    - creation -> PENDING_LANDLORD_SIGNATURE (tenant requested)
    - sign by missing party -> SIGNED or the counterpart's pending state
    - any non-cancelled state -> CANCELLED when the tenant is removed

    DRAFT is accepted by the store but never produced by the service.
    """

    DRAFT = "draft"
    PENDING_TENANT_SIGNATURE = "pending_tenant_signature"
    PENDING_LANDLORD_SIGNATURE = "pending_landlord_signature"
    SIGNED = "signed"
    CANCELLED = "cancelled"

    @classmethod
    def cancellable(cls) -> tuple["AgreementStatus", ...]:
        return (
            cls.DRAFT,
            cls.PENDING_TENANT_SIGNATURE,
            cls.PENDING_LANDLORD_SIGNATURE,
            cls.SIGNED,
        )

    @classmethod
    def awaiting(cls, role: UserRole) -> "AgreementStatus":
        """Pending state that waits on the given party"""
        if role == UserRole.TENANT:
            return cls.PENDING_TENANT_SIGNATURE
        return cls.PENDING_LANDLORD_SIGNATURE


@dataclass
class Signature:
    """One party's signature, mapped onto three agreement columns"""

    signed: bool = False
    signed_at: datetime | None = None
    ip_address: str | None = None


class Agreement(Base, TimestampMixin):
    """
    Bilateral lease contract between a landlord and a tenant for one property.

    Rows are never deleted; removal of the tenant marks them CANCELLED.
    end_date is derived from start_date + lease_duration months at creation.
    """

    __tablename__ = "agreements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agreement_id: Mapped[str] = mapped_column(String(40), unique=True, nullable=False, index=True)
    tenant_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    landlord_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id"), nullable=False, index=True
    )
    rent_amount: Mapped[float] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    security_deposit: Mapped[float] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    lease_duration: Mapped[int] = mapped_column(Integer, nullable=False)  # months
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    terms: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[AgreementStatus] = mapped_column(
        Enum(AgreementStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=AgreementStatus.DRAFT,
    )

    tenant_signature: Mapped[Signature] = composite(
        mapped_column("tenant_signed", Boolean, nullable=False, default=False),
        mapped_column("tenant_signed_at", DateTime, nullable=True),
        mapped_column("tenant_signed_ip", String(64), nullable=True),
    )
    landlord_signature: Mapped[Signature] = composite(
        mapped_column("landlord_signed", Boolean, nullable=False, default=False),
        mapped_column("landlord_signed_at", DateTime, nullable=True),
        mapped_column("landlord_signed_ip", String(64), nullable=True),
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    tenant: Mapped["User"] = relationship("User", foreign_keys=[tenant_id])
    landlord: Mapped["User"] = relationship("User", foreign_keys=[landlord_id])
    property: Mapped["Property"] = relationship("Property", foreign_keys=[property_id])

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_agreements_tenant_property", "tenant_id", "property_id"),
    )

    def signature_of(self, role: UserRole) -> Signature:
        if role == UserRole.TENANT:
            return self.tenant_signature
        return self.landlord_signature

    def __repr__(self) -> str:
        return f"<Agreement(agreement_id='{self.agreement_id}', status={self.status.value})>"
