"""Assignment model binding a tenant to the one property they occupy."""

from datetime import date, datetime
from enum import Enum as PyEnum
from sqlalchemy import Integer, ForeignKey, Enum, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from tenant_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tenant_tracker.models.user import User
    from tenant_tracker.models.property import Property


class PaymentStatus(str, PyEnum):
    """Payment cycle of the current due date: pending -> paid -> verified"""

    PENDING = "pending"
    PAID = "paid"
    VERIFIED = "verified"


class Assignment(Base, TimestampMixin):
    """
    Live tenant <-> property binding with the current payment cycle.

    Constraints:
    - Unique(tenant_id) - a tenant holds at most one assignment
    - Unique(property_id) - a property has at most one occupant
    - Exists iff properties.tenant_id == tenant_id for property_id

    version is an optimistic lock counter; concurrent writers get a
    StaleDataError on flush.
    """

    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        unique=True,
    )
    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id"),
        nullable=False,
        unique=True,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    last_payment_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    tenant: Mapped["User"] = relationship("User", foreign_keys=[tenant_id])
    property: Mapped["Property"] = relationship("Property", foreign_keys=[property_id])

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<Assignment(tenant_id={self.tenant_id}, property_id={self.property_id}, "
            f"payment_status={self.payment_status.value})>"
        )
