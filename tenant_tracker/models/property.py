from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from tenant_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from tenant_tracker.models.user import User


class PropertyType(str, PyEnum):
    """Property type enumeration"""

    ONE_BHK = "1BHK"
    TWO_BHK = "2BHK"
    THREE_BHK = "3BHK"
    STUDIO = "Studio"
    PENTHOUSE = "Penthouse"
    VILLA = "Villa"
    OTHER = "Other"
    COMMERCIAL = "Commercial"


class Property(Base, TimestampMixin):
    """
    Rental listing owned by a landlord.

    tenant_id is NULL while the property is vacant. It is only written
    together with the matching Assignment row (see AssignmentService).
    The unique constraint keeps a tenant from occupying two properties.
    """

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    rent_amount: Mapped[float] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    type: Mapped[PropertyType] = mapped_column(
        Enum(PropertyType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    area_sq_ft: Mapped[float] = mapped_column(Numeric(precision=10, scale=2), nullable=False, default=0)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    landlord_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    tenant_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
        unique=True,
    )

    # Relationships
    landlord: Mapped["User"] = relationship(
        "User", back_populates="properties", foreign_keys=[landlord_id]
    )
    tenant: Mapped["User | None"] = relationship("User", foreign_keys=[tenant_id])

    @property
    def is_vacant(self) -> bool:
        return self.tenant_id is None

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, landlord_id={self.landlord_id}, tenant_id={self.tenant_id})>"
