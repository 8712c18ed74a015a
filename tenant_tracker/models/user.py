from sqlalchemy import String, Integer, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from tenant_tracker.models.base import Base, TimestampMixin
from tenant_tracker.models.role import UserRole

if TYPE_CHECKING:
    from tenant_tracker.models.property import Property


class User(Base, TimestampMixin):
    """
    Registered landlord or tenant.

    Role is immutable after registration. Users are never deleted.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )

    # Relationships
    properties: Mapped[list["Property"]] = relationship(
        "Property",
        back_populates="landlord",
        foreign_keys="Property.landlord_id",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role={self.role.value})>"
