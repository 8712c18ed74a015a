from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from tenant_tracker.models.user import User
from tenant_tracker.models.role import UserRole
from tenant_tracker.models.assignment import Assignment


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        """Get user by internal ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def get_by_username_or_email(self, username: str, email: str) -> User | None:
        """Find a user clashing with either unique field (registration check)"""
        return (
            self.db.query(User)
            .filter(or_(User.username == username, User.email == email))
            .first()
        )

    def get_tenant(self, user_id: int) -> User | None:
        """Get user only if they are registered as a tenant"""
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.role == UserRole.TENANT)
            .first()
        )

    def get_tenants(self) -> list[User]:
        return (
            self.db.query(User)
            .filter(User.role == UserRole.TENANT)
            .order_by(User.username)
            .all()
        )

    def get_unassigned_tenants(self) -> list[User]:
        """Tenants without an Assignment row"""
        assigned = select(Assignment.tenant_id)
        return (
            self.db.query(User)
            .filter(User.role == UserRole.TENANT, User.id.not_in(assigned))
            .order_by(User.username)
            .all()
        )

    def create(self, user: User) -> User:
        """
        Create new user.

        Raises:
            IntegrityError: If username or email already exists
        """
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
