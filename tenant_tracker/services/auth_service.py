import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tenant_tracker.models.user import User
from tenant_tracker.repositories.user_repository import UserRepository
from tenant_tracker.schemas.user_schemas import RegisterRequest, LoginRequest
from tenant_tracker.core.security import hash_password, verify_password, create_access_token
from tenant_tracker.core.exceptions import ConflictException, InvalidCredentialsException

logger = logging.getLogger(__name__)

DUPLICATE_USER = "User with this email or username already exists."
INVALID_LOGIN = "Invalid username or password."


class AuthService:
    """Service for registration and login"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository(db)

    def register(self, data: RegisterRequest) -> User:
        """
        Create a new user with a hashed password.

        Raises:
            ConflictException: If username or email is already taken
        """
        if self.repo.get_by_username_or_email(data.username, data.email):
            raise ConflictException(DUPLICATE_USER)

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
        )
        try:
            user = self.repo.create(user)
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.db.rollback()
            raise ConflictException(DUPLICATE_USER)

        logger.info("Registered %s %s (id=%s)", user.role.value, user.username, user.id)
        return user

    def login(self, data: LoginRequest) -> dict:
        """
        Verify credentials and issue an access token.

        Raises:
            InvalidCredentialsException: On unknown username or wrong password
        """
        user = self.repo.get_by_username(data.username)
        if not user or not verify_password(data.password, user.password_hash):
            raise InvalidCredentialsException(INVALID_LOGIN)

        return {
            "token": create_access_token(user.id, user.role.value),
            "role": user.role,
            "user_id": user.id,
            "username": user.username,
        }
