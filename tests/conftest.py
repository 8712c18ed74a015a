import os

# Settings are read at import time; provide test values before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_tenant_tracker.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from tenant_tracker.database import get_db
from tenant_tracker.models.base import Base
from tenant_tracker.config import settings
from tenant_tracker.core.security import hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from tenant_tracker.models.user import User
from tenant_tracker.models.role import UserRole
from tenant_tracker.models.property import Property, PropertyType
from tenant_tracker.models.assignment import Assignment
from tenant_tracker.models.payment_record import PaymentRecord
from tenant_tracker.models.agreement import Agreement
from tenant_tracker.models.auth_context import AuthContext
# Import FastAPI app AFTER model imports
from tenant_tracker.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "password123"
# Hashing is slow by design; hash once for every fixture user
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id: int | str = 1,
    role: str | None = "landlord",
    expired: bool = False,
) -> str:
    """
    Generate JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        role: Role claim (omitted when None)
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": str(user_id), "exp": exp, "iat": datetime.now(UTC)}
    if role is not None:
        payload["role"] = role

    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def headers_for(user: User) -> dict:
    """Authorization headers for a stored user"""
    token = create_test_token(user_id=user.id, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


def context_for(user: User, ip_address: str = "10.0.0.1") -> AuthContext:
    """AuthContext for calling services directly"""
    return AuthContext(user=user, role=user.role, ip_address=ip_address)


def make_user(db_session, username: str, role: UserRole) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=TEST_PASSWORD_HASH,
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_property(db_session, landlord: User, **overrides) -> Property:
    fields = {
        "address": "12 MG Road, Bengaluru",
        "rent_amount": 10000,
        "type": PropertyType.TWO_BHK,
        "bedrooms": 2,
        "bathrooms": 1,
        "area_sq_ft": 900,
        "description": "Sunny flat near the metro",
    }
    fields.update(overrides)
    property = Property(landlord_id=landlord.id, **fields)
    db_session.add(property)
    db_session.commit()
    db_session.refresh(property)
    return property


@pytest.fixture
def landlord(db_session):
    return make_user(db_session, "landlord_lee", UserRole.LANDLORD)


@pytest.fixture
def other_landlord(db_session):
    return make_user(db_session, "landlord_ola", UserRole.LANDLORD)


@pytest.fixture
def tenant(db_session):
    return make_user(db_session, "tenant_tara", UserRole.TENANT)


@pytest.fixture
def other_tenant(db_session):
    return make_user(db_session, "tenant_theo", UserRole.TENANT)


@pytest.fixture
def landlord_headers(landlord):
    return headers_for(landlord)


@pytest.fixture
def other_landlord_headers(other_landlord):
    return headers_for(other_landlord)


@pytest.fixture
def tenant_headers(tenant):
    return headers_for(tenant)


@pytest.fixture
def other_tenant_headers(other_tenant):
    return headers_for(other_tenant)


@pytest.fixture
def rental(db_session, landlord):
    """Vacant property owned by landlord, rent 10000"""
    return make_property(db_session, landlord)


@pytest.fixture
def assigned_rental(client, db_session, rental, tenant, landlord_headers):
    """rental with tenant assigned through the API"""
    response = client.post(
        "/api/assignments",
        headers=landlord_headers,
        json={"property_id": rental.id, "tenant_id": tenant.id},
    )
    assert response.status_code == 201
    db_session.refresh(rental)
    return rental
