import os

import pytest
from datetime import date, datetime, timedelta, UTC

# Settings require these before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.user import User
from app.models.role import UserRole
from app.models.property import Property, PropertyStatus
from app.models.tenant import Tenant  # noqa: F401
from app.models.lease import LeaseAgreement  # noqa: F401
from app.models.rent_payment import RentPayment  # noqa: F401
from app.models.booking import Booking  # noqa: F401
from app.models.review import Review  # noqa: F401
from app.models.admin_action import AdminAction  # noqa: F401
from app.models.platform_setting import PlatformSetting  # noqa: F401
from app.repositories.user_repository import UserRepository
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_test_token(user_id=user_id)}"}


def make_user(db, auth_user_id: str, **fields) -> User:
    """Get or create a user row and set profile fields on it"""
    user = UserRepository(db).get_or_create_by_auth_id(auth_user_id)
    for field, value in fields.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def make_property(
    db,
    host: User,
    status: PropertyStatus = PropertyStatus.APPROVED,
    price: float = 500000,
    **fields,
) -> Property:
    """Insert a listing directly, approved by default"""
    property_ = Property(
        host_id=host.id,
        title=fields.pop("title", "Sea View Apartment"),
        location=fields.pop("location", "Dar es Salaam"),
        price=price,
        status=status,
        **fields,
    )
    db.add(property_)
    db.commit()
    db.refresh(property_)
    return property_


def tenant_payload(property_id: int, **overrides) -> dict:
    """Create-tenant request body for an independent tenant"""
    start = overrides.pop("lease_start_date", date(2026, 1, 1))
    end = overrides.pop("lease_end_date", date(2026, 12, 31))
    payload = {
        "property_id": property_id,
        "tenant_name": "Amina Juma",
        "tenant_phone": "+255 712 345 678",
        "lease_start_date": str(start),
        "lease_end_date": str(end),
        "monthly_rent": 400000,
        "security_deposit": 800000,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def user_a_headers():
    """Authorization headers for user A (host / landlord)"""
    return headers_for("user-a")


@pytest.fixture
def user_b_headers():
    """Authorization headers for user B (guest)"""
    return headers_for("user-b")


@pytest.fixture
def user_a(db_session):
    return make_user(db_session, "user-a", full_name="Host A", phone="+255 700 111 222", email="a@example.com")


@pytest.fixture
def user_b(db_session):
    return make_user(db_session, "user-b", full_name="Guest B", phone="+255 700 333 444", email="b@example.com")


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "admin-1", full_name="Admin", role=UserRole.ADMIN)


@pytest.fixture
def admin_headers(admin_user):
    """Authorization headers for an administrator"""
    return headers_for(admin_user.auth_user_id)


@pytest.fixture
def approved_property(db_session, user_a):
    """Approved listing hosted by user A"""
    return make_property(db_session, user_a)


@pytest.fixture
def pending_property(db_session, user_a):
    return make_property(db_session, user_a, status=PropertyStatus.PENDING, title="Pending Flat")
