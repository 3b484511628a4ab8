"""
Shared fixtures: an in-memory database per test, a TestClient wired to it,
and outbound email replaced with a mock.
"""

import os

# Settings are read at import time, so they must be in place before the app loads
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-suite"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["PAYMENT_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["STORAGE_ENDPOINT_URL"] = "http://storage.test"
os.environ["STORAGE_ACCESS_KEY_ID"] = "test-access-key"
os.environ["STORAGE_SECRET_ACCESS_KEY"] = "test-secret-access-key"
os.environ["STORAGE_REGION"] = "us-east-1"
os.environ["REDIS_URL"] = "redis://127.0.0.1:1/0"

from datetime import date  # noqa: E402
from unittest.mock import AsyncMock, patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from nannyplacements.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from nannyplacements.main import app  # noqa: E402
from nannyplacements.models import Nanny, User, UserRole  # noqa: E402
from nannyplacements.security_utils import create_jwt_token, hash_password_bcrypt  # noqa: E402

PASSWORD = "Passw0rd!"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# =============================================================================
# FIXTURES: Infrastructure
# =============================================================================


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
def mock_send_email():
    """Every outbound email goes through this mock"""
    with patch(
        "nannyplacements.email_service.send_email",
        new=AsyncMock(return_value={"id": "email_test"}),
    ) as mocked:
        yield mocked


# =============================================================================
# HELPERS
# =============================================================================


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup(client, user_type="client", email=None, **overrides) -> dict:
    """Register through the API and return the signup response body"""
    payload = {
        "email": email or f"{user_type}@example.com",
        "password": PASSWORD,
        "first_name": "Thandi" if user_type == "nanny" else "Sarah",
        "last_name": "Nkosi" if user_type == "nanny" else "van Wyk",
        "phone": "082 123 4567",
        "city": "Cape Town",
        "user_type": user_type,
    }
    if user_type == "nanny":
        payload.update(
            {
                "experience_type": "nanny",
                "bank_name": "FNB",
                "account_number": "62123456789",
                "account_holder_name": "T Nkosi",
            }
        )
    payload.update(overrides)
    response = client.post("/auth/signup", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_admin(db_session, email="admin@example.com") -> str:
    """Insert an admin directly and return an access token"""
    user = User(
        email=email,
        password_hash=hash_password_bcrypt(PASSWORD),
        first_name="Site",
        last_name="Admin",
    )
    db_session.add(user)
    db_session.flush()
    db_session.add(UserRole(user_id=user.id, role="admin"))
    db_session.commit()
    return create_jwt_token({"sub": user.id, "role": "admin"})


def approve_nanny(db_session, user_id: str, **fields) -> Nanny:
    nanny = db_session.query(Nanny).filter(Nanny.user_id == user_id).one()
    nanny.profile_approved = True
    for key, value in fields.items():
        setattr(nanny, key, value)
    db_session.commit()
    return nanny


@pytest.fixture
def admin_token(db_session) -> str:
    return create_admin(db_session)


@pytest.fixture
def client_account(client) -> dict:
    return signup(client, "client")


@pytest.fixture
def nanny_account(client, db_session) -> dict:
    """An approved nanny with a profile visible to clients"""
    account = signup(client, "nanny")
    nanny = approve_nanny(
        db_session,
        account["user_id"],
        languages=["English", "Zulu"],
        hourly_rate=60.0,
        date_of_birth=date(1990, 6, 15),
        employment_type="full_time",
        accommodation_preference="live_in",
    )
    account["nanny_id"] = nanny.id
    return account
