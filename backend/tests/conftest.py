"""Pytest configuration and fixtures."""
import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hms.models  # noqa: F401
from hms.catalog import seed_catalog
from hms.config import Settings, get_settings
from hms.database import Base, get_db

STRONG_PASSWORD = "Test@123456"


@pytest.fixture(scope="session")
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def other_settings():
    """Settings with a different issuer and audience."""
    return Settings(
        database_url="sqlite:///:memory:",
        jwt_issuer="someone-else",
        jwt_audience="another-client",
    )


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()
    
    yield session
    
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def catalog(db_session):
    """Default menus, features and roles."""
    seed_catalog(db_session)
    db_session.commit()
    return db_session


@pytest.fixture
def client(db_session):
    """API client bound to the test session."""
    from hms.main import app
    
    def override_get_db():
        yield db_session
    
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _register_payload(**overrides):
    payload = {
        "username": "newuser",
        "email": "newuser@test.com",
        "password": STRONG_PASSWORD,
        "first_name": "New",
        "last_name": "User",
        "phone": "9876543210",
    }
    payload.update(overrides)
    return payload


def _complete_payload(**overrides):
    payload = {
        "email": "owner@clinic.com",
        "password": STRONG_PASSWORD,
        "first_name": "Clinic",
        "last_name": "Owner",
        "phone": "9123456780",
        "company_name": "City Clinic",
    }
    payload.update(overrides)
    return payload


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_payload():
    """Factory for a valid /auth/register body."""
    return _register_payload


@pytest.fixture
def complete_payload():
    """Factory for a valid /auth/register-complete body."""
    return _complete_payload


@pytest.fixture
def bearer():
    """Authorization header for a token."""
    return _bearer


@pytest.fixture
def company_admin(client, catalog):
    """Administrator of a freshly onboarded company."""
    response = client.post("/api/v1/auth/register-complete", json=_complete_payload())
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def other_company_admin(client, catalog):
    """Administrator of a second, unrelated company."""
    response = client.post(
        "/api/v1/auth/register-complete",
        json=_complete_payload(
            email="chief@otherhospital.com",
            first_name="Other",
            last_name="Chief",
            phone="9000011111",
            company_name="Other Hospital",
        ),
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
