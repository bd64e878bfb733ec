"""Shared test configuration and fixtures for RegDesk tests"""

import logging
import os
import time
import uuid

from tests.config import test_config

# The app reads these at import time
os.environ.setdefault("DATABASE_URL", test_config["database_url"])
os.environ.setdefault("SESSION_SECRET_KEY", test_config["session_secret_key"])

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from regdesk.auth.dependencies import get_identity_client, require_admin_session  # noqa: E402
from regdesk.auth.models import AdminSession  # noqa: E402
from regdesk.errors import AuthError  # noqa: E402
from regdesk.main import app  # noqa: E402
from regdesk.models import Region  # noqa: E402
from regdesk.models.database import get_db  # noqa: E402
from regdesk.services.form_field_service import FormFieldService  # noqa: E402
from regdesk.services.reference_service import MinistryService, RegionService  # noqa: E402
from regdesk.services.registration_service import RegistrationService  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def _db_session():
    """Private DB session for fixtures only.

    Each test gets its own in-memory database. Prefer the service fixtures
    below over using this session directly.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    session = Session(engine)

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def form_field_service(_db_session):
    return FormFieldService(_db_session)


@pytest.fixture
def region_service(_db_session):
    return RegionService(_db_session)


@pytest.fixture
def ministry_service(_db_session):
    return MinistryService(_db_session)


@pytest.fixture
def registration_service(_db_session):
    return RegistrationService(_db_session)


@pytest.fixture
def seeded_regions(_db_session):
    """Regions as the init migration seeds them"""
    regions = [
        Region(name=name)
        for name in ["Central", "Eastern", "Northern", "Southern", "Western"]
    ]
    for region in regions:
        _db_session.add(region)
    _db_session.commit()
    for region in regions:
        _db_session.refresh(region)
    return regions


@pytest.fixture
def seeded_ministries(ministry_service):
    ministry_service.bulk_ingest("Choir\nUshering\nYouth")
    return ministry_service.list_ministries()


@pytest.fixture
def admin_session():
    return AdminSession(
        user_id=f"auth0|{uuid.uuid4().hex}",
        email=test_config["admin_email"],
        expires_at=time.time() + 3600,
    )


@pytest.fixture
def client(_db_session):
    """Test client using the test database and no admin session"""
    original_overrides = app.dependency_overrides.copy()

    def get_test_db():
        return _db_session

    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = get_test_db

    # https so the Secure session and CSRF cookies are sent back
    yield TestClient(app, base_url=test_config["base_url"])

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)


@pytest.fixture
def admin_client(client, admin_session):
    """Test client that bypasses the admin login"""

    def mock_require_admin_session():
        return admin_session

    app.dependency_overrides[require_admin_session] = mock_require_admin_session
    return client


@pytest.fixture
def fake_identity_client(client):
    """Identity client that accepts one fixed password"""

    class FakeIdentityClient:
        is_configured = True

        async def sign_in(self, email, password):
            if password != "correct-password":
                raise AuthError("Wrong email or password.")
            return AdminSession(
                user_id="auth0|admin", email=email, expires_at=time.time() + 600
            )

    fake = FakeIdentityClient()
    app.dependency_overrides[get_identity_client] = lambda: fake
    return fake

