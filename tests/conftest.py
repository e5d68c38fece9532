"""Shared test fixtures and configuration."""
import os

# Point the application engine at SQLite before anything imports groupshare.db
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from groupshare.main import app  # noqa: E402
from groupshare.db.base import Base  # noqa: E402
from groupshare.db.store import CheckinStore  # noqa: E402
from groupshare.api.deps import get_db, get_place_directory  # noqa: E402
from groupshare.services import GroupRegistry, PlaceInfo  # noqa: E402
from tests.utils import FakePlaceDirectory  # noqa: E402


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    from groupshare.core.rate_limit import limiter

    if "rate_limit" in request.keywords:
        limiter.enabled = True
        limiter.reset()
        yield
        limiter.reset()
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a new database session for a test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session):
    return CheckinStore(db_session)


@pytest.fixture
def group(store):
    """A freshly created group."""
    return GroupRegistry(store).create_group()


@pytest.fixture
def places():
    return FakePlaceDirectory({
        "101": PlaceInfo(name="Yamabiko Restaurant", lat=36.921, lng=138.445),
        "102": PlaceInfo(name="Oyu Onsen", lat=36.923, lng=138.447),
    })


@pytest.fixture(scope="function")
def client(db_session, places):
    """Create a test client with a test database and fake places directory."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_place_directory] = lambda: places
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def group_code(client):
    """Code of a group created through the API."""
    response = client.post("/api/v1/groups")
    assert response.status_code == 201
    return response.json()["code"]
