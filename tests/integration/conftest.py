"""
Integration test fixtures. Overrides get_db for API tests with in-memory DB.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def override_get_db():
    """Create in-memory engine and session factory for API tests."""
    import nexus.models  # noqa: F401
    from nexus.config import Base

    # StaticPool: the threadpool that runs sync routes must see the same in-memory DB
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    yield _get_db
    engine.dispose()


@pytest.fixture
def api_client(override_get_db):
    """FastAPI TestClient with in-memory DB override."""
    from fastapi.testclient import TestClient
    from nexus.api import app
    from nexus.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def signup(api_client):
    """Register a user over HTTP and return its public record."""
    def _signup(email, role="student", display_name=None, password="Pass@123"):
        response = api_client.post(
            "/auth/signup",
            json={"email": email, "password": password, "role": role, "displayName": display_name},
        )
        assert response.status_code == 201, response.text
        return response.json()["user"]
    return _signup
