import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.dependencies import get_db
from app.services import auth_service


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def as_admin(client, admin_user):
    """Requests through `client` run as the admin user."""
    app.dependency_overrides[auth_service.get_current_admin] = lambda: admin_user
    return client
