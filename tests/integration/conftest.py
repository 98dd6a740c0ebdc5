"""
Integration test configuration.

Drives the FastAPI app through TestClient against the shared in-memory
database and an in-memory object store.
"""

import pytest
from fastapi.testclient import TestClient

from vault_keeper.api.app import create_app
from vault_keeper.services.object_store import InMemoryObjectStore


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def app(app_config, db_manager, db_session, memory_store):
    """Application wired to the test database; db_session provides fresh tables."""
    return create_app(app_config, db_manager=db_manager, object_store=memory_store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def _register_and_login(client, login, password):
    response = client.post(
        "/api/user/register", json={"name": "", "login": login, "masterpassword": password}
    )
    assert response.status_code == 200, response.text

    response = client.post("/api/user/login", json={"login": login, "pwd": password})
    assert response.status_code == 200, response.text
    return {"Authorization": response.headers["Authorization"]}


@pytest.fixture
def login_as(client):
    """Register a customer and return the Authorization header of a fresh session."""

    def _login(login="a@b.com", password="secret123"):
        return _register_and_login(client, login, password)

    return _login


@pytest.fixture
def auth_headers(login_as):
    return login_as()
