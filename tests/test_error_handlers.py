"""Failures escaping a handler are answered with the shared error body."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from api.controllers.service_providers import get_service_provider_service
from main import app

BASE = "/api/v1/service-providers"


class FailingService:
    def __init__(self, exc):
        self.exc = exc

    async def get_provider(self, provider_id):
        raise self.exc


@pytest.fixture
def failing_client(seeded_db):
    """TestClient whose service raises the exception passed to ``install``."""

    def install(exc):
        app.dependency_overrides[get_service_provider_service] = lambda: FailingService(exc)

    # Starlette re-raises after the catch-all handler responds unless told not to.
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client, install
    app.dependency_overrides.clear()


def test_unexpected_error_answers_server_error(failing_client):
    client, install = failing_client
    install(RuntimeError("connection reset"))

    response = client.get(f"{BASE}/p01")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server Error"}


def test_integrity_error_answers_duplicate_field(failing_client):
    client, install = failing_client
    install(IntegrityError("INSERT INTO service_providers", {}, Exception("UNIQUE constraint failed")))

    response = client.get(f"{BASE}/p01")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Duplicate field value entered"}
