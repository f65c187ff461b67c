"""HTTP tests for GET /api/health."""

import pytest
from fastapi.testclient import TestClient

from shopify_generator.conf.config import Settings, get_settings
from shopify_generator.server.main import app


pytestmark = pytest.mark.integration


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.mark.parametrize(("api_key", "expected"), [("sk-or-test", True), ("", False)])
def test_reports_api_key_presence(client, api_key, expected):
    app.dependency_overrides[get_settings] = lambda: Settings(OPENROUTER_API_KEY=api_key)

    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "hasApiKey": expected}


def test_never_leaks_the_key(client):
    app.dependency_overrides[get_settings] = lambda: Settings(OPENROUTER_API_KEY="sk-or-secret")

    response = client.get("/api/health")

    assert "sk-or-secret" not in response.text


def test_sets_request_id(client):
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["x-request-id"] == "req-123"
