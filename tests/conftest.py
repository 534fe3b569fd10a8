# tests/conftest.py
"""
Pytest configuration and fixtures for the ServiceDesk test suite.

Provides:
- FastAPI test client over an in-memory MongoDB (mongomock)
- A registered organization admin with bearer headers
- A regular member of the same organization
- A scrum project

Note: every request in the API tests carries a bearer token, so the CSRF
double-submit check does not apply to them (see test_security_api.py).
"""

import os
import uuid
from typing import Any, Dict

import mongomock
import pytest
from fastapi.testclient import TestClient

# Set test environment before imports
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from servicedesk.di.container import DIContainer
from servicedesk.main import create_application

PASSWORD = "s3cure-passw0rd"


# ============== Application Fixtures ==============

@pytest.fixture
def mongo_client():
    """Fresh in-memory MongoDB per test."""
    return mongomock.MongoClient(tz_aware=True)


@pytest.fixture
def container(mongo_client) -> DIContainer:
    return DIContainer(mongo_client=mongo_client)


@pytest.fixture
def app(container):
    return create_application(container=container)


@pytest.fixture
def client(app) -> TestClient:
    """Test client that turns server errors into 500 envelopes instead of raising."""
    return TestClient(app, raise_server_exceptions=False)


# ============== User Fixtures ==============

def register(client: TestClient, **payload: Any) -> Dict[str, Any]:
    body = {
        "email": f"user-{uuid.uuid4().hex[:8]}@example.com",
        "name": "Test User",
        "password": PASSWORD,
        **payload,
    }
    response = client.post("/api/v1/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(tokens: Dict[str, Any]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {tokens['access_token']}"}


def join(client: TestClient, admin_headers: Dict[str, str], role: str = "user", **payload: Any) -> Dict[str, Any]:
    """Register a user and have the organization admin add them as a member."""
    tokens = register(client, **payload)
    response = client.post(
        "/api/v1/organizations/current/members",
        json={"email": tokens["user"]["email"], "role": role},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return {**tokens, "user": response.json()["data"]}


@pytest.fixture
def admin(client) -> Dict[str, Any]:
    """Founder of a new organization (role admin)."""
    return register(client, name="Ada Admin", organization_name="Acme IT")


@pytest.fixture
def admin_headers(admin) -> Dict[str, str]:
    return bearer(admin)


@pytest.fixture
def organization_id(admin) -> str:
    return admin["user"]["organization_id"]


@pytest.fixture
def member(client, admin_headers) -> Dict[str, Any]:
    """Regular user the admin added to their organization."""
    return join(client, admin_headers, name="Max Member")


@pytest.fixture
def member_headers(member) -> Dict[str, str]:
    return bearer(member)


# ============== Domain Fixtures ==============

@pytest.fixture
def project(client, admin_headers) -> Dict[str, Any]:
    response = client.post(
        "/api/v1/pm/projects",
        json={"key": "OPS", "name": "Operations Platform", "methodology": "scrum"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def team(client, admin_headers, admin) -> Dict[str, Any]:
    response = client.post(
        "/api/v1/teams",
        json={"name": "Service Desk", "leader_id": admin["user"]["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
