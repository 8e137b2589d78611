"""
Shared pytest fixtures for backend tests.

Environment is set BEFORE backend modules are imported so the module-level
app in backend.main never touches a developer database.
"""

import os
import tempfile

os.environ.setdefault("DATABASE_PATH", os.path.join(tempfile.mkdtemp(), "test_sector_intel.db"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from backend.main import build_storage, create_app
from backend.models import ProjectCreate
from backend.schemas_auth import RegisterRequest


def make_project(**overrides) -> ProjectCreate:
    data = {
        "name": "Test Project",
        "country": "United Arab Emirates",
        "city": "Dubai",
        "district": "Business Bay",
        "sector": "Real Estate",
        "project_type": "Commercial",
        "status": "Planning",
        "investment": 50,
    }
    data.update(overrides)
    return ProjectCreate(**data)


def make_register_request(**overrides) -> RegisterRequest:
    data = {
        "email": "a@example.com",
        "first_name": "Amal",
        "last_name": "Haddad",
        "password": "correct-horse-1",
        "confirm_password": "correct-horse-1",
        "selected_role": "investor",
    }
    data.update(overrides)
    return RegisterRequest(**data)


@pytest.fixture
def project_factory():
    return make_project


@pytest.fixture
def register_request_factory():
    return make_register_request


@pytest.fixture
def storage(tmp_path):
    """Seeded storage backed by a fresh SQLite file per test."""
    return build_storage(str(tmp_path / "identity.db"))


@pytest.fixture
def client(storage):
    return TestClient(create_app(storage))


@pytest.fixture
def registered_client(client):
    """Client holding a session cookie for a freshly registered investor."""
    resp = client.post(
        "/api/auth/register",
        json={
            "email": "investor@example.com",
            "firstName": "Omar",
            "lastName": "Saleh",
            "password": "s3cure-pass",
            "confirmPassword": "s3cure-pass",
            "selectedRole": "investor",
        },
    )
    assert resp.status_code == 201, resp.text
    return client
