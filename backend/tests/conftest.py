# backend/tests/conftest.py
from __future__ import annotations

import os
import tempfile
import uuid

import pytest

# must be set before rentbook.config is imported anywhere
_DB_DIR = tempfile.mkdtemp(prefix="rentbook-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("PASSWORD_PBKDF2_ITERS", "1000")

from fastapi.testclient import TestClient  # noqa: E402

from rentbook.db import init_db  # noqa: E402
from rentbook.main import create_app  # noqa: E402

init_db()


def register_and_login(client: TestClient, *, name: str = "Vermieter", password: str = "geheim123") -> dict:
    email = f"user-{uuid.uuid4().hex[:10]}@example.org"
    r = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert r.status_code == 201, r.text
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["user"]


@pytest.fixture()
def app():
    return create_app()


@pytest.fixture()
def anon_client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def client(app) -> TestClient:
    c = TestClient(app)
    register_and_login(c)
    return c


@pytest.fixture()
def other_client(app) -> TestClient:
    c = TestClient(app)
    register_and_login(c, name="Andere")
    return c


def mk_property(client: TestClient, name: str = "Haus am See", **extra) -> dict:
    r = client.post("/api/properties", json={"name": name, "address": "Seestraße 1", **extra})
    assert r.status_code == 201, r.text
    return r.json()["property"]


def mk_unit(client: TestClient, property_id: int, rent: float = 800.0, utilities=200.0, **extra) -> dict:
    body = {"propertyId": property_id, "name": "Wohnung 1", "monthlyRent": rent, **extra}
    if utilities is not None:
        body["monthlyUtilities"] = utilities
    r = client.post("/api/units", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def mk_person(client: TestClient, first: str = "Erika", last: str = "Mustermann", **extra) -> dict:
    r = client.post("/api/people", json={"firstName": first, "lastName": last, **extra})
    assert r.status_code == 201, r.text
    return r.json()
