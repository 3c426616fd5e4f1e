# backend/tests/test_auth_sessions.py
from __future__ import annotations

import time
import uuid
from datetime import datetime, timedelta

import jwt
from fastapi.testclient import TestClient

from rentbook.config import settings
from rentbook.db import SessionLocal
from rentbook.models import AuthSession

from conftest import register_and_login


def test_login_sets_cookie_and_me_works(app):
    c = TestClient(app)
    user = register_and_login(c, name="Ilse")
    assert settings.session_cookie_name in c.cookies

    me = c.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json() == {"id": user["id"], "name": "Ilse", "email": user["email"]}


def test_bearer_token_is_accepted(app):
    c = TestClient(app)
    register_and_login(c)
    token = c.cookies.get(settings.session_cookie_name)

    fresh = TestClient(app)
    assert fresh.get("/api/auth/me").status_code == 401
    assert fresh.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 200


def test_logout_invalidates_the_session(app):
    c = TestClient(app)
    register_and_login(c)
    token = c.cookies.get(settings.session_cookie_name)

    assert c.post("/api/auth/logout").status_code == 200

    other = TestClient(app)
    r = other.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_wrong_password_and_duplicate_email(app):
    c = TestClient(app)
    email = f"dup-{uuid.uuid4().hex[:8]}@example.org"
    assert c.post("/api/auth/register", json={"name": "A", "email": email, "password": "geheim123"}).status_code == 201
    assert c.post("/api/auth/register", json={"name": "B", "email": email, "password": "geheim123"}).status_code == 400

    r = c.post("/api/auth/login", json={"email": email, "password": "falsch"})
    assert r.status_code == 401
    assert r.json()["error"]


def test_tampered_token_is_rejected(anon_client):
    r = anon_client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_cookie_expiry_is_the_session_ttl_in_utc(app):
    c = TestClient(app)
    register_and_login(c)
    claims = jwt.decode(c.cookies.get(settings.session_cookie_name), settings.session_secret, algorithms=["HS256"])

    expected = time.time() + int(settings.session_ttl_days) * 24 * 3600
    assert abs(claims["exp"] - expected) < 120


def _stale_sessions(user_id: int) -> int:
    db = SessionLocal()
    try:
        return db.query(AuthSession).filter(AuthSession.user_id == user_id, AuthSession.token.like("stale-%")).count()
    finally:
        db.close()


def test_expired_sessions_are_purged_at_login(app):
    c = TestClient(app)
    user = register_and_login(c)

    db = SessionLocal()
    try:
        expired = datetime.utcnow() - timedelta(days=1)
        db.add(AuthSession(token=f"stale-{uuid.uuid4().hex}", user_id=user["id"], expires_at=expired))
        db.commit()
    finally:
        db.close()

    # reads leave session rows alone
    assert c.get("/api/auth/me").status_code == 200
    assert _stale_sessions(user["id"]) == 1

    assert c.post("/api/auth/login", json={"email": user["email"], "password": "geheim123"}).status_code == 200
    assert _stale_sessions(user["id"]) == 0
