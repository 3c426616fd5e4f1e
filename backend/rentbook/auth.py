# backend/rentbook/auth.py
from __future__ import annotations

import base64
import calendar
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

import jwt
from fastapi import Depends, Header, Request
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .errors import Unauthenticated
from .models import AppUser, AuthSession

log = logging.getLogger("rentbook.auth")


@dataclass(frozen=True)
class Principal:
    user_id: int
    email: str
    name: str
    session_token: str


def _now() -> datetime:
    return datetime.utcnow()


# -------------------------
# Password hashing
# -------------------------
def hash_password(password: str) -> str:
    salt = secrets.token_bytes(16)
    iters = int(settings.password_pbkdf2_iters)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iters)
    return f"pbkdf2_sha256${iters}${base64.b64encode(salt).decode()}${base64.b64encode(dk).decode()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        algo, iters_s, salt_b64, dk_b64 = stored.split("$", 3)
    except ValueError:
        return False
    if algo != "pbkdf2_sha256":
        return False
    salt = base64.b64decode(salt_b64.encode())
    dk = base64.b64decode(dk_b64.encode())
    test = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, int(iters_s))
    return hmac.compare_digest(test, dk)


def authenticate_user(db: Session, *, email: str, password: str) -> AppUser | None:
    user = db.scalar(select(AppUser).where(AppUser.email == email.strip().lower()))
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


# -------------------------
# Sessions
# -------------------------
def _encode_cookie(user_id: int, token: str, expires_at: datetime) -> str:
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "sid": token,
        "exp": calendar.timegm(expires_at.utctimetuple()),
    }
    return jwt.encode(payload, settings.session_secret, algorithm="HS256")


def _decode_cookie(value: str) -> dict[str, Any]:
    try:
        return jwt.decode(value, settings.session_secret, algorithms=["HS256"])
    except jwt.PyJWTError:
        raise Unauthenticated("Sitzung ungültig oder abgelaufen")


def _purge_expired(db: Session) -> None:
    db.execute(delete(AuthSession).where(AuthSession.expires_at < _now()))


def create_session(db: Session, user: AppUser) -> tuple[str, datetime]:
    """Persist a server-side session and return the signed cookie value."""
    _purge_expired(db)

    token = secrets.token_urlsafe(32)
    expires_at = _now() + timedelta(days=int(settings.session_ttl_days))
    db.add(AuthSession(token=token, user_id=int(user.id), expires_at=expires_at, created_at=_now()))
    db.commit()
    return _encode_cookie(int(user.id), token, expires_at), expires_at


def destroy_session(db: Session, cookie_value: str | None) -> None:
    if not cookie_value:
        return
    try:
        claims = _decode_cookie(cookie_value)
    except Unauthenticated:
        return
    db.execute(delete(AuthSession).where(AuthSession.token == str(claims.get("sid") or "")))
    db.commit()


def resolve_session(db: Session, cookie_value: str) -> Principal:
    claims = _decode_cookie(cookie_value)
    sid = str(claims.get("sid") or "")
    if not sid:
        raise Unauthenticated("Sitzung ungültig oder abgelaufen")

    row = db.scalar(select(AuthSession).where(AuthSession.token == sid))
    if row is None or row.expires_at < _now():
        raise Unauthenticated("Sitzung ungültig oder abgelaufen")

    user = db.get(AppUser, row.user_id)
    if user is None or str(user.id) != str(claims.get("sub")):
        raise Unauthenticated("Sitzung ungültig oder abgelaufen")

    return Principal(user_id=int(user.id), email=str(user.email), name=str(user.name), session_token=sid)


def get_principal(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """
    Session cookie first, then `Authorization: Bearer <token>` (same signed value).
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token and authorization and str(authorization).lower().startswith("bearer "):
        token = str(authorization).split(" ", 1)[1].strip()

    if not token:
        raise Unauthenticated()

    p = resolve_session(db, token)
    request.state.user_id = p.user_id
    return p
