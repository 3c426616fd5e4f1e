# backend/rentbook/routers/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..auth import Principal, authenticate_user, create_session, destroy_session, get_principal, hash_password
from ..config import settings
from ..db import get_db
from ..errors import Unauthenticated, UniquenessViolation
from ..models import AppUser
from ..schemas import AuthOut, LoginIn, MessageOut, RegisterIn, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])

log = logging.getLogger("rentbook.auth")


def _set_session_cookie(response: Response, value: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        value,
        httponly=True,
        secure=bool(settings.session_cookie_secure),
        samesite=str(settings.session_cookie_samesite),
        max_age=int(settings.session_ttl_days) * 24 * 3600,
        path="/",
    )


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    if db.scalar(select(AppUser).where(AppUser.email == email)):
        raise UniquenessViolation("Ein Benutzer mit dieser E-Mail existiert bereits")

    u = AppUser(email=email, name=payload.name.strip(), password_hash=hash_password(payload.password))
    db.add(u)
    db.commit()
    db.refresh(u)

    log.info("user.registered", extra={"user_id": u.id})
    return {"message": "Registrierung erfolgreich", "user": u}


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    user = authenticate_user(db, email=payload.email, password=payload.password)
    if user is None:
        raise Unauthenticated("Ungültige E-Mail oder Passwort")

    cookie_value, _expires_at = create_session(db, user)
    _set_session_cookie(response, cookie_value)

    log.info("user.login", extra={"user_id": user.id})
    return {"message": "Anmeldung erfolgreich", "user": user}


@router.post("/logout", response_model=MessageOut)
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    destroy_session(db, request.cookies.get(settings.session_cookie_name))
    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"message": "Abmeldung erfolgreich"}


@router.get("/me", response_model=UserOut)
def me(p: Principal = Depends(get_principal)):
    return {"id": p.user_id, "name": p.name, "email": p.email}
