# backend/rentbook/routers/people.py
from __future__ import annotations

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from ..auth import Principal, get_principal
from ..db import get_db
from ..models import Person, PropertyPerson, UnitPerson
from ..schemas import (
    MessageOut,
    PeoplePageOut,
    PersonCreate,
    PersonDetailOut,
    PersonOut,
    PropertyRoleOut,
    UnitRoleOut,
)
from ..services.ownership import must_get_person

router = APIRouter(prefix="/people", tags=["people"])

log = logging.getLogger("rentbook.people")


def _detail(person: Person) -> PersonDetailOut:
    """Person plus the assignments that are still active."""
    return PersonDetailOut(
        **PersonOut.model_validate(person).model_dump(),
        property_roles=[PropertyRoleOut.model_validate(r) for r in person.property_roles if r.is_active],
        unit_roles=[UnitRoleOut.model_validate(r) for r in person.unit_roles if r.is_active],
    )


def _with_roles():
    return (
        selectinload(Person.property_roles).selectinload(PropertyPerson.property),
        selectinload(Person.unit_roles).selectinload(UnitPerson.unit),
    )


@router.get("", response_model=PeoplePageOut)
def list_people(
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=200),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    where = [Person.user_id == p.user_id, Person.is_active.is_(True)]
    s = (search or "").strip()
    if s:
        like = f"%{s}%"
        where.append(
            or_(
                Person.first_name.ilike(like),
                Person.last_name.ilike(like),
                Person.email.ilike(like),
                Person.phone.ilike(like),
            )
        )

    total = int(db.scalar(select(func.count(Person.id)).where(*where)) or 0)
    rows = db.scalars(
        select(Person)
        .where(*where)
        .options(*_with_roles())
        .order_by(Person.last_name.asc(), Person.first_name.asc(), Person.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    return {
        "people": [_detail(r) for r in rows],
        "pagination": {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)},
    }


@router.post("", response_model=PersonOut, status_code=201)
def create_person(payload: PersonCreate, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    row = Person(**payload.model_dump(), user_id=p.user_id)
    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("person.created", extra={"user_id": p.user_id, "person_id": row.id})
    return row


@router.get("/{person_id}", response_model=PersonDetailOut)
def get_person(person_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return _detail(must_get_person(db, user_id=p.user_id, person_id=person_id))


@router.put("/{person_id}", response_model=PersonOut)
def update_person(
    person_id: int,
    payload: PersonCreate,  # full update
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row = must_get_person(db, user_id=p.user_id, person_id=person_id)
    for k, v in payload.model_dump().items():
        setattr(row, k, v)

    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{person_id}", response_model=MessageOut)
def delete_person(person_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    row = must_get_person(db, user_id=p.user_id, person_id=person_id)
    row.is_active = False
    db.add(row)
    db.commit()

    log.info("person.deactivated", extra={"user_id": p.user_id, "person_id": person_id})
    return {"message": "Person erfolgreich gelöscht"}
