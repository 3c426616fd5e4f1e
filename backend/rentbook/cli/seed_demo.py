# backend/rentbook/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from rentbook.auth import hash_password
from rentbook.db import SessionLocal, init_db
from rentbook.models import AppUser, Person, Property, PropertyPerson, Unit, UnitPerson


@dataclass(frozen=True)
class SeedResult:
    user_email: str
    property_id: Optional[int]
    unit_ids: list[int]
    person_ids: list[int]


def _get_or_create_user(db: Session, email: str, name: str, password: str) -> AppUser:
    row = db.query(AppUser).filter(AppUser.email == email).one_or_none()
    if row:
        return row
    row = AppUser(email=email, name=name, password_hash=hash_password(password))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get_or_create_person(db: Session, user_id: int, first_name: str, last_name: str, **kw) -> Person:
    row = (
        db.query(Person)
        .filter(Person.user_id == user_id, Person.first_name == first_name, Person.last_name == last_name)
        .one_or_none()
    )
    if row:
        return row
    row = Person(user_id=user_id, first_name=first_name, last_name=last_name, **kw)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def seed_demo(
    *,
    user_email: str = "demo@rentbook.local",
    user_name: str = "Demo",
    password: str = "demo1234",
    create_sample_property: bool = True,
) -> SeedResult:
    init_db()
    db = SessionLocal()
    try:
        user = _get_or_create_user(db, user_email.strip().lower(), user_name, password)

        property_id: Optional[int] = None
        unit_ids: list[int] = []
        person_ids: list[int] = []

        if create_sample_property:
            prop = db.query(Property).filter(Property.user_id == user.id).first()
            if not prop:
                prop = Property(user_id=user.id, name="Musterhaus", address="Musterstraße 1, 12345 Musterstadt")
                prop.units.append(Unit(name="Wohnung EG", type="apartment", monthly_rent=750.0, monthly_utilities=150.0, size="65m²"))
                prop.units.append(Unit(name="Wohnung OG", type="apartment", monthly_rent=820.0, monthly_utilities=170.0, size="72m²"))
                prop.units.append(Unit(name="Garage", type="garage", monthly_rent=60.0))
                db.add(prop)
                db.commit()
                db.refresh(prop)

                tenant = _get_or_create_person(db, user.id, "Erika", "Mustermann", email="erika@example.org")
                caretaker = _get_or_create_person(db, user.id, "Max", "Hausmann", phone="0123 456789")
                db.add(UnitPerson(person_id=tenant.id, unit_id=prop.units[0].id, role="tenant"))
                db.add(PropertyPerson(person_id=caretaker.id, property_id=prop.id, role="hausmeister"))
                db.commit()

            property_id = int(prop.id)
            unit_ids = [int(u.id) for u in prop.units]
            person_ids = [int(p.id) for p in db.query(Person).filter(Person.user_id == user.id).all()]

        return SeedResult(user_email=user.email, property_id=property_id, unit_ids=unit_ids, person_ids=person_ids)
    finally:
        db.close()
