# backend/rentbook/services/ownership.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..errors import NotFoundOrForbidden
from ..models import Property, Unit, Rental, Person


def must_get_property(db: Session, *, user_id: int, property_id: int, with_units: bool = False) -> Property:
    stmt = select(Property).where(Property.id == property_id, Property.user_id == user_id)
    if with_units:
        stmt = stmt.options(selectinload(Property.units))
    row = db.scalar(stmt)
    if not row:
        raise NotFoundOrForbidden("Objekt nicht gefunden oder Zugriff verweigert")
    return row


def must_get_unit(db: Session, *, user_id: int, unit_id: int) -> Unit:
    row = db.scalar(
        select(Unit)
        .join(Property, Property.id == Unit.property_id)
        .where(Unit.id == unit_id, Property.user_id == user_id)
    )
    if not row:
        raise NotFoundOrForbidden("Einheit nicht gefunden oder Zugriff verweigert")
    return row


def must_get_rental(db: Session, *, user_id: int, rental_id: int) -> Rental:
    row = db.scalar(
        select(Rental)
        .join(Unit, Unit.id == Rental.unit_id)
        .join(Property, Property.id == Unit.property_id)
        .where(Rental.id == rental_id, Property.user_id == user_id)
    )
    if not row:
        raise NotFoundOrForbidden("Mieteinnahme nicht gefunden oder Zugriff verweigert")
    return row


def must_get_person(db: Session, *, user_id: int, person_id: int) -> Person:
    row = db.scalar(
        select(Person).where(Person.id == person_id, Person.user_id == user_id, Person.is_active.is_(True))
    )
    if not row:
        raise NotFoundOrForbidden("Person nicht gefunden")
    return row
