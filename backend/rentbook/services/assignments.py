# backend/rentbook/services/assignments.py
from __future__ import annotations

import logging
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..errors import NotFoundOrForbidden, UniquenessViolation, ValidationError
from ..models import Person, PropertyPerson, UnitPerson
from .ownership import must_get_person, must_get_property, must_get_unit

log = logging.getLogger("rentbook.assignments")

Assignment = Union[PropertyPerson, UnitPerson]

ABSENT = "absent"
ACTIVE = "active"
INACTIVE = "inactive"


def assignment_state(row: Optional[Assignment]) -> str:
    if row is None:
        return ABSENT
    return ACTIVE if row.is_active else INACTIVE


def _require(person_id: Optional[int], role: Optional[str]) -> None:
    if not person_id or not (role or "").strip():
        raise ValidationError("Person und Rolle sind erforderlich")


def _assign(db: Session, *, row: Optional[Assignment], make, role: str, label: str) -> tuple[Assignment, bool]:
    """
    One transition over (absent | active | inactive) for a person/target pair.

    absent -> new row, inactive -> same row reactivated with the new role,
    active -> UniquenessViolation.
    """
    state = assignment_state(row)
    if state == ACTIVE:
        raise UniquenessViolation(f"Person ist bereits {label} zugeordnet")

    created = state == ABSENT
    if created:
        row = make()
    row.role = role.strip()
    row.is_active = True

    db.add(row)
    db.commit()
    db.refresh(row)
    return row, created


def _change_role(db: Session, *, row: Optional[Assignment], role: Optional[str]) -> Assignment:
    """active -> active with the new role; anything else is not found."""
    if not (role or "").strip():
        raise ValidationError("Rolle ist erforderlich")
    if assignment_state(row) != ACTIVE:
        raise NotFoundOrForbidden("Zuordnung nicht gefunden")

    row.role = str(role).strip()
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


# -------------------------
# Property-level
# -------------------------
def list_property_people(db: Session, *, user_id: int, property_id: int) -> list[PropertyPerson]:
    must_get_property(db, user_id=user_id, property_id=property_id)
    q = (
        select(PropertyPerson)
        .join(Person, Person.id == PropertyPerson.person_id)
        .where(
            PropertyPerson.property_id == property_id,
            PropertyPerson.is_active.is_(True),
            Person.is_active.is_(True),
        )
        .options(selectinload(PropertyPerson.person))
        .order_by(PropertyPerson.id.asc())
    )
    return list(db.scalars(q).all())


def assign_to_property(
    db: Session, *, user_id: int, property_id: int, person_id: Optional[int], role: Optional[str]
) -> tuple[PropertyPerson, bool]:
    _require(person_id, role)
    prop = must_get_property(db, user_id=user_id, property_id=property_id)
    person = must_get_person(db, user_id=user_id, person_id=int(person_id))

    row = db.scalar(
        select(PropertyPerson).where(
            PropertyPerson.person_id == person.id, PropertyPerson.property_id == prop.id
        )
    )
    prior = assignment_state(row)
    row, created = _assign(
        db,
        row=row,
        make=lambda: PropertyPerson(person_id=person.id, property_id=prop.id),
        role=str(role),
        label="diesem Objekt",
    )
    log.info(
        "assignment.property.assigned",
        extra={"user_id": user_id, "property_id": prop.id, "person_id": person.id, "from_state": prior},
    )
    return row, created


def change_property_role(
    db: Session, *, user_id: int, property_id: int, person_id: int, role: Optional[str]
) -> PropertyPerson:
    must_get_property(db, user_id=user_id, property_id=property_id)
    row = db.scalar(
        select(PropertyPerson).where(
            PropertyPerson.person_id == int(person_id), PropertyPerson.property_id == property_id
        )
    )
    row = _change_role(db, row=row, role=role)
    log.info(
        "assignment.property.role_changed",
        extra={"user_id": user_id, "property_id": property_id, "person_id": int(person_id)},
    )
    return row


def remove_from_property(db: Session, *, user_id: int, property_id: int, person_id: Optional[int]) -> None:
    if not person_id:
        raise ValidationError("Person ist erforderlich")
    must_get_property(db, user_id=user_id, property_id=property_id)

    row = db.scalar(
        select(PropertyPerson).where(
            PropertyPerson.person_id == int(person_id),
            PropertyPerson.property_id == property_id,
            PropertyPerson.is_active.is_(True),
        )
    )
    if row is None:
        raise NotFoundOrForbidden("Zuordnung nicht gefunden")

    row.is_active = False
    db.add(row)
    db.commit()
    log.info(
        "assignment.property.removed",
        extra={"user_id": user_id, "property_id": property_id, "person_id": int(person_id)},
    )


# -------------------------
# Unit-level
# -------------------------
def list_unit_people(db: Session, *, user_id: int, unit_id: int) -> list[UnitPerson]:
    must_get_unit(db, user_id=user_id, unit_id=unit_id)
    q = (
        select(UnitPerson)
        .join(Person, Person.id == UnitPerson.person_id)
        .where(
            UnitPerson.unit_id == unit_id,
            UnitPerson.is_active.is_(True),
            Person.is_active.is_(True),
        )
        .options(selectinload(UnitPerson.person))
        .order_by(UnitPerson.id.asc())
    )
    return list(db.scalars(q).all())


def assign_to_unit(
    db: Session, *, user_id: int, unit_id: int, person_id: Optional[int], role: Optional[str]
) -> tuple[UnitPerson, bool]:
    _require(person_id, role)
    unit = must_get_unit(db, user_id=user_id, unit_id=unit_id)
    person = must_get_person(db, user_id=user_id, person_id=int(person_id))

    row = db.scalar(select(UnitPerson).where(UnitPerson.person_id == person.id, UnitPerson.unit_id == unit.id))
    prior = assignment_state(row)
    row, created = _assign(
        db,
        row=row,
        make=lambda: UnitPerson(person_id=person.id, unit_id=unit.id),
        role=str(role),
        label="dieser Einheit",
    )
    log.info(
        "assignment.unit.assigned",
        extra={"user_id": user_id, "unit_id": unit.id, "person_id": person.id, "from_state": prior},
    )
    return row, created


def change_unit_role(db: Session, *, user_id: int, unit_id: int, person_id: int, role: Optional[str]) -> UnitPerson:
    must_get_unit(db, user_id=user_id, unit_id=unit_id)
    row = db.scalar(select(UnitPerson).where(UnitPerson.person_id == int(person_id), UnitPerson.unit_id == unit_id))
    row = _change_role(db, row=row, role=role)
    log.info(
        "assignment.unit.role_changed",
        extra={"user_id": user_id, "unit_id": unit_id, "person_id": int(person_id)},
    )
    return row


def remove_from_unit(db: Session, *, user_id: int, unit_id: int, person_id: Optional[int]) -> None:
    if not person_id:
        raise ValidationError("Person ist erforderlich")
    must_get_unit(db, user_id=user_id, unit_id=unit_id)

    row = db.scalar(
        select(UnitPerson).where(
            UnitPerson.person_id == int(person_id),
            UnitPerson.unit_id == unit_id,
            UnitPerson.is_active.is_(True),
        )
    )
    if row is None:
        raise NotFoundOrForbidden("Zuordnung nicht gefunden")

    row.is_active = False
    db.add(row)
    db.commit()
    log.info(
        "assignment.unit.removed",
        extra={"user_id": user_id, "unit_id": unit_id, "person_id": int(person_id)},
    )
