# backend/rentbook/routers/units.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..errors import ValidationError
from ..models import UNIT_TYPES, Property, Unit
from ..schemas import (
    AssignmentCreate,
    AssignmentRemove,
    AssignmentRoleUpdate,
    MessageOut,
    MonthEntryUpsert,
    RentalWriteOut,
    StandardRentOut,
    StandardRentUpdate,
    UnitCreate,
    UnitOut,
    UnitPersonOut,
    UnitUpdate,
    YearlyOverviewOut,
)
from ..services import assignments, ledger_service
from ..services.ownership import must_get_property, must_get_unit
from ..services.standard_rent import update_standard_rent

router = APIRouter(prefix="/units", tags=["units"])

log = logging.getLogger("rentbook.units")


def _check_type(t: str) -> str:
    t = (t or "").strip()
    if t not in UNIT_TYPES:
        raise ValidationError(f"Ungültiger Einheitentyp: {t}")
    return t


# -------------------------
# CRUD
# -------------------------
@router.get("", response_model=List[UnitOut])
def list_units(
    property_id: Optional[int] = Query(default=None, alias="propertyId"),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    q = select(Unit).join(Property, Property.id == Unit.property_id).where(Property.user_id == p.user_id)
    if property_id is not None:
        must_get_property(db, user_id=p.user_id, property_id=property_id)
        q = q.where(Unit.property_id == property_id)
    return list(db.scalars(q.order_by(Unit.property_id, Unit.id)).all())


@router.post("", response_model=UnitOut, status_code=201)
def create_unit(payload: UnitCreate, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    prop = must_get_property(db, user_id=p.user_id, property_id=payload.property_id)
    row = Unit(
        property_id=prop.id,
        name=payload.name.strip(),
        type=_check_type(payload.type),
        monthly_rent=float(payload.monthly_rent),
        monthly_utilities=payload.monthly_utilities,
        size=payload.size,
        description=payload.description,
    )
    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("unit.created", extra={"user_id": p.user_id, "property_id": prop.id, "unit_id": row.id})
    return row


@router.get("/{unit_id}", response_model=UnitOut)
def get_unit(unit_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return must_get_unit(db, user_id=p.user_id, unit_id=unit_id)


@router.put("/{unit_id}", response_model=UnitOut)
def update_unit(
    unit_id: int,
    payload: UnitUpdate,  # full update
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row = must_get_unit(db, user_id=p.user_id, unit_id=unit_id)
    data = payload.model_dump()
    data["type"] = _check_type(data["type"])
    for k, v in data.items():
        setattr(row, k, v)

    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{unit_id}", response_model=MessageOut)
def delete_unit(unit_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    row = must_get_unit(db, user_id=p.user_id, unit_id=unit_id)
    db.delete(row)
    db.commit()

    log.info("unit.deleted", extra={"user_id": p.user_id, "unit_id": unit_id})
    return {"message": "Einheit erfolgreich gelöscht"}


# -------------------------
# Ledger
# -------------------------
@router.get("/{unit_id}/yearly-overview", response_model=YearlyOverviewOut)
def yearly_overview(
    unit_id: int,
    year: Optional[int] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    ov = ledger_service.get_yearly_overview(db, user_id=p.user_id, unit_id=unit_id, year=year)
    return {"unit": ov.unit, "yearly_overview": ov.entries, "year": ov.year}


@router.post("/{unit_id}/yearly-overview", response_model=RentalWriteOut)
def upsert_month(
    unit_id: int,
    payload: MonthEntryUpsert,
    response: Response,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row, created = ledger_service.upsert_month_entry(
        db,
        user_id=p.user_id,
        unit_id=unit_id,
        month=payload.month,
        year=payload.year,
        is_paid=payload.is_paid,
        notes=payload.notes,
        rent_amount=payload.rent_amount,
        utilities_amount=payload.utilities_amount,
    )
    response.status_code = 201 if created else 200
    msg = "Mieteinnahme erfolgreich erstellt" if created else "Mieteinnahme erfolgreich aktualisiert"
    return {"message": msg, "rental": row}


@router.put("/{unit_id}/standard-rent", response_model=StandardRentOut)
def standard_rent(
    unit_id: int,
    payload: StandardRentUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    res = update_standard_rent(
        db,
        user_id=p.user_id,
        unit_id=unit_id,
        monthly_rent=payload.monthly_rent,
        monthly_utilities=payload.monthly_utilities,
        effective_from_month=payload.effective_from_month,
        effective_from_year=payload.effective_from_year,
        force_update=payload.force_update,
    )
    return {
        "message": "Standardmiete erfolgreich aktualisiert",
        "unit": res.unit,
        "updated_rentals": res.updated_rentals,
    }


# -------------------------
# People on the unit
# -------------------------
@router.get("/{unit_id}/people", response_model=List[UnitPersonOut])
def list_people(unit_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return assignments.list_unit_people(db, user_id=p.user_id, unit_id=unit_id)


@router.post("/{unit_id}/people", response_model=UnitPersonOut, status_code=201)
def assign_person(
    unit_id: int,
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row, _created = assignments.assign_to_unit(
        db, user_id=p.user_id, unit_id=unit_id, person_id=payload.person_id, role=payload.role
    )
    return row


@router.put("/{unit_id}/people/{person_id}", response_model=UnitPersonOut)
def change_role(
    unit_id: int,
    person_id: int,
    payload: AssignmentRoleUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return assignments.change_unit_role(db, user_id=p.user_id, unit_id=unit_id, person_id=person_id, role=payload.role)


@router.delete("/{unit_id}/people", response_model=MessageOut)
def remove_person(
    unit_id: int,
    payload: Optional[AssignmentRemove] = None,
    person_id: Optional[int] = Query(default=None, alias="personId"),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    pid = payload.person_id if payload and payload.person_id else person_id
    assignments.remove_from_unit(db, user_id=p.user_id, unit_id=unit_id, person_id=pid)
    return {"message": "Person erfolgreich von der Einheit entfernt"}
