# backend/rentbook/routers/properties.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import Principal, get_principal
from ..db import get_db
from ..errors import ValidationError
from ..models import Property, Unit
from ..schemas import (
    AssignmentCreate,
    AssignmentRemove,
    AssignmentRoleUpdate,
    EvaluationOut,
    InvestmentComparisonOut,
    MessageOut,
    PropertyCreate,
    PropertyOut,
    PropertyPersonOut,
    PropertyRentalsOverviewOut,
    PropertyUpdate,
    PropertyWriteOut,
    SettingsOut,
    SettingsUpdate,
    SettingsWriteOut,
)
from ..services import assignments, ledger_service, settings_service
from ..services.ownership import must_get_property

router = APIRouter(prefix="/properties", tags=["properties"])

log = logging.getLogger("rentbook.properties")

SIMPLE_MODE_UNIT_NAME = "Hauptobjekt"


# -------------------------
# CRUD
# -------------------------
@router.get("", response_model=List[PropertyOut])
def list_properties(db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    q = (
        select(Property)
        .where(Property.user_id == p.user_id)
        .options(selectinload(Property.units))
        .order_by(Property.created_at.desc(), Property.id.desc())
    )
    return list(db.scalars(q).all())


@router.post("", response_model=PropertyWriteOut, status_code=201)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    if payload.is_simple_mode and (payload.monthly_rent is None or payload.monthly_rent <= 0):
        raise ValidationError("Im einfachen Modus ist eine monatliche Miete größer als 0 erforderlich")

    row = Property(
        user_id=p.user_id,
        name=payload.name.strip(),
        address=payload.address.strip(),
        description=payload.description,
    )
    if payload.is_simple_mode:
        row.units.append(Unit(name=SIMPLE_MODE_UNIT_NAME, type="apartment", monthly_rent=float(payload.monthly_rent)))

    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("property.created", extra={"user_id": p.user_id, "property_id": row.id})
    return {"message": "Objekt erfolgreich erstellt", "property": row}


@router.get("/{property_id}", response_model=PropertyOut)
def get_property(property_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return must_get_property(db, user_id=p.user_id, property_id=property_id, with_units=True)


@router.put("/{property_id}", response_model=PropertyWriteOut)
def update_property(
    property_id: int,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row = must_get_property(db, user_id=p.user_id, property_id=property_id, with_units=True)
    row.name = payload.name.strip()
    row.address = payload.address.strip()
    row.description = payload.description
    row.is_active = bool(payload.is_active)

    db.add(row)
    db.commit()
    db.refresh(row)
    return {"message": "Objekt erfolgreich aktualisiert", "property": row}


@router.delete("/{property_id}", response_model=MessageOut)
def delete_property(property_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    row = must_get_property(db, user_id=p.user_id, property_id=property_id)
    db.delete(row)
    db.commit()

    log.info("property.deleted", extra={"user_id": p.user_id, "property_id": property_id})
    return {"message": "Objekt erfolgreich gelöscht"}


# -------------------------
# Ledger / valuation views
# -------------------------
@router.get("/{property_id}/rentals-overview", response_model=PropertyRentalsOverviewOut)
def rentals_overview(
    property_id: int,
    year: Optional[int] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    ov = ledger_service.get_property_rentals_overview(db, user_id=p.user_id, property_id=property_id, year=year)
    return {
        "property_id": ov.property.id,
        "property_name": ov.property.name,
        "units_overview": [
            {"unit": u.unit, "monthly_overview": u.entries, "totals": u.totals} for u in ov.units
        ],
        "property_totals": ov.totals,
        "year": ov.year,
    }


@router.get("/{property_id}/evaluation", response_model=EvaluationOut)
def evaluation(
    property_id: int,
    gross_rent_multiplier: Optional[float] = Query(default=None, alias="grossRentMultiplier", gt=0),
    operating_expense_ratio: Optional[float] = Query(default=None, alias="operatingExpenseRatio", ge=0, le=100),
    value_adjustment: Optional[float] = Query(default=None, alias="valueAdjustment", ge=-100),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    ev = settings_service.evaluate(
        db,
        user_id=p.user_id,
        property_id=property_id,
        gross_rent_multiplier=gross_rent_multiplier,
        operating_expense_ratio=operating_expense_ratio,
        value_adjustment=value_adjustment,
    )
    return {
        "property_id": property_id,
        "total_monthly_rent": ev.total_monthly_rent,
        "total_yearly_rent": ev.total_yearly_rent,
        "net_operating_income": ev.net_operating_income,
        "estimated_value": ev.estimated_value,
        "adjusted_value": ev.adjusted_value,
        "cap_rate": ev.implied_cap_rate,
        "value_range": list(ev.value_range) if ev.value_range else None,
        "evaluation_possible": ev.evaluation_possible,
        "gross_rent_multiplier": ev.gross_rent_multiplier,
        "operating_expense_ratio": ev.operating_expense_ratio,
        "value_adjustment": ev.value_adjustment,
    }


@router.get("/{property_id}/settings", response_model=SettingsOut)
def get_settings(property_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return settings_service.get_settings(db, user_id=p.user_id, property_id=property_id)


@router.post("/{property_id}/settings", response_model=SettingsWriteOut)
def save_settings(
    property_id: int,
    payload: SettingsUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    saved = settings_service.upsert_settings(
        db, user_id=p.user_id, property_id=property_id, changes=payload.model_dump(exclude_none=True)
    )
    return {"message": "Einstellungen gespeichert", "settings": saved}


@router.get("/{property_id}/investment-comparison", response_model=InvestmentComparisonOut)
def investment_comparison(
    property_id: int,
    property_value: Optional[float] = Query(default=None, alias="propertyValue"),
    annual_rent: Optional[float] = Query(default=None, alias="annualRent"),
    annual_expenses: Optional[float] = Query(default=None, alias="annualExpenses"),
    property_appreciation: Optional[float] = Query(default=None, alias="propertyAppreciation"),
    etf_return: Optional[float] = Query(default=None, alias="etfReturn"),
    years: Optional[int] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    c = settings_service.investment_comparison(
        db,
        user_id=p.user_id,
        property_id=property_id,
        property_value=property_value,
        annual_rent=annual_rent,
        annual_expenses=annual_expenses,
        property_appreciation=property_appreciation,
        etf_return=etf_return,
        years=years,
    )
    return {
        "property_id": property_id,
        "property_value": c.property_value,
        "annual_rent": c.annual_rent,
        "annual_expenses": c.annual_expenses,
        "annual_net_income": c.annual_net_income,
        "property_appreciation": round(c.appreciation_rate * 100.0, 4),
        "etf_return": round(c.etf_rate * 100.0, 4),
        "years": c.years,
        "property_scenario": c.property_scenario,
        "etf_scenario": c.etf_scenario,
        "difference": c.difference,
        "better": c.better,
    }


# -------------------------
# People on the property
# -------------------------
@router.get("/{property_id}/people", response_model=List[PropertyPersonOut])
def list_people(property_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return assignments.list_property_people(db, user_id=p.user_id, property_id=property_id)


@router.post("/{property_id}/people", response_model=PropertyPersonOut, status_code=201)
def assign_person(
    property_id: int,
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row, _created = assignments.assign_to_property(
        db, user_id=p.user_id, property_id=property_id, person_id=payload.person_id, role=payload.role
    )
    return row


@router.put("/{property_id}/people/{person_id}", response_model=PropertyPersonOut)
def change_role(
    property_id: int,
    person_id: int,
    payload: AssignmentRoleUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return assignments.change_property_role(
        db, user_id=p.user_id, property_id=property_id, person_id=person_id, role=payload.role
    )


@router.delete("/{property_id}/people", response_model=MessageOut)
def remove_person(
    property_id: int,
    payload: Optional[AssignmentRemove] = None,
    person_id: Optional[int] = Query(default=None, alias="personId"),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    pid = payload.person_id if payload and payload.person_id else person_id
    assignments.remove_from_property(db, user_id=p.user_id, property_id=property_id, person_id=pid)
    return {"message": "Person erfolgreich vom Objekt entfernt"}
