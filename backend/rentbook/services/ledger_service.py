# backend/rentbook/services/ledger_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..domain.ledger import (
    LedgerTotals,
    MonthEntry,
    build_yearly_overview,
    ledger_totals,
    resolve_write_amounts,
    sum_totals,
)
from ..errors import UniquenessViolation, ValidationError
from ..models import Property, Rental, Unit
from .ownership import must_get_property, must_get_rental, must_get_unit

log = logging.getLogger("rentbook.ledger")


def current_year() -> int:
    return datetime.now().year


@dataclass(frozen=True)
class YearlyOverview:
    unit: Unit
    entries: list[MonthEntry]
    year: int


@dataclass(frozen=True)
class UnitLedger:
    unit: Unit
    entries: list[MonthEntry]
    totals: LedgerTotals


@dataclass(frozen=True)
class PropertyRentalsOverview:
    property: Property
    units: list[UnitLedger]
    totals: LedgerTotals
    year: int


def _rentals_for_year(db: Session, *, unit_id: int, year: int) -> list[Rental]:
    q = select(Rental).where(Rental.unit_id == unit_id, Rental.year == year).order_by(Rental.month.asc())
    return list(db.scalars(q).all())


def get_yearly_overview(db: Session, *, user_id: int, unit_id: int, year: Optional[int] = None) -> YearlyOverview:
    y = int(year) if year is not None else current_year()
    unit = must_get_unit(db, user_id=user_id, unit_id=unit_id)
    rentals = _rentals_for_year(db, unit_id=unit.id, year=y)
    return YearlyOverview(unit=unit, entries=build_yearly_overview(unit, rentals, y), year=y)


def get_rental(db: Session, *, unit_id: int, month: int, year: int) -> Rental | None:
    return db.scalar(
        select(Rental).where(Rental.unit_id == unit_id, Rental.month == month, Rental.year == year)
    )


def upsert_month_entry(
    db: Session,
    *,
    user_id: int,
    unit_id: int,
    month: Optional[int],
    year: Optional[int],
    is_paid: Optional[bool] = None,
    notes: Optional[str] = None,
    rent_amount: Optional[float] = None,
    utilities_amount: Optional[float] = None,
) -> tuple[Rental, bool]:
    """
    Create or update the single row for (unit, month, year).

    Omitted amounts resolve to the unit's current standard; the stored total
    is always rent + utilities. `is_paid` / `notes` left as None keep the
    stored value on update. Returns (row, created).
    """
    if not month or not year:
        raise ValidationError("Monat und Jahr sind erforderlich")
    if int(month) < 1 or int(month) > 12:
        raise ValidationError("Monat muss zwischen 1 und 12 liegen")
    for label, v in (("Miete", rent_amount), ("Nebenkosten", utilities_amount)):
        if v is not None and float(v) < 0:
            raise ValidationError(f"{label} darf nicht negativ sein")

    unit = must_get_unit(db, user_id=user_id, unit_id=unit_id)
    rent, utilities, total = resolve_write_amounts(unit, rent_amount=rent_amount, utilities_amount=utilities_amount)

    row = get_rental(db, unit_id=unit.id, month=int(month), year=int(year))
    created = row is None

    if row is None:
        row = Rental(
            unit_id=unit.id,
            month=int(month),
            year=int(year),
            rent_amount=rent,
            utilities_amount=utilities,
            amount=total,
            is_paid=bool(is_paid) if is_paid is not None else False,
            notes=notes if notes is not None else "",
        )
    else:
        row.rent_amount = rent
        row.utilities_amount = utilities
        row.amount = total
        if is_paid is not None:
            row.is_paid = bool(is_paid)
        if notes is not None:
            row.notes = notes

    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UniquenessViolation("Mieteinnahme für diesen Monat/Jahr existiert bereits")
    db.refresh(row)

    log.info(
        "rental.upsert",
        extra={"user_id": user_id, "unit_id": unit.id, "rental_id": row.id, "new_row": created},
    )
    return row, created


def get_property_rentals_overview(
    db: Session, *, user_id: int, property_id: int, year: Optional[int] = None
) -> PropertyRentalsOverview:
    y = int(year) if year is not None else current_year()

    # one read for the whole graph: property -> units -> rentals of the year
    must_get_property(db, user_id=user_id, property_id=property_id)
    prop = db.scalar(
        select(Property)
        .where(Property.id == property_id)
        .options(selectinload(Property.units).selectinload(Unit.rentals.and_(Rental.year == y)))
        .execution_options(populate_existing=True)
    )

    ledgers: list[UnitLedger] = []
    for unit in prop.units:
        entries = build_yearly_overview(unit, unit.rentals, y)
        ledgers.append(UnitLedger(unit=unit, entries=entries, totals=ledger_totals(entries)))

    return PropertyRentalsOverview(
        property=prop,
        units=ledgers,
        totals=sum_totals(x.totals for x in ledgers),
        year=y,
    )


# -------------------------
# Plain rental rows (/rentals)
# -------------------------
def rental_write_amounts(
    unit: Unit,
    *,
    amount: Optional[float] = None,
    rent_amount: Optional[float] = None,
    utilities_amount: Optional[float] = None,
) -> tuple[float, float, float]:
    """
    A bare `amount` is booked entirely as rent (utilities 0) so the stored
    portions still add up to the total; explicit portions win over it.
    """
    if rent_amount is None and utilities_amount is None and amount is not None:
        return resolve_write_amounts(unit, rent_amount=amount, utilities_amount=0.0)
    return resolve_write_amounts(unit, rent_amount=rent_amount, utilities_amount=utilities_amount)


def list_rentals(db: Session, *, user_id: int, unit_id: Optional[int] = None) -> list[Rental]:
    q = (
        select(Rental)
        .join(Unit, Unit.id == Rental.unit_id)
        .join(Property, Property.id == Unit.property_id)
        .where(Property.user_id == user_id)
    )
    if unit_id is not None:
        must_get_unit(db, user_id=user_id, unit_id=unit_id)
        q = q.where(Rental.unit_id == unit_id)
    q = q.order_by(Rental.year.desc(), Rental.month.desc(), Rental.id.desc())
    return list(db.scalars(q).all())


def create_rental(
    db: Session,
    *,
    user_id: int,
    unit_id: int,
    month: int,
    year: int,
    amount: Optional[float] = None,
    rent_amount: Optional[float] = None,
    utilities_amount: Optional[float] = None,
    is_paid: bool = False,
    notes: Optional[str] = None,
) -> Rental:
    unit = must_get_unit(db, user_id=user_id, unit_id=unit_id)
    if get_rental(db, unit_id=unit.id, month=int(month), year=int(year)) is not None:
        raise UniquenessViolation("Mieteinnahme für diesen Monat/Jahr existiert bereits")

    rent, utilities, total = rental_write_amounts(
        unit, amount=amount, rent_amount=rent_amount, utilities_amount=utilities_amount
    )
    row = Rental(
        unit_id=unit.id,
        month=int(month),
        year=int(year),
        rent_amount=rent,
        utilities_amount=utilities,
        amount=total,
        is_paid=bool(is_paid),
        notes=notes or "",
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UniquenessViolation("Mieteinnahme für diesen Monat/Jahr existiert bereits")
    db.refresh(row)

    log.info("rental.created", extra={"user_id": user_id, "unit_id": unit.id, "rental_id": row.id})
    return row


def update_rental(
    db: Session,
    *,
    user_id: int,
    rental_id: int,
    month: int,
    year: int,
    amount: Optional[float] = None,
    rent_amount: Optional[float] = None,
    utilities_amount: Optional[float] = None,
    is_paid: Optional[bool] = None,
    notes: Optional[str] = None,
) -> Rental:
    row = must_get_rental(db, user_id=user_id, rental_id=rental_id)

    clash = get_rental(db, unit_id=row.unit_id, month=int(month), year=int(year))
    if clash is not None and clash.id != row.id:
        raise UniquenessViolation("Mieteinnahme für diesen Monat/Jahr existiert bereits")

    row.month = int(month)
    row.year = int(year)
    if amount is not None or rent_amount is not None or utilities_amount is not None:
        row.rent_amount, row.utilities_amount, row.amount = rental_write_amounts(
            row.unit, amount=amount, rent_amount=rent_amount, utilities_amount=utilities_amount
        )
    if is_paid is not None:
        row.is_paid = bool(is_paid)
    if notes is not None:
        row.notes = notes

    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UniquenessViolation("Mieteinnahme für diesen Monat/Jahr existiert bereits")
    db.refresh(row)

    log.info("rental.updated", extra={"user_id": user_id, "unit_id": row.unit_id, "rental_id": row.id})
    return row
