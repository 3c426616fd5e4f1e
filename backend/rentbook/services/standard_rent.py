# backend/rentbook/services/standard_rent.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..domain.ledger import effective_amounts, money, month_index, standard_amounts
from ..errors import Conflict, ValidationError
from ..models import Rental, Unit
from .ownership import must_get_unit

log = logging.getLogger("rentbook.standard_rent")


@dataclass(frozen=True)
class AffectedRental:
    month: int
    year: int
    current_amount: float
    new_amount: float


@dataclass(frozen=True)
class StandardRentResult:
    unit: Unit
    updated_rentals: int


def _differs(stored: Optional[float], standard: float) -> bool:
    return stored is not None and money(stored) != standard


def is_customized(rental: Any, unit: Any) -> bool:
    """An explicit portion that does not match the unit's current standard."""
    std_rent, std_util = standard_amounts(unit)
    return _differs(rental.rent_amount, std_rent) or _differs(rental.utilities_amount, std_util)


def _rows_from(db: Session, *, unit_id: int, year: int, month: int) -> list[Rental]:
    start = month_index(year, month)
    rows = db.scalars(
        select(Rental)
        .where(Rental.unit_id == unit_id, Rental.year >= int(year))
        .order_by(Rental.year.asc(), Rental.month.asc())
    ).all()
    return [r for r in rows if month_index(r.year, r.month) >= start]


def update_standard_rent(
    db: Session,
    *,
    user_id: int,
    unit_id: int,
    monthly_rent: Optional[float],
    monthly_utilities: Optional[float],
    effective_from_month: Optional[int],
    effective_from_year: Optional[int],
    force_update: bool = False,
) -> StandardRentResult:
    """
    Change a unit's standard rent/utilities from (year, month) onward.

    Stored months at or after the effective date that carry their own
    amounts block the change with a Conflict listing them, unless
    `force_update` is set, in which case they are overwritten with the new
    standard. Every other stored month keeps its amounts. Nothing is written
    when the change is blocked.
    """
    if monthly_rent is None or float(monthly_rent) <= 0:
        raise ValidationError("Monatliche Miete muss größer als 0 sein")
    if monthly_utilities is not None and float(monthly_utilities) < 0:
        raise ValidationError("Nebenkosten dürfen nicht negativ sein")
    if not effective_from_month or not effective_from_year:
        raise ValidationError("Gültig-ab Monat und Jahr sind erforderlich")
    if int(effective_from_month) < 1 or int(effective_from_month) > 12:
        raise ValidationError("Monat muss zwischen 1 und 12 liegen")

    unit = must_get_unit(db, user_id=user_id, unit_id=unit_id)

    new_rent = money(monthly_rent)
    new_util = money(monthly_utilities) if monthly_utilities is not None else None
    new_total = money(new_rent + money(new_util))

    rows = _rows_from(db, unit_id=unit.id, year=int(effective_from_year), month=int(effective_from_month))
    customized = [r for r in rows if is_customized(r, unit)]

    if customized and not force_update:
        affected = [
            AffectedRental(
                month=int(r.month),
                year=int(r.year),
                current_amount=effective_amounts(r, unit)[2],
                new_amount=new_total,
            )
            for r in customized
        ]
        log.info(
            "standard_rent.conflict",
            extra={"user_id": user_id, "unit_id": unit.id, "affected": len(affected)},
        )
        raise Conflict(
            "Es gibt Monate mit abweichenden Beträgen. Sollen diese überschrieben werden?",
            payload={
                "affectedRentals": [
                    {
                        "month": a.month,
                        "year": a.year,
                        "currentAmount": a.current_amount,
                        "newAmount": a.new_amount,
                    }
                    for a in affected
                ]
            },
        )

    # customized rows only reach this point when forcing
    for r in customized:
        r.rent_amount = new_rent
        r.utilities_amount = money(new_util)
        r.amount = new_total
        db.add(r)

    unit.monthly_rent = new_rent
    unit.monthly_utilities = new_util
    db.add(unit)
    db.commit()
    db.refresh(unit)

    log.info(
        "unit.standard_rent.updated",
        extra={
            "user_id": user_id,
            "unit_id": unit.id,
            "forced": bool(force_update),
            "updated_rentals": len(customized),
        },
    )
    return StandardRentResult(unit=unit, updated_rentals=len(customized))
