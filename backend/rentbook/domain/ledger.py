# backend/rentbook/domain/ledger.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional


MONTHS = tuple(range(1, 13))

_SIZE_RE = re.compile(r"(\d+(?:[.,]\d+)?)")


def money(x: Any) -> float:
    return round(float(x or 0.0), 2)


def month_index(year: int, month: int) -> int:
    """Linear month counter so (year, month) pairs compare with plain ints."""
    return int(year) * 12 + (int(month) - 1)


def standard_amounts(unit: Any) -> tuple[float, float]:
    rent = money(getattr(unit, "monthly_rent", 0.0))
    utilities = money(getattr(unit, "monthly_utilities", None))
    return rent, utilities


def effective_amounts(rental: Any, unit: Any) -> tuple[float, float, float]:
    """
    (rent, utilities, total) for a stored row.

    A null portion falls back to the unit's current standard. The total is
    derived from the two portions; rows that only carry a stored amount
    (both portions null) keep that amount.
    """
    std_rent, std_util = standard_amounts(unit)
    stored_rent = getattr(rental, "rent_amount", None)
    stored_util = getattr(rental, "utilities_amount", None)

    rent = money(stored_rent) if stored_rent is not None else std_rent
    utilities = money(stored_util) if stored_util is not None else std_util

    if stored_rent is None and stored_util is None and getattr(rental, "amount", None) is not None:
        return rent, utilities, money(rental.amount)
    return rent, utilities, money(rent + utilities)


def resolve_write_amounts(
    unit: Any,
    *,
    rent_amount: Optional[float] = None,
    utilities_amount: Optional[float] = None,
) -> tuple[float, float, float]:
    """Amounts to persist for a month write. The total is always rent + utilities."""
    std_rent, std_util = standard_amounts(unit)
    rent = money(rent_amount) if rent_amount is not None else std_rent
    utilities = money(utilities_amount) if utilities_amount is not None else std_util
    return rent, utilities, money(rent + utilities)


@dataclass(frozen=True)
class MonthEntry:
    month: int
    year: int
    rent_amount: float
    utilities_amount: float
    total_amount: float
    is_paid: bool
    notes: str
    rental_id: Optional[int]
    exists: bool


def build_yearly_overview(unit: Any, rentals: Iterable[Any], year: int) -> list[MonthEntry]:
    """
    Exactly 12 entries, months 1..12 ascending.

    Stored rows for other years are ignored; months without a stored row are
    synthesized from the unit's current standard rent/utilities.
    """
    by_month: dict[int, Any] = {}
    for r in rentals:
        if int(getattr(r, "year", 0)) == int(year):
            by_month[int(r.month)] = r

    std_rent, std_util = standard_amounts(unit)

    out: list[MonthEntry] = []
    for m in MONTHS:
        r = by_month.get(m)
        if r is not None:
            rent, utilities, total = effective_amounts(r, unit)
            out.append(
                MonthEntry(
                    month=m,
                    year=int(year),
                    rent_amount=rent,
                    utilities_amount=utilities,
                    total_amount=total,
                    is_paid=bool(r.is_paid),
                    notes=r.notes or "",
                    rental_id=int(r.id),
                    exists=True,
                )
            )
        else:
            out.append(
                MonthEntry(
                    month=m,
                    year=int(year),
                    rent_amount=std_rent,
                    utilities_amount=std_util,
                    total_amount=money(std_rent + std_util),
                    is_paid=False,
                    notes="",
                    rental_id=None,
                    exists=False,
                )
            )
    return out


@dataclass(frozen=True)
class LedgerTotals:
    total_rent: float
    total_utilities: float
    total_expected: float
    total_paid: float
    total_unpaid: float


def ledger_totals(entries: Iterable[MonthEntry]) -> LedgerTotals:
    rent = utilities = expected = paid = 0.0
    for e in entries:
        rent += e.rent_amount
        utilities += e.utilities_amount
        expected += e.total_amount
        if e.is_paid:
            paid += e.total_amount
    return LedgerTotals(
        total_rent=money(rent),
        total_utilities=money(utilities),
        total_expected=money(expected),
        total_paid=money(paid),
        total_unpaid=money(expected - paid),
    )


def sum_totals(parts: Iterable[LedgerTotals]) -> LedgerTotals:
    acc = LedgerTotals(0.0, 0.0, 0.0, 0.0, 0.0)
    for t in parts:
        acc = LedgerTotals(
            total_rent=money(acc.total_rent + t.total_rent),
            total_utilities=money(acc.total_utilities + t.total_utilities),
            total_expected=money(acc.total_expected + t.total_expected),
            total_paid=money(acc.total_paid + t.total_paid),
            total_unpaid=money(acc.total_unpaid + t.total_unpaid),
        )
    return acc


def parse_size(size: Optional[str]) -> Optional[float]:
    """First number in a free-text size ("80m²", "12,5 qm"); None when absent or not positive."""
    if not size:
        return None
    m = _SIZE_RE.search(str(size))
    if not m:
        return None
    val = float(m.group(1).replace(",", "."))
    return val if val > 0 else None


def rent_per_area(unit: Any) -> Optional[float]:
    area = parse_size(getattr(unit, "size", None))
    if area is None:
        return None
    rent, utilities = standard_amounts(unit)
    return money((rent + utilities) / area)
