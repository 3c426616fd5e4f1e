# backend/tests/test_ledger_reconciliation.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rentbook.domain.ledger import (
    build_yearly_overview,
    effective_amounts,
    ledger_totals,
    parse_size,
    rent_per_area,
    resolve_write_amounts,
)


@dataclass
class U:
    monthly_rent: float
    monthly_utilities: Optional[float] = None
    size: Optional[str] = None
    is_active: bool = True


@dataclass
class R:
    id: int
    month: int
    year: int
    rent_amount: Optional[float]
    utilities_amount: Optional[float]
    amount: float
    is_paid: bool = False
    notes: Optional[str] = None


def test_overview_has_twelve_months_for_any_row_count():
    unit = U(monthly_rent=500.0, monthly_utilities=50.0)
    for rows in ([], [R(1, 4, 2025, 600.0, 50.0, 650.0)], [R(i, i, 2025, None, None, 550.0) for i in range(1, 13)]):
        entries = build_yearly_overview(unit, rows, 2025)
        assert [e.month for e in entries] == list(range(1, 13))
        assert all(e.year == 2025 for e in entries)


def test_missing_months_fall_back_to_unit_standard():
    # Scenario A
    unit = U(monthly_rent=1000.0, monthly_utilities=100.0)
    entries = build_yearly_overview(unit, [], 2025)
    for e in entries:
        assert e.rent_amount == 1000.0
        assert e.utilities_amount == 100.0
        assert e.total_amount == 1100.0
        assert e.exists is False
        assert e.rental_id is None
        assert e.is_paid is False
        assert e.notes == ""


def test_null_utilities_standard_counts_as_zero():
    entries = build_yearly_overview(U(monthly_rent=700.0), [], 2024)
    assert entries[0].utilities_amount == 0.0
    assert entries[0].total_amount == 700.0


def test_rows_of_other_years_are_ignored():
    unit = U(monthly_rent=1000.0, monthly_utilities=100.0)
    entries = build_yearly_overview(unit, [R(9, 3, 2024, 1200.0, 100.0, 1300.0)], 2025)
    assert entries[2].exists is False
    assert entries[2].total_amount == 1100.0


def test_stored_row_uses_its_portions_and_recomputes_total():
    unit = U(monthly_rent=1000.0, monthly_utilities=100.0)
    row = R(7, 3, 2025, 1200.0, None, 9999.0, is_paid=True, notes="bar")
    entries = build_yearly_overview(unit, [row], 2025)
    march = entries[2]
    assert march.exists is True
    assert march.rental_id == 7
    assert march.rent_amount == 1200.0
    assert march.utilities_amount == 100.0
    assert march.total_amount == 1300.0
    assert march.is_paid is True
    assert march.notes == "bar"


def test_row_without_portions_keeps_stored_amount():
    unit = U(monthly_rent=1000.0, monthly_utilities=100.0)
    rent, util, total = effective_amounts(R(1, 1, 2025, None, None, 950.0), unit)
    assert (rent, util) == (1000.0, 100.0)
    assert total == 950.0


def test_write_amounts_always_add_up():
    unit = U(monthly_rent=1000.0, monthly_utilities=100.0)
    # Scenario B
    assert resolve_write_amounts(unit, rent_amount=1200.0) == (1200.0, 100.0, 1300.0)
    assert resolve_write_amounts(unit, utilities_amount=0.0) == (1000.0, 0.0, 1000.0)
    rent, util, total = resolve_write_amounts(unit, rent_amount=0.1, utilities_amount=0.2)
    assert total == 0.3 == round(rent + util, 2)


def test_totals_split_paid_and_unpaid():
    unit = U(monthly_rent=100.0, monthly_utilities=10.0)
    rows = [R(1, 1, 2025, None, None, 110.0, is_paid=True), R(2, 2, 2025, 150.0, 10.0, 160.0, is_paid=True)]
    t = ledger_totals(build_yearly_overview(unit, rows, 2025))
    assert t.total_rent == 100.0 * 11 + 150.0
    assert t.total_utilities == 120.0
    assert t.total_expected == 110.0 * 11 + 160.0
    assert t.total_paid == 270.0
    assert t.total_unpaid == t.total_expected - 270.0


def test_size_parsing_and_rent_per_area():
    assert parse_size("80m²") == 80.0
    assert parse_size("12,5 qm") == 12.5
    assert parse_size("ca. 0 m²") is None
    assert parse_size("") is None
    assert parse_size("groß") is None

    assert rent_per_area(U(monthly_rent=700.0, monthly_utilities=100.0, size="80m²")) == 10.0
    assert rent_per_area(U(monthly_rent=700.0)) is None
