# backend/tests/test_valuation_math.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest

from rentbook.domain.valuation import ValuationInputs, compare_investment, evaluate_property
from rentbook.errors import ValidationError


@dataclass
class U:
    monthly_rent: float
    monthly_utilities: Optional[float] = None
    is_active: bool = True


def test_gross_rent_multiplier_valuation():
    # Scenario C
    ev = evaluate_property(
        [U(monthly_rent=1000.0, monthly_utilities=0.0)],
        ValuationInputs(gross_rent_multiplier=12, operating_expense_ratio=25, value_adjustment=0),
    )
    assert ev.evaluation_possible is True
    assert ev.total_monthly_rent == 1000.0
    assert ev.total_yearly_rent == 12000.0
    assert ev.estimated_value == 144000.0
    assert ev.adjusted_value == 144000.0
    assert ev.net_operating_income == 9000.0
    assert ev.implied_cap_rate == 6.25
    assert ev.value_range == (129600.0, 158400.0)


def test_inactive_units_and_adjustment():
    units = [U(800.0, 200.0), U(500.0, 0.0, is_active=False)]
    ev = evaluate_property(units, ValuationInputs(gross_rent_multiplier=10, operating_expense_ratio=20, value_adjustment=10))
    assert ev.total_monthly_rent == 1000.0
    assert ev.estimated_value == 120000.0
    assert ev.adjusted_value == 132000.0
    assert ev.implied_cap_rate == 8.0


def test_no_rent_means_no_evaluation():
    ev = evaluate_property([], ValuationInputs(gross_rent_multiplier=12, operating_expense_ratio=25, value_adjustment=0))
    assert ev.evaluation_possible is False
    assert ev.implied_cap_rate is None
    assert ev.value_range is None
    assert ev.estimated_value == 0.0


def test_property_vs_etf():
    c = compare_investment(
        property_value=100000.0,
        annual_rent=12000.0,
        annual_expenses=2000.0,
        appreciation_rate=0.02,
        etf_rate=0.07,
        years=2,
    )
    assert c.annual_net_income == 10000.0
    assert c.property_scenario.total_value == 104040.0
    assert c.property_scenario.total_income == 20000.0
    assert c.property_scenario.total_return == 24040.0
    assert c.etf_scenario.total_value == 114490.0
    assert c.etf_scenario.annualized_return == 7.0
    assert c.difference == 124040.0 - 114490.0
    assert c.better == "property"
    assert c.property_scenario.annualized_return == pytest.approx(((124040.0 / 100000.0) ** 0.5 - 1) * 100, abs=1e-3)


def test_etf_wins_without_income():
    c = compare_investment(100000.0, 0.0, 0.0, 0.0, 0.05, 10)
    assert c.better == "etf"
    assert c.property_scenario.total_value == 100000.0


@pytest.mark.parametrize("value,years", [(100000.0, 0), (0.0, 5), (-1.0, 5)])
def test_comparison_rejects_bad_inputs(value, years):
    with pytest.raises(ValidationError):
        compare_investment(value, 1000.0, 0.0, 0.02, 0.07, years)
