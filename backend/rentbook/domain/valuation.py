from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..errors import ValidationError

VALUE_RANGE_BAND = 0.10


@dataclass(frozen=True)
class ValuationInputs:
    gross_rent_multiplier: float
    operating_expense_ratio: float  # percent
    value_adjustment: float  # percent


@dataclass(frozen=True)
class PropertyEvaluation:
    total_monthly_rent: float
    total_yearly_rent: float
    net_operating_income: float
    estimated_value: float
    adjusted_value: float
    implied_cap_rate: Optional[float]
    value_range: Optional[tuple[float, float]]
    evaluation_possible: bool

    gross_rent_multiplier: float
    operating_expense_ratio: float
    value_adjustment: float


def total_monthly_rent(units: Iterable[Any]) -> float:
    total = 0.0
    for u in units:
        if not bool(getattr(u, "is_active", True)):
            continue
        total += float(getattr(u, "monthly_rent", 0.0) or 0.0)
        total += float(getattr(u, "monthly_utilities", 0.0) or 0.0)
    return total


def evaluate_property(units: Iterable[Any], inp: ValuationInputs) -> PropertyEvaluation:
    """
    Gross-rent-multiplier valuation.

    The multiplier determines the value; the cap rate is derived from it.
    A property without rent cannot be evaluated, so cap rate and range stay None.
    """
    monthly = total_monthly_rent(units)
    yearly = monthly * 12.0

    noi = yearly * (1.0 - float(inp.operating_expense_ratio) / 100.0)
    estimated = yearly * float(inp.gross_rent_multiplier)
    adjusted = estimated * (1.0 + float(inp.value_adjustment) / 100.0)

    possible = estimated > 1e-9
    cap_rate = round(noi / estimated * 100.0, 4) if possible else None
    value_range = (
        (round(adjusted * (1.0 - VALUE_RANGE_BAND), 2), round(adjusted * (1.0 + VALUE_RANGE_BAND), 2))
        if possible
        else None
    )

    return PropertyEvaluation(
        total_monthly_rent=round(monthly, 2),
        total_yearly_rent=round(yearly, 2),
        net_operating_income=round(noi, 2),
        estimated_value=round(estimated, 2),
        adjusted_value=round(adjusted, 2),
        implied_cap_rate=cap_rate,
        value_range=value_range,
        evaluation_possible=possible,
        gross_rent_multiplier=float(inp.gross_rent_multiplier),
        operating_expense_ratio=float(inp.operating_expense_ratio),
        value_adjustment=float(inp.value_adjustment),
    )


@dataclass(frozen=True)
class PropertyScenario:
    total_value: float
    total_income: float
    total_return: float
    annualized_return: float  # percent


@dataclass(frozen=True)
class EtfScenario:
    total_value: float
    total_return: float
    annualized_return: float  # percent


@dataclass(frozen=True)
class InvestmentComparison:
    property_value: float
    annual_rent: float
    annual_expenses: float
    annual_net_income: float
    appreciation_rate: float
    etf_rate: float
    years: int
    property_scenario: PropertyScenario
    etf_scenario: EtfScenario
    difference: float
    better: str  # property | etf | equal


def compare_investment(
    property_value: float,
    annual_rent: float,
    annual_expenses: float,
    appreciation_rate: float,
    etf_rate: float,
    years: int,
) -> InvestmentComparison:
    """
    Buy-and-hold property vs. the same capital in an ETF.

    Rates are fractions (0.02 == 2 %). Net rental income is accumulated
    without reinvestment; the ETF branch is lump-sum growth only.
    """
    if int(years) < 1:
        raise ValidationError("Anlagezeitraum muss mindestens 1 Jahr betragen")
    if float(property_value) <= 0:
        raise ValidationError("Objektwert muss größer als 0 sein")

    years = int(years)
    start = float(property_value)
    net_income = float(annual_rent) - float(annual_expenses)

    value = start
    income = 0.0
    for _ in range(years):
        value *= 1.0 + float(appreciation_rate)
        income += net_income

    combined = value + income
    prop_annualized = (combined / start) ** (1.0 / years) - 1.0 if combined > 0 else -1.0

    etf_value = start * (1.0 + float(etf_rate)) ** years

    diff = combined - etf_value
    if abs(diff) < 0.005:
        better = "equal"
    else:
        better = "property" if diff > 0 else "etf"

    return InvestmentComparison(
        property_value=round(start, 2),
        annual_rent=round(float(annual_rent), 2),
        annual_expenses=round(float(annual_expenses), 2),
        annual_net_income=round(net_income, 2),
        appreciation_rate=float(appreciation_rate),
        etf_rate=float(etf_rate),
        years=years,
        property_scenario=PropertyScenario(
            total_value=round(value, 2),
            total_income=round(income, 2),
            total_return=round(combined - start, 2),
            annualized_return=round(prop_annualized * 100.0, 4),
        ),
        etf_scenario=EtfScenario(
            total_value=round(etf_value, 2),
            total_return=round(etf_value - start, 2),
            annualized_return=round(float(etf_rate) * 100.0, 4),
        ),
        difference=round(diff, 2),
        better=better,
    )
