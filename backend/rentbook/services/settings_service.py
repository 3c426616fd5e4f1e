# backend/rentbook/services/settings_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import settings as app_settings
from ..domain.valuation import (
    InvestmentComparison,
    PropertyEvaluation,
    ValuationInputs,
    compare_investment,
    evaluate_property,
)
from ..models import PropertySettings
from .ownership import must_get_property

log = logging.getLogger("rentbook.settings")

SETTING_FIELDS = (
    "gross_rent_multiplier",
    "operating_expense_ratio",
    "value_adjustment",
    "property_appreciation",
    "etf_return",
    "years",
)


@dataclass(frozen=True)
class EffectiveSettings:
    gross_rent_multiplier: float
    operating_expense_ratio: float  # percent
    value_adjustment: float  # percent
    property_appreciation: float  # percent per year
    etf_return: float  # percent per year
    years: int


def default_settings() -> EffectiveSettings:
    return EffectiveSettings(
        gross_rent_multiplier=float(app_settings.default_gross_rent_multiplier),
        operating_expense_ratio=float(app_settings.default_operating_expense_ratio),
        value_adjustment=float(app_settings.default_value_adjustment),
        property_appreciation=float(app_settings.default_property_appreciation),
        etf_return=float(app_settings.default_etf_return),
        years=int(app_settings.default_comparison_years),
    )


def _from_row(row: PropertySettings) -> EffectiveSettings:
    return EffectiveSettings(**{f: getattr(row, f) for f in SETTING_FIELDS})


def get_settings(db: Session, *, user_id: int, property_id: int) -> EffectiveSettings:
    """Saved parameters for the property, or the configured defaults."""
    must_get_property(db, user_id=user_id, property_id=property_id)
    row = db.scalar(select(PropertySettings).where(PropertySettings.property_id == property_id))
    return _from_row(row) if row else default_settings()


def upsert_settings(db: Session, *, user_id: int, property_id: int, changes: dict[str, Any]) -> EffectiveSettings:
    """Partial upsert: keys absent from `changes` (or None) keep their current/default value."""
    must_get_property(db, user_id=user_id, property_id=property_id)
    row = db.scalar(select(PropertySettings).where(PropertySettings.property_id == property_id))

    if row is None:
        base = default_settings()
        row = PropertySettings(property_id=property_id, **{f: getattr(base, f) for f in SETTING_FIELDS})

    for f in SETTING_FIELDS:
        v = changes.get(f)
        if v is not None:
            setattr(row, f, v)

    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("property.settings.saved", extra={"user_id": user_id, "property_id": property_id})
    return _from_row(row)


def _pick(override: Optional[float], saved: float) -> float:
    return float(override) if override is not None else float(saved)


def evaluate(
    db: Session,
    *,
    user_id: int,
    property_id: int,
    gross_rent_multiplier: Optional[float] = None,
    operating_expense_ratio: Optional[float] = None,
    value_adjustment: Optional[float] = None,
) -> PropertyEvaluation:
    s = get_settings(db, user_id=user_id, property_id=property_id)
    prop = must_get_property(db, user_id=user_id, property_id=property_id, with_units=True)
    inp = ValuationInputs(
        gross_rent_multiplier=_pick(gross_rent_multiplier, s.gross_rent_multiplier),
        operating_expense_ratio=_pick(operating_expense_ratio, s.operating_expense_ratio),
        value_adjustment=_pick(value_adjustment, s.value_adjustment),
    )
    return evaluate_property(prop.units, inp)


def investment_comparison(
    db: Session,
    *,
    user_id: int,
    property_id: int,
    property_value: Optional[float] = None,
    annual_rent: Optional[float] = None,
    annual_expenses: Optional[float] = None,
    property_appreciation: Optional[float] = None,
    etf_return: Optional[float] = None,
    years: Optional[int] = None,
) -> InvestmentComparison:
    """
    Defaults come from the evaluation: property value = adjusted value,
    annual rent = yearly rent, expenses = yearly rent x expense ratio.
    Rates arrive as percents and are handed to the calculator as fractions.
    """
    s = get_settings(db, user_id=user_id, property_id=property_id)
    ev = evaluate(db, user_id=user_id, property_id=property_id)

    rent = _pick(annual_rent, ev.total_yearly_rent)
    expenses = (
        float(annual_expenses)
        if annual_expenses is not None
        else rent * float(s.operating_expense_ratio) / 100.0
    )

    return compare_investment(
        property_value=_pick(property_value, ev.adjusted_value),
        annual_rent=rent,
        annual_expenses=expenses,
        appreciation_rate=_pick(property_appreciation, s.property_appreciation) / 100.0,
        etf_rate=_pick(etf_return, s.etf_return) / 100.0,
        years=int(years) if years is not None else int(s.years),
    )
