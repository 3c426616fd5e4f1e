# backend/rentbook/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, computed_field
from pydantic.alias_generators import to_camel

from .domain import ledger


class CamelModel(BaseModel):
    """JSON uses camelCase; Python code keeps snake_case attribute names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageOut(CamelModel):
    message: str


# -------------------- Auth --------------------

class RegisterIn(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class LoginIn(CamelModel):
    email: str
    password: str


class UserOut(CamelModel):
    id: int
    name: str
    email: str


class AuthOut(CamelModel):
    message: str
    user: UserOut


# -------------------- Units --------------------

class UnitBase(CamelModel):
    name: str = Field(min_length=1)
    type: str = "apartment"
    monthly_rent: float = Field(gt=0)
    monthly_utilities: Optional[float] = Field(default=None, ge=0)
    size: Optional[str] = None
    description: Optional[str] = None


class UnitCreate(UnitBase):
    property_id: int


class UnitUpdate(UnitBase):
    is_active: bool = True


class UnitOut(CamelModel):
    id: int
    property_id: int
    name: str
    type: str
    monthly_rent: float
    monthly_utilities: Optional[float] = None
    size: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="rentPerArea")
    @property
    def rent_per_area(self) -> Optional[float]:
        return ledger.rent_per_area(self)


# -------------------- Properties --------------------

class PropertyCreate(CamelModel):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    description: Optional[str] = None

    # simple mode: one default unit carries the whole rent
    is_simple_mode: bool = False
    monthly_rent: Optional[float] = None


class PropertyUpdate(PropertyCreate):
    is_active: bool = True


class PropertyOut(CamelModel):
    id: int
    name: str
    address: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    units: List[UnitOut] = Field(default_factory=list)


class PropertyWriteOut(CamelModel):
    message: str
    property: PropertyOut


# -------------------- Rentals --------------------

class RentalOut(CamelModel):
    id: int
    unit_id: int
    month: int
    year: int
    rent_amount: Optional[float] = None
    utilities_amount: Optional[float] = None
    amount: float
    is_paid: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RentalCreate(CamelModel):
    unit_id: int
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900, le=3000)
    amount: Optional[float] = Field(default=None, gt=0)
    rent_amount: Optional[float] = Field(default=None, ge=0)
    utilities_amount: Optional[float] = Field(default=None, ge=0)
    is_paid: bool = False
    notes: Optional[str] = None


class RentalUpdate(CamelModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900, le=3000)
    amount: Optional[float] = Field(default=None, gt=0)
    rent_amount: Optional[float] = Field(default=None, ge=0)
    utilities_amount: Optional[float] = Field(default=None, ge=0)
    is_paid: Optional[bool] = None
    notes: Optional[str] = None


class RentalWriteOut(CamelModel):
    message: str
    rental: RentalOut


# -------------------- Yearly overview / standard rent --------------------

class MonthEntryOut(CamelModel):
    month: int
    year: int
    rent_amount: float
    utilities_amount: float
    total_amount: float
    is_paid: bool
    notes: str
    rental_id: Optional[int] = None
    exists: bool


class YearlyOverviewOut(CamelModel):
    unit: UnitOut
    yearly_overview: List[MonthEntryOut]
    year: int


class MonthEntryUpsert(CamelModel):
    # month/year are checked in the service so a missing value yields the domain message
    month: Optional[int] = None
    year: Optional[int] = None
    is_paid: Optional[bool] = None
    notes: Optional[str] = None
    rent_amount: Optional[float] = Field(default=None, ge=0)
    utilities_amount: Optional[float] = Field(default=None, ge=0)


class StandardRentUpdate(CamelModel):
    monthly_rent: Optional[float] = None
    monthly_utilities: Optional[float] = None
    effective_from_month: Optional[int] = None
    effective_from_year: Optional[int] = None
    force_update: bool = False


class AffectedRentalOut(CamelModel):
    month: int
    year: int
    current_amount: float
    new_amount: float


class StandardRentOut(CamelModel):
    message: str
    unit: UnitOut
    updated_rentals: int


class LedgerTotalsOut(CamelModel):
    total_rent: float
    total_utilities: float
    total_expected: float
    total_paid: float
    total_unpaid: float


class UnitLedgerOut(CamelModel):
    unit: UnitOut
    monthly_overview: List[MonthEntryOut]
    totals: LedgerTotalsOut


class PropertyRentalsOverviewOut(CamelModel):
    property_id: int
    property_name: str
    units_overview: List[UnitLedgerOut]
    property_totals: LedgerTotalsOut
    year: int


# -------------------- Settings / valuation --------------------

class SettingsOut(CamelModel):
    gross_rent_multiplier: float
    operating_expense_ratio: float
    value_adjustment: float
    property_appreciation: float
    etf_return: float
    years: int


class SettingsUpdate(CamelModel):
    gross_rent_multiplier: Optional[float] = Field(default=None, gt=0)
    operating_expense_ratio: Optional[float] = Field(default=None, ge=0, le=100)
    value_adjustment: Optional[float] = Field(default=None, ge=-100)
    property_appreciation: Optional[float] = None
    etf_return: Optional[float] = None
    years: Optional[int] = Field(default=None, ge=1, le=100)


class SettingsWriteOut(CamelModel):
    message: str
    settings: SettingsOut


class EvaluationOut(CamelModel):
    property_id: int
    total_monthly_rent: float
    total_yearly_rent: float
    net_operating_income: float
    estimated_value: float
    adjusted_value: float
    cap_rate: Optional[float] = None
    value_range: Optional[List[float]] = None
    evaluation_possible: bool
    gross_rent_multiplier: float
    operating_expense_ratio: float
    value_adjustment: float


class PropertyScenarioOut(CamelModel):
    total_value: float
    total_income: float
    total_return: float
    annualized_return: float


class EtfScenarioOut(CamelModel):
    total_value: float
    total_return: float
    annualized_return: float


class InvestmentComparisonOut(CamelModel):
    property_id: int
    property_value: float
    annual_rent: float
    annual_expenses: float
    annual_net_income: float
    property_appreciation: float
    etf_return: float
    years: int
    property_scenario: PropertyScenarioOut
    etf_scenario: EtfScenarioOut
    difference: float
    better: str


# -------------------- People / assignments --------------------

class PersonCreate(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class PersonOut(PersonCreate):
    id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PropertyRefOut(CamelModel):
    id: int
    name: str


class UnitRefOut(CamelModel):
    id: int
    name: str
    property: PropertyRefOut


class PropertyRoleOut(CamelModel):
    id: int
    role: str
    is_active: bool
    property: PropertyRefOut


class UnitRoleOut(CamelModel):
    id: int
    role: str
    is_active: bool
    unit: UnitRefOut


class PersonDetailOut(PersonOut):
    property_roles: List[PropertyRoleOut] = Field(default_factory=list)
    unit_roles: List[UnitRoleOut] = Field(default_factory=list)


class PaginationOut(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class PeoplePageOut(CamelModel):
    people: List[PersonDetailOut]
    pagination: PaginationOut


class AssignmentCreate(CamelModel):
    person_id: Optional[int] = None
    role: Optional[str] = None


class AssignmentRemove(CamelModel):
    person_id: Optional[int] = None


class AssignmentRoleUpdate(CamelModel):
    role: Optional[str] = None


class PropertyPersonOut(CamelModel):
    id: int
    person_id: int
    property_id: int
    role: str
    is_active: bool
    person: PersonOut


class UnitPersonOut(CamelModel):
    id: int
    person_id: int
    unit_id: int
    role: str
    is_active: bool
    person: PersonOut


class VocabulariesOut(CamelModel):
    unit_types: List[str]
    property_roles: List[str]
    unit_roles: List[str]
