"""
Tax Engine Core Data Models

Pydantic models for tax estimate inputs and outputs.
All monetary amounts are in base currency units (KRW), never millions.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class EntityType(str, Enum):
    """Taxpayer type. An unset entity type is represented by None."""
    INDIVIDUAL = "individual"
    CORPORATE = "corporate"


class TaxCreditType(str, Enum):
    """Tax credit program selected for the estimate."""
    NONE = "none"
    STARTUP = "startup"    # Startup reduction (50% / 100%)
    SPECIAL = "special"    # Special SME startup credit (5% - 30%)


def parse_amount(value: Any) -> float:
    """
    Coerce a raw form value to a float amount.

    Blank, missing, non-numeric and non-finite values become 0.
    Thousands separators and surrounding whitespace are ignored.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


# ============================================================================
# STATIC TABLE MODELS
# ============================================================================

class TaxBracket(BaseModel):
    """One tier of a progressive tax schedule."""
    limit: float = Field(..., description="Upper income limit of the tier (inclusive, may be inf)")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate")
    deduction: float = Field(..., ge=0, description="Subtractive (progressive) deduction")

    model_config = {"frozen": True}


class IndustryProfitMargin(BaseModel):
    """Industry-average net margin by entity type."""
    label: str = Field(..., description="Published industry name")
    individual: float = Field(..., description="Net margin for individual businesses")
    corporate: float = Field(..., description="Net margin for corporations")

    model_config = {"frozen": True}

    def for_entity(self, entity_type: EntityType) -> float:
        if entity_type == EntityType.INDIVIDUAL:
            return self.individual
        return self.corporate


# ============================================================================
# INPUT MODELS
# ============================================================================

AMOUNT_FIELDS: tuple[str, ...] = (
    "revenue",
    "cost_of_goods_sold",
    "selling_and_admin_expenses",
    "non_operating_income",
    "non_operating_expense",
    "additional_deductible_expenses",
)


class FinancialPeriodInput(BaseModel):
    """One reporting period's income statement entries."""
    revenue: float = Field(0.0, description="Revenue")
    cost_of_goods_sold: float = Field(0.0, description="Cost of goods sold")
    selling_and_admin_expenses: float = Field(0.0, description="Selling, general & administrative expenses")
    non_operating_income: float = Field(0.0, description="Non-operating income")
    non_operating_expense: float = Field(0.0, description="Non-operating expense")
    additional_deductible_expenses: float = Field(0.0, description="Additional deductible (tax-saving) expenses")

    # Fields left blank on input, used to tell an empty period from a zero one
    blank_fields: frozenset[str] = Field(default_factory=frozenset, exclude=True)

    model_config = {"frozen": True}

    @field_validator(
        "revenue",
        "cost_of_goods_sold",
        "selling_and_admin_expenses",
        "non_operating_income",
        "non_operating_expense",
        "additional_deductible_expenses",
        mode="before",
    )
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return parse_amount(v)

    @model_validator(mode="before")
    @classmethod
    def record_blank_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "blank_fields" in data:
            return data
        blank = frozenset(
            name for name in AMOUNT_FIELDS
            if data.get(name) is None or (isinstance(data[name], str) and not data[name].strip())
        )
        return {**data, "blank_fields": blank}

    @property
    def has_values(self) -> bool:
        """True when at least one entry was filled in."""
        return len(self.blank_fields) < len(AMOUNT_FIELDS)


class TaxCreditInputs(BaseModel):
    """Tax credit selection."""
    type: Optional[TaxCreditType] = Field(None, description="Credit program (None = not selected)")
    rate: float = Field(0.0, ge=0, le=1, description="Credit rate for the program")


class EstimateSettings(BaseModel):
    """Scalar configuration shared by all periods of a case."""
    company_name: str = Field("", description="Company name shown on reports")
    entity_type: Optional[EntityType] = Field(None, description="Taxpayer type (None = not selected)")
    settlement_month: Optional[int] = Field(None, ge=0, le=12, description="Months covered by the latest period")
    include_local_tax: bool = Field(False, description="Add the 10% local income tax surcharge")
    tax_credit: TaxCreditInputs = Field(default_factory=TaxCreditInputs)
    industry: str = Field("wholesale_retail", description="Industry key or label for the profit benchmark")


class EstimateCase(BaseModel):
    """A complete estimate case: settings plus per-year period inputs."""
    settings: EstimateSettings
    periods: dict[int, FinancialPeriodInput] = Field(..., min_length=1, description="Period inputs by fiscal year")

    @field_validator("periods")
    @classmethod
    def sort_periods(cls, v: dict[int, FinancialPeriodInput]) -> dict[int, FinancialPeriodInput]:
        return dict(sorted(v.items()))

    @property
    def years(self) -> list[int]:
        return list(self.periods)


# ============================================================================
# OUTPUT MODELS
# ============================================================================

class CalculationResult(BaseModel):
    """
    Flat record of derived metrics for one period.

    Every field is None in the empty result returned when no entity type
    is selected.
    """
    # Period figures
    revenue: Optional[float] = None
    cost_of_goods_sold: Optional[float] = None
    gross_profit: Optional[float] = None
    selling_and_admin_expenses: Optional[float] = None
    operating_income: Optional[float] = None
    non_operating_income: Optional[float] = None
    non_operating_expense: Optional[float] = None
    additional_deductible_expenses: Optional[float] = None
    net_income_before_adjustment: Optional[float] = None
    net_income_after_adjustment: Optional[float] = None

    # 12-month equivalents
    annualization_factor: Optional[float] = None
    annualized_revenue: Optional[float] = None
    annualized_cost_of_goods_sold: Optional[float] = None
    annualized_gross_profit: Optional[float] = None
    annualized_selling_and_admin_expenses: Optional[float] = None
    annualized_operating_income: Optional[float] = None
    annualized_non_operating_income: Optional[float] = None
    annualized_non_operating_expense: Optional[float] = None
    annualized_net_income_before_adjustment: Optional[float] = None
    annualized_net_income_after_adjustment: Optional[float] = None

    # Tax
    basic_deduction: Optional[float] = None
    taxable_income_before: Optional[float] = None
    taxable_income_after: Optional[float] = None
    base_tax_before: Optional[float] = None
    base_tax_after: Optional[float] = None
    tax_credit_amount: Optional[float] = None
    tax_after_credit: Optional[float] = None
    final_tax_before: Optional[float] = None
    final_tax_after: Optional[float] = None
    tax_savings: Optional[float] = None

    # Industry benchmark
    profit_margin: Optional[float] = None
    safe_profit: Optional[float] = None

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class PeriodResult(BaseModel):
    """Result for one fiscal year."""
    year: int
    has_inputs: bool
    result: CalculationResult


class ComparisonRow(BaseModel):
    """Annualized key metrics for one year."""
    year: int
    annualized_revenue: float
    annualized_operating_income: float
    annualized_net_income_after_adjustment: float


class EstimateReport(BaseModel):
    """Complete estimate outputs for a case."""
    settings: EstimateSettings
    credit_rate: float
    years: list[int]
    detail_year: int
    periods: list[PeriodResult]
    comparison: list[ComparisonRow]
    savings_ratio: float
    has_inputs: bool
    summary: Optional[str] = None

    def result_for(self, year: int) -> CalculationResult:
        for period in self.periods:
            if period.year == year:
                return period.result
        raise KeyError(f"No result for year {year}")

    @property
    def detail(self) -> CalculationResult:
        """Result of the latest year, shown in the detail report."""
        return self.result_for(self.detail_year)
