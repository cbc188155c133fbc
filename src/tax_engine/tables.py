"""
Tax Engine Static Tables

Progressive bracket schedules, deductions, allowed selections and
industry profit benchmarks. Loaded once at import and never mutated.
"""
from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping, Optional

from tax_engine.models import (
    EntityType,
    IndustryProfitMargin,
    TaxBracket,
    TaxCreditType,
)


# ============================================================================
# BRACKET SCHEDULES
# ============================================================================

# Comprehensive income tax (individual), closed form: income * rate - deduction
INDIVIDUAL_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(limit=14_000_000, rate=0.06, deduction=0),
    TaxBracket(limit=50_000_000, rate=0.15, deduction=1_260_000),
    TaxBracket(limit=88_000_000, rate=0.24, deduction=5_760_000),
    TaxBracket(limit=150_000_000, rate=0.35, deduction=15_440_000),
    TaxBracket(limit=300_000_000, rate=0.38, deduction=19_940_000),
    TaxBracket(limit=500_000_000, rate=0.40, deduction=25_940_000),
    TaxBracket(limit=1_000_000_000, rate=0.42, deduction=35_940_000),
    TaxBracket(limit=math.inf, rate=0.45, deduction=65_940_000),
)

# Corporate income tax
CORPORATE_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(limit=200_000_000, rate=0.09, deduction=0),
    TaxBracket(limit=20_000_000_000, rate=0.19, deduction=20_000_000),
    TaxBracket(limit=300_000_000_000, rate=0.21, deduction=420_000_000),
    TaxBracket(limit=math.inf, rate=0.24, deduction=9_420_000_000),
)


# ============================================================================
# CONSTANTS
# ============================================================================

# Basic personal deduction, individuals only
BASIC_DEDUCTION = 1_500_000

# Local income tax surcharge on top of national tax
LOCAL_TAX_RATE = 0.10

MONTHS_PER_YEAR = 12

SETTLEMENT_MONTHS: tuple[int, ...] = (8, 9, 10, 11, 12)

DEFAULT_YEARS: tuple[int, ...] = (2023, 2024, 2025)

# Allowed credit rates by program, keyed by display label
STARTUP_CREDIT_RATES: Mapping[str, float] = MappingProxyType({"50%": 0.5, "100%": 1.0})
SPECIAL_CREDIT_RATES: Mapping[str, float] = MappingProxyType({
    "5%": 0.05,
    "10%": 0.10,
    "15%": 0.15,
    "20%": 0.20,
    "30%": 0.30,
})

CREDIT_RATES_BY_TYPE: Mapping[TaxCreditType, Mapping[str, float]] = MappingProxyType({
    TaxCreditType.STARTUP: STARTUP_CREDIT_RATES,
    TaxCreditType.SPECIAL: SPECIAL_CREDIT_RATES,
})


# ============================================================================
# INDUSTRY BENCHMARKS
# ============================================================================

INDUSTRY_PROFIT_MARGINS: Mapping[str, IndustryProfitMargin] = MappingProxyType({
    "wholesale_retail": IndustryProfitMargin(label="도소매업", individual=0.117, corporate=0.045),
    "manufacturing": IndustryProfitMargin(label="제조업", individual=0.0431, corporate=0.023),
    "food_lodging": IndustryProfitMargin(label="음식숙박업", individual=0.0889, corporate=0.03),
    "services": IndustryProfitMargin(label="서비스업", individual=0.0851, corporate=0.016),
    "construction": IndustryProfitMargin(label="건설업", individual=0.1219, corporate=0.043),
    "real_estate": IndustryProfitMargin(label="부동산업", individual=0.1058, corporate=0.02),
})


def get_brackets(entity_type: EntityType) -> tuple[TaxBracket, ...]:
    """Bracket schedule for an entity type."""
    if entity_type == EntityType.INDIVIDUAL:
        return INDIVIDUAL_TAX_BRACKETS
    return CORPORATE_TAX_BRACKETS


def get_basic_deduction(entity_type: EntityType) -> float:
    """Basic deduction, applied to individuals only."""
    return float(BASIC_DEDUCTION) if entity_type == EntityType.INDIVIDUAL else 0.0


def find_industry(industry: str) -> Optional[IndustryProfitMargin]:
    """Look up an industry benchmark by key or by published label."""
    if industry in INDUSTRY_PROFIT_MARGINS:
        return INDUSTRY_PROFIT_MARGINS[industry]
    for margin in INDUSTRY_PROFIT_MARGINS.values():
        if margin.label == industry:
            return margin
    return None


def get_profit_margin(industry: str, entity_type: EntityType) -> float:
    """Industry-average net margin, 0 for unknown industries."""
    margin = find_industry(industry)
    if margin is None:
        return 0.0
    return margin.for_entity(entity_type)
