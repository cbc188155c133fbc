"""
Tax Engine Tax Calculations

Bracket tax, tax credits and the local tax surcharge.
"""
from __future__ import annotations

from typing import Sequence

from tax_engine.models import EntityType, TaxBracket
from tax_engine.tables import LOCAL_TAX_RATE, get_basic_deduction, get_brackets


def select_bracket(income: float, brackets: Sequence[TaxBracket]) -> TaxBracket:
    """
    Pick the first bracket whose limit is at or above the income.

    Falls back to the last (unbounded) bracket.
    """
    for bracket in brackets:
        if income <= bracket.limit:
            return bracket
    return brackets[-1]


def compute_bracket_tax(income: float, entity_type: EntityType) -> float:
    """
    Compute progressive tax with the subtractive deduction method.

    Tax = Income * Rate - Deduction   (0 for non-positive income)
    """
    if income <= 0:
        return 0.0
    bracket = select_bracket(income, get_brackets(entity_type))
    return income * bracket.rate - bracket.deduction


def compute_taxable_income(annualized_net_income: float, entity_type: EntityType) -> float:
    """
    TaxableIncome = max(0, AnnualizedNetIncome - BasicDeduction)
    """
    return max(0.0, annualized_net_income - get_basic_deduction(entity_type))


def compute_tax_credit(base_tax: float, credit_rate: float) -> tuple[float, float]:
    """
    Apply a tax credit rate.

    Returns:
        (credit amount, tax after credit)
    """
    credit = base_tax * credit_rate
    return credit, base_tax - credit


def local_tax_multiplier(include_local_tax: bool) -> float:
    return 1.0 + LOCAL_TAX_RATE if include_local_tax else 1.0
