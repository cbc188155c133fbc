"""
Tax Engine Income Statement Calculations

Period subtotals and 12-month annualization.
"""
from __future__ import annotations

from dataclasses import dataclass

from tax_engine.models import FinancialPeriodInput
from tax_engine.tables import MONTHS_PER_YEAR


@dataclass(frozen=True)
class IncomeSubtotals:
    """Income statement lines for one period (raw or annualized)."""
    revenue: float
    cost_of_goods_sold: float
    gross_profit: float
    selling_and_admin_expenses: float
    operating_income: float
    non_operating_income: float
    non_operating_expense: float
    net_income_before_adjustment: float
    net_income_after_adjustment: float


def compute_subtotals(period: FinancialPeriodInput) -> IncomeSubtotals:
    """
    Compute period subtotals.

    GrossProfit = Revenue - COGS
    OperatingIncome = GrossProfit - SG&A
    NetBefore = OperatingIncome + NonOpIncome - NonOpExpense
    NetAfter = NetBefore - AdditionalExpenses
    """
    gross_profit = period.revenue - period.cost_of_goods_sold
    operating_income = gross_profit - period.selling_and_admin_expenses
    net_before = operating_income + period.non_operating_income - period.non_operating_expense
    net_after = net_before - period.additional_deductible_expenses

    return IncomeSubtotals(
        revenue=period.revenue,
        cost_of_goods_sold=period.cost_of_goods_sold,
        gross_profit=gross_profit,
        selling_and_admin_expenses=period.selling_and_admin_expenses,
        operating_income=operating_income,
        non_operating_income=period.non_operating_income,
        non_operating_expense=period.non_operating_expense,
        net_income_before_adjustment=net_before,
        net_income_after_adjustment=net_after,
    )


def compute_annualization_factor(settlement_month: int) -> float:
    """12 / months, or 0 when no months are given."""
    if settlement_month > 0:
        return MONTHS_PER_YEAR / settlement_month
    return 0.0


def annualize(
    subtotals: IncomeSubtotals,
    factor: float,
    additional_deductible_expenses: float,
) -> IncomeSubtotals:
    """
    Scale period subtotals to a 12-month equivalent.

    Every line is multiplied by the factor, except that additional
    deductible expenses are subtracted at their period amount:

    AnnualNetAfter = AnnualNetBefore - AdditionalExpenses
    """
    operating_income = subtotals.operating_income * factor
    non_op_income = subtotals.non_operating_income * factor
    non_op_expense = subtotals.non_operating_expense * factor
    net_before = operating_income + non_op_income - non_op_expense

    return IncomeSubtotals(
        revenue=subtotals.revenue * factor,
        cost_of_goods_sold=subtotals.cost_of_goods_sold * factor,
        gross_profit=subtotals.gross_profit * factor,
        selling_and_admin_expenses=subtotals.selling_and_admin_expenses * factor,
        operating_income=operating_income,
        non_operating_income=non_op_income,
        non_operating_expense=non_op_expense,
        net_income_before_adjustment=net_before,
        # Flat, not annualized
        net_income_after_adjustment=net_before - additional_deductible_expenses,
    )
