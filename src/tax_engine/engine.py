"""
Tax Engine Main Orchestrator

`compute` is the pure per-period calculator. `TaxEstimator` validates a
case and runs the calculator for every fiscal year.
"""
from __future__ import annotations

import logging
from typing import Optional

from tax_engine.models import (
    CalculationResult,
    ComparisonRow,
    EntityType,
    EstimateCase,
    EstimateReport,
    FinancialPeriodInput,
    PeriodResult,
)
from tax_engine.income import annualize, compute_annualization_factor, compute_subtotals
from tax_engine.narrative import Summarizer, generate_summary
from tax_engine.tables import get_basic_deduction, get_profit_margin
from tax_engine.taxes import (
    compute_bracket_tax,
    compute_tax_credit,
    compute_taxable_income,
    local_tax_multiplier,
)
from tax_engine.validation import has_inputs, resolve_credit_rate, validate_case


logger = logging.getLogger(__name__)


def compute(
    period: FinancialPeriodInput,
    settlement_month: int,
    entity_type: Optional[EntityType],
    include_local_tax: bool,
    credit_rate: float,
    industry: str,
) -> CalculationResult:
    """
    Compute all derived metrics for one period.

    Never raises: amounts are already coerced, unknown industries give a
    zero margin and an unset entity type gives an empty result.
    """
    if entity_type is None:
        return CalculationResult()

    # ====================================================================
    # STEP 1: Period and annualized income statement
    # ====================================================================

    current = compute_subtotals(period)
    factor = compute_annualization_factor(settlement_month)
    annual = annualize(current, factor, period.additional_deductible_expenses)

    # ====================================================================
    # STEP 2: Bracket tax before and after the additional expenses
    # ====================================================================

    taxable_before = compute_taxable_income(annual.net_income_before_adjustment, entity_type)
    base_tax_before = compute_bracket_tax(taxable_before, entity_type)

    taxable_after = compute_taxable_income(annual.net_income_after_adjustment, entity_type)
    base_tax_after = compute_bracket_tax(taxable_after, entity_type)

    # ====================================================================
    # STEP 3: Credit and local tax
    # ====================================================================

    credit_amount, tax_after_credit = compute_tax_credit(base_tax_after, credit_rate)
    multiplier = local_tax_multiplier(include_local_tax)

    final_tax_before = base_tax_before * (1 - credit_rate) * multiplier
    final_tax_after = tax_after_credit * multiplier

    # ====================================================================
    # STEP 4: Industry benchmark
    # ====================================================================

    profit_margin = get_profit_margin(industry, entity_type)
    safe_profit = annual.revenue * profit_margin

    return CalculationResult(
        revenue=current.revenue,
        cost_of_goods_sold=current.cost_of_goods_sold,
        gross_profit=current.gross_profit,
        selling_and_admin_expenses=current.selling_and_admin_expenses,
        operating_income=current.operating_income,
        non_operating_income=current.non_operating_income,
        non_operating_expense=current.non_operating_expense,
        additional_deductible_expenses=period.additional_deductible_expenses,
        net_income_before_adjustment=current.net_income_before_adjustment,
        net_income_after_adjustment=current.net_income_after_adjustment,
        annualization_factor=factor,
        annualized_revenue=annual.revenue,
        annualized_cost_of_goods_sold=annual.cost_of_goods_sold,
        annualized_gross_profit=annual.gross_profit,
        annualized_selling_and_admin_expenses=annual.selling_and_admin_expenses,
        annualized_operating_income=annual.operating_income,
        annualized_non_operating_income=annual.non_operating_income,
        annualized_non_operating_expense=annual.non_operating_expense,
        annualized_net_income_before_adjustment=annual.net_income_before_adjustment,
        annualized_net_income_after_adjustment=annual.net_income_after_adjustment,
        basic_deduction=get_basic_deduction(entity_type),
        taxable_income_before=taxable_before,
        taxable_income_after=taxable_after,
        base_tax_before=base_tax_before,
        base_tax_after=base_tax_after,
        tax_credit_amount=credit_amount,
        tax_after_credit=tax_after_credit,
        final_tax_before=final_tax_before,
        final_tax_after=final_tax_after,
        tax_savings=final_tax_before - final_tax_after,
        profit_margin=profit_margin,
        safe_profit=safe_profit,
    )


def compute_savings_ratio(result: CalculationResult) -> float:
    """
    Share of the pre-adjustment tax still payable after adjustment.

    Ratio = FinalTaxAfter / FinalTaxBefore, clamped to [0, 1]
    """
    if not result.final_tax_before or result.final_tax_before <= 0:
        return 0.0
    ratio = (result.final_tax_after or 0.0) / result.final_tax_before
    return min(1.0, max(0.0, ratio))


class TaxEstimator:
    """
    Multi-year tax estimate runner.

    Each fiscal year is computed independently with the shared settings.
    """

    def __init__(self, case: EstimateCase):
        """
        Initialize estimator with a case.

        Args:
            case: Settings and per-year period inputs
        """
        self.case = case
        self._validate()

    def _validate(self) -> None:
        """Validate required selections before computation."""
        validate_case(self.case)

    def run(self, summarizer: Optional[Summarizer] = None) -> EstimateReport:
        """
        Compute every period and assemble the report.

        Args:
            summarizer: Optional narrative generator, called best-effort

        Returns:
            EstimateReport with per-year results and comparison rows
        """
        settings = self.case.settings
        credit_rate = resolve_credit_rate(settings.tax_credit.type, settings.tax_credit.rate)
        years = self.case.years

        periods = []
        for year in years:
            period = self.case.periods[year]
            result = compute(
                period,
                settings.settlement_month or 0,
                settings.entity_type,
                settings.include_local_tax,
                credit_rate,
                settings.industry,
            )
            logger.debug("Computed %s: final tax after %s", year, result.final_tax_after)
            periods.append(PeriodResult(year=year, has_inputs=period.has_values, result=result))

        comparison = [
            ComparisonRow(
                year=p.year,
                annualized_revenue=p.result.annualized_revenue or 0.0,
                annualized_operating_income=p.result.annualized_operating_income or 0.0,
                annualized_net_income_after_adjustment=p.result.annualized_net_income_after_adjustment or 0.0,
            )
            for p in periods
        ]

        detail_year = years[-1]
        detail = periods[-1].result

        report = EstimateReport(
            settings=settings,
            credit_rate=credit_rate,
            years=years,
            detail_year=detail_year,
            periods=periods,
            comparison=comparison,
            savings_ratio=compute_savings_ratio(detail),
            has_inputs=has_inputs(self.case.periods.values()),
        )

        summary = generate_summary(report, summarizer)
        if summary is not None:
            report = report.model_copy(update={"summary": summary})
        return report
