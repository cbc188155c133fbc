"""
Unit Tests for the Per-Period Calculator

Properties of `compute` across entity types, credits and local tax.
"""
import pytest
from tax_engine.engine import compute, compute_savings_ratio
from tax_engine.models import (
    CalculationResult,
    EntityType,
    FinancialPeriodInput,
)


@pytest.fixture
def period() -> FinancialPeriodInput:
    return FinancialPeriodInput(
        revenue=100_000_000,
        cost_of_goods_sold=40_000_000,
        selling_and_admin_expenses=20_000_000,
        non_operating_income=1_000_000,
        non_operating_expense=500_000,
        additional_deductible_expenses=1_000_000,
    )


def _run(period, entity=EntityType.INDIVIDUAL, months=12, local_tax=False, rate=0.0,
         industry="wholesale_retail") -> CalculationResult:
    return compute(period, months, entity, local_tax, rate, industry)


class TestGoldenPeriod:
    def test_income_statement(self, period):
        r = _run(period)

        assert r.gross_profit == pytest.approx(60_000_000)
        assert r.operating_income == pytest.approx(40_000_000)
        assert r.annualized_net_income_before_adjustment == pytest.approx(40_500_000)
        assert r.annualized_net_income_after_adjustment == pytest.approx(39_500_000)

    def test_tax(self, period):
        r = _run(period)

        assert r.basic_deduction == 1_500_000
        assert r.taxable_income_before == pytest.approx(39_000_000)
        assert r.base_tax_before == pytest.approx(4_590_000)
        assert r.taxable_income_after == pytest.approx(38_000_000)
        assert r.base_tax_after == pytest.approx(4_440_000)
        assert r.final_tax_after == pytest.approx(4_440_000)
        assert r.tax_savings == pytest.approx(150_000)

    def test_benchmark(self, period):
        r = _run(period)

        assert r.profit_margin == pytest.approx(0.117)
        assert r.safe_profit == pytest.approx(11_700_000)

    def test_credit_and_local_tax(self, period):
        r = _run(period, local_tax=True, rate=0.1)

        assert r.tax_credit_amount == pytest.approx(444_000)
        assert r.tax_after_credit == pytest.approx(3_996_000)
        assert r.final_tax_after == pytest.approx(4_395_600)
        assert r.final_tax_before == pytest.approx(4_590_000 * 0.9 * 1.1)

    def test_savings_ratio(self, period):
        assert compute_savings_ratio(_run(period)) == pytest.approx(4_440_000 / 4_590_000)


class TestResultProperties:
    def test_no_entity_type_gives_empty_result(self, period):
        r = _run(period, entity=None)

        assert r == CalculationResult()
        assert r.is_empty
        assert r.final_tax_after is None

    def test_filled_result_is_not_empty(self, period):
        assert not _run(period).is_empty

    @pytest.mark.parametrize("entity", [EntityType.INDIVIDUAL, EntityType.CORPORATE])
    @pytest.mark.parametrize("months", [0, 8, 9, 12])
    @pytest.mark.parametrize("rate", [0.0, 0.05, 0.5, 1.0])
    def test_invariants(self, period, entity, months, rate):
        r = _run(period, entity=entity, months=months, rate=rate, local_tax=True)

        assert r.taxable_income_before >= 0
        assert r.taxable_income_after >= 0
        assert r.base_tax_before >= 0
        assert r.base_tax_after >= 0
        assert r.final_tax_before >= r.final_tax_after
        assert r.tax_savings >= 0
        assert r.tax_credit_amount + r.tax_after_credit == pytest.approx(r.base_tax_after)

    def test_zero_months(self, period):
        r = _run(period, months=0)

        assert r.annualization_factor == 0
        assert r.annualized_revenue == 0
        assert r.annualized_net_income_before_adjustment == 0
        assert r.annualized_net_income_after_adjustment == pytest.approx(-1_000_000)
        assert r.final_tax_after == 0
        assert r.safe_profit == 0

    def test_empty_period_gives_zero_tax(self):
        r = _run(FinancialPeriodInput())

        assert r.revenue == 0
        assert r.final_tax_before == 0
        assert r.final_tax_after == 0
        assert r.tax_savings == 0

    def test_unknown_industry_gives_zero_benchmark(self, period):
        r = _run(period, industry="space_mining")

        assert r.profit_margin == 0
        assert r.safe_profit == 0
        assert r.final_tax_after == pytest.approx(4_440_000)

    def test_local_tax_scales_by_eleven_tenths(self, period):
        without = _run(period, rate=0.2)
        with_local = _run(period, rate=0.2, local_tax=True)

        assert with_local.final_tax_after == pytest.approx(without.final_tax_after * 1.1)
        assert with_local.final_tax_before == pytest.approx(without.final_tax_before * 1.1)
        assert with_local.base_tax_after == without.base_tax_after

    def test_full_credit_eliminates_tax(self, period):
        r = _run(period, rate=1.0, local_tax=True)

        assert r.final_tax_after == 0
        assert r.final_tax_before == 0
        assert r.tax_savings == 0

    def test_more_revenue_never_lowers_tax(self, period):
        richer = period.model_copy(update={"revenue": period.revenue + 50_000_000})

        for entity in EntityType:
            assert _run(richer, entity=entity).final_tax_after >= _run(period, entity=entity).final_tax_after

    def test_corporate_has_no_basic_deduction(self, period):
        r = _run(period, entity=EntityType.CORPORATE)

        assert r.basic_deduction == 0
        assert r.taxable_income_after == pytest.approx(39_500_000)
        assert r.base_tax_after == pytest.approx(3_555_000)
        assert r.profit_margin == pytest.approx(0.045)

    def test_partial_year_keeps_expenses_flat(self):
        period = FinancialPeriodInput(revenue=10_000_000, additional_deductible_expenses=1_000_000)
        r = _run(period, months=6)

        assert r.annualized_net_income_before_adjustment == pytest.approx(20_000_000)
        assert r.annualized_net_income_after_adjustment == pytest.approx(19_000_000)


class TestSavingsRatio:
    def test_no_tax_gives_zero(self):
        assert compute_savings_ratio(CalculationResult()) == 0.0
        assert compute_savings_ratio(CalculationResult(final_tax_before=0.0, final_tax_after=0.0)) == 0.0

    def test_clamped(self):
        r = CalculationResult(final_tax_before=100.0, final_tax_after=150.0)
        assert compute_savings_ratio(r) == 1.0
