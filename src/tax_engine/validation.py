"""
Tax Engine Case Validation

Fail-fast checks on the selections a caller must make before an estimate
is produced. The calculator itself never raises; these checks gate it.
"""
from __future__ import annotations

from typing import Iterable

from tax_engine.models import (
    EstimateCase,
    EstimateSettings,
    FinancialPeriodInput,
    TaxCreditType,
)
from tax_engine.tables import CREDIT_RATES_BY_TYPE, SETTLEMENT_MONTHS


class ValidationError(Exception):
    """Raised when a required selection is missing or invalid."""
    pass


def validate_case(case: EstimateCase) -> None:
    """
    Validate required selections in display order.

    Raises ValidationError with a precise message on failure.
    """
    validate_settings(case.settings)


def validate_settings(settings: EstimateSettings) -> None:
    _validate_entity_type(settings)
    _validate_settlement_month(settings)
    _validate_tax_credit(settings)


def _validate_entity_type(settings: EstimateSettings) -> None:
    if settings.entity_type is None:
        raise ValidationError("Select an entity type (individual or corporate)")


def _validate_settlement_month(settings: EstimateSettings) -> None:
    month = settings.settlement_month
    if not month:
        raise ValidationError("Select a settlement month")
    if month not in SETTLEMENT_MONTHS:
        raise ValidationError(
            f"Settlement month {month} not supported, choose one of {list(SETTLEMENT_MONTHS)}"
        )


def _validate_tax_credit(settings: EstimateSettings) -> None:
    credit = settings.tax_credit
    if credit.type is None:
        raise ValidationError("Select a tax credit option (none, startup or special)")
    resolve_credit_rate(credit.type, credit.rate)


def resolve_credit_rate(credit_type: TaxCreditType | None, rate: float) -> float:
    """
    Credit rate to feed the calculator for a credit selection.

    No selection or 'none' gives 0. Startup and special programs require a
    rate from their allowed set.
    """
    if credit_type is None or credit_type == TaxCreditType.NONE:
        return 0.0

    allowed = CREDIT_RATES_BY_TYPE[credit_type]
    if rate == 0:
        raise ValidationError(f"Select a credit rate for the {credit_type.value} credit")
    for allowed_rate in allowed.values():
        if abs(rate - allowed_rate) < 1e-9:
            return allowed_rate
    raise ValidationError(
        f"Credit rate {rate} not allowed for the {credit_type.value} credit, "
        f"choose one of {list(allowed.values())}"
    )


def has_inputs(periods: Iterable[FinancialPeriodInput]) -> bool:
    """True when any period has any entry filled in."""
    return any(period.has_values for period in periods)
