"""
Tax Engine Narrative Summary

A summarizer turns a finished report into free-text commentary. Remote
text-generation services plug in as a callable; failures never affect
the computed figures.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from tax_engine.models import EstimateReport


logger = logging.getLogger(__name__)

Summarizer = Callable[[EstimateReport], str]


def build_summary_facts(report: EstimateReport) -> dict[str, Any]:
    """Key figures of the detail year, as handed to a summarizer service."""
    detail = report.detail
    return {
        "company_name": report.settings.company_name,
        "entity_type": report.settings.entity_type.value if report.settings.entity_type else None,
        "industry": report.settings.industry,
        "year": report.detail_year,
        "settlement_month": report.settings.settlement_month,
        "include_local_tax": report.settings.include_local_tax,
        "credit_rate": report.credit_rate,
        "annualized_revenue": detail.annualized_revenue,
        "annualized_operating_income": detail.annualized_operating_income,
        "annualized_net_income_after_adjustment": detail.annualized_net_income_after_adjustment,
        "final_tax_before": detail.final_tax_before,
        "final_tax_after": detail.final_tax_after,
        "tax_savings": detail.tax_savings,
        "profit_margin": detail.profit_margin,
        "safe_profit": detail.safe_profit,
    }


def template_summary(report: EstimateReport) -> str:
    """Offline summarizer built from fixed sentences."""
    facts = build_summary_facts(report)
    if report.detail.is_empty:
        return "No estimate available: entity type not selected."

    name = facts["company_name"] or "The company"
    lines = [
        f"{name} reports annualized revenue of {facts['annualized_revenue']:,.0f} "
        f"and adjusted net income of {facts['annualized_net_income_after_adjustment']:,.0f} "
        f"for {facts['year']}.",
        f"Estimated final tax is {facts['final_tax_after']:,.0f}"
        + (" including local tax." if facts["include_local_tax"] else " excluding local tax."),
    ]
    if facts["tax_savings"] and facts["tax_savings"] > 0:
        lines.append(
            f"Additional deductible expenses save {facts['tax_savings']:,.0f} "
            f"against {facts['final_tax_before']:,.0f} before adjustment."
        )
    if facts["profit_margin"]:
        gap = facts["annualized_net_income_after_adjustment"] - facts["safe_profit"]
        position = "above" if gap >= 0 else "below"
        lines.append(
            f"Net income is {abs(gap):,.0f} {position} the industry benchmark "
            f"of {facts['safe_profit']:,.0f} ({facts['profit_margin']:.2%} margin)."
        )
    return " ".join(lines)


def generate_summary(report: EstimateReport, summarizer: Optional[Summarizer]) -> Optional[str]:
    """
    Run a summarizer on a report, best-effort.

    Returns None when no summarizer is given or when it fails.
    """
    if summarizer is None:
        return None
    try:
        return summarizer(report)
    except Exception as e:
        logger.warning("Narrative summary failed: %s", e)
        return None
