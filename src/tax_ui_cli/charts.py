"""
Tax Estimate Visualizations

Plotly charts for multi-year estimates.
"""
from __future__ import annotations

from pathlib import Path

import plotly.graph_objects as go

from tax_engine.models import EstimateReport


def create_comparison_chart(report: EstimateReport) -> go.Figure:
    """
    Create key metrics comparison chart.

    Shows annualized revenue, operating income and adjusted net income
    by year as grouped bars.
    """
    years = [str(c.year) for c in report.comparison]
    series = [
        ("Annualized Revenue", [c.annualized_revenue for c in report.comparison], "#0EA5E9"),
        ("Operating Income", [c.annualized_operating_income for c in report.comparison], "#10B981"),
        ("Net Income", [c.annualized_net_income_after_adjustment for c in report.comparison], "#2E75B6"),
    ]

    fig = go.Figure()
    for name, values, color in series:
        fig.add_trace(go.Bar(
            name=name,
            x=years,
            y=values,
            marker_color=color,
            text=[f"{v:,.0f}" for v in values],
            textposition="outside",
        ))

    fig.update_layout(
        title="Key Metrics by Year",
        xaxis_title="Year",
        yaxis_title="KRW",
        barmode="group",
        template="plotly_white",
        height=450,
        legend=dict(
            orientation="h",
            yanchor="bottom",
            y=1.02,
            xanchor="right",
            x=1
        ),
    )

    return fig


def create_tax_chart(report: EstimateReport) -> go.Figure:
    """
    Create final tax chart.

    Shows final tax before and after the additional expenses by year.
    """
    years = [str(p.year) for p in report.periods]
    before = [p.result.final_tax_before or 0.0 for p in report.periods]
    after = [p.result.final_tax_after or 0.0 for p in report.periods]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Before Adjustment",
        x=years,
        y=before,
        marker_color="#94A3B8",
        text=[f"{v:,.0f}" for v in before],
        textposition="outside",
    ))

    fig.add_trace(go.Bar(
        name="After Adjustment",
        x=years,
        y=after,
        marker_color="#2E75B6",
        text=[f"{v:,.0f}" for v in after],
        textposition="outside",
    ))

    fig.update_layout(
        title="Estimated Final Tax",
        xaxis_title="Year",
        yaxis_title="KRW",
        barmode="group",
        template="plotly_white",
        height=400,
    )

    return fig


def save_charts(
    report: EstimateReport,
    output_dir: str | Path,
    format: str = "html",
) -> list[Path]:
    """
    Generate and save all charts.

    Args:
        report: Estimate report
        output_dir: Directory to save charts
        format: Output format ("html", "png", "svg")

    Returns:
        List of created file paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    charts = {
        "key_metrics": create_comparison_chart(report),
        "final_tax": create_tax_chart(report),
    }

    created_files = []
    for name, fig in charts.items():
        file_path = output_dir / f"{name}.{format}"
        if format == "html":
            fig.write_html(str(file_path))
        else:
            fig.write_image(str(file_path))
        created_files.append(file_path)

    return created_files


def show_charts(report: EstimateReport) -> None:
    """
    Display all charts (opens in browser).
    """
    for chart in (create_comparison_chart(report), create_tax_chart(report)):
        chart.show()
