"""
Tax CLI Display

Rich table formatting for terminal output.
"""
from __future__ import annotations

import math
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from tax_engine.models import EntityType, EstimateReport
from tax_engine.tables import (
    BASIC_DEDUCTION,
    CORPORATE_TAX_BRACKETS,
    INDIVIDUAL_TAX_BRACKETS,
    INDUSTRY_PROFIT_MARGINS,
    find_industry,
)
from tax_io.writers import DETAIL_LINES, DISCLAIMER


console = Console()


def format_won(value: Optional[float]) -> str:
    """
    Format an amount as whole won with thousands separators.

    Halves round up; missing, NaN or infinite values render as 0.
    """
    if value is None or not math.isfinite(value):
        return "0원"
    return f"{math.floor(value + 0.5):,}원"


def display_header(title: str) -> None:
    """Display a section header."""
    console.print()
    console.print(Panel(Text(title, style="bold white"), style="blue"))


def display_settings(report: EstimateReport) -> None:
    """Display case settings summary."""
    display_header("📋 Settings")

    s = report.settings
    industry = find_industry(s.industry)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Parameter", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Company", s.company_name or "-")
    table.add_row("Entity Type", s.entity_type.value if s.entity_type else "-")
    table.add_row("Settlement Month", f"{s.settlement_month} months" if s.settlement_month else "-")
    table.add_row("Tax Credit", s.tax_credit.type.value if s.tax_credit.type else "-")
    table.add_row("Credit Rate", f"{report.credit_rate:.0%}")
    table.add_row("Local Tax", "included (10%)" if s.include_local_tax else "excluded")
    table.add_row("Industry", f"{s.industry} ({industry.label})" if industry else f"{s.industry} (unknown)")

    console.print(table)


def display_detail(report: EstimateReport) -> None:
    """Display period vs 12-month income statement for the detail year."""
    display_header(f"📈 Income Statement ({report.detail_year})")

    detail = report.detail
    months = report.settings.settlement_month or "-"

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim")
    table.add_column(f"Period ({months} months)", justify="right")
    table.add_column("Annualized (12 months)", justify="right")

    for label, period_field, annual_field in DETAIL_LINES:
        period_value = getattr(detail, period_field)
        annual_value = getattr(detail, annual_field)
        if period_field == "additional_deductible_expenses":
            table.add_row(label, f"[red]-{format_won(period_value)}[/red]", f"[red]-{format_won(annual_value)}[/red]")
        elif label.startswith("Pre-tax"):
            table.add_row(f"[bold]{label}[/bold]", f"[bold]{format_won(period_value)}[/bold]", f"[bold]{format_won(annual_value)}[/bold]")
        else:
            table.add_row(label, format_won(period_value), format_won(annual_value))

    console.print(table)


def display_final_tax(report: EstimateReport) -> None:
    """Display the estimated final tax for the detail year."""
    display_header(f"🧾 Estimated Final Tax ({report.detail_year})")

    detail = report.detail
    local = "local tax included" if report.settings.include_local_tax else "local tax excluded"

    lines = [
        f"[dim]{local}[/dim]",
        f"[bold green]{format_won(detail.final_tax_after)}[/bold green]",
        f"Base tax: {format_won(detail.base_tax_after)}",
    ]
    if report.credit_rate > 0:
        lines.append(f"Tax credit: -{format_won(detail.tax_credit_amount)}")

    console.print(Panel("\n".join(lines), style="blue"))


def display_savings(report: EstimateReport) -> None:
    """Display the effect of the additional deductible expenses."""
    detail = report.detail
    if not detail.tax_savings or detail.tax_savings <= 0:
        return

    display_header("💰 Tax Saving Effect")

    width = 40
    paid = round(report.savings_ratio * width)
    bar = f"[blue]{'█' * paid}[/blue][green]{'█' * (width - paid)}[/green]"

    table = Table(show_header=False)
    table.add_column("Item", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Tax before adjustment", format_won(detail.final_tax_before))
    table.add_row("Tax after adjustment", format_won(detail.final_tax_after))
    table.add_row("[bold]Savings[/bold]", f"[bold green]-{format_won(detail.tax_savings)}[/bold green]")
    table.add_row("Payable share", bar)

    console.print(table)


def display_benchmark(report: EstimateReport) -> None:
    """Display industry profit benchmark comparison."""
    display_header(f"🏭 Industry Benchmark ({report.settings.industry})")

    detail = report.detail

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Industry average net margin", f"{(detail.profit_margin or 0) * 100:.2f}%")
    table.add_row("Annualized net income", format_won(detail.annualized_net_income_after_adjustment))
    table.add_row("Industry benchmark profit", f"[bold]{format_won(detail.safe_profit)}[/bold]")

    console.print(table)


def display_comparison(report: EstimateReport) -> None:
    """Display annualized key metrics across years."""
    display_header("📊 Year Comparison (annualized)")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim")
    for year in report.years:
        table.add_column(str(year), justify="right")

    rows = [
        ("Annualized Revenue", "annualized_revenue"),
        ("Operating Income", "annualized_operating_income"),
        ("Net Income (after adjustment)", "annualized_net_income_after_adjustment"),
    ]
    for label, field in rows:
        table.add_row(label, *[format_won(getattr(c, field)) for c in report.comparison])

    console.print(table)


def display_summary(report: EstimateReport) -> None:
    """Display narrative summary if one was generated."""
    if not report.summary:
        return
    display_header("📝 Summary")
    console.print(report.summary)


def display_disclaimer() -> None:
    console.print()
    console.print(f"[dim]{DISCLAIMER}[/dim]")


def display_brackets(entity_type: Optional[EntityType] = None) -> None:
    """Display bracket schedules (both, or one entity type)."""
    schedules = [
        (EntityType.INDIVIDUAL, INDIVIDUAL_TAX_BRACKETS),
        (EntityType.CORPORATE, CORPORATE_TAX_BRACKETS),
    ]
    for entity, brackets in schedules:
        if entity_type is not None and entity != entity_type:
            continue
        display_header(f"📐 {entity.value.title()} Tax Brackets")

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Up To", justify="right")
        table.add_column("Rate", justify="right")
        table.add_column("Deduction", justify="right")
        for b in brackets:
            limit = "∞" if math.isinf(b.limit) else format_won(b.limit)
            table.add_row(limit, f"{b.rate:.0%}", format_won(b.deduction))
        console.print(table)

        if entity == EntityType.INDIVIDUAL:
            console.print(f"  Basic deduction: {format_won(BASIC_DEDUCTION)}")


def display_industries() -> None:
    """Display industry benchmark margins."""
    display_header("🏭 Industry Benchmarks")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key")
    table.add_column("Industry")
    table.add_column("Individual", justify="right")
    table.add_column("Corporate", justify="right")
    for key, m in INDUSTRY_PROFIT_MARGINS.items():
        table.add_row(key, m.label, f"{m.individual:.2%}", f"{m.corporate:.2%}")

    console.print(table)


def display_all(report: EstimateReport) -> None:
    """Display the full estimate report."""
    if not report.has_inputs:
        console.print("[yellow]Enter income statement figures to see an estimate.[/yellow]")
        return

    display_settings(report)
    display_detail(report)
    display_final_tax(report)
    display_savings(report)
    display_benchmark(report)
    display_comparison(report)
    display_summary(report)
    display_disclaimer()

    console.print()
    console.print("[bold green]✓ Tax Estimate Complete[/bold green]")
