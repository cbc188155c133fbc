"""
Tax Estimate CLI Application

Typer-based command-line interface for the tax estimate calculator.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from tax_engine.engine import TaxEstimator
from tax_engine.models import (
    EntityType,
    EstimateCase,
    EstimateSettings,
    FinancialPeriodInput,
    TaxCreditInputs,
    TaxCreditType,
)
from tax_engine.narrative import template_summary
from tax_engine.tables import DEFAULT_YEARS
from tax_io.readers import read_input_file
from tax_io.writers import export_xlsx, export_csv
from tax_ui_cli.display import display_all, display_brackets, display_industries
from tax_ui_cli.charts import save_charts, show_charts


app = typer.Typer(
    name="tax-estimate",
    help="Annualized income and corporate tax estimate calculator",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _resolve_input_file(input_file: Optional[Path], input_option: Optional[Path]) -> Path:
    """Resolve input file from positional arg or --input option."""
    resolved = input_option or input_file
    if resolved is None:
        raise typer.BadParameter("Missing input file. Provide a positional INPUT_FILE or --input.")
    if not resolved.exists():
        raise typer.BadParameter(f"Input file not found: {resolved}")
    if not resolved.is_file():
        raise typer.BadParameter(f"Input path is not a file: {resolved}")
    return resolved


@app.command()
def run(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to case file (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to case file (YAML or JSON)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output Excel file path",
    ),
    csv_dir: Optional[Path] = typer.Option(
        None,
        "--csv-dir",
        help="Directory to export CSV files",
    ),
    charts: bool = typer.Option(
        False,
        "--charts",
        help="Display interactive charts",
    ),
    charts_dir: Optional[Path] = typer.Option(
        None,
        "--charts-dir",
        help="Directory to save chart files",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Add a narrative summary to the report",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress table output",
    ),
) -> None:
    """
    Run a tax estimate on a case file.

    Reads a YAML or JSON case file, computes every fiscal year and
    displays results as rich tables. Optionally exports to Excel/CSV
    and generates charts.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        console.print(f"[dim]Reading case file: {input_file}[/dim]")
        case = read_input_file(input_file)

        console.print("[dim]Computing estimate...[/dim]")
        report = TaxEstimator(case).run(summarizer=template_summary if summary else None)

        if not quiet:
            display_all(report)

        if output:
            console.print(f"\n[dim]Exporting to Excel: {output}[/dim]")
            export_xlsx(report, output)
            console.print(f"[green]✓ Exported to {output}[/green]")

        if csv_dir:
            console.print(f"\n[dim]Exporting CSVs to: {csv_dir}[/dim]")
            files = export_csv(report, csv_dir)
            console.print(f"[green]✓ Exported {len(files)} CSV files[/green]")

        if charts:
            console.print("\n[dim]Opening charts in browser...[/dim]")
            show_charts(report)

        if charts_dir:
            console.print(f"\n[dim]Saving charts to: {charts_dir}[/dim]")
            files = save_charts(report, charts_dir)
            console.print(f"[green]✓ Saved {len(files)} chart files[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def validate(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to case file (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to case file (YAML or JSON)",
    ),
) -> None:
    """
    Validate a case file without computing the estimate.

    Checks that entity type, settlement month and tax credit are selected.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        console.print(f"[dim]Validating: {input_file}[/dim]")
        case = read_input_file(input_file)

        # Create estimator (which validates the case)
        TaxEstimator(case)

        console.print("[green]✓ Case file is valid[/green]")

        s = case.settings
        console.print(f"\n  Entity type: {s.entity_type.value}")
        console.print(f"  Settlement month: {s.settlement_month}")
        console.print(f"  Tax credit: {s.tax_credit.type.value}")
        console.print(f"  Years: {case.years}")

    except Exception as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def export(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to case file (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to case file (YAML or JSON)",
    ),
    output: Path = typer.Option(
        ...,
        "--output", "-o",
        help="Output Excel file path",
    ),
    include_csv: bool = typer.Option(
        False,
        "--csv",
        help="Also export CSV files to same directory",
    ),
    include_charts: bool = typer.Option(
        False,
        "--charts",
        help="Also save chart files to same directory",
    ),
) -> None:
    """
    Run the estimate and export results to files.

    Primary export is Excel. Optionally also exports CSV and charts.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        case = read_input_file(input_file)
        report = TaxEstimator(case).run()

        export_xlsx(report, output)
        console.print(f"[green]✓ Exported to {output}[/green]")

        if include_csv:
            csv_dir = output.parent / "csv"
            files = export_csv(report, csv_dir)
            console.print(f"[green]✓ Exported {len(files)} CSV files to {csv_dir}[/green]")

        if include_charts:
            charts_dir = output.parent / "charts"
            files = save_charts(report, charts_dir)
            console.print(f"[green]✓ Saved {len(files)} chart files to {charts_dir}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def tables(
    entity_type: Optional[EntityType] = typer.Option(
        None,
        "--entity",
        "-e",
        help="Show only one bracket schedule",
    ),
) -> None:
    """
    Show tax bracket schedules and industry benchmarks.
    """
    display_brackets(entity_type)
    display_industries()


@app.command()
def quick(
    entity_type: EntityType = typer.Option(..., "--entity", "-e", help="Entity type"),
    settlement_month: int = typer.Option(12, "--months", "-m", help="Months covered by the figures"),
    revenue: str = typer.Option("", "--revenue", help="Revenue (KRW)"),
    cogs: str = typer.Option("", "--cogs", help="Cost of goods sold (KRW)"),
    sga: str = typer.Option("", "--sga", help="SG&A expenses (KRW)"),
    non_op_income: str = typer.Option("", "--non-op-income", help="Non-operating income (KRW)"),
    non_op_expense: str = typer.Option("", "--non-op-expense", help="Non-operating expense (KRW)"),
    additional: str = typer.Option("", "--additional", help="Additional deductible expenses (KRW)"),
    credit_type: TaxCreditType = typer.Option(TaxCreditType.NONE, "--credit", help="Tax credit program"),
    credit_rate: float = typer.Option(0.0, "--credit-rate", help="Tax credit rate"),
    local_tax: bool = typer.Option(False, "--local-tax", help="Include 10% local tax"),
    industry: str = typer.Option("wholesale_retail", "--industry", help="Industry key"),
    year: int = typer.Option(DEFAULT_YEARS[-1], "--year", help="Fiscal year label"),
) -> None:
    """
    Estimate tax for a single period given on the command line.
    """
    try:
        case = EstimateCase(
            settings=EstimateSettings(
                entity_type=entity_type,
                settlement_month=settlement_month,
                include_local_tax=local_tax,
                tax_credit=TaxCreditInputs(type=credit_type, rate=credit_rate),
                industry=industry,
            ),
            periods={
                year: FinancialPeriodInput(
                    revenue=revenue,
                    cost_of_goods_sold=cogs,
                    selling_and_admin_expenses=sga,
                    non_operating_income=non_op_income,
                    non_operating_expense=non_op_expense,
                    additional_deductible_expenses=additional,
                ),
            },
        )
        report = TaxEstimator(case).run()
        display_all(report)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
