"""
Tax I/O Writers

Export to XLSX and CSV formats.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils.dataframe import dataframe_to_rows
from openpyxl.styles import Font, PatternFill, Border, Side, Alignment

from tax_engine.models import CalculationResult, EntityType, EstimateReport
from tax_engine.tables import (
    BASIC_DEDUCTION,
    CORPORATE_TAX_BRACKETS,
    INDIVIDUAL_TAX_BRACKETS,
    INDUSTRY_PROFIT_MARGINS,
)


DISCLAIMER = (
    "These results are estimates based on the information provided and may differ "
    "from the actual tax due. They do not constitute legal or tax advice and no "
    "liability is accepted for their use. Consult a certified tax accountant for "
    "filing and advice."
)

# (label, period field, 12-month field)
DETAIL_LINES: list[tuple[str, str, str]] = [
    ("Revenue", "revenue", "annualized_revenue"),
    ("Cost of Goods Sold", "cost_of_goods_sold", "annualized_cost_of_goods_sold"),
    ("Gross Profit", "gross_profit", "annualized_gross_profit"),
    ("SG&A Expenses", "selling_and_admin_expenses", "annualized_selling_and_admin_expenses"),
    ("Operating Income", "operating_income", "annualized_operating_income"),
    ("Non-operating Income", "non_operating_income", "annualized_non_operating_income"),
    ("Non-operating Expense", "non_operating_expense", "annualized_non_operating_expense"),
    ("Pre-tax Income (before adjustment)", "net_income_before_adjustment", "annualized_net_income_before_adjustment"),
    # Flat in both columns
    ("Additional Deductible Expenses", "additional_deductible_expenses", "additional_deductible_expenses"),
    ("Pre-tax Income (after adjustment)", "net_income_after_adjustment", "annualized_net_income_after_adjustment"),
]

TAX_LINES: list[tuple[str, str]] = [
    ("Basic Deduction", "basic_deduction"),
    ("Taxable Income (before adjustment)", "taxable_income_before"),
    ("Taxable Income (after adjustment)", "taxable_income_after"),
    ("Base Tax (before adjustment)", "base_tax_before"),
    ("Base Tax (after adjustment)", "base_tax_after"),
    ("Tax Credit", "tax_credit_amount"),
    ("Tax after Credit", "tax_after_credit"),
    ("Final Tax (before adjustment)", "final_tax_before"),
    ("Final Tax (after adjustment)", "final_tax_after"),
    ("Tax Savings", "tax_savings"),
    ("Industry Profit Margin", "profit_margin"),
    ("Industry Benchmark Profit", "safe_profit"),
]


def _value(result: CalculationResult, field: str) -> float:
    return getattr(result, field) or 0.0


def _create_settings_table(report: EstimateReport) -> pd.DataFrame:
    """Create settings summary table."""
    s = report.settings
    data = [
        ["Company Name", s.company_name],
        ["Entity Type", s.entity_type.value if s.entity_type else ""],
        ["Settlement Month", s.settlement_month or ""],
        ["Tax Credit", s.tax_credit.type.value if s.tax_credit.type else ""],
        ["Credit Rate", report.credit_rate],
        ["Local Tax Included", "yes" if s.include_local_tax else "no"],
        ["Industry", s.industry],
        ["Years", ", ".join(map(str, report.years))],
    ]

    return pd.DataFrame(data, columns=["Item", "Value"])


def _create_detail_table(report: EstimateReport) -> pd.DataFrame:
    """Create period vs 12-month income statement for the detail year."""
    detail = report.detail
    months = report.settings.settlement_month or 0
    rows = []
    for label, period_field, annual_field in DETAIL_LINES:
        rows.append({
            "Item": label,
            f"Period ({months} months)": _value(detail, period_field),
            "Annualized (12 months)": _value(detail, annual_field),
        })
    return pd.DataFrame(rows)


def _create_tax_table(report: EstimateReport) -> pd.DataFrame:
    """Create per-year tax computation table."""
    rows = []
    for label, field in TAX_LINES:
        row: dict[str, object] = {"Item": label}
        for period in report.periods:
            row[str(period.year)] = _value(period.result, field)
        rows.append(row)
    return pd.DataFrame(rows)


def _create_comparison_table(report: EstimateReport) -> pd.DataFrame:
    """Create annualized key metrics by year."""
    rows = []
    for c in report.comparison:
        rows.append({
            "Year": c.year,
            "Annualized Revenue": c.annualized_revenue,
            "Operating Income": c.annualized_operating_income,
            "Net Income (after adjustment)": c.annualized_net_income_after_adjustment,
        })
    return pd.DataFrame(rows)


def _create_brackets_table(report: EstimateReport) -> pd.DataFrame:
    """Create the bracket schedule used for this report."""
    if report.settings.entity_type == EntityType.INDIVIDUAL:
        brackets = INDIVIDUAL_TAX_BRACKETS
    else:
        brackets = CORPORATE_TAX_BRACKETS
    rows = []
    for b in brackets:
        rows.append({
            "Up To": "unbounded" if b.limit == float("inf") else b.limit,
            "Rate": b.rate,
            "Deduction": b.deduction,
        })
    if report.settings.entity_type == EntityType.INDIVIDUAL:
        rows.append({"Up To": "Basic deduction", "Rate": "", "Deduction": BASIC_DEDUCTION})
    return pd.DataFrame(rows)


def _create_benchmarks_table() -> pd.DataFrame:
    """Create the industry benchmark table."""
    rows = []
    for key, m in INDUSTRY_PROFIT_MARGINS.items():
        rows.append({
            "Industry": key,
            "Label": m.label,
            "Individual Margin": m.individual,
            "Corporate Margin": m.corporate,
        })
    return pd.DataFrame(rows)


def format_tables(report: EstimateReport) -> dict[str, pd.DataFrame]:
    """
    Convert an estimate report to display-ready DataFrames.

    Returns:
        Dict mapping table name to DataFrame
    """
    return {
        "1_Settings": _create_settings_table(report),
        "2_Detail": _create_detail_table(report),
        "3_Tax": _create_tax_table(report),
        "4_Comparison": _create_comparison_table(report),
        "5_Tax_Brackets": _create_brackets_table(report),
        "6_Industry_Benchmarks": _create_benchmarks_table(),
    }


def _is_rate_label(label: str) -> bool:
    return "Rate" in label or "Margin" in label


def _style_xlsx_sheet(ws, df: pd.DataFrame):
    """Apply styling to Excel worksheet."""
    # Header style
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="2E75B6", end_color="2E75B6", fill_type="solid")
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    # Style header row
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin_border
        cell.alignment = Alignment(horizontal="center")

    # Style data cells; rates and margins as percent, amounts as whole won
    rate_cols = {idx for idx, col in enumerate(df.columns, start=1) if _is_rate_label(str(col))}
    for row in ws.iter_rows(min_row=2, max_row=ws.max_row, max_col=ws.max_column):
        rate_row = _is_rate_label(str(row[0].value))
        for cell in row:
            cell.border = thin_border
            if isinstance(cell.value, (int, float)):
                if rate_row or cell.column in rate_cols:
                    cell.number_format = "0.00%"
                else:
                    cell.number_format = "#,##0"

    # Auto-adjust column widths
    for column in ws.columns:
        max_length = 0
        column_letter = column[0].column_letter
        for cell in column:
            if cell.value is not None and len(str(cell.value)) > max_length:
                max_length = len(str(cell.value))
        ws.column_dimensions[column_letter].width = min(max_length + 2, 40)


def export_xlsx(report: EstimateReport, path: str | Path) -> None:
    """
    Export an estimate report to a styled Excel workbook.

    Args:
        report: Estimate report
        path: Output .xlsx path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    wb.remove(wb.active)

    for name, df in format_tables(report).items():
        ws = wb.create_sheet(name)
        for row in dataframe_to_rows(df, index=False, header=True):
            ws.append(row)
        _style_xlsx_sheet(ws, df)

    notes = wb.create_sheet("Disclaimer")
    notes["A1"] = "Disclaimer"
    notes["A1"].font = Font(bold=True)
    notes["A3"] = DISCLAIMER
    notes["A3"].alignment = Alignment(wrap_text=True, vertical="top")
    notes.column_dimensions["A"].width = 100
    if report.summary:
        notes["A5"] = "Summary"
        notes["A5"].font = Font(bold=True)
        notes["A6"] = report.summary
        notes["A6"].alignment = Alignment(wrap_text=True, vertical="top")

    wb.save(path)


def export_csv(report: EstimateReport, output_dir: str | Path) -> list[Path]:
    """
    Export estimate tables to CSV files.

    Args:
        report: Estimate report
        output_dir: Directory for CSV files

    Returns:
        List of created file paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    created_files = []
    for name, df in format_tables(report).items():
        file_path = output_dir / f"{name}.csv"
        df.to_csv(file_path, index=False)
        created_files.append(file_path)

    return created_files
