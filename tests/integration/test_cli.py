"""
Integration Tests: Command Line
"""
from pathlib import Path

from typer.testing import CliRunner
from tax_ui_cli.cli import app


EXAMPLES_DIR = Path(__file__).resolve().parents[2] / "examples"

runner = CliRunner()


def test_run_quiet():
    result = runner.invoke(app, ["run", str(EXAMPLES_DIR / "example_case.yaml"), "--quiet"])
    assert result.exit_code == 0


def test_run_displays_final_tax():
    result = runner.invoke(app, ["run", "--input", str(EXAMPLES_DIR / "example_case.yaml")])

    assert result.exit_code == 0
    assert "4,440,000" in result.output
    assert "Tax Estimate Complete" in result.output


def test_run_missing_file(tmp_path):
    result = runner.invoke(app, ["run", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "Input file not found" in result.output


def test_validate_rejects_missing_selection(tmp_path):
    path = tmp_path / "case.yaml"
    path.write_text("settlement_month: 12\nperiods:\n  2025:\n    revenue: 1000\n", encoding="utf-8")

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "entity type" in result.output


def test_validate_example():
    result = runner.invoke(app, ["validate", str(EXAMPLES_DIR / "corporate_case.json")])

    assert result.exit_code == 0
    assert "valid" in result.output


def test_export(tmp_path):
    output = tmp_path / "estimate.xlsx"
    result = runner.invoke(
        app,
        ["export", str(EXAMPLES_DIR / "corporate_case.json"), "--output", str(output), "--csv"],
    )

    assert result.exit_code == 0
    assert output.exists()
    assert (tmp_path / "csv" / "3_Tax.csv").exists()


def test_tables():
    result = runner.invoke(app, ["tables", "--entity", "individual"])

    assert result.exit_code == 0
    assert "Basic deduction" in result.output
    assert "Corporate Tax Brackets" not in result.output


def test_quick():
    result = runner.invoke(
        app,
        [
            "quick",
            "--entity", "individual",
            "--revenue", "100,000,000",
            "--cogs", "40000000",
            "--sga", "20000000",
            "--non-op-income", "1000000",
            "--non-op-expense", "500000",
            "--additional", "1000000",
        ],
    )

    assert result.exit_code == 0
    assert "4,440,000" in result.output


def test_quick_rejects_unsupported_month():
    result = runner.invoke(app, ["quick", "--entity", "corporate", "--months", "6", "--revenue", "1000"])

    assert result.exit_code == 1
    assert "not supported" in result.output
