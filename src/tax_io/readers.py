"""
Tax I/O Readers

YAML and JSON case file parsing.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from tax_engine.models import (
    EntityType,
    EstimateCase,
    EstimateSettings,
    FinancialPeriodInput,
    TaxCreditInputs,
    TaxCreditType,
)
from tax_engine.tables import DEFAULT_YEARS


def _convert_int_keys(data: dict) -> dict:
    """Convert string keys to int for year-indexed dicts."""
    if not isinstance(data, dict):
        return data

    result = {}
    for key, value in data.items():
        # Try to convert key to int if it looks like a year
        try:
            int_key = int(key)
            result[int_key] = value
        except (ValueError, TypeError):
            result[key] = value

    return result


def _optional_enum(enum_cls, value):
    """Map blank selections to None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return enum_cls(value)


def _parse_tax_credit(data: Any) -> TaxCreditInputs:
    """Parse tax credit section (mapping or bare type string)."""
    if data is None:
        return TaxCreditInputs()
    if isinstance(data, str):
        return TaxCreditInputs(type=_optional_enum(TaxCreditType, data))
    return TaxCreditInputs(
        type=_optional_enum(TaxCreditType, data.get("type")),
        rate=data.get("rate") or 0.0,
    )


def _parse_settings(data: dict) -> EstimateSettings:
    """Parse top-level settings."""
    kwargs = dict(
        company_name=data.get("company_name") or "",
        entity_type=_optional_enum(EntityType, data.get("entity_type")),
        settlement_month=data.get("settlement_month"),
        include_local_tax=data.get("include_local_tax") or False,
        tax_credit=_parse_tax_credit(data.get("tax_credit")),
    )
    if data.get("industry"):
        kwargs["industry"] = data["industry"]
    return EstimateSettings(**kwargs)


def _parse_periods(data: dict | None) -> dict[int, FinancialPeriodInput]:
    """Parse periods section; default years missing from it are blank periods."""
    raw = _convert_int_keys(data) if data else {}
    periods = {year: FinancialPeriodInput() for year in DEFAULT_YEARS}
    for year, values in raw.items():
        periods[year] = FinancialPeriodInput.model_validate(values or {})
    return periods


def parse_input_dict(data: dict[str, Any]) -> EstimateCase:
    """
    Parse a dictionary of inputs into an EstimateCase model.

    This is the core parsing function used by both YAML and JSON readers.

    Args:
        data: Raw input dictionary

    Returns:
        EstimateCase model
    """
    return EstimateCase(
        settings=_parse_settings(data),
        periods=_parse_periods(data.get("periods")),
    )


def read_yaml(path: str | Path) -> EstimateCase:
    """
    Read a case from a YAML file.

    Args:
        path: Path to YAML file

    Returns:
        EstimateCase model
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_input_dict(data or {})


def read_json(path: str | Path) -> EstimateCase:
    """
    Read a case from a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        EstimateCase model
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return parse_input_dict(data or {})


def read_input_file(path: str | Path) -> EstimateCase:
    """
    Read a case from a file (auto-detects format).

    Args:
        path: Path to input file (YAML or JSON)

    Returns:
        EstimateCase model
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return read_yaml(path)
    elif suffix == ".json":
        return read_json(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")
