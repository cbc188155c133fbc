"""
Unit Tests for Case File Readers
"""
import json

import pytest
from tax_engine.models import EntityType, TaxCreditType
from tax_engine.tables import DEFAULT_YEARS
from tax_io.readers import parse_input_dict, read_input_file, read_json, read_yaml


class TestParseInputDict:
    def test_full_case(self):
        case = parse_input_dict({
            "company_name": "ACME",
            "entity_type": "corporate",
            "settlement_month": 9,
            "include_local_tax": True,
            "tax_credit": {"type": "special", "rate": 0.15},
            "industry": "services",
            "periods": {
                "2025": {"revenue": "1,000,000"},
                "2024": {"revenue": 500},
            },
        })

        s = case.settings
        assert s.company_name == "ACME"
        assert s.entity_type == EntityType.CORPORATE
        assert s.settlement_month == 9
        assert s.include_local_tax
        assert s.tax_credit.type == TaxCreditType.SPECIAL
        assert s.tax_credit.rate == 0.15
        assert s.industry == "services"
        assert case.years == [2023, 2024, 2025]
        assert not case.periods[2023].has_values
        assert case.periods[2025].revenue == 1_000_000

    def test_blank_selections_are_unset(self):
        case = parse_input_dict({"entity_type": "", "tax_credit": None})

        assert case.settings.entity_type is None
        assert case.settings.settlement_month is None
        assert case.settings.tax_credit.type is None
        assert case.settings.industry == "wholesale_retail"

    def test_bare_credit_type(self):
        case = parse_input_dict({"tax_credit": "none"})
        assert case.settings.tax_credit.type == TaxCreditType.NONE

    def test_missing_periods_default_to_blank_years(self):
        case = parse_input_dict({})

        assert case.years == list(DEFAULT_YEARS)
        assert not any(p.has_values for p in case.periods.values())

    def test_null_period(self):
        case = parse_input_dict({"periods": {2025: None}})
        assert not case.periods[2025].has_values

    def test_invalid_entity_type(self):
        with pytest.raises(ValueError):
            parse_input_dict({"entity_type": "partnership"})

    @pytest.mark.parametrize("raw, expected", [
        ("false", False),
        ("no", False),
        ("0", False),
        ("true", True),
        (True, True),
        (None, False),
    ])
    def test_local_tax_flag_strings(self, raw, expected):
        case = parse_input_dict({
            "entity_type": "individual",
            "settlement_month": 12,
            "include_local_tax": raw,
            "tax_credit": "none",
        })
        assert case.settings.include_local_tax is expected

    def test_partial_periods_keep_default_years(self):
        case = parse_input_dict({"periods": {2025: {"revenue": 1000}}})

        assert case.years == list(DEFAULT_YEARS)
        assert case.periods[2025].revenue == 1000
        assert not case.periods[2023].has_values

    def test_extra_year_is_added(self):
        case = parse_input_dict({"periods": {2026: {"revenue": 1}}})
        assert case.years == [*DEFAULT_YEARS, 2026]


class TestReadFiles:
    def test_read_yaml(self, tmp_path):
        path = tmp_path / "case.yaml"
        path.write_text(
            "entity_type: individual\n"
            "settlement_month: 12\n"
            "tax_credit:\n"
            "  type: none\n"
            "periods:\n"
            "  2025:\n"
            "    revenue: 100000000\n"
            "    additional_deductible_expenses: ''\n",
            encoding="utf-8",
        )
        case = read_yaml(path)

        assert case.settings.entity_type == EntityType.INDIVIDUAL
        assert case.periods[2025].revenue == 100_000_000
        assert "additional_deductible_expenses" in case.periods[2025].blank_fields

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")

        assert read_yaml(path).years == list(DEFAULT_YEARS)

    def test_read_json(self, tmp_path):
        path = tmp_path / "case.json"
        path.write_text(json.dumps({"entity_type": "corporate", "periods": {"2024": {"revenue": "12,000"}}}))
        case = read_json(path)

        assert case.periods[2024].revenue == 12_000

    def test_null_json(self, tmp_path):
        path = tmp_path / "null.json"
        path.write_text("null")

        assert read_json(path).years == list(DEFAULT_YEARS)

    def test_auto_detect(self, tmp_path):
        path = tmp_path / "case.JSON"
        path.write_text("{}")
        assert read_input_file(path).years == list(DEFAULT_YEARS)

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "case.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported file format"):
            read_input_file(path)
