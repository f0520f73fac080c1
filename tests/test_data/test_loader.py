"""Tests for JSON dataset ingestion."""

import json
from datetime import date
from decimal import Decimal

import pytest

from taxplanner.data.loader import build_repository, load_dataset, parse_dataset
from taxplanner.exceptions import DataValidationError
from taxplanner.models.enums import FilingStatus, IncomeType, ThresholdCategory


@pytest.fixture
def dataset():
    return {
        "versions": [
            {
                "id": "2026.1.0",
                "year": 2026,
                "version": "1.0",
                "effective_date": "2025-10-09",
                "is_projected": True,
                "description": "Projected 2026 figures",
            }
        ],
        "bracket_tables": [
            {
                "version_id": "2026.1.0",
                "year": 2026,
                "filing_status": "SINGLE",
                "income_type": "ORDINARY",
                "brackets": [[12400, "0.10"], [50400, "0.12"], [None, "0.22"]],
            },
            {
                "version_id": "2026.1.0",
                "year": 2026,
                "filing_status": "MFJ",
                "income_type": "CAPITAL_GAINS",
                "entries": [
                    {"min": 0, "max": 98900, "rate": "0"},
                    {"min": 98900, "max": None, "rate": "0.15"},
                ],
            },
        ],
        "standard_deductions": [
            {"version_id": "2026.1.0", "year": 2026, "filing_status": "single", "amount": "16100"}
        ],
        "threshold_rules": [
            {
                "id": "irmaa-2026-single-1",
                "category": "irmaa",
                "year": 2026,
                "filing_status": "SINGLE",
                "threshold_value": "109000",
                "consequence_type": "cliff",
                "magnitude": "90",
                "version_id": "2026.1.0",
                "tier": 1,
            }
        ],
        "poverty_guidelines": [
            {"version_id": "2026.1.0", "year": 2026, "first_person": "16000", "additional_person": "5600"}
        ],
    }


class TestParseDataset:
    def test_brackets_shorthand_expanded(self, dataset):
        parsed = parse_dataset(dataset)
        entries = parsed.bracket_tables[0].entries
        assert [(e.min, e.max) for e in entries] == [
            (Decimal("0"), Decimal("12400")),
            (Decimal("12400"), Decimal("50400")),
            (Decimal("50400"), None),
        ]

    def test_filing_status_aliases(self, dataset):
        parsed = parse_dataset(dataset)
        assert parsed.bracket_tables[1].filing_status == FilingStatus.MFJ
        assert parsed.standard_deductions[0].filing_status == FilingStatus.SINGLE

    def test_invalid_schedule_rejected(self, dataset):
        dataset["bracket_tables"][0]["brackets"] = [[12400, "0.20"], [None, "0.10"]]
        with pytest.raises(DataValidationError):
            parse_dataset(dataset)

    def test_unknown_filing_status_rejected(self, dataset):
        dataset["standard_deductions"][0]["filing_status"] = "WIDOWER"
        with pytest.raises(DataValidationError):
            parse_dataset(dataset)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_dataset(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(DataValidationError, match="not valid JSON"):
            parse_dataset(path)


class TestLoadDataset:
    def test_load_into_empty_repository(self, dataset):
        repository = load_dataset(dataset)
        assert repository.available_years == [2026]
        version = repository.resolve_version(2026, date(2026, 1, 1))
        assert version.is_projected
        assert repository.get_standard_deduction(2026, FilingStatus.SINGLE, as_of=date(2026, 1, 1)) == Decimal("16100")

    def test_load_from_file(self, dataset, tmp_path):
        path = tmp_path / "2026.json"
        path.write_text(json.dumps(dataset))
        repository = load_dataset(path)
        rules = repository.get_threshold_rules(
            2026, FilingStatus.SINGLE, ThresholdCategory.IRMAA, as_of=date(2026, 1, 1)
        )
        assert [r.id for r in rules] == ["irmaa-2026-single-1"]

    def test_build_repository_layers_on_reference_data(self, dataset, tmp_path):
        path = tmp_path / "2026.json"
        path.write_text(json.dumps(dataset))
        repository = build_repository(path)
        assert repository.available_years == [2022, 2023, 2024, 2025, 2026]
        table = repository.get_bracket_table(
            2026, FilingStatus.SINGLE, IncomeType.ORDINARY, as_of=date(2026, 1, 1)
        )
        assert table.entries[-1].rate == Decimal("0.22")

    def test_duplicate_version_against_reference(self, repository):
        payload = {
            "versions": [
                {"id": "2024.1.0", "year": 2024, "version": "1.0", "effective_date": "2023-12-01"}
            ]
        }
        with pytest.raises(DataValidationError):
            load_dataset(payload, repository)

    def test_correction_version_overrides(self, repository):
        payload = {
            "versions": [
                {
                    "id": "2024.1.1",
                    "year": 2024,
                    "version": "1.1",
                    "effective_date": "2024-08-01",
                    "is_correction": True,
                }
            ],
            "standard_deductions": [
                {"version_id": "2024.1.1", "year": 2024, "filing_status": "SINGLE", "amount": "14700"}
            ],
        }
        load_dataset(payload, repository)
        assert repository.get_standard_deduction(
            2024, FilingStatus.SINGLE, as_of=date(2024, 9, 1)
        ) == Decimal("14700")
        assert repository.get_standard_deduction(
            2024, FilingStatus.SINGLE, as_of=date(2024, 7, 1)
        ) == Decimal("14600")
