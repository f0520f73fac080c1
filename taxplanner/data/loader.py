"""JSON dataset ingestion.

A dataset file appends versions, tables and rules to a TaxDataRepository:

    {
      "versions": [{"id": "2026.1.0", "year": 2026, "version": "1.0",
                    "effective_date": "2025-10-09", "is_projected": true}],
      "bracket_tables": [{"version_id": "2026.1.0", "year": 2026,
                          "filing_status": "SINGLE", "income_type": "ORDINARY",
                          "brackets": [[12400, "0.10"], [null, "0.37"]]}],
      "standard_deductions": [...],
      "threshold_rules": [...],
      "poverty_guidelines": [...],
      "amt_exemptions": [...]
    }

Filing statuses accept the short aliases (SINGLE, MFJ, MFS, HOH, QSS).
Bracket tables take either ``entries`` ({min, max, rate}) or ``brackets``
([upper_bound, rate] pairs, null for the top bracket).
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, model_validator

from taxplanner.data.repository import TaxDataRepository
from taxplanner.exceptions import DataValidationError
from taxplanner.models.enums import parse_filing_status
from taxplanner.models.tax_data import (
    AmtExemption,
    BracketTable,
    DeductionTable,
    PovertyGuideline,
    TaxDataVersion,
    ThresholdRule,
)

logger = logging.getLogger(__name__)


class Dataset(BaseModel):
    versions: list[TaxDataVersion] = []
    bracket_tables: list[BracketTable] = []
    standard_deductions: list[DeductionTable] = []
    threshold_rules: list[ThresholdRule] = []
    poverty_guidelines: list[PovertyGuideline] = []
    amt_exemptions: list[AmtExemption] = []

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("bracket_tables", "standard_deductions", "threshold_rules", "amt_exemptions"):
            data[key] = [_normalize_record(record) for record in data.get(key, [])]
        return data


def _normalize_record(record: Any) -> Any:
    if not isinstance(record, dict):
        return record
    record = dict(record)
    status = record.get("filing_status")
    if isinstance(status, str):
        try:
            record["filing_status"] = parse_filing_status(status)
        except ValueError:
            pass  # left for pydantic to report
    if "brackets" in record and "entries" not in record:
        entries = []
        lower = Decimal("0")
        for upper, rate in record.pop("brackets"):
            upper = Decimal(str(upper)) if upper is not None else None
            entries.append({"min": lower, "max": upper, "rate": Decimal(str(rate))})
            if upper is not None:
                lower = upper
        record["entries"] = entries
    return record


def parse_dataset(source: Path | str | dict) -> Dataset:
    """Validate a dataset from a file path or an already-decoded dict."""
    if isinstance(source, dict):
        raw = source
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Dataset not found: {path}")
        try:
            raw = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise DataValidationError("dataset", f"{path} is not valid JSON: {exc}") from exc

    try:
        return Dataset.model_validate(raw)
    except ValidationError as exc:
        raise DataValidationError("dataset", str(exc)) from exc


def load_dataset(
    source: Path | str | dict,
    repository: TaxDataRepository | None = None,
) -> TaxDataRepository:
    """Append a dataset to ``repository`` (a new empty one if omitted)."""
    dataset = parse_dataset(source)
    if repository is None:
        repository = TaxDataRepository()

    for version in dataset.versions:
        repository.add_version(version)
    for table in dataset.bracket_tables:
        repository.add_bracket_table(table)
    for deduction in dataset.standard_deductions:
        repository.add_standard_deduction(deduction)
    for rule in dataset.threshold_rules:
        repository.add_threshold_rule(rule)
    for guideline in dataset.poverty_guidelines:
        repository.add_poverty_guideline(guideline)
    for exemption in dataset.amt_exemptions:
        repository.add_amt_exemption(exemption)

    logger.info(
        "Loaded dataset: %d version(s), %d bracket table(s), %d rule(s)",
        len(dataset.versions), len(dataset.bracket_tables), len(dataset.threshold_rules),
    )
    return repository


def build_repository(data_path: Path | None = None) -> TaxDataRepository:
    """Bundled reference data, extended by an optional dataset file."""
    repository = TaxDataRepository.with_reference_data()
    if data_path is not None:
        load_dataset(data_path, repository)
    return repository
