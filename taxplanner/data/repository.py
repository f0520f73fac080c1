"""Versioned, append-only store of tax reference data."""

import bisect
import logging
from collections.abc import Callable, Iterator
from datetime import date
from decimal import Decimal
from typing import TypeVar

from taxplanner.exceptions import (
    DataNotFoundError,
    DataValidationError,
    MissingBracketDataError,
)
from taxplanner.models.enums import FilingStatus, IncomeType, ThresholdCategory
from taxplanner.models.tax_data import (
    AmtExemption,
    BracketTable,
    DeductionTable,
    PovertyGuideline,
    TaxDataVersion,
    ThresholdRule,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaxYearRegistry:
    """The set of tax years offered to callers.

    Never empty once populated, and never holds the same year twice.
    """

    def __init__(self, years: list[int] | None = None) -> None:
        self._years: list[int] = []
        for year in years or []:
            self.add(year)

    def add(self, year: int) -> None:
        if year in self._years:
            raise DataValidationError("year", f"Tax year {year} is already registered")
        bisect.insort(self._years, year)

    def remove(self, year: int) -> None:
        if year not in self._years:
            raise DataValidationError("year", f"Tax year {year} is not registered")
        if len(self._years) == 1:
            raise DataValidationError("year", "Cannot remove the last registered tax year")
        self._years.remove(year)

    @property
    def years(self) -> list[int]:
        return list(self._years)

    @property
    def latest(self) -> int | None:
        return self._years[-1] if self._years else None

    def __contains__(self, year: object) -> bool:
        return year in self._years

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._years))

    def __len__(self) -> int:
        return len(self._years)


class TaxDataRepository:
    """In-memory tax data keyed by version.

    Reads never mutate. Lookups resolve the version in effect on ``as_of``
    and fall back through earlier versions of the same year, so a correction
    only needs to carry the records it changes.
    """

    def __init__(self) -> None:
        self.registry = TaxYearRegistry()
        self._versions: dict[int, list[TaxDataVersion]] = {}
        self._version_index: dict[str, TaxDataVersion] = {}
        self._brackets: dict[str, dict[tuple, BracketTable]] = {}
        self._deductions: dict[str, dict[tuple, DeductionTable]] = {}
        self._rules: dict[str, dict[str, ThresholdRule]] = {}
        self._poverty: dict[str, PovertyGuideline] = {}
        self._amt: dict[str, dict[FilingStatus, AmtExemption]] = {}

    @classmethod
    def with_reference_data(cls) -> "TaxDataRepository":
        """Repository seeded with the bundled 2022-2025 reference data."""
        from taxplanner.data.reference import seed_reference_data

        repository = cls()
        seed_reference_data(repository)
        return repository

    # ------------------------------------------------------------------
    # Append surface (ingestion boundary)
    # ------------------------------------------------------------------

    def add_version(self, version: TaxDataVersion) -> None:
        if version.id in self._version_index:
            raise DataValidationError(
                "version.id", f"Version {version.id} already exists and cannot be replaced"
            )
        existing = self._versions.setdefault(version.year, [])
        if any(v.effective_date == version.effective_date for v in existing):
            raise DataValidationError(
                "version.effective_date",
                f"Year {version.year} already has a version effective {version.effective_date}",
            )
        existing.append(version)
        existing.sort(key=lambda v: v.effective_date)
        self._version_index[version.id] = version
        if version.year not in self.registry:
            self.registry.add(version.year)
        logger.debug("Added tax data version %s for %d", version.id, version.year)

    def add_bracket_table(self, table: BracketTable) -> None:
        self._check_version(table.version_id, table.year)
        tables = self._brackets.setdefault(table.version_id, {})
        if table.key in tables:
            raise DataValidationError(
                "bracket_table",
                f"Duplicate {table.jurisdiction} {table.income_type} table for "
                f"{table.year} ({table.filing_status}) in version {table.version_id}",
            )
        tables[table.key] = table

    def add_standard_deduction(self, deduction: DeductionTable) -> None:
        self._check_version(deduction.version_id, deduction.year)
        key = (deduction.year, deduction.filing_status, deduction.jurisdiction)
        deductions = self._deductions.setdefault(deduction.version_id, {})
        if key in deductions:
            raise DataValidationError(
                "standard_deduction",
                f"Duplicate standard deduction for {key} in version {deduction.version_id}",
            )
        deductions[key] = deduction

    def add_threshold_rule(self, rule: ThresholdRule) -> None:
        self._check_version(rule.version_id, rule.year)
        rules = self._rules.setdefault(rule.version_id, {})
        if rule.id in rules:
            raise DataValidationError(
                "threshold_rule", f"Duplicate rule {rule.id} in version {rule.version_id}"
            )
        rules[rule.id] = rule

    def add_poverty_guideline(self, guideline: PovertyGuideline) -> None:
        self._check_version(guideline.version_id, guideline.year)
        if guideline.version_id in self._poverty:
            raise DataValidationError(
                "poverty_guideline", f"Duplicate guideline in version {guideline.version_id}"
            )
        self._poverty[guideline.version_id] = guideline

    def add_amt_exemption(self, exemption: AmtExemption) -> None:
        self._check_version(exemption.version_id, exemption.year)
        exemptions = self._amt.setdefault(exemption.version_id, {})
        if exemption.filing_status in exemptions:
            raise DataValidationError(
                "amt_exemption",
                f"Duplicate AMT exemption for {exemption.filing_status} "
                f"in version {exemption.version_id}",
            )
        exemptions[exemption.filing_status] = exemption

    def _check_version(self, version_id: str, year: int) -> None:
        version = self._version_index.get(version_id)
        if version is None:
            raise DataValidationError("version_id", f"Unknown version {version_id}")
        if version.year != year:
            raise DataValidationError(
                "year", f"Record for {year} cannot belong to version {version_id} ({version.year})"
            )

    # ------------------------------------------------------------------
    # Version resolution
    # ------------------------------------------------------------------

    @property
    def available_years(self) -> list[int]:
        return self.registry.years

    def versions(self, year: int) -> list[TaxDataVersion]:
        return list(self._versions.get(year, []))

    def resolve_version(self, year: int, as_of: date | None = None) -> TaxDataVersion:
        """Latest version effective on or before ``as_of`` (default today).

        When every version of the year is still in the future, the earliest
        one is returned and the result should be treated as projected.
        """
        versions = self._versions.get(year)
        if not versions:
            raise DataNotFoundError(year, as_of)
        as_of = as_of or date.today()

        eligible = [v for v in versions if v.effective_date <= as_of]
        if eligible:
            version = eligible[-1]
            logger.debug("Resolved %d data to version %s (as of %s)", year, version.id, as_of)
            return version

        logger.info(
            "No %d version effective by %s; falling back to %s",
            year, as_of, versions[0].id,
        )
        return versions[0]

    def is_fallback(self, version: TaxDataVersion, as_of: date | None = None) -> bool:
        """True when ``version`` was not yet effective on ``as_of``."""
        return version.effective_date > (as_of or date.today())

    def _lineage(self, year: int, as_of: date | None) -> list[TaxDataVersion]:
        """Resolved version first, then earlier versions of the same year."""
        resolved = self.resolve_version(year, as_of)
        versions = self._versions[year]
        return list(reversed(versions[: versions.index(resolved) + 1]))

    def _first(
        self, year: int, as_of: date | None, getter: Callable[[str], T | None]
    ) -> T | None:
        for version in self._lineage(year, as_of):
            found = getter(version.id)
            if found is not None:
                return found
        return None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_bracket_table(
        self,
        year: int,
        filing_status: FilingStatus,
        income_type: IncomeType,
        as_of: date | None = None,
        jurisdiction: str = "US",
    ) -> BracketTable:
        key = (year, filing_status, income_type, jurisdiction)
        table = self._first(year, as_of, lambda vid: self._brackets.get(vid, {}).get(key))
        if table is None:
            raise MissingBracketDataError(year, filing_status, income_type, jurisdiction)
        return table

    def get_standard_deduction(
        self,
        year: int,
        filing_status: FilingStatus,
        as_of: date | None = None,
        jurisdiction: str = "US",
    ) -> Decimal:
        key = (year, filing_status, jurisdiction)
        deduction = self._first(year, as_of, lambda vid: self._deductions.get(vid, {}).get(key))
        if deduction is None:
            raise MissingBracketDataError(year, filing_status, "STANDARD_DEDUCTION", jurisdiction)
        return deduction.amount

    def get_threshold_rules(
        self,
        year: int,
        filing_status: FilingStatus,
        category: ThresholdCategory | None = None,
        as_of: date | None = None,
    ) -> list[ThresholdRule]:
        """Stored rules for a year and status, ordered by threshold.

        Each category comes whole from the most recent version that defines it.
        """
        categories = [category] if category else list(ThresholdCategory)
        rules: list[ThresholdRule] = []
        for cat in categories:
            found = self._first(
                year,
                as_of,
                lambda vid, cat=cat: [
                    r for r in self._rules.get(vid, {}).values()
                    if r.category == cat and r.filing_status == filing_status
                ] or None,
            )
            rules.extend(found or [])
        return sorted(rules, key=lambda r: (r.category, r.threshold_value, r.tier))

    def get_poverty_guideline(
        self, year: int, as_of: date | None = None
    ) -> PovertyGuideline | None:
        return self._first(year, as_of, self._poverty.get)

    def get_amt_exemption(
        self, year: int, filing_status: FilingStatus, as_of: date | None = None
    ) -> AmtExemption:
        exemption = self._first(
            year, as_of, lambda vid: self._amt.get(vid, {}).get(filing_status)
        )
        if exemption is None:
            raise MissingBracketDataError(year, filing_status, "AMT_EXEMPTION")
        return exemption

    def supported_filing_statuses(
        self, year: int, as_of: date | None = None
    ) -> list[FilingStatus]:
        """Statuses with a federal ordinary bracket table for the year."""
        supported: list[FilingStatus] = []
        for status in FilingStatus:
            key = (year, status, IncomeType.ORDINARY, "US")
            if self._first(year, as_of, lambda vid: self._brackets.get(vid, {}).get(key)):
                supported.append(status)
        return supported

    def jurisdictions(self, year: int, as_of: date | None = None) -> list[str]:
        """State codes with at least one STATE table in the year's lineage."""
        found: set[str] = set()
        for version in self._lineage(year, as_of):
            for table in self._brackets.get(version.id, {}).values():
                if table.income_type == IncomeType.STATE:
                    found.add(table.jurisdiction)
        return sorted(found)
