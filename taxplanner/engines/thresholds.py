"""Threshold catalog.

Stored threshold rules (IRMAA, Social Security, ACA) plus breakpoint rules
derived from the very bracket tables the calculator uses, so the detector and
the calculator can never disagree on where a bracket ends.
"""

from collections import defaultdict
from datetime import date

from taxplanner.data.repository import TaxDataRepository
from taxplanner.exceptions import MissingBracketDataError
from taxplanner.models.enums import (
    ConsequenceType,
    FilingStatus,
    IncomeType,
    ThresholdCategory,
)
from taxplanner.models.tax_data import BracketTable, ThresholdRule

_BREAKPOINT_SOURCES = (
    (ThresholdCategory.BRACKET_BREAKPOINT, IncomeType.ORDINARY, "Ordinary income"),
    (ThresholdCategory.CAPITAL_GAINS_BREAKPOINT, IncomeType.CAPITAL_GAINS, "Capital gains"),
)


class ThresholdCatalog:
    """Read-only view of all threshold rules for a year and filing status."""

    def __init__(self, repository: TaxDataRepository) -> None:
        self.repository = repository

    def rules_for(
        self,
        year: int,
        filing_status: FilingStatus,
        as_of: date | None = None,
    ) -> list[ThresholdRule]:
        rules = self.repository.get_threshold_rules(year, filing_status, as_of=as_of)
        for category, _income_type, _label in _BREAKPOINT_SOURCES:
            rules.extend(self.breakpoint_rules(year, filing_status, category, as_of))
        return rules

    def rules_by_category(
        self,
        year: int,
        filing_status: FilingStatus,
        as_of: date | None = None,
    ) -> dict[ThresholdCategory, list[ThresholdRule]]:
        grouped: dict[ThresholdCategory, list[ThresholdRule]] = defaultdict(list)
        for rule in self.rules_for(year, filing_status, as_of):
            grouped[rule.category].append(rule)
        for rules in grouped.values():
            rules.sort(key=lambda r: (r.threshold_value, r.tier))
        return dict(grouped)

    def breakpoint_rules(
        self,
        year: int,
        filing_status: FilingStatus,
        category: ThresholdCategory,
        as_of: date | None = None,
    ) -> list[ThresholdRule]:
        """One rule per bracket boundary; magnitude is the rate above it.

        Missing tables yield no rules.
        """
        for source_category, income_type, label in _BREAKPOINT_SOURCES:
            if source_category == category:
                break
        else:
            raise ValueError(f"{category} is not a breakpoint category")

        try:
            table = self.repository.get_bracket_table(
                year, filing_status, income_type, as_of=as_of
            )
        except MissingBracketDataError:
            return []
        return _rules_from_table(table, category, label)


def _rules_from_table(
    table: BracketTable, category: ThresholdCategory, label: str
) -> list[ThresholdRule]:
    rules: list[ThresholdRule] = []
    prefix = "bracket" if category == ThresholdCategory.BRACKET_BREAKPOINT else "cg"
    for tier, (lower, upper) in enumerate(zip(table.entries, table.entries[1:]), 1):
        rules.append(ThresholdRule(
            id=f"{prefix}-{table.year}-{table.filing_status.value.lower()}-{tier}",
            category=category,
            year=table.year,
            filing_status=table.filing_status,
            threshold_value=lower.max,
            consequence_type=ConsequenceType.PHASE_IN,
            magnitude=upper.rate,
            description_template=(
                f"{label} above ${{threshold:,.0f}} is taxed at {_pct(upper.rate)}% "
                f"instead of {_pct(lower.rate)}%"
            ),
            version_id=table.version_id,
            tier=tier,
        ))
    return rules


def _pct(rate) -> str:
    return f"{(rate * 100).normalize():f}"
