"""Tests for the threshold catalog."""

from datetime import date
from decimal import Decimal

import pytest

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.thresholds import ThresholdCatalog
from taxplanner.models.enums import (
    ConsequenceType,
    FilingStatus,
    IncomeType,
    ThresholdCategory,
)

AS_OF = date(2025, 12, 31)


@pytest.fixture
def catalog(repository):
    return ThresholdCatalog(repository)


class TestBreakpointRules:
    def test_one_rule_per_boundary(self, catalog):
        rules = catalog.breakpoint_rules(
            2023, FilingStatus.SINGLE, ThresholdCategory.BRACKET_BREAKPOINT, AS_OF
        )
        assert len(rules) == 6
        assert rules[0].id == "bracket-2023-single-1"
        assert rules[0].threshold_value == Decimal("11000")
        assert rules[0].magnitude == Decimal("0.12")
        assert all(r.consequence_type == ConsequenceType.PHASE_IN for r in rules)

    def test_capital_gains_rules(self, catalog):
        rules = catalog.breakpoint_rules(
            2024, FilingStatus.MFJ, ThresholdCategory.CAPITAL_GAINS_BREAKPOINT, AS_OF
        )
        assert [r.threshold_value for r in rules] == [Decimal("94050"), Decimal("583750")]
        assert rules[0].id == "cg-2024-married_filing_jointly-1"

    def test_description(self, catalog):
        rule = catalog.breakpoint_rules(
            2023, FilingStatus.SINGLE, ThresholdCategory.BRACKET_BREAKPOINT, AS_OF
        )[1]
        assert rule.describe() == "Ordinary income above $44,725 is taxed at 22% instead of 12%"

    def test_zero_rate_description(self, catalog):
        rule = catalog.breakpoint_rules(
            2023, FilingStatus.SINGLE, ThresholdCategory.CAPITAL_GAINS_BREAKPOINT, AS_OF
        )[0]
        assert rule.describe() == "Capital gains above $44,625 is taxed at 15% instead of 0%"

    def test_missing_table_yields_nothing(self, make_version):
        repository = TaxDataRepository()
        repository.add_version(make_version("2030.1.0", 2030, date(2029, 11, 1)))
        rules = ThresholdCatalog(repository).breakpoint_rules(
            2030, FilingStatus.SINGLE, ThresholdCategory.BRACKET_BREAKPOINT, date(2030, 1, 1)
        )
        assert rules == []

    def test_stored_category_rejected(self, catalog):
        with pytest.raises(ValueError):
            catalog.breakpoint_rules(2023, FilingStatus.SINGLE, ThresholdCategory.IRMAA, AS_OF)


class TestCatalog:
    def test_all_categories_present(self, catalog):
        grouped = catalog.rules_by_category(2024, FilingStatus.SINGLE, AS_OF)
        assert set(grouped) == set(ThresholdCategory)

    def test_groups_sorted_by_threshold(self, catalog):
        grouped = catalog.rules_by_category(2024, FilingStatus.HOH, AS_OF)
        for rules in grouped.values():
            values = [r.threshold_value for r in rules]
            assert values == sorted(values)

    def test_rules_for_includes_derived_rules(self, catalog):
        ids = {r.id for r in catalog.rules_for(2025, FilingStatus.SINGLE, AS_OF)}
        assert "irmaa-2025-single-1" in ids
        assert "bracket-2025-single-1" in ids
        assert "cg-2025-single-1" in ids

    def test_breakpoints_match_calculator_tables(self, catalog, repository):
        table = repository.get_bracket_table(2025, FilingStatus.MFS, IncomeType.ORDINARY, as_of=AS_OF)
        rules = catalog.breakpoint_rules(
            2025, FilingStatus.MFS, ThresholdCategory.BRACKET_BREAKPOINT, AS_OF
        )
        assert [r.threshold_value for r in rules] == [e.max for e in table.entries[:-1]]
