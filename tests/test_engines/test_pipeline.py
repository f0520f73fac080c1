"""Tests for the scenario analysis pipeline."""

from datetime import date
from decimal import Decimal

from taxplanner.engines.pipeline import (
    CalculationUnavailable,
    ScenarioAnalysis,
    analyze_scenario,
    compare_results,
    safe_analyze,
)
from taxplanner.engines.state_tax import StateTaxCalculator
from taxplanner.models.enums import ConversionStrategy, FilingStatus
from taxplanner.models.scenario import ScenarioInput
from taxplanner.models.traps import TrapContext

AS_OF = date(2025, 12, 31)


class TestAnalyzeScenario:
    def test_full_pipeline(self, repository):
        scenario = ScenarioInput(tax_year=2023, wages=Decimal("111225"))
        analysis = analyze_scenario(scenario, repository, as_of=AS_OF)
        assert analysis.result.total_tax > 0
        assert len(analysis.warnings) == 2
        assert len(analysis.strategies) == 2
        assert analysis.total_potential_savings == Decimal("977.20")

    def test_context_passed_through(self, repository):
        scenario = ScenarioInput(tax_year=2023, wages=Decimal("150000"))
        analysis = analyze_scenario(
            scenario, repository, context=TrapContext(medicare_enrollees=0), as_of=AS_OF
        )
        assert analysis.warnings == []
        assert analysis.total_potential_savings == Decimal("0")

    def test_proposed_amount_passed_through(self, repository):
        scenario = ScenarioInput(tax_year=2023, wages=Decimal("150000"))
        analysis = analyze_scenario(
            scenario, repository, proposed_adjustable_amount=Decimal("5000"), as_of=AS_OF
        )
        assert len(analysis.warnings) == 1
        assert analysis.strategies == []

    def test_rerun_gives_same_analysis(self, repository):
        scenario = ScenarioInput(
            scenario_id="fixed", tax_year=2024, wages=Decimal("61000")
        )
        first = analyze_scenario(scenario, repository, as_of=AS_OF)
        second = analyze_scenario(scenario, repository, as_of=AS_OF)
        assert first == second

    def test_bracket_fill_conversion_is_analyzed(self, repository):
        scenario = ScenarioInput(tax_year=2024, wages=Decimal("30000"))
        analysis = analyze_scenario(
            scenario, repository, as_of=AS_OF,
            conversion_strategy=ConversionStrategy.BRACKET_12,
        )
        assert analysis.roth_conversion == Decimal("31750")
        assert analysis.adjustable_amount == Decimal("31750")
        assert analysis.result.ordinary_taxable_income == Decimal("47150")

    def test_fixed_conversion_caps_strategies(self, repository):
        scenario = ScenarioInput(
            tax_year=2023, wages=Decimal("140000"), roth_conversion=Decimal("10000")
        )
        analysis = analyze_scenario(
            scenario, repository, as_of=AS_OF,
            conversion_strategy=ConversionStrategy.FIXED,
        )
        assert analysis.adjustable_amount == Decimal("10000")
        assert analysis.warnings[0].source_rule_id == "irmaa-2023-single-2"
        # the IRMAA cliff needs 27,001 of the 10,000 conversion
        assert analysis.strategies == []

    def test_explicit_amount_wins_over_conversion(self, repository):
        scenario = ScenarioInput(
            tax_year=2023, wages=Decimal("140000"), roth_conversion=Decimal("10000")
        )
        analysis = analyze_scenario(
            scenario, repository, proposed_adjustable_amount=Decimal("30000"),
            as_of=AS_OF, conversion_strategy=ConversionStrategy.FIXED,
        )
        assert analysis.adjustable_amount == Decimal("30000")
        assert analysis.strategies[0].suggested_adjustment_amount == Decimal("27001")


class TestSafeAnalyze:
    def test_success(self, repository):
        outcome = safe_analyze(ScenarioInput(tax_year=2024, wages=Decimal("50000")), repository, as_of=AS_OF)
        assert isinstance(outcome, ScenarioAnalysis)

    def test_unknown_year_becomes_unavailable(self, repository):
        scenario = ScenarioInput(scenario_id="s-1", tax_year=1999, wages=Decimal("50000"))
        outcome = safe_analyze(scenario, repository, as_of=AS_OF)
        assert isinstance(outcome, CalculationUnavailable)
        assert outcome.scenario_id == "s-1"
        assert outcome.error_type == "DataNotFoundError"
        assert "1999" in outcome.message

    def test_invalid_input_becomes_unavailable(self, repository):
        scenario = ScenarioInput(tax_year=2024, use_itemized_deduction=True)
        outcome = safe_analyze(scenario, repository, as_of=AS_OF)
        assert isinstance(outcome, CalculationUnavailable)
        assert outcome.error_type == "InvalidInputError"


class TestCompareResults:
    def test_roth_conversion_comparison(self, calculator, retiree_scenario):
        without = retiree_scenario.model_copy(update={"roth_conversion": Decimal("0")})
        before = calculator.calculate(without)
        after = calculator.calculate(retiree_scenario)
        comparison = compare_results(before, after)
        assert comparison.tax_delta == after.total_tax - before.total_tax
        assert comparison.magi_delta > Decimal("60000")
        assert comparison.bracket_changed
        assert comparison.marginal_rate_before == Decimal("0.12")
        assert comparison.marginal_rate_after == Decimal("0.22")

    def test_same_result(self, calculator, single_2023_scenario):
        result = calculator.calculate(single_2023_scenario)
        comparison = compare_results(result, result)
        assert comparison.tax_delta == 0
        assert not comparison.bracket_changed


class TestStateTaxCalculator:
    def test_additional_income_is_stacked(self, repository):
        state = StateTaxCalculator(repository)
        base = state.compute("CA", 2024, FilingStatus.SINGLE, Decimal("100000"), as_of=AS_OF)
        combined = state.compute("CA", 2024, FilingStatus.SINGLE, Decimal("140000"), as_of=AS_OF)
        increment = state.compute(
            "CA", 2024, FilingStatus.SINGLE, Decimal("100000"), as_of=AS_OF,
            additional_income=Decimal("40000"),
        )
        assert increment == combined - base

    def test_missing_state_deduction_is_zero(self, repository):
        state = StateTaxCalculator(repository)
        assert state.taxable_income("IL", 2024, FilingStatus.SINGLE, Decimal("50000"), AS_OF) == Decimal("50000")

    def test_state_unavailable_for_year(self, repository, caplog):
        state = StateTaxCalculator(repository)
        assert state.compute("CA", 2022, FilingStatus.SINGLE, Decimal("50000"), as_of=AS_OF) is None
        assert "No CA tax table" in caplog.text
