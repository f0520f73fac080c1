"""Tests for Roth conversion sizing and required minimum distributions."""

from datetime import date
from decimal import Decimal

import pytest

from taxplanner.engines.conversions import (
    ConversionPlanner,
    required_minimum_distribution,
    with_required_distribution,
)
from taxplanner.exceptions import InvalidInputError
from taxplanner.models.enums import ConversionStrategy, FilingStatus
from taxplanner.models.scenario import ScenarioInput

AS_OF = date(2025, 12, 31)


@pytest.fixture
def planner(repository):
    return ConversionPlanner(repository)


class TestRequiredMinimumDistribution:
    def test_first_required_year(self):
        # 265,000 / 26.5
        assert required_minimum_distribution(Decimal("265000"), 73) == Decimal("10000.00")

    def test_later_age(self):
        assert required_minimum_distribution(Decimal("202000"), 80) == Decimal("10000.00")

    def test_before_start_age(self):
        assert required_minimum_distribution(Decimal("265000"), 72) == Decimal("0")

    def test_earlier_start_age(self):
        # 265,000 / 27.4
        assert required_minimum_distribution(
            Decimal("265000"), 72, start_age=72
        ) == Decimal("9671.53")

    def test_past_end_of_table(self):
        assert required_minimum_distribution(Decimal("10000"), 125) == Decimal("5000.00")

    def test_empty_account(self):
        assert required_minimum_distribution(Decimal("0"), 80) == Decimal("0")

    def test_negative_balance(self):
        with pytest.raises(InvalidInputError):
            required_minimum_distribution(Decimal("-1"), 80)

    def test_added_to_ira_distributions(self):
        scenario = ScenarioInput(tax_year=2024, ira_distributions=Decimal("1000"))
        updated = with_required_distribution(scenario, Decimal("265000"), 73)
        assert updated.ira_distributions == Decimal("11000.00")
        assert scenario.ira_distributions == Decimal("1000")

    def test_no_rmd_leaves_scenario(self):
        scenario = ScenarioInput(tax_year=2024, ira_distributions=Decimal("1000"))
        assert with_required_distribution(scenario, Decimal("265000"), 65) is scenario


class TestMaxConversion:
    def test_fill_twelve_percent(self, planner, calculator):
        # ordinary taxable income 15,400; 12% bracket ends at 47,150
        result = calculator.calculate(ScenarioInput(tax_year=2024, wages=Decimal("30000")))
        assert planner.max_conversion(result, ConversionStrategy.BRACKET_12) == Decimal("31750")

    def test_fill_through_twenty_two_percent(self, planner, calculator):
        result = calculator.calculate(ScenarioInput(tax_year=2024, wages=Decimal("30000")))
        assert planner.max_conversion(result, ConversionStrategy.BRACKET_12_22) == Decimal("85125")

    def test_married_filing_jointly(self, planner, calculator):
        result = calculator.calculate(ScenarioInput(
            tax_year=2024, filing_status=FilingStatus.MFJ, wages=Decimal("100000"),
        ))
        # 201,050 - 70,800
        assert planner.max_conversion(result, ConversionStrategy.BRACKET_12_22) == Decimal("130250")

    def test_already_above_ceiling(self, planner, calculator):
        result = calculator.calculate(ScenarioInput(tax_year=2024, wages=Decimal("90000")))
        assert planner.max_conversion(result, ConversionStrategy.BRACKET_12) == Decimal("0")

    def test_fixed_amount(self, planner, calculator):
        result = calculator.calculate(ScenarioInput(tax_year=2024, wages=Decimal("30000")))
        assert planner.max_conversion(
            result, ConversionStrategy.FIXED, fixed_amount=Decimal("5000")
        ) == Decimal("5000")
        assert planner.max_conversion(result, ConversionStrategy.FIXED) == Decimal("0")


class TestPlan:
    def test_existing_conversion_is_replaced(self, planner, calculator):
        scenario = ScenarioInput(
            tax_year=2024, wages=Decimal("30000"), roth_conversion=Decimal("999")
        )
        planned = planner.plan(scenario, ConversionStrategy.BRACKET_12, as_of=AS_OF)
        assert planned.roth_conversion == Decimal("31750")
        result = calculator.calculate(planned)
        assert result.ordinary_taxable_income == Decimal("47150")
        assert result.marginal_rate == Decimal("0.12")

    def test_unused_deduction_is_filled(self, planner, calculator):
        scenario = ScenarioInput(tax_year=2024, wages=Decimal("5000"))
        planned = planner.plan(scenario, ConversionStrategy.BRACKET_12, as_of=AS_OF)
        # 9,600 of unused standard deduction plus the whole 12% bracket
        assert planned.roth_conversion == Decimal("56750")
        assert calculator.calculate(planned).ordinary_taxable_income == Decimal("47150")

    def test_gains_do_not_use_deduction_room(self, planner, calculator):
        scenario = ScenarioInput(
            tax_year=2024, wages=Decimal("5000"), long_term_capital_gains=Decimal("20000")
        )
        planned = planner.plan(scenario, ConversionStrategy.BRACKET_12, as_of=AS_OF)
        assert planned.roth_conversion == Decimal("56750")
        result = calculator.calculate(planned)
        assert result.ordinary_taxable_income == Decimal("47150")
        assert result.taxable_long_term_capital_gains == Decimal("20000")

    def test_planning_twice_is_stable(self, planner):
        scenario = ScenarioInput(tax_year=2024, wages=Decimal("30000"))
        once = planner.plan(scenario, ConversionStrategy.BRACKET_12_22, as_of=AS_OF)
        twice = planner.plan(once, ConversionStrategy.BRACKET_12_22, as_of=AS_OF)
        assert once.roth_conversion == twice.roth_conversion

    def test_fixed_keeps_scenario(self, planner):
        scenario = ScenarioInput(tax_year=2024, roth_conversion=Decimal("20000"))
        assert planner.plan(scenario, ConversionStrategy.FIXED, as_of=AS_OF) is scenario
