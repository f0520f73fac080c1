"""Tests for the stock option exercise tax engine."""

from datetime import date
from decimal import Decimal

import pytest

from taxplanner.engines.stock_options import StockOptionTaxCalculator
from taxplanner.models.enums import FilingStatus, OptionType
from taxplanner.models.options import StockOptionInput

AS_OF = date(2025, 12, 31)


@pytest.fixture
def option_calculator(repository):
    return StockOptionTaxCalculator(repository, clock=lambda: AS_OF)


def _option(option_type, shares="1000", grant="10", market="50", **kwargs):
    kwargs.setdefault("tax_year", 2024)
    kwargs.setdefault("base_taxable_income", Decimal("100000"))
    return StockOptionInput(
        option_type=option_type,
        shares=Decimal(shares),
        grant_price=Decimal(grant),
        market_price=Decimal(market),
        **kwargs,
    )


class TestNso:
    def test_spread_taxed_as_ordinary_income(self, option_calculator):
        result = option_calculator.calculate(_option(OptionType.NSO))
        assert result.option_value == Decimal("40000.00")
        assert result.ordinary_income == Decimal("40000.00")
        # 525 at 22% + 39,475 at 24%
        assert result.federal_tax == Decimal("9589.50")
        assert result.fica_tax == Decimal("580.00")
        assert result.total_tax == Decimal("10169.50")
        assert result.net_value == Decimal("29830.50")
        assert result.amt == Decimal("0")

    def test_additional_medicare_tax(self, option_calculator):
        result = option_calculator.calculate(
            _option(OptionType.NSO, base_wages=Decimal("190000"))
        )
        # 1.45% of 40,000 + 0.9% of the 30,000 above 200,000
        assert result.fica_tax == Decimal("850.00")

    def test_state_tax_stacked_on_base_income(self, option_calculator):
        result = option_calculator.calculate(_option(OptionType.NSO, state="CA"))
        # 94,460 to 134,460 all in the 9.3% bracket
        assert result.state_tax == Decimal("3720.00")

    def test_unknown_state_noted(self, option_calculator):
        result = option_calculator.calculate(_option(OptionType.NSO, state="zz"))
        assert result.state_tax == Decimal("0")
        assert any("ZZ" in note for note in result.notes)

    def test_underwater_option(self, option_calculator):
        result = option_calculator.calculate(_option(OptionType.NSO, market="5"))
        assert result.option_value == Decimal("0.00")
        assert result.total_tax == Decimal("0.00")
        assert result.effective_rate == Decimal("0")


class TestIsoExerciseAndHold:
    def test_large_spread_triggers_amt(self, option_calculator):
        result = option_calculator.calculate(_option(OptionType.ISO_EXERCISE_HOLD, market="110"))
        assert result.ordinary_income == Decimal("0.00")
        assert result.amt_preference == Decimal("100000.00")
        assert result.federal_tax == Decimal("0.00")
        # TMT 26% of (200,000 - 85,700) less regular tax of 17,053
        assert result.amt == Decimal("12665.00")
        assert any("8801" in note for note in result.notes)

    def test_small_spread_no_amt(self, option_calculator):
        result = option_calculator.calculate(
            _option(OptionType.ISO_EXERCISE_HOLD, shares="100", market="20")
        )
        assert result.amt == Decimal("0.00")
        assert result.total_tax == Decimal("0.00")

    def test_exemption_phase_out(self, option_calculator):
        option = _option(OptionType.ISO_EXERCISE_HOLD, base_taxable_income=Decimal("300000"))
        amt = option_calculator.compute_amt(option, Decimal("500000"), AS_OF)
        # AMTI 800,000: exemption 85,700 less 25% of (800,000 - 609,350) = 38,037.50
        # TMT 208,697.50 less regular tax 75,374.75
        assert amt == Decimal("133322.75")


class TestIsoDisqualifying:
    def test_limited_to_gain_on_sale(self, option_calculator):
        result = option_calculator.calculate(
            _option(OptionType.ISO_DISQUALIFYING, sale_price=Decimal("30"))
        )
        assert result.option_value == Decimal("40000.00")
        assert result.ordinary_income == Decimal("20000.00")
        assert result.federal_tax == Decimal("4789.50")
        assert result.fica_tax == Decimal("0.00")
        assert any("limited" in note for note in result.notes)

    def test_full_spread_without_sale_price(self, option_calculator):
        result = option_calculator.calculate(_option(OptionType.ISO_DISQUALIFYING))
        assert result.ordinary_income == Decimal("40000.00")
        assert result.federal_tax == Decimal("9589.50")


class TestFilingStatus:
    def test_joint_filers_use_joint_brackets(self, option_calculator):
        single = option_calculator.calculate(_option(OptionType.NSO))
        joint = option_calculator.calculate(
            _option(OptionType.NSO, filing_status=FilingStatus.MFJ)
        )
        assert joint.federal_tax < single.federal_tax
