"""Roth conversion sizing and required minimum distributions.

A bracket-fill conversion adds ordinary income on top of the scenario until
the next dollar would be taxed above the chosen rate. Any standard deduction
left unused by ordinary income is filled first. The fill is measured before
the conversion changes taxable Social Security benefits.

RMDs divide the prior year-end IRA balance by the IRS Uniform Lifetime Table
factor for the owner's age.
"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.brackets import BracketEngine
from taxplanner.engines.calculator import ScenarioCalculator
from taxplanner.exceptions import InvalidInputError
from taxplanner.models.enums import ConversionStrategy, IncomeType
from taxplanner.models.scenario import ScenarioInput, TaxResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENTS = Decimal("0.01")
RMD_START_AGE = 73

# IRS Pub. 590-B Uniform Lifetime Table (in effect from 2022)
UNIFORM_LIFETIME_TABLE: dict[int, Decimal] = {
    72: Decimal("27.4"), 73: Decimal("26.5"), 74: Decimal("25.5"),
    75: Decimal("24.6"), 76: Decimal("23.7"), 77: Decimal("22.9"),
    78: Decimal("22.0"), 79: Decimal("21.1"), 80: Decimal("20.2"),
    81: Decimal("19.4"), 82: Decimal("18.5"), 83: Decimal("17.7"),
    84: Decimal("16.8"), 85: Decimal("16.0"), 86: Decimal("15.2"),
    87: Decimal("14.4"), 88: Decimal("13.7"), 89: Decimal("12.9"),
    90: Decimal("12.2"), 91: Decimal("11.5"), 92: Decimal("10.8"),
    93: Decimal("10.1"), 94: Decimal("9.5"), 95: Decimal("8.9"),
    96: Decimal("8.4"), 97: Decimal("7.8"), 98: Decimal("7.3"),
    99: Decimal("6.8"), 100: Decimal("6.4"), 101: Decimal("6.0"),
    102: Decimal("5.6"), 103: Decimal("5.2"), 104: Decimal("4.9"),
    105: Decimal("4.6"), 106: Decimal("4.3"), 107: Decimal("4.1"),
    108: Decimal("3.9"), 109: Decimal("3.7"), 110: Decimal("3.5"),
    111: Decimal("3.4"), 112: Decimal("3.3"), 113: Decimal("3.1"),
    114: Decimal("3.0"), 115: Decimal("2.9"), 116: Decimal("2.8"),
    117: Decimal("2.7"), 118: Decimal("2.5"), 119: Decimal("2.3"),
    120: Decimal("2.0"),
}

_CEILING_RATES = {
    ConversionStrategy.BRACKET_12: Decimal("0.12"),
    ConversionStrategy.BRACKET_12_22: Decimal("0.22"),
}


def required_minimum_distribution(
    balance: Decimal, age: int, start_age: int = RMD_START_AGE
) -> Decimal:
    """Required distribution for the year, rounded to cents.

    Zero before ``start_age``. Ages past the end of the table use its last factor.
    """
    if balance < ZERO:
        raise InvalidInputError("ira_balance", "balance cannot be negative")
    if balance == ZERO or age < start_age:
        return ZERO
    factor = UNIFORM_LIFETIME_TABLE.get(min(age, max(UNIFORM_LIFETIME_TABLE)))
    if factor is None:
        logger.debug("No life expectancy factor for age %d", age)
        return ZERO
    return (balance / factor).quantize(CENTS, rounding=ROUND_HALF_UP)


def with_required_distribution(
    scenario: ScenarioInput, balance: Decimal, age: int, start_age: int = RMD_START_AGE
) -> ScenarioInput:
    """Copy of ``scenario`` with the year's RMD added to its IRA distributions."""
    rmd = required_minimum_distribution(balance, age, start_age)
    if rmd == ZERO:
        return scenario
    return scenario.model_copy(
        update={"ira_distributions": max(scenario.ira_distributions, ZERO) + rmd}
    )


class ConversionPlanner:
    """Sizes a Roth conversion against the ordinary bracket table."""

    def __init__(
        self, repository: TaxDataRepository, engine: BracketEngine | None = None
    ) -> None:
        self.repository = repository
        self.engine = engine or BracketEngine()

    def max_conversion(
        self,
        result: TaxResult,
        strategy: ConversionStrategy,
        fixed_amount: Decimal | None = None,
        as_of: date | None = None,
    ) -> Decimal:
        """Bracket room above the result's ordinary taxable income.

        ``FIXED`` returns ``fixed_amount`` unchanged.
        """
        if strategy == ConversionStrategy.FIXED:
            return max(fixed_amount or ZERO, ZERO)

        table = self.repository.get_bracket_table(
            result.tax_year,
            result.filing_status,
            IncomeType.ORDINARY,
            as_of=as_of or result.computed_at,
        )
        ceiling = _CEILING_RATES[strategy]
        headroom = self.engine.headroom_to_rate(result.ordinary_taxable_income, table, ceiling)
        if headroom is None:
            logger.warning(
                "No ordinary bracket above %s for %s (%s); conversion not sized",
                ceiling, result.tax_year, result.filing_status,
            )
            return ZERO
        return headroom

    def plan(
        self,
        scenario: ScenarioInput,
        strategy: ConversionStrategy,
        as_of: date | None = None,
    ) -> ScenarioInput:
        """Copy of ``scenario`` with ``roth_conversion`` sized by ``strategy``.

        Room is measured without the scenario's own conversion, so planning a
        planned scenario again gives the same amount.
        """
        if strategy == ConversionStrategy.FIXED:
            return scenario

        base = scenario.model_copy(update={"roth_conversion": ZERO})
        result = ScenarioCalculator(self.repository, self.engine).calculate(base, as_of=as_of)

        gains = max(scenario.long_term_capital_gains, ZERO)
        unused_deduction = max(result.deduction_used - (result.agi - gains), ZERO)
        amount = unused_deduction + self.max_conversion(result, strategy, as_of=as_of)
        logger.debug(
            "Sized %s conversion for scenario %s: %s", strategy, scenario.scenario_id, amount
        )
        return scenario.model_copy(update={"roth_conversion": amount})
