"""Scenario tax calculation engine.

Computes a versioned, reproducible federal tax liability for one scenario:
  - Social Security taxability per the provisional-income worksheet
  - Standard or itemized deduction
  - Progressive ordinary income tax
  - LTCG stacking: gains sit on top of ordinary taxable income in the
    capital gains bracket structure (Qualified Dividends and Capital Gain
    Tax Worksheet, simplified)
  - Optional state tax estimate

MAGI is taken equal to AGI, and AGI equal to total income (no above-the-line
adjustments).
"""

import logging
from collections.abc import Callable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.brackets import BracketEngine
from taxplanner.engines.social_security import compute_taxable_social_security
from taxplanner.engines.state_tax import StateTaxCalculator
from taxplanner.exceptions import InvalidInputError
from taxplanner.models.enums import IncomeType, ThresholdCategory
from taxplanner.models.scenario import ScenarioInput, TaxResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENTS = Decimal("0.01")

_INCOME_FIELDS = (
    "wages",
    "interest",
    "dividends",
    "long_term_capital_gains",
    "ira_distributions",
    "roth_conversion",
    "social_security_benefits",
)


class ScenarioCalculator:
    """Calculates a TaxResult from a ScenarioInput against versioned tax data."""

    def __init__(
        self,
        repository: TaxDataRepository,
        engine: BracketEngine | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.repository = repository
        self.engine = engine or BracketEngine()
        self.state_calculator = StateTaxCalculator(repository, self.engine)
        self.clock = clock

    def calculate(self, scenario: ScenarioInput, as_of: date | None = None) -> TaxResult:
        """Compute the scenario's tax.

        Identical input, repository state and ``as_of`` give an identical result.
        """
        as_of = as_of or self.clock()
        year = scenario.tax_year
        status = scenario.filing_status

        if year <= 0:
            raise InvalidInputError("tax_year", f"{year} is not a valid tax year")

        version = self.repository.resolve_version(year, as_of)
        if status not in self.repository.supported_filing_statuses(year, as_of):
            raise InvalidInputError(
                "filing_status", f"{status} is not supported for tax year {year}"
            )

        amounts = self._clamped_amounts(scenario)

        # --- Social Security worksheet ---
        other_income = sum(
            (amounts[name] for name in _INCOME_FIELDS if name != "social_security_benefits"),
            ZERO,
        )
        ss_rules = self.repository.get_threshold_rules(
            year, status, ThresholdCategory.SOCIAL_SECURITY, as_of=as_of
        )
        ss = compute_taxable_social_security(
            amounts["social_security_benefits"], other_income, ss_rules
        )

        # --- Income aggregation ---
        total_income = other_income + ss.taxable_benefits
        agi = total_income
        magi = agi

        # --- Deduction ---
        if scenario.use_itemized_deduction:
            if scenario.itemized_deduction_amount is None:
                raise InvalidInputError(
                    "itemized_deduction_amount",
                    "an amount is required when itemizing",
                )
            deduction = max(scenario.itemized_deduction_amount, ZERO)
        else:
            deduction = self.repository.get_standard_deduction(year, status, as_of=as_of)

        taxable_income = max(agi - deduction, ZERO)

        # --- Split ordinary vs. preferential income ---
        taxable_ltcg = min(taxable_income, amounts["long_term_capital_gains"])
        ordinary_taxable = max(taxable_income - taxable_ltcg, ZERO)

        # --- Federal ordinary income tax ---
        ordinary_table = self.repository.get_bracket_table(
            year, status, IncomeType.ORDINARY, as_of=as_of
        )
        ordinary = self.engine.compute_progressive_tax(ordinary_taxable, ordinary_table)

        # --- LTCG stacked on ordinary income ---
        cg_table = self.repository.get_bracket_table(
            year, status, IncomeType.CAPITAL_GAINS, as_of=as_of
        )
        gains = self.engine.compute_progressive_tax(taxable_ltcg, cg_table, ordinary_taxable)

        total_tax = (ordinary.tax + gains.tax).quantize(CENTS, rounding=ROUND_HALF_UP)
        effective_rate = total_tax / total_income if total_income > ZERO else ZERO

        # --- Optional state estimate ---
        state_tax = None
        if scenario.state:
            state_tax = self.state_calculator.compute(
                scenario.state, year, status, agi, as_of=as_of
            )

        return TaxResult(
            scenario_id=scenario.scenario_id,
            tax_year=year,
            filing_status=status,
            total_income=total_income,
            agi=agi,
            magi=magi,
            taxable_income=taxable_income,
            ordinary_taxable_income=ordinary_taxable,
            taxable_long_term_capital_gains=taxable_ltcg,
            deduction_used=deduction,
            used_itemized_deduction=scenario.use_itemized_deduction,
            social_security_benefits=amounts["social_security_benefits"],
            taxable_social_security=ss.taxable_benefits,
            social_security_taxable_tier=ss.tier,
            provisional_income=ss.provisional_income,
            ordinary_tax=ordinary.tax,
            capital_gains_tax=gains.tax,
            total_tax=total_tax,
            marginal_rate=ordinary.marginal_rate,
            marginal_capital_gains_rate=gains.marginal_rate,
            effective_rate=effective_rate,
            state=scenario.state.upper() if scenario.state else None,
            state_tax=state_tax,
            tax_data_version_used=version.id,
            data_is_projected=version.is_projected,
            data_is_fallback=self.repository.is_fallback(version, as_of),
            computed_at=as_of,
        )

    @staticmethod
    def _clamped_amounts(scenario: ScenarioInput) -> dict[str, Decimal]:
        amounts: dict[str, Decimal] = {}
        for name in _INCOME_FIELDS:
            value = getattr(scenario, name)
            if value < ZERO:
                logger.debug("Clamping negative %s (%s) to zero", name, value)
                value = ZERO
            amounts[name] = value
        return amounts
