"""Scenario analysis pipeline.

ScenarioInput -> [ConversionPlanner] -> ScenarioCalculator -> TaxResult
-> TrapDetector -> warnings -> AvoidanceStrategyGenerator -> strategies.
Stateless: interactive callers simply re-run it whenever an input changes.
"""

import logging
from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.calculator import ScenarioCalculator
from taxplanner.engines.conversions import ConversionPlanner
from taxplanner.engines.strategies import AvoidanceStrategyGenerator
from taxplanner.engines.traps import TrapDetector
from taxplanner.exceptions import TaxPlannerError
from taxplanner.models.enums import ConversionStrategy
from taxplanner.models.scenario import ScenarioInput, TaxResult
from taxplanner.models.traps import AvoidanceStrategy, TrapContext, TrapWarning

logger = logging.getLogger(__name__)


class ScenarioAnalysis(BaseModel):
    result: TaxResult
    warnings: list[TrapWarning]
    strategies: list[AvoidanceStrategy]
    # Roth conversion actually analyzed and the income cap given to the strategies
    roth_conversion: Decimal = Decimal("0")
    adjustable_amount: Decimal = Decimal("0")

    @property
    def total_potential_savings(self) -> Decimal:
        return sum((s.estimated_tax_savings for s in self.strategies), Decimal("0"))


class CalculationUnavailable(BaseModel):
    """Outcome shown instead of a result when the scenario cannot be calculated."""

    scenario_id: str
    error_type: str
    message: str


class ScenarioComparison(BaseModel):
    tax_delta: Decimal
    magi_delta: Decimal
    marginal_rate_before: Decimal
    marginal_rate_after: Decimal
    effective_rate_delta: Decimal

    @property
    def bracket_changed(self) -> bool:
        return self.marginal_rate_before != self.marginal_rate_after


def analyze_scenario(
    scenario: ScenarioInput,
    repository: TaxDataRepository,
    context: TrapContext | None = None,
    proposed_adjustable_amount: Decimal = Decimal("0"),
    as_of: date | None = None,
    conversion_strategy: ConversionStrategy | None = None,
) -> ScenarioAnalysis:
    """Calculate, detect traps and rank avoidance strategies for one scenario.

    With a ``conversion_strategy`` the Roth conversion is sized first (bracket
    fill, or the scenario's own amount for ``FIXED``) and, unless
    ``proposed_adjustable_amount`` is given, becomes the income the strategies
    may move.
    """
    if conversion_strategy is not None:
        scenario = ConversionPlanner(repository).plan(scenario, conversion_strategy, as_of=as_of)
        if proposed_adjustable_amount <= 0:
            proposed_adjustable_amount = max(scenario.roth_conversion, Decimal("0"))

    result = ScenarioCalculator(repository).calculate(scenario, as_of=as_of)
    warnings = TrapDetector(repository).detect(result, context)
    strategies = AvoidanceStrategyGenerator().generate(
        result, warnings, proposed_adjustable_amount
    )
    return ScenarioAnalysis(
        result=result,
        warnings=warnings,
        strategies=strategies,
        roth_conversion=scenario.roth_conversion,
        adjustable_amount=proposed_adjustable_amount,
    )


def safe_analyze(
    scenario: ScenarioInput,
    repository: TaxDataRepository,
    context: TrapContext | None = None,
    proposed_adjustable_amount: Decimal = Decimal("0"),
    as_of: date | None = None,
    conversion_strategy: ConversionStrategy | None = None,
) -> ScenarioAnalysis | CalculationUnavailable:
    """Like analyze_scenario, but hard errors become a CalculationUnavailable value."""
    try:
        return analyze_scenario(
            scenario, repository, context, proposed_adjustable_amount, as_of,
            conversion_strategy,
        )
    except TaxPlannerError as exc:
        logger.info("Scenario %s unavailable: %s", scenario.scenario_id, exc)
        return CalculationUnavailable(
            scenario_id=scenario.scenario_id,
            error_type=type(exc).__name__,
            message=str(exc),
        )


def compare_results(before: TaxResult, after: TaxResult) -> ScenarioComparison:
    """Deltas between two results (e.g. with and without a Roth conversion)."""
    return ScenarioComparison(
        tax_delta=after.total_tax - before.total_tax,
        magi_delta=after.magi - before.magi,
        marginal_rate_before=before.marginal_rate,
        marginal_rate_after=after.marginal_rate,
        effective_rate_delta=after.effective_rate - before.effective_rate,
    )
