"""Avoidance strategy generator.

Turns trap warnings into ranked, quantified income adjustments: how much
income would have to move below a crossed threshold, and what that saves.
"""

from decimal import ROUND_HALF_UP, Decimal

from taxplanner.models.enums import ConsequenceType, ThresholdCategory
from taxplanner.models.scenario import TaxResult
from taxplanner.models.traps import AvoidanceStrategy, TrapWarning

ZERO = Decimal("0")
CENTS = Decimal("0.01")
# Land one dollar below the threshold, not on it.
EPSILON = Decimal("1")

_LEVERS = {
    ThresholdCategory.IRMAA: (
        "Reduce MAGI below the IRMAA threshold",
        "Lower the Roth conversion or IRA distributions by ${amount:,.0f} to drop "
        "below ${threshold:,.0f} and lower the Medicare surcharge.",
    ),
    ThresholdCategory.ACA: (
        "Keep MAGI under the ACA subsidy boundary",
        "Reduce MAGI by ${amount:,.0f} (e.g. smaller Roth conversion, pre-tax "
        "contributions) to stay below ${threshold:,.0f}.",
    ),
    ThresholdCategory.SOCIAL_SECURITY: (
        "Lower provisional income",
        "Reduce income other than Social Security by ${amount:,.0f} to bring "
        "provisional income toward ${threshold:,.0f} and shrink taxable benefits.",
    ),
    ThresholdCategory.BRACKET_BREAKPOINT: (
        "Stay below the ordinary bracket breakpoint",
        "Shift ${amount:,.0f} of ordinary income (Roth conversion, IRA "
        "distribution) to another year to keep taxable income under ${threshold:,.0f}.",
    ),
    ThresholdCategory.CAPITAL_GAINS_BREAKPOINT: (
        "Defer capital gains below the rate breakpoint",
        "Defer ${amount:,.0f} of long-term gains to keep taxable income under "
        "${threshold:,.0f}.",
    ),
}


class AvoidanceStrategyGenerator:
    """Proposes income adjustments for crossed thresholds."""

    def __init__(self, epsilon: Decimal = EPSILON) -> None:
        self.epsilon = epsilon

    def generate(
        self,
        result: TaxResult,
        warnings: list[TrapWarning],
        proposed_adjustable_amount: Decimal = ZERO,
    ) -> list[AvoidanceStrategy]:
        """Strategies ranked by savings, then by the smaller adjustment.

        A positive ``proposed_adjustable_amount`` caps how much income can move:
        cliffs that need more are dropped, proportional savings use the cap.
        """
        strategies: list[AvoidanceStrategy] = []
        for warning in warnings:
            if warning.threshold_crossed is None or warning.income_measure is None:
                continue
            if warning.trap_type not in _LEVERS:
                continue

            delta = warning.income_measure - warning.threshold_crossed + self.epsilon
            if warning.trap_type == ThresholdCategory.CAPITAL_GAINS_BREAKPOINT:
                # Only the gains themselves can be deferred.
                delta = min(delta, result.taxable_long_term_capital_gains)
            if delta <= ZERO:
                continue

            adjustment = delta
            if proposed_adjustable_amount > ZERO and delta > proposed_adjustable_amount:
                if warning.consequence_type == ConsequenceType.CLIFF:
                    continue
                adjustment = proposed_adjustable_amount

            savings = self._estimate_savings(result, warning, adjustment)
            if savings is None or savings <= ZERO:
                continue

            name, template = _LEVERS[warning.trap_type]
            strategies.append(AvoidanceStrategy(
                id=f"strategy-{warning.id}",
                name=name,
                description=template.format(
                    amount=adjustment, threshold=warning.threshold_crossed
                ),
                estimated_tax_savings=savings.quantize(CENTS, rounding=ROUND_HALF_UP),
                suggested_adjustment_amount=adjustment,
                target_trap_id=warning.id,
                trap_type=warning.trap_type,
            ))

        strategies.sort(
            key=lambda s: (-s.estimated_tax_savings, s.suggested_adjustment_amount, s.target_trap_id)
        )
        return strategies

    @staticmethod
    def _estimate_savings(
        result: TaxResult, warning: TrapWarning, adjustment: Decimal
    ) -> Decimal | None:
        if warning.consequence_type == ConsequenceType.CLIFF:
            # Dropping below one tier can still leave the tier beneath it.
            return warning.financial_impact - warning.residual_impact

        if warning.trap_type in (
            ThresholdCategory.BRACKET_BREAKPOINT,
            ThresholdCategory.CAPITAL_GAINS_BREAKPOINT,
        ):
            if warning.rate_delta is None:
                return None
            return min(adjustment * warning.rate_delta, warning.financial_impact)

        if warning.trap_type == ThresholdCategory.SOCIAL_SECURITY:
            if warning.magnitude is None:
                return None
            savings = adjustment * warning.magnitude * result.marginal_rate
            return min(savings, warning.financial_impact)

        return None
