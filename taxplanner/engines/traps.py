"""Tax trap detection engine.

Compares a TaxResult against the threshold catalog and reports non-linear cost
cliffs and phase-ins:
  - Medicare IRMAA surcharge tiers (MAGI, cliff)
  - ACA premium tax credit bands and the 400% FPL subsidy cliff
  - Social Security taxability tiers (provisional income, phase-in)
  - Ordinary income bracket breakpoints
  - Long-term capital gains rate breakpoints

Each category is evaluated independently. A category with no data for the
year and filing status is skipped and logged; detection never fails because
one category is incomplete.
"""

import logging
from collections.abc import Callable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.brackets import BracketEngine
from taxplanner.engines.thresholds import ThresholdCatalog
from taxplanner.exceptions import IncompleteThresholdDataError, MissingBracketDataError
from taxplanner.models.enums import (
    ConsequenceType,
    IncomeType,
    Severity,
    ThresholdCategory,
)
from taxplanner.models.scenario import TaxResult
from taxplanner.models.tax_data import BracketTable, ThresholdRule
from taxplanner.models.traps import TrapContext, TrapWarning

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENTS = Decimal("0.01")
DATA_INCOMPLETE = "data_incomplete"

_CATEGORY_ORDER = {
    ThresholdCategory.IRMAA: 0,
    ThresholdCategory.ACA: 1,
    ThresholdCategory.SOCIAL_SECURITY: 2,
    ThresholdCategory.BRACKET_BREAKPOINT: 3,
    ThresholdCategory.CAPITAL_GAINS_BREAKPOINT: 4,
}

Check = Callable[[TaxResult, list[ThresholdRule], TrapContext, date], list[TrapWarning]]


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _pct(rate: Decimal) -> str:
    return f"{(rate * 100).normalize():f}%"


def warning_sort_key(warning: TrapWarning) -> tuple:
    """Severity desc, impact desc, category order, rule id."""
    return (
        -warning.severity.rank,
        -warning.financial_impact,
        _CATEGORY_ORDER.get(warning.trap_type, len(_CATEGORY_ORDER)),
        warning.source_rule_id or "",
    )


class TrapDetector:
    """Detects threshold traps for a calculated scenario."""

    def __init__(
        self,
        repository: TaxDataRepository,
        catalog: ThresholdCatalog | None = None,
        engine: BracketEngine | None = None,
    ) -> None:
        self.repository = repository
        self.catalog = catalog or ThresholdCatalog(repository)
        self.engine = engine or BracketEngine()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def detect(
        self, result: TaxResult, context: TrapContext | None = None
    ) -> list[TrapWarning]:
        """Return warnings sorted by severity, then impact, at most one per rule."""
        if context is None:
            context = TrapContext()
        as_of = context.as_of or result.computed_at
        grouped = self.catalog.rules_by_category(result.tax_year, result.filing_status, as_of)

        checks: list[tuple[ThresholdCategory, Check]] = [
            (ThresholdCategory.IRMAA, self._check_irmaa),
            (ThresholdCategory.ACA, self._check_aca),
            (ThresholdCategory.SOCIAL_SECURITY, self._check_social_security),
            (ThresholdCategory.BRACKET_BREAKPOINT, self._check_ordinary_brackets),
            (ThresholdCategory.CAPITAL_GAINS_BREAKPOINT, self._check_capital_gains_brackets),
        ]

        warnings: list[TrapWarning] = []
        incomplete: list[ThresholdCategory] = []
        for category, check in checks:
            try:
                warnings.extend(check(result, grouped.get(category, []), context, as_of))
            except (IncompleteThresholdDataError, MissingBracketDataError) as exc:
                logger.warning("Skipping %s trap check: %s", category, exc)
                incomplete.append(category)

        warnings.sort(key=warning_sort_key)
        deduped: list[TrapWarning] = []
        seen: set[str] = set()
        for warning in warnings:
            if warning.source_rule_id is not None:
                if warning.source_rule_id in seen:
                    continue
                seen.add(warning.source_rule_id)
            deduped.append(warning)

        if incomplete and context.report_incomplete_data:
            names = ", ".join(c.value for c in incomplete)
            deduped.append(TrapWarning(
                id=f"{DATA_INCOMPLETE}-{result.tax_year}",
                trap_type=DATA_INCOMPLETE,
                severity=Severity.INFO,
                title="Threshold data incomplete",
                description=(
                    f"No {names} threshold data for {result.tax_year} "
                    f"({result.filing_status}); those checks were skipped."
                ),
            ))
        return deduped

    # ------------------------------------------------------------------
    # Medicare IRMAA
    # ------------------------------------------------------------------

    def _check_irmaa(
        self,
        result: TaxResult,
        rules: list[ThresholdRule],
        context: TrapContext,
        as_of: date,
    ) -> list[TrapWarning]:
        if context.medicare_enrollees == 0:
            return []
        if not rules:
            raise IncompleteThresholdDataError(
                ThresholdCategory.IRMAA, result.tax_year, result.filing_status
            )

        crossed = [r for r in rules if result.magi > r.threshold_value]
        if not crossed:
            return []
        rule = crossed[-1]
        if not rule.magnitude:
            return []

        impact = _money(rule.magnitude * 12 * context.medicare_enrollees)
        residual = ZERO
        if len(crossed) > 1 and crossed[-2].magnitude:
            residual = _money(crossed[-2].magnitude * 12 * context.medicare_enrollees)
        if rule.tier <= 1:
            severity = Severity.INFO
        elif rule.tier <= 3:
            severity = Severity.WARNING
        else:
            severity = Severity.CRITICAL

        return [TrapWarning(
            id=f"trap-{rule.id}",
            trap_type=ThresholdCategory.IRMAA,
            severity=severity,
            title=f"Medicare IRMAA surcharge (tier {rule.tier})",
            description=(
                f"MAGI of ${result.magi:,.0f} exceeds the ${rule.threshold_value:,.0f} "
                f"IRMAA threshold. Medicare Part B and D premiums rise by "
                f"${rule.magnitude:,.2f}/month per enrollee (${impact:,.0f}/year)."
            ),
            threshold_crossed=rule.threshold_value,
            financial_impact=impact,
            residual_impact=residual,
            source_rule_id=rule.id,
            consequence_type=ConsequenceType.CLIFF,
            income_measure=result.magi,
            magnitude=rule.magnitude,
        )]

    # ------------------------------------------------------------------
    # ACA premium tax credit
    # ------------------------------------------------------------------

    def _check_aca(
        self,
        result: TaxResult,
        rules: list[ThresholdRule],
        context: TrapContext,
        as_of: date,
    ) -> list[TrapWarning]:
        if not context.aca_enrolled:
            return []
        guideline = self.repository.get_poverty_guideline(result.tax_year, as_of)
        if not rules or guideline is None:
            raise IncompleteThresholdDataError(
                ThresholdCategory.ACA, result.tax_year, result.filing_status
            )

        poverty_line = guideline.for_household(context.household_size)
        magi = result.magi
        benchmark_annual = context.benchmark_premium_monthly * 12 * context.household_size
        warnings: list[TrapWarning] = []

        cap_below = ZERO
        for rule in rules:
            boundary = _money(poverty_line * rule.threshold_value / 100)
            distance = magi - boundary
            if abs(distance) <= context.aca_buffer:
                crossed = distance > ZERO
                if rule.magnitude is None:
                    impact = max(benchmark_annual - cap_below * magi, ZERO)
                    severity = Severity.CRITICAL if crossed else Severity.WARNING
                    effect = "the premium tax credit ends entirely"
                else:
                    impact = (rule.magnitude - cap_below) * magi
                    severity = Severity.WARNING if crossed else Severity.INFO
                    effect = (
                        f"the required premium contribution rises from "
                        f"{_pct(cap_below)} to {_pct(rule.magnitude)} of income"
                    )
                position = "is above" if crossed else f"is within ${abs(distance):,.0f} of"
                warnings.append(TrapWarning(
                    id=f"trap-{rule.id}",
                    trap_type=ThresholdCategory.ACA,
                    severity=severity,
                    title=f"ACA subsidy threshold at {rule.threshold_value:f}% FPL",
                    description=(
                        f"MAGI of ${magi:,.0f} {position} ${boundary:,.0f} "
                        f"({rule.threshold_value:f}% of the poverty level for a household "
                        f"of {context.household_size}); above it {effect}."
                    ),
                    threshold_crossed=boundary if crossed else None,
                    financial_impact=_money(impact),
                    source_rule_id=rule.id,
                    consequence_type=ConsequenceType.CLIFF,
                    income_measure=magi,
                    magnitude=rule.magnitude,
                ))
            if rule.magnitude is not None:
                cap_below = rule.magnitude
        return warnings

    # ------------------------------------------------------------------
    # Social Security taxability
    # ------------------------------------------------------------------

    def _check_social_security(
        self,
        result: TaxResult,
        rules: list[ThresholdRule],
        context: TrapContext,
        as_of: date,
    ) -> list[TrapWarning]:
        if result.social_security_benefits <= ZERO:
            return []
        if len(rules) < 2:
            raise IncompleteThresholdDataError(
                ThresholdCategory.SOCIAL_SECURITY, result.tax_year, result.filing_status
            )
        if result.social_security_taxable_tier == 0:
            return []

        provisional = result.provisional_income
        crossed = [r for r in rules if provisional > r.threshold_value]
        if not crossed:
            return []
        rule = crossed[-1]

        near_boundary = any(
            abs(provisional - r.threshold_value) <= context.social_security_buffer for r in rules
        )
        severity = Severity.WARNING if near_boundary else Severity.INFO
        impact = _money(result.taxable_social_security * result.marginal_rate)

        return [TrapWarning(
            id=f"trap-{rule.id}",
            trap_type=ThresholdCategory.SOCIAL_SECURITY,
            severity=severity,
            title=f"Up to {result.social_security_taxable_tier}% of Social Security is taxable",
            description=(
                f"Provisional income of ${provisional:,.0f} exceeds "
                f"${rule.threshold_value:,.0f}; ${result.taxable_social_security:,.0f} of "
                f"${result.social_security_benefits:,.0f} in benefits is taxable."
            ),
            threshold_crossed=rule.threshold_value,
            financial_impact=impact,
            source_rule_id=rule.id,
            consequence_type=ConsequenceType.PHASE_IN,
            income_measure=provisional,
            magnitude=rule.magnitude,
        )]

    # ------------------------------------------------------------------
    # Bracket breakpoints
    # ------------------------------------------------------------------

    def _check_ordinary_brackets(
        self,
        result: TaxResult,
        rules: list[ThresholdRule],
        context: TrapContext,
        as_of: date,
    ) -> list[TrapWarning]:
        table = self.repository.get_bracket_table(
            result.tax_year, result.filing_status, IncomeType.ORDINARY, as_of=as_of
        )
        return self._check_breakpoints(
            table,
            rules,
            ThresholdCategory.BRACKET_BREAKPOINT,
            position=result.ordinary_taxable_income,
            exposed=result.ordinary_taxable_income,
            buffer=context.bracket_buffer,
            label="Ordinary income",
        )

    def _check_capital_gains_brackets(
        self,
        result: TaxResult,
        rules: list[ThresholdRule],
        context: TrapContext,
        as_of: date,
    ) -> list[TrapWarning]:
        if result.taxable_long_term_capital_gains <= ZERO:
            return []
        table = self.repository.get_bracket_table(
            result.tax_year, result.filing_status, IncomeType.CAPITAL_GAINS, as_of=as_of
        )
        return self._check_breakpoints(
            table,
            rules,
            ThresholdCategory.CAPITAL_GAINS_BREAKPOINT,
            position=result.taxable_income,
            exposed=result.taxable_long_term_capital_gains,
            buffer=context.bracket_buffer,
            label="Long-term capital gains",
        )

    def _check_breakpoints(
        self,
        table: BracketTable,
        rules: list[ThresholdRule],
        category: ThresholdCategory,
        position: Decimal,
        exposed: Decimal,
        buffer: Decimal,
        label: str,
    ) -> list[TrapWarning]:
        """Warn on a boundary just crossed and on one about to be crossed.

        ``exposed`` caps the income actually taxed above a crossed boundary
        (for capital gains, only the gains stacked above it).
        """
        if not rules:
            raise IncompleteThresholdDataError(category, table.year, table.filing_status)
        by_threshold = {r.threshold_value: r for r in rules}
        current_rate = self.engine.rate_at(position, table)
        warnings: list[TrapWarning] = []

        previous = self.engine.previous_boundary(position, table)
        if previous is not None:
            boundary, rate_below = previous
            excess = position - boundary
            rule = by_threshold.get(boundary)
            if rule is not None and ZERO < excess <= buffer:
                rate_delta = current_rate - rate_below
                impact = min(exposed, excess) * rate_delta
                warnings.append(TrapWarning(
                    id=f"trap-{rule.id}",
                    trap_type=category,
                    severity=Severity.WARNING,
                    title=f"{label} crossed into the {_pct(current_rate)} bracket",
                    description=(
                        f"${excess:,.0f} of income sits above the ${boundary:,.0f} "
                        f"breakpoint and is taxed at {_pct(current_rate)} instead of "
                        f"{_pct(rate_below)}."
                    ),
                    threshold_crossed=boundary,
                    financial_impact=_money(impact),
                    source_rule_id=rule.id,
                    consequence_type=ConsequenceType.PHASE_IN,
                    income_measure=position,
                    magnitude=rule.magnitude,
                    next_rate=current_rate,
                    rate_delta=rate_delta,
                ))

        upcoming = self.engine.distance_to_next_bracket(position, table)
        if upcoming is not None:
            distance, next_rate = upcoming
            boundary = position + distance
            rule = by_threshold.get(boundary)
            if rule is not None and distance <= buffer:
                warnings.append(TrapWarning(
                    id=f"trap-{rule.id}",
                    trap_type=category,
                    severity=Severity.INFO,
                    title=f"{label} is ${distance:,.0f} below the {_pct(next_rate)} bracket",
                    description=(
                        rule.describe()
                        or f"Income above ${boundary:,.0f} is taxed at {_pct(next_rate)}."
                    ),
                    threshold_crossed=None,
                    financial_impact=ZERO,
                    source_rule_id=rule.id,
                    consequence_type=ConsequenceType.PHASE_IN,
                    income_measure=position,
                    magnitude=rule.magnitude,
                    next_rate=next_rate,
                    rate_delta=next_rate - current_rate,
                ))
        return warnings
