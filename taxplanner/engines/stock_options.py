"""Stock option exercise tax engine.

Estimates the incremental tax of exercising employee stock options on top of
the taxpayer's other income:
  - NSO exercise: spread is ordinary (W-2) income; federal and state income
    tax plus Medicare (1.45% and the 0.9% Additional Medicare Tax above the
    statutory threshold, IRC Section 3101(b)(2))
  - ISO exercise and hold: no regular tax; spread is an AMT preference item
    (Form 6251 Line 2i). AMT = max(0, TMT - regular tax) with the exemption
    reduced by 25% of AMTI above the phase-out start
  - ISO disqualifying disposition: spread (limited to the actual gain when a
    sale price is given, IRC Section 422(c)(2)) is ordinary income; no FICA
"""

import logging
from collections.abc import Callable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.brackets import BracketEngine
from taxplanner.engines.state_tax import StateTaxCalculator
from taxplanner.models.enums import FilingStatus, IncomeType, OptionType
from taxplanner.models.options import StockOptionInput, StockOptionResult

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENTS = Decimal("0.01")

# ---------------------------------------------------------------------------
# Medicare (IRC Section 3101(b)). Thresholds are statutory, not inflation-adjusted.
# ---------------------------------------------------------------------------
REGULAR_MEDICARE_TAX_RATE = Decimal("0.0145")
ADDITIONAL_MEDICARE_TAX_RATE = Decimal("0.009")
ADDITIONAL_MEDICARE_TAX_THRESHOLD: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("200000"),
    FilingStatus.MFJ: Decimal("250000"),
    FilingStatus.MFS: Decimal("125000"),
    FilingStatus.HOH: Decimal("200000"),
    FilingStatus.QSS: Decimal("200000"),
}


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class StockOptionTaxCalculator:
    """Computes the tax cost of an NSO or ISO exercise scenario."""

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

    def calculate(
        self, option: StockOptionInput, as_of: date | None = None
    ) -> StockOptionResult:
        as_of = as_of or self.clock()
        spread = max(option.market_price - option.grant_price, ZERO) * option.shares

        if option.option_type == OptionType.NSO:
            return self._nso(option, spread, as_of)
        if option.option_type == OptionType.ISO_EXERCISE_HOLD:
            return self._iso_hold(option, spread, as_of)
        return self._iso_disqualifying(option, spread, as_of)

    # ------------------------------------------------------------------
    # Scenarios
    # ------------------------------------------------------------------

    def _nso(
        self, option: StockOptionInput, spread: Decimal, as_of: date
    ) -> StockOptionResult:
        federal = self._incremental_federal_tax(option, spread, as_of)
        state, notes = self._incremental_state_tax(option, spread, as_of)
        fica = self.compute_medicare_tax(option, spread)
        return self._result(
            option, spread,
            ordinary_income=spread,
            federal=federal,
            state=state,
            fica=fica,
            notes=notes,
        )

    def _iso_hold(
        self, option: StockOptionInput, spread: Decimal, as_of: date
    ) -> StockOptionResult:
        amt = self.compute_amt(option, spread, as_of)
        notes = [
            "No regular tax at exercise; the spread is an AMT preference item.",
            "Hold at least 1 year after exercise and 2 years after grant for "
            "long-term capital gain treatment.",
        ]
        if amt > ZERO:
            notes.append("AMT paid may be recoverable as a credit in later years (Form 8801).")
        return self._result(
            option, spread,
            ordinary_income=ZERO,
            amt_preference=spread,
            amt=amt,
            notes=notes,
        )

    def _iso_disqualifying(
        self, option: StockOptionInput, spread: Decimal, as_of: date
    ) -> StockOptionResult:
        ordinary_income = spread
        notes = ["Disqualifying disposition: the spread is taxed as ordinary income."]
        if option.sale_price is not None:
            gain = max(option.sale_price - option.grant_price, ZERO) * option.shares
            if gain < spread:
                ordinary_income = gain
                notes.append("Ordinary income limited to the actual gain on sale.")

        federal = self._incremental_federal_tax(option, ordinary_income, as_of)
        state, state_notes = self._incremental_state_tax(option, ordinary_income, as_of)
        notes.extend(state_notes)
        notes.append("ISO income is not subject to FICA.")
        return self._result(
            option, spread,
            ordinary_income=ordinary_income,
            federal=federal,
            state=state,
            notes=notes,
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def _incremental_federal_tax(
        self, option: StockOptionInput, income: Decimal, as_of: date
    ) -> Decimal:
        table = self.repository.get_bracket_table(
            option.tax_year, option.filing_status, IncomeType.ORDINARY, as_of=as_of
        )
        return self.engine.compute_progressive_tax(
            income, table, option.base_taxable_income
        ).tax

    def _incremental_state_tax(
        self, option: StockOptionInput, income: Decimal, as_of: date
    ) -> tuple[Decimal, list[str]]:
        if not option.state:
            return ZERO, []
        tax = self.state_calculator.compute(
            option.state,
            option.tax_year,
            option.filing_status,
            option.base_taxable_income,
            as_of=as_of,
            additional_income=income,
        )
        if tax is None:
            return ZERO, [f"No {option.state.upper()} tax table for {option.tax_year}; state tax omitted."]
        return tax, []

    def compute_medicare_tax(self, option: StockOptionInput, wages: Decimal) -> Decimal:
        """Medicare on the added wages, including the 0.9% surtax above the threshold."""
        base = option.base_wages if option.base_wages is not None else option.base_taxable_income
        threshold = ADDITIONAL_MEDICARE_TAX_THRESHOLD[option.filing_status]
        surtax_base = max(base + wages - threshold, ZERO) - max(base - threshold, ZERO)
        return wages * REGULAR_MEDICARE_TAX_RATE + surtax_base * ADDITIONAL_MEDICARE_TAX_RATE

    def compute_amt(
        self, option: StockOptionInput, preference: Decimal, as_of: date
    ) -> Decimal:
        """AMT = max(0, TMT - regular tax) with a flattened exemption phase-out."""
        year, status = option.tax_year, option.filing_status
        ordinary_table = self.repository.get_bracket_table(
            year, status, IncomeType.ORDINARY, as_of=as_of
        )
        amt_table = self.repository.get_bracket_table(year, status, IncomeType.AMT, as_of=as_of)
        exemption = self.repository.get_amt_exemption(year, status, as_of=as_of)

        regular_tax = self.engine.compute_progressive_tax(
            option.base_taxable_income, ordinary_table
        ).tax
        amti = option.base_taxable_income + preference
        reduction = max(amti - exemption.phaseout_start, ZERO) * exemption.phaseout_rate
        allowed_exemption = max(exemption.exemption - reduction, ZERO)
        amt_base = max(amti - allowed_exemption, ZERO)
        tmt = self.engine.compute_progressive_tax(amt_base, amt_table).tax

        logger.debug(
            "AMT: AMTI=%s exemption=%s TMT=%s regular=%s", amti, allowed_exemption, tmt, regular_tax
        )
        return max(tmt - regular_tax, ZERO)

    @staticmethod
    def _result(
        option: StockOptionInput,
        spread: Decimal,
        ordinary_income: Decimal,
        federal: Decimal = ZERO,
        state: Decimal = ZERO,
        fica: Decimal = ZERO,
        amt: Decimal = ZERO,
        amt_preference: Decimal = ZERO,
        notes: list[str] | None = None,
    ) -> StockOptionResult:
        federal, state, fica, amt = _money(federal), _money(state), _money(fica), _money(amt)
        total = federal + state + fica + amt
        return StockOptionResult(
            option_type=option.option_type,
            tax_year=option.tax_year,
            filing_status=option.filing_status,
            option_value=_money(spread),
            ordinary_income=_money(ordinary_income),
            amt_preference=_money(amt_preference),
            federal_tax=federal,
            state_tax=state,
            fica_tax=fica,
            amt=amt,
            total_tax=total,
            net_value=_money(spread - total),
            effective_rate=total / spread if spread > ZERO else ZERO,
            notes=notes or [],
        )
