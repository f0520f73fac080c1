"""State income tax estimate.

Applies the state's STATE bracket table (jurisdiction = state code) to AGI less
the state standard deduction. Flat-rate and no-income-tax states are stored as
single-bracket tables. Unknown states are never fatal: the estimate is None.
"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.brackets import BracketEngine
from taxplanner.exceptions import MissingBracketDataError
from taxplanner.models.enums import FilingStatus, IncomeType

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class StateTaxCalculator:
    """Estimates state income tax from versioned state tables."""

    def __init__(
        self,
        repository: TaxDataRepository,
        engine: BracketEngine | None = None,
    ) -> None:
        self.repository = repository
        self.engine = engine or BracketEngine()

    def taxable_income(
        self,
        state: str,
        tax_year: int,
        filing_status: FilingStatus,
        agi: Decimal,
        as_of: date | None = None,
    ) -> Decimal:
        try:
            deduction = self.repository.get_standard_deduction(
                tax_year, filing_status, as_of=as_of, jurisdiction=state,
            )
        except MissingBracketDataError:
            deduction = Decimal("0")
        return max(agi - deduction, Decimal("0"))

    def compute(
        self,
        state: str,
        tax_year: int,
        filing_status: FilingStatus,
        agi: Decimal,
        as_of: date | None = None,
        additional_income: Decimal = Decimal("0"),
    ) -> Decimal | None:
        """State tax on ``agi`` (plus ``additional_income`` stacked on top), or None if unknown."""
        state = state.strip().upper()
        try:
            table = self.repository.get_bracket_table(
                tax_year, filing_status, IncomeType.STATE,
                as_of=as_of, jurisdiction=state,
            )
        except MissingBracketDataError:
            logger.warning(
                "No %s tax table for %d (%s); state tax not estimated",
                state, tax_year, filing_status,
            )
            return None

        base = self.taxable_income(state, tax_year, filing_status, agi, as_of)
        if additional_income > 0:
            result = self.engine.compute_progressive_tax(additional_income, table, base)
        else:
            result = self.engine.compute_progressive_tax(base, table)
        return result.tax.quantize(CENTS, rounding=ROUND_HALF_UP)
