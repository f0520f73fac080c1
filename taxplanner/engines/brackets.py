"""Progressive bracket arithmetic.

Pure functions over a BracketTable. A slice of income is "stacked" on top of
income already occupying the lower brackets: the tax on ``amount`` starting at
position ``S`` is the sum over brackets of

    overlap([S, S + amount], [min, max]) x rate

so ``tax(b, S=a) + tax(a, S=0) == tax(a + b, S=0)``. No rounding happens here.
"""

from decimal import Decimal

from taxplanner.models.scenario import BracketTaxResult
from taxplanner.models.tax_data import BracketTable

ZERO = Decimal("0")


class BracketEngine:
    """Computes stacked progressive tax against a single bracket table."""

    def compute_progressive_tax(
        self,
        taxable_amount: Decimal,
        table: BracketTable,
        starting_stacked_income: Decimal = ZERO,
    ) -> BracketTaxResult:
        amount = max(taxable_amount, ZERO)
        start = max(starting_stacked_income, ZERO)
        end = start + amount

        tax = ZERO
        if amount > ZERO:
            for entry in table.entries:
                upper = entry.max if entry.max is not None else end
                overlap = min(end, upper) - max(start, entry.min)
                if overlap > ZERO:
                    tax += overlap * entry.rate
                if entry.max is None or end <= entry.max:
                    break

        if amount <= ZERO:
            marginal = table.entries[0].rate
        else:
            marginal = table.entries[self.locate_bracket(end, table)].rate
        return BracketTaxResult(tax=tax, marginal_rate=marginal)

    @staticmethod
    def locate_bracket(position: Decimal, table: BracketTable) -> int:
        """Index of the bracket containing ``position``.

        Brackets are half-open ``(min, max]``: income exactly at a boundary is
        still taxed at the lower rate. Position 0 maps to the first bracket.
        """
        for index, entry in enumerate(table.entries):
            if entry.max is None or position <= entry.max:
                return index
        return len(table.entries) - 1

    def rate_at(self, position: Decimal, table: BracketTable) -> Decimal:
        return table.entries[self.locate_bracket(position, table)].rate

    def distance_to_next_bracket(
        self, position: Decimal, table: BracketTable
    ) -> tuple[Decimal, Decimal] | None:
        """(dollars until the next rate applies, that rate), or None in the top bracket."""
        index = self.locate_bracket(position, table)
        entry = table.entries[index]
        if entry.max is None:
            return None
        return entry.max - position, table.entries[index + 1].rate

    def previous_boundary(
        self, position: Decimal, table: BracketTable
    ) -> tuple[Decimal, Decimal] | None:
        """(lower boundary of the current bracket, rate below it), or None in the first bracket."""
        index = self.locate_bracket(position, table)
        if index == 0:
            return None
        return table.entries[index].min, table.entries[index - 1].rate

    def headroom_to_rate(
        self, position: Decimal, table: BracketTable, ceiling_rate: Decimal
    ) -> Decimal | None:
        """Income that fits on top of ``position`` before any of it is taxed above ``ceiling_rate``.

        Zero when ``position`` already sits in a bracket above the ceiling.
        None when no bracket above the ceiling exists.
        """
        cursor = max(position, ZERO)
        index = self.locate_bracket(cursor, table)
        if table.entries[index].rate > ceiling_rate:
            return ZERO
        step = self.distance_to_next_bracket(cursor, table)
        if step is None:
            return None
        headroom, _ = step
        for entry in table.entries[index + 1:]:
            if entry.rate > ceiling_rate:
                break
            if entry.max is None:
                return None
            headroom += entry.max - entry.min
        return headroom
