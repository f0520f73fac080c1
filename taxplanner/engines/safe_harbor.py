"""Estimated tax safe harbor (IRC Section 6654(d), Pub. 505).

No underpayment penalty applies when withholding plus estimated payments
reach the lesser of 90% of the current year's tax or 100% of the prior
year's tax (110% when prior-year AGI exceeded $150,000, $75,000 MFS).
"""

from decimal import ROUND_CEILING, Decimal

from pydantic import BaseModel, Field

from taxplanner.models.enums import FilingStatus

ZERO = Decimal("0")
CURRENT_YEAR_PERCENT = Decimal("0.90")
PRIOR_YEAR_PERCENT = Decimal("1.00")
HIGH_INCOME_PRIOR_YEAR_PERCENT = Decimal("1.10")
HIGH_INCOME_AGI = Decimal("150000")
HIGH_INCOME_AGI_MFS = Decimal("75000")
# Recommendations are rounded up to the next $100.
ROUNDING_INCREMENT = Decimal("100")


class SafeHarborInput(BaseModel):
    current_year_tax: Decimal = Field(ge=0)
    prior_year_tax: Decimal = Field(ge=0)
    current_withholding: Decimal = Decimal("0")
    estimated_remaining_withholding: Decimal = Decimal("0")
    estimated_payments: Decimal = Decimal("0")
    prior_year_agi: Decimal | None = None
    filing_status: FilingStatus = FilingStatus.SINGLE
    high_income: bool | None = Field(
        default=None,
        description="Force the 110% rule; derived from prior_year_agi when omitted",
    )


class SafeHarborResult(BaseModel):
    total_projected_payments: Decimal
    current_year_requirement: Decimal
    prior_year_requirement: Decimal
    safe_harbor_minimum: Decimal
    uses_high_income_rule: bool
    meets_safe_harbor: bool
    shortfall: Decimal
    recommended_additional_withholding: Decimal


class SafeHarborCalculator:
    """Computes the minimum payments that avoid an underpayment penalty."""

    def calculate(self, data: SafeHarborInput) -> SafeHarborResult:
        total_paid = (
            data.current_withholding
            + data.estimated_remaining_withholding
            + data.estimated_payments
        )
        high_income = self._is_high_income(data)

        current_requirement = data.current_year_tax * CURRENT_YEAR_PERCENT
        prior_percent = HIGH_INCOME_PRIOR_YEAR_PERCENT if high_income else PRIOR_YEAR_PERCENT
        prior_requirement = data.prior_year_tax * prior_percent
        minimum = min(current_requirement, prior_requirement)

        shortfall = max(minimum - total_paid, ZERO)
        if shortfall > ZERO:
            recommended = (shortfall / ROUNDING_INCREMENT).to_integral_value(
                rounding=ROUND_CEILING
            ) * ROUNDING_INCREMENT
        else:
            recommended = ZERO

        return SafeHarborResult(
            total_projected_payments=total_paid,
            current_year_requirement=current_requirement,
            prior_year_requirement=prior_requirement,
            safe_harbor_minimum=minimum,
            uses_high_income_rule=high_income,
            meets_safe_harbor=shortfall == ZERO,
            shortfall=shortfall,
            recommended_additional_withholding=recommended,
        )

    @staticmethod
    def _is_high_income(data: SafeHarborInput) -> bool:
        if data.high_income is not None:
            return data.high_income
        if data.prior_year_agi is None:
            return False
        limit = HIGH_INCOME_AGI_MFS if data.filing_status == FilingStatus.MFS else HIGH_INCOME_AGI
        return data.prior_year_agi > limit
