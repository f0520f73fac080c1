"""Scenario input and calculation result models."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from taxplanner.models.enums import FilingStatus


class ScenarioInput(BaseModel):
    """A taxpayer's income profile for one what-if scenario.

    Amounts are annual. Negative income components are treated as zero by
    the calculator.
    """

    scenario_id: str = Field(default_factory=lambda: str(uuid4()))
    tax_year: int
    filing_status: FilingStatus = FilingStatus.SINGLE

    # --- Income ---
    wages: Decimal = Decimal("0")
    interest: Decimal = Decimal("0")
    dividends: Decimal = Decimal("0")
    long_term_capital_gains: Decimal = Decimal("0")
    ira_distributions: Decimal = Decimal("0")
    roth_conversion: Decimal = Decimal("0")
    social_security_benefits: Decimal = Field(
        default=Decimal("0"),
        description="Gross Social Security benefits (SSA-1099, Box 5)",
    )

    # --- Deductions ---
    use_itemized_deduction: bool = False
    itemized_deduction_amount: Decimal | None = None

    state: str | None = Field(
        default=None,
        description="Two-letter state code for the optional state tax estimate",
    )


class BracketTaxResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax: Decimal
    marginal_rate: Decimal


class TaxResult(BaseModel):
    """Immutable snapshot of one scenario calculation."""

    model_config = ConfigDict(frozen=True)

    scenario_id: str
    tax_year: int
    filing_status: FilingStatus

    # Income
    total_income: Decimal
    agi: Decimal
    magi: Decimal
    taxable_income: Decimal
    ordinary_taxable_income: Decimal
    taxable_long_term_capital_gains: Decimal
    deduction_used: Decimal
    used_itemized_deduction: bool = False

    # Social Security
    social_security_benefits: Decimal = Decimal("0")
    taxable_social_security: Decimal = Decimal("0")
    social_security_taxable_tier: int = 0  # 0, 50 or 85 (percent)
    provisional_income: Decimal = Decimal("0")

    # Federal tax
    ordinary_tax: Decimal
    capital_gains_tax: Decimal
    total_tax: Decimal
    marginal_rate: Decimal
    marginal_capital_gains_rate: Decimal
    effective_rate: Decimal

    # State tax (optional estimate)
    state: str | None = None
    state_tax: Decimal | None = None

    # Provenance
    tax_data_version_used: str
    data_is_projected: bool = False
    data_is_fallback: bool = False
    computed_at: date
