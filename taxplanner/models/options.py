"""Stock option exercise models (NSO / ISO)."""

from decimal import Decimal

from pydantic import BaseModel, Field

from taxplanner.models.enums import FilingStatus, OptionType


class StockOptionInput(BaseModel):
    """One exercise scenario layered on top of the taxpayer's other income."""

    option_type: OptionType
    shares: Decimal = Field(gt=0)
    grant_price: Decimal = Field(ge=0, description="Exercise (strike) price per share")
    market_price: Decimal = Field(ge=0, description="FMV per share on the exercise date")
    sale_price: Decimal | None = Field(
        default=None,
        description="Sale price per share for a disqualifying disposition",
    )
    tax_year: int
    filing_status: FilingStatus = FilingStatus.SINGLE
    base_taxable_income: Decimal = Field(
        default=Decimal("0"),
        description="Taxable income before the exercise (after deductions)",
    )
    base_wages: Decimal | None = Field(
        default=None,
        description="Medicare wages before the exercise; defaults to base taxable income",
    )
    state: str | None = None


class StockOptionResult(BaseModel):
    option_type: OptionType
    tax_year: int
    filing_status: FilingStatus
    option_value: Decimal  # (market - grant) x shares
    ordinary_income: Decimal
    amt_preference: Decimal = Decimal("0")
    federal_tax: Decimal = Decimal("0")
    state_tax: Decimal = Decimal("0")
    fica_tax: Decimal = Decimal("0")
    amt: Decimal = Decimal("0")
    total_tax: Decimal
    net_value: Decimal
    effective_rate: Decimal
    notes: list[str] = []
