"""Versioned reference data models.

Every table and rule belongs to exactly one TaxDataVersion. Versions are
append-only: a mid-year correction is published as a new version that only
carries the records it changes, and lookups fall back to earlier versions
of the same year for everything else.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from taxplanner.models.enums import (
    ConsequenceType,
    FilingStatus,
    IncomeType,
    ThresholdCategory,
    ThresholdUnit,
)


class TaxDataVersion(BaseModel):
    """One published (or projected) release of tax data for a year."""

    model_config = ConfigDict(frozen=True)

    id: str
    year: int
    version: str
    effective_date: date
    published_date: date | None = None
    is_projected: bool = False
    is_correction: bool = False
    description: str = ""
    legislation_reference: str | None = None


class BracketEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: Decimal = Field(ge=0)
    max: Decimal | None = None  # None = unbounded
    rate: Decimal = Field(ge=0, le=1)


class BracketTable(BaseModel):
    """Progressive rate schedule for one year, status, income type and jurisdiction.

    Invariants (checked on construction):
      - non-empty, first bracket starts at 0
      - contiguous: entries[i].max == entries[i + 1].min
      - strictly ascending rates
      - only the last bracket is unbounded
    """

    model_config = ConfigDict(frozen=True)

    version_id: str
    year: int
    filing_status: FilingStatus
    income_type: IncomeType
    jurisdiction: str = "US"
    entries: list[BracketEntry]

    @model_validator(mode="after")
    def _check_schedule(self) -> "BracketTable":
        if not self.entries:
            raise ValueError("bracket table must have at least one entry")
        if self.entries[0].min != Decimal("0"):
            raise ValueError("first bracket must start at 0")
        for lower, upper in zip(self.entries, self.entries[1:]):
            if lower.max is None:
                raise ValueError("only the last bracket may be unbounded")
            if lower.max != upper.min:
                raise ValueError(
                    f"brackets are not contiguous at {lower.max} / {upper.min}"
                )
            if lower.max <= lower.min:
                raise ValueError(f"empty bracket [{lower.min}, {lower.max}]")
            if upper.rate <= lower.rate:
                raise ValueError(
                    f"rates must strictly increase ({lower.rate} -> {upper.rate})"
                )
        if self.entries[-1].max is not None:
            raise ValueError("last bracket must be unbounded")
        return self

    @classmethod
    def from_bounds(
        cls,
        bounds: list[tuple[Decimal | None, Decimal]],
        **kwargs,
    ) -> "BracketTable":
        """Build a table from [(upper_bound, rate), ...] with None for the top bracket."""
        entries: list[BracketEntry] = []
        lower = Decimal("0")
        for upper, rate in bounds:
            entries.append(BracketEntry(min=lower, max=upper, rate=rate))
            if upper is not None:
                lower = upper
        return cls(entries=entries, **kwargs)

    @property
    def key(self) -> tuple[int, FilingStatus, IncomeType, str]:
        return (self.year, self.filing_status, self.income_type, self.jurisdiction)


class DeductionTable(BaseModel):
    """Standard deduction for one year, status and jurisdiction."""

    model_config = ConfigDict(frozen=True)

    version_id: str
    year: int
    filing_status: FilingStatus
    jurisdiction: str = "US"
    amount: Decimal = Field(ge=0)


class ThresholdRule(BaseModel):
    """A boundary where crossing changes cost non-linearly.

    ``magnitude`` meaning depends on category:
      - irmaa: monthly per-enrollee surcharge of the tier starting here
      - social_security: inclusion rate above the boundary (0.50 / 0.85)
      - aca: premium cap as a fraction of MAGI above the boundary,
        None when the subsidy ends entirely
      - bracket / capital gains breakpoints: marginal rate above the boundary
    """

    model_config = ConfigDict(frozen=True)

    id: str
    category: ThresholdCategory
    year: int
    filing_status: FilingStatus
    threshold_value: Decimal
    consequence_type: ConsequenceType
    magnitude: Decimal | None = None
    description_template: str = ""
    version_id: str
    unit: ThresholdUnit = ThresholdUnit.DOLLARS
    tier: int = 0

    def describe(self, **values) -> str:
        """Fill the description template; unknown placeholders are left as-is."""
        if not self.description_template:
            return ""
        try:
            return self.description_template.format(
                threshold=self.threshold_value,
                magnitude=self.magnitude,
                tier=self.tier,
                **values,
            )
        except (KeyError, IndexError, ValueError):
            return self.description_template


class PovertyGuideline(BaseModel):
    """HHS poverty guideline used for ACA premium tax credit bands."""

    model_config = ConfigDict(frozen=True)

    version_id: str
    year: int
    first_person: Decimal
    additional_person: Decimal

    def for_household(self, household_size: int) -> Decimal:
        size = max(household_size, 1)
        return self.first_person + self.additional_person * (size - 1)


class AmtExemption(BaseModel):
    """AMT exemption and its phase-out start (Form 6251)."""

    model_config = ConfigDict(frozen=True)

    version_id: str
    year: int
    filing_status: FilingStatus
    exemption: Decimal
    phaseout_start: Decimal
    phaseout_rate: Decimal = Decimal("0.25")
