"""Tax trap detection models: context, warnings, avoidance strategies."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from taxplanner.models.enums import ConsequenceType, Severity, ThresholdCategory

# ---------------------------------------------------------------------------
# Detection defaults (overridable per call through TrapContext)
# ---------------------------------------------------------------------------
DEFAULT_SOCIAL_SECURITY_BUFFER = Decimal("2000")
DEFAULT_ACA_BUFFER = Decimal("2500")
DEFAULT_BRACKET_BUFFER = Decimal("5000")
# Second-lowest-cost silver plan, per person per month, when the caller has no quote.
DEFAULT_BENCHMARK_PREMIUM_MONTHLY = Decimal("500")


class TrapContext(BaseModel):
    """Household facts the detector needs beyond the TaxResult."""

    household_size: int = Field(default=1, ge=1)
    medicare_enrollees: int = Field(default=1, ge=0)
    aca_enrolled: bool = False
    benchmark_premium_monthly: Decimal = DEFAULT_BENCHMARK_PREMIUM_MONTHLY
    social_security_buffer: Decimal = DEFAULT_SOCIAL_SECURITY_BUFFER
    aca_buffer: Decimal = DEFAULT_ACA_BUFFER
    bracket_buffer: Decimal = DEFAULT_BRACKET_BUFFER
    report_incomplete_data: bool = True
    as_of: date | None = None


class TrapWarning(BaseModel):
    """A detected (or approaching) threshold crossing."""

    model_config = ConfigDict(frozen=True)

    id: str
    trap_type: ThresholdCategory | str
    severity: Severity
    title: str
    description: str
    threshold_crossed: Decimal | None = None
    financial_impact: Decimal = Decimal("0")
    # Cost still owed just below ``threshold_crossed`` (a lower IRMAA tier)
    residual_impact: Decimal = Decimal("0")
    source_rule_id: str | None = None
    consequence_type: ConsequenceType | None = None
    # Value of the income measure tested (MAGI, provisional income, taxable income)
    income_measure: Decimal | None = None
    magnitude: Decimal | None = None
    next_rate: Decimal | None = None
    rate_delta: Decimal | None = None


class AvoidanceStrategy(BaseModel):
    """A quantified income adjustment that would avoid one trap."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    estimated_tax_savings: Decimal
    suggested_adjustment_amount: Decimal
    target_trap_id: str
    trap_type: ThresholdCategory | str | None = None


class AuditEntry(BaseModel):
    """Audit record for a user-visible decision (e.g. accepting a strategy).

    Built by the engine and handed to the caller's audit sink; never persisted here.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    action: str
    scenario_id: str
    rule_id: str | None = None
    user_id: str | None = None
    details: dict = Field(default_factory=dict)


def build_audit_entry(
    action: str,
    scenario_id: str,
    rule_id: str | None = None,
    user_id: str | None = None,
    details: dict | None = None,
    timestamp: datetime | None = None,
) -> AuditEntry:
    """Construct an AuditEntry for the caller's audit sink."""
    return AuditEntry(
        timestamp=timestamp or datetime.now(),
        action=action,
        scenario_id=scenario_id,
        rule_id=rule_id,
        user_id=user_id,
        details=details or {},
    )
