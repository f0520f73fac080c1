"""Data models for the tax planner."""

from taxplanner.models.enums import (
    ConsequenceType,
    ConversionStrategy,
    FilingStatus,
    IncomeType,
    OptionType,
    Severity,
    ThresholdCategory,
    ThresholdUnit,
    parse_filing_status,
)
from taxplanner.models.options import StockOptionInput, StockOptionResult
from taxplanner.models.scenario import BracketTaxResult, ScenarioInput, TaxResult
from taxplanner.models.tax_data import (
    AmtExemption,
    BracketEntry,
    BracketTable,
    DeductionTable,
    PovertyGuideline,
    TaxDataVersion,
    ThresholdRule,
)
from taxplanner.models.traps import (
    AuditEntry,
    AvoidanceStrategy,
    TrapContext,
    TrapWarning,
    build_audit_entry,
)

__all__ = [
    "AmtExemption",
    "AuditEntry",
    "AvoidanceStrategy",
    "BracketEntry",
    "BracketTable",
    "BracketTaxResult",
    "ConsequenceType",
    "ConversionStrategy",
    "DeductionTable",
    "FilingStatus",
    "IncomeType",
    "OptionType",
    "PovertyGuideline",
    "ScenarioInput",
    "Severity",
    "StockOptionInput",
    "StockOptionResult",
    "TaxDataVersion",
    "TaxResult",
    "ThresholdCategory",
    "ThresholdRule",
    "ThresholdUnit",
    "TrapContext",
    "TrapWarning",
    "build_audit_entry",
    "parse_filing_status",
]
