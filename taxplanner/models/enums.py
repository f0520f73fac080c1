"""Enumerations for the tax planner."""

from enum import StrEnum


class FilingStatus(StrEnum):
    SINGLE = "SINGLE"
    MFJ = "MARRIED_FILING_JOINTLY"
    MFS = "MARRIED_FILING_SEPARATELY"
    HOH = "HEAD_OF_HOUSEHOLD"
    QSS = "QUALIFYING_SURVIVING_SPOUSE"


# Short names accepted by the CLI and the dataset loader.
FILING_STATUS_ALIASES: dict[str, FilingStatus] = {
    "SINGLE": FilingStatus.SINGLE,
    "MFJ": FilingStatus.MFJ,
    "MFS": FilingStatus.MFS,
    "HOH": FilingStatus.HOH,
    "QSS": FilingStatus.QSS,
}


def parse_filing_status(value: str) -> FilingStatus:
    """Resolve a short alias or full enum value. Raises ValueError if unknown."""
    key = value.strip().upper()
    if key in FILING_STATUS_ALIASES:
        return FILING_STATUS_ALIASES[key]
    return FilingStatus(key)


class IncomeType(StrEnum):
    ORDINARY = "ORDINARY"
    CAPITAL_GAINS = "CAPITAL_GAINS"
    STATE = "STATE"
    AMT = "AMT"


class ThresholdCategory(StrEnum):
    IRMAA = "irmaa"
    SOCIAL_SECURITY = "social_security"
    ACA = "aca"
    BRACKET_BREAKPOINT = "bracket_breakpoint"
    CAPITAL_GAINS_BREAKPOINT = "capital_gains_breakpoint"


class ConsequenceType(StrEnum):
    CLIFF = "cliff"
    PHASE_IN = "phase_in"


class ThresholdUnit(StrEnum):
    DOLLARS = "dollars"
    FPL_PERCENT = "fpl_percent"


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.CRITICAL: 2,
}


class OptionType(StrEnum):
    NSO = "NSO"
    ISO_EXERCISE_HOLD = "ISO_EXERCISE_HOLD"
    ISO_DISQUALIFYING = "ISO_DISQUALIFYING"


class ConversionStrategy(StrEnum):
    """How a Roth conversion is sized."""

    FIXED = "fixed"
    BRACKET_12 = "bracket_12"
    BRACKET_12_22 = "bracket_12_22"
