"""Custom exceptions for the tax planner."""

from datetime import date


class TaxPlannerError(Exception):
    """Base exception for tax planning errors."""


class DataNotFoundError(TaxPlannerError):
    """Raised when no tax data version exists for the requested year."""

    def __init__(self, year: int, as_of: date | None = None):
        self.year = year
        self.as_of = as_of
        super().__init__(f"No tax data available for year {year}")


class MissingBracketDataError(TaxPlannerError):
    """Raised when a bracket or deduction table is absent for a key."""

    def __init__(
        self,
        year: int,
        filing_status: str,
        income_type: str,
        jurisdiction: str = "US",
    ):
        self.year = year
        self.filing_status = filing_status
        self.income_type = income_type
        self.jurisdiction = jurisdiction
        super().__init__(
            f"Missing {jurisdiction} {income_type} data for {year} ({filing_status})"
        )


class InvalidInputError(TaxPlannerError):
    """Raised when a scenario input cannot be calculated."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid input '{field}': {message}")


class IncompleteThresholdDataError(TaxPlannerError):
    """Signals a threshold category with no rules for the year/status.

    Never propagated out of trap detection: the category is skipped and
    the condition is logged.
    """

    def __init__(self, category: str, year: int, filing_status: str):
        self.category = category
        self.year = year
        self.filing_status = filing_status
        super().__init__(
            f"No {category} threshold data for {year} ({filing_status})"
        )


class DataValidationError(TaxPlannerError):
    """Raised when reference data violates a repository invariant."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error on '{field}': {message}")
