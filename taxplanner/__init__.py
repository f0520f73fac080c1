"""Tax scenario planner: versioned tax calculation and tax-trap analysis."""

__version__ = "0.1.0"
