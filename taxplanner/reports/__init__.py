"""Report generation for the tax planner."""

from taxplanner.reports.summary import ScenarioSummaryGenerator, TrapReportGenerator

__all__ = [
    "ScenarioSummaryGenerator",
    "TrapReportGenerator",
]
