"""Plain-text scenario and tax-trap reports."""

from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from taxplanner.engines.pipeline import ScenarioAnalysis
from taxplanner.models.scenario import TaxResult

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _money(value: Decimal | None) -> str:
    if value is None:
        return "n/a"
    return f"${value:,.2f}"


def _pct(value: Decimal) -> str:
    return f"{value * 100:.2f}%"


def _environment() -> Environment:
    env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)))
    env.filters["money"] = _money
    env.filters["pct"] = _pct
    return env


class ScenarioSummaryGenerator:
    """Generates a human-readable summary of one TaxResult."""

    def __init__(self) -> None:
        self.env = _environment()

    def render(self, result: TaxResult) -> str:
        template = self.env.get_template("scenario_summary.txt")
        return template.render(r=result)


class TrapReportGenerator:
    """Generates the scenario summary followed by traps and avoidance strategies."""

    def __init__(self) -> None:
        self.env = _environment()

    def render(self, analysis: ScenarioAnalysis) -> str:
        template = self.env.get_template("trap_report.txt")
        return template.render(
            r=analysis.result,
            warnings=analysis.warnings,
            strategies=analysis.strategies,
            total_savings=analysis.total_potential_savings,
            roth_conversion=analysis.roth_conversion,
            adjustable_amount=analysis.adjustable_amount,
        )
