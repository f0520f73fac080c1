"""Tax computation engines."""

from taxplanner.engines.brackets import BracketEngine
from taxplanner.engines.calculator import ScenarioCalculator
from taxplanner.engines.conversions import ConversionPlanner, required_minimum_distribution
from taxplanner.engines.pipeline import analyze_scenario, compare_results, safe_analyze
from taxplanner.engines.safe_harbor import SafeHarborCalculator
from taxplanner.engines.state_tax import StateTaxCalculator
from taxplanner.engines.stock_options import StockOptionTaxCalculator
from taxplanner.engines.strategies import AvoidanceStrategyGenerator
from taxplanner.engines.thresholds import ThresholdCatalog
from taxplanner.engines.traps import TrapDetector

__all__ = [
    "AvoidanceStrategyGenerator",
    "BracketEngine",
    "ConversionPlanner",
    "SafeHarborCalculator",
    "ScenarioCalculator",
    "StateTaxCalculator",
    "StockOptionTaxCalculator",
    "ThresholdCatalog",
    "TrapDetector",
    "analyze_scenario",
    "compare_results",
    "required_minimum_distribution",
    "safe_analyze",
]
