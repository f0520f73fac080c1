"""Shared test fixtures for the tax planner."""

from datetime import date
from decimal import Decimal

import pytest

from taxplanner.data.repository import TaxDataRepository
from taxplanner.engines.brackets import BracketEngine
from taxplanner.engines.calculator import ScenarioCalculator
from taxplanner.models.enums import FilingStatus, IncomeType
from taxplanner.models.scenario import ScenarioInput
from taxplanner.models.tax_data import BracketTable, TaxDataVersion

# Every bundled version is effective by this date.
AS_OF = date(2025, 12, 31)


@pytest.fixture
def repository() -> TaxDataRepository:
    return TaxDataRepository.with_reference_data()


@pytest.fixture
def calculator(repository: TaxDataRepository) -> ScenarioCalculator:
    return ScenarioCalculator(repository, clock=lambda: AS_OF)


@pytest.fixture
def engine() -> BracketEngine:
    return BracketEngine()


@pytest.fixture
def simple_table() -> BracketTable:
    """10% to 10k, 20% to 50k, 30% above."""
    return BracketTable.from_bounds(
        [
            (Decimal("10000"), Decimal("0.10")),
            (Decimal("50000"), Decimal("0.20")),
            (None, Decimal("0.30")),
        ],
        version_id="test.1.0",
        year=2030,
        filing_status=FilingStatus.SINGLE,
        income_type=IncomeType.ORDINARY,
    )


@pytest.fixture
def single_2023_scenario() -> ScenarioInput:
    return ScenarioInput(
        scenario_id="scenario-2023-single",
        tax_year=2023,
        filing_status=FilingStatus.SINGLE,
        wages=Decimal("60000"),
    )


@pytest.fixture
def retiree_scenario() -> ScenarioInput:
    """MFJ retirees with Social Security, IRA income and a Roth conversion."""
    return ScenarioInput(
        scenario_id="scenario-retiree",
        tax_year=2024,
        filing_status=FilingStatus.MFJ,
        interest=Decimal("4000"),
        dividends=Decimal("6000"),
        ira_distributions=Decimal("40000"),
        roth_conversion=Decimal("60000"),
        social_security_benefits=Decimal("48000"),
    )


@pytest.fixture
def make_version():
    """Factory for TaxDataVersion records: make_version("2030.1.0", 2030, date(...))."""

    def _make(version_id: str, year: int, effective: date, **kwargs) -> TaxDataVersion:
        return TaxDataVersion(
            id=version_id,
            year=year,
            version=version_id.split(".", 1)[-1],
            effective_date=effective,
            **kwargs,
        )

    return _make
