"""Typer CLI interface for the tax planner."""

import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import typer

app = typer.Typer(
    name="taxplanner",
    help="Tax scenario planner: versioned tax calculation and tax-trap analysis.",
)

DATA_OPTION_HELP = "JSON dataset appended to the bundled reference data"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Tax scenario planner: versioned tax calculation and tax-trap analysis."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


class _DecimalEncoder(json.JSONEncoder):
    """JSON encoder that serializes Decimal as string."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, cls=_DecimalEncoder, indent=2, default=str))


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _filing_status(value: str):
    from taxplanner.models.enums import FILING_STATUS_ALIASES, parse_filing_status

    try:
        return parse_filing_status(value)
    except ValueError:
        valid = ", ".join(FILING_STATUS_ALIASES)
        _fail(f"Invalid filing status '{value}'. Valid: {valid}")


def _as_of(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        _fail(f"Invalid --as-of date '{value}'. Use YYYY-MM-DD.")


def _repository(data: Path | None):
    from taxplanner.data.loader import build_repository
    from taxplanner.exceptions import TaxPlannerError

    try:
        return build_repository(data)
    except FileNotFoundError as exc:
        _fail(str(exc))
    except TaxPlannerError as exc:
        _fail(str(exc))


def _scenario(
    year: int,
    filing_status: str,
    wages: float,
    interest: float,
    dividends: float,
    capital_gains: float,
    ira: float,
    roth: float,
    social_security: float,
    itemized: float | None,
    state: str | None,
    ira_balance: float = 0.0,
    age: int | None = None,
):
    from taxplanner.engines.conversions import with_required_distribution
    from taxplanner.exceptions import InvalidInputError
    from taxplanner.models.scenario import ScenarioInput

    scenario = ScenarioInput(
        tax_year=year,
        filing_status=_filing_status(filing_status),
        wages=Decimal(str(wages)),
        interest=Decimal(str(interest)),
        dividends=Decimal(str(dividends)),
        long_term_capital_gains=Decimal(str(capital_gains)),
        ira_distributions=Decimal(str(ira)),
        roth_conversion=Decimal(str(roth)),
        social_security_benefits=Decimal(str(social_security)),
        use_itemized_deduction=itemized is not None,
        itemized_deduction_amount=Decimal(str(itemized)) if itemized is not None else None,
        state=state,
    )
    if age is None:
        return scenario
    try:
        return with_required_distribution(scenario, Decimal(str(ira_balance)), age)
    except InvalidInputError as exc:
        _fail(str(exc))


@app.command()
def calculate(
    year: int = typer.Argument(..., help="Tax year to calculate"),
    filing_status: str = typer.Option(
        "SINGLE", "--filing-status", "-s", help="Filing status: SINGLE, MFJ, MFS, HOH, QSS",
    ),
    wages: float = typer.Option(0.0, "--wages", help="W-2 wages"),
    interest: float = typer.Option(0.0, "--interest", help="Taxable interest"),
    dividends: float = typer.Option(0.0, "--dividends", help="Dividends"),
    capital_gains: float = typer.Option(0.0, "--ltcg", help="Long-term capital gains"),
    ira: float = typer.Option(0.0, "--ira", help="IRA distributions (in addition to any RMD)"),
    ira_balance: float = typer.Option(0.0, "--ira-balance", help="Prior year-end IRA balance for the RMD"),
    age: int | None = typer.Option(None, "--age", help="IRA owner's age this year (adds the RMD)"),
    roth: float = typer.Option(0.0, "--roth-conversion", help="Proposed Roth conversion"),
    social_security: float = typer.Option(0.0, "--social-security", help="Gross Social Security benefits"),
    itemized: float | None = typer.Option(None, "--itemized", help="Itemized deduction total (default: standard)"),
    state: str | None = typer.Option(None, "--state", help="Two-letter state code for a state estimate"),
    as_of: str | None = typer.Option(None, "--as-of", help="Resolve tax data as of this date (YYYY-MM-DD)"),
    data: Path | None = typer.Option(None, "--data", envvar="TAXPLANNER_DATA", help=DATA_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate federal (and optional state) tax for one scenario."""
    from taxplanner.engines.calculator import ScenarioCalculator
    from taxplanner.exceptions import TaxPlannerError
    from taxplanner.reports import ScenarioSummaryGenerator

    scenario = _scenario(
        year, filing_status, wages, interest, dividends, capital_gains,
        ira, roth, social_security, itemized, state, ira_balance, age,
    )
    repository = _repository(data)
    try:
        result = ScenarioCalculator(repository).calculate(scenario, as_of=_as_of(as_of))
    except TaxPlannerError as exc:
        _fail(str(exc))

    if json_output:
        _echo_json(result.model_dump())
        return
    typer.echo(ScenarioSummaryGenerator().render(result))


@app.command()
def traps(
    year: int = typer.Argument(..., help="Tax year to analyze"),
    filing_status: str = typer.Option(
        "SINGLE", "--filing-status", "-s", help="Filing status: SINGLE, MFJ, MFS, HOH, QSS",
    ),
    wages: float = typer.Option(0.0, "--wages", help="W-2 wages"),
    interest: float = typer.Option(0.0, "--interest", help="Taxable interest"),
    dividends: float = typer.Option(0.0, "--dividends", help="Dividends"),
    capital_gains: float = typer.Option(0.0, "--ltcg", help="Long-term capital gains"),
    ira: float = typer.Option(0.0, "--ira", help="IRA distributions (in addition to any RMD)"),
    ira_balance: float = typer.Option(0.0, "--ira-balance", help="Prior year-end IRA balance for the RMD"),
    age: int | None = typer.Option(None, "--age", help="IRA owner's age this year (adds the RMD)"),
    roth: float = typer.Option(0.0, "--roth-conversion", help="Proposed Roth conversion"),
    social_security: float = typer.Option(0.0, "--social-security", help="Gross Social Security benefits"),
    itemized: float | None = typer.Option(None, "--itemized", help="Itemized deduction total (default: standard)"),
    state: str | None = typer.Option(None, "--state", help="Two-letter state code for a state estimate"),
    household_size: int = typer.Option(1, "--household-size", help="Household size (ACA)"),
    medicare_enrollees: int = typer.Option(1, "--medicare-enrollees", help="People enrolled in Medicare (IRMAA)"),
    aca: bool = typer.Option(False, "--aca", help="Household buys ACA marketplace coverage"),
    proposed_adjustment: float = typer.Option(
        0.0, "--max-adjustment", help="Most income that can be shifted (0 = unlimited)",
    ),
    conversion_strategy: str | None = typer.Option(
        None, "--conversion-strategy", help="Size the Roth conversion: fixed, bracket_12 or bracket_12_22",
    ),
    as_of: str | None = typer.Option(None, "--as-of", help="Resolve tax data as of this date (YYYY-MM-DD)"),
    data: Path | None = typer.Option(None, "--data", envvar="TAXPLANNER_DATA", help=DATA_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Detect tax traps and rank strategies to avoid them."""
    from taxplanner.engines.pipeline import analyze_scenario
    from taxplanner.exceptions import TaxPlannerError
    from taxplanner.models.enums import ConversionStrategy
    from taxplanner.models.traps import TrapContext
    from taxplanner.reports import TrapReportGenerator

    scenario = _scenario(
        year, filing_status, wages, interest, dividends, capital_gains,
        ira, roth, social_security, itemized, state, ira_balance, age,
    )
    if household_size < 1 or medicare_enrollees < 0:
        _fail("--household-size must be at least 1 and --medicare-enrollees non-negative")
    strategy = None
    if conversion_strategy is not None:
        try:
            strategy = ConversionStrategy(conversion_strategy.lower())
        except ValueError:
            valid = ", ".join(s.value for s in ConversionStrategy)
            _fail(f"Invalid conversion strategy '{conversion_strategy}'. Valid: {valid}")
    context = TrapContext(
        household_size=household_size,
        medicare_enrollees=medicare_enrollees,
        aca_enrolled=aca,
    )
    repository = _repository(data)
    try:
        analysis = analyze_scenario(
            scenario,
            repository,
            context=context,
            proposed_adjustable_amount=Decimal(str(proposed_adjustment)),
            as_of=_as_of(as_of),
            conversion_strategy=strategy,
        )
    except TaxPlannerError as exc:
        _fail(str(exc))

    if json_output:
        _echo_json(analysis.model_dump())
        return
    typer.echo(TrapReportGenerator().render(analysis))


@app.command()
def options(
    year: int = typer.Argument(..., help="Tax year of the exercise"),
    option_type: str = typer.Option(
        "NSO", "--type", "-t", help="NSO, ISO_EXERCISE_HOLD or ISO_DISQUALIFYING",
    ),
    shares: float = typer.Option(..., "--shares", help="Shares exercised"),
    grant_price: float = typer.Option(..., "--grant-price", help="Exercise (strike) price per share"),
    market_price: float = typer.Option(..., "--market-price", help="FMV per share at exercise"),
    sale_price: float | None = typer.Option(None, "--sale-price", help="Sale price (disqualifying disposition)"),
    filing_status: str = typer.Option(
        "SINGLE", "--filing-status", "-s", help="Filing status: SINGLE, MFJ, MFS, HOH, QSS",
    ),
    base_income: float = typer.Option(0.0, "--base-income", help="Taxable income before the exercise"),
    base_wages: float | None = typer.Option(None, "--base-wages", help="Medicare wages before the exercise"),
    state: str | None = typer.Option(None, "--state", help="Two-letter state code"),
    as_of: str | None = typer.Option(None, "--as-of", help="Resolve tax data as of this date (YYYY-MM-DD)"),
    data: Path | None = typer.Option(None, "--data", envvar="TAXPLANNER_DATA", help=DATA_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate the tax cost of exercising NSOs or ISOs."""
    from pydantic import ValidationError

    from taxplanner.engines.stock_options import StockOptionTaxCalculator
    from taxplanner.exceptions import TaxPlannerError
    from taxplanner.models.enums import OptionType
    from taxplanner.models.options import StockOptionInput

    try:
        kind = OptionType(option_type.upper())
    except ValueError:
        valid = ", ".join(t.value for t in OptionType)
        _fail(f"Invalid option type '{option_type}'. Valid: {valid}")

    try:
        option = StockOptionInput(
            option_type=kind,
            shares=Decimal(str(shares)),
            grant_price=Decimal(str(grant_price)),
            market_price=Decimal(str(market_price)),
            sale_price=Decimal(str(sale_price)) if sale_price is not None else None,
            tax_year=year,
            filing_status=_filing_status(filing_status),
            base_taxable_income=Decimal(str(base_income)),
            base_wages=Decimal(str(base_wages)) if base_wages is not None else None,
            state=state,
        )
    except ValidationError as exc:
        _fail(str(exc))

    repository = _repository(data)
    try:
        result = StockOptionTaxCalculator(repository).calculate(option, as_of=_as_of(as_of))
    except TaxPlannerError as exc:
        _fail(str(exc))

    if json_output:
        _echo_json(result.model_dump())
        return

    typer.echo("")
    typer.echo(f"=== {result.option_type.value} exercise: {year} ({result.filing_status.value}) ===")
    typer.echo(f"Option value (spread):  ${result.option_value:>12,.2f}")
    typer.echo(f"Ordinary income:        ${result.ordinary_income:>12,.2f}")
    if result.amt_preference > 0:
        typer.echo(f"AMT preference:         ${result.amt_preference:>12,.2f}")
    typer.echo(f"Federal income tax:     ${result.federal_tax:>12,.2f}")
    typer.echo(f"State income tax:       ${result.state_tax:>12,.2f}")
    typer.echo(f"Medicare:               ${result.fica_tax:>12,.2f}")
    typer.echo(f"AMT:                    ${result.amt:>12,.2f}")
    typer.echo(f"Total tax:              ${result.total_tax:>12,.2f}")
    typer.echo(f"Net value after tax:    ${result.net_value:>12,.2f}")
    typer.echo(f"Effective rate:         {result.effective_rate * 100:>12.2f}%")
    for note in result.notes:
        typer.echo(f"  - {note}")


@app.command(name="safe-harbor")
def safe_harbor(
    current_tax: float = typer.Option(..., "--current-tax", help="Projected current-year total tax"),
    prior_tax: float = typer.Option(..., "--prior-tax", help="Prior-year total tax"),
    withholding: float = typer.Option(0.0, "--withholding", help="Withholding to date"),
    remaining: float = typer.Option(0.0, "--remaining-withholding", help="Expected withholding for the rest of the year"),
    estimated: float = typer.Option(0.0, "--estimated-payments", help="Estimated tax payments made"),
    prior_agi: float | None = typer.Option(None, "--prior-agi", help="Prior-year AGI (110% rule above $150,000)"),
    filing_status: str = typer.Option(
        "SINGLE", "--filing-status", "-s", help="Filing status: SINGLE, MFJ, MFS, HOH, QSS",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Check withholding against the estimated tax safe harbor."""
    from pydantic import ValidationError

    from taxplanner.engines.safe_harbor import SafeHarborCalculator, SafeHarborInput

    try:
        data = SafeHarborInput(
            current_year_tax=Decimal(str(current_tax)),
            prior_year_tax=Decimal(str(prior_tax)),
            current_withholding=Decimal(str(withholding)),
            estimated_remaining_withholding=Decimal(str(remaining)),
            estimated_payments=Decimal(str(estimated)),
            prior_year_agi=Decimal(str(prior_agi)) if prior_agi is not None else None,
            filing_status=_filing_status(filing_status),
        )
    except ValidationError as exc:
        _fail(str(exc))

    result = SafeHarborCalculator().calculate(data)
    if json_output:
        _echo_json(result.model_dump())
        return

    rule = "110% of prior-year tax" if result.uses_high_income_rule else "100% of prior-year tax"
    typer.echo(f"Safe harbor minimum:    ${result.safe_harbor_minimum:>12,.2f}")
    typer.echo(f"  90% of current year:  ${result.current_year_requirement:>12,.2f}")
    typer.echo(f"  {rule}: ${result.prior_year_requirement:,.2f}")
    typer.echo(f"Projected payments:     ${result.total_projected_payments:>12,.2f}")
    if result.meets_safe_harbor:
        typer.echo("Safe harbor met.")
    else:
        typer.echo(f"Shortfall:              ${result.shortfall:>12,.2f}")
        typer.echo(f"Add withholding of:     ${result.recommended_additional_withholding:>12,.2f}")


@app.command()
def versions(
    year: int | None = typer.Argument(None, help="Tax year (default: all years)"),
    data: Path | None = typer.Option(None, "--data", envvar="TAXPLANNER_DATA", help=DATA_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List tax data versions and their effective dates."""
    from rich.console import Console
    from rich.table import Table

    repository = _repository(data)
    years = [year] if year is not None else repository.available_years
    if year is not None and year not in repository.registry:
        _fail(f"No tax data available for year {year}")

    rows = [v for y in years for v in repository.versions(y)]
    if json_output:
        _echo_json([v.model_dump() for v in rows])
        return

    table = Table(title="Tax data versions")
    table.add_column("Version")
    table.add_column("Year", justify="right")
    table.add_column("Effective")
    table.add_column("Flags")
    table.add_column("Reference")
    table.add_column("Description")
    for v in rows:
        flags = ", ".join(
            label for label, on in (("projected", v.is_projected), ("correction", v.is_correction)) if on
        )
        table.add_row(
            v.id, str(v.year), v.effective_date.isoformat(), flags,
            v.legislation_reference or "", v.description,
        )
    Console().print(table)


@app.command()
def years(
    data: Path | None = typer.Option(None, "--data", envvar="TAXPLANNER_DATA", help=DATA_OPTION_HELP),
) -> None:
    """List supported tax years."""
    repository = _repository(data)
    for year in repository.available_years:
        statuses = ", ".join(s.value for s in repository.supported_filing_statuses(year))
        typer.echo(f"{year}: {statuses}")


if __name__ == "__main__":
    app()
