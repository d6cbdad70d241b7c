from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict
from datetime import date
from typing import List, NoReturn, Optional, Sequence, TypeVar

import typer

from .compress import compress_series, group_sizes
from .config import DEFAULT_COUNTRY, MarketConfig, load_market, out_of_range_fields
from .formatting import format_currency, format_percent, format_short_currency
from .inputs import AmountOrPercent, Percent, make_inputs
from .model import amortization_schedule, analyze, project_rent
from .schemas import DisplayRow, InvalidAssumptionsError

T = TypeVar("T")

app = typer.Typer(help="Compare the long-run cost of renting versus buying a home.")


def _default_country() -> str:
    return os.environ.get("RENT_OR_BUY_COUNTRY", DEFAULT_COUNTRY)


def _current_year() -> int:
    return date.today().year


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def _amount_or_percent(
    amount: Optional[float], percent: Optional[float], default_percent: float
) -> AmountOrPercent:
    if amount is not None:
        return amount
    return Percent(default_percent if percent is None else percent)


def _fail(exc: InvalidAssumptionsError) -> NoReturn:
    typer.echo("Invalid assumptions:", err=True)
    for problem in exc.problems:
        typer.echo(f"  - {problem}", err=True)
    raise typer.Exit(code=2)


def _echo_rows(title: str, rows: Sequence[DisplayRow]) -> None:
    typer.echo(title)
    typer.echo(f"  {'Years':<11} {'Paid':>14} {'Cumulative':>14}")
    for row in rows:
        typer.echo(
            f"  {row.label:<11} {format_currency(row.total):>14} "
            f"{format_currency(row.cumulative):>14}"
        )


def _group_ends(items: Sequence[T], max_rows: int) -> List[T]:
    """Last item of each group the compressed tables would show."""
    ends = []
    position = 0
    for size in group_sizes(len(items), max_rows):
        position += size
        ends.append(items[position - 1])
    return ends


@app.command()
def compare(
    monthly_rent: Optional[float] = typer.Option(None, help="Starting monthly rent."),
    rent_increase: Optional[float] = typer.Option(
        None, help="Annual rent increase in percent (e.g., 2.5)."
    ),
    purchase_price: Optional[float] = typer.Option(None, help="Home purchase price."),
    down_payment: Optional[float] = typer.Option(
        None, help="Down payment amount (overrides --down-payment-percent)."
    ),
    down_payment_percent: Optional[float] = typer.Option(
        None, help="Down payment as a percent of the price."
    ),
    mortgage_rate: Optional[float] = typer.Option(
        None, help="Annual mortgage rate in percent."
    ),
    mortgage_years: Optional[int] = typer.Option(None, help="Mortgage term in years."),
    property_tax: Optional[float] = typer.Option(
        None, help="Annual property tax amount (held flat)."
    ),
    property_tax_percent: Optional[float] = typer.Option(
        None, help="Annual property tax as a percent of home value."
    ),
    insurance: float = typer.Option(0.0, help="Annual home insurance plus HOA fees."),
    maintenance: Optional[float] = typer.Option(
        None, help="Annual maintenance amount (held flat)."
    ),
    maintenance_percent: Optional[float] = typer.Option(
        None, help="Annual maintenance as a percent of home value."
    ),
    closing_costs: Optional[float] = typer.Option(None, help="Closing costs amount."),
    closing_costs_percent: Optional[float] = typer.Option(
        None, help="Closing costs as a percent of the price."
    ),
    appreciation: Optional[float] = typer.Option(
        None, help="Annual home appreciation in percent."
    ),
    investment_return: Optional[float] = typer.Option(
        None, help="Annual return on the renter's investments in percent."
    ),
    horizon_years: int = typer.Option(25, help="Projection horizon in years."),
    start_year: int = typer.Option(
        default_factory=_current_year, help="Calendar year the projection starts."
    ),
    max_rows: int = typer.Option(10, min=1, help="Maximum rows in the summary table."),
    country: str = typer.Option(
        default_factory=_default_country,
        help="Market supplying defaults (env RENT_OR_BUY_COUNTRY if omitted).",
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Dump the yearly comparison as JSON."
    ),
) -> None:
    """
    Project both paths and report which one leaves you better off.
    """
    market: MarketConfig = load_market(country)
    rent_default = market.rent
    buy_default = market.purchase

    try:
        inputs = make_inputs(
            monthly_rent=(
                rent_default["monthly_rent"].default
                if monthly_rent is None
                else monthly_rent
            ),
            rent_growth_rate=(
                rent_default["rent_increase_rate"].default
                if rent_increase is None
                else rent_increase
            ),
            purchase_price=(
                buy_default["purchase_price"].default
                if purchase_price is None
                else purchase_price
            ),
            down_payment=_amount_or_percent(
                down_payment,
                down_payment_percent,
                buy_default["down_payment_percentage"].default,
            ),
            mortgage_rate=(
                buy_default["mortgage_rate"].default
                if mortgage_rate is None
                else mortgage_rate
            ),
            mortgage_term_years=(
                int(buy_default["mortgage_length"].default)
                if mortgage_years is None
                else mortgage_years
            ),
            horizon_years=horizon_years,
            property_tax=_amount_or_percent(
                property_tax,
                property_tax_percent,
                buy_default["property_tax_percentage"].default,
            ),
            annual_insurance=insurance,
            maintenance=_amount_or_percent(
                maintenance,
                maintenance_percent,
                buy_default["maintenance_percentage"].default,
            ),
            closing_costs=_amount_or_percent(
                closing_costs,
                closing_costs_percent,
                buy_default["closing_costs_percentage"].default,
            ),
            appreciation_rate=(
                buy_default["asset_appreciation_rate"].default
                if appreciation is None
                else appreciation
            ),
            investment_return=(
                market.investment["investment_return"].default
                if investment_return is None
                else investment_return
            ),
            start_year=start_year,
        )
    except InvalidAssumptionsError as exc:
        _fail(exc)

    for name in out_of_range_fields(inputs, market):
        typer.echo(f"Note: {name} is outside the usual {market.name} range.")

    result = analyze(inputs)
    comparison = result.comparison
    final = comparison.final

    if as_json:
        payload = [
            dict(asdict(entry), leader=entry.leader) for entry in comparison.years
        ]
        typer.echo(json.dumps(payload, indent=2))
        return

    first_rent = result.rent.years[0].months[0]
    first_own = result.ownership.series.years[0].months[0]
    typer.echo(f"Market: {market.name}")
    typer.echo(f"Purchase price: {format_currency(inputs.purchase_price)}")
    typer.echo(f"Down payment: {format_currency(inputs.down_payment)}")
    typer.echo(f"Mortgage rate: {format_percent(inputs.mortgage_rate)}")
    typer.echo(
        f"Mortgage payment: {format_currency(result.ownership.schedule.monthly_payment)}"
    )
    typer.echo("")
    typer.echo(f"Monthly homeowner cost (first month): {format_currency(first_own)}")
    typer.echo(f"Monthly rent (first month): {format_currency(first_rent)}")
    typer.echo("")
    typer.echo(f"Owner ending equity: {format_currency(final.own_net_worth)}")
    typer.echo(f"Renter ending portfolio: {format_currency(final.rent_net_worth)}")
    typer.echo(f"Better outcome: {comparison.better_option}")
    if comparison.break_even_year is not None:
        typer.echo(f"Owning catches up in: {comparison.break_even_year}")
    typer.echo("")

    typer.echo(f"  {'Year':<6} {'Rent+invest':>12} {'Own equity':>12} {'Leader':>8}")
    for entry in _group_ends(comparison.years, max_rows):
        typer.echo(
            f"  {entry.year:<6} {format_short_currency(entry.rent_net_worth):>12} "
            f"{format_short_currency(entry.own_net_worth):>12} {entry.leader:>8}"
        )


@app.command()
def rent(
    monthly_rent: float = typer.Argument(..., help="Starting monthly rent."),
    rent_increase: float = typer.Option(2.5, help="Annual rent increase in percent."),
    horizon_years: int = typer.Option(25, help="Projection horizon in years."),
    start_year: int = typer.Option(
        default_factory=_current_year, help="Calendar year the projection starts."
    ),
    increase_month: Optional[int] = typer.Option(
        None, help="Month (1-12) the yearly increase takes effect."
    ),
    max_rows: int = typer.Option(10, min=1, help="Maximum rows in the table."),
) -> None:
    """
    Show the rent paid over the horizon.
    """
    try:
        series = project_rent(
            monthly_rent,
            rent_increase,
            horizon_years,
            start_year=start_year,
            increase_month=increase_month,
            round_to="cents",
        )
    except InvalidAssumptionsError as exc:
        _fail(exc)

    _echo_rows("Rent paid", compress_series(series.years, max_rows))
    typer.echo(f"Total rent: {format_currency(series.total_paid)}")


@app.command()
def amortize(
    principal: float = typer.Argument(..., help="Loan amount."),
    rate: float = typer.Option(5.5, help="Annual mortgage rate in percent."),
    years: int = typer.Option(25, min=1, help="Mortgage term in years."),
    max_rows: int = typer.Option(10, min=1, help="Maximum rows in the table."),
) -> None:
    """
    Show a mortgage's payment, interest cost and yearly balance.
    """
    try:
        schedule = amortization_schedule(principal, rate, years, round_to="cents")
    except InvalidAssumptionsError as exc:
        _fail(exc)

    typer.echo(f"Monthly payment: {format_currency(schedule.monthly_payment)}")
    typer.echo(f"Total interest: {format_currency(schedule.total_interest_paid)}")
    typer.echo(f"Total paid: {format_currency(schedule.total_paid)}")

    typer.echo(f"  {'Year':<6} {'Balance':>14}")
    for year in _group_ends(range(1, years + 1), max_rows):
        balance = schedule.balance_after(year * 12)
        typer.echo(f"  {year:<6} {format_currency(balance):>14}")


if __name__ == "__main__":
    app()
