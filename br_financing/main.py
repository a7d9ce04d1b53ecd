"""Command-line interface for the financing calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compare the SAC and Price systems for a loan, print the
full curve of one system or normalize an annual rate. Results can be printed
to the terminal or exported to JSON/CSV files.

Numbers are parsed straight from text into ``Decimal``; the engine never sees
a float.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import click

from .data_models import LoanRequest, PeriodEntry, TrajectoryResult
from .engine import calculate_debt_trajectory, normalize_annual_rate
from .errors import CalculationError
from .formatter import print_schedule, print_trajectory
from .utils import parse_amount, parse_percent

logger = logging.getLogger(__name__)


def build_request_from_options(principal: str, rate: str, term: int) -> LoanRequest:
    """Turn raw CLI option values into a ``LoanRequest``."""
    try:
        principal_value = parse_amount(principal)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--principal")
    try:
        rate_value = parse_percent(rate)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--rate")
    if principal_value <= 0:
        raise click.BadParameter("Principal must be positive", param_hint="--principal")
    return LoanRequest(principal=principal_value, annual_rate_percent=rate_value, term_months=term)


def _run(request: LoanRequest) -> TrajectoryResult:
    logger.debug("Calculating trajectory for %s", request)
    try:
        return calculate_debt_trajectory(request)
    except CalculationError as exc:
        raise click.ClickException(str(exc))


def export_to_json(path: Path, data: Dict[str, Any]) -> None:
    """Export an already serialized result to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, periods: Iterable[PeriodEntry]) -> None:
    """Export an amortization curve to a CSV file at full precision."""
    header = ["Period", "Payment", "Principal", "Interest", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for number, entry in enumerate(periods, start=1):
            writer.writerow(
                [
                    number,
                    str(entry.payment),
                    str(entry.principal_portion),
                    str(entry.interest_portion),
                    str(entry.remaining_balance),
                ]
            )


loan_options = [
    click.option("--principal", "-p", "principal", required=True, help="Financed amount (e.g. 360000, 360k)"),
    click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
    click.option("--term", "-t", "term", required=True, type=int, help="Loan term in months"),
]


def with_loan_options(func):
    for option in reversed(loan_options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Compare SAC and Price financing schedules."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command()
@with_loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def compare(principal: str, rate: str, term: int, output: Optional[str]) -> None:
    """Compute both schedules and print a side-by-side comparison."""
    request = build_request_from_options(principal, rate, term)
    result = _run(request)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Comparison export must use .json extension", param_hint="--output")
        export_to_json(path, {"request": request.to_dict(), "result": result.to_dict()})
        click.echo(f"Trajectory exported to {path}")
    else:
        print_trajectory(result)


@cli.command()
@with_loan_options
@click.option(
    "--system",
    "system",
    type=click.Choice(["sac", "price"]),
    default="sac",
    help="Amortization system whose curve is printed",
)
@click.option("--max-rows", "max_rows", type=int, default=120, show_default=True, help="Rows printed to the terminal")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    term: int,
    system: str,
    max_rows: int,
    output: Optional[str],
) -> None:
    """Compute and print the amortization curve of one system."""
    request = build_request_from_options(principal, rate, term)
    result = _run(request)
    chosen = result.sac_schedule if system == "sac" else result.price_schedule
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, {"system": system, "schedule": chosen.to_dict()})
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, chosen.periods)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return
    periods = chosen.periods
    # Limit schedule length printed to avoid flooding the terminal
    if len(periods) > max_rows:
        click.echo(f"Schedule has {len(periods)} rows; showing first {max_rows} rows.")
        periods = periods[:max_rows]
    print_schedule(periods)


@cli.command()
@click.argument("annual_rate")
def rate(annual_rate: str) -> None:
    """Print the effective monthly rate for an annual percentage."""
    try:
        annual = parse_percent(annual_rate)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="ANNUAL_RATE")
    try:
        monthly = normalize_annual_rate(annual)
    except CalculationError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Monthly rate: {monthly}")
    click.echo(f"Monthly rate (percent): {monthly * Decimal(100):.6f}%")


if __name__ == "__main__":
    cli()
