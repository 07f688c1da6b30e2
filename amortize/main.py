"""Command-line interface for the amortization engine.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full amortization tables, or run single time
value of money calculations (payment, interest and principal parts, future
and present value, net present value, number of periods and rate). Tables
can be printed to the terminal or exported to JSON, CSV or an HTML chart.

Every option can also be set through an environment variable prefixed with
``AMORTIZE_``, e.g. ``AMORTIZE_SCHEDULE_ROUNDING_PLACES=2``.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from . import financial
from .data_models import Frequency, InterestType, PaymentPeriod, ScheduleConfig, ScheduleRow
from .engine import compute_schedule
from .errors import AmortizationError
from .formatter import plot_rows, print_schedule, print_summary, rows_to_dicts, summary_to_dict
from .utils import decimal_from_str, parse_amount, parse_date


def _decimal(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return decimal_from_str(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _amount(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _date(ctx: click.Context, param: click.Parameter, value: Optional[str]):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_config_from_options(
    start_date,
    end_date,
    frequency: str,
    amount: Decimal,
    interest_type: str,
    interest: Decimal,
    payment_period: str,
    rounding: bool,
    rounding_places: int,
    tolerance: Optional[Decimal],
) -> ScheduleConfig:
    return ScheduleConfig(
        start_date=start_date,
        end_date=end_date,
        frequency=Frequency.coerce(frequency),
        amount_borrowed=amount,
        interest_type=InterestType(interest_type.lower()),
        interest=interest,
        payment_period=PaymentPeriod(payment_period.lower()),
        enable_rounding=rounding,
        rounding_places=rounding_places,
        rounding_error_tolerance=tolerance,
    )


def export_to_json(path: Path, rows: List[ScheduleRow], summary: Dict[str, Any]) -> None:
    """Export rows and summary to a JSON file."""
    data = {"summary": summary_to_dict(summary), "schedule": rows_to_dicts(rows)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, rows: List[ScheduleRow]) -> None:
    """Export rows to a CSV file."""
    records = rows_to_dicts(rows)
    header = ["Period", "StartDate", "EndDate", "Payment", "Interest", "Principal"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        writer.writeheader()
        writer.writerows(records)


def export_to_html(path: Path, rows: List[ScheduleRow]) -> None:
    """Export rows as an HTML bar chart."""
    with path.open("w", encoding="utf-8") as f:
        plot_rows(rows, f)


EXPORTERS = {
    ".json": lambda path, rows, summary: export_to_json(path, rows, summary),
    ".csv": lambda path, rows, summary: export_to_csv(path, rows),
    ".html": lambda path, rows, summary: export_to_html(path, rows),
}

WHEN_CHOICE = click.Choice([p.value for p in PaymentPeriod], case_sensitive=False)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """Amortization tables and time value of money calculations."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--start-date", "-s", "start_date", required=True, callback=_date, help="First day of the schedule (YYYY-MM-DD)")
@click.option("--end-date", "-e", "end_date", required=True, callback=_date, help="Last day of the schedule (YYYY-MM-DD)")
@click.option("--frequency", "-f", "frequency", type=click.Choice([f.value for f in Frequency], case_sensitive=False), default="monthly", show_default=True)
@click.option("--amount", "-a", "amount", required=True, callback=_amount, help="Amount borrowed, e.g. 1000000 or 1m")
@click.option("--interest-type", "interest_type", type=click.Choice([t.value for t in InterestType], case_sensitive=False), default="reducing", show_default=True)
@click.option("--interest", "-i", "interest", required=True, callback=_decimal, help="Annual interest in basis points (100 = 1%)")
@click.option("--payment-period", "payment_period", type=WHEN_CHOICE, default="ending", show_default=True)
@click.option("--round/--no-round", "rounding", default=False, show_default=True, help="Round payment and principal")
@click.option("--rounding-places", "rounding_places", type=int, default=0, show_default=True)
@click.option("--tolerance", "tolerance", callback=_decimal, help="Largest per-row discrepancy absorbed into interest (default 1)")
@click.option("--output", "output", type=str, help="Output file path (.json, .csv or .html)")
@click.option("--json", "as_json", is_flag=True, help="Print the rows as JSON instead of a table")
def schedule(
    start_date,
    end_date,
    frequency: str,
    amount: Decimal,
    interest_type: str,
    interest: Decimal,
    payment_period: str,
    rounding: bool,
    rounding_places: int,
    tolerance: Optional[Decimal],
    output: Optional[str],
    as_json: bool,
) -> None:
    """Compute and print the full amortization table."""
    try:
        config = build_config_from_options(
            start_date,
            end_date,
            frequency,
            amount,
            interest_type,
            interest,
            payment_period,
            rounding,
            rounding_places,
            tolerance,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    try:
        rows, summary = compute_schedule(config)
    except AmortizationError as exc:
        raise click.ClickException(str(exc))
    if output:
        path = Path(output)
        exporter = EXPORTERS.get(path.suffix.lower())
        if exporter is None:
            raise click.BadParameter("Unsupported output format; use .json, .csv or .html")
        exporter(path, rows, summary)
        click.echo(f"Schedule exported to {path}")
    elif as_json:
        click.echo(json.dumps(rows_to_dicts(rows), indent="\t"))
    else:
        print_summary(summary)
        print_schedule(rows)


def _echo_result(func, *args, **kwargs) -> None:
    try:
        result = func(*args, **kwargs)
    except (AmortizationError, ValueError) as exc:
        raise click.ClickException(str(exc))
    click.echo(f"{result:f}")


@cli.command()
@click.option("--rate", "-r", "rate", required=True, callback=_decimal, help="Rate per period as a fraction")
@click.option("--nper", "-n", "nper", required=True, type=int, help="Number of periods")
@click.option("--pv", "pv", required=True, callback=_amount, help="Present value")
@click.option("--fv", "fv", default="0", callback=_amount, show_default=True, help="Future value")
@click.option("--when", "when", type=WHEN_CHOICE, default="ending", show_default=True)
def pmt(rate: Decimal, nper: int, pv: Decimal, fv: Decimal, when: str) -> None:
    """Payment per period."""
    _echo_result(financial.pmt, rate, nper, pv, fv, PaymentPeriod(when.lower()))


@cli.command()
@click.option("--rate", "-r", "rate", required=True, callback=_decimal, help="Rate per period as a fraction")
@click.option("--per", "-p", "per", required=True, type=int, help="Period, starting at 1")
@click.option("--nper", "-n", "nper", required=True, type=int, help="Number of periods")
@click.option("--pv", "pv", required=True, callback=_amount, help="Present value")
@click.option("--fv", "fv", default="0", callback=_amount, show_default=True, help="Future value")
@click.option("--when", "when", type=WHEN_CHOICE, default="ending", show_default=True)
def ipmt(rate: Decimal, per: int, nper: int, pv: Decimal, fv: Decimal, when: str) -> None:
    """Interest part of the payment in one period."""
    _echo_result(financial.ipmt, rate, per, nper, pv, fv, PaymentPeriod(when.lower()))


@cli.command()
@click.option("--rate", "-r", "rate", required=True, callback=_decimal, help="Rate per period as a fraction")
@click.option("--per", "-p", "per", required=True, type=int, help="Period, starting at 1")
@click.option("--nper", "-n", "nper", required=True, type=int, help="Number of periods")
@click.option("--pv", "pv", required=True, callback=_amount, help="Present value")
@click.option("--fv", "fv", default="0", callback=_amount, show_default=True, help="Future value")
@click.option("--when", "when", type=WHEN_CHOICE, default="ending", show_default=True)
def ppmt(rate: Decimal, per: int, nper: int, pv: Decimal, fv: Decimal, when: str) -> None:
    """Principal part of the payment in one period."""
    _echo_result(financial.ppmt, rate, per, nper, pv, fv, PaymentPeriod(when.lower()))


@cli.command()
@click.option("--rate", "-r", "rate", required=True, callback=_decimal, help="Rate per period as a fraction")
@click.option("--nper", "-n", "nper", required=True, type=int, help="Number of periods")
@click.option("--pmt", "payment", required=True, callback=_amount, help="Payment per period")
@click.option("--pv", "pv", default="0", callback=_amount, show_default=True, help="Present value")
@click.option("--when", "when", type=WHEN_CHOICE, default="ending", show_default=True)
def fv(rate: Decimal, nper: int, payment: Decimal, pv: Decimal, when: str) -> None:
    """Future value."""
    _echo_result(financial.fv, rate, nper, payment, pv, PaymentPeriod(when.lower()))


@cli.command()
@click.option("--rate", "-r", "rate", required=True, callback=_decimal, help="Rate per period as a fraction")
@click.option("--nper", "-n", "nper", required=True, type=int, help="Number of periods")
@click.option("--pmt", "payment", required=True, callback=_amount, help="Payment per period")
@click.option("--fv", "fv", default="0", callback=_amount, show_default=True, help="Future value")
@click.option("--when", "when", type=WHEN_CHOICE, default="ending", show_default=True)
def pv(rate: Decimal, nper: int, payment: Decimal, fv: Decimal, when: str) -> None:
    """Present value."""
    _echo_result(financial.pv, rate, nper, payment, fv, PaymentPeriod(when.lower()))


@cli.command()
@click.option("--rate", "-r", "rate", required=True, callback=_decimal, help="Discount rate per period")
@click.argument("values", nargs=-1, required=True)
def npv(rate: Decimal, values: Tuple[str, ...]) -> None:
    """Net present value of VALUES, the first one undiscounted."""
    try:
        flows = [decimal_from_str(v) for v in values]
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    _echo_result(financial.npv, rate, flows)


@cli.command()
@click.option("--rate", "-r", "rate", required=True, callback=_decimal, help="Rate per period as a fraction")
@click.option("--pmt", "payment", required=True, callback=_amount, help="Payment per period")
@click.option("--pv", "pv", required=True, callback=_amount, help="Present value")
@click.option("--fv", "fv", default="0", callback=_amount, show_default=True, help="Future value")
@click.option("--when", "when", type=WHEN_CHOICE, default="ending", show_default=True)
def nper(rate: Decimal, payment: Decimal, pv: Decimal, fv: Decimal, when: str) -> None:
    """Number of periods."""
    _echo_result(financial.nper, rate, payment, pv, fv, PaymentPeriod(when.lower()))


@cli.command()
@click.option("--nper", "-n", "nper", required=True, type=int, help="Number of periods")
@click.option("--pmt", "payment", required=True, callback=_amount, help="Payment per period")
@click.option("--pv", "pv", required=True, callback=_amount, help="Present value")
@click.option("--fv", "fv", default="0", callback=_amount, show_default=True, help="Future value")
@click.option("--when", "when", type=WHEN_CHOICE, default="ending", show_default=True)
@click.option("--max-iterations", "max_iterations", type=int, default=100, show_default=True)
@click.option("--tolerance", "tolerance", default="1e-6", callback=_decimal, show_default=True)
@click.option("--guess", "guess", default="0.1", callback=_decimal, show_default=True, help="Initial rate guess")
def rate(
    nper: int,
    payment: Decimal,
    pv: Decimal,
    fv: Decimal,
    when: str,
    max_iterations: int,
    tolerance: Decimal,
    guess: Decimal,
) -> None:
    """Rate per period, solved iteratively."""
    _echo_result(
        financial.rate,
        pv,
        fv,
        payment,
        nper,
        PaymentPeriod(when.lower()),
        max_iterations,
        tolerance,
        guess,
    )


def main() -> None:
    cli(auto_envvar_prefix="AMORTIZE")


if __name__ == "__main__":
    main()
