"""Output helpers for the financing calculator.

This module renders trajectory results in a plain tabular text format using
built-in printing and string formatting. Summary figures are already rounded
to cents by the engine and are printed as-is; curve values are only rounded
for display, never in the underlying result.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Tuple

from .data_models import PeriodEntry, PriceSchedule, SacSchedule, TrajectoryResult


def print_sac_summary(schedule: SacSchedule) -> None:
    """Print the SAC summary figures."""
    print("SAC (constant amortization)")
    print("-" * 72)
    print(f"Fixed amortization : {schedule.fixed_principal_portion}")
    print(f"First payment      : {schedule.first_payment}")
    print(f"Last payment       : {schedule.last_payment}")
    print(f"Total interest     : {schedule.total_interest}")
    print(f"Total paid         : {schedule.total_paid}")
    print("-" * 72)


def print_price_summary(schedule: PriceSchedule) -> None:
    """Print the Price summary figures."""
    print("Price (constant payment)")
    print("-" * 72)
    print(f"Fixed payment      : {schedule.fixed_payment}")
    print(f"Total interest     : {schedule.total_interest}")
    print(f"Total paid         : {schedule.total_paid}")
    print("-" * 72)


def print_schedule(periods: Iterable[PeriodEntry]) -> None:
    """Print an amortization curve as a simple table, one row per month."""
    headers = ["Period", "Payment", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for number, entry in enumerate(periods, start=1):
        row = [
            str(number),
            f"{entry.payment:.2f}",
            f"{entry.principal_portion:.2f}",
            f"{entry.interest_portion:.2f}",
            f"{entry.remaining_balance:.2f}",
        ]
        print("\t".join(row))


def comparison_rows(result: TrajectoryResult) -> List[Tuple[str, Decimal, Decimal]]:
    """Return ``(metric, sac_value, price_value)`` rows for a side-by-side view."""
    sac = result.sac_schedule
    price = result.price_schedule
    return [
        ("first_payment", sac.first_payment, price.fixed_payment),
        ("last_payment", sac.last_payment, price.fixed_payment),
        ("total_interest", sac.total_interest, price.total_interest),
        ("total_paid", sac.total_paid, price.total_paid),
    ]


def print_comparison(result: TrajectoryResult) -> None:
    """Print SAC and Price side by side.

    The difference column is Price minus SAC: a positive value means the Price
    schedule costs more for that metric.
    """
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':20s} {'SAC':>15s} {'Price':>15s} {'Difference':>15s}")
    for key, sac_value, price_value in comparison_rows(result):
        diff = price_value - sac_value
        print(f"{key:20s} {sac_value:15.2f} {price_value:15.2f} {diff:15.2f}")
    print("=" * 72)
    cheaper = result.cheaper_system()
    if cheaper == "equal":
        print("Both systems cost the same in total.")
    else:
        print(f"Cheaper in total: {cheaper.upper()}")


def print_trajectory(result: TrajectoryResult) -> None:
    """Print the full comparison report for a trajectory result."""
    print(f"Principal          : {result.initial_principal}")
    print(f"Monthly rate       : {result.monthly_rate * 100:.6f}%")
    print()
    print_sac_summary(result.sac_schedule)
    print_price_summary(result.price_schedule)
    print_comparison(result)
