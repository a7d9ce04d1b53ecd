"""Data models for the financing calculator.

This module defines dataclasses representing the entities exchanged with the
engine: the loan request, one entry of an amortization curve, the Price and
SAC schedules and the combined trajectory result. All of them are frozen; the
engine builds them once per calculation and never changes them afterwards.

Summary figures (payments and totals) are stored already rounded to cents.
Period entries keep the full precision they were computed with, so anything
chained on top of the curve is not degraded by early rounding. ``to_dict``
renders Decimals as strings and preserves both policies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Tuple

from .utils import decimal_from_str, round_currency


@dataclass(frozen=True)
class LoanRequest:
    """Inputs of a debt trajectory calculation.

    Attributes
    ----------
    principal: Decimal
        The financed amount.
    annual_rate_percent: Decimal
        Nominal annual interest rate in percent (``Decimal("10.5")`` is 10.5 %).
    term_months: int
        Number of monthly payments. Must be at least one.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int

    @classmethod
    def from_strings(cls, principal: str, annual_rate_percent: str, term_months: str) -> "LoanRequest":
        """Build a request from raw text values (e.g. a form or a JSON payload)."""
        try:
            term = int(str(term_months).strip())
        except ValueError as exc:
            raise ValueError(f"Invalid term in months: {term_months}") from exc
        return cls(
            principal=decimal_from_str(principal),
            annual_rate_percent=decimal_from_str(annual_rate_percent),
            term_months=term,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "principal": str(self.principal),
            "annual_rate_percent": str(self.annual_rate_percent),
            "term_months": self.term_months,
        }


@dataclass(frozen=True)
class PeriodEntry:
    """One month of an amortization curve.

    ``interest_portion`` is the balance before the period times the monthly
    rate; ``remaining_balance`` is the balance before the period minus
    ``principal_portion``, clamped at zero.
    """

    remaining_balance: Decimal
    principal_portion: Decimal
    interest_portion: Decimal

    @property
    def payment(self) -> Decimal:
        """Total paid in the period (principal plus interest)."""
        return self.principal_portion + self.interest_portion

    def to_dict(self) -> Dict[str, Any]:
        return {
            "remaining_balance": str(self.remaining_balance),
            "principal_portion": str(self.principal_portion),
            "interest_portion": str(self.interest_portion),
        }


def _total_interest(total_paid: Decimal, periods: Tuple[PeriodEntry, ...]) -> Decimal:
    amortized = sum((p.principal_portion for p in periods), Decimal(0))
    return round_currency(total_paid - amortized)


@dataclass(frozen=True)
class PriceSchedule:
    """Constant-payment (Price / French) schedule."""

    fixed_payment: Decimal
    total_paid: Decimal
    periods: Tuple[PeriodEntry, ...]

    @property
    def total_interest(self) -> Decimal:
        return _total_interest(self.total_paid, self.periods)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed_payment": str(self.fixed_payment),
            "total_paid": str(self.total_paid),
            "periods": [p.to_dict() for p in self.periods],
        }


@dataclass(frozen=True)
class SacSchedule:
    """Constant-amortization (SAC) schedule.

    ``first_payment`` is the highest installment and ``last_payment`` the
    lowest when the rate is positive.
    """

    fixed_principal_portion: Decimal
    first_payment: Decimal
    last_payment: Decimal
    total_paid: Decimal
    periods: Tuple[PeriodEntry, ...]

    @property
    def total_interest(self) -> Decimal:
        return _total_interest(self.total_paid, self.periods)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed_principal_portion": str(self.fixed_principal_portion),
            "first_payment": str(self.first_payment),
            "last_payment": str(self.last_payment),
            "total_paid": str(self.total_paid),
            "periods": [p.to_dict() for p in self.periods],
        }


@dataclass(frozen=True)
class TrajectoryResult:
    """Both schedules computed for the same loan."""

    initial_principal: Decimal
    monthly_rate: Decimal
    price_schedule: PriceSchedule
    sac_schedule: SacSchedule

    def cheaper_system(self) -> str:
        """Return ``"sac"`` or ``"price"``, whichever pays less in total.

        ``"equal"`` is returned when both totals match to the cent, which is
        the case for zero-interest loans.
        """
        sac_total = self.sac_schedule.total_paid
        price_total = self.price_schedule.total_paid
        if sac_total < price_total:
            return "sac"
        if price_total < sac_total:
            return "price"
        return "equal"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_principal": str(self.initial_principal),
            "monthly_rate": str(self.monthly_rate),
            "price_schedule": self.price_schedule.to_dict(),
            "sac_schedule": self.sac_schedule.to_dict(),
        }
