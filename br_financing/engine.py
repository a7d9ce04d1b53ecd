"""Core calculation engine for the financing calculator.

This module implements the financial logic required to build the two
amortization schedules used for Brazilian real estate financing:

* SAC (Sistema de Amortização Constante): the principal portion is fixed and
  the total installment decreases over time.
* Price (Sistema Francês): the total installment is fixed and the principal
  portion grows over time.

All arithmetic is done with ``Decimal`` inside :func:`financial_context`.
Results are returned as frozen dataclasses from :mod:`.data_models`.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from .data_models import LoanRequest, PeriodEntry, PriceSchedule, SacSchedule, TrajectoryResult
from .errors import RateDomainError, ZeroTermError
from .utils import Number, financial_context, round_currency, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)
MONTHS_PER_YEAR = Decimal(12)


def _check_term(term_months: int) -> None:
    if term_months <= 0:
        raise ZeroTermError(term_months)


def normalize_annual_rate(annual_rate_percent: Number) -> Decimal:
    """Return the effective monthly rate equivalent to an annual percentage.

    The rate compounds monthly, so the result is::

        monthly = (1 + annual / 100) ^ (1 / 12) - 1

    and twelve months at ``monthly`` reproduce the annual growth exactly. A
    12 % annual rate therefore gives roughly 0.9489 % per month, not 1 %.

    Raises ``RateDomainError`` for rates at or below -100 %.
    """
    annual = to_decimal(annual_rate_percent)
    with financial_context():
        base = ONE + annual / HUNDRED
        if base <= ZERO:
            raise RateDomainError(annual)
        monthly = base ** (ONE / MONTHS_PER_YEAR) - ONE
    logger.debug("Normalized annual rate %s%% to monthly rate %s", annual, monthly)
    return monthly


def _calculate_price_payment(principal: Decimal, monthly_rate: Decimal, term_months: int) -> Decimal:
    """Return the constant installment of a Price schedule.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the growth factor is exactly one
    (a zero rate, or one too small to register at the working precision),
    the payment simplifies to ``P / n``.
    """
    factor = (ONE + monthly_rate) ** term_months
    if factor == ONE:
        return principal / Decimal(term_months)
    return principal * (monthly_rate * factor) / (factor - ONE)


def generate_price_schedule(principal: Number, monthly_rate: Number, term_months: int) -> PriceSchedule:
    """Compute the constant-payment (Price) schedule.

    Parameters
    ----------
    principal: Decimal
        The financed amount.
    monthly_rate: Decimal
        Effective monthly rate as a fraction (see :func:`normalize_annual_rate`).
    term_months: int
        Number of payments.

    Returns
    -------
    PriceSchedule
        ``fixed_payment`` and ``total_paid`` are rounded to cents; each
        period entry keeps full precision.

    Raises
    ------
    ZeroTermError
        If ``term_months`` is zero.
    """
    _check_term(term_months)
    principal = to_decimal(principal)
    rate = to_decimal(monthly_rate)

    with financial_context():
        payment = _calculate_price_payment(principal, rate, term_months)

        balance = principal
        total_paid = ZERO
        periods: List[PeriodEntry] = []
        for _ in range(term_months):
            interest = balance * rate
            amortization = payment - interest
            # Last period may overshoot by a rounding residue
            balance = max(balance - amortization, ZERO)
            total_paid += payment
            periods.append(
                PeriodEntry(
                    remaining_balance=balance,
                    principal_portion=amortization,
                    interest_portion=interest,
                )
            )

        schedule = PriceSchedule(
            fixed_payment=round_currency(payment),
            total_paid=round_currency(total_paid),
            periods=tuple(periods),
        )
    logger.debug(
        "Price schedule: %d periods, fixed payment %s, total paid %s",
        term_months,
        schedule.fixed_payment,
        schedule.total_paid,
    )
    return schedule


def generate_sac_schedule(principal: Number, monthly_rate: Number, term_months: int) -> SacSchedule:
    """Compute the constant-amortization (SAC) schedule.

    Every period repays ``principal / term_months`` of principal plus the
    interest accrued on the outstanding balance, so installments decrease
    month after month.

    Raises ``ZeroTermError`` if ``term_months`` is zero.
    """
    _check_term(term_months)
    principal = to_decimal(principal)
    rate = to_decimal(monthly_rate)

    with financial_context():
        fixed_amortization = principal / Decimal(term_months)

        balance = principal
        total_paid = ZERO
        first_payment = ZERO
        last_payment = ZERO
        periods: List[PeriodEntry] = []
        for month in range(1, term_months + 1):
            interest = balance * rate
            payment = fixed_amortization + interest
            if month == 1:
                first_payment = payment
            if month == term_months:
                last_payment = payment
            balance = max(balance - fixed_amortization, ZERO)
            total_paid += payment
            periods.append(
                PeriodEntry(
                    remaining_balance=balance,
                    principal_portion=fixed_amortization,
                    interest_portion=interest,
                )
            )

        schedule = SacSchedule(
            fixed_principal_portion=round_currency(fixed_amortization),
            first_payment=round_currency(first_payment),
            last_payment=round_currency(last_payment),
            total_paid=round_currency(total_paid),
            periods=tuple(periods),
        )
    logger.debug(
        "SAC schedule: %d periods, first payment %s, last payment %s, total paid %s",
        term_months,
        schedule.first_payment,
        schedule.last_payment,
        schedule.total_paid,
    )
    return schedule


def calculate_debt_trajectory(request: LoanRequest) -> TrajectoryResult:
    """Calculate and compare the SAC and Price trajectories of a loan.

    This is the main entry point. The annual rate is normalized once and both
    schedules are built from the same ``(principal, monthly_rate, term)``.

    Raises
    ------
    ZeroTermError
        If ``request.term_months`` is zero.
    RateDomainError
        If the annual rate is at or below -100 %.
    """
    _check_term(request.term_months)
    monthly_rate = normalize_annual_rate(request.annual_rate_percent)

    price_schedule = generate_price_schedule(request.principal, monthly_rate, request.term_months)
    sac_schedule = generate_sac_schedule(request.principal, monthly_rate, request.term_months)

    return TrajectoryResult(
        initial_principal=request.principal,
        monthly_rate=monthly_rate,
        price_schedule=price_schedule,
        sac_schedule=sac_schedule,
    )
