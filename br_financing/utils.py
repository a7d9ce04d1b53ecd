"""Utility functions for the financing calculator.

This module holds the numeric policy shared by the engine and the CLI: the
decimal precision used for compounding, the rounding applied to summary
figures and helpers for turning user input into ``Decimal`` values without
ever passing through binary floating point.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Context, Decimal, InvalidOperation, localcontext
from typing import Union

DECIMAL_PRECISION = 28  # significant digits for financial calculations
CENT = Decimal("0.01")
CURRENCY_ROUNDING = ROUND_HALF_EVEN

Number = Union[Decimal, int, str]


def financial_context():
    """Return a local decimal context configured for financial calculations.

    Use as ``with financial_context(): ...``. The thread's global context is
    left untouched, so callers running in parallel never see each other's
    precision settings.
    """
    return localcontext(Context(prec=DECIMAL_PRECISION, rounding=ROUND_HALF_EVEN))


def round_currency(value: Decimal) -> Decimal:
    """Round ``value`` to two fractional digits (banker's rounding)."""
    return value.quantize(CENT, rounding=CURRENCY_ROUNDING)


def to_decimal(value: Number) -> Decimal:
    """Convert ``value`` to ``Decimal``, refusing floats.

    Floats are rejected because their binary representation would leak
    rounding noise into every compounded period.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (bool, float)):
        raise TypeError(f"Expected Decimal, int or str; got {type(value).__name__}")
    if isinstance(value, int):
        return Decimal(value)
    return decimal_from_str(value)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips surrounding whitespace and any commas. It raises
    ``ValueError`` if conversion fails or the value is not finite.
    """
    try:
        cleaned = value.strip().replace(",", "")
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a currency amount with optional ``k``/``m`` suffixes.

    Accepts plain numbers ("360000"), thousands separators ("360,000") and
    shorthand ("360k", "1.2m").
    """
    cleaned = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    if cleaned.endswith("k"):
        factor = Decimal(1_000)
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal(1_000_000)
        cleaned = cleaned[:-1]
    return decimal_from_str(cleaned) * factor


def parse_percent(value: str) -> Decimal:
    """Parse an annual rate given in percent, e.g. "10.5" or "10.5%"."""
    cleaned = value.strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
    return decimal_from_str(cleaned)
