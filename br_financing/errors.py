"""Exceptions raised by the financing engine."""

from __future__ import annotations

from decimal import Decimal


class CalculationError(ValueError):
    """Base class for every failure reported by the calculation core."""


class ZeroTermError(CalculationError):
    """Raised when a schedule is requested for a term with no periods."""

    def __init__(self, term_months: int) -> None:
        if term_months == 0:
            message = "Total months cannot be zero."
        else:
            message = f"Total months must be at least one (got {term_months})."
        super().__init__(message)
        self.term_months = term_months


class RateDomainError(CalculationError):
    """Raised when an annual rate cannot be converted to a monthly rate.

    Rates at or below -100 % leave a non-positive growth factor, which has no
    real twelfth root.
    """

    def __init__(self, annual_rate_percent: Decimal) -> None:
        super().__init__(
            f"Annual interest rate must be greater than -100% (got {annual_rate_percent}%)."
        )
        self.annual_rate_percent = annual_rate_percent
