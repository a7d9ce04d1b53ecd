"""SAC and Price amortization schedules for fixed-rate loans."""

from .data_models import LoanRequest, PeriodEntry, PriceSchedule, SacSchedule, TrajectoryResult
from .engine import (
    calculate_debt_trajectory,
    generate_price_schedule,
    generate_sac_schedule,
    normalize_annual_rate,
)
from .errors import CalculationError, RateDomainError, ZeroTermError

__all__ = [
    "CalculationError",
    "LoanRequest",
    "PeriodEntry",
    "PriceSchedule",
    "RateDomainError",
    "SacSchedule",
    "TrajectoryResult",
    "ZeroTermError",
    "calculate_debt_trajectory",
    "generate_price_schedule",
    "generate_sac_schedule",
    "normalize_annual_rate",
]
