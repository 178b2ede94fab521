"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_calculator import AvailabilityCalculator, compute_availability
from .exceptions import (
    CallAvailabilityError,
    CallDataError,
    InvalidLimitationError,
    InvalidTimeRangeError,
    SelectedTimeUnavailableError,
)
from .intervals import merge_ranges, subtract_ranges
from .limitations import apply_daily_limit, apply_minimum_notice
from .models import CallLimitations, TimeRange, count_calls_per_day, truncate_to_minute

__all__ = [
    "AvailabilityCalculator",
    "compute_availability",
    "CallAvailabilityError",
    "CallDataError",
    "InvalidLimitationError",
    "InvalidTimeRangeError",
    "SelectedTimeUnavailableError",
    "merge_ranges",
    "subtract_ranges",
    "apply_daily_limit",
    "apply_minimum_notice",
    "CallLimitations",
    "TimeRange",
    "count_calls_per_day",
    "truncate_to_minute",
]
