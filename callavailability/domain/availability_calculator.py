"""
Core business logic for calculating the remaining availability of a call.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from typing import Iterable, List, Optional

from pendulum import DateTime, Duration

from .intervals import merge_ranges, subtract_ranges
from .limitations import apply_daily_limit, apply_minimum_notice
from .models import CallLimitations, TimeRange, count_calls_per_day

logger = logging.getLogger(__name__)


class AvailabilityCalculator:
    """
    Calculates the windows a new call can still be booked into.

    Algorithm:
    1. Merge the declared availability and the taken ranges independently
    2. Sweep both to keep only time that is available and not taken
    3. Cut away everything before now + minimum notice
    4. Trim ranges whose first or last day has reached the daily call cap

    The calculator holds no state between calls; ``now`` is passed in so the
    whole computation is reproducible.
    """

    def __init__(self, limitations: Optional[CallLimitations] = None):
        self.limitations = limitations or CallLimitations()

    def calculate(
        self,
        availability: Iterable[TimeRange],
        taken: Iterable[TimeRange],
        now: DateTime,
    ) -> List[TimeRange]:
        """
        Compute the remaining bookable ranges.

        Args:
            availability: Declared open windows, possibly overlapping
            taken: Ranges occupied by booked calls, possibly overlapping
            now: Current time, read once by the caller

        Returns:
            Ascending, disjoint list of bookable TimeRange objects
        """
        taken = list(taken)

        merged_availability = merge_ranges(availability)
        merged_taken = merge_ranges(taken)

        free_ranges = subtract_ranges(merged_availability, merged_taken)
        logger.debug(
            "%d availability range(s) minus %d taken range(s) left %d free range(s)",
            len(merged_availability),
            len(merged_taken),
            len(free_ranges),
        )

        noticed_ranges = apply_minimum_notice(free_ranges, self.limitations, now)

        # Counted on the raw list so that adjacent calls are not fused into one
        calls_per_day = count_calls_per_day(taken)
        remaining = apply_daily_limit(noticed_ranges, self.limitations, calls_per_day)

        logger.debug(
            "%d range(s) after minimum notice, %d after daily limit",
            len(noticed_ranges),
            len(remaining),
        )
        return remaining


def compute_availability(
    availability: Iterable[TimeRange],
    taken: Iterable[TimeRange],
    minimum_notice: Optional[Duration],
    max_per_day: Optional[int],
    now: DateTime,
) -> List[TimeRange]:
    """Functional form of ``AvailabilityCalculator.calculate``."""
    limitations = CallLimitations(
        minimum_notice=minimum_notice,
        maximum_calls_per_day=max_per_day,
    )
    return AvailabilityCalculator(limitations).calculate(availability, taken, now)
