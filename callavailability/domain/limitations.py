"""
Constraint passes applied to candidate availability ranges.

Minimum notice is a continuous cutoff and is applied first. The daily call
cap is a discrete, per-day constraint and needs a day-by-day search, so it
runs as a separate pass over the notice-adjusted ranges.
"""

import logging
from datetime import date
from typing import Callable, Iterable, List, Mapping, Optional

from pendulum import DateTime

from .models import CallLimitations, TimeRange

logger = logging.getLogger(__name__)


def apply_minimum_notice(
    ranges: Iterable[TimeRange],
    limitations: CallLimitations,
    now: DateTime,
) -> List[TimeRange]:
    """
    Trim or drop ranges so nothing starts before ``now + minimum_notice``.

    A clamped start is expressed in the zone of the range it belongs to,
    whatever zone ``now`` was read in.
    """
    earliest = limitations.earliest_start(now)
    adjusted: List[TimeRange] = []

    for time_range in ranges:
        if time_range.end < earliest:
            continue

        if time_range.start < earliest:
            time_range = TimeRange(
                start=earliest.in_timezone(time_range.start.tzinfo),
                end=time_range.end,
            )

        # Clamping right up to the end leaves nothing to book
        if not time_range.is_empty():
            adjusted.append(time_range)

    return adjusted


def apply_daily_limit(
    ranges: Iterable[TimeRange],
    limitations: CallLimitations,
    calls_per_day: Mapping[date, int],
) -> List[TimeRange]:
    """
    Trim or drop ranges whose first or last day is already fully booked.

    A range starting on a full day moves its start forward to the beginning
    of the next day that can take more calls; a range ending on a full day
    moves its end back to the end of the previous such day. If no such day
    exists within the range, the range is dropped.
    """
    if limitations.maximum_calls_per_day is None:
        return list(ranges)

    def can_take_more(day: date) -> bool:
        return limitations.can_take_more_calls_on(day, calls_per_day)

    adjusted: List[TimeRange] = []

    for time_range in ranges:
        start = time_range.start
        end = time_range.end

        if not can_take_more(start.date()):
            open_day = _first_open_day(
                start.start_of("day").add(days=1),
                end,
                step=1,
                can_take_more=can_take_more,
            )
            if open_day is None:
                logger.debug("Dropping %s: every day is fully booked", time_range)
                continue
            start = open_day

        if not can_take_more(end.date()):
            open_day = _first_open_day(
                end.start_of("day").subtract(days=1),
                start,
                step=-1,
                can_take_more=can_take_more,
            )
            if open_day is None:
                logger.debug("Dropping %s: every day is fully booked", time_range)
                continue
            end = open_day.end_of("day")

        if start < end:
            adjusted.append(TimeRange(start=start, end=end))

    return adjusted


def _first_open_day(
    day: DateTime,
    stop: DateTime,
    *,
    step: int,
    can_take_more: Callable[[date], bool],
) -> Optional[DateTime]:
    """
    Walk day by day from ``day`` towards the day of ``stop`` (inclusive) and
    return the start of the first day that can take more calls.
    """
    while (day.date() <= stop.date()) if step > 0 else (day.date() >= stop.date()):
        if can_take_more(day.date()):
            return day
        day = day.add(days=step)
    return None
