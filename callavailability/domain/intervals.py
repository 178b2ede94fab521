"""
Interval algebra over half-open time ranges.

Two operations feed the availability pipeline:

- ``merge_ranges`` fuses overlapping or touching ranges into an ascending,
  disjoint list.
- ``subtract_ranges`` removes taken time from available time with a
  signed coordinate sweep, so overlapping inputs on either side never
  need pairwise subtraction.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from pendulum import DateTime

from .models import TimeRange


def merge_ranges(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or adjacent time ranges.

    Zero-length ranges take part in merging like any other range.

    Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
    """
    sorted_ranges = sorted(ranges, key=lambda r: (r.start, r.end))
    if not sorted_ranges:
        return []

    merged: List[TimeRange] = [sorted_ranges[0]]

    for current in sorted_ranges[1:]:
        last = merged[-1]

        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = TimeRange(start=last.start, end=current.end)
        else:
            merged.append(current)

    return merged


def subtract_ranges(
    available: Iterable[TimeRange],
    taken: Iterable[TimeRange],
) -> List[TimeRange]:
    """
    Return the time covered by ``available`` but not by ``taken``.

    Every available range adds +1 at its start and -1 at its end; every
    taken range adds the mirror deltas. Deltas sharing a timestamp are
    summed before the running total is tested, and a range is emitted for
    each stretch where the total stays above zero.

    Example:
    Available: 09:00 - 17:00
    Taken: [12:00-13:00]
    Result: [09:00-12:00, 13:00-17:00]
    """
    deltas: Dict[DateTime, int] = defaultdict(int)

    for time_range in merge_ranges(available):
        deltas[time_range.start] += 1
        deltas[time_range.end] -= 1

    for time_range in merge_ranges(taken):
        deltas[time_range.start] -= 1
        deltas[time_range.end] += 1

    free_ranges: List[TimeRange] = []
    running_total = 0
    open_start: Optional[DateTime] = None

    for timestamp in sorted(deltas):
        previous_total = running_total
        running_total += deltas[timestamp]

        if previous_total <= 0 < running_total:
            open_start = timestamp
        elif running_total <= 0 < previous_total:
            free_ranges.append(TimeRange(start=open_start, end=timestamp))
            open_start = None

    return free_ranges
