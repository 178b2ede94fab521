"""
Domain models for time ranges and call limitations.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Mapping, Optional

import pendulum
from pendulum import DateTime, Duration

from .exceptions import InvalidLimitationError, InvalidTimeRangeError


def truncate_to_minute(dt: DateTime) -> DateTime:
    """Drop sub-minute precision, the resolution calls are stored with."""
    return dt.start_of("minute")


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must not be after end. A range with ``start == end``
    is allowed and treated as empty.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        # Plain datetimes are promoted so day arithmetic is available
        for name in ("start", "end"):
            value = getattr(self, name)
            if not isinstance(value, DateTime):
                object.__setattr__(self, name, pendulum.instance(value))

        if self.start > self.end:
            raise InvalidTimeRangeError(
                f"Start time {self.start} must not be after end time {self.end}"
            )

    def is_empty(self) -> bool:
        """Return True for a zero-length range."""
        return self.start == self.end

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: "TimeRange") -> bool:
        """Check if another range lies entirely within this one."""
        return self.start <= other.start and other.end <= self.end

    def to_dict(self) -> Dict[str, str]:
        """Serialize to ISO-8601 start and end times."""
        return {
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
        }

    def format_display(self) -> str:
        """
        Format the range for display.
        Format: Weekday, DD.MM.YYYY HH:mm – [Weekday, DD.MM.YYYY] HH:mm
        """
        start_str = self.start.format("dddd, DD.MM.YYYY HH:mm")
        if self.start.date() == self.end.date():
            end_str = self.end.format("HH:mm")
        else:
            end_str = self.end.format("dddd, DD.MM.YYYY HH:mm")
        return f"{start_str} – {end_str}"

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('DD.MM.YYYY HH:mm')}"


def count_calls_per_day(taken: Iterable[TimeRange]) -> Counter:
    """
    Count booked calls per calendar day.

    A call is charged only to the day it starts on, even when it runs past
    midnight.
    """
    return Counter(time_range.start.date() for time_range in taken)


@dataclass(frozen=True)
class CallLimitations:
    """
    Booking limits configured for a call offering.

    ``None`` means "no limit" for either field.
    """
    minimum_notice: Optional[Duration] = None
    maximum_calls_per_day: Optional[int] = None

    def __post_init__(self):
        if self.minimum_notice is not None and self.minimum_notice.total_seconds() < 0:
            raise InvalidLimitationError(
                f"minimum_notice must not be negative, got {self.minimum_notice}"
            )
        if self.maximum_calls_per_day is not None and self.maximum_calls_per_day < 0:
            raise InvalidLimitationError(
                f"maximum_calls_per_day must not be negative, got {self.maximum_calls_per_day}"
            )

    @classmethod
    def from_minutes(
        cls,
        minimum_notice_in_minutes: Optional[int] = None,
        maximum_calls_per_day: Optional[int] = None,
    ) -> "CallLimitations":
        """Build limitations from their persisted, minute-based form."""
        notice: Optional[Duration] = None
        if minimum_notice_in_minutes is not None:
            notice = pendulum.duration(minutes=minimum_notice_in_minutes)
        return cls(minimum_notice=notice, maximum_calls_per_day=maximum_calls_per_day)

    def earliest_start(self, now: DateTime) -> DateTime:
        """Return the earliest time a new call may start."""
        if not isinstance(now, DateTime):
            now = pendulum.instance(now)
        if self.minimum_notice is None:
            return now
        return now + self.minimum_notice

    def can_take_more_calls_on(self, day: date, calls_per_day: Mapping[date, int]) -> bool:
        """Check whether another call may start on ``day``."""
        if self.maximum_calls_per_day is None:
            return True
        return calls_per_day.get(day, 0) < self.maximum_calls_per_day

    def allows(self, start_time: DateTime, now: DateTime, taken: Iterable[TimeRange]) -> bool:
        """Check whether a call starting at ``start_time`` respects both limits."""
        if start_time < self.earliest_start(now):
            return False
        return self.can_take_more_calls_on(start_time.date(), count_calls_per_day(taken))
