"""
JSON file data source for call availability and booked calls.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pendulum
from pendulum import DateTime, Timezone

from ..domain.exceptions import CallDataError, InvalidTimeRangeError
from ..domain.models import TimeRange, truncate_to_minute

logger = logging.getLogger(__name__)

# Purchase states whose call keeps its slot occupied
OCCUPYING_PURCHASE_STATES = frozenset({"successful", "not_charged", "in_progress"})


def parse_timestamp(value: str, zone: Union[str, Timezone]) -> DateTime:
    """
    Parse an ISO-8601 timestamp into ``zone``.

    Timestamps without an offset are read as local time in ``zone``.

    Raises:
        ValueError: If the value is not an ISO-8601 date and time
    """
    parsed = pendulum.parse(value, tz=zone)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Expected a date and time, got {value!r}")
    return parsed.in_timezone(zone)


class JsonCallRepository:
    """
    Repository that reads availability and bookings from a JSON document.

    Expected shape::

        {"calls": {"<call_id>": {
            "availabilities": [{"start_time": ..., "end_time": ...}],
            "bookings": [{"start_time": ..., "end_time": ..., "purchase_state": ...}]
        }}}

    All timestamps are converted to ``timezone`` and truncated to the minute.
    """

    def __init__(self, data_file: Path, timezone: str = "Europe/Berlin"):
        """
        Initialize the repository.

        Args:
            data_file: Path to the JSON document
            timezone: IANA timezone every timestamp is normalized to
        """
        self.data_file = data_file
        self.timezone = timezone
        self._zone = pendulum.timezone(timezone)
        self._calls: Dict[str, Any] | None = None

    async def get_availabilities(self, call_id: str) -> List[TimeRange]:
        """Return the declared availability ranges of a call."""
        entry = self._get_call_entry(call_id)
        return [
            self._parse_range(item, call_id)
            for item in entry.get("availabilities", [])
        ]

    async def get_taken_ranges(self, call_id: str, now: DateTime) -> List[TimeRange]:
        """
        Return ranges of booked calls that still occupy availability.

        Calls from refunded or failed purchases and calls that have already
        ended are left out.
        """
        entry = self._get_call_entry(call_id)
        taken: List[TimeRange] = []

        for item in entry.get("bookings", []):
            time_range = self._parse_range(item, call_id)

            purchase_state = item.get("purchase_state", "successful")
            if purchase_state not in OCCUPYING_PURCHASE_STATES:
                continue

            if time_range.end > now:
                taken.append(time_range)

        return taken

    def _get_call_entry(self, call_id: str) -> Dict[str, Any]:
        calls = self._load()
        entry = calls.get(call_id)

        if entry is None:
            logger.warning("No data for call %s in %s", call_id, self.data_file)
            return {}
        if not isinstance(entry, dict):
            raise CallDataError(f"Entry for call {call_id} must be a mapping")

        return entry

    def _load(self) -> Dict[str, Any]:
        """Load and cache the ``calls`` mapping from the JSON file."""
        if self._calls is not None:
            return self._calls

        if not self.data_file.exists():
            raise CallDataError(f"Call data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise CallDataError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        calls = data.get("calls") if isinstance(data, dict) else None
        if not isinstance(calls, dict):
            raise CallDataError(f"{self.data_file} must contain a 'calls' mapping")

        self._calls = calls
        return calls

    def _parse_range(self, item: Dict[str, Any], call_id: str) -> TimeRange:
        if not isinstance(item, dict):
            raise CallDataError(f"Call {call_id}: time range must be a mapping, got {item!r}")

        try:
            start = self._parse_timestamp(item["start_time"])
            end = self._parse_timestamp(item["end_time"])
            return TimeRange(start=start, end=end)
        except InvalidTimeRangeError as exc:
            raise CallDataError(f"Call {call_id}: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise CallDataError(f"Call {call_id}: malformed time range {item!r}") from exc

    def _parse_timestamp(self, value: str) -> DateTime:
        return truncate_to_minute(parse_timestamp(value, self._zone))
