"""
Tests for the JSON file repository.
"""

import asyncio
import json

import pendulum
import pytest

from callavailability.adapters.json_repository import JsonCallRepository, parse_timestamp
from callavailability.domain.exceptions import CallDataError
from callavailability.domain.models import TimeRange

BERLIN = "Europe/Berlin"


def _dt(value: str):
    return pendulum.parse(value, tz=BERLIN)


def _write(tmp_path, data) -> JsonCallRepository:
    data_file = tmp_path / "calls.json"
    data_file.write_text(json.dumps(data), encoding="utf-8")
    return JsonCallRepository(data_file=data_file, timezone="Europe/Berlin")


class TestJsonCallRepository:
    """Tests for JsonCallRepository."""

    def test_availabilities_are_normalized(self, tmp_path):
        """Timestamps land in the configured zone without seconds."""
        repository = _write(tmp_path, {"calls": {"review": {"availabilities": [
            {"start_time": "2024-11-25T08:00:30Z", "end_time": "2024-11-25T16:00:59.500000Z"},
        ]}}})

        availabilities = asyncio.run(repository.get_availabilities("review"))

        assert availabilities == [
            TimeRange(start=_dt("2024-11-25 09:00"), end=_dt("2024-11-25 17:00"))
        ]
        assert availabilities[0].start.timezone_name == BERLIN

    def test_only_occupying_upcoming_bookings_are_taken(self, tmp_path):
        repository = _write(tmp_path, {"calls": {"review": {"bookings": [
            {"start_time": "2024-11-25T10:00:00+01:00", "end_time": "2024-11-25T11:00:00+01:00",
             "purchase_state": "successful"},
            {"start_time": "2024-11-25T11:00:00+01:00", "end_time": "2024-11-25T12:00:00+01:00",
             "purchase_state": "refunded"},
            {"start_time": "2024-11-25T12:00:00+01:00", "end_time": "2024-11-25T13:00:00+01:00",
             "purchase_state": "in_progress"},
            {"start_time": "2024-11-25T07:00:00+01:00", "end_time": "2024-11-25T08:00:00+01:00",
             "purchase_state": "successful"},
            {"start_time": "2024-11-25T14:00:00+01:00", "end_time": "2024-11-25T15:00:00+01:00"},
        ]}}})

        taken = asyncio.run(repository.get_taken_ranges("review", _dt("2024-11-25 08:00")))

        assert [r.start.hour for r in taken] == [10, 12, 14]

    def test_unknown_call_returns_empty_lists(self, tmp_path):
        repository = _write(tmp_path, {"calls": {}})

        assert asyncio.run(repository.get_availabilities("missing")) == []
        assert asyncio.run(repository.get_taken_ranges("missing", _dt("2024-11-25 08:00"))) == []

    def test_missing_file_raises(self, tmp_path):
        repository = JsonCallRepository(data_file=tmp_path / "nope.json")

        with pytest.raises(CallDataError, match="not found"):
            asyncio.run(repository.get_availabilities("review"))

    def test_invalid_json_raises(self, tmp_path):
        data_file = tmp_path / "calls.json"
        data_file.write_text("{not json", encoding="utf-8")
        repository = JsonCallRepository(data_file=data_file)

        with pytest.raises(CallDataError, match="Invalid JSON"):
            asyncio.run(repository.get_availabilities("review"))

    def test_missing_calls_mapping_raises(self, tmp_path):
        repository = _write(tmp_path, [1, 2, 3])

        with pytest.raises(CallDataError, match="'calls' mapping"):
            asyncio.run(repository.get_availabilities("review"))

    def test_reversed_range_raises(self, tmp_path):
        repository = _write(tmp_path, {"calls": {"review": {"availabilities": [
            {"start_time": "2024-11-25T17:00:00+01:00", "end_time": "2024-11-25T09:00:00+01:00"},
        ]}}})

        with pytest.raises(CallDataError, match="must not be after"):
            asyncio.run(repository.get_availabilities("review"))

    def test_malformed_range_raises(self, tmp_path):
        repository = _write(tmp_path, {"calls": {"review": {"availabilities": [
            {"start_time": "2024-11-25T09:00:00+01:00"},
        ]}}})

        with pytest.raises(CallDataError, match="malformed"):
            asyncio.run(repository.get_availabilities("review"))

    def test_unparseable_timestamp_raises(self, tmp_path):
        repository = _write(tmp_path, {"calls": {"review": {"bookings": [
            {"start_time": "tomorrow-ish", "end_time": "2024-11-25T09:00:00+01:00"},
        ]}}})

        with pytest.raises(CallDataError):
            asyncio.run(repository.get_taken_ranges("review", _dt("2024-11-25 08:00")))


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_naive_timestamp_is_local_to_zone(self):
        parsed = parse_timestamp("2024-11-25T09:00:00", BERLIN)

        assert parsed == _dt("2024-11-25 09:00")
        assert parsed.utcoffset().total_seconds() == 3600

    def test_offset_timestamp_is_converted(self):
        parsed = parse_timestamp("2024-07-01T07:00:00Z", BERLIN)

        assert parsed.hour == 9  # CEST
        assert parsed.timezone_name == BERLIN

    def test_garbage_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_timestamp("next tuesday", BERLIN)

    def test_duration_is_not_a_timestamp(self):
        with pytest.raises(ValueError, match="Expected a date and time"):
            parse_timestamp("P1D", BERLIN)
