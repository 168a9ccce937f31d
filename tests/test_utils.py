"""
Tests for time parsing and request validation helpers.
"""
from datetime import date, datetime, timezone

import pytest
from timeline.utils import (
    clamp,
    day_minutes,
    parse_date,
    parse_timestamp,
    resolve_timezone,
    time_to_minutes,
    validate_interval_list,
    validate_shift_records,
    validate_shift_window,
)


class TestTimeHelpers:
    """Minute conversion and parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [("00:00", 0), ("08:30", 510), ("23:59", 1439), ("24:00", -1), ("7", -1), ("", -1), ("ab:cd", -1)],
    )
    def test_time_to_minutes(self, value, expected):
        assert time_to_minutes(value) == expected

    def test_clamp(self):
        assert clamp(-5, 0, 1440) == 0
        assert clamp(1500, 0, 1440) == 1440
        assert clamp(600, 0, 1440) == 600

    def test_parse_timestamp_accepts_z_suffix(self):
        parsed = parse_timestamp("2024-05-10T08:00:00Z")
        assert parsed == datetime(2024, 5, 10, 8, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value, microsecond",
        [
            ("2024-05-10T08:00:00.5+00:00", 500000),
            ("2024-05-10T08:00:00.12345Z", 123450),
            ("2024-05-10T08:00:00.123456789+00:00", 123456),
        ],
    )
    def test_parse_timestamp_trimmed_fractions(self, value, microsecond):
        """Postgres drops trailing zeros from fractional seconds."""
        parsed = parse_timestamp(value)
        assert parsed == datetime(2024, 5, 10, 8, 0, 0, microsecond, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42])
    def test_parse_timestamp_rejects_garbage(self, value):
        assert parse_timestamp(value) is None

    def test_parse_date(self):
        assert parse_date("2024-05-10") == date(2024, 5, 10)
        assert parse_date("2024-13-01") is None
        assert parse_date(None) is None

    def test_day_minutes(self):
        day = date(2024, 5, 10)
        assert day_minutes(datetime(2024, 5, 10, 9, 15), day) == 555
        assert day_minutes(datetime(2024, 5, 11, 0, 0), day) == 1440
        assert day_minutes(datetime(2024, 5, 11, 0, 1), day) is None
        assert day_minutes(datetime(2024, 5, 9, 23, 0), day) is None

    def test_resolve_timezone(self):
        tz, error = resolve_timezone("Asia/Seoul")
        assert tz is not None and error is None
        assert resolve_timezone(None) == (None, None)
        tz, error = resolve_timezone("Mars/Olympus_Mons")
        assert tz is None
        assert "Unknown timezone" in error


class TestValidation:
    """Boundary validation returns (is_valid, message) tuples."""

    def test_shift_window(self):
        assert validate_shift_window("08:00", "15:00") == (True, None)
        is_valid, message = validate_shift_window("15:00", "15:00")
        assert not is_valid
        assert message == "End time must be later than start time."
        assert not validate_shift_window("8am", "15:00")[0]
        assert not validate_shift_window(None, "15:00")[0]

    def test_interval_list(self):
        assert validate_interval_list([]) == (True, None)
        assert validate_interval_list([{"id": "a", "startMinute": 0, "endMinute": 60}]) == (True, None)
        # end before start is tolerated; the layout clamps it
        assert validate_interval_list([{"id": "a", "startMinute": 60, "endMinute": 0}])[0]

    @pytest.mark.parametrize(
        "intervals",
        [
            None,
            ["a"],
            [{"startMinute": 0, "endMinute": 60}],
            [{"id": "a", "startMinute": "0", "endMinute": 60}],
            [{"id": "a", "startMinute": True, "endMinute": 60}],
            [{"id": "a", "startMinute": 1440, "endMinute": 1500}],
            [{"id": "a", "startMinute": -1, "endMinute": 60}],
        ],
    )
    def test_interval_list_rejects(self, intervals):
        is_valid, message = validate_interval_list(intervals)
        assert not is_valid
        assert message

    def test_shift_records(self, sample_shifts):
        assert validate_shift_records(sample_shifts) == (True, None)
        assert not validate_shift_records({"id": "x"})[0]
        assert not validate_shift_records([{"starts_at": "2024-05-10T08:00:00"}])[0]
        assert not validate_shift_records([{"id": "x", "starts_at": 123}])[0]
