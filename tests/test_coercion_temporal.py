"""Tests for duration and time parsing and formatting."""

from datetime import datetime, timedelta, timezone

import pytest

from rulechain.coercion.temporal import (
    RFC3339,
    RFC3339_MICRO,
    format_duration,
    format_time,
    parse_duration,
    parse_time,
)


class TestParseDuration:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("0", timedelta(0)),
            ("-0", timedelta(0)),
            ("5s", timedelta(seconds=5)),
            ("+5s", timedelta(seconds=5)),
            ("1h30m", timedelta(minutes=90)),
            ("1.5s", timedelta(seconds=1.5)),
            (".5s", timedelta(milliseconds=500)),
            ("-250ms", timedelta(milliseconds=-250)),
            ("1us", timedelta(microseconds=1)),
            ("1µs", timedelta(microseconds=1)),
            ("1500ns", timedelta(microseconds=1)),
            ("2h45m30.5s", timedelta(hours=2, minutes=45, seconds=30.5)),
        ],
    )
    def test_valid(self, text: str, expected: timedelta) -> None:
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "-", "5", "5x", "s", ".s", "1.5.5s", "1h 30m"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_duration(text)

    def test_too_large(self) -> None:
        with pytest.raises(ValueError):
            parse_duration("9999999999h")


class TestFormatDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (timedelta(0), "0s"),
            (timedelta(hours=1, minutes=30), "1h30m0s"),
            (timedelta(hours=1), "1h0m0s"),
            (timedelta(minutes=2, seconds=3), "2m3s"),
            (timedelta(seconds=5.5), "5.5s"),
            (timedelta(seconds=-2), "-2s"),
            (timedelta(milliseconds=1.5), "1.5ms"),
            (timedelta(microseconds=500), "500µs"),
            (timedelta(seconds=1, microseconds=5), "1.000005s"),
        ],
    )
    def test_table(self, value: timedelta, expected: str) -> None:
        assert format_duration(value) == expected


class TestTimes:
    def test_parse_uses_first_matching_layout(self) -> None:
        parsed = parse_time("2024-05-01 10:30", ["%Y-%m-%d", "%Y-%m-%d %H:%M"])
        assert parsed == (datetime(2024, 5, 1, 10, 30), "%Y-%m-%d %H:%M")

    def test_parse_without_match(self) -> None:
        assert parse_time("yesterday", ["%Y-%m-%d"]) is None
        assert parse_time("2024-05-01", []) is None

    def test_parse_rfc3339_offsets(self) -> None:
        value, _ = parse_time("2024-05-01T12:00:00+02:00", [RFC3339])
        assert value.utcoffset() == timedelta(hours=2)
        value, _ = parse_time("2024-05-01T12:00:00Z", [RFC3339])
        assert value.utcoffset() == timedelta(0)

    def test_format_offsets(self) -> None:
        utc = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert format_time(utc, RFC3339) == "2024-05-01T12:00:00Z"
        plus_two = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_time(plus_two, RFC3339) == "2024-05-01T12:00:00+02:00"
        minus = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(-timedelta(hours=5, minutes=30)))
        assert format_time(minus, RFC3339) == "2024-05-01T12:00:00-05:30"

    def test_format_naive_drops_offset(self) -> None:
        assert format_time(datetime(2024, 5, 1, 12, 0), RFC3339) == "2024-05-01T12:00:00"

    def test_format_micro_and_escapes(self) -> None:
        value = datetime(2024, 5, 1, 12, 0, 0, 250, tzinfo=timezone.utc)
        assert format_time(value, RFC3339_MICRO) == "2024-05-01T12:00:00.000250Z"
        assert format_time(value, "100%% %z") == "100% Z"
