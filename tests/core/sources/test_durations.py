from __future__ import annotations

from datetime import timedelta

import pytest

from boottime.core.sources.durations import parse_duration


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0", timedelta(0)),
        ("0s", timedelta(0)),
        ("1.234s", timedelta(milliseconds=1234)),
        ("500ms", timedelta(milliseconds=500)),
        ("750us", timedelta(microseconds=750)),
        ("750µs", timedelta(microseconds=750)),
        ("1500ns", timedelta(microseconds=2)),
        ("2m3.5s", timedelta(minutes=2, seconds=3, milliseconds=500)),
        ("1min", timedelta(minutes=1)),
        ("1h1m", timedelta(hours=1, minutes=1)),
        ("+.5s", timedelta(milliseconds=500)),
    ],
)
def test_parse_duration(text: str, expected: timedelta) -> None:
    assert parse_duration(text) == expected


def test_parse_duration_rejects_out_of_range() -> None:
    with pytest.raises(ValueError, match="out of range"):
        parse_duration("99999999999999h")


@pytest.mark.parametrize("text", ["", "+", "5", "-1s", "1.5", "s", "1x", "1s2", "1 s"])
def test_parse_duration_rejects_invalid(text: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(text)
