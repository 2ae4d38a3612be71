"""Duration helpers shared by the record model and the console output."""

from __future__ import annotations

from datetime import timedelta

ZERO = timedelta(0)


def usec(value: int) -> timedelta:
    """Convert a microsecond count to a duration.

    Raises:
        ValueError: ``value`` is beyond the range of :class:`~datetime.timedelta`.
    """
    try:
        return timedelta(microseconds=value)
    except OverflowError as exc:
        raise ValueError(f"{value} microseconds is out of range") from exc


def to_microseconds(value: timedelta) -> int:
    """Return the whole number of microseconds in ``value``."""
    return (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds


def _trim(number: str) -> str:
    if "." in number:
        number = number.rstrip("0").rstrip(".")
    return number


def format_duration(value: timedelta) -> str:
    """Render a duration compactly, e.g. ``1.5s``, ``250ms`` or ``2m3.25s``.

    The zero duration stands for "not reported" and renders as ``-``.
    """

    total_us = to_microseconds(value)
    if total_us == 0:
        return "-"
    if total_us < 1_000:
        return f"{total_us}µs"
    if total_us < 1_000_000:
        return f"{_trim(f'{total_us / 1_000:.3f}')}ms"
    minutes, remainder_us = divmod(total_us, 60_000_000)
    seconds = _trim(f"{remainder_us / 1_000_000:.3f}")
    if minutes == 0:
        return f"{seconds}s"
    hours, minutes = divmod(minutes, 60)
    prefix = f"{hours}h{minutes}m" if hours else f"{minutes}m"
    return f"{prefix}{seconds}s"


__all__ = ["ZERO", "format_duration", "to_microseconds", "usec"]
