"""Parser for duration strings with unit suffixes (``1.234s``, ``500ms``, ``1min``)."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import ROUND_HALF_EVEN, Decimal

from boottime.core.models import ZERO, usec

# microseconds per unit; longer suffixes first so "ms" wins over "m"
_UNITS: dict[str, Decimal] = {
    "ns": Decimal("0.001"),
    "us": Decimal("1"),
    "µs": Decimal("1"),
    "μs": Decimal("1"),
    "ms": Decimal("1000"),
    "min": Decimal("60000000"),
    "s": Decimal("1000000"),
    "m": Decimal("60000000"),
    "h": Decimal("3600000000"),
}

_COMPONENT = re.compile(
    r"(\d+(?:\.\d*)?|\.\d+)(" + "|".join(sorted(map(re.escape, _UNITS), key=len, reverse=True)) + ")",
    re.ASCII,
)


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``1.5s``, ``2m3s`` or ``1min``.

    A bare ``0`` is accepted. Signs other than a leading ``+`` are rejected
    because stage durations cannot be negative.

    Raises:
        ValueError: the text is not a valid non-negative duration.
    """

    original = text
    if text.startswith("+"):
        text = text[1:]
    if text == "0":
        return ZERO
    if not text:
        raise ValueError(f"invalid duration {original!r}")

    total = Decimal(0)
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f"invalid duration {original!r}")
        number, unit = match.groups()
        total += Decimal(number) * _UNITS[unit]
        position = match.end()

    return usec(int(total.to_integral_value(rounding=ROUND_HALF_EVEN)))


__all__ = ["parse_duration"]
