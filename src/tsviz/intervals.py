"""Interval literal parsing — '1h', '30m', '500ms', 'PT1M' → milliseconds."""

from __future__ import annotations

import re

from tsviz.errors import InvalidIntervalError

UNIT_MILLISECONDS: dict[str, int] = {
    "ms": 1,
    "s": 1_000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
}

INTERVAL_RE = re.compile(
    r"^(?:pt?)?(?P<value>\d+(?:\.\d+)?)(?P<unit>ms|s|m|h|d)$",
)


def parse_interval(literal: str) -> float:
    """Resolve an interval literal to a millisecond count.

    Accepts a number followed by one of ``ms``, ``s``, ``m``, ``h``, ``d``,
    optionally prefixed with the ISO-8601 ``P``/``PT`` designator.

    Raises:
        InvalidIntervalError: If the literal does not match that syntax.

    Example:
        >>> parse_interval("1h")
        3600000.0
        >>> parse_interval("PT30S")
        30000.0
    """
    match = INTERVAL_RE.match(literal.strip().lower()) if isinstance(literal, str) else None
    if not match:
        msg = f"Invalid interval: {literal!r}. Use e.g. '500ms', '30s', '1m', '1h', '1d'."
        raise InvalidIntervalError(msg)
    return float(match.group("value")) * UNIT_MILLISECONDS[match.group("unit")]
