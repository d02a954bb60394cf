"""
Parsing and normalization of raw occupied intervals.

Raw intervals arrive as ``{"start": "...", "end": "..."}`` mappings holding
ISO-8601 strings. Timestamps without an explicit offset are read as UTC.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List

import pendulum
from pendulum import DateTime

from .exceptions import ParseError, ValidationError
from .models import TimeInterval

logger = logging.getLogger(__name__)


def parse_instant(value: Any, field: str = "timestamp") -> DateTime:
    """
    Parse an ISO-8601 string into an aware pendulum DateTime.

    Raises:
        ParseError: If the value is not a string or does not describe a
            point in time.
    """
    if not isinstance(value, str):
        raise ParseError(f"'{field}' must be an ISO-8601 string, got {type(value).__name__}")

    if not value.strip():
        raise ParseError(f"'{field}' is not a valid timestamp: {value!r}")

    try:
        parsed = pendulum.parse(value.strip(), tz="UTC")
    except ValueError as exc:
        raise ParseError(f"'{field}' is not a valid timestamp: {value!r}") from exc

    # Bare times ("10:00") and durations ("P1D") parse, but are not instants
    if not isinstance(parsed, DateTime):
        raise ParseError(f"'{field}' is not a valid timestamp: {value!r}")

    return parsed


def parse_interval(raw: Any) -> TimeInterval:
    """
    Parse one raw ``{start, end}`` pair.

    A pair whose end precedes its start is returned with end clamped to start,
    i.e. as a degenerate interval, so callers can filter it like any other
    zero-length marker.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("Each slot must be an object with 'start' and 'end'.")

    missing = [key for key in ("start", "end") if key not in raw]
    if missing:
        raise ValidationError(f"Slot is missing required field(s): {', '.join(missing)}")

    start = parse_instant(raw["start"], "start")
    end = parse_instant(raw["end"], "end")

    return TimeInterval(start=start, end=max(start, end))


def normalize_intervals(raws: Iterable[Any]) -> List[TimeInterval]:
    """
    Parse raw pairs, drop non-positive intervals and sort them.

    Returns intervals ordered by start ascending, ties broken by end.
    """
    intervals: List[TimeInterval] = []

    for raw in raws:
        interval = parse_interval(raw)
        if interval.is_degenerate:
            logger.debug("Dropping zero-length interval at %s", interval.start)
            continue
        intervals.append(interval)

    return sorted(intervals, key=lambda i: (i.start, i.end))
