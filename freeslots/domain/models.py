"""
Domain models for occupied intervals, free slots and work windows.
"""

from dataclasses import dataclass
from typing import Dict

import pendulum
from pendulum import DateTime

from .exceptions import ParseError

UTC_MILLIS_FORMAT = "YYYY-MM-DD[T]HH:mm:ss.SSS[Z]"
UTC_SECONDS_FORMAT = "YYYY-MM-DD[T]HH:mm:ss[Z]"


def format_utc(instant: DateTime, milliseconds: bool = True) -> str:
    """Serialize an instant as a UTC timestamp with a ``Z`` designator."""
    fmt = UTC_MILLIS_FORMAT if milliseconds else UTC_SECONDS_FORMAT
    return instant.in_timezone("UTC").format(fmt)


@dataclass(frozen=True)
class TimeInterval:
    """
    Represents an immutable time interval with start and end datetime.

    Invariant: start must not be after end. An interval whose start equals
    its end is degenerate and carries no busy time.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    @property
    def is_degenerate(self) -> bool:
        return self.start == self.end

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeInterval | WorkWindow") -> bool:
        """Check if this interval overlaps with another."""
        return self.start < other.end and self.end > other.start

    def to_payload(self, milliseconds: bool = True) -> Dict[str, str]:
        """Serialize to the ``{"start": ..., "end": ...}`` wire shape."""
        return {
            "start": format_utc(self.start, milliseconds),
            "end": format_utc(self.end, milliseconds),
        }

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class WorkWindow:
    """
    The part of a single UTC day eligible for scheduling.

    Unlike TimeInterval, a window may be empty or inverted (start >= end);
    such a window simply has no free time.
    """
    start: DateTime
    end: DateTime

    @classmethod
    def for_day(cls, reference: DateTime, start_hour: int, end_hour: int) -> "WorkWindow":
        """
        Build the window for the UTC calendar day of ``reference``.

        Hours are offsets from midnight, so ``end_hour=24`` closes the window
        at the next midnight.
        """
        try:
            day = reference.in_timezone("UTC")
            midnight = pendulum.datetime(day.year, day.month, day.day, tz="UTC")
            return cls(start=midnight.add(hours=start_hour), end=midnight.add(hours=end_hour))
        except (OverflowError, ValueError) as exc:
            raise ParseError(
                f"Work window {start_hour}-{end_hour}h on {reference} is outside the supported date range"
            ) from exc

    @property
    def is_empty(self) -> bool:
        return self.start >= self.end

    def to_payload(self, milliseconds: bool = False) -> Dict[str, str]:
        return {
            "start": format_utc(self.start, milliseconds),
            "end": format_utc(self.end, milliseconds),
        }
