"""
Moving a reference date forward to the next business day.
"""

import logging
from typing import Any, Iterable

import pendulum
from pendulum import DateTime

from .exceptions import ParseError, ValidationError
from .models import WorkWindow
from .normalizer import parse_instant

logger = logging.getLogger(__name__)


class BusinessDayAdvancer:
    """
    Advances a date by one day, skipping excluded weekdays.

    Weekdays use Python's convention: 0=Monday, 6=Sunday.
    """

    def __init__(
        self,
        start_hour: int = 8,
        end_hour: int = 16,
        exclude_weekdays: Iterable[int] = (5, 6)
    ):
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.exclude_weekdays = frozenset(exclude_weekdays)
        if len(self.exclude_weekdays) >= 7:
            raise ValueError("At least one weekday must remain a business day")

    def is_business_day(self, dt: DateTime) -> bool:
        """Check if a given datetime falls on a business day (UTC calendar)."""
        return dt.in_timezone("UTC").weekday() not in self.exclude_weekdays

    def advance(self, reference: DateTime) -> DateTime:
        """
        Add one calendar day, then keep adding days until a business day.

        The time of day is preserved.

        Raises:
            ParseError: If the result would fall past the end of the calendar
        """
        try:
            current = reference.in_timezone("UTC").add(days=1)

            while not self.is_business_day(current):
                logger.debug("Skipping non-business day %s", current.to_date_string())
                current = current.add(days=1)
        except (OverflowError, ValueError) as exc:
            raise ParseError(
                f"'requested_datetime' has no following business day: {reference}"
            ) from exc

        return current

    def next_business_day(self, reference: Any) -> WorkWindow:
        """
        Return the work window of the first business day after ``reference``.

        Args:
            reference: ISO-8601 timestamp string; read as UTC if it has no offset

        Raises:
            ValidationError: If no reference was given
            ParseError: If the reference cannot be parsed
        """
        if reference is None or (isinstance(reference, str) and not reference.strip()):
            raise ValidationError("'requested_datetime' is required.")

        if isinstance(reference, DateTime):
            instant = reference
        else:
            instant = parse_instant(reference, "requested_datetime")

        day = self.advance(instant)
        return WorkWindow.for_day(
            pendulum.datetime(day.year, day.month, day.day, tz="UTC"),
            self.start_hour,
            self.end_hour
        )
