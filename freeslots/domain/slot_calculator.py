"""
Core business logic for calculating free time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from collections.abc import Sequence
from typing import Any, List

from pendulum import DateTime

from .exceptions import ValidationError
from .models import TimeInterval, WorkWindow

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_LIMIT = 3


class SlotCalculator:
    """
    Calculates free slots inside a work window from occupied intervals.

    Algorithm:
    1. Build the work window for the requested day
    2. Walk the occupied intervals in start order with a cursor
    3. Every gap between the cursor and the next busy start is free
    4. Whatever remains after the last busy interval is free
    """

    def __init__(self, suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT):
        if suggestion_limit <= 0:
            raise ValueError(f"suggestion_limit must be greater than zero, got {suggestion_limit}")
        self.suggestion_limit = suggestion_limit

    def free_slots_for_day(
        self,
        reference: DateTime,
        occupied: Sequence[TimeInterval],
        start_hour: int,
        end_hour: int
    ) -> List[TimeInterval]:
        """
        Compute free slots for the UTC day containing ``reference``.

        Args:
            reference: Any instant on the day to inspect
            occupied: Normalized occupied intervals
            start_hour: Hour of day the work window opens
            end_hour: Hour of day the work window closes

        Returns:
            Free intervals in ascending order
        """
        window = WorkWindow.for_day(reference, start_hour, end_hour)
        return self.compute_free_slots(window, occupied)

    def compute_free_slots(
        self,
        window: WorkWindow,
        occupied: Sequence[TimeInterval]
    ) -> List[TimeInterval]:
        """
        Subtract occupied intervals from a work window, yielding free slots.

        Example:
        Window: 09:00 - 17:00
        Occupied: [10:00-11:00, 14:00-15:00]
        Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
        """
        if window.is_empty:
            return []

        free_slots: List[TimeInterval] = []
        cursor = window.start

        for busy in sorted(occupied, key=lambda i: (i.start, i.end)):
            if busy.is_degenerate or not busy.overlaps(window):
                continue

            # Clip busy interval to the window
            clipped_start = min(max(busy.start, window.start), window.end)
            clipped_end = min(max(busy.end, window.start), window.end)

            if cursor < clipped_start:
                free_slots.append(TimeInterval(start=cursor, end=clipped_start))

            cursor = max(cursor, clipped_end)

        if cursor < window.end:
            free_slots.append(TimeInterval(start=cursor, end=window.end))

        for slot in free_slots:
            logger.debug("Free slot %s (%d min)", slot, slot.duration_minutes())
        return free_slots

    def suggest(self, free_slots: Any, limit: int | None = None) -> List[Any]:
        """
        Return the leading free slots as suggestions.

        Elements are passed through untouched, so this works on parsed
        TimeInterval lists and on raw payload lists alike.

        Raises:
            ValidationError: If free_slots is not a non-empty sequence
        """
        if (
            not isinstance(free_slots, Sequence)
            or isinstance(free_slots, (str, bytes))
            or not free_slots
        ):
            raise ValidationError("'free_slots' is required and should contain an array of slots.")

        bound = self.suggestion_limit if limit is None else limit
        return list(free_slots[:bound])
