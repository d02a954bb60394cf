"""
Application service exposing the scheduling operations over JSON payloads.

The service validates decoded request bodies, delegates to the domain
components and shapes JSON-serializable responses. It holds no per-request
state, so one instance can serve any number of callers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

from ..config import AppConfig
from ..domain.answer import AnswerFormatter
from ..domain.business_day import BusinessDayAdvancer
from ..domain.exceptions import ParseError, SlotError, ValidationError
from ..domain.normalizer import normalize_intervals, parse_interval
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)

NO_FREE_SLOTS = "0"
OCCUPIED_KEYS = ("value", "occupied_slots")


def parse_hour(value: Any, field: str) -> int:
    """
    Parse an hour-of-day given as an int or a numeric string.

    Raises:
        ValidationError: If the value is missing, of the wrong type or out of range
        ParseError: If a string does not hold an integer
    """
    if value is None:
        raise ValidationError(f"Invalid input, '{field}' is required.")

    if isinstance(value, bool):
        raise ValidationError(f"Invalid input, '{field}' must be a number.")

    if isinstance(value, int):
        hour = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"Invalid input, '{field}' must be a whole hour, got {value}.")
        hour = int(value)
    elif isinstance(value, str):
        try:
            hour = int(value.strip())
        except ValueError as exc:
            raise ParseError(f"Invalid input, '{field}' is not an integer: {value!r}.") from exc
    else:
        raise ValidationError(f"Invalid input, '{field}' must be a number.")

    if not 0 <= hour <= 24:
        raise ValidationError(f"Invalid input, '{field}' must be between 0 and 24, got {hour}.")

    return hour


def _require_mapping(payload: Any) -> Mapping:
    if not isinstance(payload, Mapping):
        raise ValidationError("Invalid input, request body must be a JSON object.")
    return payload


@contextmanager
def _logged_rejection(operation: str) -> Iterator[None]:
    try:
        yield
    except SlotError as exc:
        logger.warning("%s rejected: %s", operation, exc)
        raise


class SchedulingService:
    """
    Entry point for the four scheduling operations.

    Components are injected so tests can swap them; ``from_config`` wires
    them from an AppConfig.
    """

    def __init__(
        self,
        slot_calculator: SlotCalculator,
        business_day_advancer: BusinessDayAdvancer,
        answer_formatter: AnswerFormatter,
        default_hours: Tuple[int, int] | None = None,
    ) -> None:
        self._slot_calculator = slot_calculator
        self._business_day_advancer = business_day_advancer
        self._answer_formatter = answer_formatter
        self._default_hours = default_hours

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> "SchedulingService":
        config = config or AppConfig()
        work_day = config.work_day
        return cls(
            slot_calculator=SlotCalculator(suggestion_limit=config.suggestions.limit),
            business_day_advancer=BusinessDayAdvancer(
                start_hour=config.business_day.start_hour,
                end_hour=config.business_day.end_hour,
                exclude_weekdays=config.business_day.exclude_days,
            ),
            answer_formatter=AnswerFormatter(
                utc_offset_hours=config.answer.utc_offset_hours,
                locale=config.answer.locale,
            ),
            default_hours=(
                (work_day.start_hour, work_day.end_hour)
                if work_day.allow_default_hours else None
            ),
        )

    def compute_free_slots(self, payload: Any) -> Dict[str, Any]:
        """
        Compute the free slots of the day named by the first occupied slot.

        Returns ``{"free_slots": [...]}``, or ``{"free_slots": "0"}`` when the
        window is fully booked.
        """
        with _logged_rejection("compute_free_slots"):
            body = _require_mapping(payload)
            occupied = self._occupied_slots(body)
            start_hour, end_hour = self._hours(body)

            # The first slot as sent names the day, even a zero-length marker
            reference = parse_interval(occupied[0]).start
            intervals = normalize_intervals(occupied)

            free_slots = self._slot_calculator.free_slots_for_day(
                reference=reference,
                occupied=intervals,
                start_hour=start_hour,
                end_hour=end_hour,
            )

        if not free_slots:
            return {"free_slots": NO_FREE_SLOTS}

        return {"free_slots": [slot.to_payload() for slot in free_slots]}

    def suggest_slots(self, payload: Any) -> Dict[str, List[Any]]:
        """Return the leading free slots as ``{"suggested_slots": [...]}``."""
        with _logged_rejection("suggest_slots"):
            body = _require_mapping(payload)
            suggested = self._slot_calculator.suggest(body.get("free_slots"))
        return {"suggested_slots": suggested}

    def advance_to_next_business_day(self, payload: Any) -> Dict[str, str]:
        """Return the work window of the next business day as ``{"start", "end"}``."""
        with _logged_rejection("advance_to_next_business_day"):
            body = _require_mapping(payload)
            window = self._business_day_advancer.next_business_day(
                body.get("requested_datetime")
            )
        return window.to_payload(milliseconds=False)

    def format_answer(self, payload: Any) -> str:
        """Render the suggested slots as a sentence."""
        with _logged_rejection("format_answer"):
            body = _require_mapping(payload)
            return self._answer_formatter.format(body.get("suggested_slots"))

    def propose(self, payload: Any) -> Dict[str, Any]:
        """
        Run free slot computation, suggestion and formatting in one call.

        A fully booked day yields no suggestions and no answer.
        """
        free = self.compute_free_slots(payload)
        free_slots = free["free_slots"]

        if free_slots == NO_FREE_SLOTS:
            return {"free_slots": NO_FREE_SLOTS, "suggested_slots": [], "answer": None}

        suggested = self.suggest_slots({"free_slots": free_slots})["suggested_slots"]
        answer = self.format_answer({"suggested_slots": suggested})

        return {"free_slots": free_slots, "suggested_slots": suggested, "answer": answer}

    @staticmethod
    def error_body(exc: SlotError) -> Dict[str, str]:
        """Structured error description for a rejected request."""
        return {"message": str(exc)}

    @staticmethod
    def _occupied_slots(body: Mapping) -> Sequence[Any]:
        occupied = next((body[key] for key in OCCUPIED_KEYS if key in body), None)

        if (
            not isinstance(occupied, Sequence)
            or isinstance(occupied, (str, bytes))
            or not occupied
        ):
            raise ValidationError("Invalid input, 'value' is required and should contain slots.")

        return occupied

    def _hours(self, body: Mapping) -> Tuple[int, int]:
        if (
            self._default_hours is not None
            and body.get("startHour") is None
            and body.get("endHour") is None
        ):
            return self._default_hours

        return (
            parse_hour(body.get("startHour"), "startHour"),
            parse_hour(body.get("endHour"), "endHour"),
        )
