"""
Rendering suggested slots as a natural-language sentence.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Tuple

from pendulum import DateTime

from .exceptions import ParseError, ValidationError
from .models import TimeInterval
from .normalizer import parse_instant

MONTH_NAMES: Dict[str, List[str]] = {
    "fr": [
        "janvier", "février", "mars", "avril", "mai", "juin",
        "juillet", "août", "septembre", "octobre", "novembre", "décembre",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "de": [
        "Januar", "Februar", "März", "April", "Mai", "Juni",
        "Juli", "August", "September", "Oktober", "November", "Dezember",
    ],
}

# (first slot, every following slot)
PHRASES: Dict[str, Tuple[str, str]] = {
    "fr": (
        "le {day} {month} de {start} heures à {end} heures",
        " et de {start} heures à {end} heures",
    ),
    "en": (
        "on {day} {month} from {start} to {end} o'clock",
        " and from {start} to {end} o'clock",
    ),
    "de": (
        "am {day}. {month} von {start} Uhr bis {end} Uhr",
        " und von {start} Uhr bis {end} Uhr",
    ),
}

SUPPORTED_LOCALES = tuple(MONTH_NAMES)


def month_name(month: int, locale: str = "fr") -> str:
    """Full month name for a 1-based month number."""
    try:
        names = MONTH_NAMES[locale]
    except KeyError:
        raise ValueError(f"Unsupported locale '{locale}', expected one of {SUPPORTED_LOCALES}")
    return names[month - 1]


class AnswerFormatter:
    """
    Turns suggested slots into a sentence, French by default.

    Slot times are shifted by a fixed offset (not a timezone lookup) before
    reading day, month and hours.
    """

    def __init__(self, utc_offset_hours: int = 1, locale: str = "fr"):
        if locale not in MONTH_NAMES:
            raise ValueError(f"Unsupported locale '{locale}', expected one of {SUPPORTED_LOCALES}")
        self.utc_offset_hours = utc_offset_hours
        self.locale = locale

    def _shift(self, instant: DateTime, field: str) -> DateTime:
        try:
            return instant.in_timezone("UTC").add(hours=self.utc_offset_hours)
        except (OverflowError, ValueError) as exc:
            raise ParseError(
                f"'{field}' is outside the supported date range once shifted by "
                f"{self.utc_offset_hours:+d}h: {instant}"
            ) from exc

    def _slot_bounds(self, raw: Any) -> Tuple[DateTime, DateTime]:
        if isinstance(raw, TimeInterval):
            return raw.start, raw.end

        if not isinstance(raw, Mapping) or "start" not in raw or "end" not in raw:
            raise ValidationError("Each suggested slot must be an object with 'start' and 'end'.")

        return parse_instant(raw["start"], "start"), parse_instant(raw["end"], "end")

    def format(self, slots: Any) -> str:
        """
        Build the sentence for the given slots.

        The first slot names the day: "le 21 février de 11 heures à 12 heures";
        every further slot adds " et de 14 heures à 15 heures".

        Raises:
            ValidationError: If slots is not a non-empty list of {start, end}
            ParseError: If a timestamp cannot be parsed or shifted
        """
        if (
            not isinstance(slots, Sequence)
            or isinstance(slots, (str, bytes))
            or not slots
        ):
            raise ValidationError("'suggested_slots' is required and should contain an array of slots.")

        first, following = PHRASES[self.locale]
        parts: List[str] = []

        for index, raw in enumerate(slots):
            raw_start, raw_end = self._slot_bounds(raw)
            start = self._shift(raw_start, "start")
            end = self._shift(raw_end, "end")

            if index == 0:
                parts.append(first.format(
                    day=f"{start.day:02d}",
                    month=month_name(start.month, self.locale),
                    start=start.hour,
                    end=end.hour,
                ))
            else:
                parts.append(following.format(start=start.hour, end=end.hour))

        return "".join(parts)
