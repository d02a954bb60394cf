"""
Tests for the answer formatter.
"""

import pendulum
import pytest

from freeslots.domain.answer import AnswerFormatter, month_name
from freeslots.domain.exceptions import ParseError, ValidationError
from freeslots.domain.models import TimeInterval


class TestAnswerFormatter:
    """Tests for AnswerFormatter."""

    def test_single_slot(self):
        slots = [{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}]

        assert AnswerFormatter().format(slots) == "le 21 février de 11 heures à 12 heures"

    def test_following_slots_are_chained(self):
        slots = [
            {"start": "2025-02-21T08:00:00.000Z", "end": "2025-02-21T09:00:00.000Z"},
            {"start": "2025-02-21T11:00:00.000Z", "end": "2025-02-21T13:00:00.000Z"},
            {"start": "2025-02-21T15:00:00.000Z", "end": "2025-02-21T17:00:00.000Z"},
        ]

        assert AnswerFormatter().format(slots) == (
            "le 21 février de 9 heures à 10 heures"
            " et de 12 heures à 14 heures"
            " et de 16 heures à 18 heures"
        )

    def test_offset_can_roll_over_to_next_day(self):
        slots = [{"start": "2025-08-31T23:00:00Z", "end": "2025-09-01T01:00:00Z"}]

        assert AnswerFormatter().format(slots) == "le 01 septembre de 0 heures à 2 heures"

    def test_accepts_time_intervals(self):
        slot = TimeInterval(
            start=pendulum.datetime(2025, 12, 5, 13, tz="UTC"),
            end=pendulum.datetime(2025, 12, 5, 14, tz="UTC")
        )

        assert AnswerFormatter().format([slot]) == "le 05 décembre de 14 heures à 15 heures"

    def test_custom_offset_and_locale(self):
        formatter = AnswerFormatter(utc_offset_hours=2, locale="de")
        slots = [
            {"start": "2025-03-10T07:00:00Z", "end": "2025-03-10T08:00:00Z"},
            {"start": "2025-03-10T12:00:00Z", "end": "2025-03-10T13:00:00Z"},
        ]

        assert formatter.format(slots) == "am 10. März von 9 Uhr bis 10 Uhr und von 14 Uhr bis 15 Uhr"

    def test_english_phrasing(self):
        formatter = AnswerFormatter(utc_offset_hours=0, locale="en")
        slots = [
            {"start": "2025-03-10T09:00:00Z", "end": "2025-03-10T10:00:00Z"},
            {"start": "2025-03-10T15:00:00Z", "end": "2025-03-10T16:00:00Z"},
        ]

        assert formatter.format(slots) == "on 10 March from 9 to 10 o'clock and from 15 to 16 o'clock"

    def test_shift_past_end_of_calendar_is_rejected(self):
        slots = [{"start": "9999-12-31T22:00:00Z", "end": "9999-12-31T23:30:00Z"}]

        with pytest.raises(ParseError, match="end"):
            AnswerFormatter().format(slots)

    @pytest.mark.parametrize("bad_input", [None, [], "slots", {"start": "2025-02-21T10:00:00Z"}])
    def test_rejects_missing_or_non_list_input(self, bad_input):
        with pytest.raises(ValidationError, match="suggested_slots"):
            AnswerFormatter().format(bad_input)

    def test_rejects_slot_without_end(self):
        with pytest.raises(ValidationError):
            AnswerFormatter().format([{"start": "2025-02-21T10:00:00Z"}])

    def test_rejects_bad_timestamp(self):
        with pytest.raises(ParseError):
            AnswerFormatter().format([{"start": "soon", "end": "2025-02-21T11:00:00Z"}])

    def test_unknown_locale(self):
        with pytest.raises(ValueError, match="Unsupported locale"):
            AnswerFormatter(locale="xx")


def test_month_name_table():
    assert month_name(1) == "janvier"
    assert month_name(8) == "août"
    assert month_name(12, "en") == "December"
