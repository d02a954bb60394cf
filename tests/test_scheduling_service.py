"""
Tests for the SchedulingService JSON boundary.
"""

import logging

import pytest

from freeslots.config import AppConfig
from freeslots.domain.exceptions import ParseError, SlotError, ValidationError
from freeslots.services.scheduler import NO_FREE_SLOTS, SchedulingService, parse_hour


@pytest.fixture
def service() -> SchedulingService:
    return SchedulingService.from_config()


def _payload(value, start_hour=9, end_hour=12):
    return {"value": value, "startHour": start_hour, "endHour": end_hour}


class TestComputeFreeSlots:
    """Tests for SchedulingService.compute_free_slots."""

    def test_worked_example(self, service):
        payload = _payload([{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}])

        assert service.compute_free_slots(payload) == {
            "free_slots": [
                {"start": "2025-02-21T09:00:00.000Z", "end": "2025-02-21T10:00:00.000Z"},
                {"start": "2025-02-21T11:00:00.000Z", "end": "2025-02-21T12:00:00.000Z"},
            ]
        }

    def test_fully_booked_returns_sentinel(self, service):
        payload = _payload([{"start": "2025-02-21T09:00:00Z", "end": "2025-02-21T12:00:00Z"}])

        assert service.compute_free_slots(payload) == {"free_slots": NO_FREE_SLOTS}
        assert NO_FREE_SLOTS == "0"

    def test_zero_length_marker_names_the_day(self, service):
        """A degenerate slot only tells which day to look at."""
        payload = _payload([{"start": "2025-02-21T00:00:00Z", "end": "2025-02-21T00:00:00Z"}])

        assert service.compute_free_slots(payload) == {
            "free_slots": [
                {"start": "2025-02-21T09:00:00.000Z", "end": "2025-02-21T12:00:00.000Z"},
            ]
        }

    def test_day_comes_from_first_slot_as_sent(self, service):
        payload = _payload([
            {"start": "2025-02-22T10:00:00Z", "end": "2025-02-22T10:30:00Z"},
            {"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"},
        ])

        result = service.compute_free_slots(payload)

        assert result["free_slots"][0]["start"] == "2025-02-22T09:00:00.000Z"
        assert result["free_slots"][-1]["end"] == "2025-02-22T12:00:00.000Z"

    def test_hours_as_numeric_strings(self, service):
        payload = _payload(
            [{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}],
            start_hour="9",
            end_hour=" 12 "
        )

        assert len(service.compute_free_slots(payload)["free_slots"]) == 2

    def test_occupied_slots_alias(self, service):
        payload = {
            "occupied_slots": [{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}],
            "startHour": 9,
            "endHour": 12,
        }

        assert len(service.compute_free_slots(payload)["free_slots"]) == 2

    def test_inverted_hours_give_sentinel(self, service):
        payload = _payload(
            [{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}],
            start_hour=18,
            end_hour=7
        )

        assert service.compute_free_slots(payload) == {"free_slots": NO_FREE_SLOTS}

    @pytest.mark.parametrize("value", [None, [], "slots", {"start": "2025-02-21T10:00:00Z"}])
    def test_missing_occupied_slots(self, service, value):
        with pytest.raises(ValidationError, match="'value' is required"):
            service.compute_free_slots(_payload(value))

    def test_missing_hours(self, service):
        payload = {"value": [{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}]}

        with pytest.raises(ValidationError, match="startHour"):
            service.compute_free_slots(payload)

    def test_default_hours_when_enabled(self):
        config = AppConfig(work_day={"allow_default_hours": True})
        service = SchedulingService.from_config(config)
        payload = {"value": [{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}]}

        assert service.compute_free_slots(payload) == {
            "free_slots": [
                {"start": "2025-02-21T07:00:00.000Z", "end": "2025-02-21T10:00:00.000Z"},
                {"start": "2025-02-21T11:00:00.000Z", "end": "2025-02-21T18:00:00.000Z"},
            ]
        }

    def test_bad_timestamp(self, service):
        payload = _payload([{"start": "2025-02-21T10:00:00Z", "end": "later"}])

        with pytest.raises(ParseError):
            service.compute_free_slots(payload)

    def test_window_past_end_of_calendar(self, service):
        payload = _payload(
            [{"start": "9999-12-31T10:00:00Z", "end": "9999-12-31T11:00:00Z"}],
            start_hour=9,
            end_hour=24
        )

        with pytest.raises(ParseError, match="outside the supported date range"):
            service.compute_free_slots(payload)

    def test_body_must_be_object(self, service):
        with pytest.raises(ValidationError, match="JSON object"):
            service.compute_free_slots([1, 2, 3])

    def test_rejection_is_logged(self, service, caplog):
        with caplog.at_level(logging.WARNING, logger="freeslots.services.scheduler"):
            with pytest.raises(ValidationError):
                service.compute_free_slots({})

        assert "compute_free_slots rejected" in caplog.text


class TestParseHour:
    """Tests for parse_hour."""

    @pytest.mark.parametrize("value, expected", [(9, 9), ("9", 9), ("0", 0), (24, 24), (12.0, 12)])
    def test_accepts_integers_and_numeric_strings(self, value, expected):
        assert parse_hour(value, "startHour") == expected

    @pytest.mark.parametrize("value", [None, True, 9.5, [9], 25, -1, "30"])
    def test_validation_errors(self, value):
        with pytest.raises(ValidationError, match="startHour"):
            parse_hour(value, "startHour")

    @pytest.mark.parametrize("value", ["nine", "9h", ""])
    def test_parse_errors(self, value):
        with pytest.raises(ParseError, match="endHour"):
            parse_hour(value, "endHour")


class TestOtherOperations:
    """Tests for suggestion, business day and answer operations."""

    def test_suggest_slots(self, service):
        free_slots = [{"start": str(i), "end": str(i)} for i in range(5)]

        assert service.suggest_slots({"free_slots": free_slots}) == {"suggested_slots": free_slots[:3]}

    def test_suggest_slots_requires_list(self, service):
        with pytest.raises(ValidationError):
            service.suggest_slots({"free_slots": NO_FREE_SLOTS})

    def test_advance_to_next_business_day(self, service):
        result = service.advance_to_next_business_day({"requested_datetime": "2025-02-21T10:00:00"})

        assert result == {"start": "2025-02-24T08:00:00Z", "end": "2025-02-24T16:00:00Z"}

    def test_advance_past_end_of_calendar(self, service):
        with pytest.raises(SlotError):
            service.advance_to_next_business_day({"requested_datetime": "9999-12-31T10:00:00"})

    def test_advance_requires_datetime(self, service):
        with pytest.raises(ValidationError, match="requested_datetime"):
            service.advance_to_next_business_day({})

    def test_format_answer(self, service):
        payload = {"suggested_slots": [{"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"}]}

        assert service.format_answer(payload) == "le 21 février de 11 heures à 12 heures"

    def test_propose_chains_operations(self, service):
        payload = _payload(
            [
                {"start": "2025-02-21T08:00:00Z", "end": "2025-02-21T09:00:00Z"},
                {"start": "2025-02-21T10:00:00Z", "end": "2025-02-21T11:00:00Z"},
                {"start": "2025-02-21T12:00:00Z", "end": "2025-02-21T13:00:00Z"},
                {"start": "2025-02-21T14:00:00Z", "end": "2025-02-21T15:00:00Z"},
            ],
            start_hour=7,
            end_hour=18
        )

        result = service.propose(payload)

        assert len(result["free_slots"]) == 5
        assert result["suggested_slots"] == result["free_slots"][:3]
        assert result["answer"] == (
            "le 21 février de 8 heures à 9 heures"
            " et de 10 heures à 11 heures"
            " et de 12 heures à 13 heures"
        )

    def test_propose_fully_booked(self, service):
        payload = _payload([{"start": "2025-02-21T08:00:00Z", "end": "2025-02-21T13:00:00Z"}])

        assert service.propose(payload) == {
            "free_slots": NO_FREE_SLOTS,
            "suggested_slots": [],
            "answer": None,
        }

    def test_error_body(self):
        assert SchedulingService.error_body(SlotError("boom")) == {"message": "boom"}
