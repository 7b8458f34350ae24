"""
Tests for the schedule deriver and slot label helpers.
"""

from datetime import date, datetime, time

import pytest

from localli.core.errors import ConfigurationError, ValidationError
from localli.core.slots import (
    derive_slots,
    format_slot_label,
    parse_day,
    parse_slot_label,
    slot_start,
)

DAY = date(2024, 5, 1)


class TestDeriveSlots:
    """Tests for derive_slots."""

    def test_hourly_slots(self):
        slots = derive_slots(time(11, 0), time(14, 0), 60, DAY)

        assert [s.label for s in slots] == ["11:00-12:00", "12:00-13:00", "13:00-14:00"]

    def test_partial_trailing_slot_is_dropped(self):
        slots = derive_slots(time(9, 0), time(10, 45), 30, DAY)

        assert [s.label for s in slots] == ["09:00-09:30", "09:30-10:00", "10:00-10:30"]
        assert slots[-1].end <= datetime.combine(DAY, time(10, 45))

    def test_window_shorter_than_slot_is_empty(self):
        assert derive_slots(time(9, 0), time(9, 30), 60, DAY) == []

    def test_open_after_close_is_empty(self):
        assert derive_slots(time(18, 0), time(9, 0), 60, DAY) == []
        assert derive_slots(time(9, 0), time(9, 0), 60, DAY) == []

    @pytest.mark.parametrize("minutes", [0, -15])
    def test_non_positive_duration_is_configuration_error(self, minutes):
        with pytest.raises(ConfigurationError):
            derive_slots(time(9, 0), time(17, 0), minutes, DAY)

    def test_non_integer_duration_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            derive_slots(time(9, 0), time(17, 0), 30.5, DAY)

    @pytest.mark.parametrize(
        "open_at,close_at,minutes",
        [
            (time(8, 0), time(17, 0), 15),
            (time(9, 10), time(12, 5), 25),
            (time(0, 0), time(23, 59), 45),
            (time(13, 0), time(14, 0), 60),
        ],
    )
    def test_slots_are_ordered_and_within_hours(self, open_at, close_at, minutes):
        slots = derive_slots(open_at, close_at, minutes, DAY)

        assert slots
        assert slots[0].start == datetime.combine(DAY, open_at)
        assert slots[-1].end <= datetime.combine(DAY, close_at)
        for window in slots:
            assert (window.end - window.start).total_seconds() == minutes * 60
        for earlier, later in zip(slots, slots[1:]):
            assert earlier.start < later.start
            assert earlier.end <= later.start

    def test_is_deterministic(self):
        first = derive_slots(time(10, 0), time(16, 0), 40, DAY)
        second = derive_slots(time(10, 0), time(16, 0), 40, DAY)

        assert first == second
        assert [s.label for s in first] == [s.label for s in second]

    def test_date_only_anchors_the_windows(self):
        may = derive_slots(time(11, 0), time(14, 0), 60, date(2024, 5, 1))
        march = derive_slots(time(11, 0), time(14, 0), 60, date(2024, 3, 31))

        assert [s.label for s in may] == [s.label for s in march]
        assert march[0].start.date() == date(2024, 3, 31)


class TestSlotLabels:
    """Tests for label formatting and parsing."""

    def test_format_is_zero_padded(self):
        assert format_slot_label(time(9, 5), time(10, 0)) == "09:05-10:00"

    def test_parse_round_trip(self):
        assert parse_slot_label("09:30-10:15") == (time(9, 30), time(10, 15))

    @pytest.mark.parametrize(
        "label", ["9:00-10:00", "09:00 - 10:00", "09:00-24:00", "", None, "10:00-09:00", "10:00-10:00"]
    )
    def test_parse_rejects_non_canonical(self, label):
        with pytest.raises(ValidationError):
            parse_slot_label(label)

    def test_slot_start(self):
        assert slot_start("2024-05-01", "12:00-13:00") == datetime(2024, 5, 1, 12, 0)


class TestParseDay:
    """Tests for calendar-day parsing."""

    def test_accepts_iso_string_and_date(self):
        assert parse_day("2024-05-01") == DAY
        assert parse_day(DAY) == DAY

    @pytest.mark.parametrize("value", ["2024-5-1", "20240501", "2024-02-30", "", None, 20240501])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            parse_day(value)

    def test_rejects_timestamps(self):
        with pytest.raises(ValidationError):
            parse_day(datetime(2024, 5, 1, 12, 0))
