"""
Tests for domain models.
"""

from datetime import time

import pendulum
import pytest

from salonslots.domain.exceptions import ScheduleOverrideError, UnknownServiceError
from salonslots.domain.models import (
    Booking,
    BookingStatus,
    BusinessHours,
    ScheduleOverride,
    TimeRange,
    TimeWindow,
    total_duration,
)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        start = pendulum.naive(2025, 11, 10, 9, 0)
        end = pendulum.naive(2025, 11, 10, 20, 0)

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 660

    def test_invalid_time_range_raises_error(self):
        with pytest.raises(ValueError, match="must not be after end time"):
            TimeRange(
                start=pendulum.naive(2025, 11, 10, 17, 0),
                end=pendulum.naive(2025, 11, 10, 9, 0)
            )

    def test_overlaps(self):
        tr1 = TimeRange(start=pendulum.naive(2025, 11, 10, 9, 0), end=pendulum.naive(2025, 11, 10, 12, 0))
        tr2 = TimeRange(start=pendulum.naive(2025, 11, 10, 11, 0), end=pendulum.naive(2025, 11, 10, 14, 0))
        tr3 = TimeRange(start=pendulum.naive(2025, 11, 10, 14, 0), end=pendulum.naive(2025, 11, 10, 17, 0))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)

    def test_touching_ranges_do_not_overlap(self):
        """Back-to-back intervals share a boundary but not time."""
        tr1 = TimeRange(start=pendulum.naive(2025, 11, 10, 10, 0), end=pendulum.naive(2025, 11, 10, 11, 0))
        tr2 = TimeRange(start=pendulum.naive(2025, 11, 10, 11, 0), end=pendulum.naive(2025, 11, 10, 12, 0))

        assert not tr1.overlaps(tr2)
        assert not tr2.overlaps(tr1)

    def test_empty_range_overlaps_nothing(self):
        moment = pendulum.naive(2025, 11, 10, 10, 30)
        empty = TimeRange(start=moment, end=moment)
        busy = TimeRange(start=pendulum.naive(2025, 11, 10, 10, 0), end=pendulum.naive(2025, 11, 10, 11, 0))

        assert empty.is_empty()
        assert not empty.overlaps(busy)
        assert not busy.overlaps(empty)


class TestTimeWindow:
    """Tests for TimeWindow model."""

    def test_on_anchors_window_to_day(self):
        window = TimeWindow(start=time(12, 0), end=time(13, 0))

        tr = window.on(pendulum.date(2025, 11, 10))

        assert tr.start == pendulum.naive(2025, 11, 10, 12, 0)
        assert tr.end == pendulum.naive(2025, 11, 10, 13, 0)
        assert str(window) == "12:00-13:00"

    def test_inverted_window_collapses_to_empty_range(self):
        window = TimeWindow(start=time(13, 0), end=time(12, 0))

        assert window.on(pendulum.date(2025, 11, 10)).is_empty()


class TestScheduleOverride:
    """Tests for ScheduleOverride authoring helpers."""

    def test_vacation(self):
        vacation = ScheduleOverride.vacation(pendulum.date(2025, 11, 1), pendulum.date(2025, 11, 5))

        assert vacation.is_working is False
        assert vacation.reason == "Отпуск"
        assert not vacation.has_time_window
        assert vacation.covers(pendulum.date(2025, 11, 1))
        assert vacation.covers(pendulum.date(2025, 11, 5))
        assert not vacation.covers(pendulum.date(2025, 11, 6))

    def test_vacation_with_inverted_range_raises_error(self):
        with pytest.raises(ScheduleOverrideError, match="date_from"):
            ScheduleOverride.vacation(pendulum.date(2025, 11, 5), pendulum.date(2025, 11, 1))

    def test_single_day_helpers(self):
        day = pendulum.date(2025, 11, 12)

        day_off = ScheduleOverride.day_off(day)
        extra = ScheduleOverride.extra_working_day(day, reason="Праздничная смена")

        assert day_off.date_from == day_off.date_to == day
        assert day_off.is_working is False
        assert day_off.reason == "Выходной день"
        assert extra.is_working is True
        assert extra.reason == "Праздничная смена"

    def test_time_block(self):
        block = ScheduleOverride.time_block(pendulum.date(2025, 11, 10), time(12, 0), time(13, 0))

        assert block.has_time_window
        assert block.blocked_window == TimeWindow(start=time(12, 0), end=time(13, 0))
        assert block.reason == "Временной интервал заблокирован"

    def test_time_block_requires_end_after_start(self):
        with pytest.raises(ScheduleOverrideError, match="later than time_from"):
            ScheduleOverride.time_block(pendulum.date(2025, 11, 10), time(13, 0), time(13, 0))

    def test_half_window_is_invalid(self):
        override = ScheduleOverride(
            date_from=pendulum.date(2025, 11, 10),
            date_to=pendulum.date(2025, 11, 10),
            is_working=False,
            time_from=time(12, 0),
        )

        assert not override.has_time_window
        with pytest.raises(ScheduleOverrideError, match="together"):
            override.validate()

    def test_blackout_is_permanent(self):
        blackout = ScheduleOverride.blackout(pendulum.date(2026, 1, 1))

        assert blackout.permanent
        assert blackout.is_working is False


class TestBooking:
    """Tests for Booking model."""

    def test_time_range_sums_all_services(self, services):
        booking = Booking(
            date=pendulum.date(2025, 11, 10),
            time=time(10, 0),
            service_ids=frozenset({"manicure", "brows"}),
            status=BookingStatus.CONFIRMED,
        )

        tr = booking.time_range(services)

        assert tr.start == pendulum.naive(2025, 11, 10, 10, 0)
        assert tr.end == pendulum.naive(2025, 11, 10, 11, 30)

    def test_cancelled_booking_does_not_occupy_time(self):
        booking = Booking(date=pendulum.date(2025, 11, 10), time=time(10, 0), status=BookingStatus.CANCELLED)

        assert not booking.occupies_time
        assert BookingStatus.PENDING.occupies_time
        assert BookingStatus.CONFIRMED.occupies_time

    def test_unknown_service_raises_error(self, services):
        with pytest.raises(UnknownServiceError, match="massage"):
            total_duration(["manicure", "massage"], services)

    def test_total_duration_of_nothing_is_zero(self, services):
        assert total_duration([], services) == 0


class TestBusinessHours:
    """Tests for BusinessHours model."""

    def test_weekday_hours(self):
        hours = BusinessHours()

        monday = hours.get_hours_for_day(pendulum.date(2025, 11, 10))

        assert monday.start.hour == 9
        assert monday.end.hour == 20

    def test_sunday_closes_early(self):
        hours = BusinessHours()

        sunday = hours.get_hours_for_day(pendulum.date(2025, 11, 2))

        assert sunday.end.hour == 18

    def test_non_positive_step_raises_error(self):
        with pytest.raises(ValueError, match="slot_minutes"):
            BusinessHours(slot_minutes=0)
