# slot_manager_test.py

import unittest
from datetime import date, datetime, timedelta

from managers.slot_manager import (
    booked_count,
    describe_slots,
    generate_slots,
    minutes_used,
    parse_people_count,
    remaining_minutes,
)
from models.booking import Booking, BookingStatus
from models.facility import Facility


def make_facility(operating_hours="09:00-12:00", slot_mins=60, capacity=10):
    return Facility(
        id="f1",
        name="Pool",
        operating_hours=operating_hours,
        slot_mins=slot_mins,
        capacity=capacity,
    )


def make_booking(
    booking_id, start, minutes=60, people=1, status=BookingStatus.CONFIRMED, user="u1"
):
    return Booking(
        id=booking_id,
        user_id=user,
        facility_id="f1",
        starts_at=start,
        ends_at=start + timedelta(minutes=minutes),
        status=status,
        people_count=people,
    )


class TestSlotGeneration(unittest.TestCase):
    def test_three_hour_window_gives_three_hourly_slots(self):
        slots = generate_slots(make_facility(), "2025-01-01")

        self.assertEqual(len(slots), 3)
        self.assertEqual(
            [(s.start.hour, s.end.hour) for s in slots], [(9, 10), (10, 11), (11, 12)]
        )
        self.assertEqual(slots[0].start, datetime(2025, 1, 1, 9, 0))

    def test_slots_tile_window_without_gaps(self):
        facility = make_facility("08:15-17:40", slot_mins=45)
        slots = generate_slots(facility, date(2025, 3, 4))

        window = datetime(2025, 3, 4, 17, 40) - datetime(2025, 3, 4, 8, 15)
        self.assertEqual(len(slots), int(window.total_seconds() // 60) // 45)
        self.assertEqual(slots[0].start, datetime(2025, 3, 4, 8, 15))
        for previous, current in zip(slots, slots[1:]):
            self.assertEqual(previous.end, current.start)
        for slot in slots:
            self.assertEqual(slot.duration_minutes, 45)
            self.assertLessEqual(slot.end, datetime(2025, 3, 4, 17, 40))

    def test_partial_trailing_slot_is_dropped(self):
        slots = generate_slots(make_facility("09:00-11:30"), "2025-01-01")
        self.assertEqual(len(slots), 2)
        self.assertEqual(slots[-1].end, datetime(2025, 1, 1, 11, 0))

    def test_single_digit_hours_are_accepted(self):
        slots = generate_slots(make_facility("9:00-10:00"), "2025-01-01")
        self.assertEqual(len(slots), 1)

    def test_whitespace_around_parts_is_ignored(self):
        slots = generate_slots(make_facility(" 09:00 - 11:00 "), "2025-01-01")
        self.assertEqual(len(slots), 2)

    def test_generation_is_idempotent(self):
        facility = make_facility("06:00-22:00", slot_mins=30)
        self.assertEqual(
            generate_slots(facility, "2025-06-01"), generate_slots(facility, "2025-06-01")
        )

    def test_slots_follow_wall_clock_on_dst_change_day(self):
        # 2025-03-09 is a spring-forward day in US zones; tiling stays on the local clock
        slots = generate_slots(make_facility("01:00-04:00"), "2025-03-09")

        self.assertEqual([s.start.hour for s in slots], [1, 2, 3])
        for slot in slots:
            self.assertIsNone(slot.start.tzinfo)
            self.assertEqual(slot.duration_minutes, 60)

    def test_malformed_hours_yield_no_slots(self):
        for hours in [None, "", "9:00", "25:00-26:00", "10:00-09:00", "10:00-10:00",
                      "09:00-10:00-11:00", "09:60-10:00", "ab:cd-ef:gh"]:
            with self.subTest(hours=hours):
                self.assertEqual(generate_slots(make_facility(hours), "2025-01-01"), [])

    def test_non_string_hours_yield_no_slots(self):
        facility = make_facility()
        facility.operating_hours = 900
        self.assertEqual(generate_slots(facility, "2025-01-01"), [])

    def test_missing_facility_or_bad_date_yield_no_slots(self):
        self.assertEqual(generate_slots(None, "2025-01-01"), [])
        self.assertEqual(generate_slots(make_facility(), "01/01/2025"), [])
        self.assertEqual(generate_slots(make_facility(), None), [])


class TestSlotHelpers(unittest.TestCase):
    def setUp(self):
        self.nine = datetime(2025, 1, 1, 9, 0)
        self.ten = datetime(2025, 1, 1, 10, 0)

    def test_booked_count_only_counts_confirmed_at_same_start(self):
        bookings = [
            make_booking("b1", self.nine, people=3),
            make_booking("b2", self.nine, people=2),
            make_booking("b3", self.nine, people=4, status=BookingStatus.CANCELLED),
            make_booking("b4", self.nine, people=4, status=BookingStatus.PENDING),
            make_booking("b5", self.ten, people=5),
        ]
        self.assertEqual(booked_count(bookings, self.nine), 5)
        self.assertEqual(booked_count(bookings, self.ten), 5)
        self.assertEqual(booked_count([], self.ten), 0)

    def test_describe_slots_marks_full_and_past(self):
        facility = make_facility(capacity=2)
        bookings = [make_booking("b1", self.ten, people=2)]
        now = datetime(2025, 1, 1, 9, 30)

        availability = describe_slots(facility, "2025-01-01", bookings, now=now)

        self.assertEqual(len(availability), 3)
        nine, ten, eleven = availability
        self.assertTrue(nine.is_past)
        self.assertFalse(nine.is_selectable)
        self.assertTrue(ten.is_full)
        self.assertEqual(ten.remaining, 0)
        self.assertFalse(ten.is_selectable)
        self.assertTrue(eleven.is_selectable)
        self.assertEqual(str(ten), "10:00 - 11:00 (2/2 booked)")

    def test_minutes_used_ignores_cancelled(self):
        bookings = [
            make_booking("b1", self.nine, minutes=60),
            make_booking("b2", self.ten, minutes=30),
            make_booking("b3", self.ten, minutes=60, status=BookingStatus.CANCELLED),
        ]
        self.assertEqual(minutes_used(bookings), 90)
        self.assertEqual(minutes_used([]), 0)

    def test_remaining_minutes_never_negative(self):
        self.assertEqual(remaining_minutes(150), 30)
        self.assertEqual(remaining_minutes(240), 0)

    def test_parse_people_count_clamps(self):
        self.assertEqual(parse_people_count("3", 10), 3)
        self.assertEqual(parse_people_count("0", 10), 1)
        self.assertEqual(parse_people_count("-5", 10), 1)
        self.assertEqual(parse_people_count("25", 10), 10)
        self.assertEqual(parse_people_count("abc", 10), 1)
        self.assertEqual(parse_people_count(None, 10), 1)
        self.assertEqual(parse_people_count(4, 10), 4)


if __name__ == "__main__":
    unittest.main()
