"""Tests for trip conflict detection and the calendar grids."""

import unittest
from datetime import date

from backoffice.domain.travel.calendar import (
    MONTH,
    WEEK,
    CalendarTrip,
    detect_conflicts,
    format_month_year,
    format_week_range,
    is_trip_end_date,
    is_trip_start_date,
    month_days,
    navigate_next,
    navigate_previous,
    to_date,
    trip_duration,
    trips_for_date,
    week_days,
)


def trip(trip_id, start=None, end=None):
    return CalendarTrip(id=trip_id, start_date=start, end_date=end)


class DetectConflictsTests(unittest.TestCase):
    def test_overlapping_trips_conflict_both_ways(self):
        a = trip(1, date(2025, 1, 1), date(2025, 1, 5))
        b = trip(2, date(2025, 1, 4), date(2025, 1, 10))

        self.assertEqual(detect_conflicts([a, b]), {1: [2], 2: [1]})

    def test_adjacent_ranges_do_not_conflict(self):
        a = trip(1, date(2025, 1, 1), date(2025, 1, 5))
        c = trip(3, date(2025, 1, 6), date(2025, 1, 8))

        self.assertEqual(detect_conflicts([a, c]), {})

    def test_shared_boundary_day_is_a_conflict(self):
        a = trip(1, date(2025, 1, 1), date(2025, 1, 5))
        b = trip(2, date(2025, 1, 5), date(2025, 1, 6))

        self.assertEqual(detect_conflicts([a, b]), {1: [2], 2: [1]})

    def test_trips_missing_a_date_never_appear(self):
        a = trip(1, date(2025, 1, 1), date(2025, 1, 31))
        start_only = trip(2, date(2025, 1, 10), None)
        end_only = trip(3, None, date(2025, 1, 10))
        undated = trip(4)

        conflicts = detect_conflicts([a, start_only, end_only, undated])

        self.assertEqual(conflicts, {})
        for missing in (2, 3, 4):
            self.assertNotIn(missing, conflicts)
            self.assertFalse(any(missing in ids for ids in conflicts.values()))

    def test_values_follow_input_order(self):
        long_trip = trip(10, date(2025, 1, 1), date(2025, 1, 10))
        first = trip(20, date(2025, 1, 2), date(2025, 1, 3))
        second = trip(30, date(2025, 1, 4), date(2025, 1, 5))

        conflicts = detect_conflicts([long_trip, first, second])

        self.assertEqual(list(conflicts), [10, 20, 30])
        self.assertEqual(conflicts[10], [20, 30])
        self.assertEqual(conflicts[20], [10])
        self.assertEqual(conflicts[30], [10])

    def test_map_is_symmetric_and_never_self_referencing(self):
        trips = [
            trip(1, date(2025, 2, 1), date(2025, 2, 14)),
            trip(2, date(2025, 2, 10), date(2025, 2, 12)),
            trip(3, date(2025, 2, 13), date(2025, 3, 1)),
            trip(4, date(2025, 3, 2), date(2025, 3, 3)),
            trip(5, date(2025, 1, 1), date(2025, 12, 31)),
        ]

        conflicts = detect_conflicts(trips)

        for trip_id, others in conflicts.items():
            self.assertNotIn(trip_id, others)
            for other in others:
                self.assertIn(trip_id, conflicts[other])
        self.assertEqual(sorted(conflicts[5]), [1, 2, 3, 4])
        self.assertNotIn(2, conflicts[3])

    def test_input_is_not_mutated(self):
        trips = [trip(1, date(2025, 1, 1), date(2025, 1, 5)), trip(2, date(2025, 1, 2), date(2025, 1, 3))]
        snapshot = list(trips)

        detect_conflicts(trips)

        self.assertEqual(trips, snapshot)

    def test_accepts_iso_strings(self):
        a = trip(1, "2025-01-01T00:00:00.000Z", "2025-01-05T00:00:00.000Z")
        b = trip(2, "2025-01-05", "2025-01-07")

        self.assertEqual(detect_conflicts([a, b]), {1: [2], 2: [1]})


class CalendarGridTests(unittest.TestCase):
    def test_month_grid_is_padded_to_whole_weeks(self):
        # February 2025 starts on a Saturday and ends on a Friday
        days = month_days(date(2025, 2, 10), today=date(2025, 2, 14))

        self.assertEqual(len(days), 35)
        self.assertEqual(days[0].date, date(2025, 1, 26))
        self.assertEqual(days[-1].date, date(2025, 3, 1))
        self.assertFalse(days[0].is_current_month)
        self.assertTrue(days[6].is_current_month)
        self.assertEqual([d.date for d in days if d.is_today], [date(2025, 2, 14)])
        self.assertTrue(days[0].is_weekend)
        self.assertFalse(days[1].is_weekend)

    def test_week_grid_runs_sunday_to_saturday(self):
        days = week_days(date(2025, 1, 1), today=date(2025, 1, 1))

        self.assertEqual([d.date for d in days][0], date(2024, 12, 29))
        self.assertEqual([d.date for d in days][-1], date(2025, 1, 4))
        self.assertFalse(days[0].is_current_month)
        self.assertTrue(days[3].is_current_month)
        self.assertTrue(days[3].is_today)
        self.assertEqual([d.day_number for d in days], [29, 30, 31, 1, 2, 3, 4])

    def test_titles(self):
        self.assertEqual(format_month_year(date(2025, 2, 10)), "February 2025")
        self.assertEqual(format_week_range(date(2025, 1, 1)), "Dec 29 - Jan 4, 2025")

    def test_navigation_clamps_to_short_months(self):
        self.assertEqual(navigate_next(date(2025, 1, 31), MONTH), date(2025, 2, 28))
        self.assertEqual(navigate_previous(date(2025, 3, 31), MONTH), date(2025, 2, 28))
        self.assertEqual(navigate_previous(date(2025, 1, 15), MONTH), date(2024, 12, 15))
        self.assertEqual(navigate_next(date(2025, 12, 28), WEEK), date(2026, 1, 4))


class TripPlacementTests(unittest.TestCase):
    def test_range_is_inclusive(self):
        t = trip(1, date(2025, 1, 4), date(2025, 1, 6))

        self.assertEqual(trips_for_date([t], date(2025, 1, 3)), [])
        self.assertEqual(trips_for_date([t], date(2025, 1, 4)), [t])
        self.assertEqual(trips_for_date([t], date(2025, 1, 6)), [t])
        self.assertEqual(trips_for_date([t], date(2025, 1, 7)), [])

    def test_start_only_trip_is_a_single_day(self):
        t = trip(1, date(2025, 1, 4), None)

        self.assertEqual(trips_for_date([t], date(2025, 1, 4)), [t])
        self.assertEqual(trips_for_date([t], date(2025, 1, 5)), [])

    def test_undated_trip_is_never_placed(self):
        grid = month_days(date(2025, 1, 1))
        self.assertFalse(any(trips_for_date([trip(1), trip(2, None, date(2025, 1, 5))], d.date) for d in grid))

    def test_duration_and_boundaries(self):
        t = trip(1, date(2025, 1, 1), date(2025, 1, 5))

        self.assertEqual(trip_duration(t), 5)
        self.assertEqual(trip_duration(trip(2, date(2025, 1, 1))), 0)
        self.assertTrue(is_trip_start_date(t, date(2025, 1, 1)))
        self.assertTrue(is_trip_end_date(t, date(2025, 1, 5)))
        self.assertFalse(is_trip_end_date(trip(3, date(2025, 1, 1)), date(2025, 1, 1)))

    def test_to_date(self):
        self.assertIsNone(to_date(None))
        self.assertEqual(to_date("2025-01-04T10:00:00Z"), date(2025, 1, 4))


if __name__ == "__main__":
    unittest.main()
