import pathlib
import sys
import unittest
from datetime import date, datetime, timedelta

import pytz

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dashboard.temporal import (
    init_trailing_months,
    init_trailing_weeks,
    is_same_month,
    is_same_week,
    month_key,
    week_label,
    week_start_key,
)


class MonthBucketTests(unittest.TestCase):
    def test_trailing_months_end_at_current_month(self):
        buckets = init_trailing_months(12, now=datetime(2024, 3, 15, 8, 0))
        keys = list(buckets)
        self.assertEqual(len(keys), 12)
        self.assertEqual(keys[0], '2023-04')
        self.assertEqual(keys[-1], '2024-03')
        self.assertTrue(all(value == 0 for value in buckets.values()))

    def test_trailing_months_cross_year_boundary(self):
        buckets = init_trailing_months(3, now=date(2024, 1, 5))
        self.assertEqual(list(buckets), ['2023-11', '2023-12', '2024-01'])

    def test_trailing_months_are_strictly_ascending_for_any_count(self):
        now = date(2025, 7, 31)
        for count in (1, 6, 12, 16, 30):
            keys = list(init_trailing_months(count, now=now))
            self.assertEqual(len(keys), count)
            self.assertEqual(keys, sorted(set(keys)))
            self.assertEqual(keys[-1], month_key(now))

    def test_bucket_count_must_be_positive_integer(self):
        for invalid in (0, -3, 1.5, True, '12'):
            with self.assertRaises(ValueError):
                init_trailing_months(invalid, now=date(2024, 1, 1))
            with self.assertRaises(ValueError):
                init_trailing_weeks(invalid, now=date(2024, 1, 1))

    def test_each_call_returns_a_fresh_map(self):
        first = init_trailing_months(6, now=date(2024, 6, 1))
        first['2024-06'] = 99.0
        second = init_trailing_months(6, now=date(2024, 6, 1))
        self.assertEqual(second['2024-06'], 0)


class WeekBucketTests(unittest.TestCase):
    def test_week_start_is_monday(self):
        self.assertEqual(week_start_key(date(2024, 3, 10)), '2024-03-04')
        self.assertEqual(week_start_key(date(2024, 3, 4)), '2024-03-04')
        self.assertEqual(week_start_key(date(2024, 3, 1)), '2024-02-26')

    def test_every_day_of_a_week_maps_to_the_same_monday(self):
        monday = date(2023, 12, 25)
        for offset in range(7):
            key = week_start_key(monday + timedelta(days=offset))
            self.assertEqual(key, '2023-12-25')
            self.assertEqual(datetime.strptime(key, '%Y-%m-%d').weekday(), 0)
        self.assertEqual(week_start_key(monday + timedelta(days=7)), '2024-01-01')

    def test_late_evening_local_time_does_not_roll_forward(self):
        new_york = pytz.timezone('America/New_York')
        value = new_york.localize(datetime(2024, 3, 10, 23, 30))
        self.assertEqual(week_start_key(value), '2024-03-04')

    def test_trailing_weeks_end_at_current_week(self):
        buckets = init_trailing_weeks(16, now=date(2024, 3, 13))
        keys = list(buckets)
        self.assertEqual(len(keys), 16)
        self.assertEqual(keys[-1], '2024-03-11')
        self.assertEqual(keys[0], '2023-11-27')
        parsed = [datetime.strptime(key, '%Y-%m-%d') for key in keys]
        for earlier, later in zip(parsed, parsed[1:]):
            self.assertEqual((later - earlier).days, 7)
        self.assertTrue(all(value == 0 for value in buckets.values()))

    def test_week_label(self):
        self.assertEqual(week_label('2024-03-04'), 'Mar 04')


class SamePeriodTests(unittest.TestCase):
    def test_same_week_and_month(self):
        now = date(2024, 3, 13)
        self.assertTrue(is_same_week(date(2024, 3, 11), now))
        self.assertTrue(is_same_week(date(2024, 3, 17), now))
        self.assertFalse(is_same_week(date(2024, 3, 10), now))
        self.assertTrue(is_same_month(date(2024, 3, 1), now))
        self.assertFalse(is_same_month(date(2023, 3, 13), now))


if __name__ == '__main__':
    unittest.main()
