import os
import sys
import unittest
from datetime import datetime, timedelta, timezone

# Allow `import core.*` like the app does when running `python app/main.py`.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
APP_DIR = os.path.join(REPO_ROOT, "app")
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from core.price_series import (
    cheapest_hours,
    find_current,
    format_hour,
    parse_sample,
    parse_samples,
    parse_timestamp,
    sort_by_price,
    sort_by_start,
)


def _raw(price, start, end):
    return {"price": price, "startDate": start, "endDate": end}


class ParseTests(unittest.TestCase):
    def test_parse_timestamp_accepts_zulu_suffix(self):
        ts = parse_timestamp("2024-01-01T22:00:00.000Z")
        self.assertIsNotNone(ts)
        self.assertEqual(ts, datetime(2024, 1, 1, 22, 0, tzinfo=timezone.utc))

    def test_parse_timestamp_naive_is_local_and_aware(self):
        ts = parse_timestamp("2024-01-01T01:00")
        self.assertIsNotNone(ts.tzinfo)
        self.assertEqual(ts.astimezone().hour, 1)

    def test_parse_timestamp_bad_values_return_none(self):
        for value in (None, "", "yesterday", 1700000000, "2024-13-40T00:00"):
            self.assertIsNone(parse_timestamp(value), value)

    def test_missing_price_becomes_zero(self):
        sample = parse_sample({"startDate": "2024-01-01T00:00", "endDate": "2024-01-01T01:00"})
        self.assertEqual(sample.price, 0.0)
        self.assertFalse(sample.has_price)
        self.assertIsNotNone(sample.start)

    def test_string_price_is_parsed(self):
        sample = parse_sample(_raw("4.25", "2024-01-01T00:00", "2024-01-01T01:00"))
        self.assertEqual(sample.price, 4.25)
        self.assertTrue(sample.has_price)

    def test_non_mapping_entry_is_tolerated(self):
        samples = parse_samples([None, 3, _raw(1.0, "2024-01-01T00:00", "2024-01-01T01:00")])
        self.assertEqual(len(samples), 3)
        self.assertIsNone(samples[0].start)
        self.assertFalse(samples[1].has_price)
        self.assertEqual(samples[2].price, 1.0)

    def test_bad_date_never_matches_current(self):
        sample = parse_sample(_raw(9.0, "not-a-date", "2024-01-01T01:00"))
        self.assertIsNone(sample.start)
        self.assertFalse(sample.contains(datetime(2024, 1, 1, 0, 30).astimezone()))


class SortTests(unittest.TestCase):
    def setUp(self):
        self.raw = [
            _raw(7.0, "2024-01-01T02:00", "2024-01-01T03:00"),
            _raw(3.0, "broken", "broken"),
            _raw(1.0, "2024-01-01T00:00", "2024-01-01T01:00"),
            _raw(5.0, "2024-01-01T01:00", "2024-01-01T02:00"),
        ]
        self.samples = parse_samples(self.raw)

    def test_sort_by_start_puts_undated_last(self):
        ordered = sort_by_start(self.samples)
        self.assertEqual([s.price for s in ordered], [1.0, 5.0, 7.0, 3.0])

    def test_sorts_return_copies(self):
        original = list(self.samples)
        by_time = sort_by_start(self.samples)
        by_price = sort_by_price(by_time)
        back = sort_by_start(by_price)
        self.assertEqual(self.samples, original)
        self.assertIsNot(by_time, self.samples)
        self.assertEqual([s.price for s in by_price], [1.0, 3.0, 5.0, 7.0])
        self.assertEqual(back, by_time)

    def test_cheapest_hours(self):
        self.assertEqual([s.price for s in cheapest_hours(self.samples, 2)], [1.0, 3.0])
        self.assertEqual(len(cheapest_hours(self.samples, 10)), 4)
        self.assertEqual(cheapest_hours(self.samples, 0), [])


class CurrentTests(unittest.TestCase):
    def test_exactly_one_current_for_contiguous_hours(self):
        base = datetime(2024, 3, 10, 0, 0, tzinfo=timezone.utc)
        raw = []
        for h in range(24):
            start = base + timedelta(hours=h)
            end = start + timedelta(hours=1)
            raw.append(_raw(float(h), start.isoformat(), end.isoformat()))
        samples = parse_samples(raw)
        now = base + timedelta(hours=13, minutes=59)
        matches = [s for s in samples if s.contains(now)]
        self.assertEqual(len(matches), 1)
        self.assertEqual(find_current(samples, now), 13)
        # Interval end is exclusive.
        self.assertEqual(find_current(samples, base + timedelta(hours=14)), 14)
        self.assertIsNone(find_current(samples, base - timedelta(minutes=1)))
        self.assertIsNone(find_current(samples, base + timedelta(hours=24)))

    def test_overlap_resolves_to_first_match(self):
        samples = parse_samples([
            _raw(2.0, "2024-01-01T00:00", "2024-01-01T02:00"),
            _raw(4.0, "2024-01-01T01:00", "2024-01-01T02:00"),
        ])
        self.assertEqual(find_current(samples, datetime(2024, 1, 1, 1, 30)), 0)

    def test_format_hour(self):
        sample = parse_sample(_raw(1.0, "2024-01-01T07:00", "2024-01-01T08:00"))
        self.assertEqual(format_hour(sample), "07:00")
        self.assertEqual(format_hour(parse_sample(_raw(1.0, "x", "y"))), "")


if __name__ == "__main__":
    unittest.main()
