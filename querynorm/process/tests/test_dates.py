"""Tests for :mod:`querynorm.process.dates`."""

from datetime import date, datetime, timedelta
from unittest import TestCase

import pytz

from querynorm.process import dates

NOW = datetime(2024, 3, 15, 10, 30, tzinfo=pytz.utc)


class TestResolveDatePreset(TestCase):
    """Tests for :func:`.dates.resolve_date_preset`."""

    def test_today(self):
        """Start and end are both the current date."""
        start, end = dates.resolve_date_preset("today", now=NOW)
        self.assertEqual(start, date(2024, 3, 15))
        self.assertEqual(start, end, "Start and end are the same day")

    def test_today_from_clock(self):
        """The system clock is used when ``now`` is not given."""
        start, end = dates.resolve_date_preset("today", tz=pytz.utc)
        self.assertEqual(start, end)
        self.assertEqual(start, datetime.now(tz=pytz.utc).date())

    def test_yesterday(self):
        """Start and end are both the previous day."""
        self.assertEqual(dates.resolve_date_preset("yesterday", now=NOW),
                         (date(2024, 3, 14), date(2024, 3, 14)))

    def test_this_month(self):
        """From the first of the month through today."""
        self.assertEqual(dates.resolve_date_preset("this-month", now=NOW),
                         (date(2024, 3, 1), date(2024, 3, 15)))

    def test_last_month(self):
        """The whole of the previous month."""
        self.assertEqual(dates.resolve_date_preset("last-month", now=NOW),
                         (date(2024, 2, 1), date(2024, 2, 29)))

    def test_last_2_months(self):
        """Two whole months, ending with the previous month."""
        self.assertEqual(dates.resolve_date_preset("last-2-months", now=NOW),
                         (date(2024, 1, 1), date(2024, 2, 29)))

    def test_last_3_months(self):
        """Three whole months, crossing a year boundary."""
        self.assertEqual(dates.resolve_date_preset("last-3-months", now=NOW),
                         (date(2023, 12, 1), date(2024, 2, 29)))

    def test_last_month_from_end_of_month(self):
        """Month arithmetic does not overflow from the 31st."""
        now = datetime(2024, 3, 31, tzinfo=pytz.utc)
        self.assertEqual(dates.resolve_date_preset("last-month", now=now),
                         (date(2024, 2, 1), date(2024, 2, 29)))

    def test_default(self):
        """Unknown and missing names resolve to the last seven days."""
        expected = (date(2024, 3, 8), date(2024, 3, 14))
        for name in ("last-7-days", "fortnight", None):
            self.assertEqual(dates.resolve_date_preset(name, now=NOW),
                             expected, f"{name!r} is the last seven days")

    def test_timezone_of_now(self):
        """The calendar date is taken in the timezone of ``now``."""
        tz = pytz.timezone("Asia/Tokyo")
        now = datetime(2024, 3, 15, 23, 30, tzinfo=pytz.utc).astimezone(tz)
        start, _ = dates.resolve_date_preset("today", now=now)
        self.assertEqual(start, date(2024, 3, 16))


class TestDayBounds(TestCase):
    """Tests for :func:`.dates.start_of_day` and :func:`.dates.end_of_day`."""

    def test_start_of_day(self):
        """Time components are reset to midnight."""
        self.assertEqual(dates.start_of_day("2024-01-05 13:14:15"),
                         datetime(2024, 1, 5))

    def test_end_of_day(self):
        """Time components are moved to the end of the day."""
        self.assertEqual(dates.format_bound(dates.end_of_day("2024-01-05")),
                         "2024-01-05 23:59:59")

    def test_date_object(self):
        """A :class:`date` is accepted as is."""
        self.assertEqual(dates.start_of_day(date(2024, 1, 5)),
                         datetime(2024, 1, 5))

    def test_zone_is_dropped(self):
        """An explicit offset does not change the wall-clock date."""
        self.assertEqual(dates.start_of_day("2024-01-05T22:00:00+05:00"),
                         datetime(2024, 1, 5))

    def test_unparseable(self):
        """Garbage raises :class:`ValueError`."""
        for value in ("bad-date", "", "nope"):
            with self.assertRaises(ValueError):
                dates.start_of_day(value)

    def test_fallbacks(self):
        """Fallback start is a week ago; fallback end is yesterday."""
        self.assertEqual(dates.fallback_start(NOW), date(2024, 3, 8))
        self.assertEqual(dates.fallback_end(NOW), date(2024, 3, 14))


class TestBuildDailyBuckets(TestCase):
    """Tests for :func:`.dates.build_daily_buckets`."""

    def test_three_days(self):
        """An interval of three days yields three contiguous buckets."""
        buckets = list(dates.build_daily_buckets("2024-01-01", "2024-01-03"))
        self.assertEqual(len(buckets), 3)
        for bucket in buckets:
            self.assertEqual(bucket["to"] - bucket["from"],
                             timedelta(hours=24), "Each bucket is one day")
        for current, following in zip(buckets, buckets[1:]):
            self.assertEqual(current["to"], following["from"],
                             "Buckets are contiguous")
        self.assertEqual(buckets[0]["from"], datetime(2024, 1, 1))
        self.assertEqual(buckets[-1]["to"], datetime(2024, 1, 4))

    def test_single_day(self):
        """The same start and end yield one bucket."""
        buckets = list(dates.build_daily_buckets("2024-01-01", "2024-01-01"))
        self.assertEqual(len(buckets), 1)

    def test_month_boundary(self):
        """Buckets cross month boundaries."""
        buckets = list(dates.build_daily_buckets(date(2024, 2, 28),
                                                 date(2024, 3, 1)))
        self.assertEqual([b["from"].day for b in buckets], [28, 29, 1])

    def test_unparseable_bound(self):
        """Nothing is produced if either bound cannot be parsed."""
        self.assertEqual(
            list(dates.build_daily_buckets("bad-date", "2024-01-03")), []
        )
        self.assertEqual(
            list(dates.build_daily_buckets("2024-01-01", "bad-date")), []
        )

    def test_end_before_start(self):
        """An inverted interval is empty."""
        self.assertEqual(
            list(dates.build_daily_buckets("2024-01-03", "2024-01-01")), []
        )

    def test_restartable(self):
        """Calling again produces the same buckets."""
        first = list(dates.build_daily_buckets("2024-01-01", "2024-01-05"))
        second = list(dates.build_daily_buckets("2024-01-01", "2024-01-05"))
        self.assertEqual(first, second)
