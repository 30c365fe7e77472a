import datetime
from unittest import skipUnless
from django.core.exceptions import ValidationError
from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext
from ledger_core.exceptions import (DuplicatePeriod, InvalidPeriod,
                                    NonSequentialPeriod)
from ledger_core.models import Period
from ledger_core.services.periods import (create_period, latest_period,
                                          list_periods, period_for_date)


""" Period creation and sequencing """
class PeriodCreationTests(TestCase):

    def test_first_period_is_unconstrained(self):
        period = create_period(2031, 7)
        self.assertEqual((period.year, period.month), (2031, 7))
        self.assertEqual(period.status, "open")
        self.assertFalse(period.fx_rate_locked)

    def test_next_period_must_follow_latest(self):
        create_period(2024, 1)
        feb = create_period(2024, 2)
        self.assertEqual(str(feb), "2024-02")

    """ An empty table has no row to lock; PostgreSQL falls back to a table lock """
    @skipUnless(connection.vendor == "postgresql", "table lock is PostgreSQL only")
    def test_first_period_locks_the_table(self):
        with CaptureQueriesContext(connection) as ctx:
            create_period(2024, 1)
        self.assertTrue(any("LOCK TABLE" in q["sql"] for q in ctx.captured_queries))
        # later periods lock the latest row instead
        with CaptureQueriesContext(connection) as ctx:
            create_period(2024, 2)
        self.assertFalse(any("LOCK TABLE" in q["sql"] for q in ctx.captured_queries))

    def test_year_end_rolls_over(self):
        create_period(2024, 12)
        jan = create_period(2025, 1)
        self.assertEqual((jan.year, jan.month), (2025, 1))

    """ Creating P(n+2) before P(n+1) fails whatever status / fx flag is requested """
    def test_gap_is_rejected_regardless_of_flags(self):
        create_period(2024, 1)
        create_period(2024, 2)
        for status in ("open", "locked"):
            for fx_locked in (False, True):
                with self.assertRaises(NonSequentialPeriod) as cm:
                    create_period(2024, 4, status=status, fx_rate_locked=fx_locked)
                self.assertEqual(cm.exception.expected, (2024, 3))
                self.assertEqual(cm.exception.requested, (2024, 4))
        self.assertEqual(Period.objects.count(), 2)

    def test_going_backwards_is_rejected(self):
        create_period(2024, 5)
        with self.assertRaises(NonSequentialPeriod):
            create_period(2024, 3)

    def test_duplicate_period(self):
        create_period(2024, 1)
        with self.assertRaises(DuplicatePeriod):
            create_period(2024, 1)

    def test_out_of_range_values(self):
        for year, month in ((1999, 1), (3001, 1), (2024, 0), (2024, 13)):
            with self.assertRaises(InvalidPeriod):
                create_period(year, month)
        with self.assertRaises(InvalidPeriod):
            create_period(2024, 1, status="closed")
        self.assertFalse(Period.objects.exists())

    def test_locked_is_terminal_at_model_level(self):
        period = create_period(2024, 1, status="locked")
        period.status = "open"
        with self.assertRaises(ValidationError):
            period.save()
        period.refresh_from_db()
        self.assertEqual(period.status, "locked")


""" Pure period queries """
class PeriodQueryTests(TestCase):

    def setUp(self):
        self.jan = create_period(2024, 1)
        self.feb = create_period(2024, 2)

    def test_latest_period(self):
        self.assertEqual(latest_period(), self.feb)

    def test_latest_period_empty(self):
        Period.objects.all().delete()
        self.assertIsNone(latest_period())

    def test_period_for_date(self):
        self.assertEqual(period_for_date(datetime.date(2024, 1, 31)), self.jan)
        self.assertEqual(period_for_date(datetime.date(2024, 2, 29)), self.feb)
        self.assertIsNone(period_for_date(datetime.date(2024, 3, 1)))

    def test_list_periods_newest_first(self):
        self.assertEqual(list_periods(), [self.feb, self.jan])
        self.assertEqual(list_periods(status="locked"), [])
        self.assertEqual(list_periods(year=2023), [])

    def test_period_bounds(self):
        self.assertEqual(self.feb.start_date, datetime.date(2024, 2, 1))
        self.assertEqual(self.feb.end_date, datetime.date(2024, 2, 29))
        self.assertTrue(self.feb.contains(datetime.date(2024, 2, 10)))
        self.assertFalse(self.feb.contains(datetime.date(2024, 3, 1)))
