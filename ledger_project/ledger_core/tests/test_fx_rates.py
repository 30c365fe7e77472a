import datetime
from decimal import Decimal
from django.test import TestCase
from ledger_core.exceptions import (CannotCreateLockedRate, DuplicateFxRate,
                                    InvalidRate, NoAccountingPeriodFound,
                                    NotFound)
from ledger_core.models import FxRate
from ledger_core.services.fx_rates import (create_fx_rate, latest_rate,
                                           list_fx_rates)
from ledger_core.services.periods import create_period


class FxRateCreationTests(TestCase):

    def setUp(self):
        self.jan = create_period(2024, 1)

    def test_create_rate_inside_open_period(self):
        fx = create_fx_rate("USD", "PKR", Decimal("280.5"), datetime.date(2024, 1, 10), is_locked=True)
        self.assertEqual(fx.rate, Decimal("280.5"))
        self.assertTrue(fx.is_locked)
        self.assertEqual(fx.from_currency_id, "USD")

    def test_duplicate_rate(self):
        create_fx_rate("USD", "PKR", "280", datetime.date(2024, 1, 10))
        with self.assertRaises(DuplicateFxRate):
            create_fx_rate("USD", "PKR", "281", datetime.date(2024, 1, 10))

    """ The duplicate check runs before the period lookup """
    def test_duplicate_reported_before_missing_period(self):
        # a stray row in a month that has no period
        FxRate.objects.create(
            from_currency_id="USD", to_currency_id="PKR",
            rate=Decimal("280"), effective_date=datetime.date(2024, 3, 1))
        with self.assertRaises(DuplicateFxRate):
            create_fx_rate("USD", "PKR", "280", datetime.date(2024, 3, 1))

    def test_no_period_for_date(self):
        with self.assertRaises(NoAccountingPeriodFound) as cm:
            create_fx_rate("USD", "PKR", "280", datetime.date(2024, 2, 1))
        self.assertEqual((cm.exception.year, cm.exception.month), (2024, 2))

    def test_locked_period_accepts_only_unlocked_rates(self):
        feb = create_period(2024, 2, status="locked")
        with self.assertRaises(CannotCreateLockedRate):
            create_fx_rate("USD", "PKR", "281", datetime.date(2024, 2, 5), is_locked=True)
        # back-filling an unlocked rate is allowed
        fx = create_fx_rate("USD", "PKR", "281", datetime.date(2024, 2, 5), is_locked=False)
        self.assertFalse(fx.is_locked)
        self.assertTrue(feb.is_locked)

    def test_invalid_rates(self):
        for bad in ("0", "-1", "abc"):
            with self.assertRaises(InvalidRate):
                create_fx_rate("USD", "PKR", bad, datetime.date(2024, 1, 10))
        with self.assertRaises(InvalidRate):
            create_fx_rate("USD", "USD", "1", datetime.date(2024, 1, 10))
        self.assertFalse(FxRate.objects.exists())

    def test_non_finite_rates(self):
        for bad in ("NaN", "sNaN", "Infinity", "-Infinity", Decimal("NaN")):
            with self.assertRaises(InvalidRate):
                create_fx_rate("USD", "PKR", bad, datetime.date(2024, 1, 10))
        self.assertFalse(FxRate.objects.exists())

    """ Rates are stored with six decimals; finer ones are refused, not rounded """
    def test_rate_precision(self):
        with self.assertRaises(InvalidRate):
            create_fx_rate("USD", "PKR", "1.0000001", datetime.date(2024, 1, 10))

        fx = create_fx_rate("USD", "PKR", "280.1234560", datetime.date(2024, 1, 10))
        stored = FxRate.objects.get(pk=fx.pk)
        self.assertEqual(stored.rate, fx.rate)
        self.assertEqual(stored.rate, Decimal("280.123456"))

    def test_unknown_currency(self):
        with self.assertRaises(NotFound):
            create_fx_rate("EUR", "PKR", "300", datetime.date(2024, 1, 10))


class FxRateLookupTests(TestCase):

    def setUp(self):
        create_period(2024, 1)
        create_fx_rate("USD", "PKR", "280", datetime.date(2024, 1, 1))
        create_fx_rate("USD", "PKR", "282", datetime.date(2024, 1, 20), is_locked=True)

    def test_latest_rate_as_of(self):
        self.assertEqual(latest_rate("USD", "PKR"), Decimal("282"))
        self.assertEqual(latest_rate("USD", "PKR", as_of=datetime.date(2024, 1, 19)), Decimal("280"))

    def test_latest_rate_falls_back_to_one(self):
        self.assertEqual(latest_rate("PKR", "USD"), Decimal("1"))
        self.assertEqual(latest_rate("USD", "PKR", as_of=datetime.date(2023, 12, 31)), Decimal("1"))

    def test_list_filters(self):
        rates = list_fx_rates(from_currency="USD")
        self.assertEqual([r.rate for r in rates], [Decimal("282"), Decimal("280")])
        self.assertEqual(len(list_fx_rates(is_locked=True)), 1)
        self.assertEqual(len(list_fx_rates(from_date=datetime.date(2024, 1, 2))), 1)
        self.assertEqual(list_fx_rates(to_currency="USD"), [])
