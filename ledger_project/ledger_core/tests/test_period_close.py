import datetime
from django.test import TestCase
from ledger_core.exceptions import (AlreadyLocked, DraftJournalsRemain,
                                    LockedPeriod, NotFound,
                                    UnlockedFxRatesRemain)
from ledger_core.models import FxRate, Period
from ledger_core.services.journals import create_journal
from ledger_core.services.periods import close_period
from ledger_core.services.posting import post_journal
from .helpers import LedgerFixtures


class ClosePeriodTests(LedgerFixtures, TestCase):

    def setUp(self):
        super().setUp()
        # the fixture rate is unlocked; lock it so only journals gate the close
        FxRate.objects.filter(pk=self.rate.pk).update(is_locked=True)

    """ One draft blocks the close; once it is posted the period locks """
    def test_draft_journal_gates_close(self):
        journal = self.make_usd_journal()

        with self.assertRaises(DraftJournalsRemain) as cm:
            close_period(self.period.pk, user=self.user)
        self.assertEqual(cm.exception.count, 1)
        self.period.refresh_from_db()
        self.assertEqual(self.period.status, "open")

        post_journal(journal.pk)
        period = close_period(self.period.pk, user=self.user)

        period.refresh_from_db()
        self.assertEqual(period.status, "locked")
        self.assertTrue(period.fx_rate_locked)

    def test_unlocked_rates_gate_close(self):
        FxRate.objects.create(
            from_currency=self.usd, to_currency=self.pkr, rate="281",
            effective_date=datetime.date(2024, 1, 20))
        # a rate in another month does not count
        Period.objects.create(year=2024, month=2)
        FxRate.objects.create(
            from_currency=self.usd, to_currency=self.pkr, rate="282",
            effective_date=datetime.date(2024, 2, 1))

        with self.assertRaises(UnlockedFxRatesRemain) as cm:
            close_period(self.period.pk)
        self.assertEqual(cm.exception.count, 1)

    def test_fx_rate_locked_period_locks_its_remaining_rates(self):
        late = FxRate.objects.create(
            from_currency=self.usd, to_currency=self.pkr, rate="281",
            effective_date=datetime.date(2024, 1, 20))
        Period.objects.filter(pk=self.period.pk).update(fx_rate_locked=True)

        close_period(self.period.pk)

        late.refresh_from_db()
        self.assertTrue(late.is_locked)

    def test_close_twice(self):
        close_period(self.period.pk)
        with self.assertRaises(AlreadyLocked):
            close_period(self.period.pk)

    def test_unknown_period(self):
        with self.assertRaises(NotFound):
            close_period(9999)

    def test_locked_period_takes_no_new_journals(self):
        close_period(self.period.pk)
        with self.assertRaises(LockedPeriod):
            create_journal("JE-LATE", "", datetime.date(2024, 1, 31), self.period.pk)
