from django.core.exceptions import ValidationError
from django.db import transaction
from django.test import TestCase
from ledger_core.models import Account, Period
from .helpers import LedgerFixtures


class AccountRuleTests(LedgerFixtures, TestCase):

    def test_parent_cycle_is_rejected(self):
        child = Account.objects.create(
            code="1011", name="Bank USD sub", account_type="asset",
            currency=self.usd, parent=self.usd_asset)
        grandchild = Account.objects.create(
            code="1012", name="Bank USD sub-sub", account_type="asset",
            currency=self.usd, parent=child)

        self.usd_asset.parent = grandchild
        with self.assertRaises(ValidationError):
            self.usd_asset.save()
        self.usd_asset.refresh_from_db()
        self.assertIsNone(self.usd_asset.parent)

    def test_account_cannot_parent_itself(self):
        self.cash.parent = self.cash
        with self.assertRaises(ValidationError):
            self.cash.save()

    def test_used_account_cannot_be_deactivated(self):
        self.make_usd_journal()
        self.usd_asset.is_active = False
        with self.assertRaises(ValidationError):
            self.usd_asset.save()

        # an unused account deactivates fine
        self.revenue.is_active = False
        self.revenue.save()
        self.assertFalse(Account.objects.active().filter(pk=self.revenue.pk).exists())

    def test_accounts_are_never_deleted(self):
        with self.assertRaises(ValidationError):
            with transaction.atomic():
                self.revenue.delete()
        self.assertTrue(Account.objects.filter(pk=self.revenue.pk).exists())

    def test_period_with_journals_cannot_be_deleted(self):
        self.make_journal()
        with self.assertRaises(ValidationError):
            with transaction.atomic():
                self.period.delete()
        empty = Period.objects.create(year=2024, month=2)
        empty.delete()
        self.assertFalse(Period.objects.filter(year=2024, month=2).exists())
