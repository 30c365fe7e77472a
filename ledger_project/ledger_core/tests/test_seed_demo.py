from decimal import Decimal
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from ledger_core.models import CapitalMovement, Journal, Period
from ledger_core.services.reports import trial_balance, trial_balance_totals


class SeedDemoCommandTests(TestCase):

    def seed(self, year=2024, month=1, **options):
        out = StringIO()
        call_command("seed_demo", year=year, month=month, stdout=out, **options)
        return out.getvalue()

    def test_seeds_a_balanced_ledger(self):
        output = self.seed()

        self.assertIn("Demo ledger seeded", output)
        self.assertEqual(Journal.objects.posted().count(), 2)
        movement = CapitalMovement.objects.get()
        self.assertEqual(movement.amount, Decimal("1000.00"))
        self.assertEqual(movement.amount_base, Decimal("280000.00"))

        totals = trial_balance_totals(trial_balance())
        self.assertEqual(totals["debit_balance_base"], Decimal("330000.00"))
        self.assertEqual(totals["debit_balance_base"], totals["credit_balance_base"])

    def test_running_twice_is_harmless(self):
        self.seed()
        output = self.seed()
        self.assertIn("already exists", output)
        self.assertEqual(Journal.objects.count(), 2)
        self.assertEqual(CapitalMovement.objects.count(), 1)

    def test_rejects_out_of_sequence_month(self):
        self.seed()
        with self.assertRaises(CommandError):
            self.seed(month=3)
        self.assertEqual(Period.objects.count(), 1)

    def test_rejects_bad_rate(self):
        with self.assertRaises(CommandError):
            self.seed(rate="abc")
