from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.test import TestCase
from django.urls import reverse
from ledger_core.models import AuditLog, FxRate, Journal, Period
from ledger_core.services.journals import add_journal_line
from .helpers import LedgerFixtures

User = get_user_model()


class AdminActionTests(LedgerFixtures, TestCase):

    def setUp(self):
        super().setUp()
        self.admin_user = User.objects.create_superuser(
            username="admin", email="admin@example.com", password="pw")
        self.client.force_login(self.admin_user)

    def run_action(self, model, action, objects):
        url = reverse(f"admin:ledger_core_{model}_changelist")
        return self.client.post(url, {
            "action": action,
            "_selected_action": [obj.pk for obj in objects],
        })

    """ One bad journal in the batch does not stop the others """
    def test_post_journals_action(self):
        good = self.make_usd_journal("JE-001")
        bad = self.make_journal("JE-002")
        add_journal_line(bad.pk, self.cash.pk, "", "100", "0")

        response = self.run_action("journal", "post_journals", [good, bad])

        self.assertEqual(response.status_code, 302)
        good.refresh_from_db()
        bad.refresh_from_db()
        self.assertEqual(good.status, "posted")
        self.assertEqual(good.posted_by, self.admin_user)
        self.assertEqual(bad.status, "draft")

        texts = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertTrue(any("JE-002" in text for text in texts))
        self.assertIn("Posted 1 of 2 journals. 1 failed.", texts)

    def test_close_periods_action_respects_gating(self):
        self.make_usd_journal()
        self.run_action("period", "close_periods", [self.period])
        self.period.refresh_from_db()
        self.assertEqual(self.period.status, "open")

        Journal.objects.all().delete()
        FxRate.objects.update(is_locked=True)
        self.run_action("period", "close_periods", [self.period])
        self.assertTrue(Period.objects.get(pk=self.period.pk).is_locked)

    """ Already locked periods in the selection are skipped without an error """
    def test_close_periods_action_skips_locked(self):
        locked = Period.objects.create(year=2023, month=12, status="locked")
        FxRate.objects.update(is_locked=True)

        response = self.run_action("period", "close_periods", [locked, self.period])

        texts = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertEqual(texts, [f"Closed period {self.period}"])
        self.assertTrue(Period.objects.get(pk=self.period.pk).is_locked)

    def test_journal_changelist_renders(self):
        self.make_usd_journal()
        response = self.client.get(reverse("admin:ledger_core_journal_changelist"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "280000")


class JournalAdminFormTests(LedgerFixtures, TestCase):

    def setUp(self):
        super().setUp()
        self.admin_user = User.objects.create_superuser(
            username="admin", email="admin@example.com", password="pw")
        self.client.force_login(self.admin_user)

    def add_journal(self, **fields):
        data = {
            "reference": "ADM-1",
            "description": "",
            "journal_date": "2024-01-20",
            "period": self.period.pk,
            "fx_rate": "",
            # empty inline formset for the lines
            "lines-TOTAL_FORMS": "0",
            "lines-INITIAL_FORMS": "0",
            "lines-MIN_NUM_FORMS": "0",
            "lines-MAX_NUM_FORMS": "1000",
            "_save": "Save",
        }
        data.update(fields)
        return self.client.post(reverse("admin:ledger_core_journal_add"), data)

    def test_add_form_writes_journal_and_audit_row(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.add_journal()

        self.assertEqual(response.status_code, 302)
        journal = Journal.objects.get(reference="ADM-1")
        self.assertEqual(journal.created_by, self.admin_user)
        entry = AuditLog.objects.get(table_name="journals", record_id=str(journal.pk))
        self.assertEqual(entry.action, "create")
        self.assertEqual(entry.user, self.admin_user)

    """ Locked period: the form is re-rendered with errors, nothing is saved """
    def test_add_form_rejects_locked_period(self):
        Period.objects.filter(pk=self.period.pk).update(status="locked")
        response = self.add_journal(journal_date="2024-03-15")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Journal.objects.filter(reference="ADM-1").exists())

    def test_add_form_rejects_date_outside_period(self):
        response = self.add_journal(journal_date="2024-03-15")

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "outside period")
        self.assertFalse(Journal.objects.exists())
