import json
from django.test import TestCase
from django.urls import reverse
from ledger_core.models import FxRate, Journal, Partner
from .helpers import LedgerFixtures


class LedgerApiTests(LedgerFixtures, TestCase):

    def post(self, name, payload=None, **kwargs):
        return self.client.post(
            reverse(f"ledger_core:{name}", kwargs=kwargs or None),
            data=json.dumps(payload or {}),
            content_type="application/json",
        )

    def test_create_and_list_periods(self):
        response = self.post("periods", {"year": 2024, "month": 2})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["status"], "open")

        response = self.client.get(reverse("ledger_core:periods"), {"year": 2024})
        months = [row["month"] for row in response.json()["results"]]
        self.assertEqual(months, [2, 1])

    def test_error_families_map_to_status_codes(self):
        # integrity: skipped month
        response = self.post("periods", {"year": 2024, "month": 5})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["code"], "non_sequential_period")
        self.assertFalse(response.json()["ok"])
        # validation: missing field
        self.assertEqual(self.post("periods", {"year": 2024}).status_code, 400)
        # not found
        self.assertEqual(self.post("post-journal", journal_id=9999).status_code, 404)
        # consistency: no lines
        journal = self.make_journal()
        response = self.post("post-journal", journal_id=journal.pk)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "missing_lines")

    def test_malformed_body(self):
        response = self.client.post(
            reverse("ledger_core:journals"), data="not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "bad_request")

    def test_journal_flow(self):
        response = self.post("journals", {
            "reference": "API-001",
            "journal_date": "2024-01-10",
            "period_id": self.period.pk,
            "fx_rate_id": self.rate.pk,
        })
        self.assertEqual(response.status_code, 201)
        journal_id = response.json()["id"]

        for account, debit, credit in ((self.usd_asset, "250.00", None),
                                       (self.usd_liability, None, "250.00")):
            response = self.post("journal-lines", {
                "account_id": account.pk,
                "debit_amount": debit,
                "credit_amount": credit,
            }, journal_id=journal_id)
            self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["credit_amount_base"], "70000.00")

        response = self.post("post-journal", journal_id=journal_id)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "posted")

        # second post is a state conflict
        self.assertEqual(self.post("post-journal", journal_id=journal_id).status_code, 409)

        lines = self.client.get(reverse("ledger_core:journal-lines", kwargs={"journal_id": journal_id}))
        self.assertEqual(len(lines.json()["results"]), 2)
        listing = self.client.get(reverse("ledger_core:journals"), {"status": "posted"})
        self.assertEqual([row["reference"] for row in listing.json()["results"]], ["API-001"])

    def test_reports(self):
        self.post("post-journal", journal_id=self.make_usd_journal().pk)

        response = self.client.get(reverse("ledger_core:trial-balance"), {"period_id": self.period.pk})
        body = response.json()
        self.assertEqual(len(body["results"]), 2)
        self.assertEqual(body["totals"]["debit_balance_base"], "280000.00")
        self.assertEqual(body["totals"]["credit_balance_base"], "280000.00")

        response = self.client.get(reverse("ledger_core:general-ledger"), {"account_id": self.usd_asset.pk})
        self.assertEqual(response.json()["results"][0]["running_balance"], "1000.00")

        response = self.client.get(reverse("ledger_core:general-ledger"), {"from_date": "yesterday"})
        self.assertEqual(response.status_code, 400)

    def test_fx_rates_and_period_close(self):
        response = self.post("fx-rates", {
            "from_currency": "USD", "to_currency": "PKR",
            "rate": "281.25", "effective_date": "2024-01-20", "is_locked": True,
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["rate"], "281.25")

        # the fixture rate is still unlocked
        response = self.post("close-period", period_id=self.period.pk)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "unlocked_fx_rates_remain")

        FxRate.objects.update(is_locked=True)
        response = self.post("close-period", period_id=self.period.pk)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "locked")

        rates = self.client.get(reverse("ledger_core:fx-rates"), {"from_currency": "USD"})
        self.assertEqual(len(rates.json()["results"]), 2)

    def test_non_finite_rate_is_a_bad_request(self):
        for bad in ("NaN", "Infinity"):
            response = self.post("fx-rates", {
                "from_currency": "USD", "to_currency": "PKR",
                "rate": bad, "effective_date": "2024-01-20",
            })
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["code"], "invalid_rate")

    def test_capital_movements(self):
        journal = self.make_usd_journal()
        partner = Partner.objects.create(name="Ayesha")
        payload = {
            "partner_id": partner.pk,
            "movement_type": "contribution",
            "amount": "1000",
            "currency": "USD",
            "amount_base": "280000",
            "journal_id": journal.pk,
            "movement_date": "2024-01-15",
        }
        self.assertEqual(self.post("capital-movements", payload).status_code, 409)

        Journal.objects.filter(pk=journal.pk).update(status="posted")
        self.assertEqual(self.post("capital-movements", payload).status_code, 201)

        response = self.client.get(reverse("ledger_core:capital-movements"), {"partner_id": partner.pk})
        self.assertEqual(response.json()["results"][0]["amount_base"], "280000.00")

    def test_wrong_method(self):
        response = self.client.get(reverse("ledger_core:post-journal", kwargs={"journal_id": 1}))
        self.assertEqual(response.status_code, 405)
