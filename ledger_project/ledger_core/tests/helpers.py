import datetime
from decimal import Decimal
from django.contrib.auth import get_user_model
from ledger_core.models import Account, Currency, FxRate, Period
from ledger_core.services.journals import add_journal_line, create_journal

User = get_user_model()


class LedgerFixtures:
    """Shared setUp for ledger tests: currencies, a few accounts, one open period."""

    def setUp(self):
        # seeded by the data migration, get_or_create keeps the fixture standalone
        self.usd, _ = Currency.objects.get_or_create(code="USD", defaults={"name": "US Dollar"})
        self.pkr, _ = Currency.objects.get_or_create(code="PKR", defaults={"name": "Pakistani Rupee"})

        self.user = User.objects.create_user(username="accountant", password="pw")

        # USD asset / liability pair (foreign currency accounts)
        self.usd_asset = Account.objects.create(
            code="1010", name="Bank USD", account_type="asset", currency=self.usd, is_bank=True)
        self.usd_liability = Account.objects.create(
            code="2010", name="Payable USD", account_type="liability", currency=self.usd)
        # PKR accounts (base currency)
        self.cash = Account.objects.create(
            code="1000", name="Cash PKR", account_type="asset", currency=self.pkr)
        self.revenue = Account.objects.create(
            code="4000", name="Revenue", account_type="income", currency=self.pkr)

        self.period = Period.objects.create(year=2024, month=1)
        self.rate = FxRate.objects.create(
            from_currency=self.usd,
            to_currency=self.pkr,
            rate=Decimal("280.000000"),
            effective_date=datetime.date(2024, 1, 1),
        )

    def make_journal(self, reference="JE-001", fx_rate=None, day=15, period=None):
        period = period or self.period
        return create_journal(
            reference,
            "test journal",
            datetime.date(period.year, period.month, day),
            period.pk,
            fx_rate_id=fx_rate.pk if fx_rate else None,
            user=self.user,
        )

    def make_usd_journal(self, reference="JE-001", amount=Decimal("1000.00")):
        """Balanced USD journal at 280: debit asset, credit liability."""
        journal = self.make_journal(reference, fx_rate=self.rate)
        add_journal_line(journal.pk, self.usd_asset.pk, "debit", amount, Decimal("0"))
        add_journal_line(journal.pk, self.usd_liability.pk, "credit", Decimal("0"), amount)
        return journal
