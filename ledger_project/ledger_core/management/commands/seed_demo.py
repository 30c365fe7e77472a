import datetime
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from ledger_core.exceptions import LedgerError
from ledger_core.models import Account, Currency, FxRate, Journal, Partner, Period
from ledger_core.models.period import next_month
from ledger_core.services import capital, fx_rates, journals, periods, posting

User = get_user_model()

DEMO_ACCOUNTS = [
    # code, name, type, currency, flags
    ("1000", "Cash PKR", "asset", "PKR", {"is_bank": True}),
    ("1010", "Bank USD", "asset", "USD", {"is_bank": True}),
    ("3000", "Partner Capital USD", "equity", "USD", {"is_capital": True}),
    ("4000", "Service Revenue", "income", "PKR", {}),
    ("5000", "Salaries", "expense", "PKR", {"is_payroll_source": True}),
]


class Command(BaseCommand):
    help = "Seed a demo ledger: accounts, one period, a USD/PKR rate and two posted journals."

    # Define command-line arguments
    def add_arguments(self, parser):
        today = datetime.date.today()
        parser.add_argument("--year", type=int, default=today.year)
        parser.add_argument("--month", type=int, default=today.month)
        parser.add_argument(
            "--rate", default="280.00", help="USD -> PKR rate for the period (default: 280.00)")
        parser.add_argument(
            "--username", default="demo", help="Username for the demo user.")
        parser.add_argument(
            "--password", default="demo123", help="Password for the demo user.")

    @transaction.atomic
    def handle(self, *args, **options):
        # Read arguments from add_arguments()
        year, month = options["year"], options["month"]
        try:
            rate = Decimal(options["rate"])
        except ArithmeticError:
            raise CommandError(f"--rate must be a decimal, got {options['rate']!r}")

        # 1. Demo user
        user, created = User.objects.get_or_create(
            username=options["username"],
            defaults={"email": f"{options['username']}@example.com"},
        )
        if created:  # if user newly created
            user.set_password(options["password"])
            user.save()
        self.stdout.write(self.style.SUCCESS(f"Using user: {user.username}"))

        # 2. Chart of accounts
        accounts = {}
        for code, name, ac_type, currency, flags in DEMO_ACCOUNTS:
            accounts[code], _ = Account.objects.get_or_create(
                code=code,
                defaults={
                    "name": name,
                    "account_type": ac_type,
                    "currency": Currency.objects.get(pk=currency),
                    **flags,
                },
            )
        self.stdout.write(self.style.SUCCESS(f"Accounts ready: {', '.join(accounts)}"))

        try:
            period = self._period(year, month, user)
            if period.is_locked:
                raise CommandError(f"Period {period} is locked; pick another month.")

            # 3. FX rate on the first day of the month
            fx_rate = FxRate.objects.for_pair("USD", "PKR").filter(effective_date=period.start_date).first()
            if fx_rate is None:
                fx_rate = fx_rates.create_fx_rate("USD", "PKR", rate, period.start_date, user=user)
            self.stdout.write(self.style.SUCCESS(f"FX rate: {fx_rate}"))

            # 4. Journals, built and posted through the services
            usd_amount = Decimal("1000.00")
            contribution = self._journal(
                period, "DEMO-001", "Partner capital contribution", fx_rate, user,
                [
                    (accounts["1010"], usd_amount, None),
                    (accounts["3000"], None, usd_amount),
                ],
            )
            self._journal(
                period, "DEMO-002", "Consulting income", None, user,
                [
                    (accounts["1000"], Decimal("50000.00"), None),
                    (accounts["4000"], None, Decimal("50000.00")),
                ],
            )

            # 5. Partner and the capital movement annotating the contribution
            partner, _ = Partner.objects.get_or_create(
                name="Demo Partner", defaults={"capital_account": accounts["3000"]})
            if not contribution.capital_movements.exists():
                capital.create_capital_movement(
                    partner_id=partner.pk,
                    movement_type="contribution",
                    amount=usd_amount,
                    currency="USD",
                    amount_base=contribution.compute_totals()[3],
                    journal_id=contribution.pk,
                    movement_date=contribution.journal_date,
                    description="Opening contribution",
                    user=user,
                )
        except LedgerError as exc:
            raise CommandError(str(exc))

        self.stdout.write(self.style.SUCCESS(f"Demo ledger seeded for {period}!"))

    def _period(self, year, month, user):
        period = Period.objects.for_month(year, month).first()
        if period is not None:
            return period
        latest = Period.objects.latest_period()
        if latest is not None and next_month(latest.year, latest.month) != (year, month):
            raise CommandError(
                f"Latest period is {latest}; the next one must be "
                "%d-%02d." % next_month(latest.year, latest.month)
            )
        period = periods.create_period(year, month, user=user)
        self.stdout.write(self.style.SUCCESS(f"Created period: {period}"))
        return period

    def _journal(self, period, reference, description, fx_rate, user, lines):
        journal = Journal.objects.filter(period=period, reference=reference).first()
        if journal is not None:
            self.stdout.write(self.style.NOTICE(f"Journal {reference} already exists, skipping"))
            return journal
        journal = journals.create_journal(
            reference, description, period.start_date, period.pk,
            fx_rate_id=fx_rate.pk if fx_rate else None, user=user,
        )
        for account, debit, credit in lines:
            journals.add_journal_line(journal.pk, account.pk, description, debit, credit, user=user)
        journal = posting.post_journal(journal.pk, user=user)
        self.stdout.write(self.style.SUCCESS(
            f"Posted {reference}: {journal.total_debit} / {journal.total_credit}"))
        return journal
