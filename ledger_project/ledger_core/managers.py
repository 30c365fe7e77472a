from decimal import Decimal
from django.db import models
from django.db.models.functions import Coalesce


# -----------------------------------------
# Query helpers shared by the ledger models
# -----------------------------------------
class AccountQuerySet(models.QuerySet):
    def active(self):
        # only accounts still open for new postings
        return self.filter(is_active=True)


class PeriodQuerySet(models.QuerySet):
    def open(self):
        return self.filter(status="open")

    def newest_first(self):
        # year*12+month ordering; month is always 1..12 so (year, month) sorts the same way
        return self.order_by("-year", "-month")

    def latest_period(self):
        """Chronologically latest period, or None when the table is empty."""
        return self.newest_first().first()

    def for_month(self, year, month):
        return self.filter(year=year, month=month)


class FxRateQuerySet(models.QuerySet):
    def for_pair(self, from_currency, to_currency):
        return self.filter(from_currency=from_currency, to_currency=to_currency)

    def in_month(self, year, month):
        # rates whose effective_date falls inside one calendar month
        return self.filter(effective_date__year=year, effective_date__month=month)

    def unlocked(self):
        return self.filter(is_locked=False)


class JournalQuerySet(models.QuerySet):
    def drafts(self):
        return self.filter(status="draft")

    def posted(self):
        return self.filter(status="posted")


class JournalLineQuerySet(models.QuerySet):
    def posted(self):
        # reports only ever read lines of posted journals
        return self.filter(journal__status="posted")

    def totals(self):
        """Sum all four amount columns, zero-filled when there are no rows."""
        return self.aggregate(
            total_debit=Coalesce(models.Sum("debit_amount"), Decimal("0.00")),
            total_credit=Coalesce(models.Sum("credit_amount"), Decimal("0.00")),
            total_debit_base=Coalesce(models.Sum("debit_amount_base"), Decimal("0.00")),
            total_credit_base=Coalesce(models.Sum("credit_amount_base"), Decimal("0.00")),
        )
