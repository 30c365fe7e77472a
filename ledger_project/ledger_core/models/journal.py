from decimal import ROUND_HALF_UP, Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import JournalLineQuerySet, JournalQuerySet
from .account import Account
from .fx_rate import FxRate
from .period import Period

JOURNAL_STATUS = [
    ("draft", "Draft"),  # still editable
    ("posted", "Posted"),  # finalized, terminal
]

CENT = Decimal("0.01")


# ---------- Journal (Header) & JournalLine ----------
class Journal(models.Model):  # Represents one accounting transaction
    reference = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")
    journal_date = models.DateField()
    # Every journal lives in exactly one accounting period
    period = models.ForeignKey(
        Period,
        on_delete=models.PROTECT,  # Prevent breaking historical ledger
        related_name="journals",
    )
    status = models.CharField(
        max_length=10,
        choices=JOURNAL_STATUS,
        default="draft",
    )
    # Cached totals, written once at posting time from the final set of lines
    total_debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    # Rate used to convert non-base lines into the base currency
    fx_rate = models.ForeignKey(
        FxRate,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="journals",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="created_journals",
    )
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="posted_journals",
    )
    posted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = JournalQuerySet.as_manager()

    class Meta:
        # Speed up listing & filtering
        # (e.g. show all draft entries of a period)
        indexes = [
            models.Index(fields=["period", "status"], name="journal_period_status_idx"),
            models.Index(fields=["journal_date"], name="journal_date_idx"),
        ]

        constraints = [
            # Within one period, each reference must be unique
            models.UniqueConstraint(
                fields=["period", "reference"], name="uq_journal_period_ref"
            )
        ]

    def __str__(self):
        return f"{self.reference} {self.journal_date} [{self.status}]"

    @property
    def is_posted(self):
        return self.status == "posted"

    # Aggregate all debit and credit amounts across entry’s lines
    def compute_totals(self):
        """Return (debit, credit, debit_base, credit_base) sums over the lines."""
        aggs = self.lines.totals()
        return (
            aggs["total_debit"],
            aggs["total_credit"],
            aggs["total_debit_base"],
            aggs["total_credit_base"],
        )

    # True if double-entry rule holds in both currencies
    def is_balanced(self):
        debit, credit, debit_base, credit_base = self.compute_totals()
        return debit == credit and debit_base == credit_base

    def clean(self):
        """Header rules shared by the services and the admin forms."""
        orig = None
        if self.pk:  # Does this row already exist in DB?
            orig = Journal.objects.filter(pk=self.pk).values("status", "fx_rate_id").first()
        # a posted journal never changes again, status included
        if orig and orig["status"] == "posted":
            raise ValidationError("Cannot modify a posted journal")

        if self.period_id is not None:
            if self.status == "draft" and self.period.is_locked:
                raise ValidationError({"period": f"Period {self.period} is locked"})
            if self.journal_date and not (
                self.period.start_date <= self.journal_date <= self.period.end_date
            ):
                raise ValidationError(
                    {"journal_date": f"Journal date {self.journal_date} is outside period {self.period}"}
                )

        # existing lines were converted at the old rate
        if orig and orig["fx_rate_id"] != self.fx_rate_id and self.lines.exists():
            raise ValidationError({"fx_rate": "Cannot change the rate of a journal that has lines"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class JournalLine(models.Model):  # Stores Lines ( credits / debits )
    """
    Each line belongs to a journal and to a GL account.
    Amounts are kept twice: in the account's currency and in the base currency.
    """

    journal = models.ForeignKey(
        Journal,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    # Must point to one Account (can’t delete account if lines exist → PROTECT)
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="journal_lines")

    description = models.CharField(max_length=400, blank=True, default="")

    # Transaction currency amounts & the debit/credit split
    debit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    # Base currency amounts, computed once when the line is created
    debit_amount_base = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit_amount_base = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    line_number = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    objects = JournalLineQuerySet.as_manager()

    class Meta:
        ordering = ("journal", "line_number")
        # For fast queries like “all lines for this account” /
        # “all lines in this journal.”
        indexes = [
            models.Index(fields=["account"], name="jl_account_idx"),
            models.Index(fields=["journal", "line_number"], name="jl_journal_line_idx"),
        ]

        # Enforce debits and credits must be non-negative.
        # The one-side-only rule lives in clean() and is re-checked at posting.
        constraints = [
            # line numbers identify lines in posting errors
            models.UniqueConstraint(
                fields=["journal", "line_number"], name="uq_jl_journal_line_number"
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(debit_amount__gte=0) &
                    models.Q(credit_amount__gte=0)
                ),
                name="jl_non_negative_amounts",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(debit_amount_base__gte=0) &
                    models.Q(credit_amount_base__gte=0)
                ),
                name="jl_non_negative_base_amounts",
            ),
        ]

    # Show journal, account, and amounts in admin dropdowns and debug logs
    def __str__(self):
        return f"{self.journal_id} | {self.account.code} {self.account.name} | D:{self.debit_amount} C:{self.credit_amount}"

    @property
    def has_one_side(self):
        debit_side = self.debit_amount > 0 and self.credit_amount == 0
        credit_side = self.credit_amount > 0 and self.debit_amount == 0
        return debit_side or credit_side

    def compute_base_amounts(self):
        """Fill debit/credit_amount_base from the journal's rate.

        Only lines whose account currency differs from the base currency are
        converted, and only when the journal carries a rate.
        """
        fx_rate = self.journal.fx_rate
        if fx_rate is not None and self.account.currency_id != settings.LEDGER_BASE_CURRENCY:
            rate = fx_rate.rate
            self.debit_amount_base = (self.debit_amount * rate).quantize(CENT, rounding=ROUND_HALF_UP)
            self.credit_amount_base = (self.credit_amount * rate).quantize(CENT, rounding=ROUND_HALF_UP)
        else:
            self.debit_amount_base = self.debit_amount
            self.credit_amount_base = self.credit_amount

    def clean(self):
        # Ensure no negative values sneak in
        # (redundant with CheckConstraint but useful at app-level)
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValidationError("Debit and credit must be >= 0")
        if not self.has_one_side:
            raise ValidationError(
                "JournalLine requires a non-0 amount on exactly one of debit or credit"
            )

        # Lines of a posted journal are frozen
        if self.journal_id and Journal.objects.filter(pk=self.journal_id, status="posted").exists():
            raise ValidationError("Cannot modify JournalLine: parent journal is posted.")

    def save(self, *args, **kwargs):
        # clean()+field validation always run whenever
        # you save a JournalLine programmatically
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        # Prevent deletion if parent journal is posted
        if Journal.objects.filter(pk=self.journal_id, status="posted").exists():
            raise ValidationError(
                "Cannot delete JournalLine: parent journal is posted."
            )
        return super().delete(*args, **kwargs)
