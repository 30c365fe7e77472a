from django.core.exceptions import ValidationError
from django.db import models
from ..managers import AccountQuerySet
from .currency import Currency

# Choice Lists
AC_TYPES = [
    # Used in Account model to classify general ledger accounts
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("income", "Income"),
    ("expense", "Expense"),
    ("other", "Other"),
]


class Account(models.Model):
    """
    Actual ledger account entry in Chart of Accounts.
    - code is globally unique
    - currency: the transaction currency lines on this account are kept in
    - parent: optional hierarchy, always an acyclic forest
    Accounts are never hard-deleted; deactivate them instead.
    """

    # Every account has a code
    # which lets you sort/group accounts consistently in reports.
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(
        max_length=200
    )  # Human-readable name → "Cash USD", "Partner Capital".

    # Classify account into one of the basic accounting types
    account_type = models.CharField(
        max_length=10,
        choices=AC_TYPES,
    )
    # Lines on this account are entered in this currency;
    # anything other than the base currency is converted at line creation
    currency = models.ForeignKey(
        Currency,
        on_delete=models.PROTECT,
        related_name="accounts",
    )

    # Reporting flags used by dashboards and partner capital tracking
    is_bank = models.BooleanField(default=False)
    is_capital = models.BooleanField(default=False)
    is_payroll_source = models.BooleanField(default=False)
    is_intercompany = models.BooleanField(default=False)

    # Optional hierarchy:
    # you can make sub-accounts
    # (e.g. 1000 Cash, 1001 Petty Cash, 1002 Bank Account)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="children",
        # you can’t delete a parent if children exist
    )

    # “soft deactivate” accounts (hide in UI, stop new postings)
    # without deleting history
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AccountQuerySet.as_manager()

    class Meta:
        ordering = ("code",)
        indexes = [
            # For reports grouped by account_type
            models.Index(fields=["account_type"], name="account_type_idx"),
            models.Index(fields=["parent"], name="account_parent_idx"),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"
        # Example: "1000 – Cash USD".

    def clean(self):
        """Reject parent assignments that would close a loop in the hierarchy."""
        if self.parent_id is None:
            return
        if self.pk is not None and self.parent_id == self.pk:
            raise ValidationError("An account cannot be its own parent.")

        # Walk up the ancestor chain; meeting ourselves again means a cycle
        seen = set()
        ancestor = self.parent
        while ancestor is not None:
            if self.pk is not None and ancestor.pk == self.pk:
                raise ValidationError(
                    f"Setting parent {self.parent.code} would create a cycle in the account hierarchy."
                )
            if ancestor.pk in seen:
                # existing data already loops; refuse to build on it
                raise ValidationError("Account hierarchy already contains a cycle.")
            seen.add(ancestor.pk)
            ancestor = ancestor.parent

    def save(self, *args, **kwargs):
        """Enforce business immutability
        (can’t disable accounts used in journal lines)"""
        self.full_clean()  # run validations (including the cycle walk) before saving
        if not self.pk:
            # If no primary key → this is a new object →
            # just save (no need for usage checks)
            return super().save(*args, **kwargs)
        # Fetch the previous version of account from DB
        old = Account.objects.filter(pk=self.pk).first()

        # If account was active before, but now being set to inactive
        if old and old.is_active and not self.is_active:
            # check usage (referenced in transactions)
            if self.journal_lines.exists():
                raise ValidationError(
                    "Cannot disable an account that is used in journal lines."
                )
        return super().save(*args, **kwargs)
