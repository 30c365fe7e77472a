from django.db import models
from .account import Account
from .currency import Currency
from .journal import Journal

MOVEMENT_TYPES = [
    ("contribution", "Contribution"),  # credit capital
    ("draw", "Draw"),  # debit capital
]


# ---------- Partner ----------
class Partner(models.Model):
    """Equity partner. Maintained elsewhere; the ledger only references it."""
    name = models.CharField(max_length=200)
    capital_account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="partners",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


# ---------- Capital movement ----------
class CapitalMovement(models.Model):
    """
    Annotation linking a partner's contribution or draw to a journal that
    has already been posted. Posting never creates these rows on its own.
    """
    partner = models.ForeignKey(
        Partner, on_delete=models.PROTECT, related_name="capital_movements")
    movement_type = models.CharField(max_length=12, choices=MOVEMENT_TYPES)
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.ForeignKey(Currency, on_delete=models.PROTECT)
    amount_base = models.DecimalField(max_digits=18, decimal_places=2)
    journal = models.ForeignKey(
        Journal, on_delete=models.PROTECT, related_name="capital_movements")
    description = models.TextField(blank=True, default="")
    movement_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-movement_date", "-id")
        indexes = [
            models.Index(fields=["partner", "movement_date"], name="cm_partner_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(amount__gt=0) &
                    models.Q(amount_base__gt=0)
                ),
                name="cm_positive_amounts",
            ),
        ]

    def __str__(self):
        return f"{self.partner} {self.movement_type} {self.amount} {self.currency_id}"
