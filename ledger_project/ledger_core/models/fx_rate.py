from django.conf import settings
from django.db import models
from ..managers import FxRateQuerySet
from .currency import Currency


# ---------- FX rate ----------
class FxRate(models.Model):
    """
    Conversion rate for one currency pair on one effective date.
    Shared by every journal that references it; only is_locked ever changes
    after creation (false → true when the owning period is closed).
    """
    from_currency = models.ForeignKey(
        Currency, on_delete=models.PROTECT, related_name="fx_rates_from")
    to_currency = models.ForeignKey(
        Currency, on_delete=models.PROTECT, related_name="fx_rates_to")
    # 1 unit of from_currency = rate units of to_currency
    rate = models.DecimalField(max_digits=18, decimal_places=6)
    effective_date = models.DateField()
    is_locked = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="created_fx_rates",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = FxRateQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["effective_date"], name="fx_rate_eff_date_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["from_currency", "to_currency", "effective_date"],
                name="uq_fx_rate_pair_date",
            ),
            models.CheckConstraint(
                condition=models.Q(rate__gt=0),
                name="fx_rate_positive",
            ),
        ]
        ordering = ("-effective_date",)

    def __str__(self):
        return f"{self.from_currency_id}/{self.to_currency_id} {self.rate} @ {self.effective_date}"
