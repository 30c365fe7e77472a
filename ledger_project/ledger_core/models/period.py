import calendar
import datetime
from django.core.exceptions import ValidationError  # Built-in way to raise validation errors
from django.db import models        # ORM base classes to define database tables as Python classes
from ..managers import PeriodQuerySet

PERIOD_STATUS = [
    ("open", "Open"),  # journals and FX rates may still be added
    ("locked", "Locked"),  # terminal, books closed
]

MIN_YEAR = 2000
MAX_YEAR = 3000


# ---------- Period (accounting period) ----------
class Period(models.Model): # Each Period is one calendar month of the books
    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()

    status = models.CharField(max_length=10, choices=PERIOD_STATUS, default="open")
    """
        When status="locked":
            No new journals, no posting, no locked FX rates.
            There is no transition back to "open".
    """

    # Set together with status when the period is closed
    fx_rate_locked = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PeriodQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["status"], name="period_status_idx"),
        ]

        constraints = [
            # One period per calendar month
            models.UniqueConstraint(fields=["year", "month"],
                                    name="uq_period_year_month"),
            models.CheckConstraint(
                condition=models.Q(month__gte=1) & models.Q(month__lte=12),
                name="period_month_range",
            ),
        ]

        # Default query ordering: periods are returned chronologically
        ordering = ("year", "month")

    def __str__(self):
        return f"{self.year}-{self.month:02d}" # Example: "2024-01".

    @property
    def ordinal(self):
        # Single integer that orders periods chronologically
        return self.year * 12 + self.month

    @property
    def start_date(self):
        return datetime.date(self.year, self.month, 1)

    @property
    def end_date(self):
        return datetime.date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def is_locked(self):
        return self.status == "locked"

    def contains(self, day):
        return self.start_date <= day <= self.end_date

    def clean(self):
        if not (1 <= self.month <= 12):
            raise ValidationError("month must be between 1 and 12")
        if not (MIN_YEAR <= self.year <= MAX_YEAR):
            raise ValidationError(f"year must be between {MIN_YEAR} and {MAX_YEAR}")

    def save(self, *args, **kwargs):
        if self.pk:
            orig = Period.objects.filter(pk=self.pk).values_list("status", flat=True).first()
            # Locked is terminal
            if orig == "locked" and self.status != "locked":
                raise ValidationError("Cannot reopen a locked period")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


def next_month(year, month):
    """(year, month) of the calendar month after the given one."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
