from decimal import Decimal
from django import forms
from django.core.exceptions import ValidationError
from ledger_core.models import Account, JournalLine

# -----------------------------
# Register custom admin forms
# ----------------------------


# Inline form for JournalLine (admin)
class JournalLineInlineForm(forms.ModelForm):
    class Meta:
        model = JournalLine
        fields = ("line_number", "account", "description", "debit_amount", "credit_amount")

    # Only active accounts accept new lines
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if "account" in self.fields:
            self.fields["account"].queryset = Account.objects.active().select_related("currency")

    def clean(self):
        cleaned = super().clean()

        # Exactly one of debit or credit must be > 0
        debit = cleaned.get("debit_amount") or Decimal("0.00")
        credit = cleaned.get("credit_amount") or Decimal("0.00")
        if debit < 0 or credit < 0:
            raise ValidationError("Debit and credit must be >= 0.")
        if (debit > 0) == (credit > 0):
            raise ValidationError("Enter an amount on exactly one of debit or credit.")
        return cleaned
