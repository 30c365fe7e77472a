from django.contrib import admin

from ledger_core.models import JournalLine

from .forms import JournalLineInlineForm

# ---------- Helpful inline admin classes ----------


class JournalLineInline(
    admin.TabularInline
    # shows related objects in table format (rows under parent form)
):
    """Show JournalLine rows on the Journal page"""

    model = JournalLine
    form = JournalLineInlineForm  # Inline form for JournalLine (admin)
    extra = 0  # don’t show “empty” rows by default (prevents clutter)
    fields = (
        "line_number",
        "account",
        "description",
        "debit_amount",
        "credit_amount",
        "debit_amount_base",
        "credit_amount_base",
    )
    # base amounts are derived from the journal's rate on save
    readonly_fields = (
        "debit_amount_base",
        "credit_amount_base",
    )
    ordering = ("line_number",)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("account", "account__currency")

    def get_readonly_fields(self, request, obj=None):
        # Once journal is `posted`, all its lines become completely locked
        if obj and obj.is_posted:
            return list(self.fields)
        return self.readonly_fields

    # Hide add new line option
    def has_add_permission(self, request, obj=None):
        # If parent journal is posted, don't allow adding new lines
        if obj and obj.is_posted:
            return False
        return super().has_add_permission(request, obj)

    # Hide delete options
    def has_delete_permission(self, request, obj=None):
        if obj and obj.is_posted:
            return False
        return super().has_delete_permission(request, obj)
