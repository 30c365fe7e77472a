from django.contrib import admin
from django.db.models import Prefetch
from django.utils.html import format_html
from ledger_core.models import Journal, JournalLine
from ledger_core.services.audit_helper import log_action
from .actions import post_journals
from .inlines import JournalLineInline


# Register `Journal` model
@admin.register(Journal)
class JournalAdmin(admin.ModelAdmin):
    """Basic admin display setup"""

    list_display = (
        "id",
        "reference",
        "journal_date",
        "period",
        "status",
        "fx_rate",
        "posted_at",
        "created_by",
        "balanced",
    )
    list_filter = ("status", "period", "journal_date")
    search_fields = ("reference", "description", "id")
    # status only moves through the post action; totals are written at posting
    readonly_fields = (
        "status",
        "total_debit",
        "total_credit",
        "posted_by",
        "posted_at",
        "created_by",
    )
    inlines = [
        JournalLineInline
    ]  # allows editing JournalLines directly on Journal page
    actions = [
        post_journals
    ]  # adds a bulk action (“Post selected journals”) to list view

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        """ For each Journal, prefetch all its lines together with their accounts. """
        qs = super().get_queryset(request)
        line_qs = JournalLine.objects.select_related("account")
        return qs.select_related("period", "fx_rate", "created_by").prefetch_related(
            Prefetch("lines", queryset=line_qs)
        )

    """ Computed column for balance check """
    # Show base debits / base credits for each journal
    @admin.display(description="Base debits / credits")
    def balanced(self, obj):
        _debit, _credit, debit_base, credit_base = obj.compute_totals()
        # format: bold debits / small credits
        return format_html("<b>{}</b> / <small>{}</small>", debit_base, credit_base)

    def save_model(self, request, obj, form, change):
        if not change and obj.created_by_id is None and request.user.is_authenticated:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)
        # same trail as journals created through the service
        log_action(
            action="update" if change else "create",
            table_name="journals",
            record_id=obj.pk,
            new_values={
                "reference": obj.reference,
                "journal_date": obj.journal_date,
                "period": str(obj.period),
                "fx_rate_id": obj.fx_rate_id,
            },
            user=request.user if request.user.is_authenticated else None,
            ip_address=request.META.get("REMOTE_ADDR") or None,
        )

    # Lines typed in the admin get their base amounts like service-created ones
    def save_formset(self, request, form, formset, change):
        if formset.model is not JournalLine:
            return super().save_formset(request, form, formset, change)
        lines = formset.save(commit=False)
        for line in formset.deleted_objects:
            line.delete()
        for line in lines:
            line.journal = form.instance
            line.compute_base_amounts()
            line.save()
        formset.save_m2m()

    """ Make journals immutable once posted """
    def get_readonly_fields(self, request, obj=None):
        r = list(self.readonly_fields)
        if obj and obj.is_posted:
            # This prevents someone from sneaking in
            # and editing a finalized journal
            r += ["reference", "description", "journal_date", "period", "fx_rate"]
        return r

    """ Prevent deletion after posting """
    def has_delete_permission(self, request, obj=None):
        if obj and obj.is_posted:
            return False  # If posted → deletion is blocked
        return super().has_delete_permission(request, obj)
        # Draft journals can still be deleted
