from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _
from ledger_core.exceptions import LedgerError
from ledger_core.services.periods import close_period
from ledger_core.services.posting import post_journal

# ---------- Admin actions ----------


def _actor(request):
    user = getattr(request, "user", None)
    return user if user is not None and user.is_authenticated else None


@admin.action(description=_("Post selected journals (make immutable)"))
# Bulk-post multiple journals from Django admin list view
def post_journals(
    modeladmin,  # `ModelAdmin` class for Journal
    request,  # HTTP request object
    queryset,  # record what admin selected from list view
):
    """
    Run each selected draft through the posting service, one transaction per
    journal, so one unbalanced journal doesn't stop the whole batch.
    """
    # Only attempt to post journals which are not already posted.
    candidates = queryset.filter(status="draft").order_by("journal_date", "id")
    total = candidates.count()
    success = 0
    failures = 0

    for journal in candidates:
        try:
            post_journal(journal.pk, user=_actor(request))
            success += 1
        except LedgerError as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not post journal %(ref)s: %(err)s") % {"ref": journal.reference, "err": exc},
                level=messages.ERROR,
            )

    # Final summary message
    modeladmin.message_user(
        request,
        _("Posted %(success)d of %(total)d journals. %(failures)d failed.") % {
            "success": success,
            "total": total,
            "failures": failures,
        },
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )


""" Add button/action that calls the period close service """


@admin.action(description=_("Close selected periods (lock for good)"))
def close_periods(modeladmin, request, queryset):
    # oldest first: books close in calendar order
    for period in queryset.open().order_by("year", "month"):
        try:
            close_period(period.pk, user=_actor(request))
            modeladmin.message_user(request, _("Closed period %(period)s") % {"period": period})
        except LedgerError as exc:
            # enforces the close gating instead of letting admins bypass it
            modeladmin.message_user(
                request, f"{period}: {exc}", level=messages.ERROR)
