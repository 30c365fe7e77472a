from django.contrib import admin

from ledger_core.models import Period

from .actions import close_periods


# Register `Period` model
@admin.register(Period)
class PeriodAdmin(admin.ModelAdmin):
    list_display = (
        "id", "year", "month", "status", "fx_rate_locked", "start_date", "end_date")
    list_filter = ("status", "year")
    # status flips only through the close action
    readonly_fields = ("status", "fx_rate_locked", "created_at", "updated_at")
    actions = [close_periods]

    # periods are opened in sequence through the service, never from a raw form
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
