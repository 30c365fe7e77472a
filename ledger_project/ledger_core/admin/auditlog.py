from django.contrib import admin

from ledger_core.models import AuditLog, CapitalMovement, Partner

from .ReadOnly import ReadOnlyAdmin


# Register `AuditLog` model
@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = (
        "id",
        "user",
        "action",
        "table_name",
        "record_id",
        "ip_address",
        "created_at",
    )
    search_fields = ("table_name", "record_id", "user__username")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("user")


# Register `Partner` model
@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "capital_account", "created_at")
    search_fields = ("name",)


# Register `CapitalMovement` model
@admin.register(CapitalMovement)
class CapitalMovementAdmin(ReadOnlyAdmin):
    """Created only through the capital service, which checks the journal is posted."""
    list_display = (
        "id", "partner", "movement_type", "amount", "currency", "amount_base", "journal", "movement_date")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("partner", "currency", "journal")
