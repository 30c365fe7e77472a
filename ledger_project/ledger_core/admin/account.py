from django.contrib import admin
from ledger_core.models import Account, Currency, FxRate


# Register `Account` model
@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    # show key accounting fields
    list_display = (
        "id",
        "code",
        "name",
        "account_type",
        "currency",
        "parent",
        "is_bank",
        "is_capital",
        "is_active",
    )
    list_filter = ("account_type", "currency", "is_active", "is_bank", "is_capital")
    search_fields = ("code", "name")
    ordering = ("code",)
    fieldsets = (
        (None, {"fields": ("code", "name", "account_type", "currency", "parent", "is_active")}),
        ("Reporting flags", {"fields": ("is_bank", "is_capital", "is_payroll_source", "is_intercompany")}),
    )

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("currency", "parent")

    # Accounts are deactivated, never deleted
    def has_delete_permission(self, request, obj=None):
        return False


# Register `Currency` model
@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "symbol", "decimal_places")
    search_fields = ("code", "name")


# Register `FxRate` model
@admin.register(FxRate)
class FxRateAdmin(admin.ModelAdmin):
    list_display = (
        "id", "from_currency", "to_currency", "rate", "effective_date", "is_locked", "created_by")
    list_filter = ("from_currency", "to_currency", "is_locked")
    date_hierarchy = "effective_date"
    # only the period close flips is_locked
    readonly_fields = ("is_locked", "created_by", "created_at")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("from_currency", "to_currency", "created_by")

    # Rates are shared by journals; edits go through new rows only
    def has_change_permission(self, request, obj=None):
        if obj is not None:
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return False
