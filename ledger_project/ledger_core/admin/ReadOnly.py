from django.contrib import admin
from django.core.exceptions import PermissionDenied

# filters offered when the model has the field
APPEND_ONLY_FILTERS = ("table_name", "action", "movement_type", "currency")


"""Base admin for append-only rows: audit trail and capital annotations."""
class ReadOnlyAdmin(admin.ModelAdmin):
    list_per_page = 50
    ordering = ("-id",)

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    # rows are written by services and the audit task only
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    # detail page stays viewable; save_model below refuses writes
    def has_change_permission(self, request, obj=None):
        return request.user.is_active and request.user.is_staff

    def save_model(self, request, obj, form, change):
        raise PermissionDenied(f"{self.model._meta.verbose_name} rows are append-only.")

    def get_actions(self, request):
        # no delete_selected
        return {}

    def get_list_filter(self, request):
        names = {f.name for f in self.model._meta.fields}
        return tuple(name for name in APPEND_ONLY_FILTERS if name in names)
