from django.conf import settings  # To access global project settings
from django.db import models


# ---------- Audit / Event log ----------
class AuditLog(
    models.Model
):  # Gives accountability and traceability across the ledger
    # Which table the change touched (e.g. "journals", "periods")
    table_name = models.CharField(max_length=100)
    # The primary key (or identifier) of the changed row
    record_id = models.CharField(max_length=100)
    # Type of event being logged
    action = models.CharField(
        max_length=50
    )  # Common choices: create, update, post, close
    # Store actual before/after details of what changed, in JSON format
    old_values = models.JSONField(null=True, blank=True)
    new_values = models.JSONField(null=True, blank=True)
    # Which user performed the action
    # (Nullable in case the action was automated
    # (e.g., background job, import script))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    # Timestamp when the event was logged
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        # Filter logs quickly
        indexes = [
            models.Index(fields=["table_name", "record_id"], name="audit_table_record_idx"),
            models.Index(fields=["created_at"], name="audit_created_idx"),
        ]
        ordering = ("-created_at", "-id")

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {self.user} {self.action} {self.table_name}({self.record_id})"
