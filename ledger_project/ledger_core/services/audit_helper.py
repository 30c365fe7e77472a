import json
import logging
from typing import Optional
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

logger = logging.getLogger(__name__)


def _jsonable(values):
    # Decimals, dates and datetimes become strings so the payload survives the broker
    if values is None:
        return None
    return json.loads(json.dumps(values, cls=DjangoJSONEncoder))


def log_action(
    *,
    action: str,
    table_name: str,
    record_id,
    old_values: dict | None = None,
    new_values: dict | None = None,
    user=None,
    ip_address: Optional[str] = None,
):
    """
    Central audit logger.
    The row is written by a Celery task once the surrounding transaction
    commits; a rolled back mutation is never logged. Dispatch failures are
    logged and swallowed so they can never undo the mutation itself.
    """
    payload = {
        "table_name": table_name,
        "record_id": str(record_id),
        "action": action,
        "old_values": _jsonable(old_values),
        "new_values": _jsonable(new_values),
        "user_id": getattr(user, "pk", None),
        "ip_address": ip_address,
    }

    def dispatch():
        # imported lazily: tasks -> models -> services would otherwise loop
        from ..tasks import record_audit_log

        try:
            record_audit_log.delay(**payload)
        except Exception:
            logger.exception(
                "Audit log dispatch failed for %s(%s) %s",
                table_name, record_id, action,
            )

    transaction.on_commit(dispatch)
