import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def record_audit_log(table_name, record_id, action, old_values=None,
                     new_values=None, user_id=None, ip_address=None):
    # import models lazily to avoid circular imports at module import time
    from .models import AuditLog

    entry = AuditLog.objects.create(
        table_name=table_name,
        record_id=record_id,
        action=action,
        old_values=old_values,
        new_values=new_values,
        user_id=user_id,
        ip_address=ip_address,
    )
    logger.debug("Audit %s %s(%s) stored as #%s", action, table_name, record_id, entry.pk)
    return entry.pk
