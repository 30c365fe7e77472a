from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import Account, Journal, JournalLine, Period

"""Accounts are never hard-deleted; deactivate them instead."""


# pre_delete signal auto-fires just before Django deletes a model instance
@receiver(pre_delete, sender=Account)
def prevent_delete_account(sender, instance, **kwargs):
    raise ValidationError(
        f"Account {instance.code} cannot be deleted; deactivate it instead.")


"""Block deletion of posted journals (and, through cascades, their lines)."""


@receiver(pre_delete, sender=Journal)
def prevent_delete_posted_journal(sender, instance, **kwargs):
    if instance.status == "posted":
        raise ValidationError("Cannot delete a posted journal.")


@receiver(pre_delete, sender=JournalLine)
def prevent_delete_posted_journal_line(sender, instance, **kwargs):
    # queryset deletes skip JournalLine.delete(), the signal still fires
    if Journal.objects.filter(pk=instance.journal_id, status="posted").exists():
        raise ValidationError("Cannot delete JournalLine: parent journal is posted.")


"""Block deletion if period still owns journals."""


@receiver(pre_delete, sender=Period)
def prevent_delete_period_with_journals(sender, instance, **kwargs):
    if Journal.objects.filter(period=instance).exists():
        raise ValidationError("Cannot delete a period that has journals.")
