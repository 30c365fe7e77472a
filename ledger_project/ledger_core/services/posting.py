import logging
from decimal import Decimal
from django.db import transaction
from django.utils import timezone
from ..exceptions import (AlreadyPosted, ConsistencyViolation, LockedPeriod,
                          MissingBaseAmount, MissingLines, NotFound,
                          Unbalanced, UnbalancedBase, UnbalancedLine)
from ..models import Journal
from .audit_helper import log_action

logger = logging.getLogger(__name__)


def _check_lines(lines):
    """Per-line checks; returns the four column totals."""
    total_debit = total_credit = Decimal("0.00")
    total_debit_base = total_credit_base = Decimal("0.00")
    for line in lines:
        if not line.has_one_side:
            raise UnbalancedLine(line.line_number)
        # the non-zero side must have been converted at line creation
        if line.debit_amount > 0 and line.debit_amount_base <= 0:
            raise MissingBaseAmount(line.line_number)
        if line.credit_amount > 0 and line.credit_amount_base <= 0:
            raise MissingBaseAmount(line.line_number)
        total_debit += line.debit_amount
        total_credit += line.credit_amount
        total_debit_base += line.debit_amount_base
        total_credit_base += line.credit_amount_base
    return total_debit, total_credit, total_debit_base, total_credit_base


def post_journal(journal_id, user=None, ip_address=None):
    """
    Draft -> Posted, the only way a journal ever changes status.

    Runs in one transaction with the journal row locked, so two concurrent
    calls serialize: one posts, the other sees AlreadyPosted. Any failed
    check leaves the journal exactly as it was.
    """
    with transaction.atomic():
        # Lock the row to avoid race conditions
        try:
            journal = Journal.objects.select_for_update().get(pk=journal_id)
        except Journal.DoesNotExist:
            raise NotFound("Journal", journal_id)

        if journal.is_posted:
            raise AlreadyPosted(journal.pk)
        if journal.period.is_locked:
            raise LockedPeriod(journal.period)

        lines = list(journal.lines.order_by("line_number", "id"))
        if not lines:
            raise MissingLines(journal.pk)

        try:
            debit, credit, debit_base, credit_base = _check_lines(lines)
            # Double-entry must hold in the transaction currency ...
            if debit != credit:
                raise Unbalanced(debit, credit)
            # ... and in the base currency
            if debit_base != credit_base:
                raise UnbalancedBase(debit_base, credit_base)
        except ConsistencyViolation as exc:
            logger.warning("Posting of journal %s rejected: %s", journal.reference, exc)
            raise

        journal.status = "posted"
        journal.total_debit = debit
        journal.total_credit = credit
        journal.posted_by = user
        journal.posted_at = timezone.now()
        journal.save(update_fields=[
            "status", "total_debit", "total_credit",
            "posted_by", "posted_at", "updated_at",
        ])

        log_action(
            action="post",
            table_name="journals",
            record_id=journal.pk,
            old_values={"status": "draft"},
            new_values={
                "status": "posted",
                "total_debit": debit,
                "total_credit": credit,
                "total_debit_base": debit_base,
                "total_credit_base": credit_base,
            },
            user=user,
            ip_address=ip_address,
        )
    logger.info("Journal %s posted (%s / %s)", journal.reference, debit, credit)
    return journal
