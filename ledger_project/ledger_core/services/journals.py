import logging
from decimal import Decimal, InvalidOperation
from django.db import IntegrityError, models, transaction
from ..exceptions import (CannotModifyPosted, DuplicateLineNumber, DuplicateReference,
                          InactiveOrMissingAccount, InvalidLineAmounts,
                          JournalDateOutsidePeriod, LedgerValidationError,
                          LockedPeriod, NotFound)
from ..models import Account, FxRate, Journal, JournalLine, Period
from ..models.journal import CENT
from .audit_helper import log_action

logger = logging.getLogger(__name__)


# ----------------------------
# Account directory lookups
# ----------------------------
def get_account(account_id):
    try:
        return Account.objects.select_related("currency").get(pk=account_id)
    except Account.DoesNotExist:
        raise NotFound("Account", account_id)


def get_account_by_code(code):
    try:
        return Account.objects.select_related("currency").get(code=code)
    except Account.DoesNotExist:
        raise NotFound("Account", code)


# ----------------------------
# Journal-related workflows
# ----------------------------
def create_journal(reference, description, journal_date, period_id,
                   fx_rate_id=None, user=None, ip_address=None):
    """
    Open a draft journal in a period.
    The period row is locked so a concurrent close cannot slip in between
    the status check and the insert.
    """
    with transaction.atomic():
        try:
            period = Period.objects.select_for_update().get(pk=period_id)
        except Period.DoesNotExist:
            raise NotFound("Period", period_id)
        if period.is_locked:
            raise LockedPeriod(period)

        fx_rate = None
        if fx_rate_id is not None:
            try:
                fx_rate = FxRate.objects.get(pk=fx_rate_id)
            except FxRate.DoesNotExist:
                raise NotFound("FxRate", fx_rate_id)

        if Journal.objects.filter(period=period, reference=reference).exists():
            raise DuplicateReference(reference, period)
        if not period.contains(journal_date):
            raise JournalDateOutsidePeriod(journal_date, period)

        try:
            with transaction.atomic():
                journal = Journal.objects.create(
                    reference=reference,
                    description=description or "",
                    journal_date=journal_date,
                    period=period,
                    fx_rate=fx_rate,
                    status="draft",
                    created_by=user,
                )
        except IntegrityError:
            raise DuplicateReference(reference, period)

        log_action(
            action="create",
            table_name="journals",
            record_id=journal.pk,
            new_values={
                "reference": reference,
                "journal_date": journal_date,
                "period": str(period),
                "fx_rate_id": fx_rate_id,
            },
            user=user,
            ip_address=ip_address,
        )
    logger.info("Journal %s created in %s", journal.reference, period)
    return journal


def _to_amount(value):
    if value is None:
        return Decimal("0.00")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise LedgerValidationError(f"Not a decimal amount: {value!r}")
    if not amount.is_finite():
        raise LedgerValidationError(f"Not a finite amount: {value!r}")
    return amount


def add_journal_line(journal_id, account_id, description, debit, credit,
                     line_number=None, user=None, ip_address=None):
    """
    Append a line to a draft journal.
    Base amounts are fixed here, from the journal's own rate; the journal
    totals are left alone until posting.
    """
    debit = _to_amount(debit)
    credit = _to_amount(credit)

    with transaction.atomic():
        # Lock the journal so posting cannot run while the line goes in
        try:
            journal = Journal.objects.select_for_update().select_related("fx_rate").get(pk=journal_id)
        except Journal.DoesNotExist:
            raise NotFound("Journal", journal_id)
        if journal.is_posted:
            raise CannotModifyPosted(journal.pk)

        account = Account.objects.active().select_related("currency").filter(pk=account_id).first()
        if account is None:
            raise InactiveOrMissingAccount(account_id)

        one_side = (debit > 0 and credit == 0) or (credit > 0 and debit == 0)
        if debit < 0 or credit < 0 or not one_side:
            raise InvalidLineAmounts(debit, credit)
        if debit != debit.quantize(CENT) or credit != credit.quantize(CENT):
            raise InvalidLineAmounts(debit, credit)

        if line_number is None:
            current = journal.lines.aggregate(n=models.Max("line_number"))["n"]
            line_number = (current or 0) + 1
        elif line_number <= 0:
            raise LedgerValidationError(f"line_number must be positive, got {line_number}")
        elif journal.lines.filter(line_number=line_number).exists():
            raise DuplicateLineNumber(journal.pk, line_number)

        line = JournalLine(
            journal=journal,
            account=account,
            description=description or "",
            debit_amount=debit,
            credit_amount=credit,
            line_number=line_number,
        )
        line.compute_base_amounts()
        line.save()

        log_action(
            action="create",
            table_name="journal_lines",
            record_id=line.pk,
            new_values={
                "journal_id": journal.pk,
                "account_id": account.pk,
                "line_number": line_number,
                "debit_amount": line.debit_amount,
                "credit_amount": line.credit_amount,
                "debit_amount_base": line.debit_amount_base,
                "credit_amount_base": line.credit_amount_base,
            },
            user=user,
            ip_address=ip_address,
        )
    logger.debug("Line %s added to journal %s", line_number, journal.reference)
    return line


def list_journals(period_id=None, status=None, date_from=None, date_to=None,
                  limit=50, offset=0):
    qs = Journal.objects.select_related("period")
    if period_id is not None:
        qs = qs.filter(period_id=period_id)
    if status is not None:
        qs = qs.filter(status=status)
    if date_from is not None:
        qs = qs.filter(journal_date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(journal_date__lte=date_to)
    qs = qs.order_by("-journal_date", "-id")
    return list(qs[offset:offset + limit])


def journal_lines(journal_id):
    if not Journal.objects.filter(pk=journal_id).exists():
        raise NotFound("Journal", journal_id)
    return list(
        JournalLine.objects.filter(journal_id=journal_id)
        .select_related("account")
        .order_by("line_number", "id")
    )
