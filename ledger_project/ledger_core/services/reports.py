import logging
from decimal import Decimal
from django.db import models
from django.db.models.functions import Coalesce
from ..models import JournalLine, Period

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _net(debit, credit):
    """Collapse a debit/credit pair onto the side that carries the balance."""
    net = debit - credit
    if net > 0:
        return net, ZERO
    return ZERO, -net


def _resolve_period(period_id):
    if period_id is None:
        return Period.objects.latest_period()
    return Period.objects.filter(pk=period_id).first()


# ---------- Trial balance ----------
def trial_balance(period_id=None):
    """
    One row per active account with posted activity in the period.
    Defaults to the latest period; returns [] when there is nothing to report.
    """
    period = _resolve_period(period_id)
    if period is None:
        return []

    aggregated = (
        JournalLine.objects.posted()
        .filter(journal__period=period, account__is_active=True)
        .values(
            "account_id",
            "account__code",
            "account__name",
            "account__account_type",
            "account__currency_id",
        )
        .annotate(
            debit=Coalesce(models.Sum("debit_amount"), ZERO),
            credit=Coalesce(models.Sum("credit_amount"), ZERO),
            debit_base=Coalesce(models.Sum("debit_amount_base"), ZERO),
            credit_base=Coalesce(models.Sum("credit_amount_base"), ZERO),
        )
        .order_by("account__code")
    )

    rows = []
    for agg in aggregated:
        debit_balance, credit_balance = _net(agg["debit"], agg["credit"])
        debit_balance_base, credit_balance_base = _net(agg["debit_base"], agg["credit_base"])
        rows.append({
            "account_id": agg["account_id"],
            "account_code": agg["account__code"],
            "account_name": agg["account__name"],
            "account_type": agg["account__account_type"],
            "currency": agg["account__currency_id"],
            "debit_balance": debit_balance,
            "credit_balance": credit_balance,
            "debit_balance_base": debit_balance_base,
            "credit_balance_base": credit_balance_base,
        })

    totals = trial_balance_totals(rows)
    if totals["debit_balance_base"] != totals["credit_balance_base"]:
        # Every posted journal balances in base, so the report must too
        logger.error(
            "Trial balance for %s out of balance in base currency: debits=%s credits=%s",
            period, totals["debit_balance_base"], totals["credit_balance_base"],
        )
    return rows


def trial_balance_totals(rows):
    totals = {
        "debit_balance": ZERO,
        "credit_balance": ZERO,
        "debit_balance_base": ZERO,
        "credit_balance_base": ZERO,
    }
    for row in rows:
        for key in totals:
            totals[key] += row[key]
    return totals


# ---------- General ledger ----------
def general_ledger(account_id=None, from_date=None, to_date=None):
    """
    Posted lines with a running debit-minus-credit balance per account.

    No opening balance is brought forward: with from_date set, the running
    balance starts at zero on the first line inside the window.
    """
    qs = JournalLine.objects.posted().select_related("account", "journal")
    if account_id is not None:
        qs = qs.filter(account_id=account_id)
    if from_date is not None:
        qs = qs.filter(journal__journal_date__gte=from_date)
    if to_date is not None:
        qs = qs.filter(journal__journal_date__lte=to_date)
    qs = qs.order_by("account_id", "journal__journal_date", "line_number", "journal_id")

    rows = []
    current_account = None
    running = ZERO
    for line in qs:
        if line.account_id != current_account:
            current_account = line.account_id
            running = ZERO
        running += line.debit_amount - line.credit_amount
        rows.append({
            "account_id": line.account_id,
            "account_code": line.account.code,
            "account_name": line.account.name,
            "journal_id": line.journal_id,
            "journal_reference": line.journal.reference,
            "journal_date": line.journal.journal_date,
            "line_number": line.line_number,
            "description": line.description,
            "debit_amount": line.debit_amount,
            "credit_amount": line.credit_amount,
            "debit_amount_base": line.debit_amount_base,
            "credit_amount_base": line.credit_amount_base,
            "running_balance": running,
        })
    return rows
