import logging
from decimal import Decimal, InvalidOperation
from django.db import transaction
from ..exceptions import (CurrencyMismatch, InvalidAmount, JournalNotPosted,
                          NotFound)
from ..models import CapitalMovement, Currency, Journal, Partner
from ..models.capital import MOVEMENT_TYPES
from .audit_helper import log_action

logger = logging.getLogger(__name__)


def _positive(value, field):
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"{field} is not a decimal: {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount(f"{field} must be positive, got {amount}")
    return amount


def create_capital_movement(partner_id, movement_type, amount, currency,
                            amount_base, journal_id, movement_date,
                            description="", user=None, ip_address=None):
    """
    Tag a posted journal as a partner contribution or draw.
    The journal carries the accounting; this row only annotates it.
    """
    if movement_type not in dict(MOVEMENT_TYPES):
        raise InvalidAmount(f"Unknown movement type {movement_type!r}")
    amount = _positive(amount, "amount")
    amount_base = _positive(amount_base, "amount_base")

    with transaction.atomic():
        try:
            partner = Partner.objects.select_related("capital_account").get(pk=partner_id)
        except Partner.DoesNotExist:
            raise NotFound("Partner", partner_id)
        try:
            journal = Journal.objects.get(pk=journal_id)
        except Journal.DoesNotExist:
            raise NotFound("Journal", journal_id)
        try:
            currency = Currency.objects.get(pk=getattr(currency, "pk", currency))
        except Currency.DoesNotExist:
            raise NotFound("Currency", currency)
        if not journal.is_posted:
            raise JournalNotPosted(journal.pk)
        # movements are kept in the currency of the partner's capital account
        capital_account = partner.capital_account
        if capital_account is not None and capital_account.currency_id != currency.pk:
            raise CurrencyMismatch(currency.pk, capital_account.currency_id)

        movement = CapitalMovement.objects.create(
            partner=partner,
            movement_type=movement_type,
            amount=amount,
            currency=currency,
            amount_base=amount_base,
            journal=journal,
            description=description or "",
            movement_date=movement_date,
        )

        log_action(
            action="create",
            table_name="capital_movements",
            record_id=movement.pk,
            new_values={
                "partner_id": partner.pk,
                "movement_type": movement_type,
                "amount": amount,
                "currency": currency.pk,
                "amount_base": amount_base,
                "journal_id": journal.pk,
                "movement_date": movement_date,
            },
            user=user,
            ip_address=ip_address,
        )
    logger.info("Capital %s of %s %s recorded for %s", movement_type, amount, currency.pk, partner)
    return movement


def list_capital_movements(partner_id=None, start_date=None, end_date=None,
                           movement_type=None):
    qs = CapitalMovement.objects.select_related("partner", "currency", "journal")
    if partner_id is not None:
        qs = qs.filter(partner_id=partner_id)
    if start_date is not None:
        qs = qs.filter(movement_date__gte=start_date)
    if end_date is not None:
        qs = qs.filter(movement_date__lte=end_date)
    if movement_type is not None:
        qs = qs.filter(movement_type=movement_type)
    return list(qs.order_by("-movement_date", "-id"))
