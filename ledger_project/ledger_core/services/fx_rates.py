import logging
from decimal import Decimal, InvalidOperation
from django.db import IntegrityError, transaction
from ..exceptions import (CannotCreateLockedRate, DuplicateFxRate, InvalidRate,
                          NoAccountingPeriodFound, NotFound)
from ..models import Currency, FxRate, Period
from .audit_helper import log_action

logger = logging.getLogger(__name__)

# Rate used by dashboard-style aggregates when a pair has never been quoted.
# Journals and posting never fall back to it; they only trust explicit rates.
FALLBACK_RATE = Decimal("1")

# FxRate.rate is stored with six decimal places
RATE_PLACES = 6


def to_decimal(value):
    if isinstance(value, Decimal):
        rate = value
    else:
        try:
            rate = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidRate(f"Not a decimal rate: {value!r}")
    # NaN and Infinity parse fine but cannot be compared or stored
    if not rate.is_finite():
        raise InvalidRate(f"Not a finite rate: {value!r}")
    if rate.normalize().as_tuple().exponent < -RATE_PLACES:
        raise InvalidRate(f"FX rate allows at most {RATE_PLACES} decimal places, got {value}")
    return rate


def _get_currency(code):
    if isinstance(code, Currency):
        return code
    try:
        return Currency.objects.get(pk=code)
    except Currency.DoesNotExist:
        raise NotFound("Currency", code)


def create_fx_rate(from_currency, to_currency, rate, effective_date,
                   is_locked=False, user=None, ip_address=None):
    rate = to_decimal(rate)
    if rate <= 0:
        raise InvalidRate(f"FX rate must be positive, got {rate}")
    from_cur = _get_currency(from_currency)
    to_cur = _get_currency(to_currency)
    if from_cur.pk == to_cur.pk:
        raise InvalidRate(f"FX rate needs two different currencies, got {from_cur.pk}/{to_cur.pk}")

    with transaction.atomic():
        if FxRate.objects.for_pair(from_cur, to_cur).filter(effective_date=effective_date).exists():
            raise DuplicateFxRate(from_cur.pk, to_cur.pk, effective_date)

        # effective_date must land inside an existing period
        period = Period.objects.for_month(effective_date.year, effective_date.month).first()
        if period is None:
            raise NoAccountingPeriodFound(effective_date.year, effective_date.month)
        # Back-filling an unlocked rate into a locked month is allowed, a locked one is not
        if period.is_locked and is_locked:
            raise CannotCreateLockedRate(period)

        try:
            with transaction.atomic():
                fx_rate = FxRate.objects.create(
                    from_currency=from_cur,
                    to_currency=to_cur,
                    rate=rate,
                    effective_date=effective_date,
                    is_locked=is_locked,
                    created_by=user,
                )
        except IntegrityError:
            raise DuplicateFxRate(from_cur.pk, to_cur.pk, effective_date)

        log_action(
            action="create",
            table_name="fx_rates",
            record_id=fx_rate.pk,
            new_values={
                "from_currency": from_cur.pk,
                "to_currency": to_cur.pk,
                "rate": rate,
                "effective_date": effective_date,
                "is_locked": is_locked,
            },
            user=user,
            ip_address=ip_address,
        )
    logger.info("FX rate %s created", fx_rate)
    return fx_rate


def latest_rate(from_currency, to_currency, as_of=None):
    """Most recent rate for the pair effective on or before ``as_of``.

    Falls back to 1 when no rate exists. Only meant for non-authoritative
    aggregates.
    """
    qs = FxRate.objects.for_pair(from_currency, to_currency)
    if as_of is not None:
        qs = qs.filter(effective_date__lte=as_of)
    fx_rate = qs.order_by("-effective_date").first()
    if fx_rate is None:
        return FALLBACK_RATE
    return fx_rate.rate


def list_fx_rates(from_currency=None, to_currency=None, from_date=None,
                  to_date=None, is_locked=None):
    qs = FxRate.objects.select_related("from_currency", "to_currency")
    if from_currency is not None:
        qs = qs.filter(from_currency=from_currency)
    if to_currency is not None:
        qs = qs.filter(to_currency=to_currency)
    if from_date is not None:
        qs = qs.filter(effective_date__gte=from_date)
    if to_date is not None:
        qs = qs.filter(effective_date__lte=to_date)
    if is_locked is not None:
        qs = qs.filter(is_locked=is_locked)
    return list(qs.order_by("-effective_date", "-id"))
