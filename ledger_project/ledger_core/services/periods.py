import logging
from django.db import IntegrityError, connection, transaction
from ..exceptions import (AlreadyLocked, DraftJournalsRemain, DuplicatePeriod,
                          InvalidPeriod, NonSequentialPeriod, NotFound,
                          UnlockedFxRatesRemain)
from ..models import FxRate, Period
from ..models.period import MAX_YEAR, MIN_YEAR, PERIOD_STATUS, next_month
from .audit_helper import log_action

logger = logging.getLogger(__name__)

"""
    Periods are calendar months created strictly in sequence.
    Posting date determines the period; a locked period accepts no more journals.
"""


def _period_values(period):
    return {
        "year": period.year,
        "month": period.month,
        "status": period.status,
        "fx_rate_locked": period.fx_rate_locked,
    }


def _lock_empty_period_table():
    """
    With no period rows there is nothing for select_for_update to lock, so
    two "first period" creators could both succeed with different months.
    On PostgreSQL take a table lock that conflicts with itself and re-read;
    SQLite already serializes writers on the whole database.
    """
    if connection.vendor != "postgresql":
        return None
    with connection.cursor() as cursor:
        cursor.execute(
            f"LOCK TABLE {connection.ops.quote_name(Period._meta.db_table)} "
            "IN SHARE ROW EXCLUSIVE MODE"
        )
    return Period.objects.newest_first().first()


def create_period(year, month, status="open", fx_rate_locked=False,
                  user=None, ip_address=None):
    if status not in dict(PERIOD_STATUS):
        raise InvalidPeriod(f"Unknown period status {status!r}")
    if not (MIN_YEAR <= year <= MAX_YEAR):
        raise InvalidPeriod(f"year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")
    if not (1 <= month <= 12):
        raise InvalidPeriod(f"month must be between 1 and 12, got {month}")

    with transaction.atomic():
        if Period.objects.for_month(year, month).exists():
            raise DuplicatePeriod(year, month)

        # Lock the latest row so two creators cannot both extend the sequence
        latest = Period.objects.select_for_update().newest_first().first()
        if latest is None:
            latest = _lock_empty_period_table()
        if latest is not None:
            expected = next_month(latest.year, latest.month)
            if (year, month) != expected:
                raise NonSequentialPeriod(expected, (year, month))

        try:
            with transaction.atomic():
                period = Period.objects.create(
                    year=year,
                    month=month,
                    status=status,
                    fx_rate_locked=fx_rate_locked,
                )
        except IntegrityError:
            raise DuplicatePeriod(year, month)

        log_action(
            action="create",
            table_name="periods",
            record_id=period.pk,
            new_values=_period_values(period),
            user=user,
            ip_address=ip_address,
        )
    logger.info("Period %s created (%s)", period, period.status)
    return period


def close_period(period_id, user=None, ip_address=None):
    """
    Lock a period for good.
    Every journal in it must be posted, and its FX rates must already be
    locked unless the period was flagged fx_rate_locked up front.
    """
    with transaction.atomic():
        try:
            period = Period.objects.select_for_update().get(pk=period_id)
        except Period.DoesNotExist:
            raise NotFound("Period", period_id)

        if period.is_locked:
            raise AlreadyLocked(period)

        drafts = period.journals.drafts().count()
        if drafts:
            logger.warning("Close of %s rejected: %d draft journal(s)", period, drafts)
            raise DraftJournalsRemain(drafts)

        unlocked_rates = FxRate.objects.in_month(period.year, period.month).unlocked()
        if not period.fx_rate_locked:
            unlocked = unlocked_rates.count()
            if unlocked:
                logger.warning("Close of %s rejected: %d unlocked FX rate(s)", period, unlocked)
                raise UnlockedFxRatesRemain(unlocked)

        old_values = _period_values(period)
        period.status = "locked"
        period.fx_rate_locked = True
        period.save(update_fields=["status", "fx_rate_locked", "updated_at"])
        # rates left open under an fx_rate_locked period follow the period
        flipped = unlocked_rates.update(is_locked=True)

        log_action(
            action="close",
            table_name="periods",
            record_id=period.pk,
            old_values=old_values,
            new_values=_period_values(period),
            user=user,
            ip_address=ip_address,
        )
    logger.info("Period %s locked (%d FX rate(s) locked with it)", period, flipped)
    return period


def latest_period():
    return Period.objects.latest_period()


def period_for_date(day):
    """The period whose calendar month contains ``day``, or None."""
    return Period.objects.for_month(day.year, day.month).first()


def list_periods(status=None, year=None):
    qs = Period.objects.newest_first()
    if status is not None:
        qs = qs.filter(status=status)
    if year is not None:
        qs = qs.filter(year=year)
    return list(qs)
