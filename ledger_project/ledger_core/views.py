import datetime
import functools
import json
import logging
from decimal import Decimal, InvalidOperation
from django.core.exceptions import ValidationError
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .exceptions import (ConsistencyViolation, IntegrityViolation, LedgerError,
                         LedgerValidationError, NotFound, StateConflict)
from .services import capital, fx_rates, journals, periods, posting, reports

logger = logging.getLogger(__name__)

# Error family -> HTTP status
ERROR_STATUS = (
    (NotFound, 404),
    (LedgerValidationError, 400),
    (StateConflict, 409),
    (IntegrityViolation, 409),
    (ConsistencyViolation, 422),
)


class BadRequest(LedgerValidationError):
    code = "bad_request"


def status_for(exc):
    for family, status in ERROR_STATUS:
        if isinstance(exc, family):
            return status
    return 400


def ledger_view(view):
    """Translate domain errors into JSON error bodies with the family's status."""
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except LedgerError as exc:
            return JsonResponse(
                {"ok": False, "code": exc.code, "error": str(exc)},
                status=status_for(exc),
            )
        except ValidationError as exc:
            # model-level guards (hierarchy cycles, frozen lines, ...)
            return JsonResponse(
                {"ok": False, "code": "validation_error", "error": exc.messages},
                status=400,
            )
    return wrapper


# ---------- request helpers ----------
def _body(request):
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequest("Request body must be JSON")
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def _required(data, key):
    if data.get(key) in (None, ""):
        raise BadRequest(f"{key} is required")
    return data[key]


def _date(value, key):
    if value in (None, ""):
        return None
    try:
        return datetime.date.fromisoformat(value)
    except (TypeError, ValueError):
        raise BadRequest(f"{key} must be an ISO date (YYYY-MM-DD)")


def _int(value, key):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"{key} must be an integer")


def _decimal(value, key):
    if value in (None, ""):
        return None
    try:
        # str() first so JSON floats keep their written digits
        return Decimal(str(value))
    except InvalidOperation:
        raise BadRequest(f"{key} must be a decimal")


def _bool(value):
    if value is None or isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes")


def _actor(request):
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user
    return None


def _ip(request):
    return request.META.get("REMOTE_ADDR") or None


def _period_json(period):
    return model_to_dict(period, fields=["id", "year", "month", "status", "fx_rate_locked"])


def _fx_rate_json(fx_rate):
    return {
        "id": fx_rate.pk,
        "from_currency": fx_rate.from_currency_id,
        "to_currency": fx_rate.to_currency_id,
        "rate": fx_rate.rate,
        "effective_date": fx_rate.effective_date,
        "is_locked": fx_rate.is_locked,
    }


def _journal_json(journal):
    return {
        "id": journal.pk,
        "reference": journal.reference,
        "description": journal.description,
        "journal_date": journal.journal_date,
        "period_id": journal.period_id,
        "status": journal.status,
        "total_debit": journal.total_debit,
        "total_credit": journal.total_credit,
        "fx_rate_id": journal.fx_rate_id,
        "posted_by": journal.posted_by_id,
        "posted_at": journal.posted_at,
    }


def _line_json(line):
    return model_to_dict(line, fields=[
        "id", "journal", "account", "description", "line_number",
        "debit_amount", "credit_amount", "debit_amount_base", "credit_amount_base",
    ])


def _movement_json(movement):
    return {
        "id": movement.pk,
        "partner_id": movement.partner_id,
        "movement_type": movement.movement_type,
        "amount": movement.amount,
        "currency": movement.currency_id,
        "amount_base": movement.amount_base,
        "journal_id": movement.journal_id,
        "description": movement.description,
        "movement_date": movement.movement_date,
    }


# ---------- periods ----------
@csrf_exempt
@require_http_methods(["GET", "POST"])
@ledger_view
def periods_view(request):
    if request.method == "GET":
        rows = periods.list_periods(
            status=request.GET.get("status") or None,
            year=_int(request.GET.get("year"), "year"),
        )
        return JsonResponse({"results": [_period_json(p) for p in rows]})

    data = _body(request)
    period = periods.create_period(
        year=_int(_required(data, "year"), "year"),
        month=_int(_required(data, "month"), "month"),
        status=data.get("status") or "open",
        fx_rate_locked=bool(_bool(data.get("fx_rate_locked"))),
        user=_actor(request),
        ip_address=_ip(request),
    )
    return JsonResponse(_period_json(period), status=201)


@csrf_exempt
@require_POST
@ledger_view
def close_period_view(request, period_id):
    period = periods.close_period(period_id, user=_actor(request), ip_address=_ip(request))
    return JsonResponse(_period_json(period))


# ---------- fx rates ----------
@csrf_exempt
@require_http_methods(["GET", "POST"])
@ledger_view
def fx_rates_view(request):
    if request.method == "GET":
        q = request.GET
        rows = fx_rates.list_fx_rates(
            from_currency=q.get("from_currency") or None,
            to_currency=q.get("to_currency") or None,
            from_date=_date(q.get("from_date"), "from_date"),
            to_date=_date(q.get("to_date"), "to_date"),
            is_locked=_bool(q.get("is_locked")) if "is_locked" in q else None,
        )
        return JsonResponse({"results": [_fx_rate_json(r) for r in rows]})

    data = _body(request)
    fx_rate = fx_rates.create_fx_rate(
        from_currency=_required(data, "from_currency"),
        to_currency=_required(data, "to_currency"),
        rate=_decimal(_required(data, "rate"), "rate"),
        effective_date=_date(_required(data, "effective_date"), "effective_date"),
        is_locked=bool(_bool(data.get("is_locked"))),
        user=_actor(request),
        ip_address=_ip(request),
    )
    return JsonResponse(_fx_rate_json(fx_rate), status=201)


# ---------- journals ----------
@csrf_exempt
@require_http_methods(["GET", "POST"])
@ledger_view
def journals_view(request):
    if request.method == "GET":
        q = request.GET
        rows = journals.list_journals(
            period_id=_int(q.get("period_id"), "period_id"),
            status=q.get("status") or None,
            date_from=_date(q.get("date_from"), "date_from"),
            date_to=_date(q.get("date_to"), "date_to"),
            limit=_int(q.get("limit"), "limit") or 50,
            offset=_int(q.get("offset"), "offset") or 0,
        )
        return JsonResponse({"results": [_journal_json(j) for j in rows]})

    data = _body(request)
    journal = journals.create_journal(
        reference=_required(data, "reference"),
        description=data.get("description") or "",
        journal_date=_date(_required(data, "journal_date"), "journal_date"),
        period_id=_int(_required(data, "period_id"), "period_id"),
        fx_rate_id=_int(data.get("fx_rate_id"), "fx_rate_id"),
        user=_actor(request),
        ip_address=_ip(request),
    )
    return JsonResponse(_journal_json(journal), status=201)


@csrf_exempt
@require_http_methods(["GET", "POST"])
@ledger_view
def journal_lines_view(request, journal_id):
    if request.method == "GET":
        rows = journals.journal_lines(journal_id)
        return JsonResponse({"results": [_line_json(line) for line in rows]})

    data = _body(request)
    line = journals.add_journal_line(
        journal_id,
        account_id=_int(_required(data, "account_id"), "account_id"),
        description=data.get("description") or "",
        debit=_decimal(data.get("debit_amount"), "debit_amount"),
        credit=_decimal(data.get("credit_amount"), "credit_amount"),
        line_number=_int(data.get("line_number"), "line_number"),
        user=_actor(request),
        ip_address=_ip(request),
    )
    return JsonResponse(_line_json(line), status=201)


@csrf_exempt
@require_POST
@ledger_view
def post_journal_view(request, journal_id):
    journal = posting.post_journal(journal_id, user=_actor(request), ip_address=_ip(request))
    return JsonResponse(_journal_json(journal))


# ---------- reports ----------
@require_GET
@ledger_view
def trial_balance_view(request):
    rows = reports.trial_balance(_int(request.GET.get("period_id"), "period_id"))
    return JsonResponse({"results": rows, "totals": reports.trial_balance_totals(rows)})


@require_GET
@ledger_view
def general_ledger_view(request):
    q = request.GET
    rows = reports.general_ledger(
        account_id=_int(q.get("account_id"), "account_id"),
        from_date=_date(q.get("from_date"), "from_date"),
        to_date=_date(q.get("to_date"), "to_date"),
    )
    return JsonResponse({"results": rows})


# ---------- capital ----------
@csrf_exempt
@require_http_methods(["GET", "POST"])
@ledger_view
def capital_movements_view(request):
    if request.method == "GET":
        q = request.GET
        rows = capital.list_capital_movements(
            partner_id=_int(q.get("partner_id"), "partner_id"),
            start_date=_date(q.get("start_date"), "start_date"),
            end_date=_date(q.get("end_date"), "end_date"),
            movement_type=q.get("movement_type") or None,
        )
        return JsonResponse({"results": [_movement_json(m) for m in rows]})

    data = _body(request)
    movement = capital.create_capital_movement(
        partner_id=_int(_required(data, "partner_id"), "partner_id"),
        movement_type=_required(data, "movement_type"),
        amount=_decimal(_required(data, "amount"), "amount"),
        currency=_required(data, "currency"),
        amount_base=_decimal(_required(data, "amount_base"), "amount_base"),
        journal_id=_int(_required(data, "journal_id"), "journal_id"),
        movement_date=_date(_required(data, "movement_date"), "movement_date"),
        description=data.get("description") or "",
        user=_actor(request),
        ip_address=_ip(request),
    )
    return JsonResponse(_movement_json(movement), status=201)
