from django.core.exceptions import ObjectDoesNotExist


class LedgerError(Exception):
    """Base class for every error raised by the ledger services."""

    code = "ledger_error"


# ---------- Not found ----------
class NotFound(LedgerError, ObjectDoesNotExist):
    code = "not_found"

    def __init__(self, kind, pk):
        self.kind = kind
        self.pk = pk
        super().__init__(f"{kind} {pk} not found")


# ---------- Validation ----------
class LedgerValidationError(LedgerError):
    code = "validation_error"


class InvalidLineAmounts(LedgerValidationError):
    code = "invalid_line_amounts"

    def __init__(self, debit, credit):
        self.debit = debit
        self.credit = credit
        super().__init__(
            f"Journal line needs exactly one of debit/credit > 0 (debit={debit}, credit={credit})"
        )


class InvalidRate(LedgerValidationError):
    code = "invalid_rate"


class InvalidPeriod(LedgerValidationError):
    code = "invalid_period"


class InvalidAmount(LedgerValidationError):
    code = "invalid_amount"


class InactiveOrMissingAccount(LedgerValidationError):
    code = "inactive_or_missing_account"

    def __init__(self, account_id):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found or inactive")


class JournalDateOutsidePeriod(LedgerValidationError):
    code = "journal_date_outside_period"

    def __init__(self, journal_date, period):
        self.journal_date = journal_date
        self.period = period
        super().__init__(f"Journal date {journal_date} is outside period {period}")


class CurrencyMismatch(LedgerValidationError):
    code = "currency_mismatch"

    def __init__(self, currency, expected):
        self.currency = currency
        self.expected = expected
        super().__init__(f"Currency {currency} does not match capital account currency {expected}")


# ---------- State conflicts ----------
class StateConflict(LedgerError):
    code = "state_conflict"


class AlreadyPosted(StateConflict):
    code = "already_posted"

    def __init__(self, journal_id):
        self.journal_id = journal_id
        super().__init__(f"Journal {journal_id} is already posted")


class LockedPeriod(StateConflict):
    code = "locked_period"

    def __init__(self, period):
        self.period = period
        super().__init__(f"Period {period} is locked")


class CannotModifyPosted(StateConflict):
    code = "cannot_modify_posted"

    def __init__(self, journal_id):
        self.journal_id = journal_id
        super().__init__(f"Cannot modify posted journal {journal_id}")


class AlreadyLocked(StateConflict):
    code = "already_locked"

    def __init__(self, period):
        self.period = period
        super().__init__(f"Period {period} is already locked")


class CannotCreateLockedRate(StateConflict):
    code = "cannot_create_locked_rate"

    def __init__(self, period):
        self.period = period
        super().__init__(f"Cannot create locked FX rate for locked period {period}")


class JournalNotPosted(StateConflict):
    code = "journal_not_posted"

    def __init__(self, journal_id):
        self.journal_id = journal_id
        super().__init__(f"Journal {journal_id} must be posted first")


# ---------- Integrity violations ----------
class IntegrityViolation(LedgerError):
    code = "integrity_violation"


class DuplicateReference(IntegrityViolation):
    code = "duplicate_reference"

    def __init__(self, reference, period):
        self.reference = reference
        self.period = period
        super().__init__(f"Reference {reference!r} already used in period {period}")


class DuplicateFxRate(IntegrityViolation):
    code = "duplicate_fx_rate"

    def __init__(self, from_currency, to_currency, effective_date):
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.effective_date = effective_date
        super().__init__(
            f"FX rate already exists for {from_currency}/{to_currency} on {effective_date}"
        )


class DuplicatePeriod(IntegrityViolation):
    code = "duplicate_period"

    def __init__(self, year, month):
        self.year = year
        self.month = month
        super().__init__(f"Period for {year}-{month:02d} already exists")


class NonSequentialPeriod(IntegrityViolation):
    code = "non_sequential_period"

    def __init__(self, expected, requested):
        # (year, month) tuples
        self.expected = expected
        self.requested = requested
        super().__init__(
            "Periods must be created sequentially. "
            f"Expected next period: {expected[0]}-{expected[1]:02d}, "
            f"but got: {requested[0]}-{requested[1]:02d}"
        )


class NoAccountingPeriodFound(IntegrityViolation):
    code = "no_accounting_period_found"

    def __init__(self, year, month):
        self.year = year
        self.month = month
        super().__init__(f"No accounting period found for {year}-{month:02d}")


class DuplicateLineNumber(IntegrityViolation):
    code = "duplicate_line_number"

    def __init__(self, journal_id, line_number):
        self.journal_id = journal_id
        self.line_number = line_number
        super().__init__(f"Journal {journal_id} already has a line {line_number}")


# ---------- Consistency violations (posting / period close) ----------
class ConsistencyViolation(LedgerError):
    code = "consistency_violation"


class MissingLines(ConsistencyViolation):
    code = "missing_lines"

    def __init__(self, journal_id):
        self.journal_id = journal_id
        super().__init__(f"Journal {journal_id} has no lines")


class UnbalancedLine(ConsistencyViolation):
    code = "unbalanced_line"

    def __init__(self, line_number):
        self.line_number = line_number
        super().__init__(f"Line {line_number} must have exactly one of debit/credit > 0")


class MissingBaseAmount(ConsistencyViolation):
    code = "missing_base_amount"

    def __init__(self, line_number):
        self.line_number = line_number
        super().__init__(f"Line {line_number} has no base currency amount")


class Unbalanced(ConsistencyViolation):
    """Raised when a journal fails the double-entry balance check."""

    code = "unbalanced"

    def __init__(self, total_debit, total_credit):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(f"Journal not balanced: debits={total_debit}, credits={total_credit}")


class UnbalancedBase(ConsistencyViolation):
    """Raised when base currency totals drift apart even though transaction totals match."""

    code = "unbalanced_base"

    def __init__(self, total_debit_base, total_credit_base):
        self.total_debit_base = total_debit_base
        self.total_credit_base = total_credit_base
        super().__init__(
            f"Journal not balanced in base currency: debits={total_debit_base}, credits={total_credit_base}"
        )


class DraftJournalsRemain(ConsistencyViolation):
    code = "draft_journals_remain"

    def __init__(self, count):
        self.count = count
        super().__init__(f"{count} draft journal(s) remain in the period")


class UnlockedFxRatesRemain(ConsistencyViolation):
    code = "unlocked_fx_rates_remain"

    def __init__(self, count):
        self.count = count
        super().__init__(f"{count} unlocked FX rate(s) remain in the period")
