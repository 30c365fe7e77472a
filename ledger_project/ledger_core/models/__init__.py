from .account import Account
from .auditlog import AuditLog
from .capital import CapitalMovement, Partner
from .currency import Currency
from .fx_rate import FxRate
from .journal import Journal, JournalLine
from .period import Period
