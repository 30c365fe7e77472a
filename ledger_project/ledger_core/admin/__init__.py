from .account import AccountAdmin, CurrencyAdmin, FxRateAdmin
from .actions import close_periods, post_journals
from .auditlog import AuditLogAdmin, CapitalMovementAdmin, PartnerAdmin
from .forms import JournalLineInlineForm
from .inlines import JournalLineInline
from .journal import JournalAdmin
from .period import PeriodAdmin
