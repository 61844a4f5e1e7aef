"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    CASH = "cash"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class InvoiceStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    PAID = "paid"
    OVERDUE = "overdue"


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PayableType(str, Enum):
    BILL = "bill"
    INVOICE = "invoice"


class PayableStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class InvoiceMatch(str, Enum):
    """How an item was attributed to an invoice"""

    BILLING_MONTH = "billing_month"
    CYCLE_WINDOW = "cycle_window"
    MONTH_PREFIX = "month_prefix"


@dataclass
class Account:
    """Bank, savings, investment or cash account"""

    id: str
    household_id: str
    name: str
    type: AccountType
    current_balance_cents: int
    is_active: bool = True


@dataclass
class CreditCard:
    """Credit card with its statement calendar"""

    id: str
    household_id: str
    name: str
    credit_limit_cents: int
    closing_day: int
    due_day: int
    grace_period_days: int = 0
    account_id: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True
    available_limit_cents: Optional[int] = None  # None: nothing outstanding reported

    @property
    def effective_available_limit_cents(self) -> int:
        if self.available_limit_cents is None:
            return self.credit_limit_cents
        return self.available_limit_cents


@dataclass
class Transaction:
    """Income, expense or transfer recorded by the user"""

    id: str
    household_id: str
    type: TransactionType
    status: TransactionStatus
    amount_cents: int
    transaction_date: date
    description: str = ""
    account_id: Optional[str] = None
    credit_card_id: Optional[str] = None
    is_installment: bool = False
    total_installments: int = 1
    is_reimbursable: bool = False
    reimbursed_amount_cents: int = 0


@dataclass
class Installment:
    """One dated slice of an installment purchase"""

    id: str
    household_id: str
    transaction_id: str
    credit_card_id: str
    installment_number: int
    total_installments: int
    amount_cents: int
    billing_month: date  # always day 1
    due_date: date
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_amount_cents: Optional[int] = None
    paid_at: Optional[datetime] = None


@dataclass
class ExpectedTransaction:
    """Recurring projected income or expense"""

    id: str
    household_id: str
    description: str
    type: TransactionType
    amount_cents: int
    recurrence_type: RecurrenceType
    start_date: date
    confidence_percent: int = 100
    day_of_month: Optional[int] = None
    day_of_week: Optional[int] = None  # 0=Sunday .. 6=Saturday
    end_date: Optional[date] = None
    is_active: bool = True


@dataclass
class InvoicePeriod:
    """One billing cycle of a card, derived on demand"""

    card_id: str
    reference_month: date
    label: str
    purchase_start: date
    purchase_end: date
    closing_date: date
    due_date: date
    status: InvoiceStatus


@dataclass
class InvoiceItem:
    """Installment or standalone charge that belongs to an invoice"""

    source_id: str
    description: str
    amount_cents: int
    date: date
    matched_by: InvoiceMatch
    is_settled: bool
    paid_cents: int = 0
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None


@dataclass
class InvoiceStatement:
    """Aggregated invoice for one card and billing month"""

    card_id: str
    card_name: str
    billing_month: date
    period: InvoicePeriod
    items: List[InvoiceItem]
    total_cents: int
    paid_cents: int

    @property
    def remaining_cents(self) -> int:
        return max(self.total_cents - self.paid_cents, 0)

    @property
    def is_paid(self) -> bool:
        return self.total_cents > 0 and self.paid_cents >= self.total_cents


@dataclass
class CardProjection:
    card_id: str
    card_name: Optional[str]
    amount_cents: int
    color: Optional[str] = None


@dataclass
class MonthlyProjection:
    """Pending installment obligations billed in one month"""

    month: date
    total_installments_cents: int = 0
    by_card: List[CardProjection] = field(default_factory=list)


@dataclass
class BalanceBreakdownItem:
    label: str
    value_cents: int
    type: str  # "positive" or "negative"


@dataclass
class FreeBalanceResult:
    """Spendable balance with its explanatory breakdown"""

    current_balance_cents: int
    pending_expenses_cents: int
    credit_card_due_cents: int
    expected_income_cents: int
    expected_expenses_cents: int
    pending_reimbursements_cents: int
    free_balance_cents: int
    breakdown: List[BalanceBreakdownItem]


@dataclass
class PayableAccount:
    """Standalone bill or card invoice in the payables worklist"""

    id: str
    description: str
    amount_cents: int
    due_date: date
    status: PayableStatus
    type: PayableType
    paid_amount_cents: int = 0
    card_id: Optional[str] = None
    transaction_id: Optional[str] = None

    @property
    def remaining_cents(self) -> int:
        return max(self.amount_cents - self.paid_amount_cents, 0)


@dataclass
class PayablesSummary:
    total_cents: int = 0
    pending_cents: int = 0
    overdue_cents: int = 0
    paid_cents: int = 0


@dataclass
class PayablesWorklist:
    month: date
    items: List[PayableAccount]
    summary: PayablesSummary


@dataclass
class CardRecommendation:
    """Card that defers payment the longest for a purchase"""

    card_id: str
    card_name: str
    days_until_payment: int
    closing_date: date
    due_date: date
    available_limit_cents: int
    reason: str
