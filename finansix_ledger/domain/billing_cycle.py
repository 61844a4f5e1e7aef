"""Billing cycle calculation for credit card statements"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List

from finansix_ledger.domain.exceptions import ConsistencyError, ValidationError
from finansix_ledger.domain.models import CreditCard, InvoicePeriod, InvoiceStatus, Transaction
from finansix_ledger.utils.date_utils import add_months, clamp_day, days_between, month_start, next_day


def validate_card_days(closing_day: int, due_day: int) -> None:
    """Reject closing/due days outside 1-31"""
    if not 1 <= closing_day <= 31:
        raise ValidationError(f"closing_day must be between 1 and 31, got {closing_day}", field="closing_day")
    if not 1 <= due_day <= 31:
        raise ValidationError(f"due_day must be between 1 and 31, got {due_day}", field="due_day")


def parse_billing_month(value: date | str) -> date:
    """
    Normalize a billing month identifier to the first day of its month.

    Accepts a date or an ISO "YYYY-MM" / "YYYY-MM-DD" string.

    Raises:
        ConsistencyError: If the value cannot be resolved to a calendar month
    """
    if isinstance(value, date):
        return month_start(value)
    try:
        parts = value.split("-")
        if len(parts) == 2:
            return date(int(parts[0]), int(parts[1]), 1)
        return month_start(date.fromisoformat(value))
    except (AttributeError, TypeError, ValueError) as e:
        raise ConsistencyError(f"Cannot resolve billing month from {value!r}") from e


def closing_date(card: CreditCard, reference_month: date) -> date:
    """Statement closing date within the reference month"""
    return clamp_day(reference_month.year, reference_month.month, card.closing_day)


def due_date(card: CreditCard, reference_month: date) -> date:
    """
    Payment due date for the statement closing in the reference month.

    Cards whose due day comes before the closing day are paid in the
    following month (close on the 25th, pay on the 10th). Otherwise payment
    falls in the closing month itself.
    """
    if card.due_day < card.closing_day:
        due_month = add_months(month_start(reference_month), 1)
    else:
        due_month = month_start(reference_month)
    return clamp_day(due_month.year, due_month.month, card.due_day)


def invoice_status(closing: date, due: date, today: date, is_paid: bool = False) -> InvoiceStatus:
    if is_paid:
        return InvoiceStatus.PAID
    if today < closing:
        return InvoiceStatus.OPEN
    if today <= due:
        return InvoiceStatus.CLOSED
    return InvoiceStatus.OVERDUE


def get_invoice_period(
    card: CreditCard,
    reference_month: date,
    today: date,
    is_paid: bool = False,
) -> InvoicePeriod:
    """
    Compute the billing cycle closing in the reference month.

    The purchase window runs from the day after the previous month's
    closing date up to and including this month's closing date.
    """
    validate_card_days(card.closing_day, card.due_day)
    month = month_start(reference_month)

    closing = closing_date(card, month)
    due = due_date(card, month)
    purchase_start = next_day(closing_date(card, add_months(month, -1)))

    return InvoicePeriod(
        card_id=card.id,
        reference_month=month,
        label=month.strftime("%Y-%m"),
        purchase_start=purchase_start,
        purchase_end=closing,
        closing_date=closing,
        due_date=due,
        status=invoice_status(closing, due, today, is_paid),
    )


def billing_month_for_purchase(card: CreditCard, purchase_date: date) -> date:
    """
    Billing month a purchase is charged in.

    A purchase on or after that month's closing date rolls to the next
    month's statement; anything earlier bills in the purchase month.
    """
    validate_card_days(card.closing_day, card.due_day)
    month = month_start(purchase_date)
    if purchase_date >= closing_date(card, month):
        return add_months(month, 1)
    return month


def get_invoice_for_purchase(card: CreditCard, purchase_date: date, today: date) -> InvoicePeriod:
    return get_invoice_period(card, billing_month_for_purchase(card, purchase_date), today)


def get_current_invoice(card: CreditCard, today: date) -> InvoicePeriod:
    """Open invoice that a purchase made today would land on"""
    return get_invoice_for_purchase(card, today, today)


def get_upcoming_invoices(card: CreditCard, today: date, count: int = 3) -> List[InvoicePeriod]:
    """Current invoice followed by the next `count - 1` cycles"""
    first = billing_month_for_purchase(card, today)
    return [get_invoice_period(card, add_months(first, i), today) for i in range(count)]


def days_until_closing(card: CreditCard, today: date) -> int:
    return days_between(today, get_current_invoice(card, today).closing_date)


def days_until_due(card: CreditCard, today: date) -> int:
    return days_between(today, get_current_invoice(card, today).due_date)


def group_by_billing_month(
    transactions: Iterable[Transaction], card: CreditCard
) -> Dict[date, List[Transaction]]:
    """Bucket card purchases by the statement they are billed on"""
    grouped: Dict[date, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[billing_month_for_purchase(card, txn.transaction_date)].append(txn)
    return dict(grouped)
