"""Accounts payable worklist - card invoices and standalone bills"""

from datetime import date
from typing import Iterable, List, Optional

from finansix_ledger.domain.models import (
    InvoiceStatement,
    PayableAccount,
    PayablesSummary,
    PayableStatus,
    PayableType,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from finansix_ledger.domain.money import add_cents


def invoice_payable(statement: InvoiceStatement, today: date) -> Optional[PayableAccount]:
    """
    Turn a card statement into a virtual payable.

    Statements with nothing on them are skipped. Invoices have no row of
    their own, so the id is derived from card and month.
    """
    if statement.total_cents <= 0:
        return None

    due = statement.period.due_date
    if statement.is_paid:
        status = PayableStatus.PAID
    elif due < today:
        status = PayableStatus.OVERDUE
    elif statement.paid_cents > 0:
        status = PayableStatus.PARTIAL
    else:
        status = PayableStatus.PENDING

    return PayableAccount(
        id=f"invoice-{statement.card_id}-{statement.billing_month:%Y-%m}",
        description=f"{statement.card_name} invoice",
        amount_cents=statement.total_cents,
        due_date=due,
        status=status,
        type=PayableType.INVOICE,
        paid_amount_cents=min(statement.paid_cents, statement.total_cents),
        card_id=statement.card_id,
    )


def is_bill(txn: Transaction) -> bool:
    return (
        txn.type == TransactionType.EXPENSE
        and txn.credit_card_id is None
        and txn.status != TransactionStatus.CANCELLED
    )


def bill_payable(txn: Transaction, today: date) -> PayableAccount:
    if txn.status == TransactionStatus.COMPLETED:
        status = PayableStatus.PAID
    elif txn.transaction_date < today:
        status = PayableStatus.OVERDUE
    else:
        status = PayableStatus.PENDING

    return PayableAccount(
        id=txn.id,
        description=txn.description,
        amount_cents=txn.amount_cents,
        due_date=txn.transaction_date,
        status=status,
        type=PayableType.BILL,
        paid_amount_cents=txn.amount_cents if status == PayableStatus.PAID else 0,
        transaction_id=txn.id,
    )


def summarize_payables(items: Iterable[PayableAccount]) -> PayablesSummary:
    """
    Totals for the worklist header.

    Pending covers everything still owed, overdue remainders included;
    overdue is the owed part of overdue items only.
    """
    summary = PayablesSummary()
    for item in items:
        summary.total_cents = add_cents(summary.total_cents, item.amount_cents)
        summary.paid_cents = add_cents(summary.paid_cents, item.paid_amount_cents)
        if item.status == PayableStatus.PAID:
            continue
        summary.pending_cents = add_cents(summary.pending_cents, item.remaining_cents)
        if item.status == PayableStatus.OVERDUE:
            summary.overdue_cents = add_cents(summary.overdue_cents, item.remaining_cents)
    return summary


def merge_payables(
    statements: Iterable[InvoiceStatement],
    bills: Iterable[Transaction],
    today: date,
) -> List[PayableAccount]:
    """Invoices first, then bills, each list in input order"""
    invoices = [p for p in (invoice_payable(s, today) for s in statements) if p is not None]
    return invoices + [bill_payable(txn, today) for txn in bills if is_bill(txn)]
