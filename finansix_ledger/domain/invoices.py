"""Invoice aggregation - which installments and charges make up a statement"""

from datetime import date
from typing import Iterable, List, Optional

from finansix_ledger.domain.billing_cycle import get_invoice_period, parse_billing_month
from finansix_ledger.domain.models import (
    CreditCard,
    Installment,
    InstallmentStatus,
    InvoiceItem,
    InvoiceMatch,
    InvoicePeriod,
    InvoiceStatement,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from finansix_ledger.domain.money import add_cents


def is_standalone_charge(txn: Transaction, card_id: str) -> bool:
    """Card expense that is not split into installments and still counts"""
    return (
        txn.credit_card_id == card_id
        and not txn.is_installment
        and txn.type == TransactionType.EXPENSE
        and txn.status != TransactionStatus.CANCELLED
    )


def match_charge(txn: Transaction, period: InvoicePeriod) -> Optional[InvoiceMatch]:
    """
    Decide whether a standalone charge belongs to the invoice.

    The purchase window is checked first. Charges outside it still match
    when they fall in the statement's calendar month, which keeps imported
    entries that never had a cycle assigned on some statement. A charge made
    after the closing day therefore shows up on two consecutive statements.
    """
    if period.purchase_start <= txn.transaction_date <= period.purchase_end:
        return InvoiceMatch.CYCLE_WINDOW
    month = period.reference_month
    if (txn.transaction_date.year, txn.transaction_date.month) == (month.year, month.month):
        return InvoiceMatch.MONTH_PREFIX
    return None


def _installment_item(inst: Installment) -> InvoiceItem:
    is_paid = inst.status == InstallmentStatus.PAID
    paid = 0
    if is_paid:
        paid = inst.paid_amount_cents if inst.paid_amount_cents is not None else inst.amount_cents
    return InvoiceItem(
        source_id=inst.id,
        description=f"Installment {inst.installment_number}/{inst.total_installments}",
        amount_cents=inst.amount_cents,
        date=inst.due_date,
        matched_by=InvoiceMatch.BILLING_MONTH,
        is_settled=is_paid,
        paid_cents=paid,
        installment_number=inst.installment_number,
        total_installments=inst.total_installments,
    )


def _charge_item(txn: Transaction, matched_by: InvoiceMatch) -> InvoiceItem:
    is_paid = txn.status == TransactionStatus.COMPLETED
    return InvoiceItem(
        source_id=txn.id,
        description=txn.description,
        amount_cents=txn.amount_cents,
        date=txn.transaction_date,
        matched_by=matched_by,
        is_settled=is_paid,
        paid_cents=txn.amount_cents if is_paid else 0,
    )


def collect_invoice_items(
    card: CreditCard,
    period: InvoicePeriod,
    installments: Iterable[Installment],
    transactions: Iterable[Transaction],
) -> List[InvoiceItem]:
    items = [
        _installment_item(inst)
        for inst in installments
        if inst.credit_card_id == card.id and parse_billing_month(inst.billing_month) == period.reference_month
    ]

    for txn in transactions:
        if not is_standalone_charge(txn, card.id):
            continue
        matched_by = match_charge(txn, period)
        if matched_by is not None:
            items.append(_charge_item(txn, matched_by))

    return items


def build_invoice_statement(
    card: CreditCard,
    billing_month: date,
    installments: Iterable[Installment],
    transactions: Iterable[Transaction],
    today: date,
) -> InvoiceStatement:
    """
    Aggregate one card's invoice for a billing month.

    Items:
    - Installments whose billing_month is the target month
    - Standalone charges inside the purchase window, or dated in the target month

    Status is "paid" once the settled amounts cover a non-zero total.
    """
    month = parse_billing_month(billing_month)
    period = get_invoice_period(card, month, today)
    items = collect_invoice_items(card, period, installments, transactions)

    total = add_cents(*(item.amount_cents for item in items))
    paid = add_cents(*(item.paid_cents for item in items))

    if total > 0 and paid >= total:
        period = get_invoice_period(card, month, today, is_paid=True)

    return InvoiceStatement(
        card_id=card.id,
        card_name=card.name,
        billing_month=month,
        period=period,
        items=items,
        total_cents=total,
        paid_cents=paid,
    )
