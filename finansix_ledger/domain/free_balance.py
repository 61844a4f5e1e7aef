"""Free (spendable) balance calculation"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List

from finansix_ledger.domain.models import (
    Account,
    BalanceBreakdownItem,
    ExpectedTransaction,
    FreeBalanceResult,
    Installment,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from finansix_ledger.domain.money import add_cents, multiply_cents, subtract_cents
from finansix_ledger.domain.recurrence import occurs_between
from finansix_ledger.utils.date_utils import month_end, month_start


@dataclass
class FreeBalanceInputs:
    """Pre-fetched rows the free balance is computed from"""

    accounts: List[Account] = field(default_factory=list)
    pending_transactions: List[Transaction] = field(default_factory=list)
    pending_installments: List[Installment] = field(default_factory=list)
    expected_transactions: List[ExpectedTransaction] = field(default_factory=list)
    reimbursable_transactions: List[Transaction] = field(default_factory=list)


def outstanding_reimbursement(txn: Transaction) -> int:
    if txn.status == TransactionStatus.CANCELLED:
        return 0
    return max(subtract_cents(txn.amount_cents, txn.reimbursed_amount_cents), 0)


def weighted_amount(expected: ExpectedTransaction) -> int:
    """Expected amount scaled by its confidence (80% of 500 → 400)"""
    confidence = min(max(expected.confidence_percent, 0), 100)
    return multiply_cents(expected.amount_cents, Decimal(confidence) / 100)


def expected_in_month(expected: List[ExpectedTransaction], as_of: date) -> List[ExpectedTransaction]:
    """Active expected transactions that fire at least once in the as-of month"""
    start, end = month_start(as_of), month_end(as_of)
    return [exp for exp in expected if occurs_between(exp, start, end)]


def calculate_free_balance(inputs: FreeBalanceInputs, include_projections: bool = True) -> FreeBalanceResult:
    """
    Combine balances and obligations into a single spendable figure.

    Formula (all cents):
        accounts - pending expenses - card installments due
        + expected income - expected expenses   (projections only)
        + reimbursements receivable

    Callers pass only rows already filtered to the as-of date.
    """
    current_balance = add_cents(*(a.current_balance_cents for a in inputs.accounts if a.is_active))
    pending_expenses = add_cents(*(t.amount_cents for t in inputs.pending_transactions))
    credit_card_due = add_cents(*(i.amount_cents for i in inputs.pending_installments))

    expected_income = 0
    expected_expenses = 0
    if include_projections:
        for exp in inputs.expected_transactions:
            if exp.type == TransactionType.INCOME:
                expected_income = add_cents(expected_income, weighted_amount(exp))
            elif exp.type == TransactionType.EXPENSE:
                expected_expenses = add_cents(expected_expenses, weighted_amount(exp))

    pending_reimbursements = add_cents(
        *(outstanding_reimbursement(t) for t in inputs.reimbursable_transactions)
    )

    free_balance = add_cents(
        current_balance,
        -pending_expenses,
        -credit_card_due,
        expected_income,
        -expected_expenses,
        pending_reimbursements,
    )

    breakdown = [
        BalanceBreakdownItem("Account balances", current_balance, "positive"),
        BalanceBreakdownItem("Pending expenses", -pending_expenses, "negative"),
        BalanceBreakdownItem("Card invoices", -credit_card_due, "negative"),
    ]
    if include_projections:
        breakdown.append(BalanceBreakdownItem("Expected income", expected_income, "positive"))
        breakdown.append(BalanceBreakdownItem("Fixed expenses", -expected_expenses, "negative"))
    breakdown.append(BalanceBreakdownItem("Reimbursements receivable", pending_reimbursements, "positive"))

    return FreeBalanceResult(
        current_balance_cents=current_balance,
        pending_expenses_cents=pending_expenses,
        credit_card_due_cents=credit_card_due,
        expected_income_cents=expected_income,
        expected_expenses_cents=expected_expenses,
        pending_reimbursements_cents=pending_reimbursements,
        free_balance_cents=free_balance,
        breakdown=breakdown,
    )
