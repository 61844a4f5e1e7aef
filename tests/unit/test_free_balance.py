"""Unit tests for free balance calculation"""

import pytest
from datetime import date
from finansix_ledger.domain.free_balance import (
    FreeBalanceInputs,
    calculate_free_balance,
    outstanding_reimbursement,
    weighted_amount,
)
from finansix_ledger.domain.models import (
    ExpectedTransaction,
    InstallmentStatus,
    RecurrenceType,
    TransactionStatus,
    TransactionType,
)
from finansix_ledger.services.free_balance import FreeBalanceCalculator

from factories import HOUSEHOLD, make_account, make_installment, make_transaction


def _expected(exp_id, amount_cents, type=TransactionType.INCOME, confidence=100, **overrides):
    fields = dict(
        id=exp_id,
        household_id=HOUSEHOLD,
        description=f"Expected {exp_id}",
        type=type,
        amount_cents=amount_cents,
        recurrence_type=RecurrenceType.MONTHLY,
        start_date=date(2024, 1, 1),
        confidence_percent=confidence,
        day_of_month=5,
    )
    fields.update(overrides)
    return ExpectedTransaction(**fields)


def test_no_obligations_equals_current_balance():
    """Test R$1000 with nothing pending is fully free"""
    result = calculate_free_balance(
        FreeBalanceInputs(accounts=[make_account(balance_cents=100000)]), include_projections=False
    )

    assert result.current_balance_cents == 100000
    assert result.free_balance_cents == 100000


def test_pending_expense_reduces_free_balance():
    """Test R$1000 minus a pending R$200 expense leaves R$800"""
    inputs = FreeBalanceInputs(
        accounts=[make_account(balance_cents=100000)],
        pending_transactions=[make_transaction("t1", 20000, date(2024, 3, 10))],
    )

    result = calculate_free_balance(inputs)

    assert result.pending_expenses_cents == 20000
    assert result.free_balance_cents == 80000


def test_expected_income_weighted_by_confidence():
    """Test R$500 expected at 80% confidence adds R$400"""
    inputs = FreeBalanceInputs(
        accounts=[make_account(balance_cents=100000)],
        expected_transactions=[_expected("salary", 50000, confidence=80)],
    )

    result = calculate_free_balance(inputs)

    assert result.expected_income_cents == 40000
    assert result.free_balance_cents == 140000


def test_projections_can_be_excluded():
    """Test expected transactions are ignored without projections"""
    inputs = FreeBalanceInputs(
        accounts=[make_account(balance_cents=100000)],
        expected_transactions=[
            _expected("salary", 50000),
            _expected("rent", 30000, type=TransactionType.EXPENSE),
        ],
    )

    with_projections = calculate_free_balance(inputs)
    without = calculate_free_balance(inputs, include_projections=False)

    assert with_projections.free_balance_cents == 120000
    assert without.free_balance_cents == 100000
    assert without.expected_income_cents == 0
    assert without.expected_expenses_cents == 0


def test_full_formula_and_breakdown():
    """Test every component and the breakdown order"""
    inputs = FreeBalanceInputs(
        accounts=[
            make_account("acc_1", 100000),
            make_account("acc_2", 25000),
            make_account("closed", 99999, is_active=False),
        ],
        pending_transactions=[make_transaction("t1", 20000, date(2024, 3, 10))],
        pending_installments=[make_installment("i1", 3000, date(2024, 3, 1), date(2024, 3, 10))],
        expected_transactions=[
            _expected("salary", 50000, confidence=80),
            _expected("rent", 30000, type=TransactionType.EXPENSE),
        ],
        reimbursable_transactions=[
            make_transaction("r1", 10000, date(2024, 2, 1), is_reimbursable=True, reimbursed_amount_cents=2500),
        ],
    )

    result = calculate_free_balance(inputs)

    # 125000 - 20000 - 3000 + 40000 - 30000 + 7500
    assert result.free_balance_cents == 119500
    assert [(b.label, b.value_cents, b.type) for b in result.breakdown] == [
        ("Account balances", 125000, "positive"),
        ("Pending expenses", -20000, "negative"),
        ("Card invoices", -3000, "negative"),
        ("Expected income", 40000, "positive"),
        ("Fixed expenses", -30000, "negative"),
        ("Reimbursements receivable", 7500, "positive"),
    ]


def test_breakdown_without_projections():
    """Test projection lines are left out of the breakdown"""
    result = calculate_free_balance(FreeBalanceInputs(), include_projections=False)

    assert [b.label for b in result.breakdown] == [
        "Account balances",
        "Pending expenses",
        "Card invoices",
        "Reimbursements receivable",
    ]
    assert result.free_balance_cents == 0


def test_free_balance_can_be_negative():
    """Test obligations larger than balances"""
    inputs = FreeBalanceInputs(
        accounts=[make_account(balance_cents=1000)],
        pending_transactions=[make_transaction("t1", 5000, date(2024, 3, 10))],
    )
    assert calculate_free_balance(inputs).free_balance_cents == -4000


@pytest.mark.parametrize(
    "status,reimbursed,expected",
    [
        (TransactionStatus.COMPLETED, 4000, 6000),
        (TransactionStatus.PENDING, 0, 10000),
        (TransactionStatus.COMPLETED, 12000, 0),
        (TransactionStatus.CANCELLED, 0, 0),
    ],
)
def test_outstanding_reimbursement(status, reimbursed, expected):
    """Test amount still owed back on a reimbursable expense"""
    txn = make_transaction(
        "r1", 10000, date(2024, 2, 1), status=status, is_reimbursable=True, reimbursed_amount_cents=reimbursed
    )
    assert outstanding_reimbursement(txn) == expected


@pytest.mark.parametrize("confidence,expected", [(100, 50000), (80, 40000), (0, 0), (150, 50000), (-10, 0)])
def test_weighted_amount_clamps_confidence(confidence, expected):
    """Test confidence is applied as a 0-100 percentage"""
    assert weighted_amount(_expected("salary", 50000, confidence=confidence)) == expected


async def test_calculator_reads_store_as_of_clock(store, clock):
    """Test the service filters rows to the as-of date before combining"""
    store.add(
        make_account("acc_1", 100000),
        make_account("closed", 50000, is_active=False),
        # pending expenses
        make_transaction("due", 20000, date(2024, 3, 10)),
        make_transaction("future", 9000, date(2024, 3, 20)),
        make_transaction("done", 7000, date(2024, 3, 1), status=TransactionStatus.COMPLETED),
        make_transaction(
            "split", 30000, date(2024, 3, 1), credit_card_id="card_a", is_installment=True, total_installments=3
        ),
        # card installments
        make_installment("inst_due", 3000, date(2024, 3, 1), date(2024, 3, 10)),
        make_installment("inst_later", 3000, date(2024, 4, 1), date(2024, 4, 10)),
        make_installment(
            "inst_paid", 3000, date(2024, 2, 1), date(2024, 3, 1), status=InstallmentStatus.PAID
        ),
        # expected
        _expected("salary", 50000, confidence=80),
        _expected("insurance", 60000, type=TransactionType.EXPENSE, recurrence_type=RecurrenceType.YEARLY,
                  start_date=date(2023, 7, 1)),
        _expected("old_job", 90000, is_active=False),
        # reimbursable
        make_transaction(
            "trip",
            10000,
            date(2024, 2, 1),
            status=TransactionStatus.COMPLETED,
            is_reimbursable=True,
            reimbursed_amount_cents=2500,
        ),
    )
    calculator = FreeBalanceCalculator(store, clock)

    result = await calculator.calculate(HOUSEHOLD)

    assert result.current_balance_cents == 100000
    assert result.pending_expenses_cents == 20000
    assert result.credit_card_due_cents == 3000
    assert result.expected_income_cents == 40000
    assert result.expected_expenses_cents == 0
    assert result.pending_reimbursements_cents == 7500
    assert result.free_balance_cents == 124500

    without = await calculator.calculate(HOUSEHOLD, include_projections=False)
    assert without.free_balance_cents == 84500


async def test_calculator_explicit_as_of(store, clock):
    """Test an explicit as-of date overrides the clock"""
    store.add(
        make_account("acc_1", 100000),
        make_transaction("future", 9000, date(2024, 3, 20)),
    )

    result = await FreeBalanceCalculator(store, clock).calculate(HOUSEHOLD, as_of=date(2024, 3, 31))

    assert result.free_balance_cents == 91000
