"""Installment plan generation against a card's billing cycles"""

import uuid
from datetime import date
from typing import List, Sequence

from finansix_ledger.domain.billing_cycle import billing_month_for_purchase, due_date
from finansix_ledger.domain.exceptions import ConsistencyError, ValidationError
from finansix_ledger.domain.models import CreditCard, Installment, InstallmentStatus
from finansix_ledger.domain.money import add_cents, divide_cents, multiply_cents, subtract_cents
from finansix_ledger.utils.date_utils import add_months

MIN_INSTALLMENTS = 1
MAX_INSTALLMENTS = 48


def validate_installment_request(amount_cents: int, total_installments: int) -> None:
    if amount_cents <= 0:
        raise ValidationError(f"Amount must be positive, got {amount_cents}", field="amount_cents")
    if not MIN_INSTALLMENTS <= total_installments <= MAX_INSTALLMENTS:
        raise ValidationError(
            f"total_installments must be between {MIN_INSTALLMENTS} and {MAX_INSTALLMENTS}, "
            f"got {total_installments}",
            field="total_installments",
        )


def split_amount(amount_cents: int, total_installments: int) -> List[int]:
    """
    Split an amount into equal portions, the last one absorbing the remainder.

    Example:
        10000 cents / 3 = 3333 base, remainder 1
        → [3333, 3333, 3334]
    """
    validate_installment_request(amount_cents, total_installments)

    base_amount = divide_cents(amount_cents, total_installments)
    # Rounding the base up can overshoot tiny amounts; fall back to the floor
    if multiply_cents(base_amount, total_installments - 1) > amount_cents:
        base_amount = amount_cents // total_installments

    remainder = subtract_cents(amount_cents, multiply_cents(base_amount, total_installments))
    last_amount = add_cents(base_amount, remainder)

    return [base_amount] * (total_installments - 1) + [last_amount]


def verify_installment_sum(installments: Sequence[Installment], amount_cents: int) -> None:
    """
    Raises:
        ConsistencyError: If the installments do not add up to the purchase amount
    """
    total = add_cents(*(inst.amount_cents for inst in installments))
    if total != amount_cents:
        raise ConsistencyError(
            f"Installments sum to {total} cents but the purchase is {amount_cents} cents"
        )


def generate_installment_plan(
    transaction_id: str,
    household_id: str,
    card: CreditCard,
    amount_cents: int,
    purchase_date: date,
    total_installments: int,
) -> List[Installment]:
    """
    Generate monthly installments billed on consecutive card statements.

    Requirements:
    - Purchases on or after the closing day start on next month's statement
    - Installment k bills k-1 months after the first billing month
    - Last installment absorbs rounding remainder so the sum is exact

    Returns:
        Installment records ordered by installment number

    Example:
        R$100.00 in 3x, card closing on the 10th, bought on March 12th
        → April 3333, May 3333, June 3334
    """
    amounts = split_amount(amount_cents, total_installments)
    first_month = billing_month_for_purchase(card, purchase_date)

    installments = []
    for i, amount in enumerate(amounts):
        billing_month = add_months(first_month, i)
        installments.append(
            Installment(
                id=str(uuid.uuid4()),
                household_id=household_id,
                transaction_id=transaction_id,
                credit_card_id=card.id,
                installment_number=i + 1,
                total_installments=total_installments,
                amount_cents=amount,
                billing_month=billing_month,
                due_date=due_date(card, billing_month),
                status=InstallmentStatus.PENDING,
            )
        )

    verify_installment_sum(installments, amount_cents)
    return installments
