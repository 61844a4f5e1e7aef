"""Forward projection of pending installment obligations"""

from datetime import date
from typing import Dict, Iterable, List

from finansix_ledger.domain.billing_cycle import parse_billing_month
from finansix_ledger.domain.exceptions import ValidationError
from finansix_ledger.domain.models import (
    CardProjection,
    CreditCard,
    Installment,
    InstallmentStatus,
    MonthlyProjection,
)
from finansix_ledger.domain.money import add_cents
from finansix_ledger.utils.date_utils import generate_month_range


def project_installments(
    installments: Iterable[Installment],
    cards: Iterable[CreditCard],
    start: date,
    months: int = 12,
) -> List[MonthlyProjection]:
    """
    Aggregate pending installments by billing month and card.

    Every month of the horizon is present even when nothing is billed in it.
    Paid and overdue installments are not projected. Per-card entries keep
    the order in which each card is first encountered.
    """
    if months < 1:
        raise ValidationError(f"Projection horizon must be at least one month, got {months}", field="months")

    projections: Dict[date, MonthlyProjection] = {
        month: MonthlyProjection(month=month) for month in generate_month_range(start, months)
    }
    cards_by_id = {card.id: card for card in cards}

    for inst in installments:
        if inst.status != InstallmentStatus.PENDING:
            continue
        projection = projections.get(parse_billing_month(inst.billing_month))
        if projection is None:
            continue

        projection.total_installments_cents = add_cents(projection.total_installments_cents, inst.amount_cents)

        entry = next((c for c in projection.by_card if c.card_id == inst.credit_card_id), None)
        if entry is None:
            card = cards_by_id.get(inst.credit_card_id)
            projection.by_card.append(
                CardProjection(
                    card_id=inst.credit_card_id,
                    card_name=card.name if card else None,
                    amount_cents=inst.amount_cents,
                    color=card.color if card else None,
                )
            )
        else:
            entry.amount_cents = add_cents(entry.amount_cents, inst.amount_cents)

    return list(projections.values())
