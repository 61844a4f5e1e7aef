"""Best card recommendation - longest float before payment"""

from datetime import date
from typing import Iterable, Optional

from finansix_ledger.domain.billing_cycle import get_invoice_for_purchase
from finansix_ledger.domain.models import CardRecommendation, CreditCard
from finansix_ledger.utils.date_utils import days_between


def _reason(days_until_closing: int, days_until_payment: int) -> str:
    closes = "Closes tomorrow" if days_until_closing == 1 else f"Closes in {days_until_closing} days"
    return f"{closes}. Up to {days_until_payment} days to pay."


def get_best_card(
    cards: Iterable[CreditCard],
    purchase_date: date,
    minimum_limit_cents: int = 0,
) -> Optional[CardRecommendation]:
    """
    Pick the card whose invoice for this purchase is due the latest.

    Only active cards with at least `minimum_limit_cents` available are
    considered. Ties go to the highest available limit, then the lowest
    card id, so the result does not depend on input order.

    Returns:
        The winning card, or None when no card qualifies
    """
    candidates = []
    for card in cards:
        if not card.is_active or card.effective_available_limit_cents < minimum_limit_cents:
            continue
        period = get_invoice_for_purchase(card, purchase_date, purchase_date)
        candidates.append((card, period, days_between(purchase_date, period.due_date)))

    if not candidates:
        return None

    card, period, days_until_payment = min(
        candidates,
        key=lambda c: (-c[2], -c[0].effective_available_limit_cents, c[0].id),
    )

    return CardRecommendation(
        card_id=card.id,
        card_name=card.name,
        days_until_payment=days_until_payment,
        closing_date=period.closing_date,
        due_date=period.due_date,
        available_limit_cents=card.effective_available_limit_cents,
        reason=_reason(days_between(purchase_date, period.closing_date), days_until_payment),
    )
