"""Card countdowns and purchase-time card suggestion"""

from datetime import date
from typing import List, Optional

from finansix_ledger.config import settings
from finansix_ledger.domain.billing_cycle import days_until_closing, days_until_due, get_upcoming_invoices
from finansix_ledger.domain.clock import Clock, SystemClock
from finansix_ledger.domain.models import CardRecommendation, InvoicePeriod
from finansix_ledger.domain.recommendation import get_best_card
from finansix_ledger.domain.store import LedgerStore


class CardAdvisor:
    """Billing calendar queries backed by the household's stored cards"""

    def __init__(self, store: LedgerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    async def best_card(
        self,
        household_id: str,
        purchase_date: Optional[date] = None,
        minimum_limit_cents: int = 0,
    ) -> Optional[CardRecommendation]:
        cards = await self.store.list_credit_cards(household_id, active_only=True)
        return get_best_card(cards, purchase_date or self.clock.today(), minimum_limit_cents)

    async def upcoming_invoices(self, card_id: str, count: Optional[int] = None) -> List[InvoicePeriod]:
        card = await self.store.get_credit_card(card_id)
        return get_upcoming_invoices(card, self.clock.today(), count or settings.upcoming_invoice_count)

    async def countdown(self, card_id: str) -> tuple[int, int]:
        """Days until the current cycle closes and until it is due"""
        card = await self.store.get_credit_card(card_id)
        today = self.clock.today()
        return days_until_closing(card, today), days_until_due(card, today)
