"""Accounts payable worklist for a month"""

import asyncio
from datetime import date

from finansix_ledger.domain.billing_cycle import parse_billing_month
from finansix_ledger.domain.clock import Clock, SystemClock
from finansix_ledger.domain.models import PayablesWorklist, TransactionType
from finansix_ledger.domain.payables import merge_payables, summarize_payables
from finansix_ledger.domain.store import LedgerStore
from finansix_ledger.services.invoices import InvoiceAggregator
from finansix_ledger.utils.date_utils import month_end


class PayablesAggregator:
    """Merges card invoices and standalone bills into one worklist"""

    def __init__(self, store: LedgerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()
        self.invoices = InvoiceAggregator(store, self.clock)

    async def build(self, household_id: str, month: date | str) -> PayablesWorklist:
        month = parse_billing_month(month)

        cards, bills = await asyncio.gather(
            self.store.list_credit_cards(household_id, active_only=True),
            self.store.list_transactions(
                household_id,
                type=TransactionType.EXPENSE,
                without_credit_card=True,
                date_from=month,
                date_to=month_end(month),
            ),
        )
        statements = await asyncio.gather(
            *(self.invoices.statement_for_card(card, month) for card in cards)
        )

        items = merge_payables(statements, bills, self.clock.today())
        return PayablesWorklist(month=month, items=items, summary=summarize_payables(items))
