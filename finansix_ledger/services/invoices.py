"""Card invoice statements and invoice payment"""

import asyncio
import logging
import uuid
from datetime import date
from typing import Optional

from finansix_ledger.domain.billing_cycle import get_invoice_period, parse_billing_month
from finansix_ledger.domain.clock import Clock, SystemClock
from finansix_ledger.domain.exceptions import ValidationError
from finansix_ledger.domain.invoices import build_invoice_statement
from finansix_ledger.domain.models import (
    CreditCard,
    InvoiceMatch,
    InvoiceStatement,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from finansix_ledger.domain.money import subtract_cents
from finansix_ledger.domain.store import LedgerStore
from finansix_ledger.infrastructure.observability.logging import log_invoice_payment
from finansix_ledger.utils.date_utils import add_months, month_end, month_start


class InvoiceAggregator:
    """Builds and settles card invoices from stored installments and charges"""

    def __init__(self, store: LedgerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    async def build_statement(self, card_id: str, billing_month: date | str) -> InvoiceStatement:
        """
        Collect everything billed on a card for one month.

        Raises:
            NotFoundError: Card does not exist
            ConsistencyError: Billing month cannot be resolved
        """
        month = parse_billing_month(billing_month)
        card = await self.store.get_credit_card(card_id)
        return await self.statement_for_card(card, month)

    async def statement_for_card(self, card: CreditCard, month: date) -> InvoiceStatement:
        today = self.clock.today()

        # Window starts in the previous month; the fallback needs the whole target month
        period = get_invoice_period(card, month, today)
        installments, transactions = await asyncio.gather(
            self.store.list_installments(card.household_id, credit_card_id=card.id, billing_month=month),
            self.store.list_transactions(
                card.household_id,
                type=TransactionType.EXPENSE,
                credit_card_id=card.id,
                is_installment=False,
                date_from=period.purchase_start,
                date_to=max(period.purchase_end, month_end(month)),
            ),
        )

        statement = build_invoice_statement(card, month, installments, transactions, today)
        logging.info(
            "Invoice statement built",
            extra={
                "card_id": card.id,
                "billing_month": statement.period.label,
                "item_count": len(statement.items),
                "total_cents": statement.total_cents,
                "status": statement.period.status.value,
            },
        )
        return statement

    async def pay_invoice(
        self, card_id: str, billing_month: date | str, amount_cents: int
    ) -> Optional[Transaction]:
        """
        Pay a card invoice in full or in part.

        Every open item on the statement is settled. When less than the
        outstanding amount is paid, the difference is carried over as a new
        pending charge dated on the first day of the next billing month, which
        lies inside exactly one later statement. Settling the items and
        recording the carry-over is a single store write.

        Returns:
            The carry-over charge, or None when the invoice was paid in full
        """
        if amount_cents <= 0:
            raise ValidationError(f"Payment must be positive, got {amount_cents}", field="amount_cents")

        card = await self.store.get_credit_card(card_id)
        statement = await self.statement_for_card(card, parse_billing_month(billing_month))
        outstanding = statement.remaining_cents

        open_installments = [
            item.source_id for item in statement.items
            if item.matched_by == InvoiceMatch.BILLING_MONTH and not item.is_settled
        ]
        open_charges = [
            item.source_id for item in statement.items
            if item.matched_by != InvoiceMatch.BILLING_MONTH and not item.is_settled
        ]

        remainder = subtract_cents(outstanding, amount_cents)
        carry_over = None
        if remainder > 0:
            due = statement.period.due_date
            carry_over = Transaction(
                id=str(uuid.uuid4()),
                household_id=card.household_id,
                type=TransactionType.EXPENSE,
                status=TransactionStatus.PENDING,
                amount_cents=remainder,
                transaction_date=month_start(add_months(statement.billing_month, 1)),
                description=f"Remaining {card.name} invoice ({due:%m/%Y})",
                credit_card_id=card.id,
            )

        carry_over = await self.store.settle_invoice(
            open_installments,
            open_charges,
            paid_at=self.clock.now(),
            carry_over=carry_over,
        )

        log_invoice_payment(card_id, statement.period.label, amount_cents, max(remainder, 0))
        return carry_over
