"""Installment write path - explode a purchase into stored installments"""

import logging
from datetime import date
from typing import List, Optional

from finansix_ledger.domain.clock import Clock, SystemClock
from finansix_ledger.domain.exceptions import ConsistencyError
from finansix_ledger.domain.installments import generate_installment_plan
from finansix_ledger.domain.models import Installment, InstallmentStatus
from finansix_ledger.domain.money import add_cents
from finansix_ledger.domain.store import LedgerStore
from finansix_ledger.infrastructure.observability.logging import log_installment_plan
from finansix_ledger.infrastructure.observability.metrics import consistency_error_counter, record_installment_plan


class InstallmentService:
    """Creates and settles installments through the ledger store"""

    def __init__(self, store: LedgerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    async def create_installments(self, transaction_id: str) -> List[Installment]:
        """
        Generate and persist the installments of a card purchase.

        Flow:
        1. Load the parent transaction and its card
        2. Skip transactions that are not card installment purchases
        3. Build the plan (validates amount, count and card days)
        4. Insert every installment in one atomic batch

        Raises:
            NotFoundError: Transaction or card does not exist
            ValidationError: Amount, installment count or card days out of range
            ConsistencyError: Generated installments do not sum to the purchase
        """
        transaction = await self.store.get_transaction(transaction_id)

        if not transaction.is_installment or transaction.credit_card_id is None:
            logging.info(
                "Not an installment purchase",
                extra={"transaction_id": transaction_id, "installments_created": 0},
            )
            return []

        card = await self.store.get_credit_card(transaction.credit_card_id)

        try:
            installments = generate_installment_plan(
                transaction_id=transaction.id,
                household_id=transaction.household_id,
                card=card,
                amount_cents=transaction.amount_cents,
                purchase_date=transaction.transaction_date,
                total_installments=transaction.total_installments,
            )
        except ConsistencyError:
            consistency_error_counter.labels(component="installments").inc()
            raise

        created = await self.store.insert_installments(installments)
        record_installment_plan(len(created))

        log_installment_plan(transaction.id, card.id, len(created), installments[0].billing_month.isoformat())
        return created

    async def mark_paid(self, installment_id: str, paid_amount_cents: Optional[int] = None) -> Installment:
        """Settle one installment; the paid amount defaults to the full installment"""
        return await self.store.update_installment(
            installment_id,
            status=InstallmentStatus.PAID,
            paid_amount_cents=paid_amount_cents,
            paid_at=self.clock.now(),
        )

    async def pending_total(self, household_id: str, until: Optional[date] = None) -> int:
        """Sum of pending installments, optionally only those due by `until`"""
        installments = await self.store.list_installments(
            household_id,
            status=InstallmentStatus.PENDING,
            due_on_or_before=until,
        )
        return add_cents(*(inst.amount_cents for inst in installments))
