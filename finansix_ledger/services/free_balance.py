"""Free balance for the household dashboard"""

import asyncio
import time
from datetime import date
from typing import List, Optional

from finansix_ledger.domain.clock import Clock, SystemClock
from finansix_ledger.domain.free_balance import FreeBalanceInputs, calculate_free_balance, expected_in_month
from finansix_ledger.domain.models import (
    ExpectedTransaction,
    FreeBalanceResult,
    InstallmentStatus,
    TransactionStatus,
    TransactionType,
)
from finansix_ledger.domain.store import LedgerStore
from finansix_ledger.infrastructure.observability.logging import log_free_balance
from finansix_ledger.infrastructure.observability.metrics import record_free_balance


class FreeBalanceCalculator:
    """Fetches balances and obligations, then computes the spendable balance"""

    def __init__(self, store: LedgerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    async def _expected(self, household_id: str, include_projections: bool) -> List[ExpectedTransaction]:
        if not include_projections:
            return []
        return await self.store.list_expected_transactions(household_id, active_only=True)

    async def calculate(
        self,
        household_id: str,
        as_of: Optional[date] = None,
        include_projections: bool = True,
    ) -> FreeBalanceResult:
        """
        Compute the free balance as of a date.

        The reads are independent, so they are issued together and joined
        before combining. Installment purchases are left out of pending
        expenses because their installments are counted as card dues.
        """
        start_time = time.time()
        as_of = as_of or self.clock.today()

        accounts, pending, installments, expected, reimbursable = await asyncio.gather(
            self.store.list_accounts(household_id, active_only=True),
            self.store.list_transactions(
                household_id,
                type=TransactionType.EXPENSE,
                status=TransactionStatus.PENDING,
                is_installment=False,
                date_to=as_of,
            ),
            self.store.list_installments(
                household_id,
                status=InstallmentStatus.PENDING,
                due_on_or_before=as_of,
            ),
            self._expected(household_id, include_projections),
            self.store.list_transactions(
                household_id,
                type=TransactionType.EXPENSE,
                is_reimbursable=True,
            ),
        )

        result = calculate_free_balance(
            FreeBalanceInputs(
                accounts=accounts,
                pending_transactions=pending,
                pending_installments=installments,
                expected_transactions=expected_in_month(expected, as_of),
                reimbursable_transactions=reimbursable,
            ),
            include_projections=include_projections,
        )

        duration_ms = (time.time() - start_time) * 1000
        record_free_balance(result.free_balance_cents, include_projections)
        log_free_balance(household_id, result.free_balance_cents, include_projections, duration_ms)
        return result
