"""Installment projection over upcoming months"""

import asyncio
from datetime import date
from typing import List, Optional

from finansix_ledger.config import settings
from finansix_ledger.domain.clock import Clock, SystemClock
from finansix_ledger.domain.models import InstallmentStatus, MonthlyProjection
from finansix_ledger.domain.projection import project_installments
from finansix_ledger.domain.store import LedgerStore
from finansix_ledger.utils.date_utils import add_months, month_start


class ProjectionEngine:
    """Projects pending installments month by month, per card"""

    def __init__(self, store: LedgerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    async def project(
        self,
        household_id: str,
        months: Optional[int] = None,
        from_date: Optional[date] = None,
    ) -> List[MonthlyProjection]:
        """
        Pending installment totals for each month of the horizon.

        Args:
            household_id: Household whose installments are projected
            months: Horizon length (default from settings, 12)
            from_date: First month of the horizon (default: current month)
        """
        months = settings.default_projection_months if months is None else months
        start = month_start(from_date or self.clock.today())

        installments, cards = await asyncio.gather(
            self.store.list_installments(
                household_id,
                status=InstallmentStatus.PENDING,
                billing_month_from=start,
                billing_month_before=add_months(start, max(months, 0)),
            ),
            self.store.list_credit_cards(household_id, active_only=False),
        )
        return project_installments(installments, cards, start, months)
