"""Ledger store port - the only I/O boundary of the engine"""

from datetime import date, datetime
from typing import List, Optional, Protocol, Sequence

from finansix_ledger.domain.models import (
    Account,
    CreditCard,
    ExpectedTransaction,
    Installment,
    InstallmentStatus,
    Transaction,
    TransactionStatus,
    TransactionType,
)


class LedgerStore(Protocol):
    """
    Typed repository consumed by every store-backed component.

    Read methods return plain domain dataclasses. Single-row lookups raise
    NotFoundError when the row does not exist. Adapter I/O failures surface
    as StoreError and are never retried here.
    """

    async def list_accounts(self, household_id: str, *, active_only: bool = True) -> List[Account]: ...

    async def list_credit_cards(self, household_id: str, *, active_only: bool = True) -> List[CreditCard]: ...

    async def get_credit_card(self, card_id: str) -> CreditCard: ...

    async def get_transaction(self, transaction_id: str) -> Transaction: ...

    async def list_transactions(
        self,
        household_id: str,
        *,
        type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
        account_id: Optional[str] = None,
        credit_card_id: Optional[str] = None,
        without_credit_card: bool = False,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        is_installment: Optional[bool] = None,
        is_reimbursable: Optional[bool] = None,
    ) -> List[Transaction]: ...

    async def list_installments(
        self,
        household_id: str,
        *,
        credit_card_id: Optional[str] = None,
        status: Optional[InstallmentStatus] = None,
        billing_month: Optional[date] = None,
        billing_month_from: Optional[date] = None,
        billing_month_before: Optional[date] = None,
        due_on_or_before: Optional[date] = None,
    ) -> List[Installment]: ...

    async def list_expected_transactions(
        self, household_id: str, *, active_only: bool = True
    ) -> List[ExpectedTransaction]: ...

    async def save_expected_transaction(self, expected: ExpectedTransaction) -> ExpectedTransaction: ...

    async def insert_installments(self, installments: Sequence[Installment]) -> List[Installment]:
        """Insert every row or none of them"""
        ...

    async def update_installment(
        self,
        installment_id: str,
        *,
        status: InstallmentStatus,
        paid_amount_cents: Optional[int] = None,
        paid_at: Optional[datetime] = None,
    ) -> Installment: ...

    async def settle_invoice(
        self,
        installment_ids: Sequence[str],
        transaction_ids: Sequence[str],
        *,
        paid_at: datetime,
        carry_over: Optional[Transaction] = None,
    ) -> Optional[Transaction]:
        """
        Mark installments paid in full, complete card charges and insert the
        carry-over charge, all in one atomic write.
        """
        ...
