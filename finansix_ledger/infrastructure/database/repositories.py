"""Data access layer for ledger entities"""

import asyncio
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError as RowValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from finansix_ledger.domain.exceptions import NotFoundError, StoreError
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
from finansix_ledger.infrastructure.database.models import (
    AccountModel,
    CreditCardModel,
    ExpectedTransactionModel,
    InstallmentModel,
    TransactionModel,
)
from finansix_ledger.infrastructure.observability.metrics import store_failure_counter, store_read_latency_histogram
from finansix_ledger.infrastructure.schemas import (
    AccountRow,
    CreditCardRow,
    ExpectedTransactionRow,
    InstallmentRow,
    TransactionRow,
)


def _column_values(row: Any) -> Dict[str, Any]:
    """Dump a validated row with enums flattened to their stored text"""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in row.model_dump().items()}


class SqlAlchemyLedgerStore:
    """
    Ledger store on a relational database.

    Each call opens its own session and runs in a worker thread, so
    concurrent reads issued with asyncio.gather never share a session.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def _run(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            with store_read_latency_histogram.labels(operation=operation).time():
                return await asyncio.to_thread(fn, *args)
        except SQLAlchemyError as e:
            store_failure_counter.labels(operation=operation).inc()
            raise StoreError(f"Database error during {operation}: {e}") from e
        except RowValidationError as e:
            store_failure_counter.labels(operation=operation).inc()
            raise StoreError(f"Malformed row during {operation}: {e}") from e

    # Reads

    async def list_accounts(self, household_id: str, *, active_only: bool = True) -> List[Account]:
        def query() -> List[Account]:
            stmt = select(AccountModel).where(AccountModel.household_id == household_id)
            if active_only:
                stmt = stmt.where(AccountModel.is_active.is_(True))
            with self.session_factory() as db:
                return [AccountRow.model_validate(a).to_domain() for a in db.scalars(stmt)]

        return await self._run("list_accounts", query)

    async def list_credit_cards(self, household_id: str, *, active_only: bool = True) -> List[CreditCard]:
        def query() -> List[CreditCard]:
            stmt = (
                select(CreditCardModel)
                .where(CreditCardModel.household_id == household_id)
                .order_by(CreditCardModel.name)
            )
            if active_only:
                stmt = stmt.where(CreditCardModel.is_active.is_(True))
            with self.session_factory() as db:
                return [CreditCardRow.model_validate(c).to_domain() for c in db.scalars(stmt)]

        return await self._run("list_credit_cards", query)

    async def get_credit_card(self, card_id: str) -> CreditCard:
        def query() -> Optional[CreditCard]:
            with self.session_factory() as db:
                card = db.get(CreditCardModel, card_id)
                return CreditCardRow.model_validate(card).to_domain() if card else None

        card = await self._run("get_credit_card", query)
        if card is None:
            raise NotFoundError("Credit card", card_id)
        return card

    async def get_transaction(self, transaction_id: str) -> Transaction:
        def query() -> Optional[Transaction]:
            with self.session_factory() as db:
                txn = db.get(TransactionModel, transaction_id)
                return TransactionRow.model_validate(txn).to_domain() if txn else None

        txn = await self._run("get_transaction", query)
        if txn is None:
            raise NotFoundError("Transaction", transaction_id)
        return txn

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
    ) -> List[Transaction]:
        def query() -> List[Transaction]:
            t = TransactionModel
            stmt = select(t).where(t.household_id == household_id).order_by(t.transaction_date, t.id)
            if type is not None:
                stmt = stmt.where(t.type == type.value)
            if status is not None:
                stmt = stmt.where(t.status == status.value)
            if account_id is not None:
                stmt = stmt.where(t.account_id == account_id)
            if credit_card_id is not None:
                stmt = stmt.where(t.credit_card_id == credit_card_id)
            if without_credit_card:
                stmt = stmt.where(t.credit_card_id.is_(None))
            if date_from is not None:
                stmt = stmt.where(t.transaction_date >= date_from)
            if date_to is not None:
                stmt = stmt.where(t.transaction_date <= date_to)
            if is_installment is not None:
                stmt = stmt.where(t.is_installment.is_(is_installment))
            if is_reimbursable is not None:
                stmt = stmt.where(t.is_reimbursable.is_(is_reimbursable))
            with self.session_factory() as db:
                return [TransactionRow.model_validate(row).to_domain() for row in db.scalars(stmt)]

        return await self._run("list_transactions", query)

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
    ) -> List[Installment]:
        def query() -> List[Installment]:
            i = InstallmentModel
            stmt = (
                select(i)
                .where(i.household_id == household_id)
                .order_by(i.due_date, i.transaction_id, i.installment_number)
            )
            if credit_card_id is not None:
                stmt = stmt.where(i.credit_card_id == credit_card_id)
            if status is not None:
                stmt = stmt.where(i.status == status.value)
            if billing_month is not None:
                stmt = stmt.where(i.billing_month == billing_month)
            if billing_month_from is not None:
                stmt = stmt.where(i.billing_month >= billing_month_from)
            if billing_month_before is not None:
                stmt = stmt.where(i.billing_month < billing_month_before)
            if due_on_or_before is not None:
                stmt = stmt.where(i.due_date <= due_on_or_before)
            with self.session_factory() as db:
                return [InstallmentRow.model_validate(row).to_domain() for row in db.scalars(stmt)]

        return await self._run("list_installments", query)

    async def list_expected_transactions(
        self, household_id: str, *, active_only: bool = True
    ) -> List[ExpectedTransaction]:
        def query() -> List[ExpectedTransaction]:
            e = ExpectedTransactionModel
            stmt = select(e).where(e.household_id == household_id).order_by(e.start_date, e.id)
            if active_only:
                stmt = stmt.where(e.is_active.is_(True))
            with self.session_factory() as db:
                return [ExpectedTransactionRow.model_validate(row).to_domain() for row in db.scalars(stmt)]

        return await self._run("list_expected_transactions", query)

    # Writes

    async def save_expected_transaction(self, expected: ExpectedTransaction) -> ExpectedTransaction:
        row = ExpectedTransactionRow.model_validate(asdict(expected))

        def write() -> ExpectedTransaction:
            with self.session_factory.begin() as db:
                db.merge(ExpectedTransactionModel(**_column_values(row)))
            return row.to_domain()

        return await self._run("save_expected_transaction", write)

    async def insert_installments(self, installments: Sequence[Installment]) -> List[Installment]:
        """Insert the whole plan in a single database transaction"""
        rows = [InstallmentRow.model_validate(asdict(inst)) for inst in installments]

        def write() -> List[Installment]:
            with self.session_factory.begin() as db:
                db.add_all([InstallmentModel(**_column_values(row)) for row in rows])
            return [row.to_domain() for row in rows]

        return await self._run("insert_installments", write)

    async def update_installment(
        self,
        installment_id: str,
        *,
        status: InstallmentStatus,
        paid_amount_cents: Optional[int] = None,
        paid_at: Optional[datetime] = None,
    ) -> Installment:
        def write() -> Optional[Installment]:
            with self.session_factory.begin() as db:
                inst = db.get(InstallmentModel, installment_id)
                if inst is None:
                    return None
                inst.status = status.value
                if paid_amount_cents is not None:
                    inst.paid_amount_cents = paid_amount_cents
                if paid_at is not None:
                    inst.paid_at = paid_at
                db.flush()
                return InstallmentRow.model_validate(inst).to_domain()

        updated = await self._run("update_installment", write)
        if updated is None:
            raise NotFoundError("Installment", installment_id)
        return updated

    async def settle_invoice(
        self,
        installment_ids: Sequence[str],
        transaction_ids: Sequence[str],
        *,
        paid_at: datetime,
        carry_over: Optional[Transaction] = None,
    ) -> Optional[Transaction]:
        """Settle an invoice in one database transaction; any failure rolls back every change"""
        inst_ids = list(installment_ids)
        txn_ids = list(transaction_ids)
        row = TransactionRow.model_validate(asdict(carry_over)) if carry_over is not None else None

        def write() -> Optional[Transaction]:
            with self.session_factory.begin() as db:
                if inst_ids:
                    db.execute(
                        update(InstallmentModel)
                        .where(InstallmentModel.id.in_(inst_ids))
                        .values(
                            status=InstallmentStatus.PAID.value,
                            paid_amount_cents=InstallmentModel.amount_cents,
                            paid_at=paid_at,
                        )
                        .execution_options(synchronize_session=False)
                    )
                if txn_ids:
                    db.execute(
                        update(TransactionModel)
                        .where(TransactionModel.id.in_(txn_ids))
                        .values(status=TransactionStatus.COMPLETED.value)
                        .execution_options(synchronize_session=False)
                    )
                if row is not None:
                    db.add(TransactionModel(**_column_values(row)))
            return row.to_domain() if row is not None else None

        return await self._run("settle_invoice", write)
