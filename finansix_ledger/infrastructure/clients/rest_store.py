"""Ledger store over the hosted backend's PostgREST HTTP API"""

from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

import httpx
from pydantic import ValidationError as RowValidationError

from finansix_ledger.config import settings
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
from finansix_ledger.infrastructure.observability.metrics import store_failure_counter, store_read_latency_histogram
from finansix_ledger.infrastructure.schemas import (
    AccountRow,
    CreditCardRow,
    ExpectedTransactionRow,
    InstallmentRow,
    RowSchema,
    TransactionRow,
)

Params = List[Tuple[str, str]]
RowT = TypeVar("RowT", bound=RowSchema)


def _eq(value: Any) -> str:
    if isinstance(value, bool):
        return f"is.{str(value).lower()}"
    return f"eq.{value}"


class RestLedgerStore:
    """Client for the hosted relational backend (PostgREST conventions)"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.store_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.store_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self, prefer: str | None = None) -> Dict[str, str]:
        headers = {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        table: str,
        params: Optional[Params] = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> List[Dict[str, Any]]:
        """
        Issue one request against a table endpoint.

        Raises:
            StoreError: On timeout, HTTP errors, or a non-JSON-array response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with store_read_latency_histogram.labels(operation=operation).time():
                    response = await client.request(
                        method,
                        f"{self.base_url}/rest/v1/{table}",
                        params=params,
                        json=json,
                        headers=self._headers(prefer),
                    )
                    response.raise_for_status()
                if response.status_code == 204 or not response.content:
                    return []
                data = response.json()
                if not isinstance(data, list):
                    raise StoreError(f"Unexpected {operation} response: expected a list of rows")
                return data

            except httpx.TimeoutException as e:
                store_failure_counter.labels(operation=operation).inc()
                raise StoreError(f"Store timeout after {self.timeout}s during {operation}") from e
            except httpx.HTTPStatusError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise StoreError(f"Store error during {operation}: {e.response.status_code}") from e
            except httpx.RequestError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise StoreError(f"Store unreachable during {operation}: {e}") from e
            except ValueError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise StoreError(f"Invalid JSON from store during {operation}") from e

    @staticmethod
    def _parse(schema: Type[RowT], rows: List[Dict[str, Any]]) -> List[RowT]:
        try:
            return [schema.model_validate(row) for row in rows]
        except RowValidationError as e:
            raise StoreError(f"Malformed {schema.__name__}: {e}") from e

    # Reads

    async def list_accounts(self, household_id: str, *, active_only: bool = True) -> List[Account]:
        params: Params = [("household_id", _eq(household_id))]
        if active_only:
            params.append(("is_active", _eq(True)))
        rows = await self._request("list_accounts", "GET", "accounts", params)
        return [row.to_domain() for row in self._parse(AccountRow, rows)]

    async def list_credit_cards(self, household_id: str, *, active_only: bool = True) -> List[CreditCard]:
        params: Params = [("household_id", _eq(household_id)), ("order", "name")]
        if active_only:
            params.append(("is_active", _eq(True)))
        rows = await self._request("list_credit_cards", "GET", "credit_cards", params)
        return [row.to_domain() for row in self._parse(CreditCardRow, rows)]

    async def get_credit_card(self, card_id: str) -> CreditCard:
        rows = await self._request("get_credit_card", "GET", "credit_cards", [("id", _eq(card_id))])
        if not rows:
            raise NotFoundError("Credit card", card_id)
        return self._parse(CreditCardRow, rows[:1])[0].to_domain()

    async def get_transaction(self, transaction_id: str) -> Transaction:
        rows = await self._request("get_transaction", "GET", "transactions", [("id", _eq(transaction_id))])
        if not rows:
            raise NotFoundError("Transaction", transaction_id)
        return self._parse(TransactionRow, rows[:1])[0].to_domain()

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
        params: Params = [("household_id", _eq(household_id)), ("order", "transaction_date")]
        if type is not None:
            params.append(("type", _eq(type.value)))
        if status is not None:
            params.append(("status", _eq(status.value)))
        if account_id is not None:
            params.append(("account_id", _eq(account_id)))
        if credit_card_id is not None:
            params.append(("credit_card_id", _eq(credit_card_id)))
        if without_credit_card:
            params.append(("credit_card_id", "is.null"))
        if date_from is not None:
            params.append(("transaction_date", f"gte.{date_from.isoformat()}"))
        if date_to is not None:
            params.append(("transaction_date", f"lte.{date_to.isoformat()}"))
        if is_installment is not None:
            params.append(("is_installment", _eq(is_installment)))
        if is_reimbursable is not None:
            params.append(("is_reimbursable", _eq(is_reimbursable)))

        rows = await self._request("list_transactions", "GET", "transactions", params)
        return [row.to_domain() for row in self._parse(TransactionRow, rows)]

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
        params: Params = [("household_id", _eq(household_id)), ("order", "due_date")]
        if credit_card_id is not None:
            params.append(("credit_card_id", _eq(credit_card_id)))
        if status is not None:
            params.append(("status", _eq(status.value)))
        if billing_month is not None:
            params.append(("billing_month", _eq(billing_month.isoformat())))
        if billing_month_from is not None:
            params.append(("billing_month", f"gte.{billing_month_from.isoformat()}"))
        if billing_month_before is not None:
            params.append(("billing_month", f"lt.{billing_month_before.isoformat()}"))
        if due_on_or_before is not None:
            params.append(("due_date", f"lte.{due_on_or_before.isoformat()}"))

        rows = await self._request("list_installments", "GET", "installments", params)
        return [row.to_domain() for row in self._parse(InstallmentRow, rows)]

    async def list_expected_transactions(
        self, household_id: str, *, active_only: bool = True
    ) -> List[ExpectedTransaction]:
        params: Params = [("household_id", _eq(household_id))]
        if active_only:
            params.append(("is_active", _eq(True)))
        rows = await self._request("list_expected_transactions", "GET", "expected_transactions", params)
        return [row.to_domain() for row in self._parse(ExpectedTransactionRow, rows)]

    # Writes

    async def save_expected_transaction(self, expected: ExpectedTransaction) -> ExpectedTransaction:
        payload = ExpectedTransactionRow.model_validate(asdict(expected)).model_dump(mode="json")
        rows = await self._request(
            "save_expected_transaction",
            "POST",
            "expected_transactions",
            json=[payload],
            prefer="resolution=merge-duplicates,return=representation",
        )
        return self._parse(ExpectedTransactionRow, rows[:1] or [payload])[0].to_domain()

    async def insert_installments(self, installments: Sequence[Installment]) -> List[Installment]:
        """Bulk insert - PostgREST runs a JSON array insert as one statement"""
        payload = [InstallmentRow.model_validate(asdict(inst)).model_dump(mode="json") for inst in installments]
        if not payload:
            return []
        rows = await self._request(
            "insert_installments", "POST", "installments", json=payload, prefer="return=representation"
        )
        return [row.to_domain() for row in self._parse(InstallmentRow, rows or payload)]

    async def update_installment(
        self,
        installment_id: str,
        *,
        status: InstallmentStatus,
        paid_amount_cents: Optional[int] = None,
        paid_at: Optional[datetime] = None,
    ) -> Installment:
        changes: Dict[str, Any] = {"status": status.value}
        if paid_amount_cents is not None:
            changes["paid_amount_cents"] = paid_amount_cents
        if paid_at is not None:
            changes["paid_at"] = paid_at.isoformat()

        rows = await self._request(
            "update_installment",
            "PATCH",
            "installments",
            [("id", _eq(installment_id))],
            json=changes,
            prefer="return=representation",
        )
        if not rows:
            raise NotFoundError("Installment", installment_id)
        return self._parse(InstallmentRow, rows[:1])[0].to_domain()

    async def settle_invoice(
        self,
        installment_ids: Sequence[str],
        transaction_ids: Sequence[str],
        *,
        paid_at: datetime,
        carry_over: Optional[Transaction] = None,
    ) -> Optional[Transaction]:
        """
        Settle an invoice through the settle_invoice database function.

        PostgREST runs an RPC call in one transaction, so the item updates and
        the carry-over insert are committed together or not at all. The
        function returns the inserted carry-over row, if any.
        """
        carry_payload = None
        if carry_over is not None:
            carry_payload = TransactionRow.model_validate(asdict(carry_over)).model_dump(mode="json")

        rows = await self._request(
            "settle_invoice",
            "POST",
            "rpc/settle_invoice",
            json={
                "installment_ids": list(installment_ids),
                "transaction_ids": list(transaction_ids),
                "paid_at": paid_at.isoformat(),
                "carry_over": carry_payload,
            },
        )
        if carry_payload is None:
            return None
        return self._parse(TransactionRow, rows[:1] or [carry_payload])[0].to_domain()
