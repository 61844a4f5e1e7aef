"""Pydantic row schemas validating store data at the adapter boundary"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finansix_ledger.domain.models import (
    Account,
    AccountType,
    CreditCard,
    ExpectedTransaction,
    Installment,
    InstallmentStatus,
    RecurrenceType,
    Transaction,
    TransactionStatus,
    TransactionType,
)


class RowSchema(BaseModel):
    """Base for store rows; accepts ORM objects and JSON dicts alike"""

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class AccountRow(RowSchema):
    id: str
    household_id: str
    name: str = ""
    type: AccountType
    current_balance_cents: int = 0
    is_active: bool = True

    def to_domain(self) -> Account:
        return Account(**self.model_dump())


class CreditCardRow(RowSchema):
    id: str
    household_id: str
    name: str = ""
    credit_limit_cents: int = Field(..., ge=0)
    closing_day: int = Field(..., ge=1, le=31)
    due_day: int = Field(..., ge=1, le=31)
    grace_period_days: int = Field(0, ge=0)
    account_id: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True
    available_limit_cents: Optional[int] = None

    def to_domain(self) -> CreditCard:
        return CreditCard(**self.model_dump())


class TransactionRow(RowSchema):
    id: str
    household_id: str
    type: TransactionType
    status: TransactionStatus = TransactionStatus.COMPLETED
    amount_cents: int
    transaction_date: date
    description: str = ""
    account_id: Optional[str] = None
    credit_card_id: Optional[str] = None
    is_installment: bool = False
    total_installments: int = Field(1, ge=1, le=48)
    is_reimbursable: bool = False
    reimbursed_amount_cents: int = 0

    @field_validator("reimbursed_amount_cents", mode="before")
    @classmethod
    def _null_reimbursed(cls, value):
        return 0 if value is None else value

    def to_domain(self) -> Transaction:
        return Transaction(**self.model_dump())


class InstallmentRow(RowSchema):
    id: str
    household_id: str
    transaction_id: str
    credit_card_id: str
    installment_number: int = Field(..., ge=1)
    total_installments: int = Field(..., ge=1, le=48)
    amount_cents: int
    billing_month: date
    due_date: date
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_amount_cents: Optional[int] = None
    paid_at: Optional[datetime] = None

    @field_validator("billing_month")
    @classmethod
    def _first_of_month(cls, value: date) -> date:
        return value.replace(day=1)

    def to_domain(self) -> Installment:
        return Installment(**self.model_dump())


class ExpectedTransactionRow(RowSchema):
    id: str
    household_id: str
    description: str = ""
    type: TransactionType
    amount_cents: int
    recurrence_type: RecurrenceType
    start_date: date
    confidence_percent: int = Field(100, ge=0, le=100)
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    end_date: Optional[date] = None
    is_active: bool = True

    @field_validator("confidence_percent", mode="before")
    @classmethod
    def _null_confidence(cls, value):
        return 100 if value is None else value

    def to_domain(self) -> ExpectedTransaction:
        return ExpectedTransaction(**self.model_dump())
