"""SQLAlchemy ORM models for the ledger tables"""

import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Date, Integer, ForeignKey, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class AccountModel(Base):
    """Bank/cash account with its running balance"""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_uuid)
    household_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False, default="")
    type = Column(Text, nullable=False)
    current_balance_cents = Column(BigInteger, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CreditCardModel(Base):
    """Credit card and its statement calendar"""

    __tablename__ = "credit_cards"

    id = Column(String(36), primary_key=True, default=_uuid)
    household_id = Column(Text, nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    name = Column(Text, nullable=False, default="")
    color = Column(Text, nullable=True)
    credit_limit_cents = Column(BigInteger, nullable=False)
    available_limit_cents = Column(BigInteger, nullable=True)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    grace_period_days = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionModel(Base):
    """Income, expense or transfer"""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    household_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="completed")
    amount_cents = Column(BigInteger, nullable=False)
    transaction_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True, index=True)
    is_installment = Column(Boolean, nullable=False, default=False)
    total_installments = Column(Integer, nullable=False, default=1)
    is_reimbursable = Column(Boolean, nullable=False, default=False)
    reimbursed_amount_cents = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class InstallmentModel(Base):
    """Individual installment of a card purchase"""

    __tablename__ = "installments"

    id = Column(String(36), primary_key=True, default=_uuid)
    household_id = Column(Text, nullable=False, index=True)
    transaction_id = Column(String(36), ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False)
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=False, index=True)
    installment_number = Column(Integer, nullable=False)
    total_installments = Column(Integer, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    billing_month = Column(Date, nullable=False, index=True)
    due_date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    paid_amount_cents = Column(BigInteger, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpectedTransactionModel(Base):
    """Recurring projected income or expense"""

    __tablename__ = "expected_transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    household_id = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    type = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    recurrence_type = Column(Text, nullable=False)
    confidence_percent = Column(Integer, nullable=True, default=100)
    day_of_month = Column(Integer, nullable=True)
    day_of_week = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
