"""Structured JSON logging for ledger calculations"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from finansix_ledger.config import settings

# Chatty at INFO; their failures still surface through StoreError
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding a UTC timestamp, level name and service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str | None = None) -> None:
    """Route all records to stdout as one JSON object per line"""
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_installment_plan(transaction_id: str, card_id: str, count: int, first_billing_month: str) -> None:
    logging.info(
        "Installments created",
        extra={
            "transaction_id": transaction_id,
            "credit_card_id": card_id,
            "installments_created": count,
            "first_billing_month": first_billing_month,
        },
    )


def log_invoice_payment(card_id: str, billing_month: str, paid_cents: int, carried_over_cents: int) -> None:
    logging.info(
        "Invoice paid",
        extra={
            "card_id": card_id,
            "billing_month": billing_month,
            "paid_cents": paid_cents,
            "carried_over_cents": carried_over_cents,
            "outcome": "partial" if carried_over_cents else "settled",
        },
    )


def log_free_balance(
    household_id: str,
    free_balance_cents: int,
    include_projections: bool,
    duration_ms: float,
) -> None:
    """Log the computed free balance and how long the reads took"""
    logging.info(
        "Free balance computed",
        extra={
            "household_id": household_id,
            "free_balance_cents": free_balance_cents,
            "include_projections": include_projections,
            "duration_ms": round(duration_ms, 2),
        },
    )
