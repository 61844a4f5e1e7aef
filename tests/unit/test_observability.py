"""Unit tests for structured logging and metrics"""

import json
import logging
import pytest
from prometheus_client import REGISTRY

from finansix_ledger.infrastructure.observability.logging import CustomJsonFormatter, log_free_balance, setup_logging
from finansix_ledger.infrastructure.observability.metrics import record_free_balance, record_installment_plan


@pytest.fixture
def root_logger():
    """Drop the JSON handler installed by the test"""
    logger = logging.getLogger()
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, CustomJsonFormatter):
            logger.removeHandler(handler)
    logger.setLevel(level)


def test_json_log_lines(root_logger, capsys):
    """Test log records are emitted as JSON with service metadata"""
    setup_logging("INFO")

    log_free_balance("household_1", 124500, True, 12.5)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "Free balance computed"
    assert record["level"] == "INFO"
    assert record["service"] == "finansix-ledger"
    assert record["household_id"] == "household_1"
    assert record["free_balance_cents"] == 124500
    assert "timestamp" in record


def test_free_balance_gauge():
    """Test the gauge keeps the last value per mode"""
    record_free_balance(80000, include_projections=False)

    value = REGISTRY.get_sample_value("finansix_last_free_balance_cents", {"mode": "without_projections"})
    assert value == 80000


def test_installment_counters():
    """Test plan and installment counters advance together"""
    before = REGISTRY.get_sample_value("finansix_installments_created_total") or 0

    record_installment_plan(3)

    assert REGISTRY.get_sample_value("finansix_installments_created_total") == before + 3
