"""Pytest fixtures for testing"""

import pytest
from datetime import date

from finansix_ledger.domain.clock import FixedClock
from finansix_ledger.domain.models import CreditCard

from factories import InMemoryLedgerStore, make_card


@pytest.fixture
def store() -> InMemoryLedgerStore:
    """Empty in-memory ledger store"""
    return InMemoryLedgerStore()


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen on 2024-03-15"""
    return FixedClock(date(2024, 3, 15))


@pytest.fixture
def card() -> CreditCard:
    """Card closing on the 10th, due on the 20th"""
    return make_card()
