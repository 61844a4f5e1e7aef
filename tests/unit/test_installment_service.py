"""Unit tests for the installment write path"""

import pytest
from datetime import date
from finansix_ledger.domain.exceptions import NotFoundError, ValidationError
from finansix_ledger.domain.models import InstallmentStatus
from finansix_ledger.services.installments import InstallmentService

from factories import make_installment, make_transaction


@pytest.fixture
def service(store, clock) -> InstallmentService:
    return InstallmentService(store, clock)


async def test_create_installments_persists_plan(service, store, card):
    """Test a 3x card purchase is stored as three installments in one batch"""
    store.add(
        card,
        make_transaction(
            "txn_1",
            10000,
            date(2024, 3, 12),
            credit_card_id=card.id,
            is_installment=True,
            total_installments=3,
        ),
    )

    created = await service.create_installments("txn_1")

    assert len(created) == 3
    assert store.insert_batches == [3]
    assert sum(i.amount_cents for i in store.installments.values()) == 10000
    assert created[0].billing_month == date(2024, 4, 1)


async def test_create_installments_skips_plain_purchases(service, store, card):
    """Test non-installment purchases produce nothing"""
    store.add(card, make_transaction("txn_1", 10000, date(2024, 3, 12), credit_card_id=card.id))

    assert await service.create_installments("txn_1") == []
    assert store.insert_batches == []


async def test_create_installments_skips_purchases_without_card(service, store):
    """Test installment flag without a card produces nothing"""
    store.add(make_transaction("txn_1", 10000, date(2024, 3, 12), is_installment=True, total_installments=3))

    assert await service.create_installments("txn_1") == []


async def test_create_installments_unknown_transaction(service):
    """Test missing transaction raises not found"""
    with pytest.raises(NotFoundError):
        await service.create_installments("missing")


async def test_create_installments_unknown_card(service, store):
    """Test transaction pointing at a missing card raises not found"""
    store.add(
        make_transaction(
            "txn_1", 10000, date(2024, 3, 12), credit_card_id="ghost", is_installment=True, total_installments=2
        )
    )
    with pytest.raises(NotFoundError):
        await service.create_installments("txn_1")


async def test_create_installments_invalid_count_writes_nothing(service, store, card):
    """Test a rejected plan leaves the store untouched"""
    store.add(
        card,
        make_transaction(
            "txn_1", 10000, date(2024, 3, 12), credit_card_id=card.id, is_installment=True, total_installments=60
        ),
    )

    with pytest.raises(ValidationError):
        await service.create_installments("txn_1")
    assert store.installments == {}


async def test_mark_paid_defaults_to_full_amount(service, store, clock):
    """Test settling an installment without an explicit amount"""
    store.add(make_installment("inst_1", 3333, date(2024, 3, 1), date(2024, 3, 20)))

    paid = await service.mark_paid("inst_1")

    assert paid.status == InstallmentStatus.PAID
    assert paid.paid_at == clock.now()
    assert paid.paid_amount_cents is None


async def test_mark_paid_with_amount(service, store):
    """Test settling an installment with a specific amount"""
    store.add(make_installment("inst_1", 3333, date(2024, 3, 1), date(2024, 3, 20)))

    paid = await service.mark_paid("inst_1", paid_amount_cents=3000)

    assert paid.paid_amount_cents == 3000
    assert store.installments["inst_1"].status == InstallmentStatus.PAID


async def test_mark_paid_unknown_installment(service):
    """Test missing installment raises not found"""
    with pytest.raises(NotFoundError):
        await service.mark_paid("missing")


async def test_pending_total(service, store):
    """Test pending sum with and without a due-date cutoff"""
    store.add(
        make_installment("i1", 1000, date(2024, 3, 1), date(2024, 3, 20)),
        make_installment("i2", 2000, date(2024, 4, 1), date(2024, 4, 20)),
        make_installment("i3", 500, date(2024, 2, 1), date(2024, 2, 20), status=InstallmentStatus.PAID),
    )

    assert await service.pending_total("household_1") == 3000
    assert await service.pending_total("household_1", until=date(2024, 3, 31)) == 1000
    assert await service.pending_total("other_household") == 0
