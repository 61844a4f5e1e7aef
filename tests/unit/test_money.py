"""Unit tests for cents arithmetic"""

import pytest
from decimal import Decimal
from finansix_ledger.domain.exceptions import ValidationError
from finansix_ledger.domain.money import (
    add_cents,
    divide_cents,
    multiply_cents,
    subtract_cents,
    to_cents,
    to_reais,
)


def test_to_cents_rounds_half_up():
    """Test conversion rounds to the nearest cent"""
    assert to_cents(123.45) == 12345
    assert to_cents(123.456) == 12346
    assert to_cents(123.454) == 12345
    assert to_cents("0.005") == 1


def test_to_cents_avoids_float_drift():
    """Test 0.1 + 0.2 converts to exactly 30 cents"""
    assert to_cents(0.1 + 0.2) == 30


def test_to_cents_negative_ties_round_away_from_zero():
    """Test negative ties round away from zero"""
    assert to_cents(-1.005) == -101


def test_to_cents_rejects_garbage():
    """Test non-numeric input is a validation error"""
    with pytest.raises(ValidationError):
        to_cents("twelve")


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "NaN", "Infinity"])
def test_to_cents_rejects_non_finite(value):
    """Test NaN and infinity are validation errors"""
    with pytest.raises(ValidationError):
        to_cents(value)


def test_scaling_by_non_finite_factor():
    """Test a non-finite factor or divisor is a validation error"""
    with pytest.raises(ValidationError):
        multiply_cents(100, float("inf"))
    with pytest.raises(ValidationError):
        divide_cents(100, "NaN")


def test_to_reais_is_exact():
    """Test cents convert back without rounding"""
    assert to_reais(12345) == Decimal("123.45")
    assert float(to_reais(12345)) == 123.45
    assert to_reais(-5) == Decimal("-0.05")


def test_add_and_subtract():
    """Test integer addition and subtraction"""
    assert add_cents(10, 20, 30) == 60
    assert add_cents() == 0
    assert subtract_cents(100, 30) == 70
    assert subtract_cents(30, 100) == -70


def test_multiply_rounds_to_nearest_cent():
    """Test scaling by a confidence factor"""
    assert multiply_cents(100, 1.556) == 156
    assert multiply_cents(50000, Decimal("0.8")) == 40000
    assert multiply_cents(333, 3) == 999
    assert multiply_cents(1, "0.5") == 1


def test_divide_rounds_to_nearest_cent():
    """Test splitting an amount"""
    assert divide_cents(100, 3) == 33
    assert divide_cents(10000, 3) == 3333
    assert divide_cents(2, 3) == 1


def test_divide_by_zero():
    """Test dividing by zero is rejected"""
    with pytest.raises(ValidationError):
        divide_cents(100, 0)


@pytest.mark.parametrize("value", [1.5, "10", True, None])
def test_cents_operations_require_integers(value):
    """Test floats, strings and booleans are not accepted as cents"""
    with pytest.raises(ValidationError):
        add_cents(100, value)
