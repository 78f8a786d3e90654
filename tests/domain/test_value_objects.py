"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from quikprint.domain.exceptions import ValidationError
from quikprint.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "NGN"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_float_keeps_literal(self):
        assert Money.of(0.1).amount == Decimal("0.1")

    def test_of_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_non_decimal_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10)  # type: ignore[arg-type]

    def test_negative_amount_allowed_for_discounts(self):
        assert Money.of("-500").amount == Decimal("-500")

    def test_addition_and_subtraction(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("5") - Money.of("10") == Money.of("-5")

    def test_multiplication(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")
        assert Money.of("100") * Decimal("0.08") == Money.of("8.00")

    def test_multiplication_by_bool_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1") * True

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "NGN") + Money(Decimal("5"), "USD")

    def test_quantize_rounds_half_up(self):
        assert Money.of("1.005").quantize() == Money.of("1.01")
        assert Money.of("1.004").quantize() == Money.of("1.00")

    def test_minor_units(self):
        assert Money.of("13500").to_minor_units() == 1350000
        assert Money.of("10.995").to_minor_units() == 1100

    def test_str_formatting(self):
        assert str(Money.of("1234")) == "NGN 1,234.00"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") >= Money.of("10")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_positive(self):
        assert Quantity(5).value == 5

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(value)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)
