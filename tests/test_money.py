"""
Money Tests - Unit Tests for the Monetary Value Type

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cartprice.domain.money (Money, to_decimal)
- cartprice.domain.errors (InvalidAmount)
- pytest (testing framework)
"""
from decimal import Decimal

import pytest  # Testing framework for writing and running tests

from cartprice.domain.errors import InvalidAmount
from cartprice.domain.money import Money


class TestConstruction:
    def test_from_int_str_decimal(self):
        assert Money(2000).amount == Decimal(2000)
        assert Money("1500.50").amount == Decimal("1500.50")
        assert Money(Decimal("0.1")).amount == Decimal("0.1")

    def test_from_money(self):
        assert Money(Money(7)) == Money(7)

    def test_string_with_thousands_separator(self):
        assert Money("10,948,570") == Money(10948570)

    def test_default_is_zero(self):
        assert Money().is_zero()
        assert Money.zero() == 0

    @pytest.mark.parametrize("value", ["abc", "", "12..5", None, [], object()])
    def test_rejects_non_numeric(self, value):
        with pytest.raises(InvalidAmount):
            Money(value)

    @pytest.mark.parametrize("value", [0.1, 1.0, True])
    def test_rejects_floats_and_bools(self, value):
        with pytest.raises(InvalidAmount):
            Money(value)

    @pytest.mark.parametrize("value", ["NaN", "Infinity", Decimal("-Infinity")])
    def test_rejects_non_finite(self, value):
        with pytest.raises(InvalidAmount, match="finite"):
            Money(value)

    def test_is_immutable(self):
        money = Money(5)
        with pytest.raises(AttributeError):
            money.amount = Decimal(6)
        with pytest.raises(AttributeError):
            money._amount = Decimal(6)


class TestArithmetic:
    def test_add_and_subtract(self):
        assert Money("0.1") + Money("0.2") == Money("0.3")
        assert Money(10) - Money("2.5") == Money("7.5")
        assert Money(10) + 5 == Money(15)
        assert 100 - Money(40) == Money(60)

    def test_builtin_sum(self):
        assert sum([Money(1), Money(2), Money(3)]) == Money(6)

    def test_money_sum(self):
        assert Money.sum([Money("1.10"), Money("2.20")]) == Money("3.30")
        assert Money.sum([]) == Money(0)

    def test_multiply_by_quantity(self):
        assert Money("19.99") * 3 == Money("59.97")
        assert 2 * Money(1500) == Money(3000)

    def test_multiply_by_money_is_unsupported(self):
        with pytest.raises(TypeError):
            Money(2) * Money(3)

    def test_divide(self):
        assert Money(10) / 4 == Money("2.5")
        assert Money(297) / Money(2970) == Decimal("0.1")

    def test_inexact_division_raises(self):
        with pytest.raises(InvalidAmount, match="exactly"):
            Money(10) / 3

    def test_divide_by_zero(self):
        with pytest.raises(InvalidAmount):
            Money(10) / 0
        with pytest.raises(InvalidAmount):
            Money(10) / Money(0)

    def test_percent_is_exact(self):
        assert Money(2000).percent(40) == Money(800)
        assert Money(5500).percent(69) == Money(3795)
        assert Money("0.10").percent("33.3") == Money("0.0333")

    def test_long_fractions_are_not_rounded(self):
        # 31 and 29 significant digits, past the default 28-digit decimal context
        price = Money("123456789.123456789")
        assert price.percent("12.345678901234") == Money("15241578.76695555652797397777626")
        assert price * 97 + Money("0.000000000000000001") == Money("11975308544.975308533000000001")

    def test_negation(self):
        assert -Money(5) == Money(-5)
        assert (-Money(5)).is_negative()


class TestComparison:
    def test_ordering(self):
        assert Money(1) < Money(2)
        assert Money(2) >= Money(2)
        assert Money(3) > 2
        assert min(Money(3795), Money(5000)) == Money(3795)

    def test_equality_ignores_exponent(self):
        assert Money("2200") == Money("2200.00")
        assert hash(Money("2200")) == hash(Money("2200.00"))

    def test_equality_with_numbers(self):
        assert Money(5) == 5
        assert Money("5.5") == Decimal("5.5")
        assert Money(5) != "5"

    def test_not_equal_to_float(self):
        assert Money(1) != 1.0


class TestPresentation:
    def test_quantize_rounds_half_up(self):
        assert Money("2.675").quantize(2) == Decimal("2.68")
        assert Money("2.665").quantize(2) == Decimal("2.67")
        assert Money("1534.5").quantize(0) == Decimal("1535")

    def test_quantize_does_not_change_value(self):
        money = Money("0.0999")
        money.quantize(2)
        assert money == Money("0.0999")

    def test_str_and_repr(self):
        assert str(Money("12.50")) == "12.50"
        assert repr(Money("12.50")) == "Money('12.50')"
