"""Tests for SafeInt checked arithmetic wrapper."""

import pytest

from fee_engine.constants import UINT256_MAX
from fee_engine.errors import (
    ArithmeticOverflow,
    DivisionByZero,
    FeeEngineError,
    SafeIntError,
    Underflow,
)
from fee_engine.safe_int import S, SafeInt


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_negative_rejected(self):
        """Negative values are not uint256."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_above_uint256_rejected(self):
        """Values above 2^256-1 raise ArithmeticOverflow."""
        assert SafeInt(UINT256_MAX).value == UINT256_MAX
        with pytest.raises(ArithmeticOverflow):
            SafeInt(UINT256_MAX + 1)

    def test_invalid_types_rejected(self):
        """Strings, floats and bools are rejected."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_and_zero(self):
        """S is an alias and zero() builds 0."""
        assert S is SafeInt
        assert SafeInt.zero().value == 0


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add_sub_mul_div(self):
        assert (S(10) + S(5)).value == 15
        assert (5 + S(10)).value == 15
        assert (S(10) - 4).value == 6
        assert (20 - S(4)).value == 16
        assert (S(6) * 7).value == 42
        assert (7 * S(6)).value == 42
        assert (S(17) // 5).value == 3

    def test_sub_underflow(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(5) - S(6)
        with pytest.raises(Underflow):
            3 - S(4)

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(5) // 0

    def test_mul_overflow(self):
        """A product above uint256 raises instead of wrapping."""
        with pytest.raises(ArithmeticOverflow):
            S(2**200) * S(2**100)

    def test_add_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            S(UINT256_MAX) + 1

    def test_mul_div_multiplies_first(self):
        """mul_div keeps precision by dividing last."""
        # 7 // 10 * 10 would give 0; 7 * 10 // 10 gives 7
        assert S(7).mul_div(10, 10).value == 7
        assert S(6 * 10**18).mul_div(9950, 10_000).value == 5_970_000_000_000_000_000

    def test_min_and_comparisons(self):
        assert S(3).min(5).value == 3
        assert S(3) < 5
        assert S(5) >= S(5)
        assert S(0) == 0
        assert not S(0)
        assert S(1)


class TestErrorHierarchy:
    """SafeInt errors are both engine errors and ArithmeticErrors."""

    @pytest.mark.parametrize("error", [DivisionByZero, Underflow, ArithmeticOverflow])
    def test_hierarchy(self, error):
        assert issubclass(error, SafeIntError)
        assert issubclass(error, FeeEngineError)
        assert issubclass(error, ArithmeticError)
