"""Checked uint256 arithmetic for token and share amounts.

On-chain accounting reverts instead of wrapping. SafeInt reproduces that on
top of Python's unbounded integers: every value it holds is in
[0, 2^256-1], and every operation that would leave that range raises.

    from fee_engine.safe_int import S

    shares_out = S(amount).mul_div(reserve, supply).value

Wrap plain ints with S() where a computation starts and read .value where
it ends; mixed SafeInt/int operands are accepted in between.
"""

from __future__ import annotations

from functools import total_ordering

from fee_engine.constants import UINT256_MAX
from fee_engine.errors import ArithmeticOverflow, DivisionByZero, Underflow


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


def _uint(result: int, expr: str) -> SafeInt:
    """Wrap an operation result, enforcing the uint256 range."""
    if result < 0:
        raise Underflow(f"Underflow: {expr} = {result}")
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"Overflow: {expr} exceeds uint256")
    return SafeInt(result)


@total_ordering
class SafeInt:
    """Immutable uint256 value with checked arithmetic.

    Raises:
        TypeError: On construction from anything but int or SafeInt (bool included)
        Underflow: On a negative value or result
        ArithmeticOverflow: On a value or result above 2^256-1
        DivisionByZero: On division by zero
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._value
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"Negative value cannot be uint256: {value}")
        if value > UINT256_MAX:
            raise ArithmeticOverflow(f"Value exceeds uint256 max: {value}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __hash__(self) -> int:
        return hash(self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt | int):
            return self._value == _raw(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    # --- Arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return _uint(self._value + _raw(other), f"{self._value} + {_raw(other)}")

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        return _uint(self._value - _raw(other), f"{self._value} - {_raw(other)}")

    def __rsub__(self, other: int) -> SafeInt:
        return _uint(other - self._value, f"{other} - {self._value}")

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return _uint(self._value * _raw(other), f"{self._value} * {_raw(other)}")

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // divisor)

    def mul_div(self, numerator: SafeInt | int, denominator: SafeInt | int) -> SafeInt:
        """floor(self * numerator / denominator), with the product checked first."""
        return (self * numerator) // denominator

    def min(self, other: SafeInt | int) -> SafeInt:
        return self if self._value <= _raw(other) else SafeInt(other)

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)


S = SafeInt
