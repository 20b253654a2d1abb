"""Checked uint256 arithmetic for reserves, shares and token amounts.

Every value held by a pool is an unsigned 256-bit integer. Python ints never
wrap, so the bound is enforced explicitly: a SafeInt only ever holds a value
in [0, 2**256 - 1], and an operation whose exact result falls outside that
range raises instead of returning.

Usage pattern:
    from cpamm.safe_int import S

    def share_of(reserve: int, shares: int, total: int) -> int:
        return (S(reserve) * shares // total).value

Plain int operands are range-checked too, so ``S(10) + (-3)`` raises rather
than quietly subtracting.
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""


class Underflow(SafeIntError):
    """Subtraction would produce a negative result."""


class Uint256Overflow(SafeIntError):
    """Value does not fit in uint256 (too large, or negative at construction)."""


def is_uint256(value: object) -> bool:
    """Check if a value is an int in the uint256 range without raising."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT256_MAX


def _operand(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return SafeInt(x)._value


class SafeInt:
    """Unsigned 256-bit integer with checked arithmetic.

    Supported: ``+ - * // %`` (with plain ints on either side), comparisons,
    ``int()``, ``bool()`` and use as an index. There is no true division; all
    pool math is integer floor math.
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Wrap an int, or copy another SafeInt.

        Raises:
            TypeError: If value is not an int (bool is rejected too)
            Uint256Overflow: If value is outside the uint256 range
        """
        if isinstance(value, SafeInt):
            value = value._value
        elif not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        elif not 0 <= value <= UINT256_MAX:
            raise Uint256Overflow(f"Value outside uint256 range: {value}")
        self._value = value

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    # --- Arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        rhs = _operand(other)
        total = self._value + rhs
        if total > UINT256_MAX:
            raise Uint256Overflow(f"Overflow: {self._value} + {rhs}")
        return SafeInt(total)

    __radd__ = __add__

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        rhs = _operand(other)
        product = self._value * rhs
        if product > UINT256_MAX:
            raise Uint256Overflow(f"Overflow: {self._value} * {rhs}")
        return SafeInt(product)

    __rmul__ = __mul__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Checked subtraction.

        Raises:
            Underflow: If other > self
        """
        rhs = _operand(other)
        if rhs > self._value:
            raise Underflow(f"Underflow: {self._value} - {rhs} = {self._value - rhs}")
        return SafeInt(self._value - rhs)

    def __rsub__(self, other: int) -> SafeInt:
        return SafeInt(other) - self

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division; for unsigned values this truncates.

        Raises:
            DivisionByZero: If other is zero
        """
        divisor = _operand(other)
        if not divisor:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // divisor)

    def __rfloordiv__(self, other: int) -> SafeInt:
        return SafeInt(other) // self

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        divisor = _operand(other)
        if not divisor:
            raise DivisionByZero(f"Modulo by zero: {self._value} % 0")
        return SafeInt(self._value % divisor)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            other = other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _operand(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _operand(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _operand(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _operand(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __bool__(self) -> bool:
        return self._value != 0


# Short alias used throughout the pool math
S = SafeInt
