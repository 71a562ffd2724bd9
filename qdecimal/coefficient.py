"""Unsigned decimal coefficient with a 128-bit fast path.

A coefficient is exactly one of two variants:

- :class:`Exact` wraps a :class:`~qdecimal.uint128.Uint128`,
- :class:`Big` wraps a Python ``int`` that no longer fits in 128 bits.

Every operation tries the ``Uint128`` path first. When either operand is
``Big`` or the word arithmetic overflows, the same operation is re-executed on
Python ints. Which variant a result lands in never changes its value:
:meth:`Coefficient.from_int` picks ``Exact`` whenever the value fits.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple, final

from .errors import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DivideByZeroError,
    NegativeValueError,
)
from .uint128 import Uint128

__all__ = ["Coefficient", "Exact", "Big"]

_U128_LIMIT = 1 << 128

# 10^0 .. 10^19, every entry fits in one 64-bit limb
_POW10_64 = tuple(10**i for i in range(20))


class Coefficient(ABC):
    """Base of the closed ``Exact | Big`` variant. Never signed."""

    __slots__ = ()

    @staticmethod
    def from_uint128(u: Uint128) -> "Exact":
        return Exact(u)

    @staticmethod
    def from_int(value: int) -> "Coefficient":
        if value < 0:
            raise NegativeValueError("coefficient cannot be negative")
        if value < _U128_LIMIT:
            return Exact(Uint128.from_int(value))
        return Big(value)

    # ------- variant-specific -------
    @abstractmethod
    def overflow(self) -> bool:
        """True when the value lives in the arbitrary-precision variant."""
        raise NotImplementedError

    @abstractmethod
    def to_int(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def is_zero(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_odd(self) -> bool:
        raise NotImplementedError

    # ------- arithmetic -------
    def add(self, other: "Coefficient") -> "Coefficient":
        pair = _exact_pair(self, other)
        if pair is not None:
            try:
                return Exact(pair[0].add(pair[1]))
            except ArithmeticOverflowError:
                pass
        return Big(self.to_int() + other.to_int())

    def sub(self, other: "Coefficient") -> "Coefficient":
        pair = _exact_pair(self, other)
        if pair is not None:
            return Exact(pair[0].sub(pair[1]))
        diff = self.to_int() - other.to_int()
        if diff < 0:
            raise ArithmeticUnderflowError("coefficient subtraction underflow")
        return Coefficient.from_int(diff)

    def mul(self, other: "Coefficient") -> "Coefficient":
        pair = _exact_pair(self, other)
        if pair is not None:
            try:
                return Exact(pair[0].mul(pair[1]))
            except ArithmeticOverflowError:
                pass
        return Coefficient.from_int(self.to_int() * other.to_int())

    def quo_rem(self, other: "Coefficient") -> Tuple["Coefficient", "Coefficient"]:
        if other.is_zero():
            raise DivideByZeroError("coefficient division by zero")
        pair = _exact_pair(self, other)
        if pair is not None:
            q, r = pair[0].quo_rem(pair[1])
            return Exact(q), Exact(r)
        q, r = divmod(self.to_int(), other.to_int())
        return Coefficient.from_int(q), Coefficient.from_int(r)

    def quo_rem_pow10(self, k: int) -> Tuple["Coefficient", int]:
        """Divide by ``10**k`` (0 <= k <= 19); the remainder is a plain int."""
        divisor = _POW10_64[k]
        if isinstance(self, Exact):
            q, r = self.u128.quo_rem64(divisor)
            return Exact(q), r
        q, r = divmod(self.to_int(), divisor)
        return Coefficient.from_int(q), r

    def cmp(self, other: "Coefficient") -> int:
        pair = _exact_pair(self, other)
        if pair is not None:
            return pair[0].cmp(pair[1])
        a, b = self.to_int(), other.to_int()
        return (a > b) - (a < b)

    def trailing_zeros(self) -> int:
        """Count trailing decimal zeros, capped at 19.

        Tests 10^16 first, then narrows with 8, 4, 2, 1 so that at most five
        divisions are needed.
        """
        if isinstance(self, Exact):
            u = self.u128

            def divisible(k: int) -> bool:
                return u.mod64(_POW10_64[k]) == 0

        else:
            n = self.to_int()

            def divisible(k: int) -> bool:
                return n % _POW10_64[k] == 0

        zeros = 0
        if divisible(16):
            zeros = 16
            # only 19 digits of scale can ever be trimmed
            if divisible(zeros + 2):
                zeros += 2
            if divisible(zeros + 1):
                zeros += 1
            return zeros

        for step in (8, 4, 2, 1):
            if divisible(zeros + step):
                zeros += step
        return zeros

    # ------- Python protocol -------
    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Coefficient):
            return NotImplemented
        return self.cmp(other) == 0

    def __hash__(self) -> int:
        return hash(self.to_int())

    def __str__(self) -> str:
        return str(self.to_int())


@final
class Exact(Coefficient):
    """Coefficient held in a single :class:`Uint128`."""

    __slots__ = ("u128",)

    def __init__(self, u128: Uint128) -> None:
        self.u128 = u128

    def overflow(self) -> bool:
        return False

    def to_int(self) -> int:
        return self.u128.to_int()

    def is_zero(self) -> bool:
        return self.u128.is_zero()

    def is_odd(self) -> bool:
        return bool(self.u128.lo & 1)

    def __str__(self) -> str:
        return str(self.u128)

    def __repr__(self) -> str:
        return f"Exact({self.u128})"


@final
class Big(Coefficient):
    """Coefficient that has outgrown 128 bits."""

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = value

    def overflow(self) -> bool:
        return True

    def to_int(self) -> int:
        return self.value

    def is_zero(self) -> bool:
        return self.value == 0

    def is_odd(self) -> bool:
        return bool(self.value & 1)

    def __repr__(self) -> str:
        return f"Big({self.value})"


def _exact_pair(a: Coefficient, b: Coefficient) -> Optional[Tuple[Uint128, Uint128]]:
    if isinstance(a, Exact) and isinstance(b, Exact):
        return a.u128, b.u128
    return None
