"""64-bit limb primitives shared by the fixed-width word types."""

from __future__ import annotations

from .errors import ArithmeticOverflowError, DivideByZeroError

MASK64: int = 0xFFFFFFFFFFFFFFFF


def add64(x: int, y: int, carry: int = 0) -> tuple[int, int]:
    """Return ``(sum, carry_out)`` of ``x + y + carry``."""
    s = x + y + carry
    return s & MASK64, s >> 64


def sub64(x: int, y: int, borrow: int = 0) -> tuple[int, int]:
    """Return ``(diff, borrow_out)`` of ``x - y - borrow``."""
    d = x - y - borrow
    return d & MASK64, 1 if d < 0 else 0


def mul64(x: int, y: int) -> tuple[int, int]:
    """Multiply two 64-bit unsigned values, return (high64, low64)."""
    p = x * y
    return p >> 64, p & MASK64


def div64(hi: int, lo: int, y: int) -> tuple[int, int]:
    """Divide the 128-bit value ``(hi, lo)`` by ``y``.

    The quotient must fit in 64 bits, so ``hi`` has to be less than ``y``.
    """
    if y == 0:
        raise DivideByZeroError("division by zero")
    if hi >= y:
        raise ArithmeticOverflowError("quotient overflows 64 bits")
    return divmod((hi << 64) | lo, y)


def len64(x: int) -> int:
    return x.bit_length()


def leading_zeros64(x: int) -> int:
    return 64 - x.bit_length()


def trailing_zeros64(x: int) -> int:
    if x == 0:
        return 64
    return (x & -x).bit_length() - 1


def ones_count64(x: int) -> int:
    return bin(x).count("1")


def reverse64(x: int) -> int:
    return int(format(x, "064b")[::-1], 2)


def reverse_bytes64(x: int) -> int:
    return int.from_bytes(x.to_bytes(8, "little"), "big")
