"""Unsigned 256-bit integers built from two :class:`Uint128` limbs.

This is a workspace type: it holds 128x128-bit products and scaled dividends
during decimal multiplication, division, power and square root so that
nothing is truncated before the explicit rescaling step.
"""

from __future__ import annotations

import re
from typing import Any, Union

from .errors import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DivideByZeroError,
    InvalidFormatError,
    NegativeValueError,
    ValueOverflowError,
    must,
)
from .uint128 import MAX as MAX128
from .uint128 import ZERO as ZERO128
from .uint128 import BytesLike, Uint128, _check_buffer

__all__ = ["Uint256", "ZERO", "ONE", "MAX"]

_DIGITS_RE = re.compile(r"[+-]?[0-9]+")
# 2**256 - 1 has 78 digits
_MAX_DIGITS = 78
_MASK128 = (1 << 128) - 1


class Uint256:
    """An unsigned 256-bit number stored as ``(hi, lo)`` 128-bit limbs."""

    __slots__ = ("_lo", "_hi")

    def __init__(self, lo: Uint128 = ZERO128, hi: Uint128 = ZERO128) -> None:
        if not isinstance(lo, Uint128) or not isinstance(hi, Uint128):
            raise TypeError("Uint256 limbs must be Uint128")
        self._lo = lo
        self._hi = hi

    @classmethod
    def _new(cls, lo: Uint128, hi: Uint128) -> "Uint256":
        u = cls.__new__(cls)
        u._lo = lo
        u._hi = hi
        return u

    # ------- constructors -------
    @classmethod
    def from_uint64(cls, v: int) -> "Uint256":
        return cls._new(Uint128(v), ZERO128)

    @classmethod
    def from_uint128(cls, v: Uint128) -> "Uint256":
        return cls._new(v, ZERO128)

    @classmethod
    def from_int(cls, i: int) -> "Uint256":
        if i < 0:
            raise NegativeValueError("uint256: value cannot be negative")
        if i.bit_length() > 256:
            raise ValueOverflowError("uint256: value overflows Uint256")
        return cls._new(Uint128.from_int(i & _MASK128), Uint128.from_int(i >> 128))

    @classmethod
    def from_bytes(cls, b: BytesLike, offset: int = 0) -> "Uint256":
        """Read 32 little-endian bytes starting at ``offset``."""
        _check_buffer(b, offset, 32)
        return cls._new(Uint128.from_bytes(b, offset), Uint128.from_bytes(b, offset + 16))

    @classmethod
    def from_bytes_be(cls, b: BytesLike, offset: int = 0) -> "Uint256":
        _check_buffer(b, offset, 32)
        return cls._new(Uint128.from_bytes_be(b, offset + 16), Uint128.from_bytes_be(b, offset))

    @classmethod
    def parse(cls, s: str) -> "Uint256":
        if not isinstance(s, str):
            raise TypeError("Uint256.parse expects str")
        if not s:
            raise InvalidFormatError("uint256: can't parse empty string")
        if _DIGITS_RE.fullmatch(s) is None:
            raise InvalidFormatError(f"uint256: invalid format {s!r}")
        digits = s.lstrip("+-").lstrip("0")
        if s[0] == "-" and digits:
            raise NegativeValueError("uint256: value cannot be negative")
        if len(digits) > _MAX_DIGITS:
            raise ValueOverflowError("uint256: value overflows Uint256")
        return cls.from_int(int(digits or "0"))

    # ------- accessors -------
    @property
    def lo(self) -> Uint128:
        return self._lo

    @property
    def hi(self) -> Uint128:
        return self._hi

    def is_zero(self) -> bool:
        return self._lo.is_zero() and self._hi.is_zero()

    def equals(self, v: "Uint256") -> bool:
        return self._lo.equals(v._lo) and self._hi.equals(v._hi)

    def equals128(self, v: Uint128) -> bool:
        return self._hi.is_zero() and self._lo.equals(v)

    def cmp(self, v: "Uint256") -> int:
        h = self._hi.cmp(v._hi)
        if h != 0:
            return h
        return self._lo.cmp(v._lo)

    def cmp128(self, v: Uint128) -> int:
        if not self._hi.is_zero():
            return 1
        return self._lo.cmp(v)

    def lt(self, v: "Uint256") -> bool:
        return self.cmp(v) < 0

    def lte(self, v: "Uint256") -> bool:
        return self.cmp(v) <= 0

    def gt(self, v: "Uint256") -> bool:
        return self.cmp(v) > 0

    def gte(self, v: "Uint256") -> bool:
        return self.cmp(v) >= 0

    # ------- bit operations -------
    def and_(self, v: "Uint256") -> "Uint256":
        return Uint256._new(self._lo.and_(v._lo), self._hi.and_(v._hi))

    def or_(self, v: "Uint256") -> "Uint256":
        return Uint256._new(self._lo.or_(v._lo), self._hi.or_(v._hi))

    def xor(self, v: "Uint256") -> "Uint256":
        return Uint256._new(self._lo.xor(v._lo), self._hi.xor(v._hi))

    def not_(self) -> "Uint256":
        return Uint256._new(self._lo.not_(), self._hi.not_())

    def bit(self, i: int) -> int:
        if i >= 256:
            return 0
        if i >= 128:
            return self._hi.bit(i - 128)
        return self._lo.bit(i)

    def set_bit(self, i: int) -> "Uint256":
        if i >= 256:
            return self
        if i >= 128:
            return Uint256._new(self._lo, self._hi.set_bit(i - 128))
        return Uint256._new(self._lo.set_bit(i), self._hi)

    def lsh(self, n: int) -> "Uint256":
        if n < 0:
            raise ValueError("negative shift count")
        if n >= 256:
            return ZERO
        if n >= 128:
            return Uint256._new(ZERO128, self._lo.lsh(n - 128))
        return Uint256._new(self._lo.lsh(n), self._hi.lsh(n).or_(self._lo.rsh(128 - n)))

    def rsh(self, n: int) -> "Uint256":
        if n < 0:
            raise ValueError("negative shift count")
        if n >= 256:
            return ZERO
        if n >= 128:
            return Uint256._new(self._hi.rsh(n - 128), ZERO128)
        return Uint256._new(self._lo.rsh(n).or_(self._hi.lsh(128 - n)), self._hi.rsh(n))

    def leading_zeros(self) -> int:
        if not self._hi.is_zero():
            return self._hi.leading_zeros()
        return 128 + self._lo.leading_zeros()

    def trailing_zeros(self) -> int:
        if not self._lo.is_zero():
            return self._lo.trailing_zeros()
        return 128 + self._hi.trailing_zeros()

    def ones_count(self) -> int:
        return self._lo.ones_count() + self._hi.ones_count()

    def bit_len(self) -> int:
        if not self._hi.is_zero():
            return 128 + self._hi.bit_len()
        return self._lo.bit_len()

    # ------- arithmetic -------
    def add(self, v: "Uint256") -> "Uint256":
        lo, carry = self._lo.add_carry(v._lo, 0)
        hi, carry = self._hi.add_carry(v._hi, carry)
        if carry:
            raise ArithmeticOverflowError("uint256: arithmetic overflow")
        return Uint256._new(lo, hi)

    def must_add(self, v: "Uint256") -> "Uint256":
        return must(self.add, v)

    def add_wrap(self, v: "Uint256") -> "Uint256":
        lo, carry = self._lo.add_carry(v._lo, 0)
        hi, _ = self._hi.add_carry(v._hi, carry)
        return Uint256._new(lo, hi)

    def sub(self, v: "Uint256") -> "Uint256":
        lo, borrow = self._lo.sub_borrow(v._lo, 0)
        hi, borrow = self._hi.sub_borrow(v._hi, borrow)
        if borrow:
            raise ArithmeticUnderflowError("uint256: arithmetic underflow")
        return Uint256._new(lo, hi)

    def must_sub(self, v: "Uint256") -> "Uint256":
        return must(self.sub, v)

    def sub_wrap(self, v: "Uint256") -> "Uint256":
        lo, borrow = self._lo.sub_borrow(v._lo, 0)
        hi, _ = self._hi.sub_borrow(v._hi, borrow)
        return Uint256._new(lo, hi)

    def mul(self, v: "Uint256") -> "Uint256":
        # u*v = (uh*vh)*2^256 + (uh*vl + ul*vh)*2^128 + ul*vl
        carry, lo = self._lo.mul_full(v._lo)
        if not self._hi.is_zero() and not v._hi.is_zero():
            raise ArithmeticOverflowError("uint256: arithmetic overflow")
        try:
            lo_hi = self._lo.mul(v._hi)
            hi_lo = self._hi.mul(v._lo)
        except ArithmeticOverflowError:
            raise ArithmeticOverflowError("uint256: arithmetic overflow") from None

        hi, c1 = carry.add_carry(lo_hi, 0)
        hi, c2 = hi.add_carry(hi_lo, 0)
        if c1 or c2:
            raise ArithmeticOverflowError("uint256: arithmetic overflow")
        return Uint256._new(lo, hi)

    def must_mul(self, v: "Uint256") -> "Uint256":
        return must(self.mul, v)

    def mul_wrap(self, v: "Uint256") -> "Uint256":
        carry, lo = self._lo.mul_full(v._lo)
        hi = carry.add_wrap(self._lo.mul_wrap(v._hi)).add_wrap(self._hi.mul_wrap(v._lo))
        return Uint256._new(lo, hi)

    def mul128(self, v: Uint128) -> "Uint256":
        return self.mul(Uint256._new(v, ZERO128))

    def pow(self, e: int) -> "Uint256":
        """Return ``u ** e``, raising on overflow."""
        if e < 0:
            raise NegativeValueError("uint256: negative exponent")
        result = ONE
        base = self
        while e:
            if e & 1:
                result = result.mul(base)
            e >>= 1
            if e:
                base = base.mul(base)
        return result

    def quo_rem(self, v: "Uint256") -> tuple["Uint256", "Uint256"]:
        """Return ``(u // v, u % v)`` by restoring division.

        One dividend bit per iteration: shift it into the partial remainder,
        subtract the divisor when it fits and record a quotient bit.
        """
        if v.is_zero():
            raise DivideByZeroError("uint256: division by zero")
        if self.lt(v):
            return ZERO, self
        if self._hi.is_zero() and v._hi.is_zero():
            q, r = self._lo.quo_rem(v._lo)
            return Uint256._new(q, ZERO128), Uint256._new(r, ZERO128)

        q = ZERO
        r = ZERO
        for i in range(self.bit_len() - 1, -1, -1):
            r = r.lsh(1)
            if self.bit(i):
                r = r.set_bit(0)
            if r.gte(v):
                r = r.sub(v)
                q = q.set_bit(i)
        return q, r

    def quo_rem128(self, v: Uint128) -> tuple["Uint256", Uint128]:
        """Divide by a 128-bit value; the remainder always fits in 128 bits."""
        q, r = self.quo_rem(Uint256._new(v, ZERO128))
        return q, r._lo

    def div(self, v: "Uint256") -> "Uint256":
        return self.quo_rem(v)[0]

    def mod(self, v: "Uint256") -> "Uint256":
        return self.quo_rem(v)[1]

    # ------- conversions -------
    def to_int(self) -> int:
        return (self._hi.to_int() << 128) | self._lo.to_int()

    def __str__(self) -> str:
        return str(self.to_int())

    def marshal_text(self) -> bytes:
        return str(self).encode("ascii")

    def to_bytes(self) -> bytes:
        """32 bytes, little-endian."""
        return self._lo.to_bytes() + self._hi.to_bytes()

    def to_bytes_be(self) -> bytes:
        """32 bytes, big-endian."""
        return self._hi.to_bytes_be() + self._lo.to_bytes_be()

    def put_bytes(self, buf: bytearray, offset: int = 0) -> None:
        _check_buffer(buf, offset, 32)
        buf[offset : offset + 32] = self.to_bytes()

    def put_bytes_be(self, buf: bytearray, offset: int = 0) -> None:
        _check_buffer(buf, offset, 32)
        buf[offset : offset + 32] = self.to_bytes_be()

    def append_bytes(self, buf: bytearray) -> bytearray:
        buf.extend(self.to_bytes())
        return buf

    def append_bytes_be(self, buf: bytearray) -> bytearray:
        buf.extend(self.to_bytes_be())
        return buf

    # ------- Python protocol -------
    def __repr__(self) -> str:
        return f"Uint256({self.to_int():#x})"

    def __int__(self) -> int:
        return self.to_int()

    __index__ = __int__

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __hash__(self) -> int:
        return hash((Uint256, self._hi, self._lo))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Uint256):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: "Uint256") -> bool:
        if not isinstance(other, Uint256):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other: "Uint256") -> bool:
        if not isinstance(other, Uint256):
            return NotImplemented
        return self.lte(other)

    def __gt__(self, other: "Uint256") -> bool:
        if not isinstance(other, Uint256):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other: "Uint256") -> bool:
        if not isinstance(other, Uint256):
            return NotImplemented
        return self.gte(other)

    def __add__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.add(v)

    def __sub__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.sub(v)

    def __mul__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.mul(v)

    def __floordiv__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.div(v)

    def __mod__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.mod(v)

    def __divmod__(self, other: Any) -> tuple["Uint256", "Uint256"]:
        v = _coerce(other)
        return NotImplemented if v is None else self.quo_rem(v)

    def __and__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.and_(v)

    def __or__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.or_(v)

    def __xor__(self, other: Any) -> "Uint256":
        v = _coerce(other)
        return NotImplemented if v is None else self.xor(v)

    def __invert__(self) -> "Uint256":
        return self.not_()

    def __lshift__(self, n: int) -> "Uint256":
        return self.lsh(n)

    def __rshift__(self, n: int) -> "Uint256":
        return self.rsh(n)


def _coerce(value: Any) -> Union[Uint256, None]:
    if isinstance(value, Uint256):
        return value
    if isinstance(value, Uint128):
        return Uint256.from_uint128(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return Uint256.from_int(value)
    return None


ZERO = Uint256()
ONE = Uint256(Uint128(1))
MAX = Uint256(MAX128, MAX128)
