"""Unsigned 128-bit integers built from two 64-bit limbs.

Arithmetic comes in three flavours:

- checked (``add``, ``sub``, ``mul`` ...) raise an :mod:`qdecimal.errors`
  exception when the exact result does not fit,
- ``must_*`` treat that failure as a programming error (``AssertionError``),
- ``*_wrap`` return the result modulo 2^128.

Values are immutable: every method returns a new ``Uint128``.
"""

from __future__ import annotations

import re
from typing import Any, Union

from . import _bits
from ._bits import MASK64
from .errors import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DivideByZeroError,
    InvalidBufferError,
    InvalidFormatError,
    NegativeValueError,
    ValueOverflowError,
    must,
)

__all__ = ["Uint128", "ZERO", "MAX"]

_DIGITS_RE = re.compile(r"[+-]?[0-9]+")
# 2**128 - 1 has 39 digits
_MAX_DIGITS = 39

# largest power of 10 that fits in a 64-bit limb
_CHUNK = 10**19
_CHUNK_DIGITS = 19

BytesLike = Union[bytes, bytearray, memoryview]


class Uint128:
    """An unsigned 128-bit number stored as ``(hi, lo)`` 64-bit limbs."""

    __slots__ = ("_lo", "_hi")

    def __init__(self, lo: int = 0, hi: int = 0) -> None:
        for limb in (lo, hi):
            if not isinstance(limb, int):
                raise TypeError("Uint128 limbs must be int")
            if limb < 0:
                raise NegativeValueError("uint128: value cannot be negative")
            if limb > MASK64:
                raise ValueOverflowError("uint128: limb overflows 64 bits")
        self._lo = lo
        self._hi = hi

    @classmethod
    def _new(cls, lo: int, hi: int) -> "Uint128":
        u = cls.__new__(cls)
        u._lo = lo
        u._hi = hi
        return u

    # ------- constructors -------
    @classmethod
    def from_uint64(cls, v: int) -> "Uint128":
        return cls(v, 0)

    @classmethod
    def from_int(cls, i: int) -> "Uint128":
        """Convert a Python int, rejecting negatives and values >= 2^128."""
        if i < 0:
            raise NegativeValueError("uint128: value cannot be negative")
        if i.bit_length() > 128:
            raise ValueOverflowError("uint128: value overflows Uint128")
        return cls._new(i & MASK64, i >> 64)

    @classmethod
    def from_bytes(cls, b: BytesLike, offset: int = 0) -> "Uint128":
        """Read 16 little-endian bytes starting at ``offset``."""
        _check_buffer(b, offset, 16)
        return cls._new(
            int.from_bytes(b[offset : offset + 8], "little"),
            int.from_bytes(b[offset + 8 : offset + 16], "little"),
        )

    @classmethod
    def from_bytes_be(cls, b: BytesLike, offset: int = 0) -> "Uint128":
        """Read 16 big-endian bytes starting at ``offset``."""
        _check_buffer(b, offset, 16)
        return cls._new(
            int.from_bytes(b[offset + 8 : offset + 16], "big"),
            int.from_bytes(b[offset : offset + 8], "big"),
        )

    @classmethod
    def parse(cls, s: str) -> "Uint128":
        """Parse unsigned base-10 digits."""
        if not isinstance(s, str):
            raise TypeError("Uint128.parse expects str")
        if not s:
            raise InvalidFormatError("uint128: can't parse empty string")
        if _DIGITS_RE.fullmatch(s) is None:
            raise InvalidFormatError(f"uint128: invalid format {s!r}")
        digits = s.lstrip("+-").lstrip("0")
        if s[0] == "-" and digits:
            raise NegativeValueError("uint128: value cannot be negative")
        if len(digits) > _MAX_DIGITS:
            raise ValueOverflowError("uint128: value overflows Uint128")
        return cls.from_int(int(digits or "0"))

    @classmethod
    def unmarshal_text(cls, data: Union[bytes, str]) -> "Uint128":
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("ascii", errors="replace")
        return cls.parse(data)

    # ------- accessors -------
    @property
    def lo(self) -> int:
        """The lower 64 bits."""
        return self._lo

    @property
    def hi(self) -> int:
        """The higher 64 bits."""
        return self._hi

    def is_zero(self) -> bool:
        return self._lo == 0 and self._hi == 0

    def equals(self, v: "Uint128") -> bool:
        return self._lo == v._lo and self._hi == v._hi

    def equals64(self, v: int) -> bool:
        return self._lo == v and self._hi == 0

    def cmp(self, v: "Uint128") -> int:
        """Return -1, 0 or +1 as ``self`` is less than, equal to or greater than ``v``."""
        if self._hi == v._hi and self._lo == v._lo:
            return 0
        if self._hi < v._hi or (self._hi == v._hi and self._lo < v._lo):
            return -1
        return 1

    def cmp64(self, v: int) -> int:
        if self._hi == 0 and self._lo == v:
            return 0
        if self._hi == 0 and self._lo < v:
            return -1
        return 1

    def lt(self, v: "Uint128") -> bool:
        return self._hi < v._hi or (self._hi == v._hi and self._lo < v._lo)

    def lte(self, v: "Uint128") -> bool:
        return self._hi < v._hi or (self._hi == v._hi and self._lo <= v._lo)

    def gt(self, v: "Uint128") -> bool:
        return self._hi > v._hi or (self._hi == v._hi and self._lo > v._lo)

    def gte(self, v: "Uint128") -> bool:
        return self._hi > v._hi or (self._hi == v._hi and self._lo >= v._lo)

    # ------- bit operations -------
    def and_(self, v: "Uint128") -> "Uint128":
        return Uint128._new(self._lo & v._lo, self._hi & v._hi)

    def and64(self, v: int) -> "Uint128":
        return Uint128._new(self._lo & v, 0)

    def or_(self, v: "Uint128") -> "Uint128":
        return Uint128._new(self._lo | v._lo, self._hi | v._hi)

    def or64(self, v: int) -> "Uint128":
        return Uint128._new(self._lo | v, self._hi)

    def xor(self, v: "Uint128") -> "Uint128":
        return Uint128._new(self._lo ^ v._lo, self._hi ^ v._hi)

    def xor64(self, v: int) -> "Uint128":
        return Uint128._new(self._lo ^ v, self._hi)

    def not_(self) -> "Uint128":
        return Uint128._new(self._lo ^ MASK64, self._hi ^ MASK64)

    def bit(self, i: int) -> int:
        """Return the i-th bit (0 for positions >= 128)."""
        if i >= 128:
            return 0
        if i >= 64:
            return (self._hi >> (i - 64)) & 1
        return (self._lo >> i) & 1

    def set_bit(self, i: int) -> "Uint128":
        if i >= 128:
            return self
        if i >= 64:
            return Uint128._new(self._lo, self._hi | (1 << (i - 64)))
        return Uint128._new(self._lo | (1 << i), self._hi)

    def lsh(self, n: int) -> "Uint128":
        if n < 0:
            raise ValueError("negative shift count")
        if n >= 128:
            return ZERO
        if n > 64:
            return Uint128._new(0, (self._lo << (n - 64)) & MASK64)
        return Uint128._new(
            (self._lo << n) & MASK64,
            ((self._hi << n) | (self._lo >> (64 - n))) & MASK64,
        )

    def rsh(self, n: int) -> "Uint128":
        if n < 0:
            raise ValueError("negative shift count")
        if n >= 128:
            return ZERO
        if n > 64:
            return Uint128._new(self._hi >> (n - 64), 0)
        return Uint128._new(
            ((self._lo >> n) | (self._hi << (64 - n))) & MASK64,
            self._hi >> n,
        )

    def leading_zeros(self) -> int:
        """Leading zero bits; 128 for zero."""
        if self._hi > 0:
            return _bits.leading_zeros64(self._hi)
        return 64 + _bits.leading_zeros64(self._lo)

    def trailing_zeros(self) -> int:
        """Trailing zero bits; 128 for zero."""
        if self._lo > 0:
            return _bits.trailing_zeros64(self._lo)
        return 64 + _bits.trailing_zeros64(self._hi)

    def ones_count(self) -> int:
        return _bits.ones_count64(self._lo) + _bits.ones_count64(self._hi)

    def bit_len(self) -> int:
        if self._hi != 0:
            return 64 + _bits.len64(self._hi)
        return _bits.len64(self._lo)

    def len(self) -> int:
        return 128 - self.leading_zeros()

    def rotate_left(self, k: int) -> "Uint128":
        """Rotate left by ``k mod 128`` bits; negative ``k`` rotates right."""
        s = k & 127
        return self.lsh(s).or_(self.rsh(128 - s))

    def rotate_right(self, k: int) -> "Uint128":
        return self.rotate_left(-k)

    def reverse(self) -> "Uint128":
        return Uint128._new(_bits.reverse64(self._hi), _bits.reverse64(self._lo))

    def reverse_bytes(self) -> "Uint128":
        return Uint128._new(_bits.reverse_bytes64(self._hi), _bits.reverse_bytes64(self._lo))

    # ------- addition -------
    def add(self, v: "Uint128") -> "Uint128":
        lo, carry = _bits.add64(self._lo, v._lo)
        hi, carry = _bits.add64(self._hi, v._hi, carry)
        if carry:
            raise ArithmeticOverflowError("uint128: arithmetic overflow")
        return Uint128._new(lo, hi)

    def must_add(self, v: "Uint128") -> "Uint128":
        return must(self.add, v)

    def add_wrap(self, v: "Uint128") -> "Uint128":
        """u+v modulo 2^128; ``MAX.add_wrap(Uint128(1)) == ZERO``."""
        lo, carry = _bits.add64(self._lo, v._lo)
        hi, _ = _bits.add64(self._hi, v._hi, carry)
        return Uint128._new(lo, hi)

    def add64(self, v: int) -> "Uint128":
        lo, carry = _bits.add64(self._lo, v)
        hi, carry = _bits.add64(self._hi, 0, carry)
        if carry:
            raise ArithmeticOverflowError("uint128: arithmetic overflow")
        return Uint128._new(lo, hi)

    def must_add64(self, v: int) -> "Uint128":
        return must(self.add64, v)

    def add_wrap64(self, v: int) -> "Uint128":
        lo, carry = _bits.add64(self._lo, v)
        return Uint128._new(lo, (self._hi + carry) & MASK64)

    def add_carry(self, v: "Uint128", carry_in: int = 0) -> tuple["Uint128", int]:
        """Return ``(u + v + carry_in) mod 2^128`` and the carry out (0 or 1)."""
        lo, c0 = _bits.add64(self._lo, v._lo, carry_in)
        hi, carry_out = _bits.add64(self._hi, v._hi, c0)
        return Uint128._new(lo, hi), carry_out

    # ------- subtraction -------
    def sub(self, v: "Uint128") -> "Uint128":
        lo, borrow = _bits.sub64(self._lo, v._lo)
        hi, borrow = _bits.sub64(self._hi, v._hi, borrow)
        if borrow:
            raise ArithmeticUnderflowError("uint128: arithmetic underflow")
        return Uint128._new(lo, hi)

    def must_sub(self, v: "Uint128") -> "Uint128":
        return must(self.sub, v)

    def sub_wrap(self, v: "Uint128") -> "Uint128":
        """u-v modulo 2^128; ``ZERO.sub_wrap(Uint128(1)) == MAX``."""
        lo, borrow = _bits.sub64(self._lo, v._lo)
        hi, _ = _bits.sub64(self._hi, v._hi, borrow)
        return Uint128._new(lo, hi)

    def sub64(self, v: int) -> "Uint128":
        lo, borrow = _bits.sub64(self._lo, v)
        hi, borrow = _bits.sub64(self._hi, 0, borrow)
        if borrow:
            raise ArithmeticUnderflowError("uint128: arithmetic underflow")
        return Uint128._new(lo, hi)

    def must_sub64(self, v: int) -> "Uint128":
        return must(self.sub64, v)

    def sub_wrap64(self, v: int) -> "Uint128":
        lo, borrow = _bits.sub64(self._lo, v)
        return Uint128._new(lo, (self._hi - borrow) & MASK64)

    def sub_borrow(self, v: "Uint128", borrow_in: int = 0) -> tuple["Uint128", int]:
        lo, b0 = _bits.sub64(self._lo, v._lo, borrow_in)
        hi, borrow_out = _bits.sub64(self._hi, v._hi, b0)
        return Uint128._new(lo, hi), borrow_out

    # ------- multiplication -------
    def mul(self, v: "Uint128") -> "Uint128":
        hi, lo = _bits.mul64(self._lo, v._lo)
        p0, p1 = _bits.mul64(self._hi, v._lo)
        p2, p3 = _bits.mul64(self._lo, v._hi)
        hi, c0 = _bits.add64(hi, p1)
        hi, c1 = _bits.add64(hi, p3, c0)
        if (self._hi != 0 and v._hi != 0) or p0 != 0 or p2 != 0 or c1 != 0:
            raise ArithmeticOverflowError("uint128: arithmetic overflow")
        return Uint128._new(lo, hi)

    def must_mul(self, v: "Uint128") -> "Uint128":
        return must(self.mul, v)

    def mul_wrap(self, v: "Uint128") -> "Uint128":
        """u*v modulo 2^128; ``MAX.mul_wrap(MAX) == Uint128(1)``."""
        hi, lo = _bits.mul64(self._lo, v._lo)
        hi = (hi + self._hi * v._lo + self._lo * v._hi) & MASK64
        return Uint128._new(lo, hi)

    def mul_full(self, v: "Uint128") -> tuple["Uint128", "Uint128"]:
        """Return the full 256-bit product as ``(hi, lo)`` halves.

        ``u * v == hi * 2^128 + lo``.
        """
        ll_hi, ll_lo = _bits.mul64(self._lo, v._lo)
        hl_hi, hl_lo = _bits.mul64(self._hi, v._lo)
        lh_hi, lh_lo = _bits.mul64(self._lo, v._hi)
        hh_hi, hh_lo = _bits.mul64(self._hi, v._hi)

        mid = ll_hi + hl_lo + lh_lo
        upper = hl_hi + lh_hi + hh_lo + (mid >> 64)
        top = hh_hi + (upper >> 64)

        return (
            Uint128._new(upper & MASK64, top),
            Uint128._new(ll_lo, mid & MASK64),
        )

    def mul64(self, v: int) -> "Uint128":
        hi, lo = _bits.mul64(self._lo, v)
        p0, p1 = _bits.mul64(self._hi, v)
        hi, c0 = _bits.add64(hi, p1)
        if p0 != 0 or c0 != 0:
            raise ArithmeticOverflowError("uint128: arithmetic overflow")
        return Uint128._new(lo, hi)

    def must_mul64(self, v: int) -> "Uint128":
        return must(self.mul64, v)

    def mul_wrap64(self, v: int) -> "Uint128":
        hi, lo = _bits.mul64(self._lo, v)
        return Uint128._new(lo, (hi + self._hi * v) & MASK64)

    # ------- division -------
    def quo_rem(self, v: "Uint128") -> tuple["Uint128", "Uint128"]:
        """Return ``(u // v, u % v)``."""
        if v._hi == 0:
            q, r = self.quo_rem64(v._lo)
            return q, Uint128._new(r, 0)

        # trial quotient, guaranteed to be within 1 of the actual quotient
        n = _bits.leading_zeros64(v._hi)
        v1 = v.lsh(n)
        u1 = self.rsh(1)
        tq, _ = _bits.div64(u1._hi, u1._lo, v1._hi)
        tq >>= 63 - n
        if tq != 0:
            tq -= 1

        q = Uint128._new(tq, 0)
        r = self.sub(v.mul64(tq))
        if r.cmp(v) >= 0:
            q = q.add64(1)
            r = r.sub(v)
        return q, r

    def must_quo_rem(self, v: "Uint128") -> tuple["Uint128", "Uint128"]:
        return must(self.quo_rem, v)

    def quo_rem64(self, v: int) -> tuple["Uint128", int]:
        if v == 0:
            raise DivideByZeroError("uint128: division by zero")
        if self._hi < v:
            qlo, r = _bits.div64(self._hi, self._lo, v)
            return Uint128._new(qlo, 0), r
        qhi, r = _bits.div64(0, self._hi, v)
        qlo, r = _bits.div64(r, self._lo, v)
        return Uint128._new(qlo, qhi), r

    def div(self, v: "Uint128") -> "Uint128":
        return self.quo_rem(v)[0]

    def must_div(self, v: "Uint128") -> "Uint128":
        return must(self.div, v)

    def div64(self, v: int) -> "Uint128":
        return self.quo_rem64(v)[0]

    def mod(self, v: "Uint128") -> "Uint128":
        return self.quo_rem(v)[1]

    def must_mod(self, v: "Uint128") -> "Uint128":
        return must(self.mod, v)

    def mod64(self, v: int) -> int:
        return self.quo_rem64(v)[1]

    # ------- conversions -------
    def to_int(self) -> int:
        return (self._hi << 64) | self._lo

    def __str__(self) -> str:
        if self.is_zero():
            return "0"
        chunks = []
        u = self
        while True:
            q, r = u.quo_rem64(_CHUNK)
            if q.is_zero():
                chunks.append(str(r))
                break
            chunks.append(str(r).zfill(_CHUNK_DIGITS))
            u = q
        return "".join(reversed(chunks))

    def marshal_text(self) -> bytes:
        return str(self).encode("ascii")

    def to_bytes(self) -> bytes:
        """16 bytes, little-endian."""
        return self._lo.to_bytes(8, "little") + self._hi.to_bytes(8, "little")

    def to_bytes_be(self) -> bytes:
        """16 bytes, big-endian."""
        return self._hi.to_bytes(8, "big") + self._lo.to_bytes(8, "big")

    def put_bytes(self, buf: bytearray, offset: int = 0) -> None:
        """Write 16 little-endian bytes into ``buf`` at ``offset``."""
        _check_buffer(buf, offset, 16)
        buf[offset : offset + 16] = self.to_bytes()

    def put_bytes_be(self, buf: bytearray, offset: int = 0) -> None:
        _check_buffer(buf, offset, 16)
        buf[offset : offset + 16] = self.to_bytes_be()

    def append_bytes(self, buf: bytearray) -> bytearray:
        buf.extend(self.to_bytes())
        return buf

    def append_bytes_be(self, buf: bytearray) -> bytearray:
        buf.extend(self.to_bytes_be())
        return buf

    # ------- Python protocol -------
    def __repr__(self) -> str:
        return f"Uint128(lo={self._lo:#x}, hi={self._hi:#x})"

    def __int__(self) -> int:
        return self.to_int()

    __index__ = __int__

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __hash__(self) -> int:
        return hash((Uint128, self._hi, self._lo))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Uint128):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: "Uint128") -> bool:
        if not isinstance(other, Uint128):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other: "Uint128") -> bool:
        if not isinstance(other, Uint128):
            return NotImplemented
        return self.lte(other)

    def __gt__(self, other: "Uint128") -> bool:
        if not isinstance(other, Uint128):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other: "Uint128") -> bool:
        if not isinstance(other, Uint128):
            return NotImplemented
        return self.gte(other)

    def __add__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.add(v)

    def __radd__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else v.add(self)

    def __sub__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.sub(v)

    def __rsub__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else v.sub(self)

    def __mul__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.mul(v)

    def __rmul__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else v.mul(self)

    def __floordiv__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.div(v)

    def __mod__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.mod(v)

    def __divmod__(self, other: Any) -> tuple["Uint128", "Uint128"]:
        v = _coerce(other)
        return NotImplemented if v is None else self.quo_rem(v)

    def __and__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.and_(v)

    def __or__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.or_(v)

    def __xor__(self, other: Any) -> "Uint128":
        v = _coerce(other)
        return NotImplemented if v is None else self.xor(v)

    def __invert__(self) -> "Uint128":
        return self.not_()

    def __lshift__(self, n: int) -> "Uint128":
        return self.lsh(n)

    def __rshift__(self, n: int) -> "Uint128":
        return self.rsh(n)


def _coerce(value: Any) -> Union[Uint128, None]:
    if isinstance(value, Uint128):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Uint128.from_int(value)
    return None


def _check_buffer(buf: Any, offset: int, size: int) -> None:
    if offset < 0 or len(buf) - offset < size:
        raise InvalidBufferError(f"buffer too short: need {size} bytes at offset {offset}")


ZERO = Uint128()
MAX = Uint128(MASK64, MASK64)
