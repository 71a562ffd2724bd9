"""Immutable fixed-point decimal with a 128-bit fast path.

A :class:`Decimal` is ``(-1)**neg * coef / 10**prec`` where ``coef`` is a
:class:`~qdecimal.coefficient.Coefficient` and ``prec`` counts fractional
digits (0..19). Every operation first tries ``Uint128``/``Uint256`` arithmetic
and, when an intermediate overflows, re-runs the same computation on Python
ints. The result is identical either way; only the speed differs.

Results of division, square root and negative powers land at the configured
default precision (19 unless ``QDECIMAL_DEFAULT_PREC`` says otherwise) and
are truncated, never rounded.
"""

from __future__ import annotations

import decimal as _pydecimal
import logging
import math
import re
from typing import Any, Callable, Tuple, Union

from .coefficient import Big, Coefficient, Exact
from .config import get_config
from .errors import (
    ArithmeticOverflowError,
    DivideByZeroError,
    EmptyInputError,
    ExponentTooLargeError,
    InputTooLongError,
    IntPartOverflowError,
    InvalidBinaryDataError,
    InvalidFormatError,
    NegativeValueError,
    PrecisionOutOfRangeError,
    SqrtNegativeError,
    ValueOverflowError,
    ZeroPowNegativeError,
    must,
)
from .uint128 import Uint128
from .uint256 import Uint256

logger = logging.getLogger(__name__)

_config = get_config()
DEFAULT_PREC: int = _config.default_prec
MAX_STR_LEN: int = _config.max_str_len

# 10^0 .. 10^38, the largest power of ten below 2^128
POW10 = tuple(Uint128.from_int(10**i) for i in range(39))
_POW10_INT = tuple(10**i for i in range(39))
_POW10_COEF = tuple(Exact(p) for p in POW10)

_MAX_INT32 = 2**31 - 1
_MAX_INT64 = 2**63 - 1
_MIN_INT64 = -(2**63)
_MAX_UINT64 = 2**64 - 1

# N < 2^252 keeps the Newton estimate and x + N/x below 2^128
_SQRT_MAX_BITS = 252

_DECIMAL_RE = re.compile(r"([+-]?)([0-9]+)(?:\.([0-9]+))?")

# binary layout: [flags][prec][total length][coefficient, big-endian]
_FLAG_NEG = 0x01
_FLAG_BIG = 0x10
_HEADER_LEN = 3

_ONE_COEF = _POW10_COEF[0]
_ZERO_COEF = Exact(Uint128())

DecimalLike = Union["Decimal", int, str]


class Decimal:
    """Signed fixed-point decimal number.

    ``Decimal("1.25")`` parses, ``Decimal(7)`` converts an integer. Floats are
    refused; go through :meth:`from_float` to make the conversion explicit.
    """

    __slots__ = ("_neg", "_coef", "_prec")

    def __init__(self, value: DecimalLike = 0) -> None:
        if isinstance(value, Decimal):
            src = value
        elif isinstance(value, str):
            src = Decimal.parse(value)
        elif isinstance(value, int) and not isinstance(value, bool):
            src = Decimal.from_int(value)
        else:
            raise TypeError(f"cannot build Decimal from {type(value).__name__}")
        self._neg = src._neg
        self._coef = src._coef
        self._prec = src._prec

    @classmethod
    def _new(cls, neg: bool, coef: Coefficient, prec: int) -> "Decimal":
        d = object.__new__(cls)
        d._neg = neg
        d._coef = coef
        d._prec = prec
        return d

    @classmethod
    def _make(cls, neg: bool, coef: Coefficient, prec: int) -> "Decimal":
        # zero is always (False, 0, 0)
        if coef.is_zero():
            return ZERO
        return cls._new(neg, coef, prec)

    # ------- constructors -------
    @classmethod
    def parse(cls, s: str) -> "Decimal":
        """Parse ``[+-]?digits(.digits)?`` with at most ``DEFAULT_PREC`` fraction digits."""
        if not isinstance(s, str):
            raise TypeError("Decimal.parse expects str")
        if s == "":
            raise EmptyInputError("can't parse empty string")
        if len(s) > MAX_STR_LEN:
            raise InputTooLongError(f"string length is greater than {MAX_STR_LEN}")

        m = _DECIMAL_RE.fullmatch(s)
        if m is None:
            raise InvalidFormatError(f"can't parse '{s}' to Decimal")
        sign, int_part, frac = m.groups()
        frac = frac or ""
        if len(frac) > DEFAULT_PREC:
            raise PrecisionOutOfRangeError(
                f"can't parse '{s}': precision out of range, only support up to {DEFAULT_PREC} digits"
            )
        coef = Coefficient.from_int(int(int_part + frac))
        return cls._make(sign == "-", coef, len(frac))

    @classmethod
    def must_parse(cls, s: str) -> "Decimal":
        return must(cls.parse, s)

    @classmethod
    def from_int(cls, coef: int, prec: int = 0) -> "Decimal":
        """Return ``coef / 10**prec``; the sign comes from ``coef``."""
        _check_prec(prec)
        neg = coef < 0
        return cls._make(neg, Coefficient.from_int(-coef if neg else coef), prec)

    @classmethod
    def must_from_int(cls, coef: int, prec: int = 0) -> "Decimal":
        return must(cls.from_int, coef, prec)

    @classmethod
    def from_uint64(cls, v: int, prec: int = 0) -> "Decimal":
        if v < 0:
            raise NegativeValueError("value cannot be negative")
        if v > _MAX_UINT64:
            raise ValueOverflowError("value overflows uint64")
        return cls.from_int(v, prec)

    @classmethod
    def must_from_uint64(cls, v: int, prec: int = 0) -> "Decimal":
        return must(cls.from_uint64, v, prec)

    @classmethod
    def from_int64(cls, v: int, prec: int = 0) -> "Decimal":
        if not _MIN_INT64 <= v <= _MAX_INT64:
            raise ValueOverflowError("value overflows int64")
        return cls.from_int(v, prec)

    @classmethod
    def must_from_int64(cls, v: int, prec: int = 0) -> "Decimal":
        return must(cls.from_int64, v, prec)

    @classmethod
    def from_hi_lo(cls, neg: bool, hi: int, lo: int, prec: int) -> "Decimal":
        _check_prec(prec)
        return cls._make(neg, Exact(Uint128(lo, hi)), prec)

    @classmethod
    def from_float(cls, f: float) -> "Decimal":
        """Convert through the shortest repr that round-trips ``f``.

        Digits beyond the configured precision are rejected, not rounded.
        """
        if math.isnan(f) or math.isinf(f):
            raise InvalidFormatError(f"can't parse float {f!r}")
        text = format(_pydecimal.Decimal(repr(float(f))), "f")
        return cls.parse(text)

    @classmethod
    def must_from_float(cls, f: float) -> "Decimal":
        return must(cls.from_float, f)

    # ------- accessors -------
    @property
    def prec(self) -> int:
        return self._prec

    @property
    def coef(self) -> Coefficient:
        return self._coef

    def sign(self) -> int:
        if self._coef.is_zero():
            return 0
        return -1 if self._neg else 1

    def is_zero(self) -> bool:
        return self._coef.is_zero()

    def is_neg(self) -> bool:
        return self._neg and not self._coef.is_zero()

    def is_pos(self) -> bool:
        return not self._neg and not self._coef.is_zero()

    def neg(self) -> "Decimal":
        if self.is_zero():
            return self
        return Decimal._new(not self._neg, self._coef, self._prec)

    def abs(self) -> "Decimal":
        if not self._neg:
            return self
        return Decimal._new(False, self._coef, self._prec)

    # ------- add / sub -------
    def add(self, e: "Decimal") -> "Decimal":
        return self._add(e, e._neg)

    def sub(self, e: "Decimal") -> "Decimal":
        return self._add(e, not e._neg)

    def add64(self, v: int) -> "Decimal":
        return self.add(Decimal.from_uint64(v))

    def sub64(self, v: int) -> "Decimal":
        return self.sub(Decimal.from_uint64(v))

    def _add(self, e: "Decimal", e_neg: bool) -> "Decimal":
        dcoef, ecoef = self._coef, e._coef
        prec = self._prec
        if self._prec > e._prec:
            ecoef = ecoef.mul(_POW10_COEF[self._prec - e._prec])
        elif self._prec < e._prec:
            dcoef = dcoef.mul(_POW10_COEF[e._prec - self._prec])
            prec = e._prec

        if self._neg == e_neg:
            return Decimal._make(self._neg, dcoef.add(ecoef), prec)
        if dcoef.cmp(ecoef) >= 0:
            return Decimal._make(self._neg, dcoef.sub(ecoef), prec)
        return Decimal._make(e_neg, ecoef.sub(dcoef), prec)

    # ------- mul -------
    def mul(self, e: "Decimal") -> "Decimal":
        neg = self._neg != e._neg
        prec = self._prec + e._prec
        try:
            return self._mul_u128(e, neg, prec)
        except ArithmeticOverflowError:
            logger.debug("mul %s * %s: 128-bit overflow, using int", self, e)

        product = self._coef.to_int() * e._coef.to_int()
        if prec > DEFAULT_PREC:
            product //= _POW10_INT[prec - DEFAULT_PREC]
            prec = DEFAULT_PREC
        return Decimal._make(neg, Coefficient.from_int(product), prec)

    def _mul_u128(self, e: "Decimal", neg: bool, prec: int) -> "Decimal":
        a, b = _exact(self), _exact(e)
        hi, lo = a.mul_full(b)
        if prec <= DEFAULT_PREC:
            if not hi.is_zero():
                raise ArithmeticOverflowError("product overflows 128 bits")
            return Decimal._make(neg, Exact(lo), prec)

        q, _ = Uint256(lo, hi).quo_rem(Uint256.from_uint128(POW10[prec - DEFAULT_PREC]))
        if not q.hi.is_zero():
            raise ArithmeticOverflowError("product overflows 128 bits")
        return Decimal._make(neg, Exact(q.lo), DEFAULT_PREC)

    def mul64(self, v: int) -> "Decimal":
        if v == 0:
            return ZERO
        if v == 1:
            return self
        return self.mul(Decimal.from_uint64(v))

    # ------- div / quo_rem -------
    def div(self, e: "Decimal") -> "Decimal":
        """Return ``self / e`` truncated to ``DEFAULT_PREC`` digits."""
        if e.is_zero():
            raise DivideByZeroError("can't divide by zero")
        neg = self._neg != e._neg
        factor = DEFAULT_PREC - (self._prec - e._prec)
        try:
            return self._div_u128(e, neg, factor)
        except ArithmeticOverflowError:
            logger.debug("div %s / %s: 128-bit overflow, using int", self, e)

        q = self._coef.to_int() * _POW10_INT[factor] // e._coef.to_int()
        return Decimal._make(neg, Coefficient.from_int(q), DEFAULT_PREC)

    def _div_u128(self, e: "Decimal", neg: bool, factor: int) -> "Decimal":
        a, b = _exact(self), _exact(e)
        hi, lo = a.mul_full(POW10[factor])
        q, _ = Uint256(lo, hi).quo_rem(Uint256.from_uint128(b))
        if not q.hi.is_zero():
            raise ArithmeticOverflowError("quotient overflows 128 bits")
        return Decimal._make(neg, Exact(q.lo), DEFAULT_PREC)

    def div64(self, v: int) -> "Decimal":
        if v == 0:
            raise DivideByZeroError("can't divide by zero")
        if v == 1:
            return self
        return self.div(Decimal.from_uint64(v))

    def quo_rem(self, e: "Decimal") -> Tuple["Decimal", "Decimal"]:
        """Integer quotient and remainder, with ``fmod`` sign rules.

        The quotient is truncated toward zero. The remainder takes the sign of
        ``self`` and the larger of the two scales.
        """
        if e.is_zero():
            raise DivideByZeroError("can't divide by zero")
        try:
            return self._quo_rem_u128(e)
        except ArithmeticOverflowError:
            logger.debug("quo_rem %s, %s: 128-bit overflow, using int", self, e)

        factor = max(self._prec, e._prec)
        a = self._coef.to_int() * _POW10_INT[factor - self._prec]
        b = e._coef.to_int() * _POW10_INT[factor - e._prec]
        q, r = divmod(a, b)
        return (
            Decimal._make(self._neg != e._neg, Coefficient.from_int(q), 0),
            Decimal._make(self._neg, Coefficient.from_int(r), factor),
        )

    def _quo_rem_u128(self, e: "Decimal") -> Tuple["Decimal", "Decimal"]:
        a, b = _exact(self), _exact(e)
        factor = max(self._prec, e._prec)
        hi, lo = a.mul_full(POW10[factor - self._prec])
        divisor = b.mul(POW10[factor - e._prec])
        q, r = Uint256(lo, hi).quo_rem(Uint256.from_uint128(divisor))
        if not q.hi.is_zero():
            raise ArithmeticOverflowError("quotient overflows 128 bits")
        return (
            Decimal._make(self._neg != e._neg, Exact(q.lo), 0),
            Decimal._make(self._neg, Exact(r.lo), factor),
        )

    def mod(self, e: "Decimal") -> "Decimal":
        return self.quo_rem(e)[1]

    # ------- comparison -------
    def cmp(self, e: "Decimal") -> int:
        if self._neg and not e._neg:
            return -1
        if not self._neg and e._neg:
            return 1
        r = self._cmp_magnitude(e)
        return -r if self._neg else r

    def _cmp_magnitude(self, e: "Decimal") -> int:
        if self._prec == e._prec:
            return self._coef.cmp(e._coef)
        if isinstance(self._coef, Exact) and isinstance(e._coef, Exact):
            # scale the lower-precision side up inside 256 bits
            if self._prec < e._prec:
                hi, lo = self._coef.u128.mul_full(POW10[e._prec - self._prec])
                return Uint256(lo, hi).cmp128(e._coef.u128)
            hi, lo = e._coef.u128.mul_full(POW10[self._prec - e._prec])
            return -Uint256(lo, hi).cmp128(self._coef.u128)

        factor = max(self._prec, e._prec)
        a = self._coef.to_int() * _POW10_INT[factor - self._prec]
        b = e._coef.to_int() * _POW10_INT[factor - e._prec]
        return (a > b) - (a < b)

    def equal(self, e: "Decimal") -> bool:
        return self.cmp(e) == 0

    def less_than(self, e: "Decimal") -> bool:
        return self.cmp(e) < 0

    def less_than_or_equal(self, e: "Decimal") -> bool:
        return self.cmp(e) <= 0

    def greater_than(self, e: "Decimal") -> bool:
        return self.cmp(e) > 0

    def greater_than_or_equal(self, e: "Decimal") -> bool:
        return self.cmp(e) >= 0

    # ------- rounding -------
    def _rounded(self, prec: int, round_up: Callable[[Coefficient, int, int], bool]) -> "Decimal":
        if prec < 0:
            raise PrecisionOutOfRangeError(f"precision must be non-negative, got {prec}")
        if prec >= self._prec:
            return self
        k = self._prec - prec
        q, r = self._coef.quo_rem_pow10(k)
        if round_up(q, r, _POW10_INT[k] // 2):
            q = q.add(_ONE_COEF)
        return Decimal._make(self._neg, q, prec)

    def round_bank(self, prec: int) -> "Decimal":
        """Round half to even: 1.5 -> 2, 2.5 -> 2, -1.5 -> -2."""
        return self._rounded(prec, lambda q, r, half: r > half or (r == half and q.is_odd()))

    def round_away_from_zero(self, prec: int) -> "Decimal":
        return self._rounded(prec, lambda q, r, half: r != 0)

    def round_haz(self, prec: int) -> "Decimal":
        """Round half away from zero: 1.5 -> 2, -1.5 -> -2."""
        return self._rounded(prec, lambda q, r, half: r >= half)

    def round_htz(self, prec: int) -> "Decimal":
        """Round half toward zero: 1.5 -> 1, 1.51 -> 2."""
        return self._rounded(prec, lambda q, r, half: r > half)

    def trunc(self, prec: int) -> "Decimal":
        return self._rounded(prec, lambda q, r, half: False)

    def floor(self) -> "Decimal":
        neg = self._neg
        return self._rounded(0, lambda q, r, half: neg and r != 0)

    def ceil(self) -> "Decimal":
        pos = not self._neg
        return self._rounded(0, lambda q, r, half: pos and r != 0)

    # ------- scale -------
    def trim_trailing_zeros(self) -> "Decimal":
        if self._prec == 0 or self.is_zero():
            return self
        zeros = self._coef.trailing_zeros()
        if zeros == 0:
            return self
        k = min(zeros, self._prec)
        q, _ = self._coef.quo_rem_pow10(k)
        return Decimal._new(self._neg, q, self._prec - k)

    def rescale(self, prec: int) -> "Decimal":
        """Trim, then pad with zeros up to ``prec`` (capped at ``DEFAULT_PREC``)."""
        d = self.trim_trailing_zeros()
        prec = min(prec, DEFAULT_PREC)
        if prec <= d._prec:
            return d
        coef = d._coef.mul(_POW10_COEF[prec - d._prec])
        return Decimal._new(d._neg, coef, prec)

    # ------- power -------
    def pow_int(self, e: int) -> "Decimal":
        """Integer power, kept for compatibility: zero to any power is zero.

        Prefer :meth:`pow_int32`, which returns one for ``0**0`` and raises for
        zero to a negative power.
        """
        if self.is_zero():
            return ZERO
        _check_exponent(e)
        return self._pow(e)

    def pow_int32(self, e: int) -> "Decimal":
        _check_exponent(e)
        if self.is_zero():
            if e < 0:
                raise ZeroPowNegativeError("can't raise zero to a negative power")
            if e == 0:
                return ONE
            return ZERO
        return self._pow(e)

    def pow_to_int_part(self, e: "Decimal") -> "Decimal":
        """Raise to the integer part of ``e``; the fraction of ``e`` is dropped."""
        if self.is_zero() and e._neg:
            raise ZeroPowNegativeError("can't raise zero to a negative power")
        e_int = e.trunc(0)
        limit = _MAX_INT32 + 1 if e_int._neg else _MAX_INT32
        if e_int._coef.overflow() or e_int._coef.to_int() > limit:
            raise ExponentTooLargeError("exponent is too large, must be within int32 range")
        exp = e_int._coef.to_int()
        return self.pow_int32(-exp if e_int._neg else exp)

    def _pow(self, e: int) -> "Decimal":
        if e == 0:
            return ONE
        if e == 1:
            return self
        d = self.trim_trailing_zeros()
        if e < 0:
            return d._pow_inverse(-e)

        neg = d._neg and e % 2 == 1
        try:
            return d._pow_u128(e, neg)
        except ArithmeticOverflowError:
            logger.debug("pow %s ** %d: 256-bit overflow, using int", d, e)

        prec = d._prec * e
        result = d._coef.to_int() ** e
        if prec > DEFAULT_PREC:
            result //= 10 ** (prec - DEFAULT_PREC)
            prec = DEFAULT_PREC
        return Decimal._make(neg, Coefficient.from_int(result), prec)

    def _pow_u128(self, e: int, neg: bool) -> "Decimal":
        u = _exact(self)
        # a full 128-bit base to the 4th power cannot fit in 256 bits
        if u.hi != 0 and e >= 4:
            raise ArithmeticOverflowError("power overflows 256 bits")
        prec = self._prec * e
        if prec > DEFAULT_PREC + 38:
            raise ArithmeticOverflowError("power scale out of range")

        result = Uint256.from_uint128(u).pow(e)
        if prec <= DEFAULT_PREC:
            if not result.hi.is_zero():
                raise ArithmeticOverflowError("power overflows 128 bits")
            return Decimal._make(neg, Exact(result.lo), prec)

        q, _ = result.quo_rem(Uint256.from_uint128(POW10[prec - DEFAULT_PREC]))
        if not q.hi.is_zero():
            raise ArithmeticOverflowError("power overflows 128 bits")
        return Decimal._make(neg, Exact(q.lo), DEFAULT_PREC)

    def _pow_inverse(self, e: int) -> "Decimal":
        neg = self._neg and e % 2 == 1
        try:
            return self._pow_inverse_u128(e, neg)
        except ArithmeticOverflowError:
            logger.debug("pow %s ** -%d: 256-bit overflow, using int", self, e)

        numerator = 10 ** (self._prec * e + DEFAULT_PREC)
        q = numerator // self._coef.to_int() ** e
        return Decimal._make(neg, Coefficient.from_int(q), DEFAULT_PREC)

    def _pow_inverse_u128(self, e: int, neg: bool) -> "Decimal":
        u = _exact(self)
        if u.hi != 0 and e >= 4:
            raise ArithmeticOverflowError("power overflows 256 bits")
        # 10^76 is the largest power of ten inside 256 bits
        num_exp = self._prec * e + DEFAULT_PREC
        if num_exp > 76:
            raise ArithmeticOverflowError("power scale out of range")

        denom = Uint256.from_uint128(u).pow(e)
        if not denom.hi.is_zero():
            raise ArithmeticOverflowError("power overflows 128 bits")

        if num_exp <= 38:
            q, _ = POW10[num_exp].quo_rem(denom.lo)
            return Decimal._make(neg, Exact(q), DEFAULT_PREC)

        hi, lo = POW10[num_exp - 38].mul_full(POW10[38])
        q256, _ = Uint256(lo, hi).quo_rem(denom)
        if not q256.hi.is_zero():
            raise ArithmeticOverflowError("quotient overflows 128 bits")
        return Decimal._make(neg, Exact(q256.lo), DEFAULT_PREC)

    # ------- sqrt -------
    def sqrt(self) -> "Decimal":
        """Square root truncated to ``DEFAULT_PREC`` digits."""
        if self._neg:
            raise SqrtNegativeError("can't calculate square root of negative number")
        if self.is_zero():
            return ZERO
        if self.equal(ONE):
            return ONE

        factor = 2 * DEFAULT_PREC - self._prec
        try:
            return self._sqrt_u128(factor)
        except ArithmeticOverflowError:
            logger.debug("sqrt %s: outside the 256-bit range, using isqrt", self)

        root = math.isqrt(self._coef.to_int() * _POW10_INT[factor])
        return Decimal._make(False, Coefficient.from_int(root), DEFAULT_PREC)

    def _sqrt_u128(self, factor: int) -> "Decimal":
        u = _exact(self)
        hi, lo = u.mul_full(POW10[factor])
        n = Uint256(lo, hi)
        bits = n.bit_len()
        if bits > _SQRT_MAX_BITS:
            raise ArithmeticOverflowError("scaled value too large for 256-bit sqrt")

        # 2^ceil(bits/2) is never below the root, so Newton only descends
        x = Uint128(1).lsh((bits + 1) // 2)
        while True:
            y, _ = n.quo_rem(Uint256.from_uint128(x))
            if not y.hi.is_zero():
                raise ArithmeticOverflowError("sqrt estimate overflows 128 bits")
            x1 = x.add(y.lo).rsh(1)
            if x1.gte(x):
                break
            x = x1
        return Decimal._make(False, Exact(x), DEFAULT_PREC)

    # ------- conversions -------
    def to_int64(self) -> int:
        d = self.trunc(0)
        if d._coef.overflow() or d._coef.to_int() > _MAX_INT64:
            raise IntPartOverflowError("integer part of decimal overflows int64")
        n = d._coef.to_int()
        return -n if d._neg else n

    def inexact_float64(self) -> float:
        return float(str(self))

    def to_hi_lo(self) -> Tuple[bool, int, int, int]:
        """Return ``(neg, hi, lo, prec)``; values beyond 128 bits raise."""
        if not isinstance(self._coef, Exact):
            raise ValueOverflowError("decimal coefficient does not fit in 128 bits")
        u = self._coef.u128
        return self._neg, u.hi, u.lo, self._prec

    # ------- text -------
    def _format(self, trim: bool) -> str:
        digits = str(self._coef)
        if self._prec:
            digits = digits.rjust(self._prec + 1, "0")
            int_part, frac = digits[: -self._prec], digits[-self._prec :]
            if trim:
                frac = frac.rstrip("0")
            digits = f"{int_part}.{frac}" if frac else int_part
        if self._neg:
            return "-" + digits
        return digits

    def string_fixed(self, prec: int) -> str:
        """Pad with trailing zeros to ``prec`` fraction digits; never truncates."""
        return self.rescale(prec)._format(trim=False)

    def marshal_text(self) -> bytes:
        return str(self).encode("ascii")

    @classmethod
    def unmarshal_text(cls, data: Union[bytes, str]) -> "Decimal":
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("ascii", errors="replace")
        return cls.parse(data)

    def marshal_json(self) -> str:
        return f'"{self}"'

    @classmethod
    def unmarshal_json(cls, data: Union[bytes, str]) -> "Decimal":
        """Accept ``"1.23"`` or a bare ``1.23``; ``null`` is rejected."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8", errors="replace")
        text = data.strip()
        if text == "null":
            raise InvalidFormatError("can't unmarshal null into Decimal")
        if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
            text = text[1:-1]
        return cls.parse(text)

    # ------- binary -------
    def marshal_binary(self) -> bytes:
        flags = _FLAG_NEG if self._neg else 0
        if isinstance(self._coef, Exact):
            u = self._coef.u128
            if u.hi == 0:
                body = u.lo.to_bytes(8, "big")
            else:
                body = u.to_bytes_be()
        else:
            flags |= _FLAG_BIG
            value = self._coef.to_int()
            body = value.to_bytes((value.bit_length() + 7) // 8, "big")

        total = _HEADER_LEN + len(body)
        if total > 0xFF:
            raise ValueOverflowError("decimal is too large for the binary encoding")
        return bytes((flags, self._prec, total)) + body

    @classmethod
    def unmarshal_binary(cls, data: Union[bytes, bytearray, memoryview]) -> "Decimal":
        data = bytes(data)
        if len(data) < _HEADER_LEN:
            raise InvalidBinaryDataError("invalid binary data: too short")
        flags, prec, total = data[0], data[1], data[2]
        if flags & ~(_FLAG_NEG | _FLAG_BIG):
            raise InvalidBinaryDataError(f"invalid binary data: unknown flags {flags:#04x}")
        if prec > DEFAULT_PREC:
            raise InvalidBinaryDataError(f"invalid binary data: precision {prec} out of range")
        if total != len(data):
            raise InvalidBinaryDataError("invalid binary data: length mismatch")

        body = data[_HEADER_LEN:]
        if flags & _FLAG_BIG:
            if not body:
                raise InvalidBinaryDataError("invalid binary data: empty coefficient")
            coef = Coefficient.from_int(int.from_bytes(body, "big"))
        elif len(body) == 8:
            coef = Exact(Uint128(int.from_bytes(body, "big")))
        elif len(body) == 16:
            coef = Exact(Uint128.from_bytes_be(body))
        else:
            raise InvalidBinaryDataError(f"invalid binary data: coefficient length {len(body)}")
        return cls._make(bool(flags & _FLAG_NEG), coef, prec)

    # ------- Python protocol -------
    def __str__(self) -> str:
        return self._format(trim=True)

    def __repr__(self) -> str:
        return f"Decimal('{self}')"

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __int__(self) -> int:
        d = self.trunc(0)
        n = d._coef.to_int()
        return -n if d._neg else n

    def __float__(self) -> float:
        return self.inexact_float64()

    def __hash__(self) -> int:
        d = self.trim_trailing_zeros()
        if d._prec == 0:
            return hash(int(d))
        return hash((d._neg, d._coef.to_int(), d._prec))

    def __eq__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.cmp(other) == 0

    def __lt__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.cmp(other) < 0

    def __le__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.cmp(other) <= 0

    def __gt__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.cmp(other) > 0

    def __ge__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.cmp(other) >= 0

    def __neg__(self) -> "Decimal":
        return self.neg()

    def __pos__(self) -> "Decimal":
        return self

    def __abs__(self) -> "Decimal":
        return self.abs()

    def __add__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else self.add(other)

    def __radd__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else other.add(self)

    def __sub__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else self.sub(other)

    def __rsub__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else other.sub(self)

    def __mul__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else self.mul(other)

    def __rmul__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else other.mul(self)

    def __truediv__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else self.div(other)

    def __rtruediv__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else other.div(self)

    def __floordiv__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else self.quo_rem(other)[0]

    def __mod__(self, other: Any) -> "Decimal":
        other = _coerce(other)
        return NotImplemented if other is None else self.mod(other)

    def __divmod__(self, other: Any) -> Tuple["Decimal", "Decimal"]:
        other = _coerce(other)
        return NotImplemented if other is None else self.quo_rem(other)

    def __pow__(self, e: Any) -> "Decimal":
        if isinstance(e, Decimal):
            return self.pow_to_int_part(e)
        if isinstance(e, int) and not isinstance(e, bool):
            return self.pow_int32(e)
        return NotImplemented


def _check_prec(prec: int) -> None:
    if not 0 <= prec <= DEFAULT_PREC:
        raise PrecisionOutOfRangeError(f"precision out of range, only support up to {DEFAULT_PREC} digits")


def _check_exponent(e: int) -> None:
    if not -_MAX_INT32 - 1 <= e <= _MAX_INT32:
        raise ExponentTooLargeError("exponent is too large, must be within int32 range")


def _exact(d: Decimal) -> Uint128:
    if isinstance(d._coef, Big):
        raise ArithmeticOverflowError("coefficient already beyond 128 bits")
    return d._coef.u128


def _coerce(value: Any) -> Union[Decimal, None]:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal.from_int(value)
    return None


def maximum(first: Decimal, *rest: Decimal) -> Decimal:
    result = first
    for d in rest:
        if d.greater_than(result):
            result = d
    return result


def minimum(first: Decimal, *rest: Decimal) -> Decimal:
    result = first
    for d in rest:
        if d.less_than(result):
            result = d
    return result


ZERO = Decimal._new(False, _ZERO_COEF, 0)
ONE = Decimal._new(False, _ONE_COEF, 0)
