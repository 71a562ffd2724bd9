import logging
import math
import random
from fractions import Fraction

import pytest

from qdecimal import (
    ONE,
    ZERO,
    Decimal,
    ExponentTooLargeError,
    NegativeValueError,
    SqrtNegativeError,
    ZeroPowNegativeError,
)

D = Decimal.must_parse


def frac(d: Decimal) -> Fraction:
    return Fraction(str(d))


def test_zero_powers():
    assert ZERO.pow_int32(0) == ONE
    assert ZERO.pow_int32(3) == ZERO
    with pytest.raises(ZeroPowNegativeError):
        ZERO.pow_int32(-1)


def test_legacy_pow_int_treats_zero_as_absorbing():
    assert ZERO.pow_int(0) == ZERO
    assert ZERO.pow_int(-1) == ZERO
    assert D("3").pow_int(2) == D("9")


@pytest.mark.parametrize(
    "base,exp,expected",
    [
        ("1.5", 2, "2.25"),
        ("-2", 3, "-8"),
        ("-2", 2, "4"),
        ("1.1", 10, "2.5937424601"),
        ("10.00", 3, "1000"),
        ("7", 1, "7"),
        ("7", 0, "1"),
        ("2", -2, "0.25"),
        ("-2", -3, "-0.125"),
        ("3", -1, "0.3333333333333333333"),
    ],
)
def test_pow_int32(base, exp, expected):
    assert D(base).pow_int32(exp) == D(expected)


def test_pow_truncates_to_default_precision():
    # natural scale 30, rescaled to 19 digits
    assert frac(D("1.5").pow_int32(30)) == Fraction(15**30 // 10**11, 10**19)


def test_pow_falls_back_to_int(caplog):
    with caplog.at_level(logging.DEBUG, logger="qdecimal.decimal"):
        result = D("2").pow_int32(200)
    assert result == Decimal.from_int(2**200)
    assert "using int" in caplog.text

    expected = Fraction(int(Fraction(10001, 10000) ** 1000 * 10**19), 10**19)
    assert frac(D("1.0001").pow_int32(1000)) == expected


def test_negative_power_beyond_128_bits():
    assert D("0.000001").pow_int32(-5) == Decimal.from_int(10**30)


def test_exponent_bounds():
    with pytest.raises(ExponentTooLargeError):
        D("2").pow_int32(2**31)
    with pytest.raises(ExponentTooLargeError):
        D("2").pow_int(-(2**31) - 1)
    assert ONE.pow_int32(2**31 - 1) == ONE
    assert ONE.pow_int32(-(2**31)) == ONE
    assert ONE.pow_to_int_part(Decimal.from_int(-(2**31))) == ONE
    with pytest.raises(ExponentTooLargeError):
        ONE.pow_to_int_part(Decimal.from_int(2**31))


def test_pow_to_int_part():
    assert D("2").pow_to_int_part(D("3.9")) == D("8")
    assert D("2").pow_to_int_part(D("-1.5")) == D("0.5")
    assert ZERO.pow_to_int_part(D("0.5")) == ONE
    with pytest.raises(ZeroPowNegativeError):
        ZERO.pow_to_int_part(D("-0.5"))
    with pytest.raises(ExponentTooLargeError):
        D("2").pow_to_int_part(Decimal.from_int(2**40))


def test_sqrt_examples():
    assert D("4").sqrt() == D("2")
    assert str(D("2").sqrt()) == "1.4142135623730950488"
    assert D("0.25").sqrt() == D("0.5")
    assert D("1.000").sqrt() is ONE
    assert ZERO.sqrt() is ZERO


def test_sqrt_negative():
    with pytest.raises(SqrtNegativeError):
        D("-1").sqrt()
    with pytest.raises(NegativeValueError):
        D("-0.01").sqrt()


def test_sqrt_matches_isqrt():
    rng = random.Random(77)
    for _ in range(60):
        coef = rng.getrandbits(rng.choice((10, 40, 64, 100, 127))) + 1
        prec = rng.randint(0, 19)
        d = Decimal.from_int(coef, prec)
        root = math.isqrt(coef * 10 ** (38 - prec))
        assert frac(d.sqrt()) == Fraction(root, 10**19)


def test_sqrt_beyond_the_256_bit_workspace():
    # 10^68 scaled stays inside 252 bits; 10^76 does not
    assert Decimal.from_int(10**30).sqrt() == Decimal.from_int(10**15)
    assert Decimal.from_int(10**38).sqrt() == Decimal.from_int(10**19)
    assert Decimal.from_int(10**50).sqrt() == Decimal.from_int(10**25)


def test_pow_with_base_wider_than_64_bits():
    n = 2**64 + 3
    base = Decimal.from_int(n)
    assert base.pow_int32(2) == Decimal.from_int(n**2)
    assert base.pow_int32(3) == Decimal.from_int(n**3)
    assert base.pow_int32(4) == Decimal.from_int(n**4)
    assert base.pow_int32(-1) == ZERO
    assert (-base) ** 3 == Decimal.from_int(-(n**3))
    assert Decimal.from_int(n, 10).pow_int32(-1) == Decimal.from_int(10**29 // n, 19)
