import random

import pytest

from qdecimal import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DivideByZeroError,
    InvalidFormatError,
    NegativeValueError,
    Uint128,
    Uint256,
    ValueOverflowError,
)
from qdecimal.uint256 import MAX, ONE, ZERO

MOD = 1 << 256


def _rand_u256(rng: random.Random) -> int:
    bits = rng.choice((16, 64, 127, 128, 129, 192, 255, 256))
    return rng.getrandbits(bits)


def test_constants():
    assert str(ZERO) == "0"
    assert ONE.to_int() == 1
    assert MAX.to_int() == MOD - 1
    assert Uint256.parse(str(MAX)) == MAX


def test_random_against_int():
    rng = random.Random(2024)
    for _ in range(300):
        a, b = _rand_u256(rng), _rand_u256(rng)
        x, y = Uint256.from_int(a), Uint256.from_int(b)

        assert x.add_wrap(y).to_int() == (a + b) % MOD
        assert x.sub_wrap(y).to_int() == (a - b) % MOD
        assert x.mul_wrap(y).to_int() == (a * b) % MOD

        if a + b < MOD:
            assert x.add(y).to_int() == a + b
        else:
            with pytest.raises(ArithmeticOverflowError):
                x.add(y)

        if a >= b:
            assert x.sub(y).to_int() == a - b
        else:
            with pytest.raises(ArithmeticUnderflowError):
                x.sub(y)

        if a * b < MOD:
            assert x.mul(y).to_int() == a * b
        else:
            with pytest.raises(ArithmeticOverflowError):
                x.mul(y)

        assert x.cmp(y) == (a > b) - (a < b)


def test_quo_rem_against_int():
    rng = random.Random(42)
    for _ in range(40):
        a, b = _rand_u256(rng), _rand_u256(rng) or 1
        q, r = Uint256.from_int(a).quo_rem(Uint256.from_int(b))
        assert (q.to_int(), r.to_int()) == divmod(a, b)


def test_quo_rem_shortcuts():
    small = Uint256.from_int(5)
    big = Uint256.from_int(1 << 200)
    assert small.quo_rem(big) == (ZERO, small)
    q, r = Uint256.from_int(10**30).quo_rem(Uint256.from_int(7))
    assert (q.to_int(), r.to_int()) == divmod(10**30, 7)
    q, r128 = big.quo_rem128(Uint128.from_int(10**19))
    assert (q.to_int(), r128.to_int()) == divmod(1 << 200, 10**19)
    with pytest.raises(DivideByZeroError):
        big.quo_rem(ZERO)


def test_mul_carry_overflow():
    # both cross terms fit but their sum with the low-product carry does not
    x = Uint256(Uint128.from_int((1 << 128) - 1), Uint128(1))
    y = Uint256(Uint128.from_int((1 << 128) - 1), Uint128(0))
    expected = x.to_int() * y.to_int()
    if expected >= MOD:
        with pytest.raises(ArithmeticOverflowError):
            x.mul(y)
    else:
        assert x.mul(y).to_int() == expected

    a = Uint256(Uint128(0), Uint128(1))
    with pytest.raises(ArithmeticOverflowError):
        a.mul(a)


def test_pow():
    assert Uint256.from_int(3).pow(100).to_int() == 3**100
    assert Uint256.from_int(12345).pow(0) == ONE
    with pytest.raises(ArithmeticOverflowError):
        Uint256.from_int(2).pow(256)
    assert Uint256.from_int(2).pow(255).to_int() == 1 << 255


def test_bits_and_shifts():
    x = Uint256.from_int(1 << 200)
    assert x.bit_len() == 201
    assert x.leading_zeros() == 55
    assert x.trailing_zeros() == 200
    assert ZERO.leading_zeros() == 256
    assert x.rsh(100).to_int() == 1 << 100
    assert x.lsh(55).to_int() == 1 << 255
    assert x.lsh(56) == ZERO
    assert ZERO.set_bit(200) == x
    assert x.bit(200) == 1
    assert x.not_().to_int() == (MOD - 1) ^ (1 << 200)
    assert x.ones_count() == 1


def test_bytes_round_trip():
    rng = random.Random(5)
    for _ in range(50):
        x = Uint256.from_int(_rand_u256(rng))
        assert Uint256.from_bytes(x.to_bytes()) == x
        assert Uint256.from_bytes_be(x.to_bytes_be()) == x
        assert x.to_bytes_be() == x.to_int().to_bytes(32, "big")
        buf = bytearray(40)
        x.put_bytes(buf, 8)
        assert Uint256.from_bytes(buf, 8) == x


def test_from_int_and_parse_errors():
    with pytest.raises(NegativeValueError):
        Uint256.from_int(-1)
    with pytest.raises(ValueOverflowError):
        Uint256.from_int(MOD)
    with pytest.raises(InvalidFormatError):
        Uint256.parse("1.5")
    with pytest.raises(ValueOverflowError):
        Uint256.parse(str(MOD))
    with pytest.raises(ValueOverflowError):
        Uint256.parse("9" * 5000)
    with pytest.raises(NegativeValueError):
        Uint256.parse("-" + "9" * 5000)
    assert Uint256.parse("0" * 5000 + "7") == Uint256.from_int(7)
    with pytest.raises(TypeError):
        Uint256(1, 2)


def test_operators_mix_widths():
    x = Uint256.from_int(1 << 130)
    assert x + Uint128(1) == Uint256.from_int((1 << 130) + 1)
    assert x - 1 == Uint256.from_int((1 << 130) - 1)
    assert x * 2 == Uint256.from_int(1 << 131)
    assert x // Uint128(4) == Uint256.from_int(1 << 128)
    assert x % 3 == Uint256.from_int((1 << 130) % 3)
    assert Uint256.from_uint128(Uint128(7)).equals128(Uint128(7))
