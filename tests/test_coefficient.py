import pytest

from qdecimal import (
    ArithmeticUnderflowError,
    Big,
    Coefficient,
    DivideByZeroError,
    Exact,
    NegativeValueError,
    Uint128,
)

LIMIT = 1 << 128


def test_from_int_picks_variant():
    assert isinstance(Coefficient.from_int(0), Exact)
    assert isinstance(Coefficient.from_int(LIMIT - 1), Exact)
    assert isinstance(Coefficient.from_int(LIMIT), Big)
    assert Coefficient.from_uint128(Uint128(5)).to_int() == 5
    with pytest.raises(NegativeValueError):
        Coefficient.from_int(-1)


def test_add_promotes_on_overflow():
    a = Coefficient.from_int(LIMIT - 1)
    s = a.add(Coefficient.from_int(1))
    assert isinstance(s, Big)
    assert s.overflow()
    assert s.to_int() == LIMIT


def test_sub_demotes_when_it_fits():
    big = Coefficient.from_int(LIMIT + 10)
    d = big.sub(Coefficient.from_int(20))
    assert isinstance(d, Exact)
    assert d.to_int() == LIMIT - 10
    with pytest.raises(ArithmeticUnderflowError):
        Coefficient.from_int(1).sub(Coefficient.from_int(2))
    with pytest.raises(ArithmeticUnderflowError):
        Coefficient.from_int(1).sub(big)


def test_mul_and_quo_rem_across_boundary():
    a = Coefficient.from_int(10**30)
    b = Coefficient.from_int(10**20)
    p = a.mul(b)
    assert isinstance(p, Big)
    assert p.to_int() == 10**50

    q, r = p.quo_rem(Coefficient.from_int(7))
    assert (q.to_int(), r.to_int()) == divmod(10**50, 7)
    q, r = Coefficient.from_int(100).quo_rem(Coefficient.from_int(7))
    assert isinstance(q, Exact) and (q.to_int(), r.to_int()) == (14, 2)
    with pytest.raises(DivideByZeroError):
        p.quo_rem(Coefficient.from_int(0))


def test_quo_rem_pow10():
    q, r = Coefficient.from_int(123456).quo_rem_pow10(3)
    assert (q.to_int(), r) == (123, 456)
    q, r = Coefficient.from_int(10**45 + 17).quo_rem_pow10(19)
    assert (q.to_int(), r) == divmod(10**45 + 17, 10**19)


def test_cmp_is_representation_independent():
    exact = Coefficient.from_int(LIMIT - 1)
    big = Coefficient.from_int(LIMIT + 1)
    assert exact.cmp(big) == -1
    assert big.cmp(exact) == 1
    assert big.cmp(Coefficient.from_int(LIMIT + 1)) == 0
    assert Coefficient.from_int(3) == Coefficient.from_int(3)


@pytest.mark.parametrize(
    "value,zeros",
    [
        (1, 0),
        (10, 1),
        (1200, 2),
        (10**8, 8),
        (123 * 10**15, 15),
        (10**16, 16),
        (7 * 10**18, 18),
        (10**19, 19),
        (10**25, 19),
        (0, 19),
    ],
)
def test_trailing_zeros(value, zeros):
    assert Coefficient.from_int(value).trailing_zeros() == zeros


@pytest.mark.parametrize("zeros", [0, 3, 11, 16, 17, 19])
def test_trailing_zeros_big_matches_exact(zeros):
    big = Coefficient.from_int(3 * 10**40 * 10**zeros + 10**zeros)
    assert isinstance(big, Big)
    assert big.trailing_zeros() == zeros


def test_base_is_abstract():
    with pytest.raises(TypeError):
        Coefficient()
    assert isinstance(Coefficient.from_int(1 << 130), Coefficient)
