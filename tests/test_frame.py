import polars as pl
import pytest

import qdecimal as qd
from qdecimal import Decimal, Uint128, Uint256


def _lit_value(expr: pl.Expr):
    return pl.DataFrame({}).select(expr.alias("v"))["v"].item()


def test_lit():
    assert _lit_value(qd.lit(Decimal("1.50"))) == "1.5"
    assert _lit_value(qd.lit("-0.250")) == "-0.25"
    assert _lit_value(qd.lit(Uint128(7))) == Uint128(7).to_bytes_be()
    assert _lit_value(qd.lit(Uint256.from_int(9))) == (9).to_bytes(32, "big")
    assert _lit_value(qd.lit(5)) == (5).to_bytes(32, "big")
    with pytest.raises(TypeError):
        qd.lit(1.5)
    with pytest.raises(ValueError):
        qd.lit(-1)


def test_decimal_series_round_trip():
    s = qd.decimal_series("amount", ["1.50", 2, Decimal("-0.25"), None])
    assert s.dtype == pl.Utf8
    assert s.to_list() == ["1.5", "2", "-0.25", None]
    assert qd.series_to_decimals(s) == [Decimal("1.5"), Decimal(2), Decimal("-0.25"), None]


def test_decimal_sum_is_exact():
    s = qd.decimal_series("x", ["0.1"] * 10 + [None])
    assert qd.decimal_sum(s) == Decimal(1)
    big = qd.decimal_series("y", ["99999999999999999999.9999999999999999999"] * 3)
    assert str(qd.decimal_sum(big)) == "299999999999999999999.9999999999999999997"


def test_series_type_checks():
    with pytest.raises(TypeError):
        qd.series_to_decimals(pl.Series("n", [1, 2]))
    with pytest.raises(TypeError):
        qd.series_to_words(pl.Series("n", ["a"]))
    with pytest.raises(TypeError):
        qd.word_series("w", [5])


def test_word_series_round_trip():
    values = [Uint128(1), Uint256.from_int(1 << 200), None]
    s = qd.word_series("w", values)
    assert s.dtype == pl.Binary
    assert qd.series_to_words(s) == values


def test_format_words_dataframe_auto_detect():
    df = pl.DataFrame(
        {
            "w128": qd.word_series("w128", [Uint128(10), Uint128.from_int(1 << 100)]),
            "w256": qd.word_series("w256", [Uint256.from_int(3), None]),
            "tag": pl.Series("tag", [b"\x01", b"\x02"], dtype=pl.Binary),
            "name": ["a", "b"],
        }
    )
    out = qd.format_words_dataframe(df)
    assert out["w128"].to_list() == ["10", str(1 << 100)]
    assert out["w256"].to_list() == ["3", None]
    assert out["tag"].dtype == pl.Binary

    added = qd.format_words_dataframe(df, ["w128"], mode="add")
    assert added["w128_dec"].to_list() == ["10", str(1 << 100)]
    assert added["w128"].dtype == pl.Binary

    with pytest.raises(ValueError):
        qd.format_words_dataframe(df, mode="hex")
