"""Polars interchange for decimals and fixed-width words.

Decimals travel through polars as canonical strings (``pl.Utf8``) so no digit
is lost; words travel as big-endian binary, 16 bytes for ``Uint128`` and 32
for ``Uint256``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

import polars as pl

from .decimal import ZERO, Decimal
from .errors import InvalidBufferError
from .uint128 import Uint128
from .uint256 import Uint256

Word = Union[Uint128, Uint256]

_WORD_WIDTHS = (16, 32)


# ------- literals -------
def _int_to_be32(value: int) -> bytes:
    if value < 0:
        raise ValueError("words are unsigned; negative integers are not supported")
    if value >= 1 << 256:
        raise ValueError("integer does not fit in 256 bits")
    return value.to_bytes(32, byteorder="big")


def lit(value: Union[Decimal, Uint128, Uint256, int, str]) -> pl.Expr:
    """Construct a literal expression.

    - Decimal or decimal str: canonical string literal
    - Uint128 / Uint256: 16 / 32-byte big-endian binary literal
    - int: 32-byte big-endian binary literal (unsigned)
    """
    if isinstance(value, Decimal):
        return pl.lit(str(value))
    if isinstance(value, str):
        return pl.lit(str(Decimal.parse(value)))
    if isinstance(value, (Uint128, Uint256)):
        return pl.lit(value.to_bytes_be())
    if isinstance(value, int) and not isinstance(value, bool):
        return pl.lit(_int_to_be32(value))
    raise TypeError("lit accepts Decimal, decimal str, Uint128, Uint256 or int")


# ------- decimal columns -------
def decimal_series(name: str, values: Iterable[Union[Decimal, int, str, None]]) -> pl.Series:
    """Build a ``pl.Utf8`` series of canonical decimal strings; ``None`` stays null."""
    out: List[Optional[str]] = []
    for v in values:
        out.append(None if v is None else str(Decimal(v)))
    return pl.Series(name, out, dtype=pl.Utf8)


def series_to_decimals(series: pl.Series) -> List[Optional[Decimal]]:
    if series.dtype != pl.Utf8:
        raise TypeError(f"expected a string series, got {series.dtype}")
    return [None if s is None else Decimal.parse(s) for s in series.to_list()]


def decimal_sum(series: pl.Series) -> Decimal:
    """Exact sum of a decimal string series, nulls skipped."""
    total = ZERO
    for d in series_to_decimals(series):
        if d is not None:
            total = total.add(d)
    return total


# ------- word columns -------
def word_series(name: str, values: Iterable[Optional[Word]]) -> pl.Series:
    out: List[Optional[bytes]] = []
    for v in values:
        if v is None:
            out.append(None)
        elif isinstance(v, (Uint128, Uint256)):
            out.append(v.to_bytes_be())
        else:
            raise TypeError(f"expected Uint128 or Uint256, got {type(v).__name__}")
    return pl.Series(name, out, dtype=pl.Binary)


def _word_from_bytes(b: bytes) -> Word:
    if len(b) == 16:
        return Uint128.from_bytes_be(b)
    if len(b) == 32:
        return Uint256.from_bytes_be(b)
    raise InvalidBufferError(f"word values must be 16 or 32 bytes, got {len(b)}")


def series_to_words(series: pl.Series) -> List[Optional[Word]]:
    if series.dtype != pl.Binary:
        raise TypeError(f"expected a binary series, got {series.dtype}")
    return [None if b is None else _word_from_bytes(b) for b in series.to_list()]


def _words_as_strings(series: pl.Series) -> pl.Series:
    return pl.Series(
        series.name,
        [None if w is None else str(w) for w in series_to_words(series)],
        dtype=pl.Utf8,
    )


def _detect_word_columns(df: pl.DataFrame) -> List[str]:
    columns = []
    for col_name in df.columns:
        col = df[col_name]
        if col.dtype == pl.Binary:
            sample = col.drop_nulls().head(1)
            if len(sample) > 0 and len(sample.item(0)) in _WORD_WIDTHS:
                columns.append(col_name)
    return columns


def format_words_dataframe(
    df: pl.DataFrame, columns: Optional[List[str]] = None, mode: str = "replace"
) -> pl.DataFrame:
    """Render word columns as base-10 strings.

    Args:
        df: Input DataFrame
        columns: Binary word column names. If None, 16 and 32-byte binary
            columns are detected from their first non-null value.
        mode: Either "replace" (overwrite the binary columns) or "add"
            (add ``{column}_dec`` columns next to them)

    Returns:
        DataFrame with readable word columns
    """
    if mode not in ("replace", "add"):
        raise ValueError(f"Invalid mode '{mode}'. Must be 'replace' or 'add'.")
    if columns is None:
        columns = _detect_word_columns(df)

    updates = []
    for col_name in columns:
        rendered = _words_as_strings(df[col_name])
        if mode == "add":
            rendered = rendered.alias(f"{col_name}_dec")
        updates.append(rendered)
    if not updates:
        return df
    return df.with_columns(updates)


def print_words_dataframe(df: pl.DataFrame, columns: Optional[List[str]] = None) -> None:
    print(format_words_dataframe(df, columns, mode="replace"))
