#!/usr/bin/env python3
"""Example: fixed-point decimals with 19 fractional digits.

Each value is a signed coefficient with a scale. Arithmetic stays inside
128/256-bit words while the numbers fit and moves to Python ints when they
do not; the printed results are the same either way.
"""

import polars as pl

import qdecimal as qd
from qdecimal import Decimal, Uint128, Uint256

a = Decimal("12345.6789")
b = Decimal("9876.54321")

print(f"{a} + {b} = {a + b}")
print(f"{a} * {b} = {a * b}")
print(f"{a} / {b} = {a / b}")
print(f"sqrt(2) = {Decimal(2).sqrt()}")
print(f"1.0001 ** 365 = {Decimal('1.0001') ** 365}")
print(f"round_bank(2.675, 2) = {Decimal('2.675').round_bank(2)}")
print(f"{b} as 8 digits: {b.string_fixed(8)}")

# compound interest on a ledger column
df = pl.DataFrame({"principal": qd.decimal_series("principal", ["1000", "250.5", "0.01"])})
rate = Decimal("1.05")
grown = [p * rate ** 10 for p in qd.series_to_decimals(df["principal"])]
df = df.with_columns(qd.decimal_series("after_10y", [g.round_bank(2) for g in grown]))
print(df)

# raw words, rendered as base-10 strings
words = pl.DataFrame({
    "w128": qd.word_series("w128", [Uint128.from_int(2**100), Uint128(42)]),
    "w256": qd.word_series("w256", [Uint256.from_int(2**200), Uint256.from_int(7)]),
})
qd.print_words_dataframe(words)
