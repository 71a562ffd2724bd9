#!/usr/bin/env python3
"""
Group-by aggregation example: exact per-account totals of decimal amounts.

Amounts travel through polars as canonical decimal strings, so the
aggregation below never rounds through float64.
"""

import polars as pl

import qdecimal as qd
from qdecimal import Decimal


def main():
    print("Ledger aggregation example")
    print("=" * 50)

    transactions = pl.DataFrame({
        "account_id": ["alice", "bob", "alice", "charlie", "bob", "alice", "charlie"],
        "amount": qd.decimal_series("amount", [
            "1.000000000000000001",
            "2.5",
            "-0.5",
            "10",
            "1.2",
            "0.75",
            "99999999999999999999.9999999999999999999",  # beyond 128 bits once scaled
        ]),
        "fee_bps": [5, 5, 10, 3, 5, 10, 3],
    })

    print("Raw transactions:")
    print(transactions)

    grouped = transactions.group_by("account_id", maintain_order=True).agg(
        pl.col("amount"),
        pl.col("fee_bps").max().alias("max_fee_bps"),
        pl.len().alias("tx_count"),
    )

    rows = []
    for row in grouped.iter_rows(named=True):
        total = qd.decimal_sum(pl.Series(row["amount"], dtype=pl.Utf8))
        fee = total.mul64(row["max_fee_bps"]).div64(10_000).round_bank(8)
        rows.append((row["account_id"], str(total), fee.string_fixed(8), row["tx_count"]))

    totals = pl.DataFrame(
        rows, schema=["account_id", "total", "fee", "tx_count"], orient="row"
    )
    print("\nExact totals per account:")
    print(totals)

    grand_total = qd.decimal_sum(totals["total"])
    print(f"\nGrand total: {grand_total}")
    print(f"Largest account: {qd.maximum(*qd.series_to_decimals(totals['total']))}")
    print(f"Average per account: {grand_total / Decimal(totals.height)}")


if __name__ == "__main__":
    main()
