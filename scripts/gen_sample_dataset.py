#!/usr/bin/env python3
"""Sample dataset generation for manual and performance testing.

Generates synthetic shop-lot transaction spreadsheets in the layout the
dashboard ingests:
- Row 1: Header row (Location, Transaction Date, Price, ...)
- Row 2+: Data rows

Dates are written with mixed encodings (real dates, spreadsheet serial numbers
and text) and a share of rows is deliberately invalid so normalization paths
are exercised.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

LOCATIONS = ["Kuala Lumpur", "Petaling Jaya", "Shah Alam", "Johor Bahru", "Penang", "Ipoh"]
HEADER = ["Location", "Transaction Date", "Price", "Tenure"]
SPREADSHEET_EPOCH = pd.Timestamp("1899-12-30")


def generate_transactions(
    rows: int, seed: int = 42, invalid_ratio: float = 0.05, text_dates: bool = False
) -> pd.DataFrame:
    """Generate synthetic transactions with mixed date encodings.

    Args:
        rows: Number of data rows to generate
        seed: Random seed for reproducible data
        invalid_ratio: Share of rows given a bad price or an unparseable date
        text_dates: Write every date as ISO text (CSV carries no cell types)

    Returns:
        DataFrame whose columns follow HEADER
    """
    rng = np.random.default_rng(seed)

    dates = pd.to_datetime(
        rng.integers(pd.Timestamp("1985-01-01").value // 10**9, pd.Timestamp("2024-12-31").value // 10**9, rows),
        unit="s",
    ).normalize()
    # Older sales are cheaper on average
    years = dates.year.to_numpy()
    base = 250_000 + (years - 1985) * 18_000
    prices = np.round(base * rng.uniform(0.7, 1.4, rows), -3)

    encoded_dates: list[object] = []
    for i, ts in enumerate(dates):
        kind = 2 if text_dates else i % 3
        if kind == 0:
            encoded_dates.append(ts.to_pydatetime())
        elif kind == 1:
            encoded_dates.append(float((ts - SPREADSHEET_EPOCH).days))
        else:
            encoded_dates.append(ts.strftime("%Y-%m-%d"))

    price_cells: list[object] = prices.tolist()
    invalid = rng.random(rows) < invalid_ratio
    for i in np.flatnonzero(invalid):
        if i % 2 == 0:
            price_cells[i] = 0
        else:
            encoded_dates[i] = "not a date"

    return pd.DataFrame(
        {
            "Location": rng.choice(LOCATIONS, rows).tolist(),
            "Transaction Date": encoded_dates,
            "Price": price_cells,
            "Tenure": rng.choice(["Freehold", "Leasehold"], rows).tolist(),
        },
        columns=HEADER,
    )


def create_excel_file(output_path: Path, rows: int, seed: int = 42, invalid_ratio: float = 0.05) -> None:
    """Write generated transactions to ``output_path`` (header in row 1)."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    is_csv = output_path.suffix.lower() == ".csv"
    df = generate_transactions(rows, seed, invalid_ratio, text_dates=is_csv)
    if is_csv:
        df.to_csv(output_path, index=False)
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Transactions", index=False)

    print(f"Created file: {output_path}")
    print(f"  Rows: {rows} (+ 1 header row)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic shop-lot transaction spreadsheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sample.xlsx
  %(prog)s large.xlsx --rows 100000 --seed 7
  %(prog)s clean.csv --invalid-ratio 0
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx or .csv path")
    parser.add_argument("--rows", type=int, default=5_000, help="Number of data rows (default: 5,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--invalid-ratio",
        type=float,
        default=0.05,
        help="Share of rows with invalid price/date (default: 0.05)",
    )
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.invalid_ratio <= 1:
        print("Error: --invalid-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    try:
        create_excel_file(args.output, args.rows, args.seed, args.invalid_ratio)
    except OSError as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
