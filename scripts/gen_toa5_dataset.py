#!/usr/bin/env python3
"""Dataset generation script for reader performance testing.

Generates a synthetic TOA5 file: the four header lines followed by rows at a
fixed logging interval. A share of the cells is written as "NAN" like a
datalogger does for missing sensor readings.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd


def generate_synthetic_table(
    rows: int, cols: int, *, interval: str = "10min", nan_ratio: float = 0.01, seed: int = 42
) -> pd.DataFrame:
    """Generate a wide DataFrame: TIMESTAMP, RECORD and ``cols`` sensor columns."""
    rng = np.random.default_rng(seed)

    data: dict[str, object] = {
        "TIMESTAMP": pd.date_range("2023-01-01", periods=rows, freq=interval).strftime("%Y-%m-%d %H:%M:%S"),
        "RECORD": np.arange(rows),
    }
    for i in range(cols):
        values = np.round(rng.normal(loc=20.0, scale=5.0, size=rows), 3).astype(object)
        values[rng.random(rows) < nan_ratio] = "NAN"
        data[f"Sensor{i + 1}_Avg"] = values
    return pd.DataFrame(data)


def create_toa5_file(
    output_path: Path,
    rows: int,
    cols: int,
    *,
    station: str = "PerfStation",
    table: str = "Table1",
    nan_ratio: float = 0.01,
    seed: int = 42,
) -> None:
    df = generate_synthetic_table(rows, cols, nan_ratio=nan_ratio, seed=seed)
    sensors = df.columns[2:]

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as f:
        f.write(f"TOA5,{station},CR1000X,1234,CR1000X.Std.04.02,CPU:perf.CR1X,1,{table}\n")
        f.write(",".join(df.columns) + "\n")
        f.write(",".join(["TS", "RN"] + ["Deg C"] * len(sensors)) + "\n")
        f.write(",".join(["", ""] + ["Avg"] * len(sensors)) + "\n")
        df.to_csv(f, header=False, index=False, lineterminator="\n")

    print(f"Created TOA5 file: {output_path}")
    print(f"  Rows: {rows:,} (+ 4 header lines)")
    print(f"  Sensor columns: {cols}")
    print(f"  Long-format records: {rows * (cols + 1):,}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic TOA5 dataset for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1 year of 10 minute data with 40 sensors
  %(prog)s data/perf.dat --rows 52560 --cols 40

  # Small file with more missing values
  %(prog)s data/small.dat --rows 1000 --cols 5 --nan-ratio 0.2
        """
    )
    parser.add_argument("output", type=Path, help="Output .dat file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)")
    parser.add_argument("--cols", type=int, default=40, help="Number of sensor columns (default: 40)")
    parser.add_argument("--nan-ratio", type=float, default=0.01, help="Share of NAN cells (default: 0.01)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be generated without creating files"
    )
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.cols <= 0:
        print("Error: --cols must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.nan_ratio <= 1.0:
        print("Error: --nan-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    total_cells = args.rows * args.cols
    print("Dataset generation plan:")
    print(f"  Output file: {args.output}")
    print(f"  Rows: {args.rows:,}")
    print(f"  Sensor columns: {args.cols}")
    print(f"  Total sensor cells: {total_cells:,}")
    print(f"  Random seed: {args.seed}")

    if args.dry_run:
        print("\n[DRY RUN] Would generate files but not creating them.")
        return 0

    try:
        create_toa5_file(args.output, args.rows, args.cols, nan_ratio=args.nan_ratio, seed=args.seed)
    except OSError as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
