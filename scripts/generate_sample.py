"""
Sales CSV Generator

Writes the canonical six-row sample CSV, or a seeded synthetic dataset of
any size for load and chart testing.

Usage:
    python scripts/generate_sample.py                      # canonical sample
    python scripts/generate_sample.py --rows 50000 --days 365
"""

import argparse
from pathlib import Path

from sales_analytics.config.logging import configure_logging
from sales_analytics.ingestion import generate_synthetic_csv, parse_sales_csv, write_sample_csv

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "generated"


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate sales CSV data")
    parser.add_argument("--rows", type=int, default=0, help="Synthetic rows (0 writes the canonical sample)")
    parser.add_argument("--days", type=int, default=90, help="Days spanned by synthetic orders")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output", type=Path, default=None, help="Output file")
    args = parser.parse_args()

    configure_logging()

    if args.rows <= 0:
        path = write_sample_csv(args.output or OUTPUT_DIR)
        print(f"✅ {path}: canonical sample")
        return

    path = args.output or OUTPUT_DIR / f"sales_{args.rows}.csv"
    path.parent.mkdir(parents=True, exist_ok=True)

    text = generate_synthetic_csv(rows=args.rows, seed=args.seed, days=args.days)
    path.write_text(text, encoding="utf-8")

    # Self-check: everything we generate must parse cleanly
    result = parse_sales_csv(text)
    print(f"✅ {path}: {len(result.records):,} rows, {len(result.diagnostics)} diagnostics")


if __name__ == "__main__":
    main()
