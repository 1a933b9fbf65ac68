#!/usr/bin/env python3
"""
Write a synthetic dataset in the raw spreadsheet layout.

**Purpose**: Try the analysis without the real World GDP / CO2 workbook. The
generated file has the same headers as the real one, a chosen linear
relationship between GDP per capita and CO2 per capita, and optional noise.

**Usage**:
    python actions/generate_synthetic_dataset.py data/raw/synthetic.xlsx
    python actions/generate_synthetic_dataset.py data/raw/synthetic.csv --noise 0.3 --seed 7
    python actions/run_co2_gdp_eda.py --data-path data/raw/synthetic.xlsx --no-show
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.analytics.synthetic_data import generate_synthetic_raw_table


def main(argv: list[str] | None = None) -> int:
    """Generate the table and write it as .xlsx (default) or .csv."""
    parser = argparse.ArgumentParser(
        description="Write a synthetic GDP/CO2 dataset with the raw spreadsheet headers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("output", type=str, help="Destination file (.xlsx or .csv).")
    parser.add_argument("--years", type=int, default=33, help="Number of years. Default: 33.")
    parser.add_argument("--start-year", type=int, default=1990, help="First year. Default: 1990.")
    parser.add_argument("--intercept", type=float, default=2.0, help="CO2 intercept. Default: 2.0.")
    parser.add_argument("--slope", type=float, default=0.0002, help="CO2 per USD slope. Default: 0.0002.")
    parser.add_argument("--noise", type=float, default=0.1, help="Noise std on CO2 per capita. Default: 0.1.")
    parser.add_argument("--seed", type=int, default=42, help="Random seed. Default: 42.")

    args = parser.parse_args(argv)

    if args.years < 1:
        print(f"ERROR: --years must be >= 1, got {args.years}.", file=sys.stderr)
        return 2

    raw = generate_synthetic_raw_table(
        n_years=args.years,
        start_year=args.start_year,
        intercept=args.intercept,
        slope=args.slope,
        noise_std=args.noise,
        gdp_volatility=0.02,
        seed=args.seed,
    )

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    if output.suffix.lower() == ".csv":
        raw.to_csv(output, index=False)
    else:
        raw.to_excel(output, index=False, sheet_name="Sheet1")

    print(f"  ✓ Wrote {len(raw)} rows to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
