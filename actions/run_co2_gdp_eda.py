#!/usr/bin/env python3
"""
Run the CO2 / GDP per capita exploratory data analysis.

**Purpose**: Load the yearly World GDP / Population / CO2 emissions
spreadsheet, build the clean table, save three charts and print a linear
model summary plus Pearson's correlation between GDP per capita and CO2
emissions per capita.

**Usage**:
    python actions/run_co2_gdp_eda.py
    python actions/run_co2_gdp_eda.py --data-path data/raw/World_GDP_Population_CO2_Emissions_Dataset.xlsx
    python actions/run_co2_gdp_eda.py --sheet 0 --output-dir figures --no-show

Defaults come from the environment / .env (CO2_EDA_DATA_PATH, CO2_EDA_SHEET,
CO2_EDA_OUTPUT_DIR, CO2_EDA_SHOW_PLOTS, CO2_EDA_DPI); flags override them.

**Outputs** (written to --output-dir, default: current directory):
  - plot_gdp_time_series.png
  - plot_env_time_series_facet.png
  - plot_correlation.png

**Exit codes**:
  - 0: Success
  - 1: Fatal error (missing file/sheet, missing column, degenerate data,
       unwritable chart, invalid configuration)
"""

import argparse
import dataclasses
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.analytics.statistics import StatisticsError
from src.config.settings import get_settings
from src.data.io import DataSourceError, parse_sheet_identifier
from src.data.schemas import SchemaError
from src.orchestration.eda_pipeline import run_eda_pipeline
from src.reporting.charts import ChartWriteError

FATAL_ERRORS = (DataSourceError, SchemaError, StatisticsError, ChartWriteError)


def build_parser() -> argparse.ArgumentParser:
    """Command-line interface for the analysis."""
    parser = argparse.ArgumentParser(
        description="Exploratory analysis of global GDP per capita vs CO2 emissions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--data-path",
        type=str,
        default=None,
        help="Path to the dataset spreadsheet (.xlsx or .csv). Default: CO2_EDA_DATA_PATH.",
    )

    parser.add_argument(
        "--sheet",
        type=str,
        default=None,
        help="Sheet index (0-based) or sheet name. Default: CO2_EDA_SHEET or 0.",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the chart PNGs. Default: CO2_EDA_OUTPUT_DIR or current directory.",
    )

    parser.add_argument(
        "--dpi",
        type=int,
        default=None,
        help="Resolution of saved charts. Default: CO2_EDA_DPI or 300.",
    )

    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not try to display charts on screen (files are still written).",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entrypoint. Returns the process exit code.

    Steps:
      1. Load settings from the environment and apply CLI overrides.
      2. Run the pipeline.
      3. Map fatal errors to exit code 1 with a message on stderr.
    """
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()

        overrides = {}
        if args.data_path is not None:
            overrides["data_path"] = Path(args.data_path)
        if args.sheet is not None:
            overrides["sheet"] = parse_sheet_identifier(args.sheet)
        if args.output_dir is not None:
            overrides["output_dir"] = Path(args.output_dir)
        if args.dpi is not None:
            overrides["dpi"] = args.dpi
        if args.no_show:
            overrides["show_plots"] = False

        settings = dataclasses.replace(settings, **overrides)
    except ValueError as e:
        print(f"✗ Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        run_eda_pipeline(settings)
    except FATAL_ERRORS as e:
        print(f"✗ {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
