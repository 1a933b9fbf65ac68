"""
End-to-end exploratory analysis: load -> clean -> charts -> statistics.

**Conceptual**: The pipeline is strictly linear. Each stage fully consumes its
input and returns a value before the next starts, and any stage failure aborts
the run:

  1. Load one sheet of the raw spreadsheet         (DataSourceError)
  2. Build the clean table and check that the
     analysis columns can support statistics        (SchemaError, StatisticsError)
  3. Render the three charts                        (ChartWriteError)
  4. Fit OLS and compute Pearson's r

Errors propagate unchanged; the CLI in actions/run_co2_gdp_eda.py turns them
into a message and a non-zero exit status. There is no partial-success path:
statistics are never produced from data that failed validation.

**Teaching note**: run_eda_pipeline takes an EdaSettings argument instead of
reading globals, and returns everything it computed in an EdaResult. That makes
the whole run a function call that tests can make against a temporary
directory.
"""

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from src.analytics.statistics import (
    OlsResult,
    check_analysis_inputs,
    compute_pearson_correlation,
    fit_ols,
    format_correlation,
    format_ols_summary,
)
from src.config.settings import EdaSettings
from src.data.io import read_raw_spreadsheet
from src.data.transform import build_clean_table, find_duplicate_years
from src.reporting.charts import render_all_charts

PREVIEW_ROWS = 6


@dataclass(frozen=True)
class EdaResult:
    """
    Everything a pipeline run produced.

    Attributes:
        clean_table: The clean analysis table (co2_data).
        ols: Linear model summary for co2_per_capita ~ gdp_per_capita.
        correlation: Pearson's r between gdp_per_capita and co2_per_capita.
        chart_paths: Paths of the three PNG files, in rendering order.
        duplicate_years: Years that appeared more than once in the input.
    """
    clean_table: pd.DataFrame
    ols: OlsResult
    correlation: float
    chart_paths: list[Path]
    duplicate_years: list[int]


def describe_structure(clean: pd.DataFrame) -> str:
    """
    Text overview of the clean table: shape, then one line per column.

    Example output:
        Table: 33 rows x 6 columns
          year                     int64    1990, 1991, 1992, ...
    """
    lines = [f"Table: {len(clean)} rows x {len(clean.columns)} columns"]
    for column in clean.columns:
        sample = ", ".join(str(v) for v in clean[column].head(3).tolist())
        if len(clean) > 3:
            sample += ", ..."
        lines.append(f"  {column:<26}{str(clean[column].dtype):<10}{sample}")
    return "\n".join(lines)


def run_eda_pipeline(settings: EdaSettings) -> EdaResult:
    """
    Run the full analysis for the given settings.

    Args:
        settings: Input path, sheet, output directory and display options.

    Returns:
        EdaResult with the clean table, statistics and chart paths.

    Raises:
        DataSourceError: Input file or sheet missing/unreadable.
        SchemaError: Expected raw header absent or values not coercible.
        ChartWriteError: A chart file could not be written.
        StatisticsError: Regression/correlation undefined for the data.
    """
    print("=" * 80)
    print("CO2 Emissions and GDP Per Capita - Exploratory Data Analysis")
    print("=" * 80)
    print()

    # ========================================================================
    # Step 1: Load raw spreadsheet
    # ========================================================================
    print(f"Step 1: Loading {settings.data_path} (sheet {settings.sheet!r})...")
    raw = read_raw_spreadsheet(settings.data_path, sheet=settings.sheet)
    print(f"  ✓ Loaded {len(raw)} rows, {len(raw.columns)} columns")
    print()

    # ========================================================================
    # Step 2: Clean table
    # ========================================================================
    print("Step 2: Building clean table...")
    co2_data = build_clean_table(raw, context=str(settings.data_path))
    duplicate_years = find_duplicate_years(co2_data)
    if duplicate_years:
        print(f"  ⚠ Duplicate years in input (kept as-is): {duplicate_years}")
    print("--- Data Structure and First Rows ---")
    print(describe_structure(co2_data))
    print()
    print(co2_data.head(PREVIEW_ROWS).to_string(index=False))
    print()

    # Rejects empty, constant or incomplete analysis columns before any file is written
    check_analysis_inputs(co2_data)

    # ========================================================================
    # Step 3: Charts
    # ========================================================================
    print(f"Step 3: Rendering charts to {settings.output_dir}...")
    chart_paths = render_all_charts(
        co2_data,
        output_dir=settings.output_dir,
        show=settings.show_plots,
        dpi=settings.dpi,
    )
    print()

    # ========================================================================
    # Step 4: Statistics
    # ========================================================================
    print("Step 4: Statistical analysis (linear model summary)")
    print("-" * 80)
    ols = fit_ols(co2_data)
    print(format_ols_summary(ols))
    print()
    print(ols.summary_text)
    print("-" * 80)

    correlation = compute_pearson_correlation(co2_data)
    print(format_correlation(correlation))
    print()

    print("=" * 80)
    print(f"Analysis complete. {len(chart_paths)} plots and statistical output generated.")
    print("=" * 80)

    return EdaResult(
        clean_table=co2_data,
        ols=ols,
        correlation=correlation,
        chart_paths=chart_paths,
        duplicate_years=duplicate_years,
    )
