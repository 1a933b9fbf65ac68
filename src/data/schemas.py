"""
Column contracts and validation for the raw spreadsheet and the clean table.

**Conceptual**: This module defines the "data contracts" for the analysis. The
raw spreadsheet is identified by its literal header strings; the clean table
by a fixed list of snake_case columns. Validating both at the boundaries means
header drift in the source file stops the run with a clear message instead of
surfacing later as a KeyError deep inside a plotting call.

**Schema philosophy**:
  - Raw headers are matched exactly (no trimming, no case folding).
  - All missing headers are reported at once, not just the first one.
  - The clean table has exactly six columns in a fixed order, with the
    gigaton column always equal to tons / 1e9.
  - Validation raises SchemaError with actionable messages.

**Teaching note**: Renaming columns by literal string is brittle: one edited
header in the spreadsheet and nothing downstream works. The fix is not to
guess ("maybe 'GDP per capita' means 'Per Capita'") but to fail fast and say
exactly which headers were expected and which were found.
"""

import numpy as np
import pandas as pd


class SchemaError(Exception):
    """
    Raised when a DataFrame does not conform to the expected columns.

    **Conceptual**: Signals missing raw headers, values that cannot be coerced
    to the expected type, or a clean table whose derived column drifted from
    its source. Messages include the source context (usually the file path).
    """
    pass


# Raw header -> canonical field. Every key must be present in the raw data.
RAW_COLUMN_RENAMES = {
    'Year': 'year',
    'GDP Real (USD)': 'gdp_real',
    'Per Capita': 'gdp_per_capita',
    'Fossil CO2 Emissions (tons)': 'co2_emissions_tons',
    'CO2 emissions per capita': 'co2_per_capita',
    'Population Density (P/Km²)': 'population_density',
}

RAW_REQUIRED_COLUMNS = list(RAW_COLUMN_RENAMES)

# Fields kept after the rename (gdp_real is renamed but not selected)
SELECTED_COLUMNS = [
    'year',
    'gdp_per_capita',
    'co2_emissions_tons',
    'co2_per_capita',
    'population_density',
]

DERIVED_GIGATONS_COLUMN = 'co2_emissions_gigatons'
TONS_PER_GIGATON = 1e9

CLEAN_COLUMNS = SELECTED_COLUMNS + [DERIVED_GIGATONS_COLUMN]

NUMERIC_COLUMNS = [c for c in SELECTED_COLUMNS if c != 'year']


def validate_raw_schema(
    df: pd.DataFrame,
    context: str | None = None,
) -> None:
    """
    Validate that a raw DataFrame carries every header the rename mapping needs.

    **Functionally**:
      - Compares RAW_REQUIRED_COLUMNS with df.columns.
      - Extra columns are allowed (they are dropped by the transformer).
      - Raises one SchemaError listing every missing header.

    Args:
        df: Raw DataFrame as returned by the loader.
        context: Optional string describing the source (e.g., the file path).
                 Included in error messages for clarity.

    Raises:
        SchemaError: If any expected raw header is absent.
    """
    ctx = f"{context}: " if context else ""

    # Keep the mapping order so the message reads like the spreadsheet layout
    missing_cols = [c for c in RAW_REQUIRED_COLUMNS if c not in df.columns]
    if missing_cols:
        raise SchemaError(
            f"{ctx}Missing required columns: {missing_cols}. "
            f"Expected columns: {RAW_REQUIRED_COLUMNS}. "
            f"Found columns: {list(df.columns)}."
        )


def validate_clean_schema(
    df: pd.DataFrame,
    context: str | None = None,
) -> None:
    """
    Validate that a DataFrame is a clean analysis table.

    **Functionally**:
      - Checks that all CLEAN_COLUMNS are present.
      - Checks that co2_emissions_gigatons == co2_emissions_tons / 1e9 on
        every row (NaN in both counts as equal).

    Args:
        df: DataFrame to validate (normally the output of build_clean_table).
        context: Optional string describing the caller.

    Raises:
        SchemaError: If a column is missing or the derived column is stale.
    """
    ctx = f"{context}: " if context else ""

    missing_cols = [c for c in CLEAN_COLUMNS if c not in df.columns]
    if missing_cols:
        raise SchemaError(
            f"{ctx}Missing required columns: {missing_cols}. "
            f"Expected columns: {CLEAN_COLUMNS}. "
            f"Found columns: {list(df.columns)}."
        )

    expected = df['co2_emissions_tons'] / TONS_PER_GIGATON
    actual = df[DERIVED_GIGATONS_COLUMN]
    matches = np.isclose(actual, expected, rtol=1e-12, atol=0.0, equal_nan=True)
    if not matches.all():
        bad_indices = df.index[~matches].tolist()
        raise SchemaError(
            f"{ctx}'{DERIVED_GIGATONS_COLUMN}' is inconsistent with "
            f"'co2_emissions_tons' at row indices: {bad_indices[:5]} (showing first 5). "
            f"Hint: recompute it with compute_gigatons() instead of editing it directly."
        )
