"""
Raw table -> clean analysis table, plus the wide-to-long reshape used by charts.

**Conceptual**: The transformer does three things and nothing else:
  1. Rename the raw headers to snake_case field names (fixed mapping).
  2. Keep exactly five of them (year, GDP per capita, CO2 tons, CO2 per capita,
     population density).
  3. Derive co2_emissions_gigatons = co2_emissions_tons / 1e9.

It never sorts, filters or de-duplicates rows: the clean table has the same
number of rows, in the same order, as the spreadsheet.

**Teaching note**: Keeping the derived column a pure function of its source
(recomputed on every build, never read from the file) is what makes the
invariant "gigatons == tons / 1e9" testable. If the spreadsheet ever gains its
own gigaton column, it is ignored.
"""

import pandas as pd

from src.data.schemas import (
    DERIVED_GIGATONS_COLUMN,
    NUMERIC_COLUMNS,
    RAW_COLUMN_RENAMES,
    SELECTED_COLUMNS,
    TONS_PER_GIGATON,
    SchemaError,
    validate_raw_schema,
)


def compute_gigatons(tons: pd.Series) -> pd.Series:
    """
    Convert CO2 emissions from tons to gigatons (1 Gt = 1e9 t).

    Args:
        tons: Emissions in metric tons.

    Returns:
        Emissions in gigatons, same index as input.

    Example:
        >>> compute_gigatons(pd.Series([2.5e10])).iloc[0]
        25.0
    """
    return tons / TONS_PER_GIGATON


def _coerce_year(values: pd.Series, ctx: str) -> pd.Series:
    """Coerce the year column to int64, rejecting blanks and fractional years."""
    numeric = pd.to_numeric(values, errors='coerce')
    bad = numeric.isna() | (numeric % 1 != 0)
    if bad.any():
        bad_values = values[bad].tolist()
        raise SchemaError(
            f"{ctx}Column 'year' must contain whole numbers. "
            f"Invalid values: {bad_values[:5]} (showing first 5)."
        )
    return numeric.astype('int64')


def _coerce_numeric(values: pd.Series, column: str, ctx: str) -> pd.Series:
    """Coerce a measurement column to float; blanks stay NaN, text is rejected."""
    numeric = pd.to_numeric(values, errors='coerce')
    bad = numeric.isna() & values.notna()
    if bad.any():
        bad_values = values[bad].tolist()
        raise SchemaError(
            f"{ctx}Column '{column}' contains non-numeric values: "
            f"{bad_values[:5]} (showing first 5)."
        )
    return numeric.astype('float64')


def build_clean_table(
    raw: pd.DataFrame,
    context: str | None = None,
) -> pd.DataFrame:
    """
    Build the clean analysis table (co2_data) from the raw spreadsheet rows.

    **Functionally**:
      - validate_raw_schema: every expected raw header must be present
        (all missing headers reported at once).
      - Rename via RAW_COLUMN_RENAMES, select SELECTED_COLUMNS.
      - year -> int64, measurements -> float64 (SchemaError on text values).
      - Append co2_emissions_gigatons computed from co2_emissions_tons.
      - Row order and row count are preserved; the input is not modified.

    Args:
        raw: DataFrame returned by read_raw_spreadsheet.
        context: Optional source description for error messages.

    Returns:
        New DataFrame with columns CLEAN_COLUMNS.

    Raises:
        SchemaError: If a raw header is missing or a value cannot be coerced.
    """
    ctx = f"{context}: " if context else ""

    validate_raw_schema(raw, context=context)

    renamed = raw.rename(columns=RAW_COLUMN_RENAMES)
    clean = renamed[SELECTED_COLUMNS].copy()

    clean['year'] = _coerce_year(clean['year'], ctx)
    for column in NUMERIC_COLUMNS:
        clean[column] = _coerce_numeric(clean[column], column, ctx)

    clean[DERIVED_GIGATONS_COLUMN] = compute_gigatons(clean['co2_emissions_tons'])

    return clean


def find_duplicate_years(clean: pd.DataFrame) -> list[int]:
    """
    Return the years that appear more than once, in first-seen order.

    The pipeline only warns about these: the dataset is expected to hold one
    row per year, but duplicates do not stop the analysis.
    """
    duplicated = clean.loc[clean['year'].duplicated(keep='first'), 'year']
    return [int(year) for year in duplicated.drop_duplicates()]


def reshape_to_long(
    clean: pd.DataFrame,
    value_columns: list[str],
    id_column: str = 'year',
) -> pd.DataFrame:
    """
    Reshape selected columns from wide to long format.

    **Conceptual**: Faceted charts want one row per (year, metric) pair rather
    than one column per metric. This is the pandas equivalent of tidyr's
    pivot_longer.

    **Functionally**:
      - Output columns: id_column, 'metric', 'value'.
      - Rows are grouped by metric in value_columns order; within a metric,
        rows keep the clean table's order.
      - len(output) == len(clean) * len(value_columns).

    Args:
        clean: Clean analysis table.
        value_columns: Columns to stack (e.g., ['co2_per_capita', 'population_density']).
        id_column: Column kept as the key (default 'year').

    Returns:
        Long-format DataFrame with a fresh RangeIndex.

    Raises:
        SchemaError: If id_column or any value column is missing.

    Example:
        >>> long = reshape_to_long(co2_data, ['co2_per_capita', 'population_density'])
        >>> long.columns.tolist()
        ['year', 'metric', 'value']
    """
    missing_cols = [c for c in [id_column, *value_columns] if c not in clean.columns]
    if missing_cols:
        raise SchemaError(
            f"Cannot reshape: missing columns {missing_cols}. "
            f"Found columns: {list(clean.columns)}."
        )

    return clean.melt(
        id_vars=[id_column],
        value_vars=list(value_columns),
        var_name='metric',
        value_name='value',
        ignore_index=True,
    )
