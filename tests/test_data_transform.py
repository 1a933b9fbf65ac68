"""
Tests for src/data/schemas.py and src/data/transform.py.

This module tests:
  - Raw schema validation (all missing headers reported at once).
  - build_clean_table: rename, selection, types, derived gigatons, row
    count and row order preservation.
  - Duplicate-year detection (reported, not rejected).
  - Wide-to-long reshape for the faceted chart.
  - Clean schema validation of the gigaton invariant.
"""

import numpy as np
import pandas as pd
import pytest

from src.data.schemas import (
    CLEAN_COLUMNS,
    RAW_REQUIRED_COLUMNS,
    SchemaError,
    validate_clean_schema,
    validate_raw_schema,
)
from src.data.transform import (
    build_clean_table,
    compute_gigatons,
    find_duplicate_years,
    reshape_to_long,
)


def make_raw_rows(years, tons=None) -> pd.DataFrame:
    """Hand-written raw rows with the original headers plus one extra column."""
    n = len(years)
    if tons is None:
        tons = [2.0e10 + 1.0e9 * i for i in range(n)]
    return pd.DataFrame({
        'Year': years,
        'GDP Real (USD)': [5.0e13 + 1.0e12 * i for i in range(n)],
        'Per Capita': [9000.0 + 100.0 * i for i in range(n)],
        'Fossil CO2 Emissions (tons)': tons,
        'CO2 emissions per capita': [4.0 + 0.1 * i for i in range(n)],
        'Population Density (P/Km²)': [50.0 + 0.5 * i for i in range(n)],
        'Population': [5.5e9 + 1.0e8 * i for i in range(n)],
    })


# ============================================================================
# Raw schema validation
# ============================================================================

def test_validate_raw_schema_valid(raw_table):
    """Test that the synthetic raw table passes validation."""
    # Should not raise
    validate_raw_schema(raw_table, context="test")


def test_validate_raw_schema_reports_all_missing_headers():
    """Test that every missing header is listed in one error."""
    raw = make_raw_rows([1990, 1991]).drop(
        columns=['Per Capita', 'Population Density (P/Km²)']
    )

    with pytest.raises(SchemaError) as exc_info:
        validate_raw_schema(raw, context="dataset.xlsx")

    message = str(exc_info.value)
    assert 'dataset.xlsx' in message
    assert 'Missing required columns' in message
    assert 'Per Capita' in message
    assert 'Population Density (P/Km²)' in message


def test_validate_raw_schema_header_drift_is_not_tolerated():
    """Test that a renamed header (case change) counts as missing."""
    raw = make_raw_rows([1990]).rename(columns={'Per Capita': 'per capita'})

    with pytest.raises(SchemaError):
        validate_raw_schema(raw)


# ============================================================================
# build_clean_table
# ============================================================================

def test_build_clean_table_columns_and_types(raw_table):
    """Test the clean table has exactly the clean columns, in order, with expected dtypes."""
    clean = build_clean_table(raw_table)

    assert list(clean.columns) == CLEAN_COLUMNS
    assert clean['year'].dtype == np.int64
    for column in CLEAN_COLUMNS[1:]:
        assert clean[column].dtype == np.float64


def test_build_clean_table_drops_unselected_columns(raw_table):
    """Test that gdp_real and unrelated raw columns are not carried over."""
    clean = build_clean_table(raw_table)

    assert 'gdp_real' not in clean.columns
    assert 'Population' not in clean.columns


def test_build_clean_table_gigatons_law(raw_table):
    """Test co2_emissions_gigatons == co2_emissions_tons / 1e9 on every row."""
    clean = build_clean_table(raw_table)

    assert (clean['co2_emissions_gigatons'] == clean['co2_emissions_tons'] / 1e9).all()


def test_build_clean_table_ignores_gigatons_column_in_source():
    """Test the derived column is recomputed even if the source carries one."""
    raw = make_raw_rows([1990, 1991])
    raw['co2_emissions_gigatons'] = [999.0, 999.0]

    clean = build_clean_table(raw)

    assert clean['co2_emissions_gigatons'].tolist() == [20.0, 21.0]


def test_build_clean_table_preserves_row_count_and_order():
    """Test rows are neither sorted, dropped nor duplicated."""
    years = [2001, 1999, 2000, 1998]
    raw = make_raw_rows(years)

    clean = build_clean_table(raw)

    assert len(clean) == len(raw)
    assert clean['year'].tolist() == years
    assert clean['gdp_per_capita'].tolist() == raw['Per Capita'].tolist()


def test_build_clean_table_does_not_modify_input(raw_table):
    """Test the raw table is left untouched."""
    before = raw_table.copy()

    build_clean_table(raw_table)

    pd.testing.assert_frame_equal(raw_table, before)


def test_build_clean_table_missing_header_raises():
    """Test that a missing raw header raises SchemaError."""
    raw = make_raw_rows([1990, 1991]).drop(columns=['Fossil CO2 Emissions (tons)'])

    with pytest.raises(SchemaError) as exc_info:
        build_clean_table(raw, context="dataset.xlsx")

    assert 'Fossil CO2 Emissions (tons)' in str(exc_info.value)


def test_build_clean_table_accepts_float_years():
    """Test that whole-number float years (as Excel often stores them) become ints."""
    raw = make_raw_rows([1990.0, 1991.0])

    clean = build_clean_table(raw)

    assert clean['year'].tolist() == [1990, 1991]
    assert clean['year'].dtype == np.int64


def test_build_clean_table_rejects_fractional_year():
    """Test that a non-integer year raises SchemaError naming the column."""
    raw = make_raw_rows([1990.5, 1991.0])

    with pytest.raises(SchemaError) as exc_info:
        build_clean_table(raw)

    assert "'year'" in str(exc_info.value)


def test_build_clean_table_rejects_text_measurements():
    """Test that text in a numeric column raises SchemaError naming the column."""
    raw = make_raw_rows([1990, 1991])
    raw['Per Capita'] = ['9000', 'n/a']

    with pytest.raises(SchemaError) as exc_info:
        build_clean_table(raw)

    assert 'gdp_per_capita' in str(exc_info.value)
    assert 'n/a' in str(exc_info.value)


def test_build_clean_table_keeps_blank_measurements_as_nan():
    """Test that empty cells stay NaN (statistics decide what to do with them)."""
    raw = make_raw_rows([1990, 1991])
    raw.loc[1, 'Population Density (P/Km²)'] = np.nan

    clean = build_clean_table(raw)

    assert pd.isna(clean.loc[1, 'population_density'])


def test_compute_gigatons():
    """Test the tons -> gigatons conversion."""
    tons = pd.Series([0.0, 1e9, 3.5e10])

    assert compute_gigatons(tons).tolist() == [0.0, 1.0, 35.0]


# ============================================================================
# Duplicate years
# ============================================================================

def test_find_duplicate_years_none(clean_table):
    """Test a table with unique years reports nothing."""
    assert find_duplicate_years(clean_table) == []


def test_find_duplicate_years_reported_not_rejected():
    """Test duplicate years are listed once each and the table still builds."""
    raw = make_raw_rows([1990, 1991, 1990, 1992, 1991, 1990])

    clean = build_clean_table(raw)

    assert len(clean) == 6
    assert find_duplicate_years(clean) == [1990, 1991]


# ============================================================================
# reshape_to_long
# ============================================================================

def test_reshape_to_long_shape_and_order(clean_table):
    """Test long format has one row per (year, metric), grouped by metric."""
    metrics = ['co2_per_capita', 'population_density']

    long = reshape_to_long(clean_table, metrics)

    n = len(clean_table)
    assert list(long.columns) == ['year', 'metric', 'value']
    assert len(long) == n * len(metrics)
    assert long['metric'].iloc[:n].eq('co2_per_capita').all()
    assert long['metric'].iloc[n:].eq('population_density').all()
    assert long['year'].iloc[:n].tolist() == clean_table['year'].tolist()
    assert long['value'].iloc[n:].tolist() == clean_table['population_density'].tolist()


def test_reshape_to_long_missing_column(clean_table):
    """Test that reshaping an absent column raises SchemaError."""
    with pytest.raises(SchemaError):
        reshape_to_long(clean_table, ['co2_per_capita', 'not_a_column'])


# ============================================================================
# Clean schema validation
# ============================================================================

def test_validate_clean_schema_valid(clean_table):
    """Test that a freshly built clean table validates."""
    # Should not raise
    validate_clean_schema(clean_table)


def test_validate_clean_schema_detects_stale_gigatons(clean_table):
    """Test that an edited derived column is flagged."""
    edited = clean_table.copy()
    edited.loc[0, 'co2_emissions_gigatons'] += 1.0

    with pytest.raises(SchemaError) as exc_info:
        validate_clean_schema(edited)

    assert 'inconsistent' in str(exc_info.value)


def test_validate_clean_schema_missing_column(clean_table):
    """Test that a clean table without the derived column is rejected."""
    with pytest.raises(SchemaError):
        validate_clean_schema(clean_table.drop(columns=['co2_emissions_gigatons']))


def test_raw_required_columns_cover_all_renames():
    """Test the raw contract lists the six headers the rename needs."""
    assert len(RAW_REQUIRED_COLUMNS) == 6
    assert 'Year' in RAW_REQUIRED_COLUMNS
