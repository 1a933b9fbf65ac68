"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import src...' works, forces
matplotlib's non-interactive Agg backend, and provides shared fixtures.
"""
import os
import sys
from pathlib import Path

# Must be set before matplotlib.pyplot is first imported
os.environ.setdefault("MPLBACKEND", "Agg")

import pandas as pd
import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.analytics.synthetic_data import generate_synthetic_raw_table
from src.config.settings import reset_settings
from src.data.transform import build_clean_table

CO2_EDA_ENV_VARS = (
    "CO2_EDA_DATA_PATH",
    "CO2_EDA_SHEET",
    "CO2_EDA_OUTPUT_DIR",
    "CO2_EDA_SHOW_PLOTS",
    "CO2_EDA_DPI",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Each test starts without CO2_EDA_* variables and without cached settings."""
    for name in CO2_EDA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def raw_table() -> pd.DataFrame:
    """Small noisy raw-format table (12 years, original headers)."""
    return generate_synthetic_raw_table(n_years=12, noise_std=0.05, seed=7)


@pytest.fixture
def clean_table(raw_table) -> pd.DataFrame:
    """Clean analysis table built from raw_table."""
    return build_clean_table(raw_table)


@pytest.fixture
def raw_xlsx(tmp_path, raw_table) -> Path:
    """raw_table written to a one-sheet workbook."""
    path = tmp_path / "World_GDP_Population_CO2_Emissions_Dataset.xlsx"
    raw_table.to_excel(path, index=False, sheet_name="Sheet1")
    return path
