"""
Tests for src/config/settings.py

These tests verify defaults, environment loading, validation errors, and the
lazily built settings singleton.
"""

from pathlib import Path

import pytest

from src.config.settings import (
    DEFAULT_DATA_PATH,
    EdaSettings,
    get_settings,
    reset_settings,
)


def test_from_env_defaults():
    """Test defaults when no CO2_EDA_* variables are set."""
    settings = EdaSettings.from_env()

    assert settings.data_path == DEFAULT_DATA_PATH
    assert settings.sheet == 0
    assert settings.output_dir == Path(".")
    assert settings.show_plots is True
    assert settings.dpi == 300


def test_from_env_reads_variables(monkeypatch, tmp_path):
    """Test every variable is picked up and converted."""
    monkeypatch.setenv("CO2_EDA_DATA_PATH", str(tmp_path / "data.xlsx"))
    monkeypatch.setenv("CO2_EDA_SHEET", "Emissions")
    monkeypatch.setenv("CO2_EDA_OUTPUT_DIR", str(tmp_path / "figures"))
    monkeypatch.setenv("CO2_EDA_SHOW_PLOTS", "no")
    monkeypatch.setenv("CO2_EDA_DPI", "150")

    settings = EdaSettings.from_env()

    assert settings.data_path == tmp_path / "data.xlsx"
    assert settings.sheet == "Emissions"
    assert settings.output_dir == tmp_path / "figures"
    assert settings.show_plots is False
    assert settings.dpi == 150


def test_from_env_numeric_sheet_is_index(monkeypatch):
    """Test a digits-only sheet value becomes an integer index."""
    monkeypatch.setenv("CO2_EDA_SHEET", "2")

    assert EdaSettings.from_env().sheet == 2


def test_from_env_bad_dpi(monkeypatch):
    """Test a non-integer DPI raises ValueError naming the variable."""
    monkeypatch.setenv("CO2_EDA_DPI", "high")

    with pytest.raises(ValueError) as exc_info:
        EdaSettings.from_env()

    assert "CO2_EDA_DPI" in str(exc_info.value)


def test_from_env_empty_data_path(monkeypatch):
    """Test an explicitly empty data path is rejected."""
    monkeypatch.setenv("CO2_EDA_DATA_PATH", "")

    with pytest.raises(ValueError) as exc_info:
        EdaSettings.from_env()

    assert "CO2_EDA_DATA_PATH" in str(exc_info.value)


def test_from_env_bad_bool(monkeypatch):
    """Test an unrecognized boolean raises ValueError."""
    monkeypatch.setenv("CO2_EDA_SHOW_PLOTS", "maybe")

    with pytest.raises(ValueError) as exc_info:
        EdaSettings.from_env()

    assert "CO2_EDA_SHOW_PLOTS" in str(exc_info.value)


def test_validation_rejects_bad_values(tmp_path):
    """Test __post_init__ validation."""
    with pytest.raises(ValueError):
        EdaSettings(data_path="")
    with pytest.raises(ValueError):
        EdaSettings(data_path=tmp_path / "x.xlsx", dpi=0)
    with pytest.raises(ValueError):
        EdaSettings(data_path=tmp_path / "x.xlsx", sheet=-1)


def test_settings_are_frozen(tmp_path):
    """Test settings cannot be mutated after construction."""
    settings = EdaSettings(data_path=tmp_path / "x.xlsx")

    with pytest.raises(Exception):
        settings.dpi = 10


def test_get_settings_singleton_and_reset(monkeypatch):
    """Test get_settings caches until reset_settings is called."""
    monkeypatch.setenv("CO2_EDA_DPI", "100")
    first = get_settings()
    monkeypatch.setenv("CO2_EDA_DPI", "200")

    assert get_settings() is first
    assert get_settings().dpi == 100

    reset_settings()
    assert get_settings().dpi == 200
