"""
Configuration settings for the CO2 / GDP exploratory analysis.

**Conceptual**: This module provides a strongly-typed configuration object that
loads from environment variables (via .env files). Settings are validated at
startup, so a bad DPI or an empty data path fails before any file is read.

**Why centralized config?**
  - The classroom script this project grew out of pointed at a hardcoded
    absolute Windows path. Here the input path is a setting, not a literal.
  - Easy to test (construct EdaSettings directly instead of reading the environment).
  - CLI flags override settings with dataclasses.replace, so there is exactly
    one object describing a run.

**Teaching note**: Analysis scripts tend to accumulate magic constants (paths,
sheet numbers, output folders). Pulling them into a frozen dataclass makes the
inputs of a run explicit and reproducible: the same settings and the same
spreadsheet always produce the same charts and statistics.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from src.data.io import parse_sheet_identifier

# Project root is 2 levels up from src/config/settings.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Load .env from project root (dev/local environments); existing variables win
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

DEFAULT_DATA_PATH = (
    PROJECT_ROOT / "data" / "raw" / "World_GDP_Population_CO2_Emissions_Dataset.xlsx"
)
DEFAULT_SHEET = "0"
DEFAULT_OUTPUT_DIR = "."
DEFAULT_DPI = 300

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")


def _parse_bool(name: str, raw: str) -> bool:
    """Parse a true/false environment value, rejecting anything else."""
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(
        f"{name} must be one of {_TRUE_VALUES + _FALSE_VALUES}, got: {raw}"
    )


@dataclass(frozen=True)
class EdaSettings:
    """
    Configuration for one run of the exploratory analysis pipeline.

    **Conceptual**: Everything the pipeline needs to know about its environment:
    where the spreadsheet lives, which sheet to read, where charts go, and
    whether to try to display them on screen.

    Attributes:
        data_path: Path to the input spreadsheet (.xlsx/.xls, or .csv).
        sheet: Sheet index (0-based int) or sheet name. Default: first sheet.
        output_dir: Directory where the three PNG charts are written.
                   Defaults to the current working directory.
        show_plots: If True, charts are also shown with plt.show() after being
                   saved. Display failures never abort the run.
        dpi: Resolution of saved PNG files (default 300).
    """
    data_path: Path
    sheet: Union[int, str] = 0
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    show_plots: bool = True
    dpi: int = DEFAULT_DPI

    def __post_init__(self):
        """Validate settings after initialization."""
        if not str(self.data_path).strip():
            raise ValueError(
                "CO2_EDA_DATA_PATH is required but empty. "
                "Please set it in your .env file, environment, or via --data-path."
            )
        if isinstance(self.sheet, int) and self.sheet < 0:
            raise ValueError(f"sheet index must be non-negative, got: {self.sheet}")
        if isinstance(self.sheet, str) and not self.sheet:
            raise ValueError("sheet name must not be empty")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive, got: {self.dpi}")

    @classmethod
    def from_env(cls) -> "EdaSettings":
        """
        Load settings from environment variables.

        **Environment variables** (all optional):
          - CO2_EDA_DATA_PATH: Spreadsheet path.
            Defaults to data/raw/World_GDP_Population_CO2_Emissions_Dataset.xlsx.
          - CO2_EDA_SHEET: Sheet index (digits) or sheet name. Defaults to 0.
          - CO2_EDA_OUTPUT_DIR: Chart output directory. Defaults to ".".
          - CO2_EDA_SHOW_PLOTS: "true"/"false". Defaults to "true".
          - CO2_EDA_DPI: PNG resolution. Defaults to 300.

        Returns:
            EdaSettings object with values loaded from environment.

        Raises:
            ValueError: If a variable is present but malformed.

        Usage example:
            >>> # In .env file:
            >>> # CO2_EDA_DATA_PATH=/data/World_GDP_Population_CO2_Emissions_Dataset.xlsx
            >>> # CO2_EDA_SHOW_PLOTS=false
            >>>
            >>> settings = EdaSettings.from_env()
            >>> settings.sheet
            0
        """
        data_path = os.getenv("CO2_EDA_DATA_PATH", str(DEFAULT_DATA_PATH))
        sheet_str = os.getenv("CO2_EDA_SHEET", DEFAULT_SHEET)
        output_dir = os.getenv("CO2_EDA_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)
        show_str = os.getenv("CO2_EDA_SHOW_PLOTS", "true")
        dpi_str = os.getenv("CO2_EDA_DPI", str(DEFAULT_DPI))

        if not data_path.strip():
            raise ValueError(
                "CO2_EDA_DATA_PATH is set but empty. "
                "Unset it to use the default dataset location."
            )

        try:
            dpi = int(dpi_str)
        except ValueError:
            raise ValueError(f"CO2_EDA_DPI must be an integer, got: {dpi_str}")

        return cls(
            data_path=Path(data_path),
            sheet=parse_sheet_identifier(sheet_str),
            output_dir=Path(output_dir),
            show_plots=_parse_bool("CO2_EDA_SHOW_PLOTS", show_str),
            dpi=dpi,
        )


# Lazily built settings singleton. Tests construct EdaSettings directly instead.
_default_settings: Optional[EdaSettings] = None


def get_settings() -> EdaSettings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    **Teaching note**: A singleton is convenient for scripts, but the pipeline
    itself takes settings as an argument (run_eda_pipeline(settings)) so that
    tests never depend on global state.

    Returns:
        Global EdaSettings singleton.

    Raises:
        ValueError: If environment values are malformed.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = EdaSettings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    Forces the next get_settings() call to re-read the environment.
    """
    global _default_settings
    _default_settings = None
