"""
The three exploratory charts, written as PNG files.

**Conceptual**: Each chart function takes the clean table, writes one PNG with
a fixed name into output_dir, optionally shows it on screen, and returns the
path it wrote:

  1. plot_gdp_time_series       -> plot_gdp_time_series.png
     GDP per capita over time (line + markers).
  2. plot_env_time_series_facet -> plot_env_time_series_facet.png
     CO2 per capita and population density over time, one panel each with
     its own y scale.
  3. plot_correlation           -> plot_correlation.png
     GDP per capita vs CO2 per capita, point size = year, with the fitted
     OLS line and its 95% confidence band.

Each plot_* function is a thin wrapper: a matching build_*_figure function
draws the chart and returns the matplotlib Figure without touching the
filesystem, so the drawing can be inspected on its own.

**Rules**:
  - The file is always saved *before* any display attempt.
  - Display problems (headless servers, non-interactive backends) only print
    a warning. Failing to write the file raises ChartWriteError.
  - Figures are closed before returning, so repeated runs don't leak memory.

**Teaching note**: Styling constants (colors, sizes, labels) live at module
level. Identical data plus identical constants gives identical images, which
is what makes a chart reproducible enough to put in a report.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
import statsmodels.formula.api as smf
from matplotlib.figure import Figure
from matplotlib.lines import Line2D

from src.data.schemas import validate_clean_schema
from src.data.transform import reshape_to_long


class ChartWriteError(OSError):
    """
    Raised when a chart image (or its output directory) cannot be written.

    Subclasses OSError (Python's IOError) so generic file-error handlers
    still catch it.
    """
    pass


GDP_TIME_SERIES_PNG = "plot_gdp_time_series.png"
ENV_FACET_PNG = "plot_env_time_series_facet.png"
CORRELATION_PNG = "plot_correlation.png"

# Figure sizes in inches (width, height)
WIDE_FIGSIZE = (10, 6)
FACET_FIGSIZE = (10, 8)

BASE_FONT_SIZE = 14

GDP_LINE_COLOR = "#388E3C"
GDP_POINT_COLOR = "#1B5E20"
GDP_LINE_WIDTH = 2.5

FACET_METRICS = ['co2_per_capita', 'population_density']
FACET_COLORS = {
    'co2_per_capita': "#00BFA5",
    'population_density': "#FF7043",
}
FACET_LABELS = {
    'co2_per_capita': "CO2 Emissions Per Capita (Tons)",
    'population_density': "Population Density (P/Km²)",
}

SCATTER_COLOR = "#3F51B5"
FIT_LINE_COLOR = "#FF9800"
CONFIDENCE_LEVEL = 0.95

# Marker area range (points²) for the year -> size encoding
POINT_SIZE_RANGE = (30, 200)


def _resolve_output_path(output_dir: Path | str | None, filename: str) -> Path:
    """Create output_dir if needed and return the target file path."""
    output_root = Path(output_dir) if output_dir is not None else Path.cwd()
    try:
        output_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ChartWriteError(f"Cannot create chart directory {output_root}: {e}") from e
    return output_root / filename


def _save_figure(fig: Figure, path: Path, dpi: int) -> None:
    """Save fig to path, translating file errors into ChartWriteError."""
    try:
        fig.savefig(path, dpi=dpi)
    except OSError as e:
        raise ChartWriteError(f"Cannot write chart {path}: {e}") from e


def _finish_figure(
    fig: Figure,
    output_dir: Path | str | None,
    filename: str,
    show: bool,
    dpi: int,
) -> Path:
    """
    Save, optionally display, and close a figure.

    The figure is closed even if the directory or the file cannot be written.
    """
    try:
        path = _resolve_output_path(output_dir, filename)
        _save_figure(fig, path, dpi)
        print(f"  ✓ Saved {path.name}")
        if show:
            try:
                plt.show()
            except Exception as e:
                # The PNG is already on disk; a missing display is not fatal
                print(f"  ⚠ Could not display {path.name}: {e}")
    finally:
        plt.close(fig)
    return path


def _year_range_label(clean: pd.DataFrame) -> str:
    """'1990-2022' style label from the data, '' for an empty table."""
    if clean.empty:
        return ""
    return f"{int(clean['year'].min())}-{int(clean['year'].max())}"


def build_gdp_time_series_figure(clean: pd.DataFrame) -> Figure:
    """
    Line + point chart of GDP per capita by year.

    Goal: show the trend over time and make periods of stagnation or drops
    easy to spot.

    Raises:
        SchemaError: If clean is not a clean analysis table.
    """
    validate_clean_schema(clean, context="plot_gdp_time_series")

    with sns.axes_style("whitegrid"):
        fig, ax = plt.subplots(figsize=WIDE_FIGSIZE)

    ax.plot(clean['year'], clean['gdp_per_capita'], color=GDP_LINE_COLOR, linewidth=GDP_LINE_WIDTH)
    ax.scatter(clean['year'], clean['gdp_per_capita'], color=GDP_POINT_COLOR, s=50, zorder=3)

    title = "Trend of Global GDP Per Capita"
    year_range = _year_range_label(clean)
    if year_range:
        title = f"{title} ({year_range})"
    ax.set_title(title, fontsize=BASE_FONT_SIZE + 2, fontweight="bold", loc="center")
    ax.set_xlabel("Year", fontsize=BASE_FONT_SIZE)
    ax.set_ylabel("GDP Per Capita (USD)", fontsize=BASE_FONT_SIZE)
    fig.tight_layout()

    return fig


def plot_gdp_time_series(
    clean: pd.DataFrame,
    output_dir: Path | str | None = None,
    show: bool = False,
    dpi: int = 300,
) -> Path:
    """
    Write the GDP per capita time series to plot_gdp_time_series.png.

    Args:
        clean: Clean analysis table.
        output_dir: Directory for the PNG (default: current working directory).
        show: If True, call plt.show() after saving.
        dpi: PNG resolution.

    Returns:
        Path of the written plot_gdp_time_series.png.

    Raises:
        SchemaError: If clean is not a clean analysis table.
        ChartWriteError: If the file cannot be written.
    """
    fig = build_gdp_time_series_figure(clean)
    return _finish_figure(fig, output_dir, GDP_TIME_SERIES_PNG, show, dpi)


def build_env_facet_figure(clean: pd.DataFrame) -> Figure:
    """
    Two stacked panels: CO2 per capita and population density by year.

    The two metrics are reshaped to long format (year, metric, value) and
    drawn with seaborn's relplot, one row per metric, independent y scales
    and no legend (the panel titles name the metric).

    Raises:
        SchemaError: If clean is not a clean analysis table.
    """
    validate_clean_schema(clean, context="plot_env_time_series_facet")

    long = reshape_to_long(clean, FACET_METRICS)

    n_panels = len(FACET_METRICS)
    width, height = FACET_FIGSIZE
    with sns.axes_style("whitegrid"):
        grid = sns.relplot(
            data=long,
            x='year',
            y='value',
            hue='metric',
            row='metric',
            row_order=FACET_METRICS,
            hue_order=FACET_METRICS,
            palette=FACET_COLORS,
            kind='line',
            estimator=None,
            marker='o',
            linewidth=2,
            markersize=6,
            legend=False,
            height=height / n_panels,
            aspect=width / (height / n_panels),
            facet_kws={'sharey': False, 'sharex': True},
        )

    for metric, ax in grid.axes_dict.items():
        ax.set_title(FACET_LABELS[metric], fontsize=BASE_FONT_SIZE, fontweight="bold")
    grid.set_axis_labels("Year", "Metric Value", fontsize=BASE_FONT_SIZE)
    grid.figure.suptitle(
        "(Population Density & CO2 Emissions) vs Year",
        fontsize=BASE_FONT_SIZE + 2,
        fontweight="bold",
    )
    grid.figure.tight_layout()

    return grid.figure


def plot_env_time_series_facet(
    clean: pd.DataFrame,
    output_dir: Path | str | None = None,
    show: bool = False,
    dpi: int = 300,
) -> Path:
    """
    Write the CO2 / population density panels to plot_env_time_series_facet.png.

    Args:
        clean: Clean analysis table.
        output_dir: Directory for the PNG (default: current working directory).
        show: If True, call plt.show() after saving.
        dpi: PNG resolution.

    Returns:
        Path of the written plot_env_time_series_facet.png.

    Raises:
        SchemaError: If clean is not a clean analysis table.
        ChartWriteError: If the file cannot be written.
    """
    fig = build_env_facet_figure(clean)
    return _finish_figure(fig, output_dir, ENV_FACET_PNG, show, dpi)


def compute_fit_band(
    clean: pd.DataFrame,
    x: str = 'gdp_per_capita',
    y: str = 'co2_per_capita',
    n_points: int = 100,
    confidence: float = CONFIDENCE_LEVEL,
) -> pd.DataFrame:
    """
    Fitted OLS line and confidence band for the mean response over x's range.

    Equivalent to what ggplot's geom_smooth(method = "lm", se = TRUE) draws.

    Returns:
        DataFrame with columns x, 'fit', 'lower', 'upper' (n_points rows).
    """
    model = smf.ols(f"{y} ~ {x}", data=clean[[x, y]].astype('float64')).fit()

    grid_x = np.linspace(clean[x].min(), clean[x].max(), n_points)
    prediction = model.get_prediction(pd.DataFrame({x: grid_x}))
    frame = prediction.summary_frame(alpha=1.0 - confidence)

    return pd.DataFrame({
        x: grid_x,
        'fit': frame['mean'].to_numpy(),
        'lower': frame['mean_ci_lower'].to_numpy(),
        'upper': frame['mean_ci_upper'].to_numpy(),
    })


def _scale_sizes(values, first_year: int, last_year: int) -> np.ndarray:
    """Map years linearly onto POINT_SIZE_RANGE, with [first_year, last_year] as the domain."""
    low, high = POINT_SIZE_RANGE
    values = np.asarray(values, dtype='float64')
    span = last_year - first_year
    if span == 0:
        return np.full(len(values), (low + high) / 2.0)
    return low + (values - first_year) / span * (high - low)


def build_correlation_figure(clean: pd.DataFrame) -> Figure:
    """
    Scatter of GDP per capita vs CO2 per capita with a linear trend line.

    Point size encodes the year, so the scatter also shows the direction of
    travel through time. The orange line is the OLS fit; the shaded band is
    its 95% confidence interval.

    Raises:
        SchemaError: If clean is not a clean analysis table.
    """
    validate_clean_schema(clean, context="plot_correlation")

    with sns.axes_style("whitegrid"):
        fig, ax = plt.subplots(figsize=WIDE_FIGSIZE)

    first_year = int(clean['year'].min()) if not clean.empty else 0
    last_year = int(clean['year'].max()) if not clean.empty else 0
    sizes = _scale_sizes(clean['year'], first_year, last_year)
    ax.scatter(
        clean['gdp_per_capita'],
        clean['co2_per_capita'],
        s=sizes,
        color=SCATTER_COLOR,
        alpha=0.8,
        edgecolors="none",
    )

    # A band needs at least 3 points and a non-constant x
    if len(clean) >= 3 and clean['gdp_per_capita'].nunique() > 1:
        band = compute_fit_band(clean)
        ax.fill_between(
            band['gdp_per_capita'],
            band['lower'],
            band['upper'],
            color="grey",
            alpha=0.3,
            linewidth=0,
        )
        ax.plot(band['gdp_per_capita'], band['fit'], color=FIT_LINE_COLOR, linewidth=2)

    # Size legend: first, middle and last year. Handles are not added to the axes.
    if not clean.empty:
        legend_years = sorted({first_year, int(clean['year'].median()), last_year})
        legend_sizes = _scale_sizes(legend_years, first_year, last_year)
        handles = [
            Line2D(
                [], [],
                linestyle="none",
                marker="o",
                markersize=np.sqrt(size),
                markerfacecolor=SCATTER_COLOR,
                markeredgewidth=0,
                alpha=0.8,
            )
            for size in legend_sizes
        ]
        ax.legend(handles, [str(y) for y in legend_years], title="Year", frameon=False, loc="best")

    ax.set_title(
        "Scatter Plot of GDP vs. CO2 Per Capita",
        fontsize=BASE_FONT_SIZE + 2,
        fontweight="bold",
    )
    ax.set_xlabel("GDP Per Capita (USD)", fontsize=BASE_FONT_SIZE)
    ax.set_ylabel("CO2 Emissions Per Capita (Tons)", fontsize=BASE_FONT_SIZE)
    fig.tight_layout()

    return fig


def plot_correlation(
    clean: pd.DataFrame,
    output_dir: Path | str | None = None,
    show: bool = False,
    dpi: int = 300,
) -> Path:
    """
    Write the GDP vs CO2 scatter with its trend line to plot_correlation.png.

    Args:
        clean: Clean analysis table.
        output_dir: Directory for the PNG (default: current working directory).
        show: If True, call plt.show() after saving.
        dpi: PNG resolution.

    Returns:
        Path of the written plot_correlation.png.

    Raises:
        SchemaError: If clean is not a clean analysis table.
        ChartWriteError: If the file cannot be written.
    """
    fig = build_correlation_figure(clean)
    return _finish_figure(fig, output_dir, CORRELATION_PNG, show, dpi)


def render_all_charts(
    clean: pd.DataFrame,
    output_dir: Path | str | None = None,
    show: bool = False,
    dpi: int = 300,
) -> list[Path]:
    """Render the three charts in order and return their paths."""
    return [
        plot_gdp_time_series(clean, output_dir=output_dir, show=show, dpi=dpi),
        plot_env_time_series_facet(clean, output_dir=output_dir, show=show, dpi=dpi),
        plot_correlation(clean, output_dir=output_dir, show=show, dpi=dpi),
    ]
