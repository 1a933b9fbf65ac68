"""
Synthetic yearly datasets shaped like the raw GDP / population / CO2 spreadsheet.

This module builds tables with the *raw* headers ("Per Capita",
"CO2 emissions per capita", ...) so that they can go through the whole
pipeline: written to .xlsx, loaded, cleaned, plotted and summarized.

Because the relationship between GDP and CO2 per capita is chosen by the
caller, the generated data doubles as a known-answer fixture:
  - noise_std = 0 gives an exact line, so OLS must recover intercept and slope
    and R² must be 1.
  - Large noise flattens the relationship and pulls Pearson's r toward 0.
"""

import numpy as np
import pandas as pd

# Roughly the world's land area, used to turn density into a population
LAND_AREA_KM2 = 1.3e8


def generate_gdp_per_capita_path(
    n_years: int,
    initial_value: float = 4_000.0,
    growth: float = 0.03,
    volatility: float = 0.0,
    seed: int | None = None,
) -> np.ndarray:
    """
    Generate a yearly GDP-per-capita path with compounding growth.

    **Mathematical**: Each year applies a log-normal growth factor:
        G_{t+1} = G_t * exp((g - 0.5 * σ²) + σ * Z_t),   Z_t ~ N(0, 1)
    With σ = 0 the path is the deterministic G_0 * exp(g * t).

    Args:
        n_years: Number of values to generate (including the initial value).
        initial_value: GDP per capita in the first year (USD).
        growth: Annual log growth rate g (e.g., 0.03 for ~3%/year).
        volatility: Annual volatility σ of the growth factor.
        seed: Random seed for reproducibility (None for random).

    Returns:
        numpy array of length n_years.
    """
    if seed is not None:
        np.random.seed(seed)

    if n_years <= 0:
        return np.zeros(0)

    Z = np.random.standard_normal(n_years - 1)
    log_steps = (growth - 0.5 * volatility**2) + volatility * Z

    # Cumulative sum of log growth gives the compounded path
    log_path = np.concatenate([[0.0], np.cumsum(log_steps)])
    return initial_value * np.exp(log_path)


def generate_synthetic_raw_table(
    n_years: int = 33,
    start_year: int = 1990,
    intercept: float = 2.0,
    slope: float = 0.001,
    noise_std: float = 0.0,
    gdp_growth: float = 0.03,
    gdp_volatility: float = 0.0,
    initial_density: float = 40.0,
    density_growth: float = 0.012,
    seed: int | None = None,
) -> pd.DataFrame:
    """
    Generate a raw-format table with a chosen GDP -> CO2 per capita relationship.

    **Conceptual**: co2_per_capita = intercept + slope * gdp_per_capita + ε,
    with ε ~ N(0, noise_std²). Population density grows geometrically, total
    emissions are per-capita emissions times population, and real GDP is GDP
    per capita times population, so every raw column is internally consistent.

    **Functionally**:
      - Columns: the six headers of RAW_COLUMN_RENAMES plus "Population"
        (an extra column the transformer must drop).
      - One row per year, ascending from start_year.

    Args:
        n_years: Number of rows (years).
        start_year: First year.
        intercept, slope: Coefficients of the linear CO2 relationship.
        noise_std: Standard deviation of the additive noise on CO2 per capita.
        gdp_growth, gdp_volatility: Parameters of generate_gdp_per_capita_path.
        initial_density: Population density (people / km²) in the first year.
        density_growth: Annual growth rate of population density.
        seed: Random seed for reproducibility.

    Returns:
        DataFrame with raw spreadsheet headers.

    Example:
        >>> raw = generate_synthetic_raw_table(n_years=5, seed=0)
        >>> raw['Year'].tolist()
        [1990, 1991, 1992, 1993, 1994]
    """
    if seed is not None:
        np.random.seed(seed)

    years = np.arange(start_year, start_year + n_years)
    gdp_per_capita = generate_gdp_per_capita_path(
        n_years,
        growth=gdp_growth,
        volatility=gdp_volatility,
    )

    noise = noise_std * np.random.standard_normal(n_years)
    co2_per_capita = intercept + slope * gdp_per_capita + noise

    density = initial_density * (1.0 + density_growth) ** np.arange(n_years)
    population = density * LAND_AREA_KM2

    return pd.DataFrame({
        'Year': years,
        'GDP Real (USD)': gdp_per_capita * population,
        'Per Capita': gdp_per_capita,
        'Population': population,
        'Fossil CO2 Emissions (tons)': co2_per_capita * population,
        'CO2 emissions per capita': co2_per_capita,
        'Population Density (P/Km²)': density,
    })
