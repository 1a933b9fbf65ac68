"""
Simple linear regression and Pearson correlation for the clean table.

This module quantifies the relationship shown in the scatter chart:

  - fit_ols: ordinary least squares, co2_per_capita ~ gdp_per_capita,
    returning the standard summary bundle (coefficients, standard errors,
    t-statistics, p-values, R², adjusted R², residual standard error, F).
  - compute_pearson_correlation: Pearson's r between the same two columns.

Both are pure functions of the table; nothing is persisted. statsmodels does
the fitting and scipy.stats the correlation; this module only guards the
inputs and reshapes the outputs.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from scipy import stats


class StatisticsError(Exception):
    """
    Raised when regression or correlation is undefined for the given data.

    Cases: empty table, a column with zero variance (fewer than two distinct
    values), or missing values in either column. Incomplete data is rejected
    rather than silently dropped.
    """
    pass


DEFAULT_RESPONSE = 'co2_per_capita'
DEFAULT_PREDICTOR = 'gdp_per_capita'


@dataclass(frozen=True)
class OlsResult:
    """
    Summary of a one-predictor OLS fit: response = β0 + β1 · predictor + ε.

    Attributes:
        response, predictor: Column names used in the fit.
        intercept, slope: Coefficient estimates β0, β1.
        intercept_std_error, slope_std_error: Standard errors.
        intercept_t_value, slope_t_value: t-statistics.
        intercept_p_value, slope_p_value: Two-sided p-values.
        r_squared, adj_r_squared: Coefficient of determination (and adjusted).
        residual_std_error: sqrt(SSR / df_resid).
        df_resid: Residual degrees of freedom (n - 2).
        f_statistic, f_p_value: Overall F-test.
        n_obs: Number of observations.
        summary_text: statsmodels' rendered summary table.
    """
    response: str
    predictor: str
    intercept: float
    slope: float
    intercept_std_error: float
    slope_std_error: float
    intercept_t_value: float
    slope_t_value: float
    intercept_p_value: float
    slope_p_value: float
    r_squared: float
    adj_r_squared: float
    residual_std_error: float
    df_resid: int
    f_statistic: float
    f_p_value: float
    n_obs: int
    summary_text: str


def check_analysis_inputs(
    clean: pd.DataFrame,
    response: str = DEFAULT_RESPONSE,
    predictor: str = DEFAULT_PREDICTOR,
) -> None:
    """
    Guard regression/correlation inputs.

    Raises StatisticsError for an empty table, missing columns, missing
    values, or a column with fewer than two distinct values. The pipeline
    calls this before rendering charts, so unusable data never leaves
    partial output behind.
    """
    if clean.empty:
        raise StatisticsError("Cannot compute statistics on an empty table.")

    for column in (response, predictor):
        if column not in clean.columns:
            raise StatisticsError(
                f"Column '{column}' not found. Available columns: {list(clean.columns)}"
            )

        series = clean[column]
        n_missing = int(series.isna().sum())
        if n_missing:
            raise StatisticsError(
                f"Column '{column}' has {n_missing} missing value(s); "
                f"regression/correlation would use incomplete data."
            )

        # Zero variance: a constant column makes slope and r undefined
        if series.nunique() < 2:
            raise StatisticsError(
                f"Column '{column}' has zero variance; "
                f"regression/correlation is undefined."
            )


def fit_ols(
    clean: pd.DataFrame,
    response: str = DEFAULT_RESPONSE,
    predictor: str = DEFAULT_PREDICTOR,
) -> OlsResult:
    """
    Fit response = β0 + β1 · predictor + ε by ordinary least squares.

    **Mathematical**: With x̄, ȳ the sample means,
        β1 = Σ(x - x̄)(y - ȳ) / Σ(x - x̄)²
        β0 = ȳ - β1 · x̄
    R² = 1 - SSR / SST and the residual standard error is sqrt(SSR / (n - 2)).

    Args:
        clean: Clean analysis table.
        response: Dependent variable column (default co2_per_capita).
        predictor: Independent variable column (default gdp_per_capita).

    Returns:
        OlsResult with the standard summary bundle.

    Raises:
        StatisticsError: If the table is empty, a column is constant, or a
                         column has missing values.

    Example:
        >>> from src.analytics.synthetic_data import generate_synthetic_raw_table
        >>> from src.data.transform import build_clean_table
        >>> raw = generate_synthetic_raw_table(intercept=2.0, slope=0.001, noise_std=0.0)
        >>> result = fit_ols(build_clean_table(raw))
        >>> round(result.intercept, 6), round(result.slope, 6), round(result.r_squared, 6)
        (2.0, 0.001, 1.0)
    """
    check_analysis_inputs(clean, response=response, predictor=predictor)

    data = clean[[response, predictor]].astype('float64')
    model = smf.ols(f"{response} ~ {predictor}", data=data).fit()

    params = model.params
    bse = model.bse
    tvalues = model.tvalues
    pvalues = model.pvalues

    # statsmodels' summary runs normality tests that warn on very small samples
    summary_text = model.summary().as_text()

    return OlsResult(
        response=response,
        predictor=predictor,
        intercept=float(params['Intercept']),
        slope=float(params[predictor]),
        intercept_std_error=float(bse['Intercept']),
        slope_std_error=float(bse[predictor]),
        intercept_t_value=float(tvalues['Intercept']),
        slope_t_value=float(tvalues[predictor]),
        intercept_p_value=float(pvalues['Intercept']),
        slope_p_value=float(pvalues[predictor]),
        r_squared=float(model.rsquared),
        adj_r_squared=float(model.rsquared_adj),
        residual_std_error=float(np.sqrt(model.mse_resid)),
        df_resid=int(model.df_resid),
        f_statistic=float(model.fvalue),
        f_p_value=float(model.f_pvalue),
        n_obs=int(model.nobs),
        summary_text=summary_text,
    )


def format_ols_summary(result: OlsResult) -> str:
    """
    Render an OlsResult as a compact, R-style summary block.

    The full statsmodels table is available separately as result.summary_text.
    """
    header = f"{'':<16}{'Estimate':>14}{'Std. Error':>14}{'t value':>10}{'Pr(>|t|)':>12}"
    rows = [
        ("(Intercept)", result.intercept, result.intercept_std_error,
         result.intercept_t_value, result.intercept_p_value),
        (result.predictor, result.slope, result.slope_std_error,
         result.slope_t_value, result.slope_p_value),
    ]

    lines = [
        f"Call: lm(formula = {result.response} ~ {result.predictor})",
        "",
        "Coefficients:",
        header,
    ]
    for name, estimate, std_error, t_value, p_value in rows:
        lines.append(
            f"{name:<16}{estimate:>14.6g}{std_error:>14.6g}{t_value:>10.3f}{p_value:>12.3g}"
        )
    lines.extend([
        "",
        f"Residual standard error: {result.residual_std_error:.4g} "
        f"on {result.df_resid} degrees of freedom",
        f"Multiple R-squared: {result.r_squared:.4f},\t"
        f"Adjusted R-squared: {result.adj_r_squared:.4f}",
        f"F-statistic: {result.f_statistic:.4g} on 1 and {result.df_resid} DF,  "
        f"p-value: {result.f_p_value:.4g}",
        f"Observations: {result.n_obs}",
    ])
    return "\n".join(lines)


def compute_pearson_correlation(
    clean: pd.DataFrame,
    x: str = DEFAULT_PREDICTOR,
    y: str = DEFAULT_RESPONSE,
) -> float:
    """
    Pearson correlation coefficient between two columns.

    **Mathematical**:
        r = Σ(x - x̄)(y - ȳ) / sqrt(Σ(x - x̄)² · Σ(y - ȳ)²)
    r lies in [-1, 1]; ±1 means a perfect linear relationship.

    Args:
        clean: Clean analysis table.
        x, y: Column names (default gdp_per_capita and co2_per_capita).

    Returns:
        r as a Python float, clipped to [-1, 1] against rounding error.

    Raises:
        StatisticsError: If the table is empty, a column is constant, or a
                         column has missing values.
    """
    check_analysis_inputs(clean, response=y, predictor=x)

    r, _p_value = stats.pearsonr(
        clean[x].to_numpy(dtype='float64'),
        clean[y].to_numpy(dtype='float64'),
    )
    return float(np.clip(r, -1.0, 1.0))


def format_correlation(r: float) -> str:
    """
    Display line for a correlation coefficient, rounded to 4 decimals.

    Example:
        >>> format_correlation(0.987654)
        'Pearson Correlation (R): 0.9877'
    """
    return f"Pearson Correlation (R): {round(r, 4):.4f}"
