# analysis/statistics.py

from __future__ import annotations
import numpy as np
import pandas as pd
from scipy import stats

from analysis.grouping import partition_by_group
from utils.config import validate_ci_level
from utils.io import DegenerateGroupError, InvalidConfigurationError


# dist tag -> quantile function (q, n) -> critical value
QUANTILE_SOURCES = {
    "t": lambda q, n: stats.t.ppf(q, df=n - 1),
    "norm": lambda q, n: stats.norm.ppf(q),
}


def critical_values(ci: float, dist: str, n: int) -> tuple[float, float]:
    """
    Two-sided critical values at alpha/2 and 1 - alpha/2.

    dist:
      - "t": Student t with n - 1 degrees of freedom (finite sample)
      - "norm": standard normal (data treated as the population)
    """
    ci = validate_ci_level(ci)
    if dist not in QUANTILE_SOURCES:
        raise InvalidConfigurationError(f"Unknown dist: {dist}")

    alpha = 1.0 - ci
    ppf = QUANTILE_SOURCES[dist]
    return float(ppf(alpha / 2.0, n)), float(ppf(1.0 - alpha / 2.0, n))


def group_sample_stats(
    df: pd.DataFrame,
    group_field: str = "group",
    value_field: str = "value",
    ci: float = 0.95,
    dist: str = "t",
) -> pd.DataFrame:
    """
    Closed-form CI for the mean of value_field within each group.

    Parameters
    ----------
    df : pd.DataFrame
        Observations, one row per subject.
    group_field : str
    value_field : str
    ci : float
        Confidence level in (0, 1).
    dist : str
        "t" | "norm", see critical_values.

    Returns
    -------
    DataFrame with:
      group, n, mean, sd, se, ci_lower, ci_upper, dist

    Raises
    ------
    DegenerateGroupError
        If any group has fewer than 2 observations.
    """
    ci = validate_ci_level(ci)
    if dist not in QUANTILE_SOURCES:
        raise InvalidConfigurationError(f"Unknown dist: {dist}")

    groups = partition_by_group(df, group_field, value_field)
    if not groups:
        raise DegenerateGroupError("No observations to summarize.")

    rows = []
    for g, values in groups.items():
        n = len(values)
        if n < 2:
            raise DegenerateGroupError(
                f"Group {g!r} has {n} observation(s); "
                "standard error needs at least 2."
            )

        mean = float(np.mean(values))
        sd = float(np.std(values, ddof=1))
        se = sd / np.sqrt(n)
        lower, upper = critical_values(ci, dist, n)

        rows.append(
            {
                "group": g,
                "n": int(n),
                "mean": mean,
                "sd": sd,
                "se": float(se),
                "ci_lower": mean + lower * se,
                "ci_upper": mean + upper * se,
                "dist": dist,
            }
        )

    return pd.DataFrame(rows)


def sample_ci(
    sample: pd.DataFrame,
    group_field: str = "group",
    value_field: str = "value",
    ci: float = 0.95,
) -> pd.DataFrame:
    """Theoretical CI from a single finite sample (t distribution)."""
    return group_sample_stats(sample, group_field, value_field, ci=ci, dist="t")


def population_ci(
    population: pd.DataFrame,
    group_field: str = "group",
    value_field: str = "value",
    ci: float = 0.95,
) -> pd.DataFrame:
    """Theoretical CI treating the full dataset as the population (z)."""
    return group_sample_stats(population, group_field, value_field, ci=ci, dist="norm")
