# analysis/summarize.py

from __future__ import annotations
import numpy as np
import pandas as pd
from scipy import stats

from utils.config import MIN_SUMMARY_REPLICATES, validate_ci_level
from utils.io import InvalidConfigurationError

# numpy "linear" = interpolation between order statistics (R type 7)
QUANTILE_METHOD = "linear"


def _check_distribution(dist: pd.DataFrame) -> None:
    if dist.empty or dist.shape[0] < MIN_SUMMARY_REPLICATES:
        raise InvalidConfigurationError(
            f"Sampling distribution needs at least {MIN_SUMMARY_REPLICATES} replicates."
        )
    if dist.isna().any().any():
        raise InvalidConfigurationError("Sampling distribution contains missing means.")


def normal_approx_ci(dist: pd.DataFrame, ci: float = 0.95) -> pd.DataFrame:
    """
    Normal-approximation CI: mean of the replicate means ± z * sd.

    dist: replicates × groups, as returned by bootstrap_group_means.
    """
    ci = validate_ci_level(ci)
    _check_distribution(dist)

    alpha = 1.0 - ci
    z = stats.norm.ppf(1.0 - alpha / 2.0)

    rows = []
    for g in dist.columns:
        means = dist[g].to_numpy(dtype=float)
        center = float(np.mean(means))
        sd = float(np.std(means, ddof=1))
        rows.append(
            {
                "group": g,
                "point_estimate": center,
                "ci_lower": center - z * sd,
                "ci_upper": center + z * sd,
                "method": "normal",
            }
        )

    return pd.DataFrame(rows)


def percentile_ci(dist: pd.DataFrame, ci: float = 0.95) -> pd.DataFrame:
    """
    Empirical CI from the alpha/2 and 1 - alpha/2 quantiles of the
    replicate means (linear interpolation, see QUANTILE_METHOD).
    """
    ci = validate_ci_level(ci)
    _check_distribution(dist)

    alpha = 1.0 - ci

    rows = []
    for g in dist.columns:
        means = dist[g].to_numpy(dtype=float)
        lower, upper = np.quantile(means, [alpha / 2.0, 1.0 - alpha / 2.0], method=QUANTILE_METHOD)
        rows.append(
            {
                "group": g,
                "point_estimate": float(np.mean(means)),
                "ci_lower": float(lower),
                "ci_upper": float(upper),
                "method": "percentile",
            }
        )

    return pd.DataFrame(rows)


def summarize_sampling_distribution(dist: pd.DataFrame, ci: float = 0.95) -> pd.DataFrame:
    """Both bootstrap CI tables stacked (normal first, then percentile)."""
    return pd.concat(
        [normal_approx_ci(dist, ci=ci), percentile_ci(dist, ci=ci)],
        ignore_index=True,
    )
