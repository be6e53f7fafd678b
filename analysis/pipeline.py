# analysis/pipeline.py

from __future__ import annotations
import logging

import numpy as np
import pandas as pd

from analysis.bootstrap import bootstrap_group_means, spawn_generators
from analysis.sampling import draw_sample
from analysis.statistics import population_ci, sample_ci
from analysis.summarize import normal_approx_ci, percentile_ci
from utils.config import AnalysisConfig
from utils.io import InvalidConfigurationError

logger = logging.getLogger(__name__)

N_GROUPS = 2


def _check_two_groups(df: pd.DataFrame, group_field: str, what: str) -> None:
    if group_field not in df.columns:
        raise KeyError(f"Missing column: {group_field}")
    n_groups = df[group_field].nunique()
    if n_groups != N_GROUPS:
        raise InvalidConfigurationError(
            f"Expected exactly {N_GROUPS} groups in the {what}, found {n_groups}."
        )


STRATEGIES = {
    "sample_t": "Sample (t)",
    "population_z": "Population (z)",
    "bootstrap_normal": "Bootstrap (normal)",
    "bootstrap_percentile": "Bootstrap (percentile)",
}


def _as_comparison_rows(table: pd.DataFrame, strategy: str) -> pd.DataFrame:
    """Project a GroupSummary or CIEstimate table onto the shared columns."""
    point_col = "mean" if "mean" in table.columns else "point_estimate"
    out = pd.DataFrame(
        {
            "strategy": strategy,
            "group": table["group"],
            "point_estimate": table[point_col],
            "ci_lower": table["ci_lower"],
            "ci_upper": table["ci_upper"],
        }
    )
    out["ci_width"] = out["ci_upper"] - out["ci_lower"]
    return out


def run_ci_comparison(
    population: pd.DataFrame,
    config: AnalysisConfig | None = None,
    rng: np.random.Generator | None = None,
) -> dict:
    """
    Run all four CI strategies on one population.

    A sample of config.sample_size rows is drawn once; the t CI and the
    bootstrap CIs use that sample, the z CI uses the whole population.

    When rng is omitted, two independent generators are spawned from
    config.seed: one draws the sample, the other drives the bootstrap.

    Returns
    -------
    dict with:
      sample, sample_ci, population_ci, sampling_distribution,
      bootstrap_normal_ci, bootstrap_percentile_ci, comparison
    """
    if config is None:
        config = AnalysisConfig()
    config.validate()

    if rng is None:
        sample_rng, boot_rng = spawn_generators(config.seed, 2)
    else:
        sample_rng = boot_rng = rng

    g, v, ci = config.group_field, config.value_field, config.ci_level

    _check_two_groups(population, g, "population")

    sample = draw_sample(population, config.sample_size, sample_rng)
    _check_two_groups(sample, g, "sample")
    logger.info("Drew sample of %d from population of %d", len(sample), len(population))

    t_table = sample_ci(sample, g, v, ci=ci)
    z_table = population_ci(population, g, v, ci=ci)

    dist = bootstrap_group_means(
        sample,
        group_field=g,
        value_field=v,
        n_boot=config.n_boot,
        rng=boot_rng,
        empty_group_policy=config.empty_group_policy,
    )
    normal_table = normal_approx_ci(dist, ci=ci)
    pct_table = percentile_ci(dist, ci=ci)

    comparison = pd.concat(
        [
            _as_comparison_rows(t_table, "sample_t"),
            _as_comparison_rows(z_table, "population_z"),
            _as_comparison_rows(normal_table, "bootstrap_normal"),
            _as_comparison_rows(pct_table, "bootstrap_percentile"),
        ],
        ignore_index=True,
    )

    return {
        "sample": sample,
        "sample_ci": t_table,
        "population_ci": z_table,
        "sampling_distribution": dist,
        "bootstrap_normal_ci": normal_table,
        "bootstrap_percentile_ci": pct_table,
        "comparison": comparison,
    }
