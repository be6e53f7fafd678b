# analysis/bootstrap.py

from __future__ import annotations
import logging

import numpy as np
import pandas as pd

from utils.config import EMPTY_GROUP_POLICIES, validate_positive_int
from utils.io import EmptyResampleGroupError, InvalidConfigurationError

logger = logging.getLogger(__name__)


def spawn_generators(seed: int | None, n: int) -> list[np.random.Generator]:
    """
    Independent, non-overlapping generators derived from one seed.
    """
    children = np.random.SeedSequence(seed).spawn(validate_positive_int(n, "n"))
    return [np.random.default_rng(s) for s in children]


def bootstrap_group_means(
    sample: pd.DataFrame,
    group_field: str = "group",
    value_field: str = "value",
    n_boot: int = 1000,
    rng: np.random.Generator | None = None,
    random_state: int | None = None,
    empty_group_policy: str = "raise",
    max_redraws: int = 100,
) -> pd.DataFrame:
    """
    Bootstrap sampling distribution of the per-group mean.

    Each replicate draws len(sample) rows uniformly with replacement
    and records the mean of value_field within every group.

    Parameters
    ----------
    sample : pd.DataFrame
        Fixed sample; never modified.
    group_field, value_field : str
    n_boot : int
        Number of replicates (B).
    rng : np.random.Generator | None
        Source of randomness. Built from random_state when omitted.
    empty_group_policy : str
        What to do when a replicate contains no rows of some group:
          - "raise": abort with EmptyResampleGroupError
          - "redraw": draw that replicate again, at most max_redraws times

    Returns
    -------
    DataFrame of shape (n_boot, n_groups)
        Index "replicate" 0..n_boot-1, one column per group (sorted).
    """
    n_boot = validate_positive_int(n_boot, "n_boot")
    if empty_group_policy not in EMPTY_GROUP_POLICIES:
        raise InvalidConfigurationError(f"Unknown empty_group_policy: {empty_group_policy}")

    for col in (group_field, value_field):
        if col not in sample.columns:
            raise KeyError(f"Missing column: {col}")

    sub = sample[[group_field, value_field]]
    n = len(sub)
    if n == 0:
        raise InvalidConfigurationError("Cannot bootstrap an empty sample.")
    if sub.isna().any().any():
        raise InvalidConfigurationError("Sample contains missing group or value entries.")

    if rng is None:
        rng = np.random.default_rng(random_state)

    codes, groups = pd.factorize(sub[group_field], sort=True)
    values = sub[value_field].to_numpy(dtype=float)
    k = len(groups)

    logger.info("Bootstrapping %d replicates of size %d over %d group(s)", n_boot, n, k)

    boot_means = np.empty((n_boot, k), dtype=float)
    total_redraws = 0

    for i in range(n_boot):
        attempts = 0
        while True:
            idx = rng.integers(0, n, size=n)
            counts = np.bincount(codes[idx], minlength=k)
            if np.all(counts > 0):
                break

            missing = groups[int(np.argmax(counts == 0))]
            if empty_group_policy == "raise" or attempts >= max_redraws:
                raise EmptyResampleGroupError(missing, i)

            attempts += 1
            logger.debug("Replicate %d drew no %r rows, redrawing", i, missing)

        total_redraws += attempts
        sums = np.bincount(codes[idx], weights=values[idx], minlength=k)
        boot_means[i] = sums / counts

    if total_redraws:
        logger.warning("%d replicate(s) redrawn because a group was empty", total_redraws)

    logger.info("Bootstrap finished: %d replicates, %d redraw(s)", n_boot, total_redraws)

    dist = pd.DataFrame(
        boot_means,
        columns=pd.Index(list(groups), name=group_field),
        index=pd.RangeIndex(n_boot, name="replicate"),
    )
    return dist
