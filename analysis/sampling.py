# analysis/sampling.py

from __future__ import annotations
import numpy as np
import pandas as pd

from utils.config import validate_positive_int
from utils.io import InvalidConfigurationError


def draw_sample(
    population: pd.DataFrame,
    size: int,
    rng: np.random.Generator,
) -> pd.DataFrame:
    """
    Draw `size` rows without replacement from the population.

    The returned frame is a copy with a fresh 0..size-1 index.
    """
    size = validate_positive_int(size, "sample_size")
    if size > len(population):
        raise InvalidConfigurationError(
            f"Sample size {size} exceeds population size {len(population)}."
        )

    idx = rng.choice(len(population), size=size, replace=False)
    return population.iloc[np.sort(idx)].reset_index(drop=True)
