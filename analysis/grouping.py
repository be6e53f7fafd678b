# analysis/grouping.py

from __future__ import annotations
import pandas as pd

from utils.io import InvalidConfigurationError


def partition_by_group(
    df: pd.DataFrame,
    group_field: str = "group",
    value_field: str = "value",
) -> dict:
    """
    Partition observations into {group -> float value array}.

    Missing groups or values are rejected; filtering happens in
    loaders.validate.prepare_observations. Groups come back in sorted order.
    """
    for col in (group_field, value_field):
        if col not in df.columns:
            raise KeyError(f"Missing column: {col}")

    sub = df[[group_field, value_field]]
    if sub.isna().any().any():
        raise InvalidConfigurationError("Observations contain missing group or value entries.")

    groups: dict = {}
    for g in sorted(sub[group_field].unique()):
        vals = sub.loc[sub[group_field] == g, value_field]
        groups[g] = vals.to_numpy(dtype=float)

    return groups
