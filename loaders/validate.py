"""
Preparation of a raw dataset into the observation frame.
"""

import logging
from typing import Optional
import pandas as pd
from utils.io import DatasetLoadError

logger = logging.getLogger(__name__)


def prepare_observations(
    df: pd.DataFrame,
    group_field: str,
    value_field: str,
    id_field: Optional[str] = None,
    age_field: Optional[str] = None,
    min_age: Optional[float] = None,
) -> pd.DataFrame:
    """
    Filter and reshape a raw dataset into columns ["group", "value"].

    Rules:
    - group and value columns must exist (id / age too when given)
    - value coerced to numeric
    - rows with missing group or value dropped
    - if min_age is set, keep rows with age >= min_age
    - duplicate subjects (by id_field) resolved by keeping first
    - exactly two groups must remain
    """
    required = [group_field, value_field]
    if id_field:
        required.append(id_field)
    if min_age is not None:
        if not age_field:
            raise DatasetLoadError("min_age requires an age column.")
        required.append(age_field)

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DatasetLoadError(f"Missing required column(s): {', '.join(missing)}")

    df = df.copy()
    n_raw = len(df)

    df[value_field] = pd.to_numeric(df[value_field], errors="coerce")
    df = df.dropna(subset=[group_field, value_field])

    if min_age is not None:
        age = pd.to_numeric(df[age_field], errors="coerce")
        df = df[age >= min_age]

    if id_field:
        df = df.drop_duplicates(subset=id_field, keep="first")

    dropped = n_raw - len(df)
    if dropped:
        logger.info("Dropped %d of %d rows during preparation", dropped, n_raw)

    if df.empty:
        raise DatasetLoadError("No rows left after filtering.")

    n_groups = df[group_field].nunique()
    if n_groups != 2:
        raise DatasetLoadError(
            f"Expected exactly 2 groups in '{group_field}', found {n_groups}."
        )

    out = pd.DataFrame(
        {
            "group": df[group_field].astype(str),
            "value": df[value_field].astype(float),
        }
    )
    return out.reset_index(drop=True)
