import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def two_group_sample():
    # group A: mean 74, group B: mean 64, sd sqrt(10) each
    return pd.DataFrame(
        {
            "group": ["A"] * 5 + ["B"] * 5,
            "value": [70.0, 72.0, 74.0, 76.0, 78.0, 60.0, 62.0, 64.0, 66.0, 68.0],
        }
    )


@pytest.fixture
def population(rng):
    # synthetic weights: 600 active, 400 inactive subjects
    active = rng.normal(80.0, 15.0, 600)
    inactive = rng.normal(86.0, 18.0, 400)
    return pd.DataFrame(
        {
            "id": np.arange(1000),
            "group": ["Yes"] * 600 + ["No"] * 400,
            "value": np.concatenate([active, inactive]),
        }
    )
