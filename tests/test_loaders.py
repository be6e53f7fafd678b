import io

import numpy as np
import pandas as pd
import pytest

from loaders.csv_loader import load_csv
from loaders.validate import prepare_observations
from utils.io import DatasetLoadError


@pytest.fixture
def raw():
    return pd.DataFrame(
        {
            "ID": [1, 1, 2, 3, 4, 5, 6],
            "Age": [30, 30, 12, 45, 50, 61, 25],
            "PhysActive": ["Yes", "Yes", "No", "No", None, "Yes", "No"],
            "Weight": [70.5, 70.5, 40.0, "n/a", 88.0, 91.2, 77.7],
        }
    )


def test_load_csv_roundtrip():
    buf = io.StringIO("ID,PhysActive,Weight\n1,Yes,70.1\n2,No,80.2\n")
    df = load_csv(buf)
    assert list(df.columns) == ["ID", "PhysActive", "Weight"]
    assert len(df) == 2


def test_load_csv_empty():
    with pytest.raises(DatasetLoadError):
        load_csv(io.StringIO(""))
    with pytest.raises(DatasetLoadError):
        load_csv(io.StringIO("ID,PhysActive,Weight\n"))


def test_prepare_filters_and_dedupes(raw):
    obs = prepare_observations(
        raw,
        group_field="PhysActive",
        value_field="Weight",
        id_field="ID",
        age_field="Age",
        min_age=18,
    )
    assert list(obs.columns) == ["group", "value"]
    # ID 1 deduped, ID 2 under age, ID 3 bad weight, ID 4 missing group
    assert obs["value"].tolist() == [70.5, 91.2, 77.7]
    assert obs["group"].tolist() == ["Yes", "Yes", "No"]
    assert obs["value"].dtype == np.float64


def test_prepare_missing_column(raw):
    with pytest.raises(DatasetLoadError):
        prepare_observations(raw, group_field="Active", value_field="Weight")
    with pytest.raises(DatasetLoadError):
        prepare_observations(raw, group_field="PhysActive", value_field="Weight", min_age=18)


def test_prepare_requires_two_groups(raw):
    one = raw[raw["PhysActive"] == "Yes"]
    with pytest.raises(DatasetLoadError):
        prepare_observations(one, group_field="PhysActive", value_field="Weight")

    three = raw.assign(PhysActive=["a", "b", "c", "a", "b", "c", "a"])
    with pytest.raises(DatasetLoadError):
        prepare_observations(three, group_field="PhysActive", value_field="Weight")
