import logging

import numpy as np
import pandas as pd
import pytest

from analysis.bootstrap import bootstrap_group_means, spawn_generators
from analysis.sampling import draw_sample
from utils.io import EmptyResampleGroupError, InvalidConfigurationError


def test_shape_and_entries_per_group(population, rng):
    sample = draw_sample(population, 100, rng)
    dist = bootstrap_group_means(sample, n_boot=1000, random_state=42)
    assert dist.shape == (1000, 2)
    assert list(dist.columns) == ["No", "Yes"]
    assert dist.notna().all().all()
    assert dist.index.name == "replicate"


def test_seeded_runs_are_identical(population, rng):
    sample = draw_sample(population, 100, rng)
    d1 = bootstrap_group_means(sample, n_boot=1000, random_state=123)
    d2 = bootstrap_group_means(sample, n_boot=1000, random_state=123)
    pd.testing.assert_frame_equal(d1, d2)

    d3 = bootstrap_group_means(sample, n_boot=1000, rng=np.random.default_rng(123))
    pd.testing.assert_frame_equal(d1, d3)


def test_different_seeds_differ(two_group_sample):
    d1 = bootstrap_group_means(two_group_sample, n_boot=200, random_state=1, empty_group_policy="redraw")
    d2 = bootstrap_group_means(two_group_sample, n_boot=200, random_state=2, empty_group_policy="redraw")
    assert not d1.equals(d2)


def test_sample_not_mutated(two_group_sample):
    before = two_group_sample.copy()
    bootstrap_group_means(two_group_sample, n_boot=50, random_state=0, empty_group_policy="redraw")
    pd.testing.assert_frame_equal(two_group_sample, before)


def test_means_stay_within_group_range(two_group_sample):
    dist = bootstrap_group_means(two_group_sample, n_boot=300, random_state=5, empty_group_policy="redraw")
    assert dist["A"].between(70.0, 78.0).all()
    assert dist["B"].between(60.0, 68.0).all()


def test_single_replicate(two_group_sample):
    dist = bootstrap_group_means(two_group_sample, n_boot=1, random_state=9, empty_group_policy="redraw")
    assert dist.shape == (1, 2)


def test_constant_group_gives_constant_means():
    sample = pd.DataFrame({"group": ["x"] * 4 + ["y"] * 4, "value": [5.0] * 4 + [1.0, 2.0, 3.0, 4.0]})
    dist = bootstrap_group_means(sample, n_boot=100, random_state=0, empty_group_policy="redraw")
    assert (dist["x"] == 5.0).all()


def test_empty_group_raises_by_default():
    # two rows, one per group: half of all replicates miss a group
    sample = pd.DataFrame({"group": ["A", "B"], "value": [1.0, 2.0]})
    with pytest.raises(EmptyResampleGroupError) as exc:
        bootstrap_group_means(sample, n_boot=50, random_state=0)
    assert exc.value.group in ("A", "B")
    assert 0 <= exc.value.replicate < 50


def test_empty_group_redraw_keeps_all_replicates():
    sample = pd.DataFrame({"group": ["A", "B"], "value": [1.0, 2.0]})
    dist = bootstrap_group_means(sample, n_boot=50, random_state=0, empty_group_policy="redraw")
    assert dist.shape == (50, 2)
    assert (dist["A"] == 1.0).all()
    assert (dist["B"] == 2.0).all()


def test_redraw_gives_up_after_max_redraws():
    sample = pd.DataFrame({"group": ["A", "B"], "value": [1.0, 2.0]})
    with pytest.raises(EmptyResampleGroupError):
        bootstrap_group_means(sample, n_boot=50, random_state=0, empty_group_policy="redraw", max_redraws=0)


@pytest.mark.parametrize("n_boot", [0, -1, 2.5])
def test_bad_iteration_count(two_group_sample, n_boot):
    with pytest.raises(InvalidConfigurationError):
        bootstrap_group_means(two_group_sample, n_boot=n_boot)


def test_bad_policy(two_group_sample):
    with pytest.raises(InvalidConfigurationError):
        bootstrap_group_means(two_group_sample, empty_group_policy="skip")


def test_empty_or_incomplete_sample():
    with pytest.raises(InvalidConfigurationError):
        bootstrap_group_means(pd.DataFrame({"group": [], "value": []}))
    with pytest.raises(InvalidConfigurationError):
        bootstrap_group_means(pd.DataFrame({"group": ["A", "B"], "value": [1.0, np.nan]}))


def test_spawned_generators_are_independent_and_reproducible():
    a1, b1 = spawn_generators(7, 2)
    a2, b2 = spawn_generators(7, 2)
    x1, y1 = a1.integers(0, 1_000_000, 10), b1.integers(0, 1_000_000, 10)
    assert np.array_equal(x1, a2.integers(0, 1_000_000, 10))
    assert np.array_equal(y1, b2.integers(0, 1_000_000, 10))
    assert not np.array_equal(x1, y1)


def test_bootstrap_logs_start_and_finish(two_group_sample, caplog):
    with caplog.at_level(logging.INFO, logger="analysis.bootstrap"):
        bootstrap_group_means(two_group_sample, n_boot=20, random_state=3, empty_group_policy="redraw")
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Bootstrapping 20 replicates") for m in messages)
    assert any(m.startswith("Bootstrap finished: 20 replicates") for m in messages)
