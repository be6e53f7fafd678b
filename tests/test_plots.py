import matplotlib

matplotlib.use("Agg")

from analysis.pipeline import STRATEGIES, run_ci_comparison
from plots.export import export_figure, export_figure_to_png
from plots.intervals import plot_group_cis, plot_group_cis_matplotlib, plot_sampling_distribution
from utils.config import AnalysisConfig

import pytest


@pytest.fixture
def results(population):
    return run_ci_comparison(population, AnalysisConfig(sample_size=60, n_boot=100, seed=1))


def test_plot_group_cis_one_trace_per_strategy(results):
    fig = plot_group_cis(results["comparison"], labels=STRATEGIES)
    assert len(fig.data) == 4
    assert [t.name for t in fig.data] == list(STRATEGIES.values())


def test_plot_group_cis_single_table(results):
    fig = plot_group_cis(results["sample_ci"], value_label="weight")
    assert len(fig.data) == 1
    assert fig.data[0].name == "weight"


def test_plot_sampling_distribution_with_bounds(results):
    fig = plot_sampling_distribution(
        results["sampling_distribution"],
        ci_table=results["bootstrap_percentile_ci"],
    )
    assert len(fig.data) == 2
    assert len(fig.layout.shapes) == 4


def test_matplotlib_export(results):
    fig = plot_group_cis_matplotlib(results["comparison"], labels=STRATEGIES)
    png = export_figure_to_png(fig, dpi=50)
    assert png.getvalue()[:4] == b"\x89PNG"
    svg = export_figure(fig, fmt="svg")
    assert b"<svg" in svg.getvalue()
    with pytest.raises(ValueError):
        export_figure(fig, fmt="bmp")
