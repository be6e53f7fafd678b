"""
Confidence interval plotting utilities.
"""

from typing import List
import pandas as pd
import plotly.graph_objects as go
import matplotlib.pyplot as plt

from plots.styling import apply_matplotlib_style, PALETTE


def _strategy_order(table: pd.DataFrame) -> List[str]:
    if "strategy" not in table.columns:
        return [""]
    return list(dict.fromkeys(table["strategy"]))


def _point_column(table: pd.DataFrame) -> str:
    return "mean" if "mean" in table.columns else "point_estimate"


# =========================
# Plotly (Interactive)
# =========================
def plot_group_cis(
    table: pd.DataFrame,
    title: str = "",
    value_label: str = "value",
    labels: dict | None = None,
) -> go.Figure:
    """
    Point + error-bar plot of per-group CIs.

    table needs group, ci_lower, ci_upper and mean or point_estimate.
    A "strategy" column gives one offset trace per strategy.
    """
    if labels is None:
        labels = {}

    fig = go.Figure()
    point_col = _point_column(table)

    for i, strategy in enumerate(_strategy_order(table)):
        sub = table if not strategy else table[table["strategy"] == strategy]
        point = sub[point_col]

        fig.add_trace(
            go.Scatter(
                x=sub["group"].astype(str),
                y=point,
                mode="markers",
                offsetgroup=str(i),
                name=labels.get(strategy, strategy) or value_label,
                marker=dict(size=10, color=PALETTE[i % len(PALETTE)]),
                error_y=dict(
                    type="data",
                    symmetric=False,
                    array=sub["ci_upper"] - point,
                    arrayminus=point - sub["ci_lower"],
                    thickness=2,
                    width=8,
                ),
                hovertemplate=(
                    "%{x}<br>"
                    f"{value_label}: %{{y:.3f}}"
                    "<extra></extra>"
                ),
            )
        )

    fig.update_layout(
        title=title,
        xaxis_title="Group",
        yaxis_title=value_label,
        scattermode="group",
        legend_title="Strategy",
        template="plotly_white",
        margin=dict(l=40, r=40, t=60, b=40),
    )

    return fig


def plot_sampling_distribution(
    dist: pd.DataFrame,
    ci_table: pd.DataFrame | None = None,
    value_label: str = "mean value",
    nbins: int = 40,
) -> go.Figure:
    """
    Overlaid histograms of the bootstrap means, one per group.

    If ci_table is given, its bounds are drawn as vertical dashed lines.
    """
    fig = go.Figure()
    colors = {g: PALETTE[i % len(PALETTE)] for i, g in enumerate(dist.columns)}

    for g in dist.columns:
        fig.add_trace(
            go.Histogram(
                x=dist[g],
                name=str(g),
                nbinsx=nbins,
                opacity=0.6,
                marker_color=colors[g],
            )
        )

    if ci_table is not None:
        for _, row in ci_table.iterrows():
            color = colors.get(row["group"], "#7f7f7f")
            for bound in ("ci_lower", "ci_upper"):
                fig.add_vline(
                    x=row[bound],
                    line_dash="dash",
                    line_color=color,
                )

    fig.update_layout(
        barmode="overlay",
        xaxis_title=value_label,
        yaxis_title="Replicates",
        legend_title="Group",
        template="plotly_white",
        margin=dict(l=40, r=40, t=40, b=40),
    )

    return fig


# =========================
# Matplotlib (Publication)
# =========================
def plot_group_cis_matplotlib(
    table: pd.DataFrame,
    title: str = "",
    value_label: str = "value",
    labels: dict | None = None,
):
    """
    Build a publication-ready matplotlib CI comparison plot.
    """
    apply_matplotlib_style()

    if labels is None:
        labels = {}

    fig, ax = plt.subplots(figsize=(7, 5))
    point_col = _point_column(table)

    groups = list(dict.fromkeys(table["group"]))
    positions = {g: i for i, g in enumerate(groups)}
    strategies = _strategy_order(table)
    step = 0.6 / max(len(strategies), 1)

    for i, strategy in enumerate(strategies):
        sub = table if not strategy else table[table["strategy"] == strategy]
        offset = (i - (len(strategies) - 1) / 2) * step
        x = [positions[g] + offset for g in sub["group"]]
        point = sub[point_col]

        ax.errorbar(
            x,
            point,
            yerr=[
                (point - sub["ci_lower"]).to_numpy(),
                (sub["ci_upper"] - point).to_numpy(),
            ],
            fmt="o",
            capsize=4,
            color=PALETTE[i % len(PALETTE)],
            label=labels.get(strategy, strategy) or None,
        )

    ax.set_xticks(range(len(groups)))
    ax.set_xticklabels([str(g) for g in groups])
    ax.set_xlabel("Group")
    ax.set_ylabel(value_label)
    ax.set_title(title)
    ax.grid(True, axis="y", linestyle="--", alpha=0.4)

    if len(strategies) > 1:
        ax.legend(loc="upper left", bbox_to_anchor=(1.02, 1))

    fig.tight_layout()
    return fig
