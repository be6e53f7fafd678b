"""
Centralized plotting styles.
"""
import matplotlib.pyplot as plt

PALETTE = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728",
    "#9467bd", "#8c564b", "#e377c2", "#7f7f7f",
]


def apply_matplotlib_style() -> None:
    """Apply publication-ready matplotlib styling for interval plots."""
    plt.rcParams.update(
        {
            "font.family": "serif",
            "font.size": 12,
            "axes.labelsize": 12,
            "axes.titlesize": 14,
            "legend.fontsize": 10,
            "lines.linewidth": 1.8,
            "errorbar.capsize": 4,
            "grid.linestyle": "--",
            "grid.alpha": 0.5,
        }
    )
