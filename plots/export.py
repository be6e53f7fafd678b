"""
Plot export utilities.
"""
import io
from matplotlib.figure import Figure

EXPORT_FORMATS = {"png": "image/png", "svg": "image/svg+xml", "pdf": "application/pdf"}


def export_figure(fig: Figure, fmt: str = "png", dpi: int = 300) -> io.BytesIO:
    """
    Export a matplotlib figure to an in-memory buffer.

    Parameters
    ----------
    fig : matplotlib.figure.Figure
    fmt : str
        "png" | "svg" | "pdf"
    dpi : int
        Resolution for raster export.

    Returns
    -------
    io.BytesIO
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format: {fmt}")

    buffer = io.BytesIO()
    fig.savefig(buffer, format=fmt, dpi=dpi, bbox_inches="tight")
    buffer.seek(0)
    return buffer


def export_figure_to_png(fig: Figure, dpi: int = 300) -> io.BytesIO:
    return export_figure(fig, fmt="png", dpi=dpi)
