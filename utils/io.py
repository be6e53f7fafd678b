"""
Shared IO helpers and the project error taxonomy.
"""
import io
import pandas as pd


class CIAnalysisError(Exception):
    """Base class for errors raised by the CI analysis."""
    pass


class DatasetLoadError(CIAnalysisError):
    """Raised when a dataset file cannot be loaded or prepared."""
    pass


class DegenerateGroupError(CIAnalysisError):
    """Raised when a group has fewer than 2 observations (undefined SE)."""
    pass


class EmptyResampleGroupError(CIAnalysisError):
    """Raised when a bootstrap draw contains no observations for a group."""

    def __init__(self, group, replicate: int):
        self.group = group
        self.replicate = replicate
        super().__init__(
            f"Bootstrap replicate {replicate} drew no observations "
            f"for group {group!r}."
        )


class InvalidConfigurationError(CIAnalysisError, ValueError):
    """Raised for invalid sizes, iteration counts or confidence levels."""
    pass


def dataframe_to_csv_buffer(df: pd.DataFrame) -> io.BytesIO:
    """
    Convert DataFrame to an in-memory CSV buffer.

    Parameters
    ----------
    df : pd.DataFrame

    Returns
    -------
    io.BytesIO
        CSV buffer.
    """
    buffer = io.BytesIO()
    buffer.write(df.to_csv(index=False).encode("utf-8"))
    buffer.seek(0)
    return buffer
