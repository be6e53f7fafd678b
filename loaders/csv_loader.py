"""
CSV dataset loader.

Responsible for:
- Reading CSV files
- Returning raw DataFrame for preparation
"""

from typing import Any
import pandas as pd
from utils.io import DatasetLoadError


def load_csv(file: Any) -> pd.DataFrame:
    """
    Load a CSV dataset into a DataFrame.

    Parameters
    ----------
    file : path or file-like
        Uploaded or local CSV file.

    Returns
    -------
    pd.DataFrame
        Raw dataset, one row per record.
    """
    if hasattr(file, "seek"):
        file.seek(0)

    try:
        df = pd.read_csv(file)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise DatasetLoadError(f"Failed to read CSV file: {e}")

    if df.empty:
        raise DatasetLoadError("CSV file is empty.")

    return df
