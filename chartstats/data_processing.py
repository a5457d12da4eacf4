"""
Handles CSV loading and extraction of numeric samples from tables.
"""

# The engines only accept clean numeric arrays. This module is the boundary
# where dataset columns are coerced to floats and missing or non-finite values
# are dropped, so engine results never depend on bad cells.

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def load_table(filepath):
    """Load a CSV file into a :class:`pandas.DataFrame`.

    Args:
        filepath: Path to a comma-separated file with a header row.

    Returns:
        pandas.DataFrame: The raw table; no coercion is applied here.
    """
    df = pd.read_csv(filepath)
    logger.info("Loaded %s with shape %s", filepath, df.shape)
    return df


def _require_columns(df, *columns):
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise KeyError(
            f"Columns {missing} not found. Available columns: {list(df.columns)}"
        )


def _finite_numeric(series):
    numeric = pd.to_numeric(series, errors="coerce").astype(float)
    return numeric.where(np.isfinite(numeric))


def numeric_values(df, column):
    """Return the finite numeric values of one column as a float array.

    Non-numeric cells are coerced to NaN and dropped along with missing and
    infinite values.

    Raises:
        KeyError: If ``column`` is not in ``df``.
    """
    _require_columns(df, column)
    values = _finite_numeric(df[column]).dropna().to_numpy(dtype=float)
    dropped = len(df) - len(values)
    if dropped:
        logger.debug("Dropped %d non-numeric rows from %r", dropped, column)
    return values


def grouped_values(df, value_column, group_column):
    """Split a numeric column by the categories of another column.

    Args:
        df: Source table.
        value_column: Column holding sample values.
        group_column: Column holding category labels; rows with a missing
            label are dropped.

    Returns:
        list[tuple[str, numpy.ndarray]]: ``(category, values)`` pairs in order
        of first appearance, one per category that has at least one label.
    """
    _require_columns(df, value_column, group_column)
    frame = pd.DataFrame(
        {
            "group": df[group_column],
            "value": _finite_numeric(df[value_column]),
        }
    ).dropna(subset=["group"])

    groups = []
    for category, sub in frame.groupby("group", sort=False):
        groups.append((str(category), sub["value"].dropna().to_numpy(dtype=float)))
    return groups


def paired_values(df, x_column, y_column):
    """Return aligned ``x`` and ``y`` arrays, dropping rows missing either side."""
    _require_columns(df, x_column, y_column)
    frame = pd.DataFrame(
        {"x": _finite_numeric(df[x_column]), "y": _finite_numeric(df[y_column])}
    ).dropna()
    return frame["x"].to_numpy(dtype=float), frame["y"].to_numpy(dtype=float)
