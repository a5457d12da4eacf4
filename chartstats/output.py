"""Write summary tables to reproducible CSV files.

This module is the output boundary between in-memory engine results and the
tabular artifacts consumed by spreadsheets or external cross-checks.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Mapping

import pandas as pd

from .schema import COLUMNS

logger = logging.getLogger(__name__)

FLOAT_FORMAT = "%.10g"


def _outlier_table(outliers_by_group: Mapping[str, tuple]) -> pd.DataFrame:
    """Build a long-format table of outlier values per group.

    Args:
        outliers_by_group (Mapping[str, tuple]): Group label to outlier values
            as reported by ``BoxplotStats.outliers``.

    Returns:
        pandas.DataFrame: Columns ``Group`` and ``Outlier`` with one row per
        outlier value; empty when no group has outliers.
    """
    rows = [
        {COLUMNS.group: group, "Outlier": value}
        for group, values in outliers_by_group.items()
        for value in values
    ]
    return pd.DataFrame(rows, columns=[COLUMNS.group, "Outlier"])


def save_tables_to_csv(
    tables: Mapping[str, pd.DataFrame],
    output_dir: str = "output",
    outliers_by_group: Mapping[str, tuple] | None = None,
) -> Dict[str, str]:
    """Save each named table to ``<output_dir>/<name>.csv``.

    Args:
        tables (Mapping[str, pandas.DataFrame]): Output of
            ``analysis.build_summary_tables``.
        output_dir (str): Directory where CSV outputs are written.
        outliers_by_group (Mapping[str, tuple] | None): When given, also write
            ``outliers.csv`` listing every box-plot outlier.

    Returns:
        dict[str, str]: Table name to written path.

    Note:
        Floats are written with ten significant digits so exported values can
        be compared against R or numpy to the engine's documented tolerance.
    """
    os.makedirs(output_dir, exist_ok=True)

    paths = {}
    for name, table in tables.items():
        path = os.path.join(output_dir, f"{name}.csv")
        table.to_csv(path, index=False, float_format=FLOAT_FORMAT)
        paths[name] = path
        logger.info("Saved %s (%d rows) to %s", name, len(table), path)

    if outliers_by_group is not None:
        path = os.path.join(output_dir, "outliers.csv")
        _outlier_table(outliers_by_group).to_csv(
            path, index=False, float_format=FLOAT_FORMAT
        )
        paths["outliers"] = path
        logger.info("Saved outliers to %s", path)

    return paths
