"""
Run the statistical engines over dataset columns and tabulate the results.

This module is the glue between pandas tables and the pure engines in
``chartstats.stats``:

1) ``summarize_distribution`` runs the box-plot, histogram and KDE engines on
   one sample and collects the results.
2) ``summarize_groups`` does the same per category of a grouping column.
3) ``fit_relationship`` fits the configured trend line to two columns.
4) The ``*_table`` helpers flatten engine results into DataFrames with the
   standard column names from ``schema``, ready for CSV export.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .data_processing import grouped_values, numeric_values, paired_values
from .schema import ALL_GROUP, COLUMNS
from .settings import (
    BoxplotSettings,
    HistogramSettings,
    KDESettings,
    RegressionSettings,
    resolve_boxplot_settings,
    resolve_histogram_settings,
    resolve_kde_settings,
)
from .stats import (
    BoxplotStats,
    HistogramBin,
    KDEPoint,
    RegressionResult,
    compute_boxplot_stats,
    compute_cumulative_distribution,
    compute_histogram_bins,
    compute_kde,
    compute_regression,
)

logger = logging.getLogger(__name__)


def summarize_distribution(
    values: Sequence[float] | np.ndarray,
    *,
    boxplot: BoxplotSettings | Mapping | None = None,
    histogram: HistogramSettings | Mapping | None = None,
    kde: KDESettings | Mapping | None = None,
) -> Dict[str, object]:
    """Compute every distribution summary for one sample.

    Returns:
        dict: ``boxplot`` (BoxplotStats), ``histogram`` (list of HistogramBin),
        ``cumulative`` (list of CumulativePoint) and ``kde`` (list of KDEPoint).
    """
    bins = compute_histogram_bins(values, histogram)
    return {
        "boxplot": compute_boxplot_stats(values, boxplot),
        "histogram": bins,
        "cumulative": compute_cumulative_distribution(bins),
        "kde": compute_kde(values, kde),
    }


def summarize_groups(
    df: pd.DataFrame,
    value_column: str,
    group_column: Optional[str] = None,
    *,
    boxplot: BoxplotSettings | Mapping | None = None,
    histogram: HistogramSettings | Mapping | None = None,
    kde: KDESettings | Mapping | None = None,
) -> Dict[str, Dict[str, object]]:
    """Summarize ``value_column`` overall or per category of ``group_column``.

    Settings are resolved once and shared by every group.

    Returns:
        dict[str, dict]: Mapping of category label (``ALL_GROUP`` when
        ungrouped) to the output of :func:`summarize_distribution`.
    """
    box_s = resolve_boxplot_settings(boxplot)
    hist_s = resolve_histogram_settings(histogram)
    kde_s = resolve_kde_settings(kde)

    if group_column is None:
        groups = [(ALL_GROUP, numeric_values(df, value_column))]
    else:
        groups = grouped_values(df, value_column, group_column)

    summaries = {}
    for category, values in groups:
        summaries[category] = summarize_distribution(
            values, boxplot=box_s, histogram=hist_s, kde=kde_s
        )
        logger.debug("Summarized group %r with n=%d", category, len(values))
    return summaries


def fit_relationship(
    df: pd.DataFrame,
    x_column: str,
    y_column: str,
    settings: RegressionSettings | Mapping | None = None,
) -> tuple[np.ndarray, np.ndarray, Optional[RegressionResult]]:
    """Fit the configured trend line of ``y_column`` against ``x_column``."""
    x, y = paired_values(df, x_column, y_column)
    result = compute_regression(x, y, settings)
    if result is None:
        logger.info(
            "No regression fitted for %r vs %r (n=%d)", y_column, x_column, len(x)
        )
    return x, y, result


_BOXPLOT_COLUMNS = [
    COLUMNS.group,
    COLUMNS.n,
    COLUMNS.min,
    COLUMNS.q1,
    COLUMNS.median,
    COLUMNS.q3,
    COLUMNS.max,
    COLUMNS.iqr,
    COLUMNS.mean,
    COLUMNS.lower_whisker,
    COLUMNS.upper_whisker,
    COLUMNS.n_outliers,
]


def boxplot_table(stats_by_group: Mapping[str, BoxplotStats]) -> pd.DataFrame:
    """One row of box-plot statistics per group."""
    rows = []
    for group, st in stats_by_group.items():
        rows.append(
            {
                COLUMNS.group: group,
                COLUMNS.n: st.n,
                COLUMNS.min: st.min,
                COLUMNS.q1: st.q1,
                COLUMNS.median: st.median,
                COLUMNS.q3: st.q3,
                COLUMNS.max: st.max,
                COLUMNS.iqr: st.iqr,
                COLUMNS.mean: st.mean,
                COLUMNS.lower_whisker: st.lower_whisker,
                COLUMNS.upper_whisker: st.upper_whisker,
                COLUMNS.n_outliers: len(st.outliers),
            }
        )
    return pd.DataFrame(rows, columns=_BOXPLOT_COLUMNS)


def histogram_table(bins_by_group: Mapping[str, List[HistogramBin]]) -> pd.DataFrame:
    """Long-format histogram table with a cumulative frequency column."""
    rows = []
    for group, bins in bins_by_group.items():
        cumulative = compute_cumulative_distribution(bins)
        for b, c in zip(bins, cumulative):
            rows.append(
                {
                    COLUMNS.group: group,
                    COLUMNS.bin_start: b.x0,
                    COLUMNS.bin_end: b.x1,
                    COLUMNS.count: b.count,
                    COLUMNS.frequency: b.frequency,
                    COLUMNS.density: b.density,
                    COLUMNS.cumulative: c.cumulative,
                }
            )
    return pd.DataFrame(
        rows,
        columns=[
            COLUMNS.group,
            COLUMNS.bin_start,
            COLUMNS.bin_end,
            COLUMNS.count,
            COLUMNS.frequency,
            COLUMNS.density,
            COLUMNS.cumulative,
        ],
    )


def kde_table(kde_by_group: Mapping[str, List[KDEPoint]]) -> pd.DataFrame:
    rows = [
        {COLUMNS.group: group, COLUMNS.x: p.x, COLUMNS.density: p.density}
        for group, points in kde_by_group.items()
        for p in points
    ]
    return pd.DataFrame(rows, columns=[COLUMNS.group, COLUMNS.x, COLUMNS.density])


def regression_table(result: Optional[RegressionResult]) -> pd.DataFrame:
    """Single-row fit summary; empty when no fit was produced."""
    columns = [
        COLUMNS.regression_type,
        COLUMNS.n,
        COLUMNS.equation,
        COLUMNS.r_squared,
        COLUMNS.adjusted_r_squared,
        COLUMNS.standard_error,
    ]
    if result is None:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        [
            {
                COLUMNS.regression_type: result.type,
                COLUMNS.n: result.n,
                COLUMNS.equation: result.equation,
                COLUMNS.r_squared: result.r_squared,
                COLUMNS.adjusted_r_squared: result.adjusted_r_squared,
                COLUMNS.standard_error: result.standard_error,
            }
        ],
        columns=columns,
    )


def build_summary_tables(
    summaries: Mapping[str, Mapping[str, object]],
    regression: Optional[RegressionResult] = None,
) -> Dict[str, pd.DataFrame]:
    """Flatten the output of :func:`summarize_groups` into named tables."""
    tables = {
        "boxplot_summary": boxplot_table(
            {g: s["boxplot"] for g, s in summaries.items()}
        ),
        "histogram_bins": histogram_table(
            {g: s["histogram"] for g, s in summaries.items()}
        ),
        "kde_curves": kde_table({g: s["kde"] for g, s in summaries.items()}),
    }
    if regression is not None:
        tables["regression_summary"] = regression_table(regression)
    return tables
