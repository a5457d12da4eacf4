"""
A Python package computing the statistics behind dashboard chart types.

Turns raw numeric samples into box-plot summaries, histogram bins, kernel
density estimates and fitted trend lines, and renders or exports them.

Modules:
    - stats: Pure statistical engines (primitives, boxplot, histogram, kde, regression).
    - settings: Option records for each engine and their defaults.
    - data_processing: Loads CSV tables and extracts clean numeric samples.
    - analysis: Runs the engines over dataset columns and builds summary tables.
    - output: Writes summary tables to CSV.
    - plotting: Themed matplotlib charts of engine results.
"""

__version__ = "1.0.0"

from .analysis import (
    build_summary_tables,
    fit_relationship,
    summarize_distribution,
    summarize_groups,
)
from .data_processing import grouped_values, load_table, numeric_values, paired_values
from .output import save_tables_to_csv
from .settings import (
    BoxplotSettings,
    HistogramSettings,
    KDESettings,
    RegressionSettings,
)
from .stats import (
    compute_boxplot_stats,
    compute_grouped_boxplot_stats,
    compute_histogram_bins,
    compute_kde,
    compute_regression,
)

__all__ = [
    # Settings
    "BoxplotSettings",
    "HistogramSettings",
    "KDESettings",
    "RegressionSettings",
    # Engines
    "compute_boxplot_stats",
    "compute_grouped_boxplot_stats",
    "compute_histogram_bins",
    "compute_kde",
    "compute_regression",
    # Data processing
    "load_table",
    "numeric_values",
    "grouped_values",
    "paired_values",
    # Analysis
    "summarize_distribution",
    "summarize_groups",
    "fit_relationship",
    "build_summary_tables",
    # Output
    "save_tables_to_csv",
]
