"""
Chart rendering for the statistical engines.

All plotting functions accept precomputed engine results and do not perform
statistical calculations.

Modules:
    style:
        ggplot2-style themes (grey, minimal, classic, economist,
        fivethirtyeight), axis styling and multi-format figure saving.

    charts:
        Box plots, histograms with cumulative overlay, violin plots, and
        regression scatter plots with confidence and prediction bands, plus a
        four-panel statistical summary figure.

Design Principles:
    1. No statistics in plotting code. Functions receive engine output and
       simply render it.

    2. Empty results (``n == 0``, empty bin or point lists) are skipped.

Styling:
    Themes are applied per axis; figures are saved at 300 DPI as PNG, PDF and
    SVG from one extensionless base path.
"""

from .charts import (
    plot_boxplot,
    plot_histogram,
    plot_regression,
    plot_statistical_summary,
    plot_violin,
)
from .style import (
    DEFAULT_THEME,
    STAT_THEMES,
    ChartTheme,
    apply_theme,
    get_theme,
    save_figure,
)

__all__ = [
    "ChartTheme",
    "STAT_THEMES",
    "DEFAULT_THEME",
    "get_theme",
    "apply_theme",
    "save_figure",
    "plot_boxplot",
    "plot_histogram",
    "plot_violin",
    "plot_regression",
    "plot_statistical_summary",
]
