"""
Statistical engines behind the dashboard's statistical chart types.

This subpackage turns raw sample arrays into the summary structures that box
plots, histograms, violin plots and regression scatter plots render. All
functions are pure and deterministic; inputs are copied before sorting and
results are frozen dataclasses.

Modules:
    primitives:
        Mean, variance, type-7 quantiles, IQR, normal PDF/CDF, probit and
        Student's t critical values.

    boxplot:
        Five-number summaries under tukey, minmax, percentile and stddev
        whisker policies, single and grouped.

    histogram:
        Bin-count rules (Sturges, Scott, Freedman-Diaconis, sqrt, fixed count,
        fixed width), equal-width bins and cumulative distributions.

    kde:
        Kernel density estimates with Silverman/Scott bandwidths and violin
        outline paths.

    regression:
        Linear, polynomial and LOESS fits with confidence and prediction bands
        and equation formatting.

Design Principle:
    This subpackage has no dependencies on plotting/ or on pandas. Engines
    depend on each other only through primitives.
"""

from .boxplot import (
    BoxplotStats,
    GroupedBoxplotStats,
    compute_boxplot_stats,
    compute_grouped_boxplot_stats,
)
from .histogram import (
    CumulativePoint,
    HistogramBin,
    calculate_bin_count,
    compute_cumulative_distribution,
    compute_histogram_bins,
)
from .kde import (
    KDEPoint,
    ViolinPath,
    calculate_bandwidth,
    compute_kde,
    create_violin_path,
    get_max_density,
    normalize_kde,
)
from .primitives import (
    interquartile_range,
    maximum,
    mean,
    minimum,
    normal_cdf,
    normal_pdf,
    probit,
    quantile,
    standard_deviation,
    t_critical,
    total,
    variance,
)
from .regression import (
    BandPoint,
    CurvePoint,
    LinearRegressionResult,
    RegressionResult,
    compute_confidence_band,
    compute_linear_regression,
    compute_loess,
    compute_polynomial_regression,
    compute_prediction_band,
    compute_regression,
    evaluate_polynomial,
    format_equation,
)

__all__ = [
    # Primitives
    "mean",
    "total",
    "minimum",
    "maximum",
    "variance",
    "standard_deviation",
    "quantile",
    "interquartile_range",
    "normal_pdf",
    "normal_cdf",
    "probit",
    "t_critical",
    # Boxplot
    "BoxplotStats",
    "GroupedBoxplotStats",
    "compute_boxplot_stats",
    "compute_grouped_boxplot_stats",
    # Histogram
    "HistogramBin",
    "CumulativePoint",
    "calculate_bin_count",
    "compute_histogram_bins",
    "compute_cumulative_distribution",
    # KDE
    "KDEPoint",
    "ViolinPath",
    "calculate_bandwidth",
    "compute_kde",
    "get_max_density",
    "normalize_kde",
    "create_violin_path",
    # Regression
    "BandPoint",
    "CurvePoint",
    "LinearRegressionResult",
    "RegressionResult",
    "compute_linear_regression",
    "compute_polynomial_regression",
    "compute_loess",
    "compute_confidence_band",
    "compute_prediction_band",
    "compute_regression",
    "evaluate_polynomial",
    "format_equation",
]
