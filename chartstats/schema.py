"""Define standardized column names for summary DataFrames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SummaryColumns:
    """Container for standardized column labels.

    These column names are used by every table built in ``analysis`` and
    written by ``output``, so CSV exports and plots agree on naming.

    Attributes:
        group: Category label of a grouped sample. Ungrouped samples use
            ``ALL_GROUP``.
        n: Number of finite sample values that entered the computation.
        lower_whisker, upper_whisker: Whisker ends under the selected policy.
        n_outliers: Count of values outside the whiskers.
        bin_start, bin_end: Histogram bin edges; all bins are ``[start, end)``
            except the last, which is closed.
        cumulative: Running frequency at the bin's right edge.
        x, density: KDE grid coordinate and estimated density.
    """

    group: str = "Group"
    n: str = "n"
    min: str = "Min"
    q1: str = "Q1"
    median: str = "Median"
    q3: str = "Q3"
    max: str = "Max"
    iqr: str = "IQR"
    mean: str = "Mean"
    lower_whisker: str = "Lower Whisker"
    upper_whisker: str = "Upper Whisker"
    n_outliers: str = "Outliers (n)"
    bin_start: str = "Bin Start"
    bin_end: str = "Bin End"
    count: str = "Count"
    frequency: str = "Frequency"
    density: str = "Density"
    cumulative: str = "Cumulative Frequency"
    x: str = "x"
    regression_type: str = "Regression"
    equation: str = "Equation"
    r_squared: str = "R²"
    adjusted_r_squared: str = "Adjusted R²"
    standard_error: str = "Standard Error"


COLUMNS = SummaryColumns()
ALL_GROUP = "All"
