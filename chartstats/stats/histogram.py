"""Histogram binning rules, bin counts and cumulative distributions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

import numpy as np

from ..settings import (
    BIN_METHODS,
    DEFAULT_BIN_COUNT,
    DEFAULT_BIN_METHOD,
    MAX_BIN_COUNT,
    MIN_BIN_COUNT,
    HistogramSettings,
    resolve_histogram_settings,
)
from .primitives import interquartile_range, sorted_copy, standard_deviation

logger = logging.getLogger(__name__)

# Count used when a width-based rule produces a non-positive width.
FALLBACK_BIN_COUNT = 10


@dataclass(frozen=True)
class HistogramBin:
    """One bar of a histogram.

    ``frequency`` is ``count / n`` and ``density`` is ``count / (n * width)``
    so that ``sum(density * width) == 1``.
    """

    x0: float
    x1: float
    count: int
    frequency: float
    density: float


@dataclass(frozen=True)
class CumulativePoint:
    x: float
    cumulative: float


def _clamp_count(count: float) -> int:
    return int(max(MIN_BIN_COUNT, min(int(count), MAX_BIN_COUNT)))


def _count_from_width(value_range: float, width: float) -> int:
    if width > 0 and math.isfinite(width):
        return int(math.ceil(value_range / width))
    return FALLBACK_BIN_COUNT


def _bin_edges(min_val: float, max_val: float, num_bins: int) -> np.ndarray:
    """Equal-width edges with both ends pinned, merging bins that rounding collapses.

    Near the limits of float resolution ``min + i * width`` can repeat a
    value; the count is reduced until every edge is strictly increasing.
    """
    for count in range(num_bins, 0, -1):
        edges = min_val + np.arange(count + 1) * ((max_val - min_val) / count)
        edges[0] = min_val
        edges[-1] = max_val
        if np.all(np.diff(edges) > 0):
            if count != num_bins:
                logger.debug(
                    "Reduced %d bins to %d distinct bins over [%r, %r]",
                    num_bins,
                    count,
                    min_val,
                    max_val,
                )
            return edges
    return np.array([min_val, max_val])


def calculate_bin_count(
    values: Sequence[float] | np.ndarray,
    method: str = DEFAULT_BIN_METHOD,
    bin_count: Optional[int] = None,
    bin_width: Optional[float] = None,
) -> int:
    """Choose the number of histogram bins with a named rule.

    Args:
        values: Sample values in any order.
        method: ``sturges`` (``ceil(log2 n + 1)``), ``scott``
            (``h = 3.49 sd n^-1/3``), ``freedman-diaconis``
            (``h = 2 IQR n^-1/3``), ``sqrt`` (``ceil(sqrt n)``),
            ``fixed-count`` or ``fixed-width``.
        bin_count: Count for ``fixed-count``; defaults to 10, as does a
            non-finite count.
        bin_width: Width for ``fixed-width``; defaults to a tenth of the range.

    Returns:
        int: Bin count clamped to ``[1, 100]``; ``1`` for empty, single-value
        or zero-range samples.
    """
    sorted_vals = sorted_copy(values)
    n = int(sorted_vals.size)
    if n == 0:
        return 1
    value_range = float(sorted_vals[-1] - sorted_vals[0])
    if value_range == 0:
        return 1

    if method not in BIN_METHODS:
        logger.warning("Unknown bin method %r; using %r", method, DEFAULT_BIN_METHOD)
        method = DEFAULT_BIN_METHOD

    if method == "sturges":
        count = math.ceil(math.log2(n) + 1)
    elif method == "scott":
        h = 3.49 * standard_deviation(sorted_vals) * n ** (-1.0 / 3.0)
        count = _count_from_width(value_range, h)
    elif method == "freedman-diaconis":
        h = 2.0 * interquartile_range(sorted_vals) * n ** (-1.0 / 3.0)
        count = _count_from_width(value_range, h)
    elif method == "sqrt":
        count = math.ceil(math.sqrt(n))
    elif method == "fixed-count":
        count = DEFAULT_BIN_COUNT
        if bin_count is not None and math.isfinite(bin_count):
            count = bin_count
    else:
        width = value_range / 10.0 if bin_width is None else float(bin_width)
        count = _count_from_width(value_range, width)

    return _clamp_count(count)


def compute_histogram_bins(
    values: Sequence[float] | np.ndarray,
    settings: HistogramSettings | Mapping | None = None,
) -> list[HistogramBin]:
    """Partition ``[min, max]`` into equal-width contiguous bins.

    Every bin is half-open ``[x0, x1)`` except the last, which is closed so the
    sample maximum is counted; hence ``sum(bin.count) == n``.
    When float rounding cannot separate the requested edges (very large
    magnitudes over a tiny range) fewer, wider bins are returned.

    Args:
        values: Sample values in any order.
        settings: ``HistogramSettings``, a mapping of its fields, or ``None``.

    Returns:
        list[HistogramBin]: Bins in ascending order; ``[]`` for empty input and
        a single unit-width bin centred on the value for zero-range input.
    """
    s = resolve_histogram_settings(settings)
    sorted_vals = sorted_copy(values)
    n = int(sorted_vals.size)
    if n == 0:
        return []

    min_val = float(sorted_vals[0])
    max_val = float(sorted_vals[-1])
    value_range = max_val - min_val
    if value_range == 0:
        logger.debug("Zero-range sample; emitting one synthetic bin")
        return [
            HistogramBin(
                x0=min_val - 0.5,
                x1=min_val + 0.5,
                count=n,
                frequency=1.0,
                density=1.0,
            )
        ]

    num_bins = calculate_bin_count(
        sorted_vals, s.bin_method, bin_count=s.bin_count, bin_width=s.bin_width
    )
    edges = _bin_edges(min_val, max_val, num_bins)
    num_bins = len(edges) - 1

    bins = []
    for i in range(num_bins):
        x0 = float(edges[i])
        x1 = float(edges[i + 1])
        if i == num_bins - 1:
            inside = (sorted_vals >= x0) & (sorted_vals <= x1)
        else:
            inside = (sorted_vals >= x0) & (sorted_vals < x1)
        count = int(np.count_nonzero(inside))
        bins.append(
            HistogramBin(
                x0=x0,
                x1=x1,
                count=count,
                frequency=count / n,
                density=count / (n * (x1 - x0)),
            )
        )
    return bins


def compute_cumulative_distribution(
    bins: Sequence[HistogramBin],
) -> list[CumulativePoint]:
    """Running sum of bin frequencies, reported at each bin's right edge."""
    out = []
    cumulative = 0.0
    for b in bins:
        cumulative += b.frequency
        out.append(CumulativePoint(x=b.x1, cumulative=cumulative))
    return out
