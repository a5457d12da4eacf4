"""Five-number summaries, whiskers and outliers for box plots."""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Iterable, Mapping, Sequence

import numpy as np

from ..settings import BoxplotSettings, resolve_boxplot_settings
from .primitives import mean, quantile, sorted_copy, standard_deviation

logger = logging.getLogger(__name__)

TUKEY_FENCE = 1.5


@dataclass(frozen=True)
class BoxplotStats:
    """Immutable box-plot summary of one sample.

    ``outliers`` holds the sample values strictly outside
    ``[lower_whisker, upper_whisker]`` in ascending order. Every scalar is
    ``nan`` when ``n == 0``.
    """

    min: float
    q1: float
    median: float
    q3: float
    max: float
    iqr: float
    lower_whisker: float
    upper_whisker: float
    outliers: tuple[float, ...]
    mean: float
    n: int

    def as_dict(self) -> dict[str, object]:
        """Return the summary as a JSON-ready dictionary."""
        out = asdict(self)
        out["outliers"] = list(self.outliers)
        return out


@dataclass(frozen=True)
class GroupedBoxplotStats:
    category: str
    stats: BoxplotStats
    raw_values: tuple[float, ...]


def _empty_stats() -> BoxplotStats:
    nan = math.nan
    return BoxplotStats(
        min=nan,
        q1=nan,
        median=nan,
        q3=nan,
        max=nan,
        iqr=nan,
        lower_whisker=nan,
        upper_whisker=nan,
        outliers=(),
        mean=nan,
        n=0,
    )


def _snap_inward(sorted_vals: np.ndarray, low: float, high: float) -> tuple[float, float]:
    """Return the smallest sample >= ``low`` and the largest sample <= ``high``."""
    inside_low = sorted_vals[sorted_vals >= low]
    inside_high = sorted_vals[sorted_vals <= high]
    lower = float(inside_low[0]) if inside_low.size else float(sorted_vals[0])
    upper = float(inside_high[-1]) if inside_high.size else float(sorted_vals[-1])
    return lower, upper


def compute_boxplot_stats(
    values: Sequence[float] | np.ndarray,
    settings: BoxplotSettings | Mapping | None = None,
) -> BoxplotStats:
    """Compute box-plot statistics under one whisker policy.

    Quartiles use linear interpolation (R ``quantile(type=7)``), so
    ``compute_boxplot_stats(range(1, 11))`` gives ``q1=3.25``, ``median=5.5``
    and ``q3=7.75``.

    Whisker policies:
        ``tukey``: fences at ``q1 - 1.5*iqr`` and ``q3 + 1.5*iqr``; whiskers
        snap inward to the most extreme sample values inside the fences.
        ``minmax``: whiskers at the sample extremes, never any outliers.
        ``percentile``: whiskers at ``quantile(p)`` and ``quantile(1 - p)``.
        ``stddev``: ``mean +/- k*sd`` clamped to the data range, then snapped
        inward to sample values.

    Whiskers never end inside the box: the lower whisker is capped at ``q1``
    and the upper whisker floored at ``q3``.

    Args:
        values: Sample values in any order. The input is not modified.
        settings: ``BoxplotSettings``, a mapping of its fields, or ``None``
            for the defaults.

    Returns:
        BoxplotStats: The summary; an all-``nan`` summary for empty input.
    """
    s = resolve_boxplot_settings(settings)
    sorted_vals = sorted_copy(values)
    n = int(sorted_vals.size)
    if n == 0:
        logger.debug("Empty sample; returning undefined box-plot summary")
        return _empty_stats()

    min_val = float(sorted_vals[0])
    max_val = float(sorted_vals[-1])
    q1 = quantile(sorted_vals, 0.25)
    median = quantile(sorted_vals, 0.5)
    q3 = quantile(sorted_vals, 0.75)
    iqr = q3 - q1
    mean_val = mean(sorted_vals)

    method = s.whisker_method
    if method == "tukey":
        lower, upper = _snap_inward(
            sorted_vals, q1 - TUKEY_FENCE * iqr, q3 + TUKEY_FENCE * iqr
        )
    elif method == "percentile":
        lower = quantile(sorted_vals, s.whisker_percentile)
        upper = quantile(sorted_vals, 1.0 - s.whisker_percentile)
    elif method == "stddev":
        sd = standard_deviation(sorted_vals)
        low = max(min_val, mean_val - s.whisker_std_dev * sd)
        high = min(max_val, mean_val + s.whisker_std_dev * sd)
        lower, upper = _snap_inward(sorted_vals, low, high)
    else:
        lower, upper = min_val, max_val

    lower = min(lower, q1)
    upper = max(upper, q3)

    if method == "minmax":
        outliers: tuple[float, ...] = ()
    else:
        mask = (sorted_vals < lower) | (sorted_vals > upper)
        outliers = tuple(float(v) for v in sorted_vals[mask])

    return BoxplotStats(
        min=min_val,
        q1=q1,
        median=median,
        q3=q3,
        max=max_val,
        iqr=iqr,
        lower_whisker=float(lower),
        upper_whisker=float(upper),
        outliers=outliers,
        mean=mean_val,
        n=n,
    )


def _iter_groups(groups) -> Iterable[tuple[str, Sequence[float]]]:
    if isinstance(groups, Mapping):
        yield from groups.items()
        return
    for group in groups:
        if isinstance(group, Mapping):
            yield group["category"], group["values"]
        else:
            category, values = group
            yield category, values


def compute_grouped_boxplot_stats(
    groups,
    settings: BoxplotSettings | Mapping | None = None,
) -> list[GroupedBoxplotStats]:
    """Apply :func:`compute_boxplot_stats` independently to each group.

    Args:
        groups: A ``{category: values}`` mapping, or an iterable of
            ``(category, values)`` pairs or ``{"category", "values"}`` mappings.
        settings: Shared whisker settings.

    Returns:
        list[GroupedBoxplotStats]: One entry per group, in input order.
    """
    resolved = resolve_boxplot_settings(settings)
    out = []
    for category, vals in _iter_groups(groups):
        raw = tuple(float(v) for v in vals)
        out.append(
            GroupedBoxplotStats(
                category=str(category),
                stats=compute_boxplot_stats(raw, resolved),
                raw_values=raw,
            )
        )
    return out
