"""Settings records for the chart statistics engines.

Every engine accepts ``None``, a settings instance, or a plain mapping of
field names. ``resolve_*`` functions turn those into a fully populated frozen
record before any computation. Option literals outside the documented closed
sets fall back to the default value with a logged warning.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional, Union

logger = logging.getLogger(__name__)

WHISKER_METHODS: tuple[str, ...] = ("tukey", "minmax", "percentile", "stddev")
BIN_METHODS: tuple[str, ...] = (
    "sturges",
    "scott",
    "freedman-diaconis",
    "sqrt",
    "fixed-count",
    "fixed-width",
)
KERNEL_TYPES: tuple[str, ...] = ("gaussian", "epanechnikov", "uniform", "triangular")
BANDWIDTH_METHODS: tuple[str, ...] = ("silverman", "scott")
REGRESSION_TYPES: tuple[str, ...] = ("none", "linear", "polynomial", "loess")

DEFAULT_WHISKER_METHOD = "tukey"
DEFAULT_WHISKER_PERCENTILE = 0.05
DEFAULT_WHISKER_STD_DEV = 2.0

DEFAULT_BIN_METHOD = "sturges"
DEFAULT_BIN_COUNT = 10
MIN_BIN_COUNT = 1
MAX_BIN_COUNT = 100

DEFAULT_KERNEL = "gaussian"
DEFAULT_BANDWIDTH = "silverman"
DEFAULT_RESOLUTION = 100

DEFAULT_REGRESSION_TYPE = "linear"
DEFAULT_POLYNOMIAL_DEGREE = 2
DEFAULT_LOESS_BANDWIDTH = 0.3
DEFAULT_CONFIDENCE_LEVEL = 0.95

Bandwidth = Union[str, float]


@dataclass(frozen=True)
class BoxplotSettings:
    """Whisker policy for box plots.

    Attributes:
        whisker_method: One of ``WHISKER_METHODS``.
        whisker_percentile: Lower tail probability for the ``percentile``
            method (``0.05`` draws whiskers at the 5th/95th percentiles).
        whisker_std_dev: Multiplier ``k`` for the ``stddev`` method.
    """

    whisker_method: str = DEFAULT_WHISKER_METHOD
    whisker_percentile: float = DEFAULT_WHISKER_PERCENTILE
    whisker_std_dev: float = DEFAULT_WHISKER_STD_DEV


@dataclass(frozen=True)
class HistogramSettings:
    """Binning rule for histograms; counts and widths only apply to fixed rules."""

    bin_method: str = DEFAULT_BIN_METHOD
    bin_count: Optional[int] = None
    bin_width: Optional[float] = None


@dataclass(frozen=True)
class KDESettings:
    kernel: str = DEFAULT_KERNEL
    bandwidth: Bandwidth = DEFAULT_BANDWIDTH
    resolution: int = DEFAULT_RESOLUTION


@dataclass(frozen=True)
class RegressionSettings:
    type: str = DEFAULT_REGRESSION_TYPE
    polynomial_degree: int = DEFAULT_POLYNOMIAL_DEGREE
    loess_bandwidth: float = DEFAULT_LOESS_BANDWIDTH
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL


def _coerce(cls, value):
    if value is None:
        return cls()
    if isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        known = {f.name for f in fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise TypeError(
                f"Unknown {cls.__name__} fields: {sorted(unknown)}. "
                f"Expected a subset of {sorted(known)}."
            )
        return cls(**dict(value))
    raise TypeError(
        f"Expected {cls.__name__}, mapping or None; got {type(value).__name__}."
    )


def _choice(value: str, allowed: tuple[str, ...], default: str, label: str) -> str:
    if value in allowed:
        return value
    logger.warning("Unknown %s %r; falling back to %r", label, value, default)
    return default


def _finite_or(value, default, label: str):
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if math.isfinite(number):
        return number
    logger.warning("Invalid %s %r; falling back to %r", label, value, default)
    return default


def resolve_boxplot_settings(
    settings: BoxplotSettings | Mapping | None = None,
) -> BoxplotSettings:
    s = _coerce(BoxplotSettings, settings)
    return replace(
        s,
        whisker_method=_choice(
            s.whisker_method, WHISKER_METHODS, DEFAULT_WHISKER_METHOD, "whisker method"
        ),
        whisker_percentile=_finite_or(
            s.whisker_percentile, DEFAULT_WHISKER_PERCENTILE, "whisker percentile"
        ),
        whisker_std_dev=_finite_or(
            s.whisker_std_dev, DEFAULT_WHISKER_STD_DEV, "whisker std dev"
        ),
    )


def resolve_histogram_settings(
    settings: HistogramSettings | Mapping | None = None,
) -> HistogramSettings:
    s = _coerce(HistogramSettings, settings)
    bin_count = s.bin_count
    if bin_count is not None:
        bin_count = int(_finite_or(bin_count, DEFAULT_BIN_COUNT, "bin count"))
    bin_width = s.bin_width
    if bin_width is not None:
        bin_width = _finite_or(bin_width, None, "bin width")
    return replace(
        s,
        bin_method=_choice(s.bin_method, BIN_METHODS, DEFAULT_BIN_METHOD, "bin method"),
        bin_count=bin_count,
        bin_width=bin_width,
    )


def resolve_kde_settings(settings: KDESettings | Mapping | None = None) -> KDESettings:
    """Resolve KDE settings; a numeric bandwidth is kept as a literal bandwidth."""
    s = _coerce(KDESettings, settings)
    bandwidth = s.bandwidth
    if isinstance(bandwidth, str):
        bandwidth = _choice(bandwidth, BANDWIDTH_METHODS, DEFAULT_BANDWIDTH, "bandwidth")
    else:
        bandwidth = _finite_or(bandwidth, DEFAULT_BANDWIDTH, "bandwidth")
    resolution = DEFAULT_RESOLUTION
    if s.resolution is not None and s.resolution >= 1:
        resolution = int(s.resolution)
    return replace(
        s,
        kernel=_choice(s.kernel, KERNEL_TYPES, DEFAULT_KERNEL, "kernel"),
        bandwidth=bandwidth,
        resolution=resolution,
    )


def resolve_regression_settings(
    settings: RegressionSettings | Mapping | None = None,
) -> RegressionSettings:
    s = _coerce(RegressionSettings, settings)
    degree = DEFAULT_POLYNOMIAL_DEGREE
    if s.polynomial_degree is not None and s.polynomial_degree >= 1:
        degree = int(s.polynomial_degree)
    confidence = _finite_or(
        s.confidence_level, DEFAULT_CONFIDENCE_LEVEL, "confidence level"
    )
    if not 0.0 < confidence < 1.0:
        logger.warning(
            "Confidence level %r outside (0, 1); falling back to %r",
            confidence,
            DEFAULT_CONFIDENCE_LEVEL,
        )
        confidence = DEFAULT_CONFIDENCE_LEVEL
    return replace(
        s,
        type=_choice(
            s.type, REGRESSION_TYPES, DEFAULT_REGRESSION_TYPE, "regression type"
        ),
        polynomial_degree=degree,
        loess_bandwidth=_finite_or(
            s.loess_bandwidth, DEFAULT_LOESS_BANDWIDTH, "LOESS bandwidth"
        ),
        confidence_level=confidence,
    )
