"""Kernel density estimation and violin outline geometry.

The density estimate is evaluated on a fixed grid of ``resolution + 1`` points
spanning three bandwidths beyond the sample range on each side. Violin paths
are emitted as SVG path strings so any renderer can draw them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Sequence

import numpy as np

from ..settings import (
    DEFAULT_BANDWIDTH,
    DEFAULT_KERNEL,
    Bandwidth,
    KDESettings,
    resolve_kde_settings,
)
from .primitives import (
    as_float_array,
    interquartile_range,
    sorted_copy,
    standard_deviation,
)

logger = logging.getLogger(__name__)

MIN_BANDWIDTH = 0.001
GRID_EXTENT_BANDWIDTHS = 3.0
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


@dataclass(frozen=True)
class KDEPoint:
    x: float
    density: float


@dataclass(frozen=True)
class ViolinPath:
    """SVG outlines of a violin: each half and the closed fill shape."""

    left_path: str
    right_path: str
    combined_path: str


def _gaussian(u: np.ndarray) -> np.ndarray:
    return np.exp(-0.5 * u * u) * _INV_SQRT_2PI


def _epanechnikov(u: np.ndarray) -> np.ndarray:
    return np.where(np.abs(u) <= 1.0, 0.75 * (1.0 - u * u), 0.0)


def _uniform(u: np.ndarray) -> np.ndarray:
    return np.where(np.abs(u) <= 1.0, 0.5, 0.0)


def _triangular(u: np.ndarray) -> np.ndarray:
    return np.where(np.abs(u) <= 1.0, 1.0 - np.abs(u), 0.0)


KERNELS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "gaussian": _gaussian,
    "epanechnikov": _epanechnikov,
    "uniform": _uniform,
    "triangular": _triangular,
}


def calculate_bandwidth(
    values: Sequence[float] | np.ndarray, method: Bandwidth = DEFAULT_BANDWIDTH
) -> float:
    """Return a KDE bandwidth.

    Args:
        values: Sample values in any order.
        method: A literal bandwidth (returned unchanged), ``"silverman"``
            (``0.9 * min(sd, IQR / 1.34) * n^-0.2``) or ``"scott"``
            (``3.49 * sd * n^-1/3``). Unknown names use Silverman's rule.

    Returns:
        float: The bandwidth; ``1.0`` for an empty sample.
    """
    if not isinstance(method, str):
        return float(method)

    sorted_vals = sorted_copy(values)
    n = int(sorted_vals.size)
    if n == 0:
        return 1.0

    sd = standard_deviation(sorted_vals)
    if method == "scott":
        return 3.49 * sd * n ** (-1.0 / 3.0)
    iqr = interquartile_range(sorted_vals)
    return 0.9 * min(sd, iqr / 1.34) * n ** (-0.2)


def compute_kde(
    values: Sequence[float] | np.ndarray,
    settings: KDESettings | Mapping | None = None,
) -> list[KDEPoint]:
    """Evaluate ``(1 / (n h)) * sum K((x - xi) / h)`` on an even grid.

    Args:
        values: Sample values in any order.
        settings: ``KDESettings``, a mapping of its fields, or ``None``.

    Returns:
        list[KDEPoint]: ``resolution + 1`` points over
        ``[min - 3h, max + 3h]``; ``[]`` for an empty sample.
    """
    s = resolve_kde_settings(settings)
    arr = as_float_array(values)
    n = int(arr.size)
    if n == 0:
        return []

    h = max(calculate_bandwidth(arr, s.bandwidth), MIN_BANDWIDTH)
    kernel = KERNELS.get(s.kernel, KERNELS[DEFAULT_KERNEL])

    extent = GRID_EXTENT_BANDWIDTHS * h
    eval_min = float(np.min(arr)) - extent
    eval_max = float(np.max(arr)) + extent
    step = (eval_max - eval_min) / s.resolution
    grid = eval_min + np.arange(s.resolution + 1) * step

    u = (grid[:, None] - arr[None, :]) / h
    density = kernel(u).sum(axis=1) / (n * h)
    return [KDEPoint(x=float(x), density=float(d)) for x, d in zip(grid, density)]


def get_max_density(points: Sequence[KDEPoint]) -> float:
    if not points:
        return 0.0
    return max(p.density for p in points)


def normalize_kde(points: Sequence[KDEPoint]) -> list[KDEPoint]:
    """Scale densities so the peak equals 1; unchanged when the peak is 0."""
    peak = get_max_density(points)
    if peak == 0:
        return list(points)
    return [KDEPoint(x=p.x, density=p.density / peak) for p in points]


def _fmt(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _polyline(coords: Sequence[tuple[float, float]]) -> str:
    return " ".join(
        f"{'M' if i == 0 else 'L'} {_fmt(x)} {_fmt(y)}"
        for i, (x, y) in enumerate(coords)
    )


def create_violin_path(
    points: Sequence[KDEPoint],
    center_x: float,
    max_width: float,
    y_scale: Callable[[float], float] = float,
) -> ViolinPath:
    """Build SVG outlines for a violin centred on ``center_x``.

    Args:
        points: KDE curve; normalised internally so its widest point spans
            ``max_width``.
        center_x: Horizontal centre of the violin in output coordinates.
        max_width: Full width of the violin at its peak density.
        y_scale: Maps a sample-axis value to an output coordinate.

    Returns:
        ViolinPath: Right and left outlines plus the closed fill outline
        (right side top-down, left side reversed, ``Z``). All three are empty
        strings when ``points`` is empty.

    Raises:
        ValueError: If ``max_width`` is negative.
    """
    if max_width < 0:
        raise ValueError(f"max_width must be non-negative; got {max_width}.")
    if not points:
        return ViolinPath(left_path="", right_path="", combined_path="")

    half = max_width / 2.0
    normalized = normalize_kde(points)
    ys = [y_scale(p.x) for p in normalized]
    right = [(center_x + p.density * half, y) for p, y in zip(normalized, ys)]
    left = [(center_x - p.density * half, y) for p, y in zip(normalized, ys)]

    right_path = _polyline(right)
    left_path = _polyline(left)
    back = " ".join(f"L {_fmt(x)} {_fmt(y)}" for x, y in reversed(left))
    combined_path = f"{right_path} {back} Z"
    return ViolinPath(
        left_path=left_path, right_path=right_path, combined_path=combined_path
    )
