"""Numerical primitives shared by every chart statistics engine.

All functions are pure: inputs are copied into float arrays before any
order-dependent work and are never mutated. Empty or undersized inputs return
the ``math.nan`` sentinel instead of raising, so downstream engines can treat
"no data" as a value.

References:
    Abramowitz, M. and Stegun, I. A. (1964), formula 7.1.26.
    Acklam, P. J., rational approximation of the inverse normal CDF
    (Beasley-Springer-Moro coefficient family).
    Hill, G. W. (1970), Algorithm 396: Student's t-quantiles.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

_SQRT_2PI = math.sqrt(2.0 * math.pi)

# Abramowitz-Stegun 7.1.26 coefficients.
_AS_A1 = 0.254829592
_AS_A2 = -0.284496736
_AS_A3 = 1.421413741
_AS_A4 = -1.453152027
_AS_A5 = 1.061405429
_AS_P = 0.3275911

_PROBIT_A = (
    -3.969683028665376e1,
    2.209460984245205e2,
    -2.759285104469687e2,
    1.383577518672690e2,
    -3.066479806614716e1,
    2.506628277459239e0,
)
_PROBIT_B = (
    -5.447609879822406e1,
    1.615858368580409e2,
    -1.556989798598866e2,
    6.680131188771972e1,
    -1.328068155288572e1,
)
_PROBIT_C = (
    -7.784894002430293e-3,
    -3.223964580411365e-1,
    -2.400758277161838e0,
    -2.549732539343734e0,
    4.374664141464968e0,
    2.938163982698783e0,
)
_PROBIT_D = (
    7.784695709041462e-3,
    3.224671290700398e-1,
    2.445134137142996e0,
    3.754408661907416e0,
)
_PROBIT_P_LOW = 0.02425
_PROBIT_P_HIGH = 1.0 - _PROBIT_P_LOW

# Below this many degrees of freedom Hill's expansion replaces the normal quantile.
T_NORMAL_APPROX_DF = 30


def as_float_array(values: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return a 1-D float64 copy of ``values``."""
    return np.array(values, dtype=float, copy=True).reshape(-1)


def sorted_copy(values: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return an ascending float64 copy of ``values``."""
    return np.sort(as_float_array(values), kind="stable")


def mean(values: Sequence[float] | np.ndarray) -> float:
    arr = as_float_array(values)
    if arr.size == 0:
        return math.nan
    return float(np.mean(arr))


def total(values: Sequence[float] | np.ndarray) -> float:
    """Sum of ``values``; ``0.0`` for an empty sequence."""
    arr = as_float_array(values)
    return float(np.sum(arr)) if arr.size else 0.0


def minimum(values: Sequence[float] | np.ndarray) -> float:
    arr = as_float_array(values)
    if arr.size == 0:
        return math.nan
    return float(np.min(arr))


def maximum(values: Sequence[float] | np.ndarray) -> float:
    arr = as_float_array(values)
    if arr.size == 0:
        return math.nan
    return float(np.max(arr))


def variance(values: Sequence[float] | np.ndarray, ddof: int = 0) -> float:
    """Return the population (``ddof=0``) or sample (``ddof=1``) variance.

    Args:
        values: Sample values.
        ddof: Delta degrees of freedom; the denominator is ``n - ddof``.

    Returns:
        float: Variance, or ``nan`` when ``n <= ddof``.
    """
    arr = as_float_array(values)
    n = arr.size
    if n <= ddof:
        return math.nan
    centred = arr - np.mean(arr)
    return float(np.sum(centred * centred) / (n - ddof))


def standard_deviation(values: Sequence[float] | np.ndarray, ddof: int = 0) -> float:
    return math.sqrt(variance(values, ddof))


def quantile(sorted_values: Sequence[float] | np.ndarray, p: float) -> float:
    """Linear-interpolation quantile of an ascending sample.

    This is Hyndman-Fan type 7, the default of R's ``quantile()`` and
    ``numpy.percentile``: the position ``(n - 1) * p`` is interpolated between
    its floor and ceiling order statistics.

    Args:
        sorted_values: Sample sorted in ascending order.
        p: Probability; values ``<= 0`` return the minimum and values
            ``>= 1`` the maximum.

    Returns:
        float: The quantile, or ``nan`` for an empty sample.
    """
    arr = as_float_array(sorted_values)
    n = arr.size
    if n == 0:
        return math.nan
    if p <= 0:
        return float(arr[0])
    if p >= 1:
        return float(arr[-1])

    index = (n - 1) * float(p)
    lower = int(math.floor(index))
    upper = int(math.ceil(index))
    weight = index - lower
    if upper >= n:
        return float(arr[lower])
    return float(arr[lower] * (1.0 - weight) + arr[upper] * weight)


def interquartile_range(sorted_values: Sequence[float] | np.ndarray) -> float:
    return quantile(sorted_values, 0.75) - quantile(sorted_values, 0.25)


def normal_pdf(x: float) -> float:
    """Standard normal probability density."""
    return math.exp(-0.5 * x * x) / _SQRT_2PI


def normal_cdf(x: float) -> float:
    """Standard normal CDF via Abramowitz-Stegun 7.1.26 (max error ~1.5e-7)."""
    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / math.sqrt(2.0)
    t = 1.0 / (1.0 + _AS_P * z)
    poly = ((((_AS_A5 * t + _AS_A4) * t + _AS_A3) * t + _AS_A2) * t + _AS_A1) * t
    erf = 1.0 - poly * math.exp(-z * z)
    return 0.5 * (1.0 + sign * erf)


def _probit_tail(q: float) -> float:
    c, d = _PROBIT_C, _PROBIT_D
    num = ((((c[0] * q + c[1]) * q + c[2]) * q + c[3]) * q + c[4]) * q + c[5]
    den = (((d[0] * q + d[1]) * q + d[2]) * q + d[3]) * q + 1.0
    return num / den


def probit(p: float) -> float:
    """Inverse of the standard normal CDF.

    Rational approximation split into a lower tail (``p < 0.02425``), a
    central region and a mirrored upper tail.

    Args:
        p: Probability in ``(0, 1)``.

    Returns:
        float: ``-inf`` for ``p <= 0``, ``inf`` for ``p >= 1``, exactly ``0.0``
        for ``p == 0.5``, otherwise the approximate normal quantile.
    """
    if p <= 0:
        return -math.inf
    if p >= 1:
        return math.inf
    if p == 0.5:
        return 0.0

    if p < _PROBIT_P_LOW:
        return _probit_tail(math.sqrt(-2.0 * math.log(p)))
    if p <= _PROBIT_P_HIGH:
        a, b = _PROBIT_A, _PROBIT_B
        q = p - 0.5
        r = q * q
        num = (((((a[0] * r + a[1]) * r + a[2]) * r + a[3]) * r + a[4]) * r + a[5]) * q
        den = ((((b[0] * r + b[1]) * r + b[2]) * r + b[3]) * r + b[4]) * r + 1.0
        return num / den
    return -_probit_tail(math.sqrt(-2.0 * math.log(1.0 - p)))


def t_critical(df: float, p: float) -> float:
    """Approximate Student's t quantile for ``df`` degrees of freedom.

    Args:
        df: Degrees of freedom.
        p: Cumulative probability, e.g. ``0.975`` for a two-sided 95% interval.

    Returns:
        float: ``nan`` when ``df <= 0``; the normal quantile when ``df >= 30``;
        otherwise Hill's four-term asymptotic expansion around ``probit(p)``.
    """
    if df <= 0:
        return math.nan
    x = probit(p)
    if df >= T_NORMAL_APPROX_DF:
        return x

    g1 = (x**3 + x) / 4.0
    g2 = (5 * x**5 + 16 * x**3 + 3 * x) / 96.0
    g3 = (3 * x**7 + 19 * x**5 + 17 * x**3 - 15 * x) / 384.0
    g4 = (79 * x**9 + 776 * x**7 + 1482 * x**5 - 1920 * x**3 - 945 * x) / 92160.0
    return x + g1 / df + g2 / df**2 + g3 / df**3 + g4 / df**4
