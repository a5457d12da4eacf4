"""Provide regression fits and interval bands for scatter-plot trend lines.

This module supports:
- ordinary least-squares straight lines with R^2, adjusted R^2 and residuals,
- polynomial least squares through the normal equations,
- LOESS local linear smoothing with tricube weights, and
- confidence and prediction bands for straight-line fits.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Callable, Mapping, Optional, Sequence

import numpy as np

from ..settings import RegressionSettings, resolve_regression_settings
from .primitives import as_float_array, t_critical

logger = logging.getLogger(__name__)

CURVE_SEGMENTS = 50
BAND_SEGMENTS = 50
MIN_LOESS_NEIGHBORS = 3
PIVOT_TOLERANCE = 1e-10
LOESS_EQUATION = "LOESS smoothing"

Predictor = Callable[[float], float]


def _undefined(_x: float) -> float:
    return math.nan


@dataclass(frozen=True)
class BandPoint:
    x: float
    y: float
    lower: float
    upper: float


@dataclass(frozen=True)
class CurvePoint:
    x: float
    y: float


@dataclass(frozen=True)
class LinearRegressionResult:
    slope: float
    intercept: float
    r_squared: float
    adjusted_r_squared: float
    standard_error: float
    residuals: tuple[float, ...]
    n: int
    predict: Predictor = field(repr=False, compare=False)


@dataclass(frozen=True)
class PolynomialFit:
    coefficients: tuple[float, ...]
    r_squared: float
    predict: Predictor = field(repr=False, compare=False)


@dataclass(frozen=True)
class LoessFit:
    points: tuple[CurvePoint, ...]
    predict: Predictor = field(repr=False, compare=False)


@dataclass(frozen=True)
class RegressionResult:
    """Unified fit summary consumed by scatter-plot renderers.

    ``predict`` is the only non-data member; ``as_dict`` drops it so the result
    can be serialized. Callers that need to rebuild it can use
    :func:`evaluate_polynomial` with ``coefficients`` for linear and polynomial
    fits.
    """

    type: str
    coefficients: tuple[float, ...]
    r_squared: float
    adjusted_r_squared: float
    standard_error: float
    confidence_band: tuple[BandPoint, ...]
    prediction_band: tuple[BandPoint, ...]
    equation: str
    n: int
    curve: tuple[CurvePoint, ...]
    predict: Predictor = field(repr=False, compare=False)

    def as_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "coefficients": list(self.coefficients),
            "r_squared": self.r_squared,
            "adjusted_r_squared": self.adjusted_r_squared,
            "standard_error": self.standard_error,
            "confidence_band": [asdict(p) for p in self.confidence_band],
            "prediction_band": [asdict(p) for p in self.prediction_band],
            "equation": self.equation,
            "n": self.n,
            "curve": [asdict(p) for p in self.curve],
        }


def _paired_arrays(x, y) -> tuple[np.ndarray, np.ndarray]:
    x_arr = as_float_array(x)
    y_arr = as_float_array(y)
    if x_arr.size != y_arr.size:
        raise ValueError(
            f"x and y must have the same length; got {x_arr.size} and {y_arr.size}."
        )
    return x_arr, y_arr


def _r_squared(y: np.ndarray, fitted: np.ndarray) -> float:
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    ss_res = float(np.sum((y - fitted) ** 2))
    return 1.0 - ss_res / ss_tot if ss_tot != 0 else 0.0


def evaluate_polynomial(coefficients: Sequence[float], x: float) -> float:
    """Evaluate ``sum(c_i * x**i)`` with coefficients ordered low to high."""
    if len(coefficients) == 0:
        return math.nan
    y = 0.0
    for power, coef in enumerate(coefficients):
        y += coef * x**power
    return y


def _sample_curve(x: np.ndarray, predict: Predictor) -> tuple[CurvePoint, ...]:
    if x.size == 0:
        return ()
    grid = np.linspace(float(np.min(x)), float(np.max(x)), CURVE_SEGMENTS + 1)
    return tuple(CurvePoint(x=float(g), y=float(predict(float(g)))) for g in grid)


def compute_linear_regression(
    x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray
) -> LinearRegressionResult:
    """Fit an ordinary least-squares straight line.

    Args:
        x (numpy.ndarray): Independent variable values.
        y (numpy.ndarray): Dependent variable values, paired with ``x``.

    Returns:
        LinearRegressionResult: Slope, intercept, ``r_squared``
        (``1 - SSres/SStot``, 0 when ``SStot == 0``), ``adjusted_r_squared``,
        ``standard_error`` (``sqrt(SSres / (n - 2))``), residuals and a
        closed-form ``predict``.

    Raises:
        ValueError: If ``x`` and ``y`` differ in length.

    Note:
        Fewer than two points give ``nan`` scalars and a ``predict`` that
        always returns ``nan``. With exactly two points the adjusted R^2 and
        standard error have zero residual degrees of freedom and are ``nan``.
        The slope is 0 when every ``x`` is identical.

    References:
        Ordinary least squares linear regression via centred sums.
    """
    x_arr, y_arr = _paired_arrays(x, y)
    n = int(x_arr.size)
    if n < 2:
        nan = math.nan
        return LinearRegressionResult(
            slope=nan,
            intercept=nan,
            r_squared=nan,
            adjusted_r_squared=nan,
            standard_error=nan,
            residuals=(),
            n=n,
            predict=_undefined,
        )

    x_mean = float(x_arr.mean())
    y_mean = float(y_arr.mean())
    dx = x_arr - x_mean
    sxx = float(np.sum(dx * dx))
    sxy = float(np.sum(dx * (y_arr - y_mean)))
    slope = sxy / sxx if sxx != 0 else 0.0
    intercept = y_mean - slope * x_mean

    def predict(value: float) -> float:
        return slope * value + intercept

    resid = y_arr - (slope * x_arr + intercept)
    ss_res = float(np.sum(resid**2))
    r2 = _r_squared(y_arr, slope * x_arr + intercept)

    dof = n - 2
    if dof > 0:
        adjusted = 1.0 - (1.0 - r2) * (n - 1) / dof
        standard_error = math.sqrt(ss_res / dof)
    else:
        adjusted = math.nan
        standard_error = math.nan

    return LinearRegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r2,
        adjusted_r_squared=adjusted,
        standard_error=standard_error,
        residuals=tuple(float(r) for r in resid),
        n=n,
        predict=predict,
    )


def _solve_linear_system(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Gaussian elimination with partial pivoting.

    Columns whose pivot magnitude is below ``PIVOT_TOLERANCE`` are skipped and
    their unknowns set to 0, so singular systems still return a vector.
    """
    size = a.shape[0]
    aug = np.hstack([a.astype(float), b.astype(float).reshape(-1, 1)])

    for col in range(size):
        pivot = col + int(np.argmax(np.abs(aug[col:, col])))
        if pivot != col:
            aug[[col, pivot]] = aug[[pivot, col]]
        if abs(aug[col, col]) < PIVOT_TOLERANCE:
            continue
        for row in range(col + 1, size):
            factor = aug[row, col] / aug[col, col]
            aug[row, col:] -= factor * aug[col, col:]

    solution = np.zeros(size)
    for i in range(size - 1, -1, -1):
        acc = aug[i, size] - float(np.dot(aug[i, i + 1 : size], solution[i + 1 :]))
        solution[i] = acc / aug[i, i] if abs(aug[i, i]) > PIVOT_TOLERANCE else 0.0
    return solution


def compute_polynomial_regression(
    x: Sequence[float] | np.ndarray,
    y: Sequence[float] | np.ndarray,
    degree: int,
) -> PolynomialFit:
    """Fit a polynomial of ``degree`` by least squares.

    The normal equations ``(X^T X) c = X^T y`` built from the Vandermonde
    matrix are solved with :func:`_solve_linear_system`. This is adequate for
    the low degrees used by scatter-plot trend lines; high degrees over wide x
    ranges are ill-conditioned.

    Returns:
        PolynomialFit: Coefficients ordered from the constant term upward,
        ``r_squared`` and ``predict``. When ``n <= degree`` the coefficients
        are empty, ``r_squared`` is ``nan`` and ``predict`` returns ``nan``.
    """
    x_arr, y_arr = _paired_arrays(x, y)
    degree = int(degree)
    if x_arr.size <= degree:
        logger.debug(
            "Polynomial degree %d needs more than %d points", degree, x_arr.size
        )
        return PolynomialFit(coefficients=(), r_squared=math.nan, predict=_undefined)

    vander = np.vander(x_arr, degree + 1, increasing=True)
    xtx = vander.T @ vander
    xty = vander.T @ y_arr
    coefficients = tuple(float(c) for c in _solve_linear_system(xtx, xty))

    def predict(value: float) -> float:
        return evaluate_polynomial(coefficients, value)

    fitted = np.array([predict(float(v)) for v in x_arr])
    return PolynomialFit(
        coefficients=coefficients,
        r_squared=_r_squared(y_arr, fitted),
        predict=predict,
    )


def _tricube(d: np.ndarray) -> np.ndarray:
    return np.where(d < 1.0, (1.0 - d**3) ** 3, 0.0)


def compute_loess(
    x: Sequence[float] | np.ndarray,
    y: Sequence[float] | np.ndarray,
    bandwidth: float = 0.3,
) -> LoessFit:
    """Locally weighted linear smoothing.

    Each query uses the ``k = max(3, floor(bandwidth * n))`` nearest samples,
    weighted by the tricube kernel of their distance scaled by the farthest
    selected neighbour, and returns the weighted straight-line fit at the
    query. Degenerate local systems fall back to the weighted mean.

    Returns:
        LoessFit: ``predict`` plus 51 curve points spanning ``[min x, max x]``.
        Empty input gives no points and a ``predict`` returning ``nan``.
    """
    x_arr, y_arr = _paired_arrays(x, y)
    n = int(x_arr.size)
    if n == 0:
        return LoessFit(points=(), predict=_undefined)

    k = max(MIN_LOESS_NEIGHBORS, int(math.floor(bandwidth * n)))

    def predict(value: float) -> float:
        dist = np.abs(value - x_arr)
        nearest = np.argsort(dist, kind="stable")[:k]
        max_dist = float(dist[nearest[-1]]) or 1.0
        w = _tricube(dist[nearest] / max_dist)
        xs = x_arr[nearest]
        ys = y_arr[nearest]

        sum_w = float(np.sum(w))
        sum_wx = float(np.sum(w * xs))
        sum_wy = float(np.sum(w * ys))
        sum_wx2 = float(np.sum(w * xs * xs))
        sum_wxy = float(np.sum(w * xs * ys))

        denom = sum_w * sum_wx2 - sum_wx * sum_wx
        if abs(denom) < PIVOT_TOLERANCE:
            return sum_wy / sum_w if sum_w > 0 else math.nan
        slope = (sum_w * sum_wxy - sum_wx * sum_wy) / denom
        intercept = (sum_wy - slope * sum_wx) / sum_w
        return slope * value + intercept

    return LoessFit(points=_sample_curve(x_arr, predict), predict=predict)


def _band(
    x: np.ndarray,
    regression: LinearRegressionResult,
    confidence_level: float,
    num_points: int,
    extra: float,
) -> list[BandPoint]:
    n = regression.n
    if n < 3:
        return []

    x_mean = float(x.mean())
    sxx = float(np.sum((x - x_mean) ** 2))
    se = regression.standard_error
    t = t_critical(n - 2, 1.0 - (1.0 - confidence_level) / 2.0)

    x_min = float(np.min(x))
    step = (float(np.max(x)) - x_min) / num_points
    band = []
    for i in range(num_points + 1):
        xi = x_min + i * step
        yi = regression.predict(xi)
        leverage = (xi - x_mean) ** 2 / sxx if sxx != 0 else 0.0
        margin = t * se * math.sqrt(extra + 1.0 / n + leverage)
        band.append(BandPoint(x=xi, y=yi, lower=yi - margin, upper=yi + margin))
    return band


def compute_confidence_band(
    x: Sequence[float] | np.ndarray,
    y: Sequence[float] | np.ndarray,
    regression: LinearRegressionResult,
    confidence_level: float = 0.95,
    num_points: int = BAND_SEGMENTS,
) -> list[BandPoint]:
    """Interval for the mean response of a straight-line fit.

    Half-width is ``t * SE * sqrt(1/n + (x - xbar)^2 / Sxx)`` with ``t`` the
    two-sided Student's t critical value on ``n - 2`` degrees of freedom.
    Returns ``[]`` when the fit has fewer than three points.
    """
    x_arr, _ = _paired_arrays(x, y)
    return _band(x_arr, regression, confidence_level, num_points, extra=0.0)


def compute_prediction_band(
    x: Sequence[float] | np.ndarray,
    y: Sequence[float] | np.ndarray,
    regression: LinearRegressionResult,
    confidence_level: float = 0.95,
    num_points: int = BAND_SEGMENTS,
) -> list[BandPoint]:
    """Interval for a single new observation; always wider than the confidence band."""
    x_arr, _ = _paired_arrays(x, y)
    return _band(x_arr, regression, confidence_level, num_points, extra=1.0)


def _fmt_coef(value: float) -> str:
    return f"{value:.4f}"


def _signed(value: float) -> str:
    return f"+ {_fmt_coef(value)}" if value >= 0 else f"- {_fmt_coef(abs(value))}"


def _term(power: int) -> str:
    if power == 0:
        return ""
    if power == 1:
        return "x"
    return f"x^{power}"


def format_equation(regression_type: str, coefficients: Sequence[float]) -> str:
    """Render a fitted equation for chart annotations.

    Linear fits (coefficients ``[intercept, slope]``) render as
    ``"y = 2.0000x + 1.0000"``. Polynomial fits list terms from the highest
    degree down with signed joins, e.g. ``"y = 1.0000x^2 - 2.0000x + 3.0000"``.
    Any other type, or an empty coefficient list, yields ``""``.
    """
    coefs = list(coefficients)
    if regression_type == "linear" and len(coefs) == 2:
        intercept, slope = coefs
        return f"y = {_fmt_coef(slope)}x {_signed(intercept)}"

    if regression_type == "polynomial" and coefs:
        highest = len(coefs) - 1
        parts = [f"{_fmt_coef(coefs[highest])}{_term(highest)}"]
        for power in range(highest - 1, -1, -1):
            parts.append(f"{_signed(coefs[power])}{_term(power)}")
        return "y = " + " ".join(parts)

    return ""


def compute_regression(
    x: Sequence[float] | np.ndarray,
    y: Sequence[float] | np.ndarray,
    settings: RegressionSettings | Mapping | None = None,
) -> Optional[RegressionResult]:
    """Fit the trend line selected by ``settings.type``.

    Args:
        x (numpy.ndarray): Independent variable values.
        y (numpy.ndarray): Dependent variable values, paired with ``x``.
        settings: ``RegressionSettings``, a mapping of its fields, or ``None``
            (linear fit, degree 2, LOESS bandwidth 0.3, 95% bands).

    Returns:
        RegressionResult | None: ``None`` for type ``"none"`` or fewer than two
        points. Only linear fits carry confidence/prediction bands, a standard
        error and an adjusted R^2; the other fits report ``nan`` for those.

    Raises:
        ValueError: If ``x`` and ``y`` differ in length.
    """
    s = resolve_regression_settings(settings)
    x_arr, y_arr = _paired_arrays(x, y)
    n = int(x_arr.size)
    if s.type == "none" or n < 2:
        return None

    if s.type == "polynomial":
        poly = compute_polynomial_regression(x_arr, y_arr, s.polynomial_degree)
        return RegressionResult(
            type="polynomial",
            coefficients=poly.coefficients,
            r_squared=poly.r_squared,
            adjusted_r_squared=math.nan,
            standard_error=math.nan,
            confidence_band=(),
            prediction_band=(),
            equation=format_equation("polynomial", poly.coefficients),
            n=n,
            curve=_sample_curve(x_arr, poly.predict) if poly.coefficients else (),
            predict=poly.predict,
        )

    if s.type == "loess":
        loess = compute_loess(x_arr, y_arr, s.loess_bandwidth)
        return RegressionResult(
            type="loess",
            coefficients=(),
            r_squared=math.nan,
            adjusted_r_squared=math.nan,
            standard_error=math.nan,
            confidence_band=(),
            prediction_band=(),
            equation=LOESS_EQUATION,
            n=n,
            curve=loess.points,
            predict=loess.predict,
        )

    lr = compute_linear_regression(x_arr, y_arr)
    coefficients = (lr.intercept, lr.slope)
    return RegressionResult(
        type="linear",
        coefficients=coefficients,
        r_squared=lr.r_squared,
        adjusted_r_squared=lr.adjusted_r_squared,
        standard_error=lr.standard_error,
        confidence_band=tuple(
            compute_confidence_band(x_arr, y_arr, lr, s.confidence_level)
        ),
        prediction_band=tuple(
            compute_prediction_band(x_arr, y_arr, lr, s.confidence_level)
        ),
        equation=format_equation("linear", coefficients),
        n=n,
        curve=_sample_curve(x_arr, lr.predict),
        predict=lr.predict,
    )
