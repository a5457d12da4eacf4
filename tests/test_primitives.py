import math

import numpy as np
import pytest
from scipy import stats as sps

from chartstats.stats.primitives import (
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


def test_empty_inputs_return_nan_sentinel():
    assert math.isnan(mean([]))
    assert math.isnan(minimum([]))
    assert math.isnan(maximum([]))
    assert math.isnan(variance([]))
    assert math.isnan(standard_deviation([]))
    assert math.isnan(quantile([], 0.5))
    assert total([]) == 0.0


def test_sample_variance_needs_two_values():
    assert math.isnan(variance([4.0], ddof=1))
    assert variance([4.0]) == 0.0


def test_variance_matches_numpy(rng):
    values = rng.normal(5.0, 3.0, size=200)
    assert math.isclose(variance(values), np.var(values), rel_tol=1e-12)
    assert math.isclose(variance(values, ddof=1), np.var(values, ddof=1), rel_tol=1e-12)
    assert math.isclose(standard_deviation(values, ddof=1), np.std(values, ddof=1))


def test_quantile_type7_matches_numpy_percentile(rng):
    values = np.sort(rng.exponential(2.0, size=57))
    for p in (0.0, 0.05, 0.25, 0.5, 0.75, 0.9, 1.0):
        assert math.isclose(quantile(values, p), np.percentile(values, 100 * p))


def test_quantile_clamps_out_of_range_probabilities():
    values = [1.0, 2.0, 3.0]
    assert quantile(values, -0.5) == 1.0
    assert quantile(values, 1.5) == 3.0
    assert quantile([7.0], 0.3) == 7.0


def test_quantile_does_not_mutate_input():
    values = [1.0, 2.0, 3.0, 4.0]
    quantile(values, 0.5)
    assert values == [1.0, 2.0, 3.0, 4.0]


def test_interquartile_range_one_to_ten():
    assert math.isclose(interquartile_range(np.arange(1, 11)), 4.5)


def test_normal_pdf_and_cdf_match_scipy():
    for x in np.linspace(-4.0, 4.0, 33):
        assert math.isclose(normal_pdf(x), sps.norm.pdf(x), rel_tol=1e-12)
        assert abs(normal_cdf(x) - sps.norm.cdf(x)) < 1e-6
    assert math.isclose(normal_cdf(0.0), 0.5, abs_tol=1e-9)


@pytest.mark.parametrize("p", [0.001, 0.01, 0.025, 0.1, 0.3, 0.7, 0.9, 0.975, 0.999])
def test_probit_matches_scipy(p):
    assert abs(probit(p) - sps.norm.ppf(p)) < 1e-6


def test_probit_edges():
    assert probit(0.0) == -math.inf
    assert probit(-1.0) == -math.inf
    assert probit(1.0) == math.inf
    assert probit(0.5) == 0.0
    assert math.isclose(probit(0.975), 1.959964, abs_tol=1e-5)


def test_probit_is_antisymmetric():
    for p in (0.01, 0.2, 0.4):
        assert math.isclose(probit(p), -probit(1.0 - p), rel_tol=1e-9)


@pytest.mark.parametrize("df", [5, 10, 20, 29])
def test_t_critical_close_to_student_t(df):
    expected = sps.t.ppf(0.975, df)
    assert math.isclose(t_critical(df, 0.975), expected, rel_tol=1e-2)


def test_t_critical_uses_normal_quantile_for_large_df():
    assert t_critical(30, 0.975) == probit(0.975)
    assert t_critical(500, 0.9) == probit(0.9)


def test_t_critical_undefined_for_nonpositive_df():
    assert math.isnan(t_critical(0, 0.975))
    assert math.isnan(t_critical(-3, 0.975))
