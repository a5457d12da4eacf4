import math

import numpy as np
import pytest

from chartstats.settings import BIN_METHODS, HistogramSettings
from chartstats.stats.histogram import (
    calculate_bin_count,
    compute_cumulative_distribution,
    compute_histogram_bins,
)


def test_sturges_and_sqrt_counts_for_one_to_hundred():
    values = np.arange(1, 101)
    assert calculate_bin_count(values, "sturges") == 8
    assert calculate_bin_count(values, "sqrt") == 10


def test_width_rules_follow_their_formulas(rng):
    values = rng.normal(0.0, 1.0, size=500)
    value_range = values.max() - values.min()
    n = values.size

    h_scott = 3.49 * np.std(values) * n ** (-1 / 3)
    assert calculate_bin_count(values, "scott") == math.ceil(value_range / h_scott)

    q75, q25 = np.percentile(values, [75, 25])
    h_fd = 2 * (q75 - q25) * n ** (-1 / 3)
    assert calculate_bin_count(values, "freedman-diaconis") == math.ceil(
        value_range / h_fd
    )


def test_fixed_rules_and_clamping():
    values = np.linspace(0.0, 10.0, 50)
    assert calculate_bin_count(values, "fixed-count", bin_count=5) == 5
    assert calculate_bin_count(values, "fixed-count") == 10
    assert calculate_bin_count(values, "fixed-count", bin_count=1000) == 100
    assert calculate_bin_count(values, "fixed-count", bin_count=0) == 1
    assert calculate_bin_count(values, "fixed-width", bin_width=2.5) == 4
    assert calculate_bin_count(values, "fixed-width") == 10


def test_non_finite_fixed_settings_fall_back():
    values = np.linspace(0.0, 10.0, 50)
    assert calculate_bin_count(values, "fixed-count", bin_count=float("nan")) == 10
    assert calculate_bin_count(values, "fixed-count", bin_count=float("inf")) == 10
    assert calculate_bin_count(values, "fixed-width", bin_width=float("nan")) == 10
    bins = compute_histogram_bins(
        values, {"bin_method": "fixed-count", "bin_count": float("nan")}
    )
    assert len(bins) == 10


def test_freedman_diaconis_with_zero_iqr_uses_fallback():
    values = [1.0] * 20 + [2.0]
    assert calculate_bin_count(values, "freedman-diaconis") == 10


def test_degenerate_samples_need_one_bin():
    assert calculate_bin_count([]) == 1
    assert calculate_bin_count([3.0]) == 1
    assert calculate_bin_count([3.0, 3.0, 3.0], "sqrt") == 1


@pytest.mark.parametrize("method", BIN_METHODS)
def test_bins_are_contiguous_and_count_every_value(method, rng):
    values = rng.gamma(2.0, 3.0, size=137)
    bins = compute_histogram_bins(values, HistogramSettings(bin_method=method))

    assert sum(b.count for b in bins) == values.size
    assert bins[0].x0 == values.min()
    assert bins[-1].x1 == values.max()
    for left, right in zip(bins, bins[1:]):
        assert left.x1 == right.x0
    assert math.isclose(sum(b.frequency for b in bins), 1.0)
    assert math.isclose(sum(b.density * (b.x1 - b.x0) for b in bins), 1.0)
    width = (values.max() - values.min()) / len(bins)
    edges = [b.x0 for b in bins] + [bins[-1].x1]
    assert np.allclose(np.diff(edges), width)


def test_maximum_lands_in_last_bin():
    bins = compute_histogram_bins(
        [0.0, 1.0, 2.0, 3.0, 4.0], {"bin_method": "fixed-count", "bin_count": 4}
    )
    assert [b.count for b in bins] == [1, 1, 1, 2]
    assert [b.x0 for b in bins] == [0.0, 1.0, 2.0, 3.0]


def test_empty_sample_has_no_bins():
    assert compute_histogram_bins([]) == []
    assert compute_cumulative_distribution([]) == []


def test_zero_range_sample_gives_one_unit_bin():
    bins = compute_histogram_bins([7.0, 7.0, 7.0])
    assert len(bins) == 1
    b = bins[0]
    assert (b.x0, b.x1) == (6.5, 7.5)
    assert b.count == 3
    assert b.frequency == 1.0
    assert b.density * (b.x1 - b.x0) == 1.0


def test_cumulative_distribution_ends_at_one(rng):
    bins = compute_histogram_bins(rng.uniform(size=80))
    cumulative = compute_cumulative_distribution(bins)
    assert [c.x for c in cumulative] == [b.x1 for b in bins]
    ys = [c.cumulative for c in cumulative]
    assert all(a <= b for a, b in zip(ys, ys[1:]))
    assert math.isclose(ys[-1], 1.0)


def test_input_order_does_not_change_bins(rng):
    values = rng.normal(size=60)
    assert compute_histogram_bins(values) == compute_histogram_bins(values[::-1])


def test_large_magnitude_values_never_give_empty_width_bins():
    values = [1e16, 1e16 + 2.0]
    bins = compute_histogram_bins(values)
    assert all(b.x0 < b.x1 for b in bins)
    assert bins[0].x0 == 1e16 and bins[-1].x1 == 1e16 + 2.0
    assert sum(b.count for b in bins) == 2
    assert math.isclose(sum(b.density * (b.x1 - b.x0) for b in bins), 1.0)


def test_large_magnitude_values_with_many_requested_bins():
    values = [1e16, 1e16 + 4.0, 1e16 + 8.0]
    bins = compute_histogram_bins(
        values, {"bin_method": "fixed-count", "bin_count": 100}
    )
    assert 1 <= len(bins) <= 4
    assert all(b.x0 < b.x1 for b in bins)
    assert sum(b.count for b in bins) == 3
