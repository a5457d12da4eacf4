import math

import numpy as np
import pytest

from chartstats.settings import KERNEL_TYPES, KDESettings
from chartstats.stats.kde import (
    KDEPoint,
    calculate_bandwidth,
    compute_kde,
    create_violin_path,
    get_max_density,
    normalize_kde,
)


def _local_maxima(points):
    d = [p.density for p in points]
    return [i for i in range(1, len(d) - 1) if d[i] > d[i - 1] and d[i] >= d[i + 1]]


def test_silverman_and_scott_bandwidths(rng):
    values = rng.normal(0.0, 2.0, size=300)
    n = values.size
    sd = np.std(values)
    q75, q25 = np.percentile(values, [75, 25])
    expected = 0.9 * min(sd, (q75 - q25) / 1.34) * n ** (-0.2)
    assert math.isclose(calculate_bandwidth(values, "silverman"), expected)
    assert math.isclose(
        calculate_bandwidth(values, "scott"), 3.49 * sd * n ** (-1 / 3)
    )


def test_literal_bandwidth_is_returned_unchanged():
    assert calculate_bandwidth([1.0, 2.0], 0.25) == 0.25
    assert calculate_bandwidth([], "silverman") == 1.0


def test_grid_spans_three_bandwidths_beyond_range():
    values = [0.0, 1.0, 2.0, 3.0, 10.0]
    points = compute_kde(values, {"bandwidth": 0.5, "resolution": 50})
    assert len(points) == 51
    assert math.isclose(points[0].x, -1.5)
    assert math.isclose(points[-1].x, 11.5)


@pytest.mark.parametrize("kernel", KERNEL_TYPES)
def test_density_is_nonnegative_and_integrates_to_about_one(kernel, rng):
    values = rng.normal(size=120)
    points = compute_kde(values, KDESettings(kernel=kernel, resolution=400))
    xs = np.array([p.x for p in points])
    ds = np.array([p.density for p in points])
    assert np.all(ds >= 0)
    area = float(np.sum((ds[1:] + ds[:-1]) / 2.0 * np.diff(xs)))
    assert abs(area - 1.0) < 0.02


def test_bimodal_sample_has_two_peaks(rng):
    values = np.concatenate([rng.normal(-5, 1, 200), rng.normal(5, 1, 200)])
    points = compute_kde(values)
    maxima = _local_maxima(points)
    assert len(maxima) >= 2
    peak_xs = [points[i].x for i in maxima]
    assert min(peak_xs) < 0 < max(peak_xs)


def test_single_value_uses_floored_bandwidth():
    points = compute_kde([2.0])
    assert len(points) == 101
    assert math.isclose(points[0].x, 2.0 - 0.003)
    assert get_max_density(points) > 0


def test_empty_sample_gives_empty_curve():
    assert compute_kde([]) == []
    assert get_max_density([]) == 0.0
    assert normalize_kde([]) == []


def test_normalize_scales_peak_to_one(rng):
    points = normalize_kde(compute_kde(rng.normal(size=50)))
    assert math.isclose(get_max_density(points), 1.0)


def test_normalize_leaves_zero_curve_unchanged():
    flat = [KDEPoint(0.0, 0.0), KDEPoint(1.0, 0.0)]
    assert normalize_kde(flat) == flat


def test_violin_paths():
    points = [KDEPoint(0.0, 0.0), KDEPoint(1.0, 2.0), KDEPoint(2.0, 1.0)]
    path = create_violin_path(points, center_x=10.0, max_width=4.0)
    assert path.right_path == "M 10 0 L 12 1 L 11 2"
    assert path.left_path == "M 10 0 L 8 1 L 9 2"
    assert path.combined_path == "M 10 0 L 12 1 L 11 2 L 9 2 L 8 1 L 10 0 Z"


def test_violin_path_applies_y_scale_and_formats_decimals():
    points = [KDEPoint(0.0, 1.0), KDEPoint(1.0, 0.5)]
    path = create_violin_path(points, 0.0, 1.0, y_scale=lambda v: 100.0 - v / 3.0)
    assert path.right_path == "M 0.5 100 L 0.25 99.6667"
    assert path.left_path == "M -0.5 100 L -0.25 99.6667"


def test_violin_path_edge_cases():
    empty = create_violin_path([], 0.0, 1.0)
    assert (empty.left_path, empty.right_path, empty.combined_path) == ("", "", "")
    with pytest.raises(ValueError):
        create_violin_path([KDEPoint(0.0, 1.0)], 0.0, -1.0)
