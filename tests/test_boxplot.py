import math

import numpy as np
import pytest

from chartstats.settings import BoxplotSettings, WHISKER_METHODS
from chartstats.stats.boxplot import (
    compute_boxplot_stats,
    compute_grouped_boxplot_stats,
)


def test_quartiles_of_one_to_ten():
    st = compute_boxplot_stats(list(range(1, 11)))
    assert st.q1 == 3.25
    assert st.median == 5.5
    assert st.q3 == 7.75
    assert st.iqr == 4.5
    assert st.mean == 5.5
    assert (st.lower_whisker, st.upper_whisker) == (1.0, 10.0)
    assert st.outliers == ()
    assert st.n == 10


def test_tukey_flags_far_value_and_snaps_whisker():
    st = compute_boxplot_stats([1, 2, 3, 4, 5, 6, 7, 8, 9, 100])
    assert st.upper_whisker == 9.0
    assert st.outliers == (100.0,)
    assert st.max == 100.0


def test_minmax_never_reports_outliers():
    st = compute_boxplot_stats([1, 2, 3, 4, 100], {"whisker_method": "minmax"})
    assert st.lower_whisker == 1.0
    assert st.upper_whisker == 100.0
    assert st.outliers == ()


def test_percentile_whiskers():
    values = np.arange(0, 101, dtype=float)
    st = compute_boxplot_stats(
        values, BoxplotSettings(whisker_method="percentile", whisker_percentile=0.1)
    )
    assert math.isclose(st.lower_whisker, 10.0)
    assert math.isclose(st.upper_whisker, 90.0)
    assert len(st.outliers) == 20


def test_stddev_whiskers_stay_inside_data():
    st = compute_boxplot_stats(
        [1, 2, 2, 3, 3, 3, 4, 4, 5, 30],
        {"whisker_method": "stddev", "whisker_std_dev": 1.0},
    )
    assert st.min <= st.lower_whisker
    assert st.upper_whisker <= st.max
    assert 30.0 in st.outliers


@pytest.mark.parametrize("method", WHISKER_METHODS)
def test_ordering_invariant_holds_for_every_method(method, rng):
    for values in (
        rng.normal(size=25),
        rng.exponential(size=11),
        [0.0, 1.0, 1.0, 1.0],
        [5.0, 5.0, 5.0, 5.0, 50.0],
    ):
        st = compute_boxplot_stats(values, {"whisker_method": method})
        assert st.min <= st.q1 <= st.median <= st.q3 <= st.max
        assert st.lower_whisker <= st.q1
        assert st.q3 <= st.upper_whisker
        assert all(o < st.lower_whisker or o > st.upper_whisker for o in st.outliers)


def test_result_does_not_depend_on_input_order(rng):
    values = rng.normal(size=31)
    shuffled = rng.permutation(values)
    assert compute_boxplot_stats(values) == compute_boxplot_stats(shuffled)


def test_input_is_not_mutated():
    values = [3.0, 1.0, 2.0]
    compute_boxplot_stats(values)
    assert values == [3.0, 1.0, 2.0]


def test_empty_sample_gives_nan_summary():
    st = compute_boxplot_stats([])
    assert st.n == 0
    assert st.outliers == ()
    assert all(
        math.isnan(v)
        for v in (st.min, st.q1, st.median, st.q3, st.max, st.mean, st.iqr)
    )


def test_single_value_collapses_to_that_value():
    st = compute_boxplot_stats([4.2])
    assert st.min == st.q1 == st.median == st.q3 == st.max == 4.2
    assert st.lower_whisker == st.upper_whisker == 4.2
    assert st.iqr == 0.0
    assert st.outliers == ()


def test_unknown_whisker_method_falls_back_to_tukey(caplog):
    values = [1, 2, 3, 4, 5, 6, 7, 8, 9, 100]
    with caplog.at_level("WARNING"):
        st = compute_boxplot_stats(values, {"whisker_method": "boxy"})
    assert st == compute_boxplot_stats(values)
    assert "boxy" in caplog.text


def test_as_dict_is_json_ready():
    d = compute_boxplot_stats([1, 2, 3, 40]).as_dict()
    assert isinstance(d["outliers"], list)
    assert d["n"] == 4


def test_grouped_stats_preserve_order_and_raw_values():
    groups = {"b": [1, 2, 3], "a": [10, 20], "empty": []}
    out = compute_grouped_boxplot_stats(groups)
    assert [g.category for g in out] == ["b", "a", "empty"]
    assert out[0].raw_values == (1.0, 2.0, 3.0)
    assert out[1].stats.median == 15.0
    assert out[2].stats.n == 0


def test_grouped_stats_accept_pairs_and_records():
    pairs = compute_grouped_boxplot_stats([("x", [1, 2]), (3, [4])])
    records = compute_grouped_boxplot_stats(
        [{"category": "x", "values": [1, 2]}, {"category": 3, "values": [4]}]
    )
    assert pairs == records
    assert pairs[1].category == "3"
