import pytest

from chartstats.settings import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_POLYNOMIAL_DEGREE,
    DEFAULT_RESOLUTION,
    BoxplotSettings,
    HistogramSettings,
    KDESettings,
    RegressionSettings,
    resolve_boxplot_settings,
    resolve_histogram_settings,
    resolve_kde_settings,
    resolve_regression_settings,
)


def test_none_resolves_to_defaults():
    assert resolve_boxplot_settings(None) == BoxplotSettings()
    assert resolve_histogram_settings(None) == HistogramSettings()
    assert resolve_kde_settings(None) == KDESettings()
    assert resolve_regression_settings(None) == RegressionSettings()


def test_mapping_overrides_only_named_fields():
    s = resolve_kde_settings({"kernel": "epanechnikov", "bandwidth": 0.4})
    assert s.kernel == "epanechnikov"
    assert s.bandwidth == 0.4
    assert s.resolution == DEFAULT_RESOLUTION


def test_unknown_mapping_key_is_a_type_error():
    with pytest.raises(TypeError, match="bins"):
        resolve_histogram_settings({"bins": 12})
    with pytest.raises(TypeError):
        resolve_boxplot_settings(["tukey"])


def test_unknown_literals_fall_back_with_warning(caplog):
    with caplog.at_level("WARNING"):
        h = resolve_histogram_settings({"bin_method": "doane"})
        k = resolve_kde_settings({"kernel": "cosine", "bandwidth": "lscv"})
        r = resolve_regression_settings({"type": "spline"})
    assert h.bin_method == "sturges"
    assert (k.kernel, k.bandwidth) == ("gaussian", "silverman")
    assert r.type == "linear"
    assert "doane" in caplog.text and "spline" in caplog.text


def test_regression_numeric_fallbacks():
    r = resolve_regression_settings(
        {
            "polynomial_degree": 0,
            "confidence_level": 1.5,
            "loess_bandwidth": float("nan"),
        }
    )
    assert r.polynomial_degree == DEFAULT_POLYNOMIAL_DEGREE
    assert r.confidence_level == DEFAULT_CONFIDENCE_LEVEL
    assert r.loess_bandwidth == 0.3


def test_kde_resolution_below_one_uses_default():
    assert resolve_kde_settings({"resolution": 0}).resolution == DEFAULT_RESOLUTION


def test_settings_are_frozen():
    s = BoxplotSettings()
    with pytest.raises(AttributeError):
        s.whisker_method = "minmax"


def test_histogram_non_finite_numbers_fall_back(caplog):
    with caplog.at_level("WARNING"):
        s = resolve_histogram_settings(
            {"bin_count": float("nan"), "bin_width": float("inf")}
        )
    assert s.bin_count == 10
    assert s.bin_width is None
    assert "bin count" in caplog.text
    assert resolve_histogram_settings({"bin_count": 7.0}).bin_count == 7
