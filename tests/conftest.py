"""Pytest configuration: repository-relative imports, headless plotting, shared samples."""

import os
import sys

import matplotlib
import numpy as np
import pandas as pd
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def grouped_frame(rng):
    """Two well-separated groups plus a few non-numeric and missing cells."""
    a = rng.normal(10.0, 1.0, size=40)
    b = rng.normal(20.0, 2.0, size=30)
    frame = pd.DataFrame(
        {
            "group": ["a"] * 40 + ["b"] * 30,
            "value": np.concatenate([a, b]).astype(object),
            "x": np.arange(70, dtype=float),
        }
    )
    frame["y"] = 3.0 * frame["x"] - 4.0 + rng.normal(0.0, 1.0, size=70)
    frame.loc[3, "value"] = "n/a"
    frame.loc[45, "value"] = None
    frame.loc[50, "group"] = None
    return frame
