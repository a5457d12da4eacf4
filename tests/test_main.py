import importlib
import os

import numpy as np
import pandas as pd


def _load_main(monkeypatch, tmp_path):
    # main configures a log file in the working directory on import
    monkeypatch.chdir(tmp_path)
    return importlib.import_module("main")


def test_pipeline_writes_tables_and_figure(monkeypatch, tmp_path):
    main = _load_main(monkeypatch, tmp_path)
    rng = np.random.default_rng(8)
    csv = tmp_path / "data.csv"
    pd.DataFrame(
        {
            "value": rng.normal(size=50),
            "group": ["a", "b"] * 25,
            "x": np.arange(50.0),
            "y": np.arange(50.0) ** 2,
        }
    ).to_csv(csv, index=False)
    out = tmp_path / "out"

    code = main.main(
        [
            str(csv),
            "--column", "value",
            "--group-by", "group",
            "--x", "x",
            "--y", "y",
            "--regression", "polynomial",
            "--degree", "2",
            "--bin-method", "scott",
            "--bandwidth", "0.5",
            "--theme", "minimal",
            "--output-dir", str(out),
        ]
    )
    assert code == 0
    for name in (
        "boxplot_summary",
        "histogram_bins",
        "kde_curves",
        "regression_summary",
        "outliers",
    ):
        assert os.path.exists(out / f"{name}.csv")
    assert os.path.exists(out / "statistical_summary_value.png")
    reg = pd.read_csv(out / "regression_summary.csv")
    assert reg.loc[0, "Equation"].startswith("y = 1.0000x^2")


def test_pipeline_fails_without_numeric_data(monkeypatch, tmp_path):
    main = _load_main(monkeypatch, tmp_path)
    csv = tmp_path / "words.csv"
    pd.DataFrame({"value": ["a", "b", "c"]}).to_csv(csv, index=False)
    code = main.main([str(csv), "--column", "value", "--output-dir", str(tmp_path)])
    assert code == 1
