"""Smoke test for the epoch-tuning vignette script."""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).parent.parent / "scripts" / "tune_epochs.py"


@pytest.fixture
def tune_epochs():
    spec = importlib.util.spec_from_file_location("tune_epochs", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_grid_search_small_run(tune_epochs, tmp_path):
    config = tmp_path / "tune.yaml"
    config.write_text(
        "n_samples: 120\n"
        "n_features: 4\n"
        "n_informative: 2\n"
        "epoch_grid: [1, 3]\n"
        "hidden_layer_sizes: [4]\n"
        "resampling:\n"
        "  v: 3\n"
        "  strata: y\n"
    )
    output = tmp_path / "results.json"
    result = tune_epochs.main(
        ["--config", str(config), "--seed", "3", "--output", str(output), "--quiet"]
    )

    assert result["best_epochs"] in (1, 3)
    assert [row["epochs"] for row in result["summary"]] == [1, 3]
    assert all(row["count"] == 3 for row in result["summary"])
    saved = json.loads(output.read_text())
    assert saved["config"]["resampling"]["seed"] == 3


def test_grid_search_rows_per_split(tune_epochs):
    from resampling.config import TuningConfig
    from resampling import vfold_cv

    cfg = TuningConfig(n_samples=60, n_features=4, n_informative=2)
    df = tune_epochs.make_dataset(cfg)
    rs = vfold_cv(df, v=3, strata="y", seed=1)

    def fit_fn(X_train, y_train, X_val, y_val, epochs):
        assert len(X_train) + len(X_val) == 60
        return float(epochs)

    results = tune_epochs.grid_search(rs, [2, 4], fit_fn, show_progress=False)
    assert len(results) == 6
    assert list(results.columns) == ["id", "epochs", "auc"]
