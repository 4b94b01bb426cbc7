#!/usr/bin/env python
"""
Tune a neural network's epoch count by grid search over CV folds.

For every epoch count in the grid, an MLP is trained on each fold's
analysis set (one partial_fit call per epoch) and scored by ROC AUC on the
fold's assessment set. The epoch count with the best mean AUC is reported.

Usage:
    python scripts/tune_epochs.py
    python scripts/tune_epochs.py --v 10 --seed 7
    python scripts/tune_epochs.py --epochs 1 10 50 --output results.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
import pandas as pd
from sklearn.datasets import make_classification
from sklearn.metrics import roc_auc_score
from sklearn.neural_network import MLPClassifier
from sklearn.preprocessing import StandardScaler
from tqdm import tqdm

from resampling import ResampleSet, VFoldConfig, vfold_cv
from resampling.config import TuningConfig


def make_dataset(cfg: TuningConfig) -> pd.DataFrame:
    """Synthetic binary classification table with features x0.. and label y."""
    X, y = make_classification(
        n_samples=cfg.n_samples,
        n_features=cfg.n_features,
        n_informative=cfg.n_informative,
        random_state=cfg.random_seed,
    )
    df = pd.DataFrame(X, columns=[f"x{i}" for i in range(cfg.n_features)])
    df["y"] = y
    return df


def fit_mlp(
    X_train: np.ndarray,
    y_train: np.ndarray,
    X_val: np.ndarray,
    y_val: np.ndarray,
    epochs: int,
    cfg: TuningConfig,
) -> float:
    """Train an MLP for ``epochs`` passes and return validation ROC AUC."""
    scaler = StandardScaler().fit(X_train)
    model = MLPClassifier(
        hidden_layer_sizes=tuple(cfg.hidden_layer_sizes),
        learning_rate_init=cfg.learning_rate_init,
        random_state=cfg.random_seed,
    )
    classes = np.unique(y_train)
    X_train = scaler.transform(X_train)
    for _ in range(epochs):
        model.partial_fit(X_train, y_train, classes=classes)

    scores = model.predict_proba(scaler.transform(X_val))[:, 1]
    return float(roc_auc_score(y_val, scores))


def grid_search(
    rs: ResampleSet,
    epoch_grid: List[int],
    fit_fn: Callable[..., float],
    target: str = "y",
    show_progress: bool = True,
) -> pd.DataFrame:
    """Score every (epoch count, split) pair.

    Returns:
        DataFrame with one row per pair: label columns, epochs, auc.
    """
    rows = []
    pairs = [(epochs, split) for epochs in epoch_grid for split in rs]
    for epochs, split in tqdm(pairs, desc="Fits", disable=not show_progress):
        train = split.analysis()
        val = split.assessment()
        auc = fit_fn(
            train.drop(columns=[target]).to_numpy(),
            train[target].to_numpy(),
            val.drop(columns=[target]).to_numpy(),
            val[target].to_numpy(),
            epochs,
        )
        rows.append({**split.label.to_dict(), "epochs": epochs, "auc": auc})
    return pd.DataFrame(rows)


def summarize(results: pd.DataFrame) -> pd.DataFrame:
    """Mean and std of AUC per epoch count."""
    return (
        results.groupby("epochs")["auc"]
        .agg(["mean", "std", "count"])
        .reset_index()
    )


def main(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    parser = argparse.ArgumentParser(
        description="Grid search over MLP epochs using V-fold CV"
    )
    parser.add_argument("--config", type=str, help="Path to tune_epochs YAML config")
    parser.add_argument("--v", type=int, help="Number of folds (overrides config)")
    parser.add_argument("--seed", type=int, help="Resampling seed (overrides config)")
    parser.add_argument(
        "--epochs", type=int, nargs="+", help="Epoch grid (overrides config)"
    )
    parser.add_argument("--output", type=str, help="Optional JSON output path")
    parser.add_argument("--quiet", action="store_true", help="Hide progress bar")
    args = parser.parse_args(argv)

    cfg = TuningConfig.from_yaml(args.config)

    # CLI overrides
    overrides: Dict[str, Any] = {}
    if args.v is not None:
        overrides["v"] = args.v
    if args.seed is not None:
        overrides["seed"] = args.seed
    if overrides:
        cfg = TuningConfig(
            **{**cfg.model_dump(), "resampling": VFoldConfig(
                **{**cfg.resampling.model_dump(), **overrides}
            )}
        )
    if args.epochs:
        cfg = TuningConfig(**{**cfg.model_dump(), "epoch_grid": args.epochs})

    df = make_dataset(cfg)
    rs = vfold_cv(df, **cfg.resampling.model_dump())

    print("=" * 70)
    print("Epoch tuning")
    print("=" * 70)
    print(rs.describe())
    print(f"  Rows: {len(df)}  Features: {cfg.n_features}")
    print(f"  Epoch grid: {cfg.epoch_grid}")
    print("=" * 70)

    def fit_fn(X_train, y_train, X_val, y_val, epochs):
        return fit_mlp(X_train, y_train, X_val, y_val, epochs, cfg)

    results = grid_search(rs, cfg.epoch_grid, fit_fn, show_progress=not args.quiet)
    summary = summarize(results)
    best = summary.loc[summary["mean"].idxmax()]

    print(summary.to_string(index=False))
    print(f"\nBest epochs: {int(best['epochs'])} (mean AUC={best['mean']:.4f})")

    output = {
        "config": cfg.model_dump(),
        "summary": summary.to_dict(orient="records"),
        "best_epochs": int(best["epochs"]),
    }
    if args.output:
        with open(args.output, "w") as f:
            json.dump(output, f, indent=2, default=float)
        print(f"Results saved to: {args.output}")
    return output


if __name__ == "__main__":
    main()
