"""
Resampling strategies.

Implements:
- validation_split: one training/validation split at a fixed proportion
- vfold_cv: V-fold cross-validation, optionally repeated

Both accept a strata column name and an explicit seed. All randomness
comes from a numpy Generator created from that seed, so the same data,
arguments and seed always give the same index sets.
"""

from __future__ import annotations

import logging
import numbers
from typing import List, Optional

import numpy as np
import pandas as pd

from resampling.data.index_set import IndexSet
from resampling.data.resample_set import ResampleSet
from resampling.data.split import Dataset, Split, SplitLabel, ValidationSplit, n_rows
from resampling.data.strata import Stratifier
from resampling.errors import InvalidArgument

logger = logging.getLogger(__name__)


def names0(num: int, prefix: str = "x") -> List[str]:
    """Zero-padded sequential names, e.g. names0(10, "Fold") -> Fold01..Fold10."""
    if num < 1:
        return []
    width = len(str(num))
    return [f"{prefix}{i:0{width}d}" for i in range(1, num + 1)]


def _check_data(data: Dataset) -> int:
    if data is None:
        raise InvalidArgument("data is required")
    if not isinstance(data, (pd.DataFrame, np.ndarray)):
        raise InvalidArgument(
            f"data must be a pandas DataFrame or numpy array, got {type(data).__name__}"
        )
    if data.ndim not in (1, 2):
        raise InvalidArgument(f"data must be 1-D or 2-D, got {data.ndim} dimensions")
    return n_rows(data)


def _build_stratifier(
    data: Dataset,
    strata: Optional[str],
    breaks: int,
    pool: float,
) -> Stratifier:
    """Resolve the ``strata`` argument into a Stratifier.

    ``strata`` must name exactly one column of a DataFrame. Column vectors
    and lists of names are rejected.
    """
    n = n_rows(data)
    if strata is None:
        return Stratifier.unstratified(n)
    if not isinstance(strata, str):
        raise InvalidArgument(
            "strata should be a single column name, "
            f"got {type(strata).__name__}"
        )
    if not isinstance(data, pd.DataFrame):
        raise InvalidArgument("strata requires a DataFrame with named columns")
    if strata not in data.columns:
        raise InvalidArgument(f"strata column {strata!r} not found in data")
    column = data[strata]
    if isinstance(column, pd.DataFrame):
        raise InvalidArgument(f"strata column {strata!r} is not unique in data")
    return Stratifier.from_key(column, breaks=breaks, pool=pool)


def _check_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgument(f"{name} must be a single integer, got {value!r}")
    return int(value)


def validation_split(
    data: Dataset,
    proportion: float = 0.75,
    strata: Optional[str] = None,
    breaks: int = 4,
    pool: float = 0.1,
    seed: int = 42,
) -> ResampleSet:
    """Create a single training/validation split.

    Unstratified, ``floor(N * proportion)`` randomly chosen rows are used for
    training and the rest are held out for validation. With ``strata``,
    ``floor(size * (1 - proportion))`` rows of each stratum are held out and
    the remaining rows are used for training.

    Args:
        data: DataFrame or array to split. Referenced, not copied.
        proportion: Share of rows in the training (analysis) set, in (0, 1).
        strata: Name of a column to stratify on.
        breaks: Quantile bins used when the strata column is numeric.
        pool: Categorical strata below this share of rows are pooled.
        seed: Random seed for reproducibility.

    Returns:
        ResampleSet with exactly one ValidationSplit labelled "validation".
    """
    n = _check_data(data)
    if (
        isinstance(proportion, bool)
        or not isinstance(proportion, numbers.Real)
        or not 0 < proportion < 1
    ):
        raise InvalidArgument(f"proportion must be a number on (0, 1), got {proportion!r}")
    stratifier = _build_stratifier(data, strata, breaks, pool)

    rng = np.random.default_rng(seed)
    floor_side = "analysis" if strata is None else "assessment"
    in_idx, out_idx = stratifier.allocate_holdout(float(proportion), rng, floor_side=floor_side)
    label = SplitLabel(id="validation")
    split = ValidationSplit(
        data=data,
        index_set=IndexSet(in_indices=in_idx, out_indices=out_idx, n=n),
        label=label,
    )
    logger.debug(
        "validation_split: %d analysis / %d assessment rows over %d strata",
        split.index_set.n_in, split.index_set.n_out, stratifier.n_groups,
    )
    return ResampleSet(
        splits=(split,),
        labels=(label,),
        strategy="validation_split",
        params={"proportion": float(proportion), "strata": strata, "breaks": breaks, "pool": pool},
    )


def vfold_cv(
    data: Dataset,
    v: int = 10,
    repeats: int = 1,
    strata: Optional[str] = None,
    breaks: int = 4,
    pool: float = 0.1,
    seed: int = 42,
) -> ResampleSet:
    """Create V-fold cross-validation splits.

    Rows are assigned to ``v`` folds of near-equal size (within each stratum
    when ``strata`` is given). Fold ``k`` is the assessment set of split
    ``k``; every other fold forms its analysis set.

    Args:
        data: DataFrame or array to split. Referenced, not copied.
        v: Number of folds, in [2, N].
        repeats: Number of independent fold assignments.
        strata: Name of a column to stratify on.
        breaks: Quantile bins used when the strata column is numeric.
        pool: Categorical strata below this share of rows are pooled.
        seed: Random seed for reproducibility.

    Returns:
        ResampleSet of ``v * repeats`` splits labelled "Fold01".. or, with
        repeats, "Repeat1".. / "Fold01"..
    """
    n = _check_data(data)
    v = _check_int(v, "v")
    repeats = _check_int(repeats, "repeats")
    if v < 2:
        raise InvalidArgument(f"v must be at least 2, got {v}")
    if v > n:
        raise InvalidArgument(f"v ({v}) cannot exceed the number of rows ({n})")
    if repeats < 1:
        raise InvalidArgument(f"repeats must be at least 1, got {repeats}")
    stratifier = _build_stratifier(data, strata, breaks, pool)

    rng = np.random.default_rng(seed)
    fold_names = names0(v, "Fold")
    repeat_names = names0(repeats, "Repeat")

    splits: List[Split] = []
    split_labels: List[SplitLabel] = []
    for r in range(repeats):
        folds = stratifier.allocate_folds(v, rng)
        for k in range(v):
            if repeats == 1:
                label = SplitLabel(id=fold_names[k])
            else:
                label = SplitLabel(id=repeat_names[r], id2=fold_names[k])
            index_set = IndexSet.from_complement(np.flatnonzero(folds == k), n=n)
            splits.append(Split(data=data, index_set=index_set, label=label))
            split_labels.append(label)

    logger.debug(
        "vfold_cv: %d folds x %d repeats over %d rows (%d strata)",
        v, repeats, n, stratifier.n_groups,
    )
    return ResampleSet(
        splits=tuple(splits),
        labels=tuple(split_labels),
        strategy="vfold_cv",
        params={"v": v, "repeats": repeats, "strata": strata, "breaks": breaks, "pool": pool},
    )
