"""
Stratification: grouping rows so that resampling preserves a variable's
distribution.

A strata key is resolved once into either a Categorical or a Numeric
variant. Numeric keys are binned on empirical quantiles; categorical keys
use their levels directly. Groups too small to split are merged rather
than dropped, so every row keeps a stratum.

Allocation then runs the same rule independently inside every group,
which is what keeps class balance across analysis/assessment sets and
across folds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold, StratifiedKFold

from resampling.errors import InvalidArgument

logger = logging.getLogger(__name__)

# Groups smaller than this cannot contribute to both sides of a split.
MIN_GROUP_SIZE = 2


def _merge_into_neighbor(codes: np.ndarray, order: List[int], min_size: int) -> np.ndarray:
    """Merge groups below ``min_size`` into the next group in ``order``.

    The last group in ``order`` merges backwards. Codes are relabelled to
    0..k-1 in ``order``.
    """
    groups = [[g] for g in order]
    sizes = [int(np.sum(codes == g)) for g in order]

    i = 0
    while i < len(groups) and len(groups) > 1:
        if sizes[i] >= min_size:
            i += 1
            continue
        j = i + 1 if i + 1 < len(groups) else i - 1
        groups[j].extend(groups[i])
        sizes[j] += sizes[i]
        del groups[i], sizes[i]
        i = min(i, j)

    out = np.empty_like(codes)
    for new_code, members in enumerate(groups):
        out[np.isin(codes, members)] = new_code
    return out


@dataclass(frozen=True, eq=False)
class Categorical:
    """Strata key whose distinct values are the groups."""

    values: pd.Series

    def bin(self, breaks: int = 4, pool: float = 0.1, depth: int = 20) -> np.ndarray:
        n = len(self.values)
        codes, levels = pd.factorize(self.values, sort=True)
        # NaN is its own level
        if np.any(codes < 0):
            codes = np.where(codes < 0, len(levels), codes)
        n_levels = int(codes.max()) + 1 if n else 0
        counts = np.bincount(codes, minlength=n_levels)

        small = (counts / max(n, 1) < pool) | (counts < MIN_GROUP_SIZE)
        if n_levels and small.all():
            logger.warning(
                "Too little data to stratify; unstratified resampling will be used"
            )
            return np.zeros(n, dtype=np.int64)

        if small.any():
            logger.debug(
                "Pooling %d of %d strata below %.0f%% of the data",
                int(small.sum()), n_levels, pool * 100,
            )
            # Pool every small level into one group, then merge that group
            # into the smallest regular level if it is still too small.
            pooled_code = n_levels
            codes = np.where(small[codes], pooled_code, codes)
            pooled_size = int(counts[small].sum())
            if pooled_size / n < pool or pooled_size < MIN_GROUP_SIZE:
                regular = np.flatnonzero(~small)
                target = regular[np.argmin(counts[regular])]
                codes = np.where(codes == pooled_code, target, codes)

        _, codes = np.unique(codes, return_inverse=True)
        return codes.astype(np.int64)


@dataclass(frozen=True, eq=False)
class Numeric:
    """Strata key discretized into quantile bins."""

    values: pd.Series

    def bin(self, breaks: int = 4, pool: float = 0.1, depth: int = 20) -> np.ndarray:
        x = self.values.to_numpy(dtype=float, na_value=np.nan)
        n = x.size

        if n // breaks < depth:
            logger.warning(
                "The number of observations in each quantile is below the "
                "recommended threshold of %d; stratification will use %d breaks",
                depth, n // depth,
            )
        breaks = min(breaks, n // depth)
        if breaks < 2:
            logger.warning(
                "Too little data to stratify; unstratified resampling will be used"
            )
            return np.zeros(n, dtype=np.int64)

        missing = np.isnan(x)
        edges = np.unique(np.nanquantile(x, np.linspace(0.0, 1.0, breaks + 1)))
        binned = pd.cut(x, bins=edges, include_lowest=True, labels=False)
        codes = np.where(missing, len(edges) - 1, np.nan_to_num(binned, nan=0)).astype(np.int64)

        # Bins follow value order, so neighbours in ``order`` are adjacent
        # intervals; the missing group sits at the end.
        order = sorted(np.unique(codes).tolist())
        return _merge_into_neighbor(codes, order, MIN_GROUP_SIZE)


StrataKey = Union[Categorical, Numeric]


def resolve_key(values, nunique: int = 5) -> StrataKey:
    """Decide once whether a strata column is categorical or numeric.

    Args:
        values: A single column (Series, 1-D array or list).
        nunique: Numeric columns with at most this many distinct values
            are treated as categorical.

    Returns:
        Categorical or Numeric wrapper around the values.
    """
    if isinstance(values, pd.DataFrame):
        if values.shape[1] != 1:
            raise InvalidArgument(
                f"strata must be a single column, got {values.shape[1]} columns"
            )
        values = values.iloc[:, 0]
    if not isinstance(values, pd.Series):
        arr = np.asarray(values)
        if arr.ndim != 1:
            raise InvalidArgument(f"strata must be a single column, got shape {arr.shape}")
        values = pd.Series(arr)

    if (
        isinstance(values.dtype, pd.CategoricalDtype)
        or pd.api.types.is_bool_dtype(values)
        or not pd.api.types.is_numeric_dtype(values)
        or values.nunique(dropna=True) <= nunique
    ):
        return Categorical(values.reset_index(drop=True))
    return Numeric(values.reset_index(drop=True))


class Stratifier:
    """Groups rows by stratum code and allocates each group independently.

    Usually built with :meth:`from_key` (a strata column) or
    :meth:`unstratified` (one group holding every row).

    Args:
        codes: Integer stratum code per dataset row, numbered from 0.
        key: The resolved strata key the codes came from, if any.
    """

    def __init__(self, codes: np.ndarray, key: StrataKey | None = None):
        self.codes = np.asarray(codes, dtype=np.int64)
        self.key = key

    @classmethod
    def from_key(
        cls,
        values,
        breaks: int = 4,
        pool: float = 0.1,
        depth: int = 20,
    ) -> Stratifier:
        """Resolve and bin a strata column.

        Args:
            values: The strata column, one value per dataset row.
            breaks: Number of quantile bins for numeric keys.
            pool: Categorical levels holding less than this share of rows
                are pooled.
            depth: Minimum rows per quantile bin before ``breaks`` is reduced.
        """
        if breaks < 1:
            raise InvalidArgument(f"breaks must be a positive integer, got {breaks}")
        if not 0.0 <= pool < 1.0:
            raise InvalidArgument(f"pool must be in [0, 1), got {pool}")
        key = resolve_key(values)
        return cls(key.bin(breaks=breaks, pool=pool, depth=depth), key=key)

    @classmethod
    def unstratified(cls, n: int) -> Stratifier:
        """A stratifier that places all ``n`` rows in one group."""
        return cls(np.zeros(n, dtype=np.int64))

    @property
    def n_groups(self) -> int:
        return int(self.codes.max()) + 1 if self.codes.size else 0

    def groups(self) -> List[np.ndarray]:
        """Row indices of every group, in group-code order."""
        return [np.flatnonzero(self.codes == g) for g in range(self.n_groups)]

    def allocate_holdout(
        self,
        proportion: float,
        rng: np.random.Generator,
        floor_side: str = "assessment",
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Split every group into analysis/assessment rows.

        Within each group the share on ``floor_side`` is rounded down and the
        remaining rows go to the other side:

        - "assessment": ``floor(size * (1 - proportion))`` rows are held out.
        - "analysis": ``floor(size * proportion)`` rows are used for analysis.

        Returns:
            Tuple of (in_indices, out_indices), both sorted.
        """
        if floor_side not in ("analysis", "assessment"):
            raise InvalidArgument(
                f"floor_side must be 'analysis' or 'assessment', got {floor_side!r}"
            )
        in_parts, out_parts = [], []
        for members in self.groups():
            shuffled = rng.permutation(members)
            # round() absorbs float error such as 10 * (1 - 0.9) = 0.999...
            if floor_side == "analysis":
                n_in = int(np.floor(round(members.size * proportion, 8)))
                n_out = members.size - n_in
            else:
                n_out = int(np.floor(round(members.size * (1.0 - proportion), 8)))
            out_parts.append(shuffled[:n_out])
            in_parts.append(shuffled[n_out:])
        return (
            np.sort(np.concatenate(in_parts)) if in_parts else np.empty(0, dtype=np.int64),
            np.sort(np.concatenate(out_parts)) if out_parts else np.empty(0, dtype=np.int64),
        )

    def allocate_folds(self, v: int, rng: np.random.Generator) -> np.ndarray:
        """Assign every row a fold id in ``0..v-1``.

        Uses StratifiedKFold over the stratum codes, or KFold when there is
        a single group or no group has ``v`` members. The fold seed is drawn
        from ``rng`` so that successive calls give different assignments.
        """
        n = self.codes.size
        folds = np.empty(n, dtype=np.int64)
        random_state = int(rng.integers(np.iinfo(np.int32).max))
        X = np.zeros((n, 1))

        group_sizes = np.bincount(self.codes) if n else np.zeros(0, dtype=np.int64)
        if self.n_groups > 1 and group_sizes.max() >= v:
            splitter = StratifiedKFold(n_splits=v, shuffle=True, random_state=random_state)
        else:
            if self.n_groups > 1:
                logger.warning(
                    "Every stratum has fewer than %d rows; folds will not be stratified", v
                )
            splitter = KFold(n_splits=v, shuffle=True, random_state=random_state)

        for k, (_, test_idx) in enumerate(splitter.split(X, self.codes)):
            folds[test_idx] = k
        return folds


def make_strata(values, breaks: int = 4, pool: float = 0.1, depth: int = 20) -> np.ndarray:
    """Return an integer stratum code for every value.

    Convenience wrapper around ``Stratifier.from_key(values, ...).codes``.
    """
    return Stratifier.from_key(values, breaks=breaks, pool=pool, depth=depth).codes
