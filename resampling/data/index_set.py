"""
Analysis/assessment row indices for a single resample.

Stores indices rather than data so that every split of a resample set
can share one dataset.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from resampling.errors import InvalidArgument


def _frozen_indices(values, name: str) -> np.ndarray:
    arr = np.asarray(values)
    if arr.size == 0:
        arr = arr.astype(np.int64)
    if arr.ndim != 1 or not np.issubdtype(arr.dtype, np.integer):
        raise InvalidArgument(f"{name} must be a 1-D array of integers")
    arr = np.unique(arr)  # sorted, deduplicated copy
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class IndexSet:
    """Disjoint analysis (``in``) and assessment (``out``) row indices.

    Both arrays are sorted and read-only. Their union need not cover
    every row of the dataset.

    Attributes:
        in_indices: Rows used for fitting.
        out_indices: Rows held out for evaluation.
        n: Number of rows in the dataset the indices refer to.
    """

    in_indices: np.ndarray
    out_indices: np.ndarray
    n: int

    def __post_init__(self) -> None:
        in_idx = _frozen_indices(self.in_indices, "in_indices")
        out_idx = _frozen_indices(self.out_indices, "out_indices")
        object.__setattr__(self, "in_indices", in_idx)
        object.__setattr__(self, "out_indices", out_idx)

        if self.n < 0:
            raise InvalidArgument(f"n must be non-negative, got {self.n}")
        for arr, name in [(in_idx, "in_indices"), (out_idx, "out_indices")]:
            if arr.size and (arr[0] < 0 or arr[-1] >= self.n):
                raise InvalidArgument(
                    f"{name} must lie in [0, {self.n}), "
                    f"got range [{arr[0]}, {arr[-1]}]"
                )
        overlap = np.intersect1d(in_idx, out_idx, assume_unique=True)
        if overlap.size:
            raise InvalidArgument(
                f"in_indices and out_indices overlap on {overlap.size} rows"
            )

    @classmethod
    def from_complement(cls, out_indices, n: int) -> IndexSet:
        """Build an index set whose analysis rows are all rows not held out."""
        out_idx = _frozen_indices(out_indices, "out_indices")
        in_idx = np.setdiff1d(np.arange(n), out_idx, assume_unique=True)
        return cls(in_indices=in_idx, out_indices=out_idx, n=n)

    @property
    def n_in(self) -> int:
        """Number of analysis rows."""
        return int(self.in_indices.size)

    @property
    def n_out(self) -> int:
        """Number of assessment rows."""
        return int(self.out_indices.size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexSet):
            return NotImplemented
        return (
            self.n == other.n
            and np.array_equal(self.in_indices, other.in_indices)
            and np.array_equal(self.out_indices, other.out_indices)
        )

    def __hash__(self) -> int:
        return hash((self.n, self.in_indices.tobytes(), self.out_indices.tobytes()))
