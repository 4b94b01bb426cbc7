"""
A single resample: a dataset reference plus one analysis/assessment
index set.

The dataset is never copied when a split is created. Rows are only
materialized when ``analysis()`` or ``assessment()`` is called.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd

from resampling.data.index_set import IndexSet
from resampling.errors import InvalidArgument, InvalidState

Dataset = Union[pd.DataFrame, np.ndarray]


@dataclass(frozen=True)
class SplitLabel:
    """Identifying record for one split of a resample set.

    Attributes:
        id: Outer identifier, e.g. "validation", "Fold03" or "Repeat2".
        id2: Inner identifier for nested labels, e.g. "Fold03" within a
            repeat. None when there is only one level.
    """

    id: str
    id2: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Label fields that are set, in column order."""
        return {k: v for k, v in asdict(self).items() if v is not None}


def take_rows(data: Dataset, indices: np.ndarray) -> Dataset:
    """Select rows by position without touching ``data``."""
    if isinstance(data, (pd.DataFrame, pd.Series)):
        return data.iloc[indices]
    return np.take(data, indices, axis=0)


def n_rows(data: Dataset) -> int:
    """Number of rows (first axis) of a dataset."""
    return int(data.shape[0]) if hasattr(data, "shape") else len(data)


def n_cols(data: Dataset) -> int:
    """Number of columns of a dataset; 1 for one-dimensional data."""
    shape = getattr(data, "shape", (len(data),))
    return int(shape[1]) if len(shape) > 1 else 1


@dataclass(frozen=True, eq=False)
class Split:
    """One analysis/assessment partition of a shared dataset.

    Attributes:
        data: The full dataset (DataFrame or array), shared by reference.
        index_set: Analysis and assessment row positions.
        label: Identifying record of this split within its resample set.
    """

    data: Dataset
    index_set: IndexSet
    label: SplitLabel = SplitLabel(id="Resample1")

    # Names used when printing the row counts.
    _header: ClassVar[Tuple[str, str]] = ("Analysis", "Assess")

    def __post_init__(self) -> None:
        if self.data is None:
            raise InvalidState("A split requires a backing dataset")
        if self.index_set is None:
            raise InvalidState("A split requires an index set")
        if self.index_set.n != n_rows(self.data):
            raise InvalidState(
                f"Index set covers {self.index_set.n} rows but the dataset "
                f"has {n_rows(self.data)}"
            )

    @property
    def in_indices(self) -> np.ndarray:
        return self.index_set.in_indices

    @property
    def out_indices(self) -> np.ndarray:
        return self.index_set.out_indices

    def analysis(self) -> Dataset:
        """Rows used for fitting, in index order."""
        return take_rows(self.data, self.index_set.in_indices)

    def assessment(self) -> Dataset:
        """Held-out rows, in index order."""
        return take_rows(self.data, self.index_set.out_indices)

    def complement(self) -> np.ndarray:
        """Row positions not in the analysis set (the assessment rows)."""
        return self.index_set.out_indices

    def as_frame(self, data: str = "analysis") -> pd.DataFrame:
        """Return one side of the split as a new DataFrame.

        Args:
            data: Either "analysis" or "assessment".
        """
        if data == "analysis":
            rows = self.analysis()
        elif data == "assessment":
            rows = self.assessment()
        else:
            raise InvalidArgument(
                f"data must be 'analysis' or 'assessment', got {data!r}"
            )
        return pd.DataFrame(rows).copy()

    def labels(self) -> pd.DataFrame:
        """Single-row table with this split's label fields."""
        return pd.DataFrame([self.label.to_dict()])

    def dim(self) -> Dict[str, Any]:
        """Row counts of both sides plus dataset shape."""
        return {
            "analysis": self.index_set.n_in,
            "assessment": self.index_set.n_out,
            "n": self.index_set.n,
            "p": n_cols(self.data),
        }

    def __str__(self) -> str:
        a, b = self._header
        return (
            f"<{a}/{b}/Total>\n"
            f"<{self.index_set.n_in}/{self.index_set.n_out}/{self.index_set.n}>"
        )

    def __repr__(self) -> str:
        return (
            f"<{self.index_set.n_in}/{self.index_set.n_out}/{self.index_set.n}>"
        )


@dataclass(frozen=True, eq=False)
class ValidationSplit(Split):
    """Split produced by :func:`validation_split`."""

    label: SplitLabel = SplitLabel(id="validation")
    _header: ClassVar[Tuple[str, str]] = ("Training", "Validation")
