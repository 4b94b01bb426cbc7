"""
Ordered collection of splits produced by one resampling call.

Provides table views over the collection:
- dim_rset: analysis/assessment sizes per split
- labels: identifying columns per split
- tidy: long format, one row per (split, dataset row)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Tuple, Union

import pandas as pd

from resampling.data.split import Split, SplitLabel
from resampling.errors import InvalidArgument


@dataclass(frozen=True, eq=False)
class ResampleSet:
    """Splits plus their labels, in matching order.

    Attributes:
        splits: One Split per resample.
        labels: ``labels[i]`` identifies ``splits[i]``.
        strategy: Name of the resampling strategy, e.g. "validation_split".
        params: Strategy arguments used to build the set (for printing).
    """

    splits: Tuple[Split, ...]
    labels: Tuple[SplitLabel, ...]
    strategy: str
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "splits", tuple(self.splits))
        object.__setattr__(self, "labels", tuple(self.labels))
        if len(self.splits) != len(self.labels):
            raise InvalidArgument(
                f"Got {len(self.splits)} splits but {len(self.labels)} labels"
            )

    def __len__(self) -> int:
        return len(self.splits)

    def __iter__(self) -> Iterator[Split]:
        return iter(self.splits)

    def __getitem__(self, i: int) -> Split:
        return self.splits[i]

    @property
    def label_columns(self) -> list[str]:
        """Label fields in use, in order of first appearance."""
        cols: list[str] = []
        for label in self.labels:
            for key in label.to_dict():
                if key not in cols:
                    cols.append(key)
        return cols

    def to_frame(self) -> pd.DataFrame:
        """Table with a ``splits`` column followed by the label columns."""
        frame = pd.DataFrame({"splits": pd.Series(list(self.splits), dtype=object)})
        label_table = pd.DataFrame(
            [label.to_dict() for label in self.labels],
            columns=self.label_columns,
        )
        return pd.concat([frame, label_table], axis=1)

    def describe(self) -> str:
        """One-line summary of the strategy."""
        if self.strategy == "validation_split":
            prop = self.params.get("proportion", 0.75)
            text = f"# Validation Set Split ({prop:g}/{1 - prop:g}) "
        elif self.strategy == "vfold_cv":
            text = f"#  {self.params.get('v', len(self))}-fold cross-validation "
            if self.params.get("repeats", 1) > 1:
                text += f"repeated {self.params['repeats']} times "
        else:
            text = f"# {self.strategy} "
        if self.params.get("strata") is not None:
            text += "using stratification "
        return text

    def __str__(self) -> str:
        table = self.to_frame()
        table["splits"] = [repr(split) for split in self.splits]
        return f"{self.describe()}\n{table.to_string()}"

    def __repr__(self) -> str:
        return f"<ResampleSet {self.strategy}: {len(self)} splits>"


def dim_rset(rs: ResampleSet) -> pd.DataFrame:
    """Analysis/assessment row counts, one row per split.

    Columns are the label columns followed by ``analysis``, ``assessment``,
    ``n`` (dataset rows) and ``p`` (dataset columns).
    """
    dims = pd.DataFrame([split.dim() for split in rs.splits],
                        columns=["analysis", "assessment", "n", "p"])
    return pd.concat([labels(rs), dims], axis=1)


def labels(obj: Union[ResampleSet, Split]) -> pd.DataFrame:
    """Identifying columns of a resample set (all splits) or of one split."""
    if isinstance(obj, Split):
        return obj.labels()
    if isinstance(obj, ResampleSet):
        return obj.to_frame()[obj.label_columns].reset_index(drop=True)
    raise InvalidArgument(
        f"labels() expects a ResampleSet or Split, got {type(obj).__name__}"
    )


def tidy(rs: ResampleSet) -> pd.DataFrame:
    """Long-format view of split membership.

    Returns:
        DataFrame with columns ``Row`` (dataset row position), ``Data``
        ("Analysis" or "Assessment") and the label columns, ordered by
        split then row.
    """
    columns = ["Row", "Data"] + rs.label_columns
    pieces = []
    for split, label in zip(rs.splits, rs.labels):
        piece = pd.concat(
            [
                pd.DataFrame({"Row": split.in_indices, "Data": "Analysis"}),
                pd.DataFrame({"Row": split.out_indices, "Data": "Assessment"}),
            ],
            ignore_index=True,
        ).sort_values("Row", kind="stable")
        for key, value in label.to_dict().items():
            piece[key] = value
        pieces.append(piece)
    if not pieces:
        return pd.DataFrame(columns=columns)
    return pd.concat(pieces, ignore_index=True)[columns]
