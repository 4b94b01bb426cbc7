"""Resampling utilities for model validation."""

from resampling.config import ValidationSplitConfig, VFoldConfig
from resampling.data import (
    IndexSet,
    ResampleSet,
    Split,
    SplitLabel,
    ValidationSplit,
    dim_rset,
    labels,
    make_strata,
    tidy,
    validation_split,
    vfold_cv,
)
from resampling.errors import InvalidArgument, InvalidState

__version__ = "0.1.0"

__all__ = [
    "IndexSet",
    "InvalidArgument",
    "InvalidState",
    "ResampleSet",
    "Split",
    "SplitLabel",
    "ValidationSplit",
    "ValidationSplitConfig",
    "VFoldConfig",
    "dim_rset",
    "labels",
    "make_strata",
    "tidy",
    "validation_split",
    "vfold_cv",
]
