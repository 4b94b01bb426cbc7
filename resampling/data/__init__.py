"""
Resampling data structures and strategies.

This module provides:
- IndexSet: Disjoint analysis/assessment row indices
- Split / ValidationSplit: One resample over a shared dataset
- Stratifier: Strata binning and per-group allocation
- ResampleSet: Ordered splits with labels, plus table accessors
- Splitters: validation_split and vfold_cv
"""

from resampling.data.index_set import IndexSet
from resampling.data.resample_set import ResampleSet, dim_rset, labels, tidy
from resampling.data.split import Split, SplitLabel, ValidationSplit
from resampling.data.splitters import validation_split, vfold_cv
from resampling.data.strata import Categorical, Numeric, Stratifier, make_strata

__all__ = [
    "IndexSet",
    "Split",
    "SplitLabel",
    "ValidationSplit",
    "ResampleSet",
    "dim_rset",
    "labels",
    "tidy",
    "Categorical",
    "Numeric",
    "Stratifier",
    "make_strata",
    "validation_split",
    "vfold_cv",
]
