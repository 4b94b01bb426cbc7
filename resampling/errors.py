"""
Error taxonomy for the resampling core.

Both errors are raised synchronously while a Split or ResampleSet is
being built, so a partially constructed resample set is never returned.
"""

from __future__ import annotations


class InvalidArgument(ValueError):
    """Malformed resampling configuration.

    Raised for out-of-range proportions, fold counts outside [2, N],
    and strata keys that are missing, vectors or multi-column.
    """


class InvalidState(RuntimeError):
    """A split was used without a backing dataset or index set."""
