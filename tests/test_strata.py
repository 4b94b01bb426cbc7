"""Tests for strata resolution, binning and per-group allocation."""

import numpy as np
import pandas as pd
import pytest

from resampling.data.strata import (
    Categorical,
    Numeric,
    Stratifier,
    _merge_into_neighbor,
    make_strata,
    resolve_key,
)
from resampling.errors import InvalidArgument


# =============================================================================
# Key resolution
# =============================================================================


def test_strings_resolve_to_categorical():
    assert isinstance(resolve_key(["a", "b", "a"]), Categorical)


def test_few_distinct_numbers_resolve_to_categorical():
    assert isinstance(resolve_key(pd.Series([0.0, 1.0] * 20)), Categorical)


def test_continuous_values_resolve_to_numeric():
    assert isinstance(resolve_key(np.linspace(0, 1, 50)), Numeric)


def test_multi_column_key_rejected():
    with pytest.raises(InvalidArgument):
        resolve_key(pd.DataFrame({"a": [1, 2], "b": [3, 4]}))
    with pytest.raises(InvalidArgument):
        resolve_key(np.zeros((4, 2)))


def test_single_column_frame_accepted():
    key = resolve_key(pd.DataFrame({"a": ["x", "y", "x"]}))
    assert isinstance(key, Categorical)


# =============================================================================
# Categorical binning
# =============================================================================


def test_categorical_levels_become_groups():
    codes = make_strata(["b"] * 30 + ["a"] * 30 + ["c"] * 40)
    assert sorted(np.bincount(codes).tolist()) == [30, 30, 40]
    # Rows sharing a level share a code
    assert len(set(codes[:30])) == 1


def test_small_levels_pooled_into_own_group():
    values = ["a"] * 40 + ["b"] * 40 + ["c"] * 8 + ["d"] * 7 + ["e"] * 5
    codes = make_strata(values)
    assert sorted(np.bincount(codes).tolist()) == [20, 40, 40]
    assert len(set(codes[80:])) == 1


def test_small_pool_merged_into_smallest_level():
    values = ["a"] * 50 + ["b"] * 45 + ["c"] * 3 + ["d"] * 2
    codes = make_strata(values)
    assert sorted(np.bincount(codes).tolist()) == [50, 50]
    assert set(codes[50:]) == {codes[50]}


def test_singleton_level_never_left_alone():
    codes = make_strata(["a"] * 10 + ["b"], pool=0.0)
    assert np.bincount(codes).tolist() == [11]


def test_all_levels_too_small_gives_single_stratum():
    values = [f"level{i}" for i in range(20) for _ in range(5)]
    codes = make_strata(values)
    assert np.all(codes == 0)


# =============================================================================
# Numeric binning
# =============================================================================


def test_numeric_quantile_bins_equal_population():
    codes = make_strata(np.arange(100, dtype=float), breaks=4)
    assert np.bincount(codes).tolist() == [25, 25, 25, 25]
    # Bins follow value order
    assert np.all(np.diff(codes) >= 0)


def test_numeric_breaks_reduced_for_small_data():
    # 60 rows support only floor(60 / 20) = 3 bins
    codes = make_strata(np.arange(60, dtype=float), breaks=4)
    assert len(np.unique(codes)) == 3


def test_numeric_too_little_data_gives_single_stratum():
    codes = make_strata(np.arange(30, dtype=float))
    assert np.all(codes == 0)


def test_numeric_missing_value_merged_into_adjacent_bin():
    x = np.arange(100, dtype=float)
    x[0] = np.nan
    codes = make_strata(x)
    assert len(np.unique(codes)) == 4
    assert codes[0] == codes[-1]


def test_merge_into_neighbor_forward_and_backward():
    forward = _merge_into_neighbor(np.array([0, 0, 0, 1, 2, 2, 2]), [0, 1, 2], 2)
    assert forward.tolist() == [0, 0, 0, 1, 1, 1, 1]
    backward = _merge_into_neighbor(np.array([0, 0, 1, 1, 2]), [0, 1, 2], 2)
    assert backward.tolist() == [0, 0, 1, 1, 1]


# =============================================================================
# Stratifier
# =============================================================================


def test_invalid_breaks_and_pool():
    with pytest.raises(InvalidArgument):
        Stratifier.from_key(["a", "b"], breaks=0)
    with pytest.raises(InvalidArgument):
        Stratifier.from_key(["a", "b"], pool=1.5)


def test_key_resolved_once():
    stratifier = Stratifier.from_key(np.linspace(0, 1, 100))
    assert isinstance(stratifier.key, Numeric)
    assert stratifier.n_groups == 4


def test_unstratified_single_group():
    stratifier = Stratifier.unstratified(7)
    assert stratifier.n_groups == 1
    assert stratifier.groups()[0].tolist() == list(range(7))


def test_allocate_holdout_per_group():
    stratifier = Stratifier.from_key(["a"] * 50 + ["b"] * 30)
    in_idx, out_idx = stratifier.allocate_holdout(0.75, np.random.default_rng(3))
    # floor(50 * 0.25) + floor(30 * 0.25)
    assert out_idx.size == 12 + 7
    assert in_idx.size == 80 - 19
    assert np.intersect1d(in_idx, out_idx).size == 0
    assert np.sum(out_idx >= 50) == 7


def test_allocate_holdout_handles_float_error():
    # 10 * (1 - 0.9) is slightly below 1 in floating point
    in_idx, out_idx = Stratifier.unstratified(10).allocate_holdout(
        0.9, np.random.default_rng(0)
    )
    assert out_idx.size == 1
    assert in_idx.size == 9


def test_allocate_folds_balanced():
    stratifier = Stratifier.from_key(["a"] * 70 + ["b"] * 30)
    folds = stratifier.allocate_folds(5, np.random.default_rng(4))
    assert np.bincount(folds).tolist() == [20] * 5
    assert np.bincount(folds[70:]).tolist() == [6] * 5


def test_allocate_holdout_floor_analysis_side():
    stratifier = Stratifier.unstratified(10)
    in_idx, out_idx = stratifier.allocate_holdout(
        0.75, np.random.default_rng(0), floor_side="analysis"
    )
    assert in_idx.size == 7
    assert out_idx.size == 3
    in_idx, out_idx = stratifier.allocate_holdout(0.75, np.random.default_rng(0))
    assert in_idx.size == 8
    assert out_idx.size == 2


def test_allocate_holdout_rejects_unknown_floor_side():
    with pytest.raises(InvalidArgument):
        Stratifier.unstratified(10).allocate_holdout(
            0.5, np.random.default_rng(0), floor_side="both"
        )


def test_allocate_folds_reproducible_and_reseeded():
    stratifier = Stratifier.from_key(["a"] * 70 + ["b"] * 30)
    rng = np.random.default_rng(8)
    first = stratifier.allocate_folds(5, rng)
    second = stratifier.allocate_folds(5, rng)
    again = stratifier.allocate_folds(5, np.random.default_rng(8))
    assert np.array_equal(first, again)
    assert not np.array_equal(first, second)


def test_allocate_folds_unstratified_uses_kfold_sizes():
    folds = Stratifier.unstratified(20).allocate_folds(3, np.random.default_rng(1))
    assert sorted(np.bincount(folds).tolist()) == [6, 7, 7]


def test_allocate_folds_small_strata_fall_back_to_kfold():
    stratifier = Stratifier(np.array([0, 0, 1, 1, 2, 2]))
    folds = stratifier.allocate_folds(4, np.random.default_rng(2))
    assert sorted(np.bincount(folds, minlength=4).tolist()) == [1, 1, 2, 2]
