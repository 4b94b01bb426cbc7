"""
Shared fixtures for all tests.

Small in-memory tables standing in for the usual example datasets.
"""
import sys
from pathlib import Path
from string import ascii_lowercase

import numpy as np
import pandas as pd
import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Dataset Fixtures
# =============================================================================

@pytest.fixture
def dat1():
    """20 rows: an integer column and a letter column."""
    return pd.DataFrame({"a": np.arange(1, 21), "b": list(ascii_lowercase[:20])})


@pytest.fixture
def iris130():
    """First 130 rows of an iris-shaped table: 50 setosa, 50 versicolor, 30 virginica."""
    rng = np.random.default_rng(0)
    species = ["setosa"] * 50 + ["versicolor"] * 50 + ["virginica"] * 50
    df = pd.DataFrame({
        "Sepal.Length": rng.normal(5.8, 0.8, 150).round(1),
        "Sepal.Width": rng.normal(3.0, 0.4, 150).round(1),
        "Petal.Length": rng.normal(3.8, 1.7, 150).round(1),
        "Petal.Width": rng.normal(1.2, 0.7, 150).round(1),
        "Species": pd.Categorical(species),
    })
    return df.iloc[:130].reset_index(drop=True)


@pytest.fixture
def binary_df():
    """100 rows with a binary label at a 30% positive rate."""
    rng = np.random.default_rng(1)
    y = np.array([1] * 30 + [0] * 70)
    rng.shuffle(y)
    return pd.DataFrame({"x": rng.normal(size=100), "y": y})


@pytest.fixture
def numeric_df():
    """200 rows with a continuous outcome for quantile stratification."""
    rng = np.random.default_rng(2)
    return pd.DataFrame({
        "x": rng.normal(size=200),
        "outcome": rng.exponential(scale=3.0, size=200),
    })
