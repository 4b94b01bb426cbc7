"""
Configuration management using pydantic.

All config classes use pydantic for validation and YAML loading.
Config files are stored in configs/ directory.

Config fields mirror the keyword arguments of the resamplers, so a
config can be splatted straight into a call:

    cfg = VFoldConfig.from_yaml()
    rs = vfold_cv(df, **cfg.model_dump())

Range checks (proportion in (0, 1), v in [2, N]) live in the resamplers
themselves since they depend on the dataset.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field


# Base path for config files
CONFIGS_DIR = Path(__file__).parent.parent / "configs"


def load_yaml(path: Path | str) -> dict[str, Any]:
    """Load a YAML file and return as dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


class ValidationSplitConfig(BaseModel):
    """Configuration for a single training/validation split."""

    proportion: float = 0.75  # Share of rows in the analysis (training) set
    strata: Optional[str] = None  # Column name to stratify on
    breaks: int = 4  # Quantile bins for numeric strata
    pool: float = 0.1  # Categorical levels below this share are pooled
    seed: int = 42

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> ValidationSplitConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/validation_split.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "validation_split.yaml"
        return cls(**load_yaml(path))


class VFoldConfig(BaseModel):
    """Configuration for V-fold cross-validation."""

    v: int = 10
    repeats: int = 1
    strata: Optional[str] = None
    breaks: int = 4
    pool: float = 0.1
    seed: int = 42

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> VFoldConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/vfold_cv.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "vfold_cv.yaml"
        return cls(**load_yaml(path))


class TuningConfig(BaseModel):
    """Configuration for the epoch-tuning vignette.

    The dataset is synthetic; the network is a small MLP trained one
    epoch per partial_fit call.
    """

    n_samples: int = 1000
    n_features: int = 10
    n_informative: int = 5
    epoch_grid: List[int] = Field(default=[1, 5, 10, 20, 40])
    hidden_layer_sizes: List[int] = Field(default=[16])
    learning_rate_init: float = 0.01
    random_seed: int = 42
    resampling: VFoldConfig = Field(
        default_factory=lambda: VFoldConfig(v=5, strata="y")
    )

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> TuningConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/tune_epochs.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "tune_epochs.yaml"
        return cls(**load_yaml(path))
