"""Tests for pydantic configs and YAML loading."""

from resampling import ValidationSplitConfig, VFoldConfig, validation_split, vfold_cv
from resampling.config import CONFIGS_DIR, TuningConfig


def test_defaults_match_resampler_defaults():
    assert ValidationSplitConfig().proportion == 0.75
    assert VFoldConfig().v == 10
    assert VFoldConfig().repeats == 1


def test_from_yaml_defaults():
    assert (CONFIGS_DIR / "vfold_cv.yaml").exists()
    assert VFoldConfig.from_yaml() == VFoldConfig()
    assert ValidationSplitConfig.from_yaml() == ValidationSplitConfig()


def test_from_yaml_path(tmp_path):
    path = tmp_path / "cv.yaml"
    path.write_text("v: 4\nrepeats: 2\nstrata: y\n")
    cfg = VFoldConfig.from_yaml(path)
    assert cfg.v == 4
    assert cfg.repeats == 2
    assert cfg.strata == "y"
    assert cfg.seed == 42


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert ValidationSplitConfig.from_yaml(path) == ValidationSplitConfig()


def test_config_splats_into_resamplers(binary_df):
    rs = vfold_cv(binary_df, **VFoldConfig(v=5, strata="y").model_dump())
    assert len(rs) == 5
    rs = validation_split(binary_df, **ValidationSplitConfig(proportion=0.5).model_dump())
    assert rs[0].index_set.n_in == 50


def test_tuning_config_nested():
    cfg = TuningConfig.from_yaml()
    assert cfg.resampling.v == 5
    assert cfg.resampling.strata == "y"
    assert cfg.epoch_grid == sorted(cfg.epoch_grid)
