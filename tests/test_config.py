"""Tests for evaluation settings and the packaged Hydra config."""

import pytest
import os
import sys

from hydra import compose, initialize
from omegaconf import OmegaConf

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from trajectory_eval.config import DEFAULTS, EvaluationSettings
from trajectory_eval.evaluation.relative_error import AlignOptions
from trajectory_eval.exceptions import ConfigurationError


class TestEvaluationSettings:
    def test_defaults(self):
        settings = EvaluationSettings()
        assert settings.offset_sec == 0.0
        assert settings.max_difference_sec == 0.02
        assert settings.segment_length == 50.0
        assert settings.skip_frames == 10
        assert settings.least_squares_align is False
        assert settings.least_squares_align_translation_only is False
        assert settings.least_squares_align_range == 0.2
        assert settings.format_es == "pose"
        assert settings.format_gt == "pose"

    def test_nanoseconds(self):
        settings = EvaluationSettings({"offset_sec": 0.005, "max_difference_sec": 0.001})
        assert settings.offset_nsec == 5_000_000
        assert settings.max_difference_nsec == 1_000_000

    def test_align_options(self):
        settings = EvaluationSettings({
            "least_squares_align": True,
            "least_squares_align_range": 0.5,
            "least_squares_align_mode": "sim3",
        })
        assert settings.align_options == AlignOptions(True, False, 0.5, "sim3")

    def test_dictconfig(self):
        cfg = OmegaConf.create({"segment_length": 100, "skip_frames": 5})
        settings = EvaluationSettings.from_cfg(cfg)
        assert settings.segment_length == 100.0
        assert settings.skip_frames == 5

    def test_paths(self):
        settings = EvaluationSettings({"data_dir": "run1", "filename_gt": "gt.csv"})
        assert settings.path_gt == os.path.join("run1", "gt.csv")
        assert settings.path_es == os.path.join("run1", "traj_es.csv")

    @pytest.mark.parametrize("align_range", [0.0, -0.1, 1.5])
    def test_align_range_out_of_bounds(self, align_range):
        with pytest.raises(ConfigurationError, match="least_squares_align_range"):
            EvaluationSettings({"least_squares_align_range": align_range})

    def test_align_range_full(self):
        assert EvaluationSettings({"least_squares_align_range": 1.0}).least_squares_align_range == 1.0

    @pytest.mark.parametrize("key, value", [
        ("segment_length", 0),
        ("segment_length", -5),
        ("skip_frames", 0),
        ("skip_frames", 2.5),
        ("max_difference_sec", -0.01),
        ("offset_sec", "soon"),
        ("least_squares_align_mode", "affine"),
        ("format_gt", "kitti"),
        ("format_es", "tum"),
    ])
    def test_invalid_options(self, key, value):
        with pytest.raises(ConfigurationError):
            EvaluationSettings({key: value})

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError, match="segment_lenght"):
            EvaluationSettings({"segment_lenght": 50})

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            EvaluationSettings({"skip_frames": -1})


class TestPackagedConfig:
    def test_yaml_matches_defaults(self):
        with initialize(version_base=None, config_path="../src/trajectory_eval/configs"):
            cfg = compose(config_name="config")
        assert set(cfg.keys()) == set(DEFAULTS)
        assert EvaluationSettings.from_cfg(cfg).to_dict() == EvaluationSettings().to_dict()

    def test_overrides(self):
        with initialize(version_base=None, config_path="../src/trajectory_eval/configs"):
            cfg = compose(
                config_name="config",
                overrides=["segment_length=100", "least_squares_align=true", "format_gt=euroc"],
            )
        settings = EvaluationSettings.from_cfg(cfg)
        assert settings.segment_length == 100.0
        assert settings.least_squares_align is True
        assert settings.format_gt == "euroc"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
