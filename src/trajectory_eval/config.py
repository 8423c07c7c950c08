"""
Evaluation settings built from a Hydra / OmegaConf config node.

The node may also be a plain dict; missing keys fall back to the defaults
of ``configs/config.yaml``.
"""

import os

from omegaconf import DictConfig, OmegaConf

from trajectory_eval.core.time_series import sec_to_nanosec
from trajectory_eval.data import list_loaders
from trajectory_eval.evaluation.relative_error import ALIGN_MODES, AlignOptions
from trajectory_eval.exceptions import ConfigurationError


DEFAULTS = {
    "data_dir": ".",
    "filename_es": "traj_es.csv",
    "filename_gt": "traj_gt.csv",
    "filename_result_prefix": "traj_relative_errors",
    "format_es": "pose",
    "format_gt": "pose",
    "offset_sec": 0.0,
    "max_difference_sec": 0.02,
    "segment_length": 50.0,
    "skip_frames": 10,
    "least_squares_align": False,
    "least_squares_align_translation_only": False,
    "least_squares_align_range": 0.2,
    "least_squares_align_mode": "se3",
    "keep_partial_segments": False,
}


class EvaluationSettings:
    """
    Validated evaluation parameters.

    Args:
        cfg: DictConfig or dict with the keys of ``DEFAULTS``.

    Raises:
        ConfigurationError: on out-of-range values.
    """

    def __init__(self, cfg=None):
        if isinstance(cfg, DictConfig):
            cfg = OmegaConf.to_container(cfg, resolve=True)
        cfg = cfg or {}

        unknown = sorted(set(cfg) - set(DEFAULTS))
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}")

        def get(key):
            return cfg.get(key, DEFAULTS[key])

        self.data_dir = str(get("data_dir"))
        self.filename_es = str(get("filename_es"))
        self.filename_gt = str(get("filename_gt"))
        self.filename_result_prefix = str(get("filename_result_prefix"))
        self.format_es = str(get("format_es"))
        self.format_gt = str(get("format_gt"))

        self.offset_sec = self._as_number("offset_sec", get("offset_sec"))
        self.max_difference_sec = self._as_number(
            "max_difference_sec", get("max_difference_sec")
        )
        self.segment_length = self._as_number("segment_length", get("segment_length"))
        self.skip_frames = self._as_int("skip_frames", get("skip_frames"))

        self.least_squares_align = bool(get("least_squares_align"))
        self.least_squares_align_translation_only = bool(
            get("least_squares_align_translation_only")
        )
        self.least_squares_align_range = self._as_number(
            "least_squares_align_range", get("least_squares_align_range")
        )
        self.least_squares_align_mode = str(get("least_squares_align_mode"))
        self.keep_partial_segments = bool(get("keep_partial_segments"))

        self._validate()

    @classmethod
    def from_cfg(cls, cfg):
        return cls(cfg)

    @staticmethod
    def _as_number(key, value):
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{key} must be a number, got {value!r}") from e

    @staticmethod
    def _as_int(key, value):
        number = EvaluationSettings._as_number(key, value)
        if number != int(number):
            raise ConfigurationError(f"{key} must be an integer, got {value!r}")
        return int(number)

    def _validate(self):
        for key in ("format_es", "format_gt"):
            fmt = getattr(self, key)
            if fmt not in list_loaders():
                raise ConfigurationError(
                    f"Format {fmt} is not supported ({key}). "
                    f"Available: {', '.join(list_loaders())}"
                )
        if self.max_difference_sec < 0:
            raise ConfigurationError(
                f"max_difference_sec must be >= 0, got {self.max_difference_sec}"
            )
        if not self.segment_length > 0:
            raise ConfigurationError(
                f"segment_length must be > 0, got {self.segment_length}"
            )
        if self.skip_frames < 1:
            raise ConfigurationError(
                f"skip_frames must be >= 1, got {self.skip_frames}"
            )
        if not 0.0 < self.least_squares_align_range <= 1.0:
            raise ConfigurationError(
                "least_squares_align_range must be in (0, 1], got "
                f"{self.least_squares_align_range}"
            )
        if self.least_squares_align_mode not in ALIGN_MODES:
            raise ConfigurationError(
                f"least_squares_align_mode must be one of {ALIGN_MODES}, got "
                f"{self.least_squares_align_mode!r}"
            )

    @property
    def offset_nsec(self):
        return sec_to_nanosec(self.offset_sec)

    @property
    def max_difference_nsec(self):
        return sec_to_nanosec(self.max_difference_sec)

    @property
    def align_options(self):
        return AlignOptions(
            least_squares=self.least_squares_align,
            translation_only=self.least_squares_align_translation_only,
            align_range=self.least_squares_align_range,
            mode=self.least_squares_align_mode,
        )

    @property
    def path_es(self):
        return os.path.join(self.data_dir, self.filename_es)

    @property
    def path_gt(self):
        return os.path.join(self.data_dir, self.filename_gt)

    def to_dict(self):
        return {key: getattr(self, key) for key in DEFAULTS}
