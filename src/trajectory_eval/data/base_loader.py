"""
Abstract base class for trajectory file loaders.

Provides the common CSV parsing, validation and ``Trajectory`` construction.
Concrete subclasses declare their column layout.
"""

import logging
import os
from abc import ABC, abstractmethod

import numpy as np

from trajectory_eval.core.time_series import Trajectory
from trajectory_eval.exceptions import MalformedPoseError


logger = logging.getLogger(__name__)


class TrajectoryLoader(ABC):
    """
    Abstract loader producing a stamped-pose ``Trajectory`` from a file.

    Files are comma separated, ``#`` starts a comment line, the first column
    is an integer nanosecond stamp.

    Args:
        cfg: Optional loader-specific configuration.
    """

    name = None
    delimiter = ","
    comments = "#"

    def __init__(self, cfg=None):
        self.cfg = cfg or {}

    @property
    @abstractmethod
    def min_columns(self):
        """Minimum number of columns (stamp included) a record must have."""
        pass

    @abstractmethod
    def _to_vec7(self, data):
        """
        Convert the float columns (stamp excluded) to pose vectors.

        Args:
            data: (N, C) float array, columns 1.. of the file.

        Returns:
            (N, 7) array of ``[x, y, z, qx, qy, qz, qw]``.
        """
        pass

    def load(self, path):
        """
        Load a trajectory.

        Raises:
            FileNotFoundError: if ``path`` does not exist.
            MalformedPoseError: on missing columns, non-finite values,
                zero quaternions or non-increasing stamps.
        """
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Trajectory file not found: {path}")

        logger.info("Loading '%s' formatted trajectory from: %s", self.name, path)
        stamps, data = self._read(path)
        vec7 = self._to_vec7(data)
        trajectory = Trajectory.from_vec7(stamps, vec7, source=path)
        logger.info("Loaded %d poses from %s", len(trajectory), path)
        return trajectory

    def _read(self, path):
        rows = []
        stamps = []
        with open(path, "r") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith(self.comments):
                    continue
                parts = [p.strip() for p in line.split(self.delimiter)]
                if len(parts) < self.min_columns:
                    raise MalformedPoseError(
                        f"expected at least {self.min_columns} columns, "
                        f"got {len(parts)} (line {line_no})",
                        index=len(stamps),
                        source=path,
                    )
                try:
                    stamp = int(parts[0])
                    row = [float(p) for p in parts[1:self.min_columns]]
                except ValueError as e:
                    raise MalformedPoseError(
                        f"cannot parse line {line_no}: {e}",
                        index=len(stamps),
                        source=path,
                    ) from e
                stamps.append(stamp)
                rows.append(row)

        if not rows:
            logger.warning("No trajectory data in %s", path)
            return np.zeros(0, dtype=np.int64), np.zeros((0, self.min_columns - 1))

        return np.array(stamps, dtype=np.int64), np.array(rows, dtype=float)
