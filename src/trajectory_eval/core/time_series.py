"""
Time-stamped containers with nearest-neighbour lookup.

Stamps are integer nanoseconds, stored in a read-only int64 array that
must be strictly increasing.
"""

from collections import namedtuple

import numpy as np

from trajectory_eval.core.pose import Pose
from trajectory_eval.exceptions import MalformedPoseError


StampedPose = namedtuple("StampedPose", "stamp, pose")


def sec_to_nanosec(seconds):
    """Convert seconds to integer nanoseconds (rounded)."""
    return int(round(float(seconds) * 1e9))


def nanosec_to_sec(nanoseconds):
    return nanoseconds * 1e-9


class TimeSeries:
    """
    Ordered (stamp, value) samples.

    Args:
        stamps: strictly increasing integer nanosecond stamps.
        values: sequence of values, one per stamp.
    """

    def __init__(self, stamps, values):
        stamps = np.array(stamps, dtype=np.int64).reshape(-1)
        if len(stamps) != len(values):
            raise ValueError(
                f"Got {len(stamps)} stamps but {len(values)} values"
            )
        if stamps.size > 1 and not np.all(np.diff(stamps) > 0):
            raise ValueError("Stamps must be strictly increasing")
        stamps.setflags(write=False)
        self._stamps = stamps
        self._values = tuple(values)

    @property
    def stamps(self):
        return self._stamps

    @property
    def values(self):
        return self._values

    def __len__(self):
        return len(self._values)

    def __getitem__(self, i):
        return self._stamps[i], self._values[i]

    def __iter__(self):
        return zip(self._stamps.tolist(), self._values)

    def nearest_indices(self, query_stamps):
        """
        Index of the closest stored stamp for each query (vectorized).

        Compares the two neighbours around the insertion position; an exact
        tie resolves to the earlier sample. Returns an empty array when the
        series is empty.
        """
        query = np.asarray(query_stamps, dtype=np.int64).reshape(-1)
        n = self._stamps.size
        if n == 0:
            return np.zeros(0, dtype=np.int64)

        upper = np.searchsorted(self._stamps, query, side="left")
        upper = np.clip(upper, 0, n - 1)
        lower = np.clip(upper - 1, 0, n - 1)

        d_upper = np.abs(self._stamps[upper] - query)
        d_lower = np.abs(self._stamps[lower] - query)
        return np.where(d_lower <= d_upper, lower, upper)

    def nearest_value(self, stamp):
        """
        Closest sample to ``stamp``.

        Returns:
            Tuple (stamp, value, found). ``found`` is False only for an empty
            series, in which case stamp and value are None.
        """
        if len(self) == 0:
            return None, None, False
        idx = int(self.nearest_indices([stamp])[0])
        return int(self._stamps[idx]), self._values[idx], True


class Trajectory(TimeSeries):
    """
    Time series of ``Pose`` values.

    Construction validates that every pose is finite; a non-finite pose
    raises ``MalformedPoseError`` naming the record.

    Args:
        stamps: strictly increasing integer nanosecond stamps.
        poses: sequence of ``Pose``.
        source: optional label (e.g. file path) used in diagnostics.
    """

    def __init__(self, stamps, poses, source=None):
        self.source = source
        for i, pose in enumerate(poses):
            if not isinstance(pose, Pose):
                raise TypeError(f"Expected Pose at index {i}, got {type(pose)}")
            if not pose.is_finite():
                raise MalformedPoseError(
                    "non-finite pose values", index=i, source=source
                )
        try:
            super().__init__(stamps, poses)
        except ValueError as e:
            raise MalformedPoseError(str(e), source=source) from e

    @classmethod
    def from_vec7(cls, stamps, vec7, source=None):
        """Build from an (N, 7) array of ``[x, y, z, qx, qy, qz, qw]``."""
        vec7 = np.asarray(vec7, dtype=float).reshape(-1, 7)
        poses = []
        for i, row in enumerate(vec7):
            if not np.all(np.isfinite(row)):
                raise MalformedPoseError(
                    "non-finite pose values", index=i, source=source
                )
            try:
                poses.append(Pose.from_vec7(row))
            except ValueError as e:
                raise MalformedPoseError(str(e), index=i, source=source) from e
        return cls(stamps, poses, source=source)

    @property
    def poses(self):
        return self._values

    def stamped_poses(self):
        return [StampedPose(s, p) for s, p in self]

    def positions(self):
        if len(self) == 0:
            return np.zeros((0, 3))
        return np.array([p.translation for p in self._values])
