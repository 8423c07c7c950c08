"""
Concrete trajectory file formats.

pose:  timestamp, x, y, z, qx, qy, qz, qw
euroc: timestamp, p_x, p_y, p_z, q_w, q_x, q_y, q_z, [v, b_w, b_a]
swe:   timestamp, x, y, z, qx, qy, qz, qw, vx, vy, vz,
       bgx, bgy, bgz, bax, bay, baz

Stamps are integer nanoseconds; columns past the pose are ignored.
"""

import numpy as np

from trajectory_eval.data.base_loader import TrajectoryLoader


class PoseLoader(TrajectoryLoader):
    """Plain stamped poses, quaternion scalar last."""

    name = "pose"

    @property
    def min_columns(self):
        return 8

    def _to_vec7(self, data):
        return data[:, 0:7]


class EurocLoader(TrajectoryLoader):
    """EuRoC groundtruth / estimate CSV, quaternion scalar first."""

    name = "euroc"

    @property
    def min_columns(self):
        return 8

    def _to_vec7(self, data):
        vec7 = np.empty((data.shape[0], 7))
        vec7[:, 0:3] = data[:, 0:3]
        vec7[:, 3:6] = data[:, 4:7]
        vec7[:, 6] = data[:, 3]
        return vec7


class SWEResultLoader(TrajectoryLoader):
    """Sliding-window estimator results (pose, velocity, biases)."""

    name = "swe"

    @property
    def min_columns(self):
        return 17

    def _to_vec7(self, data):
        return data[:, 0:7]
