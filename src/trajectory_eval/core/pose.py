"""
Rigid-body pose (SE(3) element) used throughout the evaluation.

A ``Pose`` is the pose of a body frame expressed in a fixed reference
frame: ``p_ref = pose.rotation @ p_body + pose.translation``.
"""

import numpy as np

from trajectory_eval.utils.geometry import quat_to_rot, rot_to_quat, so3_log


def _frozen(array, shape):
    array = np.array(array, dtype=float).reshape(shape)
    array.setflags(write=False)
    return array


class Pose:
    """
    Immutable rigid transformation (rotation matrix + translation).

    Args:
        rotation: 3x3 rotation matrix (default: identity).
        translation: 3D translation (default: zero).
    """

    __slots__ = ("_rotation", "_translation")

    def __init__(self, rotation=None, translation=None):
        if rotation is None:
            rotation = np.eye(3)
        if translation is None:
            translation = np.zeros(3)
        self._rotation = _frozen(rotation, (3, 3))
        self._translation = _frozen(translation, (3,))

    @property
    def rotation(self):
        return self._rotation

    @property
    def translation(self):
        return self._translation

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_quaternion(cls, q_xyzw, translation):
        """Build from a quaternion [qx, qy, qz, qw] and a translation."""
        return cls(quat_to_rot(q_xyzw), translation)

    @classmethod
    def from_vec7(cls, vec):
        """Build from ``[x, y, z, qx, qy, qz, qw]``."""
        vec = np.asarray(vec, dtype=float)
        return cls.from_quaternion(vec[3:7], vec[:3])

    @classmethod
    def from_matrix(cls, T):
        """Build from a 4x4 homogeneous matrix."""
        T = np.asarray(T, dtype=float)
        return cls(T[:3, :3], T[:3, 3])

    def as_matrix(self):
        T = np.eye(4)
        T[:3, :3] = self._rotation
        T[:3, 3] = self._translation
        return T

    def as_vec7(self):
        return np.concatenate([self._translation, rot_to_quat(self._rotation)])

    def inverse(self):
        Rot_inv = self._rotation.T
        return Pose(Rot_inv, -Rot_inv.dot(self._translation))

    def log_rotation(self):
        """Angle-axis vector of the rotation, angle in [0, pi]."""
        return so3_log(self._rotation)

    def is_finite(self):
        return bool(
            np.all(np.isfinite(self._rotation))
            and np.all(np.isfinite(self._translation))
        )

    def __mul__(self, other):
        if not isinstance(other, Pose):
            return NotImplemented
        return Pose(
            self._rotation.dot(other._rotation),
            self._rotation.dot(other._translation) + self._translation,
        )

    def __repr__(self):
        t = np.array2string(self._translation, precision=4)
        r = np.array2string(self.log_rotation(), precision=4)
        return f"Pose(t={t}, rotvec={r})"
