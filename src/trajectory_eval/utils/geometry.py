"""
Geometry utilities for SO(3) and SE(3) operations.

This module contains functions for:
- SO(3) exponential and logarithm maps
- Rotation matrix <-> unit quaternion conversions
- Rotation matrix normalization
- Least-squares rotation / similarity fits used for local alignment
"""

import numpy as np


# Identity matrices for common dimensions
Id3 = np.eye(3)


def so3_exp(phi):
    """
    SO(3) exponential map: converts rotation vector to rotation matrix.

    Args:
        phi: 3D rotation vector (axis-angle representation)

    Returns:
        3x3 rotation matrix
    """
    phi = np.asarray(phi, dtype=float)
    angle = np.linalg.norm(phi)

    # Near phi==0, use first order Taylor expansion
    if np.abs(angle) < 1e-8:
        return normalize_rot(Id3 + skew_symmetric(phi))

    axis = phi / angle
    skew_axis = skew_symmetric(axis)
    s = np.sin(angle)
    c = np.cos(angle)

    return c * Id3 + (1 - c) * np.outer(axis, axis) + s * skew_axis


def so3_log(Rot):
    """
    SO(3) logarithm map: converts rotation matrix to rotation vector.

    Goes through the unit quaternion with non-negative scalar part, so the
    returned angle always lies in [0, pi] (shortest rotation).

    Args:
        Rot: 3x3 rotation matrix

    Returns:
        3D rotation vector (axis * angle)
    """
    q = rot_to_quat(Rot)
    w = q[3]
    v = q[:3]
    v_norm = np.linalg.norm(v)

    if v_norm < 1e-12:
        # First order: angle ~ 2 * |v| / w
        return 2.0 * v

    angle = 2.0 * np.arctan2(v_norm, w)
    return v / v_norm * angle


def skew_symmetric(v):
    """
    Convert 3D vector to its skew-symmetric matrix representation.

    Args:
        v: 3D vector [v0, v1, v2]

    Returns:
        3x3 skew-symmetric matrix
    """
    return np.array([[0, -v[2], v[1]],
                     [v[2], 0, -v[0]],
                     [-v[1], v[0], 0]])


def normalize_rot(Rot):
    """
    Normalize a rotation matrix using SVD to correct numerical drift.

    Ensures the matrix remains in SO(3) by projecting onto the nearest
    proper orthogonal matrix. Also used to project a sum of rotations
    onto SO(3) (chordal mean).

    Args:
        Rot: 3x3 matrix (rotation with numerical errors, or a sum of rotations)

    Returns:
        3x3 normalized rotation matrix
    """
    # The SVD is commonly written as a = U S V.H.
    # The v returned by this function is V.H and u = U.
    U, _, V = np.linalg.svd(Rot, full_matrices=False)

    S = np.eye(3)
    S[2, 2] = np.linalg.det(U) * np.linalg.det(V)
    return U.dot(S).dot(V)


def quat_to_rot(q):
    """
    Convert a quaternion [qx, qy, qz, qw] to a rotation matrix.

    The quaternion is normalized first.

    Args:
        q: quaternion, Hamilton convention, scalar last

    Returns:
        3x3 rotation matrix

    Raises:
        ValueError: if the quaternion has (numerically) zero norm.
    """
    q = np.asarray(q, dtype=float)
    norm = np.linalg.norm(q)
    if not norm > 1e-12:
        raise ValueError(f"Cannot convert zero-norm quaternion {q.tolist()}")
    x, y, z, w = q / norm
    return np.array(
        [
            [1 - 2 * y * y - 2 * z * z, 2 * x * y - 2 * z * w, 2 * x * z + 2 * y * w],
            [2 * x * y + 2 * z * w, 1 - 2 * x * x - 2 * z * z, 2 * y * z - 2 * x * w],
            [2 * x * z - 2 * y * w, 2 * y * z + 2 * x * w, 1 - 2 * x * x - 2 * y * y],
        ],
        dtype=float,
    )


def rot_to_quat(Rot):
    """
    Convert a rotation matrix to a unit quaternion [qx, qy, qz, qw].

    Uses Shepperd's method (branch on the largest diagonal term) and
    returns the representative with qw >= 0.

    Args:
        Rot: 3x3 rotation matrix

    Returns:
        Unit quaternion as a (4,) array, scalar last
    """
    R = np.asarray(Rot, dtype=float)
    trace = np.trace(R)

    if trace > 0.0:
        s = 2.0 * np.sqrt(1.0 + trace)
        w = 0.25 * s
        x = (R[2, 1] - R[1, 2]) / s
        y = (R[0, 2] - R[2, 0]) / s
        z = (R[1, 0] - R[0, 1]) / s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        w = (R[2, 1] - R[1, 2]) / s
        x = 0.25 * s
        y = (R[0, 1] + R[1, 0]) / s
        z = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        w = (R[0, 2] - R[2, 0]) / s
        x = (R[0, 1] + R[1, 0]) / s
        y = 0.25 * s
        z = (R[1, 2] + R[2, 1]) / s
    else:
        s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        w = (R[1, 0] - R[0, 1]) / s
        x = (R[0, 2] + R[2, 0]) / s
        y = (R[1, 2] + R[2, 1]) / s
        z = 0.25 * s

    q = np.array([x, y, z, w])
    q /= np.linalg.norm(q)
    if q[3] < 0.0:
        q = -q
    return q


def rotx(t):
    """Elementary rotation matrix around x-axis."""
    c = np.cos(t)
    s = np.sin(t)
    return np.array([[1,  0,  0],
                     [0,  c, -s],
                     [0,  s,  c]])


def roty(t):
    """Elementary rotation matrix around y-axis."""
    c = np.cos(t)
    s = np.sin(t)
    return np.array([[c,  0,  s],
                     [0,  1,  0],
                     [-s, 0,  c]])


def rotz(t):
    """Elementary rotation matrix around z-axis."""
    c = np.cos(t)
    s = np.sin(t)
    return np.array([[c, -s,  0],
                     [s,  c,  0],
                     [0,  0,  1]])


def from_rpy(roll, pitch, yaw):
    """
    Convert roll-pitch-yaw angles to rotation matrix.

    Uses ZYX Euler angle convention (yaw -> pitch -> roll).
    """
    return rotz(yaw).dot(roty(pitch).dot(rotx(roll)))


def chordal_mean_rotation(Rot_a, Rot_b):
    """
    Least-squares rotation R minimizing sum_i ||R @ Rot_b[i] - Rot_a[i]||_F^2.

    Closed form: the SO(3) projection of sum_i Rot_a[i] @ Rot_b[i].T.

    Args:
        Rot_a: target rotations (n, 3, 3)
        Rot_b: source rotations (n, 3, 3)

    Returns:
        3x3 rotation matrix mapping the source frame onto the target frame
    """
    M = np.einsum("nij,nkj->ik", Rot_a, Rot_b)
    return normalize_rot(M)


def similarity_alignment(p_target, p_source, Rot, with_scale=False):
    """
    Least-squares translation (and scale) for a fixed rotation.

    Minimizes sum_i ||c * Rot @ p_source[i] + t - p_target[i]||^2 over t
    (and c when ``with_scale``). Centred-position form of eq. 41/42 in:

    Umeyama, Shinji: "Least-squares estimation of transformation parameters
    between two point patterns." IEEE PAMI, 1991

    Args:
        p_target: (n, 3) target positions
        p_source: (n, 3) source positions
        Rot: 3x3 rotation already fitted between the two frames
        with_scale: If True, also estimate scale (default: False, scale=1.0)

    Returns:
        Tuple of (t, c):
            t: 3-dimensional translation vector
            c: scale factor (float); 1.0 when the source points coincide
    """
    mean_target = p_target.mean(axis=0)
    mean_source = p_source.mean(axis=0)

    c = 1.0
    if with_scale:
        source_rot = (Rot @ (p_source - mean_source).T).T
        sigma_source = np.sum(source_rot ** 2)
        if sigma_source > 1e-12:
            c = float(np.sum((p_target - mean_target) * source_rot) / sigma_source)

    t = mean_target - c * Rot.dot(mean_source)
    return t, c
