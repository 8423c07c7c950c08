"""Tests for Pose, TimeSeries and Trajectory."""

import pytest
import numpy as np
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from trajectory_eval.core import (
    Pose, TimeSeries, Trajectory, StampedPose, sec_to_nanosec,
)
from trajectory_eval.exceptions import MalformedPoseError
from trajectory_eval.utils.geometry import from_rpy, rotz


# ==================== Pose Tests ====================

class TestPose:
    def test_identity(self):
        T = Pose.identity()
        np.testing.assert_array_equal(T.as_matrix(), np.eye(4))

    def test_compose_matches_matrices(self):
        a = Pose(from_rpy(0.1, 0.2, 0.3), [1.0, 2.0, 3.0])
        b = Pose(from_rpy(-0.3, 0.1, 0.5), [-1.0, 0.5, 2.0])
        np.testing.assert_array_almost_equal(
            (a * b).as_matrix(), a.as_matrix() @ b.as_matrix()
        )

    def test_inverse(self):
        a = Pose(from_rpy(0.4, -0.2, 1.3), [3.0, -1.0, 0.5])
        np.testing.assert_array_almost_equal((a * a.inverse()).as_matrix(), np.eye(4))
        np.testing.assert_array_almost_equal((a.inverse() * a).as_matrix(), np.eye(4))

    def test_from_vec7(self):
        a = 0.5
        T = Pose.from_vec7([1, 2, 3, 0, 0, np.sin(a / 2), np.cos(a / 2)])
        np.testing.assert_array_almost_equal(T.rotation, rotz(a))
        np.testing.assert_array_equal(T.translation, [1, 2, 3])

    def test_vec7_roundtrip(self):
        T = Pose(from_rpy(0.3, 0.2, -0.1), [4.0, 5.0, 6.0])
        T2 = Pose.from_vec7(T.as_vec7())
        np.testing.assert_array_almost_equal(T2.as_matrix(), T.as_matrix())

    def test_immutable(self):
        T = Pose(np.eye(3), [1.0, 2.0, 3.0])
        with pytest.raises(ValueError):
            T.translation[0] = 5.0
        with pytest.raises(AttributeError):
            T.foo = 1

    def test_does_not_alias_input(self):
        t = np.array([1.0, 2.0, 3.0])
        T = Pose(np.eye(3), t)
        t[0] = 10.0
        assert T.translation[0] == 1.0

    def test_is_finite(self):
        assert Pose().is_finite()
        assert not Pose(np.eye(3), [np.nan, 0, 0]).is_finite()

    def test_log_rotation(self):
        T = Pose(rotz(0.25), np.zeros(3))
        np.testing.assert_array_almost_equal(T.log_rotation(), [0, 0, 0.25])


# ==================== TimeSeries Tests ====================

class TestTimeSeries:
    def _series(self):
        return TimeSeries([100, 200, 300, 400], ["a", "b", "c", "d"])

    def test_exact_match(self):
        stamp, value, found = self._series().nearest_value(300)
        assert found
        assert (stamp, value) == (300, "c")

    def test_nearest_between(self):
        series = self._series()
        assert series.nearest_value(240)[:2] == (200, "b")
        assert series.nearest_value(260)[:2] == (300, "c")

    def test_tie_prefers_earlier(self):
        assert self._series().nearest_value(250)[:2] == (200, "b")

    def test_outside_range(self):
        series = self._series()
        assert series.nearest_value(-1000)[:2] == (100, "a")
        assert series.nearest_value(10**12)[:2] == (400, "d")

    def test_empty(self):
        stamp, value, found = TimeSeries([], []).nearest_value(5)
        assert not found
        assert stamp is None and value is None

    def test_single_sample(self):
        assert TimeSeries([7], ["x"]).nearest_value(1000) == (7, "x", True)

    def test_nearest_indices_vectorized(self):
        idx = self._series().nearest_indices([90, 149, 151, 399, 500])
        np.testing.assert_array_equal(idx, [0, 0, 1, 3, 3])

    def test_unsorted_raises(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            TimeSeries([1, 3, 2], [0, 0, 0])

    def test_duplicate_stamp_raises(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            TimeSeries([1, 2, 2], [0, 0, 0])

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            TimeSeries([1, 2], [0])

    def test_large_nanosecond_stamps(self):
        base = 1403636579758555392
        series = TimeSeries([base, base + 5_000_000], ["a", "b"])
        assert series.nearest_value(base + 2_000_000)[:2] == (base, "a")
        assert series.nearest_value(base + 3_000_000)[:2] == (base + 5_000_000, "b")


# ==================== Trajectory Tests ====================

class TestTrajectory:
    def test_from_vec7(self):
        vec7 = np.zeros((3, 7))
        vec7[:, 0] = [0.0, 1.0, 2.0]
        vec7[:, 6] = 1.0
        traj = Trajectory.from_vec7([10, 20, 30], vec7)
        assert len(traj) == 3
        np.testing.assert_array_equal(traj.positions()[:, 0], [0.0, 1.0, 2.0])
        assert traj.stamped_poses()[1] == StampedPose(20, traj.poses[1])

    def test_non_finite_pose_is_fatal(self):
        poses = [Pose(), Pose(np.eye(3), [0.0, np.inf, 0.0])]
        with pytest.raises(MalformedPoseError, match="record 1"):
            Trajectory([1, 2], poses, source="gt.csv")

    def test_non_increasing_stamps_is_fatal(self):
        with pytest.raises(MalformedPoseError, match="gt.csv"):
            Trajectory([2, 1], [Pose(), Pose()], source="gt.csv")

    def test_zero_quaternion_is_fatal(self):
        vec7 = np.zeros((2, 7))
        vec7[0, 6] = 1.0
        with pytest.raises(MalformedPoseError, match="record 1"):
            Trajectory.from_vec7([1, 2], vec7)


class TestTimeConversion:
    def test_sec_to_nanosec(self):
        assert sec_to_nanosec(0.02) == 20_000_000
        assert sec_to_nanosec(0.001) == 1_000_000
        assert sec_to_nanosec(-0.005) == -5_000_000
        assert isinstance(sec_to_nanosec(1.5), int)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
