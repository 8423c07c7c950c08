"""
Pose and time-series primitives.

Usage:
    from trajectory_eval.core import Pose, Trajectory, TimeSeries
"""

from trajectory_eval.core.pose import Pose
from trajectory_eval.core.time_series import (
    StampedPose,
    TimeSeries,
    Trajectory,
    sec_to_nanosec,
    nanosec_to_sec,
)
