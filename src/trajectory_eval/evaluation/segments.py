"""
Segment selection along the groundtruth path.

A segment starts every ``skip_frames`` frames and ends at the first frame
where the groundtruth arc length since the start reaches the target
segment length.
"""

import logging
from collections import namedtuple

import numpy as np


logger = logging.getLogger(__name__)


class Segment(namedtuple("Segment", "first_frame, last_frame, target_length, length")):
    """
    Frame range of one relative-error evaluation.

    The segment covers the frame intervals [first_frame, last_frame); the
    pose at ``last_frame`` closes the last interval.
    """

    __slots__ = ()

    @property
    def num_frames(self):
        return self.last_frame - self.first_frame


def trajectory_distances(positions):
    """
    Cumulative arc length along a path.

    Args:
        positions: (N, 3) positions.

    Returns:
        (N,) array, 0 at the first frame.
    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    distances = np.zeros(positions.shape[0])
    if positions.shape[0] > 1:
        dp = np.diff(positions, axis=0)
        distances[1:] = np.cumsum(np.linalg.norm(dp, axis=1))
    return distances


def last_frame_from_segment_length(distances, first_frame, segment_length):
    """
    First frame whose distance from ``first_frame`` is >= ``segment_length``.

    Returns None if the path ends before the length is reached.
    """
    target = distances[first_frame] + segment_length
    last_frame = int(np.searchsorted(distances, target, side="left"))
    last_frame = max(last_frame, first_frame + 1)
    # searchsorted works on absolute distances; re-check the difference itself
    while (
        last_frame < len(distances)
        and distances[last_frame] - distances[first_frame] < segment_length
    ):
        last_frame += 1
    if last_frame >= len(distances):
        return None
    return last_frame


def select_segments(gt_poses, skip_frames, segment_length, keep_partial=False):
    """
    Select evaluation segments on the groundtruth path.

    Args:
        gt_poses: sequence of groundtruth ``Pose``.
        skip_frames: stride between segment start frames (>= 1).
        segment_length: target arc length per segment [m].
        keep_partial: keep the tail segments that run out of path before
            reaching the target length (ending on the last frame).

    Returns:
        List of ``Segment`` ordered by ``first_frame``.
    """
    skip_frames = int(skip_frames)
    if skip_frames < 1:
        raise ValueError(f"skip_frames must be >= 1, got {skip_frames}")

    n = len(gt_poses)
    if n < 2:
        return []

    distances = trajectory_distances([p.translation for p in gt_poses])

    segments = []
    n_partial = 0
    for first_frame in range(0, n - 1, skip_frames):
        last_frame = last_frame_from_segment_length(
            distances, first_frame, segment_length
        )
        if last_frame is None:
            if not keep_partial:
                continue
            n_partial += 1
            last_frame = n - 1
        length = float(distances[last_frame] - distances[first_frame])
        segments.append(Segment(first_frame, last_frame, float(segment_length), length))

    logger.debug(
        "Selected %d segments of %.3f m (%d partial) on %d frames",
        len(segments), segment_length, n_partial, n,
    )
    return segments
