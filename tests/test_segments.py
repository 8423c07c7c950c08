"""Tests for segment selection along the groundtruth path."""

import pytest
import numpy as np
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from trajectory_eval.core import Pose
from trajectory_eval.evaluation.segments import (
    Segment,
    last_frame_from_segment_length,
    select_segments,
    trajectory_distances,
)


def straight_line(n=101, step=1.0):
    return [Pose(np.eye(3), [i * step, 0.0, 0.0]) for i in range(n)]


def random_walk(n=300, seed=1):
    rng = np.random.default_rng(seed)
    p = np.cumsum(rng.uniform(0.1, 1.5, size=(n, 3)) * rng.choice([-1, 1], size=(n, 3)), axis=0)
    return [Pose(np.eye(3), pi) for pi in p]


class TestTrajectoryDistances:
    def test_straight_line(self):
        d = trajectory_distances(np.array([p.translation for p in straight_line(5)]))
        np.testing.assert_array_almost_equal(d, [0, 1, 2, 3, 4])

    def test_single_and_empty(self):
        assert trajectory_distances(np.zeros((1, 3))).tolist() == [0.0]
        assert trajectory_distances(np.zeros((0, 3))).size == 0

    def test_last_frame(self):
        d = np.arange(11, dtype=float)
        assert last_frame_from_segment_length(d, 0, 5.0) == 5
        assert last_frame_from_segment_length(d, 2, 4.5) == 7
        assert last_frame_from_segment_length(d, 6, 4.0) == 10
        assert last_frame_from_segment_length(d, 7, 4.0) is None


class TestSelectSegments:
    def test_straight_line_scenario(self):
        segments = select_segments(straight_line(), skip_frames=10, segment_length=50)
        assert [s.first_frame for s in segments] == [0, 10, 20, 30, 40, 50]
        for s in segments:
            assert s.last_frame == s.first_frame + 50
            assert s.num_frames == 50
            assert s.length == pytest.approx(50.0)
            assert s.target_length == 50.0

    def test_stride(self):
        segments = select_segments(straight_line(), skip_frames=1, segment_length=50)
        assert [s.first_frame for s in segments] == list(range(51))

    def test_never_shorter_than_target(self):
        poses = random_walk()
        for length in [3.0, 10.0, 37.5]:
            for s in select_segments(poses, 3, length):
                assert s.length >= length
                assert s.last_frame <= len(poses) - 1
                # the frame before the end had not reached the target yet
                d = trajectory_distances(np.array([p.translation for p in poses]))
                assert d[s.last_frame - 1] - d[s.first_frame] < length

    def test_deterministic(self):
        poses = random_walk()
        assert select_segments(poses, 5, 20.0) == select_segments(poses, 5, 20.0)

    def test_too_short_path(self):
        assert select_segments(straight_line(20), 10, 50) == []
        assert select_segments(straight_line(1), 10, 50) == []
        assert select_segments([], 10, 50) == []

    def test_discards_partial_tail(self):
        segments = select_segments(straight_line(101), 7, 50)
        assert segments[-1].first_frame == 49
        assert all(s.length >= 50 for s in segments)

    def test_keep_partial_tail(self):
        segments = select_segments(straight_line(101), 10, 50, keep_partial=True)
        assert [s.first_frame for s in segments] == list(range(0, 100, 10))
        tail = segments[-1]
        assert tail == Segment(90, 100, 50.0, 10.0)
        assert tail.num_frames == 10

    def test_stationary_start(self):
        """Frames without motion are spanned until the length is reached"""
        poses = [Pose()] * 5 + straight_line(20)
        segments = select_segments(poses, 100, 3.0)
        assert segments[0].first_frame == 0
        assert segments[0].last_frame == 8
        assert segments[0].length == pytest.approx(3.0)

    def test_invalid_stride(self):
        with pytest.raises(ValueError):
            select_segments(straight_line(), 0, 50)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
