"""
Segment-based relative pose error.

For each segment the estimate is anchored to the groundtruth at the segment
start (or least-squares aligned over the leading part of the segment), and
the remaining discrepancy at the segment end is reported as translation,
rotation (angle-axis) and scale error.
"""

import logging
from collections import namedtuple

import numpy as np

from trajectory_eval.core.pose import Pose
from trajectory_eval.evaluation.segments import select_segments
from trajectory_eval.exceptions import (
    NonFiniteResultError,
    SegmentEvaluationError,
)
from trajectory_eval.utils.geometry import (
    chordal_mean_rotation,
    similarity_alignment,
)


logger = logging.getLogger(__name__)

ALIGN_MODES = ("se3", "sim3")

# Groundtruth displacements below this norm make the scale ratio undefined
MIN_DISPLACEMENT = 1e-9


AlignOptions = namedtuple(
    "AlignOptions", "least_squares, translation_only, align_range, mode"
)
AlignOptions.__new__.__defaults__ = (False, False, 0.2, "se3")


RelativeError = namedtuple(
    "RelativeError",
    "first_frame, translation_error, rotation_error, length, num_frames, scale_error",
)


def num_alignment_poses(segment, align_range):
    """Number of leading segment poses used for the least-squares fit."""
    n_poses = segment.num_frames + 1
    return min(n_poses, max(2, int(align_range * segment.num_frames)))


def least_squares_alignment(gt_poses, es_poses, translation_only=False, mode="se3"):
    """
    Fit the world correction ``T`` with ``T * es_i ~ gt_i``.

    Args:
        gt_poses: groundtruth ``Pose`` list.
        es_poses: estimate ``Pose`` list, same length.
        translation_only: only fit a translation, keep estimated rotations.
        mode: "se3" (rotation + translation) or "sim3" (+ scale).

    Returns:
        Tuple (rotation, translation, scale) of the correction.
    """
    if mode not in ALIGN_MODES:
        raise ValueError(f"Unknown alignment mode: {mode}")

    p_gt = np.array([p.translation for p in gt_poses])
    p_es = np.array([p.translation for p in es_poses])

    if translation_only:
        return np.eye(3), np.mean(p_gt - p_es, axis=0), 1.0

    Rot_gt = np.array([p.rotation for p in gt_poses])
    Rot_es = np.array([p.rotation for p in es_poses])
    Rot = chordal_mean_rotation(Rot_gt, Rot_es)
    t, c = similarity_alignment(p_gt, p_es, Rot, with_scale=(mode == "sim3"))
    return Rot, t, c


def _apply_correction(Rot, t, c, pose):
    """c * Rot * position + t, orientation rotated by Rot."""
    return Pose(Rot.dot(pose.rotation), c * Rot.dot(pose.translation) + t)


def compute_relative_error(gt_poses, es_poses, segment, align_options=None):
    """
    Relative error of one segment.

    Args:
        gt_poses: associated groundtruth poses.
        es_poses: associated estimate poses (same indexing).
        segment: ``Segment`` to evaluate.
        align_options: ``AlignOptions`` (default: anchor on the first pose).

    Returns:
        ``RelativeError``.

    Raises:
        NonFiniteResultError: if any error component is not finite.
    """
    if align_options is None:
        align_options = AlignOptions()

    first, last = segment.first_frame, segment.last_frame
    gt_first = gt_poses[first]

    if align_options.least_squares:
        n_align = num_alignment_poses(segment, align_options.align_range)
        Rot, t, c = least_squares_alignment(
            gt_poses[first:first + n_align],
            es_poses[first:first + n_align],
            translation_only=align_options.translation_only,
            mode=align_options.mode,
        )
        es_last = _apply_correction(Rot, t, c, es_poses[last])
    else:
        # Anchor the estimate on the groundtruth start pose
        es_last = gt_first * es_poses[first].inverse() * es_poses[last]

    gt_first_inv = gt_first.inverse()
    gt_rel = gt_first_inv * gt_poses[last]
    es_rel = gt_first_inv * es_last
    error = gt_rel.inverse() * es_rel

    translation_error = np.array(error.translation)
    rotation_error = error.log_rotation()

    gt_norm = np.linalg.norm(gt_rel.translation)
    if gt_norm < MIN_DISPLACEMENT:
        scale_error = 1.0
    else:
        scale_error = float(np.linalg.norm(es_rel.translation) / gt_norm)

    if not (
        np.all(np.isfinite(translation_error))
        and np.all(np.isfinite(rotation_error))
        and np.isfinite(scale_error)
    ):
        raise NonFiniteResultError(first, "non-finite relative error")

    return RelativeError(
        first_frame=first,
        translation_error=translation_error,
        rotation_error=rotation_error,
        length=segment.length,
        num_frames=segment.num_frames,
        scale_error=scale_error,
    )


def calc_sequence_errors(
    gt_poses,
    es_poses,
    segment_length,
    skip_frames,
    align_options=None,
    keep_partial=False,
):
    """
    Relative errors for all segments of an associated pose sequence.

    Every segment is attempted. Failed segments are collected and reported
    together after the sweep; no partial result is returned.

    Args:
        gt_poses: associated groundtruth poses.
        es_poses: associated estimate poses.
        segment_length: target segment arc length [m].
        skip_frames: stride between segment start frames.
        align_options: ``AlignOptions``.
        keep_partial: keep tail segments shorter than ``segment_length``.

    Returns:
        List of ``RelativeError`` in increasing ``first_frame`` order.

    Raises:
        SegmentEvaluationError: if any segment failed.
    """
    if len(gt_poses) != len(es_poses):
        raise ValueError(
            f"Got {len(gt_poses)} groundtruth and {len(es_poses)} estimate poses"
        )

    segments = select_segments(
        gt_poses, skip_frames, segment_length, keep_partial=keep_partial
    )
    logger.info("Evaluating %d segments of %.1f m", len(segments), segment_length)
    if not segments:
        logger.warning(
            "No segment of %.1f m fits into %d associated poses",
            segment_length, len(gt_poses),
        )

    errors = []
    failures = []
    for segment in segments:
        try:
            err = compute_relative_error(gt_poses, es_poses, segment, align_options)
        except (NonFiniteResultError, np.linalg.LinAlgError) as e:
            logger.error("Segment at frame %d failed: %s", segment.first_frame, e)
            failures.append((segment.first_frame, e))
            continue
        logger.debug(
            "frame %d: |t_err|=%.4f |r_err|=%.5f scale=%.4f",
            err.first_frame,
            np.linalg.norm(err.translation_error),
            np.linalg.norm(err.rotation_error),
            err.scale_error,
        )
        errors.append(err)

    if failures:
        raise SegmentEvaluationError(failures)

    return errors
