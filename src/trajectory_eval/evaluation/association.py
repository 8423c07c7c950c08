"""
Temporal association of an estimated trajectory with groundtruth.

Every estimate sample is paired with the groundtruth sample nearest to its
(offset) stamp. Samples without a groundtruth match inside the tolerance
are dropped and counted, never raised.
"""

import logging
from collections import namedtuple

import numpy as np

from trajectory_eval.core.time_series import sec_to_nanosec


logger = logging.getLogger(__name__)

AlignedPair = namedtuple("AlignedPair", "gt, es")


class Association:
    """
    Result of ``associate``: index-aligned pose pairs plus diagnostics.

    Attributes:
        pairs: list of ``AlignedPair`` in estimate stamp order.
        es_stamps: stamps of the kept estimate samples.
        gt_stamps: stamps of their matched groundtruth samples.
        num_dropped: estimate samples without a match inside the tolerance.
    """

    def __init__(self, pairs, es_stamps, gt_stamps, num_dropped):
        self.pairs = pairs
        self.es_stamps = es_stamps
        self.gt_stamps = gt_stamps
        self.num_dropped = num_dropped

    def __len__(self):
        return len(self.pairs)

    @property
    def gt_poses(self):
        return [p.gt for p in self.pairs]

    @property
    def es_poses(self):
        return [p.es for p in self.pairs]


def associate(gt, es, offset_nsec=0, max_diff_nsec=sec_to_nanosec(0.02)):
    """
    Pair each estimate sample with its nearest groundtruth sample.

    Args:
        gt: groundtruth ``Trajectory``.
        es: estimate ``Trajectory``.
        offset_nsec: added to the estimate stamps before matching.
        max_diff_nsec: largest accepted |t_gt - (t_es + offset)|.

    Returns:
        ``Association``; empty (not an error) when either input is empty.
    """
    offset_nsec = int(offset_nsec)
    max_diff_nsec = int(max_diff_nsec)

    logger.info("Associating timestamps of %d poses...", len(es))

    if len(es) == 0 or len(gt) == 0:
        if len(gt) == 0 and len(es) > 0:
            logger.warning("Groundtruth is empty, dropping all %d samples", len(es))
        return Association([], np.zeros(0, np.int64), np.zeros(0, np.int64), len(es))

    query = es.stamps + offset_nsec
    idx = gt.nearest_indices(query)
    matched = gt.stamps[idx]
    keep = np.abs(matched - query) <= max_diff_nsec

    pairs = [
        AlignedPair(gt.poses[j], es.poses[i])
        for i, j in zip(np.flatnonzero(keep).tolist(), idx[keep].tolist())
    ]
    num_dropped = int(np.count_nonzero(~keep))

    logger.info(
        "...done. Found %d matches, dropped %d samples.", len(pairs), num_dropped
    )
    if not pairs:
        logger.warning(
            "No estimate sample matched groundtruth within %.6f s",
            max_diff_nsec * 1e-9,
        )

    return Association(pairs, es.stamps[keep], matched[keep], num_dropped)
