"""
Shared evaluation logic: associate an estimate with groundtruth, compute
segment relative errors and summarise them. Used by the Hydra entry point
``trajectory_eval.evaluate`` and by the scripts.
"""

import logging

from trajectory_eval.data import load_trajectory
from trajectory_eval.evaluation.association import associate
from trajectory_eval.evaluation.metrics import summarize_relative_errors
from trajectory_eval.evaluation.relative_error import calc_sequence_errors


logger = logging.getLogger(__name__)


def evaluate_trajectories(gt, es, settings):
    """
    Evaluate an estimate against groundtruth.

    Args:
        gt: groundtruth ``Trajectory``.
        es: estimate ``Trajectory``.
        settings: ``EvaluationSettings``.

    Returns:
        Dict with keys ``errors`` (list of ``RelativeError``), ``metrics``,
        ``num_matches``, ``num_dropped``, ``num_estimates``.
    """
    association = associate(
        gt,
        es,
        offset_nsec=settings.offset_nsec,
        max_diff_nsec=settings.max_difference_nsec,
    )

    logger.info("Computing relative errors...")
    errors = calc_sequence_errors(
        association.gt_poses,
        association.es_poses,
        settings.segment_length,
        settings.skip_frames,
        align_options=settings.align_options,
        keep_partial=settings.keep_partial_segments,
    )
    logger.info("...done")

    return {
        "errors": errors,
        "metrics": summarize_relative_errors(errors),
        "num_matches": len(association),
        "num_dropped": association.num_dropped,
        "num_estimates": len(es),
    }


def evaluate_files(settings):
    """Load the trajectories named in ``settings`` and evaluate them."""
    logger.info("Load groundtruth: %s", settings.filename_gt)
    gt = load_trajectory(settings.format_gt, settings.path_gt)
    logger.info("Load estimate: %s", settings.filename_es)
    es = load_trajectory(settings.format_es, settings.path_es)
    return evaluate_trajectories(gt, es, settings)


def format_metrics(results, name, segment_length=None):
    """Return a human-readable string summarising the evaluation metrics."""
    m = results["metrics"]
    title = f"Results for: {name}"
    if segment_length is not None:
        title += f" ({segment_length:g} m segments)"

    lines = [
        f"{'='*60}",
        title,
        f"{'='*60}",
        f"  matched: {results['num_matches']}/{results['num_estimates']}"
        f"   dropped: {results['num_dropped']}   segments: {m['num_segments']}",
        f"    t_rel: {m['t_rel']:.3f}%   r_rel: {m['r_rel']:.4f} deg/m",
        f"    t_err: mean={m['t_err_mean']:.3f}m  rmse={m['t_err_rmse']:.3f}m  max={m['t_err_max']:.3f}m",
        f"    r_err: mean={m['r_err_mean']:.3f}deg  rmse={m['r_err_rmse']:.3f}deg  max={m['r_err_max']:.3f}deg",
        f"    scale: mean={m['scale_mean']:.4f}  std={m['scale_std']:.4f}",
    ]
    return "\n".join(lines)
