"""
Trajectory association and relative pose error evaluation.

Usage:
    from trajectory_eval.evaluation.association import associate
    from trajectory_eval.evaluation.relative_error import calc_sequence_errors
    from trajectory_eval.evaluation.evaluator import evaluate_trajectories, format_metrics
"""
