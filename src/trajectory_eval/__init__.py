"""
Relative pose error evaluation of estimated trajectories against groundtruth.

Usage:
    from trajectory_eval.evaluation.evaluator import evaluate_trajectories
    from trajectory_eval.data import get_loader
"""

__version__ = "0.1.0"
