#!/usr/bin/env python3
"""
Relative pose error evaluation entry point using Hydra configuration.

Usage:
    trajectory-eval data_dir=path/to/run
    trajectory-eval data_dir=path/to/run format_gt=euroc filename_gt=data.csv
    trajectory-eval segment_length=100 least_squares_align=true
    python -m trajectory_eval.evaluate offset_sec=0.005 max_difference_sec=0.01
"""

import os
import sys
import logging

import hydra
from omegaconf import DictConfig, OmegaConf
from termcolor import cprint

from trajectory_eval.config import EvaluationSettings
from trajectory_eval.evaluation.evaluator import evaluate_files, format_metrics
from trajectory_eval.exceptions import TrajectoryEvalError
from trajectory_eval.utils.io import result_filename, write_relative_errors


logger = logging.getLogger(__name__)


def run(settings):
    """Evaluate the configured files and write the result CSV.

    Returns:
        Tuple of (results dict, path of the written CSV).
    """
    results = evaluate_files(settings)

    result_path = os.path.join(
        settings.data_dir,
        result_filename(settings.filename_result_prefix, settings.segment_length),
    )
    logger.info("Write result to file: %s", result_path)
    write_relative_errors(results["errors"], result_path)
    return results, result_path


@hydra.main(config_path="configs", config_name="config", version_base=None)
def main(cfg: DictConfig):
    print(OmegaConf.to_yaml(cfg, resolve=True))

    try:
        settings = EvaluationSettings.from_cfg(cfg)
        results, result_path = run(settings)
    except (FileNotFoundError, TrajectoryEvalError) as e:
        cprint(f"Error: {e}", "red")
        sys.exit(1)

    if results["num_matches"] == 0:
        cprint("No estimate sample could be associated with groundtruth", "yellow")
    elif results["metrics"]["num_segments"] == 0:
        cprint(
            f"Trajectory too short for {settings.segment_length:g} m segments",
            "yellow",
        )

    cprint(
        format_metrics(results, settings.filename_es, settings.segment_length),
        "cyan",
    )
    print(f"Results written to {result_path}")
    logger.info("Finished.")


if __name__ == "__main__":
    main()
