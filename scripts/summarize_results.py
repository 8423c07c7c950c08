#!/usr/bin/env python3
"""
Summary table over relative-error result files.

Usage:
    python scripts/summarize_results.py \
        --results_dir path/to/run \
        --prefix traj_relative_errors \
        --output summary.md

Picks up every <prefix>_<segment length>.csv in the results directory, as
written by the trajectory-eval entry point, and prints one row per segment
length.
"""

import argparse
import os
import re

import numpy as np

from trajectory_eval.evaluation.metrics import summarize_relative_errors
from trajectory_eval.utils.io import read_relative_errors


COLUMNS = [
    ("Segment [m]", None),
    ("N", "num_segments"),
    ("t_rel %", "t_rel"),
    ("r_rel deg/m", "r_rel"),
    ("t_err rmse [m]", "t_err_rmse"),
    ("r_err rmse [deg]", "r_err_rmse"),
    ("scale mean", "scale_mean"),
]


def load_results(results_dir, prefix):
    """Return {segment_length: [RelativeError, ...]} for all result files."""
    pattern = re.compile(re.escape(prefix) + r"_(\d+)\.csv$")
    results = {}
    if results_dir is None or not os.path.isdir(results_dir):
        return results
    for fname in sorted(os.listdir(results_dir)):
        match = pattern.match(fname)
        if match:
            results[int(match.group(1))] = read_relative_errors(
                os.path.join(results_dir, fname)
            )
    return dict(sorted(results.items()))


def build_table(results, fmt="markdown"):
    """
    Build summary table.

    Args:
        results: dict mapping segment length → list of RelativeError
        fmt: "markdown" or "latex"

    Returns:
        Formatted table string.
    """
    rows = []
    for segment_length, errors in results.items():
        metrics = summarize_relative_errors(errors)
        row = [f"{segment_length}"]
        for _, key in COLUMNS[1:]:
            value = metrics[key]
            if key == "num_segments":
                row.append(str(value))
            elif np.isnan(value):
                row.append("—" if fmt == "markdown" else "---")
            else:
                row.append(f"{value:.4f}")
        rows.append(row)

    if fmt == "markdown":
        return _markdown_table(rows)
    elif fmt == "latex":
        return _latex_table(rows)
    else:
        raise ValueError(f"Unknown format: {fmt}")


def _markdown_table(rows):
    header = "| " + " | ".join(name for name, _ in COLUMNS) + " |"
    sep = "|" + "|".join("---" for _ in COLUMNS) + "|"
    lines = [header, sep]
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def _latex_table(rows):
    lines = [
        r"\begin{tabular}{" + "c" * len(COLUMNS) + r"}",
        r"\toprule",
        " & ".join(name.replace("%", r"\%") for name, _ in COLUMNS) + r" \\",
        r"\midrule",
    ]
    for row in rows:
        lines.append(" & ".join(row) + r" \\")
    lines += [r"\bottomrule", r"\end{tabular}"]
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Summarize relative errors")
    parser.add_argument(
        "--results_dir", default=".", help="Directory with result CSV files"
    )
    parser.add_argument(
        "--prefix",
        default="traj_relative_errors",
        help="Result filename prefix",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Output file path (default: print to stdout)",
    )
    parser.add_argument(
        "--format", choices=["markdown", "latex"], default="markdown"
    )
    args = parser.parse_args()

    results = load_results(args.results_dir, args.prefix)
    if not results:
        print(f"No {args.prefix}_<length>.csv files in {args.results_dir}")
        return

    table = build_table(results, fmt=args.format)

    if args.output:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w") as f:
            f.write(table + "\n")
        print(f"Table written to {args.output}")
    else:
        print(table)


if __name__ == "__main__":
    main()
