"""
Result file I/O shared across entry points.

The relative-error CSV layout is consumed by downstream analysis tools:
header text and column order must not change.
"""

import logging
import os

import numpy as np

from trajectory_eval.evaluation.relative_error import RelativeError


logger = logging.getLogger(__name__)

RESULT_HEADER = (
    "# First frame index, err-tx, err-ty, err-tz, err-ax, err-ay, err-az, "
    "length, num frames, err-scale"
)
RESULT_SEPARATOR = ", "


def result_filename(prefix, segment_length):
    """``<prefix>_<int(segment_length)>.csv``, e.g. traj_relative_errors_50.csv."""
    return f"{prefix}_{int(segment_length)}.csv"


def _format_value(value):
    # six significant digits, like a default-configured C++ ostream
    return f"{value:g}"


def format_relative_error(err):
    """One CSV row (no newline) for a ``RelativeError``."""
    fields = [str(int(err.first_frame))]
    fields += [_format_value(float(v)) for v in err.translation_error]
    fields += [_format_value(float(v)) for v in err.rotation_error]
    fields.append(_format_value(float(err.length)))
    fields.append(str(int(err.num_frames)))
    fields.append(_format_value(float(err.scale_error)))
    return RESULT_SEPARATOR.join(fields)


def write_relative_errors(errors, path):
    """
    Write relative errors as CSV.

    Args:
        errors: iterable of ``RelativeError``.
        path: output file; parent directories are created.
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    n = 0
    with open(path, "w") as f:
        f.write(RESULT_HEADER + "\n")
        for err in errors:
            f.write(format_relative_error(err) + "\n")
            n += 1
    logger.info("Wrote %d relative errors to %s", n, path)


def read_relative_errors(path):
    """Parse a file written by ``write_relative_errors``."""
    errors = []
    with open(path, "r") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parts = [p.strip() for p in line.split(",")]
            if len(parts) != 10:
                raise ValueError(
                    f"{path}:{line_no}: expected 10 columns, got {len(parts)}"
                )
            errors.append(
                RelativeError(
                    first_frame=int(parts[0]),
                    translation_error=np.array([float(v) for v in parts[1:4]]),
                    rotation_error=np.array([float(v) for v in parts[4:7]]),
                    length=float(parts[7]),
                    num_frames=int(parts[8]),
                    scale_error=float(parts[9]),
                )
            )
    return errors
