"""
Exception hierarchy for trajectory evaluation.

Association gaps are not errors (samples are dropped and counted), and a
zero groundtruth displacement is resolved by convention (scale error 1.0),
so neither has an exception type here.
"""


class TrajectoryEvalError(Exception):
    """Base class for all evaluation errors."""


class ConfigurationError(TrajectoryEvalError, ValueError):
    """Unknown format or out-of-range option. Raised before any computation."""


class MalformedPoseError(TrajectoryEvalError, ValueError):
    """Input pose data that cannot be evaluated (non-finite, bad quaternion,
    non-increasing stamps, missing columns)."""

    def __init__(self, message, index=None, source=None):
        self.index = index
        self.source = source
        prefix = ""
        if source is not None:
            prefix += f"{source}: "
        if index is not None:
            prefix += f"record {index}: "
        super().__init__(prefix + message)


class NonFiniteResultError(TrajectoryEvalError, ArithmeticError):
    """A segment produced a non-finite error component."""

    def __init__(self, first_frame, message):
        self.first_frame = first_frame
        super().__init__(f"segment starting at frame {first_frame}: {message}")


class SegmentEvaluationError(TrajectoryEvalError, RuntimeError):
    """One or more segments could not be evaluated."""

    def __init__(self, failures):
        # failures: list of (first_frame, exception)
        self.failures = list(failures)
        frames = ", ".join(str(f) for f, _ in self.failures)
        detail = "; ".join(str(e) for _, e in self.failures[:3])
        super().__init__(
            f"{len(self.failures)} segment(s) failed (first frames: {frames}): {detail}"
        )
