"""
Summary statistics over per-segment relative errors.

Provides the KITTI-style averaged drift figures (translation error as % of
segment length, rotation error in deg / m) next to plain error statistics.
"""

import numpy as np


_STAT_KEYS = ("mean", "std", "rmse", "median", "max")


def _stats(values, prefix):
    if values.size == 0:
        return {f"{prefix}_{k}": float("nan") for k in _STAT_KEYS}
    return {
        f"{prefix}_mean": float(np.mean(values)),
        f"{prefix}_std": float(np.std(values)),
        f"{prefix}_rmse": float(np.sqrt(np.mean(values**2))),
        f"{prefix}_median": float(np.median(values)),
        f"{prefix}_max": float(np.max(values)),
    }


def summarize_relative_errors(errors):
    """
    Aggregate a list of ``RelativeError``.

    Args:
        errors: list of ``RelativeError``.

    Returns:
        Dict with keys:

        ``num_segments``  – number of evaluated segments
        ``t_err_<stat>``  – translation error norm [m]
        ``r_err_<stat>``  – rotation error angle [deg]
        ``scale_<stat>``  – scale error (1.0 = no drift)
        ``t_rel``         – mean translation error, % of segment length
        ``r_rel``         – mean rotation error, deg / m

        where <stat> is one of mean, std, rmse, median, max. Values are NaN
        when ``errors`` is empty.
    """
    n = len(errors)
    if n:
        t_err = np.array([np.linalg.norm(e.translation_error) for e in errors])
        r_err = np.degrees(
            np.array([np.linalg.norm(e.rotation_error) for e in errors])
        )
        scale = np.array([e.scale_error for e in errors], dtype=float)
        length = np.array([e.length for e in errors], dtype=float)
    else:
        t_err = r_err = scale = length = np.zeros(0)

    results = {"num_segments": n}
    results.update(_stats(t_err, "t_err"))
    results.update(_stats(r_err, "r_err"))
    results.update(_stats(scale, "scale"))

    valid = length > 0
    if np.any(valid):
        results["t_rel"] = float(np.mean(t_err[valid] / length[valid]) * 100)
        results["r_rel"] = float(np.mean(r_err[valid] / length[valid]))
    else:
        results["t_rel"] = float("nan")
        results["r_rel"] = float("nan")

    return results
