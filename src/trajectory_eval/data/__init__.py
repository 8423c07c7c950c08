"""
Trajectory loader registry.

Usage:
    from trajectory_eval.data import get_loader, list_loaders

    gt = get_loader("euroc").load("data.csv")
"""

from trajectory_eval.data.base_loader import TrajectoryLoader
from trajectory_eval.data.formats import EurocLoader, PoseLoader, SWEResultLoader
from trajectory_eval.exceptions import ConfigurationError

_LOADER_REGISTRY = {
    "pose": PoseLoader,
    "euroc": EurocLoader,
    "swe": SWEResultLoader,
}


def get_loader(name, cfg=None):
    """
    Get a trajectory loader instance by format name.

    Args:
        name: Registered format name (e.g., "pose")
        cfg: Optional config dict for the loader.

    Returns:
        Instantiated loader.

    Raises:
        ConfigurationError: if the format is not registered.
    """
    if name not in _LOADER_REGISTRY:
        available = ", ".join(_LOADER_REGISTRY.keys())
        raise ConfigurationError(
            f"Format '{name}' is not supported. Available: {available}"
        )
    return _LOADER_REGISTRY[name](cfg)


def list_loaders():
    """Return list of all registered format names."""
    return list(_LOADER_REGISTRY.keys())


def load_trajectory(fmt, path):
    """Load ``path`` with the loader registered for ``fmt``."""
    return get_loader(fmt).load(path)
