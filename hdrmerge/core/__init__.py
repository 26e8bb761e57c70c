"""HDRMerge Core: radiance merge engine, curves and rotation solver."""

from .config import MergeConfig
from .curves import RGBCurve
from .merge import HDRMerge, merge_exposures, high_gate, low_gate
from .rotation import solve_rotation

__all__ = [
    "MergeConfig",
    "RGBCurve",
    "HDRMerge",
    "merge_exposures",
    "high_gate",
    "low_gate",
    "solve_rotation",
]
