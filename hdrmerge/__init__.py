"""HDRMerge: fuse exposure brackets into linear radiance images.

Main components:
- core: Radiance merge engine (MergeConfig, HDRMerge), curves, rotation solver
- generators: bracket CSV generation and batch merging
- codecs: radiance and curve storage
"""

from .core import (
    MergeConfig,
    RGBCurve,
    HDRMerge,
    merge_exposures,
    high_gate,
    low_gate,
    solve_rotation,
)
from .generators import BracketCSVGenerator, BracketMerger
from .codecs import RadianceCodec, CurveCodec

__version__ = "0.1.0"
__all__ = [
    # Core
    "MergeConfig",
    "RGBCurve",
    "HDRMerge",
    "merge_exposures",
    "high_gate",
    "low_gate",
    "solve_rotation",
    # Generators
    "BracketCSVGenerator",
    "BracketMerger",
    # Codecs
    "RadianceCodec",
    "CurveCodec",
]
