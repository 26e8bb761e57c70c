"""Radiance merge configuration and calibration constants."""

from dataclasses import dataclass, asdict
from typing import Dict, Any


# Calibration constants of the sensor-response model. Keep in sync with the
# weighting/response curves they were fitted against.
WEIGHT_FLOOR_SAMPLE = 0.05  # weight at this sample (channel 0) is subtracted off
GATE_STEEPNESS = 10.0
HIGH_GATE_CENTER = 0.9      # saturation zone
HIGH_GATE_WIDTH = 0.2
LOW_GATE_CENTER = 0.005     # noise floor
LOW_GATE_WIDTH = 0.01
MAX_LUMINANCE = 1000.0
MIN_LUMINANCE = 0.0001
MIN_WEIGHT_SUM = 0.001


@dataclass
class MergeConfig:
    """Configuration for merging one exposure bracket into radiance.

    ``clamped_value_correction`` scales the contribution of the saturated and
    noise-floor sentinels; 0 disables the soft clamps entirely.
    """
    target_exposure_time: float = 1.0
    robust_calibration: bool = False
    clamped_value_correction: float = 1.0

    # Row-band workers inside a single merge
    num_workers: int = 1

    device: str = "cpu"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MergeConfig":
        valid_keys = set(cls.__dataclass_fields__)
        unknown = set(d) - valid_keys
        if unknown:
            raise KeyError(f"Unknown merge options: {sorted(unknown)}")
        return cls(**d)
