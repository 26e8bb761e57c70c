"""Radiance merge: fuse an exposure bracket into linear radiance."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Union

import numpy as np
import torch

from .config import (
    MergeConfig,
    WEIGHT_FLOOR_SAMPLE,
    GATE_STEEPNESS,
    HIGH_GATE_CENTER,
    HIGH_GATE_WIDTH,
    LOW_GATE_CENTER,
    LOW_GATE_WIDTH,
    MAX_LUMINANCE,
    MIN_LUMINANCE,
    MIN_WEIGHT_SUM,
)

logger = logging.getLogger(__name__)

Curve = Callable[[torch.Tensor, int], torch.Tensor]
ImageLike = Union[torch.Tensor, np.ndarray]


def high_gate(values: torch.Tensor) -> torch.Tensor:
    """Soft indicator of the saturation zone, rising to 1 around 0.9 and above."""
    return 1.0 - 1.0 / (1.0 + torch.exp(GATE_STEEPNESS * ((values - HIGH_GATE_CENTER) / HIGH_GATE_WIDTH)))


def low_gate(values: torch.Tensor) -> torch.Tensor:
    """Soft indicator of the noise floor, rising to 1 around 0.005 and below."""
    return 1.0 / (1.0 + torch.exp(GATE_STEEPNESS * ((values - LOW_GATE_CENTER) / LOW_GATE_WIDTH)))


def _is_empty(curve: Curve) -> bool:
    is_empty = getattr(curve, "is_empty", None)
    return bool(is_empty()) if callable(is_empty) else False


def _evaluate(curve: Curve, values: torch.Tensor, channel: int) -> torch.Tensor:
    return torch.as_tensor(curve(values, channel), dtype=torch.float64, device=values.device)


def _check_inputs(
    images: Sequence[ImageLike],
    times: Sequence[float],
    response: Curve,
) -> List[torch.Tensor]:
    if response is None or _is_empty(response):
        raise ValueError("response curve is empty")
    if len(images) == 0:
        raise ValueError("no input images")
    if len(images) != len(times):
        raise ValueError(f"got {len(images)} images but {len(times)} exposure times")

    tensors = [torch.as_tensor(img, dtype=torch.float32) for img in images]
    ref = tuple(tensors[0].shape)
    if len(ref) != 3 or ref[2] != 3:
        raise ValueError(f"images must be [H, W, 3], got {list(ref)}")
    for i, img in enumerate(tensors[1:], start=1):
        if tuple(img.shape) != ref:
            raise ValueError(f"image {i} has shape {list(img.shape)}, expected {list(ref)}")

    for i, t in enumerate(times):
        if not float(t) > 0:
            raise ValueError(f"exposure time {i} must be positive, got {t}")
    return tensors


def _merge_rows(
    images: List[torch.Tensor],
    times: Sequence[float],
    weight: Curve,
    response: Curve,
    weight_floor: float,
    radiance: torch.Tensor,
    y0: int,
    y1: int,
    target_time: float,
    clamp_correction: Optional[float],
) -> None:
    for channel in range(3):
        wsum = torch.zeros(y1 - y0, radiance.shape[1], dtype=torch.float64, device=radiance.device)
        wdiv = torch.zeros_like(wsum)

        for img, time in zip(images, times):
            v = img[y0:y1, :, channel]
            w = (_evaluate(weight, v, channel) - weight_floor).clamp(min=0)
            r = _evaluate(response, v, channel)
            wsum += w * r / float(time)
            wdiv += w

        estimate = wsum / wdiv.clamp(min=MIN_WEIGHT_SUM) * target_time

        if clamp_correction is not None:
            # images[0] / images[-1] are taken as darkest / brightest, not searched per pixel
            hi = high_gate(images[-1][y0:y1, :, channel].double())
            lo = low_gate(images[0][y0:y1, :, channel].double())
            estimate = (
                (1.0 - hi - lo) * estimate
                + hi * MAX_LUMINANCE * clamp_correction
                + lo * MIN_LUMINANCE * clamp_correction
            )

        radiance[y0:y1, :, channel] = estimate.to(radiance.dtype)


@torch.no_grad()
def merge_exposures(
    images: Sequence[ImageLike],
    times: Sequence[float],
    weight: Curve,
    response: Curve,
    target_time: float = 1.0,
    robust_calibration: bool = False,
    clamped_value_correction: float = 1.0,
    num_workers: int = 1,
) -> torch.Tensor:
    """Merge aligned exposures into a single linear radiance image.

    Args:
        images: N images [H, W, 3] in [0, 1], ordered by increasing exposure
            time. images[0] must be the darkest and images[-1] the brightest:
            the soft clamps read them directly.
        times: N positive exposure times, same order as images
        weight: weighting curve, called as weight(values, channel)
        response: inverse response curve, called as response(values, channel)
        target_time: exposure time the radiance is normalized to
        robust_calibration: disable soft clamps (calibration passes)
        clamped_value_correction: strength of the soft clamps, 0 disables them
        num_workers: row bands merged concurrently

    Returns:
        radiance: [H, W, 3] float32
    """
    tensors = _check_inputs(images, times, response)
    H, W, C = tensors[0].shape
    logger.debug("Merging %d exposures of %dx%d", len(tensors), W, H)

    radiance = torch.zeros(H, W, C, dtype=torch.float32, device=tensors[0].device)

    floor_sample = torch.tensor(WEIGHT_FLOOR_SAMPLE, dtype=torch.float32, device=tensors[0].device)
    weight_floor = float(_evaluate(weight, floor_sample, 0))

    clamp_correction = None
    if not robust_calibration and clamped_value_correction != 0:
        clamp_correction = float(clamped_value_correction)

    num_bands = max(1, min(int(num_workers), H))
    bounds = np.linspace(0, H, num_bands + 1).astype(int)
    bands = [(int(bounds[i]), int(bounds[i + 1])) for i in range(num_bands)]

    def run(band):
        _merge_rows(tensors, times, weight, response, weight_floor, radiance,
                    band[0], band[1], float(target_time), clamp_correction)

    if num_bands == 1:
        run(bands[0])
    else:
        with ThreadPoolExecutor(max_workers=num_bands) as executor:
            for future in [executor.submit(run, band) for band in bands]:
                future.result()

    return radiance


class HDRMerge:
    """Radiance merge engine driven by a MergeConfig."""

    def __init__(self, cfg: Optional[MergeConfig] = None):
        self.cfg = cfg or MergeConfig()

    def process(
        self,
        images: Sequence[ImageLike],
        times: Sequence[float],
        weight: Curve,
        response: Curve,
        target_time: Optional[float] = None,
    ) -> torch.Tensor:
        """Merge a bracket; target_time overrides cfg.target_exposure_time."""
        device = torch.device(self.cfg.device)
        images = [torch.as_tensor(img, dtype=torch.float32).to(device) for img in images]
        return merge_exposures(
            images,
            times,
            weight,
            response,
            target_time=self.cfg.target_exposure_time if target_time is None else target_time,
            robust_calibration=self.cfg.robust_calibration,
            clamped_value_correction=self.cfg.clamped_value_correction,
            num_workers=self.cfg.num_workers,
        )
