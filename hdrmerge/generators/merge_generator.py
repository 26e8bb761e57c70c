"""Bracket Merger: parallel radiance merging from CSV config."""

import csv
import logging
import traceback
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import numpy as np
from PIL import Image
from tqdm import tqdm

from ..core import MergeConfig, HDRMerge, RGBCurve
from ..codecs import RadianceCodec
from .csv_generator import LIST_SEP

logger = logging.getLogger(__name__)


@dataclass
class BracketSpec:
    """Specification for a single bracket."""
    bracket_id: str
    sequence: str
    inputs: List[str]
    times: List[float]
    output_radiance: str
    params: Dict[str, Any]


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes")


_CSV_OPTIONS = {
    "target_exposure_time": float,
    "robust_calibration": _parse_bool,
    "clamped_value_correction": float,
}


def _load_image(path: Path) -> np.ndarray:
    """Load image as float32 [H, W, 3] in [0, 1]."""
    if path.suffix == ".npy":
        img = np.load(path)
        if np.issubdtype(img.dtype, np.integer):
            img = img.astype(np.float32) / np.iinfo(img.dtype).max
        img = img.astype(np.float32)
        if img.ndim == 2:
            img = np.repeat(img[..., None], 3, axis=-1)
        return img

    img = Image.open(path)
    if img.mode in ("I;16", "I;16B", "I;16L", "I"):
        arr = np.array(img, dtype=np.float32) / 65535.0
        return np.repeat(arr[..., None], 3, axis=-1)
    return np.array(img.convert("RGB"), dtype=np.float32) / 255.0


def _process_bracket(
    spec: BracketSpec,
    input_root: Path,
    output_root: Path,
    cfg_dict: Dict[str, Any],
    weight: RGBCurve,
    response: RGBCurve,
    pinned: FrozenSet[str] = frozenset(),
) -> Dict[str, Any]:
    """Merge a single bracket (worker function).

    CSV merge columns override cfg_dict except for the options in pinned.
    """
    try:
        cfg = MergeConfig.from_dict(cfg_dict)
        for key, parse in _CSV_OPTIONS.items():
            if key in spec.params and key not in pinned:
                setattr(cfg, key, parse(spec.params[key]))

        images = [_load_image(input_root / p) for p in spec.inputs]

        radiance = HDRMerge(cfg).process(images, spec.times, weight, response)

        RadianceCodec.save(
            output_root / spec.output_radiance,
            radiance=radiance,
            times=spec.times,
            params=cfg.to_dict(),
            meta={"bracket_id": spec.bracket_id, "sequence": spec.sequence, "inputs": spec.inputs},
        )

        return {"bracket_id": spec.bracket_id, "status": "success"}

    except Exception as e:
        return {
            "bracket_id": spec.bracket_id,
            "status": "error",
            "error": str(e),
            "traceback": traceback.format_exc(),
        }


class BracketMerger:
    """Merge every bracket listed in a CSV configuration.

    Curves default to a gaussian weighting curve and a linear response.
    Options named in pinned keep their config value over the CSV columns.
    """

    BASE_COLUMNS = ["bracket_id", "sequence", "num_exposures", "inputs", "times", "output_radiance"]

    def __init__(
        self,
        csv_path: Path,
        input_root: Path,
        output_root: Path,
        config: Optional[MergeConfig] = None,
        weight: Optional[RGBCurve] = None,
        response: Optional[RGBCurve] = None,
        pinned: Iterable[str] = (),
    ):
        self.csv_path = Path(csv_path)
        self.input_root = Path(input_root)
        self.output_root = Path(output_root)
        self.config = config or MergeConfig()
        self.weight = weight if weight is not None else RGBCurve().set_gaussian()
        self.response = response if response is not None else RGBCurve().set_linear()
        self.pinned = frozenset(pinned)

        self.brackets = self._load_csv()

    def _load_csv(self) -> List[BracketSpec]:
        """Load brackets from CSV."""
        brackets = []
        with open(self.csv_path) as f:
            reader = csv.DictReader(f)
            for row in reader:
                params = {k: v for k, v in row.items() if k not in self.BASE_COLUMNS and v not in (None, "")}
                brackets.append(BracketSpec(
                    bracket_id=row["bracket_id"],
                    sequence=row.get("sequence", ""),
                    inputs=row["inputs"].split(LIST_SEP),
                    times=[float(t) for t in row["times"].split(LIST_SEP)],
                    output_radiance=row["output_radiance"],
                    params=params,
                ))
        return brackets

    def _record(self, results: Dict[str, Any], result: Dict[str, Any]) -> None:
        if result["status"] == "success":
            results["processed"] += 1
        else:
            logger.warning("Bracket %s failed: %s", result["bracket_id"], result["error"])
            results["errors"].append(result)

    def generate(
        self,
        num_workers: int = 4,
        skip_existing: bool = True,
        progress: bool = True,
    ) -> Dict[str, Any]:
        """Merge brackets in parallel.

        Args:
            num_workers: number of worker processes
            skip_existing: skip brackets whose radiance file exists
            progress: show progress bar

        Returns:
            dict with generation statistics
        """
        pending = [
            spec for spec in self.brackets
            if not (skip_existing and (self.output_root / spec.output_radiance).exists())
        ]

        results = {"total": len(self.brackets), "processed": 0, "skipped": len(self.brackets) - len(pending), "errors": []}
        if not pending:
            return results

        cfg_dict = self.config.to_dict()

        if num_workers <= 1:
            iterator = tqdm(pending, desc="Merging") if progress else pending
            for spec in iterator:
                result = _process_bracket(spec, self.input_root, self.output_root, cfg_dict,
                                          self.weight, self.response, self.pinned)
                self._record(results, result)
        else:
            # Parallel processing (CPU only, one bracket per process)
            cfg_dict["num_workers"] = 1
            cfg_dict["device"] = "cpu"
            with ProcessPoolExecutor(max_workers=num_workers) as executor:
                futures = {
                    executor.submit(_process_bracket, spec, self.input_root, self.output_root,
                                    cfg_dict, self.weight, self.response, self.pinned): spec
                    for spec in pending
                }

                iterator = tqdm(as_completed(futures), total=len(futures), desc="Merging") if progress else as_completed(futures)
                for future in iterator:
                    self._record(results, future.result())

        return results

    def generate_single(self, bracket_id: str) -> Dict[str, Any]:
        """Merge a single bracket by ID."""
        spec = next((s for s in self.brackets if s.bracket_id == bracket_id), None)
        if spec is None:
            return {"bracket_id": bracket_id, "status": "error", "error": f"Bracket {bracket_id} not found"}

        return _process_bracket(spec, self.input_root, self.output_root, self.config.to_dict(),
                                self.weight, self.response, self.pinned)
