"""CSV Bracket Generator: discover exposure brackets from a YAML spec."""

import csv
import hashlib
import re
import statistics
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
import yaml


LIST_SEP = ";"
TIMES_FILE = "times.yaml"
_TIME_SUFFIX = re.compile(r"_(\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)$")


@dataclass
class DatasetSpec:
    """Specification for an input dataset of brackets."""
    name: str
    root: str
    image_pattern: str = "*.png"


@dataclass
class OutputSpec:
    """Specification for output paths."""
    root: str
    radiance_subdir: str = "radiance"


@dataclass
class MergeSpec:
    """Merge options written to every CSV row.

    target_exposure_time is a number or one of "middle" (the bracket's middle
    exposure), "median", "min" and "max".
    """
    target_exposure_time: Union[float, str] = "middle"
    robust_calibration: bool = False
    clamped_value_correction: float = 1.0

    def resolve_target(self, times: List[float]) -> float:
        target = self.target_exposure_time
        try:
            return float(target)
        except (TypeError, ValueError):
            pass
        if target == "middle":
            return times[len(times) // 2]
        if target == "median":
            return float(statistics.median(times))
        if target == "min":
            return min(times)
        if target == "max":
            return max(times)
        raise ValueError(f"Unknown target exposure time: {target}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MergeSpec":
        return cls(
            target_exposure_time=d.get("target_exposure_time", "middle"),
            robust_calibration=bool(d.get("robust_calibration", False)),
            clamped_value_correction=float(d.get("clamped_value_correction", 1.0)),
        )


def parse_exposure_time(path: Path) -> float:
    """Exposure time from a file name of the form ``*_<time>.<ext>``."""
    match = _TIME_SUFFIX.search(path.stem)
    if match is None:
        raise ValueError(f"No exposure time in file name: {path.name}")
    return float(match.group(1))


class BracketCSVGenerator:
    """Generate the CSV describing every bracket to merge.

    YAML config format:
    ```yaml
    dataset:
      name: lobby
      root: /path/to/brackets     # one sub-directory per bracket
      image_pattern: "*.png"

    output:
      root: /path/to/output
      radiance_subdir: radiance

    merge:
      target_exposure_time: middle
      robust_calibration: false
      clamped_value_correction: 1.0

    generation:
      seed: 42
      max_brackets: 100
    ```

    Exposure times come from a ``times.yaml`` (file name -> seconds) inside
    the bracket directory, or else from the ``_<time>`` file name suffix.
    """

    PARAM_COLUMNS = [
        "target_exposure_time",
        "robust_calibration",
        "clamped_value_correction",
    ]

    COLUMNS = ["bracket_id", "sequence", "num_exposures", "inputs", "times", "output_radiance"] + PARAM_COLUMNS

    def __init__(self, config_path: Union[str, Path]):
        """Initialize generator from YAML config."""
        self.config_path = Path(config_path)
        with open(config_path) as f:
            self.config = yaml.safe_load(f)

        self.dataset = DatasetSpec(
            name=self.config["dataset"]["name"],
            root=self.config["dataset"]["root"],
            image_pattern=self.config["dataset"].get("image_pattern", "*.png"),
        )

        self.output = OutputSpec(
            root=self.config["output"]["root"],
            radiance_subdir=self.config["output"].get("radiance_subdir", "radiance"),
        )

        self.merge = MergeSpec.from_dict(self.config.get("merge", {}) or {})

        gen_cfg = self.config.get("generation", {}) or {}
        self.seed = gen_cfg.get("seed", 42)
        self.max_brackets: Optional[int] = gen_cfg.get("max_brackets", None)

    def _bracket_times(self, bracket_dir: Path, files: List[Path]) -> List[float]:
        times_file = bracket_dir / TIMES_FILE
        if times_file.exists():
            with open(times_file) as f:
                table = yaml.safe_load(f) or {}
            missing = [p.name for p in files if p.name not in table]
            if missing:
                raise KeyError(f"{times_file}: no exposure time for {missing}")
            return [float(table[p.name]) for p in files]
        return [parse_exposure_time(p) for p in files]

    def _discover_brackets(self) -> List[Dict[str, Any]]:
        """Discover brackets, each sorted by increasing exposure time."""
        root = Path(self.dataset.root)

        bracket_dirs = [d for d in sorted(root.iterdir()) if d.is_dir()]
        if not any(any(d.glob(self.dataset.image_pattern)) for d in bracket_dirs):
            bracket_dirs = [root]  # Flat structure

        brackets = []
        for bracket_dir in bracket_dirs:
            files = sorted(bracket_dir.glob(self.dataset.image_pattern))
            if not files:
                continue

            times = self._bracket_times(bracket_dir, files)
            order = sorted(range(len(files)), key=lambda i: times[i])

            brackets.append({
                "sequence": bracket_dir.name,
                "inputs": [str(files[i].relative_to(root)) for i in order],
                "times": [times[i] for i in order],
            })

        return brackets

    def generate(self, output_csv: Union[str, Path]) -> int:
        """Generate CSV configuration file.

        Returns:
            number of brackets written
        """
        rng = np.random.default_rng(self.seed)

        brackets = self._discover_brackets()
        if self.max_brackets is not None and len(brackets) > self.max_brackets:
            indices = rng.choice(len(brackets), self.max_brackets, replace=False)
            brackets = [brackets[i] for i in sorted(indices)]

        output_csv = Path(output_csv)
        output_csv.parent.mkdir(parents=True, exist_ok=True)

        with open(output_csv, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self.COLUMNS)
            writer.writeheader()

            for bracket in brackets:
                seq = bracket["sequence"]
                bracket_id = hashlib.md5(f"{self.dataset.name}_{seq}".encode()).hexdigest()[:12]
                writer.writerow({
                    "bracket_id": bracket_id,
                    "sequence": seq,
                    "num_exposures": len(bracket["inputs"]),
                    "inputs": LIST_SEP.join(bracket["inputs"]),
                    "times": LIST_SEP.join(repr(t) for t in bracket["times"]),
                    "output_radiance": f"{self.output.radiance_subdir}/{seq}.npy",
                    "target_exposure_time": self.merge.resolve_target(bracket["times"]),
                    "robust_calibration": self.merge.robust_calibration,
                    "clamped_value_correction": self.merge.clamped_value_correction,
                })

        return len(brackets)

    def generate_default(self, output_dir: Union[str, Path]) -> Tuple[Path, int]:
        """Write ``<name>_brackets.csv`` into output_dir."""
        output_csv = Path(output_dir) / f"{self.dataset.name}_brackets.csv"
        return output_csv, self.generate(output_csv)
