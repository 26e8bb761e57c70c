"""Tabulated per-channel curves for weighting and camera response."""

import math
from typing import Dict, Any, Union

import numpy as np
import torch


CurveInput = Union[float, np.ndarray, torch.Tensor]


class RGBCurve:
    """Per-channel lookup curve sampled uniformly over [0, 1].

    Callable as ``curve(values, channel)``, which is the interface the merge
    engine expects from both the weighting and the response curve. Lookups
    interpolate linearly between table entries and clamp out-of-range samples.
    """

    NUM_CHANNELS = 3

    def __init__(self, size: int = 256):
        self._table = torch.zeros(self.NUM_CHANNELS, size, dtype=torch.float32)

    @property
    def size(self) -> int:
        return self._table.shape[1]

    @property
    def table(self) -> torch.Tensor:
        return self._table.clone()

    def is_empty(self) -> bool:
        return self.size == 0

    def __len__(self) -> int:
        return self.size

    def __call__(self, values: CurveInput, channel: int) -> torch.Tensor:
        if self.is_empty():
            raise ValueError("Cannot evaluate an empty curve")

        v = torch.as_tensor(values, dtype=torch.float32)
        t = self._table[channel].to(v.device)
        if self.size == 1:
            return t[0].expand_as(v).clone()

        x = v.clamp(0, 1) * (self.size - 1)
        lo = x.floor().long().clamp(max=self.size - 2)
        frac = x - lo.to(x.dtype)
        return t[lo] * (1 - frac) + t[lo + 1] * frac

    def _grid(self) -> torch.Tensor:
        if self.size == 1:
            return torch.zeros(1)
        return torch.linspace(0, 1, self.size)

    def _fill(self, values: torch.Tensor) -> "RGBCurve":
        self._table = values.to(torch.float32).unsqueeze(0).repeat(self.NUM_CHANNELS, 1)
        return self

    def set_zero(self) -> "RGBCurve":
        self._table.zero_()
        return self

    def set_linear(self) -> "RGBCurve":
        return self._fill(self._grid())

    def set_gaussian(self, mu: float = 0.5, sigma: float = 1.0 / (5.0 * math.sqrt(2.0))) -> "RGBCurve":
        x = self._grid()
        return self._fill(torch.exp(-((x - mu) ** 2) / (2 * sigma ** 2)))

    def set_triangular(self) -> "RGBCurve":
        x = self._grid()
        return self._fill(1.0 - torch.abs(2.0 * x - 1.0))

    def set_plateau(self, weight: float = 8.0) -> "RGBCurve":
        x = self._grid()
        return self._fill(1.0 - torch.abs(2.0 * x - 1.0) ** weight)

    def set_log10(self) -> "RGBCurve":
        x = self._grid()
        return self._fill(torch.log10(1.0 + 9.0 * x))

    def set_function(self, name: str) -> "RGBCurve":
        setters = {
            "linear": self.set_linear,
            "gaussian": self.set_gaussian,
            "triangle": self.set_triangular,
            "plateau": self.set_plateau,
            "log10": self.set_log10,
        }
        if name not in setters:
            raise ValueError(f"Unknown curve function: {name}")
        return setters[name]()

    def normalize(self) -> "RGBCurve":
        peak = self._table.amax(dim=1, keepdim=True)
        self._table = torch.where(peak > 0, self._table / peak.clamp(min=1e-12), self._table)
        return self

    @classmethod
    def from_table(cls, table: Union[np.ndarray, torch.Tensor]) -> "RGBCurve":
        table = torch.as_tensor(table, dtype=torch.float32)
        if table.dim() != 2 or table.shape[0] != cls.NUM_CHANNELS:
            raise ValueError(f"Curve table must be [3, N], got {list(table.shape)}")
        curve = cls(table.shape[1])
        curve._table = table.clone()
        return curve

    @classmethod
    def from_function(cls, name: str, size: int = 256) -> "RGBCurve":
        return cls(size).set_function(name)

    def to_dict(self) -> Dict[str, Any]:
        return {"size": self.size, "table": self._table.tolist()}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RGBCurve":
        table = np.asarray(d["table"], dtype=np.float32).reshape(cls.NUM_CHANNELS, d["size"])
        return cls.from_table(table)
