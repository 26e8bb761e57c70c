"""Radiance image encoding/decoding for storage."""

import numpy as np
import torch
from pathlib import Path
from typing import Dict, Any, Union, Optional, Sequence


class RadianceCodec:
    """Encode/decode radiance images and metadata to/from .npy files.

    Format: Single .npy file containing a dict with:
        - radiance: [H, W, 3] linear radiance
        - times: exposure times of the merged bracket (optional)
        - params: merge parameters
        - meta: additional metadata
    """

    VERSION = 1

    @classmethod
    def encode(
        cls,
        radiance: Union[np.ndarray, torch.Tensor],
        times: Optional[Sequence[float]] = None,
        params: Optional[Dict[str, Any]] = None,
        meta: Optional[Dict[str, Any]] = None,
        compress: bool = False,
    ) -> Dict[str, Any]:
        """Encode a radiance image to a dict for saving.

        Args:
            radiance: [H, W, 3] radiance image
            times: exposure times of the source bracket
            params: merge parameters
            meta: additional metadata
            compress: use float16 (radiance stays well inside its range)

        Returns:
            dict ready for np.save
        """
        if isinstance(radiance, torch.Tensor):
            radiance = radiance.detach().cpu().numpy()
        dtype = np.float16 if compress else np.float32

        data = {
            "version": cls.VERSION,
            "radiance": np.asarray(radiance).astype(dtype),
        }

        if times is not None:
            data["times"] = [float(t) for t in times]

        if params is not None:
            data["params"] = cls._serialize_params(params)

        if meta is not None:
            data["meta"] = meta

        return data

    @classmethod
    def decode(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        result = {"radiance": data["radiance"].astype(np.float32)}

        for key in ("times", "params", "meta"):
            if key in data:
                result[key] = data[key]

        result["version"] = data.get("version", 0)
        return result

    @classmethod
    def save(cls, path: Union[str, Path], **kwargs) -> None:
        """Save radiance to .npy file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        np.save(path, cls.encode(**kwargs), allow_pickle=True)

    @classmethod
    def load(cls, path: Union[str, Path]) -> Dict[str, Any]:
        """Load radiance from .npy file."""
        data = np.load(path, allow_pickle=True).item()
        return cls.decode(data)

    @staticmethod
    def _serialize_params(params: Dict[str, Any]) -> Dict[str, Any]:
        """Serialize params to JSON-safe types."""
        serialized = {}
        for k, v in params.items():
            if isinstance(v, np.ndarray):
                serialized[k] = v.tolist()
            elif isinstance(v, (np.floating, np.integer)):
                serialized[k] = float(v) if isinstance(v, np.floating) else int(v)
            elif hasattr(v, "item"):
                serialized[k] = v.item()
            else:
                serialized[k] = v
        return serialized
