"""HDRMerge Codecs: radiance and curve storage."""

from .radiance import RadianceCodec
from .curve import CurveCodec

__all__ = ["RadianceCodec", "CurveCodec"]
