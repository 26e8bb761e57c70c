"""Tests for RadianceCodec and CurveCodec."""

import pytest
import numpy as np
import torch
import tempfile
from pathlib import Path

from hdrmerge.codecs import RadianceCodec, CurveCodec
from hdrmerge.core import RGBCurve


class TestRadianceCodec:
    @pytest.fixture
    def sample_data(self):
        return {
            "radiance": (np.random.rand(16, 16, 3) * 50).astype(np.float32),
            "times": [0.01, 0.1, 1.0],
            "params": {"target_exposure_time": np.float64(0.1), "num_workers": np.int64(2)},
            "meta": {"bracket_id": "abc123"},
        }

    def test_encode_decode(self, sample_data):
        decoded = RadianceCodec.decode(RadianceCodec.encode(**sample_data))

        assert np.array_equal(decoded["radiance"], sample_data["radiance"])
        assert decoded["times"] == [0.01, 0.1, 1.0]
        assert decoded["params"]["target_exposure_time"] == 0.1
        assert isinstance(decoded["params"]["num_workers"], int)

    def test_tensor_input(self):
        radiance = torch.rand(4, 4, 3)

        encoded = RadianceCodec.encode(radiance=radiance)

        assert isinstance(encoded["radiance"], np.ndarray)
        assert np.allclose(encoded["radiance"], radiance.numpy())

    def test_compression(self, sample_data):
        compressed = RadianceCodec.encode(compress=True, **sample_data)
        full = RadianceCodec.encode(compress=False, **sample_data)

        assert compressed["radiance"].dtype == np.float16
        assert full["radiance"].dtype == np.float32
        assert np.isfinite(RadianceCodec.encode(radiance=np.full((2, 2, 3), 1000.0), compress=True)["radiance"]).all()

    def test_save_load(self, sample_data):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "radiance" / "scene.npy"

            RadianceCodec.save(path, **sample_data)
            loaded = RadianceCodec.load(path)

            assert np.array_equal(loaded["radiance"], sample_data["radiance"])
            assert loaded["meta"]["bracket_id"] == "abc123"

    def test_version(self, sample_data):
        encoded = RadianceCodec.encode(**sample_data)
        assert encoded["version"] == RadianceCodec.VERSION


class TestCurveCodec:
    def test_write_read(self):
        curve = RGBCurve(64).set_gaussian()

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "weight.csv"
            CurveCodec.write(path, curve)
            restored = CurveCodec.read(path)

        assert restored.size == 64
        assert torch.allclose(restored.table, curve.table)

    def test_header(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "curve.csv"
            CurveCodec.write(path, RGBCurve(4).set_linear())

            assert path.read_text().splitlines()[0] == "Red,Green,Blue"

    def test_bad_header(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "curve.csv"
            path.write_text("a,b,c\n0,0,0\n")

            with pytest.raises(ValueError, match="expected header"):
                CurveCodec.read(path)

    def test_bad_row(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "curve.csv"
            path.write_text("Red,Green,Blue\n0,0,0\n1,1\n")

            with pytest.raises(ValueError, match="row 2"):
                CurveCodec.read(path)
