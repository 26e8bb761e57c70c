"""Tests for RGBCurve."""

import pytest
import numpy as np
import torch

from hdrmerge.core import RGBCurve


class TestRGBCurve:
    def test_empty(self):
        assert RGBCurve(0).is_empty()
        assert not RGBCurve(16).is_empty()

        with pytest.raises(ValueError):
            RGBCurve(0)(0.5, 0)

    def test_linear_interpolation(self):
        curve = RGBCurve(256).set_linear()

        for channel in range(3):
            assert curve(0.25, channel).item() == pytest.approx(0.25, abs=1e-6)
            assert curve(0.7, channel).item() == pytest.approx(0.7, abs=1e-6)

    def test_out_of_range_clamped(self):
        curve = RGBCurve().set_linear()

        assert curve(-0.5, 0).item() == pytest.approx(0.0)
        assert curve(1.5, 2).item() == pytest.approx(1.0)

    def test_tensor_input_keeps_shape(self):
        curve = RGBCurve().set_gaussian()
        values = torch.rand(4, 5)

        out = curve(values, 1)

        assert out.shape == (4, 5)

    def test_numpy_input(self):
        curve = RGBCurve().set_linear()

        out = curve(np.array([0.0, 0.5, 1.0]), 0)

        assert torch.allclose(out, torch.tensor([0.0, 0.5, 1.0]), atol=1e-6)

    def test_shapes(self):
        assert RGBCurve().set_gaussian()(0.5, 0).item() == pytest.approx(1.0, abs=1e-3)
        assert RGBCurve().set_triangular()(0.0, 0).item() == pytest.approx(0.0, abs=1e-6)
        assert RGBCurve().set_triangular()(1.0, 0).item() == pytest.approx(0.0, abs=1e-6)
        assert RGBCurve().set_plateau()(0.5, 0).item() == pytest.approx(1.0, abs=1e-3)
        assert RGBCurve().set_log10()(1.0, 0).item() == pytest.approx(1.0, abs=1e-6)
        assert RGBCurve().set_zero()(0.3, 0).item() == 0.0

    def test_set_function(self):
        by_name = RGBCurve().set_function("triangle")
        direct = RGBCurve().set_triangular()

        assert torch.equal(by_name.table, direct.table)

        with pytest.raises(ValueError, match="Unknown curve function"):
            RGBCurve().set_function("cubic")

    def test_single_sample_curve(self):
        curve = RGBCurve.from_table(np.full((3, 1), 0.3))

        assert curve(0.9, 1).item() == pytest.approx(0.3)

    def test_from_table(self):
        table = np.stack([np.linspace(0, 1, 8), np.linspace(0, 2, 8), np.zeros(8)])
        curve = RGBCurve.from_table(table)

        assert curve.size == 8
        assert curve(1.0, 1).item() == pytest.approx(2.0)
        assert curve(1.0, 2).item() == 0.0

        with pytest.raises(ValueError):
            RGBCurve.from_table(np.zeros((2, 8)))

    def test_normalize(self):
        table = np.stack([np.linspace(0, 4, 8), np.linspace(0, 2, 8), np.zeros(8)])
        curve = RGBCurve.from_table(table).normalize()

        assert curve.table[0].max().item() == pytest.approx(1.0)
        assert curve.table[1].max().item() == pytest.approx(1.0)
        assert curve.table[2].max().item() == 0.0

    def test_dict(self):
        curve = RGBCurve(32).set_plateau()
        restored = RGBCurve.from_dict(curve.to_dict())

        assert torch.allclose(restored.table, curve.table)

    def test_table_is_copy(self):
        curve = RGBCurve(8).set_linear()
        curve.table.zero_()

        assert curve(1.0, 0).item() == pytest.approx(1.0)
