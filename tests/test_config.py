"""Tests for MergeConfig."""

import pytest

from hdrmerge.core import MergeConfig


class TestMergeConfig:
    def test_default_config(self):
        cfg = MergeConfig()
        assert cfg.target_exposure_time == 1.0
        assert cfg.robust_calibration is False
        assert cfg.clamped_value_correction == 1.0
        assert cfg.num_workers == 1
        assert cfg.device == "cpu"

    def test_to_dict(self):
        d = MergeConfig(target_exposure_time=0.5).to_dict()

        assert d["target_exposure_time"] == 0.5
        assert "clamped_value_correction" in d

    def test_from_dict(self):
        cfg = MergeConfig.from_dict({"robust_calibration": True, "num_workers": 4})

        assert cfg.robust_calibration is True
        assert cfg.num_workers == 4
        assert cfg.target_exposure_time == 1.0

    def test_from_dict_unknown_key(self):
        with pytest.raises(KeyError, match="shutter_length"):
            MergeConfig.from_dict({"shutter_length": 1.0})
