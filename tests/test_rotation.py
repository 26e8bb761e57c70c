"""Tests for the rotation solver."""

import pytest
import numpy as np

from hdrmerge.core import solve_rotation


def random_rotation(rng):
    q, r = np.linalg.qr(rng.standard_normal((3, 3)))
    q = q @ np.diag(np.sign(np.diag(r)))
    if np.linalg.det(q) < 0:
        q[:, 0] = -q[:, 0]
    return q


class TestSolveRotation:
    def test_recovers_rotation(self):
        rng = np.random.default_rng(0)
        R_true = random_rotation(rng)
        p2 = rng.standard_normal((3, 20))
        p1 = R_true @ p2

        R = solve_rotation(p1, p2)

        assert np.allclose(R, R_true, atol=1e-8)

    def test_minimal_points(self):
        rng = np.random.default_rng(1)
        R_true = random_rotation(rng)
        p2 = rng.standard_normal((3, 3))

        R = solve_rotation(R_true @ p2, p2)

        assert np.allclose(R, R_true, atol=1e-8)

    def test_proper_rotation(self):
        rng = np.random.default_rng(2)
        p1 = rng.standard_normal((3, 10))
        p2 = rng.standard_normal((3, 10))

        R = solve_rotation(p1, p2)

        assert np.allclose(R @ R.T, np.eye(3), atol=1e-10)
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_identity(self):
        p = np.random.default_rng(3).standard_normal((3, 5))

        assert np.allclose(solve_rotation(p, p), np.eye(3), atol=1e-10)

    def test_shape_errors(self):
        with pytest.raises(ValueError, match=r"\[3, N\]"):
            solve_rotation(np.zeros((2, 5)), np.zeros((2, 5)))
        with pytest.raises(ValueError, match="differ"):
            solve_rotation(np.zeros((3, 5)), np.zeros((3, 4)))
        with pytest.raises(ValueError, match="at least 3"):
            solve_rotation(np.zeros((3, 2)), np.zeros((3, 2)))
