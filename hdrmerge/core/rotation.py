"""Closed-form rotation between two sets of 3D directions."""

import numpy as np


def solve_rotation(p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
    """Rotation R minimizing sum ||R^T p1_i - p2_i|| (orthogonal Procrustes).

    Args:
        p1: [3, N] points, N >= 3
        p2: [3, N] corresponding points

    Returns:
        R: [3, 3] proper rotation (det = +1)
    """
    p1 = np.asarray(p1, dtype=np.float64)
    p2 = np.asarray(p2, dtype=np.float64)
    if p1.ndim != 2 or p1.shape[0] != 3:
        raise ValueError(f"p1 must be [3, N], got {list(p1.shape)}")
    if p1.shape != p2.shape:
        raise ValueError(f"p1 and p2 shapes differ: {list(p1.shape)} vs {list(p2.shape)}")
    if p1.shape[1] < 3:
        raise ValueError(f"need at least 3 correspondences, got {p1.shape[1]}")

    M = p1 @ p2.T
    U, _, Vt = np.linalg.svd(M)

    # Reflection fix
    D = np.eye(3)
    D[2, 2] = 1.0 / np.linalg.det(U @ Vt)
    return U @ D @ Vt
