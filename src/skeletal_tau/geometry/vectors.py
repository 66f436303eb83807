"""Small vector helpers shared by the geometry and tau modules."""

from typing import Optional

import numpy as np


def normalize(v) -> np.ndarray:
    """This function scales a vector (v) to unit length.

    Args:
        v: vector to normalize.

    Returns:
        normalized vector (length 1), or v unchanged when it has no length.
    """
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    return v / norm if norm > 1e-12 else v


def angle_between(u, v) -> Optional[float]:
    """This function computes the angle between two direction vectors.

    Args:
        u: first vector.
        v: second vector.

    Returns:
        angle in radians in [0, pi], or None if either vector has no length.
    """
    u = np.asarray(u, dtype=float)
    v = np.asarray(v, dtype=float)
    norm_u = np.linalg.norm(u)
    norm_v = np.linalg.norm(v)
    if norm_u == 0 or norm_v == 0:
        return None
    cosine_angle = np.dot(u, v) / (norm_u * norm_v)
    return float(np.arccos(np.clip(cosine_angle, -1.0, 1.0)))
