"""Shared fixtures for skeletal_tau tests."""

import numpy as np
import pytest

from skeletal_tau.core import synthetic
from skeletal_tau.core.pose import PoseSample


@pytest.fixture
def rest_pose() -> PoseSample:
    return synthetic.rest_pose()


@pytest.fixture
def right_triangle() -> np.ndarray:
    """Right angle at the origin, hypotenuse from (4, 0, 0) to (0, 3, 0)."""
    return np.array([[0.0, 0.0, 0.0], [4.0, 0.0, 0.0], [0.0, 3.0, 0.0]])


@pytest.fixture
def make_pose():
    """Factory for poses built from plain position lists with zero rotations."""

    def _make_pose(positions, rotations=None) -> PoseSample:
        positions = np.asarray(positions, dtype=float)
        if rotations is None:
            rotations = np.zeros_like(positions)
        return PoseSample(positions, rotations)

    return _make_pose
