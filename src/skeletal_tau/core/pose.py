"""Per-frame skeleton pose samples and the rolling window of raw samples."""

from collections import deque
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation as R

from skeletal_tau.core import config


def rotations_from_rpy(rpy) -> R:
    """This function converts roll/pitch/yaw angles into scipy rotations.

    Roll turns about x, pitch about y and yaw about z. Yaw is applied first,
    then pitch, then roll.

    Args:
        rpy: array of shape (..., 3) with roll, pitch, yaw in degrees.

    Returns:
        scipy Rotation holding one rotation per row.
    """
    rpy = np.asarray(rpy, dtype=float).reshape(-1, 3)
    return R.from_euler("ZYX", rpy[:, ::-1], degrees=True)


def rpy_from_rotations(rotations: R) -> np.ndarray:
    """Inverse of rotations_from_rpy, returns an (N, 3) roll/pitch/yaw array in degrees."""
    return rotations.as_euler("ZYX", degrees=True)[..., ::-1].reshape(-1, 3)


@dataclass
class PoseSample:
    """Named joint positions and rotations captured in one frame.

    Attributes:
        positions: (N, 3) joint locations.
        rotations: (N, 3) joint roll, pitch, yaw in degrees.
        joint_names: optional socket names, one per joint.
    """

    positions: np.ndarray
    rotations: np.ndarray
    joint_names: Optional[Sequence[str]] = None

    def __post_init__(self) -> None:
        self.positions = np.asarray(self.positions, dtype=float)
        self.rotations = np.asarray(self.rotations, dtype=float)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {self.positions.shape}")
        if self.rotations.shape != self.positions.shape:
            raise ValueError(
                f"rotations shape {self.rotations.shape} does not match positions {self.positions.shape}"
            )
        if self.joint_names is not None and len(self.joint_names) != len(self.positions):
            raise ValueError(
                f"{len(self.joint_names)} joint names given for {len(self.positions)} joints"
            )

    @property
    def joint_count(self) -> int:
        return len(self.positions)

    def name_of(self, joint: int) -> str:
        if self.joint_names is not None:
            return str(self.joint_names[joint])
        return config.JOINT_LABELS.get(joint, f"joint_{joint}")


def compute_velocity(positions, timestamps) -> np.ndarray:
    """Compute joint speeds between consecutive saved frames.

    Args:
        positions: (F, N, 3) joint locations for F saved frames.
        timestamps: F frame times.

    Returns:
        (F - 1, N) array of speeds. Frame pairs without a positive interval are 0.
    """
    positions = np.asarray(positions, dtype=float)
    timestamps = np.asarray(timestamps, dtype=float)
    distances = np.linalg.norm(np.diff(positions, axis=0), axis=-1)
    intervals = np.diff(timestamps)
    speeds = np.zeros_like(distances)
    moving = intervals > 0
    speeds[moving] = distances[moving] / intervals[moving, None]
    return speeds


class PoseHistory:
    """Rolling window of the most recent raw pose samples."""

    def __init__(self, size: int = config.POSE_HISTORY_SIZE):
        self.positions = deque(maxlen=size)
        self.rotations = deque(maxlen=size)
        self.timestamps = deque(maxlen=size)

    def __len__(self) -> int:
        return len(self.timestamps)

    def append(self, pose: PoseSample, timestamp: float) -> None:
        self.positions.append(pose.positions.copy())
        self.rotations.append(pose.rotations.copy())
        self.timestamps.append(float(timestamp))

    def joint_speeds(self) -> Optional[np.ndarray]:
        """Return every joint's speed between the two latest frames.

        Returns:
            (N,) array of speeds, or None with fewer than two frames or when the
            joint count changed between them.
        """
        if len(self) < 2 or self.positions[-1].shape != self.positions[-2].shape:
            return None
        positions = [self.positions[-2], self.positions[-1]]
        timestamps = [self.timestamps[-2], self.timestamps[-1]]
        return compute_velocity(positions, timestamps)[-1]

    def joint_angular_speeds(self) -> Optional[np.ndarray]:
        """Return every joint's rotation speed (radians per time unit) between the two latest frames."""
        if len(self) < 2 or self.rotations[-1].shape != self.rotations[-2].shape:
            return None
        interval = self.timestamps[-1] - self.timestamps[-2]
        if interval <= 0:
            return np.zeros(len(self.rotations[-1]))
        previous = rotations_from_rpy(self.rotations[-2])
        current = rotations_from_rpy(self.rotations[-1])
        return (previous.inv() * current).magnitude() / interval
