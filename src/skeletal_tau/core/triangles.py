"""The fixed triangle table and the per-frame triangle builder."""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from skeletal_tau.core.config import (
    HEAD,
    LEFT_ARM,
    LEFT_FOOT,
    LEFT_HAND,
    LEFT_LEG,
    LEFT_SHOULDER,
    LEFT_TOE_BASE,
    LEFT_UP_LEG,
    NECK,
    RIGHT_ARM,
    RIGHT_FOOT,
    RIGHT_HAND,
    RIGHT_LEG,
    RIGHT_SHOULDER,
    RIGHT_TOE_BASE,
    RIGHT_UP_LEG,
    SPINE_1,
)
from skeletal_tau.core.exceptions import JointIndexError
from skeletal_tau.core.pose import PoseSample, rotations_from_rpy

logger = logging.getLogger(__name__)

TRIANGLE_JOINTS: Tuple[Tuple[int, int, int], ...] = (
    # center symmetrical
    (HEAD, LEFT_UP_LEG, RIGHT_UP_LEG),
    (HEAD, LEFT_TOE_BASE, RIGHT_TOE_BASE),
    (SPINE_1, LEFT_SHOULDER, RIGHT_SHOULDER),
    (SPINE_1, LEFT_HAND, RIGHT_HAND),
    (SPINE_1, LEFT_UP_LEG, RIGHT_UP_LEG),
    # right side head
    (HEAD, RIGHT_SHOULDER, NECK),
    (HEAD, RIGHT_SHOULDER, SPINE_1),
    (HEAD, RIGHT_ARM, RIGHT_HAND),
    (HEAD, RIGHT_ARM, RIGHT_FOOT),
    # right side chest
    (SPINE_1, RIGHT_SHOULDER, NECK),
    (SPINE_1, RIGHT_SHOULDER, RIGHT_HAND),
    (SPINE_1, RIGHT_UP_LEG, RIGHT_FOOT),
    (SPINE_1, RIGHT_ARM, RIGHT_HAND),
    # right side hip
    (RIGHT_UP_LEG, RIGHT_SHOULDER, LEFT_UP_LEG),
    (RIGHT_UP_LEG, RIGHT_SHOULDER, RIGHT_ARM),
    (RIGHT_UP_LEG, RIGHT_SHOULDER, RIGHT_HAND),
    (RIGHT_UP_LEG, NECK, RIGHT_SHOULDER),
    (RIGHT_UP_LEG, RIGHT_ARM, RIGHT_HAND),
    (RIGHT_UP_LEG, RIGHT_LEG, LEFT_LEG),
    (RIGHT_UP_LEG, RIGHT_LEG, RIGHT_FOOT),
    # right side knee
    (RIGHT_LEG, RIGHT_SHOULDER, RIGHT_ARM),
    (RIGHT_LEG, RIGHT_SHOULDER, LEFT_LEG),
    (RIGHT_LEG, RIGHT_UP_LEG, LEFT_UP_LEG),
    (RIGHT_LEG, RIGHT_FOOT, LEFT_FOOT),
    # right side ankle
    (RIGHT_FOOT, RIGHT_SHOULDER, LEFT_SHOULDER),
    (RIGHT_FOOT, RIGHT_LEG, LEFT_LEG),
    # left side head
    (HEAD, LEFT_SHOULDER, NECK),
    (HEAD, LEFT_SHOULDER, SPINE_1),
    (HEAD, LEFT_ARM, LEFT_HAND),
    (HEAD, LEFT_ARM, LEFT_FOOT),
    # left side chest
    (SPINE_1, LEFT_SHOULDER, LEFT_ARM),
    (SPINE_1, LEFT_SHOULDER, LEFT_HAND),
    (SPINE_1, LEFT_UP_LEG, LEFT_FOOT),
    (SPINE_1, LEFT_ARM, LEFT_HAND),
    # left side hip
    (LEFT_UP_LEG, LEFT_SHOULDER, RIGHT_UP_LEG),
    (LEFT_UP_LEG, LEFT_SHOULDER, LEFT_ARM),
    (LEFT_UP_LEG, LEFT_SHOULDER, LEFT_HAND),
    (LEFT_UP_LEG, NECK, LEFT_SHOULDER),
    (LEFT_UP_LEG, LEFT_ARM, LEFT_HAND),
    (LEFT_UP_LEG, LEFT_LEG, RIGHT_LEG),
    (LEFT_UP_LEG, LEFT_LEG, LEFT_FOOT),
    # left side leg
    (LEFT_LEG, LEFT_SHOULDER, LEFT_ARM),
    (LEFT_LEG, LEFT_SHOULDER, RIGHT_LEG),
    (LEFT_LEG, LEFT_UP_LEG, RIGHT_UP_LEG),
    (LEFT_LEG, LEFT_FOOT, RIGHT_FOOT),
    # left side ankle
    (LEFT_FOOT, LEFT_SHOULDER, RIGHT_SHOULDER),
    (LEFT_FOOT, LEFT_LEG, RIGHT_LEG),
    # cross center
    (HEAD, RIGHT_ARM, LEFT_FOOT),
    (HEAD, LEFT_ARM, RIGHT_FOOT),
    (HEAD, RIGHT_ARM, LEFT_HAND),
    (HEAD, LEFT_ARM, RIGHT_HAND),
    (SPINE_1, RIGHT_UP_LEG, LEFT_HAND),
    (SPINE_1, LEFT_UP_LEG, RIGHT_HAND),
    (SPINE_1, RIGHT_SHOULDER, LEFT_HAND),
    (SPINE_1, LEFT_SHOULDER, RIGHT_HAND),
    (RIGHT_UP_LEG, LEFT_SHOULDER, RIGHT_ARM),
    (LEFT_UP_LEG, RIGHT_SHOULDER, LEFT_ARM),
    (RIGHT_UP_LEG, LEFT_SHOULDER, RIGHT_HAND),
    (LEFT_UP_LEG, RIGHT_SHOULDER, LEFT_HAND),
    (RIGHT_UP_LEG, LEFT_ARM, RIGHT_HAND),
    (LEFT_UP_LEG, RIGHT_ARM, LEFT_HAND),
    (RIGHT_UP_LEG, LEFT_LEG, RIGHT_HAND),
    (LEFT_UP_LEG, RIGHT_LEG, LEFT_HAND),
    (RIGHT_UP_LEG, LEFT_FOOT, RIGHT_LEG),
    (LEFT_UP_LEG, RIGHT_FOOT, LEFT_LEG),
    (RIGHT_LEG, LEFT_SHOULDER, RIGHT_ARM),
    (LEFT_LEG, RIGHT_SHOULDER, LEFT_ARM),
)


@dataclass
class Triangle:
    """Three joints of one frame, identified by their index in the triangle table."""

    index: int
    joints: Tuple[int, int, int]
    joint_names: Tuple[str, str, str]
    positions: np.ndarray
    rotations: np.ndarray

    @property
    def name(self) -> str:
        return "-".join(self.joint_names)


class TriangleSet:
    """All triangles of one frame, stored as (T, 3, 3) position and rotation arrays."""

    def __init__(self, joints, joint_names: List[Tuple[str, str, str]], positions, rotations):
        self.joints = np.asarray(joints, dtype=int)
        self.joint_names = joint_names
        self.positions = positions
        self.rotations = rotations

    def __len__(self) -> int:
        return len(self.joints)

    def __getitem__(self, index: int) -> Triangle:
        return Triangle(
            index=index,
            joints=tuple(int(j) for j in self.joints[index]),
            joint_names=self.joint_names[index],
            positions=self.positions[index],
            rotations=self.rotations[index],
        )

    def __iter__(self) -> Iterator[Triangle]:
        for index in range(len(self)):
            yield self[index]

    @property
    def flat_positions(self) -> np.ndarray:
        """Vertex positions as a (3T, 3) array, three consecutive rows per triangle."""
        return self.positions.reshape(-1, 3)


class TriangleSetBuilder:
    """Builds the frame's triangles from a pose and keeps the previous frame's set.

    Args:
        triangle_joints: joint index triples, one per triangle. Fixed for the
            builder's lifetime.
    """

    def __init__(self, triangle_joints: Sequence[Tuple[int, int, int]] = TRIANGLE_JOINTS):
        self.triangle_joints = np.asarray(triangle_joints, dtype=int).reshape(-1, 3)
        if len(self.triangle_joints) == 0:
            raise ValueError("at least one triangle is required")
        if self.triangle_joints.min() < 0:
            raise ValueError("triangle joint indices must be non-negative")
        self.current: Optional[TriangleSet] = None
        self.previous: Optional[TriangleSet] = None

    @property
    def triangle_count(self) -> int:
        return len(self.triangle_joints)

    @property
    def required_joint_count(self) -> int:
        return int(self.triangle_joints.max()) + 1

    def build(self, pose: PoseSample) -> TriangleSet:
        """This function resolves every triangle's vertices for the current pose.

        Args:
            pose: joint positions and rotations for this frame.

        Returns:
            TriangleSet in table order.

        Raises:
            JointIndexError: if the pose has fewer joints than the table references.
        """
        if pose.joint_count < self.required_joint_count:
            logger.warning(
                "Pose has %d joints, triangle table needs %d",
                pose.joint_count,
                self.required_joint_count,
            )
            raise JointIndexError(
                f"pose has {pose.joint_count} joints but the triangle table references "
                f"joint {self.required_joint_count - 1}"
            )

        joint_names = [
            tuple(pose.name_of(int(j)) for j in triple) for triple in self.triangle_joints
        ]
        triangles = TriangleSet(
            joints=self.triangle_joints,
            joint_names=joint_names,
            positions=pose.positions[self.triangle_joints],
            rotations=pose.rotations[self.triangle_joints],
        )
        self.previous = self.current
        self.current = triangles
        return triangles

    def position_deltas(self) -> Optional[np.ndarray]:
        """Return the (T, 3, 3) vertex displacement since the previous frame."""
        if self.current is None or self.previous is None:
            return None
        return self.current.positions - self.previous.positions

    def rotation_deltas(self) -> Optional[np.ndarray]:
        """Return the (T, 3) vertex rotation angle in radians since the previous frame."""
        if self.current is None or self.previous is None:
            return None
        previous = rotations_from_rpy(self.previous.rotations)
        current = rotations_from_rpy(self.current.rotations)
        return (previous.inv() * current).magnitude().reshape(-1, 3)
