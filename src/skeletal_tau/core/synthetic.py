"""Synthetic skeleton poses for exercising the tracker without a live pose source."""

import numpy as np
from scipy.spatial.transform import Rotation as R

from skeletal_tau.core import config
from skeletal_tau.core.pose import PoseSample, rpy_from_rotations

JOINT_COUNT = 64  # mannequin socket count, covers every triangle table index

# Rest positions in centimeters, z up, y forward
REST_POSITIONS = {
    config.SPINE_1: (0.0, 1.0, 110.0),
    config.NECK: (0.0, 2.0, 150.0),
    config.HEAD: (0.0, 4.0, 165.0),
    config.LEFT_SHOULDER: (-15.0, 0.0, 145.0),
    config.LEFT_ARM: (-30.0, 4.0, 140.0),
    config.LEFT_HAND: (-55.0, 8.0, 135.0),
    config.RIGHT_SHOULDER: (15.0, 0.0, 145.0),
    config.RIGHT_ARM: (30.0, 4.0, 140.0),
    config.RIGHT_HAND: (55.0, 8.0, 135.0),
    config.LEFT_UP_LEG: (-10.0, 0.0, 95.0),
    config.LEFT_LEG: (-12.0, 3.0, 50.0),
    config.LEFT_FOOT: (-12.0, -1.0, 8.0),
    config.LEFT_TOE_BASE: (-13.0, 15.0, 2.0),
    config.RIGHT_UP_LEG: (10.0, 0.0, 95.0),
    config.RIGHT_LEG: (12.0, 3.0, 50.0),
    config.RIGHT_FOOT: (12.0, -1.0, 8.0),
    config.RIGHT_TOE_BASE: (13.0, 15.0, 2.0),
}

# (pivot, moving joints, rotation axis, swing direction)
LIMBS = [
    (config.LEFT_SHOULDER, [config.LEFT_ARM, config.LEFT_HAND], (0.0, 1.0, 0.0), 1.0),
    (config.RIGHT_SHOULDER, [config.RIGHT_ARM, config.RIGHT_HAND], (0.0, 1.0, 0.0), -1.0),
    (config.LEFT_UP_LEG, [config.LEFT_LEG, config.LEFT_FOOT, config.LEFT_TOE_BASE], (1.0, 0.0, 0.0), 0.3),
    (config.RIGHT_UP_LEG, [config.RIGHT_LEG, config.RIGHT_FOOT, config.RIGHT_TOE_BASE], (1.0, 0.0, 0.0), -0.3),
]


def rest_pose(joint_count: int = JOINT_COUNT) -> PoseSample:
    """Build the rest pose. Joints outside the triangle table stay at the origin."""
    positions = np.zeros((joint_count, 3))
    for joint, position in REST_POSITIONS.items():
        if joint < joint_count:
            positions[joint] = position
    return PoseSample(positions, np.zeros((joint_count, 3)))


def swing_angle(t: float, acceleration: float) -> float:
    """Limb angle after t seconds of constant angular acceleration from rest."""
    return 0.5 * acceleration * t**2


def swinging_pose(t: float, acceleration: float = 0.5, joint_count: int = JOINT_COUNT) -> PoseSample:
    """This function builds the pose of a skeleton swinging its arms and legs.

    Arms rotate sideways about the shoulders and legs forward/back about the
    hips, with an angle that grows quadratically in time.

    Args:
        t: time since the start of the motion.
        acceleration: angular acceleration of the arms in radians per second squared.
        joint_count: total number of joints in the generated pose.

    Returns:
        PoseSample of the skeleton at time t.
    """
    pose = rest_pose(joint_count)
    positions = pose.positions.copy()
    rotations = pose.rotations.copy()
    angle = swing_angle(t, acceleration)

    for pivot, joints, axis, direction in LIMBS:
        rotation = R.from_rotvec(np.asarray(axis) * angle * direction)
        for joint in joints:
            positions[joint] = positions[pivot] + rotation.apply(positions[joint] - positions[pivot])
        rotations[joints] = rpy_from_rotations(rotation)[0]

    return PoseSample(positions, rotations)
