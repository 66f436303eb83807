"""File containing all global parameters, thresholds, and joint indices for tau tracking."""

import math
from dataclasses import dataclass
from typing import Optional

SMOOTHING_WINDOW = 20  # samples kept per tau series (~2 seconds @ 10 updates/s)
MIN_UPDATE_INTERVAL = 0.1  # seconds between tracking updates
POSE_HISTORY_SIZE = 10  # raw location/rotation samples kept for velocities

GEOMETRY_EPSILON = 1e-10  # relative denominator below which a triangle is degenerate
TAU_NUMERATOR = math.pi  # angular gap closed by a full gesture (radians)
ANGLE_EPSILON = 1e-9  # angle changes at or below this are treated as no change (radians)
STEADY_TOLERANCE = 0.15  # smoothed diff counts as steady within 15% of itself

DEBUG_NORMAL_LENGTH = 50.0  # display length of the triangle normal
DEBUG_BISECTOR_LENGTH = 150.0  # display length of perpendicular bisectors

# Skeleton socket indices (mannequin ordering)
SPINE_1 = 2
NECK = 4
HEAD = 5
LEFT_SHOULDER = 7
LEFT_ARM = 8
LEFT_HAND = 10
RIGHT_SHOULDER = 31
RIGHT_ARM = 32
RIGHT_HAND = 34
LEFT_UP_LEG = 55
LEFT_LEG = 56
LEFT_FOOT = 57
LEFT_TOE_BASE = 58
RIGHT_UP_LEG = 60
RIGHT_LEG = 61
RIGHT_FOOT = 62
RIGHT_TOE_BASE = 63

JOINT_LABELS = {
    SPINE_1: "spine_01",
    NECK: "neck",
    HEAD: "head",
    LEFT_SHOULDER: "left_shoulder",
    LEFT_ARM: "left_arm",
    LEFT_HAND: "left_hand",
    RIGHT_SHOULDER: "right_shoulder",
    RIGHT_ARM: "right_arm",
    RIGHT_HAND: "right_hand",
    LEFT_UP_LEG: "left_up_leg",
    LEFT_LEG: "left_leg",
    LEFT_FOOT: "left_foot",
    LEFT_TOE_BASE: "left_toe_base",
    RIGHT_UP_LEG: "right_up_leg",
    RIGHT_LEG: "right_leg",
    RIGHT_FOOT: "right_foot",
    RIGHT_TOE_BASE: "right_toe_base",
}


@dataclass
class TrackerConfig:
    """Runtime parameters for the tau tracker.

    Attributes:
        smoothing_window: maximum length of every derived tau series.
        min_update_interval: minimum time between two tracking updates.
        pose_history_size: number of raw pose samples kept for joint velocities.
        history_limit: optional cap on the motion path and raw angle series.
            None keeps them for the whole session.
        geometry_epsilon: relative threshold for degenerate triangles.
        debug_geometry: compute perpendicular bisector debug output.
    """

    smoothing_window: int = SMOOTHING_WINDOW
    min_update_interval: float = MIN_UPDATE_INTERVAL
    pose_history_size: int = POSE_HISTORY_SIZE
    history_limit: Optional[int] = None
    geometry_epsilon: float = GEOMETRY_EPSILON
    debug_geometry: bool = False

    def __post_init__(self) -> None:
        if self.smoothing_window < 1:
            raise ValueError(
                f"smoothing_window must be at least 1, got {self.smoothing_window}"
            )
        if self.min_update_interval < 0:
            raise ValueError(
                f"min_update_interval must be non-negative, got {self.min_update_interval}"
            )
        if self.pose_history_size < 2:
            raise ValueError(
                f"pose_history_size must be at least 2, got {self.pose_history_size}"
            )
        if self.history_limit is not None and self.history_limit < 2:
            raise ValueError(
                f"history_limit must be None or at least 2, got {self.history_limit}"
            )
        if self.geometry_epsilon < 0:
            raise ValueError(
                f"geometry_epsilon must be non-negative, got {self.geometry_epsilon}"
            )
