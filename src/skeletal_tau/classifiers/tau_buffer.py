"""file containing the tau motion buffer and the tau trend classifier.

Tau is a time-to-closure estimate borrowed from tau theory: the angular gap
(pi) divided by the current angular velocity of a triangle's Euler line.
Each buffer tracks two variants. The incremental one measures the Euler
line's angle change frame over frame. The full gesture one measures the angle
against the first Euler line the buffer saw.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

import numpy as np

from skeletal_tau.core import config
from skeletal_tau.geometry.vectors import angle_between

logger = logging.getLogger(__name__)


@dataclass
class TauReading:
    """Latest derived values of one buffer. Fields are None until enough samples exist."""

    incremental_tau: Optional[float]
    incremental_tau_dot: Optional[float]
    incremental_smoothed_diff: Optional[float]
    is_growing: bool
    is_steady: bool
    incremental_trend: str
    full_gesture_tau: Optional[float]
    full_gesture_tau_dot: Optional[float]
    full_gesture_smoothed_diff: Optional[float]
    full_gesture_is_growing: bool
    full_gesture_is_steady: bool
    full_gesture_trend: str


def smoothed_diff(samples) -> float:
    """Difference between the mean of the latest two samples and the mean of the two before.

    The pairs overlap: ((s[-1] + s[-2]) / 2) - ((s[-2] + s[-3]) / 2).
    """
    second_mean = (samples[-1] + samples[-2]) / 2
    first_mean = (samples[-2] + samples[-3]) / 2
    return second_mean - first_mean


def classify_trend(smoothed_diffs, tolerance: float = config.STEADY_TOLERANCE) -> str:
    """This function classifies the trend of a smoothed tau-dot series.

    Args:
        smoothed_diffs: series of smoothed diffs, oldest first.
        tolerance: fraction of the latest diff within which the change counts as steady.

    Returns:
        str describing the trend: "growing", "shrinking", "steady" or "unknown".
    """
    if len(smoothed_diffs) < 2:
        return "unknown"

    end_diff = smoothed_diffs[-1]
    check_diff = smoothed_diffs[-2]
    if abs(end_diff - check_diff) < end_diff * tolerance:
        return "steady"
    elif end_diff - check_diff >= 0:
        return "growing"
    else:
        return "shrinking"


def _latest(samples) -> Optional[float]:
    return float(samples[-1]) if samples else None


def _update_tau_derivatives(
    tau_samples, tau_dot_samples, smoothed_diffs, interval: float
) -> Optional[Tuple[bool, bool]]:
    """Append tau-dot and smoothed diff samples, then report the trend.

    Returns:
        (is_growing, is_steady) once two smoothed diffs exist, otherwise None.
        Always None when no time has passed since the last reading.
    """
    if interval <= 0:
        return None

    if len(tau_samples) >= 2:
        tau_dot_samples.append(tau_samples[-1] - tau_samples[-2])

    if len(tau_dot_samples) > 4:
        smoothed_diffs.append(smoothed_diff(tau_dot_samples))

    if len(smoothed_diffs) >= 2:
        is_growing = smoothed_diffs[-1] - smoothed_diffs[-2] >= 0
        return is_growing, classify_trend(smoothed_diffs) == "steady"
    return None


class TauMotionBuffer:
    """Time series of one triangle's Euler line and the tau signals derived from it.

    The buffer is created from the first Euler line seen for its triangle and
    then receives one update per tracked frame.

    Args:
        euler_line: the triangle's first Euler line (centroid - circumcenter).
        radius: circumradius vector (circumcenter - first vertex) at creation.
        timestamp: creation time.
        window: maximum length of every derived series.
        history_limit: optional cap on the motion path and raw angle series.
    """

    def __init__(
        self,
        euler_line,
        radius,
        timestamp: float,
        window: int = config.SMOOTHING_WINDOW,
        history_limit: Optional[int] = None,
    ):
        self.window = window
        self.measuring_stick = np.array(radius, dtype=float)

        self.beginning_position = np.append(np.asarray(euler_line, dtype=float), timestamp)
        self.ending_position = self.beginning_position.copy()
        self.motion_path: Deque[np.ndarray] = deque([self.beginning_position], maxlen=history_limit)

        self.beginning_time = float(timestamp)
        self.last_reading_time = float(timestamp)
        self.current_time = float(timestamp)
        self.elapsed_since_last_reading = 0.0
        self.elapsed_since_beginning = 0.0

        self.incremental_angle_changes: Deque[float] = deque(maxlen=history_limit)
        self.full_gesture_angle_changes: Deque[float] = deque(maxlen=history_limit)

        self.incremental_tau_samples: Deque[float] = deque(maxlen=window)
        self.full_gesture_tau_samples: Deque[float] = deque(maxlen=window)
        self.incremental_tau_dot_samples: Deque[float] = deque(maxlen=window)
        self.full_gesture_tau_dot_samples: Deque[float] = deque(maxlen=window)
        self.incremental_tau_dot_smoothed_diffs: Deque[float] = deque(maxlen=window)
        self.full_gesture_tau_dot_smoothed_diffs: Deque[float] = deque(maxlen=window)

        self.is_growing = False
        self.full_gesture_is_growing = False
        self.is_steady = False
        self.full_gesture_is_steady = False

    @property
    def circumradius(self) -> float:
        return float(np.linalg.norm(self.measuring_stick))

    def update(self, euler_line, timestamp: float) -> bool:
        """This function records a new Euler line and refreshes every tau series.

        Args:
            euler_line: the triangle's Euler line in the current frame.
            timestamp: time of the current frame.

        Returns:
            False if the sample was older than the last one and was dropped.
        """
        if timestamp < self.current_time:
            logger.debug(
                "Dropping sample at %.6f, buffer already at %.6f", timestamp, self.current_time
            )
            return False

        self.current_time = float(timestamp)
        self.elapsed_since_last_reading = self.current_time - self.last_reading_time
        self.elapsed_since_beginning = self.current_time - self.beginning_time

        sample = np.append(np.asarray(euler_line, dtype=float), self.current_time)
        self.motion_path.append(sample)
        self.ending_position = sample

        self.calculate_incremental_gesture_change()
        self.calculate_full_gesture_change()
        self.last_reading_time = self.current_time
        return True

    def calculate_incremental_gesture_change(self) -> None:
        """Update the frame-over-frame angle, tau, tau-dot, and trend."""
        if len(self.motion_path) < 2:
            return
        angle = angle_between(self.motion_path[-2][:3], self.ending_position[:3])
        if angle is None:
            logger.debug("Zero-length Euler line, no incremental angle this frame")
            return
        self.incremental_angle_changes.append(angle)

        interval = self.elapsed_since_last_reading
        if len(self.incremental_angle_changes) >= 2 and interval > 0:
            angle_change = self.incremental_angle_changes[-1] - self.incremental_angle_changes[-2]
            if abs(angle_change) > config.ANGLE_EPSILON:
                velocity = angle_change / interval
                self.incremental_tau_samples.append(config.TAU_NUMERATOR / velocity)

        trend = _update_tau_derivatives(
            self.incremental_tau_samples,
            self.incremental_tau_dot_samples,
            self.incremental_tau_dot_smoothed_diffs,
            interval,
        )
        if trend is not None:
            self.is_growing, self.is_steady = trend

    def calculate_full_gesture_change(self) -> None:
        """Update the angle against the first Euler line, its tau, tau-dot, and trend.

        The rate of closure is the incremental angle delta, not the change of
        the full gesture angle.
        """
        angle = angle_between(self.beginning_position[:3], self.ending_position[:3])
        if angle is None:
            logger.debug("Zero-length Euler line, no full gesture angle this frame")
            return
        self.full_gesture_angle_changes.append(angle)

        interval = self.elapsed_since_last_reading
        if (
            len(self.full_gesture_angle_changes) >= 2
            and len(self.incremental_angle_changes) >= 2
            and interval > 0
            and angle > 0
        ):
            angle_change = self.incremental_angle_changes[-1] - self.incremental_angle_changes[-2]
            if abs(angle_change) > config.ANGLE_EPSILON:
                rate_of_closure = angle_change / interval
                self.full_gesture_tau_samples.append(config.TAU_NUMERATOR / rate_of_closure)

        trend = _update_tau_derivatives(
            self.full_gesture_tau_samples,
            self.full_gesture_tau_dot_samples,
            self.full_gesture_tau_dot_smoothed_diffs,
            interval,
        )
        if trend is not None:
            self.full_gesture_is_growing, self.full_gesture_is_steady = trend

    def reading(self) -> TauReading:
        return TauReading(
            incremental_tau=_latest(self.incremental_tau_samples),
            incremental_tau_dot=_latest(self.incremental_tau_dot_samples),
            incremental_smoothed_diff=_latest(self.incremental_tau_dot_smoothed_diffs),
            is_growing=self.is_growing,
            is_steady=self.is_steady,
            incremental_trend=classify_trend(self.incremental_tau_dot_smoothed_diffs),
            full_gesture_tau=_latest(self.full_gesture_tau_samples),
            full_gesture_tau_dot=_latest(self.full_gesture_tau_dot_samples),
            full_gesture_smoothed_diff=_latest(self.full_gesture_tau_dot_smoothed_diffs),
            full_gesture_is_growing=self.full_gesture_is_growing,
            full_gesture_is_steady=self.full_gesture_is_steady,
            full_gesture_trend=classify_trend(self.full_gesture_tau_dot_smoothed_diffs),
        )
