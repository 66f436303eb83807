"""Frame-driven runner for the tau tracking pipeline."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from skeletal_tau.classifiers.tau_buffer import TauMotionBuffer, TauReading
from skeletal_tau.core.config import TrackerConfig
from skeletal_tau.core.pose import PoseHistory, PoseSample
from skeletal_tau.core.triangles import TRIANGLE_JOINTS, TriangleSet, TriangleSetBuilder
from skeletal_tau.geometry.euler_lines import (
    BisectorDebug,
    EulerLineSample,
    compute_bisector_debug,
    extract_euler_lines,
)

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Everything the tracker derived from one frame.

    Attributes:
        frame_index: 1-based count of update calls since initialization.
        timestamp: time passed to update.
        tracked: False when the frame fell inside the minimum update interval
            and only the triangles were rebuilt.
        triangles: triangle set built from the frame's pose.
        euler_lines: one entry per triangle, None for degenerate triangles.
            Empty when the frame was not tracked.
        readings: latest tau reading per triangle index that has a buffer.
        joint_speeds: per-joint speed since the previous frame, if known.
        joint_angular_speeds: per-joint rotation speed since the previous frame, if known.
        debug: bisector debug output per triangle when enabled.
    """

    frame_index: int
    timestamp: float
    tracked: bool
    triangles: TriangleSet
    euler_lines: List[Optional[EulerLineSample]] = field(default_factory=list)
    readings: Dict[int, TauReading] = field(default_factory=dict)
    joint_speeds: Optional[np.ndarray] = None
    joint_angular_speeds: Optional[np.ndarray] = None
    debug: Optional[List[Optional[BisectorDebug]]] = None

    @property
    def centroids(self) -> List[Optional[np.ndarray]]:
        return [s.centroid if s is not None else None for s in self.euler_lines]

    @property
    def circumcenters(self) -> List[Optional[np.ndarray]]:
        return [s.circumcenter if s is not None else None for s in self.euler_lines]

    @property
    def euler_line_vectors(self) -> List[Optional[np.ndarray]]:
        return [s.euler_line if s is not None else None for s in self.euler_lines]


class TauTracker:
    """Owns the triangle builder, the pose window, and one tau buffer per triangle.

    Per frame: record the pose, rebuild the triangles, and, unless the frame
    falls inside the minimum update interval, extract the Euler lines and
    update every triangle's tau buffer.

    Args:
        config: runtime parameters. Defaults to TrackerConfig().
        triangle_joints: joint index triples, one per triangle.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        triangle_joints: Sequence[Tuple[int, int, int]] = TRIANGLE_JOINTS,
    ):
        self.triangle_joints = triangle_joints
        self.initialize(config)

    def initialize(self, config: Optional[TrackerConfig] = None) -> None:
        """This function resets the tracker, dropping every buffer and history.

        Args:
            config: runtime parameters. Defaults to TrackerConfig().
        """
        self.config = config if config is not None else TrackerConfig()
        self.builder = TriangleSetBuilder(self.triangle_joints)
        self.pose_history = PoseHistory(self.config.pose_history_size)
        self.buffers: Dict[int, TauMotionBuffer] = {}
        self.last_update_time: Optional[float] = None
        self.frame_index = 0
        logger.info(
            "Tracking %d triangles (window %d, minimum interval %.3f)",
            self.builder.triangle_count,
            self.config.smoothing_window,
            self.config.min_update_interval,
        )

    def should_track(self, now: float) -> bool:
        if self.last_update_time is None:
            return True
        return now - self.last_update_time >= self.config.min_update_interval

    def update(self, pose: PoseSample, now: float) -> FrameResult:
        """Run the pipeline for one frame.

        Args:
            pose: joint positions and rotations for this frame.
            now: frame time, monotonic, in the same unit as the update interval.

        Returns:
            FrameResult for the frame.

        Raises:
            JointIndexError: if the pose has fewer joints than the triangle table references.
        """
        triangles = self.builder.build(pose)
        self.frame_index += 1
        self.pose_history.append(pose, now)

        result = FrameResult(
            frame_index=self.frame_index,
            timestamp=now,
            tracked=False,
            triangles=triangles,
            joint_speeds=self.pose_history.joint_speeds(),
            joint_angular_speeds=self.pose_history.joint_angular_speeds(),
        )

        if not self.should_track(now):
            logger.debug("Frame %d inside update interval, not tracked", self.frame_index)
            result.readings = self.readings()
            return result

        result.tracked = True
        result.euler_lines = extract_euler_lines(triangles, self.config.geometry_epsilon)
        if self.config.debug_geometry:
            result.debug = [
                compute_bisector_debug(*triangle.positions) for triangle in triangles
            ]
        self._update_buffers(result.euler_lines, now)
        self.last_update_time = now
        result.readings = self.readings()
        return result

    def _update_buffers(self, euler_lines: List[Optional[EulerLineSample]], now: float) -> None:
        created = 0
        for index, sample in enumerate(euler_lines):
            if sample is None:
                continue
            buffer = self.buffers.get(index)
            if buffer is None:
                self.buffers[index] = TauMotionBuffer(
                    sample.euler_line,
                    sample.radius,
                    now,
                    window=self.config.smoothing_window,
                    history_limit=self.config.history_limit,
                )
                created += 1
            else:
                buffer.update(sample.euler_line, now)

        if created:
            logger.info("Created %d tau buffers (%d total)", created, len(self.buffers))

    def readings(self) -> Dict[int, TauReading]:
        return {index: buffer.reading() for index, buffer in sorted(self.buffers.items())}
