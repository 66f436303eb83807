"""Skeletal tau tracking: Euler-line geometry and tau signals from joint poses."""

from skeletal_tau.core.config import TrackerConfig
from skeletal_tau.core.orchestrator import FrameResult, TauTracker

__all__ = ["FrameResult", "TauTracker", "TrackerConfig"]
