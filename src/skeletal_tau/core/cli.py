"""CLI for skeletal_tau."""

import argparse
import logging
from typing import List, Optional

from skeletal_tau.core import config, orchestrator, synthetic

logger = logging.getLogger(__name__)


def parse_arguments(args: Optional[List[str]]) -> argparse.Namespace:
    """Argument parser for skeletal_tau cli.

    Args:
        args: A list of command line arguments given as strings. If None, the parser
            will take the args from `sys.argv`.

    Returns:
        Namespace object with all the input arguments and default values.

    Raises:
        SystemExit: if arguments are invalid.
    """
    parser = argparse.ArgumentParser(
        description="Run the tau tracking pipeline on a synthetic swinging skeleton.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-n",
        "--frames",
        type=int,
        default=60,
        help="Number of frames to generate.",
    )
    parser.add_argument(
        "--frame-interval",
        type=float,
        default=1 / 30,
        help="Seconds between generated frames.",
    )
    parser.add_argument(
        "--acceleration",
        type=float,
        default=0.5,
        help="Angular acceleration of the limbs in radians per second squared.",
    )
    parser.add_argument(
        "-w",
        "--window",
        type=int,
        default=config.SMOOTHING_WINDOW,
        help="Number of samples kept per tau series.",
    )
    parser.add_argument(
        "--min-interval",
        type=float,
        default=config.MIN_UPDATE_INTERVAL,
        help="Minimum seconds between tracking updates.",
    )
    parser.add_argument(
        "-t",
        "--triangle",
        type=int,
        action="append",
        default=None,
        help="Triangle index to print in detail. Repeat for several triangles.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages.",
    )

    return parser.parse_args(args)


def format_value(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.4f}"


def format_frame(result: orchestrator.FrameResult, triangles: Optional[List[int]]) -> List[str]:
    """This function turns a tracked frame into printable lines.

    Args:
        result: FrameResult of a tracked frame.
        triangles: triangle indices to print in detail, or None for a summary.

    Returns:
        list of str, one per printed line.
    """
    prefix = f"Frame {result.frame_index} - t={result.timestamp:.3f}"
    if not triangles:
        trends = [reading.incremental_trend for reading in result.readings.values()]
        return [
            f"{prefix} - Tracked: {len(result.readings)}, "
            f"Growing: {trends.count('growing')}, "
            f"Shrinking: {trends.count('shrinking')}, "
            f"Steady: {trends.count('steady')}"
        ]

    lines = []
    for index in triangles:
        reading = result.readings.get(index)
        if reading is None:
            lines.append(f"{prefix} - Triangle {index}: not tracked")
            continue
        name = result.triangles[index].name
        lines.append(
            f"{prefix} - Triangle {index} ({name}): "
            f"Tau: {format_value(reading.incremental_tau)}, "
            f"Tau Dot: {format_value(reading.incremental_tau_dot)}, "
            f"Trend: {reading.incremental_trend}, "
            f"Full Tau: {format_value(reading.full_gesture_tau)}, "
            f"Full Trend: {reading.full_gesture_trend}"
        )
    return lines


def main(
    args: Optional[List[str]] = None,
) -> None:
    """Runs the tau tracker over synthetic frames with command line arguments.

    Args:
         args: A list of command line arguments given as strings. If None, the parser
            will take the args from `sys.argv`.

    """
    arguments = parse_arguments(args)
    logging.basicConfig(
        level=logging.DEBUG if arguments.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tracker = orchestrator.TauTracker(
        config.TrackerConfig(
            smoothing_window=arguments.window,
            min_update_interval=arguments.min_interval,
        )
    )
    if arguments.triangle:
        out_of_range = [i for i in arguments.triangle if not 0 <= i < tracker.builder.triangle_count]
        if out_of_range:
            raise SystemExit(
                f"triangle indices {out_of_range} outside 0..{tracker.builder.triangle_count - 1}"
            )

    for f in range(arguments.frames):
        t = f * arguments.frame_interval
        pose = synthetic.swinging_pose(t, arguments.acceleration)
        result = tracker.update(pose, t)
        if not result.tracked:
            continue
        for line in format_frame(result, arguments.triangle):
            print(line)
