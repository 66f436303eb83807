"""Tests for the tau motion buffer and trend classification."""

import math

import numpy as np
import pytest

from skeletal_tau.classifiers.tau_buffer import (
    TauMotionBuffer,
    classify_trend,
    smoothed_diff,
)

DT = 0.016


def direction(theta):
    return np.array([math.cos(theta), math.sin(theta), 0.0])


def feed_angles(buffer, angles, dt=DT, start=0.0):
    """Rotate the Euler line by each angle in turn, one frame per angle."""
    theta = 0.0
    t = start
    for angle in angles:
        theta += angle
        t += dt
        buffer.update(direction(theta), t)
    return t


def angles_for_taus(taus, first_angle=0.2, dt=DT):
    """Per-frame angles whose incremental tau samples equal taus."""
    angles = [first_angle]
    for tau in taus:
        angles.append(angles[-1] + math.pi * dt / tau)
    return angles


def make_buffer(window=20, history_limit=None):
    return TauMotionBuffer(
        direction(0.0), [1.0, 2.0, 2.0], 0.0, window=window, history_limit=history_limit
    )


def test_new_buffer_state():
    buffer = TauMotionBuffer([3.0, 4.0, 0.0], [0.0, 1.0, 0.0], 5.0)

    np.testing.assert_array_equal(buffer.beginning_position, [3.0, 4.0, 0.0, 5.0])
    assert len(buffer.motion_path) == 1
    assert buffer.circumradius == pytest.approx(1.0)
    assert buffer.is_growing is False
    assert buffer.full_gesture_is_growing is False
    assert len(buffer.incremental_tau_samples) == 0

    reading = buffer.reading()
    assert reading.incremental_tau is None
    assert reading.incremental_trend == "unknown"
    assert reading.full_gesture_trend == "unknown"


def test_update_appends_timestamped_sample():
    buffer = make_buffer()

    assert buffer.update([0.0, 2.0, 0.0], 0.5)

    assert len(buffer.motion_path) == 2
    np.testing.assert_array_equal(buffer.ending_position, [0.0, 2.0, 0.0, 0.5])
    assert buffer.incremental_angle_changes[-1] == pytest.approx(math.pi / 2)
    assert buffer.full_gesture_angle_changes[-1] == pytest.approx(math.pi / 2)
    assert buffer.elapsed_since_last_reading == pytest.approx(0.5)
    assert buffer.last_reading_time == 0.5


def test_static_euler_line_produces_no_tau():
    buffer = TauMotionBuffer([3.0, 4.0, 0.0], [1.0, 0.0, 0.0], 0.0)

    for t in (0.1, 0.2, 0.3):
        buffer.update([3.0, 4.0, 0.0], t)

    assert list(buffer.incremental_angle_changes) == [0.0, 0.0, 0.0]
    assert len(buffer.incremental_tau_samples) == 0
    assert len(buffer.full_gesture_tau_samples) == 0
    assert len(buffer.incremental_tau_dot_samples) == 0


def test_constant_rotation_produces_no_tau():
    buffer = make_buffer()

    feed_angles(buffer, [0.1] * 5)

    assert buffer.incremental_angle_changes[-1] == pytest.approx(0.1)
    assert len(buffer.incremental_tau_samples) == 0


def test_tau_for_known_angle_change():
    buffer = make_buffer()

    feed_angles(buffer, [0.1, 0.2, 0.3, 0.4, 0.5])

    expected = math.pi / (0.1 / DT)
    assert expected == pytest.approx(0.503, abs=1e-3)
    assert len(buffer.incremental_tau_samples) == 4
    for tau in buffer.incremental_tau_samples:
        assert tau == pytest.approx(expected, rel=1e-6)
    for tau_dot in buffer.incremental_tau_dot_samples:
        assert tau_dot == pytest.approx(0.0, abs=1e-6)


def test_full_gesture_tau_uses_incremental_rate():
    buffer = make_buffer()

    feed_angles(buffer, [0.1, 0.2, 0.3, 0.4, 0.5])

    # The full gesture angle keeps growing (0.1, 0.3, 0.6, ...) but the rate
    # of closure comes from the incremental angles.
    assert list(buffer.full_gesture_angle_changes) == pytest.approx([0.1, 0.3, 0.6, 1.0, 1.5])
    assert len(buffer.full_gesture_tau_samples) == 4
    for tau in buffer.full_gesture_tau_samples:
        assert tau == pytest.approx(math.pi * DT / 0.1, rel=1e-6)


def test_slowing_rotation_gives_negative_tau():
    buffer = make_buffer()

    feed_angles(buffer, [0.5, 0.4])

    assert buffer.incremental_tau_samples[-1] == pytest.approx(-math.pi * DT / 0.1, rel=1e-6)


def test_zero_interval_skips_derivatives():
    buffer = make_buffer()

    for angle, t in ((0.1, 1.0), (0.3, 1.0), (0.6, 1.0)):
        buffer.update(direction(angle), t)

    assert len(buffer.incremental_angle_changes) == 3
    assert len(buffer.incremental_tau_samples) == 0
    assert len(buffer.full_gesture_tau_samples) == 0


def test_older_sample_is_dropped():
    buffer = make_buffer()
    buffer.update(direction(0.1), 1.0)

    assert buffer.update(direction(0.2), 0.5) is False
    assert len(buffer.motion_path) == 2
    assert buffer.current_time == 1.0


def test_zero_length_euler_line_is_skipped():
    buffer = make_buffer()

    buffer.update([0.0, 0.0, 0.0], 0.1)

    assert len(buffer.motion_path) == 2
    assert len(buffer.incremental_angle_changes) == 0
    assert len(buffer.full_gesture_angle_changes) == 0


def test_history_limit_bounds_motion_path():
    buffer = make_buffer(history_limit=4)

    feed_angles(buffer, [0.1] * 10)

    assert len(buffer.motion_path) == 4
    assert len(buffer.incremental_angle_changes) == 4
    np.testing.assert_array_equal(buffer.beginning_position[:3], direction(0.0))


def test_series_are_pruned_to_window_keeping_latest():
    window = 5
    buffer = make_buffer(window=window)
    angles = [0.05 + 0.002 * k**2 for k in range(1, 26)]

    feed_angles(buffer, angles)

    for series in (
        buffer.incremental_tau_samples,
        buffer.full_gesture_tau_samples,
        buffer.incremental_tau_dot_samples,
        buffer.full_gesture_tau_dot_samples,
        buffer.incremental_tau_dot_smoothed_diffs,
        buffer.full_gesture_tau_dot_smoothed_diffs,
    ):
        assert len(series) == window

    expected_taus = [
        math.pi * DT / (angles[k] - angles[k - 1]) for k in range(1, len(angles))
    ]
    assert list(buffer.incremental_tau_samples) == pytest.approx(expected_taus[-window:], rel=1e-6)
    expected_dots = np.diff(expected_taus)
    assert list(buffer.incremental_tau_dot_samples) == pytest.approx(
        list(expected_dots[-window:]), rel=1e-5
    )


def test_growing_tau_dot_sets_is_growing():
    buffer = make_buffer()
    taus = [1.0 + 0.05 * k**3 for k in range(2, 13)]

    feed_angles(buffer, angles_for_taus(taus, dt=0.1), dt=0.1)

    assert list(buffer.incremental_tau_samples) == pytest.approx(taus, rel=1e-6)
    assert len(buffer.incremental_tau_dot_smoothed_diffs) >= 2
    assert buffer.is_growing is True


def test_shrinking_tau_dot_clears_is_growing():
    buffer = make_buffer()
    taus = [10.0 - 0.005 * k**3 for k in range(2, 13)]

    feed_angles(buffer, angles_for_taus(taus, dt=0.1), dt=0.1)

    assert list(buffer.incremental_tau_samples) == pytest.approx(taus, rel=1e-6)
    assert len(buffer.incremental_tau_dot_smoothed_diffs) >= 2
    assert buffer.is_growing is False
    assert buffer.reading().incremental_trend == "shrinking"
    assert buffer.reading().is_steady is False


def test_repeated_timestamp_keeps_trend():
    buffer = make_buffer()
    taus = [10.0 - 0.005 * k**3 for k in range(2, 13)]
    angles = angles_for_taus(taus, dt=0.1)
    t = feed_angles(buffer, angles, dt=0.1)
    dots = list(buffer.incremental_tau_dot_samples)
    diffs = list(buffer.incremental_tau_dot_smoothed_diffs)
    full_diffs = list(buffer.full_gesture_tau_dot_smoothed_diffs)

    assert buffer.update(direction(sum(angles) + 0.3), t)

    assert list(buffer.incremental_tau_dot_samples) == dots
    assert list(buffer.incremental_tau_dot_smoothed_diffs) == diffs
    assert list(buffer.full_gesture_tau_dot_smoothed_diffs) == full_diffs
    assert buffer.is_growing is False
    assert buffer.reading().incremental_trend == "shrinking"


def test_constant_smoothed_diffs_are_steady():
    buffer = make_buffer()
    taus = [1.0 + 0.1 * k**2 for k in range(2, 13)]

    feed_angles(buffer, angles_for_taus(taus, dt=0.1), dt=0.1)

    assert list(buffer.incremental_tau_samples) == pytest.approx(taus, rel=1e-6)
    assert list(buffer.incremental_tau_dot_smoothed_diffs) == pytest.approx(
        [0.2] * len(buffer.incremental_tau_dot_smoothed_diffs), rel=1e-6
    )
    assert buffer.is_steady is True
    reading = buffer.reading()
    assert reading.is_steady is True
    assert reading.incremental_trend == "steady"


def test_reading_reports_latest_values():
    buffer = make_buffer()
    feed_angles(buffer, [0.1, 0.2, 0.3])

    reading = buffer.reading()

    assert reading.incremental_tau == pytest.approx(buffer.incremental_tau_samples[-1])
    assert reading.incremental_tau_dot == pytest.approx(buffer.incremental_tau_dot_samples[-1])
    assert reading.incremental_smoothed_diff is None
    assert reading.full_gesture_tau == pytest.approx(buffer.full_gesture_tau_samples[-1])


def test_smoothed_diff():
    assert smoothed_diff([1.0, 2.0, 4.0]) == pytest.approx(1.5)
    assert smoothed_diff([0.0, 9.0, 1.0, 2.0, 4.0]) == pytest.approx(1.5)


@pytest.mark.parametrize(
    "diffs, expected",
    [
        ([], "unknown"),
        ([1.0], "unknown"),
        ([1.0, 2.0], "growing"),
        ([2.0, 1.0], "shrinking"),
        ([1.0, 1.05], "steady"),
        ([-1.0, -1.05], "shrinking"),
    ],
)
def test_classify_trend(diffs, expected):
    assert classify_trend(diffs) == expected
