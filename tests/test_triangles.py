"""Tests for the triangle table and builder."""

import numpy as np
import pytest

from skeletal_tau.core import config
from skeletal_tau.core.exceptions import JointIndexError
from skeletal_tau.core.pose import PoseSample
from skeletal_tau.core.triangles import TRIANGLE_JOINTS, TriangleSetBuilder
from skeletal_tau.geometry.euler_lines import extract_euler_lines


def test_triangle_table_shape():
    assert len(TRIANGLE_JOINTS) == 67
    assert all(len(set(triple)) == 3 for triple in TRIANGLE_JOINTS)
    assert TRIANGLE_JOINTS[0] == (config.HEAD, config.LEFT_UP_LEG, config.RIGHT_UP_LEG)


def test_builder_counts():
    builder = TriangleSetBuilder()

    assert builder.triangle_count == 67
    assert builder.required_joint_count == 64


def test_build_resolves_positions_in_table_order(rest_pose):
    builder = TriangleSetBuilder()

    triangles = builder.build(rest_pose)

    assert len(triangles) == 67
    assert triangles.positions.shape == (67, 3, 3)
    assert triangles.flat_positions.shape == (201, 3)
    for triangle in triangles:
        for vertex, joint in enumerate(triangle.joints):
            np.testing.assert_array_equal(triangle.positions[vertex], rest_pose.positions[joint])
    assert triangles[0].name == "head-left_up_leg-right_up_leg"


def test_build_uses_pose_joint_names():
    builder = TriangleSetBuilder([(0, 1, 2)])
    pose = PoseSample(
        [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
        np.zeros((3, 3)),
        joint_names=["pelvis", "hand_l", "hand_r"],
    )

    triangle = builder.build(pose)[0]

    assert triangle.joint_names == ("pelvis", "hand_l", "hand_r")
    assert triangle.name == "pelvis-hand_l-hand_r"


def test_rest_pose_has_no_degenerate_triangles(rest_pose):
    triangles = TriangleSetBuilder().build(rest_pose)

    assert all(sample is not None for sample in extract_euler_lines(triangles))


def test_short_pose_fails_fast(make_pose):
    builder = TriangleSetBuilder()
    pose = make_pose(np.ones((40, 3)))

    with pytest.raises(JointIndexError, match="40 joints"):
        builder.build(pose)
    with pytest.raises(IndexError):
        builder.build(pose)
    assert builder.current is None


def test_builder_keeps_previous_frame(make_pose):
    builder = TriangleSetBuilder([(0, 1, 2)])
    first = builder.build(make_pose([[0, 0, 0], [1, 0, 0], [0, 1, 0]]))

    assert builder.previous is None
    assert builder.position_deltas() is None
    assert builder.rotation_deltas() is None

    second = builder.build(make_pose([[0, 0, 1], [1, 0, 0], [0, 2, 0]]))

    assert builder.previous is first
    assert builder.current is second
    np.testing.assert_allclose(
        builder.position_deltas()[0], [[0, 0, 1], [0, 0, 0], [0, 1, 0]]
    )


def test_rotation_deltas(make_pose):
    builder = TriangleSetBuilder([(0, 1, 2)])
    positions = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
    builder.build(make_pose(positions))

    rotations = np.zeros((3, 3))
    rotations[1] = [0.0, 0.0, 90.0]
    builder.build(make_pose(positions, rotations))

    np.testing.assert_allclose(builder.rotation_deltas()[0], [0.0, np.pi / 2, 0.0], atol=1e-9)


def test_empty_triangle_table_is_rejected():
    with pytest.raises(ValueError):
        TriangleSetBuilder([])
