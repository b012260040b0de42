"""Tests for step counting and node distance."""

import jax.numpy as jnp
import pytest

from jax_motionplan.core import WORLD, PoseInFrame
from jax_motionplan.motionplan import Node, calculate_step_count, node_configuration_distance
from jax_motionplan.transforms import se3, so3


def pose(position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0)):
    return se3.from_position_and_rotation(jnp.array(position), so3.exp(jnp.array(rotation)))


def test_same_pose_is_one_step():
    p = pose((12.0, -3.0, 40.0), (0.1, 0.2, 0.3))
    assert calculate_step_count(p, p, 5.0) == 1
    assert calculate_step_count(p, p, 0.0) == 1


def test_linear_distance():
    assert calculate_step_count(pose(), pose((100.0, 0.0, 0.0)), 10.0) == 11


def test_zero_step_size_behaves_like_one():
    start, goal = pose(), pose((0.0, 5.0, 0.0))
    assert calculate_step_count(start, goal, 0.0) == calculate_step_count(start, goal, 1.0) == 6


def test_rotation_distance_in_degrees():
    # 45 degrees about z with 10 degree steps: 4.5 -> 4, plus one.
    assert calculate_step_count(pose(), pose(rotation=(0.0, 0.0, jnp.pi / 4)), 10.0) == 5


def test_larger_of_linear_and_angular():
    start = pose()
    goal = pose((20.0, 0.0, 0.0), (0.0, 0.0, jnp.pi / 2))
    # 20 mm / 2 = 10 steps, 90 deg / 2 = 45 steps.
    assert calculate_step_count(start, goal, 2.0) in (45, 46)


def test_accepts_poses_in_frame():
    start = PoseInFrame.from_position(WORLD, [0.0, 0.0, 0.0])
    goal = PoseInFrame.from_position(WORLD, [0.0, 0.0, 30.0])
    assert calculate_step_count(start, goal, 10.0) == 4


def test_node_configuration_distance():
    a = Node({"arm": [0.0, 0.0], "turret": [1.0]})
    b = Node({"arm": [3.0, 4.0], "turret": [1.0]})
    assert node_configuration_distance(a, b) == pytest.approx(5.0)
    assert node_configuration_distance(b, a) == pytest.approx(5.0)
    assert node_configuration_distance(a, a) == 0.0


def test_node_configuration_distance_skips_frames_missing_from_second_node():
    a = Node({"arm": [0.0, 0.0], "gantry": [100.0]})
    b = Node({"arm": [0.0, 2.0]})
    assert node_configuration_distance(a, b) == pytest.approx(2.0)
