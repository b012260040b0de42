"""Tests for Frame and the arena-backed FrameSystem."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from jax_motionplan.core import (
    WORLD,
    DuplicateFrameError,
    Frame,
    FrameKind,
    FrameMissingError,
    FrameSystem,
    LinearizationError,
    MissingInputsError,
    PoseInFrame,
)
from jax_motionplan.transforms import se3


def test_empty_frame_system_has_only_world():
    fs = FrameSystem.empty("empty")
    assert fs.names == (WORLD,)
    assert fs.frame_names() == []
    assert len(fs) == 1
    assert fs.parent(WORLD) is None
    assert [f.name for f in fs.traceback(WORLD)] == [WORLD]


def test_frame_kinds_and_dof():
    assert Frame.fixed("a").kind is FrameKind.FIXED
    assert Frame.fixed("a").dof == 0
    assert Frame.revolute("b").kind is FrameKind.JOINT
    assert Frame.revolute("b").dof == 1
    assert Frame.prismatic("c").dof == 1
    ptg = Frame.ptg("d")
    assert ptg.is_ptg
    assert ptg.dof == 3
    assert not Frame.revolute("b").is_ptg


def test_frame_transform_checks_input_length():
    with pytest.raises(LinearizationError, match="expects 1 inputs, got 2"):
        Frame.revolute("joint").transform([0.1, 0.2])


def test_ptg_frame_transform_is_planar_pose():
    T = Frame.ptg("base").transform([100.0, 50.0, jnp.pi / 2])
    np.testing.assert_allclose(se3.get_position(T), [100.0, 50.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(se3.apply(T, jnp.array([1.0, 0.0, 0.0])), [100.0, 51.0, 0.0], atol=1e-9)


def test_lookup(workcell):
    assert "gripper" in workcell
    assert "nonexistent" not in workcell
    assert len(workcell) == len(workcell.frame_names()) + 1
    assert workcell.frame("gripper").name == "gripper"
    assert workcell.frame("nonexistent") is None
    assert workcell.parent("gripper") == "arm"
    assert workcell.parent("table") == WORLD
    assert sorted(workcell.children(WORLD)) == ["gantry", "table", "turret"]

    with pytest.raises(FrameMissingError, match="'nonexistent' missing"):
        workcell.index("nonexistent")


def test_frame_names_are_in_arena_order(workcell):
    assert workcell.frame_names() == [
        "table",
        "marker",
        "gantry",
        "mount",
        "arm",
        "gripper",
        "camera",
        "turret",
        "turret_tip",
    ]


def test_traceback(workcell):
    names = [f.name for f in workcell.traceback("camera")]
    assert names == ["camera", "gripper", "arm", "mount", "gantry", WORLD]

    with pytest.raises(FrameMissingError):
        workcell.traceback("nonexistent")


def test_add_frame_errors(workcell):
    with pytest.raises(DuplicateFrameError):
        workcell.add_frame(Frame.fixed("gripper"), WORLD)
    with pytest.raises(FrameMissingError):
        workcell.add_frame(Frame.fixed("new"), "nonexistent")


def test_add_frame_does_not_mutate(workcell):
    bigger = workcell.add_frame(Frame.fixed("new"), "gripper")
    assert "new" in bigger
    assert "new" not in workcell


def test_subset(workcell):
    sub = workcell.subset("arm")
    assert sub.frame_names() == ["arm", "gripper", "camera"]
    assert sub.parent("arm") == WORLD
    assert sub.parent("camera") == "gripper"
    assert set(sub.frame_geometries()) == {"arm", "gripper"}

    assert workcell.subset(WORLD) is workcell


def test_merge(workcell):
    merged = workcell.subset("arm").merge(workcell.subset("turret"))
    assert merged.frame_names() == ["arm", "gripper", "camera", "turret", "turret_tip"]
    assert merged.parent("turret") == WORLD
    assert merged.parent("turret_tip") == "turret"

    attached = FrameSystem.empty().add_frame(Frame.fixed("plate")).merge(workcell.subset("turret"), "plate")
    assert attached.parent("turret") == "plate"

    with pytest.raises(DuplicateFrameError):
        workcell.subset("arm").merge(workcell.subset("gripper"))


def test_world_pose(workcell, zero_inputs):
    np.testing.assert_allclose(
        se3.get_position(workcell.world_pose(zero_inputs, "camera")), [10.0, 0.0, 150.0], atol=1e-9
    )

    inputs = dict(zero_inputs, gantry=[25.0], arm=[jnp.pi / 2, 0.0])
    # The arm's z rotation swings the camera offset from +x to +y.
    np.testing.assert_allclose(
        se3.get_position(workcell.world_pose(inputs, "camera")), [25.0, 10.0, 150.0], atol=1e-9
    )


def test_world_pose_requires_inputs_on_the_traceback(workcell):
    # The turret is not on the camera's traceback, so it may be omitted.
    workcell.world_pose({"gantry": [0.0], "arm": [0.0, 0.0]}, "camera")

    with pytest.raises(MissingInputsError, match="'arm' missing"):
        workcell.world_pose({"gantry": [0.0]}, "camera")


def test_forward_kinematics_matches_world_pose(workcell):
    inputs = {"gantry": [12.0], "arm": [0.3, -0.4], "turret": [1.1]}
    poses = workcell.forward_kinematics(inputs)
    assert set(poses) == set(workcell.names)
    for name in workcell.frame_names():
        np.testing.assert_allclose(poses[name], workcell.world_pose(inputs, name), atol=1e-9)


def test_transform_between_frames(workcell, zero_inputs):
    in_camera = PoseInFrame.from_position("camera", [0.0, 0.0, 20.0])
    in_world = workcell.transform(zero_inputs, in_camera, WORLD)
    assert in_world.parent == WORLD
    np.testing.assert_allclose(in_world.position, [10.0, 0.0, 170.0], atol=1e-9)

    back = workcell.transform(zero_inputs, in_world, "camera")
    np.testing.assert_allclose(back.pose, in_camera.pose, atol=1e-9)


def test_frame_geometries(workcell):
    geometries = workcell.frame_geometries()
    assert set(geometries) == {"table", "gantry", "mount", "arm", "gripper", "turret"}
    assert geometries["gripper"].frame == "gripper"
    assert [g.label for g in geometries["gripper"].geometries] == ["gripper_sphere"]
    assert geometries["arm"].geometries[0].shape == "capsule"
    assert geometries["arm"].geometries[0].dims == (10.0, 100.0)


def test_frame_system_is_pytree(workcell):
    leaves, treedef = jax.tree_util.tree_flatten(workcell)
    rebuilt = jax.tree_util.tree_unflatten(treedef, leaves)

    assert rebuilt.names == workcell.names
    assert rebuilt.parent_indices == workcell.parent_indices
    for a, b in zip(rebuilt.frames, workcell.frames):
        assert a.name == b.name
        np.testing.assert_array_equal(a.origin, b.origin)
        np.testing.assert_array_equal(a.axes, b.axes)
