"""Shared frame systems for the test suite.

``workcell`` layout (origins in mm)::

    world
    ├── table         fixed, box
    │   └── marker    fixed
    ├── gantry        prismatic x, box
    │   └── mount     fixed at z=50, box
    │       └── arm   2 DoF (rev z, rev y), capsule
    │           └── gripper   fixed at z=100, sphere
    │               └── camera    fixed at x=10
    └── turret        revolute z, box
        └── turret_tip    fixed at x=20
"""

import math

import jax.numpy as jnp
import pytest

from jax_motionplan.core import WORLD, Frame, FrameSystem, Geometry, Limit
from jax_motionplan.transforms import se3


def translation(x=0.0, y=0.0, z=0.0):
    return se3.from_translation(jnp.array([x, y, z]))


@pytest.fixture(scope="session")
def workcell() -> FrameSystem:
    arm_axes = jnp.array(
        [
            [0.0, 0.0, 0.0, 0.0, 0.0, 1.0],
            [0.0, 0.0, 0.0, 0.0, 1.0, 0.0],
        ]
    )
    arm_limits = (Limit(-math.pi, math.pi), Limit(-math.pi / 2, math.pi / 2))

    fs = FrameSystem.empty("workcell")
    fs = fs.add_frame(Frame.fixed("table"), WORLD, [Geometry.box("table_box", (1000.0, 1000.0, 20.0))])
    fs = fs.add_frame(Frame.fixed("marker", translation(z=10.0)), "table")
    fs = fs.add_frame(
        Frame.prismatic("gantry", (1.0, 0.0, 0.0), Limit(-500.0, 500.0)),
        WORLD,
        [Geometry.box("gantry_box", (100.0, 100.0, 10.0))],
    )
    fs = fs.add_frame(Frame.fixed("mount", translation(z=50.0)), "gantry", [Geometry.box("mount_box", (40.0, 40.0, 40.0))])
    fs = fs.add_frame(Frame.joint("arm", arm_axes, arm_limits), "mount", [Geometry.capsule("arm_capsule", 10.0, 100.0)])
    fs = fs.add_frame(Frame.fixed("gripper", translation(z=100.0)), "arm", [Geometry.sphere("gripper_sphere", 15.0)])
    fs = fs.add_frame(Frame.fixed("camera", translation(x=10.0)), "gripper")
    fs = fs.add_frame(Frame.revolute("turret", (0.0, 0.0, 1.0)), WORLD, [Geometry.box("turret_box", (30.0, 30.0, 30.0))])
    fs = fs.add_frame(Frame.fixed("turret_tip", translation(x=20.0)), "turret")
    return fs


@pytest.fixture
def zero_inputs():
    return {"gantry": [0.0], "arm": [0.0, 0.0], "turret": [0.0]}


@pytest.fixture(scope="session")
def mobile_base() -> FrameSystem:
    """A PTG base carrying a single-joint arm, a second PTG base, and a turret."""
    fs = FrameSystem.empty("mobile")
    fs = fs.add_frame(Frame.ptg("base"), WORLD)
    fs = fs.add_frame(Frame.revolute("base_arm", (0.0, 1.0, 0.0), origin=translation(z=300.0)), "base")
    fs = fs.add_frame(Frame.fixed("tool", translation(x=200.0)), "base_arm")
    fs = fs.add_frame(Frame.ptg("other_base"), WORLD)
    fs = fs.add_frame(Frame.revolute("turret"), WORLD)
    return fs
