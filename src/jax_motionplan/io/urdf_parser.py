"""URDF parser producing a FrameSystem.

Every link becomes a frame named after the link. The root link hangs off
``world``; every other link takes its parent joint's origin, axis and limits.
Link ``<collision>`` elements become frame-local Geometry.
"""

import math
from collections import deque
from typing import Dict, List, Optional

import jax.numpy as jnp
from lxml import etree

from jax_motionplan.core.frame import Frame, Limit
from jax_motionplan.core.frame_system import WORLD, FrameSystem
from jax_motionplan.core.geometry import Geometry
from jax_motionplan.core.logging import get_logger
from jax_motionplan.transforms import se3, so3

logger = get_logger(__name__)

_MOVING_JOINT_TYPES = ("revolute", "continuous", "prismatic")


def load_urdf(urdf_path: str, name: Optional[str] = None) -> FrameSystem:
    """Load a URDF file as a FrameSystem.

    Args:
        urdf_path: Path to the URDF file to load.
        name: Name for the frame system; defaults to the robot name.

    Returns:
        FrameSystem whose frames are added in breadth-first order from the root link.
    """
    root = etree.parse(urdf_path).getroot()

    links = {link.get("name"): link for link in root.findall("link")}
    joint_by_child: Dict[str, etree._Element] = {}
    children: Dict[str, List[str]] = {}
    for joint in root.findall("joint"):
        parent_elem = joint.find("parent")
        child_elem = joint.find("child")
        if parent_elem is None or child_elem is None:
            continue
        parent_name = parent_elem.get("link")
        child_name = child_elem.get("link")
        joint_by_child[child_name] = joint
        children.setdefault(parent_name, []).append(child_name)

    root_links = set(links) - set(joint_by_child)
    if len(root_links) != 1:
        raise ValueError(f"Expected exactly one root link, found: {root_links}")
    root_link = root_links.pop()

    fs = FrameSystem.empty(name or root.get("name", ""))
    fs = fs.add_frame(Frame.fixed(root_link), WORLD, _collision_geometries(links[root_link]))

    queue = deque(children.get(root_link, []))
    while queue:
        link_name = queue.popleft()
        joint = joint_by_child[link_name]
        parent_name = joint.find("parent").get("link")
        fs = fs.add_frame(_joint_frame(link_name, joint), parent_name, _collision_geometries(links[link_name]))
        queue.extend(children.get(link_name, []))

    logger.debug("urdf_loaded", path=str(urdf_path), frames=len(fs.frame_names()))
    return fs


def _joint_frame(link_name: str, joint: etree._Element) -> Frame:
    origin = _parse_origin(joint.find("origin"))
    joint_type = joint.get("type")
    if joint_type not in _MOVING_JOINT_TYPES:
        return Frame.fixed(link_name, origin)

    axis_elem = joint.find("axis")
    axis = _floats(axis_elem.get("xyz", "0 0 1")) if axis_elem is not None else [0.0, 0.0, 1.0]

    limit_elem = joint.find("limit")
    if joint_type == "continuous" or limit_elem is None:
        limit = Limit(-2 * math.pi, 2 * math.pi)
    else:
        limit = Limit(float(limit_elem.get("lower", "0")), float(limit_elem.get("upper", "0")))

    if joint_type == "prismatic":
        return Frame.prismatic(link_name, axis, limit, origin)
    return Frame.revolute(link_name, axis, limit, origin)


def _collision_geometries(link: etree._Element) -> List[Geometry]:
    geometries = []
    link_name = link.get("name")
    for i, collision in enumerate(link.findall("collision")):
        shape = collision.find("geometry")
        if shape is None:
            continue
        label = collision.get("name") or f"{link_name}:{i}"
        pose = _parse_origin(collision.find("origin"))

        box = shape.find("box")
        sphere = shape.find("sphere")
        cylinder = shape.find("cylinder")
        if box is not None:
            geometries.append(Geometry.box(label, tuple(_floats(box.get("size"))), pose))
        elif sphere is not None:
            geometries.append(Geometry.sphere(label, float(sphere.get("radius")), pose))
        elif cylinder is not None:
            geometries.append(
                Geometry.capsule(label, float(cylinder.get("radius")), float(cylinder.get("length")), pose)
            )
        else:
            logger.warning("urdf_geometry_skipped", link=link_name, label=label)
    return geometries


def _parse_origin(origin_elem: Optional[etree._Element]):
    if origin_elem is None:
        return se3.identity()
    xyz = _floats(origin_elem.get("xyz", "0 0 0"))
    roll, pitch, yaw = _floats(origin_elem.get("rpy", "0 0 0"))
    return se3.from_position_and_rotation(jnp.array(xyz, dtype=jnp.float64), so3.from_rpy(roll, pitch, yaw))


def _floats(text: str) -> List[float]:
    return [float(x) for x in text.split()]
