"""Collision geometry attached to frames.

Only the description lives here; collision checking belongs to the caller.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from jax import Array
from flax import struct

from jax_motionplan.transforms import se3


@struct.dataclass
class Geometry:
    """A collision primitive posed in its frame.

    Attributes:
        label: Identifier used in collision reports. Static field.
        shape: One of "box" (dims = x, y, z), "sphere" (dims = radius,)
               or "capsule" (dims = radius, length). Static field.
        dims: Shape dimensions. Static field.
        pose: (4, 4) pose of the primitive's center in the owning frame.
    """
    label: str = struct.field(pytree_node=False)
    shape: str = struct.field(pytree_node=False)
    dims: Tuple[float, ...] = struct.field(pytree_node=False)
    pose: Array

    @classmethod
    def box(cls, label: str, size: Tuple[float, float, float], pose: Optional[Array] = None) -> "Geometry":
        return cls(label=label, shape="box", dims=tuple(float(s) for s in size), pose=_pose(pose))

    @classmethod
    def sphere(cls, label: str, radius: float, pose: Optional[Array] = None) -> "Geometry":
        return cls(label=label, shape="sphere", dims=(float(radius),), pose=_pose(pose))

    @classmethod
    def capsule(cls, label: str, radius: float, length: float, pose: Optional[Array] = None) -> "Geometry":
        return cls(label=label, shape="capsule", dims=(float(radius), float(length)), pose=_pose(pose))


@dataclass(frozen=True)
class GeometriesInFrame:
    """Geometries expressed in the named frame."""

    frame: str
    geometries: Tuple[Geometry, ...]


def _pose(pose: Optional[Array]) -> Array:
    return se3.identity() if pose is None else pose
