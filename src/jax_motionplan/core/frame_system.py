"""FrameSystem PyTree: a tree of frames stored as a flat arena.

Frames live in a tuple and point at their parent by index. Index 0 is always
the ``world`` root, which parents itself. A frame can only be added under a
parent that already exists, so arena order is also a topological order:
every parent precedes its children. All operations return new systems.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import jax.numpy as jnp
from jax import Array
from flax import struct

from jax_motionplan.core.exceptions import DuplicateFrameError, FrameMissingError, MissingInputsError
from jax_motionplan.core.frame import Frame
from jax_motionplan.core.geometry import GeometriesInFrame, Geometry
from jax_motionplan.transforms import se3, so3

WORLD = "world"

# Joint values per frame name; fixed frames may be omitted.
FrameSystemInputs = Mapping[str, Sequence[float]]


@struct.dataclass
class PoseInFrame:
    """A pose expressed relative to a named frame.

    Attributes:
        parent: Name of the reference frame. Static field.
        pose: (4, 4) transform from ``parent`` to the posed point.
    """
    parent: str = struct.field(pytree_node=False)
    pose: Array

    @classmethod
    def from_position(
        cls,
        parent: str,
        position: Sequence[float],
        quaternion: Optional[Sequence[float]] = None,
    ) -> "PoseInFrame":
        p = jnp.asarray(position, dtype=jnp.float64)
        if quaternion is None:
            R = jnp.eye(3, dtype=jnp.float64)
        else:
            R = so3.from_quaternion(jnp.asarray(quaternion, dtype=jnp.float64))
        return cls(parent=parent, pose=se3.from_position_and_rotation(p, R))

    @property
    def position(self) -> Array:
        return se3.get_position(self.pose)

    @property
    def rotation(self) -> Array:
        return se3.get_rotation(self.pose)


@struct.dataclass
class FrameSystem:
    """Immutable PyTree holding a rooted tree of frames.

    Attributes:
        name: Name of the system. Static field.
        names: Frame names; index is the frame ID. ``names[0]`` is ``world``.
               Static field.
        parent_indices: ``parent_indices[i]`` is the parent ID of frame i;
                        the root parents itself. Static field.
        frames: Frame objects, aligned with ``names``.
        geometries: Frame-local collision geometry, aligned with ``names``.
    """
    name: str = struct.field(pytree_node=False)
    names: Tuple[str, ...] = struct.field(pytree_node=False)
    parent_indices: Tuple[int, ...] = struct.field(pytree_node=False)
    frames: Tuple[Frame, ...]
    geometries: Tuple[Tuple[Geometry, ...], ...]

    @classmethod
    def empty(cls, name: str = "") -> "FrameSystem":
        """A system holding only the world frame."""
        return cls(
            name=name,
            names=(WORLD,),
            parent_indices=(0,),
            frames=(Frame.fixed(WORLD),),
            geometries=((),),
        )

    # Structural queries
    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def index(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError:
            raise FrameMissingError(name, details={"frame_system": self.name}) from None

    def frame(self, name: str) -> Optional[Frame]:
        """Frame called ``name``, or None."""
        if name not in self.names:
            return None
        return self.frames[self.names.index(name)]

    def world(self) -> Frame:
        return self.frames[0]

    def frame_names(self) -> List[str]:
        """Names of every frame except world, in arena order."""
        return list(self.names[1:])

    def parent(self, name: str) -> Optional[str]:
        i = self.index(name)
        if i == 0:
            return None
        return self.names[self.parent_indices[i]]

    def children(self, name: str) -> List[str]:
        i = self.index(name)
        return [self.names[j] for j in range(1, len(self.names)) if self.parent_indices[j] == i]

    def traceback(self, name: str) -> List[Frame]:
        """Ancestor chain ``[frame, parent, ..., world]``."""
        i = self.index(name)
        chain = [self.frames[i]]
        while i != 0:
            i = self.parent_indices[i]
            chain.append(self.frames[i])
        return chain

    # Construction
    def add_frame(
        self,
        frame: Frame,
        parent: str = WORLD,
        geometries: Sequence[Geometry] = (),
    ) -> "FrameSystem":
        """Return a new system with ``frame`` attached under ``parent``."""
        if frame.name in self.names:
            raise DuplicateFrameError(frame.name, details={"frame_system": self.name})
        parent_idx = self.index(parent)
        return self.replace(
            names=self.names + (frame.name,),
            parent_indices=self.parent_indices + (parent_idx,),
            frames=self.frames + (frame,),
            geometries=self.geometries + (tuple(geometries),),
        )

    def subset(self, name: str) -> "FrameSystem":
        """New system holding ``name`` (attached to world) and all of its descendants."""
        root = self.index(name)
        if root == 0:
            return self
        keep = {root}
        subset = FrameSystem.empty(name).add_frame(self.frames[root], WORLD, self.geometries[root])
        # Arena order is topological, so one forward pass finds every descendant.
        for i in range(root + 1, len(self.names)):
            parent_idx = self.parent_indices[i]
            if parent_idx in keep:
                keep.add(i)
                subset = subset.add_frame(self.frames[i], self.names[parent_idx], self.geometries[i])
        return subset

    def merge(self, other: "FrameSystem", attach_to: str = WORLD) -> "FrameSystem":
        """New system with every non-world frame of ``other`` added.

        Frames that hang off ``other``'s world are re-parented to ``attach_to``.
        """
        self.index(attach_to)
        merged = self
        for i in range(1, len(other.names)):
            parent_idx = other.parent_indices[i]
            parent = attach_to if parent_idx == 0 else other.names[parent_idx]
            merged = merged.add_frame(other.frames[i], parent, other.geometries[i])
        return merged

    # Kinematics
    def world_pose(self, inputs: FrameSystemInputs, name: str) -> Array:
        """(4, 4) pose of frame ``name`` in world under ``inputs``."""
        T = se3.identity()
        for frame in reversed(self.traceback(name)[:-1]):
            T = se3.multiply(T, frame.transform(_frame_inputs(inputs, frame)))
        return T

    def forward_kinematics(self, inputs: FrameSystemInputs) -> Dict[str, Array]:
        """World poses of every frame, computed in one pass over the arena."""
        world_transforms = [se3.identity()]
        for i in range(1, len(self.names)):
            frame = self.frames[i]
            T_parent = world_transforms[self.parent_indices[i]]
            world_transforms.append(se3.multiply(T_parent, frame.transform(_frame_inputs(inputs, frame))))
        return dict(zip(self.names, world_transforms))

    def transform(self, inputs: FrameSystemInputs, pose: PoseInFrame, dst: str) -> PoseInFrame:
        """Re-express ``pose`` relative to frame ``dst``."""
        T_world_src = self.world_pose(inputs, pose.parent)
        T_world_dst = self.world_pose(inputs, dst)
        T_dst_pose = se3.multiply(se3.inverse(T_world_dst), se3.multiply(T_world_src, pose.pose))
        return PoseInFrame(parent=dst, pose=T_dst_pose)

    def frame_geometries(self) -> Dict[str, GeometriesInFrame]:
        """Frame-local geometry of every frame that carries any."""
        return {
            name: GeometriesInFrame(frame=name, geometries=geoms)
            for name, geoms in zip(self.names, self.geometries)
            if geoms
        }


def _frame_inputs(inputs: FrameSystemInputs, frame: Frame) -> Sequence[float]:
    if frame.dof == 0:
        return ()
    if frame.name not in inputs:
        raise MissingInputsError(frame.name)
    return inputs[frame.name]
