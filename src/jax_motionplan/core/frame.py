"""Frame PyTree: one named node of a kinematic frame system.

A frame stores its pose relative to its parent (``origin``) and one twist
axis per degree of freedom. Frames know nothing about their parent; the
owning FrameSystem keeps the topology.
"""

import enum
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import jax
import jax.numpy as jnp
from jax import Array
from flax import struct

from jax_motionplan.core.exceptions import LinearizationError
from jax_motionplan.transforms import se3


@dataclass(frozen=True)
class Limit:
    """Bounds of a single degree of freedom."""

    min: float
    max: float


class FrameKind(enum.Enum):
    """What kind of motion a frame contributes."""

    FIXED = "fixed"
    JOINT = "joint"
    PTG = "ptg"


@struct.dataclass
class Frame:
    """Immutable frame with zero or more degrees of freedom.

    Attributes:
        name: Unique name within a frame system. Static field.
        kind: FrameKind tag. PTG frames are driven by trajectory
              parameters rather than independent joint values.
        limits: One Limit per degree of freedom. Static field.
        origin: (4, 4) transform from the parent frame to this frame at zero input.
        axes: (dof, 6) twist per degree of freedom, applied in order after origin.
    """
    name: str = struct.field(pytree_node=False)
    kind: FrameKind = struct.field(pytree_node=False)
    limits: Tuple[Limit, ...] = struct.field(pytree_node=False)
    origin: Array
    axes: Array

    @property
    def dof(self) -> int:
        return len(self.limits)

    @property
    def is_ptg(self) -> bool:
        return self.kind is FrameKind.PTG

    def transform(self, values: Sequence[float]) -> Array:
        """Parent-to-frame transform for the given joint values.

        Args:
            values: Exactly ``dof`` joint values.

        Returns:
            (4, 4) transform origin @ exp(axes[0] * q0) @ ... @ exp(axes[n] * qn)
        """
        q = jnp.asarray(values, dtype=jnp.float64).reshape(-1)
        if q.shape[0] != self.dof:
            raise LinearizationError(
                f"frame {self.name!r} expects {self.dof} inputs, got {q.shape[0]}",
                details={"frame": self.name},
            )
        T = self.origin
        for i in range(self.dof):
            T = se3.multiply(T, se3.exp(self.axes[i] * q[i]))
        return T

    # Constructors
    @classmethod
    def fixed(cls, name: str, origin: Optional[Array] = None) -> "Frame":
        return cls(
            name=name,
            kind=FrameKind.FIXED,
            limits=(),
            origin=_origin(origin),
            axes=jnp.zeros((0, 6), dtype=jnp.float64),
        )

    @classmethod
    def joint(
        cls,
        name: str,
        axes: Array,
        limits: Sequence[Limit],
        origin: Optional[Array] = None,
    ) -> "Frame":
        """Frame with one twist per degree of freedom, e.g. a whole arm model."""
        axes = jnp.asarray(axes, dtype=jnp.float64).reshape(-1, 6)
        limits = tuple(limits)
        if axes.shape[0] != len(limits):
            raise ValueError(f"frame {name!r} has {axes.shape[0]} axes but {len(limits)} limits")
        kind = FrameKind.JOINT if limits else FrameKind.FIXED
        return cls(name=name, kind=kind, limits=limits, origin=_origin(origin), axes=axes)

    @classmethod
    def revolute(
        cls,
        name: str,
        axis: Sequence[float] = (0.0, 0.0, 1.0),
        limit: Limit = Limit(-math.pi, math.pi),
        origin: Optional[Array] = None,
    ) -> "Frame":
        twist = jnp.concatenate([jnp.zeros(3), jnp.asarray(axis, dtype=jnp.float64)])
        return cls.joint(name, twist[None], (limit,), origin)

    @classmethod
    def prismatic(
        cls,
        name: str,
        axis: Sequence[float] = (1.0, 0.0, 0.0),
        limit: Limit = Limit(-1000.0, 1000.0),
        origin: Optional[Array] = None,
    ) -> "Frame":
        twist = jnp.concatenate([jnp.asarray(axis, dtype=jnp.float64), jnp.zeros(3)])
        return cls.joint(name, twist[None], (limit,), origin)

    @classmethod
    def ptg(
        cls,
        name: str,
        limits: Optional[Sequence[Limit]] = None,
        origin: Optional[Array] = None,
    ) -> "Frame":
        """Planar base driven through trajectory parameters; inputs are x, y, theta."""
        if limits is None:
            limits = (Limit(-math.inf, math.inf), Limit(-math.inf, math.inf), Limit(-math.pi, math.pi))
        axes = jnp.array(
            [
                [1.0, 0.0, 0.0, 0.0, 0.0, 0.0],
                [0.0, 1.0, 0.0, 0.0, 0.0, 0.0],
                [0.0, 0.0, 0.0, 0.0, 0.0, 1.0],
            ],
            dtype=jnp.float64,
        )
        return cls(name=name, kind=FrameKind.PTG, limits=tuple(limits), origin=_origin(origin), axes=axes)


def _origin(origin: Optional[jax.Array]) -> Array:
    if origin is None:
        return se3.identity()
    origin = jnp.asarray(origin, dtype=jnp.float64)
    if origin.shape != (4, 4):
        raise ValueError(f"origin must have shape (4, 4), got {origin.shape}")
    return origin
