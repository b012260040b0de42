"""Conversion between per-frame joint inputs and flat solver vectors."""

from typing import Dict, List, Tuple

import jax.numpy as jnp
from jax import Array

from jax_motionplan.core.exceptions import FrameMissingError, InsufficientValuesError, MissingInputsError
from jax_motionplan.core.frame import Frame, Limit
from jax_motionplan.core.frame_system import FrameSystem, FrameSystemInputs


class LinearizedFrameSystem:
    """Fixed-order view of a FrameSystem for numeric solvers.

    The frame order is captured once at construction and never changes, so
    ``map_to_slice`` and ``slice_to_map`` on the same instance always agree on
    which slot belongs to which frame. Zero-DoF frames take no slots.
    """

    def __init__(self, fs: FrameSystem):
        self.fs = fs
        frames: List[Frame] = []
        dof: List[Limit] = []
        for name in fs.frame_names():
            frame = fs.frame(name)
            if frame is None:
                raise FrameMissingError(name)
            frames.append(frame)
            dof.extend(frame.limits)
        self.frames: Tuple[Frame, ...] = tuple(frames)
        self.dof: Tuple[Limit, ...] = tuple(dof)

    @property
    def limits(self) -> List[Limit]:
        """Bounds of every slot, in vector order."""
        return list(self.dof)

    def map_to_slice(self, inputs: FrameSystemInputs) -> Array:
        """Concatenate the inputs of every moving frame, in fixed frame order.

        Raises:
            MissingInputsError: a moving frame has no entry in ``inputs``.
        """
        values: List[float] = []
        for frame in self.frames:
            if frame.dof == 0:
                continue
            if frame.name not in inputs:
                raise MissingInputsError(frame.name)
            values.extend(float(v) for v in inputs[frame.name])
        return jnp.asarray(values, dtype=jnp.float64)

    def slice_to_map(self, vector) -> Dict[str, Array]:
        """Split a flat vector back into per-frame inputs.

        Values left over after the last moving frame is filled are ignored.

        Raises:
            InsufficientValuesError: ``vector`` runs out before every moving frame is filled.
        """
        flat = jnp.asarray(vector, dtype=jnp.float64).reshape(-1)
        inputs: Dict[str, Array] = {}
        i = 0
        for frame in self.frames:
            if frame.dof == 0:
                continue
            if i + frame.dof > flat.shape[0]:
                raise InsufficientValuesError(frame.name, details={"needed": i + frame.dof, "got": flat.shape[0]})
            inputs[frame.name] = flat[i : i + frame.dof]
            i += frame.dof
        return inputs
