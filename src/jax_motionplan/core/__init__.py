"""Core data structures for jax_motionplan.

Frames, collision geometry and the arena-backed FrameSystem, plus the
error hierarchy, logging and configuration shared by the whole package.
"""

from .exceptions import (
    ConfigurationError,
    DuplicateFrameError,
    FrameMissingError,
    InsufficientGoalsError,
    InsufficientValuesError,
    LinearizationError,
    MissingInputsError,
    MixedFrameTypesError,
    MotionPlanError,
    MultiplePTGFramesError,
    NoPathError,
    PlanCancelledError,
    PlanTimeoutError,
)
from .frame import Frame, FrameKind, Limit
from .geometry import GeometriesInFrame, Geometry
from .frame_system import WORLD, FrameSystem, FrameSystemInputs, PoseInFrame
from .config import PlannerConfig, load_config

__all__ = [
    "WORLD",
    "Frame",
    "FrameKind",
    "FrameSystem",
    "FrameSystemInputs",
    "GeometriesInFrame",
    "Geometry",
    "Limit",
    "PlannerConfig",
    "PoseInFrame",
    "load_config",
    "ConfigurationError",
    "DuplicateFrameError",
    "FrameMissingError",
    "InsufficientGoalsError",
    "InsufficientValuesError",
    "LinearizationError",
    "MissingInputsError",
    "MixedFrameTypesError",
    "MotionPlanError",
    "MultiplePTGFramesError",
    "NoPathError",
    "PlanCancelledError",
    "PlanTimeoutError",
]
