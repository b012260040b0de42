"""
Exceptions raised by jax_motionplan.

Every error derives from MotionPlanError so callers can catch the whole family.
Structural problems (missing frames, disconnected chains, bad goal sets) are
raised synchronously while motion chains are built; only search failures
travel through a ResultPromise.
"""

from typing import Any


class MotionPlanError(Exception):
    """Base exception for all jax_motionplan errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(MotionPlanError):
    """Raised when planner configuration is invalid or missing."""

    pass


class FrameMissingError(MotionPlanError):
    """Raised when a referenced frame is not in the frame system."""

    def __init__(self, frame: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"frame {frame!r} missing from frame system", details)
        self.frame = frame


class DuplicateFrameError(MotionPlanError):
    """Raised when a frame name would appear twice in one frame system."""

    def __init__(self, frame: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"frame {frame!r} already exists in frame system", details)
        self.frame = frame


class NoPathError(MotionPlanError):
    """Raised when solve and goal frames share no ancestor."""

    pass


class MixedFrameTypesError(MotionPlanError):
    """Raised when a PTG frame is planned alongside other motion chains."""

    pass


class MultiplePTGFramesError(MixedFrameTypesError):
    """Raised when more than one PTG frame appears across the motion chains."""

    pass


class InsufficientGoalsError(MotionPlanError):
    """Raised when a plan request yields no motion chains."""

    pass


class LinearizationError(MotionPlanError):
    """Raised when joint inputs cannot be converted to or from a flat vector."""

    pass


class MissingInputsError(LinearizationError):
    """Raised when a moving frame has no entry in an inputs mapping."""

    def __init__(self, frame: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"frame {frame!r} missing from input map", details)
        self.frame = frame


class InsufficientValuesError(LinearizationError):
    """Raised when a flat vector runs out before every moving frame is filled."""

    def __init__(self, frame: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"not enough values in flat vector for frame {frame!r}", details)
        self.frame = frame


class PlanCancelledError(MotionPlanError):
    """Raised when a caller cancels while waiting on a plan result."""

    pass


class PlanTimeoutError(MotionPlanError):
    """Raised when a plan result does not arrive within the allowed time."""

    pass
