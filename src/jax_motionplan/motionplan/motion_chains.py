"""Motion chains for a whole plan request.

``MotionChains`` builds one chain per goal, enforces the rules for
trajectory-parameter-space (PTG) frames, splits collision geometry into moving
and static sets, and re-expresses goals in world where a chain requires it.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from jax_motionplan.core.exceptions import (
    FrameMissingError,
    InsufficientGoalsError,
    MixedFrameTypesError,
    MultiplePTGFramesError,
)
from jax_motionplan.core.frame_system import WORLD, FrameSystem, FrameSystemInputs, PoseInFrame
from jax_motionplan.core.geometry import GeometriesInFrame, Geometry
from jax_motionplan.core.logging import get_logger
from jax_motionplan.motionplan.motion_chain import MotionChain, motion_chain_from_goal

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlanState:
    """Goal specification: target poses and/or target joint configurations.

    Attributes:
        poses: Frame name to the pose that frame should reach.
        configuration: Frame name to the joint values that frame should reach.
    """

    poses: Mapping[str, PoseInFrame] = field(default_factory=dict)
    configuration: Mapping[str, Sequence[float]] = field(default_factory=dict)


@dataclass(frozen=True)
class MotionChains:
    """All motion chains of one plan request.

    Attributes:
        chains: One MotionChain per goal; pose goals first, then configuration goals.
        use_tpspace: A chain moves a PTG frame.
        ptg_frame_name: Name of that PTG frame, "" when there is none.
    """

    chains: Tuple[MotionChain, ...]
    use_tpspace: bool = False
    ptg_frame_name: str = ""

    @classmethod
    def from_plan_state(cls, fs: FrameSystem, goal: PlanState) -> "MotionChains":
        """Build and validate the motion chains for ``goal``.

        Raises:
            InsufficientGoalsError: ``goal`` holds no poses and no configurations.
            FrameMissingError: a goal names a frame that is not in ``fs``.
            NoPathError: a goal frame is not connected to its solve frame.
            MultiplePTGFramesError: more than one PTG frame would move.
            MixedFrameTypesError: a PTG frame is planned alongside another chain, or
                a joint outside what the PTG frame carries would move with it.
        """
        if not goal.poses and not goal.configuration:
            raise InsufficientGoalsError("must have at least one motion chain")

        chains = [motion_chain_from_goal(fs, frame, pif.parent) for frame, pif in goal.poses.items()]
        chains.extend(motion_chain_from_goal(fs, frame, frame) for frame in goal.configuration)

        # TODO: allow PTG frames to be planned together with other motion chains.
        # Frames are scanned leaf first, so joints carried by the PTG frame are
        # seen before it and joints below it are seen after.
        ptg_name = ""
        for chain in chains:
            for frame in chain.frames:
                if frame.is_ptg:
                    if ptg_name and frame.name != ptg_name:
                        raise MultiplePTGFramesError(
                            "only one PTG frame can be planned for at a time",
                            details={"ptg_frames": [ptg_name, frame.name]},
                        )
                    if len(chains) > 1:
                        raise MixedFrameTypesError(
                            "cannot plan for PTG and non-PTG frames simultaneously",
                            details={"ptg_frame": frame.name, "chains": len(chains)},
                        )
                    ptg_name = frame.name
                elif frame.dof > 0 and ptg_name:
                    raise MixedFrameTypesError(
                        "cannot plan for PTG and non-PTG frames simultaneously",
                        details={"ptg_frame": ptg_name, "moving_frame": frame.name},
                    )

        if not ptg_name:
            return cls(chains=tuple(chains))

        # The PTG chain is the only chain and always plans in world.
        ptg_chain = dataclasses.replace(chains[0], world_rooted=True)
        logger.debug("ptg_frame_selected", frame=ptg_name, solve_frame=ptg_chain.solve_frame_name)
        return cls(chains=(ptg_chain,), use_tpspace=True, ptg_frame_name=ptg_name)

    def geometries(
        self,
        fs: FrameSystem,
        frame_system_geometries: Optional[Mapping[str, GeometriesInFrame]] = None,
    ) -> Tuple[List[Geometry], List[Geometry]]:
        """Split frame geometry into (moving, static).

        Geometry is moving when its frame is in any chain's moving subsystem,
        or when its frame has DoF of its own and can be moved out of the way.
        Everything else is static.

        Args:
            fs: The full frame system.
            frame_system_geometries: Geometry per frame name; defaults to
                                     ``fs.frame_geometries()``.
        """
        if frame_system_geometries is None:
            frame_system_geometries = fs.frame_geometries()

        moving: List[Geometry] = []
        static: List[Geometry] = []
        for name, geometries in frame_system_geometries.items():
            if self._frame_can_move(fs, name):
                moving.extend(geometries.geometries)
            else:
                static.extend(geometries.geometries)
        return moving, static

    def _frame_can_move(self, fs: FrameSystem, name: str) -> bool:
        if name != WORLD and any(name in chain.moving_fs for chain in self.chains):
            return True
        frame = fs.frame(name)
        if frame is None:
            raise FrameMissingError(name)
        return frame.dof > 0

    def translate_goals_to_world_position(
        self,
        fs: FrameSystem,
        start: FrameSystemInputs,
        goal: PlanState,
    ) -> PlanState:
        """Return a new PlanState with world-rooted pose goals expressed in world.

        This lets e.g. a gripper move relative to a point seen by a camera built
        into that gripper. Other pose goals and all configuration goals pass through.
        """
        if not goal.poses:
            return goal

        altered: Dict[str, PoseInFrame] = {}
        for chain in self.chains:
            # A configuration-only chain has no pose to translate.
            pif = goal.poses.get(chain.solve_frame_name)
            if pif is None:
                continue
            if chain.world_rooted:
                altered[chain.solve_frame_name] = fs.transform(start, pif, WORLD)
                logger.debug("goal_translated_to_world", frame=chain.solve_frame_name, source_parent=pif.parent)
            else:
                altered[chain.solve_frame_name] = pif
        return PlanState(poses=altered, configuration=goal.configuration)

    def frames_filtered_by_moving_and_nonmoving(self, fs: FrameSystem) -> Tuple[List[str], List[str]]:
        """Names of frames in any chain's span, and names of the rest of ``fs``."""
        in_chain = {name for chain in self.chains for name in chain.frame_names()}
        moving: List[str] = []
        nonmoving: List[str] = []
        for name in fs.frame_names():
            if name in in_chain:
                moving.append(name)
            else:
                nonmoving.append(name)
        return moving, nonmoving
