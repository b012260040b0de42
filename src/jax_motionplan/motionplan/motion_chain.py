"""Motion chains: the minimal span of frames connecting a solve frame to a goal frame.

A chain is built per goal and thrown away after the plan. Building one finds
the lowest common ancestor ("pivot") of the two frames, collects the frames
between each of them and the pivot, and works out which part of the frame
system is able to move for this goal.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from jax_motionplan.core.exceptions import NoPathError
from jax_motionplan.core.frame import Frame
from jax_motionplan.core.frame_system import WORLD, FrameSystem
from jax_motionplan.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MotionChain:
    """Frames that matter for one goal.

    Attributes:
        frames: Every frame between, and including, the solve and goal frames.
                Order carries no meaning.
        moving_fs: The part of the frame system that can move for this goal,
                   used for collision checking. A gripper on a moving arm is in
                   here even when it is not in ``frames``.
        solve_frame_name: Frame whose pose the goal constrains.
        goal_frame_name: Frame the goal is expressed in.
        world_rooted: Goals on this chain must be re-expressed in world
                      before solving.
    """

    frames: Tuple[Frame, ...]
    moving_fs: FrameSystem
    solve_frame_name: str
    goal_frame_name: str
    world_rooted: bool = False

    def frame_names(self) -> List[str]:
        return [frame.name for frame in self.frames]

    @property
    def dof(self) -> int:
        return sum(frame.dof for frame in self.frames)


def motion_chain_from_goal(fs: FrameSystem, move_frame: str, goal_frame_name: str) -> MotionChain:
    """Build the MotionChain for moving ``move_frame`` to a goal expressed in ``goal_frame_name``.

    For configuration goals both names are the same frame.

    Raises:
        FrameMissingError: either frame is not in ``fs``.
        NoPathError: the two frames share no ancestor.
    """
    goal_frame_list = fs.traceback(goal_frame_name)
    solve_frame_list = fs.traceback(move_frame)

    def moving_subsystem(frame_list: Sequence[Frame]) -> FrameSystem:
        # Subsystem rooted at the first frame with DoF, walking up from the leaf.
        for frame in frame_list:
            if frame.dof != 0:
                return fs.subset(frame.name)
        return FrameSystem.empty("")

    pivot = find_pivot_frame(solve_frame_list, goal_frame_list)
    world_rooted = False

    if pivot.name == WORLD:
        frames = unique_frames(solve_frame_list + goal_frame_list)
        moving = moving_subsystem(solve_frame_list).merge(moving_subsystem(goal_frame_list), WORLD)
    else:
        solve_moving_list = _up_to_pivot(solve_frame_list, pivot)
        goal_moving_list = _up_to_pivot(goal_frame_list, pivot)
        frames = solve_moving_list + goal_moving_list
        dof = sum(frame.dof for frame in frames)

        if dof == 0:
            # Nothing between the two frames can move (e.g. a camera fixed to a
            # gripper), so the goal is solved in world instead.
            world_rooted = True
            frames = list(solve_frame_list)
            moving = moving_subsystem(solve_frame_list)
            logger.debug(
                "motion_chain_world_rooted",
                solve_frame=move_frame,
                goal_frame=goal_frame_name,
                pivot=pivot.name,
            )
        else:
            moving = moving_subsystem(solve_moving_list).merge(moving_subsystem(goal_moving_list), WORLD)

    chain = MotionChain(
        frames=tuple(frames),
        moving_fs=moving,
        solve_frame_name=move_frame,
        goal_frame_name=goal_frame_name,
        world_rooted=world_rooted,
    )
    logger.debug(
        "motion_chain_built",
        solve_frame=move_frame,
        goal_frame=goal_frame_name,
        pivot=pivot.name,
        frames=chain.frame_names(),
        moving_frames=moving.frame_names(),
        world_rooted=world_rooted,
    )
    return chain


def find_pivot_frame(frame_list1: Sequence[Frame], frame_list2: Sequence[Frame]) -> Frame:
    """Lowest common ancestor of two root-bound ancestor chains.

    Names of the shorter chain go into a set; the longer chain is scanned from
    its leaf and the first name found in the set is the pivot.

    Raises:
        NoPathError: the chains have no frame in common.
    """
    short_list, long_list = frame_list1, frame_list2
    if len(frame_list1) > len(frame_list2):
        short_list, long_list = frame_list2, frame_list1

    seen = {frame.name for frame in short_list}
    for frame in long_list:
        if frame.name in seen:
            return frame
    raise NoPathError("no path from solve frame to goal frame")


def unique_frames(frames: Iterable[Frame]) -> List[Frame]:
    """Drop repeated frames (by name), keeping first-seen order."""
    seen = set()
    unique = []
    for frame in frames:
        if frame.name in seen:
            continue
        seen.add(frame.name)
        unique.append(frame)
    return unique


def _up_to_pivot(frame_list: Sequence[Frame], pivot: Frame) -> List[Frame]:
    span = []
    for frame in frame_list:
        if frame.name == pivot.name:
            break
        span.append(frame)
    return span
