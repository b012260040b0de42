"""Motion chain resolution, goal translation and plan result delivery.

This is the layer between a goal specification and a numeric solver: which
frames move for each goal, how their joint values pack into flat vectors,
and how a background search hands its path back to the caller.
"""

from .linearize import LinearizedFrameSystem
from .motion_chain import MotionChain, find_pivot_frame, motion_chain_from_goal, unique_frames
from .motion_chains import MotionChains, PlanState
from .promise import PlanSolution, ResultPromise, submit_search
from .utils import Node, NodeDistanceMetric, calculate_step_count, node_configuration_distance

__all__ = [
    "LinearizedFrameSystem",
    "MotionChain",
    "MotionChains",
    "Node",
    "NodeDistanceMetric",
    "PlanSolution",
    "PlanState",
    "ResultPromise",
    "calculate_step_count",
    "find_pivot_frame",
    "motion_chain_from_goal",
    "node_configuration_distance",
    "submit_search",
    "unique_frames",
]
