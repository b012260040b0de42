"""Small helpers shared by planners: step counts, path nodes and their distance metric."""

from dataclasses import dataclass
from typing import Callable, Mapping, Sequence, Union

import jax.numpy as jnp
from jax import Array

from jax_motionplan.core.frame_system import PoseInFrame
from jax_motionplan.transforms import se3, so3


def calculate_step_count(
    start_pose: Union[Array, PoseInFrame],
    goal_pose: Union[Array, PoseInFrame],
    step_size: float,
) -> int:
    """Number of steps needed to get from ``start_pose`` to ``goal_pose``.

    ``step_size`` is both the largest translation (mm) and the largest rotation
    (degrees) allowed per step. A step size of 0 is treated as 1. The result is
    always at least 1.
    """
    if step_size == 0:
        step_size = 1.0

    start = start_pose.pose if isinstance(start_pose, PoseInFrame) else start_pose
    goal = goal_pose.pose if isinstance(goal_pose, PoseInFrame) else goal_pose

    mm_dist = float(jnp.linalg.norm(se3.get_position(goal) - se3.get_position(start)))
    deg_dist = float(jnp.degrees(so3.angle_between(se3.get_rotation(start), se3.get_rotation(goal))))

    n_steps = max(abs(mm_dist / step_size), abs(deg_dist / step_size))
    return int(n_steps) + 1


@dataclass(frozen=True)
class Node:
    """A configuration visited by a search.

    Attributes:
        q: Joint values per frame name.
        cost: Cost accumulated to reach this node.
    """

    q: Mapping[str, Sequence[float]]
    cost: float = 0.0


NodeDistanceMetric = Callable[[Node, Node], float]


def node_configuration_distance(node1: Node, node2: Node) -> float:
    """L2 distance between two nodes' configurations.

    Sums squared differences frame by frame over the frames of ``node1``;
    frames absent from ``node2`` are skipped.
    """
    total = 0.0
    for name, values in node1.q.items():
        if name not in node2.q:
            continue
        diff = jnp.asarray(values, dtype=jnp.float64) - jnp.asarray(node2.q[name], dtype=jnp.float64)
        total += float(jnp.sum(diff * diff))
    return total**0.5
