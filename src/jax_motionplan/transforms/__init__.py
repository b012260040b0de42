"""
Rigid-body transform math used by the frame system.

- so3: rotations (exp/log, quaternion and RPY conversion, geodesic angle)
- se3: homogeneous transforms and twist exponentials

All functions are pure and operate on JAX arrays.
"""

from . import so3
from . import se3

__all__ = [
    "so3",
    "se3",
]
