"""
JAX Motionplan: kinematic chain resolution for robot motion planning.

Given a tree of reference frames and a set of motion goals, this library
works out which frames must move for each goal, packs their joint values into
solver-ready vectors, and re-expresses goals in world where needed.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import transforms
from . import core
from . import io
from . import motionplan

__version__ = "0.1.0"
__all__ = ["transforms", "core", "io", "motionplan"]
