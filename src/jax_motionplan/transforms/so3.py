"""SO(3) rotation helpers in JAX.

Rotations are (..., 3, 3) matrices; tangent vectors are (..., 3) axis-angle
vectors. Every function is pure and broadcasts over leading batch axes.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def skew_symmetric(v: Array) -> Array:
    """
    Build the cross-product matrix [v]_x of a 3-vector.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) matrix K with K @ u == cross(v, u)
    """
    x, y, z = v[..., 0], v[..., 1], v[..., 2]
    zeros = jnp.zeros_like(x)
    rows = [
        jnp.stack([zeros, -z, y], axis=-1),
        jnp.stack([z, zeros, -x], axis=-1),
        jnp.stack([-y, x, zeros], axis=-1),
    ]
    return jnp.stack(rows, axis=-2)


def exp(log_r: Array) -> Array:
    """
    Exponential map from an axis-angle vector to a rotation matrix.

    Rodrigues' formula, with Taylor expansions of sin and cos for tiny
    angles so that the zero vector maps cleanly to the identity.

    Args:
        log_r: (..., 3) axis-angle vector

    Returns:
        (..., 3, 3) rotation matrix
    """
    theta = jnp.linalg.norm(log_r, axis=-1, keepdims=True)
    tiny = theta < 1e-8

    safe_theta = jnp.where(tiny, 1.0, theta)
    unit_axis = jnp.where(tiny, log_r, log_r / safe_theta)

    sin_t = jnp.where(tiny, theta - theta**3 / 6.0, jnp.sin(theta))
    one_minus_cos = jnp.where(tiny, 0.5 * theta**2, 1.0 - jnp.cos(theta))

    K = skew_symmetric(unit_axis)
    eye = jnp.broadcast_to(jnp.eye(3, dtype=log_r.dtype), log_r.shape[:-1] + (3, 3))
    return eye + sin_t[..., None] * K + one_minus_cos[..., None] * jnp.matmul(K, K)


def log(R: Array) -> Array:
    """
    Logarithm map from a rotation matrix to its axis-angle vector.

    Inverse of exp(). Near-identity rotations read the axis straight from the
    skew part; rotations near pi fall back to the dominant column of (R + I) / 2.

    Args:
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 3) axis-angle vector
    """
    cos_theta = jnp.clip((jnp.trace(R, axis1=-2, axis2=-1) - 1.0) / 2.0, -1.0, 1.0)
    theta = jnp.arccos(cos_theta)

    vee = jnp.stack(
        [R[..., 2, 1] - R[..., 1, 2], R[..., 0, 2] - R[..., 2, 0], R[..., 1, 0] - R[..., 0, 1]],
        axis=-1,
    )

    tiny = theta < 1e-8
    near_pi = jnp.abs(theta - jnp.pi) < 1e-6

    sin_theta = jnp.where(tiny, 1.0, jnp.sin(theta))
    axis_general = vee / (2.0 * sin_theta[..., None])

    half = (R + jnp.eye(3, dtype=R.dtype)) / 2.0
    column = jnp.argmax(jnp.diagonal(half, axis1=-2, axis2=-1), axis=-1)
    axis_pi = jnp.take_along_axis(half, column[..., None, None], axis=-1)[..., 0]
    axis_pi = axis_pi / jnp.linalg.norm(axis_pi, axis=-1, keepdims=True)

    axis = jnp.where(near_pi[..., None], axis_pi, axis_general)
    return jnp.where(tiny[..., None], vee / 2.0, theta[..., None] * axis)


def multiply(R1: Array, R2: Array) -> Array:
    """Compose two rotations, R1 @ R2."""
    return jnp.matmul(R1, R2)


def inverse(R: Array) -> Array:
    """Invert a rotation (its transpose)."""
    return jnp.swapaxes(R, -1, -2)


def angle_between(R1: Array, R2: Array) -> Array:
    """
    Geodesic angle in radians of the rotation taking R1 to R2.

    Args:
        R1: (..., 3, 3) rotation matrix
        R2: (..., 3, 3) rotation matrix

    Returns:
        (...,) angle in [0, pi]
    """
    return jnp.linalg.norm(log(multiply(inverse(R1), R2)), axis=-1)


def from_quaternion(quaternions: Array) -> Array:
    """
    Rotation matrix from a (w, x, y, z) quaternion. Input need not be unit length.

    Args:
        quaternions: (..., 4) quaternion

    Returns:
        (..., 3, 3) rotation matrix
    """
    q = quaternions / jnp.linalg.norm(quaternions, axis=-1, keepdims=True)
    w, x, y, z = jnp.moveaxis(q, -1, 0)

    return jnp.stack(
        [
            jnp.stack([1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)], axis=-1),
            jnp.stack([2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)], axis=-1),
            jnp.stack([2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)], axis=-1),
        ],
        axis=-2,
    )


def from_rpy(roll: float, pitch: float, yaw: float) -> Array:
    """Rotation matrix from fixed-axis roll/pitch/yaw, R = Rz(yaw) Ry(pitch) Rx(roll)."""
    return multiply(
        exp(jnp.array([0.0, 0.0, yaw])),
        multiply(exp(jnp.array([0.0, pitch, 0.0])), exp(jnp.array([roll, 0.0, 0.0]))),
    )
