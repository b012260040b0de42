"""SE(3) rigid transforms in JAX.

Poses are (..., 4, 4) homogeneous matrices and joint motions are 6D twists
ordered [vx, vy, vz, wx, wy, wz]. Revolute joints carry their axis in the
angular half of the twist, prismatic joints in the linear half.
"""

import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Assemble a homogeneous transform.

    Args:
        p: (..., 3) translation
        R: (..., 3, 3) rotation

    Returns:
        (..., 4, 4) transform
    """
    batch = jnp.broadcast_shapes(p.shape[:-1], R.shape[:-2])
    p = jnp.broadcast_to(p, batch + (3,))
    R = jnp.broadcast_to(R, batch + (3, 3))

    top = jnp.concatenate([R, p[..., None]], axis=-1)
    bottom = jnp.broadcast_to(jnp.array([0.0, 0.0, 0.0, 1.0], dtype=top.dtype), batch + (1, 4))
    return jnp.concatenate([top, bottom], axis=-2)


def from_translation(p: Array) -> Array:
    """Pure translation by p (3,)."""
    p = jnp.asarray(p, dtype=jnp.float64)
    return from_position_and_rotation(p, jnp.eye(3, dtype=p.dtype))


def identity() -> Array:
    """4x4 identity transform."""
    return jnp.eye(4, dtype=jnp.float64)


def exp(twist: Array) -> Array:
    """
    Exponential map from a twist to the rigid motion it generates.

    Translation is V @ v with V = I + A K + B K^2, where A and B switch to
    their Taylor series below 1e-6 rad.

    Args:
        twist: (..., 6) twist [vx, vy, vz, wx, wy, wz]

    Returns:
        (..., 4, 4) transform
    """
    v, w = twist[..., :3], twist[..., 3:]
    theta = jnp.linalg.norm(w, axis=-1, keepdims=True)
    theta_sq = theta * theta
    tiny = theta < 1e-6

    safe_sq = jnp.where(tiny, 1.0, theta_sq)
    safe_cube = jnp.where(tiny, 1.0, theta_sq * theta)
    a = jnp.where(tiny, 0.5 - theta_sq / 24.0, (1.0 - jnp.cos(theta)) / safe_sq)
    b = jnp.where(tiny, 1.0 / 6.0 - theta_sq / 120.0, (theta - jnp.sin(theta)) / safe_cube)

    K = so3.skew_symmetric(w)
    eye = jnp.broadcast_to(jnp.eye(3, dtype=twist.dtype), K.shape)
    V = eye + a[..., None] * K + b[..., None] * jnp.matmul(K, K)

    translation = jnp.einsum("...ij,...j->...i", V, v)
    return from_position_and_rotation(translation, so3.exp(w))


def multiply(T1: Array, T2: Array) -> Array:
    """Compose two transforms, T1 @ T2 (T2 applied first)."""
    return jnp.matmul(T1, T2)


def inverse(T: Array) -> Array:
    """
    Invert a rigid transform using its block structure, [[R^T, -R^T t], [0, 1]].

    Args:
        T: (..., 4, 4) transform

    Returns:
        (..., 4, 4) inverse transform
    """
    R_t = jnp.swapaxes(get_rotation(T), -1, -2)
    t = -jnp.einsum("...ij,...j->...i", R_t, get_position(T))
    return from_position_and_rotation(t, R_t)


def apply(T: Array, points: Array) -> Array:
    """
    Map point(s) through T.

    Args:
        T: (4, 4) transform
        points: (3,) or (N, 3) points

    Returns:
        points of the same shape in T's parent coordinates
    """
    return jnp.einsum("ij,...j->...i", get_rotation(T), points) + get_position(T)


def get_position(T: Array) -> Array:
    """Translation column of T, (..., 3)."""
    return T[..., :3, 3]


def get_rotation(T: Array) -> Array:
    """Rotation block of T, (..., 3, 3)."""
    return T[..., :3, :3]
