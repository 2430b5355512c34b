"""
math.py
-------

Math utilities for munsellrgb.

Includes:
- wrap_degrees : map angles into [-180, 180).
- angular_difference : signed smallest difference between two angles.
- polar_about : polar coordinates of 2-D points about a center.

All functions use JAX (jax.numpy) and work on NumPy inputs as well.

Examples
--------
>>> from munsellrgb.utils import math
>>> float(math.wrap_degrees(370.0))
10.0
>>> float(math.angular_difference(355.0, 5.0))
-10.0
"""

from __future__ import annotations

import jax.numpy as jnp


def wrap_degrees(angle) -> jnp.ndarray:
    """Wrap angles (degrees) into [-180, 180)."""
    return jnp.mod(jnp.asarray(angle, dtype=float) + 180.0, 360.0) - 180.0


def angular_difference(a, b) -> jnp.ndarray:
    """Signed difference a - b (degrees) along the shorter arc."""
    return wrap_degrees(jnp.asarray(a, dtype=float) - jnp.asarray(b, dtype=float))


def polar_about(points, center: tuple[float, float]) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    Polar coordinates of 2-D points about ``center``.

    Parameters
    ----------
    points : array-like, shape (..., 2)
    center : (float, float)

    Returns
    -------
    angle : jnp.ndarray
        atan2(dy, dx) in degrees, in (-180, 180].
    radius : jnp.ndarray
        Euclidean distance to the center.
    """
    points = jnp.asarray(points, dtype=float)
    if points.shape[-1] != 2:
        raise ValueError(f"points must have last dimension 2, got {points.shape[-1]}")
    dx = points[..., 0] - center[0]
    dy = points[..., 1] - center[1]
    return jnp.rad2deg(jnp.arctan2(dy, dx)), jnp.hypot(dx, dy)
