"""
conversions.py
--------------

Chromaticity conversions between xyY and XYZ.

Degenerate chromaticities are handled with saturating fallbacks instead
of errors: a sample with y = 0 has no defined tristimulus and maps to
(0, 0, 0).

All functions use jax.numpy so they can sit inside differentiated
model code; they broadcast over leading dimensions.
"""

from __future__ import annotations

import jax.numpy as jnp


def xyY_to_XYZ(x, y, Y) -> jnp.ndarray:
    """
    Convert chromaticity (x, y) and luminance Y to tristimulus XYZ.

    X = x Y / y,  Z = (1 - x - y) Y / y

    Parameters
    ----------
    x, y, Y : array-like
        Broadcast-compatible chromaticity coordinates and luminance.

    Returns
    -------
    jnp.ndarray, shape (..., 3)
        Tristimulus values. Entries with y == 0 are (0, 0, 0).
    """
    x, y, Y = jnp.broadcast_arrays(
        jnp.asarray(x, dtype=float), jnp.asarray(y, dtype=float), jnp.asarray(Y, dtype=float)
    )
    degenerate = y == 0
    safe_y = jnp.where(degenerate, 1.0, y)
    X = jnp.where(degenerate, 0.0, x * Y / safe_y)
    Z = jnp.where(degenerate, 0.0, (1.0 - x - y) * Y / safe_y)
    Y = jnp.where(degenerate, 0.0, Y)
    return jnp.stack([X, Y, Z], axis=-1)


def XYZ_to_xyY(XYZ, white_xy: tuple[float, float]) -> jnp.ndarray:
    """
    Convert tristimulus XYZ to (x, y, Y).

    Black (X + Y + Z == 0) takes the chromaticity of ``white_xy``.
    """
    XYZ = jnp.asarray(XYZ, dtype=float)
    total = jnp.sum(XYZ, axis=-1)
    black = total == 0
    safe_total = jnp.where(black, 1.0, total)
    x = jnp.where(black, white_xy[0], XYZ[..., 0] / safe_total)
    y = jnp.where(black, white_xy[1], XYZ[..., 1] / safe_total)
    return jnp.stack([x, y, XYZ[..., 1]], axis=-1)
