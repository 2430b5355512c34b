"""
rgb.py
------

XYZ (D65) <-> sRGB.

Forward: a fixed 3x3 matrix to linear sRGB followed by the piecewise
sRGB companding curve

    v > 0.0031308 ? 1.055 v^(1/2.4) - 0.055 : 12.92 v

The inverse (decompanding + inverse matrix) is provided for mapping
arbitrary RGB inputs back towards Munsell coordinates.

Values outside [0, 1] are passed through unless ``clip=True``; whether a
color is representable is decided by colorimetry.gamut.
"""

from __future__ import annotations

import jax.numpy as jnp
import numpy as np

from .constants import (
    M_SRGB_TO_XYZ_T,
    M_XYZ_TO_SRGB_T,
    SRGB_ENCODED_THRESHOLD,
    SRGB_GAMMA,
    SRGB_LINEAR_THRESHOLD,
    SRGB_OFFSET,
    SRGB_SLOPE,
)


def _check_last_dim(name: str, arr: jnp.ndarray) -> None:
    if arr.shape[-1] != 3:
        raise ValueError(f"{name}: input must have last dimension 3, got {arr.shape[-1]}")


def xyz_to_linear_srgb(XYZ) -> jnp.ndarray:
    """Linear sRGB of D65 tristimulus, shape (..., 3)."""
    XYZ = jnp.asarray(XYZ, dtype=float)
    _check_last_dim("xyz_to_linear_srgb", XYZ)
    return XYZ @ jnp.asarray(M_XYZ_TO_SRGB_T)


def srgb_compand(v) -> jnp.ndarray:
    """Apply the sRGB transfer function per channel."""
    v = jnp.asarray(v, dtype=float)
    # keep the unused branch finite so gradients through jnp.where stay finite
    safe = jnp.maximum(v, SRGB_LINEAR_THRESHOLD)
    encoded = (1.0 + SRGB_OFFSET) * safe ** (1.0 / SRGB_GAMMA) - SRGB_OFFSET
    return jnp.where(v > SRGB_LINEAR_THRESHOLD, encoded, SRGB_SLOPE * v)


def srgb_decompand(v) -> jnp.ndarray:
    """Invert srgb_compand()."""
    v = jnp.asarray(v, dtype=float)
    safe = jnp.maximum(v, SRGB_ENCODED_THRESHOLD)
    linear = ((safe + SRGB_OFFSET) / (1.0 + SRGB_OFFSET)) ** SRGB_GAMMA
    return jnp.where(v > SRGB_ENCODED_THRESHOLD, linear, v / SRGB_SLOPE)


def xyz_to_srgb(XYZ, *, clip: bool = False) -> jnp.ndarray:
    """
    Convert D65 tristimulus to companded sRGB.

    Parameters
    ----------
    XYZ : array-like, shape (..., 3)
    clip : bool, default=False
        Clamp the result into [0, 1].

    Returns
    -------
    jnp.ndarray, shape (..., 3)
    """
    rgb = srgb_compand(xyz_to_linear_srgb(XYZ))
    if clip:
        rgb = jnp.clip(rgb, 0.0, 1.0)
    return rgb


def srgb_to_xyz(rgb) -> jnp.ndarray:
    """Convert companded sRGB, shape (..., 3), to D65 tristimulus."""
    rgb = jnp.asarray(rgb, dtype=float)
    _check_last_dim("srgb_to_xyz", rgb)
    return srgb_decompand(rgb) @ jnp.asarray(M_SRGB_TO_XYZ_T)


def rgb_to_hex(rgb) -> str | list[str]:
    """
    Format companded sRGB as "#RRGGBB".

    Channels are clamped into [0, 1] and rounded to 8 bits. A single
    color (shape (3,)) gives a string, a batch (shape (n, 3)) a list.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    if arr.shape[-1] != 3:
        raise ValueError(f"rgb_to_hex: input must have last dimension 3, got {arr.shape[-1]}")
    levels = np.rint(np.clip(arr, 0.0, 1.0) * 255.0).astype(int)
    if levels.ndim == 1:
        return "#{:02X}{:02X}{:02X}".format(*levels)
    return ["#{:02X}{:02X}{:02X}".format(*row) for row in levels.reshape(-1, 3)]
