"""
gamut.py
--------

sRGB gamut classification and clamping.

Being out of gamut is a classification, never an error: colors are
flagged with is_in_gamut() and optionally filtered; clamp_rgb() then
hard-clips the survivors. The tolerance band absorbs the small
overshoots produced by the fitted model near the cube faces.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
import numpy as np

DEFAULT_TOLERANCE = 0.004


@dataclass
class GamutConfig:
    """
    Settings for clamping a grid into the sRGB cube.

    Attributes
    ----------
    tolerance : float, default=0.004
        Channels within [-tolerance, 1 + tolerance] count as in gamut.
    value_range : tuple[float, float], default=(1.0, 9.0)
        Chromatic samples outside this value range are dropped; the fitted
        model is degenerate at value 0 and 10. Greys are always kept.
    """

    tolerance: float = DEFAULT_TOLERANCE
    value_range: tuple[float, float] = (1.0, 9.0)

    def __post_init__(self):
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")
        lo, hi = self.value_range
        if lo > hi:
            raise ValueError(f"value_range must be (low, high), got {self.value_range}")


def in_gamut_mask(rgb, tolerance: float = DEFAULT_TOLERANCE) -> np.ndarray:
    """Boolean mask over the leading dimensions of an (..., 3) RGB array."""
    rgb = np.asarray(rgb, dtype=np.float64)
    inside = (rgb >= -tolerance) & (rgb <= 1.0 + tolerance)
    return np.all(inside, axis=-1)


def is_in_gamut(R, G, B, tolerance: float = DEFAULT_TOLERANCE):
    """
    Whether companded sRGB channels lie in the tolerance-widened unit cube.

    Returns a bool for scalar inputs and a boolean array otherwise.
    NaN channels are out of gamut.
    """
    rgb = np.stack(np.broadcast_arrays(*(np.asarray(c, dtype=np.float64) for c in (R, G, B))), axis=-1)
    mask = in_gamut_mask(rgb, tolerance)
    if mask.ndim == 0:
        return bool(mask)
    return mask


def clamp_rgb(rgb) -> jnp.ndarray:
    """Hard-clamp channels into [0, 1]; idempotent and a no-op inside the cube."""
    return jnp.clip(jnp.asarray(rgb, dtype=float), 0.0, 1.0)
