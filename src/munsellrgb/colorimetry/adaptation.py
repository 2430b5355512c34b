"""
adaptation.py
-------------

Chromatic adaptation from Illuminant C (the renotation reference white)
to D65 (the sRGB reference white) with one fixed Bradford matrix, and the
normalized chromaticity of the adapted tristimulus.
"""

from __future__ import annotations

import jax.numpy as jnp

from .constants import M_C_TO_D65_T, WHITE_D65_XY
from .conversions import XYZ_to_xyY


def adapt_c_to_d65(XYZ) -> jnp.ndarray:
    """
    Adapt Illuminant C tristimulus to D65.

    Parameters
    ----------
    XYZ : array-like, shape (..., 3)
        Tristimulus values referenced to Illuminant C.

    Returns
    -------
    jnp.ndarray, shape (..., 3)
        XYZ_D65 = XYZ_C @ M, with M the transposed Bradford C -> D65 matrix.
    """
    XYZ = jnp.asarray(XYZ, dtype=float)
    if XYZ.shape[-1] != 3:
        raise ValueError(f"adapt_c_to_d65: last dimension must be 3, got {XYZ.shape[-1]}")
    return XYZ @ jnp.asarray(M_C_TO_D65_T)


def chromaticity(XYZ) -> jnp.ndarray:
    """
    Normalized chromaticity (CIE x, y) of D65-referenced tristimulus.

    Returns
    -------
    jnp.ndarray, shape (..., 2)
        (X / S, Y / S) with S = X + Y + Z. When S == 0 the D65 white point
        (0.31271, 0.32902) is returned instead of NaN.
    """
    return XYZ_to_xyY(XYZ, WHITE_D65_XY)[..., :2]
