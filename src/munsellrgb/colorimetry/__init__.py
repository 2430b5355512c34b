"""
colorimetry
===========

Fixed (non-fitted) color transforms.

This subpackage provides:
- conversions : xyY <-> XYZ with degenerate-chromaticity fallbacks.
- adaptation : Bradford Illuminant C -> D65 and normalized chromaticity.
- rgb : XYZ (D65) <-> sRGB, companding, hex formatting.
- gamut : sRGB gamut classification and clamping.
- constants : matrices, white points, model support ranges.

All array functions use jax.numpy and broadcast over leading
dimensions, so they can be composed with the fitted models and
differentiated.
"""

from .adaptation import adapt_c_to_d65, chromaticity
from .constants import (
    CHROMA_SUPPORT,
    VALUE_SUPPORT,
    WHITE_C_XY,
    WHITE_D65_XY,
)
from .conversions import XYZ_to_xyY, xyY_to_XYZ
from .gamut import DEFAULT_TOLERANCE, GamutConfig, clamp_rgb, in_gamut_mask, is_in_gamut
from .rgb import (
    rgb_to_hex,
    srgb_compand,
    srgb_decompand,
    srgb_to_xyz,
    xyz_to_linear_srgb,
    xyz_to_srgb,
)

__all__ = [
    # conversions
    "xyY_to_XYZ",
    "XYZ_to_xyY",
    # adaptation
    "adapt_c_to_d65",
    "chromaticity",
    # rgb
    "xyz_to_linear_srgb",
    "srgb_compand",
    "srgb_decompand",
    "xyz_to_srgb",
    "srgb_to_xyz",
    "rgb_to_hex",
    # gamut
    "GamutConfig",
    "DEFAULT_TOLERANCE",
    "is_in_gamut",
    "in_gamut_mask",
    "clamp_rgb",
    # constants
    "WHITE_C_XY",
    "WHITE_D65_XY",
    "VALUE_SUPPORT",
    "CHROMA_SUPPORT",
]
