"""
constants.py
------------

Fixed colorimetric constants.

Matrices are stored the way they are published (acting on column
vectors) and pre-transposed for the row-vector convention used
throughout the package:

    XYZ_D65 = XYZ_C @ M_C_TO_D65_T
    RGB_lin = XYZ_D65 @ M_XYZ_TO_SRGB_T

References:
    - Lindbloom, B. "Chromatic Adaptation" (Bradford, Illuminant C -> D65).
    - IEC 61966-2-1:1999 (sRGB Standard).
"""

from typing import Final

import numpy as np

# Chromaticity of the reference whites (CIE 1931 2 degree observer)
WHITE_C_XY: Final[tuple[float, float]] = (0.31006, 0.31616)
WHITE_D65_XY: Final[tuple[float, float]] = (0.31271, 0.32902)

# Bradford adaptation, Illuminant C -> D65
_M_C_TO_D65_BASE = np.array([
    [ 0.9904476, -0.0071683, -0.0116156],
    [-0.0123712,  1.0155950, -0.0029282],
    [-0.0035635,  0.0067697,  0.9181569],
], dtype=np.float64)
M_C_TO_D65_T: Final[np.ndarray] = _M_C_TO_D65_BASE.T.copy()

# sRGB primaries, D65
_M_XYZ_TO_SRGB_BASE = np.array([
    [ 3.2404542, -1.5371385, -0.4985314],
    [-0.9692660,  1.8760108,  0.0415560],
    [ 0.0556434, -0.2040259,  1.0572252],
], dtype=np.float64)
M_XYZ_TO_SRGB_T: Final[np.ndarray] = _M_XYZ_TO_SRGB_BASE.T.copy()

_M_SRGB_TO_XYZ_BASE = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
], dtype=np.float64)
M_SRGB_TO_XYZ_T: Final[np.ndarray] = _M_SRGB_TO_XYZ_BASE.T.copy()

# sRGB transfer function
SRGB_LINEAR_THRESHOLD: Final[float] = 0.0031308
SRGB_ENCODED_THRESHOLD: Final[float] = 0.04045
SRGB_GAMMA: Final[float] = 2.4
SRGB_SLOPE: Final[float] = 12.92
SRGB_OFFSET: Final[float] = 0.055

# Range of the renotation data the fitted models are supported on
VALUE_SUPPORT: Final[tuple[float, float]] = (0.0, 10.0)
CHROMA_SUPPORT: Final[tuple[float, float]] = (0.0, 30.0)
