"""
pipeline
========

Stage chaining from raw renotation rows to calibrated sRGB.

Includes:
- stages: add_tristimulus, adapt_grid, add_rgb, clamp_grid, synthesize_grid
- converter: MunsellConverter, the fitted end-to-end API
"""

from .converter import MunsellConverter
from .stages import (
    TABLE_CHROMAS,
    TABLE_VALUES,
    adapt_grid,
    add_rgb,
    add_tristimulus,
    clamp_grid,
    synthesize_grid,
)

__all__ = [
    "MunsellConverter",
    "add_tristimulus",
    "adapt_grid",
    "add_rgb",
    "clamp_grid",
    "synthesize_grid",
    "TABLE_VALUES",
    "TABLE_CHROMAS",
]
