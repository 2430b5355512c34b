"""
munsellrgb.data
===============

submodule for handling Munsell renotation data.

Includes:
- dataset: Sample, SampleGrid (immutable, stage-tagged column store)
- hues: the 40-step hue wheel and hue-angle lookup
- normalize: grey-axis synthesis and grid normalization
"""

from .dataset import COLUMNS, RAW_COLUMNS, Sample, SampleGrid
from .hues import HUE_NAMES, NEUTRAL, hue_angle, hue_angles, hue_name
from .normalize import grey_luminance, normalize_grid, synthesize_greys

__all__ = [
    "Sample",
    "SampleGrid",
    "COLUMNS",
    "RAW_COLUMNS",
    "HUE_NAMES",
    "NEUTRAL",
    "hue_angle",
    "hue_angles",
    "hue_name",
    "grey_luminance",
    "synthesize_greys",
    "normalize_grid",
]
