"""
outliers.py
-----------

Deterministic removal of implausible renotation samples before fitting.

This is a static exclusion rule, not a statistical test: samples whose
adapted tristimulus falls outside fixed bounds are dropped, together with
an explicit list of known measurement errors.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from munsellrgb.data.dataset import Key, SampleGrid

# Known bad renotation entry (hue, value, chroma)
KNOWN_BAD_SAMPLES: tuple[Key, ...] = (("7.5GY", 9.0, 2.0),)


@dataclass
class OutlierConfig:
    """
    Bounds of the outlier filter.

    Attributes
    ----------
    min_X : float, default=-0.2
        Lower bound on adapted X.
    min_Z, max_Z : float, default=(-0.2, 3.0)
        Bounds on adapted Z.
    excluded : tuple of (hue, value, chroma), default=KNOWN_BAD_SAMPLES
        Keys dropped unconditionally.
    """

    min_X: float = -0.2
    min_Z: float = -0.2
    max_Z: float = 3.0
    excluded: tuple[Key, ...] = KNOWN_BAD_SAMPLES

    def __post_init__(self):
        if self.min_Z > self.max_Z:
            raise ValueError(f"min_Z ({self.min_Z}) must not exceed max_Z ({self.max_Z})")
        self.excluded = tuple((str(h), float(v), float(c)) for h, v, c in self.excluded)


def outlier_mask(grid: SampleGrid, config: OutlierConfig | None = None) -> np.ndarray:
    """True for the samples the filter rejects."""
    config = config or OutlierConfig()
    X = grid["X_d65"]
    Z = grid["Z_d65"]
    out_of_range = (X < config.min_X) | (Z < config.min_Z) | (Z > config.max_Z)
    excluded = set(config.excluded)
    listed = np.array([sample.key in excluded for sample in grid], dtype=bool)
    return out_of_range | listed


def filter_outliers(grid: SampleGrid, config: OutlierConfig | None = None) -> SampleGrid:
    """
    Drop outliers from an adapted grid.

    Parameters
    ----------
    grid : SampleGrid
        Grid with X_d65 and Z_d65 columns.
    config : OutlierConfig, optional

    Returns
    -------
    SampleGrid
        Filtered copy, stage "filtered".
    """
    return grid.filter(~outlier_mask(grid, config), stage="filtered")
