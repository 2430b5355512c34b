"""
base.py
-------

Abstract base class for refinement engines.

The inverse model only gives approximate seeds. A refiner improves a seed
(value, chroma, hue_angle) so that the forward model reproduces a target
chromaticity and luminance more closely.

All refiners (GradientRefiner, ...) subclass from this base.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Refiner(ABC):
    """
    Abstract interface for refinement engines.

    Methods
    -------
    refine(forward_model, target_xyY, seed) -> (value, chroma, hue_angle)
        Improve seed Munsell coordinates against target D65 xyY.
    """

    @abstractmethod
    def refine(self, forward_model: Any, target_xyY: Any, seed: Any) -> Any:
        """
        Refine seed coordinates.

        Parameters
        ----------
        forward_model : ForwardModel
            Fitted forward model used as the objective.
        target_xyY : array-like, shape (..., 3)
            Target D65 chromaticity (x, y) and luminance Y.
        seed : tuple of array-like
            (value, chroma, hue_angle) from InverseModel.estimate.

        Returns
        -------
        tuple of jnp.ndarray
            Refined (value, chroma, hue_angle).
        """
        ...
