"""
inference
=========

Refinement engines for inverse estimates.

This subpackage provides strategies for improving the approximate
(value, chroma, hue_angle) seeds of the inverse model against the
forward model.

MVP implementations
-------------------
- GradientRefiner : squared (x, y, Y) error minimized with Optax optimizers.
"""

from .base import Refiner
from .gradient_refiner import GradientRefiner

# Registry for string-based refiner selection
REFINERS = {
    "gradient": GradientRefiner,
}

__all__ = [
    "Refiner",
    "GradientRefiner",
    "REFINERS",
]
