"""
munsellrgb.model
================

Model-layer API: everything fitted in one place.

Includes
--------
- Least squares over named bases (Basis, LinearFit, fit_least_squares)
- Ordered dispatch tables (PiecewiseModel, fit_piecewise)
- Outlier filter (OutlierConfig, filter_outliers)
- Forward model (ForwardConfig, ForwardModel, fit_forward_model)
- Inverse model (InverseConfig, InverseModel, fit_inverse_model)

All models evaluate with JAX arrays (jax.numpy as jnp) so they can be
differentiated and refined with Optax.

Typical usage
-------------
    from munsellrgb.model import fit_forward_model, fit_inverse_model
"""

from .basis import (
    Basis,
    LinearFit,
    Term,
    fit_least_squares,
    intercept,
    linear,
    periodic,
    polynomial,
)
from .forward import ForwardConfig, ForwardModel, check_support, fit_forward_model
from .inverse import InverseConfig, InverseModel, fit_inverse_model
from .outliers import KNOWN_BAD_SAMPLES, OutlierConfig, filter_outliers, outlier_mask
from .piecewise import Piece, PieceSpec, PiecewiseModel, fit_piecewise

__all__ = [
    # Least squares
    "Term",
    "Basis",
    "LinearFit",
    "intercept",
    "linear",
    "polynomial",
    "periodic",
    "fit_least_squares",
    # Dispatch tables
    "PieceSpec",
    "Piece",
    "PiecewiseModel",
    "fit_piecewise",
    # Outliers
    "KNOWN_BAD_SAMPLES",
    "OutlierConfig",
    "outlier_mask",
    "filter_outliers",
    # Forward
    "ForwardConfig",
    "ForwardModel",
    "check_support",
    "fit_forward_model",
    # Inverse
    "InverseConfig",
    "InverseModel",
    "fit_inverse_model",
]
