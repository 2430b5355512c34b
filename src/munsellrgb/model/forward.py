"""
forward.py
----------

Forward model: continuous (hue_angle, value, chroma) -> XYZ (D65).

Fitting the raw tristimulus directly against hue and chroma fails because
both the amplitude and the phase of the hue dependence change with value
and chroma. The model is therefore factored per channel c in {X, Z}:

    c(HA, V, C) = grey_c(V) + shape_c(HA, C) * sd_c(V)

1. grey axis   grey_c(V): degree-5 polynomial in V without intercept,
               fitted on the chroma 0 samples (also for Y).
2. offset      actual - grey_c(V) for every sample.
3. amplitude   sd_c(V): degree-3 polynomial fitted to the per-value
               standard deviation of the offset across hues, taken from
               the reference chroma slice (chroma 4).
4. shape       offset / sd_c(V) regressed on chroma and periodic terms of
               the hue-angle:
                   X: C, C^2, C^3, C cos(HA + 16)
                   Z: C, C^2, C sin(HA + 13), C sin(2 (HA - 31))
               Every shape term vanishes at C = 0, so the grey axis is
               exactly the grey fit and does not depend on the hue-angle.

Y depends on value alone: Y(V) = grey_Y(V).

Samples with 0 < V < 1 are excluded from the amplitude and shape fits;
the near-black region is undersampled and numerically unstable. The phase
constants are empirical calibration data for the sRGB / D65 / renotation
combination and are kept in ForwardConfig.

Connections
-----------
- fit_forward_model() consumes a filtered, adapted SampleGrid.
- ForwardModel.predict() feeds colorimetry.rgb and the pipeline.
- ForwardModel.predict_raw() is the unchecked, JAX-traceable path used by
  the refinement engines.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from dataclasses import dataclass

import jax.numpy as jnp
import numpy as np

from munsellrgb.colorimetry.constants import CHROMA_SUPPORT, VALUE_SUPPORT
from munsellrgb.data.dataset import SampleGrid
from munsellrgb.errors import OutOfSupportWarning

from .basis import Basis, LinearFit, fit_least_squares, periodic, polynomial

CHANNELS = ("X", "Y", "Z")
CHROMATIC_CHANNELS = ("X", "Z")
REQUIRED_COLUMNS = ("value", "chroma", "hue_angle", "X_d65", "Y_d65", "Z_d65")


@dataclass
class ForwardConfig:
    """
    Calibration of the forward model.

    Attributes
    ----------
    grey_degree : int, default=5
        Degree of the grey-axis polynomials (no intercept).
    amplitude_degree : int, default=3
        Degree of the standard-deviation polynomials (with intercept).
    reference_chroma : float, default=4.0
        Chroma slice whose per-value spread defines sd(V).
    x_shape_degree, z_shape_degree : int, default=(3, 2)
        Chroma polynomial degree of the X and Z shape models. The shape
        regressions carry no intercept: every term vanishes at C = 0, so
        greys reduce exactly to the grey axis. Coefficients therefore differ
        from an intercept-bearing fit of the same terms.
    x_phase : float, default=16.0
        Phase (degrees) of C cos(HA + x_phase) in the X shape model.
    z_phase : float, default=13.0
        Phase (degrees) of C sin(HA + z_phase) in the Z shape model.
    z_harmonic_phase : float, default=-31.0
        Phase (degrees) of C sin(2 (HA + z_harmonic_phase)).
    unstable_values : tuple[float, float], default=(0.0, 1.0)
        Open value interval left out of the amplitude and shape fits.
    """

    grey_degree: int = 5
    amplitude_degree: int = 3
    reference_chroma: float = 4.0
    x_shape_degree: int = 3
    z_shape_degree: int = 2
    x_phase: float = 16.0
    z_phase: float = 13.0
    z_harmonic_phase: float = -31.0
    unstable_values: tuple[float, float] = (0.0, 1.0)

    def __post_init__(self):
        for name in ("grey_degree", "amplitude_degree", "x_shape_degree", "z_shape_degree"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.reference_chroma <= 0:
            raise ValueError(f"reference_chroma must be positive, got {self.reference_chroma}")

    def grey_basis(self) -> Basis:
        return polynomial("value", self.grey_degree)

    def amplitude_basis(self) -> Basis:
        return polynomial("value", self.amplitude_degree, with_intercept=True)

    def shape_basis(self, channel: str) -> Basis:
        if channel == "X":
            return polynomial("chroma", self.x_shape_degree) + periodic(
                "hue_angle", "cos", phase=self.x_phase, scale="chroma"
            )
        if channel == "Z":
            return (
                polynomial("chroma", self.z_shape_degree)
                + periodic("hue_angle", "sin", phase=self.z_phase, scale="chroma")
                + periodic(
                    "hue_angle", "sin", phase=self.z_harmonic_phase, harmonic=2, scale="chroma"
                )
            )
        raise ValueError(f"No shape model for channel '{channel}'. Use 'X' or 'Z'.")


def check_support(value, chroma, *, stacklevel: int = 3) -> bool:
    """
    Warn when (value, chroma) leaves the range the models were fitted on.

    Returns True when every point is inside the support.
    """
    v = np.asarray(value, dtype=np.float64)
    c = np.asarray(chroma, dtype=np.float64)
    outside = np.any((v < VALUE_SUPPORT[0]) | (v > VALUE_SUPPORT[1])) or np.any(
        (c < CHROMA_SUPPORT[0]) | (c > CHROMA_SUPPORT[1])
    )
    if outside:
        warnings.warn(
            f"Evaluating outside the fitted support (value in {VALUE_SUPPORT}, "
            f"chroma in {CHROMA_SUPPORT}); accuracy is not guaranteed.",
            OutOfSupportWarning,
            stacklevel=stacklevel,
        )
    return not outside


@dataclass(frozen=True, eq=False)
class ForwardModel:
    """
    Fitted forward model (hue_angle, value, chroma) -> XYZ (D65).

    Attributes
    ----------
    grey : Mapping[str, LinearFit]
        Grey-axis fits for "X", "Y", "Z" (input: value).
    amplitude : Mapping[str, LinearFit]
        Standard-deviation fits for "X", "Z" (input: value).
    shape : Mapping[str, LinearFit]
        Standardized shape fits for "X", "Z" (inputs: hue_angle, chroma).
    config : ForwardConfig

    Examples
    --------
    >>> model = fit_forward_model(filtered_grid)
    >>> XYZ = model.predict(180.0, 6.0, 10.0)  # shape (3,)
    >>> grey = model.grey_axis(6.0)
    """

    grey: Mapping[str, LinearFit]
    amplitude: Mapping[str, LinearFit]
    shape: Mapping[str, LinearFit]
    config: ForwardConfig

    @property
    def fits(self) -> dict[str, LinearFit]:
        """All component fits keyed by name."""
        out = {}
        for group in (self.grey, self.amplitude, self.shape):
            out.update({fit.name: fit for fit in group.values()})
        return out

    def grey_axis(self, value) -> jnp.ndarray:
        """XYZ of the grey axis, shape (..., 3)."""
        value = jnp.asarray(value, dtype=float)
        return jnp.stack([self.grey[ch](value=value) for ch in CHANNELS], axis=-1)

    def predict(self, hue_angle, value, chroma) -> jnp.ndarray:
        """
        Predict D65 tristimulus.

        Parameters
        ----------
        hue_angle, value, chroma : array-like
            Broadcast-compatible Munsell coordinates, hue-angle in degrees.

        Returns
        -------
        jnp.ndarray, shape (..., 3)
            (X, Y, Z) under D65.

        Warns
        -----
        OutOfSupportWarning
            If value leaves [0, 10] or chroma leaves [0, 30].
        """
        check_support(value, chroma)
        return self.predict_raw(hue_angle, value, chroma)

    __call__ = predict

    def predict_raw(self, hue_angle, value, chroma) -> jnp.ndarray:
        """predict() without the support check; safe inside jax.jit / jax.grad."""
        hue_angle, value, chroma = jnp.broadcast_arrays(
            jnp.asarray(hue_angle, dtype=float),
            jnp.asarray(value, dtype=float),
            jnp.asarray(chroma, dtype=float),
        )
        out = {"Y": self.grey["Y"](value=value)}
        for ch in CHROMATIC_CHANNELS:
            shape = self.shape[ch](hue_angle=hue_angle, chroma=chroma)
            out[ch] = self.grey[ch](value=value) + shape * self.amplitude[ch](value=value)
        return jnp.stack([out[ch] for ch in CHANNELS], axis=-1)


def _spread_by_value(value: np.ndarray, offset: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Sample standard deviation (ddof=1) of offset at each distinct value."""
    levels, spreads = [], []
    for v in np.unique(value):
        group = offset[value == v]
        if group.size >= 2:
            levels.append(v)
            spreads.append(np.std(group, ddof=1))
    return np.asarray(levels, dtype=np.float64), np.asarray(spreads, dtype=np.float64)


def fit_forward_model(grid: SampleGrid, config: ForwardConfig | None = None) -> ForwardModel:
    """
    Fit the forward model to an adapted (and usually outlier-filtered) grid.

    Parameters
    ----------
    grid : SampleGrid
        Columns value, chroma, hue_angle, X_d65, Y_d65, Z_d65.
    config : ForwardConfig, optional

    Returns
    -------
    ForwardModel

    Raises
    ------
    ValueError
        If required columns are missing.
    InsufficientDataError
        If a component regression has too few samples (e.g. no grey axis,
        or fewer than amplitude_degree + 1 values in the reference slice).
    """
    config = config or ForwardConfig()
    missing = [c for c in REQUIRED_COLUMNS if c not in grid]
    if missing:
        raise ValueError(f"fit_forward_model: grid at stage '{grid.stage}' lacks {missing}")

    V = np.asarray(grid["value"])
    C = np.asarray(grid["chroma"])
    HA = np.asarray(grid["hue_angle"])
    targets = {ch: np.asarray(grid[f"{ch}_d65"]) for ch in CHANNELS}

    is_grey = C == 0
    grey = {
        ch: fit_least_squares(
            config.grey_basis(), targets[ch][is_grey], name=f"grey_{ch}", value=V[is_grey]
        )
        for ch in CHANNELS
    }

    lo, hi = config.unstable_values
    stable = ~((V > lo) & (V < hi))
    reference = stable & (C == config.reference_chroma)

    amplitude, shape = {}, {}
    for ch in CHROMATIC_CHANNELS:
        offset = targets[ch] - np.asarray(grey[ch](value=V))

        levels, spreads = _spread_by_value(V[reference], offset[reference])
        amplitude[ch] = fit_least_squares(
            config.amplitude_basis(), spreads, name=f"sd_{ch}", value=levels
        )

        sd = np.asarray(amplitude[ch](value=V))
        usable = stable & (sd > 0)
        shape[ch] = fit_least_squares(
            config.shape_basis(ch),
            offset[usable] / sd[usable],
            name=f"shape_{ch}",
            hue_angle=HA[usable],
            chroma=C[usable],
        )

    return ForwardModel(grey=grey, amplitude=amplitude, shape=shape, config=config)
