"""
inverse.py
----------

Approximate inverse model: adapted chromaticity + luminance -> (V, C, HA).

The inverse is not solved exactly. Instead, a set of regressions maps the
polar form of the observed chromaticity about the D65 white point,

    a = 27.35 + atan2(dy, dx)   (degrees)
    m = |(dx, dy)|

back to Munsell coordinates:

- value          V ~ degree-7 polynomial in adapted Y, fitted on the grey
                 axis: the neutral samples of the grid plus evenly spaced
                 synthetic greys, which keep it monotonic up to Y = 1.
- chroma ratio   dc = C / m, piecewise by hemisphere of a and value:
                   (i)   a > 0
                   (ii)  a <= 0 and V > 5
                   (iii) a <= 0 and V <= 5
                 each linear in V (and V^2) plus sin(a), cos(a).
- hue correction da = HA - a (wrapped), piecewise by quadrant of a with
                 boundaries -90, 0, 90, each linear in (V, a, C). The
                 a < -90 quadrant leaves V <= 2 and V >= 10 out of its fit.

The estimate is a seed: V first, then C = dc(V, a) * m, then
HA = a + da(V, a, C). Exact recovery is only approximate and is best for
the grey axis; see munsellrgb.inference for iterative refinement.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
import numpy as np

from munsellrgb.colorimetry.adaptation import adapt_c_to_d65
from munsellrgb.colorimetry.constants import VALUE_SUPPORT, WHITE_C_XY, WHITE_D65_XY
from munsellrgb.colorimetry.conversions import xyY_to_XYZ
from munsellrgb.data.dataset import SampleGrid
from munsellrgb.data.hues import ACHROMATIC_ANGLE
from munsellrgb.data.normalize import grey_luminance
from munsellrgb.utils.math import polar_about, wrap_degrees

from .basis import Basis, LinearFit, fit_least_squares, intercept, linear, periodic, polynomial
from .piecewise import PieceSpec, PiecewiseModel, fit_piecewise

REQUIRED_COLUMNS = ("value", "chroma", "hue_angle", "Y_d65", "cie_x", "cie_y")


@dataclass
class InverseConfig:
    """
    Calibration of the inverse model.

    Attributes
    ----------
    angle_offset : float, default=27.35
        Degrees added to atan2(dy, dx) to form the polar angle a.
    value_degree : int, default=7
        Degree of the value-from-luminance polynomial.
    value_support_points : int, default=101
        Number of evenly spaced grey-axis values over [0, 10] added to the
        neutral samples of the grid when fitting the value polynomial.
    hemisphere_split : float, default=0.0
        Angle separating the chroma-ratio hemispheres.
    value_split : float, default=5.0
        Value separating the two lower-hemisphere chroma-ratio pieces.
    quadrant_bounds : tuple[float, float, float], default=(-90.0, 0.0, 90.0)
        Angle boundaries of the hue-correction quadrants.
    unstable_values : tuple[float, float], default=(2.0, 10.0)
        Samples with V <= low or V >= high are left out of the fit of the
        lowest quadrant.
    achromatic_radius : float, default=1e-3
        Chromaticity distance from the white point below which a point is
        reported as neutral (chroma 0, hue-angle -1).
    white_xy : tuple[float, float], default=WHITE_D65_XY
        Center of the polar coordinates.
    """

    angle_offset: float = 27.35
    value_degree: int = 7
    value_support_points: int = 101
    hemisphere_split: float = 0.0
    value_split: float = 5.0
    quadrant_bounds: tuple[float, float, float] = (-90.0, 0.0, 90.0)
    unstable_values: tuple[float, float] = (2.0, 10.0)
    achromatic_radius: float = 1e-3
    white_xy: tuple[float, float] = WHITE_D65_XY

    def __post_init__(self):
        if self.value_degree < 1:
            raise ValueError(f"value_degree must be >= 1, got {self.value_degree}")
        if self.value_support_points < 0:
            raise ValueError(
                f"value_support_points must be non-negative, got {self.value_support_points}"
            )
        if list(self.quadrant_bounds) != sorted(self.quadrant_bounds):
            raise ValueError(f"quadrant_bounds must be increasing, got {self.quadrant_bounds}")
        if self.achromatic_radius < 0:
            raise ValueError(
                f"achromatic_radius must be non-negative, got {self.achromatic_radius}"
            )

    def value_basis(self) -> Basis:
        return polynomial("Y", self.value_degree, with_intercept=True)

    def grey_support(self) -> tuple[np.ndarray, np.ndarray]:
        """Evenly spaced (value, adapted Y) pairs along the grey axis."""
        V = np.linspace(*VALUE_SUPPORT, self.value_support_points)
        XYZ = adapt_c_to_d65(xyY_to_XYZ(*WHITE_C_XY, grey_luminance(V) / 100.0))
        return V, np.asarray(XYZ[..., 1])

    def chroma_ratio_specs(self) -> tuple[PieceSpec, ...]:
        split, v_split = self.hemisphere_split, self.value_split
        trig = periodic("angle", "sin") + periodic("angle", "cos")
        return (
            PieceSpec(
                "upper",
                domain=lambda value, angle, **_: angle > split,
                basis=intercept() + polynomial("value", 2) + trig,
            ),
            PieceSpec(
                "lower_light",
                domain=lambda value, angle, **_: (angle <= split) & (value > v_split),
                basis=intercept() + linear("value") + trig,
            ),
            PieceSpec(
                "lower_dark",
                domain=lambda value, angle, **_: (angle <= split) & (value <= v_split),
                basis=intercept() + polynomial("value", 2) + trig,
            ),
        )

    def hue_correction_specs(self) -> tuple[PieceSpec, ...]:
        b1, b2, b3 = self.quadrant_bounds
        v_lo, v_hi = self.unstable_values
        basis = intercept() + linear("value", "angle", "chroma")
        return (
            PieceSpec(
                "q1",
                domain=lambda angle, **_: angle < b1,
                basis=basis,
                fit_filter=lambda value, **_: (value > v_lo) & (value < v_hi),
            ),
            PieceSpec("q2", domain=lambda angle, **_: (angle >= b1) & (angle < b2), basis=basis),
            PieceSpec("q3", domain=lambda angle, **_: (angle >= b2) & (angle < b3), basis=basis),
            PieceSpec("q4", domain=lambda angle, **_: angle >= b3, basis=basis),
        )


@dataclass(frozen=True, eq=False)
class InverseModel:
    """
    Fitted approximate inverse (adapted xy, Y) -> (value, chroma, hue_angle).

    Attributes
    ----------
    value_fit : LinearFit
        V as a function of adapted Y.
    chroma_ratio : PiecewiseModel
        dc = C / m as a function of (value, angle).
    hue_correction : PiecewiseModel
        da = HA - a as a function of (value, angle, chroma).
    config : InverseConfig
    """

    value_fit: LinearFit
    chroma_ratio: PiecewiseModel
    hue_correction: PiecewiseModel
    config: InverseConfig

    @property
    def fits(self) -> dict[str, LinearFit]:
        out = {self.value_fit.name: self.value_fit}
        out.update(self.chroma_ratio.fits)
        out.update(self.hue_correction.fits)
        return out

    def polar(self, adapted_chromaticity) -> tuple[jnp.ndarray, jnp.ndarray]:
        """Polar angle a (degrees, offset applied) and radius m about the white point."""
        angle, radius = polar_about(adapted_chromaticity, self.config.white_xy)
        return angle + self.config.angle_offset, radius

    def estimate(self, adapted_chromaticity, adapted_Y) -> tuple[jnp.ndarray, ...]:
        """
        Estimate Munsell coordinates of D65 chromaticity and luminance.

        Parameters
        ----------
        adapted_chromaticity : array-like, shape (..., 2)
            CIE (x, y) under D65.
        adapted_Y : array-like, shape (...)
            Luminance in [0, 1].

        Returns
        -------
        value, chroma, hue_angle : jnp.ndarray
            Approximate seeds. Chroma is floored at 0; points within
            achromatic_radius of the white point get chroma 0 and
            hue-angle -1.
        """
        angle, radius = self.polar(adapted_chromaticity)
        Y = jnp.asarray(adapted_Y, dtype=float)
        angle, radius, Y = jnp.broadcast_arrays(angle, radius, Y)

        value = self.value_fit(Y=Y)
        chroma = jnp.maximum(self.chroma_ratio(value=value, angle=angle) * radius, 0.0)
        correction = self.hue_correction(value=value, angle=angle, chroma=chroma)
        hue_angle = jnp.mod(angle + correction, 360.0)

        achromatic = radius < self.config.achromatic_radius
        chroma = jnp.where(achromatic, 0.0, chroma)
        hue_angle = jnp.where(achromatic, ACHROMATIC_ANGLE, hue_angle)
        return value, chroma, hue_angle


def fit_inverse_model(grid: SampleGrid, config: InverseConfig | None = None) -> InverseModel:
    """
    Fit the inverse model to an adapted (and usually outlier-filtered) grid.

    Parameters
    ----------
    grid : SampleGrid
        Columns value, chroma, hue_angle, Y_d65, cie_x, cie_y.
    config : InverseConfig, optional

    Returns
    -------
    InverseModel

    Raises
    ------
    ValueError
        If required columns are missing.
    InsufficientDataError
        If a piece of a dispatch table has too few samples.
    """
    config = config or InverseConfig()
    missing = [c for c in REQUIRED_COLUMNS if c not in grid]
    if missing:
        raise ValueError(f"fit_inverse_model: grid at stage '{grid.stage}' lacks {missing}")

    V = np.asarray(grid["value"])
    C = np.asarray(grid["chroma"])
    HA = np.asarray(grid["hue_angle"])
    Y = np.asarray(grid["Y_d65"])
    xy = grid.to_numpy("cie_x", "cie_y")

    grey = C == 0
    support_V, support_Y = config.grey_support()
    value_fit = fit_least_squares(
        config.value_basis(),
        np.concatenate([V[grey], support_V]),
        name="value",
        Y=np.concatenate([Y[grey], support_Y]),
    )

    angle, radius = (np.asarray(a) for a in polar_about(xy, config.white_xy))
    angle = angle + config.angle_offset
    chromatic = (C > 0) & (HA >= 0) & (radius > 0)
    safe_radius = np.where(chromatic, radius, 1.0)

    chroma_ratio = fit_piecewise(
        "chroma_ratio",
        config.chroma_ratio_specs(),
        np.where(chromatic, C / safe_radius, np.nan),
        mask=chromatic,
        value=V,
        angle=angle,
    )
    hue_correction = fit_piecewise(
        "hue_correction",
        config.hue_correction_specs(),
        np.asarray(wrap_degrees(HA - angle)),
        mask=chromatic,
        value=V,
        angle=angle,
        chroma=C,
    )
    return InverseModel(
        value_fit=value_fit,
        chroma_ratio=chroma_ratio,
        hue_correction=hue_correction,
        config=config,
    )
