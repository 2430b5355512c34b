"""
diagnostics.py
--------------

Fit diagnostics for the forward and inverse models.

Provides tools for:
- Per-fit summaries (sample count, RMSE, R^2, coefficients)
- Inverse round-trip errors against known Munsell coordinates

Examples
--------
>>> from munsellrgb.utils.diagnostics import fit_summary, print_fit_summary
>>> summary = fit_summary(converter)
>>> print(f"grey_Y rmse: {summary['grey_Y']['rmse']:.2e}")
>>> print_fit_summary(converter.forward_model)

>>> from munsellrgb.utils.diagnostics import round_trip_errors
>>> errors = round_trip_errors(converter, converter.stages["filtered"])
>>> float(errors["value"].mean())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from .math import angular_difference

if TYPE_CHECKING:
    from munsellrgb.data import SampleGrid
    from munsellrgb.pipeline import MunsellConverter

ROUND_TRIP_COLUMNS = ("value", "chroma", "hue_angle", "cie_x", "cie_y", "Y_d65")


def fit_summary(model: Any) -> dict[str, dict[str, Any]]:
    """
    Summarize every component regression of a fitted model.

    Parameters
    ----------
    model : ForwardModel | InverseModel | MunsellConverter
        Anything exposing a ``fits`` mapping of LinearFit objects.

    Returns
    -------
    summary : dict[str, dict[str, Any]]
        Keyed by fit name, each with:
        - "n_samples": number of fitting samples
        - "rmse": root mean squared residual
        - "r2": coefficient of determination
        - "coefficients": dict of term label -> coefficient
    """
    fits = getattr(model, "fits", None)
    if fits is None:
        raise TypeError(f"{type(model).__name__} has no component fits to summarize")
    return {
        name: {
            "n_samples": fit.n_samples,
            "rmse": fit.rmse,
            "r2": fit.r2,
            "coefficients": fit.coefficients(),
        }
        for name, fit in fits.items()
    }


def print_fit_summary(model: Any, *, coefficients: bool = False) -> None:
    """
    Print a human-readable fit summary.

    Examples
    --------
    >>> print_fit_summary(converter.forward_model)
    Fit Summary (7 fits):

    grey_X:
      n = 440, rmse = 1.234e-04, r2 = 1.0000
    """
    summary = fit_summary(model)
    print(f"Fit Summary ({len(summary)} fits):\n")
    for name, stats in summary.items():
        print(f"{name}:")
        print(
            f"  n = {stats['n_samples']}, rmse = {stats['rmse']:.3e}, r2 = {stats['r2']:.4f}"
        )
        if coefficients:
            for label, coef in stats["coefficients"].items():
                print(f"    {label:>28s}: {coef: .6e}")


def round_trip_errors(converter: MunsellConverter, grid: SampleGrid) -> dict[str, np.ndarray]:
    """
    Absolute inverse errors on samples with known Munsell coordinates.

    The inverse seed (no refinement) is computed from each sample's adapted
    chromaticity and luminance and compared to its (value, chroma,
    hue_angle).

    Parameters
    ----------
    converter : MunsellConverter
        Fitted converter.
    grid : SampleGrid
        Adapted grid, e.g. ``converter.stages["filtered"]``.

    Returns
    -------
    dict[str, np.ndarray]
        "value", "chroma" and "hue_angle" absolute errors per sample. The
        hue-angle error is the shorter-arc difference and is NaN for
        neutral samples.
    """
    missing = [c for c in ROUND_TRIP_COLUMNS if c not in grid]
    if missing:
        raise ValueError(f"round_trip_errors: grid at stage '{grid.stage}' lacks {missing}")

    value, chroma, hue_angle = converter.inverse_model.estimate(
        grid.to_numpy("cie_x", "cie_y"), grid["Y_d65"]
    )
    known_hue = np.asarray(grid["hue_angle"])
    chromatic = (np.asarray(grid["chroma"]) > 0) & (known_hue >= 0)
    hue_error = np.abs(np.asarray(angular_difference(hue_angle, known_hue)))
    return {
        "value": np.abs(np.asarray(value) - grid["value"]),
        "chroma": np.abs(np.asarray(chroma) - grid["chroma"]),
        "hue_angle": np.where(chromatic, hue_error, np.nan),
    }
