"""
stages.py
---------

Grid-level pipeline stages.

Each stage is a pure function from one immutable SampleGrid to a new one,
appending the columns it derives and retagging the stage:

    normalized -> add_tristimulus -> tristimulus
               -> adapt_grid      -> adapted
               -> filter_outliers -> filtered
               -> add_rgb         -> rgb
               -> clamp_grid      -> clamped

synthesize_grid() builds a dense grid from a fitted forward model
(stage "synthesized"), which then runs through add_rgb and clamp_grid.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from munsellrgb.colorimetry.adaptation import adapt_c_to_d65, chromaticity
from munsellrgb.colorimetry.conversions import xyY_to_XYZ
from munsellrgb.colorimetry.gamut import GamutConfig, clamp_rgb, in_gamut_mask
from munsellrgb.colorimetry.rgb import xyz_to_srgb
from munsellrgb.data.dataset import SampleGrid
from munsellrgb.data.hues import ACHROMATIC_ANGLE, HUE_NAMES, NEUTRAL, hue_angles
from munsellrgb.data.normalize import GREY_VALUES
from munsellrgb.model.forward import ForwardModel

TABLE_VALUES: tuple[float, ...] = tuple(float(v) for v in range(1, 10))
TABLE_CHROMAS: tuple[float, ...] = tuple(float(c) for c in range(2, 25, 2))


def _require(grid: SampleGrid, stage_name: str, names: Sequence[str]) -> None:
    missing = [c for c in names if c not in grid]
    if missing:
        raise ValueError(f"{stage_name}: grid at stage '{grid.stage}' lacks {missing}")


def add_tristimulus(grid: SampleGrid) -> SampleGrid:
    """
    Append source X and Z from (x, y, Y); stage "tristimulus".

    The Y column keeps the source luminance. Rows with y == 0 get X = Z = 0
    and are treated as black (0, 0, 0) by adapt_grid.
    """
    _require(grid, "add_tristimulus", ("x", "y", "Y"))
    XYZ = np.asarray(xyY_to_XYZ(grid["x"], grid["y"], grid["Y"]))
    return grid.with_columns("tristimulus", X=XYZ[:, 0], Z=XYZ[:, 2])


def adapt_grid(grid: SampleGrid) -> SampleGrid:
    """Append D65 tristimulus and chromaticity; stage "adapted"."""
    _require(grid, "adapt_grid", ("X", "Y", "Z", "x", "y"))
    source = xyY_to_XYZ(grid["x"], grid["y"], grid["Y"])
    XYZ = np.asarray(adapt_c_to_d65(source))
    xy = np.asarray(chromaticity(XYZ))
    return grid.with_columns(
        "adapted",
        X_d65=XYZ[:, 0],
        Y_d65=XYZ[:, 1],
        Z_d65=XYZ[:, 2],
        cie_x=xy[:, 0],
        cie_y=xy[:, 1],
    )


def add_rgb(grid: SampleGrid) -> SampleGrid:
    """Append companded, unclamped sRGB; stage "rgb"."""
    _require(grid, "add_rgb", ("X_d65", "Y_d65", "Z_d65"))
    rgb = np.asarray(xyz_to_srgb(grid.to_numpy("X_d65", "Y_d65", "Z_d65")))
    return grid.with_columns("rgb", R=rgb[:, 0], G=rgb[:, 1], B=rgb[:, 2])


def clamp_grid(grid: SampleGrid, config: GamutConfig | None = None) -> SampleGrid:
    """
    Keep in-gamut samples and hard-clamp them into the sRGB cube.

    Parameters
    ----------
    grid : SampleGrid
        Grid with R, G, B columns.
    config : GamutConfig, optional

    Returns
    -------
    SampleGrid
        Stage "clamped": samples whose channels lie within the tolerance
        band and, unless grey, whose value lies in config.value_range,
        with R_clamped, G_clamped, B_clamped appended.
    """
    config = config or GamutConfig()
    _require(grid, "clamp_grid", ("R", "G", "B"))
    rgb = grid.to_numpy("R", "G", "B")
    lo, hi = config.value_range
    value = grid["value"]
    grey = grid["chroma"] == 0
    keep = in_gamut_mask(rgb, config.tolerance) & (grey | ((value >= lo) & (value <= hi)))

    kept = grid.filter(keep, stage=grid.stage)
    clamped = np.asarray(clamp_rgb(rgb[keep]))
    return kept.with_columns(
        "clamped",
        R_clamped=clamped[:, 0],
        G_clamped=clamped[:, 1],
        B_clamped=clamped[:, 2],
    )


def synthesize_grid(
    forward_model: ForwardModel,
    hues: Sequence[str] = HUE_NAMES,
    values: Sequence[float] = TABLE_VALUES,
    chromas: Sequence[float] = TABLE_CHROMAS,
    *,
    include_neutral: bool = True,
    neutral_values: Sequence[float] = GREY_VALUES,
) -> SampleGrid:
    """
    Evaluate the forward model on a dense (hue x value x chroma) lattice.

    Parameters
    ----------
    forward_model : ForwardModel
    hues : sequence of str, default=HUE_NAMES
    values : sequence of float, default=1..9
    chromas : sequence of float, default=2, 4, ..., 24
    include_neutral : bool, default=True
        Add the neutral axis (hue "N", chroma 0) at neutral_values.
    neutral_values : sequence of float, default=0..10

    Returns
    -------
    SampleGrid
        Stage "synthesized" with hue_angle, X_d65, Y_d65, Z_d65, cie_x, cie_y.
    """
    hue_col, value_col, chroma_col = (
        np.array(a).ravel() for a in np.meshgrid(
            np.asarray(hues, dtype=object),
            np.asarray(values, dtype=np.float64),
            np.asarray(chromas, dtype=np.float64),
            indexing="ij",
        )
    )
    angle_col = hue_angles(hue_col)
    if include_neutral:
        n = len(neutral_values)
        hue_col = np.concatenate([hue_col, np.full(n, NEUTRAL, dtype=object)])
        value_col = np.concatenate([value_col, np.asarray(neutral_values, dtype=np.float64)])
        chroma_col = np.concatenate([chroma_col, np.zeros(n)])
        angle_col = np.concatenate([angle_col, np.full(n, ACHROMATIC_ANGLE)])

    XYZ = np.asarray(forward_model.predict(angle_col, value_col, chroma_col))
    xy = np.asarray(chromaticity(XYZ))
    return SampleGrid(
        {
            "hue": hue_col,
            "value": value_col,
            "chroma": chroma_col,
            "hue_angle": angle_col,
            "X_d65": XYZ[:, 0],
            "Y_d65": XYZ[:, 1],
            "Z_d65": XYZ[:, 2],
            "cie_x": xy[:, 0],
            "cie_y": xy[:, 1],
        },
        stage="synthesized",
    )
