"""
normalize.py
------------

Grid normalizer: the first stage of the pipeline.

Turns raw renotation rows (hue, value, chroma, x, y, Y on a 0-100 scale)
into a normalized grid:

1. synthesizes the grey axis (chroma 0, value 0..10) for every hue,
   using the Illuminant C white point and a fixed luminance polynomial;
2. adds the continuous hue-angle (the neutral sentinel maps to -1);
3. rescales Y from [0, 100] to [0, 1] to match x and y;
4. sorts by (hue_angle, value, chroma).
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from munsellrgb.colorimetry.constants import WHITE_C_XY
from munsellrgb.data.dataset import RAW_COLUMNS, SampleGrid
from munsellrgb.data.hues import HUE_NAMES, hue_angles

# Y(V) on the 0-100 scale, highest power first (np.polyval order)
GREY_LUMINANCE_COEFFS: tuple[float, ...] = (
    0.00081939,
    -0.020484,
    0.23352,
    -0.22533,
    1.1914,
    0.0,
)
GREY_VALUES: tuple[float, ...] = tuple(float(v) for v in range(11))


def grey_luminance(value):
    """
    Luminance Y (0-100 scale) of the neutral sample with Munsell value V.

    Y(V) = 0.00081939 V^5 - 0.020484 V^4 + 0.23352 V^3 - 0.22533 V^2 + 1.1914 V
    """
    return np.polyval(GREY_LUMINANCE_COEFFS, np.asarray(value, dtype=np.float64))


def synthesize_greys(
    hues: Sequence[str] = HUE_NAMES, values: Sequence[float] = GREY_VALUES
) -> SampleGrid:
    """Grey-axis samples (chroma 0) for every hue and value, Y on the 0-100 scale."""
    hue_col = [h for h in hues for _ in values]
    value_col = np.tile(np.asarray(values, dtype=np.float64), len(hues))
    n = len(hue_col)
    return SampleGrid(
        {
            "hue": hue_col,
            "value": value_col,
            "chroma": np.zeros(n),
            "x": np.full(n, WHITE_C_XY[0]),
            "y": np.full(n, WHITE_C_XY[1]),
            "Y": grey_luminance(value_col),
        },
        stage="raw",
    )


def normalize_grid(raw: SampleGrid, hues: Sequence[str] = HUE_NAMES) -> SampleGrid:
    """
    Normalize a raw renotation grid.

    Parameters
    ----------
    raw : SampleGrid
        Raw rows with columns (hue, value, chroma, x, y, Y), Y in [0, 100].
    hues : sequence of str, default=HUE_NAMES
        Hues for which the grey axis is synthesized.

    Returns
    -------
    SampleGrid
        Stage "normalized": raw rows plus synthetic greys, with hue_angle
        added and Y rescaled to [0, 1]. A raw row sharing a key with a
        synthetic grey takes precedence.

    Raises
    ------
    ValueError
        If raw columns are missing or a hue name is unknown.
    """
    missing = [c for c in RAW_COLUMNS if c not in raw]
    if missing:
        raise ValueError(f"Raw grid is missing columns {missing}")

    greys = synthesize_greys(hues)
    keep = np.array([not raw.has_key(*key) for key in greys.keys()], dtype=bool)
    greys = greys.filter(keep, stage="raw")

    raw_only = SampleGrid({c: raw[c] for c in RAW_COLUMNS}, stage="raw")
    merged = SampleGrid.concat([raw_only, greys], stage="raw")

    columns = {c: merged[c] for c in RAW_COLUMNS}
    columns["Y"] = merged["Y"] / 100.0
    columns["hue_angle"] = hue_angles(merged["hue"])

    normalized = SampleGrid(columns, stage="normalized")
    return normalized.sorted("hue_angle", "value", "chroma")
