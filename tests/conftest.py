"""
Central pytest configuration for this project.

This file is automatically discovered by pytest and is intended for:

- **Fixtures**: reusable objects or setup logic shared across multiple test files.
- **Pytest hooks**: project-wide customizations of pytest behavior (e.g., modifying CLI options, adding markers).

Notes
-----
- Contributors should install the package in editable mode (`pip install -e .`)
  so that imports are resolved consistently in local dev and CI environments.
- The renotation table is read by external code, so tests use a synthetic
  renotation-like table: chromaticity moves away from the Illuminant C
  white point along a hue-dependent direction (proportionally to chroma),
  and luminance follows the grey-axis polynomial.
- Keep this file focused on test setup. Do not add application logic here.
"""

import numpy as np
import pytest

from munsellrgb.colorimetry.constants import WHITE_C_XY
from munsellrgb.data.dataset import SampleGrid
from munsellrgb.data.hues import HUE_NAMES, hue_angle
from munsellrgb.data.normalize import grey_luminance
from munsellrgb.pipeline import MunsellConverter

SYNTHETIC_VALUES = tuple(float(v) for v in range(1, 10))
SYNTHETIC_CHROMAS = (2.0, 4.0, 6.0, 8.0, 10.0, 12.0)
CHROMA_STEP = 0.01  # chromaticity distance per chroma unit
ANGLE_OFFSET = 27.35


def synthetic_rows():
    """(hue, value, chroma, x, y, Y) rows, Y on the 0-100 scale."""
    rows = []
    for hue in HUE_NAMES:
        phi = np.deg2rad(hue_angle(hue) - ANGLE_OFFSET)
        for value in SYNTHETIC_VALUES:
            Y = float(grey_luminance(value))
            for chroma in SYNTHETIC_CHROMAS:
                r = CHROMA_STEP * chroma
                rows.append(
                    (
                        hue,
                        value,
                        chroma,
                        WHITE_C_XY[0] + r * np.cos(phi),
                        WHITE_C_XY[1] + r * np.sin(phi),
                        Y,
                    )
                )
    return rows


@pytest.fixture(scope="session")
def raw_grid():
    """Synthetic raw renotation grid (40 hues x value 1..9 x chroma 2..12)."""
    return SampleGrid.from_rows(synthetic_rows())


@pytest.fixture(scope="session")
def converter(raw_grid):
    """MunsellConverter fitted on the synthetic grid."""
    return MunsellConverter().fit(raw_grid)


@pytest.fixture(scope="session")
def filtered_grid(converter):
    return converter.stages["filtered"]


@pytest.fixture(scope="session")
def forward_model(converter):
    return converter.forward_model


@pytest.fixture(scope="session")
def inverse_model(converter):
    return converter.inverse_model
