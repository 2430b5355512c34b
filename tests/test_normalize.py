"""
test_normalize.py
-----------------

Tests for the grid normalizer: grey synthesis, hue-angle, Y rescaling.
"""

import numpy as np
import pytest

from munsellrgb.colorimetry.constants import WHITE_C_XY
from munsellrgb.data.dataset import SampleGrid
from munsellrgb.data.hues import HUE_NAMES
from munsellrgb.data.normalize import (
    GREY_VALUES,
    grey_luminance,
    normalize_grid,
    synthesize_greys,
)


class TestGreyLuminance:
    def test_endpoints(self):
        assert grey_luminance(0.0) == pytest.approx(0.0)
        assert grey_luminance(10.0) == pytest.approx(100.0, abs=1e-3)

    def test_polynomial(self):
        v = 5.0
        expected = (
            0.00081939 * v**5 - 0.020484 * v**4 + 0.23352 * v**3 - 0.22533 * v**2 + 1.1914 * v
        )
        assert grey_luminance(v) == pytest.approx(expected)

    def test_monotonic(self):
        Y = grey_luminance(np.linspace(0.0, 10.0, 101))
        assert np.all(np.diff(Y) > 0)


class TestSynthesizeGreys:
    def test_one_series_per_hue(self):
        greys = synthesize_greys()
        assert len(greys) == len(HUE_NAMES) * len(GREY_VALUES)
        assert np.all(greys["chroma"] == 0.0)
        assert np.allclose(greys["x"], WHITE_C_XY[0])
        assert np.allclose(greys["y"], WHITE_C_XY[1])


class TestNormalizeGrid:
    def test_stage_and_columns(self, raw_grid):
        out = normalize_grid(raw_grid)
        assert out.stage == "normalized"
        assert "hue_angle" in out
        assert len(out) == len(raw_grid) + len(HUE_NAMES) * len(GREY_VALUES)

    def test_every_hue_has_complete_grey_series(self, raw_grid):
        out = normalize_grid(raw_grid)
        for hue in HUE_NAMES:
            for v in GREY_VALUES:
                assert out.has_key(hue, v, 0.0)

    def test_luminance_rescaled(self, raw_grid):
        out = normalize_grid(raw_grid)
        assert out["Y"].max() <= 1.0 + 1e-9
        s = out.lookup("5R", 5.0, 4.0)
        assert s.Y == pytest.approx(raw_grid.lookup("5R", 5.0, 4.0).Y / 100.0)

    def test_sorted_by_angle_value_chroma(self, raw_grid):
        out = normalize_grid(raw_grid)
        keys = list(zip(out["hue_angle"], out["value"], out["chroma"]))
        assert keys == sorted(keys)

    def test_raw_grey_row_wins(self):
        raw = SampleGrid.from_rows([("5R", 3.0, 0.0, 0.30, 0.31, 20.0)])
        out = normalize_grid(raw)
        s = out.lookup("5R", 3.0, 0.0)
        assert s.Y == pytest.approx(0.2)
        assert s.x == pytest.approx(0.30)

    def test_neutral_sentinel_angle(self):
        raw = SampleGrid.from_rows([("N", 5.0, 0.0, 0.31006, 0.31616, 19.77)])
        out = normalize_grid(raw)
        assert out.lookup("N", 5.0, 0.0).hue_angle == -1.0

    def test_unknown_hue_raises(self):
        raw = SampleGrid.from_rows([("5Q", 5.0, 2.0, 0.3, 0.3, 20.0)])
        with pytest.raises(ValueError, match="Unknown Munsell hue"):
            normalize_grid(raw)

    def test_missing_raw_columns(self):
        raw = SampleGrid({"hue": ["5R"], "value": [5.0], "chroma": [2.0]})
        with pytest.raises(ValueError, match="missing columns"):
            normalize_grid(raw)
