"""
test_dataset.py
---------------

Tests for Sample and the immutable, stage-tagged SampleGrid.
"""

import numpy as np
import pytest

from munsellrgb.data.dataset import Sample, SampleGrid

ROWS = [
    ("5R", 4.0, 2.0, 0.3425, 0.3256, 12.0),
    ("5R", 4.0, 4.0, 0.3780, 0.3300, 12.0),
    ("2.5Y", 6.0, 2.0, 0.3300, 0.3400, 30.0),
]


@pytest.fixture
def grid():
    return SampleGrid.from_rows(ROWS)


class TestConstruction:
    def test_from_rows(self, grid):
        assert grid.stage == "raw"
        assert len(grid) == 3
        assert grid.columns == ("hue", "value", "chroma", "x", "y", "Y")

    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValueError, match="Duplicate sample key"):
            SampleGrid.from_rows([ROWS[0], ROWS[0]])

    def test_unknown_column_rejected(self):
        with pytest.raises(ValueError, match="Unknown columns"):
            SampleGrid({"hue": ["5R"], "value": [1.0], "chroma": [2.0], "L": [50.0]})

    def test_missing_required_column(self):
        with pytest.raises(ValueError, match="Missing required columns"):
            SampleGrid({"hue": ["5R"], "value": [1.0]})

    def test_ragged_columns(self):
        with pytest.raises(ValueError, match="same length"):
            SampleGrid({"hue": ["5R", "5Y"], "value": [1.0], "chroma": [2.0, 2.0]})

    def test_row_arity(self):
        with pytest.raises(ValueError, match="6 fields"):
            SampleGrid.from_rows([("5R", 4.0, 2.0)])

    def test_empty(self):
        assert len(SampleGrid.from_rows([])) == 0


class TestAccess:
    def test_lookup(self, grid):
        s = grid.lookup("5R", 4, 2)
        assert isinstance(s, Sample)
        assert s.x == pytest.approx(0.3425)
        assert s.key == ("5R", 4.0, 2.0)
        assert s.X_d65 is None

    def test_lookup_missing(self, grid):
        with pytest.raises(KeyError, match="No sample"):
            grid.lookup("5R", 9, 2)

    def test_missing_column_message(self, grid):
        with pytest.raises(KeyError, match="not available at stage 'raw'"):
            grid["X_d65"]

    def test_iteration_and_keys(self, grid):
        assert [s.key for s in grid] == grid.keys()
        assert grid.has_key("2.5Y", 6.0, 2.0)
        assert not grid.has_key("2.5Y", 6.0, 4.0)

    def test_to_numpy(self, grid):
        arr = grid.to_numpy("x", "y")
        assert arr.shape == (3, 2)
        assert arr[0, 0] == pytest.approx(0.3425)


class TestImmutability:
    def test_columns_read_only(self, grid):
        with pytest.raises(ValueError):
            grid["value"][0] = 9.0

    def test_with_columns_appends(self, grid):
        new = grid.with_columns("normalized", hue_angle=[9.0, 9.0, 72.0])
        assert new.stage == "normalized"
        assert "hue_angle" in new
        assert "hue_angle" not in grid
        assert grid.stage == "raw"

    def test_with_columns_refuses_overwrite(self, grid):
        with pytest.raises(ValueError, match="already exist"):
            grid.with_columns("normalized", Y=[0.1, 0.1, 0.3])

    def test_filter_returns_copy(self, grid):
        small = grid.filter(grid["chroma"] == 2.0, stage="filtered")
        assert len(small) == 2
        assert small.stage == "filtered"
        assert len(grid) == 3

    def test_filter_mask_shape(self, grid):
        with pytest.raises(ValueError, match="mask must have shape"):
            grid.filter([True], stage="filtered")

    def test_sorted(self, grid):
        out = grid.sorted("value", "chroma")
        assert list(out["chroma"]) == [2.0, 4.0, 2.0]
        out = grid.sorted("chroma", "value")
        assert list(out["value"]) == [4.0, 6.0, 4.0]

    def test_concat(self, grid):
        other = SampleGrid.from_rows([("5G", 5.0, 6.0, 0.25, 0.40, 20.0)])
        both = SampleGrid.concat([grid, other], stage="raw")
        assert len(both) == 4
        assert np.isclose(both.lookup("5G", 5, 6).Y, 20.0)

    def test_concat_mismatched_columns(self, grid):
        other = SampleGrid({"hue": ["5G"], "value": [5.0], "chroma": [6.0]})
        with pytest.raises(ValueError, match="Cannot concatenate"):
            SampleGrid.concat([grid, other], stage="raw")
