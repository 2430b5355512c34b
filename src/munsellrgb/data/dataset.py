"""
dataset.py
-----------

Core data containers for munsellrgb.

defines:
- Sample: one empirical or synthetic Munsell observation
- SampleGrid: column store of samples keyed by (hue, value, chroma)

Notes
-----
- Columns are stored as read-only NumPy arrays; a grid is an immutable
  snapshot of one pipeline stage.
- Every stage returns a *new* grid: with_columns() appends derived
  columns and refuses to overwrite existing ones, filter() returns a
  filtered copy. Downstream stages can therefore always compare against
  the values of an earlier stage.
- Convert to jax.numpy (jnp) only when passing columns into the models.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, fields
from typing import Any

import numpy as np

Key = tuple[str, float, float]


@dataclass(frozen=True)
class Sample:
    """
    One Munsell observation and whatever derived fields have been computed.

    Attributes
    ----------
    hue : str
        Hue name ("5R", ...) or the neutral sentinel "N".
    value, chroma : float
        Munsell value (0-10) and chroma (>= 0, 0 for greys).
    x, y, Y : float | None
        Illuminant C chromaticity and luminance (Y in [0, 1] once normalized).
    hue_angle : float | None
        Continuous hue-angle, -1 for the neutral axis.
    X, Z : float | None
        Source (Illuminant C) tristimulus; the source Y is ``Y``.
    X_d65, Y_d65, Z_d65 : float | None
        Tristimulus adapted to D65.
    cie_x, cie_y : float | None
        Chromaticity of the adapted tristimulus.
    R, G, B : float | None
        Companded sRGB, not clamped.
    R_clamped, G_clamped, B_clamped : float | None
        Companded sRGB clamped into [0, 1].
    """

    hue: str
    value: float
    chroma: float
    x: float | None = None
    y: float | None = None
    Y: float | None = None
    hue_angle: float | None = None
    X: float | None = None
    Z: float | None = None
    X_d65: float | None = None
    Y_d65: float | None = None
    Z_d65: float | None = None
    cie_x: float | None = None
    cie_y: float | None = None
    R: float | None = None
    G: float | None = None
    B: float | None = None
    R_clamped: float | None = None
    G_clamped: float | None = None
    B_clamped: float | None = None

    @property
    def key(self) -> Key:
        return (self.hue, float(self.value), float(self.chroma))


COLUMNS: tuple[str, ...] = tuple(f.name for f in fields(Sample))
REQUIRED_COLUMNS: tuple[str, ...] = ("hue", "value", "chroma")
RAW_COLUMNS: tuple[str, ...] = ("hue", "value", "chroma", "x", "y", "Y")


def _as_column(name: str, values: Any) -> np.ndarray:
    if name == "hue":
        arr = np.array([str(h) for h in np.asarray(values).ravel()], dtype=object)
    else:
        arr = np.array(values, dtype=np.float64).ravel()
    arr.setflags(write=False)
    return arr


class SampleGrid:
    """
    Immutable, stage-tagged collection of samples.

    Parameters
    ----------
    columns : Mapping[str, array-like]
        One array per Sample field. "hue", "value" and "chroma" are required;
        all columns must have the same length.
    stage : str, default="raw"
        Name of the pipeline stage that produced this grid.

    Raises
    ------
    ValueError
        On unknown or missing columns, ragged columns, or duplicate keys.

    Examples
    --------
    >>> grid = SampleGrid.from_rows([("5R", 4.0, 2.0, 0.3425, 0.3256, 12.0)])
    >>> grid.stage, len(grid)
    ('raw', 1)
    >>> grid.lookup("5R", 4, 2).x
    0.3425
    """

    def __init__(self, columns: Mapping[str, Any], *, stage: str = "raw") -> None:
        unknown = sorted(set(columns) - set(COLUMNS))
        if unknown:
            raise ValueError(f"Unknown columns: {unknown}. Known: {list(COLUMNS)}")
        missing = [c for c in REQUIRED_COLUMNS if c not in columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

        data = {name: _as_column(name, columns[name]) for name in COLUMNS if name in columns}
        lengths = {name: len(arr) for name, arr in data.items()}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"All columns must have the same length, got {lengths}")

        self._columns = data
        self._stage = str(stage)
        self._index = self._build_index()

    def _build_index(self) -> dict[Key, int]:
        index: dict[Key, int] = {}
        for i, key in enumerate(
            zip(self._columns["hue"], self._columns["value"], self._columns["chroma"])
        ):
            key = (str(key[0]), float(key[1]), float(key[2]))
            if key in index:
                raise ValueError(f"Duplicate sample key {key}")
            index[key] = i
        return index

    @classmethod
    def from_rows(
        cls, rows: Iterable[tuple[Any, ...]], *, stage: str = "raw"
    ) -> SampleGrid:
        """
        Construct a grid from (hue, value, chroma, x, y, Y) rows.

        Y is expected on the 0-100 luminance scale of the renotation tables.
        """
        rows = list(rows)
        if rows and any(len(r) != len(RAW_COLUMNS) for r in rows):
            raise ValueError(f"Each row must have {len(RAW_COLUMNS)} fields {RAW_COLUMNS}")
        transposed = list(zip(*rows)) if rows else [()] * len(RAW_COLUMNS)
        return cls(dict(zip(RAW_COLUMNS, transposed)), stage=stage)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    @property
    def stage(self) -> str:
        return self._stage

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self._columns)

    def __len__(self) -> int:
        return len(self._columns["hue"])

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __getitem__(self, name: str) -> np.ndarray:
        try:
            return self._columns[name]
        except KeyError:
            raise KeyError(
                f"Column '{name}' not available at stage '{self._stage}'. "
                f"Available: {list(self._columns)}"
            ) from None

    def __iter__(self) -> Iterator[Sample]:
        for i in range(len(self)):
            yield self.sample(i)

    def __repr__(self) -> str:
        return f"SampleGrid(stage={self._stage!r}, n={len(self)}, columns={list(self._columns)})"

    def keys(self) -> list[Key]:
        return list(self._index)

    def has_key(self, hue: str, value: float, chroma: float) -> bool:
        return (str(hue), float(value), float(chroma)) in self._index

    def sample(self, i: int) -> Sample:
        """Return row i as a Sample."""
        values = {}
        for name, arr in self._columns.items():
            values[name] = str(arr[i]) if name == "hue" else float(arr[i])
        return Sample(**values)

    def lookup(self, hue: str, value: float, chroma: float) -> Sample:
        """Return the sample stored under (hue, value, chroma)."""
        key = (str(hue), float(value), float(chroma))
        try:
            return self.sample(self._index[key])
        except KeyError:
            raise KeyError(f"No sample {key} at stage '{self._stage}'") from None

    def to_numpy(self, *names: str) -> np.ndarray:
        """Stack numeric columns into an (n, len(names)) float array."""
        return np.stack([np.asarray(self[name], dtype=np.float64) for name in names], axis=1)

    # ------------------------------------------------------------------
    # Derivation (each returns a new grid)
    # ------------------------------------------------------------------
    def with_columns(self, stage: str, **new_columns: Any) -> SampleGrid:
        """
        Return a new grid with derived columns appended.

        Raises
        ------
        ValueError
            If a column already exists; stages append, they never overwrite.
        """
        clash = sorted(set(new_columns) & set(self._columns))
        if clash:
            raise ValueError(
                f"Columns {clash} already exist at stage '{self._stage}'; "
                "stages may only append new columns"
            )
        merged: dict[str, Any] = dict(self._columns)
        for name, values in new_columns.items():
            merged[name] = np.asarray(values)
        return SampleGrid(merged, stage=stage)

    def filter(self, mask: Any, stage: str) -> SampleGrid:
        """Return a new grid holding the rows where mask is True."""
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (len(self),):
            raise ValueError(f"mask must have shape ({len(self)},), got {mask.shape}")
        return SampleGrid({name: arr[mask] for name, arr in self._columns.items()}, stage=stage)

    def sorted(self, *by: str, stage: str | None = None) -> SampleGrid:
        """Return a copy sorted lexicographically by the given columns."""
        order = np.lexsort([self[name] for name in reversed(by)])
        return SampleGrid(
            {name: arr[order] for name, arr in self._columns.items()},
            stage=self._stage if stage is None else stage,
        )

    @classmethod
    def concat(cls, grids: Iterable[SampleGrid], *, stage: str) -> SampleGrid:
        """Concatenate grids that share the same columns."""
        grids = list(grids)
        if not grids:
            raise ValueError("concat() needs at least one grid")
        names = grids[0].columns
        for g in grids[1:]:
            if set(g.columns) != set(names):
                raise ValueError(
                    f"Cannot concatenate grids with columns {list(names)} and {list(g.columns)}"
                )
        return cls(
            {name: np.concatenate([g[name] for g in grids]) for name in names}, stage=stage
        )
