"""
piecewise.py
------------

Piecewise models as an ordered dispatch table.

A piecewise model is a small table of (domain, LinearFit) pairs. At
evaluation time the first piece whose domain predicate holds is used, so
the table order is the priority order. Each piece can also restrict the
samples it is *fitted* on (fit_filter) without changing the domain it is
*evaluated* on, which is how unstable sub-ranges are left out of a fit.

Domain predicates receive the same named inputs as the bases and return
boolean masks, so every piece's domain and coefficients can be inspected
and tested on their own.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import jax.numpy as jnp
import numpy as np

from .basis import Basis, LinearFit, fit_least_squares

Predicate = Callable[..., jnp.ndarray]


@dataclass(frozen=True)
class PieceSpec:
    """
    Definition of one piece before fitting.

    Attributes
    ----------
    name : str
    domain : callable
        ``domain(**inputs) -> bool mask``; where the piece applies.
    basis : Basis
        Regression basis of the piece.
    fit_filter : callable | None
        Optional extra ``(**inputs) -> bool mask`` restricting the fitting
        samples inside the domain.
    """

    name: str
    domain: Predicate = field(repr=False)
    basis: Basis = field(repr=False)
    fit_filter: Predicate | None = field(default=None, repr=False)


@dataclass(frozen=True)
class Piece:
    """A fitted piece: its evaluation domain and its regression."""

    name: str
    domain: Predicate = field(repr=False)
    fit: LinearFit


@dataclass(frozen=True, eq=False)
class PiecewiseModel:
    """
    Ordered (domain, model) table.

    Points covered by no piece evaluate to NaN.
    """

    name: str
    pieces: tuple[Piece, ...]

    def __call__(self, **inputs) -> jnp.ndarray:
        inputs = {k: jnp.asarray(v, dtype=float) for k, v in inputs.items()}
        conditions = [jnp.asarray(p.domain(**inputs), dtype=bool) for p in self.pieces]
        values = [p.fit(**inputs) for p in self.pieces]
        shape = jnp.broadcast_shapes(*(v.shape for v in values))
        conditions = [jnp.broadcast_to(c, shape) for c in conditions]
        return jnp.select(conditions, values, default=jnp.nan)

    def piece_index(self, **inputs) -> np.ndarray:
        """Index of the piece used for each point (-1 where none applies)."""
        inputs = {k: np.asarray(v, dtype=np.float64) for k, v in inputs.items()}
        conditions = [np.asarray(p.domain(**inputs), dtype=bool) for p in self.pieces]
        shape = np.broadcast_shapes(*(c.shape for c in conditions))
        index = np.full(shape, -1, dtype=int)
        for i in reversed(range(len(conditions))):
            index = np.where(np.broadcast_to(conditions[i], shape), i, index)
        return index

    def __getitem__(self, name: str) -> Piece:
        for piece in self.pieces:
            if piece.name == name:
                return piece
        raise KeyError(f"No piece named '{name}' in {self.name}")

    @property
    def fits(self) -> dict[str, LinearFit]:
        return {p.fit.name: p.fit for p in self.pieces}


def fit_piecewise(
    name: str,
    specs: Sequence[PieceSpec],
    target,
    *,
    mask=None,
    **inputs,
) -> PiecewiseModel:
    """
    Fit every piece of a dispatch table on the samples of its domain.

    A sample is assigned to the first piece whose domain holds, matching
    evaluation order.

    Parameters
    ----------
    name : str
        Name of the piecewise model; piece fits are named "<name>.<piece>".
    specs : sequence of PieceSpec
        Pieces in priority order.
    target : array-like, shape (n,)
    mask : array-like of bool, optional
        Samples eligible for any piece.
    **inputs : array-like, shape (n,)
    """
    inputs = {k: np.asarray(v, dtype=np.float64) for k, v in inputs.items()}
    target = np.asarray(target, dtype=np.float64)
    remaining = np.ones(target.shape, dtype=bool) if mask is None else np.asarray(mask, dtype=bool)

    pieces = []
    for spec in specs:
        in_domain = remaining & np.asarray(spec.domain(**inputs), dtype=bool)
        remaining = remaining & ~in_domain
        use = in_domain
        if spec.fit_filter is not None:
            use = use & np.asarray(spec.fit_filter(**inputs), dtype=bool)
        fit = fit_least_squares(
            spec.basis,
            target[use],
            name=f"{name}.{spec.name}",
            **{k: v[use] for k, v in inputs.items()},
        )
        pieces.append(Piece(name=spec.name, domain=spec.domain, fit=fit))
    return PiecewiseModel(name=name, pieces=tuple(pieces))
