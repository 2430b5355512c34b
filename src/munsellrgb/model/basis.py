"""
basis.py
--------

Linear least squares over named basis functions.

A Basis is an ordered list of Terms; each Term maps named inputs
(e.g. value, chroma, hue_angle) to one design-matrix column. Fitting a
basis to a target vector gives a LinearFit, a callable model

    f(inputs) = design(inputs) @ coef

Keeping basis definitions (degrees, phase constants) as data rather than
inline formulas means recalibration only touches the configuration.

Examples
--------
>>> import jax.numpy as jnp
>>> from munsellrgb.model.basis import polynomial, fit_least_squares
>>> v = jnp.linspace(0.0, 10.0, 11)
>>> fit = fit_least_squares(polynomial("value", 2), 3.0 * v**2, value=v, name="demo")
>>> float(fit(value=2.0))  # doctest: +ELLIPSIS
12.0...
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import jax.numpy as jnp

from munsellrgb.errors import InsufficientDataError

Inputs = Mapping[str, jnp.ndarray]


@dataclass(frozen=True)
class Term:
    """One basis function: a label and a map from named inputs to a column."""

    label: str
    fn: Callable[[Inputs], jnp.ndarray] = field(repr=False)

    def __call__(self, inputs: Inputs) -> jnp.ndarray:
        return self.fn(inputs)


@dataclass(frozen=True)
class Basis:
    """
    Ordered collection of basis terms.

    Bases compose with ``+``:

    >>> b = intercept() + polynomial("value", 3)
    >>> b.labels
    ('1', 'value', 'value^2', 'value^3')
    """

    terms: tuple[Term, ...]

    def __add__(self, other: Basis) -> Basis:
        return Basis(self.terms + other.terms)

    def __len__(self) -> int:
        return len(self.terms)

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(t.label for t in self.terms)

    def design(self, **inputs) -> jnp.ndarray:
        """
        Evaluate the design matrix.

        Returns
        -------
        jnp.ndarray, shape (..., n_terms)
            Inputs broadcast against each other; one column per term.
        """
        inputs = {k: jnp.asarray(v, dtype=float) for k, v in inputs.items()}
        shape = jnp.broadcast_shapes(*(v.shape for v in inputs.values()))
        columns = [jnp.broadcast_to(term(inputs), shape) for term in self.terms]
        return jnp.stack(columns, axis=-1)


# ----------------------------------------------------------------------
# Basis builders
# ----------------------------------------------------------------------
def intercept() -> Basis:
    """Constant column."""
    return Basis((Term("1", lambda inputs: jnp.ones(())),))


def linear(*variables: str) -> Basis:
    """One column per variable."""
    return Basis(tuple(Term(v, lambda inputs, v=v: inputs[v]) for v in variables))


def polynomial(variable: str, degree: int, *, with_intercept: bool = False) -> Basis:
    """
    Raw powers variable^1 .. variable^degree.

    Parameters
    ----------
    variable : str
        Input name.
    degree : int
        Highest power (>= 1).
    with_intercept : bool, default=False
        Prepend a constant column.
    """
    if degree < 1:
        raise ValueError(f"degree must be >= 1, got {degree}")
    terms = tuple(
        Term(
            variable if p == 1 else f"{variable}^{p}",
            lambda inputs, p=p: inputs[variable] ** p,
        )
        for p in range(1, degree + 1)
    )
    basis = Basis(terms)
    return intercept() + basis if with_intercept else basis


def periodic(
    angle: str,
    kind: str,
    *,
    phase: float = 0.0,
    harmonic: int = 1,
    scale: str | None = None,
) -> Basis:
    """
    One trigonometric column ``[scale *] kind(harmonic * (angle + phase))``.

    Angles and phases are in degrees.

    Parameters
    ----------
    angle : str
        Input name of the angle (degrees).
    kind : {"sin", "cos"}
    phase : float, default=0.0
        Phase offset in degrees, added before the harmonic multiplier.
    harmonic : int, default=1
    scale : str | None
        Optional input name multiplying the column (e.g. "chroma", so that
        the term vanishes on the grey axis).
    """
    funcs = {"sin": jnp.sin, "cos": jnp.cos}
    if kind not in funcs:
        raise ValueError(f"Unknown periodic kind: '{kind}'. Use 'sin' or 'cos'.")
    trig = funcs[kind]

    inner = f"{angle}{phase:+g}" if phase else angle
    label = f"{kind}({inner})" if harmonic == 1 else f"{kind}({harmonic}*({inner}))"
    if scale is not None:
        label = f"{scale}*{label}"

    def column(inputs: Inputs) -> jnp.ndarray:
        out = trig(jnp.deg2rad(harmonic * (inputs[angle] + phase)))
        if scale is not None:
            out = inputs[scale] * out
        return out

    return Basis((Term(label, column),))


# ----------------------------------------------------------------------
# Fitting
# ----------------------------------------------------------------------
@dataclass(frozen=True, eq=False)
class LinearFit:
    """
    A fitted linear model over a Basis.

    Attributes
    ----------
    name : str
        Model name, used in diagnostics.
    basis : Basis
    coef : jnp.ndarray, shape (n_terms,)
    n_samples : int
        Number of samples used in the fit.
    rmse : float
        Root mean squared residual on the fitting samples.
    r2 : float
        Coefficient of determination on the fitting samples.
    """

    name: str
    basis: Basis = field(repr=False)
    coef: jnp.ndarray
    n_samples: int
    rmse: float
    r2: float

    def __call__(self, **inputs) -> jnp.ndarray:
        return self.basis.design(**inputs) @ self.coef

    def coefficients(self) -> dict[str, float]:
        """Coefficients keyed by term label."""
        return {label: float(c) for label, c in zip(self.basis.labels, self.coef)}


def fit_least_squares(basis: Basis, target, *, name: str, **inputs) -> LinearFit:
    """
    Ordinary least squares (no regularization) of ``target`` on ``basis``.

    Parameters
    ----------
    basis : Basis
    target : array-like, shape (n,)
    name : str
        Name stored on the resulting LinearFit.
    **inputs : array-like, shape (n,)
        Named inputs consumed by the basis terms.

    Returns
    -------
    LinearFit

    Raises
    ------
    InsufficientDataError
        If there are fewer samples than basis terms.
    ValueError
        If the design matrix or target contain non-finite values.
    """
    target = jnp.asarray(target, dtype=float).ravel()
    design = basis.design(**inputs).reshape(-1, len(basis))
    n, p = design.shape
    if n != target.shape[0]:
        raise ValueError(f"{name}: design has {n} rows but target has {target.shape[0]}")
    if n < p:
        raise InsufficientDataError(
            f"{name}: {n} samples are not enough to fit {p} terms {basis.labels}"
        )
    if not (bool(jnp.all(jnp.isfinite(design))) and bool(jnp.all(jnp.isfinite(target)))):
        raise ValueError(f"{name}: non-finite values in design matrix or target")

    coef, _, _, _ = jnp.linalg.lstsq(design, target, rcond=None)
    residuals = target - design @ coef
    sse = float(jnp.sum(residuals**2))
    sst = float(jnp.sum((target - jnp.mean(target)) ** 2))
    return LinearFit(
        name=name,
        basis=basis,
        coef=coef,
        n_samples=int(n),
        rmse=float(jnp.sqrt(sse / n)),
        r2=1.0 - sse / sst if sst > 0 else 1.0,
    )
