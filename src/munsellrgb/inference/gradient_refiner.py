"""
gradient_refiner.py
-------------------

Gradient refinement of inverse seeds using Optax.

MVP implementation:
- Minimizes the squared (x, y, Y) error between the forward model's
  prediction and the target, summed over all points.
- Defaults to Adam, but any Optax optimizer can be passed in.

Connections
-----------
- Calls ForwardModel.predict_raw(hue_angle, value, chroma) as the objective.
- Seeds come from InverseModel.estimate(); neutral seeds (hue-angle -1)
  are returned unchanged.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import optax

from munsellrgb.colorimetry.constants import CHROMA_SUPPORT, VALUE_SUPPORT, WHITE_D65_XY
from munsellrgb.colorimetry.conversions import XYZ_to_xyY
from munsellrgb.inference.base import Refiner


class GradientRefiner(Refiner):
    """
    Gradient-based refiner of inverse seeds.

    Parameters
    ----------
    steps : int, default=200
        Number of optimization steps.
    learning_rate : float, default=0.05
        Learning rate for the default optimizer (Adam).
    optimizer : optax.GradientTransformation, optional
        Optax optimizer to use. Default: Adam.

    Notes
    -----
    - Loss function = sum of squared (x, y, Y) residuals.
    - Gradients computed with jax.value_and_grad.
    - Value and chroma are clipped into the model support after the last
      step and hue-angles wrapped into [0, 360).
    """

    def __init__(
        self,
        steps: int = 200,
        learning_rate: float = 0.05,
        optimizer: optax.GradientTransformation | None = None,
        *,
        track_history: bool = False,
        log_every: int = 10,
    ):
        """Create a gradient refiner.

        Parameters
        ----------
        steps : int
            Number of optimization steps.
        learning_rate : float, optional
            Learning rate for the default optimizer (Adam).
        optimizer : optax.GradientTransformation | None
            Optax optimizer to use.
        track_history : bool, optional
            When True, record loss history during refinement.
        log_every : int, optional
            Record every N steps (also records the last step).
        """
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")
        self.steps = steps
        self.optimizer = optimizer or optax.adam(learning_rate=learning_rate)
        self.track_history = track_history
        self.log_every = max(1, int(log_every))
        # Exposed after refine() when tracking is enabled
        self.loss_steps: list[int] = []
        self.loss_history: list[float] = []

    def refine(self, forward_model, target_xyY, seed) -> tuple[jnp.ndarray, ...]:
        """
        Refine (value, chroma, hue_angle) seeds against target D65 xyY.

        Parameters
        ----------
        forward_model : ForwardModel
            Fitted forward model.
        target_xyY : array-like, shape (..., 3)
            Target (x, y, Y) under D65, Y in [0, 1].
        seed : tuple of array-like
            (value, chroma, hue_angle), broadcast-compatible with
            target_xyY[..., 0].

        Returns
        -------
        tuple of jnp.ndarray
            Refined (value, chroma, hue_angle).
        """
        target = jnp.asarray(target_xyY, dtype=float)
        if target.shape[-1] != 3:
            raise ValueError(f"target_xyY must have last dimension 3, got {target.shape[-1]}")
        value, chroma, hue_angle = jnp.broadcast_arrays(
            *(jnp.asarray(s, dtype=float) for s in seed), target[..., 0]
        )[:3]
        neutral = hue_angle < 0

        def loss_fn(params):
            XYZ = forward_model.predict_raw(params["hue_angle"], params["value"], params["chroma"])
            residual = XYZ_to_xyY(XYZ, WHITE_D65_XY) - target
            return jnp.sum(jnp.where(neutral[..., None], 0.0, residual) ** 2)

        params = {"value": value, "chroma": chroma, "hue_angle": hue_angle}
        opt_state = self.optimizer.init(params)

        @jax.jit
        def step(params, opt_state):
            loss, grads = jax.value_and_grad(loss_fn)(params)
            updates, opt_state = self.optimizer.update(grads, opt_state, params)
            params = optax.apply_updates(params, updates)
            return params, opt_state, loss

        # clear any previous history
        if self.track_history:
            self.loss_steps.clear()
            self.loss_history.clear()

        for i in range(self.steps):
            params, opt_state, loss = step(params, opt_state)
            if self.track_history and ((i % self.log_every == 0) or (i == self.steps - 1)):
                self.loss_steps.append(i)
                self.loss_history.append(float(loss))

        refined_value = jnp.clip(params["value"], *VALUE_SUPPORT)
        refined_chroma = jnp.clip(params["chroma"], *CHROMA_SUPPORT)
        refined_hue = jnp.mod(params["hue_angle"], 360.0)
        return (
            jnp.where(neutral, value, refined_value),
            jnp.where(neutral, chroma, refined_chroma),
            jnp.where(neutral, hue_angle, refined_hue),
        )

    def get_history(self) -> tuple[list[int], list[float]]:
        """Return (steps, losses) recorded during the last refine() when tracking was enabled."""
        return self.loss_steps, self.loss_history
