"""
test_refine.py
--------------

Tests for gradient refinement of inverse seeds.
"""

import jax.numpy as jnp
import optax
import pytest

from munsellrgb.colorimetry.constants import WHITE_D65_XY
from munsellrgb.colorimetry.conversions import XYZ_to_xyY
from munsellrgb.inference import REFINERS, GradientRefiner, Refiner
from munsellrgb.pipeline import MunsellConverter

TRUTH = (
    jnp.array([4.0, 6.0, 7.0]),  # value
    jnp.array([6.0, 8.0, 4.0]),  # chroma
    jnp.array([45.0, 180.0, 300.0]),  # hue_angle
)


def _target(forward_model, value, chroma, hue_angle):
    return XYZ_to_xyY(forward_model.predict_raw(hue_angle, value, chroma), WHITE_D65_XY)


def _loss(forward_model, target, value, chroma, hue_angle):
    return float(jnp.sum((_target(forward_model, value, chroma, hue_angle) - target) ** 2))


class TestGradientRefiner:
    def test_registry(self):
        assert REFINERS["gradient"] is GradientRefiner
        assert issubclass(GradientRefiner, Refiner)

    def test_default_optimizer_is_adam(self):
        r = GradientRefiner()
        assert r.steps == 200
        assert r.optimizer is not None

    def test_negative_steps(self):
        with pytest.raises(ValueError, match="steps"):
            GradientRefiner(steps=-1)

    def test_refinement_reduces_error(self, forward_model):
        V, C, HA = TRUTH
        target = _target(forward_model, V, C, HA)
        seed = (V + 0.3, C - 0.8, HA + 4.0)

        refiner = GradientRefiner(steps=200, learning_rate=0.05)
        refined = refiner.refine(forward_model, target, seed)

        before = _loss(forward_model, target, *seed)
        after = _loss(forward_model, target, *refined)
        assert after < before
        assert all(r.shape == (3,) for r in refined)

    def test_history_tracking(self, forward_model):
        V, C, HA = TRUTH
        target = _target(forward_model, V, C, HA)
        refiner = GradientRefiner(steps=50, learning_rate=0.02, track_history=True, log_every=10)
        refiner.refine(forward_model, target, (V + 0.3, C - 0.8, HA + 4.0))
        steps, losses = refiner.get_history()
        assert steps == [0, 10, 20, 30, 40, 49]
        assert len(losses) == len(steps)
        assert losses[-1] < losses[0]

    def test_history_off_by_default(self, forward_model):
        refiner = GradientRefiner(steps=5)
        refiner.refine(forward_model, jnp.array([0.3, 0.3, 0.2]), (5.0, 4.0, 90.0))
        assert refiner.get_history() == ([], [])

    def test_custom_optimizer(self, forward_model):
        V, C, HA = TRUTH
        target = _target(forward_model, V, C, HA)
        refiner = GradientRefiner(steps=100, optimizer=optax.sgd(1e-3, momentum=0.9))
        seed = (V + 0.3, C - 0.8, HA + 4.0)
        refined = refiner.refine(forward_model, target, seed)
        assert _loss(forward_model, target, *refined) <= _loss(forward_model, target, *seed)

    def test_neutral_seed_unchanged(self, forward_model):
        target = jnp.array([WHITE_D65_XY[0], WHITE_D65_XY[1], 0.2])
        V, C, HA = GradientRefiner(steps=20).refine(forward_model, target, (5.0, 0.0, -1.0))
        assert (float(V), float(C), float(HA)) == (5.0, 0.0, -1.0)

    def test_zero_steps_returns_seed(self, forward_model):
        seed = (jnp.array(5.0), jnp.array(4.0), jnp.array(90.0))
        out = GradientRefiner(steps=0).refine(forward_model, jnp.array([0.3, 0.3, 0.2]), seed)
        assert all(float(a) == float(b) for a, b in zip(out, seed))

    def test_outputs_in_support(self, forward_model):
        V, C, HA = GradientRefiner(steps=10).refine(
            forward_model, jnp.array([0.35, 0.35, 0.2]), (5.0, 0.05, 359.99)
        )
        assert 0.0 <= float(C) <= 30.0
        assert 0.0 <= float(HA) < 360.0

    def test_target_shape(self, forward_model):
        with pytest.raises(ValueError, match="last dimension 3"):
            GradientRefiner(steps=1).refine(forward_model, jnp.ones(2), (5.0, 4.0, 90.0))


class TestConverterWithRefiner:
    def test_refined_to_munsell(self, raw_grid):
        converter = MunsellConverter(refiner="gradient", refiner_config={"steps": 50}).fit(raw_grid)
        rgb = converter.convert(["5R", "5B"], 5.0, 6.0)
        V, C, HA = converter.to_munsell(rgb[:, 0], rgb[:, 1], rgb[:, 2])
        assert V.shape == (2,)
        assert bool(jnp.all(jnp.abs(V - 5.0) < 0.5))

    def test_grey_not_moved_by_refiner(self, raw_grid):
        converter = MunsellConverter(refiner=GradientRefiner(steps=20)).fit(raw_grid)
        V, C, HA = converter.to_munsell(0.5, 0.5, 0.5)
        assert float(C) == 0.0 and float(HA) == -1.0
