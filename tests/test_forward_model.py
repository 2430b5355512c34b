"""
test_forward_model.py
---------------------

Tests for the forward model (hue_angle, value, chroma) -> XYZ (D65).

Covers the structural guarantees of the factored model:
- the grey axis does not depend on the hue-angle,
- predictions are periodic in the hue-angle,
- luminance depends on value alone and increases with it,
- out-of-support evaluation warns instead of failing.
"""

import warnings

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from munsellrgb.errors import InsufficientDataError, OutOfSupportWarning
from munsellrgb.model.forward import ForwardConfig, check_support, fit_forward_model


class TestForwardFit:
    def test_component_fits(self, forward_model):
        assert set(forward_model.fits) == {
            "grey_X",
            "grey_Y",
            "grey_Z",
            "sd_X",
            "sd_Z",
            "shape_X",
            "shape_Z",
        }

    def test_grey_fits_have_no_intercept(self, forward_model):
        for ch in ("X", "Y", "Z"):
            labels = forward_model.grey[ch].basis.labels
            assert "1" not in labels
            assert len(labels) == 5

    def test_shape_bases(self, forward_model):
        assert forward_model.shape["X"].basis.labels == (
            "chroma",
            "chroma^2",
            "chroma^3",
            "chroma*cos(hue_angle+16)",
        )
        assert forward_model.shape["Z"].basis.labels == (
            "chroma",
            "chroma^2",
            "chroma*sin(hue_angle+13)",
            "chroma*sin(2*(hue_angle-31))",
        )

    def test_grey_axis_is_accurate(self, forward_model, filtered_grid):
        greys = filtered_grid.filter(filtered_grid["chroma"] == 0, stage="greys")
        pred = forward_model.grey_axis(greys["value"])
        actual = greys.to_numpy("X_d65", "Y_d65", "Z_d65")
        assert jnp.allclose(pred, actual, atol=1e-6)

    def test_amplitude_positive_on_data_range(self, forward_model):
        v = jnp.linspace(1.0, 9.0, 17)
        for ch in ("X", "Z"):
            assert bool(jnp.all(forward_model.amplitude[ch](value=v) > 0))

    def test_requires_adapted_columns(self, converter):
        with pytest.raises(ValueError, match="lacks"):
            fit_forward_model(converter.stages["normalized"])

    def test_requires_grey_axis(self, filtered_grid):
        chromatic = filtered_grid.filter(filtered_grid["chroma"] > 0, stage="filtered")
        with pytest.raises(InsufficientDataError):
            fit_forward_model(chromatic)

    def test_config_validation(self):
        with pytest.raises(ValueError, match="grey_degree"):
            ForwardConfig(grey_degree=0)
        with pytest.raises(ValueError, match="reference_chroma"):
            ForwardConfig(reference_chroma=0.0)
        with pytest.raises(ValueError, match="No shape model"):
            ForwardConfig().shape_basis("Y")


class TestForwardPredict:
    def test_output_shape(self, forward_model):
        assert forward_model.predict(180.0, 6.0, 10.0).shape == (3,)
        ha = jnp.arange(0.0, 360.0, 9.0)
        assert forward_model.predict(ha, 5.0, 4.0).shape == (40, 3)
        assert forward_model(ha[:, None], jnp.array([3.0, 7.0]), 6.0).shape == (40, 2, 3)

    def test_grey_axis_symmetric_in_hue(self, forward_model):
        ha = jnp.arange(0.0, 360.0, 9.0)
        for v in (1.0, 5.0, 9.0):
            XYZ = forward_model.predict(ha, v, 0.0)
            assert jnp.allclose(XYZ, XYZ[0], atol=1e-12)
            assert jnp.allclose(XYZ[0], forward_model.grey_axis(v), atol=1e-12)

    def test_periodic_in_hue_angle(self, forward_model):
        for v, c in ((2.0, 4.0), (5.0, 10.0), (8.0, 6.0)):
            assert jnp.allclose(
                forward_model.predict(0.0, v, c), forward_model.predict(360.0, v, c), atol=1e-9
            )
            assert jnp.allclose(
                forward_model.predict(45.0, v, c), forward_model.predict(405.0, v, c), atol=1e-9
            )

    def test_luminance_monotonic_in_value(self, forward_model):
        v = jnp.linspace(0.0, 10.0, 101)
        Y = forward_model.grey_axis(v)[:, 1]
        assert bool(jnp.all(jnp.diff(Y) > 0))

    def test_luminance_depends_on_value_only(self, forward_model):
        ha = jnp.arange(0.0, 360.0, 9.0)
        Y = forward_model.predict(ha[:, None], 6.0, jnp.array([0.0, 4.0, 12.0]))[..., 1]
        assert jnp.allclose(Y, Y[0, 0])

    def test_green_region_reduces_X(self, forward_model):
        # hue-angle 180 (2.5BG) lies in the green region
        grey_X = forward_model.grey_axis(6.0)[0]
        assert float(forward_model.predict(180.0, 6.0, 10.0)[0]) < float(grey_X)

    def test_fits_data(self, forward_model, filtered_grid):
        stable = np.asarray(filtered_grid["value"]) >= 1.0
        pred = forward_model.predict(
            filtered_grid["hue_angle"][stable],
            filtered_grid["value"][stable],
            filtered_grid["chroma"][stable],
        )
        actual = filtered_grid.to_numpy("X_d65", "Y_d65", "Z_d65")[stable]
        rel = np.abs(np.asarray(pred) - actual).mean(axis=0) / actual.mean(axis=0)
        assert np.all(rel < 0.25)

    def test_differentiable(self, forward_model):
        grad = jax.grad(lambda c: forward_model.predict_raw(120.0, 5.0, c)[0])(6.0)
        assert bool(jnp.isfinite(grad))


class TestSupport:
    def test_out_of_support_warns(self, forward_model):
        with pytest.warns(OutOfSupportWarning, match="support"):
            forward_model.predict(0.0, 11.0, 4.0)
        with pytest.warns(OutOfSupportWarning, match="support"):
            forward_model.predict(0.0, 5.0, 31.0)

    def test_out_of_support_still_evaluates(self, forward_model):
        with pytest.warns(OutOfSupportWarning):
            XYZ = forward_model.predict(0.0, -1.0, 4.0)
        assert XYZ.shape == (3,)

    def test_inside_support_is_silent(self, forward_model):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            forward_model.predict(90.0, 10.0, 30.0)
        assert check_support(5.0, 0.0)

    def test_warning_is_user_warning(self):
        assert issubclass(OutOfSupportWarning, UserWarning)
