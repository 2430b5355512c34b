def test_top_level_api_imports():
    import munsellrgb as m

    for name in [
        "MunsellConverter",
        "Sample",
        "SampleGrid",
        "normalize_grid",
        "ForwardConfig",
        "ForwardModel",
        "fit_forward_model",
        "InverseConfig",
        "InverseModel",
        "fit_inverse_model",
        "OutlierConfig",
        "filter_outliers",
        "GamutConfig",
        "is_in_gamut",
        "Refiner",
        "GradientRefiner",
        "REFINERS",
        "OutOfSupportWarning",
        "InsufficientDataError",
    ]:
        assert hasattr(m, name)


def test_subpackages_exposed():
    import munsellrgb as m

    for sub in ["colorimetry", "data", "inference", "model", "pipeline", "utils"]:
        assert hasattr(m, sub)


def test_x64_enabled_on_import():
    import jax.numpy as jnp

    import munsellrgb  # noqa: F401

    assert jnp.asarray(1.0).dtype == jnp.float64
