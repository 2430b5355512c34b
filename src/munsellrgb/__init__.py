"""
munsellrgb
==========

Continuous Munsell <-> sRGB conversion fitted to the renotation data.

This package turns the sparse Munsell renotation samples (hue, value,
chroma, x, y, Y under Illuminant C) into a calibrated, continuous model:
every stage is an explicit transform over an immutable sample grid, and
the fitted forward and inverse models are plain JAX functions that can
be evaluated, differentiated and refined.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. Data (data/):
   - SampleGrid: stage-tagged column store keyed by (hue, value, chroma).
   - normalize_grid: synthesizes the grey axis, adds the hue-angle,
     rescales Y to [0, 1].

2. Colorimetry (colorimetry/):
   - xyY -> XYZ, Bradford Illuminant C -> D65, sRGB companding,
     gamut classification and clamping. Fixed transforms, no fitting.

3. Models (model/):
   - Forward model: grey axis + per-value amplitude + standardized
     hue/chroma shape, fitted by linear least squares over named bases.
   - Inverse model: value polynomial plus piecewise chroma-ratio and
     hue-correction dispatch tables over the polar chromaticity.
   - Outlier filter: static exclusion bounds and known bad samples.

4. Refinement (inference/):
   - GradientRefiner improves inverse seeds against the forward model
     with Optax.

5. Pipeline (pipeline/):
   - MunsellConverter chains every stage, keeps each snapshot and
     answers conversions in both directions.

Unified import style
--------------------
Top-level:
  from munsellrgb import MunsellConverter, SampleGrid, GradientRefiner

Subpackages:
  from munsellrgb.data import SampleGrid, normalize_grid, hue_angle
  from munsellrgb.colorimetry import xyY_to_XYZ, adapt_c_to_d65, xyz_to_srgb, is_in_gamut
  from munsellrgb.model import fit_forward_model, fit_inverse_model, filter_outliers
  from munsellrgb.pipeline import add_tristimulus, adapt_grid, add_rgb, clamp_grid
  from munsellrgb.utils import fit_summary, round_trip_errors

Data flow
---------
- The raw grid (hue, value, chroma, x, y, Y) comes from an external reader.
- normalized -> tristimulus -> adapted -> filtered -> rgb -> clamped.
- Forward and inverse models are fitted on the filtered grid.
- munsell_table() evaluates the forward model on a dense lattice
  (stage "synthesized") and clamps it.

Numerics
--------
64-bit JAX is enabled on import: the degree-5 and degree-7 polynomial
fits are ill-conditioned in float32.

----------------------------------------------------------------------
"""

import jax

jax.config.update("jax_enable_x64", True)

# Re-export subpackages for unified import style (e.g., munsellrgb.model, munsellrgb.pipeline)
from . import colorimetry as colorimetry  # noqa: E402
from . import data as data  # noqa: E402
from . import inference as inference  # noqa: E402
from . import model as model  # noqa: E402
from . import pipeline as pipeline  # noqa: E402
from . import utils as utils  # noqa: E402

# Colorimetry
from .colorimetry.gamut import GamutConfig, is_in_gamut  # noqa: E402

# Data
from .data.dataset import Sample, SampleGrid  # noqa: E402
from .data.normalize import normalize_grid  # noqa: E402
from .errors import InsufficientDataError, OutOfSupportWarning  # noqa: E402

# Inference
from .inference import REFINERS, GradientRefiner, Refiner  # noqa: E402

# Models
from .model.forward import ForwardConfig, ForwardModel, fit_forward_model  # noqa: E402
from .model.inverse import InverseConfig, InverseModel, fit_inverse_model  # noqa: E402
from .model.outliers import OutlierConfig, filter_outliers  # noqa: E402

# Pipeline
from .pipeline.converter import MunsellConverter  # noqa: E402

__version__ = "0.1.0"

__all__ = [
    # End-to-end
    "MunsellConverter",
    # Data handling
    "Sample",
    "SampleGrid",
    "normalize_grid",
    # Models
    "ForwardConfig",
    "ForwardModel",
    "fit_forward_model",
    "InverseConfig",
    "InverseModel",
    "fit_inverse_model",
    "OutlierConfig",
    "filter_outliers",
    # Colorimetry
    "GamutConfig",
    "is_in_gamut",
    # Inference
    "Refiner",
    "GradientRefiner",
    "REFINERS",
    # Errors
    "OutOfSupportWarning",
    "InsufficientDataError",
    # Subpackages
    "colorimetry",
    "data",
    "inference",
    "model",
    "pipeline",
    "utils",
]
