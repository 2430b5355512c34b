"""
converter.py
------------

MunsellConverter: the end-to-end pipeline behind one object.

fit(raw) runs every stage on a raw renotation grid, keeps each stage's
snapshot in ``stages`` and fits the forward and inverse models on the
filtered grid. The fitted converter then answers queries in both
directions:

    converter = MunsellConverter().fit(raw)
    converter.convert("5R", 5.0, 10.0)        # -> companded sRGB
    converter.convert_to_hex("5R", 5.0, 10.0) # -> "#RRGGBB"
    converter.to_munsell(0.5, 0.5, 0.5)       # -> (value, chroma, hue_angle)
    converter.munsell_table()                 # -> dense clamped grid

Inverse queries return the approximate seeds of the inverse model unless a
refiner is configured, e.g. ``MunsellConverter(refiner="gradient")``.
"""

from __future__ import annotations

from collections.abc import Mapping

import jax.numpy as jnp
import numpy as np

from munsellrgb.colorimetry.adaptation import adapt_c_to_d65
from munsellrgb.colorimetry.constants import WHITE_D65_XY
from munsellrgb.colorimetry.conversions import XYZ_to_xyY, xyY_to_XYZ
from munsellrgb.colorimetry.gamut import GamutConfig
from munsellrgb.colorimetry.rgb import rgb_to_hex, srgb_to_xyz, xyz_to_srgb
from munsellrgb.data.dataset import SampleGrid
from munsellrgb.data.hues import ACHROMATIC_ANGLE, HUE_NAMES, hue_angle, hue_angles
from munsellrgb.data.normalize import normalize_grid
from munsellrgb.inference import REFINERS, Refiner
from munsellrgb.model.basis import LinearFit
from munsellrgb.model.forward import ForwardConfig, ForwardModel, fit_forward_model
from munsellrgb.model.inverse import InverseConfig, InverseModel, fit_inverse_model
from munsellrgb.model.outliers import OutlierConfig, filter_outliers

from .stages import add_rgb, add_tristimulus, adapt_grid, clamp_grid, synthesize_grid

ILLUMINANTS = ("D65", "C")


def _resolve_refiner(refiner: str | Refiner | None, refiner_config: dict | None) -> Refiner | None:
    if refiner is None:
        if refiner_config is not None:
            raise ValueError("Cannot pass refiner_config without a refiner")
        return None
    if isinstance(refiner, str):
        if refiner not in REFINERS:
            available = ", ".join(REFINERS.keys())
            raise ValueError(f"Unknown refiner: '{refiner}'. Available: {available}")
        return REFINERS[refiner](**(refiner_config or {}))
    if isinstance(refiner, Refiner):
        if refiner_config is not None:
            raise ValueError("Cannot pass refiner_config with Refiner instance")
        return refiner
    raise TypeError(f"refiner must be Refiner, str or None, got {type(refiner)}")


def _as_hue_angles(hue) -> np.ndarray:
    """Hue names, "N" or numeric angles -> hue-angles (negative -> -1)."""
    if isinstance(hue, str):
        return np.asarray(hue_angle(hue))
    arr = np.asarray(hue)
    if arr.dtype.kind in "OUS":
        return hue_angles(arr.ravel()).reshape(arr.shape)
    arr = arr.astype(np.float64)
    return np.where(arr < 0, ACHROMATIC_ANGLE, np.mod(arr, 360.0))


class MunsellConverter:
    """
    Fit and query the Munsell <-> sRGB model.

    Parameters
    ----------
    forward_config : ForwardConfig, optional
    inverse_config : InverseConfig, optional
    outlier_config : OutlierConfig, optional
    gamut_config : GamutConfig, optional
        Used by clamp stages and munsell_table().
    hues : sequence of str, default=HUE_NAMES
        Hues for which the grey axis is synthesized and tabulated.
    refiner : {"gradient"} | Refiner | None, default=None
        Optional refinement of inverse estimates.
    refiner_config : dict | None
        Keyword arguments for a string-selected refiner,
        e.g. {"steps": 300, "learning_rate": 0.02}.

    Raises
    ------
    ValueError
        On an unknown refiner name or a refiner_config without a name.
    TypeError
        If refiner is of an unsupported type.
    """

    def __init__(
        self,
        forward_config: ForwardConfig | None = None,
        inverse_config: InverseConfig | None = None,
        outlier_config: OutlierConfig | None = None,
        gamut_config: GamutConfig | None = None,
        *,
        hues=HUE_NAMES,
        refiner: str | Refiner | None = None,
        refiner_config: dict | None = None,
    ):
        self.forward_config = forward_config or ForwardConfig()
        self.inverse_config = inverse_config or InverseConfig()
        self.outlier_config = outlier_config or OutlierConfig()
        self.gamut_config = gamut_config or GamutConfig()
        self.hues = tuple(hues)
        self.refiner = _resolve_refiner(refiner, refiner_config)

        self._stages: dict[str, SampleGrid] | None = None
        self._forward: ForwardModel | None = None
        self._inverse: InverseModel | None = None

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------
    def fit(self, raw: SampleGrid) -> MunsellConverter:
        """
        Run the pipeline on raw renotation rows and fit both models.

        Parameters
        ----------
        raw : SampleGrid
            Columns (hue, value, chroma, x, y, Y), Y on the 0-100 scale.

        Returns
        -------
        MunsellConverter
            self, for chaining.
        """
        normalized = normalize_grid(raw, self.hues)
        tristimulus = add_tristimulus(normalized)
        adapted = adapt_grid(tristimulus)
        filtered = filter_outliers(adapted, self.outlier_config)

        forward = fit_forward_model(filtered, self.forward_config)
        inverse = fit_inverse_model(filtered, self.inverse_config)

        rgb = add_rgb(filtered)
        clamped = clamp_grid(rgb, self.gamut_config)

        self._stages = {
            "raw": raw,
            "normalized": normalized,
            "tristimulus": tristimulus,
            "adapted": adapted,
            "filtered": filtered,
            "rgb": rgb,
            "clamped": clamped,
        }
        self._forward = forward
        self._inverse = inverse
        return self

    def _check_fitted(self, caller: str) -> None:
        if self._stages is None:
            raise RuntimeError(f"Must call fit() before {caller}()")

    @property
    def is_fitted(self) -> bool:
        return self._stages is not None

    @property
    def stages(self) -> Mapping[str, SampleGrid]:
        """Snapshots of every pipeline stage of the last fit(), keyed by stage name."""
        self._check_fitted("stages")
        return dict(self._stages)

    @property
    def forward_model(self) -> ForwardModel:
        self._check_fitted("forward_model")
        return self._forward

    @property
    def inverse_model(self) -> InverseModel:
        self._check_fitted("inverse_model")
        return self._inverse

    @property
    def fits(self) -> dict[str, LinearFit]:
        """Every component fit of both models keyed by name."""
        self._check_fitted("fits")
        return {**self._forward.fits, **self._inverse.fits}

    # ------------------------------------------------------------------
    # Munsell -> sRGB
    # ------------------------------------------------------------------
    def convert(self, hue, value, chroma, *, clip: bool = False) -> jnp.ndarray:
        """
        Munsell coordinates to companded sRGB.

        Parameters
        ----------
        hue : str | float | array-like
            Hue name ("5R", "N") or hue-angle in degrees.
        value, chroma : float | array-like
        clip : bool, default=False
            Clamp channels into [0, 1].

        Returns
        -------
        jnp.ndarray, shape (..., 3)

        Notes
        -----
        Neutral hues ("N" or a negative angle) are evaluated at chroma 0.
        """
        self._check_fitted("convert")
        angle = _as_hue_angles(hue)
        chroma = np.where(angle < 0, 0.0, np.asarray(chroma, dtype=np.float64))
        XYZ = self._forward.predict(angle, value, chroma)
        return xyz_to_srgb(XYZ, clip=clip)

    def convert_to_hex(self, hue, value, chroma) -> str | list[str]:
        """Munsell coordinates to "#RRGGBB" (clamped)."""
        self._check_fitted("convert_to_hex")
        return rgb_to_hex(self.convert(hue, value, chroma, clip=True))

    # ------------------------------------------------------------------
    # sRGB / xyY -> Munsell
    # ------------------------------------------------------------------
    def to_munsell(self, R, G, B) -> tuple[jnp.ndarray, ...]:
        """
        Companded sRGB to (value, chroma, hue_angle).

        Hue-angle is -1 for neutral colors. See InverseModel.estimate.
        """
        self._check_fitted("to_munsell")
        rgb = jnp.stack(
            jnp.broadcast_arrays(*(jnp.asarray(c, dtype=float) for c in (R, G, B))), axis=-1
        )
        return self._estimate(XYZ_to_xyY(srgb_to_xyz(rgb), WHITE_D65_XY))

    def xyY_to_munsell(self, x, y, Y, *, illuminant: str = "D65") -> tuple[jnp.ndarray, ...]:
        """
        CIE xyY to (value, chroma, hue_angle).

        Parameters
        ----------
        x, y, Y : float | array-like
            Chromaticity and luminance, Y in [0, 1].
        illuminant : {"D65", "C"}, default="D65"
            Reference white of the input. Illuminant C input (as in the
            renotation tables) is adapted to D65 first.
        """
        self._check_fitted("xyY_to_munsell")
        if illuminant not in ILLUMINANTS:
            raise ValueError(f"Unknown illuminant: '{illuminant}'. Use one of {ILLUMINANTS}.")
        XYZ = xyY_to_XYZ(x, y, Y)
        if illuminant == "C":
            XYZ = adapt_c_to_d65(XYZ)
        return self._estimate(XYZ_to_xyY(XYZ, WHITE_D65_XY))

    def _estimate(self, xyY: jnp.ndarray) -> tuple[jnp.ndarray, ...]:
        seed = self._inverse.estimate(xyY[..., :2], xyY[..., 2])
        if self.refiner is None:
            return seed
        return self.refiner.refine(self._forward, xyY, seed)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    def munsell_table(self, **kwargs) -> SampleGrid:
        """
        Dense clamped table from the forward model.

        Every hue x value 1..9 x chroma 2..24, plus the neutral axis at
        value 0..10, converted to sRGB and clamped with gamut_config.
        Keyword arguments are passed to synthesize_grid().
        """
        self._check_fitted("munsell_table")
        kwargs.setdefault("hues", self.hues)
        synthesized = synthesize_grid(self._forward, **kwargs)
        return clamp_grid(add_rgb(synthesized), self.gamut_config)
