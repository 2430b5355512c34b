"""
hues.py
-------

The canonical 40-step Munsell hue wheel.

Each hue family (R, YR, Y, GY, G, BG, B, PB, P, RP) is split into the
four renotation steps 2.5, 5, 7.5 and 10. The wheel order assigns every
hue an ordinal, and the continuous hue-angle used by all periodic fits is

    hue_angle = ordinal * 360 / 40

The neutral axis ("N") has no position on the wheel and maps to the
sentinel angle -1.

Examples
--------
>>> from munsellrgb.data.hues import hue_angle, hue_name
>>> hue_angle("2.5R"), hue_angle("5Y"), hue_angle("N")
(0.0, 81.0, -1.0)
>>> hue_name(180.0)
'2.5BG'
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, Union

import numpy as np

HUE_FAMILIES: Final[tuple[str, ...]] = (
    "R", "YR", "Y", "GY", "G", "BG", "B", "PB", "P", "RP"
)
HUE_STEPS: Final[tuple[str, ...]] = ("2.5", "5", "7.5", "10")

HUE_NAMES: Final[tuple[str, ...]] = tuple(
    f"{step}{family}" for family in HUE_FAMILIES for step in HUE_STEPS
)
N_HUES: Final[int] = len(HUE_NAMES)
HUE_STEP_DEGREES: Final[float] = 360.0 / N_HUES

NEUTRAL: Final[str] = "N"
ACHROMATIC_ANGLE: Final[float] = -1.0

_ORDINALS: Final[dict[str, int]] = {name: i for i, name in enumerate(HUE_NAMES)}

HueLike = Union[str, float, int]


def hue_ordinal(hue: str) -> int:
    """Return the 0-based wheel position of a hue name."""
    try:
        return _ORDINALS[hue]
    except KeyError:
        raise ValueError(
            f"Unknown Munsell hue: '{hue}'. Expected one of {', '.join(HUE_NAMES)} "
            f"or '{NEUTRAL}'"
        ) from None


def hue_angle(hue: HueLike) -> float:
    """
    Continuous hue-angle of a hue name or numeric angle.

    Parameters
    ----------
    hue : str | float
        Hue name ("5R", "10GY", ...), the neutral sentinel "N", or a
        numeric angle in degrees. Numeric angles are wrapped into
        [0, 360); negative numbers are treated as the achromatic sentinel.

    Returns
    -------
    float
        Angle in [0, 360), or -1 for the neutral axis.
    """
    if isinstance(hue, str):
        if hue == NEUTRAL:
            return ACHROMATIC_ANGLE
        return hue_ordinal(hue) * HUE_STEP_DEGREES
    angle = float(hue)
    if angle < 0:
        return ACHROMATIC_ANGLE
    return angle % 360.0


def hue_angles(hues: Sequence[HueLike]) -> np.ndarray:
    """Vectorised hue_angle()."""
    return np.array([hue_angle(h) for h in hues], dtype=np.float64)


def hue_name(angle: float) -> str:
    """Nearest hue name on the wheel; negative angles return "N"."""
    if angle < 0:
        return NEUTRAL
    ordinal = int(round((angle % 360.0) / HUE_STEP_DEGREES)) % N_HUES
    return HUE_NAMES[ordinal]
