"""
errors.py
---------

Warning and exception types raised by munsellrgb.

Taxonomy
--------
- Degenerate inputs (zero chromaticity denominators) are never raised;
  the conversions return defined fallback values instead.
- Out-of-gamut colors are a classification (see colorimetry.gamut),
  never an error.
- Out-of-support evaluation of a fitted model emits OutOfSupportWarning.
- Fitting with too few usable samples raises InsufficientDataError.
"""


class OutOfSupportWarning(UserWarning):
    """A fitted model was evaluated outside the value/chroma range it was fitted on."""

    pass


class InsufficientDataError(ValueError):
    """A regression has fewer usable samples than basis terms."""

    pass
