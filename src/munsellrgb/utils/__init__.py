"""
utils
=====

Shared utility functions and helpers for munsellrgb.

This subpackage provides:
- diagnostics : fit summaries and inverse round-trip errors.
- math : angle wrapping and polar coordinates.
"""

from .diagnostics import fit_summary, print_fit_summary, round_trip_errors
from .math import angular_difference, polar_about, wrap_degrees

__all__ = [
    # diagnostics
    "fit_summary",
    "print_fit_summary",
    "round_trip_errors",
    # math
    "wrap_degrees",
    "angular_difference",
    "polar_about",
]
