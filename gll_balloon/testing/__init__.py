"""
Testing utilities for gll_balloon.

Example:
    from gll_balloon.testing import make_source

    source = make_source(meridian_step=10, parallel_step=10, symmetry=3)
"""

from gll_balloon.testing.fixtures import (
    constant_level,
    stored_points,
    make_responses,
    make_source,
    make_on_axis,
    make_parsed_source,
    log_frequencies,
)

__all__ = [
    "constant_level",
    "stored_points",
    "make_responses",
    "make_source",
    "make_on_axis",
    "make_parsed_source",
    "log_frequencies",
]
