"""
Polar - Horizontal and vertical directivity slices for 2D polar charts.
"""

from gll_balloon.polar.frequencies import (
    FREQUENCY_MATCH_TOLERANCE,
    build_log_frequencies,
    frequencies_match,
)

from gll_balloon.polar.slices import (
    DEFAULT_STEP_DEG,
    LevelRange,
    SliceSeries,
    SliceMeta,
    PolarSlices,
    build_polar_angles,
    format_polar_label,
    compute_level_range,
    normalize_levels,
    compute_polar_slices,
)

__all__ = [
    "FREQUENCY_MATCH_TOLERANCE",
    "build_log_frequencies",
    "frequencies_match",
    "DEFAULT_STEP_DEG",
    "LevelRange",
    "SliceSeries",
    "SliceMeta",
    "PolarSlices",
    "build_polar_angles",
    "format_polar_label",
    "compute_level_range",
    "normalize_levels",
    "compute_polar_slices",
]
