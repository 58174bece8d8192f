"""
Frequency axis helpers for polar slices.
"""

from __future__ import annotations

import math
from typing import Sequence

from gll_balloon.source import FrequencyDefinition

# Relative tolerance for matching an on-axis axis to the response axis
FREQUENCY_MATCH_TOLERANCE = 1e-3


def build_log_frequencies(
    definition: FrequencyDefinition | None,
    count_override: int | None = None,
) -> list[float] | None:
    """
    Build a log-spaced frequency axis: start * 2 ** (i / bands_per_octave).

    Args:
        definition: Bands per octave, start frequency and point count
        count_override: Point count to use instead of the definition's

    Returns:
        Frequency list, or None if the definition is incomplete
    """
    if definition is None:
        return None
    if not definition.bands_per_octave or not definition.start_freq:
        return None

    if count_override is not None and count_override > 0:
        count = count_override
    else:
        count = definition.point_count
    if not count or count <= 0:
        return None

    return [
        definition.start_freq * 2 ** (i / definition.bands_per_octave)
        for i in range(int(count))
    ]


def frequencies_match(
    a: Sequence[float] | None,
    b: Sequence[float] | None,
    tolerance: float = FREQUENCY_MATCH_TOLERANCE,
) -> bool:
    """True if both axes have equal length and agree element-wise."""
    if a is None or b is None or len(a) != len(b):
        return False
    for av, bv in zip(a, b):
        if not math.isfinite(av) or not math.isfinite(bv):
            return False
        if abs(av - bv) / max(1.0, abs(bv)) > tolerance:
            return False
    return True
