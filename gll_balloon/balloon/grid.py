"""
Balloon Grid - Grid descriptor resolution.

Derives stored and full-sphere grid dimensions from a source's angular
resolution and symmetry class. The stored grid is what the GLL file holds
(possibly a half or quarter of the sphere); the full grid is what the
sphere builder and mesh assembler reconstruct.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum

from gll_balloon.source import AngularResolution

logger = logging.getLogger(__name__)


class Symmetry(IntEnum):
    """Symmetry class of the stored balloon (integer-coded as in GLL)."""
    NONE = 0
    VERTICAL = 1     # Mirror across vertical plane (left-right symmetric)
    HORIZONTAL = 2   # Mirror across horizontal plane (top-bottom symmetric)
    QUARTER = 3      # Both vertical and horizontal
    AXIAL = 4        # Rotationally symmetric

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def mirrors_parallel(self) -> bool:
        """Whether parallels beyond the measured range mirror to 180 - p."""
        return self in (Symmetry.HORIZONTAL, Symmetry.QUARTER)


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from -inf (JS Math.round)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class GridDescriptor:
    """Stored and reconstructed grid geometry for one balloon."""

    meridian_step: float
    parallel_step: float
    symmetry: Symmetry
    front_half_only: bool
    meridian_count: int
    parallel_count: int
    full_meridian_count: int
    full_parallel_count: int
    response_count: int = 0
    symmetry_name: str = "None"

    @property
    def measured_meridian_deg(self) -> float:
        return (self.meridian_count - 1) * self.meridian_step

    @property
    def measured_parallel_deg(self) -> float:
        return (self.parallel_count - 1) * self.parallel_step

    @property
    def points_per_meridian(self) -> int:
        """Stored points on every meridian after the first (poles skipped)."""
        return self.parallel_count - (1 if self.front_half_only else 2)

    @property
    def expected_response_count(self) -> int:
        """Number of responses a complete pole-deduplicated file stores."""
        if self.meridian_count <= 1:
            return self.parallel_count
        return self.parallel_count + (self.meridian_count - 1) * self.points_per_meridian

    @property
    def full_shape(self) -> tuple[int, int]:
        """(rows, columns) of the reconstructed level grid."""
        return self.full_parallel_count, self.full_meridian_count


def _stored_meridian_count(symmetry: Symmetry, meridian_step: float, full_count: int) -> int:
    if symmetry == Symmetry.AXIAL:
        return 1
    if symmetry == Symmetry.QUARTER:
        return max(1, round_half_up(90 / meridian_step) + 1)
    if symmetry in (Symmetry.VERTICAL, Symmetry.HORIZONTAL):
        return max(1, round_half_up(180 / meridian_step) + 1)
    return full_count


def resolve_grid(
    resolution: AngularResolution | None,
    response_count: int = 0,
) -> GridDescriptor | None:
    """
    Resolve the grid descriptor for a balloon.

    Args:
        resolution: Angular metadata from the source
        response_count: Number of stored responses (informational)

    Returns:
        GridDescriptor, or None when either step is missing or not positive
    """
    if resolution is None:
        return None

    meridian_step = resolution.meridian_step
    parallel_step = resolution.parallel_step
    if not meridian_step or not parallel_step or meridian_step <= 0 or parallel_step <= 0:
        logger.debug(
            "No balloon grid: meridian_step=%r parallel_step=%r",
            meridian_step, parallel_step,
        )
        return None

    code = resolution.symmetry or 0
    try:
        symmetry = Symmetry(code)
        symmetry_name = symmetry.label
    except ValueError:
        symmetry = Symmetry.NONE
        symmetry_name = "Unknown"

    front_half_only = bool(resolution.front_half_only)

    full_meridian_count = max(1, round_half_up(360 / meridian_step))
    full_parallel_count = max(1, round_half_up(180 / parallel_step) + 1)

    meridian_count = _stored_meridian_count(symmetry, meridian_step, full_meridian_count)
    if front_half_only:
        parallel_count = max(1, round_half_up(90 / parallel_step) + 1)
    else:
        parallel_count = full_parallel_count

    return GridDescriptor(
        meridian_step=float(meridian_step),
        parallel_step=float(parallel_step),
        symmetry=symmetry,
        front_half_only=front_half_only,
        meridian_count=meridian_count,
        parallel_count=parallel_count,
        full_meridian_count=full_meridian_count,
        full_parallel_count=full_parallel_count,
        response_count=response_count,
        symmetry_name=symmetry_name,
    )
