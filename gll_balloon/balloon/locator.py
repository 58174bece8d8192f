"""
Response Locator - Map any direction to a stored response.

Stored balloons cover only the part of the sphere that the symmetry class
requires, and store each pole once instead of once per meridian. The
locator folds an arbitrary (azimuth, parallel) pair into the stored region
and converts it to a flat index into the response list.

Every failure (angle outside the stored grid, index past the end of a
truncated file) yields None for that single point.
"""

from __future__ import annotations

from typing import Sequence

from gll_balloon.balloon.grid import GridDescriptor, Symmetry, round_half_up
from gll_balloon.source import Response


def normalize_azimuth(azimuth_deg: float) -> float:
    """Wrap an azimuth into [0, 360)."""
    wrapped = azimuth_deg % 360.0
    # -1e-16 % 360 rounds up to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def fold_azimuth(azimuth_deg: float, symmetry: Symmetry | int) -> float:
    """
    Fold an azimuth into the stored meridian range of a symmetry class.

    Args:
        azimuth_deg: Any azimuth in degrees
        symmetry: Symmetry class of the stored data

    Returns:
        Folded azimuth. Quarter -> [0, 90], Vertical and Horizontal -> [0, 180],
        Axial -> 0, None -> [0, 360).
    """
    a = normalize_azimuth(azimuth_deg)

    if symmetry == Symmetry.AXIAL:
        return 0.0

    if symmetry == Symmetry.QUARTER:
        if a >= 270:
            return 360 - a
        if a >= 180:
            return a - 180
        if a >= 90:
            return 180 - a
        return a

    if symmetry == Symmetry.VERTICAL:
        return 360 - a if a >= 180 else a

    if symmetry == Symmetry.HORIZONTAL:
        # Offset from the right-side (90 deg) axis
        a = a - 90
        if a < 0:
            return -a
        if a >= 180:
            return 360 - a
        return a

    return a


def fold_parallel(parallel_deg: float, grid: GridDescriptor) -> float | None:
    """
    Bring a parallel angle into the measured range, or None if impossible.
    """
    if parallel_deg < 0 or parallel_deg > 180:
        return None

    if grid.front_half_only and parallel_deg > 90:
        return None

    if parallel_deg > grid.measured_parallel_deg:
        if not grid.symmetry.mirrors_parallel:
            return None
        mirrored = 180 - parallel_deg
        if mirrored > grid.measured_parallel_deg:
            return None
        return mirrored

    return parallel_deg


def response_index(
    meridian_idx: int,
    parallel_idx: int,
    parallel_count: int,
    front_half_only: bool,
) -> int:
    """
    Flat response index for a stored grid point (pole-deduplicated layout).

    Poles live at the start of meridian 0. Meridian 0 holds all parallels;
    every later meridian holds only the interior parallels.
    """
    last_parallel = parallel_count - 1
    is_front_pole = parallel_idx == 0
    is_back_pole = parallel_idx == last_parallel and not front_half_only

    if is_front_pole or is_back_pole:
        return parallel_idx

    if meridian_idx == 0:
        return parallel_idx

    points_per_meridian = parallel_count - (1 if front_half_only else 2)
    return parallel_count + (meridian_idx - 1) * points_per_meridian + (parallel_idx - 1)


def grid_indices(
    grid: GridDescriptor,
    azimuth_deg: float,
    parallel_deg: float,
) -> tuple[int, int] | None:
    """
    Stored (meridian_idx, parallel_idx) for a direction, or None.
    """
    lookup_azimuth = fold_azimuth(azimuth_deg, grid.symmetry)
    lookup_parallel = fold_parallel(parallel_deg, grid)
    if lookup_parallel is None:
        return None

    meridian_idx = round_half_up(lookup_azimuth / grid.meridian_step)
    parallel_idx = round_half_up(lookup_parallel / grid.parallel_step)

    if not 0 <= meridian_idx < grid.meridian_count:
        return None
    if not 0 <= parallel_idx < grid.parallel_count:
        return None

    return meridian_idx, parallel_idx


def locate_response(
    responses: Sequence[Response],
    grid: GridDescriptor | None,
    azimuth_deg: float,
    parallel_deg: float,
) -> Response | None:
    """
    Get the stored response for a direction, handling symmetry.

    Args:
        responses: Stored responses of the source
        grid: Grid descriptor from resolve_grid
        azimuth_deg: Azimuth in degrees (any real value)
        parallel_deg: Parallel angle in degrees (0 = front pole, 180 = back pole)

    Returns:
        The matching Response or None if not available
    """
    if not responses or grid is None:
        return None

    indices = grid_indices(grid, azimuth_deg, parallel_deg)
    if indices is None:
        return None

    index = response_index(
        indices[0],
        indices[1],
        grid.parallel_count,
        grid.front_half_only,
    )
    if 0 <= index < len(responses):
        return responses[index]
    return None


def level_at(response: Response | None, frequency_index: int) -> float | None:
    """Level of a response at a frequency index, None if absent."""
    if response is None:
        return None
    if not 0 <= frequency_index < len(response.levels):
        return None
    return response.levels[frequency_index]
