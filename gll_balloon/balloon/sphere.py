"""
Full-Sphere Builder - Reconstruct the complete level grid.

Walks every point of the full-sphere grid, asks the locator for the stored
response that covers it, and reads the level at one frequency index.

Grid layout:
    levels[parallel_idx, meridian_idx]
    rows:    0 = front pole .. full_parallel_count-1 = back pole
    columns: 0 .. full_meridian_count-1 (0 to 360 - meridian_step)

Points the locator cannot resolve get a placeholder level (-100 dB by
default) so the mesh always has a concrete radius to draw.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from gll_balloon.balloon.grid import GridDescriptor
from gll_balloon.balloon.locator import level_at, locate_response
from gll_balloon.source import SourceDirectivity

# Level used for points with no data
MISSING_LEVEL_DB = -100.0


def build_full_sphere_levels(
    source: SourceDirectivity,
    grid: GridDescriptor,
    frequency_index: int,
    placeholder: float = MISSING_LEVEL_DB,
) -> np.ndarray:
    """
    Build the full-sphere level grid for one frequency, handling symmetry.

    Args:
        source: Source with stored responses
        grid: Grid descriptor from resolve_grid
        frequency_index: Index into each response's level array
        placeholder: Level for unresolved or non-finite points

    Returns:
        Float array of shape (full_parallel_count, full_meridian_count)
    """
    levels = np.full(grid.full_shape, placeholder, dtype=float)

    for p_idx in range(grid.full_parallel_count):
        parallel_deg = p_idx * grid.parallel_step

        for m_idx in range(grid.full_meridian_count):
            azimuth_deg = m_idx * grid.meridian_step

            response = locate_response(source.responses, grid, azimuth_deg, parallel_deg)
            level = level_at(response, frequency_index)
            if level is not None and math.isfinite(level):
                levels[p_idx, m_idx] = level

    return levels


@dataclass
class LevelStatistics:
    """Summary of a reconstructed grid, ignoring placeholder cells."""

    min: float | None
    max: float | None
    mean: float | None
    measured: int
    missing: int

    @property
    def total(self) -> int:
        return self.measured + self.missing

    @property
    def coverage(self) -> float:
        """Fraction of grid cells backed by a measurement."""
        return self.measured / self.total if self.total else 0.0


def summarize_levels(
    levels: np.ndarray,
    placeholder: float = MISSING_LEVEL_DB,
) -> LevelStatistics:
    """Min/max/mean over measured cells and a count of placeholder cells."""
    values = np.asarray(levels, dtype=float)
    mask = np.isfinite(values) & (values != placeholder)
    measured = values[mask]

    if measured.size == 0:
        return LevelStatistics(
            min=None, max=None, mean=None,
            measured=0, missing=int(values.size),
        )

    return LevelStatistics(
        min=float(measured.min()),
        max=float(measured.max()),
        mean=float(measured.mean()),
        measured=int(measured.size),
        missing=int(values.size - measured.size),
    )
