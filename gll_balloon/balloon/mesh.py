"""
Balloon Mesh - Renderer-agnostic geometry for the 3D balloon.

Turns a full-sphere level grid into a sphere-like mesh: one vertex per grid
point (plus a seam column that repeats meridian 0), radius and color driven
by the level normalized into a [global_max - db_range, global_max] window.

Coordinate convention (GLL Z-up mapped to a Y-up renderer):
    x = r * sin(parallel) * cos(azimuth)
    y = r * cos(parallel)              # pole axis
    z = r * sin(parallel) * sin(azimuth)

Color: HSL hue from 0.66 (blue, display_min) to 0 (red, display_max),
saturation 0.75, lightness 0.5.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from gll_balloon.balloon.grid import GridDescriptor, resolve_grid
from gll_balloon.balloon.sphere import MISSING_LEVEL_DB, build_full_sphere_levels
from gll_balloon.errors import InvalidBuildOptions
from gll_balloon.runtime.cache import GlobalMaxCache, compute_global_max
from gll_balloon.source import SourceDirectivity

logger = logging.getLogger(__name__)

BASE_RADIUS = 0.3
AMPLITUDE = 0.9

HUE_AT_MIN = 0.66
SATURATION = 0.75
LIGHTNESS = 0.5


@dataclass
class BuildOptions:
    """Options for building balloon geometry."""

    frequency_index: int = 0
    db_range: float = 40.0
    scale: float = 1.0

    def __post_init__(self):
        if self.frequency_index < 0:
            raise InvalidBuildOptions("frequency_index", self.frequency_index)
        if not self.db_range > 0:
            raise InvalidBuildOptions(
                "db_range", self.db_range, "db_range must be positive",
            )
        if not self.scale > 0:
            raise InvalidBuildOptions("scale", self.scale, "scale must be positive")


@dataclass
class GeometryBuffer:
    """Vertex, color and triangle index buffers plus the level window used.

    Attributes:
        vertices: (N, 3) float positions.
        colors: (N, 3) float RGB in [0, 1].
        indices: Flat int triangle indices, 3 per face.
        global_max: Loudest level across all frequencies.
        display_min: Level mapped to the minimum radius / blue.
        display_max: Level mapped to the maximum radius / red.
    """

    vertices: np.ndarray
    colors: np.ndarray
    indices: np.ndarray
    global_max: float
    display_min: float
    display_max: float

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.size // 3)

    def to_dict(self) -> dict[str, Any]:
        """Flat lists, ready for JSON or a typed-array upload."""
        return {
            "vertices": self.vertices.reshape(-1).tolist(),
            "colors": self.colors.reshape(-1).tolist(),
            "indices": self.indices.tolist(),
            "globalMax": self.global_max,
            "displayMin": self.display_min,
            "displayMax": self.display_max,
        }


@dataclass(frozen=True)
class ColorScale:
    """Level window of the balloon, for legends and color lookups."""

    display_min: float
    display_max: float

    @classmethod
    def from_global_max(cls, global_max: float, db_range: float) -> "ColorScale":
        return cls(display_min=global_max - db_range, display_max=global_max)

    @property
    def db_range(self) -> float:
        return self.display_max - self.display_min

    @property
    def mid(self) -> float:
        return (self.display_min + self.display_max) / 2

    def ticks(self) -> tuple[float, float, float]:
        """Legend labels: (min, mid, max)."""
        return self.display_min, self.mid, self.display_max

    def normalize(self, level: float) -> float:
        """Clamp a level into [0, 1] within the window."""
        if self.db_range <= 0 or not math.isfinite(level):
            return 0.0
        return max(0.0, min(1.0, (level - self.display_min) / self.db_range))

    def color_at(self, level: float) -> tuple[float, float, float]:
        return level_to_color(self.normalize(level))


def spherical_to_cartesian(
    radius: float,
    parallel_rad: float,
    azimuth_rad: float,
) -> tuple[float, float, float]:
    """
    Convert GLL spherical coordinates to Y-up cartesian coordinates.

    Args:
        radius: Radial distance
        parallel_rad: Parallel angle in radians (0 = front pole)
        azimuth_rad: Azimuth angle in radians

    Returns:
        Tuple of (x, y, z)
    """
    sin_par = math.sin(parallel_rad)
    return (
        radius * sin_par * math.cos(azimuth_rad),
        radius * math.cos(parallel_rad),
        radius * sin_par * math.sin(azimuth_rad),
    )


def _hsl_to_rgb(hue: np.ndarray, saturation: float, lightness: float) -> np.ndarray:
    hue = np.asarray(hue, dtype=float)
    c = (1 - abs(2 * lightness - 1)) * saturation
    h6 = hue * 6
    x = c * (1 - np.abs(np.mod(h6, 2) - 1))
    m = lightness - c / 2
    zero = np.zeros_like(hue)
    cc = np.full_like(hue, c)

    sectors = [h6 < 1, h6 < 2, h6 < 3, h6 < 4, h6 < 5]
    r = np.select(sectors, [cc, x, zero, zero, x], default=cc)
    g = np.select(sectors, [x, cc, cc, x, zero], default=zero)
    b = np.select(sectors, [zero, zero, x, cc, cc], default=x)

    return np.stack([r + m, g + m, b + m], axis=-1)


def level_colors(normalized: np.ndarray) -> np.ndarray:
    """RGB colors (..., 3) for an array of normalized levels."""
    hue = (1 - np.asarray(normalized, dtype=float)) * HUE_AT_MIN
    return _hsl_to_rgb(hue, SATURATION, LIGHTNESS)


def level_to_color(normalized: float) -> tuple[float, float, float]:
    """
    Map a normalized level (0 = min, 1 = max) to an RGB color in [0, 1].
    """
    r, g, b = level_colors(np.asarray(normalized, dtype=float)).tolist()
    return r, g, b


def triangle_indices(parallel_count: int, meridian_count: int) -> np.ndarray:
    """Two triangles per grid quad, row-major with a seam column per row."""
    if parallel_count < 2 or meridian_count < 1:
        return np.zeros(0, dtype=np.int64)

    meridian_vert_count = meridian_count + 1
    p = np.arange(parallel_count - 1)[:, None]
    m = np.arange(meridian_count)[None, :]
    current = p * meridian_vert_count + m
    below = current + meridian_vert_count

    quads = np.stack(
        [current, below, current + 1, current + 1, below, below + 1],
        axis=-1,
    )
    return quads.reshape(-1).astype(np.int64)


def assemble_geometry(
    levels: np.ndarray,
    global_max: float,
    db_range: float,
    scale: float = 1.0,
) -> GeometryBuffer:
    """
    Build vertex/color/index buffers from a full-sphere level grid.

    Args:
        levels: (full_parallel_count, full_meridian_count) level grid
        global_max: Reference level mapped to the largest radius
        db_range: Width of the displayed dynamic range in dB
        scale: Size multiplier

    Returns:
        GeometryBuffer with P * (M + 1) vertices and 2 * (P - 1) * M triangles
    """
    if not db_range > 0:
        raise InvalidBuildOptions("db_range", db_range, "db_range must be positive")

    grid = np.asarray(levels, dtype=float)
    if grid.ndim != 2:
        raise InvalidBuildOptions("levels", grid.shape, "levels must be a 2D grid")

    display_max = float(global_max)
    display_min = display_max - db_range
    parallel_count, meridian_count = grid.shape

    if parallel_count == 0 or meridian_count == 0:
        return GeometryBuffer(
            vertices=np.zeros((0, 3)),
            colors=np.zeros((0, 3)),
            indices=np.zeros(0, dtype=np.int64),
            global_max=display_max,
            display_min=display_min,
            display_max=display_max,
        )

    # Seam column repeats meridian 0 so the last quad closes the sphere
    columns = np.arange(meridian_count + 1) % meridian_count
    row_levels = grid[:, columns]
    row_levels = np.where(np.isfinite(row_levels), row_levels, display_min)

    normalized = np.clip((row_levels - display_min) / db_range, 0.0, 1.0)
    radius = BASE_RADIUS * scale + AMPLITUDE * scale * normalized

    if parallel_count > 1:
        parallel = np.arange(parallel_count) / (parallel_count - 1) * math.pi
    else:
        parallel = np.zeros(1)
    azimuth = columns / meridian_count * 2 * math.pi

    sin_par = np.sin(parallel)[:, None]
    cos_par = np.cos(parallel)[:, None]
    x = radius * sin_par * np.cos(azimuth)[None, :]
    y = radius * cos_par
    z = radius * sin_par * np.sin(azimuth)[None, :]

    vertices = np.stack([x, y, z], axis=-1).reshape(-1, 3)
    colors = level_colors(normalized).reshape(-1, 3)
    indices = triangle_indices(parallel_count, meridian_count)

    return GeometryBuffer(
        vertices=vertices,
        colors=colors,
        indices=indices,
        global_max=display_max,
        display_min=display_min,
        display_max=display_max,
    )


def build_balloon_geometry(
    source: SourceDirectivity,
    options: BuildOptions,
    cache: GlobalMaxCache | None = None,
    placeholder: float = MISSING_LEVEL_DB,
    grid: GridDescriptor | None = None,
) -> GeometryBuffer | None:
    """
    Build balloon geometry for a source at one frequency.

    Args:
        source: Source with stored responses
        options: Frequency index, dB range and scale
        cache: Global max cache (a fresh scan is done when omitted)
        placeholder: Level for unresolved grid points
        grid: Already-resolved grid of this source (resolved here if omitted)

    Returns:
        GeometryBuffer, or None if the source has no balloon grid
    """
    if grid is None:
        grid = resolve_grid(source.resolution, len(source.responses))
    if grid is None:
        return None

    levels = build_full_sphere_levels(source, grid, options.frequency_index, placeholder)
    global_max = compute_global_max(source, cache)

    geometry = assemble_geometry(levels, global_max, options.db_range, options.scale)
    logger.debug(
        "Built balloon geometry: %d vertices, %d triangles",
        geometry.vertex_count, geometry.triangle_count,
    )
    return geometry
