"""
Balloon - Full-sphere reconstruction and 3D geometry.

Components:
    resolve_grid              - Grid descriptor from angular metadata
    locate_response           - Symmetry-aware response lookup
    build_full_sphere_levels  - Full-sphere level grid at one frequency
    assemble_geometry         - Level grid -> vertex/color/index buffers
    build_balloon_geometry    - Source -> GeometryBuffer in one call

Usage:
    from gll_balloon.balloon import BuildOptions, build_balloon_geometry

    geometry = build_balloon_geometry(source, BuildOptions(frequency_index=4))
"""

from gll_balloon.balloon.grid import (
    Symmetry,
    GridDescriptor,
    resolve_grid,
    round_half_up,
)

from gll_balloon.balloon.locator import (
    normalize_azimuth,
    fold_azimuth,
    fold_parallel,
    response_index,
    grid_indices,
    locate_response,
    level_at,
)

from gll_balloon.balloon.sphere import (
    MISSING_LEVEL_DB,
    LevelStatistics,
    build_full_sphere_levels,
    summarize_levels,
)

from gll_balloon.balloon.mesh import (
    BuildOptions,
    ColorScale,
    GeometryBuffer,
    assemble_geometry,
    build_balloon_geometry,
    level_colors,
    level_to_color,
    spherical_to_cartesian,
    triangle_indices,
)

__all__ = [
    # Grid
    "Symmetry",
    "GridDescriptor",
    "resolve_grid",
    "round_half_up",
    # Locator
    "normalize_azimuth",
    "fold_azimuth",
    "fold_parallel",
    "response_index",
    "grid_indices",
    "locate_response",
    "level_at",
    # Sphere
    "MISSING_LEVEL_DB",
    "LevelStatistics",
    "build_full_sphere_levels",
    "summarize_levels",
    # Mesh
    "BuildOptions",
    "ColorScale",
    "GeometryBuffer",
    "assemble_geometry",
    "build_balloon_geometry",
    "level_colors",
    "level_to_color",
    "spherical_to_cartesian",
    "triangle_indices",
]
