"""
gll-balloon - Loudspeaker directivity balloons from parsed GLL data.

Architecture:
    AngularResolution → GridDescriptor → Locator → {Sphere grid, Polar slices}
    Sphere grid + GlobalMaxCache → GeometryBuffer

Public API (stable):
    BalloonEngine       - Main interface: geometry(), polar_slices(), full_sphere()
    BalloonConfig       - Engine configuration (also from GLL_BALLOON_* env vars)
    SourceDirectivity   - Canonical source schema consumed by the core
    source_from_parsed  - Parsed GLL mapping -> SourceDirectivity

Building blocks:
    gll_balloon.balloon     - resolve_grid, locate_response, build_full_sphere_levels,
                              assemble_geometry, build_balloon_geometry
    gll_balloon.polar       - compute_polar_slices and chart helpers
    gll_balloon.runtime     - GlobalMaxCache
    gll_balloon.monitoring  - StructuredLogger
    gll_balloon.testing     - Synthetic source fixtures

Example:
    from gll_balloon import BalloonEngine

    engine = BalloonEngine()
    geometry = engine.geometry(parsed_source, frequency_index=0)
    if geometry is not None:
        upload(geometry.vertices, geometry.colors, geometry.indices)
"""

from gll_balloon.source import (
    Response,
    AngularResolution,
    FrequencyDefinition,
    OnAxisSpectrum,
    SourceDirectivity,
)
from gll_balloon.errors import BalloonError, SourceFormatError, InvalidBuildOptions
from gll_balloon.config import BalloonConfig
from gll_balloon.adapters import source_from_parsed, sources_from_document
from gll_balloon.balloon import (
    Symmetry,
    GridDescriptor,
    resolve_grid,
    locate_response,
    fold_azimuth,
    build_full_sphere_levels,
    BuildOptions,
    ColorScale,
    GeometryBuffer,
    assemble_geometry,
    build_balloon_geometry,
)
from gll_balloon.polar import PolarSlices, compute_polar_slices
from gll_balloon.runtime import GlobalMaxCache, compute_global_max
from gll_balloon.engine import BalloonEngine

__version__ = "1.0.0"

__all__ = [
    # Main API
    "BalloonEngine",
    "BalloonConfig",
    # Schema
    "Response",
    "AngularResolution",
    "FrequencyDefinition",
    "OnAxisSpectrum",
    "SourceDirectivity",
    "source_from_parsed",
    "sources_from_document",
    # Errors
    "BalloonError",
    "SourceFormatError",
    "InvalidBuildOptions",
    # Balloon
    "Symmetry",
    "GridDescriptor",
    "resolve_grid",
    "locate_response",
    "fold_azimuth",
    "build_full_sphere_levels",
    "BuildOptions",
    "ColorScale",
    "GeometryBuffer",
    "assemble_geometry",
    "build_balloon_geometry",
    # Polar
    "PolarSlices",
    "compute_polar_slices",
    # Cache
    "GlobalMaxCache",
    "compute_global_max",
]
