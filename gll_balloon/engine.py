"""
Balloon Engine - Main interface.

Ties the pieces together for a host application: resolves the grid once,
shares one global max cache across builds, clamps frequency indices to the
source's frequency axis, and emits structured log events.

Example:
    from gll_balloon import BalloonEngine

    engine = BalloonEngine()
    geometry = engine.geometry(parsed_source, frequency_index=12)
    slices = engine.polar_slices(parsed_source, frequency_index=12)
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Union

import numpy as np

from gll_balloon.adapters.parsed import source_from_parsed
from gll_balloon.balloon.grid import GridDescriptor, resolve_grid
from gll_balloon.balloon.mesh import (
    BuildOptions,
    ColorScale,
    GeometryBuffer,
    build_balloon_geometry,
)
from gll_balloon.balloon.sphere import (
    LevelStatistics,
    build_full_sphere_levels,
    summarize_levels,
)
from gll_balloon.config import BalloonConfig
from gll_balloon.errors import InvalidBuildOptions
from gll_balloon.monitoring.logging import LogLevel, StructuredLogger
from gll_balloon.polar.slices import PolarSlices, compute_polar_slices
from gll_balloon.runtime.cache import GlobalMaxCache
from gll_balloon.source import SourceDirectivity

logger = logging.getLogger(__name__)

SourceLike = Union[SourceDirectivity, Mapping[str, Any]]


class BalloonEngine:
    """Balloon Engine - builds grids, geometry and polar slices for sources.

    Example:
        engine = BalloonEngine(BalloonConfig(db_range=50))
        geometry = engine.geometry(source, frequency_index=0)
        if geometry is None:
            ...  # source has no directivity data
    """

    def __init__(
        self,
        config: BalloonConfig | None = None,
        cache: GlobalMaxCache | None = None,
        event_logger: StructuredLogger | None = None,
    ):
        """Initialize the engine.

        Args:
            config: Optional configuration. Uses defaults if not provided.
            cache: Shared global max cache. A private one is created if omitted.
            event_logger: Structured logger for build events.
        """
        self.config = config or BalloonConfig()
        if cache is None:
            cache = GlobalMaxCache(max_size=self.config.cache_size)
        self._cache = cache
        self._events = event_logger or StructuredLogger(
            name="gll_balloon",
            level=LogLevel(self.config.log_level),
            json_format=self.config.json_logs,
        )

    @property
    def cache(self) -> GlobalMaxCache:
        return self._cache

    def source(self, source: SourceLike, source_id: str | None = None) -> SourceDirectivity:
        """Coerce a parsed mapping to a SourceDirectivity (pass-through otherwise)."""
        if isinstance(source, SourceDirectivity):
            return source
        return source_from_parsed(source, source_id=source_id)

    def grid(self, source: SourceLike, source_id: str | None = None) -> GridDescriptor | None:
        """Grid descriptor of a source, or None if it has no balloon data."""
        src = self.source(source, source_id)
        grid = resolve_grid(src.resolution, len(src.responses))
        if grid is None:
            self._events.grid_unavailable(source=_describe(src))
            return None

        self._events.grid_resolved(
            grid.full_meridian_count,
            grid.full_parallel_count,
            grid.symmetry_name,
            source=_describe(src),
        )
        if grid.expected_response_count != len(src.responses):
            logger.warning(
                "Source %r stores %d responses, grid expects %d",
                _describe(src),
                len(src.responses),
                grid.expected_response_count,
            )
        return grid

    def clamp_frequency_index(self, source: SourceDirectivity, frequency_index: int) -> int:
        """Clamp an index to the last frequency of the source's axis."""
        if frequency_index < 0:
            raise InvalidBuildOptions("frequency_index", frequency_index)
        if source.frequencies:
            return min(frequency_index, len(source.frequencies) - 1)
        return frequency_index

    def global_max(self, source: SourceLike, source_id: str | None = None) -> float:
        """Loudest level across all frequencies (cached)."""
        src = self.source(source, source_id)
        cached = src in self._cache
        value = self._cache.compute(src)
        self._events.global_max_scan(value, cached, source=src.cache_key)
        return value

    def color_scale(
        self,
        source: SourceLike,
        db_range: float | None = None,
        source_id: str | None = None,
    ) -> ColorScale:
        """Display window for legends: [global_max - db_range, global_max]."""
        db_range = self.config.db_range if db_range is None else db_range
        return ColorScale.from_global_max(self.global_max(source, source_id), db_range)

    def full_sphere(
        self,
        source: SourceLike,
        frequency_index: int = 0,
        source_id: str | None = None,
    ) -> np.ndarray | None:
        """Full-sphere level grid at one frequency, or None without a grid."""
        src = self.source(source, source_id)
        grid = self.grid(src)
        if grid is None:
            return None
        index = self.clamp_frequency_index(src, frequency_index)
        return build_full_sphere_levels(src, grid, index, self.config.placeholder_level)

    def sphere_statistics(
        self,
        source: SourceLike,
        frequency_index: int = 0,
        source_id: str | None = None,
    ) -> LevelStatistics | None:
        """Min/max/mean and coverage of the full-sphere grid."""
        levels = self.full_sphere(source, frequency_index, source_id)
        if levels is None:
            return None
        return summarize_levels(levels, self.config.placeholder_level)

    def geometry(
        self,
        source: SourceLike,
        frequency_index: int = 0,
        db_range: float | None = None,
        scale: float | None = None,
        source_id: str | None = None,
    ) -> GeometryBuffer | None:
        """
        Build balloon geometry.

        Args:
            source: SourceDirectivity or parsed source mapping
            frequency_index: Frequency to display (clamped to the axis)
            db_range: Displayed dynamic range (default from config)
            scale: Size multiplier (default from config)
            source_id: Stable id for a parsed mapping, used as its cache key

        Returns:
            GeometryBuffer, or None if the source has no directivity data
        """
        src = self.source(source, source_id)
        grid = self.grid(src)
        if grid is None:
            return None

        options = BuildOptions(
            frequency_index=self.clamp_frequency_index(src, frequency_index),
            db_range=self.config.db_range if db_range is None else db_range,
            scale=self.config.scale if scale is None else scale,
        )

        start = time.perf_counter()
        geometry = build_balloon_geometry(
            src, options, cache=self._cache, placeholder=self.config.placeholder_level,
            grid=grid,
        )
        duration_ms = (time.perf_counter() - start) * 1000

        if geometry is not None:
            self._events.geometry_built(
                duration_ms,
                geometry.vertex_count,
                geometry.triangle_count,
                source=_describe(src),
                frequency_index=options.frequency_index,
            )
        return geometry

    def polar_slices(
        self,
        source: SourceLike,
        frequency_index: int = 0,
        step_deg: float | None = None,
        source_id: str | None = None,
    ) -> PolarSlices | None:
        """Horizontal/vertical polar slices, or None without a grid."""
        src = self.source(source, source_id)
        grid = self.grid(src)
        if grid is None:
            return None

        index = self.clamp_frequency_index(src, frequency_index)
        step = self.config.polar_step_deg if step_deg is None else step_deg

        start = time.perf_counter()
        slices = compute_polar_slices(src, index, step, grid=grid)
        duration_ms = (time.perf_counter() - start) * 1000

        if slices is not None:
            self._events.slices_computed(
                duration_ms,
                slices.meta.uses_on_axis,
                source=_describe(src),
                frequency_index=index,
            )
        return slices

    def invalidate(self, source: SourceDirectivity | str) -> bool:
        """Forget the cached global max of a source (or source id)."""
        return self._cache.invalidate(source)


def _describe(source: SourceDirectivity) -> str:
    # Avoids hashing the levels of unlabeled sources just to log them
    return source.label or source.source_id or "<unlabeled>"
