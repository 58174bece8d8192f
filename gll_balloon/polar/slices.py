"""
Polar Slices - Horizontal and vertical cuts through the balloon.

Produces the two classic 2D polar plots at one frequency:

    horizontal: front -> right -> back -> left  (meridians 90 / 270)
    vertical:   front -> top -> back -> bottom  (meridians 0 / 180)

Angles run 0, -step, ..., -180, 180-step, ..., step so the chart line is
drawn continuously around the circle. Missing points are None (not a
placeholder level) so the chart can leave a gap.

When the source stores relative levels plus a separate on-axis spectrum on
the same frequency axis, each point is reconstructed as relative + on-axis.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from gll_balloon.balloon.grid import GridDescriptor, resolve_grid
from gll_balloon.balloon.locator import level_at, locate_response
from gll_balloon.polar.frequencies import build_log_frequencies, frequencies_match
from gll_balloon.source import SourceDirectivity

logger = logging.getLogger(__name__)

DEFAULT_STEP_DEG = 10


@dataclass
class LevelRange:
    """Min/max of a level series; both None if the series has no data."""
    min: float | None = None
    max: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.max is None


@dataclass
class SliceSeries:
    """One polar cut: a level per angle plus the plane it lies in."""

    levels: list[float | None]
    meridian_deg: float
    max_parallel: float | None = None
    can_mirror_parallel: bool | None = None

    def normalized(self) -> list[float | None]:
        """Levels relative to this series' maximum."""
        return normalize_levels(self.levels)


@dataclass
class SliceMeta:
    """Per-call metadata for labelling a polar chart."""

    uses_on_axis: bool
    symmetry: int
    symmetry_name: str
    front_half_only: bool
    measured_meridian_deg: float
    measured_parallel_deg: float
    step_deg: float


@dataclass
class PolarSlices:
    """Horizontal and vertical polar slices at one frequency index."""

    angles: list[float]
    labels: list[str]
    horizontal: SliceSeries
    vertical: SliceSeries
    meta: SliceMeta
    frequency_index: int = 0
    frequency: float | None = field(default=None)

    def level_range(
        self,
        show_horizontal: bool = True,
        show_vertical: bool = True,
        normalized: bool = False,
    ) -> LevelRange:
        """Range over the visible series."""
        series: list[float | None] = []
        for visible, cut in ((show_horizontal, self.horizontal), (show_vertical, self.vertical)):
            if visible:
                series.extend(cut.normalized() if normalized else cut.levels)
        return compute_level_range(series)

    def chart_range(
        self,
        show_horizontal: bool = True,
        show_vertical: bool = True,
        normalized: bool = False,
        headroom_db: float = 3.0,
        span_db: float = 40.0,
    ) -> tuple[float, float] | None:
        """Suggested (min, max) for the radial axis, or None without data."""
        level_range = self.level_range(show_horizontal, show_vertical, normalized)
        if level_range.is_empty:
            return None
        return level_range.max - span_db, level_range.max + headroom_db


def build_polar_angles(step_deg: float = DEFAULT_STEP_DEG) -> list[float]:
    """
    Build the chart angle order: 0, -step, ..., -180, 180-step, ..., step.

    Args:
        step_deg: Angular step in degrees (must be positive)

    Returns:
        List of angles in degrees
    """
    if not step_deg > 0:
        raise ValueError(f"step_deg must be positive, got {step_deg}")

    angles = [0]
    angle = -step_deg
    while angle >= -180:
        angles.append(angle)
        angle -= step_deg
    angle = 180 - step_deg
    while angle > 0:
        angles.append(angle)
        angle -= step_deg
    return angles


def format_polar_label(angle_deg: float) -> str:
    """Chart label for an angle: '0°', '±180°', '-90°', '170°'."""
    normalized = ((angle_deg + 180) % 360) - 180
    if abs(normalized) == 180:
        return "±180°"
    if abs(normalized) < 1e-6:
        return "0°"
    return f"{normalized:g}°"


def compute_level_range(levels: Iterable[float | None]) -> LevelRange:
    """Min and max of a series, ignoring None and NaN."""
    result = LevelRange()
    for value in levels:
        if value is None or math.isnan(value):
            continue
        if result.min is None or value < result.min:
            result.min = value
        if result.max is None or value > result.max:
            result.max = value
    return result


def normalize_levels(levels: Sequence[float | None]) -> list[float | None]:
    """Subtract the series maximum from every valid level; keep gaps."""
    level_range = compute_level_range(levels)
    if level_range.is_empty:
        return list(levels)
    peak = level_range.max
    return [
        value - peak if value is not None and not math.isnan(value) else value
        for value in levels
    ]


def _on_axis_offset(source: SourceDirectivity, frequency_index: int) -> float | None:
    """On-axis level to add at this index, or None if it cannot be combined."""
    on_axis = source.on_axis
    if on_axis is None or not on_axis.levels or not source.responses:
        return None

    on_axis_frequencies = build_log_frequencies(on_axis.definition, len(on_axis.levels))
    if on_axis_frequencies is None:
        return None
    if not frequencies_match(source.frequencies, on_axis_frequencies):
        return None

    if not 0 <= frequency_index < len(on_axis.levels):
        return None
    offset = on_axis.levels[frequency_index]
    if not math.isfinite(offset):
        return None
    return offset


def _slice_level(
    source: SourceDirectivity,
    grid: GridDescriptor,
    meridian_deg: float,
    parallel_deg: float,
    frequency_index: int,
    offset: float | None,
) -> float | None:
    response = locate_response(source.responses, grid, meridian_deg, parallel_deg)
    level = level_at(response, frequency_index)
    if level is None or not math.isfinite(level):
        return None
    if offset is not None:
        return level + offset
    return level


def compute_polar_slices(
    source: SourceDirectivity,
    frequency_index: int,
    step_deg: float = DEFAULT_STEP_DEG,
    grid: GridDescriptor | None = None,
) -> PolarSlices | None:
    """
    Compute horizontal and vertical polar slices at a frequency index.

    Args:
        source: Source with stored responses
        frequency_index: Index into each response's level array
        step_deg: Display resolution of the slices in degrees
        grid: Already-resolved grid of this source (resolved here if omitted)

    Returns:
        PolarSlices, or None if the source has no balloon grid
    """
    if grid is None:
        grid = resolve_grid(source.resolution, len(source.responses))
    if grid is None:
        return None

    angles = build_polar_angles(step_deg)
    offset = _on_axis_offset(source, frequency_index)

    horizontal: list[float | None] = []
    vertical: list[float | None] = []
    for angle in angles:
        parallel_deg = abs(angle)
        horizontal.append(_slice_level(
            source, grid, 90 if angle >= 0 else 270, parallel_deg, frequency_index, offset,
        ))
        vertical.append(_slice_level(
            source, grid, 0 if angle >= 0 else 180, parallel_deg, frequency_index, offset,
        ))

    frequency = None
    if 0 <= frequency_index < len(source.frequencies):
        frequency = source.frequencies[frequency_index]

    logger.debug(
        "Polar slices at index %d: %d angles, on-axis=%s",
        frequency_index, len(angles), offset is not None,
    )

    return PolarSlices(
        angles=angles,
        labels=[format_polar_label(a) for a in angles],
        horizontal=SliceSeries(levels=horizontal, meridian_deg=90),
        vertical=SliceSeries(
            levels=vertical,
            meridian_deg=0,
            max_parallel=grid.measured_parallel_deg,
            can_mirror_parallel=grid.symmetry.mirrors_parallel,
        ),
        meta=SliceMeta(
            uses_on_axis=offset is not None,
            symmetry=int(grid.symmetry),
            symmetry_name=grid.symmetry_name,
            front_half_only=grid.front_half_only,
            measured_meridian_deg=grid.measured_meridian_deg,
            measured_parallel_deg=grid.measured_parallel_deg,
            step_deg=step_deg,
        ),
        frequency_index=frequency_index,
        frequency=frequency,
    )
