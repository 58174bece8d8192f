"""
Test Fixtures - Synthetic balloon sources.

Provides:
    - Stored-grid walkers in pole-deduplicated order
    - Synthetic SourceDirectivity builders
    - Parsed (PascalCase) source documents for adapter tests
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Sequence

from gll_balloon.balloon.grid import resolve_grid
from gll_balloon.source import (
    AngularResolution,
    FrequencyDefinition,
    OnAxisSpectrum,
    Response,
    SourceDirectivity,
)

# level_fn(meridian_deg, parallel_deg, frequency_index) -> level in dB
LevelFn = Callable[[float, float, int], float]


def constant_level(level: float = -20.0) -> LevelFn:
    """Level function returning the same value everywhere."""
    return lambda meridian_deg, parallel_deg, frequency_index: level


def stored_points(
    meridian_count: int,
    parallel_count: int,
    front_half_only: bool = False,
) -> Iterator[tuple[int, int]]:
    """
    Yield (meridian_idx, parallel_idx) in stored response order.

    Meridian 0 contributes every parallel; later meridians skip the
    front pole and, unless front_half_only, the back pole.
    """
    for p_idx in range(parallel_count):
        yield 0, p_idx

    last = parallel_count if front_half_only else parallel_count - 1
    for m_idx in range(1, meridian_count):
        for p_idx in range(1, last):
            yield m_idx, p_idx


def make_responses(
    meridian_step: float,
    parallel_step: float,
    symmetry: int = 0,
    front_half_only: bool = False,
    level_fn: LevelFn | None = None,
    frequency_count: int = 1,
) -> list[Response]:
    """Responses for a complete stored grid, in file order."""
    resolution = AngularResolution(meridian_step, parallel_step, symmetry, front_half_only)
    grid = resolve_grid(resolution)
    if grid is None:
        return []
    level_fn = level_fn or constant_level()

    responses = []
    for m_idx, p_idx in stored_points(grid.meridian_count, grid.parallel_count, front_half_only):
        meridian_deg = m_idx * meridian_step
        parallel_deg = p_idx * parallel_step
        responses.append(Response(levels=tuple(
            level_fn(meridian_deg, parallel_deg, f) for f in range(frequency_count)
        )))
    return responses


def make_source(
    meridian_step: float = 10.0,
    parallel_step: float = 10.0,
    symmetry: int = 0,
    front_half_only: bool = False,
    level_fn: LevelFn | None = None,
    frequencies: Sequence[float] = (1000.0,),
    drop: Sequence[int] = (),
    truncate: int | None = None,
    on_axis: OnAxisSpectrum | None = None,
    source_id: str | None = None,
    label: str = "Test Source",
) -> SourceDirectivity:
    """
    Create a synthetic source with one response per stored grid point.

    Args:
        meridian_step, parallel_step: Angular steps in degrees
        symmetry: Symmetry code 0-4
        front_half_only: Store only parallels 0-90
        level_fn: Level per (meridian_deg, parallel_deg, frequency_index)
        frequencies: Frequency axis; one level per frequency
        drop: Stored response indices to blank out (levels=()), keeping
            every other response at its stored position
        truncate: Keep only the first N responses (simulates truncated files)
        on_axis: Optional on-axis spectrum
        source_id: Stable cache id

    Returns:
        SourceDirectivity
    """
    responses = make_responses(
        meridian_step,
        parallel_step,
        symmetry,
        front_half_only,
        level_fn,
        frequency_count=len(frequencies),
    )
    dropped = set(drop)
    responses = [
        Response(levels=()) if i in dropped else r
        for i, r in enumerate(responses)
    ]
    if truncate is not None:
        responses = responses[:truncate]

    return SourceDirectivity(
        responses=tuple(responses),
        resolution=AngularResolution(meridian_step, parallel_step, symmetry, front_half_only),
        frequencies=tuple(frequencies),
        on_axis=on_axis,
        label=label,
        source_id=source_id,
    )


def log_frequencies(start: float, bands_per_octave: float, count: int) -> list[float]:
    """Log-spaced frequency axis matching FrequencyDefinition semantics."""
    return [start * 2 ** (i / bands_per_octave) for i in range(count)]


def make_on_axis(
    levels: Sequence[float],
    start_freq: float = 100.0,
    bands_per_octave: float = 3.0,
) -> OnAxisSpectrum:
    """On-axis spectrum with a log frequency definition."""
    return OnAxisSpectrum(
        levels=tuple(levels),
        definition=FrequencyDefinition(
            bands_per_octave=bands_per_octave,
            start_freq=start_freq,
            point_count=len(levels),
        ),
    )


def make_parsed_source(
    meridian_step: float | None = 10.0,
    parallel_step: float | None = 10.0,
    symmetry: int = 0,
    front_half_only: bool = False,
    level: float = -20.0,
    frequencies: Sequence[float] = (1000.0,),
    label: str = "Parsed Source",
    level_key: str = "Level",
) -> dict[str, Any]:
    """
    Parsed GLL source document (PascalCase keys) for adapter tests.
    """
    responses: list[dict[str, Any]] = []
    if meridian_step and parallel_step:
        for response in make_responses(
            meridian_step,
            parallel_step,
            symmetry,
            front_half_only,
            constant_level(level),
            frequency_count=len(frequencies),
        ):
            responses.append({
                level_key: list(response.levels),
                "Phase": [0.0] * len(response.levels),
                "Frequencies": list(frequencies),
            })

    return {
        "Definition": {
            "Label": label,
            "BalloonData": {
                "AngularResolution": {
                    "MeridianStep": meridian_step,
                    "ParallelStep": parallel_step,
                    "Symmetry": symmetry,
                    "FrontHalfOnly": front_half_only,
                },
            },
        },
        "Responses": responses,
    }
