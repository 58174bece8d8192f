"""
Source Types - The canonical directivity schema consumed by the core.

A SourceDirectivity is what the balloon and polar modules read. It is built
once (usually by gll_balloon.adapters.parsed from a parsed GLL document) and
never mutated afterwards. Every field has exactly one name here; naming
variants of the parsed format are resolved in the adapter, not in the core.

Layout of ``responses`` (pole-deduplicated, meridian-major):

    meridian 0:      parallel 0 .. parallel_count-1  (poles included)
    meridian 1..N:   parallel 1 .. last interior     (poles skipped)

Missing angular metadata is modelled as None, never as 0.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from functools import cached_property


@dataclass(frozen=True)
class Response:
    """One measured direction: per-frequency levels (dB) and optional phases."""

    levels: tuple[float, ...] = ()
    phases: tuple[float, ...] | None = None

    def __post_init__(self):
        object.__setattr__(self, "levels", tuple(float(v) for v in self.levels))
        if self.phases is not None:
            object.__setattr__(self, "phases", tuple(float(v) for v in self.phases))

    def __len__(self) -> int:
        return len(self.levels)


@dataclass(frozen=True)
class AngularResolution:
    """Balloon angular-resolution metadata.

    Attributes:
        meridian_step: Azimuth step in degrees (None if absent).
        parallel_step: Polar step in degrees (None if absent).
        symmetry: Integer symmetry code 0-4.
        front_half_only: True if only parallels 0-90 were measured.
    """

    meridian_step: float | None = None
    parallel_step: float | None = None
    symmetry: int = 0
    front_half_only: bool = False


@dataclass(frozen=True)
class FrequencyDefinition:
    """Log-spaced frequency axis definition (bands per octave from a start)."""

    bands_per_octave: float | None = None
    start_freq: float | None = None
    point_count: int | None = None


@dataclass(frozen=True)
class OnAxisSpectrum:
    """Reference on-axis spectrum stored alongside relative balloon data."""

    levels: tuple[float, ...] = ()
    definition: FrequencyDefinition | None = None

    def __post_init__(self):
        object.__setattr__(self, "levels", tuple(float(v) for v in self.levels))


@dataclass(frozen=True)
class SourceDirectivity:
    """A measured acoustic source.

    Attributes:
        responses: Stored (symmetry-reduced, pole-deduplicated) responses.
        resolution: Angular metadata, or None if the source has no balloon.
        frequencies: Shared frequency axis for all responses (Hz).
        on_axis: Optional on-axis reference spectrum.
        label: Display label.
        source_id: Stable caller-supplied identifier used as the cache key.
    """

    responses: tuple[Response, ...] = ()
    resolution: AngularResolution | None = None
    frequencies: tuple[float, ...] = ()
    on_axis: OnAxisSpectrum | None = None
    label: str = ""
    source_id: str | None = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "responses", tuple(self.responses))
        object.__setattr__(self, "frequencies", tuple(float(f) for f in self.frequencies))

    @cached_property
    def content_digest(self) -> str:
        """Hash of the measurement content (levels and resolution)."""
        payload = {
            "resolution": None if self.resolution is None else [
                self.resolution.meridian_step,
                self.resolution.parallel_step,
                self.resolution.symmetry,
                self.resolution.front_half_only,
            ],
            "levels": [list(r.levels) for r in self.responses],
        }
        combined = json.dumps(payload, separators=(",", ":"))
        return hashlib.sha256(combined.encode()).hexdigest()[:32]

    @property
    def cache_key(self) -> str:
        """Key for per-source caches: source_id if given, else content digest."""
        if self.source_id:
            return self.source_id
        return self.content_digest
