"""
Parsed GLL Adapter - Map parsed GLL documents to the canonical schema.

The GLL parser emits nested mappings whose keys vary between producers
(``Responses`` / ``responses``, ``Level`` / ``Levels`` / ``level``,
``BalloonData`` / ``balloon_data`` ...). All of that variation is resolved
here so that the core only ever sees SourceDirectivity.

Example:
    from gll_balloon.adapters import source_from_parsed

    source = source_from_parsed(parsed["Sources"][0], source_id="cab-12:0")
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Mapping, Sequence

from gll_balloon.errors import SourceFormatError
from gll_balloon.source import (
    AngularResolution,
    FrequencyDefinition,
    OnAxisSpectrum,
    Response,
    SourceDirectivity,
)

logger = logging.getLogger(__name__)

# Accepted spellings, in lookup order
RESPONSES_KEYS = ("Responses", "responses")
DEFINITION_KEYS = ("Definition", "definition")
BALLOON_KEYS = ("BalloonData", "balloon_data")
RESOLUTION_KEYS = ("AngularResolution", "angular_resolution")
MERIDIAN_STEP_KEYS = ("MeridianStep", "meridian_step")
PARALLEL_STEP_KEYS = ("ParallelStep", "parallel_step")
SYMMETRY_KEYS = ("Symmetry", "symmetry")
FRONT_HALF_KEYS = ("FrontHalfOnly", "front_half_only")
LEVEL_KEYS = ("Levels", "Level", "level", "levels")
PHASE_KEYS = ("Phase", "Phases", "phase", "phases")
FREQUENCY_KEYS = ("Frequencies", "frequencies")
ON_AXIS_KEYS = ("OnAxisSpectrum", "on_axis_spectrum")
FREQ_DEFINITION_KEYS = ("definition", "Definition")
BANDS_KEYS = ("bands_per_octave", "BandsPerOctave")
START_FREQ_KEYS = ("start_freq", "StartFreq", "StartFrequency")
POINT_COUNT_KEYS = ("point_count", "PointCount")
LABEL_KEYS = ("Label", "label")
SOURCES_KEYS = ("Sources", "sources")


def _first(data: Mapping[str, Any] | None, keys: Sequence[str]) -> Any:
    """First non-None value among ``keys``."""
    if not isinstance(data, Mapping):
        return None
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _number(value: Any, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise SourceFormatError(field_name, f"expected a number, got {type(value).__name__}")
    return float(value)


def _float_array(values: Any, field_name: str) -> tuple[float, ...]:
    """Numeric sequence; None entries become NaN (missing level)."""
    if values is None:
        return ()
    if hasattr(values, "tolist"):
        values = values.tolist()
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Sequence):
        raise SourceFormatError(field_name, f"expected a sequence, got {type(values).__name__}")

    result = []
    for i, value in enumerate(values):
        if value is None:
            result.append(math.nan)
            continue
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise SourceFormatError(
                field_name,
                f"non-numeric value at index {i}",
                details={"index": i, "value": repr(value)},
            )
        result.append(float(value))
    return tuple(result)


def response_from_parsed(data: Mapping[str, Any], index: int = 0) -> Response:
    """Build a Response from one parsed response mapping."""
    if not isinstance(data, Mapping):
        raise SourceFormatError(f"Responses[{index}]", "expected a mapping")

    levels = _float_array(_first(data, LEVEL_KEYS), f"Responses[{index}].Level")
    phases_raw = _first(data, PHASE_KEYS)
    phases = None
    if phases_raw is not None:
        phases = _float_array(phases_raw, f"Responses[{index}].Phase")
    return Response(levels=levels, phases=phases)


def resolution_from_parsed(source: Mapping[str, Any]) -> AngularResolution | None:
    """Angular resolution of a parsed source, or None if it has no balloon."""
    definition = _first(source, DEFINITION_KEYS)
    balloon = _first(definition, BALLOON_KEYS)
    angular = _first(balloon, RESOLUTION_KEYS)
    if angular is None:
        return None

    symmetry = _first(angular, SYMMETRY_KEYS)
    if symmetry is None:
        symmetry = 0
    if isinstance(symmetry, bool) or not isinstance(symmetry, numbers.Integral):
        raise SourceFormatError("Symmetry", f"expected an integer code, got {symmetry!r}")

    return AngularResolution(
        meridian_step=_number(_first(angular, MERIDIAN_STEP_KEYS), "MeridianStep"),
        parallel_step=_number(_first(angular, PARALLEL_STEP_KEYS), "ParallelStep"),
        symmetry=int(symmetry),
        front_half_only=bool(_first(angular, FRONT_HALF_KEYS)),
    )


def on_axis_from_parsed(source: Mapping[str, Any]) -> OnAxisSpectrum | None:
    """On-axis reference spectrum of a parsed source, if present."""
    definition = _first(source, DEFINITION_KEYS)
    on_axis = _first(definition, ON_AXIS_KEYS)
    if on_axis is None:
        return None

    levels = _float_array(_first(on_axis, LEVEL_KEYS), "OnAxisSpectrum.Level")
    freq_def = _first(on_axis, FREQ_DEFINITION_KEYS)
    frequency_definition = None
    if freq_def is not None:
        point_count = _number(_first(freq_def, POINT_COUNT_KEYS), "point_count")
        frequency_definition = FrequencyDefinition(
            bands_per_octave=_number(_first(freq_def, BANDS_KEYS), "bands_per_octave"),
            start_freq=_number(_first(freq_def, START_FREQ_KEYS), "start_freq"),
            point_count=None if point_count is None else int(point_count),
        )
    return OnAxisSpectrum(levels=levels, definition=frequency_definition)


def source_from_parsed(
    source: Mapping[str, Any],
    source_id: str | None = None,
) -> SourceDirectivity:
    """
    Convert one parsed GLL source to a SourceDirectivity.

    Args:
        source: Parsed source mapping
        source_id: Stable identifier for caching (e.g. attachment id + index)

    Returns:
        Canonical SourceDirectivity

    Raises:
        SourceFormatError: If the mapping is structurally malformed
    """
    if not isinstance(source, Mapping):
        raise SourceFormatError("source", f"expected a mapping, got {type(source).__name__}")

    raw_responses = _first(source, RESPONSES_KEYS)
    if raw_responses is None:
        raw_responses = []
    if isinstance(raw_responses, (str, bytes, Mapping)) or not isinstance(raw_responses, Sequence):
        raise SourceFormatError("Responses", "expected a list of responses")

    responses = tuple(
        response_from_parsed(item, index) for index, item in enumerate(raw_responses)
    )

    frequencies: tuple[float, ...] = ()
    if raw_responses:
        frequencies = _float_array(
            _first(raw_responses[0], FREQUENCY_KEYS), "Responses[0].Frequencies",
        )
    if not frequencies:
        frequencies = _float_array(_first(source, FREQUENCY_KEYS), "Frequencies")

    definition = _first(source, DEFINITION_KEYS)
    label = _first(definition, LABEL_KEYS) or _first(source, LABEL_KEYS) or ""

    result = SourceDirectivity(
        responses=responses,
        resolution=resolution_from_parsed(source),
        frequencies=frequencies,
        on_axis=on_axis_from_parsed(source),
        label=str(label),
        source_id=source_id,
    )
    logger.debug(
        "Adapted source %r: %d responses, %d frequencies",
        result.label, len(responses), len(frequencies),
    )
    return result


def sources_from_document(
    document: Mapping[str, Any],
    id_prefix: str | None = None,
) -> list[SourceDirectivity]:
    """
    Convert every source of a parsed GLL document.

    Args:
        document: Parsed GLL document with a Sources list
        id_prefix: Prefix for per-source ids ("<prefix>:<index>")

    Returns:
        List of SourceDirectivity, in document order
    """
    raw_sources = _first(document, SOURCES_KEYS) or []
    if isinstance(raw_sources, (str, bytes, Mapping)) or not isinstance(raw_sources, Sequence):
        raise SourceFormatError("Sources", "expected a list of sources")

    return [
        source_from_parsed(
            item,
            source_id=f"{id_prefix}:{index}" if id_prefix is not None else None,
        )
        for index, item in enumerate(raw_sources)
    ]
