"""
Adapters - Convert external data shapes into the canonical source schema.
"""

from gll_balloon.adapters.parsed import (
    source_from_parsed,
    sources_from_document,
    response_from_parsed,
    resolution_from_parsed,
    on_axis_from_parsed,
)

__all__ = [
    "source_from_parsed",
    "sources_from_document",
    "response_from_parsed",
    "resolution_from_parsed",
    "on_axis_from_parsed",
]
