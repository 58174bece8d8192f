"""
Shared fixtures for balloon tests.
"""

import pytest

from gll_balloon.testing import make_source


def encode_direction(meridian_deg, parallel_deg, frequency_index):
    """Level that records the stored direction it was measured at."""
    return meridian_deg * 1000 + parallel_deg


@pytest.fixture
def uniform_source():
    """10 x 10 degree full sphere, -20 dB everywhere."""
    return make_source(meridian_step=10, parallel_step=10, source_id="uniform")


@pytest.fixture
def encoded_source():
    """Full sphere whose levels encode meridian * 1000 + parallel."""
    return make_source(meridian_step=10, parallel_step=10, level_fn=encode_direction)


@pytest.fixture
def quarter_source():
    """Quarter-symmetric balloon with encoded levels."""
    return make_source(
        meridian_step=10, parallel_step=10, symmetry=3, level_fn=encode_direction,
    )
