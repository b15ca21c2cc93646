"""Pytest configuration and fixtures."""

import copy

import pytest

from can_network.models import ChannelDescriptor
from can_network.parser import SAMPLE_DOCUMENT


@pytest.fixture
def sample_document() -> dict:
    """Three ECUs sharing Red and Blue; Yellow and Green are point-to-point."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def red_blue_green() -> list[ChannelDescriptor]:
    """Two ECUs sharing only Blue."""
    return [
        ChannelDescriptor(node="ECU1", channels=["Red", "Blue"]),
        ChannelDescriptor(node="ECU2", channels=["Blue", "Green"]),
    ]
